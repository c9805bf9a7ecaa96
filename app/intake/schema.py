# app/intake/schema.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator

SUMMARY_FIELDS = (
    "what_sell",
    "to_whom",
    "how",
    "company_form_suggestion",
    "company_form_reasoning",
    "key_questions_for_advisor",
    "special_topics",
)

# Stable labels the assessment prompt asks the model to prefer.
MISSING_TOPIC_LABELS = (
    "whatSell",
    "toWhom",
    "how",
    "pricing",
    "costs",
    "funding",
    "companyForm",
    "specialTopics",
)


class _LLMPayload(BaseModel):
    # The model speaks camelCase; we accept both spellings and ignore extras.
    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }


class AdvisorSummary(_LLMPayload):
    """
    One-page summary for the business advisor.

    Also stored, field by field, on the session row. All seven fields are
    always present as strings; an empty string means "nothing extracted".
    """

    what_sell: str = Field("", alias="whatSell")
    to_whom: str = Field("", alias="toWhom")
    how: str = Field("", alias="how")
    company_form_suggestion: str = Field("", alias="companyFormSuggestion")
    company_form_reasoning: str = Field("", alias="companyFormReasoning")
    key_questions_for_advisor: str = Field("", alias="keyQuestionsForAdvisor")
    special_topics: str = Field("", alias="specialTopics")

    @field_validator(*SUMMARY_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, v):
        if v is None:
            return ""
        if isinstance(v, list):
            return "\n".join(f"- {item}" for item in v)
        return str(v)

    @classmethod
    def empty(cls) -> "AdvisorSummary":
        return cls()


class DocumentAssessment(_LLMPayload):
    has_enough_info: bool = Field(False, alias="hasEnoughInfo")
    assistant_summary: str = Field("", alias="assistantSummary")
    missing_topics: List[str] = Field(default_factory=list, alias="missingTopics")

    @field_validator("assistant_summary", mode="before")
    @classmethod
    def _coerce_summary(cls, v):
        return "" if v is None else str(v)

    @field_validator("missing_topics", mode="before")
    @classmethod
    def _coerce_topics(cls, v):
        if not isinstance(v, list):
            return []
        return [str(x) for x in v]

    @classmethod
    def not_enough(cls) -> "DocumentAssessment":
        return cls(has_enough_info=False, assistant_summary="", missing_topics=[])
