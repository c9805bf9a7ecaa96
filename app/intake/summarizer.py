# app/intake/summarizer.py
from __future__ import annotations

import logging
import re
from typing import List, Optional

from pydantic import ValidationError

from app.errors import CollaboratorError
from app.intake.schema import AdvisorSummary, SUMMARY_FIELDS
from app.intake.state import Turn
from app.llm import LLMClient
from app.llm.advisor import clean_json_from_llm
from app.llm.prompts import SUMMARY_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

_GENERIC_USER = re.compile(r"\bUser\b", re.IGNORECASE)


def _build_transcript_text(turns: List[Turn]) -> str:
    """
    Build a plain text transcript like:

      USER: ...
      ASSISTANT: ...

    for use in the LLM prompt.
    """
    return "\n".join(f"{t.role.upper()}: {t.content}" for t in turns)


def _full_name(first_name: Optional[str], last_name: Optional[str]) -> Optional[str]:
    parts = [p.strip() for p in (first_name, last_name) if p and p.strip()]
    return " ".join(parts) or None


def generate_summary_from_transcript(
    turns: List[Turn],
    llm_client: LLMClient,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> AdvisorSummary:
    """
    Use an LLM to condense the interview into the seven advisor fields.

    A failed call raises CollaboratorError. A reply that is not valid JSON
    degrades to an all-empty summary so callers always get every field.
    """
    full_name = _full_name(first_name, last_name)
    transcript = _build_transcript_text(turns)

    messages = [
        {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                (f"User's name: {full_name}\n\n" if full_name else "")
                + "Here is the full transcript:\n\n"
                "--- BEGIN TRANSCRIPT ---\n"
                f"{transcript}\n"
                "--- END TRANSCRIPT ---\n\n"
                "Now produce a JSON object with exactly these keys:\n"
                "whatSell, toWhom, how, companyFormSuggestion, companyFormReasoning, "
                "keyQuestionsForAdvisor, specialTopics."
            ),
        },
    ]

    try:
        raw = llm_client.chat(messages, temperature=0.1, json_mode=True)
    except Exception as e:
        logger.warning("Summary generation failed: %s", e)
        raise CollaboratorError("Language model call failed (summary).") from e

    try:
        summary = AdvisorSummary.model_validate(clean_json_from_llm(raw))
    except (ValueError, ValidationError) as e:
        logger.warning("[LLM summarizer] Unparseable summary: %s. Using empty fields.", e)
        return AdvisorSummary.empty()

    if full_name and summary.special_topics:
        summary.special_topics = _GENERIC_USER.sub(full_name, summary.special_topics)

    missing = [f for f in SUMMARY_FIELDS if not getattr(summary, f)]
    if missing:
        logger.info("Summary generated with empty fields: %s", ", ".join(missing))
    return summary
