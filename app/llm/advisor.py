# app/llm/advisor.py
from __future__ import annotations

import json
import logging
import re
from typing import Dict, List, Optional

from pydantic import ValidationError

from app.errors import CollaboratorError
from app.intake.schema import DocumentAssessment
from app.intake.state import ROLES, Turn
from app.llm.client import LLMClient
from app.llm.prompts import (
    BUSINESS_PLAN_INSIGHT_PROMPT,
    CHAT_SYSTEM_PROMPT,
    DOCUMENT_ASSESSMENT_PROMPT,
    TRANSLATION_PROMPT,
)

logger = logging.getLogger(__name__)

INSIGHT_MAX_CHARS = 6000
DEFAULT_MAX_DOC_CHARS = 120_000

_BOLD = re.compile(r"\*\*(.*?)\*\*", re.DOTALL)


def strip_markdown_emphasis(text: str) -> str:
    """Drop **bold** markers but keep the inner text."""
    return _BOLD.sub(r"\1", text)


def clean_json_from_llm(raw: str) -> dict:
    """
    Try to robustly parse JSON from the LLM response.
    Handles cases where the model wraps it in ```json ... ``` fences.
    Raises ValueError if the result is not a JSON object.
    """
    text = (raw or "").strip()

    if text.startswith("```"):
        text = text.lstrip("`")
        if text.lower().startswith("json"):
            text = text[4:]
        text = text.rstrip("`").strip()

    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


def _call(llm_client: LLMClient, what: str, messages: List[Dict[str, str]], **kwargs) -> str:
    try:
        return llm_client.chat(messages, **kwargs)
    except Exception as e:
        logger.warning("LLM call failed (%s): %s", what, e)
        raise CollaboratorError(f"Language model call failed ({what}).") from e


def generate_chat_response(
    llm_client: LLMClient,
    transcript: List[Turn],
    user_language: str,
    ui_language: str,
    phase: Optional[str] = None,
    temperature: float = 0.3,
) -> str:
    """
    Produce the next assistant turn for the interview.

    `transcript` must already include the user's latest message.
    Raises CollaboratorError on failure or an empty reply; no partial text
    is ever returned.
    """
    context = (
        f"{CHAT_SYSTEM_PROMPT}\n\n"
        "Context:\n"
        f"- userLanguage: {user_language}\n"
        f"- uiLanguage: {ui_language}\n"
        f"- phase: {phase or 'UNSPECIFIED'}"
    )
    messages = [{"role": "system", "content": context}]
    messages.extend(t.to_dict() for t in transcript)

    raw = _call(llm_client, "chat", messages, temperature=temperature)
    text = strip_markdown_emphasis(raw.strip())
    if not text:
        raise CollaboratorError("Language model returned an empty reply (chat).")
    return text


def generate_business_plan_insight(
    llm_client: LLMClient,
    document_text: str,
    user_language: str,
    ui_language: str,
) -> str:
    messages = [
        {"role": "system", "content": BUSINESS_PLAN_INSIGHT_PROMPT},
        {
            "role": "user",
            "content": (
                f"userLanguage: {user_language}\nuiLanguage: {ui_language}\n\n"
                f"BUSINESS_PLAN_TEXT:\n{document_text[:INSIGHT_MAX_CHARS]}"
            ),
        },
    ]
    return _call(llm_client, "insight", messages, temperature=0.2).strip()


def assess_documentation_readiness(
    llm_client: LLMClient,
    combined_text: str,
    user_language: str,
    ui_language: str,
    max_chars: int = DEFAULT_MAX_DOC_CHARS,
) -> DocumentAssessment:
    """
    Ask the model whether the uploaded documents already answer the intake
    questions. A malformed answer counts as "not enough info".
    """
    messages = [
        {"role": "system", "content": DOCUMENT_ASSESSMENT_PROMPT},
        {
            "role": "user",
            "content": (
                f"userLanguage: {user_language}\nuiLanguage: {ui_language}\n\n"
                "--- BEGIN DOCUMENT TEXT ---\n"
                f"{combined_text[:max_chars]}\n"
                "--- END DOCUMENT TEXT ---"
            ),
        },
    ]
    raw = _call(llm_client, "assessment", messages, temperature=0.0, json_mode=True)

    try:
        return DocumentAssessment.model_validate(clean_json_from_llm(raw))
    except (ValueError, ValidationError) as e:
        logger.warning("Unparseable document assessment, treating as incomplete: %s", e)
        return DocumentAssessment.not_enough()


def translate_messages(
    llm_client: LLMClient,
    target_language: str,
    messages: List[Turn],
) -> List[Turn]:
    """
    Translate a thread, keeping roles and order. If the model's answer
    cannot be parsed, the thread comes back untranslated.
    """
    payload = json.dumps(
        {
            "targetLanguage": target_language,
            "messages": [m.to_dict() for m in messages],
        },
        ensure_ascii=False,
    )
    raw = _call(
        llm_client,
        "translation",
        [
            {"role": "system", "content": TRANSLATION_PROMPT},
            {"role": "user", "content": payload},
        ],
        temperature=0.0,
        json_mode=True,
    )

    try:
        items = clean_json_from_llm(raw).get("messages")
    except ValueError as e:
        logger.warning("Unparseable translation, returning original thread: %s", e)
        return list(messages)
    if not isinstance(items, list):
        return list(messages)

    translated: List[Turn] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        role = item.get("role")
        translated.append(
            Turn(
                role=role if role in ROLES else "user",
                content=str(item.get("content") or ""),
            )
        )
    return translated
