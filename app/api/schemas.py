# app/api/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.intake.contact import ContactRecord, ContactSubmission


class TurnSchema(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class SessionStateResponse(BaseModel):
    session_id: str
    phase: str
    step_index: int
    total_steps: int
    phase_step_count: int
    section_title: str
    ready: bool
    ready_announced: bool
    contact_complete: bool


class StartSessionRequest(BaseModel):
    ui_language: str = Field(..., min_length=1)
    user_language: Optional[str] = None
    has_documents: bool = False


class SessionResponse(SessionStateResponse):
    messages: List[TurnSchema]


class ChatRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class ChatResponse(SessionStateResponse):
    assistant_messages: List[TurnSchema]
    ready_fired: bool


class UploadResponse(SessionStateResponse):
    ok: bool = True
    assistant_messages: List[TurnSchema]
    has_enough_info: bool
    missing_topics: List[str]


class ContactRequest(ContactSubmission):
    session_id: str = Field(..., min_length=1)


class ContactResponse(BaseModel):
    complete: bool
    contact: ContactRecord


class SummaryRequest(BaseModel):
    session_id: str = Field(..., min_length=1)


class SummaryFields(BaseModel):
    what_sell: str = ""
    to_whom: str = ""
    how: str = ""
    company_form_suggestion: str = ""
    company_form_reasoning: str = ""
    key_questions_for_advisor: str = ""
    special_topics: str = ""


class ConfirmSummaryRequest(SummaryFields):
    session_id: str = Field(..., min_length=1)


class SummaryResponse(SummaryFields):
    session_id: str
    confirmed: bool = False


class TranslateRequest(BaseModel):
    target_language: str = Field(..., min_length=1)
    messages: List[TurnSchema]


class TranslateResponse(BaseModel):
    messages: List[TurnSchema]


class AdvisorLoginRequest(BaseModel):
    password: Optional[str] = None


class AdvisorSessionItem(SummaryFields):
    id: str
    created_at: datetime
    ui_language: Optional[str]
    user_language: Optional[str]
    phase: Optional[str]
    first_name: Optional[str]
    last_name: Optional[str]
    summary_confirmed_at: Optional[datetime]
