# app/api/routes.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Header, Query, UploadFile

from app.intake.phases import PHASE_ORDER
from app.intake.schema import AdvisorSummary
from app.intake.state import Turn
from app.services import AdvisorSessionService
from app.services.advisor_session import SessionView
from .schemas import (
    AdvisorLoginRequest,
    AdvisorSessionItem,
    ChatRequest,
    ChatResponse,
    ConfirmSummaryRequest,
    ContactRequest,
    ContactResponse,
    SessionResponse,
    StartSessionRequest,
    SummaryRequest,
    SummaryResponse,
    TranslateRequest,
    TranslateResponse,
    TurnSchema,
    UploadResponse,
)

router = APIRouter()

_service = AdvisorSessionService()


def get_service() -> AdvisorSessionService:
    return _service


def _state_fields(view: SessionView) -> dict:
    return {
        "session_id": view.session_id,
        "phase": view.phase.value,
        "step_index": view.step_index,
        "total_steps": len(PHASE_ORDER),
        "phase_step_count": view.phase_step_count,
        "section_title": view.section_title,
        "ready": view.ready,
        "ready_announced": view.ready_announced,
        "contact_complete": view.contact_complete,
    }


def _turns(turns: List[Turn]) -> List[TurnSchema]:
    return [TurnSchema(role=t.role, content=t.content) for t in turns]


def _summary_response(session_id: str, summary: AdvisorSummary, confirmed: bool) -> SummaryResponse:
    return SummaryResponse(session_id=session_id, confirmed=confirmed, **summary.model_dump())


@router.post("/session/start", response_model=SessionResponse)
def start_session(
    payload: StartSessionRequest,
    service: AdvisorSessionService = Depends(get_service),
) -> SessionResponse:
    """
    Start a new advisor-prep session.
    Without documents the first onboarding question is returned right away.
    """
    view = service.start_session(
        ui_language=payload.ui_language,
        user_language=payload.user_language,
        has_documents=payload.has_documents,
    )
    return SessionResponse(messages=_turns(view.turns), **_state_fields(view))


@router.post("/chat", response_model=ChatResponse)
def chat(
    payload: ChatRequest,
    service: AdvisorSessionService = Depends(get_service),
) -> ChatResponse:
    result = service.submit_user_turn(payload.session_id, payload.message)
    return ChatResponse(
        assistant_messages=_turns(result.assistant_messages),
        ready_fired=result.ready_fired,
        **_state_fields(result.view),
    )


@router.post("/upload-business-plan", response_model=UploadResponse)
def upload_business_plan(
    session_id: str = Form(...),
    files: List[UploadFile] = File(default=[]),
    file: Optional[UploadFile] = File(default=None),
    service: AdvisorSessionService = Depends(get_service),
) -> UploadResponse:
    uploads = list(files)
    if file is not None:
        uploads.insert(0, file)

    result = service.upload_documents(
        session_id,
        [(u.filename or "document", u.file.read()) for u in uploads],
    )
    return UploadResponse(
        assistant_messages=_turns(result.assistant_messages),
        has_enough_info=result.has_enough_info,
        missing_topics=result.missing_topics,
        **_state_fields(result.view),
    )


@router.get("/session/contact", response_model=ContactResponse)
def get_contact(
    session_id: str = Query(..., min_length=1),
    service: AdvisorSessionService = Depends(get_service),
) -> ContactResponse:
    record, complete = service.get_contact(session_id)
    return ContactResponse(complete=complete, contact=record)


@router.post("/session/contact", response_model=ContactResponse)
def submit_contact(
    payload: ContactRequest,
    service: AdvisorSessionService = Depends(get_service),
) -> ContactResponse:
    record = service.submit_contact(payload.session_id, payload)
    return ContactResponse(complete=True, contact=record)


@router.get("/session/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: str,
    service: AdvisorSessionService = Depends(get_service),
) -> SessionResponse:
    view = service.get_session(session_id)
    return SessionResponse(messages=_turns(view.turns), **_state_fields(view))


@router.post("/summary", response_model=SummaryResponse)
def request_summary(
    payload: SummaryRequest,
    service: AdvisorSessionService = Depends(get_service),
) -> SummaryResponse:
    summary = service.request_summary(payload.session_id)
    return _summary_response(payload.session_id, summary, confirmed=False)


@router.post("/summary/confirm", response_model=SummaryResponse)
def confirm_summary(
    payload: ConfirmSummaryRequest,
    service: AdvisorSessionService = Depends(get_service),
) -> SummaryResponse:
    edited = AdvisorSummary(**payload.model_dump(exclude={"session_id"}))
    summary = service.confirm_summary(payload.session_id, edited)
    return _summary_response(payload.session_id, summary, confirmed=True)


@router.post("/translate-thread", response_model=TranslateResponse)
def translate_thread(
    payload: TranslateRequest,
    service: AdvisorSessionService = Depends(get_service),
) -> TranslateResponse:
    translated = service.translate_thread(
        payload.target_language,
        [Turn(role=m.role, content=m.content) for m in payload.messages],
    )
    return TranslateResponse(messages=_turns(translated))


@router.post("/advisor/login")
def advisor_login(
    payload: AdvisorLoginRequest,
    service: AdvisorSessionService = Depends(get_service),
) -> dict:
    service.check_advisor_password(payload.password)
    return {"ok": True}


@router.get("/advisor/sessions", response_model=List[AdvisorSessionItem])
def advisor_sessions(
    limit: int = Query(50, ge=1, le=500),
    x_advisor_password: Optional[str] = Header(default=None),
    service: AdvisorSessionService = Depends(get_service),
) -> List[AdvisorSessionItem]:
    service.check_advisor_password(x_advisor_password)

    items = []
    for row in service.list_sessions(limit=limit):
        items.append(
            AdvisorSessionItem(
                id=row.id,
                created_at=row.created_at,
                ui_language=row.ui_language,
                user_language=row.user_language,
                phase=(row.intake_state or {}).get("phase"),
                first_name=row.first_name,
                last_name=row.last_name,
                summary_confirmed_at=row.summary_confirmed_at,
                what_sell=row.what_sell or "",
                to_whom=row.to_whom or "",
                how=row.how or "",
                company_form_suggestion=row.company_form_suggestion or "",
                company_form_reasoning=row.company_form_reasoning or "",
                key_questions_for_advisor=row.key_questions_for_advisor or "",
                special_topics=row.special_topics or "",
            )
        )
    return items
