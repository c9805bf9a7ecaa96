# app/services/advisor_session.py
from __future__ import annotations

import hmac
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db import SessionLocal, engine, Base
from app.documents import ExtractedDocument, combine_documents, extract_text
from app.errors import (
    AdvisorAccessDenied,
    AdvisorPrepError,
    CollaboratorError,
    ContactIncomplete,
    DocumentExtractionError,
    DocumentShortcutClosed,
    SessionNotFound,
    SummaryNotUnlocked,
    ValidationFailure,
)
from app.i18n import translate
from app.intake.agent import IntakeAgent
from app.intake.contact import (
    ContactRecord,
    ContactSubmission,
    is_contact_complete,
    missing_contact_fields,
)
from app.intake.phases import PHASE_SECTION_KEY, Phase, step_index
from app.intake.readiness import is_ready
from app.intake.schema import SUMMARY_FIELDS, AdvisorSummary
from app.intake.state import IntakeState, Turn
from app.intake.summarizer import generate_summary_from_transcript
from app.llm import LLMClient, OpenAILLMClient
from app.llm.advisor import (
    assess_documentation_readiness,
    generate_business_plan_insight,
    generate_chat_response,
    translate_messages,
)
from app.models import BusinessIdeaSession, utcnow

logger = logging.getLogger(__name__)

ONBOARDING_PREFIX = "Company registration status:"
INSIGHT_FALLBACK_CHARS = 8000


@contextmanager
def db_session():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """
    Create all tables.
    Call this once at startup.
    """
    Base.metadata.create_all(bind=engine)


@dataclass
class SessionView:
    session_id: str
    phase: Phase
    step_index: int
    phase_step_count: int
    section_title: str
    ready: bool
    ready_announced: bool
    contact_complete: bool
    turns: List[Turn] = field(default_factory=list)


@dataclass
class TurnResult:
    view: SessionView
    assistant_messages: List[Turn]
    ready_fired: bool = False


@dataclass
class UploadResult:
    view: SessionView
    assistant_messages: List[Turn]
    has_enough_info: bool
    missing_topics: List[str]


@dataclass
class _SessionLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


def _language(row: BusinessIdeaSession) -> str:
    return row.user_language or row.ui_language or "en"


def _contact_record(row: BusinessIdeaSession) -> ContactRecord:
    return ContactRecord(
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        phone=row.phone,
        date_of_birth=row.date_of_birth.isoformat() if row.date_of_birth else None,
        municipality=row.municipality,
    )


def _load_state(row: BusinessIdeaSession) -> IntakeState:
    return IntakeState.from_storage(row.intake_state, row.raw_transcript)


def _save_state(row: BusinessIdeaSession, state: IntakeState) -> None:
    # Always assign fresh containers so the JSON columns are flagged dirty
    row.intake_state = state.progress_dict()
    row.raw_transcript = state.transcript_dicts()


class AdvisorSessionService:
    """
    Service that coordinates:
      - creating and loading BusinessIdeaSession rows
      - calling the language model and document extraction
      - driving the IntakeAgent once those calls have succeeded
      - the contact gate in front of summary generation
    """

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self.agent = IntakeAgent()
        self._llm_client = llm_client
        self._locks: Dict[str, _SessionLock] = {}
        self._locks_guard = threading.Lock()

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = OpenAILLMClient()
        return self._llm_client

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def start_session(
        self,
        ui_language: str,
        user_language: Optional[str] = None,
        has_documents: bool = False,
    ) -> SessionView:
        """
        Create a session. Without documents the onboarding question is
        asked straight away; with documents the session waits for an upload.
        """
        ui_language = (ui_language or "").strip()
        if not ui_language:
            raise ValidationFailure("uiLanguage is required", field="uiLanguage")
        user_language = (user_language or "").strip() or ui_language

        state = IntakeState()
        if not has_documents:
            self.agent.begin_chat(state, translate("home.onboardingQuestion", user_language))

        with db_session() as db:
            row = BusinessIdeaSession(ui_language=ui_language, user_language=user_language)
            _save_state(row, state)
            db.add(row)
            db.flush()  # to get row.id

            logger.info("Started session %s (documents=%s)", row.id, has_documents)
            return self._view(row, state)

    def get_session(self, session_id: str) -> SessionView:
        with db_session() as db:
            row = self._load(db, session_id)
            return self._view(row, _load_state(row))

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def submit_user_turn(self, session_id: str, message: str) -> TurnResult:
        """
        Handle a single user message:
          - ask the model for the next assistant turn
          - only then append both turns and move the phase machinery
          - persist transcript and progression state together
        """
        message = (message or "").strip()
        if not message:
            raise ValidationFailure("message must not be empty", field="message")

        with self._serialized(session_id), db_session() as db:
            row = self._load(db, session_id)
            state = _load_state(row)
            lang = _language(row)
            phase_before = state.phase

            # Nothing is mutated until the model has answered
            reply = generate_chat_response(
                self.llm_client,
                state.turns + [Turn(role="user", content=message)],
                user_language=lang,
                ui_language=row.ui_language,
                phase=state.phase.value,
            )

            turns_before = len(state.turns)
            outcome = self.agent.record_exchange(
                state,
                user_message=message,
                assistant_text=reply,
                ready_announcement=translate("chat.readyPrompt", lang),
            )

            if phase_before == Phase.BASICS:
                line = f"{ONBOARDING_PREFIX} {message}"
                row.special_topics = (
                    f"{row.special_topics}\n{line}" if row.special_topics else line
                )

            _save_state(row, state)

            new_turns = state.turns[turns_before:]
            return TurnResult(
                view=self._view(row, state, ready=outcome.ready),
                assistant_messages=[t for t in new_turns if t.role == "assistant"],
                ready_fired=outcome.ready_fired,
            )

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def upload_documents(
        self,
        session_id: str,
        files: Iterable[Tuple[str, bytes]],
    ) -> UploadResult:
        """
        Start a session from uploaded documents.

        Each file is extracted on its own; unreadable files contribute no
        text. If nothing at all could be read, the upload fails.
        """
        files = list(files)
        if not files:
            raise ValidationFailure("At least one file is required", field="files")

        with self._serialized(session_id), db_session() as db:
            row = self._load(db, session_id)
            state = _load_state(row)
            if not self.agent.document_shortcut_open(state):
                raise DocumentShortcutClosed()

            documents = [
                ExtractedDocument(name=name or "document", text=extract_text(data, name or ""))
                for name, data in files
            ]
            if not any(d.has_text for d in documents):
                raise DocumentExtractionError()
            combined = combine_documents(documents)

            lang = _language(row)
            first_text = documents[0].text or combined[:INSIGHT_FALLBACK_CHARS]
            insight = generate_business_plan_insight(
                self.llm_client, first_text, user_language=lang, ui_language=row.ui_language
            )
            assessment = assess_documentation_readiness(
                self.llm_client,
                combined,
                user_language=lang,
                ui_language=row.ui_language,
                max_chars=get_settings().max_doc_chars,
            )

            if assessment.has_enough_info:
                parts = [insight, assessment.assistant_summary, translate("upload.enoughInfoQuestion", lang)]
            else:
                parts = [insight, translate("upload.needMoreInfo", lang)]
            assistant_message = "\n\n".join(p for p in parts if p).strip()

            turns_before = len(state.turns)
            self.agent.apply_document_assessment(
                state,
                has_enough_info=assessment.has_enough_info,
                assistant_message=assistant_message,
                onboarding_question=translate("home.onboardingQuestion", lang),
            )

            row.business_plan_text = combined
            _save_state(row, state)

            return UploadResult(
                view=self._view(row, state),
                assistant_messages=state.turns[turns_before:],
                has_enough_info=assessment.has_enough_info,
                missing_topics=assessment.missing_topics,
            )

    # ------------------------------------------------------------------
    # Contact
    # ------------------------------------------------------------------

    def get_contact(self, session_id: str) -> Tuple[ContactRecord, bool]:
        with db_session() as db:
            row = self._load(db, session_id)
            record = _contact_record(row)
            return record, is_contact_complete(record)

    def submit_contact(self, session_id: str, submission: ContactSubmission) -> ContactRecord:
        with self._serialized(session_id), db_session() as db:
            row = self._load(db, session_id)
            row.first_name = submission.first_name
            row.last_name = submission.last_name
            row.email = submission.email
            row.phone = submission.phone
            row.date_of_birth = date.fromisoformat(submission.date_of_birth)
            row.municipality = submission.municipality
            return _contact_record(row)

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def request_summary(self, session_id: str) -> AdvisorSummary:
        with self._serialized(session_id), db_session() as db:
            row = self._load(db, session_id)
            state = _load_state(row)

            if not state.turns:
                raise ValidationFailure(
                    "Transcript is empty. Cannot generate summary yet.", field="sessionId"
                )
            if state.phase != Phase.CONTACT and not is_ready(state.turns, state.visited_phases):
                raise SummaryNotUnlocked(
                    "The summary is available once the key topics have been covered."
                )

            record = _contact_record(row)
            missing = missing_contact_fields(record)
            if missing:
                raise ContactIncomplete(missing)

            summary = generate_summary_from_transcript(
                state.turns,
                self.llm_client,
                first_name=record.first_name,
                last_name=record.last_name,
            )
            self._store_summary(row, summary)
            logger.info("Summary generated for session %s", row.id)
            return summary

    def confirm_summary(self, session_id: str, summary: AdvisorSummary) -> AdvisorSummary:
        with self._serialized(session_id), db_session() as db:
            row = self._load(db, session_id)
            self._store_summary(row, summary)
            row.summary_confirmed_at = utcnow()
            return summary

    # ------------------------------------------------------------------
    # Translation and advisor dashboard
    # ------------------------------------------------------------------

    def translate_thread(self, target_language: str, messages: List[Turn]) -> List[Turn]:
        target_language = (target_language or "").strip()
        if not target_language:
            raise ValidationFailure("targetLanguage is required", field="targetLanguage")
        if not messages:
            return []
        return translate_messages(self.llm_client, target_language, messages)

    def check_advisor_password(self, password: Optional[str]) -> None:
        expected = get_settings().advisor_dashboard_password
        if not expected:
            raise AdvisorPrepError(
                "Server misconfiguration: ADVISOR_DASHBOARD_PASSWORD missing"
            )
        if not password:
            raise ValidationFailure("Password required", field="password")
        if not hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8")):
            raise AdvisorAccessDenied("Unauthorized")

    def list_sessions(self, limit: int = 50) -> List[BusinessIdeaSession]:
        with db_session() as db:
            stmt = (
                select(BusinessIdeaSession)
                .order_by(BusinessIdeaSession.created_at.desc())
                .limit(limit)
            )
            return list(db.scalars(stmt))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _serialized(self, session_id: str) -> Iterator[None]:
        """
        One mutating operation per session at a time.
        A lock lives only while some caller holds or waits for it.
        """
        with self._locks_guard:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = self._locks[session_id] = _SessionLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[session_id]

    def _load(self, db: Session, session_id: str) -> BusinessIdeaSession:
        try:
            row = db.get(BusinessIdeaSession, session_id)
        except SQLAlchemyError as e:
            logger.warning("Session lookup failed for %s: %s", session_id, e)
            raise CollaboratorError("Session storage is unavailable.") from e
        if row is None:
            raise SessionNotFound(session_id)
        return row

    def _contact_complete(self, row: BusinessIdeaSession) -> bool:
        """Best-effort; any storage problem counts as incomplete."""
        try:
            return is_contact_complete(_contact_record(row))
        except (SQLAlchemyError, ValueError) as e:
            logger.warning("Could not load contact for session %s: %s", row.id, e)
            return False

    def _store_summary(self, row: BusinessIdeaSession, summary: AdvisorSummary) -> None:
        for name in SUMMARY_FIELDS:
            setattr(row, name, getattr(summary, name))

    def _view(
        self,
        row: BusinessIdeaSession,
        state: IntakeState,
        ready: Optional[bool] = None,
    ) -> SessionView:
        if ready is None:
            ready = is_ready(state.turns, state.visited_phases)
        lang = _language(row)
        return SessionView(
            session_id=row.id,
            phase=state.phase,
            step_index=step_index(state.phase),
            phase_step_count=state.phase_step_count,
            section_title=translate(PHASE_SECTION_KEY[state.phase], lang),
            ready=ready,
            ready_announced=state.ready_announced,
            contact_complete=self._contact_complete(row),
            turns=list(state.turns),
        )
