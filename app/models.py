# app/models.py
from datetime import date, datetime, timezone
import uuid

from sqlalchemy import (
    String,
    DateTime,
    Date,
    Text,
    JSON,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BusinessIdeaSession(Base):
    """
    One advisor-prep interview: transcript, progression state, contact
    details and the advisor summary.
    """
    __tablename__ = "business_idea_sessions"

    id: Mapped[str] = mapped_column(
        String, primary_key=True, default=generate_uuid
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    ui_language: Mapped[str] = mapped_column(String(16), nullable=False)
    user_language: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # [{"role": ..., "content": ...}, ...], append-only
    raw_transcript: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    # IntakeState.progress_dict()
    intake_state: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    business_plan_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Contact
    first_name: Mapped[str | None] = mapped_column(String, nullable=True)
    last_name: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    municipality: Mapped[str | None] = mapped_column(String, nullable=True)

    # Advisor summary
    what_sell: Mapped[str | None] = mapped_column(Text, nullable=True)
    to_whom: Mapped[str | None] = mapped_column(Text, nullable=True)
    how: Mapped[str | None] = mapped_column(Text, nullable=True)
    company_form_suggestion: Mapped[str | None] = mapped_column(Text, nullable=True)
    company_form_reasoning: Mapped[str | None] = mapped_column(Text, nullable=True)
    key_questions_for_advisor: Mapped[str | None] = mapped_column(Text, nullable=True)
    special_topics: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary_confirmed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
