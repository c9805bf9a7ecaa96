# app/intake/contact.py
from __future__ import annotations

import re
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DATE_OF_BIRTH_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
PHONE_MIN_LENGTH = 5

CONTACT_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "date_of_birth",
    "municipality",
)


class ContactRecord(BaseModel):
    """
    Contact details as stored on a session. Every field may be missing;
    use `is_contact_complete` to decide whether the summary can be unlocked.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None  # YYYY-MM-DD
    municipality: Optional[str] = None


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and bool(EMAIL_PATTERN.match(value))


def missing_contact_fields(record: ContactRecord) -> List[str]:
    missing = [
        name
        for name in CONTACT_FIELDS
        if not (getattr(record, name) or "").strip()
    ]
    if "email" not in missing and not is_valid_email(record.email):
        missing.append("email")
    return missing


def is_contact_complete(record: Optional[ContactRecord]) -> bool:
    if record is None:
        return False
    return not missing_contact_fields(record)


class ContactSubmission(BaseModel):
    """Validated contact form, as submitted by the user."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str
    phone: str
    date_of_birth: str
    municipality: str = Field(..., min_length=1)

    @field_validator("first_name", "last_name", "municipality")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, v: str) -> str:
        v = v.strip()
        if len(v) < PHONE_MIN_LENGTH:
            raise ValueError(f"must be at least {PHONE_MIN_LENGTH} characters")
        return v

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        v = v.strip()
        if not is_valid_email(v):
            raise ValueError("invalid email address")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def _check_dob(cls, v: str) -> str:
        v = v.strip()
        if not DATE_OF_BIRTH_PATTERN.match(v):
            raise ValueError("expected YYYY-MM-DD")
        # Rejects impossible dates such as 2001-02-30
        date.fromisoformat(v)
        return v

    def to_record(self) -> ContactRecord:
        return ContactRecord(**self.model_dump())
