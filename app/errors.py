# app/errors.py
from __future__ import annotations

from typing import List, Optional


class AdvisorPrepError(Exception):
    """Base class for failures surfaced to the interaction layer."""

    status_code = 500
    retryable = False

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        body = {"error": self.message, "retryable": self.retryable}
        if self.field:
            body["field"] = self.field
        return body


class ValidationFailure(AdvisorPrepError):
    status_code = 400


class SessionNotFound(AdvisorPrepError):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__("Session not found")
        self.session_id = session_id


class CollaboratorError(AdvisorPrepError):
    """A model, extraction or storage call failed. Safe to retry as-is."""

    status_code = 502
    retryable = True


class DocumentExtractionError(AdvisorPrepError):
    status_code = 400

    def __init__(self, message: str = "Could not extract text from uploaded files."):
        super().__init__(message, field="files")


class DocumentShortcutClosed(AdvisorPrepError):
    status_code = 409

    def __init__(self):
        super().__init__(
            "Documents can start a session only once, and only before any chat message was sent."
        )


class SummaryNotUnlocked(AdvisorPrepError):
    status_code = 409


class ContactIncomplete(SummaryNotUnlocked):
    def __init__(self, missing_fields: List[str]):
        super().__init__(
            "Contact details are incomplete: " + ", ".join(missing_fields),
            field=missing_fields[0] if missing_fields else None,
        )
        self.missing_fields = missing_fields

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["missing_fields"] = self.missing_fields
        return body


class AdvisorAccessDenied(AdvisorPrepError):
    status_code = 401
