# app/intake/__init__.py
from .phases import Phase, next_phase, phase_order, step_index
from .state import IntakeState, Turn
from .readiness import is_ready
from .contact import ContactRecord, ContactSubmission, is_contact_complete
from .schema import AdvisorSummary, DocumentAssessment
from .agent import IntakeAgent, on_assistant_turn_produced

__all__ = [
    "Phase",
    "next_phase",
    "phase_order",
    "step_index",
    "IntakeState",
    "Turn",
    "is_ready",
    "ContactRecord",
    "ContactSubmission",
    "is_contact_complete",
    "AdvisorSummary",
    "DocumentAssessment",
    "IntakeAgent",
    "on_assistant_turn_produced",
]
