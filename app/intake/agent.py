# app/intake/agent.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from app.errors import DocumentShortcutClosed
from app.intake.phases import Phase, next_phase, step_target
from app.intake.readiness import is_ready
from app.intake.state import IntakeState

logger = logging.getLogger(__name__)


def on_assistant_turn_produced(phase: Phase, count: int) -> Tuple[int, bool]:
    """
    Count one assistant turn for `phase`.

    Returns (new_count, should_advance). When should_advance is True the
    caller resets the counter to 0 and moves to next_phase(phase).
    """
    new_count = count + 1
    if new_count >= step_target(phase):
        return new_count, True
    return new_count, False


@dataclass
class ExchangeOutcome:
    advanced_to: Optional[Phase] = None
    ready: bool = False
    ready_fired: bool = False


class IntakeAgent:
    """
    IntakeAgent drives phase progression for an advisor-prep interview.

    It never talks to the model or the database. The service layer calls
    the model first and only hands the result in here once the call has
    succeeded, so a failed turn leaves the state untouched.

    Phases: BASICS -> IDEA -> HOW -> MONEY -> SPECIAL -> CONTACT.
    Three things move the phase:
      - the per-phase step counter (one tick per model-produced turn)
      - the readiness transition (once, forces CONTACT)
      - the document shortcut (once, before any user message)
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def begin_chat(self, state: IntakeState, onboarding_question: str) -> IntakeState:
        """
        Start the plain chat path: the onboarding question counts as the
        first BASICS prompt.
        """
        state.started_via = "chat"
        state.append_turn("assistant", onboarding_question)
        state.enter_phase(Phase.BASICS, step_count=1)
        return state

    def record_exchange(
        self,
        state: IntakeState,
        user_message: str,
        assistant_text: str,
        ready_announcement: str,
    ) -> ExchangeOutcome:
        """
        Append one successful user/assistant exchange, tick the step
        counter and re-evaluate readiness.
        """
        if state.started_via is None:
            state.started_via = "chat"

        state.append_turn("user", user_message)
        state.append_turn("assistant", assistant_text)

        outcome = ExchangeOutcome()
        if self._count_assistant_turn(state):
            outcome.advanced_to = state.phase

        outcome.ready_fired = self.apply_readiness(state, ready_announcement)
        outcome.ready = outcome.ready_fired or is_ready(state.turns, state.visited_phases)
        return outcome

    def apply_readiness(self, state: IntakeState, announcement: str) -> bool:
        """
        One-shot transition to CONTACT the first time the interview looks
        complete. Returns True only on the call that fires it.
        """
        if state.ready_announced:
            return False
        if not is_ready(state.turns, state.visited_phases):
            return False

        previous = state.phase
        state.enter_phase(Phase.CONTACT, step_count=0)
        state.append_turn("assistant", announcement)
        state.ready_announced = True
        logger.info("Readiness reached in %s, moved to CONTACT", previous.value)
        return True

    def document_shortcut_open(self, state: IntakeState) -> bool:
        """Documents can start a session once, and only before the user has spoken."""
        return state.started_via != "document" and not state.has_user_turns()

    def apply_document_assessment(
        self,
        state: IntakeState,
        has_enough_info: bool,
        assistant_message: str,
        onboarding_question: str,
    ) -> IntakeState:
        """
        Entry path through uploaded documents.

        Enough info: jump to SPECIAL and consider readiness announced.
        Otherwise: fall back to BASICS with the onboarding question
        already asked.
        """
        if not self.document_shortcut_open(state):
            raise DocumentShortcutClosed()

        state.started_via = "document"
        state.append_turn("assistant", assistant_message)

        if has_enough_info:
            state.enter_phase(Phase.SPECIAL, step_count=0)
            state.ready_announced = True
            logger.info("Documents cover the intake topics, skipped to SPECIAL")
        else:
            state.append_turn("assistant", onboarding_question)
            state.enter_phase(Phase.BASICS, step_count=1)
            logger.info("Documents incomplete, continuing from BASICS")
        return state

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _count_assistant_turn(self, state: IntakeState) -> bool:
        new_count, should_advance = on_assistant_turn_produced(
            state.phase, state.phase_step_count
        )
        if not should_advance:
            state.phase_step_count = new_count
            return False

        if state.phase == Phase.CONTACT:
            state.phase_step_count = 0
            return False

        previous = state.phase
        state.enter_phase(next_phase(previous), step_count=0)
        logger.info("Phase %s -> %s", previous.value, state.phase.value)
        return True
