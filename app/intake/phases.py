# app/intake/phases.py
from __future__ import annotations

import math
from enum import Enum
from typing import Dict, List


class Phase(str, Enum):
    BASICS = "BASICS"
    IDEA = "IDEA"
    HOW = "HOW"
    MONEY = "MONEY"
    SPECIAL = "SPECIAL"
    CONTACT = "CONTACT"


PHASE_ORDER: tuple[Phase, ...] = (
    Phase.BASICS,
    Phase.IDEA,
    Phase.HOW,
    Phase.MONEY,
    Phase.SPECIAL,
    Phase.CONTACT,
)

# Assistant turns to spend in each phase before auto-advancing.
PHASE_STEP_TARGET: Dict[Phase, float] = {
    Phase.BASICS: 2,   # business ID status + short idea
    Phase.IDEA: 1,     # main customer group
    Phase.HOW: 3,      # selling, delivery, company form
    Phase.MONEY: 1,    # pricing / costs
    Phase.SPECIAL: 1,  # special topics
    Phase.CONTACT: math.inf,  # terminal
}

PHASE_SECTION_KEY: Dict[Phase, str] = {
    phase: f"chat.section.{phase.value.lower()}" for phase in PHASE_ORDER
}


def phase_order() -> List[Phase]:
    return list(PHASE_ORDER)


def next_phase(current: Phase) -> Phase:
    """
    Successor of `current` in the fixed order.
    The last phase (CONTACT) maps to itself.
    """
    idx = PHASE_ORDER.index(current)
    if idx == len(PHASE_ORDER) - 1:
        return current
    return PHASE_ORDER[idx + 1]


def step_index(phase: Phase) -> int:
    """1-based position of `phase`, used for progress display."""
    return PHASE_ORDER.index(phase) + 1


def step_target(phase: Phase) -> float:
    return PHASE_STEP_TARGET[phase]
