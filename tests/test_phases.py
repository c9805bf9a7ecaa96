# tests/test_phases.py
import math

from app.intake.phases import (
    PHASE_ORDER,
    PHASE_SECTION_KEY,
    Phase,
    next_phase,
    phase_order,
    step_index,
    step_target,
)


def test_phase_order_is_fixed():
    assert phase_order() == [
        Phase.BASICS,
        Phase.IDEA,
        Phase.HOW,
        Phase.MONEY,
        Phase.SPECIAL,
        Phase.CONTACT,
    ]


def test_next_phase_walks_the_order():
    assert next_phase(Phase.BASICS) == Phase.IDEA
    assert next_phase(Phase.IDEA) == Phase.HOW
    assert next_phase(Phase.HOW) == Phase.MONEY
    assert next_phase(Phase.MONEY) == Phase.SPECIAL
    assert next_phase(Phase.SPECIAL) == Phase.CONTACT


def test_contact_is_terminal():
    assert next_phase(Phase.CONTACT) == Phase.CONTACT


def test_next_phase_never_goes_backwards():
    for phase in PHASE_ORDER:
        assert PHASE_ORDER.index(next_phase(phase)) >= PHASE_ORDER.index(phase)


def test_step_index_is_one_based():
    assert step_index(Phase.BASICS) == 1
    assert step_index(Phase.CONTACT) == 6


def test_step_targets():
    assert step_target(Phase.BASICS) == 2
    assert step_target(Phase.IDEA) == 1
    assert step_target(Phase.HOW) == 3
    assert step_target(Phase.MONEY) == 1
    assert step_target(Phase.SPECIAL) == 1
    assert step_target(Phase.CONTACT) == math.inf


def test_every_phase_has_a_section_title_key():
    assert PHASE_SECTION_KEY[Phase.HOW] == "chat.section.how"
    assert set(PHASE_SECTION_KEY) == set(PHASE_ORDER)
