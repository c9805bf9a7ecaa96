# app/intake/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.intake.phases import PHASE_ORDER, Phase

ROLES = ("user", "assistant", "system")


@dataclass(frozen=True)
class Turn:
    role: str  # "user", "assistant" or "system"
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


def _initial_visited() -> Dict[Phase, bool]:
    visited = {phase: False for phase in PHASE_ORDER}
    visited[Phase.BASICS] = True
    return visited


@dataclass
class IntakeState:
    """
    Progression state of one advisor-prep session.

    Everything that decides "where are we in the interview" lives here;
    readiness itself is never stored, it is recomputed from `turns` and
    `visited_phases` (see app.intake.readiness).
    """

    phase: Phase = Phase.BASICS
    turns: List[Turn] = field(default_factory=list)

    # Assistant turns produced while the current phase is active
    phase_step_count: int = 0

    visited_phases: Dict[Phase, bool] = field(default_factory=_initial_visited)

    # One-way latch: the readiness announcement has been made
    ready_announced: bool = False

    # "chat" or "document" once the session has picked its entry path
    started_via: Optional[str] = None

    def append_turn(self, role: str, content: str) -> Turn:
        if role not in ROLES:
            raise ValueError(f"Unknown turn role: {role!r}")
        turn = Turn(role=role, content=content)
        self.turns.append(turn)
        return turn

    def mark_visited(self, phase: Phase) -> None:
        if not self.visited_phases.get(phase):
            self.visited_phases[phase] = True

    def enter_phase(self, phase: Phase, step_count: int = 0) -> None:
        self.phase = phase
        self.phase_step_count = step_count
        self.mark_visited(phase)

    def has_user_turns(self) -> bool:
        return any(t.role == "user" for t in self.turns)

    # ------------------------------------------------------------------
    # Storage helpers
    # ------------------------------------------------------------------

    def progress_dict(self) -> Dict[str, Any]:
        """Everything except the transcript, which is stored separately."""
        return {
            "phase": self.phase.value,
            "phase_step_count": self.phase_step_count,
            "visited_phases": {p.value: v for p, v in self.visited_phases.items()},
            "ready_announced": self.ready_announced,
            "started_via": self.started_via,
        }

    @classmethod
    def from_storage(
        cls,
        progress: Optional[Dict[str, Any]],
        transcript: Optional[List[Dict[str, Any]]],
    ) -> "IntakeState":
        progress = progress or {}
        visited = _initial_visited()
        for key, value in (progress.get("visited_phases") or {}).items():
            try:
                phase = Phase(key)
            except ValueError:
                continue
            if value:
                visited[phase] = True

        turns: List[Turn] = []
        for item in transcript or []:
            if not isinstance(item, dict):
                continue
            role = item.get("role")
            if role not in ROLES:
                continue
            turns.append(Turn(role=role, content=str(item.get("content") or "")))

        return cls(
            phase=Phase(progress.get("phase", Phase.BASICS.value)),
            turns=turns,
            phase_step_count=int(progress.get("phase_step_count", 0)),
            visited_phases=visited,
            ready_announced=bool(progress.get("ready_announced", False)),
            started_via=progress.get("started_via"),
        )

    def transcript_dicts(self) -> List[Dict[str, str]]:
        return [t.to_dict() for t in self.turns]
