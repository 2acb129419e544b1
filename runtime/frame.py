from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class StepFrame:
    """
    UI-friendly record of one runner step.

    Attributes:
        step: Runner step counter (1-based)
        round: Round when the step started
        phase: Phase the step handled
        actions: Per-side command outcomes
        metadata: Per-side agent metadata
        phase_change: Result of the phase advance, if any
        initiative: Initiative result when the step rolled it
        events: Notable events extracted for the step
        log: Battle log entries appended during the step
        state: Snapshot of the game after the step
        outcome: Game-over check after the step
        done: Whether the game has ended
    """
    step: int
    round: int
    phase: str
    actions: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    metadata: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    phase_change: Optional[Dict[str, Any]] = None
    initiative: Optional[Dict[str, Any]] = None
    events: List[Dict[str, Any]] = field(default_factory=list)
    log: List[Dict[str, Any]] = field(default_factory=list)
    state: Dict[str, Any] = field(default_factory=dict)
    outcome: Dict[str, Any] = field(default_factory=dict)
    done: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "round": self.round,
            "phase": self.phase,
            "actions": self.actions,
            "metadata": self.metadata,
            "phase_change": self.phase_change,
            "initiative": self.initiative,
            "events": self.events,
            "log": self.log,
            "state": self.state,
            "outcome": self.outcome,
            "done": self.done,
        }
