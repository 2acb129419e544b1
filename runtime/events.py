from typing import Any, Dict, List, Optional

from engine.core.effects import StatusEffect
from engine.core.types import Side
from engine.mechanics.victory import GameOverResult
from engine.world.state import GameState

UnitSnapshot = Dict[str, Dict[str, Any]]


def snapshot_units(state: GameState) -> UnitSnapshot:
    """Minimal per-unit view used to diff one step against the next."""
    return {
        u.id: {
            "side": u.side,
            "name": u.name,
            "position": u.position,
            "alive": u.alive,
            "shutdown": u.has_effect(StatusEffect.SHUTDOWN),
        }
        for u in state.battlefield.all_units()
    }


def extract_events(
    *,
    before: UnitSnapshot,
    state: GameState,
    side: Optional[Side] = None,
    outcome: Optional[GameOverResult] = None,
) -> List[Dict[str, Any]]:
    """
    Extract notable, irreversible events between two snapshots.

    When ``side`` is given only that side's losses are reported.
    """
    events: List[Dict[str, Any]] = []
    after = snapshot_units(state)

    for unit_id, prev in before.items():
        if side is not None and prev["side"] != side:
            continue
        curr = after.get(unit_id)
        if curr is None:
            continue

        # ---------------------------------------------------------
        # 1. UNIT LOSS
        # ---------------------------------------------------------
        if prev["alive"] and not curr["alive"]:
            events.append({
                "type": "UNIT_LOST",
                "round": state.round,
                "unit_id": unit_id,
                "name": prev["name"],
                "side": str(prev["side"]),
                "last_position": list(prev["position"]),
                "severity": "HIGH",
            })
            continue

        # ---------------------------------------------------------
        # 2. SHUTDOWN
        # ---------------------------------------------------------
        if curr["shutdown"] and not prev["shutdown"]:
            events.append({
                "type": "SHUTDOWN",
                "round": state.round,
                "unit_id": unit_id,
                "name": prev["name"],
                "side": str(prev["side"]),
                "severity": "MEDIUM",
            })

    # ---------------------------------------------------------
    # 3. TERMINAL
    # ---------------------------------------------------------
    if outcome is not None and outcome.over:
        events.append({
            "type": "GAME_OVER",
            "round": state.round,
            "result": outcome.result.name,
            "winner": str(outcome.winner) if outcome.winner else None,
            "reason": outcome.reason,
            "severity": "CRITICAL",
        })

    return events
