"""
Phase machine and initiative.

SETUP -> INITIATIVE -> MOVEMENT -> COMBAT -> END -> INITIATIVE -> ...

Advancing is the only way to change phase. The END -> INITIATIVE step
closes the round: heat dissipation and shutdown checks for every living
mech, per-round flags and effects cleared, round counter incremented.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from infra.logger import get_logger

from ..abilities import Hook, HookContext, HookIndex, HookRole, apply_all
from ..core.effects import EffectCategory
from ..core.results import InitiativeResult
from ..core.types import Phase, Side
from .heat import check_shutdown, dissipate_heat

if TYPE_CHECKING:
    from ..world.state import GameState

log = get_logger(__name__)

NEXT_PHASE: Dict[Phase, Phase] = {
    Phase.SETUP: Phase.INITIATIVE,
    Phase.INITIATIVE: Phase.MOVEMENT,
    Phase.MOVEMENT: Phase.COMBAT,
    Phase.COMBAT: Phase.END,
    Phase.END: Phase.INITIATIVE,
}


@dataclass
class PhaseChange:
    """
    What an advance did.

    Attributes:
        previous: Phase before the advance
        phase: Phase after the advance
        round: Round counter after the advance
        heat: Per-mech dissipation reports (END -> INITIATIVE only)
        shutdowns: Shutdown checks that were rolled (END -> INITIATIVE only)
    """
    previous: Phase
    phase: Phase
    round: int
    heat: List[Dict[str, Any]] = field(default_factory=list)
    shutdowns: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "previous": str(self.previous),
            "phase": str(self.phase),
            "round": self.round,
            "heat": list(self.heat),
            "shutdowns": list(self.shutdowns),
        }


def advance_phase(state: GameState) -> PhaseChange:
    """Move to the next phase, running the end-of-round step when leaving END."""
    previous = state.phase
    change = PhaseChange(previous, NEXT_PHASE[previous], state.round)

    if previous == Phase.END:
        _end_round(state, change)

    state.turn.phase = change.phase
    change.round = state.round
    state.record(f"Phase: {previous} -> {change.phase}", previous=str(previous), phase=str(change.phase))
    log.info("Round %d: %s -> %s", state.round, previous, change.phase)
    return change


def _end_round(state: GameState, change: PhaseChange) -> None:
    for unit in state.battlefield.living_units():
        if not unit.is_mech:
            continue
        change.heat.append(dissipate_heat(state, unit))
        if unit.destroyed:
            continue
        check = check_shutdown(state, unit)
        if check.legal:
            change.shutdowns.append(check.to_dict())

    for unit in state.battlefield.all_units():
        unit.status.reset_turn_flags()
        unit.status.effects.clear_category(EffectCategory.ROUND)

    state.turn.round += 1
    state.turn.initiative = None


def switch_active_side(state: GameState) -> Side:
    """Hand the turn to the other side; the caller decides when."""
    state.turn.active_side = state.turn.active_side.opponent
    log.debug("Active side is now %s", state.turn.active_side)
    return state.turn.active_side


# ============================================================================
# INITIATIVE
# ============================================================================

def initiative_bonus(state: GameState, side: Side, index: Optional[HookIndex] = None) -> int:
    """Sum of MODIFY_INITIATIVE folds over the side's living holders."""
    index = index or HookIndex.build(state)
    bonus = 0
    seen = set()
    for unit, _definition in index.holders(Hook.MODIFY_INITIATIVE):
        if unit.side != side or unit.id in seen:
            continue
        seen.add(unit.id)
        bonus = int(apply_all(unit, Hook.MODIFY_INITIATIVE, bonus,
                              HookContext(state=state, role=HookRole.SELF)))
    return bonus


def roll_initiative(state: GameState, rolls: Optional[Mapping[Side, int]] = None) -> InitiativeResult:
    """
    Roll initiative for the round.

    Args:
        state: Game in the INITIATIVE phase
        rolls: Pre-rolled totals per side; missing sides roll 2d6

    Returns:
        InitiativeResult; the winner becomes the active side
    """
    if state.phase != Phase.INITIATIVE:
        reason = f"Initiative is only rolled in {Phase.INITIATIVE} (current phase: {state.phase})"
        log.warning(reason)
        return InitiativeResult(legal=False, round=state.round, error_code="WRONG_PHASE", reason=reason)

    rolls = dict(rolls or {})
    index = HookIndex.build(state)
    result = InitiativeResult(round=state.round)
    for side in (Side.PLAYER, Side.AI):
        raw = rolls[side] if side in rolls else state.dice.roll_2d6().total
        bonus = initiative_bonus(state, side, index)
        result.rolls[str(side)] = raw
        result.bonuses[str(side)] = bonus
        result.totals[str(side)] = raw + bonus

    player, ai = result.totals[str(Side.PLAYER)], result.totals[str(Side.AI)]
    if player == ai:
        result.tie_broken = True
        result.winner = Side.PLAYER if state.dice.coin_flip() else Side.AI
    else:
        result.winner = Side.PLAYER if player > ai else Side.AI

    state.turn.active_side = result.winner
    state.turn.initiative = result
    state.record(
        f"{result.winner} wins initiative ({player} vs {ai}{', coin flip' if result.tie_broken else ''})",
        **result.to_dict(),
    )
    log.info("Initiative round %d: player %d, ai %d -> %s", state.round, player, ai, result.winner)
    return result
