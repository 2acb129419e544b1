"""
Piloting and other 2d6 threshold checks.

A failed piloting check knocks a mech PRONE. Vehicles and infantry never
fall, so they make no check and draw no dice.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from infra.logger import get_logger

from ..core.effects import StatusEffect
from ..core.results import RollCheck

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)


def roll_check(state: GameState, unit: Unit, check: str, target: int) -> RollCheck:
    """Roll 2d6 against a fixed target number; pass on roll >= target."""
    dice = state.dice.roll_2d6()
    success = dice.total >= target
    log.debug("%s check for %s: %d vs %d+ (%s)", check, unit.label(), dice.total, target,
              "pass" if success else "fail")
    return RollCheck(unit.id, check, dice.to_list(), dice.total, target, success)


def piloting_target(unit: Unit, modifier: int = 0) -> int:
    """Skill plus the situation modifier plus one per pilot injury."""
    return unit.stats.skill + modifier + unit.status.pilot_hits


def piloting_check(state: GameState, unit: Unit, modifier: int = 0, *, reason: str = "") -> RollCheck:
    """
    Piloting skill roll: 2d6 >= skill + modifier + pilot hits, else PRONE.

    Args:
        state: Game being resolved
        unit: Mech making the check
        modifier: Situation modifier (kick 2, push 1, ...)
        reason: What forced the check, for the battle log

    Returns:
        RollCheck; legal=False for units that cannot fall
    """
    if not unit.is_mech or unit.destroyed:
        return RollCheck(unit.id, "piloting", legal=False, error_code="WRONG_UNIT_KIND",
                         reason="Only standing mechs make piloting checks")
    return fall_check(state, unit, piloting_target(unit, modifier), reason=reason)


def fall_check(state: GameState, unit: Unit, target: int, *, reason: str = "") -> RollCheck:
    """Roll against ``target``; a mech that fails goes PRONE."""
    if not unit.is_mech or unit.destroyed:
        return RollCheck(unit.id, "piloting", legal=False, error_code="WRONG_UNIT_KIND",
                         reason="Only standing mechs make piloting checks")
    result = roll_check(state, unit, "piloting", target)
    if not result.success:
        unit.status.effects.add(StatusEffect.PRONE)
        state.record(
            f"{unit.name} falls{f' ({reason})' if reason else ''}",
            unit_id=unit.id, roll=result.roll, target=target,
        )
        log.info("%s falls prone: rolled %d, needed %d+", unit.label(), result.roll, target)
    return result
