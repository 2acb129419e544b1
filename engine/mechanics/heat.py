"""
Heat subsystem (mechs only).

Heat is bounded to [0, capacity]. Threshold effects are recomputed from
scratch whenever heat changes and always replace the whole HEAT category.

Thresholds (fraction of capacity):
    >= 50%   HEAT_ATTACK_PENALTY_1
    >= 75%   HEAT_ATTACK_PENALTY_2, HEAT_MOVEMENT_PENALTY
    >= 100%  HEAT_SHUTDOWN_RISK, HEAT_AUTO_DAMAGE
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List

from infra.logger import get_logger

from ..core.effects import EffectCategory, StatusEffect
from ..core.results import RollCheck
from ..core.types import MoveType, RangeBand
from .invariants import enforce_unit_invariants

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState, JumpHeatRule

log = get_logger(__name__)

SHUTDOWN_AVOID_TARGET = 8
STARTUP_TARGET = 4
ENGINE_HEAT_PER_HIT = 2
DISSIPATION_PER_ROUND = 1
OVERHEAT_BONUS = 2
HEAT_AUTO_DAMAGE_POINTS = 1

WALK_HEAT = 1
RUN_HEAT = 2
JUMP_HEAT_MIN = 3

# Maximum weapon heat per range band.
WEAPON_HEAT_CAP: Dict[RangeBand, int] = {
    RangeBand.SHORT: 3,
    RangeBand.MEDIUM: 2,
    RangeBand.LONG: 1,
    RangeBand.EXTREME: 1,
}


@dataclass
class HeatResult:
    """Heat change on one unit."""
    unit_id: str
    added: int
    heat: int
    effects: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"unit_id": self.unit_id, "added": self.added, "heat": self.heat, "effects": list(self.effects)}


def uses_heat(unit: Unit) -> bool:
    return unit.is_mech and unit.stats.heat_capacity > 0


def heat_effects_for(unit: Unit) -> List[StatusEffect]:
    """Threshold effects implied by a unit's current heat."""
    if not uses_heat(unit):
        return []
    heat = unit.status.heat
    capacity = unit.stats.heat_capacity
    effects: List[StatusEffect] = []
    if heat >= capacity * 0.5:
        effects.append(StatusEffect.HEAT_ATTACK_PENALTY_1)
    if heat >= capacity * 0.75:
        effects.append(StatusEffect.HEAT_ATTACK_PENALTY_2)
        effects.append(StatusEffect.HEAT_MOVEMENT_PENALTY)
    if heat >= capacity:
        effects.append(StatusEffect.HEAT_SHUTDOWN_RISK)
        effects.append(StatusEffect.HEAT_AUTO_DAMAGE)
    return effects


def refresh_heat_effects(unit: Unit) -> List[StatusEffect]:
    """Replace the unit's HEAT effects with the ones its heat implies."""
    effects = heat_effects_for(unit)
    unit.status.effects.replace_category(EffectCategory.HEAT, effects)
    return effects


def heat_attack_penalty(unit: Unit) -> int:
    """To-hit penalty from heat effects (2 beats 1, they do not stack)."""
    if unit.has_effect(StatusEffect.HEAT_ATTACK_PENALTY_2):
        return 2
    if unit.has_effect(StatusEffect.HEAT_ATTACK_PENALTY_1):
        return 1
    return 0


def add_heat(state: GameState, unit: Unit, amount: int, *, source: str = "") -> HeatResult:
    """
    Add heat to a mech, clamped to capacity, and recompute threshold effects.

    Non-mech units are ignored (heat stays 0).
    """
    if not uses_heat(unit) or amount <= 0:
        return HeatResult(unit.id, 0, unit.status.heat, unit.status.effects.to_list())

    before = unit.status.heat
    unit.status.heat = min(before + amount, unit.stats.heat_capacity)
    effects = refresh_heat_effects(unit)
    enforce_unit_invariants(unit, state.rules)

    log.info(
        "Heat %s: +%d%s (%d/%d) %s",
        unit.label(), amount, f" from {source}" if source else "",
        unit.status.heat, unit.stats.heat_capacity, [str(e) for e in effects],
    )
    return HeatResult(unit.id, unit.status.heat - before, unit.status.heat, [str(e) for e in effects])


def movement_heat(move_type: MoveType, distance: float, rule: JumpHeatRule) -> int:
    """
    Heat generated by a move.

    Jump heat depends on the game's JumpHeatRule: FIXED always gives 3,
    DISTANCE gives max(3, hexes jumped).
    """
    from ..world.state import JumpHeatRule

    if move_type == MoveType.WALK:
        return WALK_HEAT
    if move_type == MoveType.RUN:
        return RUN_HEAT
    if rule == JumpHeatRule.DISTANCE:
        return max(JUMP_HEAT_MIN, int(round(distance)))
    return JUMP_HEAT_MIN


def weapon_heat(band: RangeBand, damage: int, overheat: bool) -> int:
    """Heat from firing: damage capped per band, plus the overheat bonus."""
    heat = min(WEAPON_HEAT_CAP[band], max(0, damage))
    if overheat:
        heat += OVERHEAT_BONUS
    return heat


# ============================================================================
# END OF ROUND
# ============================================================================

def dissipate_heat(state: GameState, unit: Unit) -> Dict[str, Any]:
    """
    End-of-round heat for one living mech.

    Order: engine heat, then -1 dissipation unless shut down, then 1 point
    of structure damage if the unit entered the step holding
    HEAT_AUTO_DAMAGE, then threshold effects are recomputed.
    """
    from .damage import apply_structure_damage

    initial = unit.status.heat
    report: Dict[str, Any] = {"unit_id": unit.id, "initial_heat": initial, "sources": []}
    had_auto_damage = unit.has_effect(StatusEffect.HEAT_AUTO_DAMAGE)

    if unit.status.engine_hits:
        engine_heat = unit.status.engine_hits * ENGINE_HEAT_PER_HIT
        unit.status.heat = min(unit.status.heat + engine_heat, unit.stats.heat_capacity)
        report["sources"].append(f"+{engine_heat} engine damage")

    if not unit.has_effect(StatusEffect.SHUTDOWN):
        unit.status.heat = max(0, unit.status.heat - DISSIPATION_PER_ROUND)
        report["sources"].append(f"-{DISSIPATION_PER_ROUND} dissipation")
    else:
        report["sources"].append("shut down, no dissipation")

    if had_auto_damage:
        apply_structure_damage(state, unit, HEAT_AUTO_DAMAGE_POINTS, cause="extreme heat")
        report["sources"].append(f"{HEAT_AUTO_DAMAGE_POINTS} structure damage from extreme heat")

    refresh_heat_effects(unit)
    enforce_unit_invariants(unit, state.rules)
    report["final_heat"] = unit.status.heat
    report["effects"] = [str(e) for e in unit.status.effects.in_category(EffectCategory.HEAT)]
    log.info("Heat dissipation %s: %d -> %d", unit.label(), initial, unit.status.heat)
    return report


def check_shutdown(state: GameState, unit: Unit) -> RollCheck:
    """
    Shutdown check for a unit at its heat limit: 2d6 >= 8 avoids shutdown.

    Units without HEAT_SHUTDOWN_RISK, or already shut down, are not checked.
    """
    if not unit.has_effect(StatusEffect.HEAT_SHUTDOWN_RISK) or unit.has_effect(StatusEffect.SHUTDOWN):
        return RollCheck(unit.id, "shutdown", legal=False, error_code="PRECONDITION",
                         reason="No shutdown risk")
    dice = state.dice.roll_2d6()
    success = dice.total >= SHUTDOWN_AVOID_TARGET
    if not success:
        unit.status.effects.add(StatusEffect.SHUTDOWN)
        state.record(f"{unit.name} shuts down from excessive heat", unit_id=unit.id, roll=dice.total)
    log.info("Shutdown check %s: rolled %d, needs %d+ (%s)",
             unit.label(), dice.total, SHUTDOWN_AVOID_TARGET, "avoided" if success else "SHUTDOWN")
    return RollCheck(unit.id, "shutdown", dice.to_list(), dice.total, SHUTDOWN_AVOID_TARGET, success)


def attempt_startup(state: GameState, unit: Unit) -> RollCheck:
    """Restart a shut-down mech: 2d6 >= 4 clears SHUTDOWN."""
    if not unit.is_mech:
        return RollCheck(unit.id, "startup", legal=False, error_code="WRONG_UNIT_KIND", reason="Not a mech")
    if unit.destroyed:
        return RollCheck(unit.id, "startup", legal=False, error_code="UNIT_DESTROYED", reason="Unit destroyed")
    if not unit.has_effect(StatusEffect.SHUTDOWN):
        return RollCheck(unit.id, "startup", legal=False, error_code="PRECONDITION", reason="Unit is not shut down")

    dice = state.dice.roll_2d6()
    success = dice.total >= STARTUP_TARGET
    if success:
        unit.status.effects.discard(StatusEffect.SHUTDOWN)
    state.record(
        f"{unit.name} {'restarts' if success else 'fails to restart'}",
        unit_id=unit.id, roll=dice.total, target=STARTUP_TARGET,
    )
    log.info("Startup check %s: rolled %d, needs %d+", unit.label(), dice.total, STARTUP_TARGET)
    return RollCheck(unit.id, "startup", dice.to_list(), dice.total, STARTUP_TARGET, success)
