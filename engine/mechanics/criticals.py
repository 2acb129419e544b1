"""
Critical hit subsystem.

Table lookup is a pure function of (unit kind, roll). Applying a result
goes through the hook pipeline: the raw 2d6 passes through the defender's
and then the attacker's MODIFY_CRITICAL_ROLL hooks, is clamped to 2..12,
and the chosen effect may still be vetoed by the defender's
PREVENT_CRITICAL_TYPE hooks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from infra.logger import get_logger

from ..abilities import Hook, HookContext, HookRole, apply_all, apply_any
from ..core.effects import StatusEffect
from ..core.results import CriticalResult
from ..core.types import AttackType, CriticalEffect, UnitKind
from ..units.unit import CriticalRecord

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)

AMMO_EXPLOSION_DAMAGE = 2
INFANTRY_CRITICAL_DAMAGE = 1
STRUCTURE_CRITICAL_THRESHOLD = 0.25
PRECISION_CHECK_ROLL = 10

EFFECT_DESCRIPTIONS: Dict[CriticalEffect, str] = {
    CriticalEffect.ENGINE_HIT: "Engine hit",
    CriticalEffect.FIRE_CONTROL_HIT: "Fire control hit: +2 to-hit",
    CriticalEffect.MOVEMENT_HIT: "Movement system hit: -2 movement",
    CriticalEffect.WEAPON_HIT: "Weapon system hit: -1 damage",
    CriticalEffect.MOTIVE_SYSTEM_HIT: "Motive system destroyed: immobilized",
    CriticalEffect.AMMO_EXPLOSION: "Ammunition explosion: +2 structure damage",
    CriticalEffect.ADDITIONAL_DAMAGE: "Additional damage",
}


# ============================================================================
# TABLES
# ============================================================================

def _mech_table(roll: int) -> CriticalEffect:
    if roll <= 7:
        return CriticalEffect.ENGINE_HIT
    return {
        8: CriticalEffect.FIRE_CONTROL_HIT,
        9: CriticalEffect.MOVEMENT_HIT,
        10: CriticalEffect.WEAPON_HIT,
        11: CriticalEffect.MOTIVE_SYSTEM_HIT,
    }.get(roll, CriticalEffect.AMMO_EXPLOSION)


def _vehicle_table(roll: int) -> CriticalEffect:
    if roll <= 6:
        return CriticalEffect.ENGINE_HIT
    if roll <= 9:
        return CriticalEffect.WEAPON_HIT
    return CriticalEffect.MOTIVE_SYSTEM_HIT


def lookup_critical(kind: UnitKind, roll: int) -> CriticalEffect:
    """
    Critical effect for a unit kind and a clamped 2..12 roll.

    Infantry have no table: every critical is additional damage.
    """
    roll = min(12, max(2, roll))
    if kind == UnitKind.MECH:
        return _mech_table(roll)
    if kind == UnitKind.VEHICLE:
        return _vehicle_table(roll)
    return CriticalEffect.ADDITIONAL_DAMAGE


def critical_triggered(target: Unit, natural_roll: int, structure_before: int) -> bool:
    """
    Whether a hit calls for a critical check.

    Triggers on a natural 12, or when the hit takes cumulative structure
    damage from below to at least a quarter of max structure.
    """
    if natural_roll == 12:
        return True
    threshold = target.stats.structure * STRUCTURE_CRITICAL_THRESHOLD
    after = target.status.damage.structure
    return after > structure_before and after >= threshold


# ============================================================================
# RESOLUTION
# ============================================================================

def process_critical_hit(
    state: GameState,
    target: Unit,
    attacker: Optional[Unit] = None,
    *,
    roll: Optional[int] = None,
) -> CriticalResult:
    """
    Roll on the target's critical table and apply the result.

    Args:
        state: Game being resolved
        target: Unit suffering the critical
        attacker: Unit that caused it (its MODIFY_CRITICAL_ROLL hooks apply)
        roll: Pre-rolled 2d6 total; drawn from the game dice when omitted

    Returns:
        CriticalResult (effect None when the target was already destroyed)
    """
    if target.destroyed:
        return CriticalResult(target.id, 0, 0, description="Target already destroyed")

    if target.is_infantry:
        return _apply_infantry_critical(state, target)

    raw = roll if roll is not None else state.dice.roll_2d6().total
    modified = apply_all(target, Hook.MODIFY_CRITICAL_ROLL, raw,
                         HookContext(state=state, role=HookRole.DEFENDER, attacker=attacker, target=target))
    if attacker is not None:
        modified = apply_all(attacker, Hook.MODIFY_CRITICAL_ROLL, modified,
                             HookContext(state=state, role=HookRole.ATTACKER, attacker=attacker, target=target))
    modified = min(12, max(2, int(modified)))

    effect = lookup_critical(target.kind, modified)
    veto_ctx = HookContext(
        state=state, role=HookRole.DEFENDER, attacker=attacker, target=target, critical_effect=effect,
    )
    if apply_any(target, Hook.PREVENT_CRITICAL_TYPE, veto_ctx):
        log.info("Critical %s on %s prevented", effect, target.label())
        state.record(f"{target.name} shrugs off a critical hit ({effect})", unit_id=target.id, roll=raw)
        return CriticalResult(
            target.id, raw, modified, effect=str(effect), applied=False, prevented=True,
            description=f"{EFFECT_DESCRIPTIONS[effect]} (prevented)",
        )

    description = _apply_effect(state, target, effect)
    target.status.criticals.append(CriticalRecord(state.round, modified, str(effect)))
    state.record(
        f"Critical hit on {target.name}: {description}",
        unit_id=target.id, roll=raw, modified_roll=modified, effect=str(effect),
    )
    log.info("Critical on %s: roll %d -> %d, %s", target.label(), raw, modified, effect)
    return CriticalResult(target.id, raw, modified, effect=str(effect), applied=True, description=description)


def _apply_effect(state: GameState, unit: Unit, effect: CriticalEffect) -> str:
    from .damage import apply_structure_damage

    status = unit.status
    description = EFFECT_DESCRIPTIONS[effect]
    if effect == CriticalEffect.ENGINE_HIT:
        status.engine_hits += 1
        if unit.is_vehicle:
            description = "Engine hit: movement halved"
        else:
            description = "Engine hit: +2 heat each end phase"
    elif effect == CriticalEffect.FIRE_CONTROL_HIT:
        status.fire_control_hits += 1
    elif effect == CriticalEffect.MOVEMENT_HIT:
        status.movement_hits += 1
    elif effect == CriticalEffect.WEAPON_HIT:
        status.weapon_hits += 1
    elif effect == CriticalEffect.MOTIVE_SYSTEM_HIT:
        status.effects.add(StatusEffect.IMMOBILIZED)
    elif effect == CriticalEffect.AMMO_EXPLOSION:
        apply_structure_damage(state, unit, AMMO_EXPLOSION_DAMAGE, cause="ammunition explosion")
    return description


def _apply_infantry_critical(state: GameState, unit: Unit) -> CriticalResult:
    from .damage import apply_damage

    result = apply_damage(state, unit, INFANTRY_CRITICAL_DAMAGE,
                          attack_type=AttackType.CRITICAL, use_hooks=False)
    effect = CriticalEffect.ADDITIONAL_DAMAGE
    unit.status.criticals.append(CriticalRecord(state.round, 0, str(effect)))
    description = f"Additional damage: {result.applied} point(s)"
    state.record(f"Critical hit on {unit.name}: {description}", unit_id=unit.id, effect=str(effect))
    return CriticalResult(unit.id, 0, 0, effect=str(effect), applied=True, description=description)


def engine_movement_factor(unit: Unit) -> float:
    """Vehicles with a damaged engine move at half speed."""
    return 0.5 if unit.is_vehicle and unit.status.engine_hits > 0 else 1.0
