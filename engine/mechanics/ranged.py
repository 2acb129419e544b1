"""
Ranged attack resolution.

Roll:   2d6 + attacker skill, folded through the attacker's MODIFY_ATTACK_ROLL
Target: 8 + range band step + target TMM + target terrain + attacker heat
        + fire-control hits + sensor damage + ECM/target-movement hooks
Hit iff roll >= target.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from infra.logger import get_logger

from ..abilities import Hook, HookContext, HookIndex, HookRole, apply_all, has_capability, zones
from ..core.effects import StatusEffect
from ..core.results import AttackResult, RollDetails
from ..core.types import ActionValidation, AttackType, Capability, RangeBand
from ..core.validation import validate_attack
from ..world.terrain import terrain_profile
from .criticals import PRECISION_CHECK_ROLL, critical_triggered, process_critical_hit
from .damage import apply_damage
from .heat import add_heat, heat_attack_penalty, weapon_heat

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)

BASE_TARGET_NUMBER = 8
SENSORS_DAMAGED_PENALTY = 2

# (max distance, band); anything further is EXTREME.
RANGE_BANDS: Tuple[Tuple[float, RangeBand], ...] = (
    (6, RangeBand.SHORT),
    (12, RangeBand.MEDIUM),
    (24, RangeBand.LONG),
)

RANGE_MODIFIERS: Dict[RangeBand, int] = {
    RangeBand.SHORT: 0,
    RangeBand.MEDIUM: 2,
    RangeBand.LONG: 4,
    RangeBand.EXTREME: 6,
}


def range_band(distance: float) -> RangeBand:
    for limit, band in RANGE_BANDS:
        if distance <= limit:
            return band
    return RangeBand.EXTREME


def attack_type_for(attacker: Unit, indirect: bool) -> AttackType:
    """INDIRECT when requested, MISSILE for indirect-fire capable launchers, else DIRECT."""
    if indirect:
        return AttackType.INDIRECT
    if has_capability(attacker, Capability.INDIRECT_FIRE):
        return AttackType.MISSILE
    return AttackType.DIRECT


@dataclass
class RangedPlan:
    """Everything a legal ranged attack needs, computed without side effects."""
    attacker: Unit
    target: Unit
    distance: float
    band: RangeBand
    attack_type: AttackType
    damage: int
    overheat: bool


def validate_ranged_attack(
    state: GameState,
    attacker_id: str,
    target_id: str,
    *,
    indirect: bool = False,
    overheat: bool = False,
    index: Optional[HookIndex] = None,
) -> Tuple[ActionValidation, Optional[RangedPlan]]:
    """
    Pure legality check for a ranged attack.

    Returns:
        (validation, plan); plan is None when the attack is illegal
    """
    validation, attacker, target = validate_attack(state, attacker_id, target_id, "Ranged attack")
    if not validation.valid:
        return validation, None

    if indirect and not has_capability(attacker, Capability.INDIRECT_FIRE):
        return ActionValidation.fail("NO_CAPABILITY", f"{attacker.label()} cannot fire indirectly"), None

    attack_type = attack_type_for(attacker, indirect)
    index = index or HookIndex.build(state)
    blocker = zones.battlefield_control_blocker(state, index, attacker, attack_type, overheat)
    if blocker is not None:
        return ActionValidation.fail(
            "BLOCKED",
            f"{'Indirect fire' if indirect else 'Overheat fire'} blocked by {blocker.label()}'s battlefield control"
        ), None

    distance = state.grid.distance(attacker.position, target.position)
    band = range_band(distance)
    damage = max(0, attacker.effective_damage(band) - attacker.status.weapon_hits)
    if damage <= 0:
        return ActionValidation.fail("NO_DAMAGE", f"{attacker.label()} has no damage at {band} range"), None

    return ActionValidation.success(), RangedPlan(attacker, target, distance, band, attack_type, damage, overheat)


def resolve_ranged_attack(
    state: GameState,
    attacker_id: str,
    target_id: str,
    *,
    indirect: bool = False,
    overheat: bool = False,
) -> AttackResult:
    """
    Resolve a ranged attack.

    Args:
        state: Game being resolved
        attacker_id: Firing unit
        target_id: Target unit
        indirect: Fire indirectly (needs the indirect-fire capability)
        overheat: Overheat for +2 heat

    Returns:
        AttackResult; illegal attempts leave the state untouched
    """
    index = HookIndex.build(state)
    validation, plan = validate_ranged_attack(
        state, attacker_id, target_id, indirect=indirect, overheat=overheat, index=index,
    )
    if not validation.valid:
        log.warning("Ranged attack rejected (%s -> %s): %s", attacker_id, target_id, validation.message)
        return AttackResult.illegal("ranged", attacker_id, target_id, validation.error_code, validation.message)

    attacker, target = plan.attacker, plan.target
    roll_ctx = HookContext(
        state=state, role=HookRole.ATTACKER, attacker=attacker, target=target,
        attack_type=plan.attack_type, range_band=plan.band,
    )

    # Target number
    target_mods: Dict[str, int] = {
        "base": BASE_TARGET_NUMBER,
        "range": RANGE_MODIFIERS[plan.band],
        "tmm": target.stats.tmm,
    }
    terrain_mod = terrain_profile(state.battlefield.terrain_at(target.position)).combat_modifier
    if terrain_mod:
        target_mods["terrain"] = terrain_mod
    heat_mod = heat_attack_penalty(attacker)
    if heat_mod:
        target_mods["heat"] = heat_mod
    if attacker.status.fire_control_hits:
        target_mods["fire_control"] = attacker.status.fire_control_hits
    if attacker.has_effect(StatusEffect.SENSORS_DAMAGED):
        target_mods["sensors"] = SENSORS_DAMAGED_PENALTY
    ecm = zones.ecm_modifier(state, index, target)
    defender_ctx = HookContext(
        state=state, role=HookRole.DEFENDER, attacker=attacker, target=target,
        attack_type=plan.attack_type, range_band=plan.band,
    )
    movement_mod = int(apply_all(target, Hook.MODIFY_TARGET_MOVEMENT_MODIFIER, ecm, defender_ctx))
    if movement_mod:
        target_mods["ecm"] = movement_mod
    target_number = sum(target_mods.values())

    # Roll
    dice = state.dice.roll_2d6()
    base_roll = dice.total + attacker.stats.skill
    total = int(apply_all(attacker, Hook.MODIFY_ATTACK_ROLL, base_roll, roll_ctx))
    roll_mods = {"skill": attacker.stats.skill}
    if total != base_roll:
        roll_mods["abilities"] = total - base_roll
    roll = RollDetails(dice.to_list(), dice.total, total, target_number, roll_mods, target_mods)
    hit = total >= target_number

    result = AttackResult(
        attack="ranged",
        attacker_id=attacker.id,
        target_id=target.id,
        hit=hit,
        roll=roll,
        details={
            "range": round(plan.distance, 3),
            "range_band": str(plan.band),
            "attack_type": str(plan.attack_type),
            "overheat": overheat,
        },
    )

    if attacker.is_mech:
        result.heat_generated = add_heat(
            state, attacker, weapon_heat(plan.band, attacker.stats.damage.for_band(plan.band), overheat),
            source="weapons fire",
        ).added

    attacker.status.has_fired = True

    if hit:
        structure_before = target.status.damage.structure
        damage = apply_damage(
            state, target, plan.damage,
            attacker=attacker, attack_type=plan.attack_type, range_band=plan.band,
        )
        result.damage = damage.applied
        result.details["damage"] = damage.to_dict()

        triggered = not damage.destroyed and critical_triggered(target, dice.total, structure_before)
        if not triggered and not target.destroyed and has_capability(attacker, Capability.PRECISION_CRITICALS):
            triggered = dice.total >= PRECISION_CHECK_ROLL
        if triggered:
            result.critical_triggered = True
            critical = process_critical_hit(state, target, attacker)
            result.criticals.append(critical)
            if critical.applied:
                result.effects.append(critical.description)
        if target.destroyed:
            result.effects.append(f"{target.name} destroyed")

        state.record(
            f"{attacker.name} hits {target.name} for {result.damage} damage at {plan.band} range",
            attacker_id=attacker.id, target_id=target.id, roll=roll.to_dict(), damage=result.damage,
            critical=result.critical_triggered,
        )
        log.info("%s hits %s: %d vs %d, %d damage", attacker.label(), target.label(),
                 total, target_number, result.damage)
    else:
        state.record(
            f"{attacker.name} misses {target.name} at {plan.band} range",
            attacker_id=attacker.id, target_id=target.id, roll=roll.to_dict(),
        )
        log.info("%s misses %s: %d vs %d", attacker.label(), target.label(), total, target_number)

    return result
