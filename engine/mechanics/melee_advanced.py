"""
Extended physical attacks.

Each variant is described by a MeleeProfile row: base to-hit, damage as a
fraction of tonnage, candidate hit locations, self-damage, heat and the
secondary effects rolled after a hit. Effects resolve in row order, each
with its own roll, so a fixed dice stream always replays the same fight.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from infra.logger import get_logger

from ..core.effects import StatusEffect
from ..core.results import AttackResult, RollDetails
from ..core.types import ActionValidation, AdvancedMeleeVariant, AttackType, HitLocation, MoveType, Phase
from ..core.validation import lookup_actor, validate_adjacent, validate_attack, validate_phase
from ..world.terrain import terrain_profile
from .criticals import process_critical_hit
from .damage import apply_damage
from .heat import add_heat, heat_attack_penalty
from .melee import clamp_target
from .piloting import fall_check, piloting_check, roll_check

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)


class MeleeEffect(Enum):
    """Secondary effects a physical hit can cause."""
    KNOCKDOWN = "knockdown"
    PUSH = "push"
    HEAT = "heat"
    IMMOBILIZE = "immobilize"
    PILOT_DAMAGE = "pilot_damage"
    SENSORS = "sensors"
    CRITICAL = "critical"

    def __str__(self) -> str:
        return self.value


TORSOS = (HitLocation.CENTER_TORSO, HitLocation.RIGHT_TORSO, HitLocation.LEFT_TORSO)
ARMS_AND_SIDES = (HitLocation.RIGHT_ARM, HitLocation.LEFT_ARM, HitLocation.RIGHT_TORSO, HitLocation.LEFT_TORSO)
LEGS_AND_SIDES = (HitLocation.RIGHT_LEG, HitLocation.LEFT_LEG, HitLocation.RIGHT_TORSO, HitLocation.LEFT_TORSO)
LEGS = (HitLocation.RIGHT_LEG, HitLocation.LEFT_LEG)


@dataclass(frozen=True)
class MeleeProfile:
    """
    One row of the extended melee table.

    Attributes:
        base_to_hit: Target number before modifiers
        damage: Damage formula of attacker tonnage
        locations: Candidate hit locations, one picked at random
        heat: Heat the attacking mech gains
        self_damage: Attacker self-damage as a function of dealt damage
        effects: Secondary effects, in resolution order
        limbs: Limbs the attack uses (damage to them penalises it)
    """
    base_to_hit: int
    damage: Callable[[Unit], int]
    locations: Tuple[HitLocation, ...]
    heat: int
    self_damage: Optional[Callable[[int], int]] = None
    effects: Tuple[MeleeEffect, ...] = ()
    limbs: Tuple[HitLocation, ...] = ()


def _charge_damage(unit: Unit) -> int:
    speed = unit.status.move_distance if unit.status.has_moved else unit.stats.movement.walk
    return math.floor((unit.stats.tonnage / 8) * (speed / 5))


MELEE_TABLE: Dict[AdvancedMeleeVariant, MeleeProfile] = {
    AdvancedMeleeVariant.PUNCH: MeleeProfile(
        4, lambda u: u.stats.tonnage // 10, ARMS_AND_SIDES, 1,
        limbs=(HitLocation.LEFT_ARM, HitLocation.RIGHT_ARM),
    ),
    AdvancedMeleeVariant.KICK: MeleeProfile(
        5, lambda u: u.stats.tonnage // 5, LEGS_AND_SIDES, 2,
        limbs=(HitLocation.LEFT_LEG, HitLocation.RIGHT_LEG),
    ),
    AdvancedMeleeVariant.BODY_SLAM: MeleeProfile(
        6, lambda u: u.stats.tonnage // 4, TORSOS, 3,
        self_damage=lambda d: d // 2, effects=(MeleeEffect.PUSH,),
    ),
    AdvancedMeleeVariant.SHOULDER_CHECK: MeleeProfile(
        4, lambda u: u.stats.tonnage // 7, ARMS_AND_SIDES, 1,
        effects=(MeleeEffect.PUSH,), limbs=(HitLocation.LEFT_ARM, HitLocation.RIGHT_ARM),
    ),
    AdvancedMeleeVariant.HEAD_BUTT: MeleeProfile(
        7, lambda u: u.stats.tonnage // 15, (HitLocation.HEAD, HitLocation.CENTER_TORSO), 1,
        self_damage=lambda d: max(1, d // 3), effects=(MeleeEffect.PILOT_DAMAGE, MeleeEffect.SENSORS),
    ),
    AdvancedMeleeVariant.TRIP: MeleeProfile(
        6, lambda u: u.stats.tonnage // 12, LEGS, 2,
        effects=(MeleeEffect.KNOCKDOWN,), limbs=(HitLocation.LEFT_LEG, HitLocation.RIGHT_LEG),
    ),
    AdvancedMeleeVariant.GRAPPLE: MeleeProfile(
        5, lambda u: u.stats.tonnage // 20, TORSOS, 2,
        effects=(MeleeEffect.HEAT, MeleeEffect.IMMOBILIZE),
    ),
    AdvancedMeleeVariant.STOMP: MeleeProfile(
        3, lambda u: u.stats.tonnage // 6, TORSOS, 1,
        effects=(MeleeEffect.CRITICAL,),
    ),
    AdvancedMeleeVariant.CHARGE: MeleeProfile(
        5, _charge_damage, TORSOS, 3,
        self_damage=lambda d: d // 2, effects=(MeleeEffect.PUSH,),
    ),
}

DEFENSIVE_STANCE_MODIFIER = 2
EVASIVE_TARGET_MODIFIER = 1
PRONE_TARGET_MODIFIER = -2
STOMP_PRONE_MODIFIER = -1
SIZE_STEP_TONS = 20
GRAPPLE_WEIGHT_RATIO = 0.7

KNOCKDOWN_TARGET = 8
HEAVIER_DEFENDER_BONUS = 2
IMMOBILIZE_TARGET = 9
PILOT_DAMAGE_TARGET = 10
SENSORS_TARGET = 9
CRITICAL_TARGET = 8
PUSH_PSR = 1
COLLISION_PSR = 3
MISSED_SLAM_PSR = 1


@dataclass
class EffectOutcome:
    effect: MeleeEffect
    applied: bool
    details: str
    data: Dict[str, object] = field(default_factory=dict)


# ============================================================================
# LEGALITY
# ============================================================================

def validate_advanced_melee(
    state: GameState, attacker_id: str, target_id: Optional[str], variant: AdvancedMeleeVariant
) -> Tuple[ActionValidation, Optional[Unit], Optional[Unit]]:
    """Pure legality check for an extended physical attack or defensive stance."""
    if variant == AdvancedMeleeVariant.DEFENSIVE_STANCE:
        validation = validate_phase(state, Phase.COMBAT, "Defensive stance")
        if not validation.valid:
            return validation, state.get_unit(attacker_id), None
        validation, unit = lookup_actor(state, attacker_id)
        if validation.valid and not unit.is_mech:
            validation = ActionValidation.fail("WRONG_UNIT_KIND", "Only mechs can take a defensive stance")
        if validation.valid and unit.status.has_fired:
            validation = ActionValidation.fail("ALREADY_ATTACKED", f"{unit.label()} has already acted this round")
        return validation, unit, None

    validation, attacker, target = validate_attack(state, attacker_id, target_id, f"{variant} attack")
    if not validation.valid:
        return validation, attacker, target

    def fail(code: str, message: str):
        return ActionValidation.fail(code, message), attacker, target

    if not attacker.is_mech:
        return fail("WRONG_UNIT_KIND", "Only mechs can make extended physical attacks")
    if target.is_vtol:
        return fail("INVALID_TARGET", f"{target.label()} is airborne")
    validation = validate_adjacent(state, attacker, target)
    if not validation.valid:
        return validation, attacker, target

    damaged = attacker.status.damaged_locations
    if variant in (AdvancedMeleeVariant.PUNCH, AdvancedMeleeVariant.SHOULDER_CHECK) and {
        HitLocation.LEFT_ARM, HitLocation.RIGHT_ARM
    } <= damaged:
        return fail("NO_CAPABILITY", "Both arms damaged, cannot perform arm-based attacks")
    if variant in (AdvancedMeleeVariant.KICK, AdvancedMeleeVariant.TRIP) and {
        HitLocation.LEFT_LEG, HitLocation.RIGHT_LEG
    } <= damaged:
        return fail("NO_CAPABILITY", "Both legs damaged, cannot perform leg-based attacks")
    if variant == AdvancedMeleeVariant.HEAD_BUTT and HitLocation.HEAD in damaged:
        return fail("NO_CAPABILITY", "Head damaged, cannot perform a head-butt")
    if variant == AdvancedMeleeVariant.STOMP and not target.has_effect(StatusEffect.PRONE):
        return fail("PRECONDITION", "Can only stomp prone targets")
    if variant == AdvancedMeleeVariant.GRAPPLE:
        if not target.is_mech:
            return fail("INVALID_TARGET", "Grapples are only possible between mechs")
        if attacker.stats.tonnage < target.stats.tonnage * GRAPPLE_WEIGHT_RATIO:
            return fail("PRECONDITION", "Attacker is too light to grapple the defender")
    if variant == AdvancedMeleeVariant.BODY_SLAM and not attacker.status.has_moved:
        return fail("PRECONDITION", "Must move before performing a body slam")

    return ActionValidation.success(), attacker, target


# ============================================================================
# FORMULAS
# ============================================================================

def advanced_target_number(
    state: GameState, attacker: Unit, target: Unit, variant: AdvancedMeleeVariant
) -> Tuple[int, Dict[str, int]]:
    """Base to-hit plus every situational modifier, clamped to 2..12."""
    profile = MELEE_TABLE[variant]
    mods: Dict[str, int] = {"base": profile.base_to_hit}

    if attacker.stats.skill != 4:
        mods["skill"] = attacker.stats.skill - 4
    limb_damage = sum(1 for limb in profile.limbs if limb in attacker.status.damaged_locations)
    if limb_damage:
        mods["damaged_limbs"] = limb_damage
    heat_mod = heat_attack_penalty(attacker)
    if heat_mod:
        mods["heat"] = heat_mod
    terrain_mod = terrain_profile(state.battlefield.terrain_at(attacker.position)).melee_modifier
    if terrain_mod:
        mods["terrain"] = terrain_mod
    weather_mod = state.battlefield.weather.melee_modifier
    if weather_mod:
        mods["weather"] = weather_mod
    if target.has_effect(StatusEffect.DEFENSIVE_STANCE):
        mods["defensive_stance"] = DEFENSIVE_STANCE_MODIFIER

    target_prone = target.has_effect(StatusEffect.PRONE)
    if target.status.has_moved and not target_prone and target.status.move_type in (MoveType.RUN, MoveType.JUMP):
        mods["target_moved"] = EVASIVE_TARGET_MODIFIER
    if target_prone:
        mods["target_prone"] = STOMP_PRONE_MODIFIER if variant == AdvancedMeleeVariant.STOMP else PRONE_TARGET_MODIFIER

    if target.is_mech:
        size_diff = (attacker.stats.tonnage - target.stats.tonnage) // SIZE_STEP_TONS
        if size_diff:
            mods["size"] = -size_diff

    return clamp_target(sum(mods.values())), mods


def _pick_location(state: GameState, locations: Tuple[HitLocation, ...]) -> HitLocation:
    if len(locations) == 1:
        return locations[0]
    return locations[state.dice.roll_die(len(locations)) - 1]


# ============================================================================
# EFFECTS
# ============================================================================

def _push(state: GameState, attacker: Unit, target: Unit) -> EffectOutcome:
    destination = state.grid.step_away(attacker.position, target.position)

    if state.grid.in_bounds(destination) and not state.battlefield.is_occupied(destination, ignore=target):
        old = target.position
        target.position = destination
        check = piloting_check(state, target, PUSH_PSR, reason="pushed")
        details = f"{target.name} pushed from {old} to {destination}"
        if check.legal and not check.success:
            details += " and falls"
        return EffectOutcome(MeleeEffect.PUSH, True, details, {"from": list(old), "to": list(destination)})

    collision = attacker.stats.tonnage // 15
    dealt = apply_damage(state, target, collision, attack_type=AttackType.COLLISION, use_hooks=False)
    check = piloting_check(state, target, COLLISION_PSR, reason="collision")
    details = f"{target.name} collides with an obstacle for {dealt.applied} damage"
    if check.legal and not check.success:
        details += " and falls"
    return EffectOutcome(MeleeEffect.PUSH, False, details, {"collision_damage": dealt.applied})


def _apply_effect(
    state: GameState, attacker: Unit, target: Unit, effect: MeleeEffect, location: HitLocation
) -> EffectOutcome:
    if effect == MeleeEffect.PUSH:
        return _push(state, attacker, target)

    if effect == MeleeEffect.KNOCKDOWN:
        needed = KNOCKDOWN_TARGET + (HEAVIER_DEFENDER_BONUS if target.stats.tonnage > attacker.stats.tonnage else 0)
        check = fall_check(state, target, needed, reason="tripped")
        if not check.legal:
            return EffectOutcome(effect, False, f"{target.name} cannot be knocked down")
        if check.success:
            return EffectOutcome(effect, False, f"{target.name} resisted knockdown", {"roll": check.roll})
        return EffectOutcome(effect, True, f"{target.name} knocked down", {"roll": check.roll})

    if effect == MeleeEffect.HEAT:
        if not target.is_mech:
            return EffectOutcome(effect, False, "Target does not track heat")
        amount = attacker.stats.tonnage // 15 + 2
        added = add_heat(state, target, amount, source="grapple").added
        return EffectOutcome(effect, True, f"{target.name} heat increased by {added}", {"heat": added})

    if effect == MeleeEffect.IMMOBILIZE:
        check = roll_check(state, target, "immobilize", IMMOBILIZE_TARGET)
        if check.success:
            target.status.effects.add(StatusEffect.GRAPPLED)
            return EffectOutcome(effect, True, f"{target.name} held fast until next round", {"roll": check.roll})
        return EffectOutcome(effect, False, "Failed to immobilize target", {"roll": check.roll})

    if effect == MeleeEffect.PILOT_DAMAGE:
        check = roll_check(state, target, "pilot_damage", PILOT_DAMAGE_TARGET)
        if check.success and target.is_mech:
            target.status.pilot_hits += 1
            return EffectOutcome(effect, True, f"{target.name}'s pilot takes 1 damage", {"roll": check.roll})
        return EffectOutcome(effect, False, "Pilot avoids damage", {"roll": check.roll})

    if effect == MeleeEffect.SENSORS:
        check = roll_check(state, target, "sensors", SENSORS_TARGET)
        if check.success:
            target.status.effects.add(StatusEffect.SENSORS_DAMAGED)
            return EffectOutcome(effect, True, f"{target.name}'s sensors damaged", {"roll": check.roll})
        return EffectOutcome(effect, False, "Sensors undamaged", {"roll": check.roll})

    # CRITICAL
    check = roll_check(state, target, "critical", CRITICAL_TARGET)
    if not check.success or target.destroyed:
        return EffectOutcome(effect, False, "No critical hit", {"roll": check.roll})
    critical = process_critical_hit(state, target, attacker)
    if location.is_arm or location.is_leg:
        target.status.damaged_locations.add(location)
    return EffectOutcome(
        effect, critical.applied, f"Critical hit to {location}: {critical.description}",
        {"critical": critical.to_dict()},
    )


# ============================================================================
# RESOLUTION
# ============================================================================

def resolve_advanced_melee(
    state: GameState,
    attacker_id: str,
    target_id: Optional[str],
    variant: AdvancedMeleeVariant,
) -> AttackResult:
    """
    Resolve an extended physical attack (or take a defensive stance).

    Args:
        state: Game being resolved
        attacker_id: Attacking mech
        target_id: Adjacent target (ignored for DEFENSIVE_STANCE)
        variant: Which attack to make

    Returns:
        AttackResult; illegal attempts leave the state untouched
    """
    validation, attacker, target = validate_advanced_melee(state, attacker_id, target_id, variant)
    if not validation.valid:
        log.warning("%s rejected (%s -> %s): %s", variant, attacker_id, target_id, validation.message)
        return AttackResult.illegal(str(variant), attacker_id, target_id, validation.error_code, validation.message)

    if variant == AdvancedMeleeVariant.DEFENSIVE_STANCE:
        attacker.status.effects.add(StatusEffect.DEFENSIVE_STANCE)
        attacker.status.has_fired = True
        state.record(f"{attacker.name} takes a defensive stance", unit_id=attacker.id)
        return AttackResult(
            attack=str(variant), attacker_id=attacker.id, target_id=None,
            effects=["+2 to be hit by physical attacks until next round"],
        )

    profile = MELEE_TABLE[variant]
    target_number, mods = advanced_target_number(state, attacker, target, variant)
    dice = state.dice.roll_2d6()
    hit = dice.total >= target_number
    result = AttackResult(
        attack=str(variant),
        attacker_id=attacker.id,
        target_id=target.id,
        hit=hit,
        roll=RollDetails(dice.to_list(), dice.total, dice.total, target_number, {}, mods),
    )

    if hit:
        location = _pick_location(state, profile.locations)
        result.details["location"] = str(location)
        damage = max(1, profile.damage(attacker))
        dealt = apply_damage(state, target, damage, attacker=attacker, attack_type=AttackType.PHYSICAL)
        result.damage = dealt.applied
        result.details["damage"] = dealt.to_dict()

        if profile.self_damage is not None:
            result.self_damage = profile.self_damage(damage)
            if result.self_damage:
                apply_damage(state, attacker, result.self_damage, attack_type=AttackType.SELF, use_hooks=False)

        outcomes: List[EffectOutcome] = []
        for effect in profile.effects:
            if target.destroyed:
                break
            outcome = _apply_effect(state, attacker, target, effect, location)
            outcomes.append(outcome)
            result.effects.append(outcome.details)
            if effect == MeleeEffect.CRITICAL and "critical" in outcome.data:
                result.critical_triggered = True
        result.details["special_effects"] = [
            {"effect": str(o.effect), "applied": o.applied, "details": o.details, **o.data} for o in outcomes
        ]
        if target.destroyed:
            result.effects.append(f"{target.name} destroyed")
        state.record(
            f"{attacker.name} lands a {variant} on {target.name} ({location}) for {result.damage} damage",
            attacker_id=attacker.id, target_id=target.id, roll=result.roll.to_dict(),
            damage=result.damage, self_damage=result.self_damage, effects=list(result.effects),
        )
    else:
        result.effects.append("Attack missed")
        if variant in (AdvancedMeleeVariant.BODY_SLAM, AdvancedMeleeVariant.CHARGE):
            check = piloting_check(state, attacker, MISSED_SLAM_PSR, reason=f"missed {variant}")
            if check.legal and not check.success:
                result.effects.append(f"{attacker.name} fell after the missed attack")
        state.record(
            f"{attacker.name}'s {variant} misses {target.name}",
            attacker_id=attacker.id, target_id=target.id, roll=result.roll.to_dict(),
        )

    attacker.status.has_fired = True
    attacker.status.effects.discard(StatusEffect.DEFENSIVE_STANCE)
    result.heat_generated = add_heat(state, attacker, profile.heat, source=f"{variant}").added

    log.info("%s %s %s: %d vs %d (%s)", attacker.label(), variant, target.label(),
             dice.total, target_number, "hit" if hit else "miss")
    return result
