"""
Anti-vehicle infantry attacks: leg attacks, swarming, mines and demo charges.

Only infantry trained for it (the anti-mech capability) may try. Every
attempt costs the squad casualties, hit or miss: the squad is exposed at
point-blank range to the unit it is climbing on or mining.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from infra.logger import get_logger

from ..abilities import has_capability
from ..core.results import AttackResult, RollDetails
from ..core.types import (
    ActionValidation,
    AntiVehicleVariant,
    AttackType,
    Capability,
    HitLocation,
    InfantryEquipment,
    MoveType,
)
from ..core.validation import validate_attack
from .damage import apply_damage
from .heat import add_heat
from .melee import clamp_target
from .piloting import piloting_check

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)


@dataclass(frozen=True)
class AntiVehicleProfile:
    """
    Per-variant rules.

    Attributes:
        min_troops: Troops the squad needs to attempt the attack
        same_hex: Must share the target's hex (otherwise same hex or adjacent)
        base_to_hit: Target number before modifiers
        casualty_rate: Fraction of troops lost on a hit
        equipment: Kit the attack needs and consumes, if any
    """
    min_troops: int
    same_hex: bool
    base_to_hit: int
    casualty_rate: float
    equipment: Optional[InfantryEquipment] = None


PROFILES: Dict[AntiVehicleVariant, AntiVehicleProfile] = {
    AntiVehicleVariant.LEG_ATTACK: AntiVehicleProfile(5, True, 7, 0.10),
    AntiVehicleVariant.SWARM: AntiVehicleProfile(10, True, 9, 0.20),
    AntiVehicleVariant.MINE: AntiVehicleProfile(3, False, 8, 0.05, InfantryEquipment.ANTI_MECH_MINE),
    AntiVehicleVariant.DEMO_CHARGE: AntiVehicleProfile(3, False, 8, 0.15, InfantryEquipment.DEMO_CHARGE),
}

MISS_CASUALTY_RATE = 0.05
DAMAGE_PER_MINE = 3
DAMAGE_PER_DEMO_CHARGE = 5
VIBRO_BLADE_MULTIPLIER = 1.5

TARGET_MOVEMENT_MODIFIERS: Dict[MoveType, int] = {
    MoveType.WALK: 1,
    MoveType.RUN: 3,
    MoveType.JUMP: 4,
}

# 1d6 hit location tables
SWARM_LOCATIONS = {
    1: HitLocation.HEAD,
    2: HitLocation.HEAD,
    3: HitLocation.CENTER_TORSO,
    4: HitLocation.RIGHT_TORSO,
    5: HitLocation.LEFT_TORSO,
    6: HitLocation.CENTER_TORSO,  # rear
}
DEMO_LOCATIONS = {
    1: HitLocation.CENTER_TORSO,
    2: HitLocation.CENTER_TORSO,
    3: HitLocation.RIGHT_LEG,
    4: HitLocation.LEFT_LEG,
    5: HitLocation.RIGHT_TORSO,
    6: HitLocation.LEFT_TORSO,
}


# ============================================================================
# LEGALITY
# ============================================================================

def validate_anti_vehicle_attack(
    state: GameState, attacker_id: str, target_id: str, variant: AntiVehicleVariant
) -> Tuple[ActionValidation, Optional[Unit], Optional[Unit]]:
    """Pure legality check for an anti-vehicle infantry attack."""
    validation, attacker, target = validate_attack(state, attacker_id, target_id, f"{variant} attack")
    if not validation.valid:
        return validation, attacker, target

    def fail(code: str, message: str):
        return ActionValidation.fail(code, message), attacker, target

    profile = PROFILES[variant]
    if not attacker.is_infantry:
        return fail("WRONG_UNIT_KIND", "Only infantry can make anti-vehicle attacks")
    if not has_capability(attacker, Capability.ANTI_MECH):
        return fail("NO_CAPABILITY", f"{attacker.label()} is not trained for anti-vehicle attacks")
    if target.is_infantry or target.is_vtol:
        return fail("INVALID_TARGET", "Anti-vehicle attacks need a mech or ground vehicle target")
    if attacker.troop_count < profile.min_troops:
        return fail("PRECONDITION", f"Insufficient troops for this attack (need {profile.min_troops})")

    distance = state.grid.chebyshev_distance(attacker.position, target.position)
    if profile.same_hex and distance != 0:
        return fail("NOT_ADJACENT", "Infantry must be in the same hex as the target")
    if not profile.same_hex and distance > 1:
        return fail("NOT_ADJACENT", "Infantry must be adjacent to the target")

    if profile.equipment is not None and attacker.equipment_count(profile.equipment) <= 0:
        return fail("NO_CAPABILITY", f"Infantry requires {profile.equipment} for this attack")

    return ActionValidation.success(), attacker, target


# ============================================================================
# FORMULAS
# ============================================================================

def anti_vehicle_target_number(
    state: GameState, attacker: Unit, target: Unit, variant: AntiVehicleVariant
) -> Tuple[int, Dict[str, int]]:
    mods: Dict[str, int] = {"base": PROFILES[variant].base_to_hit, "skill": -attacker.stats.skill}
    if variant == AntiVehicleVariant.LEG_ATTACK and attacker.equipment_count(InfantryEquipment.VIBRO_BLADE):
        mods["vibro_blade"] = -1
    if variant == AntiVehicleVariant.SWARM and attacker.equipment_count(InfantryEquipment.MAGNETIC_CLAMP):
        mods["magnetic_clamp"] = -2
    if target.status.has_moved and target.status.move_type in TARGET_MOVEMENT_MODIFIERS:
        mods["target_moved"] = TARGET_MOVEMENT_MODIFIERS[target.status.move_type]
    if state.battlefield.terrain_at(attacker.position).is_woods:
        mods["woods"] = -1
    return clamp_target(sum(mods.values())), mods


def anti_vehicle_damage(attacker: Unit, variant: AntiVehicleVariant) -> int:
    """Damage a hit deals, capped at twice the surviving troops."""
    troops = attacker.troop_count
    if variant == AntiVehicleVariant.LEG_ATTACK:
        damage = math.ceil(troops / 5)
        if attacker.equipment_count(InfantryEquipment.VIBRO_BLADE):
            damage = math.floor(damage * VIBRO_BLADE_MULTIPLIER)
    elif variant == AntiVehicleVariant.SWARM:
        damage = troops // 5
    elif variant == AntiVehicleVariant.MINE:
        damage = attacker.equipment_count(InfantryEquipment.ANTI_MECH_MINE) * DAMAGE_PER_MINE
    else:
        damage = attacker.equipment_count(InfantryEquipment.DEMO_CHARGE) * DAMAGE_PER_DEMO_CHARGE
    return min(damage, troops * 2)


def casualty_damage(attacker: Unit, casualties: int) -> int:
    """Convert lost troops into armor/structure points for the squad."""
    if casualties <= 0 or attacker.stats.troops <= 0:
        return 0
    points = attacker.stats.armor + attacker.stats.structure
    return math.ceil(casualties * points / attacker.stats.troops)


def _hit_location(state: GameState, variant: AntiVehicleVariant) -> HitLocation:
    if variant in (AntiVehicleVariant.LEG_ATTACK, AntiVehicleVariant.MINE):
        return HitLocation.LEFT_LEG if state.dice.coin_flip() else HitLocation.RIGHT_LEG
    table = SWARM_LOCATIONS if variant == AntiVehicleVariant.SWARM else DEMO_LOCATIONS
    return table[state.dice.roll_die(6)]


# ============================================================================
# RESOLUTION
# ============================================================================

def resolve_anti_vehicle_attack(
    state: GameState, attacker_id: str, target_id: str, variant: AntiVehicleVariant
) -> AttackResult:
    """
    Resolve an anti-vehicle infantry attack.

    Args:
        state: Game being resolved
        attacker_id: Anti-mech infantry squad
        target_id: Mech or ground vehicle
        variant: LEG_ATTACK, SWARM, MINE or DEMO_CHARGE

    Returns:
        AttackResult; ``details["casualties"]`` holds the troops the squad lost
    """
    validation, attacker, target = validate_anti_vehicle_attack(state, attacker_id, target_id, variant)
    if not validation.valid:
        log.warning("%s rejected (%s -> %s): %s", variant, attacker_id, target_id, validation.message)
        return AttackResult.illegal(str(variant), attacker_id, target_id, validation.error_code, validation.message)

    profile = PROFILES[variant]
    troops = attacker.troop_count
    target_number, mods = anti_vehicle_target_number(state, attacker, target, variant)
    dice = state.dice.roll_2d6()
    hit = dice.total >= target_number
    result = AttackResult(
        attack=str(variant),
        attacker_id=attacker.id,
        target_id=target.id,
        hit=hit,
        roll=RollDetails(dice.to_list(), dice.total, dice.total, target_number, {}, mods),
        details={"troops": troops},
    )
    attacker.status.has_fired = True

    if hit:
        location = _hit_location(state, variant)
        result.details["location"] = str(location)
        damage = anti_vehicle_damage(attacker, variant)
        dealt = apply_damage(state, target, damage, attacker=attacker, attack_type=AttackType.ANTI_MECH)
        result.damage = dealt.applied
        result.details["damage"] = dealt.to_dict()
        if profile.equipment is not None:
            attacker.status.equipment[profile.equipment] = 0

        if variant == AntiVehicleVariant.LEG_ATTACK and not target.destroyed:
            check = piloting_check(state, target, math.ceil(damage / 5), reason="leg attack")
            if check.legal:
                result.details["target_psr"] = check.to_dict()
                if not check.success:
                    result.effects.append(f"{target.name} knocked prone")
        elif variant == AntiVehicleVariant.SWARM:
            turns = state.dice.roll_die(3)
            result.details["swarming"] = {"turns_remaining": turns, "damage_per_turn": max(1, troops // 10)}
            result.effects.append(f"Infantry swarming {target.name} for {turns} turns")
        elif (
            variant == AntiVehicleVariant.DEMO_CHARGE
            and attacker.equipment_count(InfantryEquipment.INFERNO_GRENADE)
        ):
            heat = add_heat(state, target, state.dice.roll_2d6().total, source="inferno grenades")
            result.details["inferno_heat"] = heat.added
            if heat.added:
                result.effects.append(f"Inferno grenades add {heat.added} heat to {target.name}")
        if target.destroyed:
            result.effects.append(f"{target.name} destroyed")

    casualties = math.ceil(troops * (profile.casualty_rate if hit else MISS_CASUALTY_RATE))
    result.details["casualties"] = casualties
    loss = casualty_damage(attacker, casualties)
    if loss:
        result.self_damage = apply_damage(
            state, attacker, loss, attack_type=AttackType.CASUALTY, use_hooks=False,
        ).applied

    state.record(
        f"{attacker.name}'s {variant} {'hits' if hit else 'misses'} {target.name}"
        + (f" for {result.damage} damage" if hit else "")
        + f", losing {casualties} troops",
        attacker_id=attacker.id, target_id=target.id, roll=result.roll.to_dict(),
        damage=result.damage, casualties=casualties,
    )
    log.info("%s %s %s: %d vs %d (%s), %d casualties", attacker.label(), variant, target.label(),
             dice.total, target_number, "hit" if hit else "miss", casualties)
    return result
