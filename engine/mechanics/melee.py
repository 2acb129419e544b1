"""
Basic melee attacks: standard, punch, kick, charge, push and hand-held weapons.

Target number = skill + variant modifier + posture + cover + heat, clamped 2..12;
the attack hits on 2d6 >= target number. Damage comes from the attacker's
tonnage, except STANDARD, whose damage is whatever the MELEE_DAMAGE hooks
provide.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from infra.logger import get_logger

from ..abilities import Hook, HookContext, HookRole, apply_all
from ..core.effects import StatusEffect
from ..core.results import AttackResult, RollDetails
from ..core.types import ActionValidation, AttackType, HitLocation, MeleeVariant, MeleeWeapon
from ..core.validation import validate_adjacent, validate_attack
from ..world.terrain import terrain_profile
from .damage import apply_damage
from .heat import add_heat, heat_attack_penalty
from .piloting import piloting_check

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)

MIN_TARGET = 2
MAX_TARGET = 12
PRONE_MODIFIER = 2
COVER_MODIFIER = 1
CHARGE_MIN_DISTANCE = 3


@dataclass(frozen=True)
class MeleeWeaponProfile:
    damage_multiplier: float
    to_hit_modifier: int


MELEE_WEAPONS: Dict[MeleeWeapon, MeleeWeaponProfile] = {
    MeleeWeapon.HATCHET: MeleeWeaponProfile(1.5, 1),
    MeleeWeapon.SWORD: MeleeWeaponProfile(1.3, 0),
    MeleeWeapon.AXE: MeleeWeaponProfile(1.4, 2),
    MeleeWeapon.MACE: MeleeWeaponProfile(1.2, 1),
    MeleeWeapon.CLUB: MeleeWeaponProfile(1.1, 1),
}

VARIANT_MODIFIERS: Dict[MeleeVariant, int] = {
    MeleeVariant.STANDARD: 0,
    MeleeVariant.PUNCH: 0,
    MeleeVariant.KICK: 2,
    MeleeVariant.CHARGE: 1,
    MeleeVariant.PUSH: 1,
}

VARIANT_HEAT: Dict[MeleeVariant, int] = {
    MeleeVariant.PUNCH: 1,
    MeleeVariant.KICK: 1,
    MeleeVariant.CHARGE: 2,
    MeleeVariant.WEAPON: 1,
}

# Piloting modifiers forced on the target by a hit; others only above 10 damage.
PSR_MODIFIERS: Dict[MeleeVariant, int] = {
    MeleeVariant.KICK: 2,
    MeleeVariant.CHARGE: 2,
    MeleeVariant.PUSH: 1,
}
HEAVY_HIT_DAMAGE = 10
HEAVY_HIT_PSR = 1


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_target(value: int) -> int:
    return max(MIN_TARGET, min(MAX_TARGET, value))


# ============================================================================
# LEGALITY
# ============================================================================

def validate_melee_attack(
    state: GameState, attacker_id: str, target_id: str, variant: MeleeVariant
) -> Tuple[ActionValidation, Optional[Unit], Optional[Unit]]:
    """Pure legality check for a basic melee attack."""
    validation, attacker, target = validate_attack(state, attacker_id, target_id, f"{variant} attack")
    if not validation.valid:
        return validation, attacker, target

    def fail(code: str, message: str):
        return ActionValidation.fail(code, message), attacker, target

    if attacker.is_vtol:
        return fail("WRONG_UNIT_KIND", "VTOLs cannot make physical attacks")
    if target.is_vtol:
        return fail("INVALID_TARGET", f"{target.label()} is airborne")

    validation = validate_adjacent(state, attacker, target)
    if not validation.valid:
        return validation, attacker, target

    locations = attacker.status.damaged_locations
    if variant in (MeleeVariant.PUNCH, MeleeVariant.KICK, MeleeVariant.PUSH, MeleeVariant.WEAPON):
        if not attacker.is_mech:
            return fail("WRONG_UNIT_KIND", f"Only mechs can {variant}")
    if variant == MeleeVariant.PUNCH and all(loc in locations for loc in (HitLocation.LEFT_ARM, HitLocation.RIGHT_ARM)):
        return fail("NO_CAPABILITY", "Both arms are damaged")
    if variant == MeleeVariant.KICK and all(loc in locations for loc in (HitLocation.LEFT_LEG, HitLocation.RIGHT_LEG)):
        return fail("NO_CAPABILITY", "Both legs are damaged")
    if variant == MeleeVariant.CHARGE:
        if attacker.is_infantry:
            return fail("WRONG_UNIT_KIND", "Infantry cannot charge")
        if not attacker.status.has_moved or attacker.status.move_distance < CHARGE_MIN_DISTANCE:
            return fail("PRECONDITION", f"A charge needs at least {CHARGE_MIN_DISTANCE} hexes of movement this round")
    if variant == MeleeVariant.WEAPON and attacker.stats.melee_weapon is None:
        return fail("NO_CAPABILITY", f"{attacker.label()} carries no melee weapon")
    if variant == MeleeVariant.STANDARD and standard_damage(state, attacker, target) <= 0:
        return fail("NO_DAMAGE", f"{attacker.label()} has no melee damage")

    return ActionValidation.success(), attacker, target


# ============================================================================
# FORMULAS
# ============================================================================

def standard_damage(state: GameState, attacker: Unit, target: Unit) -> int:
    ctx = HookContext(state=state, role=HookRole.ATTACKER, attacker=attacker, target=target,
                      attack_type=AttackType.PHYSICAL)
    return int(apply_all(attacker, Hook.MELEE_DAMAGE, 0, ctx))


def melee_damage(state: GameState, attacker: Unit, target: Unit, variant: MeleeVariant) -> int:
    """Damage a basic melee hit deals (at least 1, except a push)."""
    tons = attacker.stats.tonnage
    if variant == MeleeVariant.PUSH:
        return 0
    if variant == MeleeVariant.STANDARD:
        return standard_damage(state, attacker, target)
    if variant == MeleeVariant.PUNCH:
        damage = round_half_up(tons / 10 / 5) * 5
    elif variant == MeleeVariant.KICK:
        damage = round_half_up(tons / 5 / 5) * 5
    elif variant == MeleeVariant.CHARGE:
        damage = round_half_up(tons / 10 * attacker.status.move_distance)
    else:
        damage = round_half_up(tons / 10 * MELEE_WEAPONS[attacker.stats.melee_weapon].damage_multiplier)
    return max(1, damage)


def melee_target_number(state: GameState, attacker: Unit, target: Unit, variant: MeleeVariant) -> Tuple[int, Dict[str, int]]:
    mods: Dict[str, int] = {"skill": attacker.stats.skill}
    if variant == MeleeVariant.WEAPON:
        variant_mod = MELEE_WEAPONS[attacker.stats.melee_weapon].to_hit_modifier
    else:
        variant_mod = VARIANT_MODIFIERS[variant]
    if variant_mod:
        mods[str(variant)] = variant_mod
    heat_mod = heat_attack_penalty(attacker)
    if heat_mod:
        mods["heat"] = heat_mod
    if attacker.has_effect(StatusEffect.PRONE):
        mods["attacker_prone"] = PRONE_MODIFIER
    if target.has_effect(StatusEffect.PRONE):
        mods["target_prone"] = -PRONE_MODIFIER
    if terrain_profile(state.battlefield.terrain_at(target.position)).combat_modifier > 0:
        mods["cover"] = COVER_MODIFIER
    return clamp_target(sum(mods.values())), mods


def target_psr_modifier(variant: MeleeVariant, damage: int) -> Optional[int]:
    """Piloting modifier the target must roll against, or None when no roll is forced."""
    if variant in PSR_MODIFIERS:
        return PSR_MODIFIERS[variant]
    if damage >= HEAVY_HIT_DAMAGE:
        return HEAVY_HIT_PSR
    return None


# ============================================================================
# RESOLUTION
# ============================================================================

def resolve_melee_attack(
    state: GameState, attacker_id: str, target_id: str, variant: MeleeVariant
) -> AttackResult:
    """
    Resolve a basic melee attack.

    Args:
        state: Game being resolved
        attacker_id: Attacking unit
        target_id: Adjacent target
        variant: STANDARD, PUNCH, KICK, CHARGE, PUSH or WEAPON

    Returns:
        AttackResult; illegal attempts leave the state untouched
    """
    validation, attacker, target = validate_melee_attack(state, attacker_id, target_id, variant)
    if not validation.valid:
        log.warning("%s rejected (%s -> %s): %s", variant, attacker_id, target_id, validation.message)
        return AttackResult.illegal(str(variant), attacker_id, target_id, validation.error_code, validation.message)

    target_number, target_mods = melee_target_number(state, attacker, target, variant)
    dice = state.dice.roll_2d6()
    hit = dice.total >= target_number
    result = AttackResult(
        attack=str(variant),
        attacker_id=attacker.id,
        target_id=target.id,
        hit=hit,
        roll=RollDetails(dice.to_list(), dice.total, dice.total, target_number, {}, target_mods),
    )
    attacker.status.has_fired = True

    if hit:
        damage = melee_damage(state, attacker, target, variant)
        location = HitLocation.CENTER_TORSO
        if variant == MeleeVariant.KICK:
            location = HitLocation.LEFT_LEG if state.dice.coin_flip() else HitLocation.RIGHT_LEG
            target.status.damaged_locations.add(location)
        result.details["location"] = str(location)

        if damage > 0:
            dealt = apply_damage(state, target, damage, attacker=attacker, attack_type=AttackType.PHYSICAL)
            result.damage = dealt.applied
            result.details["damage"] = dealt.to_dict()

        if variant == MeleeVariant.CHARGE:
            result.self_damage = round_half_up(damage / 2)
            apply_damage(state, attacker, result.self_damage, attack_type=AttackType.SELF, use_hooks=False)

        psr = target_psr_modifier(variant, result.damage)
        if psr is not None and not target.destroyed:
            check = piloting_check(state, target, psr, reason=f"{variant} by {attacker.name}")
            if check.legal:
                result.details["target_psr"] = check.to_dict()
                if not check.success:
                    result.effects.append(f"{target.name} knocked prone")
        if target.destroyed:
            result.effects.append(f"{target.name} destroyed")

        state.record(
            f"{attacker.name} hits {target.name} with a {variant} attack for {result.damage} damage",
            attacker_id=attacker.id, target_id=target.id, roll=result.roll.to_dict(),
            damage=result.damage, self_damage=result.self_damage,
        )
    else:
        state.record(
            f"{attacker.name}'s {variant} attack misses {target.name}",
            attacker_id=attacker.id, target_id=target.id, roll=result.roll.to_dict(),
        )

    heat = VARIANT_HEAT.get(variant, 0)
    if heat and attacker.is_mech:
        result.heat_generated = add_heat(state, attacker, heat, source=f"{variant} attack").added

    log.info("%s %s %s: %d vs %d (%s)", attacker.label(), variant, target.label(),
             dice.total, target_number, "hit" if hit else "miss")
    return result
