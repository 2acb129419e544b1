"""
The ability catalog.

Each ability is registered as data, then its hook implementations attach
with ``@ability_hook``. Most abilities implement one hook or none; zonal
abilities (ECM, CR, BFC) carry a zone role and radius and are resolved by
``engine.abilities.zones``.
"""

from __future__ import annotations

from ..core.types import AbilityCode, AttackType, Capability, CriticalEffect, MoveType, UnitKind, ZoneRole
from .hooks import Hook, HookRole
from .registry import AbilityDefinition, ability_hook, register_ability

MECH_AND_VEHICLE = frozenset({UnitKind.MECH, UnitKind.VEHICLE})
ZONE_RADIUS = 2


def _define(code, name, description, **kwargs) -> AbilityDefinition:
    return register_ability(AbilityDefinition(code=code, name=name, description=description, **kwargs))


# ============================================================================
# CATALOG
# ============================================================================

_define(AbilityCode.AC, "Anti-'Mech",
        "Infantry trained for leg attacks, swarming, mines and demolition charges.",
        applies_to=frozenset({UnitKind.INFANTRY}), capabilities=frozenset({Capability.ANTI_MECH}))
_define(AbilityCode.AMP, "Amphibious", "Can move through water terrain.",
        capabilities=frozenset({Capability.AMPHIBIOUS}))
_define(AbilityCode.AMS, "Anti-Missile System", "Reduces damage from missile attacks by 1.",
        applies_to=MECH_AND_VEHICLE)
_define(AbilityCode.ARM, "Armored", "Ignores 1 point of damage per attack.")
_define(AbilityCode.BFC, "Battlefield Control",
        "Enemies within 2 hexes cannot make overheat or indirect-fire attacks.",
        applies_to=MECH_AND_VEHICLE, passive=False, radius=ZONE_RADIUS,
        zone_role=ZoneRole.BATTLEFIELD_CONTROL)
_define(AbilityCode.CR, "Counter-ECM", "Cancels enemy ECM within 2 hexes.",
        applies_to=MECH_AND_VEHICLE, radius=ZONE_RADIUS, zone_role=ZoneRole.COUNTER_ECM)
_define(AbilityCode.DF, "Direct Fire", "Removes minimum range penalties.", applies_to=MECH_AND_VEHICLE)
_define(AbilityCode.ECM, "Electronic Countermeasures",
        "+1 target movement modifier for itself and friendly units within 2 hexes.",
        radius=ZONE_RADIUS, zone_role=ZoneRole.ECM_FIELD)
_define(AbilityCode.ENE, "Energy", "Attacks use only energy weapons.")
_define(AbilityCode.ENG, "Engineer", "Can build or demolish bridges and clear woods.",
        applies_to=frozenset({UnitKind.VEHICLE, UnitKind.INFANTRY}))
_define(AbilityCode.HARD, "Hardened Armor", "Critical hit rolls against this unit are reduced by 1.")
_define(AbilityCode.HVY_CHAS, "Heavy Chassis", "+1 structure, applied when the unit is built.")
_define(AbilityCode.IF, "Indirect Fire", "Indirect attacks gain -1 on the attack roll.",
        passive=False)
_define(AbilityCode.JJ, "Jump Jets", "Jump movement ignores terrain costs.",
        applies_to=frozenset({UnitKind.MECH, UnitKind.INFANTRY}))
_define(AbilityCode.LRM, "Long-Range Missiles", "Missile weapons that can fire indirectly.",
        capabilities=frozenset({Capability.INDIRECT_FIRE}))
_define(AbilityCode.MEL, "Melee", "Can make physical attacks with extra damage.",
        passive=False, capabilities=frozenset({Capability.MELEE}))
_define(AbilityCode.MOB, "Mobile", "Infantry with enhanced mobility equipment.",
        applies_to=frozenset({UnitKind.INFANTRY}))
_define(AbilityCode.PRB, "Precision", "+1 to critical rolls it causes; hits on attack rolls of 10+ always check for criticals.",
        capabilities=frozenset({Capability.PRECISION_CRITICALS}))
_define(AbilityCode.RCN, "Recon", "+1 to its side's initiative rolls.", applies_to=MECH_AND_VEHICLE)
_define(AbilityCode.REIN, "Reinforced",
        "Ignores movement and weapon critical hits while structure remains.")
_define(AbilityCode.VTOL, "Vertical Take-Off and Landing", "Ignores terrain movement costs.",
        applies_to=frozenset({UnitKind.VEHICLE}))


# ============================================================================
# HOOKS
# ============================================================================

@ability_hook(AbilityCode.ARM, Hook.MODIFY_INCOMING_DAMAGE)
def _armored(unit, damage, ctx):
    return max(0, damage - 1)


@ability_hook(AbilityCode.AMS, Hook.MODIFY_INCOMING_DAMAGE)
def _anti_missile(unit, damage, ctx):
    if ctx.is_missile:
        return max(0, damage - 1)
    return damage


@ability_hook(AbilityCode.IF, Hook.MODIFY_ATTACK_ROLL)
def _indirect_fire(unit, roll, ctx):
    if ctx.attack_type == AttackType.INDIRECT:
        return roll - 1
    return roll


@ability_hook(AbilityCode.RCN, Hook.MODIFY_INITIATIVE)
def _recon(unit, bonus, ctx):
    return bonus + 1


@ability_hook(AbilityCode.HARD, Hook.MODIFY_CRITICAL_ROLL)
def _hardened(unit, roll, ctx):
    if ctx.role == HookRole.DEFENDER:
        return max(2, roll - 1)
    return roll


@ability_hook(AbilityCode.PRB, Hook.MODIFY_CRITICAL_ROLL)
def _precision(unit, roll, ctx):
    if ctx.role == HookRole.ATTACKER:
        return roll + 1
    return roll


@ability_hook(AbilityCode.REIN, Hook.PREVENT_CRITICAL_TYPE)
def _reinforced(unit, prevented, ctx):
    if ctx.critical_effect not in (CriticalEffect.MOVEMENT_HIT, CriticalEffect.WEAPON_HIT):
        return prevented
    return prevented or unit.status.damage.structure < unit.stats.structure


@ability_hook(AbilityCode.VTOL, Hook.MODIFY_MOVEMENT_COST)
def _vtol_flight(unit, multiplier, ctx):
    return 1.0


@ability_hook(AbilityCode.JJ, Hook.MODIFY_MOVEMENT_COST)
def _jump_jets(unit, multiplier, ctx):
    if ctx.move_type == MoveType.JUMP:
        return 1.0
    return multiplier


@ability_hook(AbilityCode.MEL, Hook.MELEE_DAMAGE)
def _melee(unit, damage, ctx):
    armor = unit.stats.armor
    if armor >= 7:
        bonus = 3
    elif armor >= 6:
        bonus = 2
    else:
        bonus = 1
    return damage + bonus
