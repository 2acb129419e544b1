"""
Death-From-Above: a jumping mech lands on an adjacent enemy.

The attacker must have jumped this round. A hit hurts both units and both
must keep their footing; a miss still hurts the attacker, badly when the
roll missed by three or more.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from infra.logger import get_logger

from ..core.effects import StatusEffect
from ..core.results import AttackResult, RollDetails
from ..core.types import ActionValidation, AttackType, HitLocation, MeleeVariant, MoveType
from ..core.validation import validate_adjacent, validate_attack
from ..world.terrain import Terrain
from .damage import apply_damage
from .heat import add_heat, heat_attack_penalty
from .melee import clamp_target
from .piloting import fall_check

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)

DFA_BASE_TARGET = 9
DFA_HEAT = 2
LANDING_TARGET = 8
BAD_MISS_MARGIN = 3
JUMP_DISTANCE_STEP = 3


def validate_dfa(
    state: GameState, attacker_id: str, target_id: str
) -> Tuple[ActionValidation, Optional[Unit], Optional[Unit]]:
    validation, attacker, target = validate_attack(state, attacker_id, target_id, "Death-From-Above")
    if not validation.valid:
        return validation, attacker, target

    def fail(code: str, message: str):
        return ActionValidation.fail(code, message), attacker, target

    if not attacker.is_mech:
        return fail("WRONG_UNIT_KIND", "Only mechs can perform Death-From-Above")
    if attacker.stats.movement.jump <= 0:
        return fail("NO_CAPABILITY", f"{attacker.label()} has no jump jets")
    if not attacker.status.has_moved or attacker.status.move_type != MoveType.JUMP:
        return fail("PRECONDITION", f"{attacker.label()} must jump this round to attack from above")
    if {HitLocation.LEFT_LEG, HitLocation.RIGHT_LEG} <= attacker.status.damaged_locations:
        return fail("NO_CAPABILITY", "Both legs damaged, cannot land on a target")
    if target.is_vtol:
        return fail("INVALID_TARGET", f"{target.label()} is airborne")
    return validate_adjacent(state, attacker, target), attacker, target


def dfa_target_number(state: GameState, attacker: Unit, target: Unit) -> Tuple[int, Dict[str, int]]:
    mods: Dict[str, int] = {"base": DFA_BASE_TARGET}
    if attacker.stats.skill != 4:
        mods["skill"] = attacker.stats.skill - 4
    heat_mod = heat_attack_penalty(attacker)
    if heat_mod:
        mods["heat"] = heat_mod
    if target.status.has_moved:
        if target.status.move_type == MoveType.RUN:
            mods["target_moved"] = 2
        elif target.status.move_type == MoveType.WALK:
            mods["target_moved"] = 1
    if target.has_effect(StatusEffect.PRONE):
        mods["target_prone"] = -2
    jump_mod = int(attacker.status.move_distance) // JUMP_DISTANCE_STEP
    if jump_mod:
        mods["jump_distance"] = jump_mod
    if state.battlefield.terrain_at(attacker.position) == Terrain.ROUGH:
        mods["terrain"] = 1
    return clamp_target(sum(mods.values())), mods


def resolve_dfa(state: GameState, attacker_id: str, target_id: str) -> AttackResult:
    """
    Resolve a Death-From-Above attack.

    Hit: target takes attacker size + 1, attacker takes half the target's
    size (rounded up), and both roll 8+ or fall prone.
    Miss: attacker takes half that self-damage, or double it and falls
    prone when the roll missed by 3 or more.
    """
    attack = str(MeleeVariant.DEATH_FROM_ABOVE)
    validation, attacker, target = validate_dfa(state, attacker_id, target_id)
    if not validation.valid:
        log.warning("Death-From-Above rejected (%s -> %s): %s", attacker_id, target_id, validation.message)
        return AttackResult.illegal(attack, attacker_id, target_id, validation.error_code, validation.message)

    target_number, mods = dfa_target_number(state, attacker, target)
    dice = state.dice.roll_2d6()
    roll = RollDetails(dice.to_list(), dice.total, dice.total, target_number, {}, mods)
    hit = dice.total >= target_number
    result = AttackResult(attack=attack, attacker_id=attacker.id, target_id=target.id, hit=hit, roll=roll)
    attacker.status.has_fired = True

    self_damage = math.ceil(target.size / 2)
    if hit:
        dealt = apply_damage(state, target, attacker.size + 1, attacker=attacker, attack_type=AttackType.PHYSICAL)
        result.damage = dealt.applied
        result.details["damage"] = dealt.to_dict()
        result.self_damage = self_damage
        apply_damage(state, attacker, self_damage, attack_type=AttackType.SELF, use_hooks=False)

        for unit in (target, attacker):
            check = fall_check(state, unit, LANDING_TARGET, reason="death from above")
            if check.legal:
                result.details[f"{'target' if unit is target else 'attacker'}_landing"] = check.to_dict()
                if not check.success:
                    result.effects.append(f"{unit.name} knocked prone")
        if target.destroyed:
            result.effects.append(f"{target.name} destroyed")
        state.record(
            f"{attacker.name} lands on {target.name} for {result.damage} damage",
            attacker_id=attacker.id, target_id=target.id, roll=roll.to_dict(),
            damage=result.damage, self_damage=result.self_damage,
        )
    else:
        if roll.margin <= -BAD_MISS_MARGIN:
            result.self_damage = self_damage * 2
            attacker.status.effects.add(StatusEffect.PRONE)
            result.effects.append(f"{attacker.name} crashes down and falls prone")
        else:
            result.self_damage = math.ceil(self_damage / 2)
        apply_damage(state, attacker, result.self_damage, attack_type=AttackType.SELF, use_hooks=False)
        state.record(
            f"{attacker.name}'s Death-From-Above misses {target.name}",
            attacker_id=attacker.id, target_id=target.id, roll=roll.to_dict(), self_damage=result.self_damage,
        )

    result.heat_generated = add_heat(state, attacker, DFA_HEAT, source="death from above").added
    log.info("%s DFA %s: %d vs %d (%s)", attacker.label(), target.label(), dice.total, target_number,
             "hit" if hit else "miss")
    return result
