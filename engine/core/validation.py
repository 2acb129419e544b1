"""
Shared action validation helpers.

Every resolver runs these pure checks before drawing dice or mutating state,
so the same rules answer both "do it" and "could I do it?" queries.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from .effects import StatusEffect
from .types import ActionValidation, Phase

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState


def validate_phase(state: GameState, phase: Phase, action: str) -> ActionValidation:
    """The action is only legal in ``phase``."""
    if state.phase != phase:
        return ActionValidation.fail(
            "WRONG_PHASE",
            f"{action} is only allowed in {phase} (current phase: {state.phase})"
        )
    return ActionValidation.success()


def lookup_actor(state: GameState, unit_id: str) -> Tuple[ActionValidation, Optional[Unit]]:
    """
    Find a unit that is about to act.

    Returns:
        (validation, unit); unit is None when the id is unknown
    """
    unit = state.get_unit(unit_id)
    if unit is None:
        return ActionValidation.fail("UNIT_NOT_FOUND", f"Unknown unit: {unit_id}"), None
    if unit.destroyed:
        return ActionValidation.fail("UNIT_DESTROYED", f"{unit.label()} is destroyed"), unit
    if unit.has_effect(StatusEffect.SHUTDOWN):
        return ActionValidation.fail("SHUTDOWN", f"{unit.label()} is shut down"), unit
    return ActionValidation.success(), unit


def validate_target(attacker: Unit, target: Optional[Unit], target_id: str) -> ActionValidation:
    """Target exists, is alive, and is an enemy."""
    if target is None:
        return ActionValidation.fail("TARGET_NOT_FOUND", f"Unknown target: {target_id}")
    if target is attacker:
        return ActionValidation.fail("SELF_TARGET", f"{attacker.label()} cannot target itself")
    if target.destroyed:
        return ActionValidation.fail("TARGET_DESTROYED", f"{target.label()} is already destroyed")
    if target.side == attacker.side:
        return ActionValidation.fail("FRIENDLY_TARGET", f"{target.label()} is on the same side")
    return ActionValidation.success()


def validate_attack(
    state: GameState,
    attacker_id: str,
    target_id: str,
    action: str,
) -> Tuple[ActionValidation, Optional[Unit], Optional[Unit]]:
    """
    Checks shared by every attack variant.

    Phase is COMBAT, the attacker can act and has not attacked this round,
    and the target is a living enemy.

    Returns:
        (validation, attacker, target) with units set when they were found
    """
    validation = validate_phase(state, Phase.COMBAT, action)
    attacker = state.get_unit(attacker_id)
    target = state.get_unit(target_id)
    if not validation.valid:
        return validation, attacker, target

    validation, attacker = lookup_actor(state, attacker_id)
    if not validation.valid:
        return validation, attacker, target

    if attacker.status.has_fired:
        return (
            ActionValidation.fail("ALREADY_ATTACKED", f"{attacker.label()} has already attacked this round"),
            attacker,
            target,
        )

    validation = validate_target(attacker, target, target_id)
    return validation, attacker, target


def validate_adjacent(state: GameState, attacker: Unit, target: Unit) -> ActionValidation:
    if not state.grid.is_adjacent(attacker.position, target.position):
        return ActionValidation.fail(
            "NOT_ADJACENT",
            f"{target.label()} is not adjacent to {attacker.label()}"
        )
    return ActionValidation.success()
