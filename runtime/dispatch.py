"""
Apply agent commands to the engine.

The dispatcher is the only path from a decision maker into the rules.
It checks ownership, routes each command to its engine operation and
turns whatever comes back into a plain outcome dict. Rejections are
logged and reported; they never raise.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from engine import game
from engine.core.types import Facing, Side
from engine.world.state import GameState
from infra.logger import get_logger

from agents.commands import (
    AntiVehicleCommand,
    Command,
    FireCommand,
    MeleeCommand,
    MoveCommand,
    StartupCommand,
    WaitCommand,
)

log = get_logger(__name__)

CommandOutcome = Dict[str, Any]


def _rejected(command: Command, error_code: str, reason: str) -> CommandOutcome:
    return {
        "command": command.model_dump(),
        "legal": False,
        "error_code": error_code,
        "reason": reason,
        "result": None,
    }


def apply_command(state: GameState, command: Command, side: Optional[Side] = None) -> CommandOutcome:
    """
    Apply one command on behalf of ``side``.

    Args:
        state: Game to mutate
        command: Parsed command
        side: Side issuing the command; None skips the ownership check

    Returns:
        Outcome dict with ``legal``, ``error_code``, ``reason`` and the
        engine result under ``result``
    """
    unit = state.get_unit(command.unit_id)
    if unit is None:
        log.warning("Command for unknown unit %s rejected", command.unit_id)
        return _rejected(command, "UNIT_NOT_FOUND", f"Unit {command.unit_id} does not exist")
    if side is not None and unit.side != side:
        log.warning("%s tried to command %s, which it does not own", side, unit.label())
        return _rejected(command, "NOT_OWNER", f"{unit.label()} is not controlled by {side}")

    if isinstance(command, WaitCommand):
        return {"command": command.model_dump(), "legal": True, "error_code": None, "reason": "", "result": None}

    if isinstance(command, MoveCommand):
        result = game.move_unit(
            state, command.unit_id, (command.x, command.y),
            facing=Facing[command.facing] if command.facing else None,
            move_type=command.move_type,
            elevation=command.elevation,
        )
    elif isinstance(command, FireCommand):
        result = game.resolve_ranged_attack(
            state, command.unit_id, command.target_id, indirect=command.indirect, overheat=command.overheat
        )
    elif isinstance(command, MeleeCommand):
        result = game.resolve_melee_attack(state, command.unit_id, command.target_id, command.variant)
    elif isinstance(command, AntiVehicleCommand):
        result = game.resolve_anti_vehicle_infantry_attack(
            state, command.unit_id, command.target_id, command.variant
        )
    elif isinstance(command, StartupCommand):
        result = game.attempt_startup(state, command.unit_id)
    else:
        raise TypeError(f"Unsupported command type: {type(command).__name__}")

    return {
        "command": command.model_dump(),
        "legal": result.legal,
        "error_code": result.error_code,
        "reason": result.reason,
        "result": result.to_dict(),
    }


def apply_commands(state: GameState, commands: Iterable[Command], side: Optional[Side] = None) -> List[CommandOutcome]:
    """Apply commands in order; one unit's rejection does not stop the rest."""
    return [apply_command(state, command, side) for command in commands]
