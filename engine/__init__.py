"""
Turn-based combat rules engine.

State lives in an explicit GameState; the operations in ``engine.game``
validate and apply actions against it.
"""

from .core.types import (
    AdvancedMeleeVariant,
    AntiVehicleVariant,
    Facing,
    MeleeVariant,
    MoveType,
    Phase,
    Side,
)
from .game import (
    add_unit,
    advance_phase,
    attempt_startup,
    check_game_over,
    create_game,
    move_unit,
    resolve_anti_vehicle_infantry_attack,
    resolve_melee_attack,
    resolve_ranged_attack,
    roll_initiative,
    set_terrain,
    switch_active_side,
)
from .world.state import GameState

__all__ = [
    "AdvancedMeleeVariant",
    "AntiVehicleVariant",
    "Facing",
    "GameState",
    "MeleeVariant",
    "MoveType",
    "Phase",
    "Side",
    "add_unit",
    "advance_phase",
    "attempt_startup",
    "check_game_over",
    "create_game",
    "move_unit",
    "resolve_anti_vehicle_infantry_attack",
    "resolve_melee_attack",
    "resolve_ranged_attack",
    "roll_initiative",
    "set_terrain",
    "switch_active_side",
]
