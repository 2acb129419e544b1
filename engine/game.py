"""
Public engine operations.

Plain functions over an explicit GameState handle. Every operation either
applies a legal action or returns a structured ``legal=False`` result
without touching the state; nothing here raises for a rules violation.

Usage:
    state = create_game(seed=7)
    atlas = add_unit(state, "atlas", Side.PLAYER, (3, 3))
    raven = add_unit(state, "raven", Side.AI, (8, 3))
    advance_phase(state)              # SETUP -> INITIATIVE
    roll_initiative(state)
    advance_phase(state)              # -> MOVEMENT
    move_unit(state, atlas.id, (5, 3))
    advance_phase(state)              # -> COMBAT
    result = resolve_ranged_attack(state, atlas.id, raven.id)
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

from infra.logger import get_logger

from .core.results import AttackResult, RollCheck
from .core.types import (
    AdvancedMeleeVariant,
    AntiVehicleVariant,
    Facing,
    GridPos,
    MeleeVariant,
    MoveType,
    Side,
)
from .core.validation import lookup_actor
from .mechanics import anti_vehicle, dfa, heat, melee, melee_advanced, ranged
from .mechanics.movement import MovementResolver, MoveResult
from .mechanics.phases import PhaseChange, advance_phase, roll_initiative, switch_active_side
from .mechanics.victory import GameOverResult, check_game_over
from .units.templates import UnitTemplate, build_unit
from .units.unit import Unit
from .utils.dice import DiceRoller
from .world.state import GameState, JumpHeatRule, RuleSet
from .world.terrain import Terrain, Weather

log = get_logger(__name__)

_movement = MovementResolver()

AnyMeleeVariant = Union[MeleeVariant, AdvancedMeleeVariant, str]

__all__ = [
    "GameOverResult",
    "PhaseChange",
    "add_unit",
    "advance_phase",
    "attempt_startup",
    "check_game_over",
    "create_game",
    "move_unit",
    "parse_melee_variant",
    "resolve_anti_vehicle_infantry_attack",
    "resolve_melee_attack",
    "resolve_ranged_attack",
    "roll_initiative",
    "set_terrain",
    "switch_active_side",
]


# ============================================================================
# SETUP
# ============================================================================

def create_game(
    width: Optional[int] = None,
    height: Optional[int] = None,
    *,
    seed: Optional[int] = None,
    dice: Optional[DiceRoller] = None,
    weather: Union[Weather, str] = Weather.CLEAR,
    jump_heat_rule: Union[JumpHeatRule, str, None] = None,
    strict: Optional[bool] = None,
) -> GameState:
    """
    Create an empty game in the SETUP phase.

    Unset arguments fall back to the ENGINE_* settings.
    """
    from infra.settings import get_settings

    settings = get_settings()
    rules = RuleSet(
        jump_heat_rule=JumpHeatRule(str(jump_heat_rule or settings.jump_heat_rule)),
        strict=settings.strict if strict is None else strict,
    )
    state = GameState(
        width or settings.grid_width,
        height or settings.grid_height,
        seed=seed,
        dice=dice,
        rules=rules,
        weather=Weather(str(weather)),
    )
    log.info("Created %dx%d game (%s)", state.grid.width, state.grid.height, rules.to_dict())
    return state


def add_unit(
    state: GameState,
    template: Union[UnitTemplate, str],
    side: Union[Side, str],
    position: GridPos,
    *,
    facing: Facing = Facing.N,
    name: Optional[str] = None,
    skill: Optional[int] = None,
    extra_abilities: Tuple[str, ...] = (),
) -> Unit:
    """
    Build a unit from a template and place it on the battlefield.

    Raises:
        ValueError: Unknown template or off-grid position
    """
    unit = build_unit(
        template, state.ids.next_id(), Side(str(side)), tuple(position),
        facing=facing, name=name, skill=skill, extra_abilities=extra_abilities,
    )
    state.battlefield.add_unit(unit)
    state.record(f"{unit.name} deployed at {unit.position}", unit_id=unit.id, side=str(unit.side))
    log.debug("Deployed %s at %s", unit.label(), unit.position)
    return unit


def set_terrain(state: GameState, position: GridPos, terrain: Union[Terrain, str]) -> None:
    """
    Set one hex's terrain.

    Raises:
        ValueError: Off-grid position or unknown terrain
    """
    state.battlefield.set_terrain(tuple(position), terrain)


# ============================================================================
# ACTIONS
# ============================================================================

def move_unit(
    state: GameState,
    unit_id: str,
    destination: GridPos,
    *,
    facing: Optional[Facing] = None,
    move_type: Union[MoveType, str] = MoveType.WALK,
    elevation: Optional[int] = None,
) -> MoveResult:
    destination = tuple(destination)
    try:
        kind = MoveType(str(move_type))
    except ValueError:
        unit = state.get_unit(unit_id)
        old_pos = unit.position if unit is not None else destination
        log.warning("Move rejected for %s: unknown move type %r", unit_id, move_type)
        return MoveResult(
            unit_id=unit_id,
            success=False,
            old_pos=old_pos,
            new_pos=old_pos,
            move_type=MoveType.WALK,
            error_code="UNKNOWN_MOVE_TYPE",
            reason=f"Unknown move type '{move_type}'",
        )
    return _movement.resolve(state, unit_id, destination, facing, kind, elevation)


def resolve_ranged_attack(
    state: GameState, attacker_id: str, target_id: str, *, indirect: bool = False, overheat: bool = False
) -> AttackResult:
    return ranged.resolve_ranged_attack(state, attacker_id, target_id, indirect=indirect, overheat=overheat)


def parse_melee_variant(variant: AnyMeleeVariant) -> Optional[Union[MeleeVariant, AdvancedMeleeVariant]]:
    """Accept either enum or its string value; None when the name is unknown."""
    if isinstance(variant, (MeleeVariant, AdvancedMeleeVariant)):
        return variant
    for enum in (MeleeVariant, AdvancedMeleeVariant):
        try:
            return enum(variant)
        except ValueError:
            continue
    return None


def resolve_melee_attack(
    state: GameState,
    attacker_id: str,
    target_id: Optional[str],
    variant: AnyMeleeVariant = MeleeVariant.STANDARD,
) -> AttackResult:
    """
    Resolve any physical attack.

    Basic variants, Death-From-Above and the extended variants (including
    the target-less defensive stance) all enter here.
    """
    parsed = parse_melee_variant(variant)
    if parsed is None:
        log.warning("Unknown melee variant %r from %s", variant, attacker_id)
        return AttackResult.illegal(str(variant), attacker_id, target_id, "UNKNOWN_VARIANT",
                                    f"Unknown melee variant: {variant}")
    if isinstance(parsed, AdvancedMeleeVariant):
        return melee_advanced.resolve_advanced_melee(state, attacker_id, target_id, parsed)
    if parsed == MeleeVariant.DEATH_FROM_ABOVE:
        return dfa.resolve_dfa(state, attacker_id, target_id)
    return melee.resolve_melee_attack(state, attacker_id, target_id, parsed)


def resolve_anti_vehicle_infantry_attack(
    state: GameState, attacker_id: str, target_id: str, variant: Union[AntiVehicleVariant, str]
) -> AttackResult:
    try:
        parsed = AntiVehicleVariant(str(variant))
    except ValueError:
        log.warning("Unknown anti-vehicle variant %r from %s", variant, attacker_id)
        return AttackResult.illegal(str(variant), attacker_id, target_id, "UNKNOWN_VARIANT",
                                    f"Unknown anti-vehicle variant: {variant}")
    return anti_vehicle.resolve_anti_vehicle_attack(state, attacker_id, target_id, parsed)


def attempt_startup(state: GameState, unit_id: str) -> RollCheck:
    """Try to restart a shut-down mech."""
    unit = state.get_unit(unit_id)
    if unit is None:
        validation, _ = lookup_actor(state, unit_id)
        return RollCheck(unit_id, "startup", legal=False, error_code=validation.error_code,
                         reason=validation.message)
    return heat.attempt_startup(state, unit)
