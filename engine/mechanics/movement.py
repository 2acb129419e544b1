"""
MovementResolver - movement validation and resolution.

This module handles:
- Computing a unit's movement allowance for a move type
- Validating a move (phase, unit state, bounds, terrain, occupancy)
- Applying the position change and movement heat
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from infra.logger import get_logger

from ..abilities import Hook, HookContext, apply_all, has_capability
from ..core.effects import StatusEffect
from ..core.types import ActionValidation, Capability, Facing, GridPos, MoveType, Phase, VehicleSubtype
from ..core.validation import lookup_actor, validate_phase
from ..world.terrain import Terrain, movement_modifier
from .criticals import engine_movement_factor
from .heat import add_heat, movement_heat

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)

MOVEMENT_HIT_PENALTY = 2
HEAT_MOVEMENT_PENALTY = 1
MINIMUM_ALLOWANCE = 2
MIN_VTOL_ELEVATION = 1
MAX_VTOL_ELEVATION = 6


@dataclass
class MoveResult:
    """
    Result of resolving a single move.

    Attributes:
        unit_id: Unit that moved (or tried to)
        success: Whether the move happened
        old_pos: Position before the move
        new_pos: Position after the move (same as old if it failed)
        move_type: Requested movement mode
        distance: Euclidean distance of the move
        allowance: Allowance the move was checked against
        heat_generated: Heat the move added (mechs only)
        error_code: Machine-readable reason when the move fails
        reason: Human-readable explanation
    """
    unit_id: str
    success: bool
    old_pos: GridPos
    new_pos: GridPos
    move_type: MoveType
    distance: float = 0.0
    allowance: int = 0
    heat_generated: int = 0
    error_code: Optional[str] = None
    reason: str = ""

    @property
    def legal(self) -> bool:
        return self.success

    def to_dict(self) -> Dict[str, Any]:
        """Serialize move result to a plain dict."""
        return {
            "unit_id": self.unit_id,
            "success": self.success,
            "old_pos": list(self.old_pos),
            "new_pos": list(self.new_pos),
            "move_type": str(self.move_type),
            "distance": round(self.distance, 3),
            "allowance": self.allowance,
            "heat_generated": self.heat_generated,
            "error_code": self.error_code,
            "reason": self.reason,
        }


class MovementResolver:
    """
    Stateless resolver for movement.

    ``validate`` is pure and can answer "could this unit move there?"
    without side effects; ``resolve`` validates first and only then mutates.
    """

    def terrain_multiplier(
        self, state: GameState, unit: Unit, destination: GridPos, move_type: MoveType
    ) -> float:
        """
        Movement multiplier of the destination hex for this unit.

        Vehicles use their subtype table; the MODIFY_MOVEMENT_COST hooks
        (VTOL, jump jets) may then override it. 0 means impassable.
        """
        terrain = state.battlefield.terrain_at(destination)
        subtype = unit.vehicle_subtype if unit.is_vehicle else None
        multiplier = movement_modifier(terrain, subtype)

        if (
            unit.is_vehicle
            and terrain == Terrain.WATER
            and subtype not in (VehicleSubtype.HOVER, VehicleSubtype.VTOL)
        ):
            if not has_capability(unit, Capability.AMPHIBIOUS):
                return 0.0
            multiplier = movement_modifier(terrain)

        ctx = HookContext(state=state, move_type=move_type, extra={"terrain": terrain})
        return float(apply_all(unit, Hook.MODIFY_MOVEMENT_COST, multiplier, ctx))

    def allowance(
        self, state: GameState, unit: Unit, move_type: MoveType, destination: Optional[GridPos] = None
    ) -> int:
        """
        Maximum distance for a move type after damage, heat and terrain.

        The floor of 2 never applies to immobilized units.
        """
        if unit.has_effect(StatusEffect.IMMOBILIZED):
            return 0
        allowance = float(unit.movement_allowance(move_type))
        allowance -= unit.status.movement_hits * MOVEMENT_HIT_PENALTY
        if move_type != MoveType.JUMP:
            allowance = math.floor(allowance * engine_movement_factor(unit))
        if unit.has_effect(StatusEffect.HEAT_MOVEMENT_PENALTY):
            allowance -= HEAT_MOVEMENT_PENALTY
        if destination is not None:
            allowance = math.floor(allowance * self.terrain_multiplier(state, unit, destination, move_type))
        return max(MINIMUM_ALLOWANCE, int(allowance))

    def validate(
        self,
        state: GameState,
        unit_id: str,
        destination: GridPos,
        move_type: MoveType = MoveType.WALK,
        elevation: Optional[int] = None,
    ) -> Tuple[ActionValidation, Optional[Unit], float, int]:
        """
        Check a move without performing it.

        Returns:
            (validation, unit, distance, allowance)
        """
        validation = validate_phase(state, Phase.MOVEMENT, "Movement")
        if not validation.valid:
            return validation, state.get_unit(unit_id), 0.0, 0

        validation, unit = lookup_actor(state, unit_id)
        if not validation.valid:
            return validation, unit, 0.0, 0

        def fail(code: str, message: str) -> Tuple[ActionValidation, Unit, float, int]:
            return ActionValidation.fail(code, message), unit, distance, allowance

        distance = state.grid.distance(unit.position, destination)
        allowance = 0

        if unit.has_effect(StatusEffect.IMMOBILIZED):
            return fail("IMMOBILIZED", f"{unit.label()} is immobilized")
        if unit.has_effect(StatusEffect.GRAPPLED):
            return fail("IMMOBILIZED", f"{unit.label()} is held in a grapple")
        if unit.status.has_moved:
            return fail("ALREADY_MOVED", f"{unit.label()} has already moved this round")
        if not state.grid.in_bounds(destination):
            return fail("OUT_OF_BOUNDS", f"{destination} is off the battlefield")

        if move_type == MoveType.JUMP:
            if unit.stats.movement.jump <= 0:
                return fail("NO_CAPABILITY", f"{unit.label()} has no jump capability")
            if distance < 1:
                return fail("TOO_FAR", "A jump must cover at least 1 hex")

        if unit.is_vtol:
            target_elevation = elevation if elevation is not None else max(MIN_VTOL_ELEVATION, unit.status.elevation)
            if not MIN_VTOL_ELEVATION <= target_elevation <= MAX_VTOL_ELEVATION:
                return fail(
                    "INVALID_ELEVATION",
                    f"VTOL elevation must be between {MIN_VTOL_ELEVATION} and {MAX_VTOL_ELEVATION}"
                )
        else:
            target_elevation = 0

        if self.terrain_multiplier(state, unit, destination, move_type) <= 0:
            terrain = state.battlefield.terrain_at(destination)
            return fail("IMPASSABLE", f"{terrain} is impassable for {unit.label()}")

        allowance = self.allowance(state, unit, move_type, destination)
        if distance > allowance:
            return fail("TOO_FAR", f"Distance {distance:.1f} exceeds allowance {allowance}")

        blocker = self._blocking_unit(state, unit, destination, target_elevation)
        if blocker is not None:
            return fail("OCCUPIED", f"{destination} is occupied by {blocker.label()}")

        return ActionValidation.success(), unit, distance, allowance

    def _blocking_unit(
        self, state: GameState, unit: Unit, destination: GridPos, elevation: int
    ) -> Optional[Unit]:
        """
        Living unit that stops ``unit`` from ending its move in ``destination``.

        VTOLs share hexes with ground units but not with a VTOL at the same
        elevation. Anti-mech infantry may close into a hex held only by
        enemy ground units, which is how leg attacks and swarms start.
        """
        for other in state.battlefield.units_at(destination):
            if other is unit:
                continue
            if unit.is_vtol:
                if other.is_vtol and other.status.elevation == elevation:
                    return other
                continue
            if (
                unit.is_infantry
                and other.side != unit.side
                and not other.is_infantry
                and not other.is_vtol
                and has_capability(unit, Capability.ANTI_MECH)
            ):
                continue
            return other
        return None

    def resolve(
        self,
        state: GameState,
        unit_id: str,
        destination: GridPos,
        facing: Optional[Facing] = None,
        move_type: MoveType = MoveType.WALK,
        elevation: Optional[int] = None,
    ) -> MoveResult:
        """
        Validate and perform a move.

        Args:
            state: Game being resolved (modified in place on success)
            unit_id: Moving unit
            destination: Target hex
            facing: New facing (unchanged when None)
            move_type: WALK, RUN or JUMP
            elevation: New VTOL elevation (current or 1 when None)

        Returns:
            MoveResult; on failure nothing was changed
        """
        destination = tuple(destination)
        validation, unit, distance, allowance = self.validate(state, unit_id, destination, move_type, elevation)
        if not validation.valid:
            log.warning("Move rejected for %s: %s", unit_id, validation.message)
            old_pos = unit.position if unit is not None else destination
            return MoveResult(
                unit_id=unit_id,
                success=False,
                old_pos=old_pos,
                new_pos=old_pos,
                move_type=move_type,
                distance=distance,
                allowance=allowance,
                error_code=validation.error_code,
                reason=validation.message,
            )

        old_pos = unit.position
        unit.position = destination
        if facing is not None:
            unit.facing = facing
        if unit.is_vtol:
            unit.status.elevation = elevation if elevation is not None else max(MIN_VTOL_ELEVATION, unit.status.elevation)
        unit.status.has_moved = True
        unit.status.move_type = move_type
        unit.status.move_distance = distance

        heat = 0
        if unit.is_mech:
            heat = add_heat(
                state, unit, movement_heat(move_type, distance, state.rules.jump_heat_rule),
                source=f"{move_type} movement",
            ).added

        state.record(
            f"{unit.name} {move_type}s from {old_pos} to {destination}",
            unit_id=unit.id, old_pos=list(old_pos), new_pos=list(destination),
            move_type=str(move_type), distance=round(distance, 3), heat=heat,
        )
        log.info("%s %s %s -> %s (%.1f of %d)", unit.label(), move_type, old_pos, destination, distance, allowance)
        return MoveResult(
            unit_id=unit.id,
            success=True,
            old_pos=old_pos,
            new_pos=destination,
            move_type=move_type,
            distance=distance,
            allowance=allowance,
            heat_generated=heat,
            reason=f"{unit.label()} moved to {destination}",
        )
