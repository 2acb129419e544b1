"""
Command schema shared by agents, the dispatcher and the HTTP API.

A command names one unit and one action. The schema only checks shape;
whether the action is legal is decided by the engine when it is applied.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

from engine.core.types import AdvancedMeleeVariant, AntiVehicleVariant, MeleeVariant

MELEE_VARIANTS: Tuple[str, ...] = tuple(v.value for v in MeleeVariant) + tuple(v.value for v in AdvancedMeleeVariant)
ANTI_VEHICLE_VARIANTS: Tuple[str, ...] = tuple(v.value for v in AntiVehicleVariant)


class MoveCommand(BaseModel):
    """Move a unit to a hex during the MOVEMENT phase."""
    type: Literal["MOVE"] = "MOVE"
    unit_id: str = Field(description="ID of the unit to move")
    x: int = Field(description="Destination column")
    y: int = Field(description="Destination row")
    move_type: Literal["walk", "run", "jump"] = Field(default="walk", description="Movement mode")
    facing: Optional[Literal["N", "NE", "E", "SE", "S", "SW", "W", "NW"]] = Field(
        default=None, description="New facing; unchanged when omitted"
    )
    elevation: Optional[int] = Field(default=None, description="VTOL elevation 1-6")


class FireCommand(BaseModel):
    """Ranged attack during the COMBAT phase."""
    type: Literal["FIRE"] = "FIRE"
    unit_id: str = Field(description="ID of the unit that will fire")
    target_id: str = Field(description="ID of the enemy unit to target")
    indirect: bool = Field(default=False, description="Fire indirectly (indirect-fire units only)")
    overheat: bool = Field(default=False, description="Overheat for +2 heat")


class MeleeCommand(BaseModel):
    """Physical attack (or defensive stance) during the COMBAT phase."""
    type: Literal["MELEE"] = "MELEE"
    unit_id: str = Field(description="ID of the attacking unit")
    target_id: Optional[str] = Field(default=None, description="Adjacent enemy; omit for defensive_stance")
    variant: str = Field(default="standard", description=f"One of: {', '.join(MELEE_VARIANTS)}")


class AntiVehicleCommand(BaseModel):
    """Anti-vehicle infantry attack during the COMBAT phase."""
    type: Literal["ANTI_VEHICLE"] = "ANTI_VEHICLE"
    unit_id: str = Field(description="ID of the anti-mech infantry squad")
    target_id: str = Field(description="ID of the mech or ground vehicle")
    variant: Literal["leg_attack", "swarm", "mine", "demo_charge"] = Field(description="Attack variant")


class StartupCommand(BaseModel):
    """Try to restart a shut-down mech."""
    type: Literal["STARTUP"] = "STARTUP"
    unit_id: str = Field(description="ID of the shut-down mech")


class WaitCommand(BaseModel):
    """Hold position and skip this phase."""
    type: Literal["WAIT"] = "WAIT"
    unit_id: str = Field(description="ID of the unit that will wait")


Command = Annotated[
    Union[MoveCommand, FireCommand, MeleeCommand, AntiVehicleCommand, StartupCommand, WaitCommand],
    Field(discriminator="type"),
]


class UnitOrder(BaseModel):
    """A single unit's command with its justification."""
    reasoning: str = Field(default="", description="Brief rationale for this command")
    command: Command = Field(description="The command this unit will execute")


class TurnOrders(BaseModel):
    """Orders for one side for the current phase."""
    analysis: str = Field(default="", description="Short assessment of the situation")
    orders: List[UnitOrder] = Field(default_factory=list, description="One order per unit that acts")

    def commands(self) -> List[Command]:
        return [order.command for order in self.orders]
