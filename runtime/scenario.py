"""
Scenario description used to set up a game.

A scenario is plain data (grid, weather, terrain, deployments, agents)
so it can arrive over HTTP or from a JSON file and be validated by
pydantic before anything touches the engine.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from agents.spec import AgentSpec
from engine.core.types import Facing, Side
from engine.game import add_unit, create_game, set_terrain
from engine.units.templates import UNIT_TEMPLATES
from engine.world.state import GameState


class UnitPlacement(BaseModel):
    """One unit to deploy during SETUP."""
    template: str = Field(description="Template key, e.g. 'atlas' or 'anti-mech-infantry'")
    side: Literal["player", "ai"]
    x: int
    y: int
    facing: Literal["N", "NE", "E", "SE", "S", "SW", "W", "NW"] = "N"
    name: Optional[str] = None
    skill: Optional[int] = None

    @field_validator("template")
    @classmethod
    def _known_template(cls, value: str) -> str:
        if value.lower() not in UNIT_TEMPLATES:
            raise ValueError(f"Unknown template '{value}'")
        return value.lower()


class TerrainPatch(BaseModel):
    x: int
    y: int
    terrain: str


class AgentConfig(BaseModel):
    type: str = "random"
    side: Literal["player", "ai"]
    name: Optional[str] = None
    init_params: Dict[str, Any] = Field(default_factory=dict)
    act_params: Dict[str, Any] = Field(default_factory=dict)

    def to_spec(self) -> AgentSpec:
        return AgentSpec.from_dict(self.model_dump())


class Scenario(BaseModel):
    """
    Complete setup for one game.

    Unset grid size falls back to the engine settings. Sides without an
    agent entry are driven by the random agent.
    """
    width: Optional[int] = None
    height: Optional[int] = None
    seed: Optional[int] = None
    weather: str = "clear"
    jump_heat_rule: Optional[Literal["fixed", "distance"]] = None
    max_rounds: Optional[int] = Field(default=None, ge=1)
    terrain: List[TerrainPatch] = Field(default_factory=list)
    units: List[UnitPlacement] = Field(default_factory=list)
    agents: List[AgentConfig] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Scenario:
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    def build_state(self) -> GameState:
        """
        Create the game and apply terrain and deployments.

        Raises:
            ValueError: Off-grid placement or unknown terrain
        """
        state = create_game(
            self.width, self.height,
            seed=self.seed, weather=self.weather, jump_heat_rule=self.jump_heat_rule,
        )
        for patch in self.terrain:
            set_terrain(state, (patch.x, patch.y), patch.terrain)
        for placement in self.units:
            add_unit(
                state, placement.template, Side(placement.side), (placement.x, placement.y),
                facing=Facing[placement.facing], name=placement.name, skill=placement.skill,
            )
        return state

    def agent_specs(self) -> Dict[Side, AgentSpec]:
        specs = {Side(cfg.side): cfg.to_spec() for cfg in self.agents}
        for side in Side:
            specs.setdefault(side, AgentSpec(type="random", side=side))
        return specs
