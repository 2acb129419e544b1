"""
Terrain and weather rule tables.

Movement modifiers multiply a unit's allowance (0 means impassable);
combat modifiers add to ranged target numbers; melee modifiers add to the
attacker's melee target number.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from ..core.types import VehicleSubtype


class Terrain(Enum):
    """Terrain kinds that can occupy a hex."""
    CLEAR = "clear"
    LIGHT_WOODS = "light_woods"
    HEAVY_WOODS = "heavy_woods"
    WATER = "water"
    ROUGH = "rough"
    ROAD = "road"

    def __str__(self) -> str:
        return self.value

    @property
    def is_woods(self) -> bool:
        return self in (Terrain.LIGHT_WOODS, Terrain.HEAVY_WOODS)


@dataclass(frozen=True)
class TerrainProfile:
    movement_modifier: float
    combat_modifier: int
    melee_modifier: int


TERRAIN_TABLE: Dict[Terrain, TerrainProfile] = {
    Terrain.CLEAR: TerrainProfile(1.0, 0, 0),
    Terrain.LIGHT_WOODS: TerrainProfile(0.5, 1, 1),
    Terrain.HEAVY_WOODS: TerrainProfile(0.5, 2, 2),
    Terrain.WATER: TerrainProfile(0.5, 1, 1),
    Terrain.ROUGH: TerrainProfile(0.5, 1, 1),
    Terrain.ROAD: TerrainProfile(1.5, 0, 0),
}

# Per-subtype movement multipliers replacing the generic table for vehicles.
VEHICLE_MOVEMENT_MODIFIERS: Dict[VehicleSubtype, Dict[Terrain, float]] = {
    VehicleSubtype.TRACKED: {
        Terrain.CLEAR: 1.0,
        Terrain.LIGHT_WOODS: 0.7,
        Terrain.HEAVY_WOODS: 0.4,
        Terrain.WATER: 0.0,
        Terrain.ROUGH: 0.6,
        Terrain.ROAD: 1.3,
    },
    VehicleSubtype.WHEELED: {
        Terrain.CLEAR: 1.0,
        Terrain.LIGHT_WOODS: 0.5,
        Terrain.HEAVY_WOODS: 0.0,
        Terrain.WATER: 0.0,
        Terrain.ROUGH: 0.4,
        Terrain.ROAD: 1.5,
    },
    VehicleSubtype.HOVER: {
        Terrain.CLEAR: 1.0,
        Terrain.LIGHT_WOODS: 0.6,
        Terrain.HEAVY_WOODS: 0.3,
        Terrain.WATER: 1.0,
        Terrain.ROUGH: 0.7,
        Terrain.ROAD: 1.4,
    },
    VehicleSubtype.VTOL: {terrain: 1.0 for terrain in Terrain},
}


def terrain_profile(terrain: Terrain) -> TerrainProfile:
    return TERRAIN_TABLE[terrain]


def movement_modifier(terrain: Terrain, subtype: VehicleSubtype | None = None) -> float:
    """Movement multiplier for a hex, using the vehicle override when given."""
    if subtype is not None:
        return VEHICLE_MOVEMENT_MODIFIERS[subtype][terrain]
    return TERRAIN_TABLE[terrain].movement_modifier


class Weather(Enum):
    """Battlefield weather; only melee accuracy is affected."""
    CLEAR = "clear"
    RAIN = "rain"
    HEAVY_RAIN = "heavy_rain"
    SNOW = "snow"
    BLIZZARD = "blizzard"

    def __str__(self) -> str:
        return self.value

    @property
    def melee_modifier(self) -> int:
        return {
            Weather.CLEAR: 0,
            Weather.RAIN: 1,
            Weather.HEAVY_RAIN: 2,
            Weather.SNOW: 1,
            Weather.BLIZZARD: 2,
        }[self]
