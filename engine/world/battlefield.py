"""
Battlefield - grid, terrain lookup and the unit collection.

The battlefield exclusively owns unit lifetime. Units are added once and
never removed; destroyed units stay in the collection flagged DESTROYED.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from ..core.types import GridPos, Side
from ..units.unit import Unit
from .grid import DEFAULT_HEIGHT, DEFAULT_WIDTH, Grid
from .terrain import Terrain, Weather


class Battlefield:
    """
    Spatial state of one game.

    Attributes:
        grid: The fixed-size grid
        weather: Current weather
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT, weather: Weather = Weather.CLEAR):
        self.grid = Grid(width, height)
        self.weather = weather
        self._terrain: Dict[GridPos, Terrain] = {}
        # Insertion order is the canonical unit order for scans and logs.
        self._units: Dict[str, Unit] = {}

    # ========================================================================
    # TERRAIN
    # ========================================================================

    def terrain_at(self, pos: GridPos) -> Terrain:
        """Terrain of a hex; hexes never set are clear."""
        return self._terrain.get(pos, Terrain.CLEAR)

    def set_terrain(self, pos: GridPos, terrain: Union[Terrain, str]) -> None:
        """
        Set the terrain of a hex.

        Raises:
            ValueError: If the position is off-grid or the terrain unknown
        """
        if not self.grid.in_bounds(pos):
            raise ValueError(f"Terrain position out of bounds: {pos}")
        if isinstance(terrain, str):
            terrain = Terrain(terrain)
        self._terrain[pos] = terrain

    def terrain_map(self) -> Dict[GridPos, Terrain]:
        return dict(self._terrain)

    # ========================================================================
    # UNITS
    # ========================================================================

    def add_unit(self, unit: Unit) -> str:
        """
        Place a unit on the battlefield.

        Raises:
            ValueError: If the id is taken or the position is off-grid
        """
        if unit.id in self._units:
            raise ValueError(f"Duplicate unit id: {unit.id}")
        if not self.grid.in_bounds(unit.position):
            raise ValueError(f"Unit position out of bounds: {unit.position}")
        self._units[unit.id] = unit
        return unit.id

    def get_unit(self, unit_id: str) -> Optional[Unit]:
        return self._units.get(unit_id)

    def all_units(self) -> List[Unit]:
        """All units, destroyed included, in insertion order."""
        return list(self._units.values())

    def living_units(self) -> List[Unit]:
        return [u for u in self._units.values() if u.alive]

    def side_units(self, side: Side, alive_only: bool = True) -> List[Unit]:
        units = [u for u in self._units.values() if u.side == side]
        if alive_only:
            units = [u for u in units if u.alive]
        return units

    def units_at(self, pos: GridPos) -> List[Unit]:
        """Living units standing in a hex."""
        return [u for u in self._units.values() if u.alive and u.position == pos]

    def is_occupied(self, pos: GridPos, *, ignore: Optional[Unit] = None) -> bool:
        return any(u is not ignore for u in self.units_at(pos))

    def to_dict(self) -> Dict[str, object]:
        return {
            "width": self.grid.width,
            "height": self.grid.height,
            "weather": str(self.weather),
            "terrain": [
                {"position": list(pos), "terrain": str(t)}
                for pos, t in sorted(self._terrain.items())
            ],
            "units": [u.to_dict() for u in self._units.values()],
        }
