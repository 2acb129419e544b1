"""
Grid - Board geometry for the battlefield.

Hexes are addressed by integer (x, y) pairs on a rectangular board:
- X increases to the RIGHT, Y increases UPWARD
- (0, 0) is the bottom-left hex; (width - 1, height - 1) the top-right

Two metrics are in play. Weapon range and movement cost use straight-line
(Euclidean) distance; contact (melee, swarming, pushes) uses king-move
(Chebyshev) distance, so diagonal hexes touch.
"""

from __future__ import annotations
import math
from ..core.types import GridPos

DEFAULT_WIDTH = 24
DEFAULT_HEIGHT = 24


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class Grid:
    """
    Rectangular board with no knowledge of units or terrain.

    Attributes:
        width: Number of columns
        height: Number of rows
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        """
        Raises:
            ValueError: If either dimension is not positive
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive: {width}x{height}")

        self.width = width
        self.height = height

    def in_bounds(self, pos: GridPos) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def distance(self, a: GridPos, b: GridPos) -> float:
        """Straight-line distance in hexes; used for range bands and movement."""
        return math.hypot(a[0] - b[0], a[1] - b[1])

    def chebyshev_distance(self, a: GridPos, b: GridPos) -> int:
        """King-move distance: max(|dx|, |dy|)."""
        return max(abs(a[0] - b[0]), abs(a[1] - b[1]))

    def is_adjacent(self, a: GridPos, b: GridPos) -> bool:
        """True when b touches a. A shared hex is not adjacency."""
        return self.chebyshev_distance(a, b) == 1

    def step_away(self, origin: GridPos, pos: GridPos) -> GridPos:
        """
        The hex one king-move beyond ``pos`` on the way out from ``origin``.

        Used to resolve pushes. The result may be off the board; callers
        check ``in_bounds`` before moving anything there.
        """
        return (
            pos[0] + _sign(pos[0] - origin[0]),
            pos[1] + _sign(pos[1] - origin[1]),
        )

    def positions_in_range(self, center: GridPos, max_range: float) -> list[GridPos]:
        """
        Every on-board hex within ``max_range`` straight-line hexes of ``center``.

        The center itself is included. Rows are scanned bottom to top so the
        order is stable for seeded agents.
        """
        cx, cy = center
        reach = int(math.ceil(max_range))
        return [
            (x, y)
            for y in range(max(0, cy - reach), min(self.height, cy + reach + 1))
            for x in range(max(0, cx - reach), min(self.width, cx + reach + 1))
            if self.distance(center, (x, y)) <= max_range
        ]

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height})"
