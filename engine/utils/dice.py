"""
Dice sources.

The engine never calls the ``random`` module directly; every roll goes
through a DiceRoller held on the game state so a game can be replayed
from a seed, or driven by an explicit face sequence under test.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..core.errors import DiceExhausted


@dataclass(frozen=True)
class DiceRoll:
    """Individual faces plus their sum."""
    faces: tuple[int, ...]

    @property
    def total(self) -> int:
        return sum(self.faces)

    def to_list(self) -> List[int]:
        return list(self.faces)


class DiceRoller:
    """
    Uniform dice backed by a private ``random.Random``.

    All randomness of one game instance is drawn from a single ordered
    stream, so two rollers built with the same seed produce identical games.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def roll_die(self, sides: int = 6) -> int:
        """Roll one die with faces 1..sides."""
        if sides < 1:
            raise ValueError(f"A die needs at least one side, got {sides}")
        return self._rng.randint(1, sides)

    def roll(self, count: int = 2, sides: int = 6) -> DiceRoll:
        """Roll ``count`` dice and keep the faces."""
        return DiceRoll(tuple(self.roll_die(sides) for _ in range(count)))

    def roll_2d6(self) -> DiceRoll:
        return self.roll(2, 6)

    def coin_flip(self) -> bool:
        """Fair tiebreak: True or False with equal probability."""
        return self.roll_die(2) == 1


class ScriptedDice(DiceRoller):
    """
    Dice that replay a fixed sequence of faces.

    Every die consumes one value from the script, including the die used by
    ``coin_flip`` (1 means heads/True). Values are not range-checked against
    ``sides`` so tests can state outcomes directly.

    Usage:
        dice = ScriptedDice([6, 6, 3, 4])
        dice.roll_2d6().total   # 12
        dice.roll_2d6().total   # 7
    """

    def __init__(self, faces: Iterable[int] = ()):
        super().__init__(seed=0)
        self._faces = deque(faces)

    def push(self, *faces: int) -> None:
        """Append more faces to the script."""
        self._faces.extend(faces)

    @property
    def remaining(self) -> int:
        return len(self._faces)

    def roll_die(self, sides: int = 6) -> int:
        if not self._faces:
            raise DiceExhausted(f"Scripted dice exhausted (wanted a d{sides})")
        return self._faces.popleft()
