"""
GameState - the explicit handle threaded through every engine call.

The GameState owns:
- The battlefield (grid, terrain, units)
- Turn state (phase, round, active side, last initiative)
- The dice stream
- The per-game rule toggles
- The battle log

There is no module-level "current game"; each game is one GameState.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..core.results import InitiativeResult
from ..core.types import Phase, Side
from ..units.unit import Unit
from ..utils.dice import DiceRoller
from ..utils.id_generator import IDGenerator
from .battle_log import BattleLog, LogEntry
from .battlefield import Battlefield
from .grid import DEFAULT_HEIGHT, DEFAULT_WIDTH
from .terrain import Weather


class JumpHeatRule(Enum):
    """
    How much heat a jump generates.

    FIXED: always 3.
    DISTANCE: max(3, hexes jumped).
    """
    FIXED = "fixed"
    DISTANCE = "distance"

    def __str__(self) -> str:
        return self.value


# Which jump-heat formula new games use unless told otherwise.
JUMP_HEAT_RULE = JumpHeatRule.FIXED


@dataclass
class RuleSet:
    """
    Rule toggles for one game.

    Attributes:
        jump_heat_rule: Jump heat formula
        strict: Raise on invariant violations instead of clamping
    """
    jump_heat_rule: JumpHeatRule = JUMP_HEAT_RULE
    strict: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"jump_heat_rule": str(self.jump_heat_rule), "strict": self.strict}


@dataclass
class TurnState:
    """Phase machine state."""
    phase: Phase = Phase.SETUP
    round: int = 0
    active_side: Side = Side.PLAYER
    initiative: Optional[InitiativeResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": str(self.phase),
            "round": self.round,
            "active_side": str(self.active_side),
            "initiative": self.initiative.to_dict() if self.initiative else None,
        }


class GameState:
    """
    Complete state of one game instance.

    Attributes:
        battlefield: Grid, terrain and units
        turn: Phase, round, active side and initiative
        dice: The game's single randomness stream
        rules: Rule toggles
        log: Append-only battle log
        ids: Unit id generator
    """

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        *,
        seed: Optional[int] = None,
        dice: Optional[DiceRoller] = None,
        rules: Optional[RuleSet] = None,
        weather: Weather = Weather.CLEAR,
    ):
        """
        Initialize a new game state.

        Args:
            width: Grid width
            height: Grid height
            seed: Seed for the default dice roller
            dice: Explicit dice source (overrides seed)
            rules: Rule toggles (defaults to RuleSet())
            weather: Starting weather
        """
        self.battlefield = Battlefield(width, height, weather)
        self.turn = TurnState()
        self.dice = dice if dice is not None else DiceRoller(seed)
        self.rules = rules or RuleSet()
        self.log = BattleLog()
        self.ids = IDGenerator()

    # ========================================================================
    # CONVENIENCE ACCESSORS
    # ========================================================================

    @property
    def phase(self) -> Phase:
        return self.turn.phase

    @property
    def round(self) -> int:
        return self.turn.round

    @property
    def grid(self):
        return self.battlefield.grid

    def get_unit(self, unit_id: str) -> Optional[Unit]:
        return self.battlefield.get_unit(unit_id)

    # ========================================================================
    # BATTLE LOG
    # ========================================================================

    def record(self, message: str, **data: Any) -> LogEntry:
        """Append a battle log entry stamped with the current round and phase."""
        return self.log.append(self.turn.round, str(self.turn.phase), message, data)

    # ========================================================================
    # SERIALIZATION
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the game state for display or transport.

        Returns:
            JSON-serializable snapshot (dice state excluded)
        """
        return {
            "battlefield": self.battlefield.to_dict(),
            "turn": self.turn.to_dict(),
            "rules": self.rules.to_dict(),
            "log_size": len(self.log),
        }
