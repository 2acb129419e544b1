"""
Game-over checks.

A side loses when every unit it fielded carries DESTROYED. The runner may
also impose a round limit, after which the game is a draw.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..core.types import GameResult, Side

if TYPE_CHECKING:
    from ..world.state import GameState


@dataclass
class GameOverResult:
    """
    Result of a game-over check.

    Attributes:
        result: Game outcome (IN_PROGRESS, PLAYER_WINS, AI_WINS, DRAW)
        reason: Human-readable explanation of the outcome
        winner: Winning side (None if draw or in progress)
    """
    result: GameResult
    reason: str
    winner: Optional[Side] = None

    @property
    def over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS

    def __str__(self) -> str:
        if not self.over:
            return "Game in progress"
        return f"{self.result}: {self.reason}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "over": self.over,
            "result": self.result.name,
            "reason": self.reason,
            "winner": str(self.winner) if self.winner else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameOverResult:
        winner = data.get("winner")
        return cls(
            result=GameResult[data["result"]],
            reason=data.get("reason", ""),
            winner=Side(winner) if winner else None,
        )


IN_PROGRESS = GameOverResult(GameResult.IN_PROGRESS, "Both sides have surviving units")


def check_game_over(state: GameState) -> GameOverResult:
    """
    Check whether one side has lost every unit.

    Games where a side has fielded nothing yet (still being set up) are
    never over. If both sides are wiped out at once the game is a draw.
    """
    player_units = state.battlefield.side_units(Side.PLAYER, alive_only=False)
    ai_units = state.battlefield.side_units(Side.AI, alive_only=False)
    if not player_units or not ai_units:
        return GameOverResult(GameResult.IN_PROGRESS, "A side has no units deployed")

    player_alive = any(u.alive for u in player_units)
    ai_alive = any(u.alive for u in ai_units)

    if not player_alive and not ai_alive:
        return GameOverResult(GameResult.DRAW, "All units destroyed - DRAW")
    if not player_alive:
        return GameOverResult(GameResult.AI_WINS, "All player units destroyed - AI WINS", Side.AI)
    if not ai_alive:
        return GameOverResult(GameResult.PLAYER_WINS, "All AI units destroyed - PLAYER WINS", Side.PLAYER)
    return IN_PROGRESS


class VictoryConditions:
    """
    Game-over check with an optional round limit, used by the runner.

    Usage:
        checker = VictoryConditions(max_rounds=20)
        result = checker.check_all(state)
        if result.over:
            print(result.reason)
    """

    def __init__(self, max_rounds: Optional[int] = None):
        self._max_rounds = max_rounds

    @property
    def max_rounds(self) -> Optional[int]:
        return self._max_rounds

    def check_all(self, state: GameState) -> GameOverResult:
        """Elimination first, then the round limit."""
        result = check_game_over(state)
        if result.over:
            return result
        return self.check_round_limit(state.round)

    def check_round_limit(self, current_round: int) -> GameOverResult:
        if self._max_rounds is not None and current_round >= self._max_rounds:
            return GameOverResult(GameResult.DRAW, f"Round limit reached ({self._max_rounds}) - DRAW")
        return IN_PROGRESS
