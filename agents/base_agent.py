"""
Base agent interface.

Agents look at the game and produce commands for their own side. They
never mutate the state; the dispatcher applies whatever they return.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from engine.core.types import Side
from engine.world.state import GameState

from .commands import Command


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    Subclasses must implement:
    - get_commands(): Produce commands for the current phase

    Attributes:
        side: The side this agent controls (PLAYER or AI)
        name: Agent name for logging/identification
    """

    def __init__(self, side: Side, name: Optional[str] = None):
        self.side = side
        self.name = name or self.__class__.__name__

    @abstractmethod
    def get_commands(self, state: GameState, **kwargs: Any) -> Tuple[List[Command], Dict[str, Any]]:
        """
        Decide this side's commands for the current phase.

        Called once per side per MOVEMENT and COMBAT phase. Commands for
        units of the other side, or illegal commands, are rejected by the
        dispatcher and logged; they never abort the phase.

        Args:
            state: Current game (read-only for agents)

        Returns:
            Tuple of (commands, metadata)
        """

    def reset(self) -> None:
        """
        Reset agent state between games.

        Override if your agent keeps memory across calls.
        """

    def own_units(self, state: GameState):
        return state.battlefield.side_units(self.side)

    def __str__(self) -> str:
        return f"{self.name} ({self.side})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(side={self.side}, name='{self.name}')"
