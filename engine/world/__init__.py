"""
World module - Battlefield, terrain, game state and the battle log.
"""

from .battle_log import BattleLog, LogEntry
from .battlefield import Battlefield
from .grid import Grid
from .state import GameState, JumpHeatRule, RuleSet, TurnState
from .terrain import Terrain, Weather

__all__ = [
    "BattleLog",
    "Battlefield",
    "GameState",
    "Grid",
    "JumpHeatRule",
    "LogEntry",
    "RuleSet",
    "Terrain",
    "TurnState",
    "Weather",
]
