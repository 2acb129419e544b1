"""
Utility modules for the rules engine.
"""

from .dice import DiceRoll, DiceRoller, ScriptedDice
from .id_generator import IDGenerator

__all__ = ["DiceRoll", "DiceRoller", "IDGenerator", "ScriptedDice"]
