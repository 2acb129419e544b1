"""
Core types, status effects and result objects for the rules engine.
"""

# Instead of from engine.core.types import Side, you can do: from engine.core import Side
from .effects import EffectCategory, StatusEffect, StatusEffects
from .errors import DiceExhausted, EngineError, InvariantViolation
from .results import AttackResult, CriticalResult, DamageResult, InitiativeResult, RollCheck, RollDetails
from .types import (
    AbilityCode,
    ActionValidation,
    AdvancedMeleeVariant,
    AntiVehicleVariant,
    AttackType,
    Facing,
    GameResult,
    GridPos,
    MeleeVariant,
    MoveType,
    Phase,
    RangeBand,
    Side,
    UnitKind,
    VehicleSubtype,
)

__all__ = [
    "AbilityCode",
    "ActionValidation",
    "AdvancedMeleeVariant",
    "AntiVehicleVariant",
    "AttackResult",
    "AttackType",
    "CriticalResult",
    "DamageResult",
    "DiceExhausted",
    "EffectCategory",
    "EngineError",
    "Facing",
    "GameResult",
    "GridPos",
    "InitiativeResult",
    "InvariantViolation",
    "MeleeVariant",
    "MoveType",
    "Phase",
    "RangeBand",
    "RollCheck",
    "RollDetails",
    "Side",
    "StatusEffect",
    "StatusEffects",
    "UnitKind",
    "VehicleSubtype",
]
