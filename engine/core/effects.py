"""
Status effects carried by units.

Effects are enum members grouped into categories, so subsystems can clear
everything they own (e.g. all heat flags) in one call instead of filtering
strings by prefix.
"""

from __future__ import annotations
from enum import Enum
from typing import Iterable, Iterator, List, Set


class EffectCategory(Enum):
    """Who owns an effect and when it is cleared."""
    TERMINAL = "terminal"    # never cleared
    CONDITION = "condition"  # lasting damage/posture, cleared by specific rules
    HEAT = "heat"            # recomputed whenever heat changes
    ROUND = "round"          # cleared at the start of every round


class StatusEffect(Enum):
    """Every status a unit may carry."""
    DESTROYED = ("DESTROYED", EffectCategory.TERMINAL)
    SHUTDOWN = ("SHUTDOWN", EffectCategory.CONDITION)
    IMMOBILIZED = ("IMMOBILIZED", EffectCategory.CONDITION)
    PRONE = ("PRONE", EffectCategory.CONDITION)
    SENSORS_DAMAGED = ("SENSORS_DAMAGED", EffectCategory.CONDITION)
    HEAT_ATTACK_PENALTY_1 = ("HEAT_ATTACK_PENALTY_1", EffectCategory.HEAT)
    HEAT_ATTACK_PENALTY_2 = ("HEAT_ATTACK_PENALTY_2", EffectCategory.HEAT)
    HEAT_MOVEMENT_PENALTY = ("HEAT_MOVEMENT_PENALTY", EffectCategory.HEAT)
    HEAT_SHUTDOWN_RISK = ("HEAT_SHUTDOWN_RISK", EffectCategory.HEAT)
    HEAT_AUTO_DAMAGE = ("HEAT_AUTO_DAMAGE", EffectCategory.HEAT)
    DEFENSIVE_STANCE = ("DEFENSIVE_STANCE", EffectCategory.ROUND)
    GRAPPLED = ("GRAPPLED", EffectCategory.ROUND)

    def __init__(self, label: str, category: EffectCategory):
        self.label = label
        self.category = category

    def __str__(self) -> str:
        return self.label

    @classmethod
    def from_label(cls, label: str) -> StatusEffect:
        for effect in cls:
            if effect.label == label:
                return effect
        raise ValueError(f"Unknown status effect: {label}")


class StatusEffects:
    """
    A set of StatusEffect members with category-aware removal.

    Iteration follows enum declaration order so serialized output and logs
    are stable.
    """

    def __init__(self, effects: Iterable[StatusEffect] = ()):
        self._effects: Set[StatusEffect] = set(effects)

    def add(self, effect: StatusEffect) -> None:
        self._effects.add(effect)

    def discard(self, effect: StatusEffect) -> None:
        self._effects.discard(effect)

    def has(self, effect: StatusEffect) -> bool:
        return effect in self._effects

    def in_category(self, category: EffectCategory) -> List[StatusEffect]:
        """Effects currently held from one category."""
        return [e for e in self if e.category == category]

    def clear_category(self, category: EffectCategory) -> List[StatusEffect]:
        """
        Remove every effect of a category.

        Returns:
            The effects that were removed
        """
        removed = self.in_category(category)
        for effect in removed:
            self._effects.discard(effect)
        return removed

    def replace_category(self, category: EffectCategory, effects: Iterable[StatusEffect]) -> None:
        """Swap all effects of a category for a freshly computed set."""
        self.clear_category(category)
        for effect in effects:
            if effect.category != category:
                raise ValueError(f"{effect} is not a {category.value} effect")
            self._effects.add(effect)

    def to_list(self) -> List[str]:
        return [e.label for e in self]

    def __contains__(self, effect: object) -> bool:
        return effect in self._effects

    def __iter__(self) -> Iterator[StatusEffect]:
        return iter(sorted(self._effects, key=lambda e: list(StatusEffect).index(e)))

    def __len__(self) -> int:
        return len(self._effects)

    def __repr__(self) -> str:
        return f"StatusEffects({self.to_list()})"
