"""
Ability hook points.

A hook is a named extension point in the rules pipeline. Ability
implementations fill in only the hooks they care about; the pipeline
never names a specific ability.

Every hook has the signature ``(unit, value, ctx) -> value``. For veto hooks
the value is a bool and any True wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from ..core.types import AttackType, CriticalEffect, MoveType, RangeBand

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState


class Hook(Enum):
    """Extension points consulted by the rules pipeline."""
    MODIFY_ATTACK_ROLL = "modify_attack_roll"
    MODIFY_TARGET_MOVEMENT_MODIFIER = "modify_target_movement_modifier"
    MODIFY_INCOMING_DAMAGE = "modify_incoming_damage"
    MODIFY_INITIATIVE = "modify_initiative"
    MODIFY_CRITICAL_ROLL = "modify_critical_roll"
    PREVENT_CRITICAL_TYPE = "prevent_critical_type"
    MODIFY_MOVEMENT_COST = "modify_movement_cost"
    MELEE_DAMAGE = "melee_damage"

    def __str__(self) -> str:
        return self.value


class HookRole(Enum):
    """Which side of an interaction the hook owner is on."""
    ATTACKER = "attacker"
    DEFENDER = "defender"
    SELF = "self"

    def __str__(self) -> str:
        return self.value


@dataclass
class HookContext:
    """
    Read-only facts a hook may inspect.

    Attributes:
        state: The game being resolved
        role: The hook owner's side of the interaction
        attacker: Attacking unit, when there is one
        target: Defending unit, when there is one
        attack_type: Delivery type of the damage or attack
        range_band: Ranged band, for ranged attacks
        move_type: Movement mode, for movement-cost hooks
        critical_effect: Table effect name, for critical hooks
        extra: Free-form values for variant-specific hooks
    """
    state: Optional[GameState] = None
    role: HookRole = HookRole.SELF
    attacker: Optional[Unit] = None
    target: Optional[Unit] = None
    attack_type: Optional[AttackType] = None
    range_band: Optional[RangeBand] = None
    move_type: Optional[MoveType] = None
    critical_effect: Optional[CriticalEffect] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_missile(self) -> bool:
        return self.attack_type in (AttackType.MISSILE, AttackType.INDIRECT)


HookFn = Callable[["Unit", Any, HookContext], Any]
