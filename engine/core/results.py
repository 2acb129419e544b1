"""
Structured outcomes returned by the rules engine.

Every attack variant returns an AttackResult. Illegal attempts come back
with ``legal=False`` and a reason; dice-driven misses are legal results with
``hit=False``.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .types import Side


@dataclass
class RollDetails:
    """
    Everything that went into a to-hit decision.

    Attributes:
        dice: Individual die faces rolled
        natural: Sum of the dice before modifiers
        modifiers: Named additions to the roll side
        total: natural + sum(modifiers)
        target_number: Final number the total had to meet or beat
        target_modifiers: Named contributions to the target number
    """
    dice: List[int]
    natural: int
    total: int
    target_number: int
    modifiers: Dict[str, int] = field(default_factory=dict)
    target_modifiers: Dict[str, int] = field(default_factory=dict)

    @property
    def margin(self) -> int:
        """How far the total beat (positive) or missed (negative) the target."""
        return self.total - self.target_number

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dice": list(self.dice),
            "natural": self.natural,
            "total": self.total,
            "target_number": self.target_number,
            "modifiers": dict(self.modifiers),
            "target_modifiers": dict(self.target_modifiers),
        }


@dataclass
class DamageResult:
    """
    Outcome of pushing damage through the damage model.

    Attributes:
        unit_id: Unit that received the damage
        incoming: Damage before ability hooks
        applied: Damage after ability hooks
        armor_damage: Points absorbed by armor
        structure_damage: Points that reached structure
        destroyed: Whether the unit carries DESTROYED afterwards
        squad_ratio: Infantry strength ratio after the hit (None for others)
    """
    unit_id: str
    incoming: int
    applied: int
    armor_damage: int = 0
    structure_damage: int = 0
    destroyed: bool = False
    squad_ratio: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "unit_id": self.unit_id,
            "incoming": self.incoming,
            "applied": self.applied,
            "armor_damage": self.armor_damage,
            "structure_damage": self.structure_damage,
            "destroyed": self.destroyed,
        }
        if self.squad_ratio is not None:
            data["squad_ratio"] = self.squad_ratio
        return data


@dataclass
class CriticalResult:
    """
    Outcome of one critical-hit check.

    Attributes:
        unit_id: Unit that was checked
        roll: Raw 2d6 roll (0 when the table needs no roll)
        modified_roll: Roll after hooks and clamping
        effect: Name of the table effect, None when nothing applied
        applied: Whether the effect landed
        prevented: Whether an ability vetoed it
        description: Human-readable effect text
    """
    unit_id: str
    roll: int
    modified_roll: int
    effect: Optional[str] = None
    applied: bool = False
    prevented: bool = False
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "roll": self.roll,
            "modified_roll": self.modified_roll,
            "effect": self.effect,
            "applied": self.applied,
            "prevented": self.prevented,
            "description": self.description,
        }


@dataclass
class AttackResult:
    """
    Common contract for every attack variant.

    Attributes:
        attack: Variant name ("ranged", "punch", "leg_attack", ...)
        attacker_id: Attacking unit id
        target_id: Target unit id (None for self-only actions)
        legal: False when the rules forbid the attempt (nothing was mutated)
        error_code: Machine-readable reason code for illegal attempts
        reason: Human-readable explanation for illegal attempts
        hit: Whether the attack landed (None when illegal)
        roll: To-hit roll details
        damage: Damage delivered to the target (after hooks)
        self_damage: Damage the attacker inflicted on itself
        critical_triggered: Whether any critical check was made
        criticals: Results of the critical checks
        effects: Human-readable secondary effects, in resolution order
        heat_generated: Heat the attacker gained
        details: Variant-specific extras (range band, hit location, ...)
    """
    attack: str
    attacker_id: str
    target_id: Optional[str]
    legal: bool = True
    error_code: Optional[str] = None
    reason: Optional[str] = None
    hit: Optional[bool] = None
    roll: Optional[RollDetails] = None
    damage: int = 0
    self_damage: int = 0
    critical_triggered: bool = False
    criticals: List[CriticalResult] = field(default_factory=list)
    effects: List[str] = field(default_factory=list)
    heat_generated: int = 0
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def illegal(
        cls,
        attack: str,
        attacker_id: str,
        target_id: Optional[str],
        error_code: str,
        reason: str,
    ) -> AttackResult:
        """Build a rejected result; no state was touched."""
        return cls(
            attack=attack,
            attacker_id=attacker_id,
            target_id=target_id,
            legal=False,
            error_code=error_code,
            reason=reason,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return {
            "attack": self.attack,
            "attacker_id": self.attacker_id,
            "target_id": self.target_id,
            "legal": self.legal,
            "error_code": self.error_code,
            "reason": self.reason,
            "hit": self.hit,
            "roll": self.roll.to_dict() if self.roll else None,
            "damage": self.damage,
            "self_damage": self.self_damage,
            "critical_triggered": self.critical_triggered,
            "criticals": [c.to_dict() for c in self.criticals],
            "effects": list(self.effects),
            "heat_generated": self.heat_generated,
            "details": dict(self.details),
        }


@dataclass
class InitiativeResult:
    """
    Outcome of an initiative roll.

    Attributes:
        legal: False when rolled outside the INITIATIVE phase
        winner: Side that won (becomes the active side)
        rolls: Raw die totals per side
        bonuses: Ability bonuses per side
        totals: rolls + bonuses per side
        tie_broken: Whether a coin flip decided an exact tie
        round: Round the initiative belongs to
    """
    legal: bool = True
    winner: Optional[Side] = None
    rolls: Dict[str, int] = field(default_factory=dict)
    bonuses: Dict[str, int] = field(default_factory=dict)
    totals: Dict[str, int] = field(default_factory=dict)
    tie_broken: bool = False
    round: int = 0
    error_code: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "legal": self.legal,
            "winner": str(self.winner) if self.winner is not None else None,
            "rolls": dict(self.rolls),
            "bonuses": dict(self.bonuses),
            "totals": dict(self.totals),
            "tie_broken": self.tie_broken,
            "round": self.round,
            "error_code": self.error_code,
            "reason": self.reason,
        }


@dataclass
class RollCheck:
    """
    A single 2d6-against-a-threshold check (shutdown, startup, piloting).

    Attributes:
        unit_id: Unit making the check
        check: Check name ("shutdown", "startup", "piloting", ...)
        dice: Faces rolled
        roll: Sum of the faces
        target: Number the roll had to meet or beat
        success: Whether the unit passed
        legal: False when the check could not be attempted at all
        reason: Why an attempt was not legal
    """
    unit_id: str
    check: str
    dice: List[int] = field(default_factory=list)
    roll: int = 0
    target: int = 0
    success: bool = False
    legal: bool = True
    error_code: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "check": self.check,
            "dice": list(self.dice),
            "roll": self.roll,
            "target": self.target,
            "success": self.success,
            "legal": self.legal,
            "error_code": self.error_code,
            "reason": self.reason,
        }
