"""
Unit model.

A Unit is plain data: identity, base stats fixed at construction, and a
mutable status block that only the mechanics modules write to. Rules logic
lives in ``engine.mechanics``; the helpers here are derived read-only views.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Union

from ..core.effects import StatusEffect, StatusEffects
from ..core.types import (
    AbilityCode,
    Facing,
    GridPos,
    HitLocation,
    InfantryEquipment,
    MeleeWeapon,
    MoveType,
    RangeBand,
    Side,
    UnitKind,
    VehicleSubtype,
)


# ============================================================================
# BASE STATS
# ============================================================================

@dataclass
class MovementProfile:
    """Movement allowances in hexes."""
    walk: int = 4
    run: int = 6
    jump: int = 0

    def for_move_type(self, move_type: MoveType) -> int:
        return {
            MoveType.WALK: self.walk,
            MoveType.RUN: self.run,
            MoveType.JUMP: self.jump,
        }[move_type]

    def to_dict(self) -> Dict[str, int]:
        return {"walk": self.walk, "run": self.run, "jump": self.jump}


@dataclass
class DamageProfile:
    """Weapon damage per range band."""
    short: int = 1
    medium: int = 1
    long: int = 0
    extreme: int = 0

    def for_band(self, band: RangeBand) -> int:
        return getattr(self, band.value)

    def to_dict(self) -> Dict[str, int]:
        return {
            "short": self.short,
            "medium": self.medium,
            "long": self.long,
            "extreme": self.extreme,
        }


@dataclass
class UnitStats:
    """
    Base stats, fixed once the unit is on the battlefield.

    Attributes:
        movement: Walk/run/jump allowances
        armor: Armor points
        structure: Structure points
        skill: Gunnery/piloting skill (lower is better)
        tmm: Target movement modifier
        damage: Damage by range band
        heat_capacity: Heat scale maximum (mechs only)
        tonnage: Weight used by the physical attack formulas
        troops: Nominal troop count (infantry only)
        equipment: Infantry kit carried at deployment
        melee_weapon: Hand-held melee weapon, if any
    """
    movement: MovementProfile = field(default_factory=MovementProfile)
    armor: int = 3
    structure: int = 1
    skill: int = 4
    tmm: int = 1
    damage: DamageProfile = field(default_factory=DamageProfile)
    heat_capacity: int = 4
    tonnage: int = 50
    troops: int = 0
    equipment: Dict[InfantryEquipment, int] = field(default_factory=dict)
    melee_weapon: Optional[MeleeWeapon] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "movement": self.movement.to_dict(),
            "armor": self.armor,
            "structure": self.structure,
            "skill": self.skill,
            "tmm": self.tmm,
            "damage": self.damage.to_dict(),
            "heat_capacity": self.heat_capacity,
            "tonnage": self.tonnage,
            "troops": self.troops,
            "equipment": {str(k): v for k, v in self.equipment.items()},
            "melee_weapon": str(self.melee_weapon) if self.melee_weapon else None,
        }


# ============================================================================
# MUTABLE STATUS
# ============================================================================

@dataclass
class DamageTrack:
    """Accumulated damage; armor never exceeds the stat, overflow goes to structure."""
    armor: int = 0
    structure: int = 0

    @property
    def total(self) -> int:
        return self.armor + self.structure


@dataclass
class CriticalRecord:
    """One entry of a unit's critical-hit history."""
    round: int
    roll: int
    effect: str

    def to_dict(self) -> Dict[str, Any]:
        return {"round": self.round, "roll": self.roll, "effect": self.effect}


@dataclass
class UnitStatus:
    """Everything about a unit that changes during play."""
    damage: DamageTrack = field(default_factory=DamageTrack)
    heat: int = 0
    effects: StatusEffects = field(default_factory=StatusEffects)
    criticals: List[CriticalRecord] = field(default_factory=list)

    # Critical damage counters
    engine_hits: int = 0
    fire_control_hits: int = 0
    movement_hits: int = 0
    weapon_hits: int = 0
    pilot_hits: int = 0
    damaged_locations: Set[HitLocation] = field(default_factory=set)

    # Infantry kit uses left
    equipment: Dict[InfantryEquipment, int] = field(default_factory=dict)

    # Per-round flags
    has_moved: bool = False
    move_type: Optional[MoveType] = None
    move_distance: float = 0.0
    has_fired: bool = False

    # VTOL altitude (0 for ground units)
    elevation: int = 0

    def reset_turn_flags(self) -> None:
        """Clear the per-round movement and attack flags."""
        self.has_moved = False
        self.move_type = None
        self.move_distance = 0.0
        self.has_fired = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "damage": {"armor": self.damage.armor, "structure": self.damage.structure},
            "heat": self.heat,
            "effects": self.effects.to_list(),
            "criticals": [c.to_dict() for c in self.criticals],
            "engine_hits": self.engine_hits,
            "fire_control_hits": self.fire_control_hits,
            "movement_hits": self.movement_hits,
            "weapon_hits": self.weapon_hits,
            "pilot_hits": self.pilot_hits,
            "damaged_locations": sorted(str(loc) for loc in self.damaged_locations),
            "equipment": {str(k): v for k, v in self.equipment.items()},
            "has_moved": self.has_moved,
            "move_type": str(self.move_type) if self.move_type else None,
            "move_distance": self.move_distance,
            "has_fired": self.has_fired,
            "elevation": self.elevation,
        }


# ============================================================================
# UNIT
# ============================================================================

@dataclass
class Unit:
    """
    A mech, ground vehicle or infantry squad on the battlefield.

    Units are never removed; destruction only adds the DESTROYED effect so
    the unit stays available for logs and post-battle review.
    """
    id: str
    name: str
    side: Side
    kind: UnitKind
    position: GridPos
    stats: UnitStats
    facing: Facing = Facing.N
    vehicle_subtype: Optional[VehicleSubtype] = None
    abilities: List[str] = field(default_factory=list)
    template: Optional[str] = None
    status: UnitStatus = field(default_factory=UnitStatus)

    def __post_init__(self) -> None:
        if not self.status.equipment:
            self.status.equipment = dict(self.stats.equipment)

    # ------------------------------------------------------------------
    # Identity helpers
    # ------------------------------------------------------------------

    def label(self) -> str:
        """Short display label, e.g. 'Atlas AS7-D#u3(player)'."""
        return f"{self.name}#{self.id}({self.side})"

    @property
    def is_mech(self) -> bool:
        return self.kind == UnitKind.MECH

    @property
    def is_vehicle(self) -> bool:
        return self.kind == UnitKind.VEHICLE

    @property
    def is_infantry(self) -> bool:
        return self.kind == UnitKind.INFANTRY

    @property
    def is_vtol(self) -> bool:
        return self.vehicle_subtype == VehicleSubtype.VTOL

    def has_ability(self, code: Union[AbilityCode, str]) -> bool:
        return str(code) in self.abilities

    def has_effect(self, effect: StatusEffect) -> bool:
        return effect in self.status.effects

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def destroyed(self) -> bool:
        return StatusEffect.DESTROYED in self.status.effects

    @property
    def alive(self) -> bool:
        return not self.destroyed

    @property
    def armor_remaining(self) -> int:
        return max(0, self.stats.armor - self.status.damage.armor)

    @property
    def structure_remaining(self) -> int:
        return max(0, self.stats.structure - self.status.damage.structure)

    @property
    def size(self) -> int:
        """Size class used by Death-From-Above: half the structure, rounded up."""
        return max(1, math.ceil(self.stats.structure / 2))

    @property
    def squad_ratio(self) -> float:
        """
        Fraction of an infantry squad still fighting.

        Non-infantry units always report 1.0.
        """
        if not self.is_infantry:
            return 1.0
        total = self.stats.armor + self.stats.structure
        if total <= 0:
            return 0.0
        return max(0.0, (total - self.status.damage.total) / total)

    @property
    def troop_count(self) -> int:
        """Troops left in an infantry squad (0 for other kinds)."""
        if not self.is_infantry or self.destroyed:
            return 0
        return math.ceil(self.stats.troops * self.squad_ratio)

    def effective_damage(self, band: RangeBand) -> int:
        """
        Damage value for a band after casualties.

        Infantry output scales with the squad ratio and never drops below 1
        while the squad lives and the band has any damage at all.
        """
        base = self.stats.damage.for_band(band)
        if self.destroyed:
            return 0
        if not self.is_infantry or base <= 0:
            return base
        return max(1, math.floor(base * self.squad_ratio))

    def movement_allowance(self, move_type: MoveType) -> int:
        """Base allowance for a move type, with infantry casualty scaling."""
        base = self.stats.movement.for_move_type(move_type)
        if not self.is_infantry or base <= 0:
            return base
        if self.destroyed:
            return 0
        ratio = self.squad_ratio
        if ratio < 0.25:
            return 1
        return max(1, math.floor(base * ratio))

    def equipment_count(self, item: InfantryEquipment) -> int:
        return self.status.equipment.get(item, 0)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the unit to a JSON-friendly dict."""
        data = {
            "id": self.id,
            "name": self.name,
            "side": str(self.side),
            "kind": str(self.kind),
            "vehicle_subtype": str(self.vehicle_subtype) if self.vehicle_subtype else None,
            "position": list(self.position),
            "facing": str(self.facing),
            "stats": self.stats.to_dict(),
            "abilities": list(self.abilities),
            "template": self.template,
            "status": self.status.to_dict(),
            "destroyed": self.destroyed,
        }
        if self.is_infantry:
            data["squad_ratio"] = round(self.squad_ratio, 3)
            data["troop_count"] = self.troop_count
        return data

    def __str__(self) -> str:
        return self.label()
