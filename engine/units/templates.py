"""
Static unit template catalog.

Templates are read-only starting points; ``build_unit`` turns one into a
fresh Unit. The heavy-chassis structure bonus is applied here, at
construction, and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..core.types import (
    AbilityCode,
    Facing,
    GridPos,
    InfantryEquipment,
    MeleeWeapon,
    Side,
    UnitKind,
    VehicleSubtype,
)
from .unit import DamageProfile, MovementProfile, Unit, UnitStats

DEFAULT_TROOPS = 28


@dataclass(frozen=True)
class UnitTemplate:
    """Catalog entry describing a unit before it enters play."""
    key: str
    name: str
    kind: UnitKind
    movement: Tuple[int, int, int]
    armor: int
    structure: int
    skill: int
    tmm: int
    damage: Tuple[int, int, int, int]
    abilities: Tuple[str, ...] = ()
    tonnage: int = 50
    vehicle_subtype: Optional[VehicleSubtype] = None
    heat_capacity: int = 4
    troops: int = 0
    equipment: Tuple[Tuple[InfantryEquipment, int], ...] = ()
    melee_weapon: Optional[MeleeWeapon] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "key": self.key,
            "name": self.name,
            "kind": str(self.kind),
            "vehicle_subtype": str(self.vehicle_subtype) if self.vehicle_subtype else None,
            "movement": list(self.movement),
            "armor": self.armor,
            "structure": self.structure,
            "skill": self.skill,
            "tmm": self.tmm,
            "damage": list(self.damage),
            "abilities": list(self.abilities),
            "tonnage": self.tonnage,
        }


def _mech(key, name, movement, armor, structure, skill, tmm, damage, abilities=(), tonnage=50, **extra):
    return UnitTemplate(key, name, UnitKind.MECH, movement, armor, structure, skill, tmm, damage,
                        tuple(abilities), tonnage, **extra)


def _vehicle(key, name, subtype, movement, armor, structure, skill, tmm, damage, abilities=(), tonnage=40):
    return UnitTemplate(key, name, UnitKind.VEHICLE, movement, armor, structure, skill, tmm, damage,
                        tuple(abilities), tonnage, vehicle_subtype=subtype, heat_capacity=0)


def _infantry(key, name, movement, armor, structure, skill, tmm, damage, abilities=(), troops=DEFAULT_TROOPS,
              equipment=(), tonnage=3):
    return UnitTemplate(key, name, UnitKind.INFANTRY, movement, armor, structure, skill, tmm, damage,
                        tuple(abilities), tonnage, heat_capacity=0, troops=troops, equipment=tuple(equipment))


# ============================================================================
# CATALOG
# ============================================================================

_TEMPLATES: List[UnitTemplate] = [
    # Mechs
    _mech("locust", "Locust LCT-1V", (8, 12, 0), 2, 1, 4, 2, (1, 1, 0, 0), tonnage=20),
    _mech("jenner", "Jenner JR7-D", (8, 12, 8), 3, 1, 4, 2, (2, 2, 0, 0), ["JJ"], tonnage=35),
    _mech("shadow-hawk", "Shadow Hawk SHD-2H", (5, 8, 5), 5, 2, 4, 1, (2, 2, 1, 0), ["JJ"], tonnage=55),
    _mech("hunchback", "Hunchback HBK-4G", (4, 6, 0), 6, 2, 4, 1, (3, 2, 0, 0), ["MEL"], tonnage=50,
          melee_weapon=MeleeWeapon.HATCHET),
    _mech("marauder", "Marauder MAD-3R", (4, 6, 0), 6, 3, 3, 1, (3, 3, 2, 0), ["ENE"], tonnage=75),
    _mech("warhammer", "Warhammer WHM-6R", (4, 6, 0), 6, 3, 4, 1, (3, 3, 2, 0), ["AMS"], tonnage=70),
    _mech("atlas", "Atlas AS7-D", (3, 5, 0), 8, 4, 4, 0, (4, 4, 3, 1), ["AMS", "REIN"], tonnage=100),
    _mech("battlemaster", "Battlemaster BLR-1G", (4, 6, 0), 7, 4, 4, 1, (4, 3, 2, 0), ["BFC", "CR"], tonnage=85),
    _mech("catapult", "Catapult CPLT-C1", (4, 6, 4), 5, 3, 4, 1, (2, 3, 2, 0), ["JJ", "LRM", "IF"], tonnage=65),
    _mech("raven", "Raven RVN-3L", (6, 9, 0), 3, 2, 4, 2, (1, 1, 0, 0), ["ECM", "PRB"], tonnage=35),

    # Vehicles
    _vehicle("striker", "Striker Light Tank", VehicleSubtype.HOVER, (8, 12, 0), 3, 1, 5, 2, (2, 2, 1, 0),
             ["HVY-CHAS"], tonnage=35),
    _vehicle("scorpion", "Scorpion Light Tank", VehicleSubtype.TRACKED, (6, 9, 0), 4, 1, 5, 1, (2, 2, 0, 0),
             ["ARM"], tonnage=25),
    _vehicle("vedette", "Vedette Medium Tank", VehicleSubtype.TRACKED, (5, 8, 0), 5, 2, 5, 1, (2, 2, 1, 0),
             ["ARM"], tonnage=50),
    _vehicle("demolisher", "Demolisher Heavy Tank", VehicleSubtype.TRACKED, (3, 5, 0), 7, 3, 5, 0, (4, 3, 0, 0),
             ["ARM", "HVY-CHAS"], tonnage=80),
    _vehicle("bulldog", "Bulldog Heavy Tank", VehicleSubtype.TRACKED, (4, 6, 0), 6, 3, 4, 1, (3, 3, 2, 0),
             ["ARM"], tonnage=60),
    _vehicle("manticore", "Manticore Heavy Tank", VehicleSubtype.TRACKED, (4, 6, 0), 7, 3, 4, 1, (3, 3, 2, 1),
             ["ARM", "HVY-CHAS", "HARD"], tonnage=60),
    _vehicle("packrat", "Packrat LRPV", VehicleSubtype.WHEELED, (7, 11, 0), 2, 1, 4, 2, (1, 1, 0, 0),
             ["RCN"], tonnage=20),
    _vehicle("swiftwind", "Swiftwind Scout Car", VehicleSubtype.WHEELED, (8, 12, 0), 2, 1, 4, 2, (1, 0, 0, 0),
             ["RCN", "ECM"], tonnage=15),
    _vehicle("pegasus", "Pegasus Scout Hovertank", VehicleSubtype.HOVER, (10, 15, 0), 2, 1, 4, 3, (2, 1, 0, 0),
             ["RCN", "AMP"], tonnage=35),
    _vehicle("condor", "Condor Hover Tank", VehicleSubtype.HOVER, (8, 12, 0), 4, 2, 4, 2, (3, 2, 1, 0),
             ["AMP"], tonnage=50),
    _vehicle("warrior", "Warrior Attack Helicopter", VehicleSubtype.VTOL, (10, 15, 0), 1, 1, 4, 3, (1, 1, 1, 0),
             ["VTOL", "RCN"], tonnage=21),
    _vehicle("yellow-jacket", "Yellow Jacket Gunship", VehicleSubtype.VTOL, (11, 17, 0), 2, 1, 4, 3, (2, 1, 0, 0),
             ["VTOL", "AMP"], tonnage=30),

    # Infantry
    _infantry("rifle-squad", "Rifle Infantry Squad", (3, 5, 0), 2, 1, 5, 1, (1, 0, 0, 0)),
    _infantry("jump-infantry", "Jump Infantry Platoon", (3, 5, 5), 2, 1, 5, 2, (1, 0, 0, 0), ["JJ"]),
    _infantry("motorized-infantry", "Motorized Infantry Platoon", (5, 8, 0), 2, 1, 5, 2, (1, 0, 0, 0), ["MOB"]),
    _infantry("missile-infantry", "Missile Infantry Platoon", (2, 4, 0), 2, 1, 4, 1, (1, 1, 1, 0), ["LRM", "IF"]),
    _infantry("anti-mech-infantry", "Anti-Mech Infantry Squad", (3, 5, 0), 2, 1, 4, 1, (1, 0, 0, 0),
              ["AC", "MEL"], troops=20,
              equipment=[(InfantryEquipment.VIBRO_BLADE, 1), (InfantryEquipment.ANTI_MECH_MINE, 2),
                         (InfantryEquipment.DEMO_CHARGE, 1)]),
    _infantry("battle-armor", "Battle Armor Squad", (3, 5, 5), 4, 1, 3, 2, (2, 1, 0, 0),
              ["JJ", "AC", "ARM", "MEL"], troops=5,
              equipment=[(InfantryEquipment.MAGNETIC_CLAMP, 1)]),
    _infantry("heavy-battle-armor", "Heavy Battle Armor Squad", (2, 3, 2), 5, 2, 3, 1, (3, 1, 0, 0),
              ["JJ", "AC", "ARM", "HARD", "MEL"], troops=5,
              equipment=[(InfantryEquipment.MAGNETIC_CLAMP, 1), (InfantryEquipment.INFERNO_GRENADE, 2)]),
    _infantry("stealth-infantry", "Stealth Infantry Squad", (3, 5, 5), 3, 1, 3, 3, (1, 0, 0, 0),
              ["JJ", "ECM", "AC"], troops=12),
]

UNIT_TEMPLATES: Dict[str, UnitTemplate] = {t.key: t for t in _TEMPLATES}


def get_template(key: str) -> UnitTemplate:
    """
    Look up a template by key (case-insensitive).

    Raises:
        ValueError: If no template has that key
    """
    template = UNIT_TEMPLATES.get(key.lower())
    if template is None:
        raise ValueError(f"Unknown unit template: {key}")
    return template


def list_templates(kind: Optional[UnitKind] = None) -> List[str]:
    """Template keys, optionally filtered by unit kind."""
    return [t.key for t in _TEMPLATES if kind is None or t.kind == kind]


def build_unit(
    template: UnitTemplate | str,
    unit_id: str,
    side: Side,
    position: GridPos,
    *,
    facing: Facing = Facing.N,
    name: Optional[str] = None,
    skill: Optional[int] = None,
    extra_abilities: Tuple[str, ...] = (),
) -> Unit:
    """
    Instantiate a fresh Unit from a template.

    Args:
        template: Template or template key
        unit_id: Id assigned by the game state
        side: Owning side
        position: Starting position
        facing: Starting facing
        name: Display name override
        skill: Skill override
        extra_abilities: Codes appended after the template's abilities

    Returns:
        A new Unit with untouched status
    """
    if isinstance(template, str):
        template = get_template(template)

    walk, run, jump = template.movement
    short, medium, long_, extreme = template.damage
    abilities = list(template.abilities) + [a for a in extra_abilities if a not in template.abilities]

    structure = template.structure
    if str(AbilityCode.HVY_CHAS) in abilities:
        structure += 1

    stats = UnitStats(
        movement=MovementProfile(walk=walk, run=run, jump=jump),
        armor=template.armor,
        structure=structure,
        skill=template.skill if skill is None else skill,
        tmm=template.tmm,
        damage=DamageProfile(short=short, medium=medium, long=long_, extreme=extreme),
        heat_capacity=template.heat_capacity,
        tonnage=template.tonnage,
        troops=template.troops,
        equipment=dict(template.equipment),
        melee_weapon=template.melee_weapon,
    )
    return Unit(
        id=unit_id,
        name=name or template.name,
        side=side,
        kind=template.kind,
        position=position,
        facing=facing,
        stats=stats,
        vehicle_subtype=template.vehicle_subtype,
        abilities=abilities,
        template=template.key,
    )
