"""
Core type definitions for the combat rules engine.

This module contains the fundamental enums, constants and small value types
used throughout the engine. No rules logic lives here.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Tuple
from dataclasses import dataclass

# ============================================================================
# SPATIAL TYPES
# ============================================================================

# Grid position: (x, y) where:
# - X increases to the RIGHT
# - Y increases UPWARD
# - Origin (0, 0) is at BOTTOM-LEFT
GridPos = Tuple[int, int]


class Side(Enum):
    """Side that owns a unit."""
    PLAYER = "player"
    AI = "ai"

    def __str__(self) -> str:
        return self.value

    @property
    def opponent(self) -> Side:
        """Get the opposing side."""
        return Side.AI if self == Side.PLAYER else Side.PLAYER


class Facing(Enum):
    """
    The eight compass facings a unit may hold.

    Each facing provides the (dx, dy) step toward the hex it faces.
    """
    N = (0, 1)
    NE = (1, 1)
    E = (1, 0)
    SE = (1, -1)
    S = (0, -1)
    SW = (-1, -1)
    W = (-1, 0)
    NW = (-1, 1)

    @property
    def delta(self) -> Tuple[int, int]:
        """Get the (dx, dy) step for this facing."""
        return self.value

    def __str__(self) -> str:
        return self.name


# ============================================================================
# PHASES
# ============================================================================

class Phase(Enum):
    """Round phases, in the only order they may occur."""
    SETUP = "SETUP"
    INITIATIVE = "INITIATIVE"
    MOVEMENT = "MOVEMENT"
    COMBAT = "COMBAT"
    END = "END"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# UNIT KINDS
# ============================================================================

class UnitKind(Enum):
    """Broad unit categories; each has its own critical-hit table."""
    MECH = "mech"
    VEHICLE = "vehicle"
    INFANTRY = "infantry"

    def __str__(self) -> str:
        return self.value


class VehicleSubtype(Enum):
    """Motive type of a ground vehicle."""
    TRACKED = "tracked"
    WHEELED = "wheeled"
    HOVER = "hover"
    VTOL = "vtol"

    def __str__(self) -> str:
        return self.value


class MoveType(Enum):
    """How a unit moved this round."""
    WALK = "walk"
    RUN = "run"
    JUMP = "jump"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# COMBAT
# ============================================================================

class RangeBand(Enum):
    """Ranged-attack distance bands."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    EXTREME = "extreme"

    def __str__(self) -> str:
        return self.value


class AttackType(Enum):
    """
    Delivery type of a damage source.

    Ability hooks inspect this to decide whether they apply (AMS only
    intercepts MISSILE, battlefield control forbids INDIRECT, ...).
    """
    DIRECT = "direct"
    INDIRECT = "indirect"
    MISSILE = "missile"
    PHYSICAL = "physical"
    ANTI_MECH = "anti_mech"
    SELF = "self"
    COLLISION = "collision"
    HEAT = "heat"
    CRITICAL = "critical"
    CASUALTY = "casualty"

    def __str__(self) -> str:
        return self.value


class HitLocation(Enum):
    """Body locations used to flavour melee hits and track limb damage."""
    HEAD = "HEAD"
    CENTER_TORSO = "CENTER_TORSO"
    LEFT_TORSO = "LEFT_TORSO"
    RIGHT_TORSO = "RIGHT_TORSO"
    LEFT_ARM = "LEFT_ARM"
    RIGHT_ARM = "RIGHT_ARM"
    LEFT_LEG = "LEFT_LEG"
    RIGHT_LEG = "RIGHT_LEG"

    def __str__(self) -> str:
        return self.value

    @property
    def is_arm(self) -> bool:
        return self in (HitLocation.LEFT_ARM, HitLocation.RIGHT_ARM)

    @property
    def is_leg(self) -> bool:
        return self in (HitLocation.LEFT_LEG, HitLocation.RIGHT_LEG)


class InfantryEquipment(Enum):
    """Expendable or specialist kit carried by infantry."""
    VIBRO_BLADE = "vibro_blade"
    DEMO_CHARGE = "demo_charge"
    INFERNO_GRENADE = "inferno_grenade"
    MAGNETIC_CLAMP = "magnetic_clamp"
    ANTI_MECH_MINE = "anti_mech_mine"

    def __str__(self) -> str:
        return self.value


class MeleeWeapon(Enum):
    """Hand-held melee weapons a mech may carry."""
    HATCHET = "hatchet"
    SWORD = "sword"
    AXE = "axe"
    MACE = "mace"
    CLUB = "club"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# GAME RESULT
# ============================================================================

class GameResult(Enum):
    """Possible game outcomes."""
    IN_PROGRESS = "in_progress"
    PLAYER_WINS = "player_wins"
    AI_WINS = "ai_wins"
    DRAW = "draw"

    def __str__(self) -> str:
        return self.value.replace("_", " ").title()


# ============================================================================
# ACTION VALIDATION
# ============================================================================

@dataclass
class ActionValidation:
    """
    Structured result of validating an action.

    Validators are pure: they inspect state and return one of these without
    drawing dice or mutating anything.

    Attributes:
        valid: Whether the action is legal
        error_code: Machine-readable error code (None if valid)
        message: Human-readable message explaining the result

    Error codes:
        - "WRONG_PHASE": Action not allowed in the current phase
        - "UNIT_NOT_FOUND": Unknown unit id
        - "TARGET_NOT_FOUND": Unknown target id
        - "UNIT_DESTROYED": Acting unit carries DESTROYED
        - "TARGET_DESTROYED": Target carries DESTROYED
        - "SHUTDOWN": Acting unit is shut down
        - "IMMOBILIZED": Unit cannot move
        - "ALREADY_MOVED": Unit already moved this round
        - "ALREADY_ATTACKED": Unit already attacked this round
        - "FRIENDLY_TARGET": Target belongs to the same side
        - "SELF_TARGET": Unit targeted itself
        - "NOT_ADJACENT": Target is not adjacent
        - "NOT_SAME_HEX": Target must share the attacker's hex
        - "WRONG_UNIT_KIND": Unit kind cannot perform the action
        - "NO_CAPABILITY": Unit lacks the ability/equipment/limb required
        - "NO_DAMAGE": Attack would deal no damage
        - "BLOCKED": Enemy battlefield control forbids the attack
        - "OUT_OF_BOUNDS": Destination off the grid
        - "OCCUPIED": Destination occupied
        - "IMPASSABLE": Terrain forbidden for this unit
        - "TOO_FAR": Distance exceeds the movement allowance
        - "INVALID_ELEVATION": VTOL elevation outside 1..6
        - "INVALID_TARGET": Target cannot be attacked this way
        - "PRECONDITION": Variant-specific precondition not met
    """
    valid: bool
    error_code: str | None = None
    message: str = ""

    @staticmethod
    def success(message: str = "") -> ActionValidation:
        """Create a validation success result."""
        return ActionValidation(valid=True, error_code=None, message=message)

    @staticmethod
    def fail(error_code: str, message: str) -> ActionValidation:
        """Create a validation failure result."""
        return ActionValidation(valid=False, error_code=error_code, message=message)


# ============================================================================
# ABILITY CODES
# ============================================================================

class AbilityCode(Enum):
    """
    Special-ability codes understood by the engine.

    Units store their abilities as raw code strings so templates may carry
    codes the engine does not know; those are logged and ignored.
    """
    AC = "AC"
    AMP = "AMP"
    AMS = "AMS"
    ARM = "ARM"
    BFC = "BFC"
    CR = "CR"
    DF = "DF"
    ECM = "ECM"
    ENE = "ENE"
    ENG = "ENG"
    HARD = "HARD"
    HVY_CHAS = "HVY-CHAS"
    IF = "IF"
    JJ = "JJ"
    LRM = "LRM"
    MEL = "MEL"
    MOB = "MOB"
    PRB = "PRB"
    RCN = "RCN"
    REIN = "REIN"
    VTOL = "VTOL"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, code: str) -> Optional[AbilityCode]:
        """Look up a code string; None when the engine does not know it."""
        try:
            return cls(code)
        except ValueError:
            return None


class Capability(Enum):
    """Things an ability lets a unit do, checked by legality validators."""
    INDIRECT_FIRE = "indirect_fire"
    ANTI_MECH = "anti_mech"
    AMPHIBIOUS = "amphibious"
    MELEE = "melee"
    PRECISION_CRITICALS = "precision_criticals"

    def __str__(self) -> str:
        return self.value


class ZoneRole(Enum):
    """Zonal abilities resolved by scanning other units, not by the per-unit fold."""
    ECM_FIELD = "ecm_field"
    COUNTER_ECM = "counter_ecm"
    BATTLEFIELD_CONTROL = "battlefield_control"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# CRITICAL EFFECTS
# ============================================================================

class CriticalEffect(Enum):
    """Entries of the critical-hit tables."""
    ENGINE_HIT = "ENGINE_HIT"
    FIRE_CONTROL_HIT = "FIRE_CONTROL_HIT"
    MOVEMENT_HIT = "MOVEMENT_HIT"
    WEAPON_HIT = "WEAPON_HIT"
    MOTIVE_SYSTEM_HIT = "MOTIVE_SYSTEM_HIT"
    AMMO_EXPLOSION = "AMMO_EXPLOSION"
    ADDITIONAL_DAMAGE = "ADDITIONAL_DAMAGE"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# MELEE VARIANTS
# ============================================================================

class MeleeVariant(Enum):
    """Basic physical attacks."""
    STANDARD = "standard"
    PUNCH = "punch"
    KICK = "kick"
    CHARGE = "charge"
    PUSH = "push"
    WEAPON = "weapon"
    DEATH_FROM_ABOVE = "death_from_above"

    def __str__(self) -> str:
        return self.value


class AdvancedMeleeVariant(Enum):
    """Extended physical attacks, resolved with tonnage-based damage and secondary effects."""
    PUNCH = "advanced_punch"
    KICK = "advanced_kick"
    SHOULDER_CHECK = "shoulder_check"
    HEAD_BUTT = "head_butt"
    BODY_SLAM = "body_slam"
    TRIP = "trip"
    GRAPPLE = "grapple"
    STOMP = "stomp"
    CHARGE = "advanced_charge"
    DEFENSIVE_STANCE = "defensive_stance"

    def __str__(self) -> str:
        return self.value


class AntiVehicleVariant(Enum):
    """Anti-'Mech infantry attacks."""
    LEG_ATTACK = "leg_attack"
    SWARM = "swarm"
    MINE = "mine"
    DEMO_CHARGE = "demo_charge"

    def __str__(self) -> str:
        return self.value
