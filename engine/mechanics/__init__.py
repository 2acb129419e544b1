"""
Mechanics module - Rules resolution.

Every resolver takes the GameState handle explicitly, validates with pure
checks first, and only then draws dice and mutates state:
- MovementResolver: movement allowance, legality and heat
- resolve_ranged_attack / resolve_melee_attack / resolve_advanced_melee /
  resolve_dfa / resolve_anti_vehicle_attack: the attack pipeline
- apply_damage, process_critical_hit, add_heat: the damage model
- advance_phase / roll_initiative: the phase machine
- check_game_over / VictoryConditions: end-of-game checks
"""

from .anti_vehicle import resolve_anti_vehicle_attack
from .criticals import process_critical_hit
from .damage import apply_damage
from .dfa import resolve_dfa
from .heat import add_heat, attempt_startup, check_shutdown, dissipate_heat
from .melee import resolve_melee_attack
from .melee_advanced import resolve_advanced_melee
from .movement import MovementResolver, MoveResult
from .phases import PhaseChange, advance_phase, roll_initiative, switch_active_side
from .piloting import piloting_check
from .ranged import resolve_ranged_attack
from .victory import GameOverResult, VictoryConditions, check_game_over

__all__ = [
    "GameOverResult",
    "MoveResult",
    "MovementResolver",
    "PhaseChange",
    "VictoryConditions",
    "add_heat",
    "advance_phase",
    "apply_damage",
    "attempt_startup",
    "check_game_over",
    "check_shutdown",
    "dissipate_heat",
    "piloting_check",
    "process_critical_hit",
    "resolve_advanced_melee",
    "resolve_anti_vehicle_attack",
    "resolve_dfa",
    "resolve_melee_attack",
    "resolve_ranged_attack",
    "roll_initiative",
    "switch_active_side",
]
