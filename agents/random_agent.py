"""
Random agent implementation for testing and baseline comparison.

Every candidate command is checked with the engine's pure validators, so
the agent only ever issues commands that were legal when it decided. It
uses its own random stream and never draws from the game dice.
"""

import random
from typing import Any, Dict, List, Optional, Tuple

from engine.core.effects import StatusEffect
from engine.core.types import AntiVehicleVariant, MeleeVariant, MoveType, Phase, Side
from engine.mechanics.anti_vehicle import validate_anti_vehicle_attack
from engine.mechanics.melee import validate_melee_attack
from engine.mechanics.movement import MovementResolver
from engine.mechanics.ranged import validate_ranged_attack
from engine.units.unit import Unit
from engine.world.state import GameState

from .base_agent import BaseAgent
from .commands import AntiVehicleCommand, Command, FireCommand, MeleeCommand, MoveCommand, StartupCommand, WaitCommand
from .registry import register_agent

BASIC_MELEE = (MeleeVariant.STANDARD, MeleeVariant.PUNCH, MeleeVariant.KICK)


@register_agent("random")
class RandomAgent(BaseAgent):
    """
    Agent that picks uniformly among legal commands.

    Decision process:
    - MOVEMENT: each unit picks a legal walk or run destination, or waits.
    - COMBAT: each unit picks a legal attack against any enemy, or waits.
    - Shut-down mechs always try to restart.
    """

    def __init__(
        self,
        side: Side,
        name: Optional[str] = None,
        wait_probability: float = 0.1,
        seed: Optional[int] = None,
        **_: Any,
    ):
        """
        Initialize random agent.

        Args:
            side: Side to control
            name: Agent name (default: "RandomAgent")
            wait_probability: Chance a unit waits even when it could act
            seed: Random seed for reproducibility (None = random)
        """
        super().__init__(side, name)
        self.wait_probability = wait_probability
        self.rng = random.Random(seed)
        self._movement = MovementResolver()

    def get_commands(self, state: GameState, **kwargs: Any) -> Tuple[List[Command], Dict[str, Any]]:
        commands: List[Command] = []
        for unit in self.own_units(state):
            if unit.has_effect(StatusEffect.SHUTDOWN):
                commands.append(StartupCommand(unit_id=unit.id))
                continue
            options = self._options(state, unit)
            if not options or self.rng.random() < self.wait_probability:
                commands.append(WaitCommand(unit_id=unit.id))
            else:
                commands.append(self.rng.choice(options))

        metadata = {
            "policy": "random",
            "phase": str(state.phase),
            "commands_count": len(commands),
        }
        return commands, metadata

    def _options(self, state: GameState, unit: Unit) -> List[Command]:
        if state.phase == Phase.MOVEMENT:
            return self._move_options(state, unit)
        if state.phase == Phase.COMBAT:
            return self._attack_options(state, unit)
        return []

    def _move_options(self, state: GameState, unit: Unit) -> List[Command]:
        options: List[Command] = []
        for move_type in (MoveType.WALK, MoveType.RUN):
            reach = self._movement.allowance(state, unit, move_type)
            for pos in state.grid.positions_in_range(unit.position, reach):
                if pos == unit.position:
                    continue
                validation, *_ = self._movement.validate(state, unit.id, pos, move_type)
                if validation.valid:
                    options.append(MoveCommand(unit_id=unit.id, x=pos[0], y=pos[1], move_type=str(move_type)))
        return options

    def _attack_options(self, state: GameState, unit: Unit) -> List[Command]:
        options: List[Command] = []
        for enemy in state.battlefield.side_units(self.side.opponent):
            if validate_ranged_attack(state, unit.id, enemy.id)[0].valid:
                options.append(FireCommand(unit_id=unit.id, target_id=enemy.id))
            for variant in BASIC_MELEE:
                if validate_melee_attack(state, unit.id, enemy.id, variant)[0].valid:
                    options.append(MeleeCommand(unit_id=unit.id, target_id=enemy.id, variant=str(variant)))
            if unit.is_infantry:
                for variant in AntiVehicleVariant:
                    if validate_anti_vehicle_attack(state, unit.id, enemy.id, variant)[0].valid:
                        options.append(AntiVehicleCommand(unit_id=unit.id, target_id=enemy.id, variant=str(variant)))
        return options
