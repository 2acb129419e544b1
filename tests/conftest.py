from pathlib import Path
import sys

# Add repository root to sys.path so tests can import local modules without installation.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from engine import Phase, Side
from engine.game import add_unit, advance_phase, create_game, roll_initiative
from engine.utils.dice import ScriptedDice


@pytest.fixture
def dice():
    return ScriptedDice()


@pytest.fixture
def game(dice):
    """Empty 12x12 strict game driven by the scripted ``dice`` fixture."""
    return create_game(12, 12, dice=dice, strict=True, jump_heat_rule="fixed")


@pytest.fixture
def deploy(game):
    """Deploy a template for a side: ``deploy("atlas", Side.PLAYER, (3, 3))``."""
    def _deploy(template, side, position, **kwargs):
        return add_unit(game, template, side, position, **kwargs)
    return _deploy


def go_to(state, phase):
    """Advance a game to ``phase``, rolling initiative (player wins) on the way."""
    while state.phase != phase:
        if state.phase == Phase.INITIATIVE:
            roll_initiative(state, {Side.PLAYER: 8, Side.AI: 5})
        advance_phase(state)


@pytest.fixture
def to_phase(game):
    def _to_phase(phase):
        go_to(game, phase)
        return game
    return _to_phase
