from engine import Phase, Side
from engine.core.types import Facing
from runtime.dispatch import apply_command, apply_commands

from agents.commands import FireCommand, MoveCommand, StartupCommand, WaitCommand


def test_unknown_unit_is_rejected(game):
    outcome = apply_command(game, WaitCommand(unit_id="u42"), Side.PLAYER)

    assert not outcome["legal"]
    assert outcome["error_code"] == "UNIT_NOT_FOUND"


def test_commanding_the_other_side_is_rejected(game, deploy):
    enemy = deploy("locust", Side.AI, (5, 5))

    outcome = apply_command(game, WaitCommand(unit_id=enemy.id), Side.PLAYER)

    assert outcome["error_code"] == "NOT_OWNER"
    assert outcome["result"] is None


def test_ownership_check_can_be_skipped(game, deploy):
    enemy = deploy("locust", Side.AI, (5, 5))

    assert apply_command(game, WaitCommand(unit_id=enemy.id))["legal"]


def test_move_is_routed_to_the_engine(game, deploy, to_phase):
    locust = deploy("locust", Side.PLAYER, (1, 1))
    to_phase(Phase.MOVEMENT)

    outcome = apply_command(game, MoveCommand(unit_id=locust.id, x=3, y=1, facing="E"), Side.PLAYER)

    assert outcome["legal"]
    assert outcome["result"]["success"]
    assert locust.position == (3, 1)
    assert locust.facing == Facing.E


def test_engine_rejections_become_outcomes(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (4, 1))
    to_phase(Phase.MOVEMENT)

    outcome = apply_command(game, FireCommand(unit_id=atlas.id, target_id=locust.id), Side.PLAYER)

    assert not outcome["legal"]
    assert outcome["error_code"] == "WRONG_PHASE"
    assert outcome["command"]["type"] == "FIRE"


def test_fire_outcome_carries_the_roll(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (4, 1))
    to_phase(Phase.COMBAT)

    dice.push(3, 3)
    outcome = apply_command(game, FireCommand(unit_id=atlas.id, target_id=locust.id), Side.PLAYER)

    assert outcome["legal"]
    assert outcome["result"]["hit"]
    assert outcome["result"]["roll"]["target_number"] == 10
    assert not locust.alive


def test_batch_keeps_going_after_a_rejection(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    deploy("locust", Side.AI, (8, 8))
    to_phase(Phase.COMBAT)

    outcomes = apply_commands(
        game,
        [StartupCommand(unit_id=atlas.id), WaitCommand(unit_id=atlas.id)],
        Side.PLAYER,
    )

    assert [o["legal"] for o in outcomes] == [False, True]
    assert outcomes[0]["error_code"] == "PRECONDITION"
