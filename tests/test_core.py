import pytest

from engine.core.effects import EffectCategory, StatusEffect, StatusEffects
from engine.core.errors import DiceExhausted
from engine.core.types import AbilityCode, ActionValidation, Facing, Side
from engine.utils.dice import DiceRoller, ScriptedDice
from engine.utils.id_generator import IDGenerator
from engine.world.grid import Grid


def test_side_opponent():
    assert Side.PLAYER.opponent == Side.AI
    assert Side.AI.opponent == Side.PLAYER
    assert str(Side.PLAYER) == "player"


def test_facing_string_and_delta():
    assert str(Facing.NE) == "NE"
    assert Facing.W.delta == (-1, 0)


def test_ability_code_parse_accepts_hyphenated_codes():
    assert AbilityCode.parse("HVY-CHAS") == AbilityCode.HVY_CHAS
    assert AbilityCode.parse("NOPE") is None


def test_action_validation_helpers():
    ok = ActionValidation.success()
    bad = ActionValidation.fail("WRONG_PHASE", "nope")
    assert ok.valid and ok.error_code is None
    assert not bad.valid and bad.error_code == "WRONG_PHASE"


def test_status_effects_iterate_in_declaration_order():
    effects = StatusEffects([StatusEffect.GRAPPLED, StatusEffect.PRONE, StatusEffect.DESTROYED])
    assert effects.to_list() == ["DESTROYED", "PRONE", "GRAPPLED"]


def test_clear_category_only_touches_that_category():
    effects = StatusEffects([
        StatusEffect.PRONE, StatusEffect.DEFENSIVE_STANCE, StatusEffect.GRAPPLED, StatusEffect.HEAT_MOVEMENT_PENALTY,
    ])
    removed = effects.clear_category(EffectCategory.ROUND)
    assert set(removed) == {StatusEffect.DEFENSIVE_STANCE, StatusEffect.GRAPPLED}
    assert effects.to_list() == ["PRONE", "HEAT_MOVEMENT_PENALTY"]


def test_replace_category_rejects_foreign_effects():
    effects = StatusEffects()
    with pytest.raises(ValueError):
        effects.replace_category(EffectCategory.HEAT, [StatusEffect.PRONE])


def test_status_effect_from_label():
    assert StatusEffect.from_label("SHUTDOWN") is StatusEffect.SHUTDOWN
    with pytest.raises(ValueError):
        StatusEffect.from_label("ON_FIRE")


def test_seeded_dice_repeat():
    a = DiceRoller(seed=11)
    b = DiceRoller(seed=11)
    assert [a.roll_2d6().total for _ in range(20)] == [b.roll_2d6().total for _ in range(20)]


def test_scripted_dice_replay_faces_and_exhaust():
    dice = ScriptedDice([6, 6, 1])
    roll = dice.roll_2d6()
    assert roll.total == 12
    assert roll.to_list() == [6, 6]
    assert dice.coin_flip() is True
    with pytest.raises(DiceExhausted):
        dice.roll_die()


def test_id_generator_is_per_instance():
    first, second = IDGenerator(), IDGenerator()
    assert first.next_id() == "u1"
    assert first.next_id() == "u2"
    assert second.next_id() == "u1"
    assert first.issued == 2


def test_grid_metrics():
    grid = Grid(12, 12)

    assert grid.in_bounds((11, 11)) and not grid.in_bounds((12, 0))
    assert grid.distance((0, 0), (3, 4)) == 5.0
    assert grid.chebyshev_distance((0, 0), (3, 4)) == 4
    assert grid.is_adjacent((5, 5), (6, 6))
    assert not grid.is_adjacent((5, 5), (5, 5))
    with pytest.raises(ValueError):
        Grid(0, 4)


def test_grid_step_away_and_range():
    grid = Grid(12, 12)

    assert grid.step_away((5, 5), (6, 5)) == (7, 5)
    assert grid.step_away((5, 5), (4, 6)) == (3, 7)
    assert grid.step_away((1, 0), (0, 0)) == (-1, 0)
    assert sorted(grid.positions_in_range((0, 0), 1)) == [(0, 0), (0, 1), (1, 0)]
