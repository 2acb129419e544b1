from engine import Phase, Side
from engine.core.effects import StatusEffect
from engine.core.types import MoveType
from engine.game import move_unit, resolve_melee_attack, set_terrain
from engine.mechanics.dfa import dfa_target_number

from conftest import go_to


def _jump_next_to(game, jumper, destination):
    go_to(game, Phase.MOVEMENT)
    assert move_unit(game, jumper.id, destination, move_type=MoveType.JUMP).success
    go_to(game, Phase.COMBAT)


def test_hit_hurts_both_and_both_check_landing(game, dice, deploy):
    jenner = deploy("jenner", Side.PLAYER, (1, 1))
    atlas = deploy("atlas", Side.AI, (5, 1))
    _jump_next_to(game, jenner, (4, 1))
    dice.push(6, 6, 4, 4, 3, 3)

    result = resolve_melee_attack(game, jenner.id, atlas.id, "death_from_above")

    assert result.roll.target_modifiers == {"base": 9, "jump_distance": 1, "heat": 2}
    assert result.hit
    assert result.damage == 2
    assert result.self_damage == 1
    assert atlas.status.damage.armor == 2
    assert jenner.status.damage.armor == 1
    assert not atlas.has_effect(StatusEffect.PRONE)
    assert jenner.has_effect(StatusEffect.PRONE)
    assert jenner.status.heat == 4


def test_bad_miss_doubles_self_damage_and_drops_attacker(game, dice, deploy):
    jenner = deploy("jenner", Side.PLAYER, (1, 1))
    atlas = deploy("atlas", Side.AI, (5, 1))
    _jump_next_to(game, jenner, (4, 1))
    dice.push(1, 1)

    result = resolve_melee_attack(game, jenner.id, atlas.id, "death_from_above")

    assert not result.hit
    assert result.self_damage == 2
    assert jenner.has_effect(StatusEffect.PRONE)
    assert atlas.status.damage.total == 0


def test_near_miss_halves_self_damage(game, dice, deploy):
    jenner = deploy("jenner", Side.PLAYER, (1, 1))
    atlas = deploy("atlas", Side.AI, (5, 1))
    _jump_next_to(game, jenner, (4, 1))
    dice.push(5, 5)

    result = resolve_melee_attack(game, jenner.id, atlas.id, "death_from_above")

    assert not result.hit
    assert result.self_damage == 1
    assert not jenner.has_effect(StatusEffect.PRONE)


def test_attacker_must_have_jumped(game, deploy):
    jenner = deploy("jenner", Side.PLAYER, (1, 1))
    atlas = deploy("atlas", Side.AI, (5, 1))
    go_to(game, Phase.MOVEMENT)
    move_unit(game, jenner.id, (4, 1))
    go_to(game, Phase.COMBAT)

    result = resolve_melee_attack(game, jenner.id, atlas.id, "death_from_above")

    assert result.error_code == "PRECONDITION"


def test_attacker_needs_jump_jets(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (1, 2))
    to_phase(Phase.COMBAT)

    assert resolve_melee_attack(game, atlas.id, locust.id, "death_from_above").error_code == "NO_CAPABILITY"


def test_target_number_modifiers(game, deploy):
    jenner = deploy("jenner", Side.PLAYER, (4, 1), skill=3)
    atlas = deploy("atlas", Side.AI, (5, 1))
    set_terrain(game, (4, 1), "rough")
    jenner.status.move_distance = 6.0
    atlas.status.has_moved = True
    atlas.status.move_type = MoveType.RUN
    atlas.status.effects.add(StatusEffect.PRONE)

    number, mods = dfa_target_number(game, jenner, atlas)

    assert mods == {
        "base": 9, "skill": -1, "target_moved": 2, "target_prone": -2, "jump_distance": 2, "terrain": 1,
    }
    assert number == 11
