from engine import Phase, Side
from engine.core.effects import StatusEffect
from engine.core.types import AdvancedMeleeVariant
from engine.game import resolve_melee_attack
from engine.mechanics.melee_advanced import MELEE_TABLE, advanced_target_number

from conftest import go_to


def test_every_variant_has_a_profile():
    for variant in AdvancedMeleeVariant:
        if variant != AdvancedMeleeVariant.DEFENSIVE_STANCE:
            assert variant in MELEE_TABLE


def test_advanced_punch_uses_size_difference(game, dice, deploy, to_phase):
    warhammer = deploy("warhammer", Side.PLAYER, (5, 5))
    atlas = deploy("atlas", Side.AI, (6, 5))
    to_phase(Phase.COMBAT)
    dice.push(3, 3, 2)

    result = resolve_melee_attack(game, warhammer.id, atlas.id, "advanced_punch")

    assert result.roll.target_modifiers == {"base": 4, "size": 2}
    assert result.hit
    assert result.details["location"] == "LEFT_ARM"
    assert result.damage == 7
    assert result.heat_generated == 1


def test_shoulder_check_pushes_target_away(game, dice, deploy, to_phase):
    warhammer = deploy("warhammer", Side.PLAYER, (5, 5))
    atlas = deploy("atlas", Side.AI, (6, 5))
    to_phase(Phase.COMBAT)
    dice.push(3, 3, 1, 3, 3)

    result = resolve_melee_attack(game, warhammer.id, atlas.id, "shoulder_check")

    assert result.damage == 10
    assert atlas.position == (7, 5)
    assert result.details["special_effects"][0]["applied"]
    assert not atlas.has_effect(StatusEffect.PRONE)


def test_shoulder_check_into_the_edge_is_a_collision(game, dice, deploy, to_phase):
    hunchback = deploy("hunchback", Side.PLAYER, (10, 5))
    atlas = deploy("atlas", Side.AI, (11, 5))
    to_phase(Phase.COMBAT)
    dice.push(4, 3, 1, 1, 1)

    result = resolve_melee_attack(game, hunchback.id, atlas.id, "shoulder_check")

    assert result.roll.target_number == 7
    effect = result.details["special_effects"][0]
    assert not effect["applied"]
    assert effect["collision_damage"] == 3
    assert atlas.position == (11, 5)
    assert atlas.status.damage.total == 10
    assert atlas.has_effect(StatusEffect.PRONE)


def test_trip_knocks_down_heavier_target_on_a_failed_roll(game, dice, deploy, to_phase):
    warhammer = deploy("warhammer", Side.PLAYER, (5, 5))
    atlas = deploy("atlas", Side.AI, (5, 6))
    to_phase(Phase.COMBAT)
    dice.push(4, 4, 1, 3, 3)

    result = resolve_melee_attack(game, warhammer.id, atlas.id, "trip")

    assert result.roll.target_number == 8
    assert result.details["location"] == "RIGHT_LEG"
    assert result.damage == 5
    assert atlas.has_effect(StatusEffect.PRONE)
    assert result.heat_generated == 2


def test_head_butt_rolls_pilot_then_sensors(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (5, 5))
    warhammer = deploy("warhammer", Side.AI, (5, 6))
    to_phase(Phase.COMBAT)
    dice.push(6, 6, 1, 5, 5, 4, 5)

    result = resolve_melee_attack(game, atlas.id, warhammer.id, "head_butt")

    assert result.details["location"] == "HEAD"
    assert result.damage == 6
    assert result.self_damage == 2
    assert warhammer.status.pilot_hits == 1
    assert warhammer.has_effect(StatusEffect.SENSORS_DAMAGED)
    assert atlas.status.damage.armor == 2


def test_defensive_stance_needs_no_target_and_lasts_the_round(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (5, 5))
    warhammer = deploy("warhammer", Side.AI, (5, 6))
    to_phase(Phase.COMBAT)

    stance = resolve_melee_attack(game, atlas.id, None, "defensive_stance")
    assert stance.legal
    assert atlas.has_effect(StatusEffect.DEFENSIVE_STANCE)
    assert atlas.status.has_fired

    _, mods = advanced_target_number(game, warhammer, atlas, AdvancedMeleeVariant.PUNCH)
    assert mods["defensive_stance"] == 2

    go_to(game, Phase.INITIATIVE)
    assert not atlas.has_effect(StatusEffect.DEFENSIVE_STANCE)


def test_extended_attack_preconditions(game, deploy, to_phase):
    locust = deploy("locust", Side.PLAYER, (5, 5))
    atlas = deploy("atlas", Side.AI, (5, 6))
    squad = deploy("rifle-squad", Side.PLAYER, (6, 6))
    to_phase(Phase.COMBAT)

    assert resolve_melee_attack(game, locust.id, atlas.id, "stomp").error_code == "PRECONDITION"
    assert resolve_melee_attack(game, locust.id, atlas.id, "grapple").error_code == "PRECONDITION"
    assert resolve_melee_attack(game, locust.id, atlas.id, "body_slam").error_code == "PRECONDITION"
    assert resolve_melee_attack(game, squad.id, atlas.id, "trip").error_code == "WRONG_UNIT_KIND"


def test_grapple_heats_and_may_hold_the_target(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (5, 5))
    warhammer = deploy("warhammer", Side.AI, (5, 6))
    to_phase(Phase.COMBAT)
    dice.push(3, 3, 1, 5, 5)

    result = resolve_melee_attack(game, atlas.id, warhammer.id, "grapple")

    assert result.damage == 5
    assert warhammer.status.heat == 4
    assert warhammer.has_effect(StatusEffect.GRAPPLED)

    go_to(game, Phase.MOVEMENT)
    assert not warhammer.has_effect(StatusEffect.GRAPPLED)
