from engine import Phase, Side
from engine.core.effects import StatusEffect
from engine.core.types import RangeBand
from engine.game import resolve_ranged_attack, set_terrain
from engine.mechanics import heat
from engine.mechanics.ranged import range_band


def test_range_bands():
    assert range_band(1.0) == RangeBand.SHORT
    assert range_band(6.0) == RangeBand.SHORT
    assert range_band(6.1) == RangeBand.MEDIUM
    assert range_band(12.0) == RangeBand.MEDIUM
    assert range_band(24.0) == RangeBand.LONG
    assert range_band(24.5) == RangeBand.EXTREME


def test_hit_destroys_light_target_and_heats_attacker(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (4, 1))
    to_phase(Phase.COMBAT)
    dice.push(3, 3)

    result = resolve_ranged_attack(game, atlas.id, locust.id)

    assert result.legal and result.hit
    assert result.roll.total == 10
    assert result.roll.target_number == 10
    assert result.roll.target_modifiers == {"base": 8, "range": 0, "tmm": 2}
    assert result.damage == 4
    assert locust.destroyed
    assert not result.critical_triggered
    assert result.heat_generated == 3
    assert atlas.status.has_fired


def test_miss_still_generates_heat(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (4, 1))
    to_phase(Phase.COMBAT)
    dice.push(1, 2)

    result = resolve_ranged_attack(game, atlas.id, locust.id)

    assert result.legal and not result.hit
    assert result.damage == 0
    assert locust.status.damage.armor == 0
    assert atlas.status.heat == 3


def test_weapon_hits_cut_damage_but_not_heat(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (4, 1))
    atlas.status.weapon_hits = 2
    to_phase(Phase.COMBAT)
    dice.push(1, 2)

    result = resolve_ranged_attack(game, atlas.id, locust.id)

    assert result.legal and not result.hit
    assert result.heat_generated == 3
    assert atlas.status.heat == 3


def test_one_attack_per_round(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (8, 1))
    to_phase(Phase.COMBAT)
    dice.push(1, 1)
    resolve_ranged_attack(game, atlas.id, locust.id)

    again = resolve_ranged_attack(game, atlas.id, locust.id)

    assert again.error_code == "ALREADY_ATTACKED"
    assert dice.remaining == 0


def test_illegal_targets(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    friend = deploy("locust", Side.PLAYER, (3, 1))
    wreck = deploy("jenner", Side.AI, (5, 1))
    wreck.status.effects.add(StatusEffect.DESTROYED)
    to_phase(Phase.COMBAT)

    assert resolve_ranged_attack(game, atlas.id, friend.id).error_code == "FRIENDLY_TARGET"
    assert resolve_ranged_attack(game, atlas.id, wreck.id).error_code == "TARGET_DESTROYED"
    assert resolve_ranged_attack(game, atlas.id, atlas.id).error_code == "SELF_TARGET"
    assert resolve_ranged_attack(game, atlas.id, "u99").error_code == "TARGET_NOT_FOUND"
    assert resolve_ranged_attack(game, "u99", atlas.id).error_code == "UNIT_NOT_FOUND"


def test_shut_down_units_cannot_fire(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (4, 1))
    atlas.status.effects.add(StatusEffect.SHUTDOWN)
    to_phase(Phase.COMBAT)

    assert resolve_ranged_attack(game, atlas.id, locust.id).error_code == "SHUTDOWN"


def test_no_damage_at_range_is_illegal(game, deploy, to_phase):
    locust = deploy("locust", Side.PLAYER, (1, 1))
    atlas = deploy("atlas", Side.AI, (11, 11))
    to_phase(Phase.COMBAT)

    result = resolve_ranged_attack(game, locust.id, atlas.id)

    assert result.error_code == "NO_DAMAGE"
    assert not locust.status.has_fired


def test_target_number_includes_terrain_heat_fire_control_and_sensors(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    warhammer = deploy("warhammer", Side.AI, (1, 9))
    set_terrain(game, (1, 9), "heavy_woods")
    heat.add_heat(game, atlas, 2)
    atlas.status.fire_control_hits = 1
    atlas.status.effects.add(StatusEffect.SENSORS_DAMAGED)
    to_phase(Phase.COMBAT)
    dice.push(1, 1)

    result = resolve_ranged_attack(game, atlas.id, warhammer.id)

    assert result.roll.target_modifiers == {
        "base": 8, "range": 2, "tmm": 1, "terrain": 2, "heat": 1, "fire_control": 1, "sensors": 2,
    }
    assert result.roll.target_number == 17


def test_ecm_raises_target_number(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    raven = deploy("raven", Side.AI, (4, 1))
    to_phase(Phase.COMBAT)
    dice.push(1, 1)

    result = resolve_ranged_attack(game, atlas.id, raven.id)

    assert result.roll.target_modifiers["ecm"] == 1
    assert result.roll.target_number == 11


def test_natural_twelve_checks_for_a_critical(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    warhammer = deploy("warhammer", Side.AI, (4, 1))
    to_phase(Phase.COMBAT)
    dice.push(6, 6, 4, 4)

    result = resolve_ranged_attack(game, atlas.id, warhammer.id)

    assert result.hit and result.critical_triggered
    assert result.criticals[0].effect == "FIRE_CONTROL_HIT"
    assert warhammer.status.fire_control_hits == 1
    assert warhammer.status.damage.armor == 4


def test_precision_attacker_checks_on_ten_or_more(game, dice, deploy, to_phase):
    raven = deploy("raven", Side.PLAYER, (1, 1))
    atlas = deploy("atlas", Side.AI, (4, 1))
    to_phase(Phase.COMBAT)
    dice.push(5, 5, 3, 3)

    result = resolve_ranged_attack(game, raven.id, atlas.id)

    assert result.hit and result.critical_triggered
    assert result.criticals[0].modified_roll == 7
    assert atlas.status.engine_hits == 1


def test_indirect_fire_needs_the_capability(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (8, 1))
    to_phase(Phase.COMBAT)

    result = resolve_ranged_attack(game, atlas.id, locust.id, indirect=True)

    assert result.error_code == "NO_CAPABILITY"


def test_indirect_fire_bonus_and_missile_damage(game, dice, deploy, to_phase):
    catapult = deploy("catapult", Side.PLAYER, (1, 1))
    marauder = deploy("marauder", Side.AI, (1, 9))
    to_phase(Phase.COMBAT)
    dice.push(4, 4)

    result = resolve_ranged_attack(game, catapult.id, marauder.id, indirect=True)

    assert result.details["attack_type"] == "indirect"
    assert result.roll.modifiers == {"skill": 4, "abilities": -1}
    assert result.roll.total == 11
    assert result.hit
    assert result.damage == 3


def test_battlefield_control_blocks_indirect_and_overheat(game, dice, deploy, to_phase):
    catapult = deploy("catapult", Side.PLAYER, (1, 1))
    deploy("battlemaster", Side.AI, (2, 2))
    target = deploy("locust", Side.AI, (1, 9))
    to_phase(Phase.COMBAT)

    assert resolve_ranged_attack(game, catapult.id, target.id, indirect=True).error_code == "BLOCKED"
    assert resolve_ranged_attack(game, catapult.id, target.id, overheat=True).error_code == "BLOCKED"

    dice.push(1, 1)
    assert resolve_ranged_attack(game, catapult.id, target.id).legal


def test_overheat_adds_two_heat(game, dice, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    locust = deploy("locust", Side.AI, (1, 9))
    to_phase(Phase.COMBAT)
    dice.push(1, 1)

    result = resolve_ranged_attack(game, atlas.id, locust.id, overheat=True)

    assert result.heat_generated == 4
