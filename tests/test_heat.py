from engine import Phase, Side
from engine.core.effects import StatusEffect
from engine.core.types import AdvancedMeleeVariant, MeleeVariant, MoveType, RangeBand
from engine.game import advance_phase, attempt_startup, move_unit
from engine.mechanics import heat
from engine.mechanics.dfa import dfa_target_number
from engine.mechanics.melee import melee_target_number
from engine.mechanics.melee_advanced import advanced_target_number
from engine.world.state import JumpHeatRule

from conftest import go_to


def test_walk_generates_one_heat(game, deploy, to_phase):
    locust = deploy("locust", Side.PLAYER, (1, 1))
    to_phase(Phase.MOVEMENT)

    result = move_unit(game, locust.id, (3, 1))

    assert result.success
    assert result.heat_generated == 1
    assert locust.status.heat == 1


def test_heat_is_clamped_to_capacity(game, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))

    result = heat.add_heat(game, atlas, 10, source="test")

    assert atlas.status.heat == 4
    assert result.added == 4


def test_threshold_effects_follow_heat(game, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))

    heat.add_heat(game, atlas, 2)
    assert atlas.has_effect(StatusEffect.HEAT_ATTACK_PENALTY_1)
    assert not atlas.has_effect(StatusEffect.HEAT_ATTACK_PENALTY_2)
    assert heat.heat_attack_penalty(atlas) == 1

    heat.add_heat(game, atlas, 1)
    assert atlas.has_effect(StatusEffect.HEAT_ATTACK_PENALTY_2)
    assert atlas.has_effect(StatusEffect.HEAT_MOVEMENT_PENALTY)
    assert heat.heat_attack_penalty(atlas) == 2

    heat.add_heat(game, atlas, 1)
    assert atlas.has_effect(StatusEffect.HEAT_SHUTDOWN_RISK)
    assert atlas.has_effect(StatusEffect.HEAT_AUTO_DAMAGE)


def test_vehicles_and_infantry_ignore_heat(game, deploy):
    tank = deploy("scorpion", Side.PLAYER, (1, 1))
    squad = deploy("rifle-squad", Side.PLAYER, (2, 2))

    assert heat.add_heat(game, tank, 3).added == 0
    assert heat.add_heat(game, squad, 3).added == 0
    assert tank.status.heat == 0 and squad.status.heat == 0


def test_movement_heat_by_rule():
    assert heat.movement_heat(MoveType.WALK, 3.0, JumpHeatRule.FIXED) == 1
    assert heat.movement_heat(MoveType.RUN, 5.0, JumpHeatRule.FIXED) == 2
    assert heat.movement_heat(MoveType.JUMP, 6.0, JumpHeatRule.FIXED) == 3
    assert heat.movement_heat(MoveType.JUMP, 6.0, JumpHeatRule.DISTANCE) == 6
    assert heat.movement_heat(MoveType.JUMP, 2.0, JumpHeatRule.DISTANCE) == 3


def test_weapon_heat_is_capped_per_band():
    assert heat.weapon_heat(RangeBand.SHORT, 4, overheat=False) == 3
    assert heat.weapon_heat(RangeBand.MEDIUM, 4, overheat=False) == 2
    assert heat.weapon_heat(RangeBand.LONG, 1, overheat=True) == 3
    assert heat.weapon_heat(RangeBand.EXTREME, 0, overheat=False) == 0


def test_end_of_round_dissipates_and_burns_structure(game, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    go_to(game, Phase.END)
    heat.add_heat(game, atlas, 4)

    change = advance_phase(game)

    assert change.phase == Phase.INITIATIVE
    assert atlas.status.heat == 3
    assert atlas.status.damage.structure == 1
    assert not atlas.has_effect(StatusEffect.HEAT_SHUTDOWN_RISK)
    assert atlas.has_effect(StatusEffect.HEAT_MOVEMENT_PENALTY)
    assert change.heat[0]["initial_heat"] == 4
    assert change.heat[0]["final_heat"] == 3
    # Below the limit after dissipation, so no shutdown roll was made.
    assert change.shutdowns == []


def test_engine_hits_add_heat_before_dissipation(game, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    atlas.status.engine_hits = 1
    go_to(game, Phase.END)

    advance_phase(game)

    assert atlas.status.heat == 1


def test_shut_down_mech_does_not_dissipate(game, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    heat.add_heat(game, atlas, 2)
    atlas.status.effects.add(StatusEffect.SHUTDOWN)
    go_to(game, Phase.END)

    advance_phase(game)

    assert atlas.status.heat == 2


def test_failed_shutdown_check_then_restart(game, dice, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    heat.add_heat(game, atlas, 4)

    dice.push(3, 4)
    check = heat.check_shutdown(game, atlas)
    assert check.roll == 7
    assert not check.success
    assert atlas.has_effect(StatusEffect.SHUTDOWN)

    dice.push(2, 3)
    restart = attempt_startup(game, atlas.id)
    assert restart.legal
    assert restart.success
    assert not atlas.has_effect(StatusEffect.SHUTDOWN)


def test_passed_shutdown_check_keeps_running(game, dice, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    heat.add_heat(game, atlas, 4)

    dice.push(4, 4)
    assert heat.check_shutdown(game, atlas).success
    assert not atlas.has_effect(StatusEffect.SHUTDOWN)


def test_shutdown_check_needs_the_risk_flag(game, dice, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))

    check = heat.check_shutdown(game, atlas)

    assert not check.legal
    assert dice.remaining == 0


def test_startup_rejected_when_running_or_unknown(game, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    tank = deploy("scorpion", Side.AI, (5, 5))

    assert attempt_startup(game, atlas.id).error_code == "PRECONDITION"
    assert attempt_startup(game, tank.id).error_code == "WRONG_UNIT_KIND"
    assert not attempt_startup(game, "u99").legal


def test_failed_restart_leaves_unit_shut_down(game, dice, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    atlas.status.effects.add(StatusEffect.SHUTDOWN)

    dice.push(1, 2)
    result = attempt_startup(game, atlas.id)

    assert result.legal and not result.success
    assert atlas.has_effect(StatusEffect.SHUTDOWN)


def test_heat_penalty_applies_to_physical_attacks(game, deploy):
    jenner = deploy("jenner", Side.PLAYER, (1, 1))
    atlas = deploy("atlas", Side.AI, (2, 1))
    _, cool_mods = melee_target_number(game, jenner, atlas, MeleeVariant.PUNCH)
    assert "heat" not in cool_mods

    heat.add_heat(game, jenner, 4)

    for variant in (MeleeVariant.PUNCH, MeleeVariant.KICK):
        tn, mods = melee_target_number(game, jenner, atlas, variant)
        assert mods["heat"] == 2
        assert tn == min(12, sum(mods.values()))
    _, mods = advanced_target_number(game, jenner, atlas, AdvancedMeleeVariant.PUNCH)
    assert mods["heat"] == 2
    _, mods = dfa_target_number(game, jenner, atlas)
    assert mods["heat"] == 2
