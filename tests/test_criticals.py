from engine import Side
from engine.core.effects import StatusEffect
from engine.core.types import CriticalEffect, UnitKind
from engine.mechanics.criticals import critical_triggered, lookup_critical, process_critical_hit


def test_mech_table():
    assert lookup_critical(UnitKind.MECH, 2) == CriticalEffect.ENGINE_HIT
    assert lookup_critical(UnitKind.MECH, 7) == CriticalEffect.ENGINE_HIT
    assert lookup_critical(UnitKind.MECH, 8) == CriticalEffect.FIRE_CONTROL_HIT
    assert lookup_critical(UnitKind.MECH, 9) == CriticalEffect.MOVEMENT_HIT
    assert lookup_critical(UnitKind.MECH, 10) == CriticalEffect.WEAPON_HIT
    assert lookup_critical(UnitKind.MECH, 11) == CriticalEffect.MOTIVE_SYSTEM_HIT
    assert lookup_critical(UnitKind.MECH, 12) == CriticalEffect.AMMO_EXPLOSION


def test_vehicle_table_and_clamping():
    assert lookup_critical(UnitKind.VEHICLE, 6) == CriticalEffect.ENGINE_HIT
    assert lookup_critical(UnitKind.VEHICLE, 9) == CriticalEffect.WEAPON_HIT
    assert lookup_critical(UnitKind.VEHICLE, 10) == CriticalEffect.MOTIVE_SYSTEM_HIT
    assert lookup_critical(UnitKind.VEHICLE, 15) == CriticalEffect.MOTIVE_SYSTEM_HIT
    assert lookup_critical(UnitKind.INFANTRY, 12) == CriticalEffect.ADDITIONAL_DAMAGE


def test_trigger_on_natural_twelve_or_structure_threshold(game, deploy):
    atlas = deploy("atlas", Side.AI, (4, 4))
    assert critical_triggered(atlas, 12, 0)
    assert not critical_triggered(atlas, 9, 0)

    atlas.status.damage.structure = 1
    assert critical_triggered(atlas, 9, 0)
    # Already past the threshold and no new structure damage this hit.
    assert not critical_triggered(atlas, 9, 1)


def test_fire_control_hit_is_recorded(game, deploy):
    warhammer = deploy("warhammer", Side.AI, (4, 4))

    result = process_critical_hit(game, warhammer, roll=8)

    assert result.applied
    assert result.effect == "FIRE_CONTROL_HIT"
    assert warhammer.status.fire_control_hits == 1
    assert warhammer.status.criticals[0].effect == "FIRE_CONTROL_HIT"


def test_motive_hit_immobilizes(game, deploy):
    tank = deploy("scorpion", Side.AI, (4, 4))

    process_critical_hit(game, tank, roll=11)

    assert tank.has_effect(StatusEffect.IMMOBILIZED)


def test_ammo_explosion_burns_structure(game, deploy):
    warhammer = deploy("warhammer", Side.AI, (4, 4))

    process_critical_hit(game, warhammer, roll=12)

    assert warhammer.status.damage.structure == 2
    assert warhammer.status.damage.armor == 0


def test_reinforced_ignores_weapon_hits(game, deploy):
    atlas = deploy("atlas", Side.AI, (4, 4))

    result = process_critical_hit(game, atlas, roll=10)

    assert result.prevented and not result.applied
    assert atlas.status.weapon_hits == 0
    assert atlas.status.criticals == []


def test_hardened_defender_and_precise_attacker(game, deploy):
    manticore = deploy("manticore", Side.AI, (4, 4))
    raven = deploy("raven", Side.PLAYER, (2, 2))

    hardened = process_critical_hit(game, manticore, roll=10)
    assert hardened.modified_roll == 9

    precise = process_critical_hit(game, manticore, raven, roll=9)
    assert precise.modified_roll == 9


def test_critical_roll_uses_game_dice_when_not_given(game, dice, deploy):
    warhammer = deploy("warhammer", Side.AI, (4, 4))
    dice.push(4, 5)

    result = process_critical_hit(game, warhammer)

    assert result.roll == 9
    assert warhammer.status.movement_hits == 1


def test_infantry_critical_is_extra_damage(game, deploy):
    squad = deploy("rifle-squad", Side.AI, (4, 4))

    result = process_critical_hit(game, squad)

    assert result.effect == "ADDITIONAL_DAMAGE"
    assert squad.status.damage.armor == 1


def test_no_critical_on_wreck(game, deploy):
    jenner = deploy("jenner", Side.AI, (4, 4))
    jenner.status.effects.add(StatusEffect.DESTROYED)

    result = process_critical_hit(game, jenner, roll=12)

    assert result.effect is None
