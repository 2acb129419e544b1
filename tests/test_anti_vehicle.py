from engine import Phase, Side
from engine.core.types import AntiVehicleVariant, InfantryEquipment, MoveType
from engine.game import resolve_anti_vehicle_infantry_attack, set_terrain
from engine.mechanics.anti_vehicle import anti_vehicle_damage, anti_vehicle_target_number


def test_leg_attack_without_equipment(game, dice, deploy, to_phase):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (3, 3))
    squad.status.equipment.clear()
    atlas = deploy("atlas", Side.AI, (3, 3))
    to_phase(Phase.COMBAT)
    dice.push(2, 2, 1, 3, 3)

    result = resolve_anti_vehicle_infantry_attack(game, squad.id, atlas.id, "leg_attack")

    assert result.hit
    assert result.roll.target_number == 3
    assert result.damage == 4
    assert result.details["location"] == "LEFT_LEG"
    assert result.details["target_psr"]["target"] == 5
    assert result.details["casualties"] == 2
    assert squad.status.damage.armor == 1
    assert atlas.status.damage.armor == 4


def test_vibro_blade_sharpens_leg_attack(game, dice, deploy, to_phase):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (3, 3))
    atlas = deploy("atlas", Side.AI, (3, 3))
    to_phase(Phase.COMBAT)
    dice.push(1, 1, 2, 1, 1)

    result = resolve_anti_vehicle_infantry_attack(game, squad.id, atlas.id, AntiVehicleVariant.LEG_ATTACK)

    assert result.roll.target_modifiers == {"base": 7, "skill": -4, "vibro_blade": -1}
    assert result.hit
    assert result.damage == 6
    assert result.details["location"] == "RIGHT_LEG"
    assert result.details["target_psr"]["target"] == 6
    assert squad.equipment_count(InfantryEquipment.VIBRO_BLADE) == 1


def test_swarm_sets_up_ongoing_damage(game, dice, deploy, to_phase):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (3, 3))
    tank = deploy("bulldog", Side.AI, (3, 3))
    to_phase(Phase.COMBAT)
    dice.push(3, 3, 4, 2)

    result = resolve_anti_vehicle_infantry_attack(game, squad.id, tank.id, "swarm")

    assert result.roll.target_number == 5
    assert result.details["location"] == "RIGHT_TORSO"
    assert result.damage == 3
    assert result.details["swarming"] == {"turns_remaining": 2, "damage_per_turn": 2}
    assert result.details["casualties"] == 4


def test_swarm_needs_ten_troops(game, deploy, to_phase):
    squad = deploy("battle-armor", Side.PLAYER, (3, 3))
    atlas = deploy("atlas", Side.AI, (3, 3))
    to_phase(Phase.COMBAT)

    assert resolve_anti_vehicle_infantry_attack(game, squad.id, atlas.id, "swarm").error_code == "PRECONDITION"


def test_mines_work_from_an_adjacent_hex_and_are_used_up(game, dice, deploy, to_phase):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (3, 3))
    atlas = deploy("atlas", Side.AI, (4, 4))
    to_phase(Phase.COMBAT)
    dice.push(3, 3, 1)

    result = resolve_anti_vehicle_infantry_attack(game, squad.id, atlas.id, "mine")

    assert result.damage == 6
    assert result.details["casualties"] == 1
    assert squad.equipment_count(InfantryEquipment.ANTI_MECH_MINE) == 0
    assert squad.equipment_count(InfantryEquipment.DEMO_CHARGE) == 1
    assert squad.stats.equipment[InfantryEquipment.ANTI_MECH_MINE] == 2


def test_demo_charge_with_inferno_grenades_heats_a_mech(game, dice, deploy, to_phase):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (3, 3))
    squad.status.equipment[InfantryEquipment.INFERNO_GRENADE] = 1
    warhammer = deploy("warhammer", Side.AI, (3, 4))
    to_phase(Phase.COMBAT)
    dice.push(3, 3, 5, 1, 2)

    result = resolve_anti_vehicle_infantry_attack(game, squad.id, warhammer.id, "demo_charge")

    assert result.damage == 5
    assert result.details["location"] == "RIGHT_TORSO"
    assert result.details["inferno_heat"] == 3
    assert warhammer.status.heat == 3
    assert result.details["casualties"] == 3
    assert squad.equipment_count(InfantryEquipment.DEMO_CHARGE) == 0


def test_miss_still_costs_troops_but_keeps_equipment(game, dice, deploy, to_phase):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (3, 3))
    atlas = deploy("atlas", Side.AI, (3, 4))
    to_phase(Phase.COMBAT)
    dice.push(1, 1)

    result = resolve_anti_vehicle_infantry_attack(game, squad.id, atlas.id, "mine")

    assert not result.hit
    assert result.details["casualties"] == 1
    assert result.self_damage == 1
    assert squad.equipment_count(InfantryEquipment.ANTI_MECH_MINE) == 2
    assert atlas.status.damage.total == 0


def test_anti_vehicle_legality(game, deploy, to_phase):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (3, 3))
    rifles = deploy("rifle-squad", Side.PLAYER, (5, 5))
    hunchback = deploy("hunchback", Side.PLAYER, (8, 8))
    atlas = deploy("atlas", Side.AI, (5, 5))
    enemy_squad = deploy("rifle-squad", Side.AI, (3, 4))
    heli = deploy("warrior", Side.AI, (3, 3))
    far_tank = deploy("bulldog", Side.AI, (3, 5))
    to_phase(Phase.COMBAT)

    def attempt(attacker, target, variant):
        return resolve_anti_vehicle_infantry_attack(game, attacker.id, target.id, variant).error_code

    assert attempt(rifles, atlas, "leg_attack") == "NO_CAPABILITY"
    assert attempt(hunchback, atlas, "leg_attack") == "WRONG_UNIT_KIND"
    assert attempt(squad, enemy_squad, "mine") == "INVALID_TARGET"
    assert attempt(squad, heli, "leg_attack") == "INVALID_TARGET"
    assert attempt(squad, far_tank, "mine") == "NOT_ADJACENT"
    assert attempt(squad, atlas, "leg_attack") == "NOT_ADJACENT"
    assert attempt(squad, atlas, "sapper") == "UNKNOWN_VARIANT"


def test_target_movement_and_woods_modifiers(game, deploy):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (3, 3))
    atlas = deploy("atlas", Side.AI, (3, 3))
    set_terrain(game, (3, 3), "light_woods")
    atlas.status.has_moved = True
    atlas.status.move_type = MoveType.JUMP

    number, mods = anti_vehicle_target_number(game, squad, atlas, AntiVehicleVariant.SWARM)

    assert mods == {"base": 9, "skill": -4, "target_moved": 4, "woods": -1}
    assert number == 8


def test_damage_is_capped_by_troops(game, deploy):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (3, 3))
    squad.status.equipment[InfantryEquipment.DEMO_CHARGE] = 3
    squad.status.damage.armor = 2

    assert squad.troop_count == 7
    assert anti_vehicle_damage(squad, AntiVehicleVariant.DEMO_CHARGE) == 14
