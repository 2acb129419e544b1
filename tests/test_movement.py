from engine import Phase, Side
from engine.core.effects import StatusEffect
from engine.core.types import MoveType
from engine.game import move_unit, set_terrain
from engine.mechanics import heat
from engine.mechanics.movement import MovementResolver


def test_walk_within_allowance(game, deploy, to_phase):
    locust = deploy("locust", Side.PLAYER, (1, 1))
    to_phase(Phase.MOVEMENT)

    result = move_unit(game, locust.id, (7, 1))

    assert result.success
    assert result.distance == 6.0
    assert result.allowance == 8
    assert locust.position == (7, 1)
    assert locust.status.has_moved
    assert locust.status.move_type == MoveType.WALK


def test_too_far_leaves_unit_in_place(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    to_phase(Phase.MOVEMENT)

    result = move_unit(game, atlas.id, (5, 1))

    assert not result.success
    assert result.error_code == "TOO_FAR"
    assert atlas.position == (1, 1)
    assert atlas.status.heat == 0
    assert not atlas.status.has_moved


def test_unknown_move_type_is_rejected_without_changes(game, deploy, to_phase):
    locust = deploy("locust", Side.PLAYER, (1, 1))
    to_phase(Phase.MOVEMENT)

    result = move_unit(game, locust.id, (2, 1), move_type="crawl")

    assert not result.success
    assert result.error_code == "UNKNOWN_MOVE_TYPE"
    assert result.new_pos == (1, 1)
    assert locust.position == (1, 1)
    assert locust.status.heat == 0
    assert not locust.status.has_moved


def test_run_uses_run_allowance_and_heat(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    to_phase(Phase.MOVEMENT)

    result = move_unit(game, atlas.id, (5, 1), move_type="run")

    assert result.success
    assert result.heat_generated == 2


def test_one_move_per_round(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    to_phase(Phase.MOVEMENT)
    move_unit(game, atlas.id, (2, 1))

    assert move_unit(game, atlas.id, (3, 1)).error_code == "ALREADY_MOVED"


def test_standing_still_counts_as_a_walk(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    to_phase(Phase.MOVEMENT)

    result = move_unit(game, atlas.id, (1, 1))

    assert result.success
    assert result.distance == 0.0
    assert atlas.status.heat == 1


def test_bounds_and_occupancy(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (0, 0))
    deploy("locust", Side.PLAYER, (1, 1))
    to_phase(Phase.MOVEMENT)

    assert move_unit(game, atlas.id, (-1, 0)).error_code == "OUT_OF_BOUNDS"
    assert move_unit(game, atlas.id, (1, 1)).error_code == "OCCUPIED"


def test_destroyed_and_immobilized_units_cannot_move(game, deploy, to_phase):
    wreck = deploy("atlas", Side.PLAYER, (1, 1))
    wreck.status.effects.add(StatusEffect.DESTROYED)
    stuck = deploy("scorpion", Side.PLAYER, (5, 5))
    stuck.status.effects.add(StatusEffect.IMMOBILIZED)
    to_phase(Phase.MOVEMENT)

    assert move_unit(game, wreck.id, (2, 1)).error_code == "UNIT_DESTROYED"
    assert move_unit(game, stuck.id, (5, 6)).error_code == "IMMOBILIZED"


def test_jump_needs_jump_jets_and_distance(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    jenner = deploy("jenner", Side.PLAYER, (5, 5))
    to_phase(Phase.MOVEMENT)

    assert move_unit(game, atlas.id, (2, 1), move_type=MoveType.JUMP).error_code == "NO_CAPABILITY"
    assert move_unit(game, jenner.id, (5, 5), move_type=MoveType.JUMP).error_code == "TOO_FAR"


def test_jump_ignores_woods_and_uses_fixed_heat(game, deploy, to_phase):
    jenner = deploy("jenner", Side.PLAYER, (1, 1))
    set_terrain(game, (7, 1), "heavy_woods")
    to_phase(Phase.MOVEMENT)

    result = move_unit(game, jenner.id, (7, 1), move_type=MoveType.JUMP)

    assert result.success
    assert result.heat_generated == 3


def test_woods_halve_allowance_down_to_the_floor(game, deploy, to_phase):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    set_terrain(game, (4, 1), "heavy_woods")
    set_terrain(game, (3, 1), "heavy_woods")
    to_phase(Phase.MOVEMENT)

    far = move_unit(game, atlas.id, (4, 1))
    assert far.error_code == "TOO_FAR"
    assert far.allowance == 2

    assert move_unit(game, atlas.id, (3, 1)).success


def test_heat_and_movement_hits_reduce_allowance(game, deploy):
    resolver = MovementResolver()
    hunchback = deploy("hunchback", Side.PLAYER, (1, 1))

    heat.add_heat(game, hunchback, 3)
    assert resolver.allowance(game, hunchback, MoveType.RUN) == 5

    hunchback.status.movement_hits = 1
    assert resolver.allowance(game, hunchback, MoveType.RUN) == 3

    hunchback.status.movement_hits = 3
    assert resolver.allowance(game, hunchback, MoveType.RUN) == 2


def test_vehicle_engine_hit_halves_speed(game, deploy):
    tank = deploy("scorpion", Side.PLAYER, (1, 1))
    tank.status.engine_hits = 1

    assert MovementResolver().allowance(game, tank, MoveType.WALK) == 3


def test_vehicle_terrain_restrictions(game, deploy, to_phase):
    packrat = deploy("packrat", Side.PLAYER, (1, 1))
    scorpion = deploy("scorpion", Side.PLAYER, (5, 5))
    swimmer = deploy("scorpion", Side.PLAYER, (8, 8), extra_abilities=("AMP",))
    set_terrain(game, (2, 1), "heavy_woods")
    set_terrain(game, (5, 6), "water")
    set_terrain(game, (8, 9), "water")
    to_phase(Phase.MOVEMENT)

    assert move_unit(game, packrat.id, (2, 1)).error_code == "IMPASSABLE"
    assert move_unit(game, scorpion.id, (5, 6)).error_code == "IMPASSABLE"
    assert move_unit(game, swimmer.id, (8, 9)).success


def test_vtol_elevation_and_shared_hexes(game, deploy, to_phase):
    heli = deploy("warrior", Side.PLAYER, (1, 1))
    other = deploy("warrior", Side.PLAYER, (3, 3))
    deploy("atlas", Side.AI, (4, 1))
    set_terrain(game, (4, 1), "heavy_woods")
    to_phase(Phase.MOVEMENT)

    assert move_unit(game, heli.id, (4, 1), elevation=7).error_code == "INVALID_ELEVATION"

    result = move_unit(game, heli.id, (4, 1))
    assert result.success
    assert heli.status.elevation == 1

    assert move_unit(game, other.id, (4, 1), elevation=1).error_code == "OCCUPIED"


def test_anti_mech_infantry_can_close_into_enemy_hex(game, deploy, to_phase):
    squad = deploy("anti-mech-infantry", Side.PLAYER, (1, 1))
    rifles = deploy("rifle-squad", Side.PLAYER, (1, 3))
    deploy("atlas", Side.AI, (2, 2))
    to_phase(Phase.MOVEMENT)

    assert move_unit(game, rifles.id, (2, 2)).error_code == "OCCUPIED"
    assert move_unit(game, squad.id, (2, 2)).success


def test_infantry_allowance_shrinks_with_casualties(game, deploy):
    squad = deploy("rifle-squad", Side.PLAYER, (1, 1))

    squad.status.damage.armor = 2
    assert squad.movement_allowance(MoveType.WALK) == 1
    assert MovementResolver().allowance(game, squad, MoveType.WALK) == 2
