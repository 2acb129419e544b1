from engine import Phase, Side
from engine.core.types import MoveType, RangeBand
from engine.game import resolve_ranged_attack
from engine.mechanics.damage import apply_damage


def test_fresh_squad_is_at_full_strength(game, deploy):
    squad = deploy("heavy-battle-armor", Side.PLAYER, (1, 1))

    assert squad.squad_ratio == 1.0
    assert squad.troop_count == 5
    assert squad.effective_damage(RangeBand.SHORT) == 3
    assert squad.to_dict()["troop_count"] == 5


def test_damage_output_scales_with_losses(game, deploy):
    squad = deploy("heavy-battle-armor", Side.PLAYER, (1, 1))

    apply_damage(game, squad, 3, use_hooks=False)

    assert squad.squad_ratio == 4 / 7
    assert squad.effective_damage(RangeBand.SHORT) == 1
    assert squad.effective_damage(RangeBand.MEDIUM) == 1
    assert squad.effective_damage(RangeBand.LONG) == 0
    assert squad.troop_count == 3


def test_movement_scales_and_bottoms_out_at_one(game, deploy):
    squad = deploy("battle-armor", Side.PLAYER, (1, 1))

    squad.status.damage.armor = 1
    assert squad.movement_allowance(MoveType.WALK) == 2
    assert squad.movement_allowance(MoveType.RUN) == 4

    squad.status.damage.armor = 4
    assert squad.movement_allowance(MoveType.RUN) == 1


def test_mechs_are_not_scaled(game, deploy):
    atlas = deploy("atlas", Side.PLAYER, (1, 1))
    atlas.status.damage.armor = 7

    assert atlas.squad_ratio == 1.0
    assert atlas.troop_count == 0
    assert atlas.effective_damage(RangeBand.SHORT) == 4


def test_wounded_squad_fires_with_reduced_damage(game, dice, deploy, to_phase):
    squad = deploy("heavy-battle-armor", Side.PLAYER, (1, 1))
    atlas = deploy("atlas", Side.AI, (3, 1))
    squad.status.damage.armor = 3
    to_phase(Phase.COMBAT)
    dice.push(5, 5)

    result = resolve_ranged_attack(game, squad.id, atlas.id)

    assert result.hit
    assert result.damage == 1
    assert result.heat_generated == 0
    assert squad.status.heat == 0


def test_destroyed_squad_has_nothing_left(game, deploy):
    squad = deploy("rifle-squad", Side.PLAYER, (1, 1))

    apply_damage(game, squad, 3, use_hooks=False)

    assert squad.destroyed
    assert squad.troop_count == 0
    assert squad.effective_damage(RangeBand.SHORT) == 0
    assert squad.movement_allowance(MoveType.WALK) == 0
