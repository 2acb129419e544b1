import pytest
from pydantic_ai.models.test import TestModel

from agents import (
    AgentSpec,
    BaseAgent,
    LLMCommander,
    RandomAgent,
    StartupCommand,
    TurnOrders,
    agent_keys,
    create_agent_from_spec,
    register_agent,
    resolve_agent_class,
)
from agents.llm_agent.prompt_formatter import PromptFormatter
from engine import Phase, Side
from engine.core.effects import StatusEffect
from runtime.dispatch import apply_commands


class PickyAgent(BaseAgent):
    """Accepts nothing beyond its side."""

    def __init__(self, side):
        super().__init__(side)

    def get_commands(self, state, **kwargs):
        return [], {}


def _skirmish(deploy):
    deploy("hunchback", Side.PLAYER, (2, 2))
    deploy("scorpion", Side.PLAYER, (3, 1))
    deploy("anti-mech-infantry", Side.PLAYER, (4, 4))
    deploy("jenner", Side.AI, (5, 5))
    deploy("locust", Side.AI, (8, 8))


@pytest.mark.parametrize("template", ["hunchback", "jenner", "scorpion", "anti-mech-infantry"])
def test_random_movement_commands_are_legal(game, deploy, to_phase, template):
    deploy(template, Side.PLAYER, (4, 4))
    deploy("locust", Side.AI, (5, 5))
    to_phase(Phase.MOVEMENT)
    agent = RandomAgent(Side.PLAYER, seed=3, wait_probability=0.0)

    commands, metadata = agent.get_commands(game)
    outcomes = apply_commands(game, commands, Side.PLAYER)

    assert metadata["policy"] == "random"
    assert commands[0].type == "MOVE"
    assert all(o["legal"] for o in outcomes), outcomes


def test_random_agent_never_touches_game_dice(game, dice, deploy, to_phase):
    _skirmish(deploy)
    to_phase(Phase.COMBAT)

    RandomAgent(Side.AI, seed=4).get_commands(game)

    assert dice.remaining == 0


def test_shut_down_mech_tries_to_restart(game, deploy, to_phase):
    hunchback = deploy("hunchback", Side.PLAYER, (2, 2))
    deploy("locust", Side.AI, (8, 8))
    hunchback.status.effects.add(StatusEffect.SHUTDOWN)
    to_phase(Phase.MOVEMENT)

    commands, _ = RandomAgent(Side.PLAYER, seed=1).get_commands(game)

    assert commands == [StartupCommand(unit_id=hunchback.id)]


def test_same_seed_same_choices(game, deploy, to_phase):
    _skirmish(deploy)
    to_phase(Phase.MOVEMENT)

    first, _ = RandomAgent(Side.PLAYER, seed=7).get_commands(game)
    second, _ = RandomAgent(Side.PLAYER, seed=7).get_commands(game)

    assert first == second


def test_registry_resolves_keys_and_paths():
    assert {"random", "llm"} <= set(agent_keys())
    assert resolve_agent_class("random") is RandomAgent
    assert resolve_agent_class("agents.random_agent.RandomAgent") is RandomAgent
    with pytest.raises(ValueError):
        resolve_agent_class("greedy")
    with pytest.raises(TypeError):
        resolve_agent_class("engine.core.types.Side")


def test_factory_builds_from_spec():
    spec = AgentSpec.from_dict({
        "type": "random",
        "side": "ai",
        "name": "Scout",
        "init_params": {"seed": 3, "wait_probability": 0.5},
        "act_params": {"verbose": True},
    })

    prepared = create_agent_from_spec(spec)

    assert isinstance(prepared.agent, RandomAgent)
    assert prepared.agent.side == Side.AI
    assert prepared.agent.name == "Scout"
    assert prepared.agent.wait_probability == 0.5
    assert prepared.act_params == {"verbose": True}
    assert AgentSpec.from_dict(spec.to_dict()) == spec


def test_spec_requires_side():
    with pytest.raises(ValueError):
        AgentSpec.from_dict({"type": "random"})


def test_prompt_lists_own_units_and_targets(game, deploy):
    _skirmish(deploy)

    report, payload = PromptFormatter().build_prompt(game, Side.PLAYER)

    assert [u["name"] for u in payload["friendlies"]] == ["Hunchback HBK-4G", "Scorpion Light Tank", "Anti-Mech Infantry Squad"]
    assert len(payload["enemies"]) == 2
    assert "## YOUR UNITS" in report
    assert "## ENEMY UNITS" in report


def test_llm_commander_keeps_only_own_orders(game, deploy, to_phase):
    hunchback = deploy("hunchback", Side.PLAYER, (2, 2))
    locust = deploy("locust", Side.AI, (8, 8))
    to_phase(Phase.MOVEMENT)
    orders = {
        "analysis": "Hold and wait for the locust",
        "orders": [
            {"reasoning": "stay in cover", "command": {"type": "WAIT", "unit_id": hunchback.id}},
            {"reasoning": "not mine", "command": {"type": "WAIT", "unit_id": locust.id}},
        ],
    }
    commander = LLMCommander(Side.PLAYER, model=TestModel(custom_output_args=orders))

    commands, metadata = commander.get_commands(game)

    assert [c.unit_id for c in commands] == [hunchback.id]
    assert metadata["analysis"] == "Hold and wait for the locust"
    assert metadata["reasoning"][hunchback.id] == "stay in cover"
    assert commander.notes == ["R0 MOVEMENT: Hold and wait for the locust"]

    commander.reset()
    assert commander.notes == []


def test_llm_commander_holds_when_the_model_fails(game, deploy, to_phase, caplog):
    deploy("hunchback", Side.PLAYER, (2, 2))
    to_phase(Phase.MOVEMENT)

    class Broken:
        def run_sync(self, *args, **kwargs):
            raise RuntimeError("provider unavailable")

    commander = LLMCommander(Side.PLAYER, model="test")
    commander._agent = Broken()

    commands, metadata = commander.get_commands(game)

    assert commands == []
    assert metadata["error"] == "provider unavailable"
    assert "model call failed" in caplog.text


def test_turn_orders_flatten_commands():
    orders = TurnOrders.model_validate({"orders": [{"command": {"type": "STARTUP", "unit_id": "u1"}}]})

    assert orders.commands() == [StartupCommand(unit_id="u1")]


def test_factory_accepts_dict_and_reports_bad_params():
    prepared = create_agent_from_spec({"type": "random", "side": "player"})
    assert prepared.agent.side == Side.PLAYER

    with pytest.raises(ValueError):
        create_agent_from_spec({"type": "test_agents.PickyAgent", "side": "ai", "init_params": {"bogus": 1}})


def test_registry_refuses_to_rebind_a_key():
    class Other(RandomAgent):
        pass

    with pytest.raises(ValueError):
        register_agent("random", Other)
    assert register_agent("random", RandomAgent) is RandomAgent
