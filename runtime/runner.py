"""
Step-wise game runner.

Each ``step()`` handles exactly one phase: it asks the agents for
commands where the phase needs them, applies them through the
dispatcher, advances the phase machine and returns a ``StepFrame``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from agents import BaseAgent, create_agent_from_spec
from agents.commands import Command
from agents.spec import AgentSpec
from engine.core.types import Phase, Side
from engine.mechanics.phases import advance_phase, roll_initiative, switch_active_side
from engine.mechanics.victory import IN_PROGRESS, GameOverResult, VictoryConditions
from engine.world.state import GameState
from infra.logger import get_logger
from infra.paths import BATTLE_LOG_DIR

from .dispatch import CommandOutcome, apply_commands
from .events import extract_events, snapshot_units
from .frame import StepFrame
from .scenario import Scenario

log = get_logger(__name__)

AgentLike = Union[AgentSpec, BaseAgent]


class GameRunner:
    """
    Drive one game phase by phase and return UI-friendly frames.

    Usage:
        runner = GameRunner(Scenario.from_dict(data))
        while not runner.done:
            frame = runner.step()
    """

    def __init__(
        self,
        scenario: Optional[Scenario] = None,
        *,
        state: Optional[GameState] = None,
        agents: Optional[Mapping[Side, AgentLike]] = None,
        max_rounds: Optional[int] = None,
    ):
        """
        Args:
            scenario: Setup to build the game from
            state: Existing game to drive instead of building one
            agents: Per-side agents or specs (override the scenario's)
            max_rounds: Round limit (overrides the scenario's)
        """
        if scenario is None and state is None:
            raise ValueError("GameRunner needs a scenario or a state")

        self.scenario = scenario or Scenario()
        self.state = state if state is not None else self.scenario.build_state()

        specs: Dict[Side, AgentLike] = dict(self.scenario.agent_specs())
        specs.update(agents or {})
        self._agents: Dict[Side, BaseAgent] = {}
        self._act_params: Dict[Side, Dict[str, Any]] = {}
        for side, agent in specs.items():
            if isinstance(agent, BaseAgent):
                self._agents[side] = agent
                self._act_params[side] = {}
            else:
                prepared = create_agent_from_spec(agent.with_side(side))
                self._agents[side] = prepared.agent
                self._act_params[side] = prepared.act_params

        rounds = max_rounds if max_rounds is not None else self.scenario.max_rounds
        self.victory = VictoryConditions(max_rounds=rounds)
        self.step_count = 0
        self.outcome: GameOverResult = IN_PROGRESS
        self._aborted = False

        log.info(
            "GameRunner ready: %d units, agents %s",
            len(self.state.battlefield.all_units()),
            {str(s): a.name for s, a in self._agents.items()},
        )

    # ------------------------------------------------------------------#
    # Core API
    # ------------------------------------------------------------------#
    @property
    def done(self) -> bool:
        return self._aborted or self.outcome.over

    @property
    def turn(self) -> int:
        return self.state.round

    def agent_for(self, side: Side) -> BaseAgent:
        return self._agents[side]

    def step(self, injections: Optional[Dict[str, Dict[str, Any]]] = None) -> StepFrame:
        """
        Run the current phase and advance to the next one.

        Args:
            injections: Extra keyword arguments per side ("player"/"ai")
                passed to that side's agent

        Raises:
            RuntimeError: The game is already over
        """
        if self.done:
            raise RuntimeError("Game is over")

        injections = injections or {}
        state = self.state
        self.step_count += 1
        frame = StepFrame(step=self.step_count, round=state.round, phase=str(state.phase))
        before = snapshot_units(state)
        log_start = len(state.log)

        if state.phase == Phase.INITIATIVE:
            frame.initiative = roll_initiative(state).to_dict()
        elif state.phase in (Phase.MOVEMENT, Phase.COMBAT):
            self._run_sides(frame, injections)

        frame.phase_change = advance_phase(state).to_dict()

        self.outcome = self.victory.check_all(state)
        if self.outcome.over:
            state.record(f"Game over: {self.outcome.reason}", **self.outcome.to_dict())
            log.info("Game over after %d steps: %s", self.step_count, self.outcome)

        frame.events = extract_events(before=before, state=state, outcome=self.outcome)
        for event in frame.events:
            log.info("Event: %s", event)
        frame.log = [e.to_dict() for e in state.log.since(log_start)]
        frame.state = state.to_dict()
        frame.outcome = self.outcome.to_dict()
        frame.done = self.done
        return frame

    def run(self, max_steps: int = 1000) -> GameOverResult:
        """Step until the game ends or ``max_steps`` is reached."""
        while not self.done and self.step_count < max_steps:
            self.step()
        return self.outcome

    def submit(self, side: Side, commands: Iterable[Command]) -> List[CommandOutcome]:
        """Apply externally supplied commands for ``side`` in the current phase."""
        if self.done:
            raise RuntimeError("Game is over")
        return apply_commands(self.state, commands, side)

    def abort(self) -> None:
        """Stop the game early; no further steps are accepted."""
        if self.done:
            return
        self._aborted = True
        self.state.record("Game aborted", round=self.state.round)
        log.info("Game aborted at round %d", self.state.round)

    def save_log(self, path: Optional[Path] = None) -> Path:
        """Write the battle log and final outcome as JSON; returns the file path."""
        if path is None:
            BATTLE_LOG_DIR.mkdir(parents=True, exist_ok=True)
            seed = self.scenario.seed if self.scenario.seed is not None else "unseeded"
            path = BATTLE_LOG_DIR / f"battle_{seed}_r{self.state.round}_s{self.step_count}.json"
        payload = {
            "scenario": self.scenario.to_dict(),
            "outcome": self.outcome.to_dict(),
            "log": self.state.log.to_list(),
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        log.info("Battle log saved to %s", path)
        return path

    # ------------------------------------------------------------------#
    # Helpers
    # ------------------------------------------------------------------#
    def _run_sides(self, frame: StepFrame, injections: Dict[str, Dict[str, Any]]) -> None:
        state = self.state
        if state.turn.initiative is not None and state.turn.initiative.winner is not None:
            state.turn.active_side = state.turn.initiative.winner

        for index in range(2):
            if index:
                switch_active_side(state)
            side = state.turn.active_side
            agent = self._agents[side]
            kwargs = {**self._act_params.get(side, {}), **injections.get(str(side), {})}
            commands, metadata = agent.get_commands(state, **kwargs)
            frame.metadata[str(side)] = metadata
            frame.actions[str(side)] = apply_commands(state, commands, side)
            if self.victory.check_all(state).over:
                break
