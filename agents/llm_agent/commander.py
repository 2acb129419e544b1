"""
LLM-backed commander.

Wraps a pydantic-ai agent whose structured output is ``TurnOrders``. The
model sees the rules summary plus a per-phase battlefield report and
returns one order per unit. Orders are filtered to this side's units; the
dispatcher still validates every command against the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic_ai import Agent, RunContext

from engine.core.types import Side
from engine.world.state import GameState
from infra.logger import get_logger

from ..base_agent import BaseAgent
from ..commands import Command, TurnOrders
from ..registry import register_agent
from .prompt_formatter import PromptConfig, PromptFormatter
from .prompts import RULES_INFO

log = get_logger(__name__)


@dataclass
class CommanderDeps:
    side: Side
    phase: str
    round: int
    report: str
    notes: List[str] = field(default_factory=list)


COMMANDER_PROMPT = f"""
# ROLE
You command one side in a tactical mech battle. Read the battlefield report and give
exactly one legal order to each of your units for the current phase.

# TASK
- Only order your own units, by their exact IDs.
- MOVEMENT phase: MOVE or WAIT. COMBAT phase: FIRE, MELEE, ANTI_VEHICLE or WAIT.
- A shut-down mech can only STARTUP.
- If no good option exists, WAIT is acceptable.

# RULES
{RULES_INFO}
"""


def build_commander_agent(model: str) -> Agent[CommanderDeps, TurnOrders]:
    agent = Agent[CommanderDeps, TurnOrders](
        model,
        deps_type=CommanderDeps,
        output_type=TurnOrders,
        instructions=COMMANDER_PROMPT,
        output_retries=3,
    )

    @agent.instructions
    def battlefield_report(ctx: RunContext[CommanderDeps]) -> str:
        deps = ctx.deps
        notes = "\n".join(f"- {n}" for n in deps.notes) if deps.notes else "- None."
        return f"""---

# YOU ARE: {deps.side}
# ROUND {deps.round}, PHASE {deps.phase}

{deps.report}

---

# NOTES FROM EARLIER PHASES
{notes}
"""

    return agent


@register_agent("llm")
class LLMCommander(BaseAgent):
    """
    Agent that asks a language model for orders.

    The pydantic-ai agent is built on first use so importing this module
    never needs network access or provider credentials.
    """

    def __init__(
        self,
        side: Side,
        name: Optional[str] = None,
        model: Optional[str] = None,
        prompt_config: Optional[PromptConfig] = None,
        max_notes: int = 6,
        **_: Any,
    ):
        super().__init__(side, name)
        if model is None:
            from infra.settings import get_settings
            model = get_settings().llm_model
        self.model = model
        self.prompt_config = prompt_config or PromptConfig()
        self.max_notes = max_notes
        self.formatter = PromptFormatter()
        self.notes: List[str] = []
        self._agent: Optional[Agent[CommanderDeps, TurnOrders]] = None

    @property
    def agent(self) -> Agent[CommanderDeps, TurnOrders]:
        if self._agent is None:
            self._agent = build_commander_agent(self.model)
        return self._agent

    def get_commands(self, state: GameState, **kwargs: Any) -> Tuple[List[Command], Dict[str, Any]]:
        report, payload = self.formatter.build_prompt(state, self.side, self.prompt_config)
        deps = CommanderDeps(
            side=self.side,
            phase=str(state.phase),
            round=state.round,
            report=report,
            notes=list(self.notes),
        )
        metadata: Dict[str, Any] = {"policy": "llm", "model": self.model, "phase": deps.phase}

        try:
            result = self.agent.run_sync("Issue your orders for this phase.", deps=deps)
        except Exception as exc:
            # Provider failures must not stall the game; the side simply holds.
            log.exception("%s: model call failed", self.name)
            metadata["error"] = str(exc)
            return [], metadata

        orders: TurnOrders = result.output
        own_ids = {u["id"] for u in payload["friendlies"]}
        commands = [c for c in orders.commands() if c.unit_id in own_ids]
        dropped = len(orders.orders) - len(commands)
        if dropped:
            log.warning("%s: dropped %d order(s) for units it does not control", self.name, dropped)

        if orders.analysis:
            self.notes.append(f"R{state.round} {deps.phase}: {orders.analysis}")
            self.notes = self.notes[-self.max_notes:]

        metadata.update({
            "analysis": orders.analysis,
            "reasoning": {o.command.unit_id: o.reasoning for o in orders.orders},
            "commands_count": len(commands),
        })
        return commands, metadata

    def reset(self) -> None:
        self.notes = []
