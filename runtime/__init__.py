"""Game orchestration: command dispatch, step-wise runner and observability."""

from .dispatch import CommandOutcome, apply_command, apply_commands
from .frame import StepFrame
from .runner import GameRunner
from .scenario import AgentConfig, Scenario, TerrainPatch, UnitPlacement

__all__ = [
    "AgentConfig",
    "CommandOutcome",
    "GameRunner",
    "Scenario",
    "StepFrame",
    "TerrainPatch",
    "UnitPlacement",
    "apply_command",
    "apply_commands",
]
