"""Language-model commander and its prompt helpers."""

from .commander import CommanderDeps, LLMCommander, build_commander_agent
from .prompt_formatter import PromptConfig, PromptFormatter

__all__ = [
    "CommanderDeps",
    "LLMCommander",
    "PromptConfig",
    "PromptFormatter",
    "build_commander_agent",
]
