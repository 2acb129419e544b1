"""
Agents that decide commands for one side.

This module provides:
- BaseAgent: Abstract interface for all agents
- RandomAgent: Picks uniformly among legal commands
- LLMCommander: Asks a language model for orders
- AgentSpec / create_agent_from_spec: Build agents by registry key
"""

from .base_agent import BaseAgent
from .commands import (
    AntiVehicleCommand,
    Command,
    FireCommand,
    MeleeCommand,
    MoveCommand,
    StartupCommand,
    TurnOrders,
    UnitOrder,
    WaitCommand,
)
from .factory import PreparedAgent, create_agent_from_spec
from .llm_agent import LLMCommander
from .random_agent import RandomAgent
from .registry import agent_keys, register_agent, resolve_agent_class
from .spec import AgentSpec

__all__ = [
    "AgentSpec",
    "AntiVehicleCommand",
    "BaseAgent",
    "Command",
    "FireCommand",
    "LLMCommander",
    "MeleeCommand",
    "MoveCommand",
    "PreparedAgent",
    "RandomAgent",
    "StartupCommand",
    "TurnOrders",
    "UnitOrder",
    "WaitCommand",
    "agent_keys",
    "create_agent_from_spec",
    "register_agent",
    "resolve_agent_class",
]
