"""
Agent classes by key.

Agent modules register themselves on import (``@register_agent("random")``);
specs and scenarios then name agents by key. A dotted "pkg.module.Class"
path also works for agents that live outside this package.
"""

from __future__ import annotations

import importlib
from typing import Dict, List, Optional, Type

from .base_agent import BaseAgent

AgentClass = Type[BaseAgent]

AGENT_REGISTRY: Dict[str, AgentClass] = {}


def register_agent(key: str, cls: Optional[AgentClass] = None):
    """
    Add an agent class under ``key``; usable as a decorator or a plain call.

    Raises:
        ValueError: ``key`` already names a different class
    """
    def decorator(target: AgentClass) -> AgentClass:
        existing = AGENT_REGISTRY.get(key)
        if existing is not None and existing is not target:
            raise ValueError(f"Agent key '{key}' already registered for {existing.__name__}")
        AGENT_REGISTRY[key] = target
        return target

    return decorator if cls is None else decorator(cls)


def agent_keys() -> List[str]:
    return sorted(AGENT_REGISTRY)


def _import_class(path: str) -> AgentClass:
    module_name, _, class_name = path.rpartition(".")
    cls = getattr(importlib.import_module(module_name), class_name)
    if not (isinstance(cls, type) and issubclass(cls, BaseAgent)):
        raise TypeError(f"{path} is not a BaseAgent subclass")
    return cls


def resolve_agent_class(type_ref: str) -> AgentClass:
    """
    Look up a registered key, falling back to a dotted import path.

    Raises:
        ValueError: Unknown key that is not a dotted path either
        TypeError: The imported object is not a BaseAgent subclass
    """
    if type_ref in AGENT_REGISTRY:
        return AGENT_REGISTRY[type_ref]
    if "." not in type_ref:
        known = ", ".join(agent_keys()) or "none"
        raise ValueError(f"Unknown agent type '{type_ref}'. Known: {known}")
    return _import_class(type_ref)
