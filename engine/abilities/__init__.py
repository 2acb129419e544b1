"""
Special abilities: hook points, the registry and the catalog.

Importing this package registers the full catalog.
"""

from .hooks import Hook, HookContext, HookRole
from .registry import (
    ABILITY_REGISTRY,
    AbilityDefinition,
    HookIndex,
    ability_hook,
    apply,
    apply_all,
    apply_any,
    get_definition,
    has_capability,
    register_ability,
)
from . import definitions  # noqa: F401  (registers the catalog)
from . import zones

__all__ = [
    "ABILITY_REGISTRY",
    "AbilityDefinition",
    "Hook",
    "HookContext",
    "HookIndex",
    "HookRole",
    "ability_hook",
    "apply",
    "apply_all",
    "apply_any",
    "get_definition",
    "has_capability",
    "register_ability",
    "zones",
]
