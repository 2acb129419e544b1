"""
Ability registry and hook dispatch.

Abilities are data: a static AbilityDefinition per code, holding the
hooks it implements. Hook implementations attach themselves with the
``@ability_hook`` decorator.

Dispatch:
    apply      - one ability's hook on one unit
    apply_all  - fold every ability a unit holds, in its stored order
    apply_any  - veto hooks; True if any ability says so
    HookIndex  - sparse hook/zone -> holders index for multi-unit scans
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, FrozenSet, List, Optional, Set, Tuple

from infra.logger import get_logger

from ..core.types import AbilityCode, Capability, UnitKind, ZoneRole
from .hooks import Hook, HookContext, HookFn

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)

ALL_KINDS: FrozenSet[UnitKind] = frozenset(UnitKind)


@dataclass
class AbilityDefinition:
    """
    Static description of one ability.

    Attributes:
        code: Ability code
        name: Display name
        description: Rules text
        applies_to: Unit kinds the ability works for
        passive: Passive (always on) or active
        radius: Effect radius in hexes for zonal abilities
        capabilities: Actions the ability unlocks
        zone_role: Zonal behaviour, resolved by scanning other units
        hooks: Implemented hook points
    """
    code: AbilityCode
    name: str
    description: str
    applies_to: FrozenSet[UnitKind] = ALL_KINDS
    passive: bool = True
    radius: Optional[float] = None
    capabilities: FrozenSet[Capability] = frozenset()
    zone_role: Optional[ZoneRole] = None
    hooks: Dict[Hook, HookFn] = field(default_factory=dict)

    def applies(self, unit: Unit) -> bool:
        return unit.kind in self.applies_to

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": str(self.code),
            "name": self.name,
            "description": self.description,
            "applies_to": sorted(str(k) for k in self.applies_to),
            "passive": self.passive,
            "radius": self.radius,
            "capabilities": sorted(str(c) for c in self.capabilities),
            "zone_role": str(self.zone_role) if self.zone_role else None,
            "hooks": sorted(str(h) for h in self.hooks),
        }


ABILITY_REGISTRY: Dict[AbilityCode, AbilityDefinition] = {}

# Unknown codes already reported, so a bad template warns once, not every roll.
_reported_unknown: Set[str] = set()


def register_ability(definition: AbilityDefinition) -> AbilityDefinition:
    """
    Add a definition to the registry.

    Raises:
        ValueError: If the code is already registered
    """
    if definition.code in ABILITY_REGISTRY:
        raise ValueError(f"Ability {definition.code} is already registered")
    ABILITY_REGISTRY[definition.code] = definition
    return definition


def ability_hook(code: AbilityCode, hook: Hook) -> Callable[[HookFn], HookFn]:
    """
    Attach a function as ``hook`` of ability ``code``.

    Usage:
        @ability_hook(AbilityCode.ARM, Hook.MODIFY_INCOMING_DAMAGE)
        def _armored(unit, damage, ctx):
            return max(0, damage - 1)
    """
    def decorator(fn: HookFn) -> HookFn:
        definition = ABILITY_REGISTRY.get(code)
        if definition is None:
            raise ValueError(f"Register ability {code} before attaching hooks")
        definition.hooks[hook] = fn
        return fn

    return decorator


def get_definition(code: AbilityCode | str) -> Optional[AbilityDefinition]:
    """
    Look up an ability by code.

    Unknown codes are a data inconsistency, not a fault: they are logged and
    None is returned so callers treat the ability as a no-op.
    """
    parsed = code if isinstance(code, AbilityCode) else AbilityCode.parse(code)
    definition = ABILITY_REGISTRY.get(parsed) if parsed is not None else None
    if definition is None:
        key = str(code)
        if key not in _reported_unknown:
            _reported_unknown.add(key)
            log.warning("Unknown ability code %r ignored", key)
        else:
            log.debug("Unknown ability code %r ignored", key)
    return definition


def unit_definitions(unit: Unit) -> List[AbilityDefinition]:
    """Known definitions for a unit's abilities, in the unit's stored order."""
    definitions = []
    for code in unit.abilities:
        definition = get_definition(code)
        if definition is not None and definition.applies(unit):
            definitions.append(definition)
    return definitions


def has_capability(unit: Unit, capability: Capability) -> bool:
    return any(capability in d.capabilities for d in unit_definitions(unit))


# ============================================================================
# DISPATCH
# ============================================================================

def apply(unit: Unit, code: AbilityCode | str, hook: Hook, value: Any, ctx: HookContext) -> Any:
    """
    Run a single ability's hook.

    Returns the value unchanged when the unit lacks the ability, the code is
    unknown, or the ability does not implement the hook.
    """
    if not unit.has_ability(code):
        return value
    definition = get_definition(code)
    if definition is None or not definition.applies(unit):
        return value
    fn = definition.hooks.get(hook)
    if fn is None:
        return value
    return fn(unit, value, ctx)


def apply_all(unit: Unit, hook: Hook, value: Any, ctx: HookContext) -> Any:
    """
    Fold a hook over every ability the unit holds.

    Abilities run in the unit's stored ability order; each receives the
    previous one's output. The order matters (e.g. two damage reductions
    that each floor at zero) and must not be changed.
    """
    for definition in unit_definitions(unit):
        fn = definition.hooks.get(hook)
        if fn is None:
            continue
        before = value
        value = fn(unit, value, ctx)
        if value != before:
            log.debug("%s %s: %s -> %s via %s", unit.label(), hook, before, value, definition.code)
    return value


def apply_any(unit: Unit, hook: Hook, ctx: HookContext) -> bool:
    """True if any of the unit's abilities answers the veto hook with True."""
    for definition in unit_definitions(unit):
        fn = definition.hooks.get(hook)
        if fn is not None and fn(unit, False, ctx):
            log.debug("%s %s vetoed by %s", unit.label(), hook, definition.code)
            return True
    return False


class HookIndex:
    """
    Sparse index of who implements what, built once per resolution.

    Multi-unit questions (initiative bonuses, ECM fields, battlefield control)
    scan only the holders of the relevant hook or zone role rather than
    asking every unit about every hook.
    """

    def __init__(self) -> None:
        self._by_hook: Dict[Hook, List[Tuple[Unit, AbilityDefinition]]] = {}
        self._by_zone: Dict[ZoneRole, List[Tuple[Unit, AbilityDefinition]]] = {}

    @classmethod
    def build(cls, state: GameState) -> HookIndex:
        """Index every living unit's known abilities."""
        index = cls()
        for unit in state.battlefield.living_units():
            for definition in unit_definitions(unit):
                for hook in definition.hooks:
                    index._by_hook.setdefault(hook, []).append((unit, definition))
                if definition.zone_role is not None:
                    index._by_zone.setdefault(definition.zone_role, []).append((unit, definition))
        return index

    def holders(self, hook: Hook) -> List[Tuple[Unit, AbilityDefinition]]:
        return list(self._by_hook.get(hook, []))

    def zone_holders(self, role: ZoneRole) -> List[Tuple[Unit, AbilityDefinition]]:
        return list(self._by_zone.get(role, []))

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_hook.values()) + sum(len(v) for v in self._by_zone.values())
