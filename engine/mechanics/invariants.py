"""
Unit invariant enforcement.

Broken invariants are programming defects. Under a strict rule set they
raise InvariantViolation; otherwise they are logged and clamped back into
range so a single bad value cannot derail a whole round.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from infra.logger import get_logger

from ..core.effects import StatusEffect
from ..core.errors import InvariantViolation

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import RuleSet

log = get_logger(__name__)


def _violation(unit: Unit, rules: RuleSet, message: str) -> None:
    text = f"{unit.label()}: {message}"
    if rules.strict:
        raise InvariantViolation(text)
    log.error("Invariant violation (clamped): %s", text)


def enforce_unit_invariants(unit: Unit, rules: RuleSet) -> None:
    """
    Check one unit and repair it when the rule set is lenient.

    Checked:
        - 0 <= damage.armor <= stats.armor
        - damage.structure >= 0
        - 0 <= heat <= heat_capacity
        - damage.structure >= stats.structure implies DESTROYED
    """
    status = unit.status
    if status.damage.armor > unit.stats.armor or status.damage.armor < 0:
        _violation(unit, rules, f"armor damage {status.damage.armor} outside 0..{unit.stats.armor}")
        status.damage.armor = min(max(0, status.damage.armor), unit.stats.armor)

    if status.damage.structure < 0:
        _violation(unit, rules, f"negative structure damage {status.damage.structure}")
        status.damage.structure = 0

    capacity = unit.stats.heat_capacity
    if status.heat < 0 or status.heat > capacity:
        _violation(unit, rules, f"heat {status.heat} outside 0..{capacity}")
        status.heat = min(max(0, status.heat), capacity)

    if status.damage.structure >= unit.stats.structure and not unit.destroyed:
        _violation(unit, rules, "structure exhausted without DESTROYED")
        status.effects.add(StatusEffect.DESTROYED)

