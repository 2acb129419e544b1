"""
Zonal ability resolution.

ECM, Counter-ECM and Battlefield Control depend on units other than the
one being resolved, so they are answered by scanning the holders of a zone
role in a HookIndex instead of folding the receiver's own abilities.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from infra.logger import get_logger

from ..core.types import AttackType, ZoneRole
from .registry import HookIndex

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)

ECM_TMM_BONUS = 1


def _within(state: GameState, a: Unit, b: Unit, radius: Optional[float]) -> bool:
    return state.grid.distance(a.position, b.position) <= (radius or 0)


def ecm_negated(state: GameState, index: HookIndex, ecm_unit: Unit) -> bool:
    """True when an enemy Counter-ECM unit sits within range of the ECM unit."""
    for cr_unit, definition in index.zone_holders(ZoneRole.COUNTER_ECM):
        if cr_unit.side == ecm_unit.side:
            continue
        if _within(state, ecm_unit, cr_unit, definition.radius):
            return True
    return False


def in_ecm_field(state: GameState, index: HookIndex, unit: Unit) -> bool:
    """
    Whether a unit is protected by a friendly ECM field.

    A field covers every friendly unit within its radius, the ECM unit
    included, unless an enemy Counter-ECM unit is within range of the ECM
    unit itself.
    """
    for ecm_unit, definition in index.zone_holders(ZoneRole.ECM_FIELD):
        if ecm_unit.side != unit.side:
            continue
        if not _within(state, unit, ecm_unit, definition.radius):
            continue
        if ecm_negated(state, index, ecm_unit):
            log.debug("ECM of %s negated by counter-ECM", ecm_unit.label())
            continue
        return True
    return False


def ecm_modifier(state: GameState, index: HookIndex, target: Unit) -> int:
    """Target-movement-modifier bonus granted by ECM cover."""
    return ECM_TMM_BONUS if in_ecm_field(state, index, target) else 0


def battlefield_control_blocker(
    state: GameState,
    index: HookIndex,
    attacker: Unit,
    attack_type: AttackType,
    overheat: bool,
) -> Optional[Unit]:
    """
    Enemy unit whose Battlefield Control forbids this attack, if any.

    Only indirect fire and overheat attacks can be blocked.
    """
    if attack_type != AttackType.INDIRECT and not overheat:
        return None
    for bfc_unit, definition in index.zone_holders(ZoneRole.BATTLEFIELD_CONTROL):
        if bfc_unit.side == attacker.side:
            continue
        if _within(state, attacker, bfc_unit, definition.radius):
            return bfc_unit
    return None
