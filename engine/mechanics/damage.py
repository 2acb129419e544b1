"""
Damage and destruction model.

Damage depletes armor first; overflow goes to structure. A unit whose
structure damage reaches its structure stat gains DESTROYED and stays on
the battlefield as a wreck.

Only attack damage runs through the target's MODIFY_INCOMING_DAMAGE fold.
Self-damage, collisions, casualties, heat and critical damage bypass it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from infra.logger import get_logger

from ..abilities import Hook, HookContext, HookRole, apply_all
from ..core.effects import StatusEffect
from ..core.results import DamageResult
from ..core.types import AttackType, RangeBand
from .invariants import enforce_unit_invariants

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..world.state import GameState

log = get_logger(__name__)


def modified_incoming_damage(
    state: GameState,
    target: Unit,
    amount: int,
    *,
    attacker: Optional[Unit] = None,
    attack_type: AttackType = AttackType.DIRECT,
    range_band: Optional[RangeBand] = None,
) -> int:
    """Run the target's incoming-damage fold and floor the result at zero."""
    ctx = HookContext(
        state=state,
        role=HookRole.DEFENDER,
        attacker=attacker,
        target=target,
        attack_type=attack_type,
        range_band=range_band,
    )
    return max(0, int(apply_all(target, Hook.MODIFY_INCOMING_DAMAGE, amount, ctx)))


def apply_damage(
    state: GameState,
    target: Unit,
    amount: int,
    *,
    attacker: Optional[Unit] = None,
    attack_type: AttackType = AttackType.DIRECT,
    range_band: Optional[RangeBand] = None,
    use_hooks: bool = True,
) -> DamageResult:
    """
    Push damage through armor, then structure.

    Args:
        state: Game being resolved
        target: Unit receiving the damage
        amount: Raw damage points
        attacker: Source unit, for hook context
        attack_type: Delivery type, for hook context
        range_band: Ranged band, for hook context
        use_hooks: Run the target's MODIFY_INCOMING_DAMAGE fold first

    Returns:
        DamageResult describing where the points landed
    """
    incoming = max(0, amount)
    if target.destroyed:
        return DamageResult(target.id, incoming, 0, destroyed=True, squad_ratio=_ratio(target))

    applied = incoming
    if use_hooks and incoming > 0:
        applied = modified_incoming_damage(
            state, target, incoming,
            attacker=attacker, attack_type=attack_type, range_band=range_band,
        )

    damage = target.status.damage
    to_armor = min(applied, target.armor_remaining)
    damage.armor += to_armor
    to_structure = applied - to_armor
    damage.structure += to_structure

    destroyed = check_destroyed(state, target, cause=str(attack_type))
    enforce_unit_invariants(target, state.rules)

    if applied:
        log.info(
            "%s takes %d damage (%d incoming, %s): armor %d/%d, structure %d/%d%s",
            target.label(), applied, incoming, attack_type,
            damage.armor, target.stats.armor, damage.structure, target.stats.structure,
            " DESTROYED" if destroyed else "",
        )
    return DamageResult(
        unit_id=target.id,
        incoming=incoming,
        applied=applied,
        armor_damage=to_armor,
        structure_damage=to_structure,
        destroyed=target.destroyed,
        squad_ratio=_ratio(target),
    )


def apply_structure_damage(state: GameState, unit: Unit, amount: int, *, cause: str) -> DamageResult:
    """Damage that ignores armor (ammunition explosions, extreme heat)."""
    if unit.destroyed or amount <= 0:
        return DamageResult(unit.id, max(0, amount), 0, destroyed=unit.destroyed, squad_ratio=_ratio(unit))
    unit.status.damage.structure += amount
    check_destroyed(state, unit, cause=cause)
    enforce_unit_invariants(unit, state.rules)
    log.info("%s takes %d structure damage from %s", unit.label(), amount, cause)
    return DamageResult(
        unit_id=unit.id,
        incoming=amount,
        applied=amount,
        structure_damage=amount,
        destroyed=unit.destroyed,
        squad_ratio=_ratio(unit),
    )


def check_destroyed(state: GameState, unit: Unit, *, cause: str = "") -> bool:
    """Flag the unit DESTROYED if its structure is gone. Returns True on a new kill."""
    if unit.destroyed or unit.status.damage.structure < unit.stats.structure:
        return False
    unit.status.effects.add(StatusEffect.DESTROYED)
    state.record(f"{unit.name} is destroyed", unit_id=unit.id, cause=cause)
    log.info("%s destroyed (%s)", unit.label(), cause or "damage")
    return True


def _ratio(unit: Unit) -> Optional[float]:
    return round(unit.squad_ratio, 3) if unit.is_infantry else None
