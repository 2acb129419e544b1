"""
Shape a game state into an LLM-friendly prompt.

Usage (inside an agent):

    formatter = PromptFormatter()
    prompt, payload = formatter.build_prompt(state, Side.AI)

`payload` is a structured dictionary that can be logged or serialized;
`prompt` is the human-readable text assembled from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from engine.core.types import MoveType, Side
from engine.mechanics.movement import MovementResolver
from engine.mechanics.ranged import range_band
from engine.units.unit import Unit
from engine.world.state import GameState


@dataclass
class PromptConfig:
    """Knobs that shape how much of the battlefield goes into the prompt."""
    nearby_enemy_radius: float = 12.0
    include_terrain: bool = True
    recent_log_entries: int = 8


class PromptFormatter:
    """Convert a game state into a structured payload and readable prompt for one side."""

    def __init__(self) -> None:
        self._movement = MovementResolver()

    def build_prompt(
        self, state: GameState, side: Side, config: Optional[PromptConfig] = None
    ) -> Tuple[str, Dict[str, Any]]:
        cfg = config or PromptConfig()
        enemies = state.battlefield.side_units(side.opponent)
        payload: Dict[str, Any] = {
            "grid": {"width": state.grid.width, "height": state.grid.height},
            "round": state.round,
            "phase": str(state.phase),
            "weather": str(state.battlefield.weather),
            "friendlies": [],
            "enemies": [self._summarize(state, e) for e in enemies],
        }

        for unit in state.battlefield.side_units(side):
            summary = self._summarize(state, unit)
            summary["walk_allowance"] = self._movement.allowance(state, unit, MoveType.WALK)
            summary["enemies_in_range"] = self._enemies_in_range(state, unit, enemies, cfg.nearby_enemy_radius)
            payload["friendlies"].append(summary)

        if cfg.include_terrain:
            payload["terrain"] = {f"{x},{y}": str(t) for (x, y), t in state.battlefield.terrain_map().items()}
        payload["recent_events"] = [e.message for e in state.log.entries[-cfg.recent_log_entries:]]

        return self._render(payload), payload

    def _summarize(self, state: GameState, unit: Unit) -> Dict[str, Any]:
        summary: Dict[str, Any] = {
            "id": unit.id,
            "name": unit.name,
            "kind": str(unit.vehicle_subtype or unit.kind),
            "position": list(unit.position),
            "armor": unit.armor_remaining,
            "structure": unit.structure_remaining,
            "abilities": list(unit.abilities),
            "effects": unit.status.effects.to_list(),
            "has_moved": unit.status.has_moved,
            "has_fired": unit.status.has_fired,
        }
        if unit.is_mech:
            summary["heat"] = f"{unit.status.heat}/{unit.stats.heat_capacity}"
            summary["jump"] = unit.stats.movement.jump
        if unit.is_infantry:
            summary["troops"] = unit.troop_count
        return summary

    def _enemies_in_range(
        self, state: GameState, unit: Unit, enemies: List[Unit], radius: float
    ) -> List[Dict[str, Any]]:
        nearby = []
        for enemy in enemies:
            distance = state.grid.distance(unit.position, enemy.position)
            if distance > radius:
                continue
            band = range_band(distance)
            nearby.append({
                "id": enemy.id,
                "distance": round(distance, 1),
                "band": str(band),
                "damage": unit.effective_damage(band),
                "adjacent": state.grid.is_adjacent(unit.position, enemy.position),
            })
        return sorted(nearby, key=lambda e: e["distance"])

    def _render(self, payload: Dict[str, Any]) -> str:
        lines = [
            f"Round {payload['round']}, phase {payload['phase']}, weather {payload['weather']}.",
            f"Grid {payload['grid']['width']}x{payload['grid']['height']}.",
            "",
            "## YOUR UNITS",
        ]
        for unit in payload["friendlies"]:
            lines.append(f"- {_unit_line(unit)}; walk {unit['walk_allowance']}")
            for enemy in unit["enemies_in_range"]:
                lines.append(
                    f"    target {enemy['id']}: {enemy['distance']} hexes ({enemy['band']}), "
                    f"damage {enemy['damage']}{', adjacent' if enemy['adjacent'] else ''}"
                )
        lines += ["", "## ENEMY UNITS"]
        lines += [f"- {_unit_line(unit)}" for unit in payload["enemies"]] or ["- None."]
        if payload.get("terrain"):
            lines += ["", "## TERRAIN (unlisted hexes are clear)"]
            lines += [f"- {pos}: {terrain}" for pos, terrain in sorted(payload["terrain"].items())]
        if payload["recent_events"]:
            lines += ["", "## RECENT EVENTS"]
            lines += [f"- {msg}" for msg in payload["recent_events"]]
        return "\n".join(lines)


def _unit_line(unit: Dict[str, Any]) -> str:
    parts = [
        f"{unit['id']} {unit['name']} [{unit['kind']}] at {tuple(unit['position'])}",
        f"armor {unit['armor']} structure {unit['structure']}",
    ]
    if "heat" in unit:
        parts.append(f"heat {unit['heat']}")
    if "troops" in unit:
        parts.append(f"troops {unit['troops']}")
    if unit["abilities"]:
        parts.append("abilities " + ",".join(unit["abilities"]))
    if unit["effects"]:
        parts.append("effects " + ",".join(unit["effects"]))
    return "; ".join(parts)


__all__ = ["PromptConfig", "PromptFormatter"]
