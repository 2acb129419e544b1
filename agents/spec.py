from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from engine.core.types import Side


@dataclass
class AgentSpec:
    """
    Serializable description of an agent for one side.

    Used by the API and runner configs so agents can be built by key.
    """
    type: str
    side: Side
    name: Optional[str] = None
    init_params: Dict[str, Any] = field(default_factory=dict)
    act_params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "side": str(self.side),
            "name": self.name,
            "init_params": dict(self.init_params),
            "act_params": dict(self.act_params),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AgentSpec:
        side_raw = data.get("side")
        if side_raw is None:
            raise ValueError("AgentSpec requires 'side'")
        return cls(
            type=data["type"],
            side=Side(side_raw) if isinstance(side_raw, str) else side_raw,
            name=data.get("name"),
            init_params=data.get("init_params", {}) or {},
            act_params=data.get("act_params", {}) or {},
        )

    def with_side(self, side: Side) -> AgentSpec:
        return replace(self, side=side)
