"""Append-only battle log kept on the game state for audit and UI replay."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass(frozen=True)
class LogEntry:
    """
    One battle log line.

    Attributes:
        round: Round counter when the entry was written
        phase: Phase name when the entry was written
        message: Human-readable narration
        data: Structured payload (roll details, damage, ...)
        timestamp: Wall-clock time, informational only
    """
    round: int
    phase: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round": self.round,
            "phase": self.phase,
            "message": self.message,
            "data": dict(self.data),
            "timestamp": self.timestamp,
        }


class BattleLog:
    """Entries can only be appended; nothing is ever rewritten or dropped."""

    def __init__(self) -> None:
        self._entries: List[LogEntry] = []

    def append(self, round_: int, phase: str, message: str, data: Optional[Dict[str, Any]] = None) -> LogEntry:
        entry = LogEntry(round=round_, phase=phase, message=message, data=dict(data or {}), timestamp=time.time())
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def since(self, index: int) -> List[LogEntry]:
        """Entries appended after the first ``index`` ones."""
        return self._entries[index:]

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))
