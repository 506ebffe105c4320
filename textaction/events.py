from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .utils import write_json

_LEVEL_STYLES = {"debug": "dim", "info": "cyan", "warn": "yellow", "error": "red"}


@dataclass
class Event:
    ts: float
    type: str
    payload: Dict[str, Any]
    level: str = "info"


class EventBus:
    """In-memory event log for one invocation.

    When ``echo`` is a rich console every event is also printed as it is
    emitted, which is what ``--verbose`` turns on.
    """

    def __init__(self, echo=None):
        self.events: List[Event] = []
        self.echo = echo

    def emit(self, type_: str, payload: Dict[str, Any], level: str = "info") -> Event:
        evt = Event(ts=time.time(), type=type_, payload=payload, level=level)
        self.events.append(evt)
        if self.echo is not None:
            style = _LEVEL_STYLES.get(level, "")
            self.echo.print(f"[{level}] {type_} {payload}", style=style, markup=False, highlight=False)
        return evt

    def of_type(self, type_: str) -> List[Event]:
        return [e for e in self.events if e.type == type_]

    def last(self) -> Optional[Event]:
        return self.events[-1] if self.events else None

    def flush_to(self, path: Path) -> None:
        write_json(path, {"events": [asdict(e) for e in self.events]})
