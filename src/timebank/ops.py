"""Event journal for bank activity: deposits, screen time, interest and settings."""

from __future__ import annotations

import json
import threading
from collections import deque
from datetime import datetime, timezone
from pathlib import Path


class StructuredLogger:
    """Keep recent bank events in memory and mirror them to a JSON-lines file.

    The in-memory buffer holds at most ``capacity`` entries; the file, when a
    ``path`` is given, keeps everything.
    """

    def __init__(self, *, path: Path | None = None, capacity: int = 1000) -> None:
        self.path = path
        self._entries: deque[dict] = deque(maxlen=capacity)
        self._write_lock = threading.Lock()

    def log(self, event_type: str, **fields: object) -> dict:
        entry = {"timestamp": datetime.now(timezone.utc).isoformat(), "event": event_type, **fields}
        with self._write_lock:
            self._entries.append(entry)
            if self.path:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as handle:
                    handle.write(json.dumps(entry, ensure_ascii=False) + "\n")
        return entry

    def tail(self, limit: int = 50) -> tuple[dict, ...]:
        if limit <= 0:
            return ()
        return tuple(self._entries)[-limit:]

    def events(self, event_type: str) -> tuple[dict, ...]:
        """Return buffered entries for one event, oldest first."""

        return tuple(entry for entry in self._entries if entry["event"] == event_type)


__all__ = ["StructuredLogger"]
