"""
recorder.py
Implements event recording for Perudo games. A recorder stores the stream of GameEvent objects
emitted by a GameSession for replay, analysis, or persistence.
InMemoryRecorder is used for tests and in-memory analysis; CsvRecorder appends to a CSV file on flush.
Related modules:
- events.py: Defines GameEvent type.
- csv_io.py: Row writer used by CsvRecorder.
"""

import datetime
import json
from typing import List

from . import csv_io
from .events import GameEvent


class InMemoryRecorder:
    """
    Records GameEvent objects in memory for later retrieval.
    Methods:
        record(event): Add a new event.
        events(): Get all recorded events.
        flush(): No-op for in-memory; used in file recorders.
    """
    def __init__(self):
        self._events: List[GameEvent] = []

    def record(self, event: GameEvent) -> None:
        """Add a new event to the recorder."""
        self._events.append(event)

    def events(self):
        """Return all recorded events as a list."""
        return list(self._events)

    def flush(self):
        """No-op for in-memory recorder."""
        pass


class CsvRecorder(InMemoryRecorder):
    """
    Buffers events and appends them as rows to `csv_path` on flush().
    Events already written are not written again.
    """
    def __init__(self, csv_path: str):
        super().__init__()
        self.csv_path = csv_path
        self._written = 0

    def flush(self):
        pending = self._events[self._written:]
        if not pending:
            return
        stamp = datetime.datetime.now(datetime.timezone.utc).isoformat()
        rows = [
            {
                "game_id": e.game_id,
                "round": e.round_number,
                "event_type": e.event_type,
                "player": e.player_id or "",
                "payload": json.dumps(e.payload, sort_keys=True),
                "timestamp": stamp,
            }
            for e in pending
        ]
        csv_io.append_rows_to_csv(rows, self.csv_path, csv_io.get_event_header())
        self._written = len(self._events)
