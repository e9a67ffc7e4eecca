"""
csv_io.py
Persistence utilities for writing Perudo event rows to CSV files.
"""

import csv
import os
from typing import Any, Dict, List

EVENT_HEADER = [
    "game_id", "round", "event_type", "player", "payload", "timestamp",
]


def append_rows_to_csv(rows: List[Dict[str, Any]], csv_path: str, header: List[str]):
    write_header = not os.path.exists(csv_path) or os.path.getsize(csv_path) == 0
    with open(csv_path, "a", newline='', encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=header)
        if write_header:
            writer.writeheader()
        for row in rows:
            writer.writerow(row)


def read_rows_from_csv(csv_path: str) -> List[Dict[str, str]]:
    with open(csv_path, newline='', encoding="utf-8") as f:
        return list(csv.DictReader(f))


def get_event_header():
    return EVENT_HEADER.copy()
