"""
History Log - records each optimization run in a CSV file.
"""
import csv
import threading
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional


@dataclass
class HistoryEntry:
    """One optimization run."""
    user_id: str
    product_id: str
    product_name: str
    target_margin: float
    scenario_count: int
    result_id: str
    created_at: str
    optimization_type: str = "pricing"

    def to_csv_row(self) -> dict:
        return {key: str(value) for key, value in asdict(self).items()}

    @classmethod
    def from_csv_row(cls, row: dict) -> 'HistoryEntry':
        return cls(
            user_id=row.get('user_id', ''),
            product_id=row.get('product_id', ''),
            product_name=row.get('product_name', ''),
            target_margin=float(row.get('target_margin') or 0),
            scenario_count=int(row.get('scenario_count') or 0),
            result_id=row.get('result_id', ''),
            created_at=row.get('created_at', ''),
            optimization_type=row.get('optimization_type') or 'pricing',
        )


class HistoryLog:
    """Append-only CSV log of optimization runs."""

    CSV_COLUMNS = [
        'user_id', 'product_id', 'product_name', 'optimization_type',
        'target_margin', 'scenario_count', 'result_id', 'created_at',
    ]

    def __init__(self, csv_path: Path):
        self.csv_path = csv_path
        self._lock = threading.Lock()

    def record(self, entry: HistoryEntry):
        """Append an entry, writing the header on first use."""
        with self._lock:
            self.csv_path.parent.mkdir(parents=True, exist_ok=True)
            write_header = not self.csv_path.exists() or self.csv_path.stat().st_size == 0
            with open(self.csv_path, 'a', encoding='utf-8', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
                if write_header:
                    writer.writeheader()
                writer.writerow(entry.to_csv_row())

    def list_entries(self, user_id: Optional[str] = None, limit: Optional[int] = None) -> list[HistoryEntry]:
        """Entries newest first, optionally for a single user."""
        entries = []
        if not self.csv_path.exists():
            return entries

        with open(self.csv_path, 'r', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            for row in reader:
                if not row.get('result_id'):
                    continue
                if user_id is not None and row.get('user_id') != user_id:
                    continue
                entries.append(HistoryEntry.from_csv_row(row))

        entries.reverse()
        if limit is not None:
            entries = entries[:limit]
        return entries
