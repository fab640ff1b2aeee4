"""
Toggle history.
Every successful probe toggle is appended here so freshness can be checked
after the fact, without re-running the probe.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .storage import get_conn


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class HistoryEntry:
    path: str
    previous_value: str
    new_value: str
    recorded_at: str = field(default_factory=_now)
    id: Optional[int] = None


class ProbeHistory:
    """Persists and retrieves HistoryEntry records from SQLite."""

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def record(self, result) -> HistoryEntry:
        """Append a ToggleResult and return the stored entry."""
        entry = HistoryEntry(
            path=str(Path(result.path).resolve()),
            previous_value=result.previous_value,
            new_value=result.new_value,
        )
        with get_conn() as conn:
            cursor = conn.execute(
                """
                INSERT INTO toggles (path, previous_value, new_value, recorded_at)
                VALUES (?, ?, ?, ?)
                """,
                (entry.path, entry.previous_value, entry.new_value, entry.recorded_at),
            )
            entry.id = cursor.lastrowid
        return entry

    def clear(self, path=None) -> int:
        with get_conn() as conn:
            if path is None:
                cursor = conn.execute("DELETE FROM toggles")
            else:
                cursor = conn.execute(
                    "DELETE FROM toggles WHERE path = ?", (str(Path(path).resolve()),)
                )
            return cursor.rowcount

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def recent(self, path=None, limit: int = 20) -> List[HistoryEntry]:
        """Newest first."""
        with get_conn() as conn:
            if path is None:
                rows = conn.execute(
                    "SELECT * FROM toggles ORDER BY id DESC LIMIT ?", (limit,)
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM toggles WHERE path = ? ORDER BY id DESC LIMIT ?",
                    (str(Path(path).resolve()), limit),
                ).fetchall()
            return [self._row_to_entry(r) for r in rows]

    def values(self, path, limit: int = 20) -> List[str]:
        """Emitted values for path in the order they were emitted."""
        return [e.new_value for e in reversed(self.recent(path, limit))]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _row_to_entry(self, row) -> HistoryEntry:
        return HistoryEntry(
            id=row["id"],
            path=row["path"],
            previous_value=row["previous_value"],
            new_value=row["new_value"],
            recorded_at=row["recorded_at"],
        )
