"""
SQLite persistence layer for fpm-probe.
State lives under ~/.fpmprobe and survives across probe invocations.
"""

import os
import sqlite3
from pathlib import Path
from contextlib import contextmanager
from typing import Iterator

# Allow test harnesses to redirect state via env var
_state_dir_override = os.environ.get("FPMPROBE_STATE_DIR")
STATE_DIR = Path(_state_dir_override) if _state_dir_override else Path.home() / ".fpmprobe"
DB_PATH = STATE_DIR / "history.db"
LOG_PATH = STATE_DIR / "probe.log"
DEFAULT_PROBE_PATH = STATE_DIR / "probe.php"

SCHEMA = """
CREATE TABLE IF NOT EXISTS toggles (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    path            TEXT NOT NULL,
    previous_value  TEXT NOT NULL,
    new_value       TEXT NOT NULL,
    recorded_at     TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_toggles_path ON toggles(path);
"""


def ensure_db() -> None:
    """Create the state directory and initialize schema if needed."""
    STATE_DIR.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(DB_PATH) as conn:
        conn.executescript(SCHEMA)
        conn.commit()


@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    """Context manager yielding a SQLite connection with row_factory set."""
    ensure_db()
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
