"""
SQLite schema for the season engine.
One DB file holds numbered save slots; each slot stores a full SeasonState
snapshot plus a queryable copy of its transfer history.
"""
import sqlite3
from pathlib import Path

# Save path (relative to project root)
DB_DIR = "data"
DB_FILENAME = "saves.db"


def get_db_path() -> Path:
    """Return absolute path to the save DB file."""
    root = Path(__file__).resolve().parent.parent
    return root / DB_DIR / DB_FILENAME


def _ensure_db_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def get_connection() -> sqlite3.Connection:
    """Open a connection to the save DB. Creates dir and file if needed.
    timeout: seconds to wait for lock (avoids 'database is locked' under concurrent requests).
    """
    path = get_db_path()
    _ensure_db_dir(path)
    conn = sqlite3.connect(str(path), timeout=15.0)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection | None = None) -> None:
    """Create all tables if they do not exist."""
    close = False
    if conn is None:
        conn = get_connection()
        close = True
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS saves (
                slot INTEGER PRIMARY KEY,
                season_label TEXT NOT NULL,
                current_week INTEGER NOT NULL,
                user_club_id TEXT NOT NULL,
                club_name TEXT,
                manager_name TEXT,
                game_over INTEGER NOT NULL DEFAULT 0,
                state_json TEXT NOT NULL,
                updated_at TEXT DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS transfer_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                slot INTEGER NOT NULL REFERENCES saves(slot) ON DELETE CASCADE,
                record_id TEXT NOT NULL,
                season_label TEXT NOT NULL,
                week INTEGER NOT NULL,
                player_name TEXT NOT NULL,
                from_club TEXT NOT NULL,
                to_club TEXT NOT NULL,
                fee INTEGER NOT NULL,
                type TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_transfer_history_slot
                ON transfer_history (slot, season_label, week);
        """)
        conn.commit()
    finally:
        if close:
            conn.close()


def reset_database() -> None:
    """Delete the DB file and recreate the schema (all slots are lost)."""
    path = get_db_path()
    if path.exists():
        path.unlink()
    _ensure_db_dir(path)
    conn = get_connection()
    try:
        init_db(conn)
    finally:
        conn.close()
