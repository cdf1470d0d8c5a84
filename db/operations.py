"""
Database operations for season saves.

A save slot holds the JSON form of a SeasonState (exact round trip through
to_dict/from_dict) and a row per transfer record for history queries.
"""
import json
import logging
import sqlite3
from typing import Any

from .schema import get_connection
from models import SeasonState, TransferRecord

logger = logging.getLogger(__name__)


def save_snapshot(conn: sqlite3.Connection, state: SeasonState, slot: int = 1) -> None:
    """Write the whole state to *slot*, replacing what was there."""
    club = state.clubs.get(state.user_club_id)
    payload = json.dumps(state.to_dict(), separators=(",", ":"))
    with conn:
        conn.execute(
            """
            INSERT INTO saves (slot, season_label, current_week, user_club_id, club_name, manager_name, game_over, state_json, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, datetime('now'))
            ON CONFLICT(slot) DO UPDATE SET
                season_label = excluded.season_label,
                current_week = excluded.current_week,
                user_club_id = excluded.user_club_id,
                club_name = excluded.club_name,
                manager_name = excluded.manager_name,
                game_over = excluded.game_over,
                state_json = excluded.state_json,
                updated_at = excluded.updated_at
            """,
            (
                slot,
                state.season_label,
                state.current_week,
                state.user_club_id,
                club.name if club else None,
                state.career.name,
                int(state.career.game_over),
                payload,
            ),
        )
        conn.execute("DELETE FROM transfer_history WHERE slot = ?", (slot,))
        conn.executemany(
            """
            INSERT INTO transfer_history (slot, record_id, season_label, week, player_name, from_club, to_club, fee, type)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (slot, t.id, t.season, t.week, t.player_name, t.from_club, t.to_club, t.fee, t.type)
                for t in state.transfer_history
            ],
        )
    logger.debug("Saved slot %d (%s week %d)", slot, state.season_label, state.current_week)


def load_snapshot(conn: sqlite3.Connection, slot: int = 1) -> SeasonState | None:
    """Return the state stored in *slot*, or None if the slot is empty."""
    row = conn.execute("SELECT state_json FROM saves WHERE slot = ?", (slot,)).fetchone()
    if row is None:
        return None
    return SeasonState.from_dict(json.loads(row["state_json"]))


def list_saves(conn: sqlite3.Connection | None = None) -> list[dict[str, Any]]:
    """Slot summaries for a load screen, lowest slot first."""
    close = False
    if conn is None:
        conn = get_connection()
        close = True
    try:
        rows = conn.execute(
            """SELECT slot, season_label, current_week, user_club_id, club_name, manager_name, game_over, updated_at
               FROM saves ORDER BY slot"""
        ).fetchall()
        return [
            {
                "slot": r["slot"],
                "season_label": r["season_label"],
                "current_week": r["current_week"],
                "user_club_id": r["user_club_id"],
                "club_name": r["club_name"],
                "manager_name": r["manager_name"],
                "game_over": bool(r["game_over"]),
                "updated_at": r["updated_at"],
            }
            for r in rows
        ]
    finally:
        if close:
            conn.close()


def delete_save(conn: sqlite3.Connection, slot: int) -> bool:
    """Remove a slot and its history; returns False if it did not exist."""
    with conn:
        conn.execute("DELETE FROM transfer_history WHERE slot = ?", (slot,))
        cur = conn.execute("DELETE FROM saves WHERE slot = ?", (slot,))
    return cur.rowcount > 0


def get_transfer_history(
    conn: sqlite3.Connection,
    slot: int,
    season_label: str | None = None,
) -> list[TransferRecord]:
    """Transfer records for a slot in the order they happened, optionally one season only."""
    sql = """SELECT record_id, season_label, week, player_name, from_club, to_club, fee, type
             FROM transfer_history WHERE slot = ?"""
    params: list[Any] = [slot]
    if season_label is not None:
        sql += " AND season_label = ?"
        params.append(season_label)
    sql += " ORDER BY id"
    return [
        TransferRecord(
            id=r["record_id"],
            player_name=r["player_name"],
            from_club=r["from_club"],
            to_club=r["to_club"],
            fee=r["fee"],
            type=r["type"],
            season=r["season_label"],
            week=r["week"],
        )
        for r in conn.execute(sql, params).fetchall()
    ]
