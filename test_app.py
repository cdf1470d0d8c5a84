"""
HTTP layer tests through the Flask test client.

Usage:
    python test_app.py
"""
import shutil
import tempfile

# Patch the DB path for testing
tmp_dir = tempfile.mkdtemp()

import db.schema as schema
schema.DB_DIR = tmp_dir
schema.DB_FILENAME = "test_app.db"

from app import app
from db import get_connection, get_transfer_history, load_snapshot, save_snapshot

SLOT = 7


def _new_career(client) -> None:
    resp = client.post(f"/api/saves/{SLOT}", json={"seed": 12, "manager_name": "Tester"})
    assert resp.status_code == 201, resp.get_json()


def _saved_state():
    conn = get_connection()
    try:
        return load_snapshot(conn, SLOT)
    finally:
        conn.close()


def test_sim_week_records_each_event_once() -> None:
    client = app.test_client()
    _new_career(client)

    for _ in range(2):
        before = _saved_state()
        resp = client.post(f"/api/{SLOT}/sim-week")
        assert resp.status_code == 200, resp.get_json()
        body = resp.get_json()
        after = _saved_state()
        assert after.current_week == before.current_week + 1
        assert len(after.mailbox) - len(before.mailbox) == len(body["events"])
        assert len(after.transfer_history) - len(before.transfer_history) == len(body["transfers"])

    state = _saved_state()
    record_ids = [t.id for t in state.transfer_history]
    assert len(record_ids) == len(set(record_ids))
    mail_ids = [m.id for m in state.mailbox]
    assert len(mail_ids) == len(set(mail_ids))

    conn = get_connection()
    try:
        history = get_transfer_history(conn, SLOT)
    finally:
        conn.close()
    assert [t.id for t in history] == record_ids


def test_sim_week_waits_for_retirement_decision() -> None:
    client = app.test_client()
    _new_career(client)
    conn = get_connection()
    try:
        state = load_snapshot(conn, SLOT)
        state.awaiting_retirement_decision = True
        save_snapshot(conn, state, SLOT)
    finally:
        conn.close()

    resp = client.post(f"/api/{SLOT}/sim-week")
    assert resp.status_code == 409
    assert _saved_state().current_week == 1

    season = client.post(f"/api/{SLOT}/sim-season").get_json()
    assert season["current_week"] == 1
    assert season["awaiting_retirement_decision"]

    resp = client.post(f"/api/{SLOT}/retirements/acknowledge")
    assert resp.status_code == 200
    resp = client.post(f"/api/{SLOT}/sim-week")
    assert resp.status_code == 200
    assert _saved_state().current_week == 2


def test_unknown_slot_is_404() -> None:
    client = app.test_client()
    assert client.get("/api/99/state").status_code == 404
    assert client.post("/api/99/sim-week").status_code == 404


def main() -> None:
    try:
        test_sim_week_records_each_event_once()
        test_sim_week_waits_for_retirement_decision()
        test_unknown_slot_is_404()
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)
    print("All app tests passed!")


if __name__ == "__main__":
    main()
