"""
End-to-end test for season simulation.

Generates a small league, simulates every week with the default match
engine, checks the roster and ownership invariants after each tick, runs the
season-end rewards, saves and reloads the career, and starts the next season.

Usage:
    python test_season.py
"""
import os
import random
import shutil
import tempfile

# Patch the DB path for testing
tmp_dir = tempfile.mkdtemp()

import db.schema as schema
schema.DB_DIR = tmp_dir
schema.DB_FILENAME = "test_season.db"

from db.schema import get_connection, init_db
from db.operations import save_snapshot, load_snapshot, list_saves, delete_save, get_transfer_history
from generation import generate_league
from simulation.squad import is_roster_legal
from simulation.tick import simulate_week
from simulation.transition import start_new_season
from simulation.errors import EngineError


def _check_invariants(state) -> None:
    seen: set[str] = set()
    for club_id, club in state.clubs.items():
        assert is_roster_legal(state, club_id), f"{club.name} roster illegal in week {state.current_week}"
        for pid in club.roster:
            assert pid in state.players, f"{pid} missing from lookup table"
            assert pid not in seen, f"{pid} owned twice"
            seen.add(pid)


def _play_season(state, rng):
    total = state.total_weeks
    while not state.season_complete:
        week = state.current_week
        state = simulate_week(state, rng).state
        _check_invariants(state)
        assert state.current_week == week + 1
        assert all(f.played for f in state.fixtures if f.week <= week)
        assert state.current_week <= total + 1
    return state


def test_full_season_and_transition() -> None:
    state = generate_league(seed=42, num_clubs=8)
    assert state.total_weeks == 14
    assert len(state.fixtures) == 8 * 7
    _check_invariants(state)

    rng = random.Random(2024)
    done = _play_season(state, rng)
    assert done.season_complete
    assert done.season_summary is not None
    assert done.season_summary["rank"] >= 1
    assert len(done.season_summary["table"]) == 8
    assert len(done.career.history) == 1
    assert sum(c.played for c in done.clubs.values()) == 2 * len(done.fixtures)
    wins = sum(c.won for c in done.clubs.values())
    losses = sum(c.lost for c in done.clubs.values())
    assert wins == losses
    for club in done.clubs.values():
        assert club.financials.income_prize_money > 0

    # the season end ran once; another tick is refused
    try:
        simulate_week(done, rng)
    except EngineError:
        pass
    else:
        raise AssertionError("expected EngineError after the season ended")

    ages = {pid: p.age for pid, p in done.players.items()}
    for p in done.roster_players(done.user_club_id):
        p.contract.years_left = max(p.contract.years_left, 2)
    nxt = start_new_season(done, random.Random(7))
    assert nxt.ok
    new_state = nxt.state
    assert new_state.season_label == "2026/27"
    assert new_state.current_week == 1
    assert not new_state.season_complete
    assert len(new_state.fixtures) == 8 * 7
    assert not any(f.played for f in new_state.fixtures)
    for pid, p in new_state.players.items():
        if pid in ages:
            assert p.age == ages[pid] + 1
        assert p.season_stats.appearances == 0
    for club in new_state.clubs.values():
        assert club.points == 0 and club.played == 0
    _check_invariants(new_state)


def test_new_season_refused_with_expiring_contracts() -> None:
    state = generate_league(seed=8, num_clubs=6)
    state.season_complete = True
    pid = state.user_club.roster[0]
    state.players[pid].contract.years_left = 1
    result = start_new_season(state, random.Random(1))
    assert not result.ok
    assert result.state is state
    assert state.season_label == "2025/26"


def test_save_and_load_round_trip() -> None:
    conn = get_connection()
    init_db(conn)
    try:
        state = generate_league(seed=9, num_clubs=6)
        rng = random.Random(5)
        for _ in range(3):
            state = simulate_week(state, rng).state
        save_snapshot(conn, state, slot=2)
        loaded = load_snapshot(conn, 2)
        assert loaded is not None
        assert loaded.to_dict() == state.to_dict()
        assert loaded.current_week == 4

        saves = [s for s in list_saves(conn) if s["slot"] == 2]
        assert len(saves) == 1
        assert saves[0]["club_name"] == state.user_club.name
        history = get_transfer_history(conn, 2)
        assert [t.id for t in history] == [t.id for t in state.transfer_history]

        # saving again replaces the slot
        state = simulate_week(state, rng).state
        save_snapshot(conn, state, slot=2)
        assert load_snapshot(conn, 2).current_week == 5
        assert len([s for s in list_saves(conn) if s["slot"] == 2]) == 1

        assert delete_save(conn, 2)
        assert load_snapshot(conn, 2) is None
        assert not delete_save(conn, 2)
    finally:
        conn.close()


def main() -> None:
    try:
        test_full_season_and_transition()
        test_new_season_refused_with_expiring_contracts()
        test_save_and_load_round_trip()
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)
    print("\nAll season tests passed!")


if __name__ == "__main__":
    main()
