"""
Roster invariant enforcer tests.

Every club ends with at least 20 players and at most 25 aged 21+; the
enforcer releases the lowest-rated seniors first, tops up from the youth
academy, and changes nothing on a legal roster.

Usage:
    python test_squad.py
"""
import random

from generation import generate_league
from models import Player
from models.constants import MIN_SQUAD_SIZE, MAX_SENIOR_PLAYERS, RECORD_FREE, RECORD_YOUTH
from simulation.squad import count_senior_players, enforce_all, enforce_squad_size, is_roster_legal


def _league():
    return generate_league(seed=11, num_clubs=6)


def _add_senior(state, club_id: str, rating: int) -> str:
    pid = state.new_id("player")
    state.players[pid] = Player(id=pid, name=f"Extra {pid}", position="CM", age=27, rating=rating, potential=rating)
    state.clubs[club_id].roster.append(pid)
    return pid


def test_generated_rosters_are_legal() -> None:
    state = _league()
    for club_id in state.clubs:
        assert is_roster_legal(state, club_id), club_id


def test_excess_seniors_released_lowest_first() -> None:
    state = _league()
    club_id = state.user_club_id
    for p in state.roster_players(club_id):
        p.age = 25
    weakest = _add_senior(state, club_id, rating=1)
    assert count_senior_players(state, club_id) == MAX_SENIOR_PLAYERS + 1

    result = enforce_squad_size(state, club_id, random.Random(1), week=3)
    after = result.state
    assert weakest not in after.players
    assert weakest not in after.clubs[club_id].roster
    assert count_senior_players(after, club_id) == MAX_SENIOR_PLAYERS
    assert [t.type for t in result.transfers] == [RECORD_FREE]
    assert result.transfers[0].week == 3
    # the input state is untouched
    assert weakest in state.clubs[club_id].roster


def test_short_roster_topped_up_with_youth() -> None:
    state = _league()
    club_id = state.cpu_club_ids()[0]
    club = state.clubs[club_id]
    for pid in club.roster[15:]:
        del state.players[pid]
    club.roster = club.roster[:15]

    result = enforce_squad_size(state, club_id, random.Random(2))
    after = result.state.clubs[club_id]
    assert len(after.roster) == MIN_SQUAD_SIZE
    youth = [t for t in result.transfers if t.type == RECORD_YOUTH]
    assert len(youth) == MIN_SQUAD_SIZE - 15
    for pid in after.roster[15:]:
        assert result.state.players[pid].is_youth_academy


def test_enforcer_is_idempotent() -> None:
    state = _league()
    for club in state.clubs.values():
        club.roster = club.roster[:17]
    once = enforce_all(state, random.Random(3))
    twice = enforce_all(once.state, random.Random(4))
    assert twice.transfers == []
    assert twice.state.to_dict() == once.state.to_dict()
    for club_id in once.state.clubs:
        assert is_roster_legal(once.state, club_id)


def main() -> None:
    test_generated_rosters_are_legal()
    test_excess_seniors_released_lowest_first()
    test_short_roster_topped_up_with_youth()
    test_enforcer_is_idempotent()
    print("All squad tests passed!")


if __name__ == "__main__":
    main()
