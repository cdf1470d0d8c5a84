"""
Weekly operations tests: stadium expansion and sponsors, player conditions,
mid-season retirements and the CPU transfer pass.

Usage:
    python test_operations.py
"""
import random

from generation import generate_league
from models import Condition
from simulation.conditions import decrease_suspensions, update_player_conditions
from simulation.cpu_transfers import run_cpu_transfers
from simulation.errors import UnknownEntityError
from simulation.retirement import attempt_persuasion, check_retirements
from simulation.squad import is_roster_legal
from simulation.stadium import (
    accept_sponsor_offer,
    reject_sponsor_offer,
    run_stadium_operations,
    start_stadium_expansion,
)


def test_stadium_expansion() -> None:
    state = generate_league(seed=31, num_clubs=6)
    club = state.user_club
    club.stadium_capacity = 25_000
    club.budget = 100_000_000

    result = start_stadium_expansion(state)
    assert result.ok
    after = result.state.user_club
    assert after.budget == 100_000_000 - 21_500_000
    assert after.financials.expense_facilities == 21_500_000
    assert after.pending_expansion.new_capacity == 28_750
    assert club.pending_expansion is None

    again = start_stadium_expansion(result.state)
    assert not again.ok

    rng = random.Random(1)
    current = run_stadium_operations(result.state, 2, rng).state
    expansion = current.user_club.pending_expansion
    assert expansion.start_week == 2 and expansion.completion_week == 10
    current = run_stadium_operations(current, 9, rng).state
    assert current.user_club.stadium_capacity == 25_000
    current = run_stadium_operations(current, 10, rng).state
    assert current.user_club.stadium_capacity == 28_750
    assert current.user_club.pending_expansion is None


def test_stadium_sponsor_lifecycle() -> None:
    state = generate_league(seed=32, num_clubs=6)
    club = state.user_club
    original = club.stadium_name
    club.last_sponsor_offer_week = 0
    budget = club.budget

    offered = run_stadium_operations(state, 12, random.Random(2)).state
    offer = offered.user_club.pending_sponsor_offer
    assert offer is not None
    assert offered.user_club.last_sponsor_offer_week == 12

    accepted = accept_sponsor_offer(offered).state
    deal = accepted.user_club.stadium_sponsor
    assert accepted.user_club.pending_sponsor_offer is None
    assert accepted.user_club.stadium_name == offer.stadium_name
    assert accepted.user_club.budget == budget + offer.yearly_payment
    assert deal.end_week == accepted.current_week + deal.years * accepted.total_weeks

    ended = run_stadium_operations(accepted, deal.end_week, random.Random(3)).state
    assert ended.user_club.stadium_sponsor is None
    assert ended.user_club.stadium_name == original

    try:
        reject_sponsor_offer(state)
    except UnknownEntityError:
        pass
    else:
        raise AssertionError("expected UnknownEntityError without a pending offer")


def test_conditions_count_down() -> None:
    state = generate_league(seed=33, num_clubs=6)
    injured, suspended = state.user_club.roster[:2]
    state.players[injured].injury = Condition(type="Hamstring", severity="Minor", weeks_out=1)
    state.players[suspended].suspension_games = 2

    after = decrease_suspensions(state).state
    assert after.players[suspended].suspension_games == 1
    assert state.players[suspended].suspension_games == 2

    result = update_player_conditions(after, random.Random(4))
    assert result.state.players[injured].injury is None
    assert any("recovered" in n.message for n in result.events)
    assert state.players[injured].injury.weeks_out == 1


def test_injury_and_illness_count_down_together() -> None:
    state = generate_league(seed=36, num_clubs=6)
    pid = state.user_club.roster[0]
    player = state.players[pid]
    player.injury = Condition(type="Knee", severity="Major", weeks_out=3)
    player.illness = Condition(type="Flu", severity="Minor", weeks_out=1)

    after = update_player_conditions(state, random.Random(5)).state.players[pid]
    assert after.illness is None
    assert after.injury.weeks_out == 2


def test_retirement_announcement_and_persuasion() -> None:
    announced = 0
    for seed in range(20):
        state = generate_league(seed=34, num_clubs=6)
        pid = state.user_club.roster[0]
        veteran = state.players[pid]
        veteran.position = "GK"
        veteran.age = 40
        result = check_retirements(state, state.total_weeks // 2, random.Random(seed))
        assert result.state.retirement_checked
        if not result.state.players[pid].retirement.announced:
            continue
        announced += 1
        assert result.state.awaiting_retirement_decision
        assert result.state.players[pid].retirement.retirement_week == state.total_weeks

        persuaded = attempt_persuasion(result.state, pid, random.Random(seed))
        status = persuaded.state.players[pid].retirement
        assert status.persuasion_attempted
        assert status.announced != status.persuasion_successful
        assert not attempt_persuasion(persuaded.state, pid, random.Random(0)).ok
    assert announced > 0


def test_cpu_transfers_keep_invariants() -> None:
    for seed in range(5):
        state = generate_league(seed=35)
        user_roster = list(state.user_club.roster)
        money = sum(c.budget for c in state.clubs.values())

        result = run_cpu_transfers(state, 1, random.Random(seed))
        after = result.state
        assert after.user_club.roster == user_roster
        assert sum(c.budget for c in after.clubs.values()) == money
        for record in result.transfers:
            if record.type == "TRANSFER":
                assert record.fee > 0
                assert record.to_club != after.user_club.name
        for club_id in after.clubs:
            assert is_roster_legal(after, club_id)


def main() -> None:
    test_stadium_expansion()
    test_stadium_sponsor_lifecycle()
    test_conditions_count_down()
    test_injury_and_illness_count_down_together()
    test_retirement_announcement_and_persuasion()
    test_cpu_transfers_keep_invariants()
    print("All operations tests passed!")


if __name__ == "__main__":
    main()
