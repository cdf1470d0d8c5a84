"""
Quick test script for the match engine and the season-end calculations.

Usage:
    python test_simulation.py
"""
import random

from generation import generate_league
from models.constants import MAX_FANS, MIN_FANS, MIN_MARKET_VALUE, MIN_SQUAD_SIZE, PRESTIGE_ELITE, PRESTIGE_LOW
from simulation.engine import select_starting_xi, simulate_fixture
from simulation.fans import apply_result_to_club, update_fan_count
from simulation.manager_offers import accept_manager_offer, generate_manager_offers
from simulation.rewards import CHAMPIONSHIP_TROPHY, prize_for_rank, rank_clubs, run_season_end
from simulation.squad import is_roster_legal
from simulation.valuation import RATING_CAPS, calculate_market_value


def test_match_engine() -> None:
    state = generate_league(seed=21, num_clubs=6)
    fixture = state.fixtures[0]
    home, away = state.clubs[fixture.home_id], state.clubs[fixture.away_id]

    for seed in range(20):
        played = simulate_fixture(fixture, home, away, state.players, random.Random(seed))
        assert played.played and not fixture.played
        assert played.home_goals == sum(1 for g in played.goals if g.club_id == home.id)
        assert played.away_goals == sum(1 for g in played.goals if g.club_id == away.id)
        assert [g.minute for g in played.goals] == sorted(g.minute for g in played.goals)
        for goal in played.goals:
            assert goal.assist_id != goal.scorer_id
        assert len(played.performances) == 22
        scored = {}
        for perf in played.performances:
            scored[perf.player_id] = perf.goals
        for goal in played.goals:
            assert goal.scorer_id in scored
        assert sum(scored.values()) == len(played.goals)
        best = max(played.performances, key=lambda m: m.rating)
        assert played.man_of_the_match == best.player_id

    again = simulate_fixture(fixture, home, away, state.players, random.Random(3))
    once = simulate_fixture(fixture, home, away, state.players, random.Random(3))
    assert again.to_dict() == once.to_dict()
    print(f"  {home.name} {once.home_goals} - {once.away_goals} {away.name}")


def test_starting_xi_skips_unavailable() -> None:
    state = generate_league(seed=22, num_clubs=6)
    squad = state.roster_players(state.user_club_id)
    squad[0].suspension_games = 2
    squad[1].suspension_games = 1
    xi = select_starting_xi(squad)
    assert len(xi) == 11
    assert squad[0] not in xi and squad[1] not in xi


def test_market_value_bounds() -> None:
    for rating in range(30, 100, 3):
        for age in (15, 18, 24, 29, 33, 38, 45):
            value = calculate_market_value(rating, age, min(99, rating + 10))
            assert value >= MIN_MARKET_VALUE
            if rating in RATING_CAPS:
                assert value <= RATING_CAPS[rating]
    assert calculate_market_value(80, 20, 90) > calculate_market_value(80, 34, 80)


def test_fans_clamped() -> None:
    assert update_fan_count(MAX_FANS, 100) == MAX_FANS
    assert update_fan_count(MIN_FANS, 0) == MIN_FANS

    state = generate_league(seed=23, num_clubs=6)
    club = state.user_club
    rival = state.clubs[state.cpu_club_ids()[0]]
    club.fan_morale = 98
    budget = club.budget
    revenue = apply_result_to_club(club, 5, 0, True, rival, is_derby=True, late_winner=True)
    assert club.fan_morale == 100
    assert club.points == 3 and club.won == 1
    assert revenue > 0 and club.budget == budget + revenue
    assert club.financials.income_tickets == revenue

    club.fan_morale = 2
    away_revenue = apply_result_to_club(club, 0, 6, False, rival)
    assert club.fan_morale == 0
    assert away_revenue == 0
    assert MIN_FANS <= club.fan_count <= MAX_FANS


def _finished_table(state, user_first: bool = True):
    clubs = list(state.clubs.values())
    for i, club in enumerate(clubs):
        club.points = 60 - i
        club.played = 2 * (len(clubs) - 1)
    if user_first:
        state.user_club.points = 100
    state.current_week = state.total_weeks + 1
    return state


def test_champion_prize_money() -> None:
    assert prize_for_rank(1, 20) == 100_000_000
    assert prize_for_rank(20, 20) == 5_000_000

    state = _finished_table(generate_league(seed=3))
    state.user_club.budget = 0
    result = run_season_end(state, random.Random(1))
    after = result.state
    club = after.user_club
    assert club.budget == 100_000_000
    assert club.financials.income_prize_money == 100_000_000
    assert after.season_summary["rank"] == 1
    assert after.season_summary["prize_money"] == 100_000_000
    assert after.season_complete and not state.season_complete
    assert any(a.kind == "championship" for a in after.career.achievements)
    assert after.career.history[-1].trophies == [CHAMPIONSHIP_TROPHY]
    assert after.career.premium_tickets == 1
    assert [row["rank"] for row in after.season_summary["table"]] == list(range(1, 21))


def test_debt_strikes() -> None:
    state = _finished_table(generate_league(seed=4, num_clubs=6), user_first=False)
    state.user_club.budget = -500_000_000
    first = run_season_end(state, random.Random(2)).state
    assert first.season_summary["debt_status"] == "warning"
    assert first.career.debt_strikes == 1
    assert first.user_club.budget == 0
    assert not first.career.game_over

    first.user_club.budget = -500_000_000
    second = run_season_end(first, random.Random(3)).state
    assert second.season_summary["debt_status"] == "game_over"
    assert second.career.game_over
    assert second.season_summary["manager_offers"] == []


def test_game_over_still_refills_squads() -> None:
    state = _finished_table(generate_league(seed=5, num_clubs=6), user_first=False)
    club = state.user_club
    for pid in club.roster[MIN_SQUAD_SIZE - 1:]:
        del state.players[pid]
    club.roster = club.roster[:MIN_SQUAD_SIZE - 1]
    club.budget = -500_000_000
    state.career.debt_strikes = 1

    after = run_season_end(state, random.Random(6)).state
    assert after.career.game_over
    assert len(after.user_club.roster) == MIN_SQUAD_SIZE
    for club_id in after.clubs:
        assert is_roster_legal(after, club_id)


def test_manager_offers() -> None:
    state = generate_league(seed=3)
    ranked = rank_clubs(list(state.clubs.values()))
    assert len(ranked) == 20

    for seed in range(10):
        offers = generate_manager_offers(state, 1, random.Random(seed))
        assert offers
        assert any(o.prestige == PRESTIGE_ELITE for o in offers)
        assert all(o.club_id != state.user_club_id for o in offers)
        for offer in offers:
            if offer.prestige == PRESTIGE_ELITE:
                assert offer.club_rating >= 80

    for seed in range(10):
        for offer in generate_manager_offers(state, 18, random.Random(seed)):
            assert offer.prestige == PRESTIGE_LOW
            assert offer.club_rating < 65

    state.career.offers = generate_manager_offers(state, 1, random.Random(0))
    chosen = state.career.offers[0]
    moved = accept_manager_offer(state, chosen.id).state
    assert moved.user_club_id == chosen.club_id
    assert moved.career.offers == []
    assert state.user_club_id != chosen.club_id


def main() -> None:
    print("Testing match engine...")
    test_match_engine()
    test_starting_xi_skips_unavailable()
    test_market_value_bounds()
    test_fans_clamped()
    test_champion_prize_money()
    test_debt_strikes()
    test_game_over_still_refills_squads()
    test_manager_offers()
    print("\nAll simulation tests passed!")


if __name__ == "__main__":
    main()
