"""
Weekly tick orchestrator.

run_week folds one round of played fixtures into the season and sequences
every weekly step in a fixed order:

1. results: standings, fan sentiment, ticket revenue, season stats, red cards
2. suspensions, then injuries and illnesses
3. market values
4. negotiations for the current week
5. transfer window: CPU buying and due pending deals while the window is open
   for the upcoming week; at a window's last week a league-wide 21+ sweep
6. wages
7. stadium and sponsors for the upcoming week
8. mid-season retirement check for the human club

The week then advances and the tick's transfer records and notifications are
committed in one batch. After the final fixture week the season-end rewards
run exactly once.
"""
from __future__ import annotations

import logging
import random
from typing import Callable, Iterable

from models import Club, Fixture, MailItem, Player, SeasonState, TickResult
from simulation.conditions import decrease_suspensions, update_player_conditions
from simulation.cpu_transfers import run_cpu_transfers
from simulation.engine import simulate_fixture
from simulation.errors import CareerOverError, EngineError
from simulation.fans import apply_result_to_club
from simulation.negotiation import process_negotiations
from simulation.pending import resolve_pending_transfers
from simulation.retirement import check_retirements
from simulation.rewards import run_season_end
from simulation.stadium import run_stadium_operations
from simulation.valuation import pay_weekly_wages, update_market_values
from simulation.window import is_window_closing, is_window_open

logger = logging.getLogger(__name__)

MatchSimulator = Callable[[Fixture, Club, Club, "dict[str, Player]", random.Random], Fixture]

SUBJECT_LENGTH = 60


def _record_performances(state: SeasonState, fixture: Fixture) -> None:
    for perf in fixture.performances:
        player = state.players.get(perf.player_id)
        if player is None:
            logger.warning("Performance skipped: unknown player %s", perf.player_id)
            continue
        stats = player.season_stats
        stats.appearances += 1
        stats.goals += perf.goals
        stats.assists += perf.assists
        stats.rating_total += perf.rating
        stats.tackles += perf.tackles
        stats.interceptions += perf.interceptions
        stats.saves += perf.saves
        stats.minutes += perf.minutes_played
    if fixture.man_of_the_match and fixture.man_of_the_match in state.players:
        state.players[fixture.man_of_the_match].season_stats.mvp += 1
    for card in fixture.cards:
        if card.colour == "red" and card.player_id in state.players:
            state.players[card.player_id].suspension_games += 1


def apply_match_results(state: SeasonState, results: Iterable[Fixture]) -> TickResult:
    """Fold played fixtures into standings, fans, revenue and player stats."""
    result = TickResult(state=state.clone())
    new_state = result.state
    index = {f.id: i for i, f in enumerate(new_state.fixtures)}

    for fixture in results:
        position = index.get(fixture.id)
        if position is None:
            logger.warning("Result skipped: unknown fixture %s", fixture.id)
            continue
        if new_state.fixtures[position].played:
            logger.warning("Result skipped: fixture %s was already played", fixture.id)
            continue
        home = new_state.clubs.get(fixture.home_id)
        away = new_state.clubs.get(fixture.away_id)
        if home is None or away is None:
            logger.warning("Result skipped: unknown club in fixture %s", fixture.id)
            continue

        played = Fixture.from_dict(fixture.to_dict())
        played.played = True
        home_winner = played.late_winner and played.home_goals > played.away_goals
        away_winner = played.late_winner and played.away_goals > played.home_goals
        apply_result_to_club(home, played.home_goals, played.away_goals, True, away, played.is_derby, home_winner)
        apply_result_to_club(away, played.away_goals, played.home_goals, False, home, played.is_derby, away_winner)
        _record_performances(new_state, played)
        new_state.fixtures[position] = played

        if new_state.user_club_id in (home.id, away.id):
            user_goals = played.goals_for(new_state.user_club_id)
            other_goals = played.goals_against(new_state.user_club_id)
            opponent = away if home.id == new_state.user_club_id else home
            result.notify(f"{new_state.user_club.name} {user_goals}-{other_goals} {opponent.name}")
    return result


def commit(result: TickResult) -> TickResult:
    """Append a result's transfer records and notifications to its state."""
    state = result.state
    state.transfer_history.extend(result.transfers)
    for event in result.events:
        subject = event.message if len(event.message) <= SUBJECT_LENGTH else event.message[:SUBJECT_LENGTH - 3] + "..."
        state.mailbox.append(MailItem(
            id=state.new_id("mail"),
            week=state.current_week,
            season=state.season_label,
            subject=subject,
            body=event.message,
            severity=event.severity,
        ))
    return result


def run_week(state: SeasonState, results: Iterable[Fixture], rng: random.Random) -> TickResult:
    """Advance the season by one week given that week's played fixtures."""
    if state.career.game_over:
        raise CareerOverError("The career is over; no further weeks can be simulated.")
    if state.season_complete:
        raise EngineError(f"Season {state.season_label} is complete; start a new season first.")

    week = state.current_week
    next_week = week + 1
    total_weeks = state.total_weeks

    tick = apply_match_results(state, results)
    tick.extend(decrease_suspensions(tick.state))
    tick.extend(update_player_conditions(tick.state, rng))
    tick.extend(update_market_values(tick.state))
    tick.extend(process_negotiations(tick.state, week, rng))

    if is_window_open(next_week, total_weeks):
        tick.extend(run_cpu_transfers(tick.state, next_week, rng))
        tick.extend(resolve_pending_transfers(tick.state, next_week, rng))
    elif is_window_closing(week, total_weeks):
        tick.extend(resolve_pending_transfers(tick.state, next_week, rng, window_end=True))

    tick.extend(pay_weekly_wages(tick.state))
    tick.extend(run_stadium_operations(tick.state, next_week, rng))

    if next_week == total_weeks // 2 and not tick.state.retirement_checked:
        tick.extend(check_retirements(tick.state, next_week, rng))

    tick.state.current_week = next_week
    if next_week > total_weeks:
        tick.extend(run_season_end(tick.state, rng))
    logger.info("Week %d of %s complete (%d transfer(s))", week, state.season_label, len(tick.transfers))
    return commit(tick)


def play_fixtures(
    state: SeasonState, rng: random.Random, simulator: MatchSimulator = simulate_fixture,
) -> list[Fixture]:
    """Play the current week's unplayed fixtures without touching the state."""
    played = []
    for fixture in state.fixtures_for_week(state.current_week):
        if fixture.played:
            continue
        home = state.clubs.get(fixture.home_id)
        away = state.clubs.get(fixture.away_id)
        if home is None or away is None:
            logger.warning("Fixture %s skipped: unknown club", fixture.id)
            continue
        played.append(simulator(fixture, home, away, state.players, rng))
    return played


def simulate_week(
    state: SeasonState, rng: random.Random, simulator: MatchSimulator = simulate_fixture,
) -> TickResult:
    """Play this week's matches with ``simulator`` and run the tick."""
    if state.career.game_over:
        raise CareerOverError("The career is over; no further weeks can be simulated.")
    return run_week(state, play_fixtures(state, rng, simulator), rng)
