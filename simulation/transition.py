"""
Season transition: from a completed season into the next one.

Every player ages a year and contracts run down (CPU clubs renew their own
players automatically; the human club must renew or release expiring
contracts first). CPU veterans past their position's retirement age retire.
Stats, standings and ledgers are reset, absolute week counters are shifted
back by one season, deals agreed for next summer's window execute, rosters
are enforced, and a fresh double round-robin schedule is drawn.
"""
from __future__ import annotations

import logging
import random

from models import Financials, Player, SeasonState, SeasonStats, TickResult, RetirementStatus
from models.constants import SEVERITY_ERROR, SEVERITY_INFO
from simulation.pending import resolve_pending_transfers
from simulation.retirement import retirement_age_range
from simulation.schedule import generate_league_schedule
from simulation.squad import enforce_in_place, remove_player
from simulation.valuation import update_market_values

logger = logging.getLogger(__name__)


def next_season_label(label: str) -> str:
    """'2025/26' -> '2026/27'."""
    start = int(label.split("/")[0]) + 1
    return f"{start}/{(start + 1) % 100:02d}"


def expiring_contracts(state: SeasonState) -> list[Player]:
    """Human-club players whose contracts end with this season."""
    return [p for p in state.roster_players(state.user_club_id) if p.contract.years_left <= 1]


def _shift_weeks(state: SeasonState, weeks: int) -> None:
    for club in state.clubs.values():
        club.last_sponsor_offer_week -= weeks
        if club.pending_expansion is not None and club.pending_expansion.start_week:
            club.pending_expansion.start_week -= weeks
            club.pending_expansion.completion_week -= weeks
        if club.stadium_sponsor is not None:
            club.stadium_sponsor.start_week -= weeks
            club.stadium_sponsor.end_week -= weeks
        if club.pending_sponsor_offer is not None:
            club.pending_sponsor_offer.expiry_week -= weeks
    for player in state.players.values():
        if player.transfer_list_week is not None:
            player.transfer_list_week -= weeks
        for offer in player.offers:
            offer.expiry_week -= weeks
        if player.pending_transfer is not None:
            player.pending_transfer.transfer_week -= weeks


def _age_and_contracts(state: SeasonState, rng: random.Random, result: TickResult) -> list[str]:
    retired: list[str] = []
    user_id = state.user_club_id
    for club in state.clubs.values():
        for player in list(state.roster_players(club.id)):
            player.age += 1
            player.season_stats = SeasonStats()
            player.retirement = RetirementStatus()
            player.contract.years_left -= 1
            if club.id == user_id:
                continue
            if player.age > retirement_age_range(player.position)[1]:
                retired.append(player.name)
                remove_player(state, player.id)
                continue
            if player.contract.years_left <= 0:
                player.contract.years_left = rng.randint(1, 4)
    return retired


def start_new_season(state: SeasonState, rng: random.Random) -> TickResult:
    """Move a completed season into the next one."""
    if not state.season_complete:
        result = TickResult(state=state, ok=False)
        result.notify(f"Season {state.season_label} is still in progress.", SEVERITY_ERROR)
        return result
    expiring = expiring_contracts(state)
    if expiring:
        result = TickResult(state=state, ok=False)
        names = ", ".join(p.name for p in expiring)
        result.notify(f"Renew or release players with expiring contracts first: {names}.", SEVERITY_ERROR)
        return result

    result = TickResult(state=state.clone())
    new_state = result.state
    total_weeks = new_state.total_weeks
    retired = _age_and_contracts(new_state, rng, result)
    if retired:
        logger.info("%d CPU veteran(s) retired over the summer", len(retired))

    _shift_weeks(new_state, total_weeks)
    for club in new_state.clubs.values():
        club.reset_standings()
        club.financials = Financials()
        sponsor = club.stadium_sponsor
        # another contract year starts during the coming season
        if sponsor is not None and sponsor.end_week > total_weeks:
            club.budget += sponsor.yearly_payment
            club.financials.income_sponsors += sponsor.yearly_payment

    new_state.season_label = next_season_label(new_state.season_label)
    new_state.current_week = 1
    new_state.season_complete = False
    new_state.season_summary = None
    new_state.retirement_checked = False
    new_state.awaiting_retirement_decision = False
    new_state.career.offers = []

    leagues = sorted({c.league for c in new_state.clubs.values()})
    new_state.fixtures = []
    for league in leagues:
        new_state.fixtures.extend(generate_league_schedule(new_state, new_state.league_club_ids(league), rng))

    for club_id in list(new_state.clubs):
        enforce_in_place(new_state, club_id, rng, 1, result)
    result.extend(update_market_values(result.state))
    result.extend(resolve_pending_transfers(result.state, 1, rng))

    for player in result.state.players.values():
        if player.pending_transfer is not None and player.pending_transfer.transfer_week < 1:
            logger.warning("Stale pending transfer for %s dropped", player.name)
            player.pending_transfer = None

    result.notify(f"Season {result.state.season_label} begins.", SEVERITY_INFO)
    logger.info("Started season %s with %d fixtures", result.state.season_label, len(result.state.fixtures))
    return result
