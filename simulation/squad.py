"""
Roster invariant enforcer.

Every club must finish a tick with at least 20 players and no more than 25
players aged 21 or over. The 21+ cap is applied first (lowest-rated seniors
are released), then youth-academy players are added until the floor is met.
Applying the enforcer to a legal roster changes nothing.
"""
from __future__ import annotations

import logging
import random

from models import SeasonState, TickResult, TransferRecord
from models.constants import (
    MIN_SQUAD_SIZE,
    MAX_SENIOR_PLAYERS,
    SENIOR_AGE,
    RECORD_FREE,
    RECORD_YOUTH,
    SEVERITY_INFO,
)

logger = logging.getLogger(__name__)

YOUTH_ACADEMY = "Youth Academy"
FREE_AGENCY = "Free Agent"


def count_senior_players(state: SeasonState, club_id: str) -> int:
    return sum(1 for p in state.roster_players(club_id) if p.age >= SENIOR_AGE)


def is_roster_legal(state: SeasonState, club_id: str) -> bool:
    club = state.clubs[club_id]
    return len(club.roster) >= MIN_SQUAD_SIZE and count_senior_players(state, club_id) <= MAX_SENIOR_PLAYERS


def remove_player(state: SeasonState, player_id: str) -> None:
    """Take a player out of the world: roster, lookup table and favorites."""
    for club in state.clubs.values():
        if player_id in club.roster:
            club.roster.remove(player_id)
    state.players.pop(player_id, None)
    if player_id in state.favorites:
        state.favorites.remove(player_id)


def _release_excess_seniors(
    state: SeasonState, club_id: str, week: int, result: TickResult,
) -> list[str]:
    club = state.clubs[club_id]
    seniors = [p for p in state.roster_players(club_id) if p.age >= SENIOR_AGE]
    excess = len(seniors) - MAX_SENIOR_PLAYERS
    if excess <= 0:
        return []
    # Stable on ties: roster order decides among equally rated players
    to_release = sorted(seniors, key=lambda p: p.rating)[:excess]
    released: list[str] = []
    for player in to_release:
        result.transfers.append(TransferRecord(
            id=state.new_id("transfer"),
            player_name=player.name,
            from_club=club.name,
            to_club=FREE_AGENCY,
            fee=0,
            type=RECORD_FREE,
            season=state.season_label,
            week=week,
        ))
        released.append(player.name)
        logger.debug("Released %s (%d) from %s to meet the senior cap", player.name, player.rating, club.name)
        remove_player(state, player.id)
    return released


def _add_youth_players(
    state: SeasonState, club_id: str, week: int, rng: random.Random, result: TickResult,
) -> list[str]:
    from generation.generate import generate_youth_player

    club = state.clubs[club_id]
    added: list[str] = []
    while len(club.roster) < MIN_SQUAD_SIZE:
        player = generate_youth_player(state.new_id("player"), rng)
        state.players[player.id] = player
        club.roster.append(player.id)
        result.transfers.append(TransferRecord(
            id=state.new_id("transfer"),
            player_name=player.name,
            from_club=YOUTH_ACADEMY,
            to_club=club.name,
            fee=0,
            type=RECORD_YOUTH,
            season=state.season_label,
            week=week,
        ))
        added.append(player.name)
    return added


def enforce_in_place(
    state: SeasonState,
    club_id: str,
    rng: random.Random,
    week: int,
    result: TickResult,
    seniors_only: bool = False,
) -> None:
    """Enforce one club's roster on a state the caller already owns.

    Used inside components that have cloned the state themselves; records and
    human-club notifications go onto ``result``.
    """
    if club_id not in state.clubs:
        logger.warning("Roster check skipped: unknown club %s", club_id)
        return
    released = _release_excess_seniors(state, club_id, week, result)
    added = [] if seniors_only else _add_youth_players(state, club_id, week, rng, result)
    if club_id == state.user_club_id:
        if released:
            result.notify(
                f"Squad limit: released {', '.join(released)} "
                f"(no more than {MAX_SENIOR_PLAYERS} players aged {SENIOR_AGE}+).",
                SEVERITY_INFO,
            )
        if added:
            result.notify(
                f"{len(added)} youth academy player(s) promoted to reach {MIN_SQUAD_SIZE} players.",
                SEVERITY_INFO,
            )


def enforce_squad_size(
    state: SeasonState, club_id: str, rng: random.Random, week: int | None = None,
) -> TickResult:
    """Return a new state with one club's roster made legal."""
    result = TickResult(state=state.clone())
    enforce_in_place(result.state, club_id, rng, state.current_week if week is None else week, result)
    return result


def enforce_all(
    state: SeasonState, rng: random.Random, week: int | None = None, seniors_only: bool = False,
) -> TickResult:
    """Enforce every club; ``seniors_only`` applies just the 21+ cap."""
    result = TickResult(state=state.clone())
    wk = state.current_week if week is None else week
    for club_id in list(result.state.clubs):
        enforce_in_place(result.state, club_id, rng, wk, result, seniors_only=seniors_only)
    return result
