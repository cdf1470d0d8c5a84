"""
Player retirement.

At mid-season the human club's veterans may announce they will retire at
the end of the season. Each age band depends on position (goalkeepers last
longest) and the chance rises steeply from 34. The manager gets one
persuasion attempt per player; stars and players early in their band are
easier to keep.
"""
from __future__ import annotations

import logging
import random

from models import SeasonState, TickResult
from models.constants import (
    POSITIONS_ATTACK,
    POSITIONS_MIDFIELD,
    POSITIONS_DEFENSE,
    SEVERITY_SUCCESS,
    SEVERITY_WARNING,
    SEVERITY_ERROR,
)
from models.player import Player
from simulation.errors import UnknownEntityError

logger = logging.getLogger(__name__)

RETIREMENT_PROBABILITY: dict[int, float] = {
    34: 0.05,
    35: 0.10,
    36: 0.20,
    37: 0.35,
    38: 0.50,
    39: 0.70,
    40: 0.90,
}


def retirement_age_range(position: str) -> tuple[int, int]:
    if position in POSITIONS_ATTACK or position == "CAM":
        return 33, 36
    if position in POSITIONS_MIDFIELD:
        return 34, 37
    if position in POSITIONS_DEFENSE:
        return 35, 38
    if position == "GK":
        return 36, 40
    return 34, 37


def retirement_probability(age: int, position: str) -> float:
    adjusted = age - 2 if position == "GK" else age
    if adjusted < 34:
        return 0.0
    if adjusted >= 40:
        return 0.90
    return RETIREMENT_PROBABILITY.get(adjusted, 0.0)


def _considers_retiring(player: Player, rng: random.Random) -> bool:
    if player.retirement.announced or player.retirement.persuasion_successful:
        return False
    lo, hi = retirement_age_range(player.position)
    if not lo <= player.age <= hi:
        return False
    return rng.random() < retirement_probability(player.age, player.position)


def persuasion_chance(player: Player) -> float:
    chance = 0.5
    if player.rating >= 85:
        chance += 0.2
    elif player.rating >= 75:
        chance += 0.1
    elif player.rating < 65:
        chance -= 0.1
    lo, hi = retirement_age_range(player.position)
    progress = (player.age - lo) / (hi - lo)
    if progress < 0.5:
        chance += 0.15
    elif progress > 0.8:
        chance -= 0.15
    return max(0.1, min(0.9, chance))


def check_retirements(state: SeasonState, week: int, rng: random.Random) -> TickResult:
    """Mid-season check for the human club; flags the state if anyone announces."""
    result = TickResult(state=state.clone())
    new_state = result.state
    new_state.retirement_checked = True
    announced = []
    for player in new_state.roster_players(new_state.user_club_id):
        if _considers_retiring(player, rng):
            player.retirement.considering = True
            player.retirement.announced = True
            player.retirement.retirement_week = new_state.total_weeks
            announced.append(player)
    if announced:
        new_state.awaiting_retirement_decision = True
        for player in announced:
            result.notify(
                f"{player.name} ({player.age}) plans to retire at the end of the season.",
                SEVERITY_WARNING, player.id,
            )
        logger.info("%d player(s) announced retirement in week %d", len(announced), week)
    return result


def players_considering_retirement(state: SeasonState) -> list[Player]:
    return [
        p for p in state.roster_players(state.user_club_id)
        if p.retirement.considering and not p.retirement.persuasion_attempted
    ]


def attempt_persuasion(state: SeasonState, player_id: str, rng: random.Random) -> TickResult:
    """One attempt per player to talk them out of retiring."""
    player = state.players.get(player_id)
    if player is None or player_id not in state.user_club.roster:
        raise UnknownEntityError("player", player_id)
    if not player.retirement.considering or player.retirement.persuasion_attempted:
        result = TickResult(state=state, ok=False)
        result.notify(f"{player.name} is not open to persuasion.", SEVERITY_ERROR, player_id)
        return result

    result = TickResult(state=state.clone())
    target = result.state.players[player_id]
    target.retirement.persuasion_attempted = True
    if rng.random() < persuasion_chance(target):
        target.retirement.persuasion_successful = True
        target.retirement.considering = False
        target.retirement.announced = False
        target.retirement.retirement_week = None
        result.notify(f"{target.name} agreed to keep playing!", SEVERITY_SUCCESS, player_id)
    else:
        result.notify(f"{target.name} will retire at the end of the season.", SEVERITY_WARNING, player_id)
    if not players_considering_retirement(result.state):
        result.state.awaiting_retirement_decision = False
    return result


def acknowledge_retirements(state: SeasonState) -> TickResult:
    """Human accepts the announced retirements without further persuasion."""
    result = TickResult(state=state.clone())
    result.state.awaiting_retirement_decision = False
    return result
