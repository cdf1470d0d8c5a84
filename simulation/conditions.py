"""
Weekly player condition updates: suspensions, injuries and illnesses.

Existing conditions count down and clear when they reach zero; healthy
players may pick up a new injury (3%, +2% over 30, +2% more over 35) or an
illness (2%). Every club is processed; only the human club is notified.
"""
from __future__ import annotations

import random

from models import Condition, SeasonState, TickResult
from models.constants import (
    INJURY_BASE_CHANCE,
    INJURY_AGE_BONUS,
    ILLNESS_CHANCE,
    INJURY_TYPES,
    ILLNESS_TYPES,
    SEVERITY_SUCCESS,
    SEVERITY_ERROR,
)


def injury_chance(age: int) -> float:
    chance = INJURY_BASE_CHANCE
    if age > 30:
        chance += INJURY_AGE_BONUS
    if age > 35:
        chance += INJURY_AGE_BONUS
    return chance


def _roll_condition(table: list[tuple[str, str, int, int]], rng: random.Random) -> Condition:
    kind, severity, lo, hi = rng.choice(table)
    weeks = rng.randint(lo, hi)
    return Condition(
        type=kind,
        severity=severity,
        weeks_out=weeks,
        description=f"{severity} {kind.lower()}, out for {weeks} week{'s' if weeks != 1 else ''}",
    )


def decrease_suspensions(state: SeasonState) -> TickResult:
    new_state = state.clone()
    for player in new_state.players.values():
        if player.suspension_games > 0:
            player.suspension_games -= 1
    return TickResult(state=new_state)


def update_player_conditions(state: SeasonState, rng: random.Random) -> TickResult:
    """Advance injury/illness countdowns and roll new ones for healthy players."""
    result = TickResult(state=state.clone())
    new_state = result.state
    user_roster = set(new_state.user_club.roster) if new_state.user_club_id in new_state.clubs else set()

    for club in new_state.clubs.values():
        for pid in club.roster:
            player = new_state.players.get(pid)
            if player is None:
                continue
            is_user = pid in user_roster

            if player.injury or player.illness:
                if player.injury:
                    player.injury.weeks_out -= 1
                    if player.injury.weeks_out <= 0:
                        if is_user:
                            result.notify(
                                f"{player.name} has recovered from {player.injury.type.lower()}.",
                                SEVERITY_SUCCESS, pid,
                            )
                        player.injury = None
                if player.illness:
                    player.illness.weeks_out -= 1
                    if player.illness.weeks_out <= 0:
                        if is_user:
                            result.notify(
                                f"{player.name} has recovered from {player.illness.type.lower()}.",
                                SEVERITY_SUCCESS, pid,
                            )
                        player.illness = None
                continue

            if rng.random() < injury_chance(player.age):
                player.injury = _roll_condition(INJURY_TYPES, rng)
                if is_user:
                    result.notify(
                        f"{player.name} has suffered a {player.injury.type.lower()}. "
                        f"Out for {player.injury.weeks_out} week(s).",
                        SEVERITY_ERROR, pid,
                    )
            elif rng.random() < ILLNESS_CHANCE:
                player.illness = _roll_condition(ILLNESS_TYPES, rng)
                if is_user:
                    result.notify(
                        f"{player.name} has contracted {player.illness.type.lower()}. "
                        f"Out for {player.illness.weeks_out} week(s).",
                        SEVERITY_ERROR, pid,
                    )
    return result
