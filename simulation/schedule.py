"""
Round-robin schedule generation for the league.

A league of N clubs plays a double round-robin (every pair meets twice, once
at each venue): N - 1 rounds per half, N / 2 matches per week.  The circle
method guarantees every club plays exactly once per week.  Twenty clubs give
the standard 38-week season.
"""
from __future__ import annotations

import random

from models import Fixture, SeasonState

BYE = ""


def generate_round_robin(
    club_ids: list[str],
    rng: random.Random | None = None,
) -> list[tuple[int, str, str]]:
    """Generate a full double round-robin.

    Parameters
    ----------
    club_ids : list[str]
        Club ids; an odd count gets a bye each week.
    rng : random.Random | None
        Optional RNG; if given the initial ordering is shuffled.

    Returns
    -------
    list of (week, home_id, away_id)
        ``week`` is 1-indexed.
    """
    n = len(club_ids)
    if n < 2:
        return []

    clubs = list(club_ids)
    if rng is not None:
        rng.shuffle(clubs)

    if n % 2 != 0:
        clubs.append(BYE)
        n += 1

    fixed = clubs[0]
    rotating = list(clubs[1:])
    num_rounds = n - 1

    first_half: list[tuple[int, str, str]] = []

    for round_idx in range(num_rounds):
        week = round_idx + 1
        pairs: list[tuple[str, str]] = []

        # Fixed club alternates home and away each round
        if round_idx % 2 == 0:
            pairs.append((fixed, rotating[0]))
        else:
            pairs.append((rotating[0], fixed))

        for i in range(1, n // 2):
            c1 = rotating[i]
            c2 = rotating[n - 1 - i]
            if i % 2 == 0:
                pairs.append((c1, c2))
            else:
                pairs.append((c2, c1))

        for home, away in pairs:
            if home == BYE or away == BYE:
                continue
            first_half.append((week, home, away))

        # Circle-method rotation: last element moves to front
        rotating = [rotating[-1]] + rotating[:-1]

    # Second half: same matchups with venues swapped
    second_half = [(week + num_rounds, away, home) for week, home, away in first_half]
    return first_half + second_half


def generate_league_schedule(
    state: SeasonState,
    club_ids: list[str],
    rng: random.Random | None = None,
) -> list[Fixture]:
    """Fixtures for one league season, with derby flags from club rivalries."""
    fixtures: list[Fixture] = []
    for week, home, away in generate_round_robin(club_ids, rng):
        home_club = state.clubs.get(home)
        is_derby = bool(home_club and away in home_club.rival_ids)
        fixtures.append(Fixture(
            id=state.new_id("fixture"),
            week=week,
            home_id=home,
            away_id=away,
            is_derby=is_derby,
        ))
    return fixtures
