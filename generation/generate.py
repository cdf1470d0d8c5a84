"""
Generate clubs, squads and youth-academy players.
Uses an optional seed for reproducibility.

Procedural logic:
- Youth academy players are 15-18 with weighted potential (3% elite 90-93,
  10% 85-89, 30% 80-84, the rest 70-79) and a current rating of 60-80% of it.
- Senior squads follow SQUAD_TEMPLATE; ratings cluster around the club's base rating.
- Wages are a quarter of a percent of market value with +/-10% noise.
"""
from __future__ import annotations

import logging
import random

from models import Club, Contract, Player, SeasonState
from models.constants import (
    SQUAD_TEMPLATE,
    CLUB_NAME_PREFIXES,
    CITY_NAMES,
    FIRST_NAMES,
    LAST_NAMES,
    WAGE_VALUE_RATIO,
    MIN_WAGE,
    POSITIONS_GOALKEEPER,
    POSITIONS_DEFENSE,
    POSITIONS_MIDFIELD,
)
from simulation.schedule import generate_league_schedule
from simulation.valuation import calculate_market_value

logger = logging.getLogger(__name__)

YOUTH_POSITIONS = ["GK", "CB", "LB", "RB", "CDM", "CM", "CAM", "LW", "RW", "ST"]

LEAGUE_SIZE = 20
STARTING_BUDGET_RANGE = (20_000_000, 400_000_000)


def _seed_rng(seed: int | str | None) -> int:
    """Convert optional seed to int; if None, use random and return it for logging."""
    if seed is None:
        return random.randint(0, 2**31 - 1)
    if isinstance(seed, str):
        return sum(ord(ch) * (i + 1) for i, ch in enumerate(seed)) % (2**31)
    return int(seed)


def _random_name(rng: random.Random) -> str:
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


def _unique_club_names(n: int, rng: random.Random) -> list[str]:
    """n unique [Prefix] [City] or [City] [Prefix] club names."""
    names = set()
    cities = list(CITY_NAMES)
    rng.shuffle(cities)
    for city in cities:
        if len(names) >= n:
            break
        prefix = rng.choice(CLUB_NAME_PREFIXES)
        if prefix in ("United", "City", "Rovers", "Wanderers"):
            names.add(f"{city} {prefix}")
        else:
            names.add(f"{prefix} {city}")
    while len(names) < n:
        names.add(f"{rng.choice(CITY_NAMES)} {rng.choice(CLUB_NAME_PREFIXES)} {len(names) + 1}")
    return sorted(names)


def _youth_potential(rng: random.Random) -> int:
    roll = rng.random()
    if roll < 0.03:
        return rng.randint(90, 93)
    if roll < 0.13:
        return rng.randint(85, 89)
    if roll < 0.43:
        return rng.randint(80, 84)
    return rng.randint(70, 79)


def _wage_for_value(value: int, rng: random.Random) -> int:
    base = int(value * WAGE_VALUE_RATIO)
    return max(MIN_WAGE, int(base + base * 0.1 * (rng.random() * 2 - 1)))


def _contract_for(value: int, rng: random.Random, max_years: int = 5) -> Contract:
    wage = _wage_for_value(value, rng)
    release = int(value * (0.6 + rng.random() * 0.2)) if rng.random() > 0.3 else None
    return Contract(
        wage=wage,
        years_left=rng.randint(1, max_years),
        performance_bonus=int(wage * (0.05 + rng.random() * 0.10)),
        release_clause=release,
    )


def generate_youth_player(player_id: str, rng: random.Random) -> Player:
    """Synthesize one youth-academy player."""
    position = rng.choice(YOUTH_POSITIONS)
    age = rng.randint(15, 18)
    potential = min(93, _youth_potential(rng))
    rating = int(potential * (0.6 + rng.random() * 0.2))
    value = calculate_market_value(rating, age, potential)
    return Player(
        id=player_id,
        name=_random_name(rng),
        position=position,
        age=age,
        rating=rating,
        potential=potential,
        market_value=value,
        contract=_contract_for(value, rng),
        is_youth_academy=True,
    )


def _senior_player(player_id: str, position: str, base_rating: int, rng: random.Random) -> Player:
    age = rng.randint(18, 34)
    rating = max(40, min(94, int(rng.gauss(base_rating, 5))))
    if age <= 22:
        potential = min(98, rating + rng.randint(4, 12))
    elif age <= 26:
        potential = min(96, rating + rng.randint(1, 6))
    else:
        potential = rating + rng.randint(0, 1)
    potential = min(99, potential)
    value = calculate_market_value(rating, age, potential)
    return Player(
        id=player_id,
        name=_random_name(rng),
        position=position,
        age=age,
        rating=rating,
        potential=potential,
        market_value=value,
        contract=_contract_for(value, rng, max_years=4),
    )


def generate_squad(state: SeasonState, club_id: str, rng: random.Random) -> list[str]:
    """Fill a club roster from SQUAD_TEMPLATE; returns the new player ids."""
    club = state.clubs[club_id]
    new_ids: list[str] = []
    for position, count in SQUAD_TEMPLATE.items():
        for _ in range(count):
            player = _senior_player(state.new_id("player"), position, club.base_rating, rng)
            state.players[player.id] = player
            club.roster.append(player.id)
            new_ids.append(player.id)
    return new_ids


def scouting_report(player: Player) -> str:
    """Short human-readable assessment of a player."""
    if player.position in POSITIONS_GOALKEEPER:
        role = "goalkeeper"
    elif player.position in POSITIONS_DEFENSE:
        role = "defender"
    elif player.position in POSITIONS_MIDFIELD:
        role = "midfielder"
    else:
        role = "forward"
    headroom = player.potential - player.rating
    if headroom >= 10:
        outlook = "could develop into a top player"
    elif headroom >= 4:
        outlook = "still has room to improve"
    else:
        outlook = "is close to full potential"
    origin = " Academy graduate." if player.is_youth_academy else ""
    return (
        f"{player.name} ({player.age}) is a {player.rating}-rated {role} who {outlook} "
        f"(potential {player.potential}).{origin}"
    )


def generate_league(
    seed: int | str | None = None,
    user_club_index: int = 0,
    num_clubs: int = LEAGUE_SIZE,
    league: str = "Premier Division",
    season_label: str = "2025/26",
    manager_name: str = "Manager",
) -> SeasonState:
    """Build a fresh save: clubs, squads, a double round-robin schedule, week 1."""
    seed_int = _seed_rng(seed)
    rng = random.Random(seed_int)
    logger.info("Generating league %r with seed %d", league, seed_int)

    state = SeasonState(season_label=season_label, current_week=1)
    state.career.name = manager_name
    names = _unique_club_names(num_clubs, rng)
    for i, name in enumerate(names):
        club_id = state.new_id("club")
        base_rating = max(50, min(88, 85 - i * 2 + rng.randint(-3, 3)))
        capacity = rng.choice([15_000, 25_000, 35_000, 45_000, 60_000, 75_000])
        state.clubs[club_id] = Club(
            id=club_id,
            name=name,
            league=league,
            base_rating=base_rating,
            budget=rng.randint(*STARTING_BUDGET_RANGE),
            fan_count=capacity * rng.randint(2, 6),
            fan_morale=rng.randint(45, 70),
            stadium_name=f"{name.split()[-1]} Park",
            original_stadium_name=f"{name.split()[-1]} Park",
            stadium_capacity=capacity,
        )
        generate_squad(state, club_id, rng)

    club_ids = list(state.clubs)
    state.user_club_id = club_ids[user_club_index % len(club_ids)]
    # Neighbouring clubs in the generated order are rivals
    for i, cid in enumerate(club_ids):
        state.clubs[cid].rival_ids = [club_ids[(i + 1) % len(club_ids)], club_ids[i - 1]]

    state.fixtures = generate_league_schedule(state, club_ids, rng)
    logger.info("Generated %d clubs, %d players, %d fixtures",
                len(state.clubs), len(state.players), len(state.fixtures))
    return state
