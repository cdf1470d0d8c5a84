"""
Match simulation engine.

Plays one league fixture between two clubs and produces the result the weekly
tick consumes: score, goal and card events, per-player performances and the
man of the match.  Key design goals:

1. **Rating-driven**: each side fields its best available XI in a 4-4-2 and
   unit ratings (attack, midfield, defense, goalkeeping) set expected goals.
2. **Internally consistent**: every goal has a scorer from the starting XI,
   club goals equal the sum of player goals, and a red card ends that
   player's match.
3. **Reproducible**: all randomness comes from the injected ``random.Random``.

Any callable with the same signature as ``simulate_fixture`` can be passed to
``simulation.tick.simulate_week`` instead.
"""
from __future__ import annotations

import copy
import math
import random
from dataclasses import dataclass

from models import CardEvent, Club, Fixture, GoalEvent, MatchPerformance, Player
from models.constants import (
    POSITIONS_GOALKEEPER,
    POSITIONS_DEFENSE,
    POSITIONS_MIDFIELD,
    POSITIONS_ATTACK,
)

# ---------------------------------------------------------------------------
# Formation: starters per position group
# ---------------------------------------------------------------------------
FORMATION: dict[str, int] = {"GK": 1, "DEF": 4, "MID": 4, "ATT": 2}

HOME_ADVANTAGE = 0.25
BASE_EXPECTED_GOALS = 1.3
MATCH_MINUTES = 90
LATE_WINNER_MINUTE = 85

# Who scores and who provides, by position group
SCORER_WEIGHTS: dict[str, float] = {"ATT": 5.0, "MID": 2.5, "DEF": 0.8, "GK": 0.0}
ASSIST_WEIGHTS: dict[str, float] = {"ATT": 3.0, "MID": 4.0, "DEF": 1.5, "GK": 0.1}
ASSIST_CHANCE = 0.75

YELLOW_CARD_MAX = 3
RED_CARD_CHANCE = 0.04


# ===================================================================
# Helper utilities
# ===================================================================

def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _safe_mean(values: list[float], default: float = 50.0) -> float:
    return sum(values) / len(values) if values else default


def _group(position: str) -> str:
    if position in POSITIONS_GOALKEEPER:
        return "GK"
    if position in POSITIONS_DEFENSE:
        return "DEF"
    if position in POSITIONS_MIDFIELD:
        return "MID"
    if position in POSITIONS_ATTACK:
        return "ATT"
    return "MID"


def _poisson(mean: float, rng: random.Random) -> int:
    """Knuth's method; fine for the small means a football score needs."""
    limit = math.exp(-mean)
    k = 0
    p = 1.0
    while True:
        p *= rng.random()
        if p <= limit:
            return k
        k += 1


def _weighted_choice(players: list[Player], weights: list[float], rng: random.Random) -> Player | None:
    if not players or sum(weights) <= 0:
        return None
    return rng.choices(players, weights=weights, k=1)[0]


# ===================================================================
# Team selection
# ===================================================================

def select_starting_xi(squad: list[Player]) -> list[Player]:
    """Best available players per group, topped up from whoever is left."""
    available = sorted((p for p in squad if p.is_available), key=lambda p: p.rating, reverse=True)
    chosen: list[Player] = []
    for group, count in FORMATION.items():
        chosen.extend([p for p in available if _group(p.position) == group][:count])
    size = sum(FORMATION.values())
    for player in available:
        if len(chosen) >= size:
            break
        if player not in chosen:
            chosen.append(player)
    return chosen


# ===================================================================
# Unit ratings
# ===================================================================

@dataclass
class UnitRatings:
    """Condensed strength ratings for one side (all 0-99 scale)."""

    attack: float = 50.0
    midfield: float = 50.0
    defense: float = 50.0
    goalkeeping: float = 50.0


def compute_ratings(xi: list[Player], club: Club) -> UnitRatings:
    by_group: dict[str, list[float]] = {}
    for p in xi:
        by_group.setdefault(_group(p.position), []).append(float(p.rating))
    fallback = float(club.base_rating)
    # short-handed sides play weaker
    shortfall = max(0, sum(FORMATION.values()) - len(xi)) * 2.0
    return UnitRatings(
        attack=_safe_mean(by_group.get("ATT", []), fallback) - shortfall,
        midfield=_safe_mean(by_group.get("MID", []), fallback) - shortfall,
        defense=_safe_mean(by_group.get("DEF", []), fallback) - shortfall,
        goalkeeping=_safe_mean(by_group.get("GK", []), fallback - 10) - shortfall,
    )


def expected_goals(own: UnitRatings, opponent: UnitRatings, is_home: bool) -> float:
    threat = own.attack * 0.6 + own.midfield * 0.4
    resistance = opponent.defense * 0.6 + opponent.goalkeeping * 0.4
    xg = BASE_EXPECTED_GOALS + (threat - resistance) / 20.0
    if is_home:
        xg += HOME_ADVANTAGE
    return _clamp(xg, 0.2, 4.0)


# ===================================================================
# Match events
# ===================================================================

def _goal_events(
    club: Club, xi: list[Player], count: int, rng: random.Random,
) -> list[GoalEvent]:
    scorers_pool = [p for p in xi if _group(p.position) != "GK"] or xi
    events = []
    for _ in range(count):
        scorer = _weighted_choice(
            scorers_pool, [SCORER_WEIGHTS[_group(p.position)] * p.rating for p in scorers_pool], rng,
        )
        if scorer is None:
            continue
        assist = None
        if rng.random() < ASSIST_CHANCE:
            mates = [p for p in xi if p.id != scorer.id]
            assist = _weighted_choice(mates, [ASSIST_WEIGHTS[_group(p.position)] * p.rating for p in mates], rng)
        events.append(GoalEvent(
            scorer_id=scorer.id,
            scorer_name=scorer.name,
            minute=rng.randint(1, MATCH_MINUTES),
            club_id=club.id,
            assist_id=assist.id if assist else None,
            assist_name=assist.name if assist else None,
        ))
    return events


def _card_events(club: Club, xi: list[Player], rng: random.Random) -> list[CardEvent]:
    if not xi:
        return []
    cards = []
    for _ in range(rng.randint(0, YELLOW_CARD_MAX)):
        p = rng.choice(xi)
        cards.append(CardEvent(
            player_id=p.id, player_name=p.name, minute=rng.randint(1, MATCH_MINUTES),
            club_id=club.id, colour="yellow",
        ))
    if rng.random() < RED_CARD_CHANCE:
        p = rng.choice(xi)
        cards.append(CardEvent(
            player_id=p.id, player_name=p.name, minute=rng.randint(10, MATCH_MINUTES),
            club_id=club.id, colour="red",
        ))
    return cards


def _late_winner(goals: list[GoalEvent], home_id: str, away_id: str) -> bool:
    """True if the goal that decided the match came from the 85th minute on."""
    home = away = 0
    deciding_minute = None
    for goal in sorted(goals, key=lambda g: g.minute):
        if goal.club_id == home_id:
            home += 1
        else:
            away += 1
        if home != away and abs(home - away) == 1 and (home > away) == (goal.club_id == home_id):
            deciding_minute = goal.minute
    if home == away or deciding_minute is None:
        return False
    return deciding_minute >= LATE_WINNER_MINUTE


def _performances(
    club: Club,
    xi: list[Player],
    goals: list[GoalEvent],
    cards: list[CardEvent],
    goals_for: int,
    goals_against: int,
    opponent_shots_on_target: int,
    rng: random.Random,
) -> list[MatchPerformance]:
    red_minutes = {c.player_id: c.minute for c in cards if c.colour == "red"}
    result_bonus = 0.5 if goals_for > goals_against else (-0.3 if goals_for < goals_against else 0.0)
    rows = []
    for p in xi:
        group = _group(p.position)
        scored = sum(1 for g in goals if g.scorer_id == p.id)
        assisted = sum(1 for g in goals if g.assist_id == p.id)
        saves = max(0, opponent_shots_on_target - goals_against) if group == "GK" else 0
        tackles = rng.randint(1, 5) if group in ("DEF", "MID") else rng.randint(0, 1)
        interceptions = rng.randint(0, 4) if group in ("DEF", "MID") else 0
        shots = scored + (rng.randint(0, 4) if group == "ATT" else rng.randint(0, 2) if group == "MID" else 0)
        passes = rng.randint(20, 70) if group != "GK" else rng.randint(15, 35)
        rating = 6.0 + (p.rating - 65) / 40 + scored * 1.0 + assisted * 0.6 + result_bonus + rng.gauss(0, 0.4)
        if group in ("GK", "DEF") and goals_against == 0:
            rating += 0.5
        if group == "GK":
            rating += saves * 0.15
        if p.id in red_minutes:
            rating -= 1.5
        rows.append(MatchPerformance(
            player_id=p.id,
            club_id=club.id,
            name=p.name,
            position=p.position,
            rating=round(_clamp(rating, 3.0, 10.0), 1),
            goals=scored,
            assists=assisted,
            shots=shots,
            passes=passes,
            pass_accuracy=int(_clamp(rng.gauss(78, 6), 50, 97)),
            tackles=tackles,
            interceptions=interceptions,
            saves=saves,
            minutes_played=red_minutes.get(p.id, MATCH_MINUTES),
        ))
    return rows


# ===================================================================
# Public API
# ===================================================================

def simulate_fixture(
    fixture: Fixture,
    home: Club,
    away: Club,
    players: dict[str, Player],
    rng: random.Random,
) -> Fixture:
    """Return a played copy of *fixture*; the input objects are not modified."""
    home_xi = select_starting_xi([players[pid] for pid in home.roster if pid in players])
    away_xi = select_starting_xi([players[pid] for pid in away.roster if pid in players])
    home_units = compute_ratings(home_xi, home)
    away_units = compute_ratings(away_xi, away)

    home_goals = _poisson(expected_goals(home_units, away_units, True), rng)
    away_goals = _poisson(expected_goals(away_units, home_units, False), rng)

    goals = _goal_events(home, home_xi, home_goals, rng) + _goal_events(away, away_xi, away_goals, rng)
    goals.sort(key=lambda g: g.minute)
    home_goals = sum(1 for g in goals if g.club_id == home.id)
    away_goals = len(goals) - home_goals
    cards = _card_events(home, home_xi, rng) + _card_events(away, away_xi, rng)
    cards.sort(key=lambda c: c.minute)

    home_on_target = home_goals + rng.randint(1, 6)
    away_on_target = away_goals + rng.randint(1, 6)
    performances = (
        _performances(home, home_xi, goals, cards, home_goals, away_goals, away_on_target, rng)
        + _performances(away, away_xi, goals, cards, away_goals, home_goals, home_on_target, rng)
    )

    played = copy.deepcopy(fixture)
    played.played = True
    played.home_goals = home_goals
    played.away_goals = away_goals
    played.goals = goals
    played.cards = cards
    played.performances = performances
    best = max(performances, key=lambda m: m.rating, default=None)
    played.man_of_the_match = best.player_id if best else None
    played.late_winner = _late_winner(goals, home.id, away.id)
    return played
