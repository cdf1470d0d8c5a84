"""
Wage and market valuation.

Market value is recomputed weekly from rating, age and potential: a base value
by rating band, an age multiplier, a capped potential bonus, an extra age
adjustment for 80+ players, then a floor and a per-rating cap.
"""
from __future__ import annotations

import logging
import math

from models import SeasonState, TickResult
from models.constants import MIN_MARKET_VALUE

logger = logging.getLogger(__name__)

# Age 15..40; younger clamps to 15, older to 40
AGE_MULTIPLIERS: dict[int, float] = {
    15: 2.5, 16: 2.4, 17: 2.3, 18: 2.2, 19: 2.1,
    20: 2.0, 21: 1.9, 22: 1.75, 23: 1.6, 24: 1.5,
    25: 1.4, 26: 1.3, 27: 1.2, 28: 1.1, 29: 1.0,
    30: 0.9, 31: 0.8, 32: 0.65, 33: 0.5, 34: 0.4,
    35: 0.3, 36: 0.25, 37: 0.2, 38: 0.15, 39: 0.1,
    40: 0.05,
}

RATING_CAPS: dict[int, int] = {
    99: 180_000_000, 98: 160_000_000, 97: 145_000_000, 96: 130_000_000, 95: 115_000_000,
    94: 100_000_000, 93: 85_000_000, 92: 70_000_000, 91: 60_000_000, 90: 50_000_000,
    89: 40_000_000, 88: 32_000_000, 87: 26_000_000, 86: 20_000_000, 85: 16_000_000,
    84: 13_000_000, 83: 11_000_000, 82: 9_000_000, 81: 7_500_000, 80: 6_500_000,
    79: 5_500_000, 78: 4_500_000, 77: 3_800_000, 76: 3_200_000, 75: 2_800_000,
    74: 2_400_000, 73: 2_000_000, 72: 1_700_000, 71: 1_400_000, 70: 1_200_000,
    69: 1_000_000, 68: 850_000, 67: 700_000, 66: 600_000, 65: 500_000,
    64: 400_000, 63: 350_000, 62: 300_000, 61: 250_000, 60: 200_000,
}
CAP_ABOVE_TABLE = 200_000_000
CAP_BELOW_TABLE = 100_000


def _base_value(rating: int) -> float:
    if rating >= 95:
        return math.pow(rating - 90, 2.8) * 80_000 + 80_000_000
    if rating >= 90:
        return math.pow(rating - 85, 2.6) * 60_000 + 35_000_000
    if rating >= 85:
        return math.pow(rating - 80, 2.4) * 40_000 + 15_000_000
    if rating >= 80:
        return math.pow(rating - 75, 2.2) * 25_000 + 5_000_000
    if rating >= 75:
        return math.pow(rating - 70, 2.0) * 15_000 + 1_500_000
    if rating >= 70:
        return math.pow(rating - 65, 1.8) * 8_000 + 500_000
    if rating >= 65:
        return (rating - 60) * 60_000 + 200_000
    return (rating - 55) * 30_000 + 100_000


def _potential_bonus(rating: int, age: int, potential: int) -> float:
    diff = potential - rating
    if diff <= 0:
        return 0.0
    if age <= 21:
        per_point = 0.08
    elif age <= 23:
        per_point = 0.06
    elif age <= 25:
        per_point = 0.04
    else:
        per_point = 0.02
    return min(diff * per_point, 0.4 if age <= 23 else 0.25)


def calculate_market_value(rating: int, age: int, potential: int) -> int:
    """Market value in whole currency units."""
    value = _base_value(rating)
    value *= AGE_MULTIPLIERS[max(15, min(40, age))]
    value *= 1 + _potential_bonus(rating, age, potential)

    if rating >= 85:
        if age <= 22:
            value *= 1.15
        elif age >= 31:
            value *= 0.85
    elif rating >= 80:
        if age <= 22:
            value *= 1.1
        elif age >= 31:
            value *= 0.9

    value = max(value, MIN_MARKET_VALUE)
    if rating in RATING_CAPS:
        cap = RATING_CAPS[rating]
    else:
        cap = CAP_ABOVE_TABLE if rating > 99 else CAP_BELOW_TABLE
    return int(math.floor(min(value, cap)))


def update_market_values(state: SeasonState) -> TickResult:
    """Recompute every player's market value."""
    new_state = state.clone()
    for player in new_state.players.values():
        player.market_value = calculate_market_value(player.rating, player.age, player.potential)
    return TickResult(state=new_state)


def weekly_wage_bill(state: SeasonState, club_id: str) -> int:
    return sum(p.contract.wage for p in state.roster_players(club_id))


def pay_weekly_wages(state: SeasonState) -> TickResult:
    """Deduct each club's wage bill from its budget and book it under expenses."""
    new_state = state.clone()
    for club in new_state.clubs.values():
        bill = weekly_wage_bill(new_state, club.id)
        club.budget -= bill
        club.financials.expense_wages += bill
    logger.debug("Paid wages for %d clubs", len(new_state.clubs))
    return TickResult(state=new_state)
