"""
Stadium operations: expansions and naming-rights sponsors.

Expansions are paid up front and take a capacity-dependent number of weeks.
Sponsor deals pay a yearly amount scaled by capacity tier. The human club is
offered a new naming-rights deal from time to time (at least 6 weeks apart).
"""
from __future__ import annotations

import logging
import math
import random

from models import SeasonState, StadiumExpansion, StadiumSponsor, TickResult
from models.constants import SPONSOR_OFFER_MIN_GAP, SEVERITY_SUCCESS, SEVERITY_INFO, SEVERITY_ERROR
from simulation.errors import UnknownEntityError

logger = logging.getLogger(__name__)

# (capacity below, min cost, max cost, min weeks, max weeks)
UPGRADE_TIERS = [
    (20_000, 13_000_000, 16_000_000, 4, 6),
    (30_000, 19_000_000, 24_000_000, 7, 10),
    (50_000, 29_000_000, 35_000_000, 12, 16),
    (70_000, 45_000_000, 56_000_000, 18, 22),
    (90_000, 56_000_000, 72_000_000, 22, 28),
    (100_000, 80_000_000, 112_000_000, 30, 40),
]
EXPANSION_PERCENT = 15

SPONSOR_NAMES = {
    1: ["Local Motors", "Harbour Bank", "Greenfield Foods"],
    2: ["Northline Rail", "Crest Insurance", "Brightwater"],
    3: ["Atlas Energy", "Summit Telecom", "Vantage Air"],
    4: ["Orion Group", "Meridian Bank", "Helix Digital"],
    5: ["Pinnacle Global", "Stellar Airways", "Titan Holdings"],
    6: ["Apex International", "Zenith Corporation", "Monarch Capital"],
}


def _upgrade_tier(capacity: int) -> tuple[int, int, int, int] | None:
    for below, min_cost, max_cost, min_weeks, max_weeks in UPGRADE_TIERS:
        if capacity < below:
            return min_cost, max_cost, min_weeks, max_weeks
    return None


def upgrade_cost(capacity: int) -> int | None:
    tier = _upgrade_tier(capacity)
    return None if tier is None else (tier[0] + tier[1]) // 2


def upgrade_weeks(capacity: int) -> int | None:
    tier = _upgrade_tier(capacity)
    return None if tier is None else (tier[2] + tier[3]) // 2


def sponsor_tier(capacity: int) -> int:
    for threshold, tier in ((100_000, 6), (90_000, 5), (70_000, 4), (50_000, 3), (30_000, 2)):
        if capacity >= threshold:
            return tier
    return 1


def generate_sponsor_offer(capacity: int, week: int, rng: random.Random) -> StadiumSponsor:
    tier = sponsor_tier(capacity)
    name = rng.choice(SPONSOR_NAMES[tier])
    payment = int(math.floor(tier * 2_000_000 * (capacity / 10_000) * 0.1))
    return StadiumSponsor(
        sponsor_name=name,
        stadium_name=f"{name} Stadium",
        yearly_payment=payment,
        years=2 + rng.randint(0, 3),
        expiry_week=week + 4 + rng.randint(0, 2),
    )


def start_stadium_expansion(state: SeasonState) -> TickResult:
    """Pay for a human-club expansion; construction starts on the next tick."""
    club = state.user_club
    cost = upgrade_cost(club.stadium_capacity)
    if club.pending_expansion is not None:
        refusal = "A stadium expansion is already under way."
    elif cost is None:
        refusal = "The stadium cannot be expanded any further."
    elif club.budget < cost:
        refusal = f"Not enough budget for the expansion ({cost:,} needed)."
    else:
        refusal = None
    if refusal is not None:
        result = TickResult(state=state, ok=False)
        result.notify(refusal, SEVERITY_ERROR)
        return result

    result = TickResult(state=state.clone())
    club = result.state.user_club
    club.budget -= cost
    club.financials.expense_facilities += cost
    club.pending_expansion = StadiumExpansion(
        new_capacity=int(math.floor(club.stadium_capacity * (1 + EXPANSION_PERCENT / 100))),
        cost=cost,
    )
    result.notify(f"Stadium expansion approved for {cost:,}.", SEVERITY_SUCCESS)
    return result


def accept_sponsor_offer(state: SeasonState) -> TickResult:
    offer = state.user_club.pending_sponsor_offer
    if offer is None:
        raise UnknownEntityError("sponsor offer", state.user_club_id)
    result = TickResult(state=state.clone())
    club = result.state.user_club
    deal = club.pending_sponsor_offer
    week = result.state.current_week
    deal.start_week = week
    deal.end_week = week + deal.years * max(result.state.total_weeks, 1)
    deal.expiry_week = 0
    club.stadium_sponsor = deal
    club.pending_sponsor_offer = None
    club.stadium_name = deal.stadium_name
    club.budget += deal.yearly_payment
    club.financials.income_sponsors += deal.yearly_payment
    result.notify(f"Stadium renamed to {deal.stadium_name}.", SEVERITY_SUCCESS)
    return result


def reject_sponsor_offer(state: SeasonState) -> TickResult:
    if state.user_club.pending_sponsor_offer is None:
        raise UnknownEntityError("sponsor offer", state.user_club_id)
    result = TickResult(state=state.clone())
    result.state.user_club.pending_sponsor_offer = None
    result.notify("Stadium sponsor offer declined.", SEVERITY_INFO)
    return result


def _should_offer(weeks_since: int, rng: random.Random) -> bool:
    if weeks_since < SPONSOR_OFFER_MIN_GAP:
        return False
    if weeks_since >= 12:
        return True
    if weeks_since >= 10:
        return rng.random() < 0.5
    return rng.random() < 0.3


def run_stadium_operations(state: SeasonState, next_week: int, rng: random.Random) -> TickResult:
    result = TickResult(state=state.clone())
    new_state = result.state
    for club in new_state.clubs.values():
        is_user = club.id == new_state.user_club_id

        expansion = club.pending_expansion
        if expansion is not None:
            if expansion.start_week == 0:
                expansion.start_week = next_week
                expansion.completion_week = next_week + (upgrade_weeks(club.stadium_capacity) or 5)
            if next_week >= expansion.completion_week:
                club.stadium_capacity = expansion.new_capacity
                club.pending_expansion = None
                if is_user:
                    result.notify(
                        f"Stadium expansion completed! New capacity: {club.stadium_capacity:,}",
                        SEVERITY_SUCCESS,
                    )

        sponsor = club.stadium_sponsor
        if sponsor is not None and sponsor.end_week and next_week >= sponsor.end_week:
            club.financials.income_sponsors = max(0, club.financials.income_sponsors - sponsor.yearly_payment)
            club.stadium_sponsor = None
            club.stadium_name = club.original_stadium_name or club.stadium_name
            if is_user:
                result.notify(f"The {sponsor.sponsor_name} stadium sponsorship has ended.", SEVERITY_INFO)

        if club.pending_sponsor_offer is not None:
            if next_week > club.pending_sponsor_offer.expiry_week:
                club.pending_sponsor_offer = None
                if is_user:
                    result.notify("Stadium sponsor offer has expired.", SEVERITY_INFO)
        elif is_user and club.stadium_sponsor is None:
            if _should_offer(next_week - club.last_sponsor_offer_week, rng):
                club.pending_sponsor_offer = generate_sponsor_offer(club.stadium_capacity, next_week, rng)
                club.last_sponsor_offer_week = next_week
                result.notify(
                    f"{club.pending_sponsor_offer.sponsor_name} wants to sponsor your stadium.",
                    SEVERITY_INFO,
                )
    return result
