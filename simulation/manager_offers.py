"""
Manager job offers after the season.

Finishing position opens tiers of clubs: a top-3 finish attracts elite clubs
(rated 80+), top 6 high-tier clubs (70-79), the top half medium-tier clubs
(60-69); low-tier clubs (under 60) may call regardless. Each tier is rolled
independently, so the number and quality of offers vary from season to season.
"""
from __future__ import annotations

import random

from models import ManagerOffer, SeasonState, TickResult
from models.constants import (
    PRESTIGE_LOW,
    PRESTIGE_MEDIUM,
    PRESTIGE_HIGH,
    PRESTIGE_ELITE,
    SEVERITY_SUCCESS,
)
from simulation.errors import UnknownEntityError


def _offer(state: SeasonState, club, prestige: str, reason: str) -> ManagerOffer:
    return ManagerOffer(
        id=state.new_id("job"),
        club_id=club.id,
        club_name=club.name,
        club_rating=club.base_rating,
        prestige=prestige,
        reason=reason,
    )


def generate_manager_offers(state: SeasonState, rank: int, rng: random.Random) -> list[ManagerOffer]:
    """Offers for the human manager given their final league position.

    ``state`` is owned by the caller; only its id counter is advanced.
    """
    current = state.user_club
    others = [c for c in state.clubs.values() if c.id != current.id]
    is_champion = rank == 1
    offers: list[ManagerOffer] = []

    if rank <= 3:
        elite = sorted((c for c in others if c.base_rating >= 80), key=lambda c: c.base_rating, reverse=True)
        take = 2 if rng.random() < 0.7 else 1
        for club in elite[:take]:
            reason = (
                f"Won the league with {current.name}" if is_champion
                else f"Finished {rank} in the table"
            )
            offers.append(_offer(state, club, PRESTIGE_ELITE, reason))

    if rank <= 6:
        high = sorted((c for c in others if 70 <= c.base_rating < 80), key=lambda c: c.base_rating, reverse=True)
        take = 2 if rng.random() < 0.6 else 1
        for club in high[:take]:
            reason = "Impressed by the title win" if is_champion else "Top-six finish"
            offers.append(_offer(state, club, PRESTIGE_HIGH, reason))

    if rank <= 10:
        medium = [c for c in others if 60 <= c.base_rating < 70]
        rng.shuffle(medium)
        take = 2 if rng.random() < 0.5 else 1
        for club in medium[:take]:
            offers.append(_offer(state, club, PRESTIGE_MEDIUM, f"Solid season, finished {rank}"))

    low = [c for c in others if c.base_rating < 60]
    rng.shuffle(low)
    take = 1 if rng.random() < 0.4 else 0
    for club in low[:take]:
        reason = "Looking for leadership" if rank <= 15 else "Needs a rebuild"
        offers.append(_offer(state, club, PRESTIGE_LOW, reason))

    if not offers:
        fallback = [c for c in others if c.base_rating < 65]
        rng.shuffle(fallback)
        take = 1 if rng.random() < 0.5 else 0
        return [_offer(state, club, PRESTIGE_LOW, "A new opportunity") for club in fallback[:take]]

    rng.shuffle(offers)
    return offers


def accept_manager_offer(state: SeasonState, offer_id: str) -> TickResult:
    """Move the human manager to the offering club; other offers lapse."""
    offer = next((o for o in state.career.offers if o.id == offer_id), None)
    if offer is None:
        raise UnknownEntityError("manager offer", offer_id)
    if offer.club_id not in state.clubs:
        raise UnknownEntityError("club", offer.club_id)
    result = TickResult(state=state.clone())
    result.state.user_club_id = offer.club_id
    result.state.career.offers = []
    result.notify(f"You are the new manager of {offer.club_name}.", SEVERITY_SUCCESS)
    return result


def decline_manager_offers(state: SeasonState) -> TickResult:
    result = TickResult(state=state.clone())
    result.state.career.offers = []
    return result
