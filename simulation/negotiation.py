"""
Negotiation state machine for offers on the human club's players.

States: PENDING (awaiting the human), NEGOTIATING with waiting_for_response
(the human countered, the bidding club has not answered), REJECTED
(terminal). Acceptance deletes the offer instead of flagging it.

Rounds never exceed 3. The bidding club accepts a counter that is at most 95%
of its anchor fee (the last fee it stood behind); otherwise it counters at
90-100% of the anchor, or walks away once round 3 is reached. Expiry is
checked before any response.
"""
from __future__ import annotations

import logging
import math
import random

from models import NegotiationEntry, SeasonState, TickResult, TransferOffer
from models.constants import (
    MAX_NEGOTIATION_ROUNDS,
    AI_RESPONSE_CHANCE,
    AI_ACCEPT_RATIO,
    AI_COUNTER_MIN,
    OFFER_EXPIRY_WEEKS,
    STATUS_PENDING,
    STATUS_NEGOTIATING,
    STATUS_REJECTED,
    ACTOR_USER,
    ACTOR_AI,
    SEVERITY_SUCCESS,
    SEVERITY_INFO,
    SEVERITY_ERROR,
)
from simulation.errors import UnknownEntityError

logger = logging.getLogger(__name__)


def _find_user_offer(state: SeasonState, player_id: str, offer_id: str) -> TransferOffer:
    if player_id not in state.players or player_id not in state.user_club.roster:
        raise UnknownEntityError("player", player_id)
    offer = state.players[player_id].find_offer(offer_id)
    if offer is None:
        raise UnknownEntityError("offer", offer_id)
    return offer


def counter_offer(state: SeasonState, player_id: str, offer_id: str, amount: int) -> TickResult:
    """The human answers a PENDING offer with a counter fee."""
    offer = _find_user_offer(state, player_id, offer_id)
    player = state.players[player_id]

    refusal = None
    if offer.round >= MAX_NEGOTIATION_ROUNDS:
        refusal = f"Maximum negotiation rounds reached for {player.name}. Accept or reject the offer."
    elif offer.status != STATUS_PENDING:
        refusal = f"The offer from {offer.club_name} is not awaiting your response."
    elif amount <= 0:
        refusal = "Counter offer must be a positive amount."
    if refusal is not None:
        result = TickResult(state=state, ok=False)
        result.notify(refusal, SEVERITY_ERROR, player_id)
        return result

    result = TickResult(state=state.clone())
    week = result.state.current_week
    offer = result.state.players[player_id].find_offer(offer_id)
    offer.round += 1
    offer.fee = amount
    offer.last_counter_offer = amount
    offer.status = STATUS_NEGOTIATING
    offer.waiting_for_response = True
    offer.expiry_week = max(offer.expiry_week, week + OFFER_EXPIRY_WEEKS)
    offer.history.append(NegotiationEntry(
        round=offer.round, actor=ACTOR_USER, amount=amount, timestamp=week, note="Counter offer",
    ))
    result.notify(f"Counter offer sent to {offer.club_name} for {player.name}.", SEVERITY_INFO, player_id)
    return result


def _respond(offer: TransferOffer, player_name: str, week: int, rng: random.Random, result: TickResult) -> None:
    counter = offer.last_counter_offer if offer.last_counter_offer is not None else offer.fee
    anchor = offer.anchor_fee or offer.original_fee

    if rng.random() < AI_RESPONSE_CHANCE and counter <= anchor * AI_ACCEPT_RATIO:
        offer.fee = counter
        offer.status = STATUS_PENDING
        offer.waiting_for_response = False
        offer.history.append(NegotiationEntry(
            round=offer.round, actor=ACTOR_AI, amount=counter, timestamp=week,
            note="Accepted counter offer",
        ))
        result.notify(
            f"{offer.club_name} accepted your {counter:,} counter offer for {player_name}.",
            SEVERITY_SUCCESS, offer.player_id,
        )
    elif offer.round >= MAX_NEGOTIATION_ROUNDS:
        offer.status = STATUS_REJECTED
        offer.waiting_for_response = False
        offer.history.append(NegotiationEntry(
            round=offer.round, actor=ACTOR_AI, amount=counter, timestamp=week, note="Offer rejected",
        ))
        result.notify(f"{offer.club_name} rejected negotiations for {player_name}.", SEVERITY_ERROR, offer.player_id)
    else:
        ai_counter = int(math.floor(anchor * (AI_COUNTER_MIN + rng.random() * (1 - AI_COUNTER_MIN))))
        offer.round = min(offer.round + 1, MAX_NEGOTIATION_ROUNDS)
        offer.fee = ai_counter
        offer.anchor_fee = ai_counter
        offer.status = STATUS_PENDING
        offer.waiting_for_response = False
        offer.history.append(NegotiationEntry(
            round=offer.round, actor=ACTOR_AI, amount=ai_counter, timestamp=week, note="Counter offer",
        ))
        result.notify(
            f"{offer.club_name} sent a counter offer of {ai_counter:,} for {player_name}.",
            SEVERITY_INFO, offer.player_id,
        )


def process_negotiations(state: SeasonState, week: int, rng: random.Random) -> TickResult:
    """Advance every in-flight offer on the human club's players by one step."""
    result = TickResult(state=state.clone())
    new_state = result.state
    if new_state.user_club_id not in new_state.clubs:
        logger.warning("Negotiation step skipped: no human club %s", new_state.user_club_id)
        return result

    for pid in new_state.user_club.roster:
        player = new_state.players.get(pid)
        if player is None or not player.offers:
            continue
        for offer in player.offers:
            if offer.status in (STATUS_PENDING, STATUS_NEGOTIATING) and week >= offer.expiry_week:
                offer.status = STATUS_REJECTED
                offer.waiting_for_response = False
                result.notify(
                    f"Transfer offer from {offer.club_name} for {player.name} has expired.",
                    SEVERITY_INFO, pid,
                )
                continue
            if offer.status == STATUS_NEGOTIATING and offer.waiting_for_response:
                _respond(offer, player.name, week, rng, result)
    return result
