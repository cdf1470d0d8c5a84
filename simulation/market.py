"""
Human transfer-market actions and the CPU offers they attract.

Listing a player for transfer or loan clears old offers and invites 1-3 CPU
clubs that can afford half the market value to bid. Accepting an offer sells
immediately while the window is open for the current week; otherwise the deal
becomes a PendingTransfer dated to the next window week. Any action that
would leave the human squad below 20 players is refused without changing state.
"""
from __future__ import annotations

import logging
import math
import random

from models import NegotiationEntry, PendingTransfer, SeasonState, TickResult, TransferOffer
from models.constants import (
    MIN_SQUAD_SIZE,
    MAX_INTERESTED_CLUBS,
    OFFER_BUDGET_RATIO,
    TRANSFER_OFFER_BASE,
    TRANSFER_OFFER_BASE_YOUTH,
    TRANSFER_OFFER_SPREAD,
    LOAN_OFFER_RATIO,
    OFFER_EXPIRY_WEEKS,
    OFFER_TRANSFER,
    OFFER_LOAN,
    OFFER_TYPES,
    STATUS_REJECTED,
    ACTOR_AI,
    SEVERITY_SUCCESS,
    SEVERITY_INFO,
    SEVERITY_ERROR,
)
from simulation.errors import UnknownEntityError
from simulation.squad import enforce_in_place, remove_player
from simulation.transfers import execute_transfer
from simulation.window import is_window_open, next_window_week

logger = logging.getLogger(__name__)


def _user_player(state: SeasonState, player_id: str):
    if state.user_club_id not in state.clubs:
        raise UnknownEntityError("club", state.user_club_id)
    if player_id not in state.players or player_id not in state.user_club.roster:
        raise UnknownEntityError("player", player_id)
    return state.players[player_id]


def would_violate_min_squad(state: SeasonState, player_id: str) -> bool:
    """True if losing this player leaves fewer than 20 once agreed departures go."""
    roster = state.user_club.roster
    leaving = {pid for pid in roster if state.players[pid].pending_transfer is not None}
    leaving.add(player_id)
    return len(roster) - len(leaving) < MIN_SQUAD_SIZE


def _refuse(state: SeasonState, message: str, player_id: str | None = None) -> TickResult:
    result = TickResult(state=state, ok=False)
    result.notify(message, SEVERITY_ERROR, player_id)
    return result


def generate_offers_for_player(
    state: SeasonState, player_id: str, offer_type: str, rng: random.Random,
) -> TickResult:
    """1-3 CPU clubs with budget above half the market value bid for a listed player."""
    result = TickResult(state=state.clone())
    new_state = result.state
    player = _user_player(new_state, player_id)
    week = new_state.current_week

    candidates = [
        new_state.clubs[cid] for cid in new_state.cpu_club_ids()
        if new_state.clubs[cid].budget > player.market_value * OFFER_BUDGET_RATIO
    ]
    rng.shuffle(candidates)
    interested = candidates[:rng.randint(1, MAX_INTERESTED_CLUBS)]

    for club in interested:
        if offer_type == OFFER_TRANSFER:
            base = TRANSFER_OFFER_BASE_YOUTH if player.is_youth_academy else TRANSFER_OFFER_BASE
            fee = int(math.floor(player.market_value * (base + rng.random() * TRANSFER_OFFER_SPREAD)))
        else:
            fee = int(math.floor(player.market_value * LOAN_OFFER_RATIO * (0.5 + rng.random() * 0.5)))
        player.offers.append(TransferOffer(
            id=new_state.new_id("offer"),
            club_id=club.id,
            club_name=club.name,
            player_id=player.id,
            type=offer_type,
            fee=fee,
            original_fee=fee,
            anchor_fee=fee,
            expiry_week=week + OFFER_EXPIRY_WEEKS,
            history=[NegotiationEntry(round=0, actor=ACTOR_AI, amount=fee, timestamp=week, note="Initial offer")],
        ))

    if interested:
        kind = "loan" if offer_type == OFFER_LOAN else "transfer"
        result.notify(f"{len(interested)} club(s) made {kind} offers for {player.name}.", SEVERITY_INFO, player_id)
    else:
        result.notify(f"No clubs are interested in {player.name} right now.", SEVERITY_INFO, player_id)
    return result


def _list_player(state: SeasonState, player_id: str, offer_type: str, rng: random.Random) -> TickResult:
    player = _user_player(state, player_id)
    if would_violate_min_squad(state, player_id):
        return _refuse(state, f"Cannot list {player.name}: minimum squad size is {MIN_SQUAD_SIZE} players.", player_id)

    listed = TickResult(state=state.clone())
    listed_player = listed.state.players[player_id]
    listed_player.on_transfer_list = offer_type == OFFER_TRANSFER
    listed_player.on_loan_list = offer_type == OFFER_LOAN
    listed_player.transfer_list_week = listed.state.current_week
    listed_player.offers = []
    kind = "loan" if offer_type == OFFER_LOAN else "transfer"
    listed.notify(f"{player.name} added to the {kind} list.", SEVERITY_INFO, player_id)
    listed.extend(generate_offers_for_player(listed.state, player_id, offer_type, rng))
    return listed


def add_to_transfer_list(state: SeasonState, player_id: str, rng: random.Random) -> TickResult:
    return _list_player(state, player_id, OFFER_TRANSFER, rng)


def add_to_loan_list(state: SeasonState, player_id: str, rng: random.Random) -> TickResult:
    return _list_player(state, player_id, OFFER_LOAN, rng)


def remove_from_lists(state: SeasonState, player_id: str) -> TickResult:
    _user_player(state, player_id)
    result = TickResult(state=state.clone())
    player = result.state.players[player_id]
    player.on_transfer_list = False
    player.on_loan_list = False
    player.transfer_list_week = None
    player.offers = []
    result.notify(f"{player.name} removed from the market.", SEVERITY_INFO, player_id)
    return result


def release_player(state: SeasonState, player_id: str) -> TickResult:
    player = _user_player(state, player_id)
    if would_violate_min_squad(state, player_id):
        return _refuse(state, f"Cannot release {player.name}: minimum squad size is {MIN_SQUAD_SIZE} players.", player_id)
    result = TickResult(state=state.clone())
    remove_player(result.state, player_id)
    result.notify(f"{player.name} has been released from the squad.", SEVERITY_INFO)
    return result


def accept_offer(state: SeasonState, player_id: str, offer_id: str, rng: random.Random) -> TickResult:
    """Accept a CPU offer: sell now if the window is open, otherwise defer to the next window."""
    player = _user_player(state, player_id)
    offer = player.find_offer(offer_id)
    if offer is None:
        raise UnknownEntityError("offer", offer_id)
    if offer.status == STATUS_REJECTED:
        return _refuse(state, f"The offer from {offer.club_name} is no longer available.", player_id)
    if offer.waiting_for_response:
        return _refuse(state, f"Waiting for {offer.club_name} to answer your counter offer.", player_id)
    if player.pending_transfer is not None:
        return _refuse(state, f"{player.name} already has an agreed transfer.", player_id)
    if offer.club_id not in state.clubs:
        raise UnknownEntityError("club", offer.club_id)
    if would_violate_min_squad(state, player_id):
        return _refuse(state, f"Cannot accept offer: minimum squad size is {MIN_SQUAD_SIZE} players.", player_id)

    result = TickResult(state=state.clone())
    new_state = result.state
    week = new_state.current_week
    total_weeks = new_state.total_weeks

    if is_window_open(week, total_weeks):
        record = execute_transfer(
            new_state, player_id, new_state.user_club_id, offer.club_id, offer.fee, offer.type, week,
        )
        if record is None:
            return _refuse(state, f"Transfer of {player.name} could not be completed.", player_id)
        result.transfers.append(record)
        enforce_in_place(new_state, new_state.user_club_id, rng, week, result)
        enforce_in_place(new_state, offer.club_id, rng, week, result)
        kind = "loaned" if offer.type == OFFER_LOAN else "sold"
        result.notify(
            f"Transfer completed! {player.name} {kind} to {offer.club_name} for {offer.fee:,}.",
            SEVERITY_SUCCESS,
        )
        return result

    effective = next_window_week(week, total_weeks)
    moving = new_state.players[player_id]
    moving.pending_transfer = PendingTransfer(
        target_club_id=offer.club_id,
        target_club_name=offer.club_name,
        transfer_week=effective,
        fee=offer.fee,
        type=offer.type,
    )
    moving.offers = []
    result.notify(
        f"Deal agreed: {player.name} will join {offer.club_name} when the window opens (week {effective}).",
        SEVERITY_SUCCESS, player_id,
    )
    return result


def reject_offer(state: SeasonState, player_id: str, offer_id: str) -> TickResult:
    player = _user_player(state, player_id)
    if player.find_offer(offer_id) is None:
        raise UnknownEntityError("offer", offer_id)
    result = TickResult(state=state.clone())
    offer = result.state.players[player_id].find_offer(offer_id)
    offer.status = STATUS_REJECTED
    offer.waiting_for_response = False
    result.notify(f"Offer from {offer.club_name} for {player.name} rejected.", SEVERITY_INFO, player_id)
    return result


def toggle_favorite(state: SeasonState, player_id: str) -> TickResult:
    if player_id not in state.players:
        raise UnknownEntityError("player", player_id)
    result = TickResult(state=state.clone())
    favorites = result.state.favorites
    if player_id in favorites:
        favorites.remove(player_id)
    else:
        favorites.append(player_id)
    return result


def renew_contract(state: SeasonState, player_id: str, wage: int, years: int) -> TickResult:
    """Extend a human-club contract; years are added to what is left."""
    player = _user_player(state, player_id)
    if wage <= 0 or years <= 0:
        return _refuse(state, "Wage and contract length must be positive.", player_id)
    result = TickResult(state=state.clone())
    contract = result.state.players[player_id].contract
    contract.wage = wage
    contract.years_left += years
    contract.performance_bonus = int(wage * 0.1)
    result.notify(f"Contract renewed for {player.name}: {wage:,}/week.", SEVERITY_SUCCESS, player_id)
    return result


def validate_offer_type(offer_type: str) -> str:
    if offer_type not in OFFER_TYPES:
        raise ValueError(f"offer type must be one of {OFFER_TYPES}, got {offer_type!r}")
    return offer_type
