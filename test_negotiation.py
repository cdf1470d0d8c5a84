"""
Negotiation state machine tests.

Usage:
    python test_negotiation.py
"""
import random

from generation import generate_league
from models import NegotiationEntry, TransferOffer
from models.constants import (
    ACTOR_AI,
    MAX_NEGOTIATION_ROUNDS,
    OFFER_TRANSFER,
    STATUS_NEGOTIATING,
    STATUS_PENDING,
    STATUS_REJECTED,
)
from simulation.errors import UnknownEntityError
from simulation.negotiation import counter_offer, process_negotiations


def _state_with_offer(fee: int = 10_000_000, round_: int = 0):
    state = generate_league(seed=5, num_clubs=6)
    pid = state.user_club.roster[0]
    buyer = state.clubs[state.cpu_club_ids()[0]]
    offer = TransferOffer(
        id=state.new_id("offer"),
        club_id=buyer.id,
        club_name=buyer.name,
        player_id=pid,
        type=OFFER_TRANSFER,
        fee=fee,
        original_fee=fee,
        anchor_fee=fee,
        round=round_,
        expiry_week=state.current_week + 2,
        history=[NegotiationEntry(round=0, actor=ACTOR_AI, amount=fee, timestamp=1, note="Initial offer")],
    )
    state.players[pid].offers.append(offer)
    return state, pid, offer.id


def test_counter_refused_at_round_three() -> None:
    state, pid, oid = _state_with_offer(round_=3)
    before = state.players[pid].find_offer(oid)
    result = counter_offer(state, pid, oid, 12_000_000)
    assert not result.ok
    assert result.state is state
    assert result.events[0].severity == "error"
    offer = result.state.players[pid].find_offer(oid)
    assert offer.round == 3
    assert offer.waiting_for_response == before.waiting_for_response
    assert offer.fee == 10_000_000


def test_counter_moves_to_negotiating() -> None:
    state, pid, oid = _state_with_offer()
    result = counter_offer(state, pid, oid, 14_000_000)
    assert result.ok
    offer = result.state.players[pid].find_offer(oid)
    assert offer.round == 1
    assert offer.status == STATUS_NEGOTIATING
    assert offer.waiting_for_response
    assert offer.fee == offer.last_counter_offer == 14_000_000
    assert offer.history[-1].note == "Counter offer"
    # second counter while waiting is refused
    again = counter_offer(result.state, pid, oid, 13_000_000)
    assert not again.ok
    # the original state still shows the untouched offer
    assert state.players[pid].find_offer(oid).round == 0


def test_ai_response_outcomes() -> None:
    accepted = 0
    for seed in range(30):
        state, pid, oid = _state_with_offer()
        countered = counter_offer(state, pid, oid, 9_000_000).state
        after = process_negotiations(countered, countered.current_week, random.Random(seed)).state
        offer = after.players[pid].find_offer(oid)
        assert not offer.waiting_for_response
        assert offer.status == STATUS_PENDING
        if offer.history[-1].note == "Accepted counter offer":
            accepted += 1
            assert offer.fee == 9_000_000
            assert offer.round == 1
        else:
            assert offer.history[-1].note == "Counter offer"
            assert 9_000_000 <= offer.fee <= 10_000_000
            assert offer.anchor_fee == offer.fee
            assert offer.round == 2
    assert accepted > 0


def test_negotiation_terminates() -> None:
    for seed in range(25):
        rng = random.Random(seed)
        state, pid, oid = _state_with_offer()
        for _ in range(MAX_NEGOTIATION_ROUNDS + 1):
            result = counter_offer(state, pid, oid, 50_000_000)
            if not result.ok:
                break
            state = process_negotiations(result.state, result.state.current_week, rng).state
        offer = state.players[pid].find_offer(oid)
        assert offer.round <= MAX_NEGOTIATION_ROUNDS
        assert offer.status == STATUS_REJECTED
        assert offer.history[-1].note == "Offer rejected"


def test_expiry_checked_first() -> None:
    state, pid, oid = _state_with_offer()
    countered = counter_offer(state, pid, oid, 9_000_000).state
    expiry = countered.players[pid].find_offer(oid).expiry_week
    result = process_negotiations(countered, expiry, random.Random(0))
    offer = result.state.players[pid].find_offer(oid)
    assert offer.status == STATUS_REJECTED
    assert len(offer.history) == 2
    assert any("expired" in e.message for e in result.events)


def test_unknown_offer_raises() -> None:
    state, pid, _ = _state_with_offer()
    try:
        counter_offer(state, pid, "offer-missing", 1_000)
    except UnknownEntityError as exc:
        assert exc.kind == "offer"
    else:
        raise AssertionError("expected UnknownEntityError")


def main() -> None:
    test_counter_refused_at_round_three()
    test_counter_moves_to_negotiating()
    test_ai_response_outcomes()
    test_negotiation_terminates()
    test_expiry_checked_first()
    test_unknown_offer_raises()
    print("All negotiation tests passed!")


if __name__ == "__main__":
    main()
