"""
Transfer market tests: immediate and deferred sales, money conservation,
the 20-player floor and duplicate-ownership protection.

Usage:
    python test_market.py
"""
import random

from generation import generate_league
from models import PendingTransfer, Player, TransferOffer
from models.constants import MAX_SENIOR_PLAYERS, MIN_SQUAD_SIZE, OFFER_TRANSFER, RECORD_FREE, STATUS_REJECTED
from simulation.market import accept_offer, add_to_transfer_list, reject_offer, release_player
from simulation.pending import resolve_pending_transfers
from simulation.squad import count_senior_players
from simulation.tick import run_week
from simulation.transfers import execute_transfer


def _league():
    # 20 clubs -> 38 weeks, winter window at weeks 18-19
    return generate_league(seed=3)


def _offer_from(state, pid: str, buyer_id: str, fee: int) -> str:
    buyer = state.clubs[buyer_id]
    offer = TransferOffer(
        id=state.new_id("offer"), club_id=buyer.id, club_name=buyer.name, player_id=pid,
        type=OFFER_TRANSFER, fee=fee, original_fee=fee, anchor_fee=fee,
        expiry_week=state.current_week + 2,
    )
    state.players[pid].offers.append(offer)
    return offer.id


def _total_money(state) -> int:
    return sum(c.budget for c in state.clubs.values())


def test_sale_while_window_open() -> None:
    state = _league()
    assert state.total_weeks == 38
    pid = state.user_club.roster[0]
    state.players[pid].age = 19
    buyer_id = state.cpu_club_ids()[0]
    state.clubs[buyer_id].budget = 10_000_000
    seller_before = state.user_club.budget
    money_before = _total_money(state)
    oid = _offer_from(state, pid, buyer_id, 5_000_000)

    result = accept_offer(state, pid, oid, random.Random(0))
    assert result.ok
    after = result.state
    assert after.clubs[buyer_id].budget == 5_000_000
    assert after.user_club.budget == seller_before + 5_000_000
    assert pid in after.clubs[buyer_id].roster
    assert pid not in after.user_club.roster
    assert after.players[pid].offers == []
    assert _total_money(after) == money_before
    assert after.clubs[buyer_id].financials.expense_transfers == 5_000_000
    assert after.user_club.financials.income_transfers == 5_000_000
    assert len(result.transfers) >= 1 and result.transfers[0].fee == 5_000_000


def test_deal_deferred_to_winter_window() -> None:
    state = _league()
    state.current_week = 10
    pid = state.user_club.roster[0]
    state.players[pid].age = 19
    buyer_id = state.cpu_club_ids()[0]
    oid = _offer_from(state, pid, buyer_id, 5_000_000)

    result = accept_offer(state, pid, oid, random.Random(0))
    assert result.ok
    deferred = result.state
    assert deferred.players[pid].pending_transfer.transfer_week == 18
    assert deferred.players[pid].offers == []
    assert pid in deferred.user_club.roster

    rng = random.Random(99)
    current = deferred
    while current.current_week < 17:
        current = run_week(current, [], rng).state
        assert pid in current.user_club.roster
    current = run_week(current, [], rng).state
    assert current.current_week == 18
    assert pid in current.clubs[buyer_id].roster
    assert pid not in current.user_club.roster
    assert current.players[pid].pending_transfer is None
    assert any(t.player_name == current.players[pid].name and t.week == 18 for t in current.transfer_history)


def test_listing_refused_at_squad_floor() -> None:
    state = _league()
    club = state.user_club
    for pid in club.roster[MIN_SQUAD_SIZE:]:
        del state.players[pid]
    club.roster = club.roster[:MIN_SQUAD_SIZE]
    pid = club.roster[0]

    listed = add_to_transfer_list(state, pid, random.Random(1))
    assert not listed.ok
    assert listed.state is state
    assert not state.players[pid].on_transfer_list

    released = release_player(state, pid)
    assert not released.ok
    assert pid in state.user_club.roster


def test_listing_generates_offers() -> None:
    state = _league()
    pid = state.user_club.roster[5]
    result = add_to_transfer_list(state, pid, random.Random(4))
    assert result.ok
    player = result.state.players[pid]
    assert player.on_transfer_list
    assert player.transfer_list_week == state.current_week
    assert 1 <= len(player.offers) <= 3
    for offer in player.offers:
        assert offer.club_id != state.user_club_id
        assert offer.round == 0
        assert offer.expiry_week == state.current_week + 2
        assert offer.history[0].note == "Initial offer"

    offer_id = player.offers[0].id
    rejected = reject_offer(result.state, pid, offer_id)
    assert rejected.state.players[pid].find_offer(offer_id).status == STATUS_REJECTED
    refused = accept_offer(rejected.state, pid, offer_id, random.Random(0))
    assert not refused.ok


def test_duplicate_ownership_skipped() -> None:
    state = _league()
    buyer_id = state.cpu_club_ids()[0]
    pid = state.clubs[buyer_id].roster[0]
    budget = state.clubs[buyer_id].budget
    record = execute_transfer(state, pid, state.user_club_id, buyer_id, 1_000_000, OFFER_TRANSFER, 1)
    assert record is None
    assert state.clubs[buyer_id].budget == budget
    assert state.clubs[buyer_id].roster.count(pid) == 1


def test_pending_sale_cancelled_at_squad_floor() -> None:
    state = _league()
    club = state.user_club
    for pid in club.roster[MIN_SQUAD_SIZE:]:
        del state.players[pid]
    club.roster = club.roster[:MIN_SQUAD_SIZE]
    pid = club.roster[0]
    buyer = state.clubs[state.cpu_club_ids()[0]]
    state.players[pid].pending_transfer = PendingTransfer(
        target_club_id=buyer.id, target_club_name=buyer.name, transfer_week=18, fee=3_000_000,
    )
    budget = buyer.budget

    result = resolve_pending_transfers(state, 18, random.Random(6))
    after = result.state
    assert pid in after.user_club.roster
    assert pid not in after.clubs[buyer.id].roster
    assert after.players[pid].pending_transfer is None
    assert after.clubs[buyer.id].budget == budget
    assert result.transfers == []
    assert any(e.severity == "error" and "cancelled" in e.message for e in result.events)
    assert state.players[pid].pending_transfer is not None


def test_window_end_sweeps_excess_seniors() -> None:
    state = _league()
    club = state.user_club
    for p in state.roster_players(club.id):
        p.age = 26
    extra = state.new_id("player")
    state.players[extra] = Player(id=extra, name="Surplus Veteran", position="CB", age=30, rating=1, potential=1)
    club.roster.append(extra)
    assert count_senior_players(state, club.id) > MAX_SENIOR_PLAYERS

    result = resolve_pending_transfers(state, 5, random.Random(7), window_end=True)
    after = result.state
    assert count_senior_players(after, club.id) == MAX_SENIOR_PLAYERS
    assert extra not in after.players
    assert [t.type for t in result.transfers] == [RECORD_FREE]
    assert any("Surplus Veteran" in e.message for e in result.events)


def main() -> None:
    test_sale_while_window_open()
    test_deal_deferred_to_winter_window()
    test_listing_refused_at_squad_floor()
    test_listing_generates_offers()
    test_duplicate_ownership_skipped()
    test_pending_sale_cancelled_at_squad_floor()
    test_window_end_sweeps_excess_seniors()
    print("All market tests passed!")


if __name__ == "__main__":
    main()
