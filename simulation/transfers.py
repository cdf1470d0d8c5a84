"""
Club-to-club player moves.

execute_transfer is the single place ownership changes hands: the roster
lookup is updated, the fee moves between budgets and ledgers, list flags,
offers and any pending transfer are cleared, and a history record is produced.
Callers own the state they pass in.
"""
from __future__ import annotations

import logging

from models import SeasonState, TransferRecord
from models.constants import OFFER_LOAN, RECORD_LOAN, RECORD_TRANSFER

logger = logging.getLogger(__name__)


def execute_transfer(
    state: SeasonState,
    player_id: str,
    seller_id: str,
    buyer_id: str,
    fee: int,
    offer_type: str,
    week: int,
    wage: int | None = None,
) -> TransferRecord | None:
    """Move a player from seller to buyer; returns None when the move is skipped."""
    seller = state.clubs.get(seller_id)
    buyer = state.clubs.get(buyer_id)
    player = state.players.get(player_id)
    if seller is None or buyer is None or player is None:
        logger.warning(
            "Transfer skipped: unknown reference (player=%s seller=%s buyer=%s)",
            player_id, seller_id, buyer_id,
        )
        return None
    if player_id in buyer.roster:
        logger.warning("Transfer skipped: %s already belongs to %s", player.name, buyer.name)
        return None
    if player_id not in seller.roster:
        logger.warning("Transfer skipped: %s is not on %s's roster", player.name, seller.name)
        return None

    seller.roster.remove(player_id)
    buyer.roster.append(player_id)

    buyer.budget -= fee
    buyer.financials.expense_transfers += fee
    seller.budget += fee
    seller.financials.income_transfers += fee

    player.on_loan_list = False
    player.on_transfer_list = False
    player.transfer_list_week = None
    player.offers = []
    player.pending_transfer = None
    if wage is not None:
        player.contract.wage = wage

    logger.debug("%s moved %s -> %s for %d", player.name, seller.name, buyer.name, fee)
    return TransferRecord(
        id=state.new_id("transfer"),
        player_name=player.name,
        from_club=seller.name,
        to_club=buyer.name,
        fee=fee,
        type=RECORD_LOAN if offer_type == OFFER_LOAN else RECORD_TRANSFER,
        season=state.season_label,
        week=week,
    )
