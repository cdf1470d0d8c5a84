"""
Pending transfer resolver.

Deals agreed while the window was closed carry a PendingTransfer dated to the
next open week. When that week arrives the move executes, unless the seller
would fall below the 20-player floor, in which case the deal is cancelled.
At the last week of a window every club is swept for the 21+ cap.
"""
from __future__ import annotations

import logging
import random

from models import SeasonState, TickResult
from models.constants import MIN_SQUAD_SIZE, SEVERITY_SUCCESS, SEVERITY_ERROR
from simulation.squad import enforce_in_place
from simulation.transfers import execute_transfer

logger = logging.getLogger(__name__)


def resolve_pending_transfers(
    state: SeasonState,
    week: int,
    rng: random.Random,
    window_end: bool = False,
) -> TickResult:
    """Execute deals whose transfer week equals ``week``."""
    result = TickResult(state=state.clone())
    new_state = result.state
    user_id = new_state.user_club_id

    due: list[tuple[str, str]] = []
    for club in new_state.clubs.values():
        for pid in club.roster:
            player = new_state.players.get(pid)
            if player and player.pending_transfer and player.pending_transfer.transfer_week == week:
                due.append((club.id, pid))

    for seller_id, pid in due:
        player = new_state.players[pid]
        deal = player.pending_transfer
        seller = new_state.clubs[seller_id]
        if deal.target_club_id not in new_state.clubs:
            logger.warning("Pending transfer of %s dropped: unknown club %s", player.name, deal.target_club_id)
            player.pending_transfer = None
            continue
        if len(seller.roster) - 1 < MIN_SQUAD_SIZE:
            player.pending_transfer = None
            if seller_id == user_id:
                result.notify(
                    f"Transfer cancelled! {player.name} cannot leave: squad would fall below "
                    f"{MIN_SQUAD_SIZE} players.",
                    SEVERITY_ERROR, pid,
                )
            continue

        record = execute_transfer(
            new_state, pid, seller_id, deal.target_club_id, deal.fee, deal.type, week, wage=deal.wage,
        )
        if record is None:
            player.pending_transfer = None
            continue
        result.transfers.append(record)
        enforce_in_place(new_state, seller_id, rng, week, result)
        enforce_in_place(new_state, deal.target_club_id, rng, week, result)
        if user_id in (seller_id, deal.target_club_id):
            if seller_id == user_id:
                message = f"Transfer completed! {player.name} sold to {deal.target_club_name} for {deal.fee:,}."
            else:
                message = f"Transfer completed! {player.name} joined {deal.target_club_name}."
            result.notify(message, SEVERITY_SUCCESS)

    if window_end:
        for club_id in list(new_state.clubs):
            enforce_in_place(new_state, club_id, rng, week, result, seniors_only=True)
    return result
