"""
CPU transfer AI.

While the window is open, each CPU club may try to buy one player from another
CPU club. Richer clubs try more often (30-70%), look at a wider slice of the
seller's best prospects (top 30-50% by potential minus age) and pay a bigger
premium. Deals a club cannot afford are skipped silently.
"""
from __future__ import annotations

import logging
import math
import random

from models import SeasonState, TickResult
from models.constants import (
    CPU_BUDGET_REFERENCE,
    CPU_BASE_ATTEMPT,
    CPU_ATTEMPT_BUDGET_WEIGHT,
    CPU_TOP_SHARE_BASE,
    CPU_TOP_SHARE_BUDGET_WEIGHT,
    CPU_PREMIUM,
    CPU_PREMIUM_YOUTH,
    CPU_PREMIUM_BUDGET_WEIGHT,
    CPU_MAX_SPEND_SHARE,
    MIN_SELLER_SQUAD,
    OFFER_TRANSFER,
)
from models.player import Player
from simulation.squad import enforce_in_place
from simulation.transfers import execute_transfer

logger = logging.getLogger(__name__)


def budget_ratio(budget: int) -> float:
    return min(1.0, budget / CPU_BUDGET_REFERENCE)


def attempt_chance(budget: int) -> float:
    return CPU_BASE_ATTEMPT + CPU_ATTEMPT_BUDGET_WEIGHT * budget_ratio(budget)


def transfer_fee(player: Player, budget: int) -> int:
    base = CPU_PREMIUM_YOUTH if player.is_youth_academy else CPU_PREMIUM
    premium = base * (1.0 + CPU_PREMIUM_BUDGET_WEIGHT * budget_ratio(budget))
    return int(math.floor(player.market_value * premium))


def can_afford(budget: int, fee: int) -> bool:
    max_spendable = int(math.floor(budget * CPU_MAX_SPEND_SHARE))
    return budget >= fee or (budget >= max_spendable and fee <= max_spendable)


def eligible_targets(state: SeasonState, seller_id: str) -> list[Player]:
    """Seller's players not listed and not already promised elsewhere, best prospects first."""
    players = [
        p for p in state.roster_players(seller_id)
        if not p.on_transfer_list and not p.on_loan_list and p.pending_transfer is None
    ]
    return sorted(players, key=lambda p: p.potential - p.age, reverse=True)


def run_cpu_transfers(state: SeasonState, week: int, rng: random.Random) -> TickResult:
    """One pass of CPU buying; touched clubs get their rosters enforced afterwards."""
    result = TickResult(state=state.clone())
    new_state = result.state
    cpu_ids = new_state.cpu_club_ids()
    touched: list[str] = []

    for buyer_id in cpu_ids:
        buyer = new_state.clubs[buyer_id]
        ratio = budget_ratio(buyer.budget)
        if rng.random() >= attempt_chance(buyer.budget):
            continue

        sellers = [
            cid for cid in cpu_ids
            if cid != buyer_id and len(new_state.clubs[cid].roster) > MIN_SELLER_SQUAD
        ]
        if not sellers:
            continue
        seller_id = rng.choice(sellers)

        targets = eligible_targets(new_state, seller_id)
        if not targets:
            continue
        share = CPU_TOP_SHARE_BASE + CPU_TOP_SHARE_BUDGET_WEIGHT * ratio
        top = targets[:max(1, int(math.floor(len(targets) * share)))]
        target = rng.choice(top)

        fee = transfer_fee(target, buyer.budget)
        if not can_afford(buyer.budget, fee):
            logger.debug("%s cannot afford %s (%d)", buyer.name, target.name, fee)
            continue

        record = execute_transfer(new_state, target.id, seller_id, buyer_id, fee, OFFER_TRANSFER, week)
        if record is None:
            continue
        result.transfers.append(record)
        for cid in (buyer_id, seller_id):
            if cid not in touched:
                touched.append(cid)

    for cid in touched:
        enforce_in_place(new_state, cid, rng, week, result)
    if result.transfers:
        logger.info("CPU transfers in week %d: %d", week, len(result.transfers))
    return result
