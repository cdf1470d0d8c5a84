"""
Season engine: the weekly tick and everything it sequences.
Transfer windows, roster rules, valuation, conditions, negotiation, CPU and
deferred transfers, fans, stadium, retirement, season-end rewards and the
transition into the next season.
"""
from .errors import EngineError, UnknownEntityError, CareerOverError
from .window import get_transfer_windows, is_window_open, is_window_closing, next_window_week
from .schedule import generate_round_robin, generate_league_schedule
from .squad import enforce_squad_size, enforce_all
from .valuation import calculate_market_value, update_market_values, pay_weekly_wages
from .negotiation import counter_offer, process_negotiations
from .market import (
    add_to_transfer_list,
    add_to_loan_list,
    remove_from_lists,
    release_player,
    accept_offer,
    reject_offer,
    toggle_favorite,
    renew_contract,
)
from .cpu_transfers import run_cpu_transfers
from .pending import resolve_pending_transfers
from .stadium import start_stadium_expansion, accept_sponsor_offer, reject_sponsor_offer
from .retirement import attempt_persuasion, acknowledge_retirements
from .manager_offers import accept_manager_offer, decline_manager_offers
from .rewards import run_season_end
from .engine import simulate_fixture
from .tick import run_week, simulate_week, commit
from .transition import start_new_season

__all__ = [
    "EngineError",
    "UnknownEntityError",
    "CareerOverError",
    "get_transfer_windows",
    "is_window_open",
    "is_window_closing",
    "next_window_week",
    "generate_round_robin",
    "generate_league_schedule",
    "enforce_squad_size",
    "enforce_all",
    "calculate_market_value",
    "update_market_values",
    "pay_weekly_wages",
    "counter_offer",
    "process_negotiations",
    "add_to_transfer_list",
    "add_to_loan_list",
    "remove_from_lists",
    "release_player",
    "accept_offer",
    "reject_offer",
    "toggle_favorite",
    "renew_contract",
    "run_cpu_transfers",
    "resolve_pending_transfers",
    "start_stadium_expansion",
    "accept_sponsor_offer",
    "reject_sponsor_offer",
    "attempt_persuasion",
    "acknowledge_retirements",
    "accept_manager_offer",
    "decline_manager_offers",
    "run_season_end",
    "simulate_fixture",
    "run_week",
    "simulate_week",
    "commit",
    "start_new_season",
]
