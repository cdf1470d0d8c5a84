"""
Fan sentiment and matchday revenue.

Morale moves with each result (bigger wins, clean sheets, derbies and late
winners lift it; upsets and heavy home defeats hurt). Attendance is capped
by fans and capacity and scaled by morale and ticket price; home games book
ticket revenue. Fan count drifts up or down with morale.
"""
from __future__ import annotations

import math

from models import Club
from models.constants import BASE_TICKET_PRICE, MIN_FANS, MAX_FANS


def morale_change(
    outcome: str,
    goals_for: int,
    goals_against: int,
    is_home: bool,
    is_derby: bool,
    opponent_rating: int,
    club_rating: int,
    late_winner: bool = False,
) -> int:
    """Morale delta for one result; outcome is 'W', 'D' or 'L'."""
    change = 0
    if outcome == "W":
        change += 5
        if goals_for - goals_against >= 3:
            change += 3
        if goals_against == 0:
            change += 2
        if is_derby:
            change += 4
        if late_winner:
            change += 2
    elif outcome == "L":
        change -= 4
        if opponent_rating < club_rating - 10:
            change -= 3
        if is_home and goals_against - goals_for >= 3:
            change -= 4
    return change


def calculate_attendance(fan_count: int, fan_morale: int, ticket_price: int, capacity: int,
                         base_ticket_price: int = BASE_TICKET_PRICE) -> int:
    price_ratio = ticket_price / base_ticket_price if base_ticket_price else 1.0
    price_factor = max(0.7, min(1.0, 1.0 - (price_ratio - 1.0) * 0.15))
    attendance = int(math.floor(min(fan_count, capacity) * (fan_morale / 100) * price_factor))
    return max(0, min(attendance, capacity))


def update_fan_count(fan_count: int, fan_morale: int) -> int:
    growth = (fan_morale - 50) / 50
    return max(MIN_FANS, min(MAX_FANS, int(math.floor(fan_count * (1 + growth * 0.03)))))


def apply_result_to_club(
    club: Club,
    goals_for: int,
    goals_against: int,
    is_home: bool,
    opponent: Club | None,
    is_derby: bool = False,
    late_winner: bool = False,
) -> int:
    """Standings, morale, fans and home ticket revenue for one club; returns the revenue."""
    club.played += 1
    club.goals_for += goals_for
    club.goals_against += goals_against
    if goals_for > goals_against:
        outcome = "W"
        club.won += 1
        club.points += 3
    elif goals_for == goals_against:
        outcome = "D"
        club.drawn += 1
        club.points += 1
    else:
        outcome = "L"
        club.lost += 1

    if opponent is not None:
        delta = morale_change(
            outcome, goals_for, goals_against, is_home, is_derby,
            opponent.base_rating, club.base_rating, late_winner and outcome == "W",
        )
        club.fan_morale = max(0, min(100, club.fan_morale + delta))
        club.fan_count = update_fan_count(club.fan_count, club.fan_morale)

    revenue = 0
    if is_home:
        attendance = calculate_attendance(club.fan_count, club.fan_morale, club.ticket_price, club.stadium_capacity)
        revenue = attendance * club.ticket_price
        club.budget += revenue
        club.financials.income_tickets += revenue
    return revenue
