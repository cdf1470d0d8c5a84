"""
Transfer window gate.

Summer window: the first 4 weeks of the season.
Winter window: 2 weeks ending at the season midpoint, [T//2 - 1, T//2].
Every function here is pure in (week, total_weeks).
"""
from __future__ import annotations

from typing import NamedTuple

from models.constants import SUMMER_WINDOW_WEEKS, WINTER_WINDOW_WEEKS


class Window(NamedTuple):
    start: int
    end: int

    def contains(self, week: int) -> bool:
        return self.start <= week <= self.end


class TransferWindows(NamedTuple):
    summer: Window
    winter: Window


def get_transfer_windows(total_weeks: int) -> TransferWindows:
    """Window bounds for a season of total_weeks (highest fixture week)."""
    mid = total_weeks // 2
    return TransferWindows(
        summer=Window(1, SUMMER_WINDOW_WEEKS),
        winter=Window(mid - WINTER_WINDOW_WEEKS + 1, mid),
    )


def is_window_open(week: int, total_weeks: int) -> bool:
    windows = get_transfer_windows(total_weeks)
    return windows.summer.contains(week) or windows.winter.contains(week)


def is_window_closing(week: int, total_weeks: int) -> bool:
    """True when week is the last open week of either window."""
    windows = get_transfer_windows(total_weeks)
    return week in (windows.summer.end, windows.winter.end)


def next_window_week(week: int, total_weeks: int) -> int:
    """First week at which a deal agreed in a closed window can execute.

    Before the winter window that is its first week; after it, the first week
    of next season's summer window, numbered total_weeks + 1.
    """
    windows = get_transfer_windows(total_weeks)
    if week < windows.winter.start:
        return windows.winter.start
    return total_weeks + windows.summer.start
