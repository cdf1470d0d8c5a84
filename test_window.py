"""
Transfer window gate tests.

Usage:
    python test_window.py
"""
from simulation.window import get_transfer_windows, is_window_open, is_window_closing, next_window_week


def test_windows_for_38_week_season() -> None:
    windows = get_transfer_windows(38)
    assert (windows.summer.start, windows.summer.end) == (1, 4)
    assert (windows.winter.start, windows.winter.end) == (18, 19)
    open_weeks = [w for w in range(1, 39) if is_window_open(w, 38)]
    assert open_weeks == [1, 2, 3, 4, 18, 19], open_weeks


def test_window_is_pure() -> None:
    for total in (18, 30, 38, 46):
        first = [is_window_open(w, total) for w in range(1, total + 1)]
        second = [is_window_open(w, total) for w in range(1, total + 1)]
        assert first == second
        windows = get_transfer_windows(total)
        assert 1 <= windows.winter.start <= windows.winter.end <= total


def test_closing_weeks() -> None:
    assert [w for w in range(1, 39) if is_window_closing(w, 38)] == [4, 19]


def test_next_window_week() -> None:
    assert next_window_week(10, 38) == 18
    assert next_window_week(5, 38) == 18
    assert next_window_week(20, 38) == 39
    assert next_window_week(30, 38) == 39


def main() -> None:
    test_windows_for_38_week_season()
    test_window_is_pure()
    test_closing_weeks()
    test_next_window_week()
    print("All window tests passed!")


if __name__ == "__main__":
    main()
