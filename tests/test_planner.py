"""
Tests for the month window planner
"""

from datetime import date

import pytest

from wastewater_pipeline.transformation.planner import FetchWindow, compute_next_window


def test_bootstrap_window_is_first_historical_month():
    window = compute_next_window(None, today=date(2026, 10, 19))

    assert window == FetchWindow(date(2022, 2, 1), date(2022, 2, 28))
    assert not window.is_empty


def test_bootstrap_start_is_configurable_and_snaps_to_month_start():
    window = compute_next_window(
        None, today=date(2026, 10, 19), bootstrap_start=date(2023, 6, 17)
    )

    assert window == FetchWindow(date(2023, 6, 1), date(2023, 6, 30))


def test_bootstrap_window_is_clipped_to_today():
    window = compute_next_window(None, today=date(2022, 2, 10))

    assert window == FetchWindow(date(2022, 2, 1), date(2022, 2, 10))


def test_next_window_is_clipped_to_today():
    """Latest record 15.03.2023, today 10.04.2023 → 01.04.2023..10.04.2023"""
    window = compute_next_window(date(2023, 3, 15), today=date(2023, 4, 10))

    assert window.start == date(2023, 4, 1)
    assert window.end == date(2023, 4, 10)
    assert str(window) == "2023-04-01..2023-04-10"


@pytest.mark.parametrize(
    "last_date, expected",
    [
        (date(2023, 1, 31), FetchWindow(date(2023, 2, 1), date(2023, 2, 28))),
        (date(2024, 1, 2), FetchWindow(date(2024, 2, 1), date(2024, 2, 29))),
        (date(2023, 3, 1), FetchWindow(date(2023, 4, 1), date(2023, 4, 30))),
        (date(2022, 12, 5), FetchWindow(date(2023, 1, 1), date(2023, 1, 31))),
    ],
)
def test_full_month_windows(last_date, expected):
    assert compute_next_window(last_date, today=date(2025, 1, 1)) == expected


@pytest.mark.parametrize("last_day", [1, 5, 10])
def test_same_month_reinvocation_yields_empty_window(last_day):
    today = date(2023, 4, 10)
    first = compute_next_window(date(2023, 3, 15), today=today)

    # the store now holds records from inside the window just fetched
    last = first.start.replace(day=last_day)
    second = compute_next_window(last, today=today)

    assert second.start == date(2023, 5, 1)
    assert second.start > second.end
    assert second.is_empty


def test_window_ending_today_is_not_empty():
    window = compute_next_window(date(2023, 3, 15), today=date(2023, 4, 1))

    assert window == FetchWindow(date(2023, 4, 1), date(2023, 4, 1))
    assert not window.is_empty
