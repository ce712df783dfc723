"""
Interval Planner - Transform Layer

Pure function deciding which calendar-month window to request next.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..coreutils.config import DEFAULT_BOOTSTRAP_START
from ..coreutils.time import first_of_next_month, format_api_date, last_of_month


@dataclass(frozen=True)
class FetchWindow:
    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        """True when the month after the latest record has not begun yet"""
        return self.start > self.end

    def __str__(self) -> str:
        return f"{format_api_date(self.start)}..{format_api_date(self.end)}"


def compute_next_window(
    last_extraction_date: Optional[date],
    today: date,
    bootstrap_start: date = DEFAULT_BOOTSTRAP_START,
) -> FetchWindow:
    """
    Compute the next month window to fetch

    Args:
        last_extraction_date: Latest extraction date in the store, or None
            when the store is empty
        today: Upper bound, the window never extends past it
        bootstrap_start: Any day of the first month to fetch on an empty store

    Returns:
        FetchWindow: The window; check is_empty before fetching
    """
    if last_extraction_date is None:
        start = bootstrap_start.replace(day=1)
    else:
        start = first_of_next_month(last_extraction_date)

    # one day before the first of the following month
    end = last_of_month(start)
    if end > today:
        end = today

    return FetchWindow(start=start, end=end)
