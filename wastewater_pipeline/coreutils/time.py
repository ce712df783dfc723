from datetime import date, datetime, timedelta
from typing import Optional

EXTRACTION_DATE_FORMAT = "%d.%m.%Y"
API_DATE_FORMAT = "%Y-%m-%d"


def parse_extraction_date(value: str) -> date:
    """Parse a 'dd.mm.yyyy' extraction date as received from the API."""
    return datetime.strptime(value.strip(), EXTRACTION_DATE_FORMAT).date()


def try_parse_extraction_date(value) -> Optional[date]:
    """Like parse_extraction_date, but returns None for anything unparseable."""
    if not isinstance(value, str):
        return None
    try:
        return parse_extraction_date(value)
    except ValueError:
        return None


def format_extraction_date(value: date) -> str:
    """Format a date as 'dd.mm.yyyy'."""
    return value.strftime(EXTRACTION_DATE_FORMAT)


def format_api_date(value: date) -> str:
    """Format a date as YYYY-MM-DD for the API payload."""
    return value.strftime(API_DATE_FORMAT)


def first_of_next_month(value: date) -> date:
    """First day of the calendar month after the one containing value."""
    if value.month == 12:
        return date(value.year + 1, 1, 1)
    return date(value.year, value.month + 1, 1)


def last_of_month(value: date) -> date:
    """Last day of the calendar month containing value."""
    return first_of_next_month(value) - timedelta(days=1)
