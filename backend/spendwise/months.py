"""
Month keys and the selectable-month window.

A month key is a zero-padded ``YYYY-MM`` string. Keys are always produced by
``format_month`` so that lexical order matches calendar order.
"""

import calendar
import re
from datetime import date, datetime
from typing import Iterable, Mapping

MONTH_KEY_PATTERN = re.compile(r"(\d{4})-(\d{2})", re.ASCII)

MAX_LOOKBACK_MONTHS = 24


def format_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def current_month(today: date | None = None) -> str:
    today = today or date.today()
    return format_month(today.year, today.month)


def is_valid_month(value) -> bool:
    """True for ``YYYY-MM`` strings with a month between 01 and 12."""
    if not isinstance(value, str):
        return False
    match = MONTH_KEY_PATTERN.fullmatch(value)
    if not match:
        return False
    return 1 <= int(match.group(2)) <= 12


def parse_month(value: str) -> tuple[int, int]:
    """Split a month key into (year, month). Raises ValueError if malformed."""
    if not is_valid_month(value):
        raise ValueError(f"Invalid month key: {value!r}")
    year, month = value.split("-")
    return int(year), int(month)


def shift_month(value: str, months: int) -> str:
    """Move a month key forward (positive) or backward (negative)."""
    year, month = parse_month(value)
    index = year * 12 + (month - 1) + months
    return format_month(index // 12, index % 12 + 1)


def month_bounds(value: str) -> tuple[date, date]:
    """First and last calendar day of a month."""
    year, month = parse_month(value)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_of(value: date | datetime | str) -> str:
    """
    Month key of a date, datetime or ISO 8601 string.

    Strings are parsed rather than sliced, so a non-padded date such as
    ``2025-5-01`` is rejected instead of landing in the wrong bucket.
    """
    if isinstance(value, datetime):
        return format_month(value.year, value.month)
    if isinstance(value, date):
        return format_month(value.year, value.month)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = datetime.combine(date.fromisoformat(text[:10]), datetime.min.time())
        return format_month(parsed.year, parsed.month)
    raise TypeError(f"Cannot derive a month from {type(value).__name__}")


def selectable_months(
    anchor: str | None,
    earliest: str | None = None,
    limit: int = MAX_LOOKBACK_MONTHS,
    today: date | None = None,
) -> list[str]:
    """
    Months a user may pick, newest first.

    Walks backward from ``anchor`` one month at a time, stopping after
    ``limit`` entries or before the first month earlier than ``earliest``
    (``earliest`` itself is included). A malformed anchor is replaced by the
    current month. The result is never empty.
    """
    if not is_valid_month(anchor):
        anchor = current_month(today)
    if earliest is not None and not is_valid_month(earliest):
        earliest = None

    months = []
    cursor = anchor
    while len(months) < limit:
        if earliest is not None and cursor < earliest:
            break
        months.append(cursor)
        cursor = shift_month(cursor, -1)

    if not months:
        months = [anchor]
    return months


def resolve_active_month(active: str | None, months: list[str]) -> str:
    """Keep ``active`` if it is selectable, otherwise the newest month."""
    if active in months:
        return active
    return months[0]


def first_income_month(
    default_income: float,
    monthly_incomes: Mapping[str, float],
    transaction_dates: Iterable[date | datetime | str] = (),
    today: date | None = None,
) -> str:
    """
    Earliest month a user should be able to navigate to.

    Month-specific incomes are the hard boundary; a default income applies
    from the current month; otherwise the earliest transaction month is used.
    """
    explicit = sorted(m for m in monthly_incomes if is_valid_month(m))
    if explicit:
        return explicit[0]

    if default_income > 0:
        return current_month(today)

    months = []
    for value in transaction_dates:
        try:
            months.append(month_of(value))
        except (TypeError, ValueError):
            continue
    if months:
        return min(months)

    return current_month(today)
