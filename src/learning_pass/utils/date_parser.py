"""
Date parsing utilities for Learning Pass.

Customer payloads carry dates as ``YYYY-MM-DD``, ``YYYY/MM/DD`` or the ANSI
``YYYYMMDD`` form used by Symphony. Everything here works on ``datetime.date``
values; ``today`` is injectable so age and expiry arithmetic can be tested.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Any, Callable, List, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = "YYYYMMDD, YYYY-MM-DD, YYYY/MM/DD, YYYY-MM-DDTHH:MM:SS"
ANSI_DATE_PATTERN = re.compile(r"^[12]\d{7}$")

DateParser = Callable[[re.Match], date]


def _ymd(match: re.Match) -> date:
    return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))


_DATE_PATTERNS: List[Tuple[Pattern[str], DateParser]] = [
    (re.compile(r"^([12]\d{3})(\d{2})(\d{2})$"), _ymd),
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), _ymd),
    (re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$"), _ymd),
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})[T ]\d{2}:\d{2}"), _ymd),
]


def parse_customer_date(value: Any) -> date:
    """
    Parse a customer supplied date.

    Raises:
        ValueError: when the value is empty or not in a supported format
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = "" if value is None else str(value).strip()
    for pattern, parser in _DATE_PATTERNS:
        match = pattern.match(raw)
        if match:
            return parser(match)
    raise ValueError(f"Cannot parse '{value}' as date. Supported formats: {SUPPORTED_FORMATS}")


def parse_date(value: Any) -> Optional[date]:
    """Wrapper around ``parse_customer_date`` returning ``None`` on failure."""
    try:
        return parse_customer_date(value)
    except ValueError:
        logger.debug("Unable to parse date value %r", value)
        return None


def to_ansi_date(value: Any) -> str:
    """
    Render a date as ANSI ``YYYYMMDD``.

    Example:
        >>> to_ansi_date("1963-08-22")
        '19630822'
        >>> to_ansi_date("22/08/1963")
        ''
    """
    parsed = parse_date(value)
    return parsed.strftime("%Y%m%d") if parsed else ""


def from_ansi_date(value: Any) -> Optional[date]:
    text = "" if value is None else str(value).strip()
    if not ANSI_DATE_PATTERN.match(text):
        return None
    return parse_date(text)


def age_in_years(value: Any, today: Optional[date] = None) -> Optional[int]:
    """Completed years between ``value`` and today; negative for future dates."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    today = today or date.today()
    years = today.year - parsed.year
    if (today.month, today.day) < (parsed.month, parsed.day):
        years -= 1
    return years


def date_from_days(days: int, today: Optional[date] = None) -> date:
    """Today plus ``days`` days."""
    today = today or date.today()
    return today + timedelta(days=days)
