"""Date Normalizer — heterogeneous date strings → calendar dates.

Recognised forms, first match wins:

    2025-03-10, 2025/3/10        year first
    10-03-2025, 10/03/2025       day first
    10-Mar-2025, 10 March 2025   day, month name, year
    16th Oct 2025                ordinal day
    anything dateutil can read   fallback, day first, four-digit year required

Nothing here raises; an unreadable value normalises to ``None``.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Optional, Union

from dateutil import parser as date_parser

from leavequota.common.constants import DISPLAY_DATE_FORMAT, MONTH_ABBREVIATIONS

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime, None]

_YEAR_FIRST = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$")
_DAY_FIRST = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$")
_MONTH_NAME = re.compile(r"^(\d{1,2})[\s-]([A-Za-z]{3,})[\s-](\d{4})$")
_ORDINAL = re.compile(r"^(\d{1,2})(?:st|nd|rd|th)\s+([A-Za-z]{3,})\s+(\d{4})$", re.IGNORECASE)
_FOUR_DIGIT_YEAR = re.compile(r"(?<!\d)\d{4}(?!\d)")
_YEAR_LEAD = re.compile(r"^\d{4}(?!\d)")

# Missing fields in the fallback parse come from here, never from today.
_FALLBACK_DEFAULT = datetime(1970, 1, 1)


def _build(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _month_index(name: str) -> Optional[int]:
    abbr = name[:3].lower()
    if abbr in MONTH_ABBREVIATIONS:
        return MONTH_ABBREVIATIONS.index(abbr) + 1
    return None


def _parse_fallback(text: str) -> Optional[date]:
    years = {int(token) for token in _FOUR_DIGIT_YEAR.findall(text)}
    if not years:
        return None
    try:
        parsed = date_parser.parse(
            text,
            default=_FALLBACK_DEFAULT,
            dayfirst=not _YEAR_LEAD.match(text),
        ).date()
    except (ValueError, OverflowError):
        return None
    # A four-digit time such as "1030" must not vouch for a two-digit year.
    if parsed.year not in years:
        return None
    return parsed


def normalize_date(value: DateLike) -> Optional[date]:
    """Return the calendar date ``value`` denotes, or ``None`` if it is unreadable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    m = _YEAR_FIRST.match(text)
    if m:
        return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _DAY_FIRST.match(text)
    if m:
        return _build(int(m.group(3)), int(m.group(2)), int(m.group(1)))

    for pattern in (_MONTH_NAME, _ORDINAL):
        m = pattern.match(text)
        if m:
            month = _month_index(m.group(2))
            if month is not None:
                return _build(int(m.group(3)), month, int(m.group(1)))

    parsed = _parse_fallback(text)
    if parsed is None:
        logger.debug("Unparseable date %r", text)
    return parsed


def format_display_date(value: DateLike) -> str:
    """``dd-MMM-yyyy`` for table cells and exports; raw text if unreadable."""
    if value is None:
        return ""
    d = normalize_date(value)
    if d is None:
        return str(value)
    return d.strftime(DISPLAY_DATE_FORMAT)
