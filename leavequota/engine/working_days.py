"""Working-Day Calculator.

Weekday indices are Sunday-first (0=Sun … 6=Sat), as stored by the policy
editor. An empty or missing working-day set means every day counts, so an
unfinished policy can never silently zero everyone's usage.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from leavequota.common.constants import ALL_WEEKDAYS, WEEKDAY_NAMES
from leavequota.engine.dates import DateLike, normalize_date


def weekday_index(d: date) -> int:
    """Sunday-first weekday index of ``d``."""
    return d.isoweekday() % 7


def effective_working_days(working_days: Optional[Iterable[int]]) -> frozenset[int]:
    """The policy's working weekdays, or all seven when none are configured."""
    days = frozenset(working_days or ())
    return days or ALL_WEEKDAYS


def _count(start: date, end: date, days: frozenset[int]) -> int:
    if end < start:
        return 0
    # Every full week holds each weekday once; only the tail is walked.
    weeks, tail = divmod((end - start).days + 1, 7)
    first = weekday_index(start)
    return weeks * len(days) + sum(1 for i in range(tail) if (first + i) % 7 in days)


def count_working_days(
    start: DateLike,
    end: DateLike,
    working_days: Optional[Iterable[int]] = None,
) -> int:
    """Working days in the inclusive range ``start``..``end``.

    Returns 0 when either endpoint is unreadable or ``end`` precedes
    ``start``; callers treat 0 as "no billable days".
    """
    s = normalize_date(start)
    e = normalize_date(end)
    if s is None or e is None:
        return 0
    return _count(s, e, effective_working_days(working_days))


def count_working_days_between(
    start: DateLike,
    end: DateLike,
    window_start: date,
    window_end: date,
    working_days: Optional[Iterable[int]] = None,
) -> int:
    """Working days of ``start``..``end`` that fall inside the window."""
    s = normalize_date(start)
    e = normalize_date(end)
    if s is None or e is None:
        return 0
    return _count(max(s, window_start), min(e, window_end), effective_working_days(working_days))


def describe_excluded_days(working_days: Optional[Iterable[int]]) -> str:
    """Short names of the non-working weekdays, e.g. ``"Sun, Sat"``, or ``"none"``."""
    days = effective_working_days(working_days)
    excluded = [name for i, name in enumerate(WEEKDAY_NAMES) if i not in days]
    return ", ".join(excluded) or "none"
