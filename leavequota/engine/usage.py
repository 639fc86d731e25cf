"""Usage Aggregator — approved leave → working days per (instructor, period).

A leave is attributed entirely to the period of its start date, even when
it runs into the next month or quarter. Historical quota reports depend on
this, so it must not be pro-rated here.
"""

from __future__ import annotations

import logging
from typing import Iterable, Union

from leavequota.common.constants import QuotaType
from leavequota.engine.dates import DateLike, normalize_date
from leavequota.engine.models import LeavePolicy, LeaveRequest, UsageTable
from leavequota.engine.periods import period_key
from leavequota.engine.working_days import count_working_days

logger = logging.getLogger(__name__)


def build_usage_table(
    requests: Iterable[LeaveRequest],
    policy: LeavePolicy,
) -> UsageTable:
    """Sum working days of APPROVED requests per instructor and period.

    Rebuilt from scratch on every call; the same requests and policy always
    produce the same table.
    """
    table: UsageTable = {}
    skipped = 0
    for req in requests:
        if not req.is_approved:
            continue
        if normalize_date(req.start_date) is None or normalize_date(req.end_date) is None:
            skipped += 1
            continue
        period = period_key(req.start_date, policy.quota_type)
        days = count_working_days(req.start_date, req.end_date, policy.working_days)
        bucket = table.setdefault(req.instructor_id, {})
        bucket[period] = bucket.get(period, 0) + days  # type: ignore[index]

    if skipped:
        logger.debug("Usage: skipped %d approved request(s) with unreadable dates", skipped)
    return table


def usage_for(
    table: UsageTable,
    instructor_id: str,
    reference_date: DateLike,
    quota_type: Union[QuotaType, str, None],
) -> int:
    """Days already used by ``instructor_id`` in the period of ``reference_date``."""
    key = period_key(reference_date, quota_type)
    if key is None:
        return 0
    return table.get(instructor_id, {}).get(key, 0)
