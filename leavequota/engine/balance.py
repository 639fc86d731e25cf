"""Balance Calculator — what would remain if a candidate leave were approved."""

from __future__ import annotations

from typing import Optional

from leavequota.common.constants import UNKNOWN_LIMIT
from leavequota.engine.allocation import resolve_limit
from leavequota.engine.dates import DateLike
from leavequota.engine.models import BalanceResult, LeavePolicy, UsageTable
from leavequota.engine.usage import usage_for


def remaining_after(limit: Optional[int], prior_used: int, candidate_days: int) -> BalanceResult:
    """Clamp ``limit - prior_used - candidate_days`` at zero.

    An unknown limit yields ``(0, False)``: a cap that cannot be assessed
    never flags the request.
    """
    if limit is None:
        return BalanceResult(remaining=0, limit_reached=False)
    remaining = max(0, limit - prior_used - candidate_days)
    return BalanceResult(remaining=remaining, limit_reached=remaining == 0)


def evaluate_balance(
    instructor_id: str,
    candidate_days: int,
    job_level: Optional[str],
    reference_date: DateLike,
    policy: LeavePolicy,
    usage_table: UsageTable,
) -> BalanceResult:
    """Project the balance for a candidate request without recording it.

    ``usage_table`` is read only; usage changes only when the caller
    re-aggregates after the request is approved.
    """
    limit = resolve_limit(job_level, policy)
    prior_used = usage_for(usage_table, instructor_id, reference_date, policy.quota_type)
    return remaining_after(limit, prior_used, candidate_days)


def format_assigned_cell(used: int, limit: Optional[int]) -> str:
    """Export cell ``="used/limit"``; the formula wrapper keeps spreadsheets
    from reading ``2/20`` as a date or fraction."""
    shown = UNKNOWN_LIMIT if limit is None else str(limit)
    return f'="{used}/{shown}"'
