"""Leave quota engine — pure functions shared by every view and export."""

from leavequota.engine.allocation import resolve_limit
from leavequota.engine.balance import (
    evaluate_balance,
    format_assigned_cell,
    remaining_after,
)
from leavequota.engine.dates import format_display_date, normalize_date
from leavequota.engine.models import (
    BalanceResult,
    Instructor,
    LeavePolicy,
    LeaveRequest,
    UsageTable,
)
from leavequota.engine.periods import period_key
from leavequota.engine.usage import build_usage_table, usage_for
from leavequota.engine.working_days import (
    count_working_days,
    count_working_days_between,
    describe_excluded_days,
    effective_working_days,
    weekday_index,
)

__all__ = [
    # Models
    "BalanceResult",
    "Instructor",
    "LeavePolicy",
    "LeaveRequest",
    "UsageTable",
    # Dates
    "format_display_date",
    "normalize_date",
    # Working days
    "count_working_days",
    "count_working_days_between",
    "describe_excluded_days",
    "effective_working_days",
    "weekday_index",
    # Periods / usage
    "period_key",
    "build_usage_table",
    "usage_for",
    # Allocation / balance
    "resolve_limit",
    "evaluate_balance",
    "format_assigned_cell",
    "remaining_after",
]
