"""Period Key Resolver — date + cadence → accounting bucket key."""

from __future__ import annotations

from typing import Optional, Union

from leavequota.common.constants import QuotaType
from leavequota.engine.dates import DateLike, normalize_date


def period_key(value: DateLike, quota_type: Union[QuotaType, str, None]) -> Optional[str]:
    """``"2025-03"`` monthly, ``"2025-Q1"`` quarterly, ``"2025"`` yearly.

    ``None`` when the date is unreadable; such a request has no bucket and
    must not be counted.
    """
    d = normalize_date(value)
    if d is None:
        return None
    cadence = QuotaType.parse(quota_type)
    if cadence is QuotaType.yearly:
        return f"{d.year}"
    if cadence is QuotaType.quarterly:
        return f"{d.year}-Q{(d.month - 1) // 3 + 1}"
    return f"{d.year}-{d.month:02d}"
