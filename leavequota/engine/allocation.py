"""Allocation Resolver — role / job-level label → quota limit.

Administrators may add arbitrary labels to the allocation table, so an
exact (trimmed, case-insensitive) key match always wins. Only when no key
matches does the coarse junior / senior / manager keyword mapping apply.
"""

from __future__ import annotations

from typing import Mapping, Optional

from leavequota.common.constants import ALLOCATION_KEYWORDS
from leavequota.engine.models import LeavePolicy


def _exact_match(label: str, allocations: Mapping[str, int]) -> Optional[int]:
    for key, value in allocations.items():
        if key.strip().lower() == label:
            return value
    return None


def _keyword_match(label: str, allocations: Mapping[str, int]) -> Optional[int]:
    for keyword, key in ALLOCATION_KEYWORDS:
        if keyword in label:
            return allocations.get(key)
    return None


def resolve_limit(job_level: Optional[str], policy: LeavePolicy) -> Optional[int]:
    """Quota limit for ``job_level``, or ``None`` when it cannot be determined.

    ``None`` means "unknown" and is shown as ``?``; it is never the same as 0.
    """
    label = (job_level or "").strip().lower()
    if not label:
        return None
    limit = _exact_match(label, policy.allocations)
    if limit is None:
        limit = _keyword_match(label, policy.allocations)
    return limit
