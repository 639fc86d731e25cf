"""Enums and constants for the leave quota engine — matching the dashboard's stored values."""

from __future__ import annotations

import enum
from typing import Optional


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    draft = "DRAFT"
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"


class QuotaType(str, enum.Enum):
    monthly = "Monthly Quota"
    quarterly = "Quarterly Quota"
    yearly = "Yearly Quota"

    @classmethod
    def parse(cls, value: Optional[str]) -> "QuotaType":
        """Accept "Quarterly Quota" or "quarterly"; anything else is monthly."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text.endswith(" quota"):
            text = text[: -len(" quota")].strip()
        for member in cls:
            if member.name == text:
                return member
        return cls.monthly


# Leave types excluded from the "today" / "next 7 days" dashboard cards
LONG_LEAVE_TYPES = frozenset({"Maternity Leave", "Paternity Leave"})


# ── Allocation keywords ─────────────────────────────────────────────

# Checked in this order; value is the allocation key the keyword maps to.
ALLOCATION_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("junior", "junior"),
    ("senior", "senior"),
    ("manager", "managers"),
)


# ── Calendar ────────────────────────────────────────────────────────

# Weekday indices are Sunday-first: 0=Sun … 6=Sat
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
ALL_WEEKDAYS = frozenset(range(7))

MONTH_ABBREVIATIONS = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)


# ── Misc constants ──────────────────────────────────────────────────

DISPLAY_DATE_FORMAT = "%d-%b-%Y"          # 16-Oct-2025
UNKNOWN_LIMIT = "?"
EXPORT_ID_PREFIX = "NON INS"
