"""Common module — shared constants, errors and infrastructure."""

from leavequota.common.constants import (
    ALLOCATION_KEYWORDS,
    DISPLAY_DATE_FORMAT,
    LONG_LEAVE_TYPES,
    UNKNOWN_LIMIT,
    WEEKDAY_NAMES,
    LeaveStatus,
    QuotaType,
)
from leavequota.common.exceptions import (
    AppException,
    NotFoundException,
    ValidationException,
    register_exception_handlers,
)

__all__ = [
    # Constants / Enums
    "LeaveStatus",
    "QuotaType",
    "ALLOCATION_KEYWORDS",
    "DISPLAY_DATE_FORMAT",
    "LONG_LEAVE_TYPES",
    "UNKNOWN_LIMIT",
    "WEEKDAY_NAMES",
    # Exceptions
    "AppException",
    "NotFoundException",
    "ValidationException",
    "register_exception_handlers",
]
