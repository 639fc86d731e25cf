"""Engine input/output models — pydantic v2.

Field names are snake_case; the dashboard's camelCase keys are accepted
as aliases so stored records can be validated as-is.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from leavequota.common.constants import LeaveStatus, QuotaType


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


# ═════════════════════════════════════════════════════════════════════
# Leave request / roster
# ═════════════════════════════════════════════════════════════════════


class LeaveRequest(_CamelModel):
    """One submitted or approved leave, read-only to the engine.

    Dates stay raw strings: the Date Normalizer decides what they mean,
    and a record with unreadable dates simply contributes nothing.
    """

    id: Optional[str] = None
    instructor_id: str = Field(..., alias="instructorId")
    instructor_name: Optional[str] = Field(None, alias="instructorName")
    leave_type: Optional[str] = Field(None, alias="leaveType")
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    status: str = LeaveStatus.draft.value
    job_level: Optional[str] = Field(None, alias="jobLevel")
    reason: Optional[str] = None
    registered_date: Optional[str] = Field(None, alias="registeredDate")
    approved_at: Optional[str] = Field(None, alias="approvedAt")

    @field_validator("status", mode="before")
    @classmethod
    def _upper_status(cls, v: object) -> str:
        return str(v or "").strip().upper()

    @field_validator("start_date", "end_date", "registered_date", "approved_at", mode="before")
    @classmethod
    def _stringify_dates(cls, v: object) -> Optional[str]:
        if v is None:
            return None
        return v.isoformat() if hasattr(v, "isoformat") else str(v)

    @property
    def is_approved(self) -> bool:
        return self.status == LeaveStatus.approved.value


class Instructor(_CamelModel):
    """Roster entry. Only ``job_level`` matters to the engine."""

    id: str
    name: Optional[str] = None
    job_level: Optional[str] = Field(None, alias="jobLevel")
    contract_type: Optional[str] = Field(None, alias="contractType")
    employment_type: Optional[str] = Field(None, alias="employmentType")
    department: Optional[str] = None


# ═════════════════════════════════════════════════════════════════════
# Policy
# ═════════════════════════════════════════════════════════════════════


class LeavePolicy(_CamelModel):
    """Quota cadence, per-role allocations and working weekdays (0=Sun)."""

    quota_type: QuotaType = Field(QuotaType.monthly, alias="quotaType")
    allocations: dict[str, int] = Field(default_factory=dict)
    working_days: list[int] = Field(default_factory=list, alias="workingDays")
    auto_reject: bool = Field(False, alias="autoReject")
    carry_forward: bool = Field(True, alias="carryForward")

    @field_validator("quota_type", mode="before")
    @classmethod
    def _parse_quota_type(cls, v: object) -> QuotaType:
        return QuotaType.parse(v)  # type: ignore[arg-type]

    @field_validator("working_days")
    @classmethod
    def _valid_weekdays(cls, v: list[int]) -> list[int]:
        bad = [d for d in v if d < 0 or d > 6]
        if bad:
            raise ValueError(f"weekday indices must be 0-6 (0=Sunday), got {bad}")
        return sorted(set(v))


# ═════════════════════════════════════════════════════════════════════
# Results
# ═════════════════════════════════════════════════════════════════════


# instructor_id → period key → working days used
UsageTable = dict[str, dict[str, int]]


class BalanceResult(NamedTuple):
    remaining: int
    limit_reached: bool
