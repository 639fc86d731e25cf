"""Leave quota Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Request / Snapshot → request bodies
  - *Out / *Row         → response bodies
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from leavequota.common.constants import QuotaType
from leavequota.engine.models import Instructor, LeavePolicy, LeaveRequest, UsageTable


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ═════════════════════════════════════════════════════════════════════
# Snapshot — everything one computation needs
# ═════════════════════════════════════════════════════════════════════


class QuotaSnapshot(_Schema):
    """Already-fetched requests, roster and the policy in effect right now."""

    requests: list[LeaveRequest] = Field(default_factory=list, alias="leaveRequests")
    instructors: list[Instructor] = Field(default_factory=list)
    policy: LeavePolicy = Field(default_factory=LeavePolicy)

    def instructor(self, instructor_id: str) -> Optional[Instructor]:
        for inst in self.instructors:
            if inst.id == instructor_id:
                return inst
        return None

    def job_level_for(self, request: LeaveRequest) -> Optional[str]:
        """The request's own label, else the roster entry's."""
        if request.job_level and request.job_level.strip():
            return request.job_level
        inst = self.instructor(request.instructor_id)
        return inst.job_level if inst else None


# ═════════════════════════════════════════════════════════════════════
# Working days / period key
# ═════════════════════════════════════════════════════════════════════


class WorkingDaysRequest(_Schema):
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")
    working_days: list[int] = Field(default_factory=list, alias="workingDays")

    @field_validator("working_days")
    @classmethod
    def _valid_weekdays(cls, v: list[int]) -> list[int]:
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("weekday indices must be 0-6 (0=Sunday).")
        return v


class WorkingDaysOut(BaseModel):
    days: int
    excludes: str


class PeriodKeyRequest(_Schema):
    value: str = Field(..., alias="date")
    quota_type: QuotaType = Field(QuotaType.monthly, alias="quotaType")

    @field_validator("quota_type", mode="before")
    @classmethod
    def _parse_quota_type(cls, v: object) -> QuotaType:
        return QuotaType.parse(v)  # type: ignore[arg-type]


class PeriodKeyOut(BaseModel):
    period: Optional[str] = None


class UsageOut(BaseModel):
    quota_type: QuotaType
    usage: UsageTable


# ═════════════════════════════════════════════════════════════════════
# Submission
# ═════════════════════════════════════════════════════════════════════


class SubmissionDraft(_Schema):
    """In-progress form values. Every field may still be blank."""

    instructor_id: Optional[str] = Field(None, alias="instructorId")
    instructor_name: Optional[str] = Field(None, alias="instructorName")
    leave_type: Optional[str] = Field(None, alias="leaveType")
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    reason: Optional[str] = None
    job_level: Optional[str] = Field(None, alias="jobLevel")


class EstimateRequest(_Schema):
    draft: SubmissionDraft
    snapshot: QuotaSnapshot


class SubmissionEstimate(BaseModel):
    """Shown beside the form before the user confirms."""

    days: int = 0
    period: Optional[str] = None
    limit: Optional[int] = None
    prior_used: int = 0
    remaining: int = 0
    limit_reached: bool = False
    can_submit: bool = False
    blocked_reason: str = ""


class EnrichRequest(_Schema):
    request: LeaveRequest
    snapshot: QuotaSnapshot


class QuotaEnrichment(BaseModel):
    """Quota fields stored on a request when it is submitted or approved."""

    days: int
    balance: Optional[int] = None
    limit_reached: Optional[bool] = None
    allocation_total: Optional[int] = None
    allocation_used: Optional[int] = None


# ═════════════════════════════════════════════════════════════════════
# Rows — table / grid / calendar / detail dialog
# ═════════════════════════════════════════════════════════════════════


class RowsRequest(_Schema):
    snapshot: QuotaSnapshot
    ids: Optional[list[str]] = None


class RequestBalanceRow(BaseModel):
    id: Optional[str] = None
    instructor_id: str
    job_level: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    days: int
    period: Optional[str] = None
    used: int
    limit: Optional[int] = None
    remaining: int
    limit_reached: bool
    assigned: str


# ═════════════════════════════════════════════════════════════════════
# Export
# ═════════════════════════════════════════════════════════════════════


class ExportRequest(_Schema):
    snapshot: QuotaSnapshot
    selected_ids: list[str] = Field(default_factory=list, alias="selectedIds")


# ═════════════════════════════════════════════════════════════════════
# Dashboard
# ═════════════════════════════════════════════════════════════════════


class DashboardRequest(_Schema):
    snapshot: QuotaSnapshot
    today: Optional[date] = None


class DashboardMetrics(BaseModel):
    leaves_today: int = 0
    leaves_today_by_type: dict[str, int] = Field(default_factory=dict)
    leaves_today_breakdown: str = ""
    leave_days_next_7: int = 0
    long_leave_ongoing: int = 0
    long_leave_upcoming: int = 0


# ═════════════════════════════════════════════════════════════════════
# Policy
# ═════════════════════════════════════════════════════════════════════


class PolicyDescription(BaseModel):
    quota_type: QuotaType
    working_days: list[int]
    excludes: str
    allocations: dict[str, int]
