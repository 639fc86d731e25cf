"""Leave quota service layer — every dashboard call site goes through here.

Business logic:
  - Submission estimate: working days, projected balance, why submit is blocked
  - Row balances for the table, grid, calendar and detail dialog
  - Quota enrichment stored on a request when it is submitted or approved
  - CSV export with the "used/limit" text cell
  - Dashboard cards: leaves today, next 7 days, maternity & paternity

All of it is recomputed from the snapshot passed in; nothing is cached
between calls, so a policy change is reflected on the very next call.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from leavequota.common.constants import (
    EXPORT_ID_PREFIX,
    LONG_LEAVE_TYPES,
    UNKNOWN_LIMIT,
)
from leavequota.common.exceptions import NotFoundException, ValidationException
from leavequota.config import settings
from leavequota.engine import (
    LeavePolicy,
    LeaveRequest,
    UsageTable,
    build_usage_table,
    count_working_days,
    count_working_days_between,
    describe_excluded_days,
    effective_working_days,
    evaluate_balance,
    format_assigned_cell,
    format_display_date,
    normalize_date,
    period_key,
    remaining_after,
    resolve_limit,
    usage_for,
    weekday_index,
)
from leavequota.leave.schemas import (
    DashboardMetrics,
    PolicyDescription,
    QuotaEnrichment,
    QuotaSnapshot,
    RequestBalanceRow,
    SubmissionDraft,
    SubmissionEstimate,
)

logger = logging.getLogger(__name__)

MSG_MANDATORY = "Please fill all mandatory fields."
MSG_END_BEFORE_START = "End date cannot be before the start date."
MSG_NO_WORKING_DAYS = "Selected range contains no working days based on current configuration."

EXPORT_HEADERS = (
    "ID",
    "Non-Instructor Name",
    "Job Level",
    "Contract Type",
    "Leave Type",
    "Reason",
    "Start Date",
    "End Date",
    "Approved Date",
    "Status",
    "No. of days",
    "Assigned leaves",
)

_DIGITS = re.compile(r"(\d+)")


# ═════════════════════════════════════════════════════════════════════
# QuotaService
# ═════════════════════════════════════════════════════════════════════


class QuotaService:
    """Quota computations shared by the form, views, export and dashboard."""

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _blank(value: Optional[str]) -> bool:
        return value is None or not str(value).strip()

    @staticmethod
    def _assigned_display(used: int, limit: Optional[int]) -> str:
        return f"{used}/{UNKNOWN_LIMIT if limit is None else limit}"

    @staticmethod
    def _build_row(
        req: LeaveRequest,
        snapshot: QuotaSnapshot,
        usage: UsageTable,
    ) -> RequestBalanceRow:
        """Row balance exactly as the table shows it: the request's own start
        date picks the period, and its usage is already in ``usage`` when
        approved, so nothing extra is projected."""
        policy = snapshot.policy
        job_level = snapshot.job_level_for(req)
        limit = resolve_limit(job_level, policy)
        used = usage_for(usage, req.instructor_id, req.start_date, policy.quota_type)
        result = evaluate_balance(
            req.instructor_id, 0, job_level, req.start_date, policy, usage,
        )
        return RequestBalanceRow(
            id=req.id,
            instructor_id=req.instructor_id,
            job_level=job_level,
            start_date=req.start_date or "",
            end_date=req.end_date or "",
            days=count_working_days(req.start_date, req.end_date, policy.working_days),
            period=period_key(req.start_date, policy.quota_type),
            used=used,
            limit=limit,
            remaining=result.remaining,
            limit_reached=result.limit_reached,
            assigned=QuotaService._assigned_display(used, limit),
        )

    @staticmethod
    def format_export_id(raw: str) -> str:
        """``i1`` / ``instr7`` / ``INSTR0008`` → ``NON INS0001`` style."""
        m = _DIGITS.search(raw or "")
        if m:
            return f"{EXPORT_ID_PREFIX}{int(m.group(1)):04d}"
        return (raw or "").upper()

    # ─────────────────────────────────────────────────────────────────
    # Submission
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def estimate_submission(
        draft: SubmissionDraft,
        snapshot: QuotaSnapshot,
    ) -> SubmissionEstimate:
        """Working days and projected balance for the form, plus the reason
        the Create button is disabled (empty when it may be submitted).

        Reaching the limit is reported but never blocks submission.
        """
        policy = snapshot.policy
        days = count_working_days(draft.start_date, draft.end_date, policy.working_days)

        required = (
            draft.instructor_id,
            draft.instructor_name,
            draft.leave_type,
            draft.start_date,
            draft.end_date,
            draft.reason,
            draft.job_level,
        )
        start = normalize_date(draft.start_date)
        end = normalize_date(draft.end_date)
        if any(QuotaService._blank(v) for v in required):
            blocked = MSG_MANDATORY
        elif start is not None and end is not None and end < start:
            blocked = MSG_END_BEFORE_START
        elif days <= 0:
            blocked = MSG_NO_WORKING_DAYS
        else:
            blocked = ""

        instructor_id = draft.instructor_id or ""
        job_level = draft.job_level
        if QuotaService._blank(job_level):
            inst = snapshot.instructor(instructor_id)
            job_level = inst.job_level if inst else None

        usage = build_usage_table(snapshot.requests, policy)
        limit = resolve_limit(job_level, policy)
        prior_used = usage_for(usage, instructor_id, draft.start_date, policy.quota_type)
        result = evaluate_balance(
            instructor_id, days, job_level, draft.start_date, policy, usage,
        )

        return SubmissionEstimate(
            days=days,
            period=period_key(draft.start_date, policy.quota_type),
            limit=limit,
            prior_used=prior_used,
            remaining=result.remaining,
            limit_reached=result.limit_reached,
            can_submit=blocked == "",
            blocked_reason=blocked,
        )

    @staticmethod
    def enrich_request(
        request: LeaveRequest,
        snapshot: QuotaSnapshot,
    ) -> QuotaEnrichment:
        """Recompute the quota fields stored with a submitted request.

        Raises ValidationException when mandatory fields are missing or the
        range has no working days. When the limit is unknown only ``days``
        is filled in.
        """
        required = {
            "instructor_id": request.instructor_id,
            "instructor_name": request.instructor_name,
            "leave_type": request.leave_type,
            "start_date": request.start_date,
            "end_date": request.end_date,
            "reason": request.reason,
        }
        missing = [name for name, value in required.items() if QuotaService._blank(value)]
        if missing:
            raise ValidationException(
                {name: ["This field is required."] for name in missing},
                detail=f"Missing required fields: {', '.join(missing)}",
            )

        policy = snapshot.policy
        days = count_working_days(request.start_date, request.end_date, policy.working_days)
        if days <= 0:
            raise ValidationException({"end_date": [MSG_NO_WORKING_DAYS]}, detail=MSG_NO_WORKING_DAYS)

        limit = resolve_limit(snapshot.job_level_for(request), policy)
        if limit is None:
            logger.info(
                "No allocation for instructor %s (job level %r); quota fields left empty",
                request.instructor_id, snapshot.job_level_for(request),
            )
            return QuotaEnrichment(days=days)

        # The request itself must not count twice when it is re-enriched.
        others = [
            r for r in snapshot.requests
            if request.id is None or r.id != request.id
        ]
        usage = build_usage_table(others, policy)
        prior_used = usage_for(usage, request.instructor_id, request.start_date, policy.quota_type)
        result = remaining_after(limit, prior_used, days)

        return QuotaEnrichment(
            days=days,
            balance=result.remaining,
            limit_reached=result.limit_reached,
            allocation_total=limit,
            allocation_used=prior_used + days,
        )

    # ─────────────────────────────────────────────────────────────────
    # Rows (table / grid / calendar / detail dialog)
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def annotate_requests(
        snapshot: QuotaSnapshot,
        ids: Optional[Sequence[str]] = None,
    ) -> list[RequestBalanceRow]:
        """One balance row per request; usage is aggregated once per call."""
        usage = build_usage_table(snapshot.requests, snapshot.policy)
        wanted = set(ids) if ids is not None else None
        return [
            QuotaService._build_row(req, snapshot, usage)
            for req in snapshot.requests
            if wanted is None or req.id in wanted
        ]

    @staticmethod
    def request_detail(snapshot: QuotaSnapshot, request_id: str) -> RequestBalanceRow:
        """Balance row for the detail dialog of a single request."""
        for req in snapshot.requests:
            if req.id == request_id:
                usage = build_usage_table(snapshot.requests, snapshot.policy)
                return QuotaService._build_row(req, snapshot, usage)
        raise NotFoundException("LeaveRequest", request_id)

    # ─────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def export_rows(
        snapshot: QuotaSnapshot,
        selected_ids: Optional[Iterable[str]] = None,
    ) -> list[dict[str, str]]:
        """CSV rows for the selected requests, or all of them."""
        policy = snapshot.policy
        usage = build_usage_table(snapshot.requests, policy)
        selected = set(selected_ids or ())
        base = [r for r in snapshot.requests if r.id in selected] if selected else snapshot.requests

        rows: list[dict[str, str]] = []
        for req in base:
            inst = snapshot.instructor(req.instructor_id)
            job_level = snapshot.job_level_for(req)
            limit = resolve_limit(job_level, policy)
            used = usage_for(usage, req.instructor_id, req.start_date, policy.quota_type)

            if req.registered_date:
                approved = format_display_date(req.registered_date)
            elif req.approved_at:
                approved = format_display_date(req.approved_at[:10])
            else:
                approved = ""

            contract = (inst.contract_type or inst.employment_type) if inst else None
            has_range = bool(req.start_date and req.end_date)

            rows.append({
                "ID": QuotaService.format_export_id(req.instructor_id),
                "Non-Instructor Name": req.instructor_name or "N/A",
                "Job Level": job_level or "N/A",
                "Contract Type": contract or "N/A",
                "Leave Type": req.leave_type or "N/A",
                "Reason": req.reason or "N/A",
                "Start Date": format_display_date(req.start_date),
                "End Date": format_display_date(req.end_date),
                "Approved Date": approved,
                "Status": req.status.title(),
                "No. of days": (
                    str(count_working_days(req.start_date, req.end_date, policy.working_days))
                    if has_range else ""
                ),
                "Assigned leaves": format_assigned_cell(used, limit),
            })
        return rows

    @staticmethod
    def export_csv(
        snapshot: QuotaSnapshot,
        selected_ids: Optional[Iterable[str]] = None,
    ) -> str:
        rows = QuotaService.export_rows(snapshot, selected_ids)
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=list(EXPORT_HEADERS), lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
        logger.info("Exported %d leave request row(s)", len(rows))
        return buf.getvalue()

    @staticmethod
    def export_filename(selected_ids: Optional[Sequence[str]] = None) -> str:
        if selected_ids:
            return f"leave-requests-selected-{len(selected_ids)}.csv"
        return "leave-requests.csv"

    # ─────────────────────────────────────────────────────────────────
    # Dashboard
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def dashboard_metrics(
        snapshot: QuotaSnapshot,
        today: Optional[date] = None,
    ) -> DashboardMetrics:
        """Card values, computed live from approved requests."""
        today = today or date.today()
        tomorrow = today + timedelta(days=1)
        week_end = today + timedelta(days=6)
        working = effective_working_days(snapshot.policy.working_days)
        today_is_working = weekday_index(today) in working

        by_type: dict[str, int] = {}
        next7 = 0
        ongoing: set[str] = set()
        upcoming: set[str] = set()

        for req in snapshot.requests:
            if not req.is_approved or not req.leave_type:
                continue
            start = normalize_date(req.start_date)
            end = normalize_date(req.end_date)
            if start is None or end is None:
                continue

            if req.leave_type in LONG_LEAVE_TYPES:
                if start <= today <= end:
                    ongoing.add(req.instructor_id)
                if start >= tomorrow:
                    upcoming.add(req.instructor_id)
                continue

            if today_is_working and start <= today <= end:
                by_type[req.leave_type] = by_type.get(req.leave_type, 0) + 1
            next7 += count_working_days_between(start, end, today, week_end, working)

        return DashboardMetrics(
            leaves_today=sum(by_type.values()),
            leaves_today_by_type=by_type,
            leaves_today_breakdown=", ".join(f"{c} {t}" for t, c in by_type.items() if c > 0),
            leave_days_next_7=next7,
            long_leave_ongoing=len(ongoing),
            long_leave_upcoming=len(upcoming),
        )

    # ─────────────────────────────────────────────────────────────────
    # Policy
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def default_policy() -> LeavePolicy:
        """Policy the editor starts from before anything has been saved."""
        return LeavePolicy(
            quota_type=settings.DEFAULT_QUOTA_TYPE,
            allocations=settings.default_allocations,
            working_days=settings.default_working_days,
        )

    @staticmethod
    def describe_policy(policy: LeavePolicy) -> PolicyDescription:
        """What the policy editor shows: effective days and the excludes hint."""
        return PolicyDescription(
            quota_type=policy.quota_type,
            working_days=sorted(effective_working_days(policy.working_days)),
            excludes=describe_excluded_days(policy.working_days),
            allocations=dict(policy.allocations),
        )
