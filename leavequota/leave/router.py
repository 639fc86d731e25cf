"""Leave quota router — working days, usage, balances, export, dashboard, policy.

Every endpoint is stateless: the caller posts the snapshot it already holds
(requests, roster, policy) and gets freshly computed values back.
Request bodies accept the dashboard's camelCase keys; every response is
snake_case.
"""

from fastapi import APIRouter
from fastapi.responses import Response

from leavequota.engine import (
    LeavePolicy,
    build_usage_table,
    count_working_days,
    describe_excluded_days,
    period_key,
)
from leavequota.leave.schemas import (
    DashboardMetrics,
    DashboardRequest,
    EnrichRequest,
    EstimateRequest,
    ExportRequest,
    PeriodKeyOut,
    PeriodKeyRequest,
    PolicyDescription,
    QuotaEnrichment,
    QuotaSnapshot,
    RequestBalanceRow,
    RowsRequest,
    SubmissionEstimate,
    UsageOut,
    WorkingDaysOut,
    WorkingDaysRequest,
)
from leavequota.leave.service import QuotaService

router = APIRouter(prefix="", tags=["leave-quota"])


# ── POST /working-days ──────────────────────────────────────────────

@router.post("/working-days", response_model=WorkingDaysOut)
async def working_days(body: WorkingDaysRequest):
    """Working days in an inclusive range under the given weekday set."""
    return WorkingDaysOut(
        days=count_working_days(body.start_date, body.end_date, body.working_days),
        excludes=describe_excluded_days(body.working_days),
    )


# ── POST /period-key ────────────────────────────────────────────────

@router.post("/period-key", response_model=PeriodKeyOut)
async def resolve_period_key(body: PeriodKeyRequest):
    """Accounting bucket of a date; ``null`` when the date is unreadable."""
    return PeriodKeyOut(period=period_key(body.value, body.quota_type))


# ── POST /usage ─────────────────────────────────────────────────────

@router.post("/usage", response_model=UsageOut)
async def usage(snapshot: QuotaSnapshot):
    """Approved working days per instructor and period."""
    return UsageOut(
        quota_type=snapshot.policy.quota_type,
        usage=build_usage_table(snapshot.requests, snapshot.policy),
    )


# ── POST /estimate ──────────────────────────────────────────────────

@router.post("/estimate", response_model=SubmissionEstimate)
async def estimate(body: EstimateRequest):
    """Submission form estimate. Never rejects; reports ``blocked_reason``."""
    return QuotaService.estimate_submission(body.draft, body.snapshot)


# ── POST /enrich ────────────────────────────────────────────────────

@router.post("/enrich", response_model=QuotaEnrichment)
async def enrich(body: EnrichRequest):
    """Quota fields to store on a submitted request (422 if it is incomplete)."""
    return QuotaService.enrich_request(body.request, body.snapshot)


# ── POST /rows ──────────────────────────────────────────────────────

@router.post("/rows", response_model=list[RequestBalanceRow])
async def rows(body: RowsRequest):
    """Balance rows for the table, grid and calendar views."""
    return QuotaService.annotate_requests(body.snapshot, body.ids)


# ── POST /rows/{request_id} ─────────────────────────────────────────

@router.post("/rows/{request_id}", response_model=RequestBalanceRow)
async def row_detail(request_id: str, snapshot: QuotaSnapshot):
    """Balance row for the detail dialog."""
    return QuotaService.request_detail(snapshot, request_id)


# ── POST /export ────────────────────────────────────────────────────

@router.post("/export")
async def export(body: ExportRequest):
    """CSV download of the selected requests (all when none selected)."""
    content = QuotaService.export_csv(body.snapshot, body.selected_ids)
    filename = QuotaService.export_filename(body.selected_ids)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ── POST /dashboard ─────────────────────────────────────────────────

@router.post("/dashboard", response_model=DashboardMetrics)
async def dashboard(body: DashboardRequest):
    """Leaves today, next 7 days, maternity & paternity cards."""
    return QuotaService.dashboard_metrics(body.snapshot, body.today)


# ── Policy ──────────────────────────────────────────────────────────

@router.get("/policy/default", response_model=LeavePolicy, response_model_by_alias=False)
async def default_policy():
    """Starting policy for an editor with nothing saved yet."""
    return QuotaService.default_policy()


@router.post("/policy/describe", response_model=PolicyDescription)
async def describe_policy(policy: LeavePolicy):
    """Effective working days and the "excludes …" hint."""
    return QuotaService.describe_policy(policy)
