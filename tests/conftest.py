"""Shared test fixtures — app, client, snapshot factories.

The engine is pure, so most tests build requests and policies in memory;
API tests run against the ASGI app through httpx without a server.
"""

from __future__ import annotations

import itertools
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from leavequota.common.constants import QuotaType
from leavequota.engine.models import Instructor, LeavePolicy, LeaveRequest
from leavequota.leave.schemas import QuotaSnapshot
from leavequota.main import create_app

MON_FRI = [1, 2, 3, 4, 5]

_ids = itertools.count(1)


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance."""
    application = create_app()
    yield application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Model factories ─────────────────────────────────────────────────

def _make_request(
    *,
    instructor_id: str = "i1",
    start: Optional[str] = "2025-03-10",
    end: Optional[str] = "2025-03-14",
    status: str = "APPROVED",
    leave_type: str = "Sick Leave",
    job_level: Optional[str] = None,
    instructor_name: str = "Test Staff",
    reason: str = "Unwell",
    request_id: Optional[str] = None,
    **extra,
) -> LeaveRequest:
    return LeaveRequest(
        id=request_id or f"lr{next(_ids)}",
        instructor_id=instructor_id,
        instructor_name=instructor_name,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        status=status,
        job_level=job_level,
        reason=reason,
        **extra,
    )


def _make_instructor(
    *,
    instructor_id: str = "i1",
    name: str = "Test Staff",
    job_level: Optional[str] = "Junior Staff",
    contract_type: Optional[str] = "Full-Time",
    employment_type: Optional[str] = None,
) -> Instructor:
    return Instructor(
        id=instructor_id,
        name=name,
        job_level=job_level,
        contract_type=contract_type,
        employment_type=employment_type,
    )


def _make_policy(
    *,
    quota_type: QuotaType | str = QuotaType.monthly,
    allocations: Optional[dict[str, int]] = None,
    working_days: Optional[list[int]] = None,
) -> LeavePolicy:
    return LeavePolicy(
        quota_type=quota_type,
        allocations={"junior": 12, "senior": 16, "managers": 24} if allocations is None else allocations,
        working_days=MON_FRI if working_days is None else working_days,
    )


def _make_snapshot(
    requests: list[LeaveRequest],
    *,
    instructors: Optional[list[Instructor]] = None,
    policy: Optional[LeavePolicy] = None,
) -> QuotaSnapshot:
    return QuotaSnapshot(
        requests=requests,
        instructors=[_make_instructor()] if instructors is None else instructors,
        policy=policy or _make_policy(),
    )


def _snapshot_json(snapshot: QuotaSnapshot) -> dict:
    """Snapshot as the dashboard posts it (camelCase keys)."""
    return snapshot.model_dump(mode="json", by_alias=True)


@pytest.fixture
def policy() -> LeavePolicy:
    """Monthly policy, Mon–Fri, default allocations."""
    return _make_policy()
