"""API test suite — every /api/v1/leave-quota endpoint plus the health check
and the RFC 7807 error bodies, exercised through httpx against the ASGI app.
"""

from __future__ import annotations

import csv
import io

from httpx import AsyncClient

from tests.conftest import (
    MON_FRI,
    _make_instructor,
    _make_policy,
    _make_request,
    _make_snapshot,
    _snapshot_json,
)

BASE = "/api/v1/leave-quota"


def _snapshot_body():
    return _snapshot_json(_make_snapshot([
        _make_request(request_id="lrA", start="2025-03-10", end="2025-03-14"),
        _make_request(request_id="lrB", status="PENDING", start="2025-03-17", end="2025-03-18"),
    ]))


# ═════════════════════════════════════════════════════════════════════
# System
# ═════════════════════════════════════════════════════════════════════


class TestHealth:

    async def test_health(self, client: AsyncClient):
        resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["version"] == "1.0.0"


# ═════════════════════════════════════════════════════════════════════
# Working days / period key / usage
# ═════════════════════════════════════════════════════════════════════


class TestCalculatorEndpoints:

    async def test_working_days(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/working-days", json={
            "startDate": "2025-03-10",
            "endDate": "2025-03-16",
            "workingDays": MON_FRI,
        })
        assert resp.status_code == 200
        assert resp.json() == {"days": 5, "excludes": "Sun, Sat"}

    async def test_working_days_empty_policy(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/working-days", json={
            "startDate": "2025-03-10",
            "endDate": "2025-03-16",
        })
        assert resp.json() == {"days": 7, "excludes": "none"}

    async def test_working_days_whole_calendar(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/working-days", json={
            "startDate": "0001-01-01",
            "endDate": "9999-12-31",
        })
        assert resp.status_code == 200
        assert resp.json()["days"] == 3652059

    async def test_working_days_bad_weekday(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/working-days", json={
            "startDate": "2025-03-10",
            "endDate": "2025-03-16",
            "workingDays": [1, 7],
        })
        assert resp.status_code == 422
        assert resp.headers["content-type"].startswith("application/problem+json")
        body = resp.json()
        assert body["type"].endswith("/validation-error")
        assert body["errors"]

    async def test_period_key(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/period-key", json={
            "date": "2025-05-20",
            "quotaType": "Quarterly Quota",
        })
        assert resp.status_code == 200
        assert resp.json() == {"period": "2025-Q2"}

    async def test_period_key_unreadable(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/period-key", json={"date": "someday"})
        assert resp.json() == {"period": None}

    async def test_usage(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/usage", json=_snapshot_body())
        assert resp.status_code == 200
        body = resp.json()
        assert body["quota_type"] == "Monthly Quota"
        assert body["usage"] == {"i1": {"2025-03": 5}}


# ═════════════════════════════════════════════════════════════════════
# Submission
# ═════════════════════════════════════════════════════════════════════


class TestSubmissionEndpoints:

    async def test_estimate(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/estimate", json={
            "draft": {
                "instructorId": "i1",
                "instructorName": "Test Staff",
                "leaveType": "Casual Leave",
                "startDate": "2025-03-17",
                "endDate": "2025-03-18",
                "reason": "Family event",
                "jobLevel": "Junior Staff",
            },
            "snapshot": _snapshot_body(),
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["days"] == 2
        assert body["remaining"] == 5
        assert body["can_submit"] is True

    async def test_estimate_blank_draft(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/estimate", json={
            "draft": {},
            "snapshot": _snapshot_body(),
        })
        assert resp.status_code == 200
        assert resp.json()["can_submit"] is False
        assert resp.json()["blocked_reason"] == "Please fill all mandatory fields."

    async def test_enrich(self, client: AsyncClient):
        new = _make_request(request_id="new", status="PENDING", start="2025-03-17", end="2025-03-18")
        resp = await client.post(f"{BASE}/enrich", json={
            "request": new.model_dump(mode="json", by_alias=True),
            "snapshot": _snapshot_body(),
        })
        assert resp.status_code == 200
        assert resp.json() == {
            "days": 2,
            "balance": 5,
            "limit_reached": False,
            "allocation_total": 12,
            "allocation_used": 7,
        }

    async def test_enrich_missing_reason(self, client: AsyncClient):
        new = _make_request(request_id="new", reason="")
        resp = await client.post(f"{BASE}/enrich", json={
            "request": new.model_dump(mode="json", by_alias=True),
            "snapshot": _snapshot_body(),
        })
        assert resp.status_code == 422
        body = resp.json()
        assert body["title"] == "Validation Error"
        assert "reason" in body["errors"]
        assert body["instance"] == f"{BASE}/enrich"


# ═════════════════════════════════════════════════════════════════════
# Rows / export / dashboard
# ═════════════════════════════════════════════════════════════════════


class TestViewEndpoints:

    async def test_rows(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/rows", json={"snapshot": _snapshot_body()})
        assert resp.status_code == 200
        rows = resp.json()
        assert [r["id"] for r in rows] == ["lrA", "lrB"]
        assert rows[0]["assigned"] == "5/12"

    async def test_rows_filtered(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/rows", json={"snapshot": _snapshot_body(), "ids": ["lrB"]})
        assert [r["id"] for r in resp.json()] == ["lrB"]

    async def test_row_detail(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/rows/lrA", json=_snapshot_body())
        assert resp.status_code == 200
        assert resp.json()["remaining"] == 7

    async def test_row_detail_not_found(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/rows/missing", json=_snapshot_body())
        assert resp.status_code == 404
        assert resp.headers["content-type"].startswith("application/problem+json")
        body = resp.json()
        assert body["type"].endswith("/not-found")
        assert "missing" in body["detail"]

    async def test_export(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/export", json={
            "snapshot": _snapshot_body(),
            "selectedIds": ["lrA"],
        })
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert 'filename="leave-requests-selected-1.csv"' in resp.headers["content-disposition"]

        rows = list(csv.DictReader(io.StringIO(resp.text)))
        assert len(rows) == 1
        assert rows[0]["ID"] == "NON INS0001"
        assert rows[0]["Assigned leaves"] == '="5/12"'

    async def test_export_all(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/export", json={"snapshot": _snapshot_body()})
        assert 'filename="leave-requests.csv"' in resp.headers["content-disposition"]
        assert len(list(csv.DictReader(io.StringIO(resp.text)))) == 2

    async def test_dashboard(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/dashboard", json={
            "snapshot": _snapshot_body(),
            "today": "2025-03-12",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["leaves_today"] == 1
        assert body["leaves_today_breakdown"] == "1 Sick Leave"
        assert body["leave_days_next_7"] == 3


# ═════════════════════════════════════════════════════════════════════
# Policy
# ═════════════════════════════════════════════════════════════════════


class TestPolicyEndpoints:

    async def test_default_policy(self, client: AsyncClient):
        resp = await client.get(f"{BASE}/policy/default")
        assert resp.status_code == 200
        body = resp.json()
        assert body["quota_type"] == "Monthly Quota"
        assert body["working_days"] == [1, 2, 3, 4, 5, 6]
        assert body["allocations"] == {"junior": 12, "senior": 16, "managers": 24}
        assert "quotaType" not in body

    async def test_default_policy_posts_back(self, client: AsyncClient):
        """The snake_case default policy is accepted as a request body."""
        policy = (await client.get(f"{BASE}/policy/default")).json()
        resp = await client.post(f"{BASE}/policy/describe", json=policy)
        assert resp.status_code == 200
        assert resp.json()["excludes"] == "Sun"

    async def test_describe_policy(self, client: AsyncClient):
        resp = await client.post(f"{BASE}/policy/describe", json={
            "quotaType": "Yearly Quota",
            "workingDays": [],
            "allocations": {"Lab Coordinator": 9},
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["quota_type"] == "Yearly Quota"
        assert body["excludes"] == "none"
        assert body["working_days"] == [0, 1, 2, 3, 4, 5, 6]

    async def test_snapshot_policy_is_honoured(self, client: AsyncClient):
        snapshot = _make_snapshot(
            [_make_request(start="2025-03-10", end="2025-03-16")],
            instructors=[_make_instructor(job_level="Lab Coordinator")],
            policy=_make_policy(
                quota_type="Yearly Quota",
                allocations={"lab coordinator": 9},
                working_days=[1, 2, 3, 4, 5, 6],
            ),
        )
        resp = await client.post(f"{BASE}/rows", json={"snapshot": _snapshot_json(snapshot)})
        row = resp.json()[0]
        assert row["period"] == "2025"
        assert row["days"] == 6
        assert row["limit"] == 9
        assert row["remaining"] == 3
