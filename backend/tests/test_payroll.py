"""Tests for payroll endpoints: per-driver results, batches, configuration."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from httpx import AsyncClient

    from driver_log.services.clock import FixedClock

ADMIN_HEADERS = {"X-User-Id": str(uuid.uuid4()), "X-Role": "admin"}


async def _create_driver(client: AsyncClient, name: str = "Arun") -> str:
    resp = await client.post(
        "/drivers",
        json={"name": name, "email": f"{name.lower()}@example.com"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def _headers(driver_id: str) -> dict[str, str]:
    return {"X-User-Id": driver_id, "X-Role": "driver"}


async def _work_shift(
    client: AsyncClient,
    clock: FixedClock,
    driver_id: str,
    start: datetime,
    end: datetime,
    odometer: int = 0,
    distance: int = 100,
) -> None:
    clock.set(start)
    resp = await client.post(
        f"/drivers/{driver_id}/shifts/clock-in",
        json={"start_odometer": odometer},
        headers=_headers(driver_id),
    )
    assert resp.status_code == 201, resp.text
    clock.set(end)
    resp = await client.post(
        f"/drivers/{driver_id}/shifts/clock-out",
        json={"end_odometer": odometer + distance},
        headers=_headers(driver_id),
    )
    assert resp.status_code == 200, resp.text


async def _approved_leave(client: AsyncClient, driver_id: str, day: date) -> None:
    resp = await client.post(
        f"/drivers/{driver_id}/leaves",
        json={"leave_date": day.isoformat(), "leave_type": "annual"},
        headers=_headers(driver_id),
    )
    assert resp.status_code == 201, resp.text
    resp = await client.post(f"/leaves/{resp.json()['id']}/approve", headers=ADMIN_HEADERS)
    assert resp.status_code == 200, resp.text


async def _payroll(client: AsyncClient, driver_id: str, year: int = 2025, month: int = 1) -> dict:
    resp = await client.get(
        f"/drivers/{driver_id}/payroll",
        params={"year": year, "month": month},
        headers=_headers(driver_id),
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Per-driver monthly payroll
# ---------------------------------------------------------------------------


async def test_payroll_for_daytime_weekday_shift(async_client: AsyncClient, clock: FixedClock) -> None:
    driver_id = await _create_driver(async_client)
    await _work_shift(async_client, clock, driver_id, datetime(2025, 1, 8, 8, 0), datetime(2025, 1, 8, 16, 30))

    data = await _payroll(async_client, driver_id)
    assert data["month"] == 1
    assert data["shift_count"] == 1
    assert data["days_worked"] == 1
    assert data["total_distance"] == 100
    assert Decimal(data["regular_hours"]) == Decimal("8.50")
    assert Decimal(data["overtime_hours"]) == 0
    assert Decimal(data["fuel_allowance"]) == Decimal("33.30")
    assert Decimal(data["overtime_pay"]) == 0
    assert Decimal(data["adjusted_base_salary"]) == Decimal("27000.00")
    assert Decimal(data["daily_salary"]) == Decimal("900.00")
    assert Decimal(data["gross_pay"]) == Decimal("27033.30")


async def test_payroll_for_sunday_shift(async_client: AsyncClient, clock: FixedClock) -> None:
    driver_id = await _create_driver(async_client)
    await _work_shift(async_client, clock, driver_id, datetime(2025, 1, 12, 6, 0), datetime(2025, 1, 12, 14, 30))

    data = await _payroll(async_client, driver_id)
    assert Decimal(data["overtime_hours"]) == Decimal("8.50")
    assert Decimal(data["regular_hours"]) == 0
    assert Decimal(data["overtime_pay"]) == Decimal("850.00")
    assert Decimal(data["gross_pay"]) == Decimal("27883.30")


async def test_payroll_money_fields_have_two_decimals(async_client: AsyncClient, clock: FixedClock) -> None:
    driver_id = await _create_driver(async_client)
    # 7 Sunday minutes at 100/h = 11.666...
    await _work_shift(async_client, clock, driver_id, datetime(2025, 1, 12, 9, 0), datetime(2025, 1, 12, 9, 7))

    data = await _payroll(async_client, driver_id)
    assert data["overtime_pay"] == "11.67"
    assert Decimal(data["gross_pay"]) == (
        Decimal(data["adjusted_base_salary"]) + Decimal(data["overtime_pay"]) + Decimal(data["fuel_allowance"])
    )


async def test_thirteenth_annual_leave_is_deducted(async_client: AsyncClient, clock: FixedClock) -> None:
    clock.set(datetime(2025, 2, 20, 9, 0))
    driver_id = await _create_driver(async_client)
    for offset in range(12):
        await _approved_leave(async_client, driver_id, date(2025, 1, 6) + timedelta(days=offset))
    await _approved_leave(async_client, driver_id, date(2025, 2, 10))

    january = await _payroll(async_client, driver_id, month=1)
    assert january["unpaid_leaves_this_month"] == 0
    assert january["paid_leaves_this_month"] == 12
    assert Decimal(january["gross_pay"]) == Decimal("27000.00")

    february = await _payroll(async_client, driver_id, month=2)
    assert february["total_leave_days"] == 1
    assert february["unpaid_leaves_this_month"] == 1
    assert Decimal(february["unpaid_leave_deduction"]) == Decimal("900.00")
    assert Decimal(february["adjusted_base_salary"]) == Decimal("26100.00")
    assert february["annual_leaves_used"] == 13
    assert february["annual_leaves_remaining"] == 0


async def test_payroll_invalid_month(async_client: AsyncClient) -> None:
    driver_id = await _create_driver(async_client)
    resp = await async_client.get(
        f"/drivers/{driver_id}/payroll",
        params={"year": 2025, "month": 13},
        headers=_headers(driver_id),
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "InvalidPeriod"


async def test_payroll_unknown_driver(async_client: AsyncClient) -> None:
    resp = await async_client.get(
        f"/drivers/{uuid.uuid4()}/payroll",
        params={"year": 2025, "month": 1},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 404


async def test_payroll_of_another_driver_forbidden(async_client: AsyncClient) -> None:
    arun = await _create_driver(async_client)
    meena = await _create_driver(async_client, "Meena")
    resp = await async_client.get(
        f"/drivers/{meena}/payroll",
        params={"year": 2025, "month": 1},
        headers=_headers(arun),
    )
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Year to date
# ---------------------------------------------------------------------------


async def test_driver_year_to_date(async_client: AsyncClient, clock: FixedClock) -> None:
    driver_id = await _create_driver(async_client)
    await _work_shift(async_client, clock, driver_id, datetime(2025, 1, 12, 9, 0), datetime(2025, 1, 12, 11, 0))
    await _work_shift(
        async_client, clock, driver_id, datetime(2025, 2, 5, 9, 0), datetime(2025, 2, 5, 17, 0), odometer=100
    )
    clock.set(datetime(2025, 2, 20, 9, 0))

    resp = await async_client.get(
        f"/drivers/{driver_id}/payroll/ytd",
        params={"year": 2025},
        headers=_headers(driver_id),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["months_included"] == 2
    assert data["shift_count"] == 2
    assert data["total_distance"] == 200
    assert Decimal(data["base_salary"]) == Decimal("54000.00")
    assert Decimal(data["overtime_pay"]) == Decimal("200.00")
    assert Decimal(data["fuel_allowance"]) == Decimal("66.60")
    assert Decimal(data["gross_pay"]) == Decimal("54266.60")


async def test_year_to_date_future_year_rejected(async_client: AsyncClient) -> None:
    driver_id = await _create_driver(async_client)
    resp = await async_client.get(
        f"/drivers/{driver_id}/payroll/ytd",
        params={"year": 2026},
        headers=_headers(driver_id),
    )
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------


async def test_monthly_summary(async_client: AsyncClient, clock: FixedClock) -> None:
    arun = await _create_driver(async_client)
    meena = await _create_driver(async_client, "Meena")
    retired = await _create_driver(async_client, "Retired")
    await async_client.patch(f"/drivers/{retired}", json={"is_active": False}, headers=ADMIN_HEADERS)
    await _work_shift(async_client, clock, meena, datetime(2025, 1, 8, 8, 0), datetime(2025, 1, 8, 16, 30))

    resp = await async_client.get("/payroll/summary", params={"year": 2025, "month": 1}, headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["year"] == 2025
    assert data["month"] == 1
    assert data["total"] == 2
    assert data["errors"] == 0
    by_id = {item["driver"]["id"]: item for item in data["items"]}
    assert set(by_id) == {arun, meena}
    assert by_id[meena]["error"] is None
    assert Decimal(by_id[meena]["payroll"]["gross_pay"]) == Decimal("27033.30")
    assert Decimal(by_id[arun]["payroll"]["gross_pay"]) == Decimal("27000.00")


async def test_monthly_summary_requires_admin(async_client: AsyncClient) -> None:
    driver_id = await _create_driver(async_client)
    resp = await async_client.get("/payroll/summary", params={"year": 2025, "month": 1}, headers=_headers(driver_id))
    assert resp.status_code == 403


async def test_year_to_date_summary(async_client: AsyncClient) -> None:
    driver_id = await _create_driver(async_client)
    resp = await async_client.get("/payroll/ytd", params={"year": 2024}, headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["month"] is None
    assert data["total"] == 1
    item = data["items"][0]
    assert item["driver"]["id"] == driver_id
    assert item["payroll"]["months_included"] == 12
    assert Decimal(item["payroll"]["gross_pay"]) == Decimal("324000.00")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


async def test_default_config(async_client: AsyncClient) -> None:
    driver_id = await _create_driver(async_client)
    resp = await async_client.get("/payroll/config", headers=_headers(driver_id))
    assert resp.status_code == 200
    data = resp.json()
    assert data["version"] is None
    assert Decimal(data["base_salary"]) == Decimal(27000)
    assert Decimal(data["overtime_rate_per_hour"]) == Decimal(100)
    assert Decimal(data["fuel_allowance_per_day"]) == Decimal("33.30")
    assert data["annual_leave_allowance"] == 12


async def test_publish_config_versions(async_client: AsyncClient) -> None:
    payload = {
        "base_salary": "30000.00",
        "overtime_rate_per_hour": "120.00",
        "fuel_allowance_per_day": "40.00",
        "effective_from": "2025-01-01",
    }
    first = await async_client.post("/payroll/config", json=payload, headers=ADMIN_HEADERS)
    assert first.status_code == 201
    assert first.json()["version"] == 1

    second = await async_client.post(
        "/payroll/config", json={**payload, "base_salary": "31000.00"}, headers=ADMIN_HEADERS
    )
    assert second.json()["version"] == 2

    active = await async_client.get("/payroll/config", headers=ADMIN_HEADERS)
    assert active.json()["version"] == 2
    assert Decimal(active.json()["base_salary"]) == Decimal(31000)


async def test_backdated_version_supersedes_earlier_versions(async_client: AsyncClient) -> None:
    payload = {
        "base_salary": "30000.00",
        "overtime_rate_per_hour": "120.00",
        "fuel_allowance_per_day": "40.00",
        "effective_from": "2025-01-01",
    }
    await async_client.post("/payroll/config", json=payload, headers=ADMIN_HEADERS)
    correction = await async_client.post(
        "/payroll/config",
        json={**payload, "base_salary": "28000.00", "effective_from": "2024-06-01"},
        headers=ADMIN_HEADERS,
    )
    assert correction.json()["version"] == 2

    # Not yet in force, so version 2 still applies.
    await async_client.post(
        "/payroll/config",
        json={**payload, "base_salary": "35000.00", "effective_from": "2025-06-01"},
        headers=ADMIN_HEADERS,
    )

    active = await async_client.get("/payroll/config", headers=ADMIN_HEADERS)
    assert active.json()["version"] == 2
    assert Decimal(active.json()["base_salary"]) == Decimal(28000)


async def test_future_config_not_yet_active(async_client: AsyncClient) -> None:
    payload = {
        "base_salary": "30000.00",
        "overtime_rate_per_hour": "120.00",
        "fuel_allowance_per_day": "40.00",
        "effective_from": "2025-06-01",
    }
    await async_client.post("/payroll/config", json=payload, headers=ADMIN_HEADERS)

    active = await async_client.get("/payroll/config", headers=ADMIN_HEADERS)
    assert active.json()["version"] is None


async def test_publish_config_requires_admin(async_client: AsyncClient) -> None:
    driver_id = await _create_driver(async_client)
    resp = await async_client.post(
        "/payroll/config",
        json={
            "base_salary": "1.00",
            "overtime_rate_per_hour": "1.00",
            "fuel_allowance_per_day": "1.00",
            "effective_from": "2025-01-01",
        },
        headers=_headers(driver_id),
    )
    assert resp.status_code == 403


async def test_payroll_uses_active_config(async_client: AsyncClient, clock: FixedClock) -> None:
    await async_client.post(
        "/payroll/config",
        json={
            "base_salary": "30000.00",
            "overtime_rate_per_hour": "120.00",
            "fuel_allowance_per_day": "40.00",
            "effective_from": "2025-01-01",
        },
        headers=ADMIN_HEADERS,
    )
    driver_id = await _create_driver(async_client)
    await _work_shift(async_client, clock, driver_id, datetime(2025, 1, 12, 9, 0), datetime(2025, 1, 12, 10, 0))

    data = await _payroll(async_client, driver_id)
    assert Decimal(data["base_salary"]) == Decimal("30000.00")
    assert Decimal(data["daily_salary"]) == Decimal("1000.00")
    assert Decimal(data["overtime_pay"]) == Decimal("120.00")
    assert Decimal(data["gross_pay"]) == Decimal("30160.00")
