"""Seed script for development data.

Run with:  python -m driver_log.seed
Inside Docker:  docker compose exec api python -m driver_log.seed
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000"
ADMIN_USER_ID = "00000000-0000-0000-0000-000000000001"

HEADERS = {
    "Content-Type": "application/json",
    "X-User-Id": ADMIN_USER_ID,
    "X-Role": "admin",
}

# Well-known driver UUIDs
TEST_DRIVER_ID = "00000000-0000-0000-0000-000000000002"
ARUN_ID = "00000000-0000-0000-0000-000000000003"
MEENA_ID = "00000000-0000-0000-0000-000000000004"

DRIVERS = [
    {"id": TEST_DRIVER_ID, "name": "Test Driver", "email": "test@driver.com", "phone": "+1234567890"},
    {"id": ARUN_ID, "name": "Arun Kumar", "email": "arun.kumar@example.com", "phone": "+919800000001"},
    {"id": MEENA_ID, "name": "Meena Raj", "email": "meena.raj@example.com", "phone": None},
]

PAYROLL_CONFIG = {
    "base_salary": "27000.00",
    "overtime_rate_per_hour": "100.00",
    "fuel_allowance_per_day": "33.30",
    "effective_from": "2024-01-01",
}


async def _safe_post(client: httpx.AsyncClient, url: str, json: dict | None, label: str) -> dict | None:
    """POST with 409-conflict tolerance so the script can be re-run."""
    resp = await client.post(url, json=json, headers=HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 409:
        print(f"  [SKIP] {label} (already exists)")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_drivers(client: httpx.AsyncClient) -> None:
    print("\n--- Seeding drivers ---")
    for driver in DRIVERS:
        await _safe_post(client, f"{BASE_URL}/drivers", driver, f"Driver: {driver['name']}")


async def seed_payroll_config(client: httpx.AsyncClient) -> None:
    print("\n--- Seeding payroll configuration ---")
    resp = await client.get(f"{BASE_URL}/payroll/config", headers=HEADERS)
    if resp.status_code == 200 and resp.json()["version"] is not None:
        print("  [SKIP] Payroll configuration already published")
        return
    await _safe_post(client, f"{BASE_URL}/payroll/config", PAYROLL_CONFIG, "Payroll config v1")


async def seed_leaves(client: httpx.AsyncClient) -> None:
    """Arun: three approved annual leaves earlier this year. Meena: one pending sick day."""
    print("\n--- Seeding leave requests ---")
    today = date.today()
    start = date(today.year, 1, 6)

    for offset in range(3):
        leave_date = start + timedelta(days=offset)
        if leave_date > today:
            break
        result = await _safe_post(
            client,
            f"{BASE_URL}/drivers/{ARUN_ID}/leaves",
            {"leave_date": leave_date.isoformat(), "leave_type": "annual", "reason": "Family visit"},
            f"Leave: Arun annual {leave_date.isoformat()}",
        )
        if result:
            await _safe_post(
                client,
                f"{BASE_URL}/leaves/{result['id']}/approve",
                None,
                f"Approve Arun's leave on {leave_date.isoformat()}",
            )

    await _safe_post(
        client,
        f"{BASE_URL}/drivers/{MEENA_ID}/leaves",
        {"leave_date": (today + timedelta(days=7)).isoformat(), "leave_type": "sick", "reason": "Clinic"},
        "Leave: Meena sick (PENDING)",
    )


async def seed_active_shift(client: httpx.AsyncClient) -> None:
    """Leave the test driver clocked in so the dashboard has something to show."""
    print("\n--- Seeding shifts ---")
    await _safe_post(
        client,
        f"{BASE_URL}/drivers/{TEST_DRIVER_ID}/shifts/clock-in",
        {"start_odometer": 12000},
        "Shift: Test Driver clocked in",
    )


async def main() -> None:
    print("=" * 60)
    print("  Driver Log: Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            print("Make sure the API is running")
            sys.exit(1)

        await seed_drivers(client)
        await seed_payroll_config(client)
        await seed_leaves(client)
        await seed_active_shift(client)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
