from typing import Dict

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_custom_range(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    response = await client.post(
        "/api/v1/students",
        json={"full_name": "Rahul Sharma", "course": "Office Application", "enrollment_date": "2024-11-20"},
        headers=staff_headers,
    )
    student_id = response.json()["id"]
    await client.patch(f"/api/v1/students/{student_id}/payments/0", json={"is_paid": True}, headers=staff_headers)

    response = await client.get(
        "/api/v1/analytics/range",
        params={"preset": "custom", "start": "2024-11-01", "end": "2024-12-31"},
        headers=staff_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["start"] == "2024-11-01"
    assert data["end"] == "2024-12-31"
    assert data["enrollments_in_range"] == 1
    assert data["total_payments_expected"] == 1000
    assert data["total_payments_collected"] == 500
    assert data["collection_rate"] == 50
    assert [m["label"] for m in data["monthly_breakdown"]] == ["Nov 24", "Dec 24"]
    assert data["course_breakdown"][0]["course"] == "Office Application"


@pytest.mark.asyncio
async def test_preset_without_data(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    response = await client.get("/api/v1/analytics/range", params={"preset": "this_year"}, headers=staff_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_payments_expected"] == 0
    assert data["pie_data"] == []


@pytest.mark.asyncio
async def test_inverted_range_rejected(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    response = await client.get(
        "/api/v1/analytics/range",
        params={"preset": "custom", "start": "2025-03-01", "end": "2025-01-01"},
        headers=staff_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_preset(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    response = await client.get("/api/v1/analytics/range", params={"preset": "decade"}, headers=staff_headers)
    assert response.status_code == 422
