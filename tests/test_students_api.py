from typing import Any, Dict

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.core.models import AuditLog, MonthlyPayment


async def _create(client: AsyncClient, headers: Dict[str, str], **overrides: Any) -> Dict[str, Any]:
    payload = {
        "full_name": "Rahul Sharma",
        "course": "Office Application",
        "batch": "Morning",
        "enrollment_date": "2024-11-20",
        "mobile": "9876543210",
    }
    payload.update(overrides)
    response = await client.post("/api/v1/students", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_student_prefills_from_catalog(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    data = await _create(client, staff_headers)

    assert data["fees_amount"] == 1500
    assert data["monthly_fee"] == 400
    assert data["course_duration"] == 3
    assert data["fees_status"] == "not_paid"
    payments = data["monthly_payments"]
    assert [(p["month"], p["year"]) for p in payments] == [(11, 2024), (12, 2024), (1, 2025)]
    assert sum(p["amount"] for p in payments) == 1500
    assert not any(p["is_paid"] for p in payments)


@pytest.mark.asyncio
async def test_create_custom_course_splits_remainder(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    data = await _create(
        client, staff_headers,
        course="Private Tuition", fees_amount=1000, course_duration=3,
    )
    assert data["monthly_fee"] == 333
    assert [p["amount"] for p in data["monthly_payments"]] == [333, 333, 334]


@pytest.mark.asyncio
async def test_create_without_duration_keeps_status(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    data = await _create(
        client, staff_headers,
        course="Private Tuition", fees_amount=1200, course_duration=0, fees_status="paid",
    )
    assert data["monthly_payments"] == []
    assert data["fees_status"] == "paid"


@pytest.mark.asyncio
async def test_create_rejects_blank_name(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    response = await client.post(
        "/api/v1/students",
        json={"full_name": "   ", "course": "Office Application", "enrollment_date": "2024-11-20"},
        headers=staff_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_writes_audit_entry(
    client: AsyncClient, db_session: AsyncSession, staff_headers: Dict[str, str]
) -> None:
    data = await _create(client, staff_headers)
    entries = (await db_session.execute(select(AuditLog).where(AuditLog.action_type == "CREATE"))).scalars().all()
    assert len(entries) == 1
    assert str(entries[0].entity_id) == data["id"]
    assert entries[0].performed_by_name == "Staff Member"


@pytest.mark.asyncio
async def test_list_search_and_status_filter(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    await _create(client, staff_headers, full_name="Rahul Sharma")
    await _create(client, staff_headers, full_name="Priya Singh", course="Typing Certificate")
    await _create(
        client, staff_headers,
        full_name="Amit Kumar", course="Private Tuition", fees_amount=500, course_duration=0, fees_status="paid",
    )

    response = await client.get("/api/v1/students", headers=staff_headers)
    assert response.status_code == 200
    assert len(response.json()) == 3

    response = await client.get("/api/v1/students", params={"q": "typing"}, headers=staff_headers)
    assert [s["full_name"] for s in response.json()] == ["Priya Singh"]

    response = await client.get("/api/v1/students", params={"status": "paid"}, headers=staff_headers)
    assert [s["full_name"] for s in response.json()] == ["Amit Kumar"]

    response = await client.get("/api/v1/students", params={"status": "bogus"}, headers=staff_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_stats(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    first = await _create(client, staff_headers)
    await _create(client, staff_headers, full_name="Priya Singh", course="Typing Certificate")
    await client.patch(
        f"/api/v1/students/{first['id']}/payments/0", json={"is_paid": True}, headers=staff_headers
    )

    response = await client.get("/api/v1/students/stats", headers=staff_headers)
    assert response.status_code == 200
    stats = response.json()
    assert stats["total"] == 2
    assert stats["paid"] == 0
    assert stats["not_paid"] == 2
    assert stats["total_fees"] == 3500
    assert stats["paid_fees"] == 500
    assert stats["pending_fees"] == 3000
    assert stats["collection_rate"] == 14


@pytest.mark.asyncio
async def test_get_update_and_delete(
    client: AsyncClient, db_session: AsyncSession, staff_headers: Dict[str, str]
) -> None:
    created = await _create(client, staff_headers)
    url = f"/api/v1/students/{created['id']}"

    response = await client.get(url, headers=staff_headers)
    assert response.status_code == 200
    assert response.json()["full_name"] == "Rahul Sharma"

    response = await client.put(url, json={"batch": "Evening", "notes": "Prefers weekends"}, headers=staff_headers)
    assert response.status_code == 200
    assert response.json()["batch"] == "Evening"
    assert response.json()["notes"] == "Prefers weekends"
    assert len(response.json()["monthly_payments"]) == 3

    response = await client.delete(url, headers=staff_headers)
    assert response.status_code == 204

    response = await client.get(url, headers=staff_headers)
    assert response.status_code == 404
    remaining = (await db_session.execute(select(MonthlyPayment))).scalars().all()
    assert remaining == []


@pytest.mark.asyncio
async def test_update_cannot_contradict_schedule(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    created = await _create(client, staff_headers)
    response = await client.put(
        f"/api/v1/students/{created['id']}", json={"fees_status": "paid"}, headers=staff_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_summary(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    created = await _create(client, staff_headers)
    response = await client.get(f"/api/v1/students/{created['id']}/summary", headers=staff_headers)
    assert response.status_code == 200
    summary = response.json()
    assert summary["total_amount"] == 1500
    assert summary["payment_count"] == 3
    assert summary["expected_end_date"] == "2025-02-20"


@pytest.mark.asyncio
async def test_payment_toggle_recomputes_status(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    created = await _create(client, staff_headers)
    base = f"/api/v1/students/{created['id']}/payments"

    for index in range(3):
        response = await client.patch(f"{base}/{index}", json={"is_paid": True}, headers=staff_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "APPLIED"
        assert data["payment"]["is_paid"] is True
        assert data["payment"]["paid_date"] is not None

    assert data["student"]["fees_status"] == "paid"

    response = await client.patch(f"{base}/0", json={"is_paid": True}, headers=staff_headers)
    assert response.json()["outcome"] == "UNCHANGED"


@pytest.mark.asyncio
async def test_only_admin_can_revert_payment(
    client: AsyncClient,
    staff_headers: Dict[str, str],
    admin_headers: Dict[str, str],
) -> None:
    created = await _create(client, staff_headers, course="Private Tuition", fees_amount=400, course_duration=1)
    url = f"/api/v1/students/{created['id']}/payments/0"

    response = await client.patch(url, json={"is_paid": True}, headers=staff_headers)
    assert response.json()["student"]["fees_status"] == "paid"

    response = await client.patch(url, json={"is_paid": False}, headers=staff_headers)
    assert response.status_code == 403

    response = await client.get(f"/api/v1/students/{created['id']}", headers=staff_headers)
    assert response.json()["monthly_payments"][0]["is_paid"] is True

    response = await client.patch(url, json={"is_paid": False}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["payment"]["is_paid"] is False
    assert data["payment"]["paid_date"] is None
    assert data["student"]["fees_status"] == "not_paid"


@pytest.mark.asyncio
async def test_payment_index_out_of_range(client: AsyncClient, staff_headers: Dict[str, str]) -> None:
    created = await _create(client, staff_headers)
    response = await client.patch(
        f"/api/v1/students/{created['id']}/payments/3", json={"is_paid": True}, headers=staff_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_students_require_auth(client: AsyncClient) -> None:
    response = await client.get("/api/v1/students")
    assert response.status_code == 401
