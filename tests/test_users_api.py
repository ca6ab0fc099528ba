from typing import Dict

import pytest
from httpx import AsyncClient

from institute_fees.auth.models import User


@pytest.mark.asyncio
async def test_admin_lists_pending_users(
    client: AsyncClient,
    admin_headers: Dict[str, str],
    staff_user: User,
    pending_user: User,
) -> None:
    response = await client.get("/api/v1/users", headers=admin_headers)
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {
        "admin@institute.com", staff_user.email, pending_user.email,
    }

    response = await client.get("/api/v1/users", params={"pending_only": True}, headers=admin_headers)
    assert [u["email"] for u in response.json()] == [pending_user.email]


@pytest.mark.asyncio
async def test_approval_grants_access(
    client: AsyncClient,
    admin_headers: Dict[str, str],
    pending_user: User,
    pending_headers: Dict[str, str],
) -> None:
    response = await client.get("/api/v1/students", headers=pending_headers)
    assert response.status_code == 403

    response = await client.patch(
        f"/api/v1/users/{pending_user.id}/approval", json={"is_approved": True}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["is_approved"] is True
    assert response.json()["approved_at"] is not None

    response = await client.get("/api/v1/students", headers=pending_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_non_admin_cannot_manage_users(
    client: AsyncClient, staff_headers: Dict[str, str], pending_user: User
) -> None:
    response = await client.get("/api/v1/users", headers=staff_headers)
    assert response.status_code == 403

    response = await client.patch(
        f"/api/v1/users/{pending_user.id}/approval", json={"is_approved": True}, headers=staff_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_promote_user_to_admin(
    client: AsyncClient, admin_headers: Dict[str, str], staff_user: User
) -> None:
    response = await client.patch(
        f"/api/v1/users/{staff_user.id}/role", json={"role": "admin"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_last_admin_cannot_be_demoted(
    client: AsyncClient, admin_user: User, admin_headers: Dict[str, str]
) -> None:
    response = await client.patch(
        f"/api/v1/users/{admin_user.id}/role", json={"role": "user"}, headers=admin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_user(client: AsyncClient, admin_headers: Dict[str, str]) -> None:
    response = await client.patch(
        "/api/v1/users/00000000-0000-0000-0000-000000000000/approval",
        json={"is_approved": True},
        headers=admin_headers,
    )
    assert response.status_code == 404
