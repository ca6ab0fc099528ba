from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.auth.rbac import require_admin
from institute_fees.auth.schemas import CurrentUser
from institute_fees.core.exceptions import ServiceError
from institute_fees.db.session import get_db

from .schemas import UserApprovalUpdate, UserResponse, UserRoleUpdate
from . import service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
async def list_users(
    pending_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
) -> List[UserResponse]:
    return await service.list_users(db, pending_only=pending_only)


@router.patch("/{user_id}/approval", response_model=UserResponse)
async def update_approval(
    user_id: UUID,
    payload: UserApprovalUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
) -> UserResponse:
    """Approve a pending sign-up, or revoke access."""
    try:
        return await service.set_approval(db, user_id, payload.is_approved, current_user)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_role(
    user_id: UUID,
    payload: UserRoleUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
) -> UserResponse:
    try:
        return await service.set_role(db, user_id, payload.role, current_user)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
