"""User management: approval of new sign-ups and role changes. Admin only."""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.api.v1.audit_logs.service import log_activity
from institute_fees.auth.models import User
from institute_fees.auth.schemas import CurrentUser
from institute_fees.core.enums import AppRole, AuditAction, AuditEntity
from institute_fees.core.exceptions import NotFoundError, ServiceError

from .schemas import UserResponse

logger = logging.getLogger(__name__)


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        full_name=user.full_name,
        email=user.email,
        role=AppRole(user.role),
        is_approved=user.effective_approval,
        approved_at=user.approved_at,
        created_at=user.created_at,
    )


async def _get_user(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def list_users(db: AsyncSession, pending_only: bool = False) -> List[UserResponse]:
    stmt = select(User).order_by(User.created_at.desc())
    if pending_only:
        stmt = stmt.where(User.is_approved.is_(False), User.role != AppRole.ADMIN.value)
    result = await db.execute(stmt)
    return [_to_response(u) for u in result.scalars().all()]


async def set_approval(
    db: AsyncSession,
    user_id: UUID,
    is_approved: bool,
    actor: CurrentUser,
) -> UserResponse:
    user = await _get_user(db, user_id)
    before = {"is_approved": bool(user.is_approved)}
    user.is_approved = is_approved
    user.approved_by = actor.id if is_approved else None
    user.approved_at = datetime.now(timezone.utc) if is_approved else None
    log_activity(
        db, actor, AuditAction.UPDATE, AuditEntity.USER, user.id,
        before=before,
        after={"is_approved": is_approved},
        description=f"{'Approved' if is_approved else 'Revoked approval for'} user: {user.email}",
    )
    await db.commit()
    logger.info("User %s approval set to %s by %s", user.email, is_approved, actor.email)
    return _to_response(user)


async def _admin_count(db: AsyncSession) -> int:
    stmt = select(func.count()).select_from(User).where(User.role == AppRole.ADMIN.value)
    return (await db.execute(stmt)).scalar_one()


async def set_role(
    db: AsyncSession,
    user_id: UUID,
    role: AppRole,
    actor: Optional[CurrentUser],
) -> UserResponse:
    user = await _get_user(db, user_id)
    old_role = user.role
    if old_role == role.value:
        return _to_response(user)
    if old_role == AppRole.ADMIN.value and await _admin_count(db) <= 1:
        raise ServiceError("Cannot demote the last admin", status.HTTP_400_BAD_REQUEST)

    user.role = role.value
    log_activity(
        db, actor, AuditAction.UPDATE, AuditEntity.USER, user.id,
        before={"role": old_role},
        after={"role": role.value},
        description=f"Changed role of {user.email} to {role.value}",
    )
    await db.commit()
    logger.info("User %s role changed %s -> %s", user.email, old_role, role.value)
    return _to_response(user)
