import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import status
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.api.v1.audit_logs.service import log_activity
from institute_fees.auth.models import RefreshToken, User
from institute_fees.auth.schemas import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from institute_fees.auth.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)
from institute_fees.core.enums import AppRole, AuditAction, AuditEntity
from institute_fees.core.exceptions import ServiceError

logger = logging.getLogger(__name__)


def to_current_user(user: User) -> CurrentUser:
    return CurrentUser(
        id=user.id,
        full_name=user.full_name,
        email=user.email,
        role=AppRole(user.role),
        is_approved=user.effective_approval,
    )


def _user_info(user: User) -> UserInfo:
    return UserInfo(
        id=user.id,
        name=user.full_name,
        email=user.email,
        role=AppRole(user.role),
        is_approved=user.effective_approval,
    )


async def register_user(db: AsyncSession, payload: RegisterRequest) -> RegisterResponse:
    existing = (
        await db.execute(select(User).where(func.lower(User.email) == func.lower(payload.email)))
    ).scalar_one_or_none()
    if existing:
        raise ServiceError("Email is already in use", status.HTTP_409_CONFLICT)

    user = User(
        full_name=payload.full_name.strip(),
        email=payload.email.lower(),
        password_hash=hash_password(payload.password),
        role=AppRole.USER.value,
        is_approved=False,
        status="ACTIVE",
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ServiceError("Email is already in use", status.HTTP_409_CONFLICT) from e

    logger.info("Registered user %s; awaiting approval", user.email)
    return RegisterResponse(
        success=True,
        message="Account created. An administrator must approve it before you can access student data.",
        user_id=user.id,
        is_approved=False,
    )


async def _issue_tokens(db: AsyncSession, user: User) -> LoginResponse:
    issued_at = datetime.now(timezone.utc)
    access_payload = {
        "sub": str(user.id),
        "user_id": str(user.id),
        "role": user.role,
        "iat": int(issued_at.timestamp()),
    }
    access_token = create_access_token(subject=access_payload)
    refresh_token_str, refresh_expires_at = create_refresh_token()
    db.add(RefreshToken(user_id=user.id, token=refresh_token_str, expires_at=refresh_expires_at))
    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token_str,
        user=_user_info(user),
        issued_at=issued_at,
    )


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    # 1. Find user by email (case-insensitive)
    user_stmt = select(User).where(func.lower(User.email) == func.lower(payload.email))
    user: Optional[User] = (await db.execute(user_stmt)).scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise ServiceError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

    # 2. Check user status
    if user.status != "ACTIVE":
        raise ServiceError("User is inactive", status.HTTP_403_FORBIDDEN)

    # 3. Access + refresh token, login audit entry
    response = await _issue_tokens(db, user)
    log_activity(
        db,
        to_current_user(user),
        AuditAction.LOGIN,
        AuditEntity.USER,
        user.id,
        description="User logged in",
    )
    try:
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.exception("Failed to persist login state for %s", user.email)
        raise ServiceError(
            "Failed to persist authentication state",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        ) from e
    return response


async def refresh_session(db: AsyncSession, refresh_token: str) -> LoginResponse:
    """Rotate a refresh token: the presented token is consumed and a new pair is issued."""
    stored: Optional[RefreshToken] = (
        await db.execute(select(RefreshToken).where(RefreshToken.token == refresh_token))
    ).scalar_one_or_none()
    if not stored:
        raise ServiceError("Invalid refresh token", status.HTTP_401_UNAUTHORIZED)

    expires_at = stored.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at <= datetime.now(timezone.utc):
        await db.delete(stored)
        await db.commit()
        raise ServiceError("Refresh token expired", status.HTTP_401_UNAUTHORIZED)

    user = await db.get(User, stored.user_id)
    if not user or user.status != "ACTIVE":
        raise ServiceError("User is inactive", status.HTTP_403_FORBIDDEN)

    await db.delete(stored)
    response = await _issue_tokens(db, user)
    await db.commit()
    return response


async def logout_user(db: AsyncSession, user_id, refresh_token: Optional[str] = None) -> None:
    """Drop one refresh token, or every token of the user when none is given."""
    stmt = delete(RefreshToken).where(RefreshToken.user_id == user_id)
    if refresh_token:
        stmt = stmt.where(RefreshToken.token == refresh_token)
    await db.execute(stmt)
    await db.commit()
