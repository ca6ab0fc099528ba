from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.auth.models import User
from institute_fees.auth.schemas import CurrentUser
from institute_fees.auth.security import decode_access_token
from institute_fees.auth.services import to_current_user
from institute_fees.db.session import get_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login-oauth")

PENDING_APPROVAL_MESSAGE = "Your account is pending approval by an administrator."


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the authenticated user, with current role and approval state, from the access token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    user_id_str = payload.get("user_id") or payload.get("sub")
    if not user_id_str:
        raise credentials_exception
    try:
        user_id = UUID(user_id_str)
    except ValueError:
        raise credentials_exception

    # Role and approval are read from the DB, not the token, so admin changes apply immediately
    user = await db.get(User, user_id)
    if not user or user.status != "ACTIVE":
        raise credentials_exception
    return to_current_user(user)


async def require_approved_user(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Dependency: block users whose sign-up has not been approved yet."""
    if not current_user.is_approved:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=PENDING_APPROVAL_MESSAGE,
        )
    return current_user
