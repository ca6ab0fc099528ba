from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi import status as http_status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.auth.dependencies import get_current_user
from institute_fees.auth.schemas import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
)
from institute_fees.auth.services import (
    ServiceError,
    login_user,
    logout_user,
    refresh_session,
    register_user,
)
from institute_fees.db.session import get_db

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _raise_http(e: ServiceError) -> None:
    if e.status_code == http_status.HTTP_500_INTERNAL_SERVER_ERROR:
        raise HTTPException(status_code=e.status_code, detail="Internal server error")
    raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=http_status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> RegisterResponse:
    try:
        return await register_user(db, payload)
    except ServiceError as e:
        _raise_http(e)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=http_status.HTTP_200_OK,
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    try:
        return await login_user(db, payload)
    except ServiceError as e:
        _raise_http(e)


@router.post("/login-oauth")
async def login_oauth(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    payload = LoginRequest(
        email=form_data.username.strip(),
        password=form_data.password,
    )
    try:
        result = await login_user(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {
        "access_token": result.access_token,
        "token_type": "bearer",
    }


@router.post("/refresh", response_model=LoginResponse)
async def refresh(
    payload: RefreshRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    try:
        return await refresh_session(db, payload.refresh_token)
    except ServiceError as e:
        _raise_http(e)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    refresh_token: Optional[str] = Body(None, embed=True),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> MessageResponse:
    """Sign out. Without a refresh_token every session of the user is ended."""
    await logout_user(db, current_user.id, refresh_token)
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=CurrentUser)
async def me(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Current identity, role and approval state; unapproved users use this for the pending page."""
    return current_user
