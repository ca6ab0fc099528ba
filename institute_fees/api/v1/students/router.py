"""Students router: enrollment CRUD, monthly payment tracker, dashboard stats."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.auth.dependencies import require_approved_user
from institute_fees.auth.schemas import CurrentUser
from institute_fees.core.enums import FeesFilter, PaymentToggleOutcome
from institute_fees.core.exceptions import ServiceError
from institute_fees.core.schemas import StudentFeeSummary
from institute_fees.db.session import get_db

from .schemas import (
    PaymentStatusUpdate,
    PaymentUpdateResponse,
    StatsResponse,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/students", tags=["students"])

REVERT_DENIED_MESSAGE = "Only an admin can mark a paid month as unpaid"


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> StudentResponse:
    try:
        return await service.create_student(db, payload, current_user)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[StudentResponse])
async def list_students(
    q: str = Query("", max_length=100, description="Case-insensitive match on name or course"),
    status_filter: FeesFilter = Query(FeesFilter.all, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> List[StudentResponse]:
    return await service.list_students(db, q, status_filter)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> StatsResponse:
    """Totals over every student; recomputed from the database on each call."""
    return await service.get_stats(db)


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> StudentResponse:
    try:
        return await service.get_student(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{student_id}/summary", response_model=StudentFeeSummary)
async def get_student_summary(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> StudentFeeSummary:
    try:
        return await service.get_student_summary(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: UUID,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> StudentResponse:
    try:
        return await service.update_student(db, student_id, payload, current_user)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> Response:
    try:
        await service.delete_student(db, student_id, current_user)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{student_id}/payments/{payment_index}", response_model=PaymentUpdateResponse)
async def update_payment_status(
    student_id: UUID,
    payment_index: int,
    payload: PaymentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> PaymentUpdateResponse:
    """Toggle one month of the schedule. Reverting a paid month to unpaid is admin-only."""
    try:
        result = await service.set_payment_status(
            db, student_id, payment_index, payload.is_paid, current_user
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if result.outcome == PaymentToggleOutcome.DENIED:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=REVERT_DENIED_MESSAGE)
    return PaymentUpdateResponse(
        outcome=result.outcome,
        payment_index=result.payment_index,
        payment=result.current,
        student=result.student,
    )
