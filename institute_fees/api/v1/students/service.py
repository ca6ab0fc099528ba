"""Students service: enrollment CRUD, payment toggling, stats. Every mutation is audited."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from institute_fees.api.v1.audit_logs.service import log_activity
from institute_fees.auth.schemas import CurrentUser
from institute_fees.core.courses import find_course_by_name
from institute_fees.core.enums import AuditAction, AuditEntity, FeesFilter, PaymentToggleOutcome
from institute_fees.core.exceptions import NotFoundError, ServiceError
from institute_fees.core.filters import filter_students
from institute_fees.core.models import MonthlyPayment, Student
from institute_fees.core.payments import derive_fees_status, set_payment_paid
from institute_fees.core.schedule import generate_schedule
from institute_fees.core.schemas import PaymentToggleResult, StudentFeeSummary
from institute_fees.core.stats import collection_rate, compute_stats, pending_fees, summarize_student

from .schemas import StatsResponse, StudentCreate, StudentResponse, StudentUpdate

logger = logging.getLogger(__name__)


def _to_response(student: Student) -> StudentResponse:
    return StudentResponse.model_validate(student)


def _snapshot(student: Union[Student, StudentResponse]) -> Dict[str, Any]:
    """Fields recorded in the audit trail for student changes."""
    return {
        "full_name": student.full_name,
        "course": student.course,
        "batch": student.batch,
        "fees_amount": student.fees_amount,
    }


async def _get_student(db: AsyncSession, student_id: UUID) -> Student:
    stmt = (
        select(Student)
        .where(Student.id == student_id)
        .options(selectinload(Student.monthly_payments))
        .execution_options(populate_existing=True)
    )
    student = (await db.execute(stmt)).scalar_one_or_none()
    if not student:
        raise NotFoundError("Student not found")
    return student


async def _commit(db: AsyncSession, failure_message: str) -> None:
    """Commit the unit of work or roll all of it back."""
    try:
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.exception(failure_message)
        raise ServiceError(failure_message, status.HTTP_500_INTERNAL_SERVER_ERROR) from e


async def load_students(db: AsyncSession) -> List[StudentResponse]:
    """Fresh snapshot of every student with their schedule, newest enrollment record first."""
    stmt = (
        select(Student)
        .options(selectinload(Student.monthly_payments))
        .order_by(Student.created_at.desc())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return [_to_response(s) for s in result.scalars().all()]


async def list_students(
    db: AsyncSession,
    query: str = "",
    status_filter: FeesFilter = FeesFilter.all,
) -> List[StudentResponse]:
    return filter_students(await load_students(db), query, status_filter)


async def get_stats(db: AsyncSession) -> StatsResponse:
    stats = compute_stats(await load_students(db))
    return StatsResponse(
        **stats.model_dump(),
        pending_fees=pending_fees(stats),
        collection_rate=collection_rate(stats.paid_fees, stats.total_fees),
    )


async def get_student(db: AsyncSession, student_id: UUID) -> StudentResponse:
    return _to_response(await _get_student(db, student_id))


async def get_student_summary(
    db: AsyncSession,
    student_id: UUID,
    today: Optional[date] = None,
) -> StudentFeeSummary:
    return summarize_student(await get_student(db, student_id), today)


async def create_student(
    db: AsyncSession,
    payload: StudentCreate,
    actor: CurrentUser,
) -> StudentResponse:
    course = find_course_by_name(payload.course)

    fees_amount = payload.fees_amount
    if fees_amount is None:
        fees_amount = course.total_fee if course else 0
    course_duration = payload.course_duration
    if course_duration is None:
        course_duration = course.duration_months if course else 0
    monthly_fee = payload.monthly_fee
    if monthly_fee is None:
        if course:
            monthly_fee = course.monthly_fee
        else:
            monthly_fee = round(fees_amount / course_duration) if course_duration else 0

    schedule = generate_schedule(payload.enrollment_date, course_duration, fees_amount) if course_duration > 0 else []

    student = Student(
        full_name=payload.full_name,
        course=payload.course,
        batch=payload.batch,
        fees_amount=fees_amount,
        monthly_fee=monthly_fee,
        course_duration=course_duration,
        enrollment_date=payload.enrollment_date,
        fees_status=derive_fees_status(schedule, payload.fees_status).value,
        mobile=payload.mobile,
        address=payload.address,
        notes=payload.notes,
        created_by=actor.id,
        monthly_payments=[MonthlyPayment(**p.model_dump()) for p in schedule],
    )
    db.add(student)
    await db.flush()
    log_activity(
        db, actor, AuditAction.CREATE, AuditEntity.STUDENT, student.id,
        after=_snapshot(student),
        description=f"Created new student: {student.full_name}",
    )
    # Student, schedule and audit entry land in one transaction
    await _commit(db, "Failed to add student")
    logger.info("Created student %s with %d scheduled payments", student.id, len(schedule))
    return await get_student(db, student.id)


async def update_student(
    db: AsyncSession,
    student_id: UUID,
    payload: StudentUpdate,
    actor: CurrentUser,
) -> StudentResponse:
    student = await _get_student(db, student_id)
    before = _snapshot(student)

    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    requested_status = changes.pop("fees_status", None)
    if requested_status is not None:
        if student.monthly_payments:
            derived = derive_fees_status(student.monthly_payments)
            if requested_status != derived:
                raise ServiceError(
                    "fees_status is derived from the payment schedule and cannot be set directly",
                    status.HTTP_400_BAD_REQUEST,
                )
        else:
            student.fees_status = requested_status.value

    for field, value in changes.items():
        setattr(student, field, value)

    log_activity(
        db, actor, AuditAction.UPDATE, AuditEntity.STUDENT, student.id,
        before=before,
        after=_snapshot(student),
        description=f"Updated student: {student.full_name}",
    )
    await _commit(db, "Failed to update student")
    logger.info("Updated student %s (%s)", student_id, ", ".join(sorted(changes)) or "no field changes")
    return await get_student(db, student_id)


async def delete_student(db: AsyncSession, student_id: UUID, actor: CurrentUser) -> None:
    student = await _get_student(db, student_id)
    log_activity(
        db, actor, AuditAction.DELETE, AuditEntity.STUDENT, student.id,
        before=_snapshot(student),
        description=f"Deleted student: {student.full_name}",
    )
    # cascade removes the monthly payments with the student
    await db.delete(student)
    await _commit(db, "Failed to delete student")
    logger.info("Deleted student %s", student_id)


async def set_payment_status(
    db: AsyncSession,
    student_id: UUID,
    payment_index: int,
    is_paid: bool,
    actor: CurrentUser,
) -> PaymentToggleResult:
    """
    Mark one scheduled month paid or unpaid and recompute fees_status.

    A DENIED result (non-admin reverting a paid month) is returned, not raised;
    nothing is written in that case.
    """
    student = await _get_student(db, student_id)
    try:
        result = set_payment_paid(_to_response(student), payment_index, is_paid, is_admin=actor.is_admin)
    except IndexError as e:
        raise NotFoundError("Payment not found") from e

    if result.outcome != PaymentToggleOutcome.APPLIED:
        return result

    payment = student.monthly_payments[payment_index]
    payment.is_paid = result.current.is_paid
    payment.paid_date = result.current.paid_date
    student.fees_status = result.student.fees_status.value
    log_activity(
        db, actor, AuditAction.UPDATE, AuditEntity.PAYMENT, payment.id,
        before={"is_paid": result.previous.is_paid, "month": payment.month, "year": payment.year},
        after={"is_paid": result.current.is_paid, "month": payment.month, "year": payment.year},
        description=f"Updated payment for: {student.full_name}",
    )
    await _commit(db, "Failed to update payment")
    logger.info(
        "Payment %s/%s of student %s marked %s",
        payment.month, payment.year, student_id, "paid" if is_paid else "unpaid",
    )
    refreshed = await get_student(db, student_id)
    return result.model_copy(update={"student": refreshed, "current": refreshed.monthly_payments[payment_index]})
