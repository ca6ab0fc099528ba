"""Marking scheduled obligations paid / unpaid and keeping fees_status in sync."""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from institute_fees.core.enums import FeesStatus, PaymentToggleOutcome
from institute_fees.core.schemas import MonthlyPaymentRecord, PaymentToggleResult, StudentRecord

logger = logging.getLogger(__name__)


def derive_fees_status(
    payments: Sequence[MonthlyPaymentRecord],
    fallback: FeesStatus = FeesStatus.not_paid,
) -> FeesStatus:
    """paid iff every obligation is paid. A student without a schedule keeps fallback."""
    if not payments:
        return fallback
    return FeesStatus.paid if all(p.is_paid for p in payments) else FeesStatus.not_paid


def can_mark_unpaid(is_admin: bool) -> bool:
    """Reverting a paid obligation is an admin-only action."""
    return is_admin


def set_payment_paid(
    student: StudentRecord,
    payment_index: int,
    is_paid: bool,
    *,
    is_admin: bool,
    now: Optional[datetime] = None,
) -> PaymentToggleResult:
    """
    Return a copy of student with obligation payment_index set to is_paid.

    The input record is never mutated. A non-admin asking to revert a paid
    obligation gets a DENIED result carrying the unchanged student.
    """
    payments = student.monthly_payments
    if not 0 <= payment_index < len(payments):
        raise IndexError(
            f"payment_index {payment_index} out of range for {len(payments)} scheduled payments"
        )

    previous = payments[payment_index]

    if previous.is_paid == is_paid:
        return PaymentToggleResult(
            outcome=PaymentToggleOutcome.UNCHANGED,
            student=student,
            payment_index=payment_index,
            previous=previous,
            current=previous,
        )

    if previous.is_paid and not is_paid and not can_mark_unpaid(is_admin):
        logger.warning(
            "Denied reverting payment %s/%s for student %s: admin role required",
            previous.month, previous.year, student.id,
        )
        return PaymentToggleResult(
            outcome=PaymentToggleOutcome.DENIED,
            student=student,
            payment_index=payment_index,
            previous=previous,
            current=previous,
        )

    paid_date = (now or datetime.now(timezone.utc)) if is_paid else None
    current = previous.model_copy(update={"is_paid": is_paid, "paid_date": paid_date})
    updated_payments = list(payments)
    updated_payments[payment_index] = current

    updated = student.model_copy(
        update={
            "monthly_payments": updated_payments,
            "fees_status": derive_fees_status(updated_payments, student.fees_status),
        }
    )
    return PaymentToggleResult(
        outcome=PaymentToggleOutcome.APPLIED,
        student=updated,
        payment_index=payment_index,
        previous=previous,
        current=current,
    )
