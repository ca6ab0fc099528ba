"""Portfolio-wide fee statistics and the per-student fee summary."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from institute_fees.core.enums import FeesStatus
from institute_fees.core.schedule import add_months
from institute_fees.core.schemas import FeeStats, StudentFeeSummary, StudentRecord


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up; 0 when whole is 0."""
    if not whole:
        return 0
    value = Decimal(part) * Decimal(100) / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def collection_rate(collected: int, expected: int) -> int:
    return percentage(collected, expected)


def student_total_fees(student: StudentRecord) -> int:
    """Sum of the schedule amounts, or fees_amount when there is no schedule."""
    if student.monthly_payments:
        return sum(p.amount for p in student.monthly_payments)
    return student.fees_amount


def student_paid_fees(student: StudentRecord) -> int:
    return sum(p.amount for p in student.monthly_payments if p.is_paid)


def compute_stats(students: Iterable[StudentRecord]) -> FeeStats:
    stats = FeeStats()
    for s in students:
        stats.total += 1
        if s.fees_status == FeesStatus.paid:
            stats.paid += 1
        elif s.fees_status == FeesStatus.not_paid:
            stats.not_paid += 1
        stats.total_fees += student_total_fees(s)
        stats.paid_fees += student_paid_fees(s)
    return stats


def pending_fees(stats: FeeStats) -> int:
    return stats.total_fees - stats.paid_fees


def _whole_months_between(start: date, end: date) -> int:
    """Number of complete calendar months from start to end (negative when end < start)."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and add_months(start, months) > end:
        months -= 1
    elif months < 0 and add_months(start, months) < end:
        months += 1
    return months


def summarize_student(student: StudentRecord, today: Optional[date] = None) -> StudentFeeSummary:
    today = today or date.today()
    payments = student.monthly_payments
    paid = [p for p in payments if p.is_paid]
    unpaid = [p for p in payments if not p.is_paid]

    total_amount = sum(p.amount for p in payments)
    total_paid = sum(p.amount for p in paid)

    summary = StudentFeeSummary(
        total_amount=total_amount,
        total_paid=total_paid,
        total_pending=total_amount - total_paid,
        paid_count=len(paid),
        payment_count=len(payments),
        payment_progress=percentage(len(paid), len(payments)),
        amount_progress=percentage(total_paid, total_amount),
        next_due=unpaid[0] if unpaid else None,
    )

    if student.enrollment_date is not None:
        duration = max(student.course_duration, 1)
        end = add_months(student.enrollment_date, duration)
        summary.expected_end_date = end
        summary.course_completed = today >= end
        summary.days_remaining = 0 if summary.course_completed else (end - today).days
        elapsed = _whole_months_between(student.enrollment_date, today)
        summary.months_completed = max(0, min(elapsed, duration))
    return summary
