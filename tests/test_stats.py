from datetime import date

from institute_fees.core.enums import FeesStatus
from institute_fees.core.payments import set_payment_paid
from institute_fees.core.schedule import generate_schedule
from institute_fees.core.schemas import FeeStats, StudentRecord
from institute_fees.core.stats import (
    collection_rate,
    compute_stats,
    pending_fees,
    percentage,
    summarize_student,
)


def _student(name: str, months: int, fee: int, paid_months: int = 0, enrolled=date(2024, 11, 20)) -> StudentRecord:
    student = StudentRecord(
        full_name=name,
        course="Certificate in Tally ERP9",
        fees_amount=fee,
        course_duration=months,
        enrollment_date=enrolled,
        monthly_payments=generate_schedule(enrolled, months, fee) if months else [],
    )
    for i in range(paid_months):
        student = set_payment_paid(student, i, True, is_admin=False).student
    return student


def test_compute_stats_totals() -> None:
    students = [
        _student("A", 4, 4000, paid_months=1),
        _student("B", 4, 4000, paid_months=1),
    ]
    stats = compute_stats(students)
    assert stats.total == 2
    assert stats.paid == 0
    assert stats.not_paid == 2
    assert stats.total_fees == 8000
    assert stats.paid_fees == 2000
    assert pending_fees(stats) == 6000
    assert collection_rate(stats.paid_fees, stats.total_fees) == 25


def test_compute_stats_counts_fully_paid() -> None:
    students = [_student("A", 2, 1000, paid_months=2), _student("B", 2, 1000)]
    stats = compute_stats(students)
    assert stats.paid == 1
    assert stats.not_paid == 1
    assert stats.paid + stats.not_paid == stats.total


def test_student_without_schedule_uses_fees_amount() -> None:
    student = _student("Legacy", 0, 3000).model_copy(update={"fees_status": FeesStatus.paid})
    stats = compute_stats([student])
    assert stats.total_fees == 3000
    assert stats.paid_fees == 0
    assert stats.paid == 1


def test_empty_list() -> None:
    assert compute_stats([]) == FeeStats()


def test_percentage_rounding_and_zero_division() -> None:
    assert percentage(0, 0) == 0
    assert collection_rate(500, 0) == 0
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67
    assert percentage(1, 8) == 13
    assert percentage(5, 5) == 100


def test_summarize_student_midway() -> None:
    student = _student("C", 3, 1500, paid_months=1)
    summary = summarize_student(student, today=date(2025, 1, 10))
    assert summary.total_amount == 1500
    assert summary.total_paid == 500
    assert summary.total_pending == 1000
    assert summary.paid_count == 1
    assert summary.payment_count == 3
    assert summary.payment_progress == 33
    assert summary.amount_progress == 33
    assert summary.expected_end_date == date(2025, 2, 20)
    assert summary.course_completed is False
    assert summary.days_remaining == 41
    assert summary.months_completed == 1
    assert (summary.next_due.month, summary.next_due.year) == (12, 2024)


def test_summarize_student_completed() -> None:
    student = _student("D", 3, 1500, paid_months=3)
    summary = summarize_student(student, today=date(2025, 6, 1))
    assert summary.course_completed is True
    assert summary.days_remaining == 0
    assert summary.months_completed == 3
    assert summary.next_due is None
    assert summary.payment_progress == 100
