"""
Date-range analytics over the student list.

Only obligations whose scheduled month falls inside the requested interval are
counted. An obligation is dated on the 15th of its month so that ranges that
start or end on a month boundary never split it.
"""

import calendar
from collections import OrderedDict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from institute_fees.core.enums import DatePreset
from institute_fees.core.schedule import add_months
from institute_fees.core.schemas import (
    CourseBreakdownItem,
    MonthlyBreakdownItem,
    MonthlyPaymentRecord,
    PaymentInRange,
    PieSlice,
    RangeAnalytics,
    StudentRecord,
)
from institute_fees.core.stats import collection_rate

OBLIGATION_DAY = 15
MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _as_date(value) -> Optional[date]:
    """Best effort date coercion; None for missing or unparseable values."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            return None
    return None


def obligation_date(payment: MonthlyPaymentRecord) -> date:
    return date(payment.year, payment.month, OBLIGATION_DAY)


def month_label(year: int, month: int) -> str:
    return f"{MONTH_ABBR[month - 1]} {year % 100:02d}"


def _in_range(value: date, start: date, end: date) -> bool:
    return start <= value <= end


def count_enrollments_in_range(students: Iterable[StudentRecord], start: date, end: date) -> int:
    count = 0
    for s in students:
        enrolled = _as_date(s.enrollment_date)
        if enrolled is not None and _in_range(enrolled, start, end):
            count += 1
    return count


def payments_in_range(students: Iterable[StudentRecord], start: date, end: date) -> List[PaymentInRange]:
    pool: List[PaymentInRange] = []
    for s in students:
        for p in s.monthly_payments:
            if _in_range(obligation_date(p), start, end):
                pool.append(
                    PaymentInRange(
                        student_id=s.id,
                        student_name=s.full_name,
                        course=s.course,
                        year=p.year,
                        month=p.month,
                        amount=p.amount,
                        is_paid=p.is_paid,
                    )
                )
    return pool


def monthly_breakdown(payments: Iterable[PaymentInRange]) -> List[MonthlyBreakdownItem]:
    groups: Dict[Tuple[int, int], MonthlyBreakdownItem] = {}
    for p in payments:
        key = (p.year, p.month)
        item = groups.get(key)
        if item is None:
            item = groups[key] = MonthlyBreakdownItem(
                year=p.year, month=p.month, label=month_label(p.year, p.month)
            )
        if p.is_paid:
            item.collected += p.amount
        else:
            item.pending += p.amount
    return [groups[k] for k in sorted(groups)]


def course_breakdown(
    payments: Iterable[PaymentInRange],
    students: Iterable[StudentRecord],
    start: date,
    end: date,
) -> List[CourseBreakdownItem]:
    groups: "OrderedDict[str, CourseBreakdownItem]" = OrderedDict()
    for p in payments:
        item = groups.get(p.course)
        if item is None:
            item = groups[p.course] = CourseBreakdownItem(course=p.course)
        if p.is_paid:
            item.collected += p.amount
        else:
            item.pending += p.amount
        item.total += p.amount

    for s in students:
        item = groups.get(s.course)
        enrolled = _as_date(s.enrollment_date)
        if item is not None and enrolled is not None and _in_range(enrolled, start, end):
            item.enrolled += 1

    for item in groups.values():
        item.collection_rate = collection_rate(item.collected, item.total)
    # ties keep first-seen order
    return sorted(groups.values(), key=lambda i: i.collected, reverse=True)


def compute_range_analytics(students: Iterable[StudentRecord], start: date, end: date) -> RangeAnalytics:
    if start > end:
        raise ValueError("start must not be after end")
    students = list(students)
    pool = payments_in_range(students, start, end)

    expected = sum(p.amount for p in pool)
    collected = sum(p.amount for p in pool if p.is_paid)
    pending = sum(p.amount for p in pool if not p.is_paid)
    paid_count = sum(1 for p in pool if p.is_paid)

    pie = [
        PieSlice(name="Collected", value=collected),
        PieSlice(name="Pending", value=pending),
    ]
    return RangeAnalytics(
        start=start,
        end=end,
        enrollments_in_range=count_enrollments_in_range(students, start, end),
        total_payments_expected=expected,
        total_payments_collected=collected,
        total_payments_pending=pending,
        paid_count=paid_count,
        unpaid_count=len(pool) - paid_count,
        collection_rate=collection_rate(collected, expected),
        monthly_breakdown=monthly_breakdown(pool),
        course_breakdown=course_breakdown(pool, students, start, end),
        pie_data=[s for s in pie if s.value > 0],
    )


def _month_bounds(value: date) -> Tuple[date, date]:
    last_day = calendar.monthrange(value.year, value.month)[1]
    return value.replace(day=1), value.replace(day=last_day)


def resolve_date_range(
    preset: DatePreset,
    today: Optional[date] = None,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> Tuple[date, date]:
    """Turn a dashboard period preset into an inclusive (start, end) pair."""
    today = today or date.today()
    preset = DatePreset(preset)
    this_start, this_end = _month_bounds(today)

    if preset == DatePreset.last_month:
        return _month_bounds(add_months(this_start, -1))
    if preset == DatePreset.last_3_months:
        return add_months(this_start, -2), this_end
    if preset == DatePreset.last_6_months:
        return add_months(this_start, -5), this_end
    if preset == DatePreset.this_year:
        return date(today.year, 1, 1), date(today.year, 12, 31)
    if preset == DatePreset.custom:
        return custom_start or this_start, custom_end or this_end
    return this_start, this_end
