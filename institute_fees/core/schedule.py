"""Monthly payment schedule generation for a new enrollment."""

import calendar
from datetime import date
from typing import List

from institute_fees.core.schemas import MonthlyPaymentRecord


def add_months(value: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping the day to the target month's length."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def generate_schedule(
    enrollment_date: date,
    duration_months: int,
    total_fee: int,
) -> List[MonthlyPaymentRecord]:
    """
    Split total_fee into duration_months unpaid obligations, one per calendar month
    starting with the enrollment month.

    Every obligation gets total_fee // duration_months; whatever is left over goes
    entirely to the last one, so the amounts always sum to total_fee.
    """
    if duration_months < 0:
        raise ValueError("duration_months cannot be negative")
    if total_fee < 0:
        raise ValueError("total_fee cannot be negative")
    if duration_months == 0:
        return []

    base = total_fee // duration_months
    remainder = total_fee - base * duration_months
    last = duration_months - 1

    schedule: List[MonthlyPaymentRecord] = []
    for i in range(duration_months):
        due = add_months(enrollment_date, i)
        schedule.append(
            MonthlyPaymentRecord(
                month=due.month,
                year=due.year,
                amount=base + remainder if i == last else base,
                is_paid=False,
                paid_date=None,
            )
        )
    return schedule
