from datetime import date

import pytest

from institute_fees.core.schedule import add_months, generate_schedule


def test_amounts_sum_to_total_fee() -> None:
    for months, fee in [(3, 1500), (3, 1000), (7, 5000), (14, 5700), (18, 8200), (1, 999), (5, 3)]:
        schedule = generate_schedule(date(2024, 4, 10), months, fee)
        assert len(schedule) == months
        assert sum(p.amount for p in schedule) == fee


def test_remainder_goes_to_last_month() -> None:
    schedule = generate_schedule(date(2024, 1, 5), 3, 1000)
    assert [p.amount for p in schedule] == [333, 333, 334]


def test_schedule_rolls_over_year_end() -> None:
    schedule = generate_schedule(date(2024, 11, 20), 3, 1500)
    assert [(p.month, p.year) for p in schedule] == [(11, 2024), (12, 2024), (1, 2025)]
    assert all(p.amount == 500 for p in schedule)


def test_new_schedule_is_unpaid() -> None:
    schedule = generate_schedule(date(2024, 6, 1), 6, 2500)
    assert all(not p.is_paid and p.paid_date is None for p in schedule)


def test_zero_duration_gives_empty_schedule() -> None:
    assert generate_schedule(date(2024, 6, 1), 0, 2500) == []


def test_fee_smaller_than_duration() -> None:
    schedule = generate_schedule(date(2024, 6, 1), 4, 2)
    assert [p.amount for p in schedule] == [0, 0, 0, 2]


@pytest.mark.parametrize("months,fee", [(-1, 1000), (3, -5)])
def test_negative_inputs_rejected(months: int, fee: int) -> None:
    with pytest.raises(ValueError):
        generate_schedule(date(2024, 6, 1), months, fee)


def test_add_months_clamps_day() -> None:
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 3, 15), -3) == date(2023, 12, 15)
