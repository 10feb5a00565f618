"""Recurring order date calculation"""
from datetime import date

import pytest

from woodyard.services.recurrence import (
    calculate_next_occurrences,
    nth_weekday_of_month,
    normalize_frequency,
    occurs_on,
)

WED = date(2025, 1, 15)


def test_daily():
    """Every day"""
    assert calculate_next_occurrences(WED, "daily", None, 3) == [
        date(2025, 1, 15), date(2025, 1, 16), date(2025, 1, 17)
    ]


def test_weekly():
    """Every Friday"""
    assert calculate_next_occurrences(WED, "weekly", "Friday", 3) == [
        date(2025, 1, 17), date(2025, 1, 24), date(2025, 1, 31)
    ]


def test_weekly_starts_on_same_day():
    """Start date counts when it matches"""
    assert calculate_next_occurrences(WED, "weekly", "wednesday", 1) == [WED]


def test_biweekly_alias():
    """biweekly == bi-weekly"""
    assert normalize_frequency("Biweekly") == "bi-weekly"
    assert calculate_next_occurrences(WED, "biweekly", "friday", 3) == [
        date(2025, 1, 17), date(2025, 1, 31), date(2025, 2, 14)
    ]


def test_monthly_last_weekday():
    """Last Friday of the month"""
    assert calculate_next_occurrences(WED, "monthly", "last friday", 2) == [
        date(2025, 1, 31), date(2025, 2, 28)
    ]


def test_monthly_first_weekday_rolls_to_next_month():
    """First Monday already passed"""
    assert calculate_next_occurrences(WED, "monthly", "first monday", 2) == [
        date(2025, 2, 3), date(2025, 3, 3)
    ]


def test_monthly_day_number_is_clamped():
    """31st in February"""
    assert calculate_next_occurrences(WED, "monthly", "31", 3) == [
        date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)
    ]


def test_nth_weekday_of_month():
    """Second Tuesday; bad position"""
    assert nth_weekday_of_month(2025, 1, "second", 1) == date(2025, 1, 14)
    with pytest.raises(ValueError):
        nth_weekday_of_month(2025, 1, "fifth", 1)


@pytest.mark.parametrize(
    "frequency,day,count",
    [
        ("weekly", "funday", 3),
        ("monthly", "fifth friday", 3),
        ("monthly", "40", 3),
        ("yearly", "friday", 3),
        ("weekly", "friday", 0),
    ],
)
def test_unusable_input_gives_nothing(frequency, day, count):
    """Bad input, no dates"""
    assert calculate_next_occurrences(WED, frequency, day, count) == []


def test_occurs_on_weekly():
    """Weekly match"""
    assert occurs_on(date(2025, 1, 17), "weekly", "friday")
    assert not occurs_on(date(2025, 1, 16), "weekly", "friday")


def test_occurs_on_biweekly_is_anchored():
    """Fortnight counted from start"""
    assert occurs_on(date(2025, 1, 31), "bi-weekly", "friday", anchor=WED)
    assert not occurs_on(date(2025, 1, 24), "bi-weekly", "friday", anchor=WED)
    assert not occurs_on(date(2025, 1, 10), "bi-weekly", "friday", anchor=WED)


def test_occurs_on_monthly():
    """Monthly match"""
    assert occurs_on(date(2025, 2, 28), "monthly", "last friday")
    assert occurs_on(date(2025, 2, 28), "monthly", "31")
    assert not occurs_on(date(2025, 2, 27), "monthly", "31")
