"""Schedule number generation"""
from datetime import date, datetime, timedelta, timezone

import pytest

from woodyard.services.schedule_number import (
    NO_DRIVER_CODE,
    UNKNOWN_WEEKDAY,
    creation_stamp,
    driver_code,
    generate_schedule_number,
    parse_delivery_date,
    weekday_code,
)

NOW = datetime(2025, 1, 10, 15, 30, tzinfo=timezone.utc)


def test_format():
    """DS-YYMMDD-DAY-Dnn"""
    assert generate_schedule_number("2025-01-15", ["driver-2"], NOW) == "DS-250110-WED-D2"


def test_no_drivers():
    """D00"""
    assert generate_schedule_number("2025-01-15", [], NOW).endswith("-D00")
    assert driver_code([None, "", "  "]) == NO_DRIVER_CODE


def test_driver_order_does_not_matter():
    """Driver order"""
    a = generate_schedule_number("2025-01-15", ["driver-1", "driver-3"], NOW)
    b = generate_schedule_number("2025-01-15", ["driver-3", "driver-1"], NOW)
    assert a == b
    assert a.endswith("-D13")


def test_duplicates_collapse():
    """Duplicate drivers"""
    assert driver_code(["driver-3", "driver-1", "driver-3"]) == "D13"


def test_numeric_tokens_sort_numerically():
    """9 before 10"""
    assert driver_code(["driver-10", "driver-9"]) == "D910"


def test_custom_prefix_and_int_ids():
    """Other prefixes and integer ids"""
    assert driver_code(["drv_4", "drv_2"], prefix="drv_") == "D24"
    assert driver_code([7, 2]) == "D27"


def test_saturday():
    """SAT segment"""
    assert "-SAT-" in generate_schedule_number("2025-01-18", ["driver-1"], NOW)


def test_only_weekday_segment_changes_with_date():
    """Date only touches the weekday"""
    wed = generate_schedule_number("2025-01-15", ["driver-1"], NOW).split("-")
    thu = generate_schedule_number("2025-01-16", ["driver-1"], NOW).split("-")
    assert [i for i in range(len(wed)) if wed[i] != thu[i]] == [2]


@pytest.mark.parametrize("raw", ["", None, "not-a-date", "2025-13-45"])
def test_bad_date_uses_placeholder(raw):
    """XXX for bad dates"""
    number = generate_schedule_number(raw, [], NOW)
    assert number == f"DS-250110-{UNKNOWN_WEEKDAY}-D00"


def test_parse_delivery_date():
    """Date parsing result"""
    assert parse_delivery_date("2025-01-15").value == date(2025, 1, 15)
    assert parse_delivery_date("2025-01-15T23:00:00Z").value == date(2025, 1, 15)
    assert parse_delivery_date(date(2025, 1, 15)).ok
    bad = parse_delivery_date("garbage")
    assert not bad.ok
    assert bad.error


def test_weekday_code_accepts_date():
    """date objects work too"""
    assert weekday_code(date(2025, 1, 12)) == "SUN"


def test_creation_stamp_is_utc():
    """Stamp uses UTC"""
    est = timezone(timedelta(hours=-5))
    assert creation_stamp(datetime(2025, 1, 10, 22, 0, tzinfo=est)) == "250111"
    assert creation_stamp(datetime(2025, 1, 10, 22, 0)) == "250110"


def test_pure_for_fixed_now():
    """Fixed clock, fixed number"""
    args = ("2025-01-15", ["driver-5", "driver-1"], NOW)
    assert generate_schedule_number(*args) == generate_schedule_number(*args)
