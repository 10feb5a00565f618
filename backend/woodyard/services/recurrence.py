"""Next delivery dates for recurring orders"""
from calendar import monthrange
from datetime import date, timedelta

import structlog

log = structlog.get_logger(__name__)

FREQUENCIES = ("daily", "weekly", "bi-weekly", "monthly")
DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
POSITIONS = {"first": 0, "second": 1, "third": 2, "fourth": 3}


def normalize_frequency(frequency: str) -> str:
    f = (frequency or "").strip().lower()
    return "bi-weekly" if f == "biweekly" else f


def day_index(day: str) -> int:
    """Monday == 0, as date.weekday(). -1 for unknown names."""
    name = (day or "").strip().lower()
    return DAY_NAMES.index(name) if name in DAY_NAMES else -1


def next_weekday(start: date, weekday: int) -> date:
    """start itself when it already falls on weekday"""
    return start + timedelta(days=(weekday - start.weekday()) % 7)


def _add_months(d: date, months: int) -> date:
    month_index = d.month - 1 + months
    year, month = d.year + month_index // 12, month_index % 12 + 1
    return date(year, month, min(d.day, monthrange(year, month)[1]))


def nth_weekday_of_month(year: int, month: int, position: str, weekday: int) -> date:
    if position == "last":
        last = date(year, month, monthrange(year, month)[1])
        return last - timedelta(days=(last.weekday() - weekday) % 7)
    if position not in POSITIONS:
        raise ValueError(f"invalid position: {position}")
    first = next_weekday(date(year, month, 1), weekday)
    return first + timedelta(weeks=POSITIONS[position])


def next_monthly_pattern(start: date, position: str, weekday: int) -> date:
    candidate = nth_weekday_of_month(start.year, start.month, position, weekday)
    if candidate < start:
        following = _add_months(start.replace(day=1), 1)
        candidate = nth_weekday_of_month(following.year, following.month, position, weekday)
    return candidate


def next_day_of_month(start: date, day_of_month: int) -> date:
    """Clamped to the month's last day (31 -> Feb 28/29)."""
    candidate = start.replace(day=min(day_of_month, monthrange(start.year, start.month)[1]))
    if candidate < start:
        following = _add_months(start.replace(day=1), 1)
        candidate = following.replace(
            day=min(day_of_month, monthrange(following.year, following.month)[1])
        )
    return candidate


def calculate_next_occurrences(
    start: date,
    frequency: str,
    preferred_day: str | None,
    count: int,
) -> list[date]:
    """
    Next `count` delivery dates on or after `start`.
    preferred_day: weekday name (weekly/bi-weekly), "<position> <weekday>" or a day number (monthly).
    Unusable input yields an empty list.
    """
    if count <= 0:
        return []
    freq = normalize_frequency(frequency)
    day = (preferred_day or "").strip().lower()

    if freq == "daily":
        return [start + timedelta(days=i) for i in range(count)]

    if freq in ("weekly", "bi-weekly"):
        idx = day_index(day)
        if idx < 0:
            log.warning("recurrence_invalid_day", frequency=freq, preferred_day=preferred_day)
            return []
        first = next_weekday(start, idx)
        step = timedelta(weeks=1 if freq == "weekly" else 2)
        return [first + step * i for i in range(count)]

    if freq == "monthly":
        if " " in day:
            position, _, name = day.partition(" ")
            idx = day_index(name)
            if idx < 0 or (position not in POSITIONS and position != "last"):
                log.warning("recurrence_invalid_pattern", preferred_day=preferred_day)
                return []
            current = next_monthly_pattern(start, position, idx)
            result = [current]
            while len(result) < count:
                nxt = _add_months(current.replace(day=1), 1)
                current = nth_weekday_of_month(nxt.year, nxt.month, position, idx)
                result.append(current)
            return result
        try:
            dom = int(day)
        except ValueError:
            dom = 0
        if not 1 <= dom <= 31:
            log.warning("recurrence_invalid_day_of_month", preferred_day=preferred_day)
            return []
        current = next_day_of_month(start, dom)
        result = [current]
        while len(result) < count:
            nxt = _add_months(current.replace(day=1), 1)
            current = nxt.replace(day=min(dom, monthrange(nxt.year, nxt.month)[1]))
            result.append(current)
        return result

    log.warning("recurrence_unknown_frequency", frequency=frequency)
    return []


def occurs_on(target: date, frequency: str, preferred_day: str | None, anchor: date | None = None) -> bool:
    """
    True when the order delivers on `target`. Bi-weekly cadence is counted from `anchor`
    (the order's start date); without one, any matching weekday qualifies.
    """
    freq = normalize_frequency(frequency)
    if freq == "bi-weekly" and anchor is not None:
        if target < anchor:
            return False
        occurrences = calculate_next_occurrences(anchor, freq, preferred_day, 1)
        if not occurrences:
            return False
        return (target - occurrences[0]).days % 14 == 0
    occurrences = calculate_next_occurrences(target, freq, preferred_day, 1)
    return bool(occurrences) and occurrences[0] == target
