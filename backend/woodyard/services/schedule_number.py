"""Schedule number generation: DS-<YYMMDD>-<WEEKDAY>-<DRIVERCODE>"""
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timezone
from typing import NamedTuple

SCHEDULE_PREFIX = "DS"
DEFAULT_DRIVER_PREFIX = "driver-"
NO_DRIVER_CODE = "D00"
UNKNOWN_WEEKDAY = "XXX"

# Indexed by date.weekday() (Monday == 0)
WEEKDAY_CODES = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")


class ParsedDate(NamedTuple):
    """Result of parsing a delivery date: either value or error is set."""
    value: date | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def parse_delivery_date(raw: str | date | None) -> ParsedDate:
    """YYYY-MM-DD or a full ISO-8601 timestamp. Never raises."""
    if isinstance(raw, datetime):
        return ParsedDate(raw.date())
    if isinstance(raw, date):
        return ParsedDate(raw)
    if raw is None or not str(raw).strip():
        return ParsedDate(None, "empty date")
    s = str(raw).strip()
    try:
        return ParsedDate(date.fromisoformat(s))
    except ValueError:
        pass
    try:
        # "Z" suffix is not accepted by fromisoformat before 3.11
        return ParsedDate(datetime.fromisoformat(s.replace("Z", "+00:00")).date())
    except ValueError:
        return ParsedDate(None, f"unparseable date: {s[:32]}")


def weekday_code(raw: str | date | None) -> str:
    parsed = parse_delivery_date(raw)
    if not parsed.ok:
        return UNKNOWN_WEEKDAY
    return WEEKDAY_CODES[parsed.value.weekday()]


def creation_stamp(now: datetime) -> str:
    """YYMMDD of the creation instant, UTC. Naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).strftime("%y%m%d")


def _driver_sort_key(token: str) -> tuple[int, int, str]:
    if token.isdigit():
        return (0, int(token), token)
    return (1, 0, token)


def driver_code(driver_ids: Iterable[str | int | None], prefix: str = DEFAULT_DRIVER_PREFIX) -> str:
    """
    Dedupe, strip the namespace prefix, sort ascending and concatenate behind "D".
    ["driver-3", "driver-1"] -> "D13"; no drivers -> "D00".
    """
    tokens: set[str] = set()
    for raw in driver_ids:
        if raw is None:
            continue
        token = str(raw).strip()
        if prefix and token.startswith(prefix):
            token = token[len(prefix):]
        if token:
            tokens.add(token)
    if not tokens:
        return NO_DRIVER_CODE
    return "D" + "".join(sorted(tokens, key=_driver_sort_key))


def generate_schedule_number(
    delivery_date_iso: str | date | None,
    driver_ids: Sequence[str | int | None],
    now: datetime,
    prefix: str = DEFAULT_DRIVER_PREFIX,
) -> str:
    """Pure for a fixed `now`; a bad delivery date yields the XXX weekday."""
    return "-".join(
        (
            SCHEDULE_PREFIX,
            creation_stamp(now),
            weekday_code(delivery_date_iso),
            driver_code(driver_ids, prefix=prefix),
        )
    )
