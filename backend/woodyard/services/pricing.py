"""Stop pricing from free-text item descriptions"""
from collections.abc import Iterable
from decimal import Decimal
from typing import NamedTuple


class PriceRule(NamedTuple):
    """Keyword substring -> unit price"""
    keyword: str
    unit_price: Decimal


# Order matters: first match wins, so bare "cord" must come after the sized cords.
PRICE_RULES: tuple[PriceRule, ...] = (
    PriceRule("1/4 cord", Decimal("75")),
    PriceRule("1/2 cord", Decimal("125")),
    PriceRule("full cord", Decimal("200")),
    PriceRule("cord", Decimal("200")),
    PriceRule("kindling", Decimal("15")),
    PriceRule("cedar", Decimal("12")),
    PriceRule("firestarter", Decimal("8")),
)

DEFAULT_UNIT_PRICE = Decimal("10")


def split_segments(items: str | None) -> list[str]:
    """Comma-separated segments, trimmed, blanks dropped"""
    if not items:
        return []
    return [part.strip() for part in items.split(",") if part.strip()]


def price_segment(segment: str) -> Decimal:
    """Unit price of one segment. Unknown text falls into the default bucket."""
    text = segment.lower()
    for rule in PRICE_RULES:
        if rule.keyword in text:
            return rule.unit_price
    return DEFAULT_UNIT_PRICE


def calculate_price(items: str | None) -> Decimal:
    """
    Price of a stop: sum of one unit price per comma-separated segment.
    A leading "2x" is not read as a quantity; every segment counts once.
    """
    return sum((price_segment(s) for s in split_segments(items)), Decimal("0"))


def schedule_total(prices: Iterable[Decimal | int | float | None]) -> Decimal:
    total = Decimal("0")
    for p in prices:
        if p is not None:
            total += Decimal(str(p))
    return total


def format_price(amount: Decimal | int | float | None) -> str:
    if amount is None:
        return "$0.00"
    return f"${Decimal(str(amount)):,.2f}"
