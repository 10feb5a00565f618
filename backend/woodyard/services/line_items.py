"""Item-picker format: "<qty>x <name> @$<price>", comma separated.

Separate from the pricing text read by services.pricing; the two are not interchangeable.
"""
import re
from collections import Counter
from decimal import Decimal, InvalidOperation
from typing import NamedTuple

from woodyard.services.pricing import split_segments

_ITEM_RE = re.compile(r"^(\d+)x\s+(.+?)(?:\s+@\$(\d+(?:\.\d+)?))?$")


class LineItem(NamedTuple):
    name: str
    quantity: int
    price: Decimal | None = None


def parse_line_item(segment: str) -> LineItem | None:
    m = _ITEM_RE.match(segment.strip())
    if not m:
        return None
    price = None
    if m.group(3):
        try:
            price = Decimal(m.group(3))
        except InvalidOperation:
            price = None
    return LineItem(name=m.group(2).strip(), quantity=int(m.group(1)), price=price)


def parse_items(items: str | None) -> list[LineItem]:
    """Segments that do not follow the picker format are skipped."""
    result = []
    for segment in split_segments(items):
        item = parse_line_item(segment)
        if item is not None:
            result.append(item)
    return result


def format_items(items: list[LineItem]) -> str:
    parts = []
    for item in items:
        text = f"{item.quantity}x {item.name}"
        if item.price is not None:
            text += f" @${item.price}"
        parts.append(text)
    return ", ".join(parts)


def item_totals(items_texts: list[str | None]) -> dict[str, int]:
    """Occurrences of each raw segment across stops (PDF inventory summary)"""
    counter: Counter[str] = Counter()
    for text in items_texts:
        counter.update(split_segments(text))
    return dict(counter)
