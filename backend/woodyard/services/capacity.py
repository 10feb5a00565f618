"""Truck capacity in pallet equivalents"""
import math
from collections.abc import Iterable
from typing import NamedTuple

from woodyard.services.line_items import parse_items

PACKAGING_CONVERSIONS: dict[str, float] = {
    "WOOD_PALLET": 1.0,
    "WOOD_BUNDLE": 0.2,  # 5 bundles = 1 pallet
    "RETAIL_PACKAGE_SMALL": 0.05,
    "RETAIL_PACKAGE_MEDIUM": 0.1,
    "RETAIL_PACKAGE_LARGE": 0.2,
    "BOX": 0.025,
}

# Checked in order against the upper-cased item name
_TYPE_KEYWORDS = (
    ("PALLET", "WOOD_PALLET"),
    ("BUNDLE", "WOOD_BUNDLE"),
    ("BOX", "BOX"),
    ("SMALL", "RETAIL_PACKAGE_SMALL"),
    ("LARGE", "RETAIL_PACKAGE_LARGE"),
)
DEFAULT_PACKAGING = "RETAIL_PACKAGE_MEDIUM"

BASE_DELIVERY_MINUTES = 15
MINUTES_PER_PALLET = 10


class CapacityItem(NamedTuple):
    packaging: str
    quantity: int


def packaging_for(name: str) -> str:
    upper = name.upper()
    for keyword, packaging in _TYPE_KEYWORDS:
        if keyword in upper:
            return packaging
    return DEFAULT_PACKAGING


def parse_capacity_items(items: str | None) -> list[CapacityItem]:
    return [CapacityItem(packaging_for(i.name), i.quantity) for i in parse_items(items)]


def pallet_equivalents(items: Iterable[CapacityItem]) -> float:
    return sum(PACKAGING_CONVERSIONS.get(i.packaging, 0.0) * i.quantity for i in items)


def capacity_percentage(load: float, max_pallets: float) -> int:
    """Rounded, capped at 100. No capacity counts as full."""
    if max_pallets <= 0:
        return 100
    return min(round(load / max_pallets * 100), 100)


def would_exceed(current: float, additional: float, max_pallets: float) -> bool:
    return current + additional > max_pallets


def remaining_capacity(load: float, max_pallets: float) -> float:
    return max(0.0, max_pallets - load)


def estimate_delivery_minutes(items: Iterable[CapacityItem]) -> int:
    return BASE_DELIVERY_MINUTES + math.ceil(pallet_equivalents(items) * MINUTES_PER_PALLET)
