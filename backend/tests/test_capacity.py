"""Truck capacity"""
import pytest

from woodyard.services import capacity


def test_packaging_keywords():
    """Item name keyword to packaging type"""
    assert capacity.packaging_for("Oak Pallet") == "WOOD_PALLET"
    assert capacity.packaging_for("cedar bundle") == "WOOD_BUNDLE"
    assert capacity.packaging_for("Kindling Box") == "BOX"
    assert capacity.packaging_for("Small bag") == "RETAIL_PACKAGE_SMALL"
    assert capacity.packaging_for("Large bag") == "RETAIL_PACKAGE_LARGE"
    assert capacity.packaging_for("Firestarter") == "RETAIL_PACKAGE_MEDIUM"


def test_pallet_equivalents():
    """Mixed load in pallets"""
    items = capacity.parse_capacity_items("2x Oak Pallet, 5x Cedar Bundle, 4x Kindling Box")
    assert capacity.pallet_equivalents(items) == pytest.approx(3.1)


def test_free_text_has_no_load():
    """Pricing text is not picker format"""
    assert capacity.parse_capacity_items("1/2 cord, kindling") == []


def test_percentage_is_capped():
    """Percentage tops out at 100"""
    assert capacity.capacity_percentage(2.0, 4.0) == 50
    assert capacity.capacity_percentage(9.0, 4.0) == 100
    assert capacity.capacity_percentage(1.0, 0) == 100


def test_would_exceed_and_remaining():
    """Overload check and headroom"""
    assert capacity.would_exceed(3.5, 0.6, 4.0)
    assert not capacity.would_exceed(3.0, 1.0, 4.0)
    assert capacity.remaining_capacity(5.0, 4.0) == 0.0
    assert capacity.remaining_capacity(1.5, 4.0) == 2.5


def test_estimate_minutes():
    """Base time plus time per pallet"""
    assert capacity.estimate_delivery_minutes([]) == 15
    items = capacity.parse_capacity_items("1x Oak Pallet, 1x Box")
    assert capacity.estimate_delivery_minutes(items) == 15 + 11
