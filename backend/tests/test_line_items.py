"""Item-picker line format"""
from decimal import Decimal

from woodyard.services.line_items import LineItem, format_items, item_totals, parse_items, parse_line_item


def test_parse_with_price():
    """Quantity, name and price"""
    assert parse_line_item("2x Oak Bundle @$5.50") == LineItem("Oak Bundle", 2, Decimal("5.50"))


def test_parse_without_price():
    """Price is optional"""
    assert parse_line_item("1x Kindling Box") == LineItem("Kindling Box", 1, None)


def test_parse_rejects_free_text():
    """Plain text is not a line item"""
    assert parse_line_item("kindling") is None


def test_parse_items_skips_unparsed():
    """Unparsed segments skipped"""
    items = parse_items("2x Oak Bundle @$5.50, kindling, 3x Cedar Pallet")
    assert [(i.name, i.quantity) for i in items] == [("Oak Bundle", 2), ("Cedar Pallet", 3)]


def test_format_items():
    """Format and parse back"""
    text = format_items([LineItem("Oak Bundle", 2, Decimal("5.50")), LineItem("Box", 1)])
    assert text == "2x Oak Bundle @$5.50, 1x Box"
    assert parse_items(text)[0].price == Decimal("5.50")


def test_format_keeps_zero_price():
    """Free items keep their @$0"""
    text = format_items([LineItem("sample", 1, Decimal("0"))])
    assert text == "1x sample @$0"
    assert parse_items(text)[0].price == Decimal("0")


def test_item_totals():
    """Segment counts across stops"""
    assert item_totals(["cord, kindling", None, "kindling"]) == {"cord": 1, "kindling": 2}
