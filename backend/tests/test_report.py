"""Schedule PDF"""
import re
from datetime import date
from decimal import Decimal

from reportlab.platypus import Paragraph

from woodyard.services.report import generate_schedule_pdf, schedule_story


def _stops():
    return [
        {
            "sequence_number": 1,
            "customer_name": "Maple Farm",
            "address": "12 Orchard Rd, Hudson, NY",
            "phone": "555-0100",
            "driver_name": "Dave",
            "items": "1/2 cord",
            "price": Decimal("125"),
            "notes": "Stack by the barn <north side> & cover",
        },
        {
            "sequence_number": 2,
            "customer_name": None,
            "address": None,
            "phone": None,
            "driver_name": None,
            "items": "kindling, firestarter",
            "price": Decimal("23"),
            "notes": None,
        },
    ]


def test_pdf_bytes():
    """Renders a PDF"""
    buf = generate_schedule_pdf(
        "DS-250110-WED-D2", date(2025, 1, 15), _stops(), status="draft", notes="Snow expected", company_name="Woodyard"
    )
    data = buf.getvalue()
    assert data.startswith(b"%PDF")
    assert len(data) > 1000


def test_pdf_without_stops():
    """Empty schedule still renders"""
    data = generate_schedule_pdf("DS-250110-WED-D00", date(2025, 1, 15), []).getvalue()
    assert data.startswith(b"%PDF")


def _lines(story):
    return [f.getPlainText() for f in story if isinstance(f, Paragraph)]


def test_story_summary_lines():
    """Heading, driver counts and totals"""
    lines = _lines(schedule_story("DS-250110-WED-D2", date(2025, 1, 15), _stops(), status="draft"))
    assert "DS-250110-WED-D2" in lines[0]
    assert "Date: January 15, 2025" in lines
    assert "Status: DRAFT" in lines
    assert "Total Stops: 2" in lines
    assert "Dave: 1 stops" in lines
    assert "Unassigned: 1 stops" in lines
    assert "Total Price: $148.00" in lines


def test_markup_in_free_text_is_literal():
    """Tags in notes and names print as typed"""
    stops = _stops()
    stops[0]["driver_name"] = "<b>Dave"
    stops[0]["notes"] = "use <br> side, <font size=abc>"
    story = schedule_story(
        "DS-250110-WED-D2", date(2025, 1, 15), stops,
        status="<i>draft", notes="Leave at gate <b>not porch", company_name="Ash & Oak <Yard>",
    )
    lines = _lines(story)
    assert "Notes: Leave at gate <b>not porch" in lines
    assert "<b>Dave: 1 stops" in lines
    assert "Ash & Oak <Yard>" in lines[0]

    data = generate_schedule_pdf(
        "DS-250110-WED-D2", date(2025, 1, 15), stops,
        status="<i>draft", notes="Leave at gate <b>not porch", company_name="Ash & Oak <Yard>",
    ).getvalue()
    assert data.startswith(b"%PDF")


def test_long_schedule_spans_pages():
    """Sixty stops need more than one page"""
    stops = [dict(_stops()[0], sequence_number=i) for i in range(1, 61)]
    data = generate_schedule_pdf("DS-250110-WED-D2", date(2025, 1, 15), stops).getvalue()
    assert len(re.findall(rb"/Type /Page[^s]", data)) >= 2
