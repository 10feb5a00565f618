"""Dispatch schedule PDF"""
from collections import Counter
from datetime import date
from decimal import Decimal
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from woodyard.services.line_items import item_totals
from woodyard.services.pricing import format_price, schedule_total

HEADER_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.Color(66 / 255, 66 / 255, 66 / 255)),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
]

# Widths in mm: #, Customer, Address, Phone, Driver, Items, Price, Notes
STOP_COL_WIDTHS = [10, 40, 55, 28, 30, 50, 22, 40]


def _draw_page_number(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.drawString(doc.leftMargin, 10 * mm, f"Page {doc.page}")
    canvas.restoreState()


def _esc(value) -> str:
    """Free text as Paragraph-safe markup"""
    return escape(str(value))


def _cell(text: str, style) -> Paragraph:
    # Paragraph wraps long cells instead of overflowing the column
    return Paragraph(_esc(text), style)


def schedule_story(
    schedule_number: str,
    schedule_date: date,
    stops: list[dict],
    status: str | None = None,
    notes: str | None = None,
    company_name: str = "",
) -> list:
    """
    Flowables for the schedule document.
    stops: dicts with sequence_number, customer_name, address, phone,
    driver_name (None when unassigned), items, price, notes.
    """
    styles = getSampleStyleSheet()
    small = styles["BodyText"].clone("small", fontSize=8, leading=10)
    story = []

    heading = f"<b>{_esc(schedule_number)}</b>"
    if company_name:
        heading = f"{_esc(company_name)}<br/>{heading}"
    story.append(Paragraph(heading, styles["Title"]))
    story.append(Paragraph(f"Date: {schedule_date.strftime('%B %d, %Y').replace(' 0', ' ')}", styles["Normal"]))
    if status:
        story.append(Paragraph(f"Status: {_esc(status.upper())}", styles["Normal"]))
    if notes:
        story.append(Paragraph(f"Notes: {_esc(notes)}", styles["Normal"]))
    story.append(Spacer(1, 8))

    rows = [["#", "Customer", "Address", "Phone", "Driver", "Items", "Price", "Notes"]]
    for idx, s in enumerate(stops, start=1):
        price = s.get("price")
        rows.append([
            str(s.get("sequence_number") or idx),
            _cell(s.get("customer_name") or "Unnamed Customer", small),
            _cell(s.get("address") or "No address", small),
            _cell(s.get("phone") or "—", small),
            _cell(s.get("driver_name") or "Not Assigned", small),
            _cell(s.get("items") or "—", small),
            format_price(price) if price else "—",
            _cell(s.get("notes") or "—", small),
        ])
    t = Table(rows, colWidths=[w * mm for w in STOP_COL_WIDTHS], repeatRows=1)
    t.setStyle(TableStyle(HEADER_STYLE + [("FONTSIZE", (0, 0), (-1, -1), 8)]))
    story.append(t)
    story.append(Spacer(1, 10))

    story.append(Paragraph(f"<b>Total Stops: {len(stops)}</b>", styles["Normal"]))
    per_driver = Counter(s.get("driver_name") or "Unassigned" for s in stops)
    for name, count in per_driver.items():
        story.append(Paragraph(f"{_esc(name)}: {count} stops", styles["Normal"]))

    totals = item_totals([s.get("items") for s in stops])
    if totals:
        story.append(Spacer(1, 8))
        story.append(Paragraph("<b>Inventory Items Summary</b>", styles["Heading3"]))
        inv_rows = [["Item", "Quantity"]] + [[_cell(k, small), str(v)] for k, v in totals.items()]
        inv = Table(inv_rows, colWidths=[120 * mm, 25 * mm], repeatRows=1)
        inv.setStyle(TableStyle(HEADER_STYLE + [("FONTSIZE", (0, 0), (-1, -1), 9)]))
        story.append(inv)

    total = schedule_total(s.get("price") for s in stops)
    if total > Decimal("0"):
        story.append(Spacer(1, 8))
        story.append(Paragraph(f"<b>Total Price: {format_price(total)}</b>", styles["Normal"]))
    return story


def generate_schedule_pdf(
    schedule_number: str,
    schedule_date: date,
    stops: list[dict],
    status: str | None = None,
    notes: str | None = None,
    company_name: str = "",
) -> BytesIO:
    """Landscape A4 PDF with page numbers; see schedule_story for the layout."""
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=landscape(A4),
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=18 * mm,
        title=schedule_number,
    )
    story = schedule_story(schedule_number, schedule_date, stops, status, notes, company_name)
    doc.build(story, onFirstPage=_draw_page_number, onLaterPages=_draw_page_number)
    buf.seek(0)
    return buf
