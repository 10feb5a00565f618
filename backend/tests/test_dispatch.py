"""ScheduleDraft and refresh_schedule"""
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal

from woodyard.services import sequencing
from woodyard.services.dispatch import DraftStop, ScheduleDraft, refresh_schedule

CREATED = datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)
WEDNESDAY = "2025-01-15"


def _draft(**kw):
    stops = [
        DraftStop(id="a", customer_id=1, driver_id="driver-2", items="1/2 cord"),
        DraftStop(id="b", customer_id=2, driver_id="driver-7", items="kindling, firestarter"),
    ]
    return ScheduleDraft(schedule_date=WEDNESDAY, created_at=CREATED, stops=stops, **kw)


def test_end_to_end():
    """Two drivers on a Wednesday"""
    draft = _draft()
    assert "-WED-" in draft.schedule_number
    assert draft.schedule_number.endswith("-D27")
    assert [s.price for s in draft.stops] == [Decimal("125"), Decimal("15") + Decimal("8")]
    assert [s.sequence_number for s in draft.stops] == [1, 2]
    assert draft.total == Decimal("148")


def test_add_and_remove_keep_numbering():
    """Add / remove renumber and recode"""
    draft = _draft()
    draft.add_stop(DraftStop(id="c", customer_id=3, driver_id="driver-1", items="cedar"))
    assert [s.sequence_number for s in draft.stops] == [1, 2, 3]
    assert draft.schedule_number.endswith("-D127")
    assert draft.stops[-1].price == Decimal("12")

    draft.remove_stop("a")
    assert [s.id for s in draft.stops] == ["b", "c"]
    assert [s.sequence_number for s in draft.stops] == [1, 2]
    assert draft.schedule_number.endswith("-D17")


def test_move_and_reorder():
    """Move then explicit order"""
    draft = _draft()
    draft.add_stop(DraftStop(id="c", customer_id=3))
    draft.move_stop(2, 0)
    assert [s.id for s in draft.stops] == ["c", "a", "b"]
    draft.reorder(["b", "c", "a"])
    assert [(s.id, s.sequence_number) for s in draft.stops] == [("b", 1), ("c", 2), ("a", 3)]


def test_update_items_reprices():
    """Item edit changes price and total"""
    draft = _draft()
    draft.update_items("a", "1/4 cord, cedar")
    assert draft.stops[0].price == Decimal("87")
    assert draft.total == Decimal("110")


def test_assign_driver_and_date():
    """Driver and date edits update the number"""
    draft = _draft()
    draft.assign_driver("b", None)
    assert draft.schedule_number.endswith("-D2")
    draft.set_date("2025-01-18")
    assert "-SAT-" in draft.schedule_number
    draft.set_date("bogus")
    assert "-XXX-" in draft.schedule_number


def test_empty_draft():
    """No stops"""
    draft = ScheduleDraft(schedule_date=date(2025, 1, 15), created_at=CREATED)
    assert draft.schedule_number == "DS-250110-WED-D00"
    assert draft.total == Decimal("0")


@dataclass
class FakeStop:
    id: int | None
    sequence_number: int
    items: str | None = None
    driver_id: int | None = None
    price: Decimal | None = None


@dataclass
class FakeSchedule:
    schedule_date: date
    created_at: datetime
    schedule_number: str = ""
    stops: list = field(default_factory=list)


def test_refresh_schedule_closes_gaps_and_reprices():
    """Persisted-style schedule gets renumbered and repriced"""
    sched = FakeSchedule(
        date(2025, 1, 15),
        CREATED,
        stops=[
            FakeStop(3, 5, "cedar", driver_id=7),
            FakeStop(1, 2, "1/2 cord", driver_id=2),
            FakeStop(None, 5, "kindling"),
        ],
    )
    assert refresh_schedule(sched)
    ordered = sorted(sched.stops, key=lambda s: s.sequence_number)
    assert [s.id for s in ordered] == [1, 3, None]
    assert sequencing.is_contiguous(sched.stops)
    assert [s.price for s in ordered] == [Decimal("125"), Decimal("12"), Decimal("15")]
    assert sched.schedule_number == "DS-250110-WED-D27"


def test_refresh_schedule_no_change():
    """Second refresh is a no-op"""
    sched = FakeSchedule(date(2025, 1, 15), CREATED, stops=[FakeStop(1, 1, "cord", price=Decimal("200"))])
    refresh_schedule(sched)
    assert refresh_schedule(sched) is False
