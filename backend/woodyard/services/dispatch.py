"""Keeps a schedule's derived fields in step with its stops.

ScheduleDraft is the in-memory form used for previews; refresh_schedule applies
the same derivations to a persisted DispatchSchedule.
"""
from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

import structlog

from woodyard.services import sequencing
from woodyard.services.pricing import calculate_price, schedule_total
from woodyard.services.schedule_number import DEFAULT_DRIVER_PREFIX, generate_schedule_number

log = structlog.get_logger(__name__)


@dataclass
class DraftStop:
    id: Hashable
    customer_id: Hashable
    driver_id: str | None = None
    items: str | None = None
    sequence_number: int = 0
    price: Decimal = Decimal("0")


@dataclass
class ScheduleDraft:
    schedule_date: date | str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    driver_prefix: str = DEFAULT_DRIVER_PREFIX
    stops: list[DraftStop] = field(default_factory=list)
    schedule_number: str = ""

    def __post_init__(self) -> None:
        for stop in self.stops:
            stop.price = calculate_price(stop.items)
        self._settle()

    @property
    def driver_ids(self) -> list[str]:
        return [s.driver_id for s in self.stops if s.driver_id]

    @property
    def total(self) -> Decimal:
        return schedule_total(s.price for s in self.stops)

    def _settle(self) -> None:
        sequencing.renumber(self.stops)
        number = generate_schedule_number(
            self.schedule_date, self.driver_ids, self.created_at, prefix=self.driver_prefix
        )
        if number != self.schedule_number:
            self.schedule_number = number

    def _find(self, stop_id: Hashable) -> DraftStop:
        for stop in self.stops:
            if stop.id == stop_id:
                return stop
        raise KeyError(stop_id)

    def add_stop(self, stop: DraftStop) -> DraftStop:
        stop.price = calculate_price(stop.items)
        self.stops.append(stop)
        self._settle()
        return stop

    def remove_stop(self, stop_id: Hashable) -> None:
        self.stops.remove(self._find(stop_id))
        self._settle()

    def move_stop(self, from_index: int, to_index: int) -> None:
        sequencing.move_stop(self.stops, from_index, to_index)
        self._settle()

    def reorder(self, ordered_ids: Sequence[Hashable]) -> None:
        sequencing.reorder(self.stops, ordered_ids)
        self._settle()

    def update_items(self, stop_id: Hashable, items: str | None) -> DraftStop:
        stop = self._find(stop_id)
        if items != stop.items:
            stop.items = items
            stop.price = calculate_price(items)
        self._settle()
        return stop

    def assign_driver(self, stop_id: Hashable, driver_id: str | None) -> DraftStop:
        stop = self._find(stop_id)
        stop.driver_id = driver_id
        self._settle()
        return stop

    def set_date(self, schedule_date: date | str) -> None:
        self.schedule_date = schedule_date
        self._settle()


def reprice_stop(stop: Any) -> bool:
    """Recompute the cached price; True when it changed."""
    price = calculate_price(stop.items)
    current = Decimal(str(stop.price)) if stop.price is not None else None
    if current != price:
        stop.price = price
        return True
    return False


def _stop_order_key(stop: Any) -> tuple[int, int, int]:
    # unsaved stops (id None) sort after saved ones with the same number
    return (stop.sequence_number or 0, stop.id is None, stop.id or 0)


def schedule_number_for(schedule: Any, driver_prefix: str = DEFAULT_DRIVER_PREFIX) -> str:
    driver_ids = [str(s.driver_id) for s in schedule.stops if s.driver_id is not None]
    created = schedule.created_at or datetime.now(timezone.utc)
    return generate_schedule_number(schedule.schedule_date, driver_ids, created, prefix=driver_prefix)


def refresh_schedule(schedule: Any, driver_prefix: str = DEFAULT_DRIVER_PREFIX) -> bool:
    """
    Close gaps in the stop numbering (keeping the current relative order), reprice
    stops and regenerate the schedule number. Works on ORM objects without touching
    the session. True when anything changed.
    """
    changed = False
    ordered = sorted(schedule.stops, key=_stop_order_key)
    before = [s.sequence_number for s in ordered]
    sequencing.renumber(ordered)
    if before != [s.sequence_number for s in ordered]:
        changed = True
    for stop in schedule.stops:
        changed = reprice_stop(stop) or changed
    number = schedule_number_for(schedule, driver_prefix)
    if number != schedule.schedule_number:
        log.info(
            "schedule_number_changed",
            schedule_id=getattr(schedule, "id", None),
            old=schedule.schedule_number,
            new=number,
        )
        schedule.schedule_number = number
        changed = True
    return changed
