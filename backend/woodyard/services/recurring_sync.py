"""Fold recurring orders due on a date into that date's schedule"""
from datetime import date, datetime, timezone
from typing import NamedTuple

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from woodyard.models import DeliveryStop, DispatchSchedule, RecurringOrder, RecurringOrderSchedule
from woodyard.services.dispatch import refresh_schedule
from woodyard.services.recurrence import occurs_on

log = structlog.get_logger(__name__)


class SyncResult(NamedTuple):
    schedule: DispatchSchedule | None
    created_schedule: bool
    added_stops: int


def due_orders(db: Session, target: date) -> list[RecurringOrder]:
    orders = db.execute(
        select(RecurringOrder).where(RecurringOrder.active.is_(True)).order_by(RecurringOrder.id)
    ).scalars().all()
    return [
        o for o in orders
        if o.is_live_on(target) and occurs_on(target, o.frequency, o.preferred_day, anchor=o.start_date)
    ]


def sync_recurring_orders(db: Session, target: date, driver_prefix: str) -> SyncResult:
    """
    Uses the first schedule on `target` (creating one only when orders are due) and adds one
    stop per due order whose customer is not already on it. Caller commits.
    """
    orders = due_orders(db, target)
    schedule = db.execute(
        select(DispatchSchedule)
        .where(DispatchSchedule.schedule_date == target)
        .order_by(DispatchSchedule.id)
        .limit(1)
    ).scalars().first()
    if not orders:
        return SyncResult(schedule, False, 0)

    created = False
    if schedule is None:
        schedule = DispatchSchedule(
            schedule_date=target,
            schedule_number="",
            notes=f"Auto-generated for recurring orders on {target.isoformat()}",
            created_at=datetime.now(timezone.utc),
        )
        db.add(schedule)
        created = True

    linked = {link.recurring_order_id for link in db.execute(
        select(RecurringOrderSchedule).where(RecurringOrderSchedule.schedule_id == schedule.id)
    ).scalars().all()} if schedule.id else set()
    on_schedule = {s.customer_id for s in schedule.stops}

    added = 0
    next_number = len(schedule.stops)
    for order in orders:
        if order.id not in linked:
            db.add(RecurringOrderSchedule(recurring_order=order, schedule=schedule))
        if order.customer_id in on_schedule:
            continue
        next_number += 1
        schedule.stops.append(
            DeliveryStop(
                customer_id=order.customer_id,
                items=order.items,
                sequence_number=next_number,
                recurring_order_id=order.id,
                notes=f"Auto-generated from recurring order ({order.frequency})",
            )
        )
        on_schedule.add(order.customer_id)
        added += 1

    refresh_schedule(schedule, driver_prefix)
    log.info(
        "recurring_sync",
        date=target.isoformat(),
        due=len(orders),
        added_stops=added,
        created_schedule=created,
    )
    return SyncResult(schedule, created, added)
