"""Recurring orders - ADMIN only"""
from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from woodyard.core.auth import RequireAdmin
from woodyard.database import get_db
from woodyard.models import Customer, RecurringOrder, User
from woodyard.schemas.recurring import (
    OccurrencesResponse,
    RecurringOrderCreate,
    RecurringOrderResponse,
    RecurringOrderUpdate,
)
from woodyard.services.recurrence import calculate_next_occurrences

router = APIRouter(prefix="/api/recurring-orders", tags=["recurring"])


@router.get("", response_model=list[RecurringOrderResponse])
def list_recurring_orders(
    customer_id: int | None = Query(None),
    active: bool | None = Query(None),
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    stmt = select(RecurringOrder).order_by(RecurringOrder.id)
    if customer_id is not None:
        stmt = stmt.where(RecurringOrder.customer_id == customer_id)
    if active is not None:
        stmt = stmt.where(RecurringOrder.active.is_(active))
    return list(db.execute(stmt).scalars().all())


@router.post("", response_model=RecurringOrderResponse, status_code=status.HTTP_201_CREATED)
def create_recurring_order(
    data: RecurringOrderCreate,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    if not db.get(Customer, data.customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    order = RecurringOrder(**data.model_dump())
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


@router.get("/{order_id}", response_model=RecurringOrderResponse)
def get_recurring_order(
    order_id: int,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    order = db.get(RecurringOrder, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Recurring order not found")
    return order


@router.patch("/{order_id}", response_model=RecurringOrderResponse)
def update_recurring_order(
    order_id: int,
    data: RecurringOrderUpdate,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    order = db.get(RecurringOrder, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Recurring order not found")
    for k, v in data.model_dump(exclude_unset=True).items():
        if v is None and k in ("frequency", "active"):
            continue
        setattr(order, k, v)
    if order.start_date and order.end_date and order.end_date < order.start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    db.commit()
    db.refresh(order)
    return order


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recurring_order(
    order_id: int,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    order = db.get(RecurringOrder, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Recurring order not found")
    db.delete(order)
    db.commit()


@router.get("/{order_id}/occurrences", response_model=OccurrencesResponse)
def list_occurrences(
    order_id: int,
    count: int = Query(5, ge=1, le=52),
    start: date | None = Query(None, description="Defaults to today or the order's start date, whichever is later"),
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    order = db.get(RecurringOrder, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Recurring order not found")
    begin = start or max(date.today(), order.start_date or date.min)
    if order.frequency == "bi-weekly" and order.start_date:
        # step onto the fortnight counted from start_date
        first = calculate_next_occurrences(begin, order.frequency, order.preferred_day, 1)
        anchor = calculate_next_occurrences(order.start_date, order.frequency, order.preferred_day, 1)
        if first and anchor and (first[0] - anchor[0]).days % 14:
            begin = first[0] + timedelta(days=7)
    dates = calculate_next_occurrences(begin, order.frequency, order.preferred_day, count)
    if order.end_date:
        dates = [d for d in dates if d <= order.end_date]
    return OccurrencesResponse(recurring_order_id=order.id, dates=dates)
