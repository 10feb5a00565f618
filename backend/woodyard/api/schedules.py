"""Dispatch schedules - ADMIN manages, DRIVER reads schedules holding their stops"""
from collections import defaultdict
from datetime import date, datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from woodyard.config import get_settings
from woodyard.core.auth import RequireAdmin, require_user
from woodyard.core.schedule_access import require_schedule_access
from woodyard.database import get_db
from woodyard.models import Customer, DeliveryStop, DispatchSchedule, User
from woodyard.models.schedule import ScheduleStatus
from woodyard.models.user import Role
from woodyard.schemas.schedule import (
    DriverCapacity,
    PreviewRequest,
    PreviewResponse,
    PreviewStopResult,
    RecurringSyncResponse,
    ScheduleCreate,
    ScheduleDetailResponse,
    ScheduleResponse,
    ScheduleUpdate,
    StopCreate,
)
from woodyard.services import capacity
from woodyard.services.dispatch import DraftStop, ScheduleDraft, refresh_schedule
from woodyard.services.recurring_sync import sync_recurring_orders
from woodyard.services.report import generate_schedule_pdf

router = APIRouter(prefix="/api/schedules", tags=["schedules"])
log = structlog.get_logger(__name__)


def get_schedule_with_stops(db: Session, schedule_id: int) -> DispatchSchedule | None:
    return db.get(
        DispatchSchedule,
        schedule_id,
        options=[
            selectinload(DispatchSchedule.stops).joinedload(DeliveryStop.customer),
            selectinload(DispatchSchedule.stops).joinedload(DeliveryStop.driver),
        ],
    )


def validate_stop_refs(db: Session, customer_id: int | None, driver_id: int | None) -> None:
    """404 for an unknown customer, 400 when driver_id is not an active driver"""
    if customer_id is not None and not db.get(Customer, customer_id):
        raise HTTPException(status_code=404, detail=f"Customer {customer_id} not found")
    if driver_id is not None:
        driver = db.get(User, driver_id)
        if not driver or driver.role != Role.DRIVER or not driver.is_active:
            raise HTTPException(status_code=400, detail=f"User {driver_id} is not an active driver")


def new_stop(data: StopCreate, sequence_number: int) -> DeliveryStop:
    return DeliveryStop(
        customer_id=data.customer_id,
        driver_id=data.driver_id,
        items=data.items,
        notes=data.notes,
        sequence_number=sequence_number,
    )


@router.get("", response_model=list[ScheduleResponse])
def list_schedules(
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    status_filter: ScheduleStatus | None = Query(None, alias="status"),
    q: str | None = Query(None, description="Matches schedule number or notes"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    stmt = (
        select(DispatchSchedule)
        .options(selectinload(DispatchSchedule.stops))
        .order_by(DispatchSchedule.schedule_date.desc(), DispatchSchedule.id.desc())
    )
    if from_date:
        stmt = stmt.where(DispatchSchedule.schedule_date >= from_date)
    if to_date:
        stmt = stmt.where(DispatchSchedule.schedule_date <= to_date)
    if status_filter:
        stmt = stmt.where(DispatchSchedule.status == status_filter)
    if q and q.strip():
        pattern = f"%{q.strip()}%"
        stmt = stmt.where(
            or_(DispatchSchedule.schedule_number.ilike(pattern), DispatchSchedule.notes.ilike(pattern))
        )
    if current_user.role == Role.DRIVER:
        stmt = stmt.where(
            DispatchSchedule.stops.any(DeliveryStop.driver_id == current_user.id)
        )
    return list(db.execute(stmt).scalars().unique().all())


@router.post("", response_model=ScheduleDetailResponse, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: ScheduleCreate,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    settings = get_settings()
    schedule = DispatchSchedule(
        schedule_date=data.schedule_date,
        notes=data.notes,
        status=ScheduleStatus.DRAFT,
        schedule_number="",
        created_at=datetime.now(timezone.utc),
    )
    for idx, stop_data in enumerate(data.stops, start=1):
        validate_stop_refs(db, stop_data.customer_id, stop_data.driver_id)
        schedule.stops.append(new_stop(stop_data, idx))
    refresh_schedule(schedule, settings.driver_id_prefix)
    db.add(schedule)
    db.commit()
    log.info("schedule_created", schedule_id=schedule.id, schedule_number=schedule.schedule_number)
    return get_schedule_with_stops(db, schedule.id)


@router.post("/preview", response_model=PreviewResponse)
def preview_schedule(
    data: PreviewRequest,
    current_user: User = Depends(require_user),
):
    """Schedule number and prices for unsaved form state; nothing is stored."""
    settings = get_settings()
    draft = ScheduleDraft(
        schedule_date=data.schedule_date,
        driver_prefix=settings.driver_id_prefix,
        stops=[
            DraftStop(id=idx, customer_id=None, driver_id=s.driver_id, items=s.items)
            for idx, s in enumerate(data.stops)
        ],
    )
    return PreviewResponse(
        schedule_number=draft.schedule_number,
        stops=[PreviewStopResult(sequence_number=s.sequence_number, price=s.price) for s in draft.stops],
        total=draft.total,
    )


@router.post("/sync-recurring", response_model=RecurringSyncResponse)
def sync_recurring(
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    """Add recurring orders due on the date to its schedule, creating one if needed"""
    result = sync_recurring_orders(db, target_date, get_settings().driver_id_prefix)
    db.commit()
    schedule = get_schedule_with_stops(db, result.schedule.id) if result.schedule else None
    return RecurringSyncResponse(
        schedule=ScheduleResponse.model_validate(schedule) if schedule else None,
        created_schedule=result.created_schedule,
        added_stops=result.added_stops,
    )


@router.get("/{schedule_id}", response_model=ScheduleDetailResponse)
def get_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    schedule = get_schedule_with_stops(db, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    require_schedule_access(current_user, schedule)
    return schedule


@router.patch("/{schedule_id}", response_model=ScheduleDetailResponse)
def update_schedule(
    schedule_id: int,
    data: ScheduleUpdate,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    schedule = get_schedule_with_stops(db, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    for k, v in data.model_dump(exclude_unset=True).items():
        if v is None and k != "notes":
            continue
        setattr(schedule, k, v)
    refresh_schedule(schedule, get_settings().driver_id_prefix)
    db.commit()
    return get_schedule_with_stops(db, schedule_id)


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    schedule = db.get(DispatchSchedule, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    db.delete(schedule)
    db.commit()
    log.info("schedule_deleted", schedule_id=schedule_id)


@router.get("/{schedule_id}/capacity", response_model=list[DriverCapacity])
def schedule_capacity(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    """Truck load per driver in pallet equivalents"""
    schedule = get_schedule_with_stops(db, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    require_schedule_access(current_user, schedule)
    max_pallets = get_settings().driver_max_pallet_equivalents

    by_driver: dict[int | None, list[DeliveryStop]] = defaultdict(list)
    for stop in schedule.stops:
        by_driver[stop.driver_id].append(stop)

    result = []
    for driver_id, stops in by_driver.items():
        items = [ci for s in stops for ci in capacity.parse_capacity_items(s.items)]
        load = capacity.pallet_equivalents(items)
        driver = stops[0].driver
        result.append(
            DriverCapacity(
                driver_id=driver_id,
                driver_name=driver.name if driver else "Unassigned",
                stop_count=len(stops),
                pallet_equivalents=round(load, 3),
                max_pallet_equivalents=max_pallets,
                percentage=capacity.capacity_percentage(load, max_pallets),
                remaining=round(capacity.remaining_capacity(load, max_pallets), 3),
                over_capacity=capacity.would_exceed(0.0, load, max_pallets),
                estimated_minutes=sum(
                    capacity.estimate_delivery_minutes(capacity.parse_capacity_items(s.items)) for s in stops
                ),
            )
        )
    if current_user.role == Role.DRIVER:
        result = [r for r in result if r.driver_id == current_user.id]
    return sorted(result, key=lambda r: (r.driver_id is None, r.driver_name))


@router.get("/{schedule_id}/pdf")
def schedule_pdf(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    schedule = get_schedule_with_stops(db, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    require_schedule_access(current_user, schedule)
    stops = [
        {
            "sequence_number": s.sequence_number,
            "customer_name": s.customer.name if s.customer else None,
            "address": s.customer.full_address if s.customer else None,
            "phone": s.customer.phone if s.customer else None,
            "driver_name": s.driver.name if s.driver else None,
            "items": s.items,
            "price": s.price,
            "notes": s.notes,
        }
        for s in sorted(schedule.stops, key=lambda s: s.sequence_number)
    ]
    buf = generate_schedule_pdf(
        schedule.schedule_number,
        schedule.schedule_date,
        stops,
        status=schedule.status.value if schedule.status else None,
        notes=schedule.notes,
        company_name=get_settings().company_name,
    )
    filename = f"{schedule.schedule_number.replace(' ', '_')}.pdf"
    return StreamingResponse(
        buf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
