"""Stop CRUD - ADMIN manages, DRIVER only touches stops assigned to them"""
import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from woodyard.api.schedules import get_schedule_with_stops, new_stop, validate_stop_refs
from woodyard.config import get_settings
from woodyard.core.auth import RequireAdmin, require_user
from woodyard.core.schedule_access import require_schedule_access, require_stop_access
from woodyard.database import get_db
from woodyard.models import DeliveryStop, User
from woodyard.models.user import Role
from woodyard.schemas.schedule import (
    ReorderStopsRequest,
    StopCreate,
    StopResponse,
    StopStatusUpdate,
    StopUpdate,
)
from woodyard.services import sequencing
from woodyard.services.dispatch import refresh_schedule

router = APIRouter(prefix="/api/stops", tags=["stops"])
log = structlog.get_logger(__name__)


def _get_stop(db: Session, stop_id: int) -> DeliveryStop | None:
    return db.get(
        DeliveryStop,
        stop_id,
        options=[
            joinedload(DeliveryStop.schedule),
            joinedload(DeliveryStop.customer),
            joinedload(DeliveryStop.driver),
        ],
    )


def _ordered(stops) -> list[DeliveryStop]:
    return sorted(stops, key=lambda s: (s.sequence_number, s.id))


@router.get("/schedule/{schedule_id}", response_model=list[StopResponse])
def list_stops_by_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    schedule = get_schedule_with_stops(db, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    require_schedule_access(current_user, schedule)
    stops = _ordered(schedule.stops)
    if current_user.role == Role.DRIVER:
        stops = [s for s in stops if s.driver_id == current_user.id]
    return stops


@router.post("/schedule/{schedule_id}", response_model=StopResponse, status_code=status.HTTP_201_CREATED)
def create_stop(
    schedule_id: int,
    data: StopCreate,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    """Append a stop, or insert it at `position` and shift the rest down"""
    schedule = get_schedule_with_stops(db, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    validate_stop_refs(db, data.customer_id, data.driver_id)

    ordered = _ordered(schedule.stops)
    stop = new_stop(data, len(ordered) + 1)
    index = len(ordered) if data.position is None else min(data.position - 1, len(ordered))
    ordered.insert(index, stop)
    sequencing.renumber(ordered)
    schedule.stops.append(stop)
    refresh_schedule(schedule, get_settings().driver_id_prefix)
    db.commit()
    log.info("stop_added", schedule_id=schedule_id, stop_id=stop.id, sequence_number=stop.sequence_number)
    return _get_stop(db, stop.id)


@router.put("/schedule/{schedule_id}/reorder", status_code=status.HTTP_204_NO_CONTENT)
def reorder_stops(
    schedule_id: int,
    data: ReorderStopsRequest,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    """Number stops 1..N in the order of stop_ids"""
    schedule = get_schedule_with_stops(db, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    ordered = _ordered(schedule.stops)
    try:
        sequencing.reorder(ordered, data.stop_ids)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    refresh_schedule(schedule, get_settings().driver_id_prefix)
    db.commit()


@router.get("/{stop_id}", response_model=StopResponse)
def get_stop(
    stop_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    stop = _get_stop(db, stop_id)
    if not stop:
        raise HTTPException(status_code=404, detail="Stop not found")
    require_stop_access(current_user, stop)
    return stop


@router.patch("/{stop_id}", response_model=StopResponse)
def update_stop(
    stop_id: int,
    data: StopUpdate,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    stop = _get_stop(db, stop_id)
    if not stop:
        raise HTTPException(status_code=404, detail="Stop not found")
    updates = data.model_dump(exclude_unset=True)
    if updates.get("customer_id") is None:
        updates.pop("customer_id", None)
    if updates.get("status") is None:
        updates.pop("status", None)
    validate_stop_refs(db, updates.get("customer_id"), updates.get("driver_id"))
    for k, v in updates.items():
        setattr(stop, k, v)
    refresh_schedule(stop.schedule, get_settings().driver_id_prefix)
    db.commit()
    return _get_stop(db, stop_id)


@router.patch("/{stop_id}/status", response_model=StopResponse)
def update_stop_status(
    stop_id: int,
    data: StopStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    """Drivers mark their own stops in progress / completed"""
    stop = _get_stop(db, stop_id)
    if not stop:
        raise HTTPException(status_code=404, detail="Stop not found")
    require_stop_access(current_user, stop)
    stop.status = data.status
    db.commit()
    log.info("stop_status", stop_id=stop_id, status=data.status.value, user_id=current_user.id)
    return _get_stop(db, stop_id)


@router.delete("/{stop_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stop(
    stop_id: int,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    stop = db.get(DeliveryStop, stop_id)
    if not stop:
        raise HTTPException(status_code=404, detail="Stop not found")
    schedule = get_schedule_with_stops(db, stop.schedule_id)
    schedule.stops.remove(stop)
    refresh_schedule(schedule, get_settings().driver_id_prefix)
    db.commit()
    log.info("stop_removed", schedule_id=schedule.id, stop_id=stop_id)
