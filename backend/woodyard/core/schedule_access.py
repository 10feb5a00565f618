"""Drivers only see schedules and stops assigned to them"""
from fastapi import HTTPException, status

from woodyard.models import DeliveryStop, DispatchSchedule, User
from woodyard.models.user import Role


def is_assigned(user: User, schedule: DispatchSchedule) -> bool:
    return any(s.driver_id == user.id for s in schedule.stops)


def require_schedule_access(user: User, schedule: DispatchSchedule) -> None:
    """ADMIN: any schedule. DRIVER: schedules holding at least one of their stops."""
    if user.role == Role.ADMIN:
        return
    if user.role != Role.DRIVER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")
    if not is_assigned(user, schedule):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Schedule is not assigned to you")


def require_stop_access(user: User, stop: DeliveryStop) -> None:
    if user.role == Role.ADMIN:
        return
    if user.role != Role.DRIVER or stop.driver_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Stop is not assigned to you")
