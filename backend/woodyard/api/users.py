"""User management - ADMIN only, plus the driver list for stop forms"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from woodyard.config import get_settings
from woodyard.core.auth import RequireAdmin, require_user
from woodyard.core.security import hash_password
from woodyard.database import get_db
from woodyard.models import User
from woodyard.models.user import Role
from woodyard.schemas.auth import UserResponse
from woodyard.services.dispatch import refresh_schedule

router = APIRouter(prefix="/api/users", tags=["users"])


def release_stops(user: User) -> int:
    """Unassign the user from their stops and refresh the schedules involved"""
    stops = list(user.stops)
    schedules = {s.schedule for s in stops}
    for stop in stops:
        stop.driver_id = None
        stop.driver = None
    prefix = get_settings().driver_id_prefix
    for schedule in schedules:
        refresh_schedule(schedule, prefix)
    return len(stops)


class UserCreateSchema(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6)
    role: Role = Role.DRIVER
    display_name: str | None = Field(None, max_length=128)
    phone: str | None = Field(None, max_length=32)
    email: str | None = Field(None, max_length=128)


class UserUpdateSchema(BaseModel):
    display_name: str | None = Field(None, max_length=128)
    role: Role | None = None
    phone: str | None = Field(None, max_length=32)
    email: str | None = Field(None, max_length=128)
    is_active: bool | None = None
    password: str | None = Field(None, min_length=6)


@router.get("", response_model=list[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    return list(db.execute(select(User).order_by(User.id)).scalars().all())


@router.get("/drivers", response_model=list[UserResponse])
def list_drivers(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user),
):
    """Active drivers, for the driver selector"""
    stmt = (
        select(User)
        .where(User.role == Role.DRIVER, User.is_active.is_(True))
        .order_by(User.display_name, User.username)
    )
    return list(db.execute(stmt).scalars().all())


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreateSchema,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    existing = db.execute(select(User).where(User.username == data.username)).scalars().first()
    if existing:
        raise HTTPException(status_code=400, detail="Username already exists")
    user = User(
        username=data.username,
        password_hash=hash_password(data.password),
        role=data.role,
        display_name=data.display_name,
        phone=data.phone,
        email=data.email,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    data: UserUpdateSchema,
    db: Session = Depends(get_db),
    _: User = RequireAdmin,
):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    updates = data.model_dump(exclude_unset=True)
    password = updates.pop("password", None)
    if password:
        user.password_hash = hash_password(password)
    for k, v in updates.items():
        setattr(user, k, v)
    if user.role != Role.DRIVER or not user.is_active:
        release_stops(user)
    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = RequireAdmin,
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    release_stops(user)
    db.delete(user)
    db.commit()
