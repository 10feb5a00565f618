"""Dispatch schedule and delivery stop models"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from woodyard.database import Base


class ScheduleStatus(str, PyEnum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    ARCHIVED = "archived"


class StopStatus(str, PyEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DispatchSchedule(Base):
    """A batch of stops delivered on one date"""

    __tablename__ = "dispatch_schedules"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    schedule_number: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    schedule_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[ScheduleStatus] = mapped_column(
        Enum(ScheduleStatus, values_callable=lambda e: [m.value for m in e], name="schedule_status"),
        nullable=False,
        default=ScheduleStatus.DRAFT,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    stops: Mapped[list["DeliveryStop"]] = relationship(
        "DeliveryStop",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="DeliveryStop.sequence_number",
    )

    @property
    def total_price(self) -> Decimal:
        return sum((Decimal(str(s.price or 0)) for s in self.stops), Decimal("0"))

    @property
    def stop_count(self) -> int:
        return len(self.stops)


class DeliveryStop(Base):
    """One delivery within a schedule"""

    __tablename__ = "delivery_stops"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    schedule_id: Mapped[int] = mapped_column(
        ForeignKey("dispatch_schedules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False
    )
    driver_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    sequence_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    items: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[StopStatus] = mapped_column(
        Enum(StopStatus, values_callable=lambda e: [m.value for m in e], name="stop_status"),
        nullable=False,
        default=StopStatus.PENDING,
    )
    recurring_order_id: Mapped[int | None] = mapped_column(
        ForeignKey("recurring_orders.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    schedule: Mapped["DispatchSchedule"] = relationship("DispatchSchedule", back_populates="stops")
    customer: Mapped["Customer"] = relationship("Customer")
    driver: Mapped["User"] = relationship("User", back_populates="stops")

    @property
    def is_recurring(self) -> bool:
        return self.recurring_order_id is not None
