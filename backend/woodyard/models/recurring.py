"""Recurring order models"""
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from woodyard.database import Base


class RecurringOrder(Base):
    """Standing order that spawns a stop on every matching delivery date"""

    __tablename__ = "recurring_orders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    items: Mapped[str | None] = mapped_column(Text, nullable=True)
    frequency: Mapped[str] = mapped_column(String(16), nullable=False)  # daily / weekly / bi-weekly / monthly
    preferred_day: Mapped[str | None] = mapped_column(String(32), nullable=True)  # "friday", "last friday", "15"
    preferred_time: Mapped[str | None] = mapped_column(String(16), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    active: Mapped[bool] = mapped_column(nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    customer: Mapped["Customer"] = relationship("Customer")
    schedule_links: Mapped[list["RecurringOrderSchedule"]] = relationship(
        "RecurringOrderSchedule", back_populates="recurring_order", cascade="all, delete-orphan"
    )

    def is_live_on(self, day: date) -> bool:
        if not self.active:
            return False
        if self.start_date and day < self.start_date:
            return False
        if self.end_date and day > self.end_date:
            return False
        return True


class RecurringOrderSchedule(Base):
    """Link between a recurring order and a schedule it was synced into"""

    __tablename__ = "recurring_order_schedules"
    __table_args__ = (UniqueConstraint("recurring_order_id", "schedule_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    recurring_order_id: Mapped[int] = mapped_column(
        ForeignKey("recurring_orders.id", ondelete="CASCADE"), nullable=False
    )
    schedule_id: Mapped[int] = mapped_column(
        ForeignKey("dispatch_schedules.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    recurring_order: Mapped["RecurringOrder"] = relationship("RecurringOrder", back_populates="schedule_links")
    schedule: Mapped["DispatchSchedule"] = relationship("DispatchSchedule")
