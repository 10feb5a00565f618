"""DB models"""
from woodyard.models.user import User, DbSession
from woodyard.models.customer import Customer
from woodyard.models.schedule import DispatchSchedule, DeliveryStop
from woodyard.models.recurring import RecurringOrder, RecurringOrderSchedule

__all__ = [
    "User",
    "DbSession",
    "Customer",
    "DispatchSchedule",
    "DeliveryStop",
    "RecurringOrder",
    "RecurringOrderSchedule",
]
