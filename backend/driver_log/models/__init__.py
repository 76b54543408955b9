from sqlmodel import SQLModel

from driver_log.models.audit import AuditLog
from driver_log.models.base import TimestampMixin, UUIDBase
from driver_log.models.driver import Driver
from driver_log.models.enums import (
    AuditAction,
    AuditEntityType,
    LeaveStatus,
    LeaveType,
    ShiftStatus,
)
from driver_log.models.leave import LeaveRequest
from driver_log.models.payroll_config import PayrollConfigVersion
from driver_log.models.shift import Shift

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Driver",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "PayrollConfigVersion",
    "SQLModel",
    "Shift",
    "ShiftStatus",
    "TimestampMixin",
    "UUIDBase",
]
