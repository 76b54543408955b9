from __future__ import annotations

import enum


class ShiftStatus(enum.StrEnum):
    """State machine for a driver's shift."""

    ACTIVE = "active"
    COMPLETED = "completed"


class LeaveType(enum.StrEnum):
    """Kind of leave a driver can request."""

    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    DRIVER = "DRIVER"
    SHIFT = "SHIFT"
    LEAVE = "LEAVE"
    PAYROLL_CONFIG = "PAYROLL_CONFIG"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
