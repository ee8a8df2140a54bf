from __future__ import annotations

from enum import Enum


class EmployeeStatus(str, Enum):
    """Status operasional karyawan."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on-leave"


class WorkflowStatus(str, Enum):
    """Proses HR yang sedang berjalan untuk karyawan (paling banyak satu)."""

    NONE = "none"
    RECRUITMENT = "recruitment"
    PROBATION = "probation"
    TERMINATION = "termination"


class EmploymentType(str, Enum):
    PERMANENT = "permanent"
    CONTRACT = "contract"
    DAILY = "daily"


class TerminationReason(str, Enum):
    RESIGNATION = "resignation"
    RETIREMENT = "retirement"
    CONTRACT_END = "contract_end"
    LAYOFF = "layoff"


class AttendanceStatus(str, Enum):
    """Status presensi yang disimpan di tabel attendance_records."""

    PRESENT = "present"
    ABSENT = "absent"
    HOLIDAY = "holiday"
    CUTI = "cuti"
    SICK = "sick"
    PERMISSION = "permission"


class HolidayCategory(str, Enum):
    NATIONAL = "national"
    RELIGIOUS = "religious"
    COMPANY = "company"


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    UNPAID = "unpaid"
    OTHER = "other"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class TransferStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class TransferType(str, Enum):
    DIVISION = "division"
    POSITION = "position"
    BOTH = "both"


class ProbationOutcome(str, Enum):
    PASS = "pass"
    EXTEND = "extend"
    FAIL = "fail"


class TerminationOutcome(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class PermissionAction(str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
