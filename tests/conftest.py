from __future__ import annotations

from calendar import SUNDAY
from collections import Counter
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.plantation_hr.plantation_hr.attendance.materializer import AttendanceMaterializer
from src.plantation_hr.plantation_hr.attendance.model import AttendanceRecord
from src.plantation_hr.plantation_hr.core.enums import (
    EmployeeStatus,
    EmploymentType,
    LeaveStatus,
    TransferStatus,
    WorkflowStatus,
)
from src.plantation_hr.plantation_hr.employees.model import Employee
from src.plantation_hr.plantation_hr.holidays.model import Holiday
from src.plantation_hr.plantation_hr.holidays.working_calendar import CalendarService
from src.plantation_hr.plantation_hr.leaves.model import LeaveRequest
from src.plantation_hr.plantation_hr.transfers.model import EmployeeTransfer


def make_employee(employee_id: int, **overrides) -> Employee:
    data = dict(
        employee_id=employee_id,
        employee_code=f"EMP-{employee_id:04d}",
        full_name=f"Karyawan {employee_id}",
        division_id=1,
        position_id=1,
        employment_type=EmploymentType.PERMANENT,
        join_date=date(2024, 1, 2),
        status=EmployeeStatus.ACTIVE,
    )
    data.update(overrides)
    return Employee(**data)


class InMemoryHolidays:
    def __init__(self, holidays: Optional[list[Holiday]] = None):
        self._by_id: dict[int, Holiday] = {h.holiday_id: h for h in holidays or []}
        self._next_id = max(self._by_id, default=0) + 1

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        return self._by_id.get(int(holiday_id))

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        return next((h for h in self._by_id.values() if h.holiday_date == holiday_date), None)

    def list_dates(self, *, start=None, end=None) -> list[date]:
        return [
            h.holiday_date
            for h in self._by_id.values()
            if (start is None or h.holiday_date >= start) and (end is None or h.holiday_date <= end)
        ]

    def list_all(self, *, year=None) -> list[Holiday]:
        rows = sorted(self._by_id.values(), key=lambda h: h.holiday_date)
        return [h for h in rows if year is None or h.holiday_date.year == year]

    def create(self, *, holiday_date, name, category, is_paid, description) -> int:
        hid = self._next_id
        self._next_id += 1
        self._by_id[hid] = Holiday(hid, holiday_date, name, category, is_paid, description)
        return hid

    def update(self, *, holiday_id, name, category, is_paid, description) -> bool:
        h = self._by_id.get(int(holiday_id))
        if not h:
            return False
        self._by_id[h.holiday_id] = replace(h, name=name, category=category, is_paid=is_paid, description=description)
        return True

    def delete(self, *, holiday_id) -> bool:
        return self._by_id.pop(int(holiday_id), None) is not None


class InMemoryAttendance:
    """Keyed by (employee_id, work_date), like the unique index."""

    def __init__(self):
        self.rows: dict[tuple[int, date], AttendanceRecord] = {}
        self._next_id = 1
        self.upsert_calls = 0

    def add(self, employee_id: int, work_date: date, status, notes=None) -> AttendanceRecord:
        rec = AttendanceRecord(self._next_id, employee_id, work_date, status, notes=notes)
        self._next_id += 1
        self.rows[(employee_id, work_date)] = rec
        return rec

    # Read helpers for assertions; not part of AttendanceRepository.
    def get_for_employee_and_date(self, *, employee_id, work_date):
        return self.rows.get((int(employee_id), work_date))

    def list_for_employee(self, *, employee_id, start, end):
        return sorted(
            (r for (eid, d), r in self.rows.items() if eid == employee_id and start <= d <= end),
            key=lambda r: r.work_date,
        )

    def list_on_date(self, *, work_date):
        return sorted((r for (_, d), r in self.rows.items() if d == work_date), key=lambda r: r.employee_id)

    def upsert_status(self, *, employee_ids, work_dates, status, notes=None) -> int:
        self.upsert_calls += 1
        for eid in employee_ids:
            for d in work_dates:
                existing = self.rows.get((eid, d))
                if existing:
                    self.rows[(eid, d)] = replace(existing, status=status, notes=notes, check_in=None, check_out=None)
                else:
                    self.add(eid, d, status, notes)
        return len(employee_ids) * len(work_dates)

    def delete_by_status(self, *, work_date, status, employee_id=None) -> int:
        keys = [
            k for k, r in self.rows.items()
            if r.work_date == work_date and r.status == status and (employee_id is None or r.employee_id == employee_id)
        ]
        for k in keys:
            del self.rows[k]
        return len(keys)


class InMemoryEmployees:
    def __init__(self, employees: Optional[list[Employee]] = None):
        self.by_id: dict[int, Employee] = {e.employee_id: e for e in employees or []}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.by_id.get(int(employee_id))

    def list_active_ids(self) -> list[int]:
        return sorted(e.employee_id for e in self.by_id.values() if e.status == EmployeeStatus.ACTIVE)

    def list_by_workflow_status(self, workflow_status: WorkflowStatus) -> list[Employee]:
        return [e for e in self.by_id.values() if e.workflow_status == workflow_status]

    def update_assignment(self, *, employee_id, division_id, position_id) -> bool:
        e = self.by_id.get(int(employee_id))
        if not e:
            return False
        self.by_id[e.employee_id] = replace(e, division_id=division_id, position_id=position_id)
        return True

    def update_lifecycle(
        self, *, employee_id, expected_workflow_status, workflow_status, status, probation_end_date, termination_reason
    ) -> bool:
        e = self.by_id.get(int(employee_id))
        if not e or e.workflow_status != expected_workflow_status:
            return False
        self.by_id[e.employee_id] = replace(
            e,
            workflow_status=workflow_status,
            status=status,
            probation_end_date=probation_end_date,
            termination_reason=termination_reason,
        )
        return True


class InMemoryLeaves:
    def __init__(self):
        self.by_id: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def create(self, *, employee_id, leave_type, start_date, end_date, total_days, reason, requested_date) -> int:
        rid = self._next_id
        self._next_id += 1
        self.by_id[rid] = LeaveRequest(
            request_id=rid,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=reason,
            status=LeaveStatus.PENDING,
            requested_date=requested_date,
            created_at=datetime(2024, 3, 1, 8, 0, 0),
        )
        return rid

    def get_by_id(self, request_id):
        return self.by_id.get(int(request_id))

    def list_requests(self, *, status=None, employee_id=None, limit=500):
        rows = [
            r for r in self.by_id.values()
            if (status is None or r.status == status) and (employee_id is None or r.employee_id == employee_id)
        ]
        return rows[:limit]

    def count_by_status(self):
        return dict(Counter(r.status for r in self.by_id.values()))

    def sum_total_days(self, *, status, leave_type) -> int:
        return sum(r.total_days for r in self.by_id.values() if r.status == status and r.leave_type == leave_type)

    def decide(self, *, request_id, status, decided_by, rejection_reason=None) -> bool:
        r = self.by_id.get(int(request_id))
        if not r or r.status != LeaveStatus.PENDING:
            return False
        self.by_id[r.request_id] = replace(
            r,
            status=status,
            approved_by=decided_by,
            approved_date=datetime(2024, 3, 2, 9, 0, 0),
            rejection_reason=rejection_reason,
        )
        return True


class InMemoryTransfers:
    def __init__(self):
        self.by_id: dict[int, EmployeeTransfer] = {}
        self._next_id = 1

    def create(
        self, *, employee_id, from_division_id, from_position_id, to_division_id, to_position_id,
        transfer_date, effective_date, reason, notes, requested_by,
    ) -> int:
        tid = self._next_id
        self._next_id += 1
        self.by_id[tid] = EmployeeTransfer(
            transfer_id=tid,
            employee_id=employee_id,
            from_division_id=from_division_id,
            from_position_id=from_position_id,
            to_division_id=to_division_id,
            to_position_id=to_position_id,
            transfer_date=transfer_date,
            effective_date=effective_date,
            status=TransferStatus.PENDING,
            reason=reason,
            notes=notes,
            requested_by=requested_by,
        )
        return tid

    def get_by_id(self, transfer_id):
        return self.by_id.get(int(transfer_id))

    def list_transfers(self, *, status=None, limit=500):
        return [t for t in self.by_id.values() if status is None or t.status == status][:limit]

    def count_by_status(self):
        return dict(Counter(t.status for t in self.by_id.values()))

    def count_by_change(self):
        return dict(Counter(
            (t.from_division_id != t.to_division_id, t.from_position_id != t.to_position_id)
            for t in self.by_id.values()
        ))

    def list_due(self, *, today):
        return [
            t for t in self.by_id.values()
            if t.status == TransferStatus.APPROVED and t.effective_date <= today
        ]

    def decide(self, *, transfer_id, status, decided_by, notes=None) -> bool:
        t = self.by_id.get(int(transfer_id))
        if not t or t.status != TransferStatus.PENDING:
            return False
        self.by_id[t.transfer_id] = replace(
            t, status=status, approved_by=decided_by, notes=notes if notes is not None else t.notes
        )
        return True

    def mark_completed(self, *, transfer_id, completed_date) -> bool:
        t = self.by_id.get(int(transfer_id))
        if not t or t.status != TransferStatus.APPROVED:
            return False
        self.by_id[t.transfer_id] = replace(t, status=TransferStatus.COMPLETED, completed_date=completed_date)
        return True


class InMemoryPermissions:
    def __init__(self, grants: Optional[set[tuple[int, str, str]]] = None):
        self.grants = grants or set()

    def has_permission(self, *, role_id, module, action) -> bool:
        return (int(role_id), module, action.value) in self.grants


class RecordingTransaction:
    """Stands in for ``DatabaseConnection.transaction``.

    Each call opens a numbered block; wrapped repository writes record the
    block they ran in, and exceptions leaving a block are kept (a real
    connection rolls back on them).
    """

    def __init__(self):
        self.blocks = 0
        self.active: Optional[int] = None
        self.calls: list[tuple[str, Optional[int]]] = []
        self.errors: list[Exception] = []

    @contextmanager
    def __call__(self):
        self.blocks += 1
        self.active = self.blocks
        try:
            yield
        except Exception as exc:
            self.errors.append(exc)
            raise
        finally:
            self.active = None

    def wrap(self, name, fn):
        def recorded(*args, **kwargs):
            self.calls.append((name, self.active))
            return fn(*args, **kwargs)

        return recorded


@pytest.fixture
def employee_factory():
    return make_employee


@pytest.fixture
def holidays_repo():
    return InMemoryHolidays()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def employees_repo():
    return InMemoryEmployees([make_employee(1), make_employee(2), make_employee(3)])


@pytest.fixture
def leaves_repo():
    return InMemoryLeaves()


@pytest.fixture
def transfers_repo():
    return InMemoryTransfers()


@pytest.fixture
def permissions_repo():
    return InMemoryPermissions()


@pytest.fixture
def recording_transaction():
    return RecordingTransaction()


@pytest.fixture
def calendar_service(holidays_repo):
    return CalendarService(holidays_repo, rest_weekday=SUNDAY)


@pytest.fixture
def materializer(attendance_repo, employees_repo, calendar_service):
    return AttendanceMaterializer(attendance_repo, employees_repo, calendar_service)
