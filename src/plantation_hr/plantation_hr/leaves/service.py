from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date
from typing import Callable, ContextManager, Optional, Sequence

from ..attendance.materializer import AttendanceMaterializer
from ..common.datetime_utils import today_local
from ..common.validators import require_non_empty, require_present
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType
from ..core.exceptions import InvalidStateError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..holidays.working_calendar import CalendarService
from .model import LeaveRequest, LeaveStats
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave workflow: ``pending -> approved | rejected`` (both terminal).

    Approval and the ``cuti`` attendance it produces are written inside one
    transaction. ``rematerialize`` re-runs the attendance side effect for an
    already approved request.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        calendar: CalendarService,
        materializer: AttendanceMaterializer,
        *,
        transaction: Optional[Callable[[], ContextManager]] = None,
    ):
        self._leaves = leaves
        self._employees = employees
        self._calendar = calendar
        self._materializer = materializer
        self._transaction = transaction or nullcontext

    def _get(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Pengajuan cuti tidak ditemukan")
        return req

    def get(self, *, request_id: int) -> LeaveRequest:
        return self._get(request_id)

    def submit(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType | str,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str,
    ) -> LeaveRequest:
        require_present(employee_id, "Karyawan")
        require_present(start_date, "Tanggal mulai")
        require_present(end_date, "Tanggal selesai")
        reason = require_non_empty(reason, "Alasan")

        try:
            leave_type = LeaveType(leave_type)
        except ValueError:
            raise ValidationError("Jenis cuti tidak valid")

        if end_date < start_date:
            raise ValidationError("Tanggal selesai harus >= tanggal mulai")

        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Karyawan tidak ditemukan")

        # Persisted as computed now; later holiday edits do not change it.
        total_days = self._calendar.count_working_days(start_date, end_date)

        request_id = self._leaves.create(
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=reason,
            requested_date=today_local(),
        )
        logger.info(
            "Leave request %s submitted for employee %s (%s..%s, %d day(s))",
            request_id, employee_id, start_date, end_date, total_days,
        )
        return self._get(request_id)

    def _materialize(self, req: LeaveRequest) -> int:
        return self._materializer.materialize_range(
            employee_id=req.employee_id,
            start=req.start_date,
            end=req.end_date,
            status=AttendanceStatus.CUTI,
            note=req.leave_type_label,
        )

    def approve(self, *, request_id: int, approver_id: int) -> LeaveRequest:
        req = self._get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise InvalidStateError("Pengajuan cuti sudah diproses")

        with self._transaction():
            decided = self._leaves.decide(
                request_id=req.request_id,
                status=LeaveStatus.APPROVED,
                decided_by=int(approver_id),
            )
            if not decided:
                raise InvalidStateError("Pengajuan cuti sudah diproses")
            days = self._materialize(req)

        logger.info("Leave request %s approved by %s, %d attendance day(s) written", req.request_id, approver_id, days)
        return self._get(req.request_id)

    def reject(self, *, request_id: int, approver_id: int, reason: str) -> LeaveRequest:
        req = self._get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise InvalidStateError("Pengajuan cuti sudah diproses")

        reason = require_non_empty(reason, "Alasan penolakan")
        decided = self._leaves.decide(
            request_id=req.request_id,
            status=LeaveStatus.REJECTED,
            decided_by=int(approver_id),
            rejection_reason=reason,
        )
        if not decided:
            raise InvalidStateError("Pengajuan cuti sudah diproses")

        logger.info("Leave request %s rejected by %s", req.request_id, approver_id)
        return self._get(req.request_id)

    def rematerialize(self, *, request_id: int) -> int:
        req = self._get(request_id)
        if req.status != LeaveStatus.APPROVED:
            raise InvalidStateError("Hanya cuti yang disetujui yang dapat diproses ulang")
        return self._materialize(req)

    def list_requests(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(status=status, employee_id=employee_id, limit=DEFAULT_LIST_LIMIT)

    def statistics(self) -> LeaveStats:
        counts = self._leaves.count_by_status()
        return LeaveStats(
            total=sum(counts.values()),
            pending=counts.get(LeaveStatus.PENDING, 0),
            approved=counts.get(LeaveStatus.APPROVED, 0),
            rejected=counts.get(LeaveStatus.REJECTED, 0),
            annual_days_used=self._leaves.sum_total_days(status=LeaveStatus.APPROVED, leave_type=LeaveType.ANNUAL),
        )
