from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date
from typing import Callable, ContextManager, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import optional_text, require_present
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import TransferStatus, TransferType
from ..core.exceptions import DomainError, InvalidStateError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import AutoCompleteReport, EmployeeTransfer, TransferFailure, TransferStats, classify_transfer, transfer_type_for
from .repository import TransferRepository

logger = logging.getLogger(__name__)


class TransferService:
    """Transfer workflow: ``pending -> approved -> completed`` or ``pending -> rejected``.

    The organizational move is applied when the transfer is completed
    (explicitly or by ``auto_complete_due`` once the effective date has
    arrived). Approval only records the decision.
    """

    def __init__(
        self,
        transfers: TransferRepository,
        employees: EmployeeRepository,
        *,
        transaction: Optional[Callable[[], ContextManager]] = None,
    ):
        self._transfers = transfers
        self._employees = employees
        self._transaction = transaction or nullcontext

    def _get(self, transfer_id: int) -> EmployeeTransfer:
        transfer = self._transfers.get_by_id(int(transfer_id))
        if not transfer:
            raise NotFoundError("Data mutasi tidak ditemukan")
        return transfer

    def get(self, *, transfer_id: int) -> EmployeeTransfer:
        return self._get(transfer_id)

    def submit(
        self,
        *,
        employee_id: int,
        to_division_id: Optional[int] = None,
        to_position_id: Optional[int] = None,
        transfer_date: Optional[date] = None,
        effective_date: Optional[date] = None,
        reason: Optional[str] = None,
        requested_by: int,
        notes: Optional[str] = None,
    ) -> EmployeeTransfer:
        require_present(employee_id, "Karyawan")
        require_present(effective_date, "Tanggal efektif")

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")

        # A missing target keeps the current value.
        to_division = to_division_id if to_division_id is not None else employee.division_id
        to_position = to_position_id if to_position_id is not None else employee.position_id
        if to_division == employee.division_id and to_position == employee.position_id:
            raise ValidationError("Divisi atau jabatan tujuan harus berbeda dari saat ini")

        transfer_date = transfer_date or today_local()
        if effective_date < transfer_date:
            raise ValidationError("Tanggal efektif tidak boleh sebelum tanggal mutasi")

        transfer_id = self._transfers.create(
            employee_id=employee.employee_id,
            from_division_id=employee.division_id,
            from_position_id=employee.position_id,
            to_division_id=to_division,
            to_position_id=to_position,
            transfer_date=transfer_date,
            effective_date=effective_date,
            reason=optional_text(reason),
            notes=optional_text(notes),
            requested_by=int(requested_by),
        )
        logger.info("Transfer %s submitted for employee %s by %s", transfer_id, employee.employee_id, requested_by)
        return self._get(transfer_id)

    def _decide(self, transfer_id: int, status: TransferStatus, approver_id: int, notes: Optional[str]) -> EmployeeTransfer:
        transfer = self._get(transfer_id)
        if transfer.status != TransferStatus.PENDING:
            raise InvalidStateError("Mutasi sudah diproses")

        decided = self._transfers.decide(
            transfer_id=transfer.transfer_id,
            status=status,
            decided_by=int(approver_id),
            notes=optional_text(notes),
        )
        if not decided:
            raise InvalidStateError("Mutasi sudah diproses")

        logger.info("Transfer %s %s by %s", transfer.transfer_id, status.value, approver_id)
        return self._get(transfer.transfer_id)

    def approve(self, *, transfer_id: int, approver_id: int) -> EmployeeTransfer:
        return self._decide(transfer_id, TransferStatus.APPROVED, approver_id, None)

    def reject(self, *, transfer_id: int, approver_id: int, notes: Optional[str] = None) -> EmployeeTransfer:
        return self._decide(transfer_id, TransferStatus.REJECTED, approver_id, notes)

    def complete(self, *, transfer_id: int, today: Optional[date] = None) -> EmployeeTransfer:
        transfer = self._get(transfer_id)
        if transfer.status != TransferStatus.APPROVED:
            raise InvalidStateError("Hanya mutasi yang disetujui yang dapat diselesaikan")

        with self._transaction():
            moved = self._employees.update_assignment(
                employee_id=transfer.employee_id,
                division_id=transfer.to_division_id,
                position_id=transfer.to_position_id,
            )
            if not moved:
                raise NotFoundError("Karyawan tidak ditemukan")
            if not self._transfers.mark_completed(transfer_id=transfer.transfer_id, completed_date=today or today_local()):
                raise InvalidStateError("Mutasi sudah diproses")

        logger.info(
            "Transfer %s completed: employee %s -> division %s, position %s",
            transfer.transfer_id, transfer.employee_id, transfer.to_division_id, transfer.to_position_id,
        )
        return self._get(transfer.transfer_id)

    def auto_complete_due(self, *, today: Optional[date] = None) -> AutoCompleteReport:
        today = today or today_local()
        completed: list[EmployeeTransfer] = []
        failures: list[TransferFailure] = []

        for transfer in self._transfers.list_due(today=today):
            try:
                completed.append(self.complete(transfer_id=transfer.transfer_id, today=today))
            except DomainError as exc:
                logger.warning("Auto-complete of transfer %s failed: %s", transfer.transfer_id, exc)
                failures.append(TransferFailure(transfer_id=transfer.transfer_id, error=str(exc)))

        if completed or failures:
            logger.info("Auto-complete on %s: %d completed, %d failed", today, len(completed), len(failures))
        return AutoCompleteReport(completed=tuple(completed), failures=tuple(failures))

    @staticmethod
    def transfer_type(transfer: EmployeeTransfer) -> TransferType:
        return classify_transfer(transfer)

    def list_transfers(self, *, status: Optional[TransferStatus] = None) -> Sequence[EmployeeTransfer]:
        return self._transfers.list_transfers(status=status, limit=DEFAULT_LIST_LIMIT)

    def statistics(self) -> TransferStats:
        counts = self._transfers.count_by_status()
        by_status = {s.value: counts.get(s, 0) for s in TransferStatus}
        by_type = {t.value: 0 for t in TransferType}
        for (division_changed, position_changed), n in self._transfers.count_by_change().items():
            by_type[transfer_type_for(division_changed, position_changed).value] += n
        return TransferStats(total=sum(counts.values()), by_status=by_status, by_type=by_type)
