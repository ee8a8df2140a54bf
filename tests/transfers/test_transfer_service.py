from __future__ import annotations

from datetime import date

import pytest

from src.plantation_hr.plantation_hr.core.enums import TransferStatus, TransferType
from src.plantation_hr.plantation_hr.core.exceptions import (
    DependencyFailure,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.plantation_hr.plantation_hr.transfers.service import TransferService

TODAY = date(2024, 7, 1)


@pytest.fixture
def service(transfers_repo, employees_repo):
    return TransferService(transfers_repo, employees_repo)


def _submit(service, **overrides):
    data = dict(
        employee_id=1,
        to_division_id=2,
        transfer_date=TODAY,
        effective_date=TODAY,
        reason="Rotasi afdeling",
        requested_by=50,
    )
    data.update(overrides)
    return service.submit(**data)


def test_submit_captures_current_assignment(service):
    transfer = _submit(service)

    assert transfer.status == TransferStatus.PENDING
    assert (transfer.from_division_id, transfer.from_position_id) == (1, 1)
    assert (transfer.to_division_id, transfer.to_position_id) == (2, 1)
    assert service.transfer_type(transfer) == TransferType.DIVISION


def test_noop_transfer_is_rejected(service, transfers_repo):
    with pytest.raises(ValidationError):
        _submit(service, to_division_id=1, to_position_id=1)

    assert transfers_repo.by_id == {}


def test_effective_date_before_transfer_date(service):
    with pytest.raises(ValidationError):
        _submit(service, effective_date=date(2024, 6, 30))


def test_submit_for_unknown_employee(service):
    with pytest.raises(NotFoundError):
        _submit(service, employee_id=404)


def test_approve_then_reject_keeps_approved(service):
    transfer = _submit(service)
    service.approve(transfer_id=transfer.transfer_id, approver_id=60)

    with pytest.raises(InvalidStateError):
        service.reject(transfer_id=transfer.transfer_id, approver_id=60, notes="Batal")

    assert service.get(transfer_id=transfer.transfer_id).status == TransferStatus.APPROVED


def test_approval_does_not_move_employee(service, employees_repo):
    transfer = _submit(service)

    service.approve(transfer_id=transfer.transfer_id, approver_id=60)

    assert employees_repo.get_by_id(1).division_id == 1


def test_complete_applies_assignment(service, employees_repo):
    transfer = _submit(service, to_position_id=3)
    service.approve(transfer_id=transfer.transfer_id, approver_id=60)

    completed = service.complete(transfer_id=transfer.transfer_id, today=TODAY)

    assert completed.status == TransferStatus.COMPLETED
    assert completed.completed_date == TODAY
    employee = employees_repo.get_by_id(1)
    assert (employee.division_id, employee.position_id) == (2, 3)


def test_complete_requires_approval(service):
    transfer = _submit(service)

    with pytest.raises(InvalidStateError):
        service.complete(transfer_id=transfer.transfer_id, today=TODAY)


def test_auto_complete_only_due_transfers(service, employees_repo):
    due = _submit(service, employee_id=1)
    later = _submit(service, employee_id=2, effective_date=date(2024, 7, 2))
    for t in (due, later):
        service.approve(transfer_id=t.transfer_id, approver_id=60)

    report = service.auto_complete_due(today=TODAY)

    assert [t.transfer_id for t in report.completed] == [due.transfer_id]
    assert report.failures == ()
    assert service.get(transfer_id=later.transfer_id).status == TransferStatus.APPROVED
    assert employees_repo.get_by_id(2).division_id == 1


def test_auto_complete_isolates_failures(service, employees_repo):
    broken = _submit(service, employee_id=1)
    healthy = _submit(service, employee_id=2)
    for t in (broken, healthy):
        service.approve(transfer_id=t.transfer_id, approver_id=60)
    del employees_repo.by_id[1]

    report = service.auto_complete_due(today=TODAY)

    assert [t.transfer_id for t in report.completed] == [healthy.transfer_id]
    assert [f.transfer_id for f in report.failures] == [broken.transfer_id]
    assert service.get(transfer_id=broken.transfer_id).status == TransferStatus.APPROVED
    assert employees_repo.get_by_id(2).division_id == 2


@pytest.mark.parametrize(
    "to_division_id, to_position_id, expected",
    [
        (2, None, TransferType.DIVISION),
        (None, 2, TransferType.POSITION),
        (2, 2, TransferType.BOTH),
    ],
)
def test_transfer_type(service, to_division_id, to_position_id, expected):
    transfer = _submit(service, to_division_id=to_division_id, to_position_id=to_position_id)

    assert service.transfer_type(transfer) == expected


def test_statistics(service):
    a = _submit(service, employee_id=1)
    _submit(service, employee_id=2, to_division_id=None, to_position_id=2)
    service.reject(transfer_id=a.transfer_id, approver_id=60)

    stats = service.statistics()

    assert stats.total == 2
    assert stats.by_status["pending"] == 1
    assert stats.by_status["rejected"] == 1
    assert stats.by_type == {"division": 1, "position": 1, "both": 0}


def test_statistics_count_every_row(transfers_repo, service):
    for i in range(520):
        transfers_repo.create(
            employee_id=1, from_division_id=1, from_position_id=1,
            to_division_id=2, to_position_id=2 if i % 2 else 1,
            transfer_date=TODAY, effective_date=TODAY, reason=None, notes=None, requested_by=50,
        )

    stats = service.statistics()

    assert len(service.list_transfers()) == 500
    assert stats.total == 520
    assert stats.by_status["pending"] == 520
    assert stats.by_type == {"division": 260, "position": 0, "both": 260}


def test_complete_writes_inside_one_transaction(transfers_repo, employees_repo, recording_transaction, monkeypatch):
    service = TransferService(transfers_repo, employees_repo, transaction=recording_transaction)
    transfer = _submit(service)
    service.approve(transfer_id=transfer.transfer_id, approver_id=60)

    def lock_timeout(**kwargs):
        raise DependencyFailure("Query database gagal: lock wait timeout")

    monkeypatch.setattr(
        employees_repo, "update_assignment",
        recording_transaction.wrap("update_assignment", employees_repo.update_assignment),
    )
    monkeypatch.setattr(transfers_repo, "mark_completed", recording_transaction.wrap("mark_completed", lock_timeout))

    with pytest.raises(DependencyFailure):
        service.complete(transfer_id=transfer.transfer_id, today=TODAY)

    assert recording_transaction.blocks == 1
    assert recording_transaction.calls == [("update_assignment", 1), ("mark_completed", 1)]
    assert [type(e) for e in recording_transaction.errors] == [DependencyFailure]
    assert transfers_repo.get_by_id(transfer.transfer_id).status == TransferStatus.APPROVED
