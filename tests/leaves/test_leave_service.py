from __future__ import annotations

from datetime import date

import pytest

from src.plantation_hr.plantation_hr.core.enums import AttendanceStatus, HolidayCategory, LeaveStatus, LeaveType
from src.plantation_hr.plantation_hr.core.exceptions import (
    DependencyFailure,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.plantation_hr.plantation_hr.leaves.service import LeaveService


@pytest.fixture
def service(leaves_repo, employees_repo, calendar_service, materializer):
    return LeaveService(leaves_repo, employees_repo, calendar_service, materializer)


def _submit(service, **overrides):
    data = dict(
        employee_id=1,
        leave_type="annual",
        start_date=date(2024, 3, 4),
        end_date=date(2024, 3, 8),
        reason="Acara keluarga",
    )
    data.update(overrides)
    return service.submit(**data)


def test_submit_computes_working_days(service):
    req = _submit(service)

    assert req.status == LeaveStatus.PENDING
    assert req.leave_type == LeaveType.ANNUAL
    assert req.total_days == 5


def test_submit_excludes_holidays_and_rest_day(service, holidays_repo):
    holidays_repo.create(
        holiday_date=date(2024, 3, 11), name="Nyepi", category=HolidayCategory.RELIGIOUS,
        is_paid=True, description=None,
    )

    req = _submit(service, start_date=date(2024, 3, 8), end_date=date(2024, 3, 12))

    # Fri, Sat, (Sun), (Nyepi), Tue
    assert req.total_days == 3


def test_approve_materializes_cuti_rows(service, attendance_repo):
    req = _submit(service)

    approved = service.approve(request_id=req.request_id, approver_id=99)

    assert approved.status == LeaveStatus.APPROVED
    assert approved.approved_by == 99
    rows = attendance_repo.list_for_employee(employee_id=1, start=date(2024, 3, 4), end=date(2024, 3, 8))
    assert len(rows) == 5
    assert all(r.status == AttendanceStatus.CUTI for r in rows)
    assert all(r.notes == "Cuti Tahunan" for r in rows)


def test_approve_twice_is_invalid(service):
    req = _submit(service)
    service.approve(request_id=req.request_id, approver_id=99)

    with pytest.raises(InvalidStateError):
        service.approve(request_id=req.request_id, approver_id=99)


def test_reject_requires_reason(service):
    req = _submit(service)

    with pytest.raises(ValidationError):
        service.reject(request_id=req.request_id, approver_id=99, reason="  ")

    assert service.get(request_id=req.request_id).status == LeaveStatus.PENDING


def test_reject_records_reason_and_writes_no_attendance(service, attendance_repo):
    req = _submit(service)

    rejected = service.reject(request_id=req.request_id, approver_id=99, reason="Masa panen")

    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.rejection_reason == "Masa panen"
    assert attendance_repo.rows == {}
    with pytest.raises(InvalidStateError):
        service.approve(request_id=req.request_id, approver_id=99)


@pytest.mark.parametrize(
    "overrides",
    [
        {"start_date": None},
        {"end_date": None},
        {"reason": ""},
        {"leave_type": "sabbatical"},
        {"start_date": date(2024, 3, 8), "end_date": date(2024, 3, 4)},
    ],
)
def test_submit_validation(service, leaves_repo, overrides):
    with pytest.raises(ValidationError):
        _submit(service, **overrides)

    assert leaves_repo.by_id == {}


def test_submit_for_unknown_employee(service):
    with pytest.raises(NotFoundError):
        _submit(service, employee_id=404)


def test_rematerialize_only_for_approved(service, attendance_repo):
    req = _submit(service)
    with pytest.raises(InvalidStateError):
        service.rematerialize(request_id=req.request_id)

    service.approve(request_id=req.request_id, approver_id=99)
    attendance_repo.rows.clear()

    assert service.rematerialize(request_id=req.request_id) == 5
    assert len(attendance_repo.rows) == 5


def test_statistics(service):
    first = _submit(service)
    second = _submit(service, employee_id=2, leave_type="sick")
    _submit(service, employee_id=3)
    service.approve(request_id=first.request_id, approver_id=99)
    service.reject(request_id=second.request_id, approver_id=99, reason="Dokumen kurang")

    stats = service.statistics()

    assert (stats.total, stats.pending, stats.approved, stats.rejected) == (3, 1, 1, 1)
    assert stats.annual_days_used == 5


def test_statistics_count_every_row(leaves_repo, service):
    for i in range(510):
        leaves_repo.create(
            employee_id=1,
            leave_type=LeaveType.ANNUAL,
            start_date=date(2024, 3, 4),
            end_date=date(2024, 3, 4),
            total_days=1,
            reason="Acara keluarga",
            requested_date=date(2024, 3, 1),
        )
    for request_id in range(1, 11):
        leaves_repo.decide(request_id=request_id, status=LeaveStatus.APPROVED, decided_by=99)

    stats = service.statistics()

    assert len(service.list_requests()) == 500
    assert (stats.total, stats.pending, stats.approved, stats.rejected) == (510, 500, 10, 0)
    assert stats.annual_days_used == 10


def test_approve_writes_inside_one_transaction(
    leaves_repo, employees_repo, calendar_service, materializer, attendance_repo, recording_transaction, monkeypatch
):
    service = LeaveService(
        leaves_repo, employees_repo, calendar_service, materializer, transaction=recording_transaction
    )
    req = _submit(service)

    def connection_lost(**kwargs):
        raise DependencyFailure("Query database gagal: connection lost")

    monkeypatch.setattr(leaves_repo, "decide", recording_transaction.wrap("decide", leaves_repo.decide))
    monkeypatch.setattr(attendance_repo, "upsert_status", recording_transaction.wrap("upsert_status", connection_lost))

    with pytest.raises(DependencyFailure):
        service.approve(request_id=req.request_id, approver_id=99)

    assert recording_transaction.blocks == 1
    assert recording_transaction.calls == [("decide", 1), ("upsert_status", 1)]
    assert [type(e) for e in recording_transaction.errors] == [DependencyFailure]
    assert attendance_repo.rows == {}
