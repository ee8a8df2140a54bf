from __future__ import annotations

from dataclasses import dataclass

from .attendance.materializer import AttendanceMaterializer
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .core.constants import DEFAULT_PROBATION_MONTHS, DEFAULT_REST_WEEKDAY
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeLifecycleService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .holidays.working_calendar import CalendarService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .permissions.mysql_permission_repository import MySQLPermissionRepository
from .permissions.service import PermissionService
from .transfers.mysql_transfer_repository import MySQLTransferRepository
from .transfers.service import TransferService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    calendar_service: CalendarService
    materializer: AttendanceMaterializer
    permission_service: PermissionService
    holiday_service: HolidayService
    leave_service: LeaveService
    transfer_service: TransferService
    lifecycle_service: EmployeeLifecycleService


def build_container(
    *,
    db_config: dict,
    rest_weekday: int = DEFAULT_REST_WEEKDAY,
    probation_months: int = DEFAULT_PROBATION_MONTHS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    employees_repo = MySQLEmployeeRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    transfers_repo = MySQLTransferRepository(conn)
    permissions_repo = MySQLPermissionRepository(conn)

    calendar_service = CalendarService(holidays_repo, rest_weekday=rest_weekday)
    materializer = AttendanceMaterializer(attendance_repo, employees_repo, calendar_service)

    return Container(
        conn=conn,
        calendar_service=calendar_service,
        materializer=materializer,
        permission_service=PermissionService(permissions_repo),
        holiday_service=HolidayService(holidays_repo, materializer, transaction=conn.transaction),
        leave_service=LeaveService(
            leaves_repo,
            employees_repo,
            calendar_service,
            materializer,
            transaction=conn.transaction,
        ),
        transfer_service=TransferService(transfers_repo, employees_repo, transaction=conn.transaction),
        lifecycle_service=EmployeeLifecycleService(employees_repo, probation_months=probation_months),
    )
