from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_RECENT_SHIFTS, DEFAULT_REPORT_PAGE_SIZE
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .timesheets.mysql_shift_repository import MySQLShiftRepository
from .timesheets.repository import ShiftRepository
from .timesheets.service import TimesheetService
from .users.mysql_user_repository import MySQLEmployeeRepository, MySQLUserRepository
from .users.repository import EmployeeRepository, UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    employees_repo: EmployeeRepository
    shifts_repo: ShiftRepository

    auth_service: AuthService
    timesheet_service: TimesheetService
    report_service: ReportService


def build_services(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    shifts_repo: ShiftRepository,
    report_page_size: int = DEFAULT_REPORT_PAGE_SIZE,
    recent_limit: int = DEFAULT_RECENT_SHIFTS,
) -> Container:
    return Container(
        users_repo=users_repo,
        employees_repo=employees_repo,
        shifts_repo=shifts_repo,
        auth_service=AuthService(users_repo, employees_repo),
        timesheet_service=TimesheetService(shifts_repo, employees_repo, recent_limit=recent_limit),
        report_service=ReportService(shifts_repo, page_size=report_page_size),
    )


def build_container(
    *,
    db_config: dict,
    pool_size: int = 5,
    time_zone: str | None = None,
    pool_wait_seconds: float = 2.0,
    report_page_size: int = DEFAULT_REPORT_PAGE_SIZE,
    recent_limit: int = DEFAULT_RECENT_SHIFTS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_size=int(pool_size),
        time_zone=time_zone,
        pool_wait_seconds=float(pool_wait_seconds),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        report_page_size=report_page_size,
        recent_limit=recent_limit,
    )
