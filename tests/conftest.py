from __future__ import annotations

import copy
import dataclasses
from contextlib import contextmanager
from datetime import date, time
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from hrms.container import build_services
from hrms.core.context import RequestContext
from hrms.core.enums import ReportSort, Role, ShiftStatus
from hrms.core.exceptions import DuplicateShiftError, NotFoundError
from hrms.timesheets.model import ShiftFilter, ShiftRecord, ShiftRecordView
from hrms.users.model import Employee, User

HR_ID = 1
EMPLOYEE_ID = 2


class InMemoryShiftSession:
    def __init__(self, repo: "InMemoryShifts"):
        self._repo = repo

    def find_open_shift(self, employee_id: int, work_date: date) -> Optional[ShiftRecord]:
        rec = self._repo.rows.get((employee_id, work_date))
        return rec if rec and rec.clock_out is None else None

    def find_shift(self, employee_id: int, work_date: date) -> Optional[ShiftRecord]:
        return self._repo.rows.get((employee_id, work_date))

    def create_shift(self, *, employee_id: int, work_date: date, clock_in: time, status: ShiftStatus) -> ShiftRecord:
        # Plays the role of the (employee_id, date) unique key.
        if (employee_id, work_date) in self._repo.rows:
            raise DuplicateShiftError("A timesheet entry already exists for this date.")
        rec = ShiftRecord(
            id=self._repo.next_id(),
            employee_id=employee_id,
            date=work_date,
            clock_in=clock_in,
            clock_out=None,
            break_minutes=None,
            total_hours=None,
            status=status,
        )
        self._repo.rows[(employee_id, work_date)] = rec
        return rec

    def close_shift(self, *, shift_id: int, clock_out: time, break_minutes: int, total_hours: float, status=None) -> None:
        for key, rec in self._repo.rows.items():
            if rec.id == shift_id and rec.clock_out is None:
                self._repo.rows[key] = dataclasses.replace(
                    rec,
                    clock_out=clock_out,
                    break_minutes=break_minutes,
                    total_hours=total_hours,
                    status=status or rec.status,
                )
                return
        raise NotFoundError(f"No open timesheet with id {shift_id}.")

    def create_complete_shift(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: time,
        clock_out: time,
        break_minutes: int,
        total_hours: float,
        status: ShiftStatus,
        override: bool = False,
    ) -> ShiftRecord:
        existing = self._repo.rows.get((employee_id, work_date))
        if existing and not override:
            raise DuplicateShiftError("A timesheet entry already exists for this date.")
        rec = ShiftRecord(
            id=existing.id if existing else self._repo.next_id(),
            employee_id=employee_id,
            date=work_date,
            clock_in=clock_in,
            clock_out=clock_out,
            break_minutes=break_minutes,
            total_hours=total_hours,
            status=status,
        )
        self._repo.rows[(employee_id, work_date)] = rec
        return rec


class InMemoryShifts:
    """Fake store: unique (employee_id, date) and all-or-nothing transactions."""

    def __init__(self, employees: dict[int, Employee]):
        self.rows: dict[tuple[int, date], ShiftRecord] = {}
        self.employees = employees
        self._id = 0
        self.transactions = 0

    def next_id(self) -> int:
        self._id += 1
        return self._id

    @contextmanager
    def transaction(self):
        snapshot = copy.copy(self.rows)
        self.transactions += 1
        try:
            yield InMemoryShiftSession(self)
        except Exception:
            self.rows = snapshot
            raise

    def _views(self, shift_filter: ShiftFilter) -> list[ShiftRecordView]:
        out = []
        for rec in self.rows.values():
            if shift_filter.employee_id is not None and rec.employee_id != shift_filter.employee_id:
                continue
            if shift_filter.date is not None and rec.date != shift_filter.date:
                continue
            emp = self.employees[rec.employee_id]
            out.append(
                ShiftRecordView(
                    id=rec.id,
                    employee_id=rec.employee_id,
                    first_name=emp.first_name,
                    last_name=emp.last_name,
                    date=rec.date,
                    clock_in=rec.clock_in,
                    clock_out=rec.clock_out,
                    break_minutes=rec.break_minutes,
                    total_hours=rec.total_hours,
                    status=rec.status,
                )
            )
        return out

    def query(self, shift_filter: ShiftFilter, sort: ReportSort):
        rows = self._views(shift_filter)
        if sort == ReportSort.DATE_ASC:
            rows.sort(key=lambda r: (r.date, r.id))
        elif sort == ReportSort.NAME_ASC:
            rows.sort(key=lambda r: (r.first_name, r.last_name, r.id))
        elif sort == ReportSort.NAME_DESC:
            rows.sort(key=lambda r: (r.first_name, r.last_name, r.id), reverse=True)
        else:
            rows.sort(key=lambda r: (r.date, r.id), reverse=True)
        return rows

    def query_page(self, shift_filter: ShiftFilter, sort: ReportSort, *, limit: int, offset: int):
        return self.query(shift_filter, sort)[offset : offset + limit]

    def count(self, shift_filter: ShiftFilter) -> int:
        return len(self._views(shift_filter))

    def list_for_employee(self, employee_id: int, *, work_date=None, limit=None):
        items = [r for r in self.rows.values() if r.employee_id == employee_id]
        if work_date is not None:
            items = [r for r in items if r.date == work_date]
        items.sort(key=lambda r: r.date, reverse=True)
        return items[:limit] if limit is not None else items

    def add_closed(self, employee_id: int, work_date: date, clock_in: time, clock_out: time, total_hours: float, *, break_minutes: int = 0, status=ShiftStatus.APPROVED) -> ShiftRecord:
        rec = ShiftRecord(
            id=self.next_id(),
            employee_id=employee_id,
            date=work_date,
            clock_in=clock_in,
            clock_out=clock_out,
            break_minutes=break_minutes,
            total_hours=total_hours,
            status=status,
        )
        self.rows[(employee_id, work_date)] = rec
        return rec


class InMemoryEmployees:
    def __init__(self, employees: dict[int, Employee]):
        self._employees = employees

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._employees.get(employee_id)

    def list_all(self):
        return sorted(self._employees.values(), key=lambda e: (e.last_name, e.first_name))


class InMemoryUsers:
    def __init__(self, users: dict[int, User]):
        self._users = users

    def get_by_login(self, login_key: str) -> Optional[User]:
        for u in self._users.values():
            if login_key in (u.username, u.email):
                return u
        return None


@pytest.fixture
def employees() -> dict[int, Employee]:
    return {
        HR_ID: Employee(HR_ID, "Helena", "Reyes", "Human Resources", "HR Officer"),
        EMPLOYEE_ID: Employee(EMPLOYEE_ID, "Marco", "Santos", "Engineering", "Developer"),
        3: Employee(3, "Ana", "Cruz", "Finance", "Accountant"),
        7: Employee(7, "Zed", "Lim", "Operations", "Technician"),
    }


@pytest.fixture
def users() -> dict[int, User]:
    return {
        HR_ID: User(HR_ID, "hr", "hr@example.com", generate_password_hash("hr123456"), Role.HR),
        EMPLOYEE_ID: User(EMPLOYEE_ID, "employee", "employee@example.com", generate_password_hash("employee123"), Role.EMPLOYEE),
    }


@pytest.fixture
def shifts_repo(employees) -> InMemoryShifts:
    return InMemoryShifts(employees)


@pytest.fixture
def container(users, employees, shifts_repo):
    return build_services(
        users_repo=InMemoryUsers(users),
        employees_repo=InMemoryEmployees(employees),
        shifts_repo=shifts_repo,
        report_page_size=2,
    )


@pytest.fixture
def hr_ctx() -> RequestContext:
    return RequestContext(user_id=HR_ID, role=Role.HR)


@pytest.fixture
def employee_ctx() -> RequestContext:
    return RequestContext(user_id=EMPLOYEE_ID, role=Role.EMPLOYEE)


@pytest.fixture
def app(container):
    from hrms.main import create_app

    app = create_app(container, settings_module="config.testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login_as(client, user_id: int, role: Role, *, token: str = "test-token") -> str:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role.value
        sess["name"] = "Test User"
        sess["csrf_token"] = token
    return token
