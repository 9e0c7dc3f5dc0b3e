from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, time
from typing import Iterator, Optional, Sequence

import mysql.connector

from ..core.enums import ReportSort, ShiftStatus
from ..core.exceptions import DuplicateShiftError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_time
from .model import ShiftFilter, ShiftRecord, ShiftRecordView
from .repository import ShiftRepository, ShiftStoreSession

logger = logging.getLogger(__name__)

_RECORD_COLUMNS = "ts.id, ts.employee_id, ts.date, ts.clock_in, ts.clock_out, ts.break_duration, ts.total_hours, ts.status"

_ORDER_BY = {
    ReportSort.DATE_DESC: "ts.date DESC, ts.id DESC",
    ReportSort.DATE_ASC: "ts.date ASC, ts.id ASC",
    ReportSort.NAME_ASC: "e.first_name ASC, e.last_name ASC, ts.id ASC",
    ReportSort.NAME_DESC: "e.first_name DESC, e.last_name DESC, ts.id DESC",
}

DUPLICATE_MESSAGE = "A timesheet entry already exists for this date."


def _opt_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _opt_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _to_record(r: dict) -> ShiftRecord:
    return ShiftRecord(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        date=r["date"],
        clock_in=normalize_mysql_time(r["clock_in"]),
        clock_out=normalize_mysql_time(r.get("clock_out")),
        break_minutes=_opt_int(r.get("break_duration")),
        total_hours=_opt_float(r.get("total_hours")),
        status=ShiftStatus(r["status"]),
    )


def _to_view(r: dict) -> ShiftRecordView:
    return ShiftRecordView(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        first_name=r.get("first_name") or "",
        last_name=r.get("last_name") or "",
        date=r["date"],
        clock_in=normalize_mysql_time(r["clock_in"]),
        clock_out=normalize_mysql_time(r.get("clock_out")),
        break_minutes=_opt_int(r.get("break_duration")),
        total_hours=_opt_float(r.get("total_hours")),
        status=ShiftStatus(r["status"]),
    )


def _where(shift_filter: ShiftFilter) -> tuple[str, list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if shift_filter.employee_id is not None:
        clauses.append("ts.employee_id=%s")
        params.append(int(shift_filter.employee_id))
    if shift_filter.date is not None:
        clauses.append("ts.date=%s")
        params.append(shift_filter.date)
    return ("WHERE " + " AND ".join(clauses)) if clauses else "", params


class MySQLShiftSession(ShiftStoreSession):
    """Store operations bound to one open cursor (one transaction)."""

    def __init__(self, cur):
        self._cur = cur

    def find_open_shift(self, employee_id: int, work_date: date) -> Optional[ShiftRecord]:
        self._cur.execute(
            f"""
            SELECT {_RECORD_COLUMNS}
            FROM timesheets ts
            WHERE ts.employee_id=%s AND ts.date=%s AND ts.clock_out IS NULL
            FOR UPDATE
            """,
            (employee_id, work_date),
        )
        r = fetchone(self._cur)
        return _to_record(r) if r else None

    def find_shift(self, employee_id: int, work_date: date) -> Optional[ShiftRecord]:
        self._cur.execute(
            f"""
            SELECT {_RECORD_COLUMNS}
            FROM timesheets ts
            WHERE ts.employee_id=%s AND ts.date=%s
            """,
            (employee_id, work_date),
        )
        r = fetchone(self._cur)
        return _to_record(r) if r else None

    def create_shift(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: time,
        status: ShiftStatus,
    ) -> ShiftRecord:
        try:
            self._cur.execute(
                """
                INSERT INTO timesheets(employee_id, date, clock_in, status)
                VALUES(%s,%s,%s,%s)
                """,
                (employee_id, work_date, clock_in, status.value),
            )
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                logger.info("Duplicate timesheet entry rejected: employee_id=%s date=%s", employee_id, work_date)
                raise DuplicateShiftError(DUPLICATE_MESSAGE) from e
            raise

        return ShiftRecord(
            id=int(self._cur.lastrowid),
            employee_id=employee_id,
            date=work_date,
            clock_in=clock_in,
            clock_out=None,
            break_minutes=None,
            total_hours=None,
            status=status,
        )

    def close_shift(
        self,
        *,
        shift_id: int,
        clock_out: time,
        break_minutes: int,
        total_hours: float,
        status: Optional[ShiftStatus] = None,
    ) -> None:
        sets = ["clock_out=%s", "break_duration=%s", "total_hours=%s"]
        params: list[object] = [clock_out, int(break_minutes), round(float(total_hours), 4)]
        if status is not None:
            sets.append("status=%s")
            params.append(status.value)
        params.append(int(shift_id))

        self._cur.execute(
            f"""
            UPDATE timesheets
            SET {", ".join(sets)}
            WHERE id=%s AND clock_out IS NULL
            """,
            tuple(params),
        )
        if self._cur.rowcount == 0:
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
        params = (employee_id, work_date, clock_in, clock_out, int(break_minutes), round(float(total_hours), 4), status.value)

        if override:
            self._cur.execute(
                """
                INSERT INTO timesheets(employee_id, date, clock_in, clock_out, break_duration, total_hours, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE
                    clock_in=new.clock_in,
                    clock_out=new.clock_out,
                    break_duration=new.break_duration,
                    total_hours=new.total_hours,
                    status=new.status
                """,
                params,
            )
            record = self.find_shift(employee_id, work_date)
            if record is None:
                raise NotFoundError("Timesheet entry vanished after upsert.")
            return record

        try:
            self._cur.execute(
                """
                INSERT INTO timesheets(employee_id, date, clock_in, clock_out, break_duration, total_hours, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                params,
            )
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                logger.info("Duplicate timesheet entry rejected: employee_id=%s date=%s", employee_id, work_date)
                raise DuplicateShiftError(DUPLICATE_MESSAGE) from e
            raise

        return ShiftRecord(
            id=int(self._cur.lastrowid),
            employee_id=employee_id,
            date=work_date,
            clock_in=clock_in,
            clock_out=clock_out,
            break_minutes=int(break_minutes),
            total_hours=float(total_hours),
            status=status,
        )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[MySQLShiftSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield MySQLShiftSession(cur)

    def _select_views(self, shift_filter: ShiftFilter, sort: ReportSort, suffix: str = "", extra: tuple = ()) -> Sequence[ShiftRecordView]:
        where, params = _where(shift_filter)
        order_by = _ORDER_BY.get(sort, _ORDER_BY[ReportSort.DATE_DESC])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}, e.first_name, e.last_name
                FROM timesheets ts
                JOIN employees e ON e.id = ts.employee_id
                {where}
                ORDER BY {order_by}
                {suffix}
                """,
                tuple(params) + extra,
            )
            return [_to_view(r) for r in fetchall(cur)]

    def query(self, shift_filter: ShiftFilter, sort: ReportSort) -> Sequence[ShiftRecordView]:
        return self._select_views(shift_filter, sort)

    def query_page(
        self,
        shift_filter: ShiftFilter,
        sort: ReportSort,
        *,
        limit: int,
        offset: int,
    ) -> Sequence[ShiftRecordView]:
        return self._select_views(shift_filter, sort, "LIMIT %s OFFSET %s", (int(limit), int(offset)))

    def count(self, shift_filter: ShiftFilter) -> int:
        where, params = _where(shift_filter)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM timesheets ts
                JOIN employees e ON e.id = ts.employee_id
                {where}
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_for_employee(
        self,
        employee_id: int,
        *,
        work_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[ShiftRecord]:
        clauses = ["ts.employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if work_date is not None:
            clauses.append("ts.date=%s")
            params.append(work_date)

        suffix = ""
        if limit is not None:
            suffix = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM timesheets ts
                WHERE {" AND ".join(clauses)}
                ORDER BY ts.date DESC
                {suffix}
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
