from __future__ import annotations

import dataclasses
import logging
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date, parse_optional_iso_date
from ..common.validators import parse_break_minutes, parse_positive_int
from ..core.constants import DEFAULT_RECENT_SHIFTS
from ..core.context import RequestContext
from ..core.enums import Role, ShiftStatus
from ..core.exceptions import (
    DomainError,
    DuplicateShiftError,
    NoOpenShiftError,
    OrderError,
    ValidationError,
    ZeroDurationError,
)
from ..users.repository import EmployeeRepository
from .model import ShiftRecord
from .repository import ShiftRepository
from .time_math import compute_worked_hours, normalize_time, parse_clock_time

logger = logging.getLogger(__name__)


class TimesheetService:
    """Clock-in / clock-out workflow and HR manual entries.

    Per (employee, date) a record moves NoRecord -> Open -> Closed. Each
    state change runs inside one store transaction so the existence check
    and the write cannot interleave with another request.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        employees: Optional[EmployeeRepository] = None,
        *,
        recent_limit: int = DEFAULT_RECENT_SHIFTS,
    ):
        self._shifts = shifts
        self._employees = employees
        self._recent_limit = int(recent_limit)

    def clock_in(self, ctx: RequestContext, *, work_date: str, clock_in: str) -> ShiftRecord:
        employee_id = ctx.require_authenticated()
        logger.info("clock_in attempt: employee_id=%s date=%s clock_in=%s", employee_id, work_date, clock_in)

        try:
            day = parse_iso_date(work_date)
            start = parse_clock_time(clock_in)

            with self._shifts.transaction() as tx:
                if tx.find_shift(employee_id, day) is not None:
                    raise DuplicateShiftError("A timesheet entry already exists for this date.")
                record = tx.create_shift(
                    employee_id=employee_id,
                    work_date=day,
                    clock_in=start,
                    status=ShiftStatus.PENDING,
                )
        except DomainError as e:
            logger.warning("clock_in rejected: employee_id=%s date=%s reason=%s", employee_id, work_date, e)
            raise

        logger.info("clock_in recorded: employee_id=%s date=%s clock_in=%s id=%s", employee_id, day, start, record.id)
        return record

    def clock_out(self, ctx: RequestContext, *, work_date: str, clock_out: str, break_duration: Optional[str]) -> ShiftRecord:
        employee_id = ctx.require_authenticated()
        logger.info(
            "clock_out attempt: employee_id=%s date=%s clock_out=%s break=%s",
            employee_id,
            work_date,
            clock_out,
            break_duration,
        )

        try:
            day = parse_iso_date(work_date)
            end = parse_clock_time(clock_out)
            break_minutes = parse_break_minutes(break_duration)

            with self._shifts.transaction() as tx:
                record = tx.find_open_shift(employee_id, day)
                if record is None:
                    raise NoOpenShiftError("No open timesheet found for this date. Please clock in first.")
                if end <= record.clock_in:
                    raise OrderError("Clock-out time must be after clock-in time.")

                total_hours = compute_worked_hours(record.clock_in, end, break_minutes)
                if total_hours <= 0:
                    raise ZeroDurationError("Break duration leaves no worked time for this shift.")

                tx.close_shift(
                    shift_id=record.id,
                    clock_out=end,
                    break_minutes=break_minutes,
                    total_hours=total_hours,
                )
        except DomainError as e:
            logger.warning("clock_out rejected: employee_id=%s date=%s reason=%s", employee_id, work_date, e)
            raise

        logger.info(
            "clock_out recorded: employee_id=%s date=%s clock_in=%s clock_out=%s break=%s total_hours=%.4f",
            employee_id,
            day,
            record.clock_in,
            end,
            break_minutes,
            total_hours,
        )
        return dataclasses.replace(record, clock_out=end, break_minutes=break_minutes, total_hours=total_hours)

    def record_manual_entry(
        self,
        ctx: RequestContext,
        *,
        employee_id: str,
        work_date: str,
        clock_in: str,
        clock_out: str,
        break_duration: Optional[str] = None,
        override: bool = False,
    ) -> ShiftRecord:
        """HR back-fill: creates an already closed, approved record.

        Times may be 12-hour or 24-hour and the shift may cross midnight.
        An existing entry for the same day is only replaced when override is
        set explicitly.
        """
        hr_id = ctx.require_role(Role.HR)
        logger.info(
            "manual entry attempt: hr_id=%s employee_id=%s date=%s clock_in=%s clock_out=%s override=%s",
            hr_id,
            employee_id,
            work_date,
            clock_in,
            clock_out,
            override,
        )

        try:
            target_id = parse_positive_int(employee_id, "Employee")
            day = parse_iso_date(work_date)
            start = normalize_time(clock_in)
            end = normalize_time(clock_out)
            break_minutes = parse_break_minutes(break_duration or "0")

            if self._employees is not None and self._employees.get_by_id(target_id) is None:
                raise ValidationError("Employee does not exist.")

            total_hours = compute_worked_hours(start, end, break_minutes)

            with self._shifts.transaction() as tx:
                record = tx.create_complete_shift(
                    employee_id=target_id,
                    work_date=day,
                    clock_in=start,
                    clock_out=end,
                    break_minutes=break_minutes,
                    total_hours=total_hours,
                    status=ShiftStatus.APPROVED,
                    override=bool(override),
                )
        except DomainError as e:
            logger.warning("manual entry rejected: hr_id=%s employee_id=%s date=%s reason=%s", hr_id, employee_id, work_date, e)
            raise

        logger.info(
            "manual entry recorded: hr_id=%s employee_id=%s date=%s total_hours=%.4f id=%s",
            hr_id,
            target_id,
            day,
            total_hours,
            record.id,
        )
        return record

    def list_my_shifts(self, ctx: RequestContext, *, work_date: Optional[str] = None) -> Sequence[ShiftRecord]:
        employee_id = ctx.require_authenticated()
        return self._shifts.list_for_employee(employee_id, work_date=parse_optional_iso_date(work_date))

    def recent_shifts(self, ctx: RequestContext) -> Sequence[ShiftRecord]:
        employee_id = ctx.require_authenticated()
        return self._shifts.list_for_employee(employee_id, limit=self._recent_limit)
