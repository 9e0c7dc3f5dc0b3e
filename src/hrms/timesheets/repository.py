from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import ReportSort, ShiftStatus
from .model import ShiftFilter, ShiftRecord, ShiftRecordView


class ShiftStoreSession(Protocol):
    """Operations that run inside one transaction.

    Implementations must make the check and the write atomic: a duplicate
    (employee_id, date) is rejected by the store itself, and the open shift
    read by find_open_shift stays locked until the transaction ends.
    """

    def find_open_shift(self, employee_id: int, work_date: date) -> Optional[ShiftRecord]:
        raise NotImplementedError

    def find_shift(self, employee_id: int, work_date: date) -> Optional[ShiftRecord]:
        raise NotImplementedError

    def create_shift(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: time,
        status: ShiftStatus,
    ) -> ShiftRecord:
        """Raises DuplicateShiftError when a record already exists for the day."""

        raise NotImplementedError

    def close_shift(
        self,
        *,
        shift_id: int,
        clock_out: time,
        break_minutes: int,
        total_hours: float,
        status: Optional[ShiftStatus] = None,
    ) -> None:
        """Raises NotFoundError when no open record with that id exists."""

        raise NotImplementedError

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
        """HR direct entry.

        Without override a duplicate raises DuplicateShiftError; with override
        the existing record's clock fields and status are replaced in place.
        """

        raise NotImplementedError


class ShiftRepository(Protocol):
    def transaction(self) -> AbstractContextManager[ShiftStoreSession]:
        raise NotImplementedError

    def query(self, shift_filter: ShiftFilter, sort: ReportSort) -> Sequence[ShiftRecordView]:
        raise NotImplementedError

    def query_page(
        self,
        shift_filter: ShiftFilter,
        sort: ReportSort,
        *,
        limit: int,
        offset: int,
    ) -> Sequence[ShiftRecordView]:
        raise NotImplementedError

    def count(self, shift_filter: ShiftFilter) -> int:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        work_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[ShiftRecord]:
        raise NotImplementedError
