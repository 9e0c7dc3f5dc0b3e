from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import ShiftStatus


@dataclass(frozen=True)
class ShiftRecord:
    """Domain entity: one employee's timesheet row for one calendar date."""

    id: int
    employee_id: int
    date: date
    clock_in: time
    clock_out: Optional[time]
    break_minutes: Optional[int]
    total_hours: Optional[float]
    status: ShiftStatus

    @property
    def is_open(self) -> bool:
        return self.clock_out is None


@dataclass(frozen=True)
class ShiftRecordView:
    """Read-model for reports/exports (record joined with the employee name)."""

    id: int
    employee_id: int
    first_name: str
    last_name: str
    date: date
    clock_in: time
    clock_out: Optional[time]
    break_minutes: Optional[int]
    total_hours: Optional[float]
    status: ShiftStatus

    @property
    def employee_full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class ShiftFilter:
    employee_id: Optional[int] = None
    date: Optional[date] = None
