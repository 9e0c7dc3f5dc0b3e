from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access checks."""

    HR = "hr"
    EMPLOYEE = "employee"
    ADMIN = "admin"


class ShiftStatus(str, Enum):
    """Approval state stored on a timesheet row."""

    PENDING = "pending"
    APPROVED = "approved"


class ReportSort(str, Enum):
    """Supported orderings of the HR timesheet report."""

    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"

    @classmethod
    def parse(cls, value: str | None) -> "ReportSort":
        """Unknown or missing values fall back to DATE_DESC."""
        try:
            return cls((value or "").strip())
        except ValueError:
            return cls.DATE_DESC


class ExportFormat(str, Enum):
    PDF = "pdf"
    EXCEL = "excel"
