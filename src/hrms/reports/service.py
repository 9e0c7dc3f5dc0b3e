from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.datetime_utils import parse_optional_iso_date
from ..common.validators import parse_optional_int
from ..core.constants import DEFAULT_REPORT_PAGE_SIZE
from ..core.context import RequestContext
from ..core.enums import ReportSort, Role
from ..timesheets.model import ShiftFilter, ShiftRecordView
from ..timesheets.repository import ShiftRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportQuery:
    shift_filter: ShiftFilter
    sort: ReportSort


@dataclass(frozen=True)
class ReportPage:
    rows: Sequence[ShiftRecordView]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.per_page else 0

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def normalize_query(
    *,
    employee_id: Optional[str] = None,
    date: Optional[str] = None,
    sort: Optional[str] = None,
) -> ReportQuery:
    """Turn raw query-string values into a report query.

    Malformed employee ids and dates are dropped rather than rejected, and
    unknown sort keys fall back to newest first.
    """
    return ReportQuery(
        shift_filter=ShiftFilter(
            employee_id=parse_optional_int(employee_id),
            date=parse_optional_iso_date(date),
        ),
        sort=ReportSort.parse(sort),
    )


class ReportService:
    """HR-only read model over timesheet records."""

    def __init__(self, shifts: ShiftRepository, *, page_size: int = DEFAULT_REPORT_PAGE_SIZE):
        self._shifts = shifts
        self._page_size = max(int(page_size), 1)

    def build_report(self, ctx: RequestContext, query: ReportQuery) -> Sequence[ShiftRecordView]:
        """Full result set for exports. Not paginated."""
        ctx.require_role(Role.HR)
        rows = self._shifts.query(query.shift_filter, query.sort)
        logger.info(
            "Report built: employee_id=%s date=%s sort=%s rows=%s",
            query.shift_filter.employee_id,
            query.shift_filter.date,
            query.sort.value,
            len(rows),
        )
        return rows

    def build_page(self, ctx: RequestContext, query: ReportQuery, *, page: Optional[str] = None) -> ReportPage:
        ctx.require_role(Role.HR)
        total = self._shifts.count(query.shift_filter)
        last_page = max(math.ceil(total / self._page_size), 1)
        page_no = min(max(parse_optional_int(page) or 1, 1), last_page)
        offset = (page_no - 1) * self._page_size

        rows = self._shifts.query_page(query.shift_filter, query.sort, limit=self._page_size, offset=offset)
        return ReportPage(rows=rows, total=total, page=page_no, per_page=self._page_size)
