"""Example: use the service layer directly (no Flask).

Prints the HR timesheet report for one employee, newest first.
"""

import importlib

from config import get_settings_module

from hrms.container import build_container
from hrms.core.context import RequestContext
from hrms.core.enums import Role
from hrms.reports.service import normalize_query
from hrms.timesheets.time_math import format_duration


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    hr = RequestContext(user_id=1, role=Role.HR)
    rows = container.report_service.build_report(hr, normalize_query(employee_id="2", sort="date_desc"))
    for r in rows:
        print(r.date, r.employee_full_name, format_duration(r.total_hours), r.status.value)


if __name__ == "__main__":
    main()
