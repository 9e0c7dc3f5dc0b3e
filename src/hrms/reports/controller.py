from __future__ import annotations

import logging

from flask import Flask, current_app, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import now_local
from ..common.web import csrf_protect, current_context, flash_error, no_cache_headers, role_required
from ..core.enums import ExportFormat, ReportSort, Role
from ..core.exceptions import DomainError
from ..container import Container
from .export import render_pdf, render_spreadsheet
from .service import normalize_query

logger = logging.getLogger(__name__)

_RENDERERS = {
    ExportFormat.PDF: render_pdf,
    ExportFormat.EXCEL: render_spreadsheet,
}


def register(app: Flask, container: Container) -> None:
    def _send(doc):
        return app.response_class(
            doc.content,
            mimetype=doc.mimetype,
            headers={"Content-Disposition": f'attachment; filename="{doc.filename}"', **no_cache_headers()},
        )

    @app.route("/hr/timesheets", methods=["GET", "POST"], endpoint="hr_timesheets")
    @role_required(Role.HR)
    @csrf_protect
    def hr_timesheets():
        ctx = current_context()

        if request.method == "POST":
            try:
                container.timesheet_service.record_manual_entry(
                    ctx,
                    employee_id=request.form.get("employee_id", ""),
                    work_date=request.form.get("date", ""),
                    clock_in=request.form.get("clock_in", ""),
                    clock_out=request.form.get("clock_out", ""),
                    break_duration=request.form.get("break_duration"),
                    override=request.form.get("override") in {"1", "on", "true"},
                )
                flash("Timesheet record added successfully!", "success")
            except Exception as e:
                flash_error(e)
            return redirect(url_for("hr_timesheets"))

        logger.debug("Sort parameter received: %r", request.args.get("sort"))
        query = normalize_query(
            employee_id=request.args.get("employee_id"),
            date=request.args.get("date"),
            sort=request.args.get("sort"),
        )

        export = request.args.get("export")
        try:
            export_format = ExportFormat(export) if export else None
        except ValueError:
            export_format = None

        try:
            if export_format is not None:
                rows = container.report_service.build_report(ctx, query)
                today = now_local(current_app.config.get("APP_TIMEZONE")).date()
                return _send(_RENDERERS[export_format](rows, generated_on=today))

            page = container.report_service.build_page(ctx, query, page=request.args.get("page"))
            employees = container.employees_repo.list_all()
        except DomainError as e:
            flash_error(e)
            return render_template("hr/timesheets.html", page=None, employees=[], query=query, sorts=list(ReportSort)), 503

        return render_template(
            "hr/timesheets.html",
            page=page,
            employees=employees,
            query=query,
            sorts=list(ReportSort),
            active_page="hr_timesheets",
        )
