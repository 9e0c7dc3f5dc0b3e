from __future__ import annotations

from flask import Flask, current_app, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import now_local
from ..common.web import csrf_protect, current_context, flash_error, login_required, no_cache_headers
from ..core.exceptions import DomainError
from ..container import Container
from ..reports.export import render_employee_spreadsheet
from .time_math import format_clock, format_duration

CLOCK_IN = "clock_in"
CLOCK_OUT = "clock_out"


def register(app: Flask, container: Container) -> None:
    app.jinja_env.filters["hhmm"] = format_clock
    app.jinja_env.filters["duration"] = format_duration

    @app.route("/timesheet", methods=["GET", "POST"], endpoint="timesheet")
    @login_required
    @csrf_protect
    def timesheet():
        ctx = current_context()

        if request.method == "POST":
            action = request.form.get("action", "")
            work_date = request.form.get("date", "")
            try:
                if action == CLOCK_IN:
                    record = container.timesheet_service.clock_in(
                        ctx,
                        work_date=work_date,
                        clock_in=request.form.get("clock_in", ""),
                    )
                    flash(f"Clock-in recorded successfully at {format_clock(record.clock_in)}!", "success")
                elif action == CLOCK_OUT:
                    record = container.timesheet_service.clock_out(
                        ctx,
                        work_date=work_date,
                        clock_out=request.form.get("clock_out", ""),
                        break_duration=request.form.get("break_duration"),
                    )
                    flash(
                        f"Clock-out recorded successfully at {format_clock(record.clock_out)} "
                        f"({format_duration(record.total_hours)} worked).",
                        "success",
                    )
                else:
                    flash("Unknown timesheet action.", "warning")
            except Exception as e:
                flash_error(e)
            return redirect(url_for("timesheet"))

        search_date = request.args.get("date")
        now = now_local(current_app.config.get("APP_TIMEZONE"))
        try:
            entries = container.timesheet_service.list_my_shifts(ctx, work_date=search_date)
            recent = container.timesheet_service.recent_shifts(ctx)
        except DomainError as e:
            flash_error(e)
            entries, recent = [], []

        return render_template(
            "timesheets/index.html",
            entries=entries,
            recent=recent,
            search_date=search_date or "",
            today=now.strftime("%Y-%m-%d"),
            now_hhmm=now.strftime("%H:%M"),
            active_page="timesheet",
        )

    @app.route("/timesheet/export", methods=["GET"], endpoint="timesheet_export")
    @login_required
    def timesheet_export():
        ctx = current_context()
        try:
            entries = container.timesheet_service.list_my_shifts(ctx)
        except DomainError as e:
            flash_error(e)
            return redirect(url_for("timesheet"))

        doc = render_employee_spreadsheet(entries, generated_on=now_local(current_app.config.get("APP_TIMEZONE")).date())
        return app.response_class(
            doc.content,
            mimetype=doc.mimetype,
            headers={"Content-Disposition": f'attachment; filename="{doc.filename}"', **no_cache_headers()},
        )
