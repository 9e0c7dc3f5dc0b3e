"""Downloadable renderings of the timesheet report.

PDF goes through reportlab platypus; the spreadsheet flavour is an HTML table
(built with pandas) served with an Excel content type, which spreadsheet
applications open directly.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import date
from typing import Sequence
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.enums import TA_CENTER
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..core.constants import NOT_AVAILABLE
from ..timesheets.model import ShiftRecord, ShiftRecordView
from ..timesheets.time_math import format_clock, format_duration

REPORT_COLUMNS = ["Employee", "Date", "Clock In", "Clock Out", "Break (mins)", "Total Hours"]
EMPLOYEE_COLUMNS = ["Date", "Clock In", "Clock Out", "Break (mins)", "Total Hours"]

PDF_MIMETYPE = "application/pdf"
SPREADSHEET_MIMETYPE = "application/vnd.ms-excel"


@dataclass(frozen=True)
class ExportDocument:
    content: bytes
    filename: str
    mimetype: str


def _break_cell(value) -> str:
    return str(value) if value is not None else NOT_AVAILABLE


def report_frame(rows: Sequence[ShiftRecordView]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [
                r.employee_full_name,
                r.date.strftime("%Y-%m-%d"),
                format_clock(r.clock_in),
                format_clock(r.clock_out),
                _break_cell(r.break_minutes),
                format_duration(r.total_hours),
            ]
            for r in rows
        ],
        columns=REPORT_COLUMNS,
    )


def employee_frame(rows: Sequence[ShiftRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [
                r.date.strftime("%Y-%m-%d"),
                format_clock(r.clock_in),
                format_clock(r.clock_out),
                _break_cell(r.break_minutes),
                format_duration(r.total_hours),
            ]
            for r in rows
        ],
        columns=EMPLOYEE_COLUMNS,
    )


def _html_workbook(df: pd.DataFrame, title: str) -> bytes:
    # escape=True keeps employee-supplied text from injecting markup.
    table = df.to_html(index=False, escape=True, border=1, na_rep=NOT_AVAILABLE)
    html = (
        "<html><head><meta charset=\"utf-8\">"
        f"<title>{escape(title)}</title></head><body>{table}</body></html>"
    )
    return html.encode("utf-8")


def render_spreadsheet(rows: Sequence[ShiftRecordView], *, generated_on: date) -> ExportDocument:
    return ExportDocument(
        content=_html_workbook(report_frame(rows), "Timesheet Report"),
        filename=f"timesheet_report_{generated_on.strftime('%Y%m%d')}.xls",
        mimetype=SPREADSHEET_MIMETYPE,
    )


def render_employee_spreadsheet(rows: Sequence[ShiftRecord], *, generated_on: date) -> ExportDocument:
    return ExportDocument(
        content=_html_workbook(employee_frame(rows), "Timesheet"),
        filename=f"Timesheet_{generated_on.strftime('%Y-%m-%d')}.xls",
        mimetype=SPREADSHEET_MIMETYPE,
    )


def render_pdf(rows: Sequence[ShiftRecordView], *, generated_on: date) -> ExportDocument:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=landscape(A4),
        topMargin=24,
        bottomMargin=24,
        leftMargin=24,
        rightMargin=24,
        title="Timesheet Report",
        subject="Timesheet Data",
        creator="HRMS Timesheets",
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(name="TitleCentered", parent=styles["Title"], alignment=TA_CENTER)
    cell_style = ParagraphStyle(name="Cell", parent=styles["Normal"], fontSize=10, leading=12)

    story = [
        Paragraph("Timesheet Report", title_style),
        Paragraph(f"Generated on {generated_on.strftime('%Y-%m-%d')}", styles["Normal"]),
        Spacer(1, 8),
    ]

    df = report_frame(rows)
    if df.empty:
        story.append(Paragraph("No timesheet records found.", styles["Normal"]))
    else:
        # Paragraph parses markup, so employee names are escaped first.
        body = [
            [Paragraph(escape(str(row[0])), cell_style)] + [str(v) for v in row[1:]]
            for row in df.values.tolist()
        ]
        table = Table([REPORT_COLUMNS] + body, repeatRows=1, hAlign="CENTER")
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F5F5F7")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (1, 0), (-1, -1), "CENTER"),
                    ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#E0E0E0")),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.white]),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        story.append(table)

    doc.build(story)
    return ExportDocument(
        content=buf.getvalue(),
        filename=f"timesheet_report_{generated_on.strftime('%Y%m%d')}.pdf",
        mimetype=PDF_MIMETYPE,
    )
