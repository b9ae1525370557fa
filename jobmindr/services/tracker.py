# jobmindr/services/tracker.py
from __future__ import annotations

from io import BytesIO
from typing import Iterable, cast

from openpyxl import Workbook as XLWorkbook
from openpyxl.worksheet.worksheet import Worksheet

from ..models import JobApplication

# ----- Applications export -----

HEADERS = [
    "Application Number", "Job Title", "Company", "Date Applied", "Status",
    "Employment Type", "Contact Email", "Closing Date",
]
SHEET_NAME = "Applications"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _row_values(row: JobApplication) -> list:
    return [
        row.application_number,
        row.job_title,
        row.company_name,
        row.date_applied,
        row.application_status,
        row.employment_type or "",
        row.contact_email or "",
        row.application_closing_date,
    ]


def build_workbook(rows: Iterable[JobApplication]) -> XLWorkbook:
    """One header row, then one row per application in the given order."""
    wb = XLWorkbook()
    ws = cast(Worksheet, wb.active)
    ws.title = SHEET_NAME
    ws.append(HEADERS)
    for r in rows:
        ws.append(_row_values(r))

    # dates render as dates, not serial numbers
    for col in ("D", "H"):
        for cell in ws[col][1:]:
            cell.number_format = "yyyy-mm-dd"
    ws.freeze_panes = "A2"
    return wb


def export_to_xlsx(rows: Iterable[JobApplication]) -> bytes:
    """Serialize the applications to .xlsx bytes for a download response."""
    buf = BytesIO()
    build_workbook(rows).save(buf)
    return buf.getvalue()
