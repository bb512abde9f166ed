# app/services/export.py
from io import BytesIO
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from app.models.worklog import WorkLog

SHEET_TITLE = "Work Log Summary"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, width)
_COLUMNS = [("Date", 15), ("Tasks", 60), ("Tags", 30)]


def build_summary_workbook(logs: Sequence[WorkLog]) -> bytes:
    """날짜별 1행: 날짜 / task 내용(콤마 연결) / 태그(중복 제거)."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for idx, (header, width) in enumerate(_COLUMNS, start=1):
        cell = ws.cell(row=1, column=idx, value=header)
        cell.font = Font(bold=True)
        ws.column_dimensions[cell.column_letter].width = width

    for row, log in enumerate(logs, start=2):
        tags: list[str] = []
        for t in log.tasks:
            for tag in t.tags or []:
                if tag not in tags:
                    tags.append(tag)
        ws.cell(row=row, column=1, value=log.log_date.isoformat())
        ws.cell(row=row, column=2, value=", ".join(t.content for t in log.tasks)).alignment = Alignment(wrap_text=True)
        ws.cell(row=row, column=3, value=", ".join(tags))

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()
