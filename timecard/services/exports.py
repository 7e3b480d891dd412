from __future__ import annotations

from io import BytesIO
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from timecard.services.reports import ALL_DEPARTMENTS, EmployeeReportRow, summarize_report
from timecard.services.time_intervals import format_minutes_korean, format_minutes_only

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

REPORT_HEADERS = [
    "이름",
    "부서",
    "총 근무시간",
    "일반 근무",
    "시간외 근무",
    "휴일 근무",
    "휴일 8시간 초과",
    "휴일 추가 근무",
    "지각시간",
]

HEADER_FILL = PatternFill(fill_type="solid", fgColor="0B4F73")
META_LABEL_FILL = PatternFill(fill_type="solid", fgColor="EAF4F9")
META_VALUE_FILL = PatternFill(fill_type="solid", fgColor="F8FCFF")
ZEBRA_FILL = PatternFill(fill_type="solid", fgColor="F7FBFE")
SUCCESS_FILL = PatternFill(fill_type="solid", fgColor="E6F4EA")
SUMMARY_FILL = PatternFill(fill_type="solid", fgColor="E9F1F7")

HEADER_FONT = Font(bold=True, color="FFFFFF")
BOLD_FONT = Font(bold=True, color="0F172A")
TITLE_FONT = Font(bold=True, color="0B4F73", size=14)
MUTED_FONT = Font(color="334155")

THIN_SIDE = Side(style="thin", color="D5E2EC")
THIN_BORDER = Border(left=THIN_SIDE, right=THIN_SIDE, top=THIN_SIDE, bottom=THIN_SIDE)

_OVERTIME_HEADERS = {"시간외 근무", "휴일 8시간 초과", "휴일 추가 근무"}


def _style_header(ws: Worksheet, row: int = 1) -> None:
    for cell in ws[row]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.border = THIN_BORDER


def _auto_width(ws: Worksheet) -> None:
    for column_cells in ws.iter_cols(min_row=1, max_row=ws.max_row, min_col=1, max_col=ws.max_column):
        max_len = 0
        col_letter = get_column_letter(column_cells[0].column)
        for cell in column_cells:
            if cell.coordinate in ws.merged_cells:
                continue
            value = "" if cell.value is None else str(cell.value)
            max_len = max(max_len, len(value))
        ws.column_dimensions[col_letter].width = min(max_len + 4, 45)


def _merge_title(ws: Worksheet, row: int, text: str) -> None:
    ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=len(REPORT_HEADERS))
    cell = ws.cell(row=row, column=1, value=text)
    cell.font = TITLE_FONT
    cell.alignment = Alignment(horizontal="left", vertical="center")


def _style_metadata_rows(ws: Worksheet, *, start_row: int, end_row: int) -> None:
    for row_idx in range(start_row, end_row + 1):
        label_cell = ws.cell(row=row_idx, column=1)
        value_cell = ws.cell(row=row_idx, column=2)
        label_cell.font = BOLD_FONT
        label_cell.fill = META_LABEL_FILL
        label_cell.border = THIN_BORDER
        value_cell.font = MUTED_FONT
        value_cell.fill = META_VALUE_FILL
        value_cell.border = THIN_BORDER


def _style_table_region(ws: Worksheet, *, header_row: int, data_start_row: int, data_end_row: int) -> None:
    ws.freeze_panes = f"A{header_row + 1}"
    if data_end_row < data_start_row:
        return

    ws.auto_filter.ref = f"A{header_row}:{get_column_letter(len(REPORT_HEADERS))}{data_end_row}"
    overtime_cols = [idx for idx, name in enumerate(REPORT_HEADERS, start=1) if name in _OVERTIME_HEADERS]

    for row_idx in range(data_start_row, data_end_row + 1):
        for col_idx in range(1, len(REPORT_HEADERS) + 1):
            cell = ws.cell(row=row_idx, column=col_idx)
            cell.border = THIN_BORDER
            if row_idx % 2 == 0:
                cell.fill = ZEBRA_FILL
            horizontal = "left" if col_idx <= 2 else "right"
            cell.alignment = Alignment(horizontal=horizontal, vertical="center")

        for overtime_col in overtime_cols:
            overtime_cell = ws.cell(row=row_idx, column=overtime_col)
            if overtime_cell.value not in {None, "", "0분"}:
                overtime_cell.fill = SUCCESS_FILL
                overtime_cell.font = Font(bold=True, color="166534")


def _report_row_values(row: EmployeeReportRow) -> list[object]:
    totals = row.totals
    return [
        row.name,
        row.department or "",
        format_minutes_korean(totals.total_minutes),
        format_minutes_only(totals.regular_work_minutes),
        format_minutes_only(totals.overtime_minutes),
        format_minutes_only(totals.holiday_regular_minutes),
        format_minutes_only(totals.holiday_exceeded_minutes),
        format_minutes_only(totals.holiday_extra_minutes),
        format_minutes_only(totals.late_minutes),
    ]


def _safe_sheet_title(title: str, fallback: str) -> str:
    cleaned = "".join(ch for ch in title if ch not in ['\\', '/', '*', '?', ':', '[', ']']).strip()
    if not cleaned:
        cleaned = fallback
    return cleaned[:31]


def report_filename(*, year: int, month: int, department: str | None) -> str:
    department_label = "전체부서" if not department or department == ALL_DEPARTMENTS else department
    return f"{department_label}_{year}년 {month}월_근무통계.xlsx"


def build_employee_report_xlsx_bytes(
    rows: Sequence[EmployeeReportRow],
    *,
    year: int,
    month: int,
    department: str | None = None,
) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = _safe_sheet_title(f"{year}년 {month}월 직원 근무 통계", "근무 통계")

    _merge_title(ws, 1, f"{year}년 {month}월 직원 근무 통계")
    ws.append(["부서", department if department and department != ALL_DEPARTMENTS else "전체부서"])
    ws.append(["직원 수", len(rows)])
    _style_metadata_rows(ws, start_row=2, end_row=3)

    header_row = ws.max_row + 1
    ws.append(REPORT_HEADERS)
    _style_header(ws, header_row)

    for row in rows:
        ws.append(_report_row_values(row))
    data_end_row = ws.max_row
    _style_table_region(ws, header_row=header_row, data_start_row=header_row + 1, data_end_row=data_end_row)

    summary = summarize_report(rows)
    ws.append(
        [
            "합계",
            "",
            format_minutes_korean(summary.total_minutes),
            format_minutes_only(summary.regular_work_minutes),
            format_minutes_only(summary.overtime_minutes),
            format_minutes_only(summary.holiday_regular_minutes),
            format_minutes_only(summary.holiday_exceeded_minutes),
            format_minutes_only(summary.holiday_extra_minutes),
            format_minutes_only(summary.late_minutes),
        ]
    )
    for cell in ws[ws.max_row]:
        cell.font = BOLD_FONT
        cell.fill = SUMMARY_FILL
        cell.border = THIN_BORDER

    _auto_width(ws)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
