from io import BytesIO
from typing import Any, List

from openpyxl import Workbook
from openpyxl.styles import Font

from ..domain.report import NO_RESERVATIONS, DayReport

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

VENUE_COLUMNS = ["Venue", "Time", "School", "Students", "Companions", "Email", "Phone"]
TRAVELING_COLUMNS = ["Modality", "Time", "School", "Address", "Email", "Phone"]
NOT_SPECIFIED = "Not specified"


def _time(value: Any) -> str:
    return value.strftime("%H:%M") if value is not None else NOT_SPECIFIED


def venue_rows(report: DayReport) -> List[List[Any]]:
    rows: List[List[Any]] = []
    for section in report.venue_sections:
        venue = section.performance.venue_name or "Unnamed venue"
        start = _time(section.performance.start_time)
        if section.is_empty:
            rows.append([venue, start, NO_RESERVATIONS, "", "", "", ""])
            continue
        for r in section.rows:
            rows.append([venue, start, r.school_name, r.student_count, r.companion_count, r.contact_email, r.contact_phone])
    return rows


def traveling_rows(report: DayReport) -> List[List[Any]]:
    rows: List[List[Any]] = []
    for section in report.traveling_sections:
        modality = section.performance.modality.label
        start = _time(section.performance.start_time)
        if section.is_empty:
            rows.append([modality, start, NO_RESERVATIONS, "", "", ""])
            continue
        for r in section.rows:
            rows.append([modality, start, r.school_name, r.address, r.contact_email, r.contact_phone])
    return rows


def _fill(sheet: Any, columns: List[str], rows: List[List[Any]]) -> None:
    sheet.append(columns)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for row in rows:
        sheet.append(row)


def day_report_to_xlsx(report: DayReport) -> bytes:
    """
    Export a day report as a workbook with one sheet per performance kind.
    Kinds without performances get no sheet; an empty day gets a summary sheet only.
    """
    workbook = Workbook()
    default_sheet = workbook.active

    if report.venue_sections:
        _fill(workbook.create_sheet("Venue performances"), VENUE_COLUMNS, venue_rows(report))
    if report.traveling_sections:
        _fill(workbook.create_sheet("Traveling performances"), TRAVELING_COLUMNS, traveling_rows(report))

    if report.is_empty:
        default_sheet.title = "Summary"
        default_sheet.append(["Date", report.date.isoformat()])
        default_sheet.append([NO_RESERVATIONS])
    else:
        workbook.remove(default_sheet)

    output = BytesIO()
    workbook.save(output)
    return output.getvalue()
