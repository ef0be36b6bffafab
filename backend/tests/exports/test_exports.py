import re
from datetime import date, datetime, time
from io import BytesIO

from openpyxl import load_workbook
from outreach.domain.entities import (
    TravelingPerformance,
    TravelingReservation,
    VenuePerformance,
    VenueReservation,
)
from outreach.domain.report import DayReport, TravelingSection, VenueSection
from outreach.exports.pdf import day_report_to_pdf
from outreach.exports.spreadsheet import TRAVELING_COLUMNS, VENUE_COLUMNS, day_report_to_xlsx
from outreach.models import Modality

DAY = date(2025, 5, 14)
CREATED = datetime(2025, 5, 1, 12, 0)


def _report() -> DayReport:
    booked = VenuePerformance(id=1, date=DAY, venue_id=1, venue_name="Sala A", capacity=60, start_time=time(10))
    empty = VenuePerformance(id=2, date=DAY, venue_id=2, venue_name="Sala B", capacity=40)
    visit = TravelingPerformance(id=3, date=DAY, modality=Modality.SINGLE)
    row = VenueReservation(
        id=1,
        performance_id=1,
        school_name="Escuela 12",
        contact_email="a@b.com",
        contact_phone="111",
        student_count=20,
        companion_count=2,
        created_at=CREATED,
    )
    trip = TravelingReservation(
        id=2,
        performance_id=3,
        school_name="Escuela Rural",
        contact_email="r@b.com",
        contact_phone="222",
        address="Ruta 5",
        modality=Modality.SINGLE,
        created_at=CREATED,
    )
    return DayReport(
        date=DAY,
        venue_sections=(VenueSection(performance=booked, rows=(row,)), VenueSection(performance=empty, rows=())),
        traveling_sections=(TravelingSection(performance=visit, rows=(trip,)),),
    )


def test_xlsx_has_one_sheet_per_kind_with_placeholder_rows() -> None:
    workbook = load_workbook(BytesIO(day_report_to_xlsx(_report())))

    assert workbook.sheetnames == ["Venue performances", "Traveling performances"]
    venue_rows = list(workbook["Venue performances"].iter_rows(values_only=True))
    assert list(venue_rows[0]) == VENUE_COLUMNS
    assert venue_rows[1] == ("Sala A", "10:00", "Escuela 12", 20, 2, "a@b.com", "111")
    assert venue_rows[2][:3] == ("Sala B", "Not specified", "No reservations")
    traveling_rows = list(workbook["Traveling performances"].iter_rows(values_only=True))
    assert list(traveling_rows[0]) == TRAVELING_COLUMNS
    assert traveling_rows[1][2:4] == ("Escuela Rural", "Ruta 5")


def test_xlsx_for_empty_day_has_summary_only() -> None:
    workbook = load_workbook(BytesIO(day_report_to_xlsx(DayReport(date=DAY, venue_sections=(), traveling_sections=()))))
    assert workbook.sheetnames == ["Summary"]


def test_pdf_is_rendered() -> None:
    content = day_report_to_pdf(_report())
    assert content.startswith(b"%PDF")


def test_pdf_breaks_long_reports_across_pages() -> None:
    perf = VenuePerformance(id=1, date=DAY, venue_id=1, venue_name="Sala A", capacity=10_000)
    rows = tuple(
        VenueReservation(
            id=i,
            performance_id=1,
            school_name=f"Escuela {i}",
            contact_email="a@b.com",
            contact_phone="1",
            student_count=1,
            companion_count=0,
            created_at=CREATED,
        )
        for i in range(1, 200)
    )
    report = DayReport(date=DAY, venue_sections=(VenueSection(performance=perf, rows=rows),), traveling_sections=())
    content = day_report_to_pdf(report)
    pages = re.search(rb"/Count (\d+)", content)
    assert pages is not None
    assert int(pages.group(1)) > 1
