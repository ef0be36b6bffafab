from datetime import date

from ..domain.entities import TravelingPerformance, TravelingReservation, VenuePerformance, VenueReservation
from ..domain.errors import MalformedRecordError
from ..domain.report import DayReport, TravelingSection, VenueSection
from ..domain.repositories import PerformanceRepository, ReservationRepository


async def build_day_report(
    performance_repo: PerformanceRepository,
    res_repo: ReservationRepository,
    *,
    report_date: date,
) -> DayReport:
    """
    Read-only aggregation of a day: one section per performance, in schedule
    order, including performances nobody has booked yet.
    """
    performances = await performance_repo.list_between(report_date, report_date)
    reservations = await res_repo.list_for_performances(p.id for p in performances)

    venue_sections: list[VenueSection] = []
    traveling_sections: list[TravelingSection] = []
    for performance in performances:
        rows = reservations.get(performance.id, [])
        if isinstance(performance, VenuePerformance):
            venue_rows = tuple(r for r in rows if isinstance(r, VenueReservation))
            if len(venue_rows) != len(rows):
                raise MalformedRecordError(f"performance {performance.id} has reservations of the wrong kind")
            venue_sections.append(VenueSection(performance=performance, rows=venue_rows))
        elif isinstance(performance, TravelingPerformance):
            traveling_rows = tuple(r for r in rows if isinstance(r, TravelingReservation))
            if len(traveling_rows) != len(rows):
                raise MalformedRecordError(f"performance {performance.id} has reservations of the wrong kind")
            traveling_sections.append(TravelingSection(performance=performance, rows=traveling_rows))

    return DayReport(
        date=report_date,
        venue_sections=tuple(venue_sections),
        traveling_sections=tuple(traveling_sections),
    )
