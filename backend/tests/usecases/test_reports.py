from datetime import date, time

import pytest
from doubles.memory import (
    MemoryPerformanceRepository,
    MemoryReservationRepository,
    MemoryStore,
    MemoryVenueRepository,
)
from outreach.domain.entities import TravelingReservationRequest, VenueReservationRequest
from outreach.usecases import performances as perf_uc
from outreach.usecases import reports as uc
from outreach.usecases import reservations as res_uc
from outreach.usecases import venues as venue_uc

DAY = date(2025, 5, 14)


async def _seed(
    venue_repo: MemoryVenueRepository,
    performance_repo: MemoryPerformanceRepository,
    res_repo: MemoryReservationRepository,
) -> dict[str, int]:
    sala_a = await venue_uc.create_venue(venue_repo, name="Sala A", capacity=60)
    sala_b = await venue_uc.create_venue(venue_repo, name="Sala B", capacity=40)
    booked = await perf_uc.create_venue_performance(
        performance_repo, venue_repo, performance_date=DAY, venue_id=sala_a.id, start_time=time(10)
    )
    empty = await perf_uc.create_venue_performance(
        performance_repo, venue_repo, performance_date=DAY, venue_id=sala_b.id, start_time=time(14)
    )
    visit = await perf_uc.create_traveling_performance(performance_repo, performance_date=DAY, modality="2")
    other_day = await perf_uc.create_venue_performance(
        performance_repo, venue_repo, performance_date=date(2025, 5, 15), venue_id=sala_a.id
    )

    for students, companions in [(20, 2), (15, 3)]:
        await res_uc.create_reservation(
            performance_repo,
            res_repo,
            performance_id=booked.id,
            request=VenueReservationRequest(
                school_name=f"Escuela {students}",
                contact_email="a@b.com",
                contact_phone="1",
                student_count=students,
                companion_count=companions,
            ),
        )
    await res_uc.create_reservation(
        performance_repo,
        res_repo,
        performance_id=visit.id,
        request=TravelingReservationRequest(
            school_name="Escuela Rural", contact_email="r@b.com", contact_phone="2", address="Ruta 5"
        ),
    )
    await res_uc.create_reservation(
        performance_repo,
        res_repo,
        performance_id=other_day.id,
        request=VenueReservationRequest(
            school_name="Tomorrow", contact_email="t@b.com", contact_phone="3", student_count=5
        ),
    )
    return {"booked": booked.id, "empty": empty.id, "visit": visit.id, "other_day": other_day.id}


@pytest.mark.asyncio
async def test_day_report_includes_every_performance_once(
    venue_repo: MemoryVenueRepository,
    performance_repo: MemoryPerformanceRepository,
    res_repo: MemoryReservationRepository,
) -> None:
    ids = await _seed(venue_repo, performance_repo, res_repo)

    report = await uc.build_day_report(performance_repo, res_repo, report_date=DAY)

    venue_ids = [s.performance.id for s in report.venue_sections]
    traveling_ids = [s.performance.id for s in report.traveling_sections]
    assert venue_ids == [ids["booked"], ids["empty"]]
    assert traveling_ids == [ids["visit"]]
    assert ids["other_day"] not in venue_ids


@pytest.mark.asyncio
async def test_day_report_subtotals_and_empty_sections(
    venue_repo: MemoryVenueRepository,
    performance_repo: MemoryPerformanceRepository,
    res_repo: MemoryReservationRepository,
) -> None:
    await _seed(venue_repo, performance_repo, res_repo)

    report = await uc.build_day_report(performance_repo, res_repo, report_date=DAY)

    booked, empty = report.venue_sections
    assert booked.attendee_subtotal == sum(r.attendees for r in booked.rows) == 40
    assert booked.remaining == 20
    assert booked.header == "Venue: Sala A - 10:00"
    assert empty.is_empty
    assert empty.attendee_subtotal == 0
    (visit,) = report.traveling_sections
    assert visit.reservation_count == 1
    assert visit.header == "Modality: 2 shows in the same session"
    assert report.total_attendees == 40


@pytest.mark.asyncio
async def test_day_report_is_a_deterministic_read(
    store: MemoryStore,
    venue_repo: MemoryVenueRepository,
    performance_repo: MemoryPerformanceRepository,
    res_repo: MemoryReservationRepository,
) -> None:
    await _seed(venue_repo, performance_repo, res_repo)
    before = (dict(store.performances), dict(store.reservations))

    first = await uc.build_day_report(performance_repo, res_repo, report_date=DAY)
    second = await uc.build_day_report(performance_repo, res_repo, report_date=DAY)

    assert first == second
    assert (store.performances, store.reservations) == before


@pytest.mark.asyncio
async def test_day_without_performances_yields_empty_report(
    performance_repo: MemoryPerformanceRepository,
    res_repo: MemoryReservationRepository,
) -> None:
    report = await uc.build_day_report(performance_repo, res_repo, report_date=DAY)
    assert report.is_empty
    assert report.venue_sections == ()
    assert report.traveling_sections == ()
