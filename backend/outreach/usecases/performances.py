from collections import defaultdict
from datetime import date, time
from typing import Any, Dict, List

from ..domain.entities import Performance, TravelingPerformance, VenuePerformance
from ..domain.errors import NotFoundError, ValidationError
from ..domain.repositories import PerformanceRepository, VenueRepository
from ..domain.services import require_positive
from ..models import Modality
from ..utils.time import month_bounds


def parse_modality(value: Modality | str) -> Modality:
    if isinstance(value, Modality):
        return value
    try:
        return Modality.parse(value)
    except (ValueError, AttributeError) as exc:
        raise ValidationError("modality", f"unknown modality {value!r}") from exc


async def create_venue_performance(
    performance_repo: PerformanceRepository,
    venue_repo: VenueRepository,
    *,
    performance_date: date,
    venue_id: int,
    start_time: time | None = None,
    capacity_override: int | None = None,
) -> VenuePerformance:
    venue = await venue_repo.get(venue_id)
    if venue is None:
        raise NotFoundError("venue", venue_id)
    capacity = capacity_override if capacity_override is not None else venue.capacity
    require_positive("capacity", capacity)
    return await performance_repo.create_venue_performance(
        performance_date=performance_date,
        start_time=start_time,
        venue_id=venue.id,
        venue_name=venue.name,
        capacity=capacity,
    )


async def create_traveling_performance(
    performance_repo: PerformanceRepository,
    *,
    performance_date: date,
    modality: Modality | str,
    start_time: time | None = None,
) -> TravelingPerformance:
    return await performance_repo.create_traveling_performance(
        performance_date=performance_date,
        start_time=start_time,
        modality=parse_modality(modality),
    )


async def get_performance(performance_repo: PerformanceRepository, *, performance_id: int) -> Performance:
    performance = await performance_repo.get(performance_id)
    if performance is None:
        raise NotFoundError("performance", performance_id)
    return performance


async def list_performances_by_date(
    performance_repo: PerformanceRepository,
    *,
    performance_date: date,
) -> List[Performance]:
    return await performance_repo.list_between(performance_date, performance_date)


async def list_performances_in_range(
    performance_repo: PerformanceRepository,
    *,
    start: date,
    end: date,
) -> List[Performance]:
    if start > end:
        raise ValidationError("start", "must not be after end")
    return await performance_repo.list_between(start, end)


def calendar_title(performance: Performance) -> str:
    if isinstance(performance, VenuePerformance):
        return f"Venue - {performance.venue_name or 'Unnamed venue'}"
    return f"Traveling - {performance.modality.label}"


async def calendar_month(
    performance_repo: PerformanceRepository,
    *,
    year: int,
    month: int,
) -> Dict[date, List[Dict[str, Any]]]:
    """Performances of a month keyed by day, fetched with a single range query."""
    try:
        start, end = month_bounds(year, month)
    except ValueError as exc:
        raise ValidationError("month", str(exc)) from exc
    days: Dict[date, List[Dict[str, Any]]] = defaultdict(list)
    for performance in await list_performances_in_range(performance_repo, start=start, end=end):
        days[performance.date].append({"performance": performance, "title": calendar_title(performance)})
    return dict(days)
