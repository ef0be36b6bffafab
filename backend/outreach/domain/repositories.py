from __future__ import annotations

from datetime import date, time
from typing import AsyncContextManager, Iterable, Protocol

from ..models import Modality
from .entities import (
    Performance,
    Reservation,
    ReservationRequest,
    TravelingPerformance,
    Venue,
    VenuePerformance,
)


class VenueRepository(Protocol):
    async def create(self, *, name: str, capacity: int) -> Venue: ...

    async def get(self, venue_id: int) -> Venue | None: ...

    async def update(self, venue: Venue) -> Venue: ...

    async def delete(self, venue_id: int) -> bool: ...

    async def list_all(self) -> list[Venue]: ...


class PerformanceRepository(Protocol):
    async def create_venue_performance(
        self,
        *,
        performance_date: date,
        start_time: time | None,
        venue_id: int,
        venue_name: str,
        capacity: int,
    ) -> VenuePerformance: ...

    async def create_traveling_performance(
        self,
        *,
        performance_date: date,
        start_time: time | None,
        modality: Modality,
    ) -> TravelingPerformance: ...

    async def get(self, performance_id: int) -> Performance | None: ...

    def locked(self, performance_id: int) -> AsyncContextManager[Performance | None]:
        """Yield the performance while holding its reservation serialization point."""
        ...

    async def list_between(self, start: date, end: date) -> list[Performance]:
        """All performances with start <= date <= end, in one query."""
        ...


class ReservationRepository(Protocol):
    async def create(self, performance: Performance, request: ReservationRequest) -> Reservation: ...

    async def sum_attendees(self, performance_id: int) -> int: ...

    async def list_for_performance(self, performance_id: int) -> list[Reservation]: ...

    async def list_for_performances(self, performance_ids: Iterable[int]) -> dict[int, list[Reservation]]: ...
