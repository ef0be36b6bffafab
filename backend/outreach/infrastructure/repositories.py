from __future__ import annotations

import asyncio
import functools
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from datetime import date, datetime, time, timezone
from typing import Optional, ParamSpec, TypeVar, cast

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..domain.entities import (
    Performance,
    Reservation,
    ReservationRequest,
    TravelingPerformance,
    TravelingReservation,
    TravelingReservationRequest,
    Venue,
    VenuePerformance,
    VenueReservation,
    VenueReservationRequest,
    sort_key,
)
from ..domain.errors import MalformedRecordError, StorageUnavailableError, ValidationError
from ..domain.repositories import PerformanceRepository, ReservationRepository, VenueRepository
from ..models import Modality, PerformanceKind

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 5.0


def _utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@asynccontextmanager
async def storage_guard(operation: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> AsyncIterator[None]:
    """Bound a storage operation by ``timeout`` and surface failures as StorageUnavailableError."""
    try:
        async with asyncio.timeout(timeout):
            yield
    except TimeoutError as exc:
        raise StorageUnavailableError(f"{operation} timed out") from exc
    except SQLAlchemyError as exc:
        raise StorageUnavailableError(f"{operation} failed") from exc


def storage_call(method: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Run a repository method under ``storage_guard`` with the repository timeout."""

    @functools.wraps(method)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        repo = args[0]
        async with storage_guard(method.__qualname__, getattr(repo, "timeout", DEFAULT_TIMEOUT_SECONDS)):
            return await method(*args, **kwargs)

    return wrapper


@asynccontextmanager
async def transaction(session: AsyncSession, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> AsyncIterator[None]:
    """``session.begin()`` whose begin, commit and rollback are guarded like repository calls.

    The body is not bounded as a whole; each repository call inside it carries its own timeout.
    """
    context = session.begin()
    async with storage_guard("begin", timeout):
        await context.__aenter__()
    try:
        yield
    except BaseException as exc:
        async with storage_guard("rollback", timeout):
            await context.__aexit__(type(exc), exc, exc.__traceback__)
        raise
    async with storage_guard("commit", timeout):
        await context.__aexit__(None, None, None)


def to_venue(row: models.Venue) -> Venue:
    if not row.name or row.capacity is None or row.capacity < 1:
        raise MalformedRecordError(f"venue {row.id} has no name or a non-positive capacity")
    return Venue(id=row.id, name=row.name, capacity=row.capacity)


def to_performance(row: models.Performance) -> Performance:
    if row.kind == PerformanceKind.VENUE:
        if row.venue_id is None or row.capacity is None or row.capacity < 1:
            raise MalformedRecordError(f"venue performance {row.id} is missing its venue or capacity")
        return VenuePerformance(
            id=row.id,
            date=row.performance_date,
            venue_id=row.venue_id,
            venue_name=row.venue_name or "",
            capacity=row.capacity,
            start_time=row.start_time,
        )
    if row.kind == PerformanceKind.TRAVELING:
        if row.modality is None:
            raise MalformedRecordError(f"traveling performance {row.id} has no modality")
        return TravelingPerformance(
            id=row.id,
            date=row.performance_date,
            modality=row.modality,
            start_time=row.start_time,
        )
    raise MalformedRecordError(f"performance {row.id} has unknown kind {row.kind!r}")


def to_reservation(row: models.Reservation) -> Reservation:
    if row.kind == PerformanceKind.VENUE:
        if row.student_count is None or row.student_count < 1 or row.companion_count is None or row.companion_count < 0:
            raise MalformedRecordError(f"venue reservation {row.id} has invalid attendee counts")
        return VenueReservation(
            id=row.id,
            performance_id=row.performance_id,
            school_name=row.school_name,
            contact_email=row.contact_email,
            contact_phone=row.contact_phone,
            student_count=row.student_count,
            companion_count=row.companion_count,
            created_at=row.created_at,
        )
    if row.kind == PerformanceKind.TRAVELING:
        if not row.address or row.modality is None:
            raise MalformedRecordError(f"traveling reservation {row.id} is missing its address or modality")
        return TravelingReservation(
            id=row.id,
            performance_id=row.performance_id,
            school_name=row.school_name,
            contact_email=row.contact_email,
            contact_phone=row.contact_phone,
            address=row.address,
            modality=row.modality,
            created_at=row.created_at,
        )
    raise MalformedRecordError(f"reservation {row.id} has unknown kind {row.kind!r}")


class SqlAlchemyVenueRepository(VenueRepository):
    def __init__(self, session: AsyncSession, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.session = session
        self.timeout = timeout

    @storage_call
    async def create(self, *, name: str, capacity: int) -> Venue:
        now = _utc_now_naive()
        row = models.Venue(name=name, capacity=capacity, created_at=now, updated_at=now)
        self.session.add(row)
        await self.session.flush()
        return to_venue(row)

    @storage_call
    async def get(self, venue_id: int) -> Venue | None:
        row = await self.session.get(models.Venue, venue_id)
        return to_venue(row) if row is not None else None

    @storage_call
    async def update(self, venue: Venue) -> Venue:
        row = await self.session.get(models.Venue, venue.id)
        if row is None:
            raise MalformedRecordError(f"venue {venue.id} vanished during update")
        row.name = venue.name
        row.capacity = venue.capacity
        row.updated_at = _utc_now_naive()
        await self.session.flush()
        return to_venue(row)

    @storage_call
    async def delete(self, venue_id: int) -> bool:
        row = await self.session.get(models.Venue, venue_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    @storage_call
    async def list_all(self) -> list[Venue]:
        rows = await self.session.scalars(select(models.Venue).order_by(models.Venue.id))
        return [to_venue(row) for row in rows]


class SqlAlchemyPerformanceRepository(PerformanceRepository):
    def __init__(self, session: AsyncSession, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.session = session
        self.timeout = timeout

    async def _insert(self, row: models.Performance) -> Performance:
        self.session.add(row)
        await self.session.flush()
        return to_performance(row)

    @storage_call
    async def create_venue_performance(
        self,
        *,
        performance_date: date,
        start_time: time | None,
        venue_id: int,
        venue_name: str,
        capacity: int,
    ) -> VenuePerformance:
        row = models.Performance(
            kind=PerformanceKind.VENUE,
            performance_date=performance_date,
            start_time=start_time,
            venue_id=venue_id,
            venue_name=venue_name,
            capacity=capacity,
            created_at=_utc_now_naive(),
        )
        return cast(VenuePerformance, await self._insert(row))

    @storage_call
    async def create_traveling_performance(
        self,
        *,
        performance_date: date,
        start_time: time | None,
        modality: Modality,
    ) -> TravelingPerformance:
        row = models.Performance(
            kind=PerformanceKind.TRAVELING,
            performance_date=performance_date,
            start_time=start_time,
            modality=modality,
            created_at=_utc_now_naive(),
        )
        return cast(TravelingPerformance, await self._insert(row))

    @storage_call
    async def get(self, performance_id: int) -> Performance | None:
        row = await self.session.get(models.Performance, performance_id)
        return to_performance(row) if row is not None else None

    @storage_call
    async def _get_for_update(self, performance_id: int) -> Optional[Performance]:
        row = await self.session.scalar(
            select(models.Performance).where(models.Performance.id == performance_id).with_for_update()
        )
        return to_performance(row) if isinstance(row, models.Performance) else None

    @asynccontextmanager
    async def locked(self, performance_id: int) -> AsyncIterator[Performance | None]:
        # The row lock lives until the caller's transaction ends.
        yield await self._get_for_update(performance_id)

    @storage_call
    async def list_between(self, start: date, end: date) -> list[Performance]:
        stmt = select(models.Performance).where(
            models.Performance.performance_date >= start,
            models.Performance.performance_date <= end,
        )
        rows = await self.session.scalars(stmt)
        return sorted((to_performance(row) for row in rows), key=sort_key)


class SqlAlchemyReservationRepository(ReservationRepository):
    def __init__(self, session: AsyncSession, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.session = session
        self.timeout = timeout

    @storage_call
    async def create(self, performance: Performance, request: ReservationRequest) -> Reservation:
        row = models.Reservation(
            performance_id=performance.id,
            kind=performance.kind,
            school_name=request.school_name,
            contact_email=request.contact_email,
            contact_phone=request.contact_phone,
            created_at=_utc_now_naive(),
        )
        if isinstance(performance, VenuePerformance) and isinstance(request, VenueReservationRequest):
            row.student_count = request.student_count
            row.companion_count = request.companion_count
        elif isinstance(performance, TravelingPerformance) and isinstance(request, TravelingReservationRequest):
            row.address = request.address
            row.modality = performance.modality
        else:
            raise ValidationError("kind", f"request does not match a {performance.kind} performance")
        self.session.add(row)
        await self.session.flush()
        return to_reservation(row)

    @storage_call
    async def sum_attendees(self, performance_id: int) -> int:
        stmt = select(
            func.coalesce(
                func.sum(models.Reservation.student_count + models.Reservation.companion_count),
                0,
            )
        ).where(models.Reservation.performance_id == performance_id)
        return int(await self.session.scalar(stmt) or 0)

    @storage_call
    async def list_for_performance(self, performance_id: int) -> list[Reservation]:
        stmt = (
            select(models.Reservation)
            .where(models.Reservation.performance_id == performance_id)
            .order_by(models.Reservation.id)
        )
        rows = await self.session.scalars(stmt)
        return [to_reservation(row) for row in rows]

    @storage_call
    async def list_for_performances(self, performance_ids: Iterable[int]) -> dict[int, list[Reservation]]:
        ids = list(performance_ids)
        grouped: dict[int, list[Reservation]] = {performance_id: [] for performance_id in ids}
        if not ids:
            return grouped
        stmt = (
            select(models.Reservation)
            .where(models.Reservation.performance_id.in_(ids))
            .order_by(models.Reservation.id)
        )
        for row in await self.session.scalars(stmt):
            grouped[row.performance_id].append(to_reservation(row))
        return grouped
