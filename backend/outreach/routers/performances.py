from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_operator, get_session, query_day, storage_timeout
from ..domain.entities import OperatorContext, Performance
from ..domain.errors import DomainError
from ..infrastructure.repositories import (
    SqlAlchemyPerformanceRepository,
    SqlAlchemyVenueRepository,
    transaction,
)
from ..schemas import (
    CalendarDay,
    CalendarEntry,
    PerformanceRead,
    TravelingPerformanceCreate,
    VenuePerformanceCreate,
)
from ..usecases import performances as performance_usecase
from ..utils.audit_log import emit_audit_log
from .errors import audit_failed, http_error

router = APIRouter(prefix="/performances", tags=["performances"], dependencies=[Depends(get_current_operator)])


def _audit_created(operator: OperatorContext, performance: Performance) -> None:
    try:
        emit_audit_log(
            action="performance.created",
            operator=operator,
            performance_id=performance.id,
            extra={"kind": performance.kind, "date": performance.date},
        )
    except RuntimeError as exc:
        raise audit_failed() from exc


@router.post("/venue", response_model=PerformanceRead, status_code=status.HTTP_201_CREATED)
async def create_venue_performance(
    payload: VenuePerformanceCreate,
    session: AsyncSession = Depends(get_session),
    operator: OperatorContext = Depends(get_current_operator),
) -> PerformanceRead:
    timeout = storage_timeout()
    performance_repo = SqlAlchemyPerformanceRepository(session, timeout=timeout)
    venue_repo = SqlAlchemyVenueRepository(session, timeout=timeout)
    try:
        async with transaction(session, timeout=timeout):
            performance = await performance_usecase.create_venue_performance(
                performance_repo,
                venue_repo,
                performance_date=payload.date,
                venue_id=payload.venue_id,
                start_time=payload.start_time,
                capacity_override=payload.capacity,
            )
            _audit_created(operator, performance)
    except DomainError as exc:
        raise http_error(exc) from exc
    return PerformanceRead.from_domain(performance)


@router.post("/traveling", response_model=PerformanceRead, status_code=status.HTTP_201_CREATED)
async def create_traveling_performance(
    payload: TravelingPerformanceCreate,
    session: AsyncSession = Depends(get_session),
    operator: OperatorContext = Depends(get_current_operator),
) -> PerformanceRead:
    timeout = storage_timeout()
    performance_repo = SqlAlchemyPerformanceRepository(session, timeout=timeout)
    try:
        async with transaction(session, timeout=timeout):
            performance = await performance_usecase.create_traveling_performance(
                performance_repo,
                performance_date=payload.date,
                modality=payload.modality,
                start_time=payload.start_time,
            )
            _audit_created(operator, performance)
    except DomainError as exc:
        raise http_error(exc) from exc
    return PerformanceRead.from_domain(performance)


@router.get("", response_model=List[PerformanceRead])
async def list_performances(
    on: date = Depends(query_day),
    session: AsyncSession = Depends(get_session),
) -> list[PerformanceRead]:
    performance_repo = SqlAlchemyPerformanceRepository(session, timeout=storage_timeout())
    try:
        performances = await performance_usecase.list_performances_by_date(performance_repo, performance_date=on)
    except DomainError as exc:
        raise http_error(exc) from exc
    return [PerformanceRead.from_domain(p) for p in performances]


@router.get("/range", response_model=List[PerformanceRead])
async def list_performances_in_range(
    start: date = Query(...),
    end: date = Query(...),
    session: AsyncSession = Depends(get_session),
) -> list[PerformanceRead]:
    performance_repo = SqlAlchemyPerformanceRepository(session, timeout=storage_timeout())
    try:
        performances = await performance_usecase.list_performances_in_range(performance_repo, start=start, end=end)
    except DomainError as exc:
        raise http_error(exc) from exc
    return [PerformanceRead.from_domain(p) for p in performances]


@router.get("/calendar", response_model=List[CalendarDay])
async def calendar_month(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    session: AsyncSession = Depends(get_session),
) -> list[CalendarDay]:
    performance_repo = SqlAlchemyPerformanceRepository(session, timeout=storage_timeout())
    try:
        days = await performance_usecase.calendar_month(performance_repo, year=year, month=month)
    except DomainError as exc:
        raise http_error(exc) from exc
    return [
        CalendarDay(
            date=day,
            entries=[
                CalendarEntry(title=entry["title"], performance=PerformanceRead.from_domain(entry["performance"]))
                for entry in entries
            ],
        )
        for day, entries in sorted(days.items())
    ]


@router.get("/{performance_id}", response_model=PerformanceRead)
async def get_performance(
    performance_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
) -> PerformanceRead:
    performance_repo = SqlAlchemyPerformanceRepository(session, timeout=storage_timeout())
    try:
        performance = await performance_usecase.get_performance(performance_repo, performance_id=performance_id)
    except DomainError as exc:
        raise http_error(exc) from exc
    return PerformanceRead.from_domain(performance)
