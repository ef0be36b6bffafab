from typing import List

from fastapi import APIRouter, Body, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_operator, get_session, storage_timeout
from ..domain.entities import UNBOUNDED, OperatorContext, VenueReservation
from ..domain.errors import DomainError
from ..infrastructure.repositories import (
    SqlAlchemyPerformanceRepository,
    SqlAlchemyReservationRepository,
    transaction,
)
from ..schemas import ReservationCreate, ReservationRead, RemainingCapacityRead
from ..usecases import reservations as reservation_usecase
from ..utils.audit_log import emit_audit_log
from .errors import audit_failed, http_error

router = APIRouter(prefix="/performances", tags=["reservations"], dependencies=[Depends(get_current_operator)])


@router.post(
    "/{performance_id}/reservations",
    response_model=ReservationRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    performance_id: int = Path(..., ge=1),
    payload: ReservationCreate = Body(..., discriminator="kind"),
    session: AsyncSession = Depends(get_session),
    operator: OperatorContext = Depends(get_current_operator),
) -> ReservationRead:
    timeout = storage_timeout()
    performance_repo = SqlAlchemyPerformanceRepository(session, timeout=timeout)
    res_repo = SqlAlchemyReservationRepository(session, timeout=timeout)
    try:
        async with transaction(session, timeout=timeout):
            reservation = await reservation_usecase.create_reservation(
                performance_repo,
                res_repo,
                performance_id=performance_id,
                request=payload.to_request(),
            )
            try:
                emit_audit_log(
                    action="reservation.created",
                    operator=operator,
                    performance_id=performance_id,
                    reservation_id=reservation.id,
                    attendees=reservation.attendees if isinstance(reservation, VenueReservation) else None,
                )
            except RuntimeError as exc:
                raise audit_failed() from exc
    except DomainError as exc:
        raise http_error(exc) from exc

    return ReservationRead.from_domain(reservation)


@router.get("/{performance_id}/reservations", response_model=List[ReservationRead])
async def list_reservations(
    performance_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
) -> list[ReservationRead]:
    timeout = storage_timeout()
    performance_repo = SqlAlchemyPerformanceRepository(session, timeout=timeout)
    res_repo = SqlAlchemyReservationRepository(session, timeout=timeout)
    try:
        reservations = await reservation_usecase.list_reservations(
            performance_repo,
            res_repo,
            performance_id=performance_id,
        )
    except DomainError as exc:
        raise http_error(exc) from exc
    return [ReservationRead.from_domain(r) for r in reservations]


@router.get("/{performance_id}/remaining", response_model=RemainingCapacityRead)
async def get_remaining_capacity(
    performance_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
) -> RemainingCapacityRead:
    timeout = storage_timeout()
    performance_repo = SqlAlchemyPerformanceRepository(session, timeout=timeout)
    res_repo = SqlAlchemyReservationRepository(session, timeout=timeout)
    try:
        remaining = await reservation_usecase.get_remaining_capacity(
            performance_repo,
            res_repo,
            performance_id=performance_id,
        )
    except DomainError as exc:
        raise http_error(exc) from exc
    return RemainingCapacityRead(performance_id=performance_id, remaining=remaining, unbounded=remaining is UNBOUNDED)
