from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_operator, get_session, storage_timeout
from ..domain.entities import OperatorContext
from ..domain.errors import DomainError
from ..infrastructure.repositories import SqlAlchemyVenueRepository, transaction
from ..schemas import VenueCreate, VenueRead, VenueUpdate
from ..usecases import venues as venue_usecase
from ..utils.audit_log import emit_audit_log
from .errors import audit_failed, http_error

router = APIRouter(prefix="/venues", tags=["venues"], dependencies=[Depends(get_current_operator)])


@router.get("", response_model=List[VenueRead])
async def list_venues(session: AsyncSession = Depends(get_session)) -> list[VenueRead]:
    venue_repo = SqlAlchemyVenueRepository(session, timeout=storage_timeout())
    try:
        venues = await venue_usecase.list_venues(venue_repo)
    except DomainError as exc:
        raise http_error(exc) from exc
    return [VenueRead.from_domain(v) for v in venues]


@router.post("", response_model=VenueRead, status_code=status.HTTP_201_CREATED)
async def create_venue(
    payload: VenueCreate,
    session: AsyncSession = Depends(get_session),
    operator: OperatorContext = Depends(get_current_operator),
) -> VenueRead:
    timeout = storage_timeout()
    venue_repo = SqlAlchemyVenueRepository(session, timeout=timeout)
    try:
        async with transaction(session, timeout=timeout):
            venue = await venue_usecase.create_venue(venue_repo, name=payload.name, capacity=payload.capacity)
            try:
                emit_audit_log(
                    action="venue.created", operator=operator, venue_id=venue.id, extra={"capacity": venue.capacity}
                )
            except RuntimeError as exc:
                raise audit_failed() from exc
    except DomainError as exc:
        raise http_error(exc) from exc
    return VenueRead.from_domain(venue)


@router.patch("/{venue_id}", response_model=VenueRead)
async def update_venue(
    payload: VenueUpdate,
    venue_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
    operator: OperatorContext = Depends(get_current_operator),
) -> VenueRead:
    timeout = storage_timeout()
    venue_repo = SqlAlchemyVenueRepository(session, timeout=timeout)
    try:
        async with transaction(session, timeout=timeout):
            venue = await venue_usecase.update_venue(
                venue_repo,
                venue_id=venue_id,
                name=payload.name,
                capacity=payload.capacity,
            )
            try:
                emit_audit_log(
                    action="venue.updated", operator=operator, venue_id=venue.id, extra={"capacity": venue.capacity}
                )
            except RuntimeError as exc:
                raise audit_failed() from exc
    except DomainError as exc:
        raise http_error(exc) from exc
    return VenueRead.from_domain(venue)


@router.delete("/{venue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_venue(
    venue_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
    operator: OperatorContext = Depends(get_current_operator),
) -> None:
    timeout = storage_timeout()
    venue_repo = SqlAlchemyVenueRepository(session, timeout=timeout)
    try:
        async with transaction(session, timeout=timeout):
            await venue_usecase.delete_venue(venue_repo, venue_id=venue_id)
            try:
                emit_audit_log(action="venue.deleted", operator=operator, venue_id=venue_id)
            except RuntimeError as exc:
                raise audit_failed() from exc
    except DomainError as exc:
        raise http_error(exc) from exc
