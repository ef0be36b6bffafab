from datetime import date, datetime
from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database import async_session
from .domain.entities import OperatorContext
from .domain.errors import StorageUnavailableError
from .infrastructure.repositories import storage_guard
from .models import User, UserRole
from .utils.auth import bearer_token, decode_access_token
from .utils.time import resolve_local_date

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session


def storage_timeout() -> float:
    return get_settings().storage_timeout_seconds


def query_day(
    on: date | None = Query(default=None, alias="date", description="Calendar day in the local time zone"),
    at: datetime | None = Query(default=None, description="Timezone-aware timestamp; its local calendar day is used"),
) -> date:
    """Resolve the day a query refers to. Defaults to today in the local time zone."""
    try:
        return resolve_local_date(on, at)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


async def get_current_operator(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> OperatorContext:
    token = bearer_token(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="bearer token required",
            headers=_UNAUTHORIZED_HEADERS,
        )
    settings = get_settings()
    try:
        user_id = decode_access_token(token, secret=settings.auth_secret, algorithms=[settings.auth_algorithm])
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid token",
            headers=_UNAUTHORIZED_HEADERS,
        ) from exc

    try:
        async with storage_guard("user lookup", settings.storage_timeout_seconds):
            try:
                role = await session.scalar(select(User.role).where(User.id == user_id))
            finally:
                # End the read so route handlers can open their own transaction.
                await session.rollback()
    except StorageUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.to_detail()) from exc
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unknown user",
            headers=_UNAUTHORIZED_HEADERS,
        )
    return OperatorContext(user_id=user_id, role=UserRole(role))
