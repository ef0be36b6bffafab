import logging
from dataclasses import replace
from typing import List

from ..domain.entities import Venue
from ..domain.errors import NotFoundError
from ..domain.repositories import VenueRepository
from ..domain.services import require_positive, require_text

logger = logging.getLogger(__name__)


async def create_venue(venue_repo: VenueRepository, *, name: str, capacity: int) -> Venue:
    clean_name = require_text("name", name)
    require_positive("capacity", capacity)
    return await venue_repo.create(name=clean_name, capacity=capacity)


async def update_venue(
    venue_repo: VenueRepository,
    *,
    venue_id: int,
    name: str | None = None,
    capacity: int | None = None,
) -> Venue:
    """
    Apply the given fields to a venue. Already committed reservations are not
    revalidated against a lowered capacity.
    """
    venue = await venue_repo.get(venue_id)
    if venue is None:
        raise NotFoundError("venue", venue_id)
    updated = replace(
        venue,
        name=require_text("name", name) if name is not None else venue.name,
        capacity=require_positive("capacity", capacity) if capacity is not None else venue.capacity,
    )
    if updated.capacity < venue.capacity:
        logger.info("venue %s capacity lowered from %s to %s", venue_id, venue.capacity, updated.capacity)
    return await venue_repo.update(updated)


async def delete_venue(venue_repo: VenueRepository, *, venue_id: int) -> None:
    # Performances keep their venue reference and name snapshot.
    if not await venue_repo.delete(venue_id):
        raise NotFoundError("venue", venue_id)


async def list_venues(venue_repo: VenueRepository) -> List[Venue]:
    return await venue_repo.list_all()
