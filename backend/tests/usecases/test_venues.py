from datetime import date

import pytest
from doubles.memory import MemoryPerformanceRepository, MemoryVenueRepository
from outreach.domain.errors import NotFoundError, ValidationError
from outreach.usecases import performances as perf_uc
from outreach.usecases import venues as uc


@pytest.mark.asyncio
async def test_create_and_list_in_insertion_order(venue_repo: MemoryVenueRepository) -> None:
    first = await uc.create_venue(venue_repo, name="Sala A", capacity=30)
    second = await uc.create_venue(venue_repo, name="  Sala B ", capacity=80)
    venues = await uc.list_venues(venue_repo)
    assert [v.id for v in venues] == [first.id, second.id]
    assert second.name == "Sala B"


@pytest.mark.asyncio
@pytest.mark.parametrize("name, capacity", [("", 30), ("Sala", 0), ("Sala", -5)])
async def test_create_rejects_invalid_fields(venue_repo: MemoryVenueRepository, name: str, capacity: int) -> None:
    with pytest.raises(ValidationError):
        await uc.create_venue(venue_repo, name=name, capacity=capacity)
    assert await uc.list_venues(venue_repo) == []


@pytest.mark.asyncio
async def test_update_changes_only_given_fields(venue_repo: MemoryVenueRepository) -> None:
    venue = await uc.create_venue(venue_repo, name="Sala A", capacity=30)
    updated = await uc.update_venue(venue_repo, venue_id=venue.id, capacity=45)
    assert updated.name == "Sala A"
    assert updated.capacity == 45


@pytest.mark.asyncio
async def test_update_rejects_non_positive_capacity(venue_repo: MemoryVenueRepository) -> None:
    venue = await uc.create_venue(venue_repo, name="Sala A", capacity=30)
    with pytest.raises(ValidationError):
        await uc.update_venue(venue_repo, venue_id=venue.id, capacity=0)
    assert (await venue_repo.get(venue.id)).capacity == 30  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_update_and_delete_unknown_venue(venue_repo: MemoryVenueRepository) -> None:
    with pytest.raises(NotFoundError):
        await uc.update_venue(venue_repo, venue_id=99, name="X")
    with pytest.raises(NotFoundError):
        await uc.delete_venue(venue_repo, venue_id=99)


@pytest.mark.asyncio
async def test_delete_keeps_performances_that_reference_the_venue(
    venue_repo: MemoryVenueRepository,
    performance_repo: MemoryPerformanceRepository,
) -> None:
    venue = await uc.create_venue(venue_repo, name="Sala A", capacity=30)
    performance = await perf_uc.create_venue_performance(
        performance_repo,
        venue_repo,
        performance_date=date(2025, 5, 14),
        venue_id=venue.id,
    )
    await uc.delete_venue(venue_repo, venue_id=venue.id)

    kept = await perf_uc.get_performance(performance_repo, performance_id=performance.id)
    assert kept == performance
    assert await uc.list_venues(venue_repo) == []
