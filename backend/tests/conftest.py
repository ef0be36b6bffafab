"""Shared fixtures: in-memory repositories backed by one store per test."""

import pytest
from doubles.memory import (
    MemoryPerformanceRepository,
    MemoryReservationRepository,
    MemoryStore,
    MemoryVenueRepository,
)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def venue_repo(store: MemoryStore) -> MemoryVenueRepository:
    return MemoryVenueRepository(store)


@pytest.fixture
def performance_repo(store: MemoryStore) -> MemoryPerformanceRepository:
    return MemoryPerformanceRepository(store)


@pytest.fixture
def res_repo(store: MemoryStore) -> MemoryReservationRepository:
    return MemoryReservationRepository(store)

