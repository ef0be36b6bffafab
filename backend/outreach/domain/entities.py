"""Domain objects handed out by repositories.

Performances and reservations are tagged variants: the concrete class tells
callers which kind-specific fields exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import ClassVar, Optional, Union

from ..models import Modality, PerformanceKind, UserRole

# Remaining capacity of a performance that has no attendee ceiling.
UNBOUNDED = None


@dataclass(frozen=True)
class OperatorContext:
    """Who is acting on the current call."""

    user_id: int
    role: UserRole = UserRole.OPERATOR


@dataclass(frozen=True)
class Venue:
    id: int
    name: str
    capacity: int


@dataclass(frozen=True)
class VenuePerformance:
    kind: ClassVar[PerformanceKind] = PerformanceKind.VENUE

    id: int
    date: date
    venue_id: int
    venue_name: str
    capacity: int
    start_time: Optional[time] = None


@dataclass(frozen=True)
class TravelingPerformance:
    kind: ClassVar[PerformanceKind] = PerformanceKind.TRAVELING

    id: int
    date: date
    modality: Modality
    start_time: Optional[time] = None


Performance = Union[VenuePerformance, TravelingPerformance]


@dataclass(frozen=True)
class VenueReservationRequest:
    school_name: str
    contact_email: str
    contact_phone: str
    student_count: int
    companion_count: int = 0

    @property
    def attendees(self) -> int:
        return self.student_count + self.companion_count


@dataclass(frozen=True)
class TravelingReservationRequest:
    school_name: str
    contact_email: str
    contact_phone: str
    address: str


ReservationRequest = Union[VenueReservationRequest, TravelingReservationRequest]


@dataclass(frozen=True)
class VenueReservation:
    kind: ClassVar[PerformanceKind] = PerformanceKind.VENUE

    id: int
    performance_id: int
    school_name: str
    contact_email: str
    contact_phone: str
    student_count: int
    companion_count: int
    created_at: datetime

    @property
    def attendees(self) -> int:
        return self.student_count + self.companion_count


@dataclass(frozen=True)
class TravelingReservation:
    kind: ClassVar[PerformanceKind] = PerformanceKind.TRAVELING

    id: int
    performance_id: int
    school_name: str
    contact_email: str
    contact_phone: str
    address: str
    modality: Modality
    created_at: datetime


Reservation = Union[VenueReservation, TravelingReservation]


def sort_key(performance: Performance) -> tuple[date, bool, time, int]:
    """Untimed performances first, then by start time, ties broken by id."""
    return (
        performance.date,
        performance.start_time is not None,
        performance.start_time or time.min,
        performance.id,
    )
