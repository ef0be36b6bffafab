from datetime import date, datetime, time
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .domain.entities import (
    Performance,
    Reservation,
    TravelingReservation,
    TravelingReservationRequest,
    Venue,
    VenuePerformance,
    VenueReservationRequest,
)
from .domain.report import DayReport, TravelingSection, VenueSection
from .models import Modality, PerformanceKind


class VenueCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    capacity: int = Field(ge=1)


class VenueUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(default=None, ge=1)


class VenueRead(BaseModel):
    venue_id: int
    name: str
    capacity: int

    @classmethod
    def from_domain(cls, venue: Venue) -> "VenueRead":
        return cls(venue_id=venue.id, name=venue.name, capacity=venue.capacity)


class VenuePerformanceCreate(BaseModel):
    date: date
    venue_id: int
    start_time: Optional[time] = None
    capacity: Optional[int] = Field(default=None, ge=1, description="Overrides the venue capacity")


class TravelingPerformanceCreate(BaseModel):
    date: date
    modality: str = Field(description="Modality value or legacy code 1-4")
    start_time: Optional[time] = None


class PerformanceRead(BaseModel):
    performance_id: int
    kind: PerformanceKind
    date: date
    start_time: Optional[time]
    venue_id: Optional[int] = None
    venue_name: Optional[str] = None
    capacity: Optional[int] = None
    modality: Optional[Modality] = None
    modality_label: Optional[str] = None
    modality_showings: Optional[int] = None

    @classmethod
    def from_domain(cls, performance: Performance) -> "PerformanceRead":
        if isinstance(performance, VenuePerformance):
            return cls(
                performance_id=performance.id,
                kind=performance.kind,
                date=performance.date,
                start_time=performance.start_time,
                venue_id=performance.venue_id,
                venue_name=performance.venue_name,
                capacity=performance.capacity,
            )
        return cls(
            performance_id=performance.id,
            kind=performance.kind,
            date=performance.date,
            start_time=performance.start_time,
            modality=performance.modality,
            modality_label=performance.modality.label,
            modality_showings=performance.modality.showings,
        )


class CalendarEntry(BaseModel):
    title: str
    performance: PerformanceRead


class CalendarDay(BaseModel):
    date: date
    entries: List[CalendarEntry]


class RemainingCapacityRead(BaseModel):
    performance_id: int
    remaining: Optional[int]
    unbounded: bool


class VenueReservationCreate(BaseModel):
    kind: Literal["venue"]
    school_name: str
    contact_email: str
    contact_phone: str
    student_count: int
    companion_count: int = 0

    def to_request(self) -> VenueReservationRequest:
        return VenueReservationRequest(
            school_name=self.school_name,
            contact_email=self.contact_email,
            contact_phone=self.contact_phone,
            student_count=self.student_count,
            companion_count=self.companion_count,
        )


class TravelingReservationCreate(BaseModel):
    kind: Literal["traveling"]
    school_name: str
    contact_email: str
    contact_phone: str
    address: str

    def to_request(self) -> TravelingReservationRequest:
        return TravelingReservationRequest(
            school_name=self.school_name,
            contact_email=self.contact_email,
            contact_phone=self.contact_phone,
            address=self.address,
        )


# Routers validate the body with `discriminator="kind"`, so the tag selects the model.
ReservationCreate = Union[VenueReservationCreate, TravelingReservationCreate]


class ReservationRead(BaseModel):
    reservation_id: int
    performance_id: int
    kind: PerformanceKind
    school_name: str
    contact_email: str
    contact_phone: str
    student_count: Optional[int] = None
    companion_count: Optional[int] = None
    address: Optional[str] = None
    modality: Optional[Modality] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationRead":
        common = dict(
            reservation_id=reservation.id,
            performance_id=reservation.performance_id,
            kind=reservation.kind,
            school_name=reservation.school_name,
            contact_email=reservation.contact_email,
            contact_phone=reservation.contact_phone,
            created_at=reservation.created_at,
        )
        if isinstance(reservation, TravelingReservation):
            return cls(**common, address=reservation.address, modality=reservation.modality)
        return cls(**common, student_count=reservation.student_count, companion_count=reservation.companion_count)


class VenueSectionRead(BaseModel):
    header: str
    performance: PerformanceRead
    reservations: List[ReservationRead]
    attendee_subtotal: int
    remaining: int
    empty: bool

    @classmethod
    def from_domain(cls, section: VenueSection) -> "VenueSectionRead":
        return cls(
            header=section.header,
            performance=PerformanceRead.from_domain(section.performance),
            reservations=[ReservationRead.from_domain(r) for r in section.rows],
            attendee_subtotal=section.attendee_subtotal,
            remaining=section.remaining,
            empty=section.is_empty,
        )


class TravelingSectionRead(BaseModel):
    header: str
    performance: PerformanceRead
    reservations: List[ReservationRead]
    reservation_count: int
    empty: bool

    @classmethod
    def from_domain(cls, section: TravelingSection) -> "TravelingSectionRead":
        return cls(
            header=section.header,
            performance=PerformanceRead.from_domain(section.performance),
            reservations=[ReservationRead.from_domain(r) for r in section.rows],
            reservation_count=section.reservation_count,
            empty=section.is_empty,
        )


class DayReportRead(BaseModel):
    date: date
    venue_sections: List[VenueSectionRead]
    traveling_sections: List[TravelingSectionRead]
    total_attendees: int

    @classmethod
    def from_domain(cls, report: DayReport) -> "DayReportRead":
        return cls(
            date=report.date,
            venue_sections=[VenueSectionRead.from_domain(s) for s in report.venue_sections],
            traveling_sections=[TravelingSectionRead.from_domain(s) for s in report.traveling_sections],
            total_attendees=report.total_attendees,
        )
