"""Day report: every performance of a calendar day with its reservations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .entities import TravelingPerformance, TravelingReservation, VenuePerformance, VenueReservation

NO_RESERVATIONS = "No reservations"


def _with_time(label: str, performance: VenuePerformance | TravelingPerformance) -> str:
    if performance.start_time is None:
        return label
    return f"{label} - {performance.start_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class VenueSection:
    performance: VenuePerformance
    rows: tuple[VenueReservation, ...]

    @property
    def header(self) -> str:
        return _with_time(f"Venue: {self.performance.venue_name or 'Unnamed venue'}", self.performance)

    @property
    def attendee_subtotal(self) -> int:
        return sum(row.attendees for row in self.rows)

    @property
    def student_subtotal(self) -> int:
        return sum(row.student_count for row in self.rows)

    @property
    def companion_subtotal(self) -> int:
        return sum(row.companion_count for row in self.rows)

    @property
    def remaining(self) -> int:
        return max(self.performance.capacity - self.attendee_subtotal, 0)

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class TravelingSection:
    performance: TravelingPerformance
    rows: tuple[TravelingReservation, ...]

    @property
    def header(self) -> str:
        return _with_time(f"Modality: {self.performance.modality.label}", self.performance)

    @property
    def reservation_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class DayReport:
    date: date
    venue_sections: tuple[VenueSection, ...]
    traveling_sections: tuple[TravelingSection, ...]

    @property
    def is_empty(self) -> bool:
        return not self.venue_sections and not self.traveling_sections

    @property
    def total_attendees(self) -> int:
        return sum(section.attendee_subtotal for section in self.venue_sections)

    @property
    def filename_stem(self) -> str:
        return f"reservations_{self.date.isoformat()}"
