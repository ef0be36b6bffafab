from dataclasses import dataclass, replace

from .entities import (
    Performance,
    ReservationRequest,
    TravelingPerformance,
    TravelingReservationRequest,
    VenuePerformance,
    VenueReservationRequest,
)
from .errors import CapacityExceededError, ValidationError


@dataclass(frozen=True)
class CapacitySnapshot:
    capacity: int
    reserved: int

    @property
    def remaining(self) -> int:
        return max(self.capacity - self.reserved, 0)


def require_text(field: str, value: str | None) -> str:
    if value is None or not value.strip():
        raise ValidationError(field, "must not be empty")
    return value.strip()


def require_positive(field: str, value: int | None) -> int:
    if value is None or value <= 0:
        raise ValidationError(field, "must be greater than 0")
    return value


def validate_reservation_request(performance: Performance, request: ReservationRequest) -> ReservationRequest:
    """
    Pure validation of the requesting school's data against the performance kind.
    Returns the request with surrounding whitespace stripped. Raises ValidationError
    on the first offending field.
    """
    school_name = require_text("school_name", request.school_name)
    email = require_text("contact_email", request.contact_email)
    if "@" not in email:
        raise ValidationError("contact_email", "must be a valid email address")
    phone = require_text("contact_phone", request.contact_phone)

    if isinstance(performance, VenuePerformance):
        if not isinstance(request, VenueReservationRequest):
            raise ValidationError("kind", "venue performances take student and companion counts")
        require_positive("student_count", request.student_count)
        if request.companion_count is None or request.companion_count < 0:
            raise ValidationError("companion_count", "must not be negative")
        return replace(request, school_name=school_name, contact_email=email, contact_phone=phone)

    if not isinstance(performance, TravelingPerformance) or not isinstance(request, TravelingReservationRequest):
        raise ValidationError("kind", "traveling performances take a visit address")
    address = require_text("address", request.address)
    return replace(request, school_name=school_name, contact_email=email, contact_phone=phone, address=address)


def check_capacity(snapshot: CapacitySnapshot, *, requested: int) -> int:
    """
    Returns remaining capacity after booking `requested` attendees.
    Raises CapacityExceededError when they do not fit.
    """
    remaining = snapshot.remaining
    if requested > remaining:
        raise CapacityExceededError(requested=requested, remaining=remaining)
    return remaining - requested
