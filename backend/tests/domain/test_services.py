from datetime import date

import pytest
from outreach.domain.entities import (
    TravelingPerformance,
    TravelingReservationRequest,
    VenuePerformance,
    VenueReservationRequest,
)
from outreach.domain.errors import CapacityExceededError, ValidationError
from outreach.domain.services import CapacitySnapshot, check_capacity, validate_reservation_request
from outreach.models import Modality

VENUE_PERF = VenuePerformance(id=1, date=date(2025, 5, 14), venue_id=1, venue_name="Sala A", capacity=30)
TRAVELING_PERF = TravelingPerformance(id=2, date=date(2025, 5, 14), modality=Modality.SINGLE)


def _venue(**overrides: object) -> VenueReservationRequest:
    fields: dict[str, object] = dict(
        school_name="Escuela 12",
        contact_email="a@b.com",
        contact_phone="123",
        student_count=10,
        companion_count=2,
    )
    fields.update(overrides)
    return VenueReservationRequest(**fields)  # type: ignore[arg-type]


def test_rejects_when_request_exceeds_remaining() -> None:
    snap = CapacitySnapshot(capacity=30, reserved=25)
    with pytest.raises(CapacityExceededError) as excinfo:
        check_capacity(snap, requested=6)
    assert excinfo.value.requested == 6
    assert excinfo.value.remaining == 5


def test_accepts_request_that_fills_capacity_exactly() -> None:
    snap = CapacitySnapshot(capacity=30, reserved=25)
    assert check_capacity(snap, requested=5) == 0


def test_remaining_never_negative_after_capacity_lowered() -> None:
    assert CapacitySnapshot(capacity=10, reserved=15).remaining == 0


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"school_name": "  "}, "school_name"),
        ({"contact_email": "no-at-sign"}, "contact_email"),
        ({"contact_email": ""}, "contact_email"),
        ({"contact_phone": ""}, "contact_phone"),
        ({"student_count": 0}, "student_count"),
        ({"companion_count": -1}, "companion_count"),
    ],
)
def test_rejects_invalid_venue_fields(overrides: dict[str, object], field: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_reservation_request(VENUE_PERF, _venue(**overrides))
    assert excinfo.value.field == field


def test_strips_whitespace_from_text_fields() -> None:
    clean = validate_reservation_request(VENUE_PERF, _venue(school_name="  Escuela 12 ", contact_phone=" 123 "))
    assert clean.school_name == "Escuela 12"
    assert clean.contact_phone == "123"


def test_traveling_request_requires_address() -> None:
    request = TravelingReservationRequest(school_name="E", contact_email="a@b.com", contact_phone="1", address=" ")
    with pytest.raises(ValidationError) as excinfo:
        validate_reservation_request(TRAVELING_PERF, request)
    assert excinfo.value.field == "address"


def test_rejects_request_of_the_wrong_kind() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_reservation_request(TRAVELING_PERF, _venue())
    assert excinfo.value.field == "kind"
