import logging
from typing import Optional

from ..domain.entities import UNBOUNDED, Reservation, ReservationRequest, VenuePerformance, VenueReservationRequest
from ..domain.errors import CapacityExceededError, NotFoundError
from ..domain.repositories import PerformanceRepository, ReservationRepository
from ..domain.services import CapacitySnapshot, check_capacity, validate_reservation_request

logger = logging.getLogger(__name__)


async def get_remaining_capacity(
    performance_repo: PerformanceRepository,
    res_repo: ReservationRepository,
    *,
    performance_id: int,
) -> Optional[int]:
    """Seats left for a venue performance, or UNBOUNDED for a traveling one."""
    performance = await performance_repo.get(performance_id)
    if performance is None:
        raise NotFoundError("performance", performance_id)
    if not isinstance(performance, VenuePerformance):
        return UNBOUNDED
    reserved = await res_repo.sum_attendees(performance_id)
    return CapacitySnapshot(capacity=performance.capacity, reserved=reserved).remaining


async def create_reservation(
    performance_repo: PerformanceRepository,
    res_repo: ReservationRepository,
    *,
    performance_id: int,
    request: ReservationRequest,
) -> Reservation:
    # Capacity read and insert happen while the performance is locked so that
    # concurrent requests cannot jointly oversell it.
    async with performance_repo.locked(performance_id) as performance:
        if performance is None:
            raise NotFoundError("performance", performance_id)

        clean = validate_reservation_request(performance, request)

        if isinstance(performance, VenuePerformance) and isinstance(clean, VenueReservationRequest):
            reserved = await res_repo.sum_attendees(performance_id)
            snapshot = CapacitySnapshot(capacity=performance.capacity, reserved=reserved)
            try:
                check_capacity(snapshot, requested=clean.attendees)
            except CapacityExceededError as exc:
                logger.info(
                    "performance %s rejected %s attendees (%s remaining)",
                    performance_id,
                    exc.requested,
                    exc.remaining,
                )
                raise

        return await res_repo.create(performance, clean)


async def list_reservations(
    performance_repo: PerformanceRepository,
    res_repo: ReservationRepository,
    *,
    performance_id: int,
) -> list[Reservation]:
    if await performance_repo.get(performance_id) is None:
        raise NotFoundError("performance", performance_id)
    return await res_repo.list_for_performance(performance_id)
