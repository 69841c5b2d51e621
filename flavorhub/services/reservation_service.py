import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.errors import InvalidStateError, NotFoundError, PermissionDeniedError
from flavorhub.metrics import RESERVATION_STATUS_CHANGES
from flavorhub.models.reservation import Reservation, ReservationStatus
from flavorhub.models.restaurant import Restaurant
from flavorhub.schemas.reservation import ReservationCreate, ReservationUpdate
from flavorhub.services.common import require_customer, require_restaurant

logger = logging.getLogger(__name__)


def _set_status(reservation: Reservation, status: ReservationStatus) -> None:
    current = reservation.status
    if not current.can_transition_to(status):
        raise InvalidStateError(
            f"Cannot change reservation status from {current.value} to {status.value}"
        )
    if status != current:
        reservation.status = status
        RESERVATION_STATUS_CHANGES.labels(status.value).inc()


async def create_reservation(db: AsyncSession, data: ReservationCreate) -> Reservation:
    await require_customer(db, data.customer_id)
    await require_restaurant(db, data.restaurant_id)

    reservation = Reservation(**data.model_dump(), status=ReservationStatus.PENDING)
    db.add(reservation)
    await db.commit()

    logger.info(
        "Reservation created",
        extra={
            "reservation_id": reservation.id,
            "restaurant_id": reservation.restaurant_id,
            "party_size": reservation.party_size,
        },
    )
    return reservation


async def update_reservation(
    db: AsyncSession, reservation_id: int, data: ReservationUpdate
) -> Reservation:
    reservation = await db.get(Reservation, reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation not found")

    changes = data.model_dump(exclude_unset=True)
    if "status" in changes:
        _set_status(reservation, changes["status"])
    if "special_requests" in changes:
        reservation.special_requests = changes["special_requests"]
    await db.commit()

    logger.info(
        "Reservation updated",
        extra={"reservation_id": reservation.id, "status": reservation.status.value},
    )
    return reservation


async def get_reservation(db: AsyncSession, reservation_id: int) -> Reservation | None:
    return await db.get(Reservation, reservation_id)


async def list_customer_reservations(
    db: AsyncSession, customer_id: int, status: ReservationStatus | None = None
) -> list[Reservation]:
    query = select(Reservation).where(Reservation.customer_id == customer_id)
    if status is not None:
        query = query.where(Reservation.status == status)
    result = await db.execute(query.order_by(Reservation.reservation_date, Reservation.id))
    return list(result.scalars().all())


async def list_restaurant_reservations(
    db: AsyncSession, restaurant_id: int, status: ReservationStatus | None = None
) -> list[Reservation]:
    query = select(Reservation).where(Reservation.restaurant_id == restaurant_id)
    if status is not None:
        query = query.where(Reservation.status == status)
    result = await db.execute(query.order_by(Reservation.reservation_date, Reservation.id))
    return list(result.scalars().all())


async def cancel_reservation(db: AsyncSession, reservation_id: int, user_id: int) -> bool:
    """Cancel on behalf of the reserving customer or the restaurant's partner."""
    reservation = await db.get(Reservation, reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation not found")

    restaurant = await db.get(Restaurant, reservation.restaurant_id)
    if user_id not in (reservation.customer_id, restaurant.partner_id):
        logger.warning(
            "Unauthorized reservation cancel attempt",
            extra={"reservation_id": reservation_id, "user_id": user_id},
        )
        raise PermissionDeniedError("Unauthorized to cancel this reservation")

    _set_status(reservation, ReservationStatus.CANCELLED)
    await db.commit()

    logger.info(
        "Reservation cancelled",
        extra={"reservation_id": reservation_id, "cancelled_by": user_id},
    )
    return True
