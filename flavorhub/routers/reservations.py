from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.database import get_db
from flavorhub.models.reservation import Reservation, ReservationStatus
from flavorhub.schemas.common import SuccessResponse
from flavorhub.schemas.reservation import (
    ReservationCancel,
    ReservationCreate,
    ReservationResponse,
    ReservationUpdate,
)
from flavorhub.services import reservation_service

router = APIRouter()


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    body: ReservationCreate, db: AsyncSession = Depends(get_db)
) -> Reservation:
    return await reservation_service.create_reservation(db, body)


@router.get("/customers/{customer_id}", response_model=list[ReservationResponse])
async def list_customer_reservations(
    customer_id: int,
    status_filter: ReservationStatus | None = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> list[Reservation]:
    return await reservation_service.list_customer_reservations(db, customer_id, status_filter)


@router.get("/restaurants/{restaurant_id}", response_model=list[ReservationResponse])
async def list_restaurant_reservations(
    restaurant_id: int,
    status_filter: ReservationStatus | None = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> list[Reservation]:
    return await reservation_service.list_restaurant_reservations(db, restaurant_id, status_filter)


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(reservation_id: int, db: AsyncSession = Depends(get_db)) -> Reservation:
    reservation = await reservation_service.get_reservation(db, reservation_id)
    if reservation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found")
    return reservation


@router.patch("/{reservation_id}", response_model=ReservationResponse)
async def update_reservation(
    reservation_id: int, body: ReservationUpdate, db: AsyncSession = Depends(get_db)
) -> Reservation:
    return await reservation_service.update_reservation(db, reservation_id, body)


@router.post("/{reservation_id}/cancel", response_model=SuccessResponse)
async def cancel_reservation(
    reservation_id: int, body: ReservationCancel, db: AsyncSession = Depends(get_db)
) -> SuccessResponse:
    cancelled = await reservation_service.cancel_reservation(db, reservation_id, body.user_id)
    return SuccessResponse(success=cancelled)
