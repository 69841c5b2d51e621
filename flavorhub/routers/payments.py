from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.database import get_db
from flavorhub.models.payment import Payment, PaymentStatus
from flavorhub.schemas.payment import (
    PaymentCreate,
    PaymentResponse,
    PaymentSummary,
    PaymentUpdate,
)
from flavorhub.services import payment_service

router = APIRouter()


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(body: PaymentCreate, db: AsyncSession = Depends(get_db)) -> Payment:
    return await payment_service.create_payment(db, body)


@router.get("/users/{user_id}", response_model=list[PaymentResponse])
async def list_user_payments(
    user_id: int,
    status_filter: PaymentStatus | None = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> list[Payment]:
    return await payment_service.list_user_payments(db, user_id, status_filter)


@router.get("/users/{user_id}/summary", response_model=PaymentSummary)
async def user_payment_summary(user_id: int, db: AsyncSession = Depends(get_db)) -> PaymentSummary:
    return await payment_service.payment_summary(db, user_id)


@router.get("/orders/{order_id}", response_model=list[PaymentResponse])
async def list_order_payments(order_id: int, db: AsyncSession = Depends(get_db)) -> list[Payment]:
    return await payment_service.list_order_payments(db, order_id)


@router.get("/reservations/{reservation_id}", response_model=list[PaymentResponse])
async def list_reservation_payments(
    reservation_id: int, db: AsyncSession = Depends(get_db)
) -> list[Payment]:
    return await payment_service.list_reservation_payments(db, reservation_id)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: int, db: AsyncSession = Depends(get_db)) -> Payment:
    payment = await payment_service.get_payment(db, payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return payment


@router.patch("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: int, body: PaymentUpdate, db: AsyncSession = Depends(get_db)
) -> Payment:
    return await payment_service.update_payment(db, payment_id, body)


@router.post("/{payment_id}/process", response_model=PaymentResponse)
async def process_payment(payment_id: int, db: AsyncSession = Depends(get_db)) -> Payment:
    return await payment_service.process_payment(db, payment_id)


@router.post("/{payment_id}/refund", response_model=PaymentResponse)
async def refund_payment(payment_id: int, db: AsyncSession = Depends(get_db)) -> Payment:
    return await payment_service.refund_payment(db, payment_id)
