"""
Payment records and their status lifecycle.

No gateway is called: ``process_payment`` only moves a payment into
``processing`` and stamps a transaction id, and completion is reported back
through ``update_payment``. Refunds are likewise bookkeeping only.
"""

import logging
import time
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.errors import InvalidStateError, NotFoundError, PermissionDeniedError
from flavorhub.metrics import PAYMENT_OUTCOMES
from flavorhub.models.order import Order
from flavorhub.models.payment import Payment, PaymentStatus, PaymentType
from flavorhub.models.reservation import Reservation
from flavorhub.models.user import User
from flavorhub.schemas.payment import PaymentCreate, PaymentSummary, PaymentUpdate
from flavorhub.services.common import CENTS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _transaction_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def _set_status(payment: Payment, status: PaymentStatus) -> None:
    current = payment.status
    if not current.can_transition_to(status):
        raise InvalidStateError(
            f"Cannot change payment status from {current.value} to {status.value}"
        )
    if status != current:
        payment.status = status
        PAYMENT_OUTCOMES.labels(status.value).inc()


async def _require_payment(db: AsyncSession, payment_id: int) -> Payment:
    payment = await db.get(Payment, payment_id)
    if payment is None:
        raise NotFoundError("Payment not found")
    return payment


async def _list(db: AsyncSession, *criteria) -> list[Payment]:
    result = await db.execute(
        select(Payment).where(*criteria).order_by(Payment.created_at.desc(), Payment.id.desc())
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_payment(db: AsyncSession, data: PaymentCreate) -> Payment:
    if await db.get(User, data.user_id) is None:
        raise NotFoundError("User not found")

    # PaymentCreate already guarantees exactly one target matching the type
    if data.type == PaymentType.ORDER:
        order = await db.get(Order, data.order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if order.customer_id != data.user_id:
            raise PermissionDeniedError("Order belongs to another user")
    else:
        reservation = await db.get(Reservation, data.reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation not found")
        if reservation.customer_id != data.user_id:
            raise PermissionDeniedError("Reservation belongs to another user")

    payment = Payment(
        user_id=data.user_id,
        order_id=data.order_id,
        reservation_id=data.reservation_id,
        type=data.type,
        amount=data.amount.quantize(CENTS),
        status=PaymentStatus.PENDING,
        payment_method=data.payment_method,
        transaction_id=None,
    )
    db.add(payment)
    await db.commit()

    logger.info(
        "Payment created",
        extra={
            "payment_id": payment.id,
            "user_id": payment.user_id,
            "type": payment.type.value,
            "amount": str(payment.amount),
        },
    )
    return payment


async def update_payment(db: AsyncSession, payment_id: int, data: PaymentUpdate) -> Payment:
    payment = await _require_payment(db, payment_id)

    changes = data.model_dump(exclude_unset=True)
    if "status" in changes:
        _set_status(payment, changes["status"])
    if "transaction_id" in changes:
        payment.transaction_id = changes["transaction_id"]
    await db.commit()

    logger.info(
        "Payment updated",
        extra={"payment_id": payment.id, "status": payment.status.value},
    )
    return payment


async def get_payment(db: AsyncSession, payment_id: int) -> Payment | None:
    return await db.get(Payment, payment_id)


async def list_user_payments(
    db: AsyncSession, user_id: int, status: PaymentStatus | None = None
) -> list[Payment]:
    if await db.get(User, user_id) is None:
        raise NotFoundError("User not found")
    criteria = [Payment.user_id == user_id]
    if status is not None:
        criteria.append(Payment.status == status)
    return await _list(db, *criteria)


async def list_order_payments(db: AsyncSession, order_id: int) -> list[Payment]:
    if await db.get(Order, order_id) is None:
        raise NotFoundError("Order not found")
    return await _list(db, Payment.order_id == order_id, Payment.type == PaymentType.ORDER)


async def list_reservation_payments(db: AsyncSession, reservation_id: int) -> list[Payment]:
    if await db.get(Reservation, reservation_id) is None:
        raise NotFoundError("Reservation not found")
    return await _list(
        db,
        Payment.reservation_id == reservation_id,
        Payment.type == PaymentType.RESERVATION,
    )


async def process_payment(db: AsyncSession, payment_id: int) -> Payment:
    payment = await _require_payment(db, payment_id)
    if payment.status != PaymentStatus.PENDING:
        raise InvalidStateError(f"Cannot process payment with status: {payment.status.value}")

    _set_status(payment, PaymentStatus.PROCESSING)
    payment.transaction_id = _transaction_id("txn")
    await db.commit()

    logger.info(
        "Payment processing",
        extra={"payment_id": payment.id, "transaction_id": payment.transaction_id},
    )
    return payment


async def refund_payment(db: AsyncSession, payment_id: int) -> Payment:
    payment = await _require_payment(db, payment_id)
    if payment.status != PaymentStatus.COMPLETED:
        raise InvalidStateError(f"Cannot refund payment with status: {payment.status.value}")

    _set_status(payment, PaymentStatus.REFUNDED)
    payment.transaction_id = _transaction_id("refund")
    await db.commit()

    logger.info(
        "Payment refunded",
        extra={
            "payment_id": payment.id,
            "transaction_id": payment.transaction_id,
            "amount": str(payment.amount),
        },
    )
    return payment


async def payment_summary(db: AsyncSession, user_id: int) -> PaymentSummary:
    payments = await list_user_payments(db, user_id)
    total_paid = Decimal("0.00")
    total_refunded = Decimal("0.00")
    outstanding = 0
    for payment in payments:
        if payment.status == PaymentStatus.COMPLETED:
            total_paid += payment.amount
        elif payment.status == PaymentStatus.REFUNDED:
            total_refunded += payment.amount
        elif payment.status in (PaymentStatus.PENDING, PaymentStatus.PROCESSING):
            outstanding += 1
    return PaymentSummary(
        user_id=user_id,
        total_paid=total_paid,
        total_refunded=total_refunded,
        outstanding_count=outstanding,
    )
