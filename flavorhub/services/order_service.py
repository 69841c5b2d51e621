import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.errors import ConflictError, InvalidStateError, NotFoundError
from flavorhub.metrics import ORDER_STATUS_CHANGES, ORDERS_CREATED
from flavorhub.models.menu_item import MenuItem
from flavorhub.models.order import Order, OrderItem, OrderStatus
from flavorhub.schemas.order import OrderCreate, OrderItemCreate, OrderUpdate
from flavorhub.services.common import CENTS, MAX_AMOUNT, require_customer, require_restaurant

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _recalculate_total(db: AsyncSession, order: Order) -> Decimal:
    """Set ``order.total_amount`` to the sum of its stored line totals."""
    await db.flush()
    result = await db.execute(
        select(OrderItem.total_price).where(OrderItem.order_id == order.id)
    )
    total = sum(result.scalars().all(), Decimal("0.00")).quantize(CENTS)
    order.total_amount = total
    return total


def _require_editable(order: Order) -> None:
    if order.status != OrderStatus.PENDING:
        raise InvalidStateError(
            f"Cannot change items of an order with status: {order.status.value}"
        )


def _set_status(order: Order, status: OrderStatus) -> None:
    current = order.status
    if not current.can_transition_to(status):
        raise InvalidStateError(
            f"Cannot change order status from {current.value} to {status.value}"
        )
    if status != current:
        order.status = status
        ORDER_STATUS_CHANGES.labels(status.value).inc()


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


async def create_order(db: AsyncSession, data: OrderCreate, request_id: str) -> Order:
    await require_customer(db, data.customer_id)
    await require_restaurant(db, data.restaurant_id)

    # Starts empty; the total follows the line items added afterwards
    order = Order(
        customer_id=data.customer_id,
        restaurant_id=data.restaurant_id,
        status=OrderStatus.PENDING,
        total_amount=Decimal("0.00"),
        delivery_address=data.delivery_address,
        special_instructions=data.special_instructions,
    )
    db.add(order)
    await db.commit()

    ORDERS_CREATED.inc()
    logger.info(
        "Order created",
        extra={
            "order_id": order.id,
            "request_id": request_id,
            "customer_id": order.customer_id,
            "restaurant_id": order.restaurant_id,
        },
    )
    return order


async def update_order(db: AsyncSession, order_id: int, data: OrderUpdate) -> Order:
    order = await db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")

    changes = data.model_dump(exclude_unset=True)
    previous_status = order.status
    if "status" in changes:
        _set_status(order, changes["status"])
    for field in ("delivery_address", "special_instructions"):
        if field in changes:
            setattr(order, field, changes[field])
    await db.commit()

    logger.info(
        "Order updated",
        extra={
            "order_id": order.id,
            "from_status": previous_status.value,
            "to_status": order.status.value,
        },
    )
    return order


async def get_order(db: AsyncSession, order_id: int) -> Order | None:
    return await db.get(Order, order_id)


async def list_customer_orders(
    db: AsyncSession, customer_id: int, status: OrderStatus | None = None
) -> list[Order]:
    query = select(Order).where(Order.customer_id == customer_id)
    if status is not None:
        query = query.where(Order.status == status)
    result = await db.execute(query.order_by(Order.created_at.desc(), Order.id.desc()))
    return list(result.scalars().all())


async def list_restaurant_orders(
    db: AsyncSession, restaurant_id: int, status: OrderStatus | None = None
) -> list[Order]:
    query = select(Order).where(Order.restaurant_id == restaurant_id)
    if status is not None:
        query = query.where(Order.status == status)
    result = await db.execute(query.order_by(Order.created_at.desc(), Order.id.desc()))
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------


async def add_order_item(db: AsyncSession, order_id: int, data: OrderItemCreate) -> OrderItem:
    order = await db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    _require_editable(order)

    menu_item = await db.get(MenuItem, data.menu_item_id)
    if menu_item is None:
        raise NotFoundError("Menu item not found")
    if menu_item.restaurant_id != order.restaurant_id:
        raise ConflictError("Menu item belongs to a different restaurant than the order")
    if not menu_item.is_available:
        raise ConflictError("Menu item is not available")

    unit_price = (data.unit_price or menu_item.price).quantize(CENTS)
    total_price = (unit_price * data.quantity).quantize(CENTS)
    # order.total_amount always equals the sum of the stored line totals
    if order.total_amount + total_price > MAX_AMOUNT:
        raise ConflictError(f"Order total would exceed the maximum of {MAX_AMOUNT}")

    item = OrderItem(
        order_id=order.id,
        menu_item_id=menu_item.id,
        quantity=data.quantity,
        unit_price=unit_price,
        total_price=total_price,
        special_instructions=data.special_instructions,
    )
    db.add(item)
    total = await _recalculate_total(db, order)
    await db.commit()

    logger.info(
        "Order item added",
        extra={
            "order_id": order.id,
            "order_item_id": item.id,
            "menu_item_id": menu_item.id,
            "quantity": item.quantity,
            "order_total": str(total),
        },
    )
    return item


async def list_order_items(db: AsyncSession, order_id: int) -> list[OrderItem]:
    result = await db.execute(
        select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
    )
    return list(result.scalars().all())


async def remove_order_item(db: AsyncSession, order_id: int, order_item_id: int) -> bool:
    """Returns False when the item does not exist on ``order_id``."""
    result = await db.execute(
        select(OrderItem).where(
            OrderItem.id == order_item_id,
            OrderItem.order_id == order_id,
        )
    )
    item = result.scalars().first()
    if item is None:
        return False

    order = await db.get(Order, order_id)
    _require_editable(order)

    await db.delete(item)
    total = await _recalculate_total(db, order)
    await db.commit()

    logger.info(
        "Order item removed",
        extra={"order_id": order_id, "order_item_id": order_item_id, "order_total": str(total)},
    )
    return True
