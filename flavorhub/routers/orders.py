import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.database import get_db
from flavorhub.middleware.request_id import get_request_id
from flavorhub.models.order import Order, OrderItem, OrderStatus
from flavorhub.schemas.common import SuccessResponse
from flavorhub.schemas.order import (
    OrderCreate,
    OrderItemCreate,
    OrderItemResponse,
    OrderResponse,
    OrderUpdate,
)
from flavorhub.services import order_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    body: OrderCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Order:
    request_id = get_request_id(request)
    logger.info(
        "Received create_order request",
        extra={"request_id": request_id, "customer_id": body.customer_id},
    )
    return await order_service.create_order(db, body, request_id)


@router.get("/customers/{customer_id}", response_model=list[OrderResponse])
async def list_customer_orders(
    customer_id: int,
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> list[Order]:
    return await order_service.list_customer_orders(db, customer_id, status_filter)


@router.get("/restaurants/{restaurant_id}", response_model=list[OrderResponse])
async def list_restaurant_orders(
    restaurant_id: int,
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> list[Order]:
    return await order_service.list_restaurant_orders(db, restaurant_id, status_filter)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)) -> Order:
    order = await order_service.get_order(db, order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


@router.patch("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: int,
    body: OrderUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Order:
    logger.info(
        "Received update_order request",
        extra={"request_id": get_request_id(request), "order_id": order_id},
    )
    return await order_service.update_order(db, order_id, body)


@router.post(
    "/{order_id}/items",
    response_model=OrderItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_order_item(
    order_id: int, body: OrderItemCreate, db: AsyncSession = Depends(get_db)
) -> OrderItem:
    return await order_service.add_order_item(db, order_id, body)


@router.get("/{order_id}/items", response_model=list[OrderItemResponse])
async def list_order_items(order_id: int, db: AsyncSession = Depends(get_db)) -> list[OrderItem]:
    return await order_service.list_order_items(db, order_id)


@router.delete("/{order_id}/items/{order_item_id}", response_model=SuccessResponse)
async def remove_order_item(
    order_id: int, order_item_id: int, db: AsyncSession = Depends(get_db)
) -> SuccessResponse:
    removed = await order_service.remove_order_item(db, order_id, order_item_id)
    return SuccessResponse(success=removed)
