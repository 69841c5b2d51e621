from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from flavorhub.models.order import OrderStatus
from flavorhub.schemas.common import reject_null


class OrderCreate(BaseModel):
    customer_id: int
    restaurant_id: int
    delivery_address: str | None = None
    special_instructions: str | None = None


class OrderUpdate(BaseModel):
    status: OrderStatus | None = None
    delivery_address: str | None = None
    special_instructions: str | None = None

    @field_validator("status")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class OrderItemCreate(BaseModel):
    menu_item_id: int
    quantity: int = Field(gt=0, le=1000)
    # Defaults to the menu item's current price
    unit_price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    special_instructions: str | None = None


class OrderItemResponse(BaseModel):
    id: int
    order_id: int
    menu_item_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    special_instructions: str | None

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    id: int
    customer_id: int
    restaurant_id: int
    status: OrderStatus
    total_amount: Decimal
    delivery_address: str | None
    special_instructions: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
