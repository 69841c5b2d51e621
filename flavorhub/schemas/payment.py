from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from flavorhub.models.payment import PaymentStatus, PaymentType
from flavorhub.schemas.common import reject_null


class PaymentCreate(BaseModel):
    user_id: int
    order_id: int | None = None
    reservation_id: int | None = None
    type: PaymentType
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    payment_method: str = Field(min_length=1)

    @model_validator(mode="after")
    def check_single_target(self) -> "PaymentCreate":
        if self.type == PaymentType.ORDER:
            if self.order_id is None or self.reservation_id is not None:
                raise ValueError("an order payment references exactly one order and no reservation")
        elif self.reservation_id is None or self.order_id is not None:
            raise ValueError("a reservation payment references exactly one reservation and no order")
        return self


class PaymentUpdate(BaseModel):
    status: PaymentStatus | None = None
    transaction_id: str | None = None

    @field_validator("status")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class PaymentResponse(BaseModel):
    id: int
    user_id: int
    order_id: int | None
    reservation_id: int | None
    type: PaymentType
    amount: Decimal
    status: PaymentStatus
    payment_method: str
    transaction_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PaymentSummary(BaseModel):
    user_id: int
    total_paid: Decimal
    total_refunded: Decimal
    outstanding_count: int
