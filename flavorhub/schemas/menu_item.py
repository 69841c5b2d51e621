from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from flavorhub.schemas.common import reject_null


class MenuItemCreate(BaseModel):
    restaurant_id: int
    name: str = Field(min_length=1)
    description: str | None = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category: str | None = None
    is_available: bool = True
    image_url: str | None = None


class MenuItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category: str | None = None
    is_available: bool | None = None
    image_url: str | None = None

    @field_validator("name", "price", "is_available")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class MenuItemResponse(BaseModel):
    id: int
    restaurant_id: int
    name: str
    description: str | None
    price: Decimal
    category: str | None
    is_available: bool
    image_url: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
