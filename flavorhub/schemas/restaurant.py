import json
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from flavorhub.schemas.common import reject_null


def _check_opening_hours(value: str) -> str:
    try:
        parsed = json.loads(value)
    except ValueError:
        raise ValueError("opening_hours must be a JSON document")
    if not isinstance(parsed, dict):
        raise ValueError("opening_hours must be a JSON object keyed by day")
    return value


class RestaurantCreate(BaseModel):
    partner_id: int
    name: str = Field(min_length=1)
    description: str | None = None
    address: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: EmailStr | None = None
    opening_hours: str
    cuisine_type: str | None = None

    @field_validator("opening_hours")
    @classmethod
    def check_opening_hours(cls, value: str) -> str:
        return _check_opening_hours(value)


class RestaurantUpdate(BaseModel):
    # Acting partner; must own the restaurant
    partner_id: int
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    address: str | None = Field(default=None, min_length=1)
    phone: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    opening_hours: str | None = None
    cuisine_type: str | None = None

    @field_validator("name", "address", "phone", "opening_hours")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)

    @field_validator("opening_hours")
    @classmethod
    def check_opening_hours(cls, value: str) -> str:
        return _check_opening_hours(value)


class RestaurantResponse(BaseModel):
    id: int
    partner_id: int
    name: str
    description: str | None
    address: str
    phone: str
    email: str | None
    opening_hours: str
    cuisine_type: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
