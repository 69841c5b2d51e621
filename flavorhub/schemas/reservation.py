from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from flavorhub.models.reservation import ReservationStatus
from flavorhub.schemas.common import reject_null


class ReservationCreate(BaseModel):
    customer_id: int
    restaurant_id: int
    reservation_date: datetime
    party_size: int = Field(gt=0)
    special_requests: str | None = None

    @field_validator("reservation_date")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # Stored in a timezone-naive UTC column
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class ReservationUpdate(BaseModel):
    status: ReservationStatus | None = None
    special_requests: str | None = None

    @field_validator("status")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class ReservationCancel(BaseModel):
    # Either the reserving customer or the restaurant's partner
    user_id: int


class ReservationResponse(BaseModel):
    id: int
    customer_id: int
    restaurant_id: int
    reservation_date: datetime
    party_size: int
    status: ReservationStatus
    special_requests: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
