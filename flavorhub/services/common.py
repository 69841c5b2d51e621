from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.errors import NotFoundError, PermissionDeniedError
from flavorhub.models.restaurant import Restaurant
from flavorhub.models.user import User, UserRole

CENTS = Decimal("0.01")
# Largest value a Numeric(10, 2) money column holds
MAX_AMOUNT = Decimal("99999999.99")


async def require_customer(db: AsyncSession, customer_id: int) -> User:
    customer = await db.get(User, customer_id)
    if customer is None:
        raise NotFoundError("Customer not found")
    if customer.role != UserRole.CUSTOMER:
        raise PermissionDeniedError(f"User with id {customer_id} is not a customer")
    return customer


async def require_restaurant(db: AsyncSession, restaurant_id: int) -> Restaurant:
    restaurant = await db.get(Restaurant, restaurant_id)
    if restaurant is None:
        raise NotFoundError("Restaurant not found")
    return restaurant
