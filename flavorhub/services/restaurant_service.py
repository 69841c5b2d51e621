import logging

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.errors import ConflictError, NotFoundError, PermissionDeniedError
from flavorhub.models.menu_item import MenuItem
from flavorhub.models.order import Order
from flavorhub.models.reservation import Reservation
from flavorhub.models.restaurant import Restaurant
from flavorhub.models.user import User, UserRole
from flavorhub.schemas.restaurant import RestaurantCreate, RestaurantUpdate

logger = logging.getLogger(__name__)


async def _require_partner(db: AsyncSession, partner_id: int) -> User:
    partner = await db.get(User, partner_id)
    if partner is None:
        raise NotFoundError(f"Partner with id {partner_id} not found")
    if partner.role != UserRole.PARTNER:
        raise PermissionDeniedError(f"User with id {partner_id} is not a partner")
    return partner


async def create_restaurant(db: AsyncSession, data: RestaurantCreate) -> Restaurant:
    await _require_partner(db, data.partner_id)

    restaurant = Restaurant(**data.model_dump(mode="json"))
    db.add(restaurant)
    await db.commit()

    logger.info(
        "Restaurant created",
        extra={"restaurant_id": restaurant.id, "partner_id": restaurant.partner_id},
    )
    return restaurant


async def update_restaurant(
    db: AsyncSession, restaurant_id: int, data: RestaurantUpdate
) -> Restaurant:
    restaurant = await db.get(Restaurant, restaurant_id)
    if restaurant is None:
        raise NotFoundError("Restaurant not found")
    if restaurant.partner_id != data.partner_id:
        raise PermissionDeniedError("Restaurant belongs to another partner")

    changes = data.model_dump(mode="json", exclude_unset=True, exclude={"partner_id"})
    for field, value in changes.items():
        setattr(restaurant, field, value)
    await db.commit()

    logger.info(
        "Restaurant updated",
        extra={"restaurant_id": restaurant.id, "fields": sorted(changes)},
    )
    return restaurant


async def get_restaurant(db: AsyncSession, restaurant_id: int) -> Restaurant | None:
    return await db.get(Restaurant, restaurant_id)


async def list_restaurants(db: AsyncSession, search: str | None = None) -> list[Restaurant]:
    query = select(Restaurant).order_by(Restaurant.id)
    if search:
        query = query.where(
            or_(
                Restaurant.name.icontains(search, autoescape=True),
                Restaurant.cuisine_type.icontains(search, autoescape=True),
                Restaurant.address.icontains(search, autoescape=True),
            )
        )
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_partner_restaurants(db: AsyncSession, partner_id: int) -> list[Restaurant]:
    result = await db.execute(
        select(Restaurant).where(Restaurant.partner_id == partner_id).order_by(Restaurant.id)
    )
    return list(result.scalars().all())


async def delete_restaurant(db: AsyncSession, restaurant_id: int, partner_id: int) -> bool:
    """Delete a restaurant and its menu.

    Returns False when no restaurant with that id is owned by ``partner_id``.
    """
    restaurant = await db.get(Restaurant, restaurant_id)
    if restaurant is None or restaurant.partner_id != partner_id:
        return False

    for model in (Order, Reservation):
        count = await db.scalar(
            select(func.count()).select_from(model).where(model.restaurant_id == restaurant_id)
        )
        if count:
            raise ConflictError(
                f"Restaurant has {count} {model.__tablename__} and cannot be deleted"
            )

    await db.execute(delete(MenuItem).where(MenuItem.restaurant_id == restaurant_id))
    await db.delete(restaurant)
    await db.commit()

    logger.info(
        "Restaurant deleted",
        extra={"restaurant_id": restaurant_id, "partner_id": partner_id},
    )
    return True
