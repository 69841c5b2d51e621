import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.errors import ConflictError, NotFoundError
from flavorhub.models.menu_item import MenuItem
from flavorhub.models.order import OrderItem
from flavorhub.schemas.menu_item import MenuItemCreate, MenuItemUpdate
from flavorhub.services.common import CENTS, require_restaurant

logger = logging.getLogger(__name__)


async def create_menu_item(db: AsyncSession, data: MenuItemCreate) -> MenuItem:
    await require_restaurant(db, data.restaurant_id)

    values = data.model_dump()
    values["price"] = data.price.quantize(CENTS)
    menu_item = MenuItem(**values)
    db.add(menu_item)
    await db.commit()

    logger.info(
        "Menu item created",
        extra={"menu_item_id": menu_item.id, "restaurant_id": menu_item.restaurant_id},
    )
    return menu_item


async def update_menu_item(db: AsyncSession, menu_item_id: int, data: MenuItemUpdate) -> MenuItem:
    menu_item = await db.get(MenuItem, menu_item_id)
    if menu_item is None:
        raise NotFoundError("Menu item not found")

    changes = data.model_dump(exclude_unset=True)
    if "price" in changes:
        changes["price"] = changes["price"].quantize(CENTS)
    for field, value in changes.items():
        setattr(menu_item, field, value)
    await db.commit()

    logger.info(
        "Menu item updated",
        extra={"menu_item_id": menu_item.id, "fields": sorted(changes)},
    )
    return menu_item


async def get_menu_item(db: AsyncSession, menu_item_id: int) -> MenuItem | None:
    return await db.get(MenuItem, menu_item_id)


async def list_menu_items(
    db: AsyncSession, restaurant_id: int, available_only: bool = False
) -> list[MenuItem]:
    query = select(MenuItem).where(MenuItem.restaurant_id == restaurant_id)
    if available_only:
        query = query.where(MenuItem.is_available.is_(True))
    result = await db.execute(query.order_by(MenuItem.id))
    return list(result.scalars().all())


async def delete_menu_item(db: AsyncSession, menu_item_id: int, restaurant_id: int) -> bool:
    """Returns False unless ``menu_item_id`` exists on ``restaurant_id``."""
    result = await db.execute(
        select(MenuItem).where(
            MenuItem.id == menu_item_id,
            MenuItem.restaurant_id == restaurant_id,
        )
    )
    menu_item = result.scalars().first()
    if menu_item is None:
        return False

    ordered = await db.scalar(
        select(func.count()).select_from(OrderItem).where(OrderItem.menu_item_id == menu_item_id)
    )
    if ordered:
        raise ConflictError(
            "Menu item appears on existing orders; mark it unavailable instead"
        )

    await db.delete(menu_item)
    await db.commit()

    logger.info(
        "Menu item deleted",
        extra={"menu_item_id": menu_item_id, "restaurant_id": restaurant_id},
    )
    return True
