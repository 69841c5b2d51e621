from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.database import get_db
from flavorhub.models.menu_item import MenuItem
from flavorhub.schemas.common import SuccessResponse
from flavorhub.schemas.menu_item import MenuItemCreate, MenuItemResponse, MenuItemUpdate
from flavorhub.services import menu_service

router = APIRouter()


@router.post("", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
async def create_menu_item(body: MenuItemCreate, db: AsyncSession = Depends(get_db)) -> MenuItem:
    return await menu_service.create_menu_item(db, body)


@router.get("/{menu_item_id}", response_model=MenuItemResponse)
async def get_menu_item(menu_item_id: int, db: AsyncSession = Depends(get_db)) -> MenuItem:
    menu_item = await menu_service.get_menu_item(db, menu_item_id)
    if menu_item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")
    return menu_item


@router.patch("/{menu_item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    menu_item_id: int, body: MenuItemUpdate, db: AsyncSession = Depends(get_db)
) -> MenuItem:
    return await menu_service.update_menu_item(db, menu_item_id, body)


@router.delete("/{menu_item_id}", response_model=SuccessResponse)
async def delete_menu_item(
    menu_item_id: int, restaurant_id: int = Query(), db: AsyncSession = Depends(get_db)
) -> SuccessResponse:
    deleted = await menu_service.delete_menu_item(db, menu_item_id, restaurant_id)
    return SuccessResponse(success=deleted)
