from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.database import get_db
from flavorhub.models.menu_item import MenuItem
from flavorhub.models.restaurant import Restaurant
from flavorhub.schemas.common import SuccessResponse
from flavorhub.schemas.menu_item import MenuItemResponse
from flavorhub.schemas.restaurant import RestaurantCreate, RestaurantResponse, RestaurantUpdate
from flavorhub.services import menu_service, restaurant_service

router = APIRouter()


@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    body: RestaurantCreate, db: AsyncSession = Depends(get_db)
) -> Restaurant:
    return await restaurant_service.create_restaurant(db, body)


@router.get("", response_model=list[RestaurantResponse])
async def list_restaurants(
    search: str | None = Query(default=None, description="Matches name, cuisine or address"),
    db: AsyncSession = Depends(get_db),
) -> list[Restaurant]:
    return await restaurant_service.list_restaurants(db, search)


@router.get("/partners/{partner_id}", response_model=list[RestaurantResponse])
async def list_partner_restaurants(
    partner_id: int, db: AsyncSession = Depends(get_db)
) -> list[Restaurant]:
    return await restaurant_service.list_partner_restaurants(db, partner_id)


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(restaurant_id: int, db: AsyncSession = Depends(get_db)) -> Restaurant:
    restaurant = await restaurant_service.get_restaurant(db, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    return restaurant


@router.patch("/{restaurant_id}", response_model=RestaurantResponse)
async def update_restaurant(
    restaurant_id: int, body: RestaurantUpdate, db: AsyncSession = Depends(get_db)
) -> Restaurant:
    return await restaurant_service.update_restaurant(db, restaurant_id, body)


@router.delete("/{restaurant_id}", response_model=SuccessResponse)
async def delete_restaurant(
    restaurant_id: int, partner_id: int = Query(), db: AsyncSession = Depends(get_db)
) -> SuccessResponse:
    deleted = await restaurant_service.delete_restaurant(db, restaurant_id, partner_id)
    return SuccessResponse(success=deleted)


@router.get("/{restaurant_id}/menu-items", response_model=list[MenuItemResponse])
async def list_menu_items(
    restaurant_id: int,
    available_only: bool = False,
    db: AsyncSession = Depends(get_db),
) -> list[MenuItem]:
    return await menu_service.list_menu_items(db, restaurant_id, available_only)
