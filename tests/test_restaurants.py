import json

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from flavorhub.errors import ConflictError, NotFoundError, PermissionDeniedError
from flavorhub.models import MenuItem, Order
from flavorhub.schemas.restaurant import RestaurantCreate, RestaurantUpdate
from flavorhub.services import restaurant_service

from conftest import OPENING_HOURS


def restaurant_input(partner_id: int, **overrides) -> RestaurantCreate:
    data = {
        "partner_id": partner_id,
        "name": "Sushi Place",
        "description": "Fresh fish daily",
        "address": "42 Harbour Road",
        "phone": "555-0199",
        "email": "info@sushi.example.com",
        "opening_hours": OPENING_HOURS,
        "cuisine_type": "Japanese",
    }
    data.update(overrides)
    return RestaurantCreate(**data)


async def test_create_restaurant(db, partner):
    restaurant = await restaurant_service.create_restaurant(db, restaurant_input(partner.id))

    assert restaurant.id is not None
    assert restaurant.partner_id == partner.id
    assert restaurant.name == "Sushi Place"
    assert json.loads(restaurant.opening_hours)["monday"]["open"] == "09:00"
    assert restaurant.created_at is not None


async def test_create_restaurant_with_null_fields(db, partner):
    restaurant = await restaurant_service.create_restaurant(
        db,
        restaurant_input(partner.id, description=None, email=None, cuisine_type=None),
    )

    assert restaurant.description is None
    assert restaurant.email is None
    assert restaurant.cuisine_type is None


async def test_create_restaurant_unknown_partner(db):
    with pytest.raises(NotFoundError, match="Partner with id 999 not found"):
        await restaurant_service.create_restaurant(db, restaurant_input(999))


async def test_create_restaurant_requires_partner_role(db, customer):
    with pytest.raises(PermissionDeniedError, match=f"User with id {customer.id} is not a partner"):
        await restaurant_service.create_restaurant(db, restaurant_input(customer.id))


def test_opening_hours_must_be_json_object():
    with pytest.raises(ValidationError):
        restaurant_input(1, opening_hours="Mon-Fri 9-5")
    with pytest.raises(ValidationError):
        restaurant_input(1, opening_hours="[1, 2]")


async def test_partner_can_own_several_restaurants(db, partner, restaurant):
    await restaurant_service.create_restaurant(db, restaurant_input(partner.id))

    owned = await restaurant_service.list_partner_restaurants(db, partner.id)
    assert [r.name for r in owned] == ["Trattoria Test", "Sushi Place"]


async def test_update_only_given_fields(db, partner, restaurant):
    updated = await restaurant_service.update_restaurant(
        db,
        restaurant.id,
        RestaurantUpdate(partner_id=partner.id, name="Trattoria Nuova", description=None),
    )

    assert updated.name == "Trattoria Nuova"
    assert updated.description is None
    assert updated.address == "1 Main Street"
    assert updated.cuisine_type == "Italian"


def test_update_rejects_null_for_required_columns():
    with pytest.raises(ValidationError):
        RestaurantUpdate(partner_id=1, name=None)


async def test_update_by_other_partner_is_denied(db, restaurant, customer):
    with pytest.raises(PermissionDeniedError):
        await restaurant_service.update_restaurant(
            db, restaurant.id, RestaurantUpdate(partner_id=customer.id, name="Mine now")
        )


async def test_update_missing_restaurant(db, partner):
    with pytest.raises(NotFoundError, match="Restaurant not found"):
        await restaurant_service.update_restaurant(
            db, 99999, RestaurantUpdate(partner_id=partner.id, name="Ghost")
        )


async def test_list_restaurants_search(db, partner, restaurant):
    await restaurant_service.create_restaurant(db, restaurant_input(partner.id))

    assert len(await restaurant_service.list_restaurants(db)) == 2
    assert [r.name for r in await restaurant_service.list_restaurants(db, "japan")] == [
        "Sushi Place"
    ]
    assert [r.name for r in await restaurant_service.list_restaurants(db, "MAIN street")] == [
        "Trattoria Test"
    ]
    assert await restaurant_service.list_restaurants(db, "thai") == []


async def test_search_treats_wildcards_literally(db, partner, restaurant):
    await restaurant_service.create_restaurant(
        db, restaurant_input(partner.id, name="100% Vegan", cuisine_type="Vegan")
    )

    assert [r.name for r in await restaurant_service.list_restaurants(db, "%")] == ["100% Vegan"]
    assert await restaurant_service.list_restaurants(db, "_") == []
    assert await restaurant_service.list_restaurants(db, "Tr_ttoria") == []


async def test_get_restaurant(db, restaurant):
    assert (await restaurant_service.get_restaurant(db, restaurant.id)).name == "Trattoria Test"
    assert await restaurant_service.get_restaurant(db, 99999) is None


async def test_delete_restaurant_removes_menu(db, partner, restaurant, menu_items):
    assert await restaurant_service.delete_restaurant(db, restaurant.id, partner.id) is True

    assert await restaurant_service.get_restaurant(db, restaurant.id) is None
    remaining = await db.scalar(select(func.count()).select_from(MenuItem))
    assert remaining == 0


async def test_delete_restaurant_wrong_partner(db, restaurant, customer):
    assert await restaurant_service.delete_restaurant(db, restaurant.id, customer.id) is False
    assert await restaurant_service.get_restaurant(db, restaurant.id) is not None


async def test_delete_missing_restaurant(db, partner):
    assert await restaurant_service.delete_restaurant(db, 99999, partner.id) is False


async def test_delete_restaurant_with_orders_is_refused(db, partner, restaurant, customer):
    db.add(Order(customer_id=customer.id, restaurant_id=restaurant.id))
    await db.commit()

    with pytest.raises(ConflictError):
        await restaurant_service.delete_restaurant(db, restaurant.id, partner.id)
