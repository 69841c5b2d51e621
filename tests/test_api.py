from decimal import Decimal

from conftest import OPENING_HOURS


async def register(client, email: str, role: str) -> dict:
    response = await client.post(
        "/auth/register",
        json={
            "email": email,
            "password": "secret123",
            "first_name": "Api",
            "last_name": "User",
            "role": role,
        },
    )
    assert response.status_code == 201
    return response.json()


async def create_restaurant(client, partner_id: int) -> dict:
    response = await client.post(
        "/restaurants",
        json={
            "partner_id": partner_id,
            "name": "Curry House",
            "address": "7 Spice Street",
            "phone": "555-0123",
            "opening_hours": OPENING_HOURS,
            "cuisine_type": "Indian",
        },
    )
    assert response.status_code == 201
    return response.json()


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_metrics_endpoint(client):
    await client.get("/health")
    response = await client.get("/metrics/")

    assert response.status_code == 200
    assert "http_requests_total" in response.text


async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc-123"})
    generated = await client.get("/health")

    assert response.headers["X-Request-ID"] == "abc-123"
    assert generated.headers["X-Request-ID"]


async def test_register_login_and_me(client):
    registered = await register(client, "Diner@Example.com", "customer")
    assert registered["user"]["email"] == "diner@example.com"
    assert "password_hash" not in registered["user"]

    login = await client.post(
        "/auth/login", json={"email": "diner@example.com", "password": "secret123"}
    )
    assert login.status_code == 200
    token = login.json()["token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == registered["user"]["id"]


async def test_me_requires_token(client):
    assert (await client.get("/auth/me")).status_code == 401
    bad = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


async def test_duplicate_registration_conflicts(client):
    await register(client, "dup@example.com", "customer")
    response = await client.post(
        "/auth/register",
        json={
            "email": "dup@example.com",
            "password": "secret123",
            "first_name": "Again",
            "last_name": "User",
            "role": "customer",
        },
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "User with this email already exists"


async def test_wrong_password(client):
    await register(client, "who@example.com", "customer")
    response = await client.post(
        "/auth/login", json={"email": "who@example.com", "password": "wrongpass"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


async def test_order_flow(client):
    partner = (await register(client, "owner@example.com", "partner"))["user"]
    customer = (await register(client, "eater@example.com", "customer"))["user"]
    restaurant = await create_restaurant(client, partner["id"])

    menu = []
    for name, price in (("Butter Chicken", "14.25"), ("Naan", "3.00")):
        response = await client.post(
            "/menu-items",
            json={"restaurant_id": restaurant["id"], "name": name, "price": price},
        )
        assert response.status_code == 201
        menu.append(response.json())

    order = await client.post(
        "/orders",
        json={
            "customer_id": customer["id"],
            "restaurant_id": restaurant["id"],
            "delivery_address": "3 Quiet Close",
        },
    )
    assert order.status_code == 201
    order_id = order.json()["id"]
    assert Decimal(order.json()["total_amount"]) == Decimal("0")

    first = await client.post(
        f"/orders/{order_id}/items", json={"menu_item_id": menu[0]["id"], "quantity": 2}
    )
    second = await client.post(
        f"/orders/{order_id}/items", json={"menu_item_id": menu[1]["id"], "quantity": 3}
    )
    assert first.status_code == 201
    assert second.status_code == 201

    fetched = (await client.get(f"/orders/{order_id}")).json()
    assert Decimal(fetched["total_amount"]) == Decimal("37.50")

    removed = await client.delete(f"/orders/{order_id}/items/{first.json()['id']}")
    assert removed.json() == {"success": True}
    fetched = (await client.get(f"/orders/{order_id}")).json()
    assert Decimal(fetched["total_amount"]) == Decimal("9.00")

    items = (await client.get(f"/orders/{order_id}/items")).json()
    assert [i["menu_item_id"] for i in items] == [menu[1]["id"]]

    confirmed = await client.patch(f"/orders/{order_id}", json={"status": "confirmed"})
    assert confirmed.json()["status"] == "confirmed"

    locked = await client.post(
        f"/orders/{order_id}/items", json={"menu_item_id": menu[0]["id"], "quantity": 1}
    )
    assert locked.status_code == 409

    payment = await client.post(
        "/payments",
        json={
            "user_id": customer["id"],
            "order_id": order_id,
            "type": "order",
            "amount": "9.00",
            "payment_method": "credit_card",
        },
    )
    assert payment.status_code == 201
    payment_id = payment.json()["id"]

    processed = await client.post(f"/payments/{payment_id}/process")
    assert processed.json()["status"] == "processing"
    assert processed.json()["transaction_id"].startswith("txn_")

    early_refund = await client.post(f"/payments/{payment_id}/refund")
    assert early_refund.status_code == 409

    await client.patch(f"/payments/{payment_id}", json={"status": "completed"})
    summary = (await client.get(f"/payments/users/{customer['id']}/summary")).json()
    assert Decimal(summary["total_paid"]) == Decimal("9.00")
    assert summary["outstanding_count"] == 0

    customer_orders = (await client.get(f"/orders/customers/{customer['id']}?status=confirmed")).json()
    assert [o["id"] for o in customer_orders] == [order_id]


async def test_not_found_responses(client):
    for path in ("/orders/999", "/payments/999", "/reservations/999", "/restaurants/999"):
        response = await client.get(path)
        assert response.status_code == 404, path

    response = await client.patch("/orders/999", json={"status": "confirmed"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Order not found"

    missing_item = await client.delete("/orders/999/items/1")
    assert missing_item.json() == {"success": False}


async def test_reservation_cancel_permissions(client):
    partner = (await register(client, "host@example.com", "partner"))["user"]
    guest = (await register(client, "guest@example.com", "customer"))["user"]
    stranger = (await register(client, "stranger@example.com", "customer"))["user"]
    restaurant = await create_restaurant(client, partner["id"])

    reservation = await client.post(
        "/reservations",
        json={
            "customer_id": guest["id"],
            "restaurant_id": restaurant["id"],
            "reservation_date": "2025-02-14T20:00:00Z",
            "party_size": 2,
        },
    )
    assert reservation.status_code == 201
    reservation_id = reservation.json()["id"]

    denied = await client.post(
        f"/reservations/{reservation_id}/cancel", json={"user_id": stranger["id"]}
    )
    assert denied.status_code == 403

    allowed = await client.post(
        f"/reservations/{reservation_id}/cancel", json={"user_id": partner["id"]}
    )
    assert allowed.json() == {"success": True}
    assert (await client.get(f"/reservations/{reservation_id}")).json()["status"] == "cancelled"


async def test_validation_errors(client):
    response = await client.post(
        "/payments",
        json={
            "user_id": 1,
            "type": "order",
            "reservation_id": 1,
            "amount": "5.00",
            "payment_method": "cash",
        },
    )
    assert response.status_code == 422

    response = await client.post("/menu-items", json={"restaurant_id": 1, "name": "X", "price": "0"})
    assert response.status_code == 422

    response = await client.get("/orders/customers/1?status=lost")
    assert response.status_code == 422


async def test_sub_cent_money_is_rejected(client, restaurant, customer, menu_items):
    menu_item = await client.post(
        "/menu-items", json={"restaurant_id": restaurant.id, "name": "Crumb", "price": "0.001"}
    )
    assert menu_item.status_code == 422

    order = await client.post(
        "/orders", json={"customer_id": customer.id, "restaurant_id": restaurant.id}
    )
    order_id = order.json()["id"]
    item = await client.post(
        f"/orders/{order_id}/items",
        json={"menu_item_id": menu_items[0].id, "quantity": 1, "unit_price": "0.004"},
    )
    assert item.status_code == 422

    payment = await client.post(
        "/payments",
        json={
            "user_id": customer.id,
            "order_id": order_id,
            "type": "order",
            "amount": "0.004",
            "payment_method": "cash",
        },
    )
    assert payment.status_code == 422
    assert (await client.get(f"/payments/orders/{order_id}")).json() == []
