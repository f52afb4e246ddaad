from decimal import Decimal
from models.orders import Order, OrderStatus


def place_order(session, user, status=OrderStatus.PROCESSING):
    order = Order(
        user_id=user.id,
        total_amount=Decimal("1499.00"),
        status=status,
        items_snapshot="1x Silk Saree [ID:1] (₹1499.00)",
        shipping_snapshot="Shipping Address: Pending Address Selection"
    )
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


async def test_list_orders(client, session, verified_user, auth_headers, make_customer):
    mine = place_order(session, verified_user)
    other = make_customer(email="other@example.com", phone_number="+201222222222")
    place_order(session, other)

    response = await client.get("/orders", headers=auth_headers)

    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == [mine.id]


async def test_get_order(client, session, verified_user, auth_headers):
    order = place_order(session, verified_user)

    response = await client.get(f"/orders/{order.id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["items_snapshot"] == "1x Silk Saree [ID:1] (₹1499.00)"


async def test_get_someone_elses_order(client, session, auth_headers, make_customer):
    other = make_customer(email="other@example.com", phone_number="+201222222222")
    order = place_order(session, other)

    response = await client.get(f"/orders/{order.id}", headers=auth_headers)

    assert response.status_code == 404


async def test_cancel_processing_order(client, session, verified_user, auth_headers):
    order = place_order(session, verified_user)

    response = await client.post(f"/orders/{order.id}/cancel", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "CANCELLED"


async def test_cancel_shipped_order(client, session, verified_user, auth_headers):
    order = place_order(session, verified_user, status=OrderStatus.SHIPPED)

    response = await client.post(f"/orders/{order.id}/cancel", headers=auth_headers)

    assert response.status_code == 400
    session.refresh(order)
    assert order.status == OrderStatus.SHIPPED


async def test_request_return_after_delivery(client, session, verified_user, auth_headers):
    order = place_order(session, verified_user, status=OrderStatus.DELIVERED)

    response = await client.post(f"/orders/{order.id}/return", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "RETURN_REQUESTED"


async def test_return_cancelled_order(client, session, verified_user, auth_headers):
    order = place_order(session, verified_user, status=OrderStatus.CANCELLED)

    response = await client.post(f"/orders/{order.id}/return", headers=auth_headers)

    assert response.status_code == 400
