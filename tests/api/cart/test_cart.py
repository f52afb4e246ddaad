from decimal import Decimal


async def test_cart_requires_login(client):
    response = await client.get("/cart")

    assert response.status_code == 401


async def test_empty_cart(client, auth_headers):
    response = await client.get("/cart", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["items"] == []
    assert response.json()["item_count"] == 0
    assert Decimal(response.json()["subtotal"]) == Decimal("0")


async def test_add_to_cart(client, auth_headers, make_product):
    product = make_product(price=Decimal("1499.00"))

    response = await client.post("/cart/items", headers=auth_headers,
                                  json={"product_id": product.id, "quantity": 2})

    assert response.status_code == 200
    cart = response.json()
    assert cart["item_count"] == 2
    assert cart["items"][0]["product_id"] == product.id
    assert Decimal(cart["items"][0]["line_total"]) == Decimal("2998.00")
    assert Decimal(cart["subtotal"]) == Decimal("2998.00")


async def test_add_same_product_merges_lines(client, auth_headers, make_product):
    product = make_product()

    await client.post("/cart/items", headers=auth_headers, json={"product_id": product.id})
    response = await client.post("/cart/items", headers=auth_headers, json={"product_id": product.id})

    assert len(response.json()["items"]) == 1
    assert response.json()["items"][0]["quantity"] == 2


async def test_add_more_than_stock(client, auth_headers, make_product):
    product = make_product(stock_quantity=1)

    response = await client.post("/cart/items", headers=auth_headers,
                                  json={"product_id": product.id, "quantity": 2})

    assert response.status_code == 400
    assert "available" in response.json()["detail"].lower()


async def test_add_unavailable_product(client, auth_headers, make_product):
    product = make_product(is_available=False)

    response = await client.post("/cart/items", headers=auth_headers, json={"product_id": product.id})

    assert response.status_code == 404


async def test_add_zero_quantity(client, auth_headers, make_product):
    product = make_product()

    response = await client.post("/cart/items", headers=auth_headers,
                                  json={"product_id": product.id, "quantity": 0})

    assert response.status_code == 422


async def test_update_cart_quantity(client, auth_headers, make_product, verified_user, add_to_cart):
    product = make_product()
    add_to_cart(verified_user, product, 1)

    response = await client.patch(f"/cart/items/{product.id}", headers=auth_headers, json={"quantity": 4})

    assert response.status_code == 200
    assert response.json()["items"][0]["quantity"] == 4


async def test_update_to_zero_removes(client, auth_headers, make_product, verified_user, add_to_cart):
    product = make_product()
    add_to_cart(verified_user, product, 1)

    response = await client.patch(f"/cart/items/{product.id}", headers=auth_headers, json={"quantity": 0})

    assert response.status_code == 200
    assert response.json()["items"] == []


async def test_remove_from_cart(client, auth_headers, make_product, verified_user, add_to_cart):
    product = make_product()
    add_to_cart(verified_user, product, 1)

    response = await client.delete(f"/cart/items/{product.id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["items"] == []

    response = await client.delete(f"/cart/items/{product.id}", headers=auth_headers)
    assert response.status_code == 404


async def test_carts_are_private(client, auth_headers, make_product, make_customer, add_to_cart):
    other = make_customer(email="other@example.com", phone_number="+201222222222")
    add_to_cart(other, make_product(), 3)

    response = await client.get("/cart", headers=auth_headers)

    assert response.json()["items"] == []
