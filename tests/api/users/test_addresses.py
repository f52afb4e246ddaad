def address(**overrides):
    data = {
        "full_name": "Test User",
        "line1": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "postal_code": "560001",
        "country": "India",
        "phone_number": "+919876543210"
    }
    data.update(overrides)
    return data


async def test_first_address_becomes_default(client, auth_headers):
    response = await client.post("/users/me/addresses", headers=auth_headers, json=address())

    assert response.status_code == 200
    assert response.json()["is_default"] is True


async def test_single_default_address(client, auth_headers):
    first = (await client.post("/users/me/addresses", headers=auth_headers, json=address())).json()
    second = (await client.post("/users/me/addresses", headers=auth_headers,
                                json=address(line1="5 Park Street", is_default=True))).json()

    response = await client.get("/users/me/addresses", headers=auth_headers)

    assert response.status_code == 200
    addresses = response.json()
    defaults = [a["id"] for a in addresses if a["is_default"]]
    assert defaults == [second["id"]]
    # Default is listed first
    assert addresses[0]["id"] == second["id"]
    assert addresses[1]["id"] == first["id"]


async def test_update_address(client, auth_headers):
    created = (await client.post("/users/me/addresses", headers=auth_headers, json=address())).json()

    response = await client.post("/users/me/addresses", headers=auth_headers,
                                 json=address(id=created["id"], city="Mysuru", is_default=True))

    assert response.status_code == 200
    assert response.json()["id"] == created["id"]
    assert response.json()["city"] == "Mysuru"


async def test_cannot_touch_another_users_address(client, auth_headers, make_customer, headers_for):
    other = make_customer(email="other@example.com", phone_number="+201222222222")
    created = (await client.post("/users/me/addresses", headers=headers_for(other), json=address())).json()

    response = await client.post("/users/me/addresses", headers=auth_headers,
                                 json=address(id=created["id"]))
    assert response.status_code == 404

    response = await client.delete(f"/users/me/addresses/{created['id']}", headers=auth_headers)
    assert response.status_code == 404


async def test_delete_address(client, auth_headers):
    created = (await client.post("/users/me/addresses", headers=auth_headers, json=address())).json()

    response = await client.delete(f"/users/me/addresses/{created['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = await client.get("/users/me/addresses", headers=auth_headers)
    assert response.json() == []


async def test_deleting_default_promotes_oldest_address(client, auth_headers):
    first = (await client.post("/users/me/addresses", headers=auth_headers, json=address())).json()
    second = (await client.post("/users/me/addresses", headers=auth_headers,
                                json=address(line1="5 Park Street"))).json()
    third = (await client.post("/users/me/addresses", headers=auth_headers,
                               json=address(line1="9 Brigade Road", is_default=True))).json()

    response = await client.delete(f"/users/me/addresses/{third['id']}", headers=auth_headers)
    assert response.status_code == 204

    addresses = (await client.get("/users/me/addresses", headers=auth_headers)).json()
    defaults = [a["id"] for a in addresses if a["is_default"]]
    assert defaults == [first["id"]]
    assert [a["id"] for a in addresses] == [first["id"], second["id"]]


async def test_deleting_other_address_keeps_default(client, auth_headers):
    first = (await client.post("/users/me/addresses", headers=auth_headers, json=address())).json()
    second = (await client.post("/users/me/addresses", headers=auth_headers,
                                json=address(line1="5 Park Street"))).json()

    await client.delete(f"/users/me/addresses/{second['id']}", headers=auth_headers)

    addresses = (await client.get("/users/me/addresses", headers=auth_headers)).json()
    assert [(a["id"], a["is_default"]) for a in addresses] == [(first["id"], True)]
