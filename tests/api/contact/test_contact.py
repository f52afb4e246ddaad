from models.contact_messages import ContactMessage


def contact_body(**overrides):
    data = {
        "name": "Asha Rao",
        "email": "Asha@Example.com ",
        "subject": "Sizing question",
        "message": "Does the Chanderi kurti run small?"
    }
    data.update(overrides)
    return data


async def test_send_message_is_stored(client, session):
    response = await client.post("/contact", json=contact_body())

    assert response.status_code == 201
    assert "get back to you shortly" in response.json()["message"]

    stored = session.query(ContactMessage).one()
    assert stored.email == "asha@example.com"
    assert stored.subject == "Sizing question"
    assert stored.created_at is not None


async def test_send_message_needs_no_login(client, session, auth_headers):
    response = await client.post("/contact", json=contact_body(), headers=auth_headers)

    assert response.status_code == 201
    assert session.query(ContactMessage).count() == 1


async def test_send_message_validation(client, session):
    response = await client.post("/contact", json=contact_body(email="not-an-email"))
    assert response.status_code == 422

    response = await client.post("/contact", json=contact_body(message="   "))
    assert response.status_code == 422

    assert session.query(ContactMessage).count() == 0


async def test_admin_lists_messages_newest_first(client, admin_headers):
    await client.post("/contact", json=contact_body(subject="First"))
    await client.post("/contact", json=contact_body(subject="Second"))

    response = await client.get("/admin/contacts", headers=admin_headers)

    assert response.status_code == 200
    subjects = [m["subject"] for m in response.json()]
    assert subjects == ["Second", "First"]


async def test_admin_deletes_message(client, session, admin_headers):
    await client.post("/contact", json=contact_body())
    message_id = session.query(ContactMessage).one().id

    response = await client.delete(f"/admin/contacts/{message_id}", headers=admin_headers)

    assert response.status_code == 200
    assert session.query(ContactMessage).count() == 0


async def test_admin_delete_missing_message(client, admin_headers):
    response = await client.delete("/admin/contacts/999", headers=admin_headers)

    assert response.status_code == 404


async def test_customers_cannot_read_messages(client, auth_headers):
    response = await client.get("/admin/contacts", headers=auth_headers)
    assert response.status_code == 403

    response = await client.delete("/admin/contacts/1", headers=auth_headers)
    assert response.status_code == 403
