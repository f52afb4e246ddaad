from datetime import datetime, timedelta, timezone
from decimal import Decimal
from models.coupons import Coupon
from models.gift_cards import GiftCard


async def test_list_active_coupons(client, session, auth_headers):
    session.add_all([
        Coupon(code="FESTIVE10", description="Festive season", discount_percent=10),
        Coupon(code="OLD5", description="Expired", discount_percent=5,
               expires_at=datetime.now(timezone.utc) - timedelta(days=1)),
        Coupon(code="OFF20", description="Switched off", discount_percent=20, is_active=False),
    ])
    session.commit()

    response = await client.get("/users/me/coupons", headers=auth_headers)

    assert response.status_code == 200
    assert [c["code"] for c in response.json()] == ["FESTIVE10"]


async def test_gift_cards_are_per_customer(client, session, verified_user, auth_headers, make_customer):
    other = make_customer(email="other@example.com", phone_number="+201222222222")
    session.add_all([
        GiftCard(user_id=verified_user.id, code="GC-MINE", balance=Decimal("500.00")),
        GiftCard(user_id=other.id, code="GC-THEIRS", balance=Decimal("250.00")),
    ])
    session.commit()

    response = await client.get("/users/me/gift-cards", headers=auth_headers)

    assert response.status_code == 200
    cards = response.json()
    assert [c["code"] for c in cards] == ["GC-MINE"]
    assert Decimal(cards[0]["balance"]) == Decimal("500.00")


async def test_rewards_require_login(client):
    assert (await client.get("/users/me/coupons")).status_code == 401
    assert (await client.get("/users/me/gift-cards")).status_code == 401
