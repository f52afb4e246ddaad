from datetime import datetime, timedelta, timezone
from models.verification_tokens import VerificationToken, TokenType
from utils.hashing import verify_password


def reset_token(session, user):
    return session.query(VerificationToken).filter(
        VerificationToken.user_id == user.id,
        VerificationToken.token_type == TokenType.PASSWORD_RESET
    ).first()


async def test_forgot_password_issues_code(client, session, verified_user):
    response = await client.post("/auth/forgot-password", json={"identifier": verified_user.email})

    assert response.status_code == 200
    assert "reset code has been sent" in response.json()["message"]

    token = reset_token(session, verified_user)
    assert token is not None
    assert token.expires_at.replace(tzinfo=timezone.utc) > datetime.now(timezone.utc)


async def test_forgot_password_unknown_account_same_answer(client, session, verified_user):
    known = await client.post("/auth/forgot-password", json={"identifier": verified_user.email})
    unknown = await client.post("/auth/forgot-password", json={"identifier": "nobody@example.com"})

    assert unknown.status_code == 200
    assert unknown.json() == known.json()


async def test_reset_password_success(client, session, verified_user):
    await client.post("/auth/forgot-password", json={"identifier": verified_user.email})
    code = reset_token(session, verified_user).code

    response = await client.post("/auth/reset-password", json={
        "email": verified_user.email,
        "code": code,
        "new_password": "NewSecurePass456!",
        "confirm_password": "NewSecurePass456!"
    })

    assert response.status_code == 200

    session.refresh(verified_user)
    assert verify_password("NewSecurePass456!", verified_user.hashed_password)
    assert reset_token(session, verified_user) is None

    response = await client.post("/auth/token", data={
        "username": verified_user.email,
        "password": "NewSecurePass456!"
    })
    assert response.status_code == 200


async def test_reset_password_ends_sessions(client, session, verified_user):
    login = await client.post("/auth/token", data={
        "username": verified_user.email,
        "password": "TestPassword123!"
    })
    old_tokens = login.json()

    await client.post("/auth/forgot-password", json={"identifier": verified_user.email})
    code = reset_token(session, verified_user).code
    await client.post("/auth/reset-password", json={
        "email": verified_user.email,
        "code": code,
        "new_password": "NewSecurePass456!",
        "confirm_password": "NewSecurePass456!"
    })

    me = await client.get("/users/me", headers={"Authorization": f"Bearer {old_tokens['access_token']}"})
    assert me.status_code == 401

    refresh = await client.post("/auth/refresh", json={"refresh_token": old_tokens["refresh_token"]})
    assert refresh.status_code == 401


async def test_reset_password_mismatch(client, session, verified_user):
    await client.post("/auth/forgot-password", json={"identifier": verified_user.email})
    code = reset_token(session, verified_user).code

    response = await client.post("/auth/reset-password", json={
        "email": verified_user.email,
        "code": code,
        "new_password": "NewSecurePass456!",
        "confirm_password": "Different456!"
    })

    assert response.status_code == 400
    # Mismatch is caught before the code is spent
    assert reset_token(session, verified_user) is not None


async def test_reset_password_expired_code(client, session, verified_user):
    await client.post("/auth/forgot-password", json={"identifier": verified_user.email})
    token = reset_token(session, verified_user)
    token.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    session.commit()

    response = await client.post("/auth/reset-password", json={
        "email": verified_user.email,
        "code": token.code,
        "new_password": "NewSecurePass456!",
        "confirm_password": "NewSecurePass456!"
    })

    assert response.status_code == 400
    assert "expired" in response.json()["detail"].lower()


async def test_reset_password_weak_password(client, verified_user):
    response = await client.post("/auth/reset-password", json={
        "email": verified_user.email,
        "code": "123456",
        "new_password": "weak",
        "confirm_password": "weak"
    })

    assert response.status_code == 422
