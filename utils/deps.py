from core.database import SessionLocal
from typing import Annotated
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from core.config import settings
from core.exceptions import AuthenticationError, PermissionDeniedError
from models.users import User
from services.payment_gateway import PaymentGateway, get_payment_gateway


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

db_dependency = Annotated[Session, Depends(get_db)]

oauth2_bearer = OAuth2PasswordBearer(tokenUrl="auth/token")


def get_current_user(token: Annotated[str, Depends(oauth2_bearer)], db: db_dependency) -> User:
    """
    Resolves the bearer token to an active user.

    The token's "ver" claim must equal users.session_version, so tokens
    issued before a password or email change stop working at once.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationError("Could not validate credentials.",
                                  headers={"WWW-Authenticate": "Bearer"})

    email: str = payload.get("sub")
    user_id: int = payload.get("id")
    token_type: str = payload.get("type")

    if email is None or user_id is None:
        raise AuthenticationError("Could not validate credentials.")

    if token_type != "access":
        raise AuthenticationError("Invalid token type. Access token required.")

    user = db.query(User).filter(User.id == user_id, User.is_active == True).one_or_none()
    if not user:
        raise AuthenticationError("Could not validate credentials.")

    if payload.get("ver") != user.session_version:
        raise AuthenticationError("Session is no longer valid. Please log in again.")

    return user


user_dependency = Annotated[User, Depends(get_current_user)]


def require_admin(user: user_dependency) -> User:
    if not user.is_admin:
        raise PermissionDeniedError()
    return user


admin_dependency = Annotated[User, Depends(require_admin)]

gateway_dependency = Annotated[PaymentGateway, Depends(get_payment_gateway)]
