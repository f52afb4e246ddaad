import secrets
import hashlib
from datetime import datetime, timezone, timedelta
from sqlalchemy.orm import Session
from jose import jwt, JWTError
from models.refresh_tokens import RefreshToken
from models.users import User
from core.config import settings
from core.exceptions import AuthenticationError
from utils.verification import is_expired
from utils.logger import get_logger

logger = get_logger(__name__)


def hash_jti(jti: str) -> str:
    return hashlib.sha256(jti.encode()).hexdigest()


class TokenService:
    """
    Handles all token operations: creation, validation, rotation, and revocation.

    A login session is an access token plus a stored refresh token. Both
    embed the user's session_version at issue time; invalidate_sessions()
    bumps that version and revokes stored refresh tokens, so every token
    issued before the bump stops working.
    """

    @staticmethod
    def create_access_token(email: str, user_id: int, role: str, session_version: int = 0,
                            expires_delta: timedelta = None):
        """
        Creates a JWT access token.

        Args:
            email: User's login identifier
            user_id: User's ID
            role: User's role
            session_version: users.session_version at issue time
            expires_delta: Token expiration time (default: ACCESS_TOKEN_EXPIRE_MINUTES)
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        expire = datetime.now(timezone.utc) + expires_delta

        payload = {
            "sub": email,
            "id": user_id,
            "role": role,
            "ver": session_version,
            "type": "access",
            "exp": expire
        }

        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def create_refresh_token(email: str, user_id: int, role: str, session_version: int = 0):
        """
        Creates a JWT refresh token.

        Returns:
            Tuple of (refresh_token_string, jti, expires_at)
        """
        jti = secrets.token_urlsafe(32)

        expire = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

        payload = {
            "sub": email,
            "id": user_id,
            "role": role,
            "ver": session_version,
            "jti": jti,
            "type": "refresh",
            "exp": expire
        }

        refresh_token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

        return refresh_token, jti, expire

    @staticmethod
    def create_tokens(user: User, db: Session):
        """
        Creates an access + refresh token pair for the user and stores the
        refresh token's hashed jti.
        """
        access_token = TokenService.create_access_token(
            user.email, user.id, user.role, user.session_version
        )
        refresh_token, jti, expires_at = TokenService.create_refresh_token(
            user.email, user.id, user.role, user.session_version
        )

        db.add(RefreshToken(
            user_id=user.id,
            token_hash=hash_jti(jti),
            expires_at=expires_at
        ))
        db.commit()

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer"
        }

    @staticmethod
    def refresh_access_token(refresh_token: str, db: Session):
        """
        Validates a refresh token and issues a new pair. The old refresh
        token is revoked (rotation).

        Raises:
            AuthenticationError: token invalid, expired, revoked or from an
            invalidated session
        """
        try:
            payload = jwt.decode(
                refresh_token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM]
            )
        except JWTError:
            raise AuthenticationError("Invalid token")

        if payload.get("type") != "refresh":
            raise AuthenticationError("Invalid token type")

        user_id = payload.get("id")
        jti = payload.get("jti")

        if not user_id or not jti:
            raise AuthenticationError("Invalid token payload")

        db_token = db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_jti(jti),
            RefreshToken.revoked == False
        ).first()

        if not db_token:
            raise AuthenticationError("Token not found or revoked")

        if is_expired(db_token.expires_at):
            raise AuthenticationError("Token expired")

        user = db.query(User).filter(User.id == user_id).one_or_none()
        if not user or not user.is_active:
            raise AuthenticationError("Account is inactive")

        if payload.get("ver") != user.session_version:
            raise AuthenticationError("Session is no longer valid. Please log in again.")

        db_token.revoked = True
        db.commit()

        return TokenService.create_tokens(user, db)

    @staticmethod
    def revoke_token(refresh_token: str, db: Session):
        """
        Revokes a single refresh token (logout). Unknown or malformed tokens
        are ignored: there is nothing left to revoke.
        """
        try:
            payload = jwt.decode(
                refresh_token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM]
            )
        except JWTError:
            return

        jti = payload.get("jti")
        if not jti:
            return

        db_token = db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_jti(jti)
        ).first()

        if db_token:
            db_token.revoked = True
            db.commit()

    @staticmethod
    def revoke_all_user_tokens(user_id: int, db: Session, commit: bool = True):
        db.query(RefreshToken).filter(
            RefreshToken.user_id == user_id,
            RefreshToken.revoked == False
        ).update({"revoked": True})
        if commit:
            db.commit()

    @staticmethod
    def invalidate_sessions(user: User, db: Session, commit: bool = True):
        """
        Logs the user out everywhere: outstanding access tokens fail the
        session_version check and refresh tokens are revoked.
        """
        user.session_version = (user.session_version or 0) + 1
        TokenService.revoke_all_user_tokens(user.id, db, commit=False)
        if commit:
            db.commit()

        logger.info("User sessions invalidated", extra={"user_id": user.id})
