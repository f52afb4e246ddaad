from typing import Optional
from sqlalchemy.orm import Session
from core.config import settings
from core.exceptions import InvalidOtpError
from models.users import User
from models.verification_tokens import VerificationToken, TokenType
from services.locks import lock_user
from utils.verification import (generate_verification_code, get_code_expiry_time,
                                is_expired, codes_match)
from utils.logger import get_logger

logger = get_logger(__name__)


class VerificationService:
    """
    Store of one-time codes.

    Per (user, token type) the lifecycle is NONE -> ISSUED -> CONSUMED or
    EXPIRED. Issuing again replaces the previous code, so only the most
    recently sent code can be used.
    """

    @staticmethod
    def issue_token(user: User, token_type: TokenType, db: Session,
                    target_email: Optional[str] = None, commit: bool = True) -> VerificationToken:
        """
        Delete-then-insert under a lock on the user's row.

        With commit=False the caller owns the transaction (registration
        commits the user, profile and token together).
        """
        if user.id is not None:
            lock_user(db, user.id)

        db.query(VerificationToken).filter(
            VerificationToken.user_id == user.id,
            VerificationToken.token_type == token_type
        ).delete(synchronize_session="fetch")

        token = VerificationToken(
            user_id=user.id,
            code=generate_verification_code(),
            token_type=token_type,
            target_email=target_email,
            expires_at=get_code_expiry_time(settings.OTP_EXPIRE_MINUTES)
        )
        db.add(token)

        if commit:
            db.commit()
            db.refresh(token)
        else:
            db.flush()

        logger.info(
            "Verification code issued",
            extra={"user_id": user.id, "token_type": token_type.value}
        )
        return token

    @staticmethod
    def find_active_token(identifier: str, token_type: TokenType, db: Session,
                          target_email: Optional[str] = None) -> Optional[VerificationToken]:
        """Live (unexpired) token of this type for the user, without consuming it."""
        user = db.query(User).filter(User.email == identifier).first()
        if not user:
            return None

        token = db.query(VerificationToken).filter(
            VerificationToken.user_id == user.id,
            VerificationToken.token_type == token_type
        ).first()

        if not token or is_expired(token.expires_at):
            return None

        if target_email is not None and token.target_email != target_email:
            return None

        return token

    @staticmethod
    def verify_otp(code: str, identifier: str, token_type: TokenType, db: Session,
                   target_email: Optional[str] = None) -> User:
        """
        Check a submitted code and consume it.

        Fails with InvalidOtpError when the user is unknown, no token of the
        type exists, the token has expired (it is deleted as a side effect),
        the code does not match, or the token was issued for another
        target email.

        On success the token is deleted in the current transaction and the
        user is returned; the caller applies the effect and commits both
        together.
        """
        user = db.query(User).filter(User.email == identifier).first()
        if not user:
            logger.warning("OTP check for unknown user", extra={"token_type": token_type.value})
            raise InvalidOtpError()

        # Competing checks of the same code queue here, so only one can consume it
        user = lock_user(db, user.id)

        token = db.query(VerificationToken).filter(
            VerificationToken.user_id == user.id,
            VerificationToken.token_type == token_type
        ).first()

        if not token:
            logger.warning(
                "OTP check without a live token",
                extra={"user_id": user.id, "token_type": token_type.value}
            )
            raise InvalidOtpError()

        if is_expired(token.expires_at):
            db.delete(token)
            db.commit()
            logger.info(
                "Expired verification code removed",
                extra={"user_id": user.id, "token_type": token_type.value}
            )
            raise InvalidOtpError("Verification code expired. Please request a new one.")

        if not codes_match(code, token.code):
            logger.warning(
                "OTP mismatch",
                extra={"user_id": user.id, "token_type": token_type.value}
            )
            raise InvalidOtpError()

        if target_email is not None and token.target_email != target_email:
            logger.warning(
                "OTP was issued for a different address",
                extra={"user_id": user.id, "token_type": token_type.value}
            )
            raise InvalidOtpError()

        db.delete(token)
        db.flush()

        return user
