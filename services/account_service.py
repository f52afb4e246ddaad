from fastapi import BackgroundTasks
from sqlalchemy.orm import Session
from core.config import settings
from core.exceptions import (AuthenticationError, DuplicateIdentityError, PasswordMismatchError,
                             ValidationError, NotFoundError)
from models.users import User
from models.customers import Customer
from models.verification_tokens import TokenType
from schemas.user_schemas import UpdateProfileRequest
from services.email_service import send_otp_email
from services.token_service import TokenService
from services.verification_service import VerificationService
from utils.hashing import verify_password, get_password_hash
from utils.logger import get_logger

logger = get_logger(__name__)


class AccountService:
    """Self-service changes to a signed-in user's profile and credentials."""

    @staticmethod
    def get_profile(user: User) -> dict:
        customer = user.customer
        profile = {
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "is_verified": user.is_verified,
        }
        if customer:
            profile.update(
                first_name=customer.first_name,
                last_name=customer.last_name,
                phone_number=customer.phone_number,
                preferred_size=customer.preferred_size,
                gender=customer.gender,
                date_of_birth=customer.date_of_birth,
                newsletter_opt_in=customer.newsletter_opt_in,
            )
        return profile

    @staticmethod
    def update_profile(user: User, body: UpdateProfileRequest, db: Session) -> dict:
        customer = user.customer
        if not customer:
            raise NotFoundError("Customer profile not found")

        changes = body.model_dump(exclude_unset=True, exclude_none=True)

        phone = changes.get("phone_number")
        if phone and phone != customer.phone_number:
            taken = db.query(Customer).filter(
                Customer.phone_number == phone,
                Customer.id != customer.id
            ).first()
            if taken:
                raise DuplicateIdentityError("Phone number already registered")

        for field in ("first_name", "last_name"):
            if field in changes:
                changes[field] = changes[field].strip()
                if not changes[field]:
                    raise ValidationError("Name cannot be empty")

        for field, value in changes.items():
            setattr(customer, field, value)

        db.commit()
        db.refresh(user)

        logger.info("Profile updated", extra={"user_id": user.id, "fields": sorted(changes)})

        return AccountService.get_profile(user)

    @staticmethod
    def change_password(user: User, current_password: str, new_password: str,
                        confirm_password: str, db: Session):
        """
        Replaces the password after checking the current one, then logs the
        user out of every session.
        """
        if not verify_password(current_password, user.hashed_password):
            logger.warning("Password change with wrong current password", extra={"user_id": user.id})
            raise AuthenticationError("Incorrect current password")

        if new_password != confirm_password:
            raise PasswordMismatchError()

        user.hashed_password = get_password_hash(new_password)
        if user.must_change_password:
            user.must_change_password = False
        TokenService.invalidate_sessions(user, db, commit=False)
        db.commit()

        logger.info("Password changed", extra={"user_id": user.id})

    @staticmethod
    def _ensure_email_available(user: User, new_email: str, db: Session):
        if new_email == user.email:
            raise ValidationError("New email must be different from your current email")

        if db.query(User).filter(User.email == new_email).first():
            raise DuplicateIdentityError("Email already registered")

    @staticmethod
    def initiate_email_change(user: User, new_email: str, db: Session, bg: BackgroundTasks):
        """
        Step one of an email change: the code goes to the NEW address and
        the login identity stays as it is until the code comes back.
        """
        AccountService._ensure_email_available(user, new_email, db)

        token = VerificationService.issue_token(
            user, TokenType.NEW_EMAIL_VERIFICATION, db, target_email=new_email
        )
        bg.add_task(
            send_otp_email,
            to_email=new_email,
            code=token.code,
            token_type=TokenType.NEW_EMAIL_VERIFICATION,
            minutes=settings.OTP_EXPIRE_MINUTES
        )

        logger.info("Email change initiated", extra={"user_id": user.id})

    @staticmethod
    def pending_email_change(user: User, new_email: str, db: Session) -> bool:
        token = VerificationService.find_active_token(
            user.email, TokenType.NEW_EMAIL_VERIFICATION, db, target_email=new_email
        )
        return token is not None

    @staticmethod
    def finalize_email_change(user: User, new_email: str, code: str, db: Session) -> User:
        """
        Step two: commits the new identity once the code sent to it is
        confirmed. The login identifier changed, so every session ends.
        """
        user = VerificationService.verify_otp(
            code, user.email, TokenType.NEW_EMAIL_VERIFICATION, db, target_email=new_email
        )

        # Address may have been claimed while the code was in flight
        if db.query(User).filter(User.email == new_email, User.id != user.id).first():
            db.rollback()
            raise DuplicateIdentityError("Email already registered")

        user.email = new_email
        TokenService.invalidate_sessions(user, db, commit=False)
        db.commit()

        logger.info("Email change completed", extra={"user_id": user.id})

        return user
