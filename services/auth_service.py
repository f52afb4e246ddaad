from utils.hashing import verify_password, get_password_hash
from models.users import User
from models.customers import Customer
from models.verification_tokens import TokenType
from schemas.auth_schemas import CreateUserRequest, VerifyEmailRequest, ResetPasswordRequest
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import BackgroundTasks
from core.config import settings
from core.exceptions import (DuplicateIdentityError, PasswordMismatchError, AuthenticationError,
                             AccountDisabledError, NotFoundError, ValidationError)
from services.email_service import send_otp_email
from services.token_service import TokenService
from services.verification_service import VerificationService
from utils.verification import looks_like_phone_number
from utils.logger import get_logger

logger = get_logger(__name__)

RESET_REQUESTED_MESSAGE = "If that account exists, a password reset code has been sent."


class AuthService:

    @staticmethod
    def _schedule_otp(bg: BackgroundTasks, to_email: str, code: str, token_type: TokenType):
        bg.add_task(
            send_otp_email,
            to_email=to_email,
            code=code,
            token_type=token_type,
            minutes=settings.OTP_EXPIRE_MINUTES
        )

    @staticmethod
    def create_user(request: CreateUserRequest, db: Session, bg: BackgroundTasks):
        """
        Creates a new user and sends verification email.

        Flow:
        1. Check if email, then phone number, already exists
        2. Check password confirmation
        3. Create user (unverified), customer profile and REGISTRATION token
           in one transaction
        4. Schedule the verification email after commit
        """
        if db.query(User).filter(User.email == request.email).first():
            logger.warning(
                "Registration attempt with existing email",
                extra={"email": request.email}
            )
            raise DuplicateIdentityError("Email already registered")

        if db.query(Customer).filter(Customer.phone_number == request.phone_number).first():
            logger.warning("Registration attempt with existing phone number")
            raise DuplicateIdentityError("Phone number already registered")

        if request.password != request.confirm_password:
            raise PasswordMismatchError()

        model = User(
            email=request.email,
            hashed_password=get_password_hash(request.password),
            role="customer",
            is_verified=False
        )
        model.customer = Customer(
            first_name=request.first_name,
            last_name=request.last_name,
            phone_number=request.phone_number,
            preferred_size=request.preferred_size,
            gender=request.gender,
            date_of_birth=request.date_of_birth,
            newsletter_opt_in=request.newsletter_opt_in,
            terms_accepted=request.terms_accepted
        )

        try:
            db.add(model)
            db.flush()
            token = VerificationService.issue_token(model, TokenType.REGISTRATION, db, commit=False)
            code = token.code
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same identity
            db.rollback()
            logger.warning(
                "Registration collided with an existing identity",
                extra={"email": request.email}
            )
            raise DuplicateIdentityError("Email or phone number already registered")

        AuthService._schedule_otp(bg, model.email, code, TokenType.REGISTRATION)

        db.refresh(model)
        return model

    @staticmethod
    def resolve_identifier(identifier: str, db: Session) -> User | None:
        """
        Finds the user behind a login identifier: the email first, then the
        customer phone number when the identifier looks like one.
        """
        identifier = identifier.strip()
        user = db.query(User).filter(User.email == identifier.lower()).first()
        if user:
            return user

        if looks_like_phone_number(identifier):
            phone = identifier if identifier.startswith("+") else f"+{identifier}"
            customer = db.query(Customer).filter(Customer.phone_number == phone).first()
            if customer:
                return customer.user

        return None

    @staticmethod
    def authenticate_user(identifier: str, password: str, db: Session):
        user = AuthService.resolve_identifier(identifier, db)

        if not user:
            logger.warning("Login failed - user not found")
            raise NotFoundError("No account found for that email or phone number")

        if not verify_password(password, user.hashed_password):
            logger.warning(
                "Login failed - invalid password",
                extra={"user_id": user.id}
            )
            raise AuthenticationError("Could not validate user.")

        if not user.is_active:
            logger.warning(
                "Login failed - inactive account",
                extra={"user_id": user.id}
            )
            raise AuthenticationError("Could not validate user.")

        if not user.is_verified and not user.is_admin:
            logger.warning(
                "Login attempt with unverified email",
                extra={"user_id": user.id}
            )
            raise AccountDisabledError()

        logger.debug(
            "User authenticated successfully",
            extra={"user_id": user.id}
        )

        return user

    @staticmethod
    def verify_user(body: VerifyEmailRequest, db: Session):
        user = db.query(User).filter(User.email == body.email).first()
        if not user:
            raise NotFoundError("User not found")

        if user.is_verified:
            raise ValidationError("Email already verified")

        user = VerificationService.verify_otp(body.code, body.email, TokenType.REGISTRATION, db)
        user.is_verified = True
        db.commit()

        logger.info("Email verified successfully", extra={"user_id": user.id})

        return user

    @staticmethod
    def resend_verification_code(identifier: str, db: Session, bg: BackgroundTasks):
        """
        Re-issues the REGISTRATION code for an unverified account. The code
        sent before stops working.
        """
        user = AuthService.resolve_identifier(identifier, db)
        if not user:
            raise NotFoundError("User not found")

        if user.is_verified:
            raise ValidationError("Email already verified")

        token = VerificationService.issue_token(user, TokenType.REGISTRATION, db)
        AuthService._schedule_otp(bg, user.email, token.code, TokenType.REGISTRATION)

        return user

    @staticmethod
    def request_password_reset(identifier: str, db: Session, bg: BackgroundTasks):
        user = AuthService.resolve_identifier(identifier, db)

        if not user or not user.is_active:
            logger.info("Password reset requested for unknown account")
            return

        token = VerificationService.issue_token(user, TokenType.PASSWORD_RESET, db)
        AuthService._schedule_otp(bg, user.email, token.code, TokenType.PASSWORD_RESET)

        logger.info("Password reset code issued", extra={"user_id": user.id})

    @staticmethod
    def reset_password(body: ResetPasswordRequest, db: Session):
        if body.new_password != body.confirm_password:
            raise PasswordMismatchError()

        user = VerificationService.verify_otp(body.code, body.email, TokenType.PASSWORD_RESET, db)

        user.hashed_password = get_password_hash(body.new_password)
        TokenService.invalidate_sessions(user, db, commit=False)
        db.commit()

        logger.info("Password reset successfully", extra={"user_id": user.id})

        return user

    @staticmethod
    def seed_admin(db: Session):
        """
        Creates the bootstrap admin on first start. It logs in like any other
        account and is asked to replace its default credentials.
        """
        if db.query(User).filter(User.role == "admin").first():
            return None

        admin = User(
            email=settings.ADMIN_BOOTSTRAP_USERNAME.strip().lower(),
            hashed_password=get_password_hash(settings.ADMIN_BOOTSTRAP_PASSWORD),
            role="admin",
            is_verified=True,
            must_change_password=True
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)

        logger.warning(
            "Bootstrap admin created with default credentials",
            extra={"user_id": admin.id}
        )
        return admin

    @staticmethod
    def change_admin_credentials(admin: User, new_username: str, new_password: str,
                                 confirm_password: str, db: Session):
        if new_password != confirm_password:
            raise PasswordMismatchError()

        if new_username != admin.email and db.query(User).filter(User.email == new_username).first():
            raise DuplicateIdentityError("Username already taken")

        admin.email = new_username
        admin.hashed_password = get_password_hash(new_password)
        admin.must_change_password = False
        TokenService.invalidate_sessions(admin, db, commit=False)
        db.commit()

        logger.info("Admin credentials updated", extra={"user_id": admin.id})

        return admin

    @staticmethod
    def get_active_user_by_id(db: Session, user_id: int) -> User | None:
        model = db.query(User).filter(User.id == user_id, User.is_active == True).one_or_none()

        return model
