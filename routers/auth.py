from fastapi import APIRouter, Depends, Request, BackgroundTasks
from fastapi.security import OAuth2PasswordRequestForm
from utils.deps import db_dependency
from starlette import status
from schemas.auth_schemas import (LoginResponse, Token, VerifyEmailRequest, CreateUserRequest,
                                  ResendCodeRequest, ForgotPasswordRequest, RevokeTokenRequest,
                                  RefreshTokenRequest, ResetPasswordRequest)
from services.auth_service import AuthService, RESET_REQUESTED_MESSAGE
from services.token_service import TokenService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)



@router.post("/token", response_model=LoginResponse)
@limiter.limit("5/minute")
async def login_for_access_token(request: Request, db: db_dependency, form_data: OAuth2PasswordRequestForm = Depends()):
    """
    Log in with an email or a registered phone number.

    Admins are sent to the back office, everyone else to the storefront.
    """
    user = AuthService.authenticate_user(form_data.username, form_data.password, db)

    token = TokenService.create_tokens(user, db)

    logger.info(
        "User logged in successfully",
        extra={"user_id": user.id, "role": user.role}
    )

    return {
        **token,
        "role": user.role,
        "redirect_to": "/admin/dashboard" if user.is_admin else "/",
        "password_change_required": user.must_change_password
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
async def create_user(request: Request, body: CreateUserRequest, db: db_dependency, bg: BackgroundTasks):
    user = AuthService.create_user(body, db, bg)

    logger.info(
        "User registered successfully",
        extra={"user_id": user.id}
    )

    return {"message": "Registration successful. Please check your email for the verification code. "
                       "Only the most recently sent code is valid."}


@router.post("/verify", status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
def verify_email(request: Request, body: VerifyEmailRequest, db: db_dependency):
    """
    Verifies user's email with the provided code.
    """
    AuthService.verify_user(body, db)

    return {"message": "Email verified successfully"}


@router.post("/resend-code", status_code=status.HTTP_200_OK)
@limiter.limit("3/minute")
async def resend_verification_code(request: Request, body: ResendCodeRequest, db: db_dependency, bg: BackgroundTasks):
    AuthService.resend_verification_code(body.identifier, db, bg)

    return {"message": "A new verification code has been sent. Earlier codes no longer work."}


@router.post("/refresh", response_model=Token)
@limiter.limit("10/minute")
async def refresh_token(request: Request, body: RefreshTokenRequest, db: db_dependency):
    """
    Get new access token using refresh token.
    """
    token = TokenService.refresh_access_token(body.refresh_token, db)

    logger.info("Access token refreshed")

    return token


@router.post("/logout", status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def logout(request: Request, body: RevokeTokenRequest, db: db_dependency):
    """
    Revoke refresh token (logout).
    """
    TokenService.revoke_token(body.refresh_token, db)

    logger.info("User logged out")

    return {"message": "Logged out successfully"}


@router.post("/forgot-password", status_code=status.HTTP_200_OK)
@limiter.limit("3/minute")
async def forgot_password_request(request: Request, body: ForgotPasswordRequest, db: db_dependency, bg: BackgroundTasks):
    """
    Request a password reset code by email. The answer is the same whether
    or not the account exists.
    """
    AuthService.request_password_reset(body.identifier, db, bg)

    return {"message": RESET_REQUESTED_MESSAGE}


@router.post("/reset-password", status_code=status.HTTP_200_OK)
@limiter.limit("5/minute")
async def reset_password(request: Request, body: ResetPasswordRequest, db: db_dependency):
    """
    Reset Password (public endpoint). Ends every existing session.
    """
    AuthService.reset_password(body, db)

    return {"message": "Password updated successfully. Please login again."}
