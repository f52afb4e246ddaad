from fastapi import APIRouter, status, Request, BackgroundTasks
from utils.deps import user_dependency, db_dependency
from schemas.auth_schemas import ChangePasswordRequest
from schemas.user_schemas import (UserProfileResponse, UpdateProfileRequest, ChangeEmailRequest,
                                  VerifyNewEmailRequest, PendingEmailChangeResponse, AddressRequest,
                                  AddressResponse, CouponResponse, GiftCardResponse)
from services.account_service import AccountService
from services.address_service import AddressService
from services.rewards_service import RewardsService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/users",
    tags=["users"]
)

@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserProfileResponse)
@limiter.limit("30/minute")
async def get_user_info(request: Request, user: user_dependency):
    """
    Get current user info (protected endpoint).
    """
    return AccountService.get_profile(user)


@router.put("/me", status_code=status.HTTP_200_OK, response_model=UserProfileResponse)
@limiter.limit("10/minute")
async def update_user_info(request: Request, body: UpdateProfileRequest, user: user_dependency, db: db_dependency):
    return AccountService.update_profile(user, body, db)


@router.put("/me/password", status_code=status.HTTP_200_OK)
@limiter.limit("2/minute")
async def change_password(request: Request, body: ChangePasswordRequest,
    user: user_dependency, db: db_dependency):
    """
    Change password. Every session, including this one, is logged out.
    """
    AccountService.change_password(user, body.current_password, body.new_password,
                                   body.confirm_password, db)

    return {"message": "Password updated successfully. Please login again."}


@router.post("/me/email", status_code=status.HTTP_200_OK)
@limiter.limit("3/minute")
async def request_email_change(request: Request, body: ChangeEmailRequest,
    user: user_dependency, db: db_dependency, bg: BackgroundTasks):
    """
    Sends a code to the new address. The login email stays unchanged until
    the code is confirmed.
    """
    AccountService.initiate_email_change(user, body.new_email, db, bg)

    return {"message": f"A verification code has been sent to {body.new_email}."}


@router.get("/me/email/pending", status_code=status.HTTP_200_OK, response_model=PendingEmailChangeResponse)
@limiter.limit("30/minute")
async def pending_email_change(request: Request, new_email: str, user: user_dependency, db: db_dependency):
    new_email = new_email.strip().lower()
    pending = AccountService.pending_email_change(user, new_email, db)

    return {
        "new_email": new_email,
        "pending": pending,
        "message": "Enter the code sent to your new email address." if pending
                   else "No pending change for this address. Please request a new code."
    }


@router.post("/me/email/verify", status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def confirm_email_change(request: Request, body: VerifyNewEmailRequest,
    user: user_dependency, db: db_dependency):
    AccountService.finalize_email_change(user, body.new_email, body.code, db)

    return {"message": "Email updated successfully. Please login again with your new email."}


@router.get("/me/addresses", status_code=status.HTTP_200_OK, response_model=list[AddressResponse])
@limiter.limit("30/minute")
async def list_addresses(request: Request, user: user_dependency, db: db_dependency):
    return AddressService.list_addresses(user.id, db)


@router.post("/me/addresses", status_code=status.HTTP_200_OK, response_model=AddressResponse)
@limiter.limit("10/minute")
async def save_address(request: Request, body: AddressRequest, user: user_dependency, db: db_dependency):
    return AddressService.save_address(user.id, body, db)


@router.delete("/me/addresses/{address_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("10/minute")
async def delete_address(request: Request, address_id: int, user: user_dependency, db: db_dependency):
    AddressService.delete_address(user.id, address_id, db)


@router.get("/me/coupons", status_code=status.HTTP_200_OK, response_model=list[CouponResponse])
@limiter.limit("30/minute")
async def list_coupons(request: Request, user: user_dependency, db: db_dependency):
    return RewardsService.active_coupons(db)


@router.get("/me/gift-cards", status_code=status.HTTP_200_OK, response_model=list[GiftCardResponse])
@limiter.limit("30/minute")
async def list_gift_cards(request: Request, user: user_dependency, db: db_dependency):
    return RewardsService.gift_cards_for(user.id, db)
