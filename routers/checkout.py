from fastapi import APIRouter, Query, Request, status
from utils.deps import db_dependency, user_dependency, gateway_dependency
from schemas.order_schemas import CheckoutSessionResponse, PaymentResultResponse
from services.checkout_service import CheckoutService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    tags=["checkout"]
)


@router.post("/checkout", status_code=status.HTTP_200_OK, response_model=CheckoutSessionResponse)
@limiter.limit("10/minute")
def create_checkout_session(request: Request, user: user_dependency, db: db_dependency,
                            gateway: gateway_dependency):
    """
    Starts a hosted payment for the current cart. The client follows
    redirect_url; the cart is untouched until the payment succeeds.

    Declared sync: the gateway SDK blocks, so FastAPI runs this in its
    threadpool.
    """
    return CheckoutService.initiate_checkout(user, db, gateway)


@router.get("/payment/success", status_code=status.HTTP_200_OK, response_model=PaymentResultResponse)
@limiter.limit("20/minute")
def payment_success(request: Request, user: user_dependency, db: db_dependency,
                    gateway: gateway_dependency, session_id: str = Query(min_length=1)):
    """
    Payment-success callback. Safe to call again: a repeated callback
    reports the payment as already processed and creates nothing.
    """
    order, created = CheckoutService.fulfill_payment(user, session_id, db, gateway)

    if not created:
        return {
            "message": "Payment already processed.",
            "redirect_to": "/orders",
            "already_fulfilled": True,
            "order": order
        }

    return {
        "message": "Payment successful! Your order has been placed.",
        "redirect_to": "/orders",
        "already_fulfilled": False,
        "order": order
    }


@router.get("/payment/cancel", status_code=status.HTTP_200_OK, response_model=PaymentResultResponse)
async def payment_cancel(request: Request):
    return CheckoutService.payment_cancel()
