from typing import Optional
from fastapi import APIRouter, Request, status
from utils.deps import db_dependency, admin_dependency
from schemas.admin_schemas import (AdminCredentialsRequest, AdminProfileResponse, AdminDashboardResponse,
                                   CouponCreateRequest, GiftCardIssueRequest)
from schemas.product_schemas import ProductCreateRequest, ProductUpdateRequest, ProductResponse
from schemas.order_schemas import OrderResponse, UpdateOrderStatusRequest
from schemas.user_schemas import CouponResponse, GiftCardResponse
from schemas.contact_schemas import ContactMessageResponse
from models.orders import OrderStatus
from services.auth_service import AuthService
from services.contact_service import ContactService
from services.order_service import OrderService
from services.product_service import ProductService
from services.rewards_service import RewardsService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)

FORCE_UPDATE_MESSAGE = ("You are using the default admin credentials. "
                        "Please set a new username and password.")


router = APIRouter(
    prefix="/admin",
    tags=["admin"]
)


@router.get("/dashboard", status_code=status.HTTP_200_OK, response_model=AdminDashboardResponse)
@limiter.limit("60/minute")
async def dashboard(request: Request, admin: admin_dependency, db: db_dependency,
                    category: Optional[str] = None):
    return {
        "products": ProductService.list_products(db, category),
        "categories": ProductService.categories(),
        "force_update_message": FORCE_UPDATE_MESSAGE if admin.must_change_password else None
    }


@router.post("/products", status_code=status.HTTP_201_CREATED, response_model=ProductResponse)
@limiter.limit("30/minute")
async def create_product(request: Request, body: ProductCreateRequest, admin: admin_dependency, db: db_dependency):
    return ProductService.create_product(body, db)


@router.put("/products/{product_id}", status_code=status.HTTP_200_OK, response_model=ProductResponse)
@limiter.limit("30/minute")
async def update_product(request: Request, product_id: int, body: ProductUpdateRequest,
                         admin: admin_dependency, db: db_dependency):
    return ProductService.update_product(product_id, body, db)


@router.delete("/products/{product_id}", status_code=status.HTTP_200_OK)
@limiter.limit("30/minute")
async def delete_product(request: Request, product_id: int, admin: admin_dependency, db: db_dependency):
    ProductService.delete_product(product_id, db)

    return {"message": "Product deleted. It was also removed from all carts and wishlists."}


@router.get("/profile", status_code=status.HTTP_200_OK, response_model=AdminProfileResponse)
@limiter.limit("30/minute")
async def admin_profile(request: Request, admin: admin_dependency):
    return {
        "id": admin.id,
        "username": admin.email,
        "credentials_updated": not admin.must_change_password
    }


@router.put("/credentials", status_code=status.HTTP_200_OK)
@limiter.limit("5/minute")
async def update_credentials(request: Request, body: AdminCredentialsRequest,
                             admin: admin_dependency, db: db_dependency):
    """
    Replaces the admin username and password. Existing sessions end, so
    the admin logs in again with the new credentials.
    """
    AuthService.change_admin_credentials(admin, body.new_username, body.new_password,
                                         body.confirm_password, db)

    return {"message": "Credentials updated. Please login again."}


@router.put("/orders/{order_id}/status", status_code=status.HTTP_200_OK, response_model=OrderResponse)
@limiter.limit("30/minute")
async def update_order_status(request: Request, order_id: int, body: UpdateOrderStatusRequest,
                              admin: admin_dependency, db: db_dependency):
    return OrderService.update_order_status(order_id, OrderStatus(body.status), db)


@router.post("/coupons", status_code=status.HTTP_201_CREATED, response_model=CouponResponse)
@limiter.limit("30/minute")
async def create_coupon(request: Request, body: CouponCreateRequest, admin: admin_dependency, db: db_dependency):
    return RewardsService.create_coupon(body, db)


@router.post("/gift-cards", status_code=status.HTTP_201_CREATED, response_model=GiftCardResponse)
@limiter.limit("30/minute")
async def issue_gift_card(request: Request, body: GiftCardIssueRequest, admin: admin_dependency, db: db_dependency):
    return RewardsService.issue_gift_card(body, db)


@router.get("/contacts", status_code=status.HTTP_200_OK, response_model=list[ContactMessageResponse])
@limiter.limit("60/minute")
async def list_contact_messages(request: Request, admin: admin_dependency, db: db_dependency):
    return ContactService.list_messages(db)


@router.delete("/contacts/{message_id}", status_code=status.HTTP_200_OK)
@limiter.limit("30/minute")
async def delete_contact_message(request: Request, message_id: int, admin: admin_dependency, db: db_dependency):
    ContactService.delete_message(message_id, db)

    return {"message": "Message deleted"}
