from fastapi import APIRouter, Request, status
from utils.deps import db_dependency, user_dependency
from schemas.cart_schemas import AddCartItemRequest, UpdateCartItemRequest, CartResponse
from services.cart_service import CartService
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/cart",
    tags=["cart"]
)


@router.get("", status_code=status.HTTP_200_OK, response_model=CartResponse)
@limiter.limit("60/minute")
async def get_cart(request: Request, user: user_dependency, db: db_dependency):
    return CartService.get_cart(user.id, db)


@router.post("/items", status_code=status.HTTP_200_OK, response_model=CartResponse)
@limiter.limit("30/minute")
async def add_to_cart(request: Request, body: AddCartItemRequest, user: user_dependency, db: db_dependency):
    CartService.add_item(user.id, body.product_id, body.quantity, db)
    return CartService.get_cart(user.id, db)


@router.patch("/items/{product_id}", status_code=status.HTTP_200_OK, response_model=CartResponse)
@limiter.limit("30/minute")
async def update_cart_item(request: Request, product_id: int, body: UpdateCartItemRequest,
                           user: user_dependency, db: db_dependency):
    CartService.update_quantity(user.id, product_id, body.quantity, db)
    return CartService.get_cart(user.id, db)


@router.delete("/items/{product_id}", status_code=status.HTTP_200_OK, response_model=CartResponse)
@limiter.limit("30/minute")
async def remove_from_cart(request: Request, product_id: int, user: user_dependency, db: db_dependency):
    CartService.remove_item(user.id, product_id, db)
    return CartService.get_cart(user.id, db)
