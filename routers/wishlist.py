from fastapi import APIRouter, Request, status
from utils.deps import db_dependency, user_dependency
from schemas.cart_schemas import WishlistItemResponse
from services.wishlist_service import WishlistService
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/wishlist",
    tags=["wishlist"]
)


@router.get("", status_code=status.HTTP_200_OK, response_model=list[WishlistItemResponse])
@limiter.limit("60/minute")
async def get_wishlist(request: Request, user: user_dependency, db: db_dependency):
    return WishlistService.list_items(user.id, db)


@router.post("/{product_id}", status_code=status.HTTP_200_OK)
@limiter.limit("30/minute")
async def add_to_wishlist(request: Request, product_id: int, user: user_dependency, db: db_dependency):
    added = WishlistService.add(user.id, product_id, db)

    return {"message": "Added to wishlist" if added else "Already in wishlist"}


@router.delete("/{product_id}", status_code=status.HTTP_200_OK)
@limiter.limit("30/minute")
async def remove_from_wishlist(request: Request, product_id: int, user: user_dependency, db: db_dependency):
    WishlistService.remove(user.id, product_id, db)

    return {"message": "Removed from wishlist"}
