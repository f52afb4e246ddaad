from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Query, Request, status
from utils.deps import db_dependency
from schemas.product_schemas import ProductResponse, ProductDetailResponse, SortOption, StockStatus
from services.product_service import ProductService
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/products",
    tags=["products"]
)


@router.get("", status_code=status.HTTP_200_OK, response_model=list[ProductResponse])
@limiter.limit("60/minute")
async def list_products(request: Request, db: db_dependency,
                        category: Optional[str] = None,
                        sort_by: Optional[SortOption] = Query(default=None, alias="sortBy"),
                        min_price: Optional[Decimal] = Query(default=None, alias="minPrice", ge=0),
                        max_price: Optional[Decimal] = Query(default=None, alias="maxPrice", ge=0),
                        stock_status: Optional[StockStatus] = Query(default=None, alias="status"),
                        color: Optional[str] = None):
    """
    Storefront catalog with filters and sorting. Only available products
    are listed.
    """
    return ProductService.filter_products(
        db,
        category=category,
        sort_by=sort_by,
        min_price=min_price,
        max_price=max_price,
        status=stock_status,
        color=color
    )


@router.get("/new-arrivals", status_code=status.HTTP_200_OK, response_model=list[ProductResponse])
@limiter.limit("60/minute")
async def new_arrivals(request: Request, db: db_dependency):
    return ProductService.new_arrivals(db)


@router.get("/{product_id}", status_code=status.HTTP_200_OK, response_model=ProductDetailResponse)
@limiter.limit("60/minute")
async def product_detail(request: Request, product_id: int, db: db_dependency):
    product = ProductService.get_product(db, product_id)

    return {
        "product": product,
        "related_products": ProductService.related_products(db, product)
    }
