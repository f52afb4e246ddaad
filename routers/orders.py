from fastapi import APIRouter, Request, status
from utils.deps import db_dependency, user_dependency
from schemas.order_schemas import OrderResponse
from services.order_service import OrderService
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/orders",
    tags=["orders"]
)


@router.get("", status_code=status.HTTP_200_OK, response_model=list[OrderResponse])
@limiter.limit("30/minute")
async def list_orders(request: Request, user: user_dependency, db: db_dependency):
    return OrderService.list_orders(user.id, db)


@router.get("/{order_id}", status_code=status.HTTP_200_OK, response_model=OrderResponse)
@limiter.limit("30/minute")
async def get_order(request: Request, order_id: int, user: user_dependency, db: db_dependency):
    return OrderService.get_order(user.id, order_id, db)


@router.post("/{order_id}/cancel", status_code=status.HTTP_200_OK, response_model=OrderResponse)
@limiter.limit("10/minute")
async def cancel_order(request: Request, order_id: int, user: user_dependency, db: db_dependency):
    return OrderService.cancel_order(user.id, order_id, db)


@router.post("/{order_id}/return", status_code=status.HTTP_200_OK, response_model=OrderResponse)
@limiter.limit("10/minute")
async def request_return(request: Request, order_id: int, user: user_dependency, db: db_dependency):
    return OrderService.request_return(user.id, order_id, db)
