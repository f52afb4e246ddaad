from typing import Optional
from sqlalchemy.orm import Session
from core.config import settings
from core.exceptions import NotFoundError, InvalidOrderTransitionError
from models.addresses import Address
from models.cart_items import CartItem
from models.orders import Order, OrderStatus
from utils.pricing import line_total, order_total
from utils.logger import get_logger

logger = get_logger(__name__)

PENDING_SHIPPING = "Shipping Address: Pending Address Selection"

CANCELLABLE = {OrderStatus.PROCESSING}
RETURNABLE = {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED}
# Admin fulfilment steps: target status -> statuses it may follow
ADMIN_TRANSITIONS = {
    OrderStatus.SHIPPED: {OrderStatus.PROCESSING},
    OrderStatus.DELIVERED: {OrderStatus.SHIPPED},
}


def build_items_snapshot(items: list[CartItem]) -> str:
    symbol = settings.CURRENCY_SYMBOL
    return "; ".join(
        f"{item.quantity}x {item.product.name} [ID:{item.product_id}] "
        f"({symbol}{line_total(item.product.price, item.quantity):.2f})"
        for item in items
    )


def build_shipping_snapshot(user_id: int, db: Session) -> str:
    address = db.query(Address).filter(
        Address.user_id == user_id,
        Address.is_default == True
    ).first()
    return address.as_snapshot() if address else PENDING_SHIPPING


class OrderService:

    @staticmethod
    def create_order_from_cart(user_id: int, items: list[CartItem], db: Session,
                               gateway_session_id: Optional[str] = None) -> Order:
        """
        Builds the order for the given cart lines and adds it to the session.
        The caller commits together with clearing the cart.
        """
        order = Order(
            user_id=user_id,
            total_amount=order_total((item.product.price, item.quantity) for item in items),
            status=OrderStatus.PROCESSING,
            items_snapshot=build_items_snapshot(items),
            shipping_snapshot=build_shipping_snapshot(user_id, db),
            gateway_session_id=gateway_session_id
        )
        db.add(order)
        db.flush()
        return order

    @staticmethod
    def list_orders(user_id: int, db: Session) -> list[Order]:
        return (
            db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.order_date.desc(), Order.id.desc())
            .all()
        )

    @staticmethod
    def get_order(user_id: int, order_id: int, db: Session) -> Order:
        order = db.query(Order).filter(
            Order.id == order_id,
            Order.user_id == user_id
        ).one_or_none()

        if not order:
            raise NotFoundError("Order not found")
        return order

    @staticmethod
    def _transition(order: Order, new_status: OrderStatus, allowed_from: set, db: Session) -> Order:
        if order.status not in allowed_from:
            logger.warning(
                "Rejected order status change",
                extra={"order_id": order.id, "from": order.status.value, "to": new_status.value}
            )
            raise InvalidOrderTransitionError(
                f"Order in status {order.status.value} cannot become {new_status.value}"
            )

        previous = order.status
        order.status = new_status
        db.commit()
        db.refresh(order)

        logger.info(
            "Order status changed",
            extra={"order_id": order.id, "from": previous.value, "to": new_status.value}
        )
        return order

    @staticmethod
    def cancel_order(user_id: int, order_id: int, db: Session) -> Order:
        order = OrderService.get_order(user_id, order_id, db)
        return OrderService._transition(order, OrderStatus.CANCELLED, CANCELLABLE, db)

    @staticmethod
    def request_return(user_id: int, order_id: int, db: Session) -> Order:
        order = OrderService.get_order(user_id, order_id, db)
        return OrderService._transition(order, OrderStatus.RETURN_REQUESTED, RETURNABLE, db)

    @staticmethod
    def update_order_status(order_id: int, new_status: OrderStatus, db: Session) -> Order:
        order = db.query(Order).filter(Order.id == order_id).one_or_none()
        if not order:
            raise NotFoundError("Order not found")

        return OrderService._transition(order, new_status, ADMIN_TRANSITIONS[new_status], db)
