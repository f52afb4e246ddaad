from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from core.config import settings
from core.exceptions import EmptyCartError, ConsistencyError
from models.orders import Order
from models.users import User
from services.cart_service import CartService
from services.locks import lock_user
from services.order_service import OrderService
from services.payment_gateway import PaymentGateway, LineItem, absolute_image_url
from utils.pricing import to_minor_units
from utils.logger import get_logger

logger = get_logger(__name__)


class CheckoutService:

    @staticmethod
    def initiate_checkout(user: User, db: Session, gateway: PaymentGateway) -> dict:
        """
        Opens a hosted payment session for the current cart. Nothing is
        written: the cart stays as it is until payment succeeds.
        """
        items = CartService.get_items(user.id, db)
        if not items:
            raise EmptyCartError()

        line_items = [
            LineItem(
                name=item.product.name,
                description=item.product.description,
                image_url=absolute_image_url(item.product.image_url),
                unit_amount=to_minor_units(item.product.price),
                currency=settings.STRIPE_CURRENCY,
                quantity=item.quantity
            )
            for item in items
        ]

        base = settings.APP_BASE_URL.rstrip("/")
        session = gateway.create_checkout_session(
            line_items=line_items,
            success_url=base + "/payment/success?session_id={CHECKOUT_SESSION_ID}",
            cancel_url=base + "/payment/cancel",
            client_reference_id=str(user.id),
            customer_email=user.email
        )

        logger.info(
            "Checkout session created",
            extra={"user_id": user.id, "session_id": session.id, "lines": len(line_items)}
        )

        return {"session_id": session.id, "redirect_url": session.url}

    @staticmethod
    def _verify_session(user: User, session_id: str, expected_minor: int, gateway: PaymentGateway):
        session = gateway.retrieve_session(session_id)

        problems = []
        if session.payment_status != "paid":
            problems.append("unpaid")
        if session.client_reference_id != str(user.id):
            problems.append("foreign_session")
        if session.amount_total != expected_minor:
            problems.append("amount_mismatch")

        if problems:
            logger.error(
                "Payment session does not match cart",
                extra={
                    "user_id": user.id,
                    "session_id": session_id,
                    "problems": problems,
                    "expected_amount": expected_minor,
                    "gateway_amount": session.amount_total,
                }
            )
            raise ConsistencyError()

    @staticmethod
    def fulfill_payment(user: User, session_id: str, db: Session,
                        gateway: PaymentGateway) -> tuple[Optional[Order], bool]:
        """
        Turns a payment-success callback into exactly one order.

        Runs as one transaction under a lock on the user's row: look for an
        order already paid by this session, read the cart, optionally check
        the session with the gateway, insert the order and clear the cart.
        An empty cart or a known session id means the callback was already
        handled.

        Returns (order, created).
        """
        try:
            lock_user(db, user.id)

            existing = db.query(Order).filter(Order.gateway_session_id == session_id).first()
            if existing:
                db.rollback()
                if existing.user_id != user.id:
                    logger.error(
                        "Payment session belongs to another user",
                        extra={"user_id": user.id, "session_id": session_id}
                    )
                    raise ConsistencyError()
                logger.info(
                    "Payment session already fulfilled",
                    extra={"user_id": user.id, "order_id": existing.id}
                )
                return existing, False

            items = CartService.get_items(user.id, db)
            if not items:
                db.rollback()
                logger.info("Payment callback with empty cart", extra={"user_id": user.id})
                return None, False

            if settings.PAYMENT_VERIFY_SESSION:
                expected_minor = sum(
                    to_minor_units(item.product.price) * item.quantity for item in items
                )
                CheckoutService._verify_session(user, session_id, expected_minor, gateway)

            order = OrderService.create_order_from_cart(
                user.id, items, db, gateway_session_id=session_id
            )
            CartService.clear_cart(user.id, db, commit=False)
            db.commit()

        except IntegrityError:
            db.rollback()
            existing = db.query(Order).filter(Order.gateway_session_id == session_id).first()
            if existing is None:
                raise
            if existing.user_id != user.id:
                raise ConsistencyError()
            logger.info(
                "Concurrent callback already fulfilled this session",
                extra={"user_id": user.id, "order_id": existing.id}
            )
            return existing, False

        except Exception:
            db.rollback()
            raise

        db.refresh(order)
        logger.info(
            "Order created from payment",
            extra={"user_id": user.id, "order_id": order.id, "total": str(order.total_amount)}
        )
        return order, True

    @staticmethod
    def payment_cancel() -> dict:
        return {
            "message": "Payment was cancelled. Your cart has been kept.",
            "redirect_to": "/cart",
        }
