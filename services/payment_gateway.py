from abc import ABC, abstractmethod
from typing import Optional
import stripe
from pydantic import BaseModel
from core.config import settings
from core.exceptions import ExternalServiceError
from utils.logger import get_logger

logger = get_logger(__name__)


class LineItem(BaseModel):
    name: str
    description: str
    image_url: str
    unit_amount: int    # minor units (paise, cents)
    currency: str
    quantity: int


class GatewaySession(BaseModel):
    id: str
    url: Optional[str] = None
    payment_status: Optional[str] = None
    client_reference_id: Optional[str] = None
    amount_total: Optional[int] = None


class PaymentGateway(ABC):
    """Hosted checkout provider. Implementations raise ExternalServiceError on failure."""

    @abstractmethod
    def create_checkout_session(self, line_items: list[LineItem], success_url: str, cancel_url: str,
                                client_reference_id: str, customer_email: str) -> GatewaySession:
        ...

    @abstractmethod
    def retrieve_session(self, session_id: str) -> GatewaySession:
        ...


class StripeGateway(PaymentGateway):

    def __init__(self, api_key: str, timeout: int):
        self.client = stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=timeout)
        )

    @staticmethod
    def _to_session(session) -> GatewaySession:
        return GatewaySession(
            id=session.id,
            url=session.url,
            payment_status=session.payment_status,
            client_reference_id=session.client_reference_id,
            amount_total=session.amount_total
        )

    def create_checkout_session(self, line_items: list[LineItem], success_url: str, cancel_url: str,
                                client_reference_id: str, customer_email: str) -> GatewaySession:
        params = {
            "mode": "payment",
            "line_items": [
                {
                    "quantity": item.quantity,
                    "price_data": {
                        "currency": item.currency,
                        "unit_amount": item.unit_amount,
                        "product_data": {
                            "name": item.name,
                            "description": item.description,
                            "images": [item.image_url],
                        },
                    },
                }
                for item in line_items
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "client_reference_id": client_reference_id,
            "customer_email": customer_email,
        }

        try:
            session = self.client.checkout.sessions.create(params=params)
        except stripe.StripeError as e:
            logger.error(
                f"Stripe session creation failed: {str(e)}",
                extra={"client_reference_id": client_reference_id},
                exc_info=True
            )
            raise ExternalServiceError()

        return self._to_session(session)

    def retrieve_session(self, session_id: str) -> GatewaySession:
        try:
            session = self.client.checkout.sessions.retrieve(session_id)
        except stripe.StripeError as e:
            logger.error(
                f"Stripe session lookup failed: {str(e)}",
                extra={"session_id": session_id},
                exc_info=True
            )
            raise ExternalServiceError("Could not confirm the payment. Please try again.")

        return self._to_session(session)


def get_payment_gateway() -> PaymentGateway:
    return StripeGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_TIMEOUT_SECONDS)


def absolute_image_url(image_url: Optional[str]) -> str:
    """Gateways only accept absolute image URLs."""
    if not image_url:
        return settings.PLACEHOLDER_IMAGE_URL

    if image_url.startswith("http://") or image_url.startswith("https://"):
        return image_url

    base = settings.APP_BASE_URL.rstrip("/")
    return base + (image_url if image_url.startswith("/") else "/" + image_url)
