"""
Application error taxonomy.

Services raise these instead of building HTTPException by hand. Each class
carries the HTTP status it maps to, so FastAPI's default HTTPException
handler renders them without any per-route translation.

- ValidationError: user-correctable input/state problems, never retried
- AuthenticationError: wrong password or unusable token
- AccountDisabledError: account exists but email is not verified yet
- PermissionDeniedError: authenticated but wrong role
- NotFoundError: unknown user/product/order/address
- ConsistencyError: payment evidence does not match server-side state
- ExternalServiceError: payment gateway failure (user may retry)
- NotificationError: mail transport failure (logged, never surfaced)
"""

from fastapi import HTTPException
from starlette import status


class AppError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."

    def __init__(self, detail: str | None = None, headers: dict | None = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers
        )


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request."


class DuplicateIdentityError(ValidationError):
    default_detail = "Username is already taken."


class PasswordMismatchError(ValidationError):
    default_detail = "Passwords do not match."


class InvalidOtpError(ValidationError):
    default_detail = "Invalid or expired OTP. Please check the code, request a new one, and try again."


class EmptyCartError(ValidationError):
    default_detail = "Cannot checkout with an empty cart."


class OutOfStockError(ValidationError):
    default_detail = "Requested quantity is not available."


class InvalidOrderTransitionError(ValidationError):
    default_detail = "Order cannot be changed in its current state."


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate user."


class AccountDisabledError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Account is not yet verified. Please confirm your email address."
    code = "account_unverified"
    resend_url = "/auth/resend-code"


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have access to this resource."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."


class ConsistencyError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Payment could not be matched to your cart."


class ExternalServiceError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment processing failed. Please try again."


class NotificationError(Exception):
    """Raised by the mail transport. Callers log it and carry on."""
