"""
Request ID middleware for tracking requests across the application.

Every log line written while a request is being handled carries its id,
so one customer's checkout can be followed from the first log line to
the last.
"""

import uuid
from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Read by core.logging_config.RequestIDFilter
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="no-request-id")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each request.

    How it works:
    1. Request comes in
    2. Reuse the client's X-Request-ID header or generate a UUID
    3. Store it in request.state and in the request_id context variable
    4. Echo it back in the X-Request-ID response header
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        ctx_token = request_id_ctx.set(request_id)

        try:
            response: Response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_ctx.reset(ctx_token)


def get_request_id(request: Request) -> str:
    """
    Request ID of the current request, or "no-request-id" outside the middleware.
    """
    return getattr(request.state, "request_id", "no-request-id")
