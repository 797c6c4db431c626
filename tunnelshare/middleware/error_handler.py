"""
Error handling for the file server.

Provides:
- Plain-text 500 responses for unhandled exceptions, logged with request context
- Request ID tracking in request state and the X-Request-ID header
- Normalization of Starlette's 404/405 responses to a plain "Not found"
"""

import logging
import uuid
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

# Unrouted methods surface as 405 from Starlette; the file server reports 404
NOT_FOUND_STATUSES = (404, 405)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches all unhandled exceptions and returns
    a plain-text error response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and handle any errors."""
        request_id = str(uuid.uuid4())[:8]

        # Add request ID to state for access in handlers
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled exception [{request_id}]: {type(e).__name__}: {e}",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            response = PlainTextResponse(
                f"Internal server error (request {request_id})", status_code=500
            )

        response.headers["X-Request-ID"] = request_id
        return response


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Render routing errors as plain text; unknown routes are 404."""
    if exc.status_code in NOT_FOUND_STATUSES:
        logger.debug("No route for %s %s", request.method, request.url.path)
        return PlainTextResponse("Not found", status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def register_error_handlers(app: FastAPI) -> None:
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
