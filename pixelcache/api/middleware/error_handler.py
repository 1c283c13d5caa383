"""
Error Handling Middleware

Last line of defense: any exception that escapes a route (and is not a
PixelCacheError, which has its own exception handler) is logged with full
context and turned into a JSON 500 without internal details.
"""

import traceback
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from pixelcache.core.config.constants import HEADER_REQUEST_ID
from pixelcache.core.logging import get_logger, get_request_id

logger = get_logger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized handling of unexpected errors.

    Clients always get {"error": "Internal Error"}; the stack trace is only
    added to the body when include_traceback is set (development).
    """

    def __init__(self, app, include_traceback: bool = False):
        super().__init__(app)
        self.include_traceback = include_traceback

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except Exception as e:
            method = request.method
            path = request.url.path

            logger.error(
                f"Unhandled exception in request: {method} {path}",
                method=method,
                path=path,
                error_type=type(e).__name__,
                error_message=str(e),
                exc_info=True,
            )

            body = {"error": "Internal Error"}
            if self.include_traceback:
                body["error_type"] = type(e).__name__
                body["traceback"] = traceback.format_exc()

            request_id = get_request_id()
            return JSONResponse(
                status_code=500,
                content=body,
                headers={HEADER_REQUEST_ID: request_id} if request_id else None,
            )
