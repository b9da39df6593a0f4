"""
CSRF Protection Middleware

Validates Origin header for state-changing requests to prevent CSRF attacks.
"""

import logging
from typing import Callable, Iterable
from urllib.parse import urlparse

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

# State-changing HTTP methods that need CSRF protection
STATE_CHANGING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


def request_origin(origin: str | None, referer: str | None) -> str | None:
    """Origin header, or the scheme://host of the Referer when Origin is missing."""
    if origin:
        return origin.rstrip("/")
    if referer:
        parsed = urlparse(referer)
        if parsed.scheme and parsed.netloc:
            return f"{parsed.scheme}://{parsed.netloc}"
    return None


class CSRFProtectionMiddleware(BaseHTTPMiddleware):
    """
    Middleware to validate Origin header for state-changing requests.

    Requests without Origin or Referer (curl, server-to-server) pass through;
    bearer-token auth still applies to them.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = {origin.rstrip("/") for origin in allowed_origins}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method not in STATE_CHANGING_METHODS:
            return await call_next(request)

        origin = request_origin(request.headers.get("Origin"), request.headers.get("Referer"))
        if origin and origin not in self.allowed_origins:
            logger.warning(f"[CSRF] Rejected {request.method} {request.url.path} from {origin}")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"error": "Origin not allowed"},
            )

        return await call_next(request)
