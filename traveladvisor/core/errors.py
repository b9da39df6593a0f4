"""
Uniform JSON error bodies: {"error": str, "details"?: str, "raw"?: str}.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_body(detail: Any) -> dict[str, Any]:
    """Flatten an HTTPException detail (a message or a dict) into the error shape."""
    if isinstance(detail, dict):
        body = {"error": str(detail.get("error") or "Error")}
        for key in ("details", "raw"):
            if detail.get(key) is not None:
                body[key] = str(detail[key])
        return body
    return {"error": str(detail)}


def _format_validation_errors(errors: list[dict[str, Any]]) -> str:
    messages = []
    for err in errors:
        # Drop the "body"/"query" prefix; the field name is what matters
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return "; ".join(messages)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"[Error] Unhandled {type(exc).__name__} on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = _format_validation_errors(exc.errors())
    logger.info(f"[Validation] {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": details},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
