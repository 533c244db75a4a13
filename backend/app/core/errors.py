"""
Error responses

Every failure leaves the API as {"error": "..."} (plus "details" when there is
more to say), which is what the client package and dashboard forms expect.
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, str]:
    """Map pydantic errors to {field: message}"""
    details: Dict[str, str] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        message = err.get("msg", "Invalid value")
        # "Value error, xxx" comes from our own validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        details.setdefault(field, message)
    return details


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = _format_validation_errors(exc.errors())
    logger.info(f"Validation failed on {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": details},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
