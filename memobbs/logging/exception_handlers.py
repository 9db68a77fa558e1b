# memobbs/logging/exception_handlers.py
"""Exception handlers rendering every failure as ``{"error": ..., "code": ...}``."""

import json
import logging
import traceback

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from memobbs.core.errors import ErrorCode
from memobbs.logging.recorder import headers_to_json

logger = logging.getLogger(__name__)

DEFAULT_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.TOKEN_INVALID,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    422: ErrorCode.VALIDATION_ERROR,
}


def _show_details(request: Request) -> bool:
    return not request.app.state.settings.is_production


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions, including ``ApiError`` and unknown routes."""
    code = getattr(exc, "code", None) or DEFAULT_CODES.get(exc.status_code)
    if exc.status_code >= 500:
        code = code or ErrorCode.INTERNAL_ERROR
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")

    content = {"error": exc.detail}
    if code:
        content["code"] = code
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    logger.info(f"Validation failed for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation failed",
            "code": ErrorCode.VALIDATION_ERROR,
            "details": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
        },
    )


async def response_validation_exception_handler(request: Request, exc: ResponseValidationError):
    logger.error(f"Response validation failed for {request.method} {request.url.path}: {exc.errors()}")
    content = {"error": "Internal Server Error: Response validation failed.", "code": ErrorCode.INTERNAL_ERROR}
    if _show_details(request):
        content["details"] = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
    return JSONResponse(status_code=500, content=content)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions and record them in the request log."""
    error_traceback = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}\n{error_traceback}")

    request.app.state.log_recorder.record(
        method=request.method,
        path=str(request.url.path),
        status_code=500,
        client_ip=request.client.host if request.client else None,
        request_headers=headers_to_json(request.headers),
        response_body=json.dumps(
            {"error": str(exc), "type": type(exc).__name__, "traceback": error_traceback}
        ),
        user_agent=request.headers.get("user-agent"),
    )

    content = {"error": "Internal Server Error", "code": ErrorCode.INTERNAL_ERROR}
    if _show_details(request):
        content["details"] = str(exc)
        content["traceback"] = error_traceback
    return JSONResponse(status_code=500, content=content)
