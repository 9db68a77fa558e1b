# memobbs/core/errors.py
"""HTTP error types carrying a machine-readable error code."""

from typing import Dict, Optional

from fastapi import HTTPException


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    TOKEN_MISSING = "TOKEN_MISSING"
    TOKEN_INVALID = "TOKEN_INVALID"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    FORBIDDEN = "FORBIDDEN"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiError(HTTPException):
    """HTTPException whose JSON body is ``{"error": detail, "code": code}``."""

    def __init__(
        self,
        status_code: int,
        error: str,
        code: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=error, headers=headers)
        self.code = code


def bad_request(error: str) -> ApiError:
    return ApiError(400, error, ErrorCode.VALIDATION_ERROR)


def not_found(error: str) -> ApiError:
    return ApiError(404, error, ErrorCode.NOT_FOUND)


def internal_error(error: str) -> ApiError:
    return ApiError(500, error, ErrorCode.INTERNAL_ERROR)
