from typing import Any, Dict, Optional
from fastapi import status


class BaseAPIException(Exception):
    """
    Parent class for every custom error in the system.
    Keeps the error format returned to the frontend uniform.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

# =========================================================
# 1. COMMON ERRORS
# =========================================================

class BadRequestException(BaseAPIException):
    """400: request is well-formed but cannot be processed"""
    def __init__(self, message: str = "Bad Request", details: dict = None):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class ValidationException(BaseAPIException):
    """422: malformed or missing required input (e.g. a non-numeric amount)"""
    def __init__(self, message: str = "Invalid input", details: dict = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details
        )


class NotFoundException(BaseAPIException):
    """404: referenced entity does not exist"""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND
        )

# =========================================================
# 2. STORE ERRORS
# =========================================================

class ConflictException(BaseAPIException):
    """
    409: a unique key is already taken (student enrollment number,
    certificate number, or a second certificate for one enrollment).
    """
    def __init__(self, message: str = "Resource already exists", details: dict = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )


class TransientStoreError(BaseAPIException):
    """
    503: the database is unreachable or did not answer within its timeout.
    Safe to retry.
    """
    def __init__(self, message: str = "Database unavailable"):
        super().__init__(
            message=f"Store Error: {message}",
            code="STORE_UNAVAILABLE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )
