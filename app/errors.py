# app/errors.py
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Base error: carries the HTTP status and the message put into {"error": ...}."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized: No token provided"


class InvalidToken(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid token"


class InvalidFormat(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid format"


class DuplicateItem(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Product already exists in the cart"


class UpstreamError(ApiError):
    # public message is fixed, the upstream detail only goes to the log
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to fetch products"

    def __init__(self, detail: str = ""):
        super().__init__()
        self.detail = detail


class AuthError(ApiError):
    # login failures are 403, not 401
    status_code = status.HTTP_403_FORBIDDEN
    message = "Login failed"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
