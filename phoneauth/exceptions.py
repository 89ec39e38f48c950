from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from typing import Optional


class AuthError(Exception):
    """Base class for failures produced by the phone verification flow."""

    kind = "auth_error"
    default_message = "Unable to authenticate."

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class MissingSuccessRedirect(AuthError):
    """Raised when the strategy runs without a success redirect configured."""

    kind = "missing_success_redirect"
    default_message = "Missing required `success_redirect` property."


class MissingPhoneNumber(AuthError):
    kind = "missing_phone_number"
    default_message = "Missing phone number."


class InvalidPhoneNumber(AuthError):
    kind = "invalid_phone_number"
    default_message = "Invalid phone number."


class InvalidCode(AuthError):
    kind = "invalid_code"
    default_message = "Sorry, that code is invalid. Please try again."


class DeliveryFailed(AuthError):
    kind = "delivery_failed"
    default_message = "Unable to reach the verification service. Please try again later."


class AuthorizationError(AuthError):
    """Wraps an error raised by the integrator's verify callback."""

    kind = "authorization_error"


class APIException(HTTPException):
    def __init__(self, status_code: int, detail: str, headers: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


def create_error_response(error_message: str) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message
    }


def create_success_response(data: dict) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
        "error": None
    }


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPException through the standard response envelope, keeping its headers"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail),
        headers=getattr(exc, "headers", None),
    )
