# phoneauth/schemas/auth.py
from pydantic import BaseModel, Field
from typing import Any, Optional

__all__ = ["AuthStatus", "AuthStatusResponse"]


class AuthStatus(BaseModel):
    authenticated: bool
    user: Optional[Any] = None
    pending_phone: Optional[str] = Field(None, description="Phone a code was just sent to (E.164)")
    error: Optional[str] = Field(None, description="Message from the last failed attempt")


class AuthStatusResponse(BaseModel):
    success: bool
    data: AuthStatus
    error: Optional[str] = None
