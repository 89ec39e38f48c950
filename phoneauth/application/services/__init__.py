from .authenticator import Authenticator, FlashState
from .phone_strategy import PhoneVerificationStrategy, VerifyParams
from .results import AuthenticateOptions, Authenticated, AuthResult, Failed, Redirect

__all__ = [
    "Authenticator",
    "FlashState",
    "PhoneVerificationStrategy",
    "VerifyParams",
    "AuthenticateOptions",
    "Authenticated",
    "AuthResult",
    "Failed",
    "Redirect",
]
