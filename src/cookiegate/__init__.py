"""Login demo server with signed, encrypted session cookies."""

from .app import create_app
from .securecookie import (
    CookieDecodeError,
    CookieEncodeError,
    SecureCookieCodec,
    SigningKeys,
)
from .session import CookieDirective, SessionManager

__all__ = [
    "CookieDecodeError",
    "CookieDirective",
    "CookieEncodeError",
    "SecureCookieCodec",
    "SessionManager",
    "SigningKeys",
    "create_app",
]
