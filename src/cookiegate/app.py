"""Application factory for the login demo server."""

from __future__ import annotations

import os

import falcon
from falcon import asgi

from .errors import handle_http_error, handle_unexpected_error
from .middleware import RequestLogMiddleware, SessionMiddleware
from .resources import (
    HealthResource,
    IndexResource,
    InternalResource,
    LoginResource,
    LogoutResource,
    PageSettings,
)
from .securecookie import DEFAULT_MAX_AGE, SecureCookieCodec, SigningKeys
from .session import SessionManager

__all__ = ["create_app"]

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def create_app(
    *,
    keys: SigningKeys | None = None,
    color: str | None = None,
    served_from: str | None = None,
    session_max_age: int | None = None,
    secure_cookies: bool | None = None,
) -> asgi.App:
    """Configure and return the Falcon ASGI app.

    Parameters
    ----------
    keys:
        Hash and block keys for session cookies. A fresh random pair is
        generated when omitted, so sessions do not survive a restart.
    color:
        Colour of the page headings. Defaults to ``COOKIEGATE_COLOR`` from the
        environment or ``black``.
    served_from:
        Address shown as "Served from". Defaults to
        ``COOKIEGATE_SERVED_FROM`` or an empty string.
    session_max_age:
        Lifetime of a session token in seconds. Defaults to
        ``COOKIEGATE_SESSION_MAX_AGE`` or 30 days. Zero or a negative value
        disables token expiry.
    secure_cookies:
        Whether the session cookie carries the ``Secure`` flag. Defaults to
        ``COOKIEGATE_SECURE_COOKIES`` or ``False``.
    """
    keys = keys or SigningKeys.generate()
    if session_max_age is None:
        session_max_age = _env_int("COOKIEGATE_SESSION_MAX_AGE", DEFAULT_MAX_AGE)
    max_age = session_max_age if session_max_age > 0 else None
    if secure_cookies is None:
        secure_cookies = _env_flag("COOKIEGATE_SECURE_COOKIES")
    settings = PageSettings(
        color=color or os.getenv("COOKIEGATE_COLOR") or "black",
        served_from=(
            served_from
            if served_from is not None
            else os.getenv("COOKIEGATE_SERVED_FROM", "")
        ),
    )
    session = SessionManager(
        SecureCookieCodec(keys, max_age=max_age), secure=secure_cookies
    )

    app = asgi.App(middleware=[RequestLogMiddleware(), SessionMiddleware(session)])
    app.add_error_handler(falcon.HTTPError, handle_http_error)
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_route("/", IndexResource(settings))
    app.add_route("/internal", InternalResource(settings))
    app.add_route("/login", LoginResource(session))
    app.add_route("/logout", LogoutResource(session))
    app.add_route("/health", HealthResource())
    return app
