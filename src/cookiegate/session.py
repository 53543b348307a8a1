"""Utility for managing signed session cookies."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing

from .securecookie import CookieDecodeError, CookieEncodeError

if typing.TYPE_CHECKING:
    import falcon

    from .securecookie import SecureCookieCodec

__all__ = ["NAME_FIELD", "SESSION_COOKIE", "CookieDirective", "SessionManager"]

_logger = logging.getLogger(__name__)

SESSION_COOKIE = "session"
NAME_FIELD = "name"


@dc.dataclass(frozen=True, slots=True)
class CookieDirective:
    """A cookie the response layer should set.

    ``max_age`` is ``None`` for a browser-session cookie and negative when the
    client should delete the cookie immediately.
    """

    name: str
    value: str
    path: str = "/"
    max_age: int | None = None
    http_only: bool = True
    secure: bool = False


class SessionManager:
    """Create, verify and clear session cookies."""

    def __init__(
        self,
        codec: SecureCookieCodec,
        *,
        cookie_name: str = SESSION_COOKIE,
        secure: bool = False,
    ) -> None:
        self._codec = codec
        self.cookie_name = cookie_name
        self.secure = secure

    def establish(self, username: str) -> CookieDirective | None:
        """Return a cookie directive remembering *username*.

        ``None`` means no session was started, either because *username* is
        empty or because the value could not be encoded.
        """
        if not username:
            return None
        try:
            token = self._codec.encode(self.cookie_name, {NAME_FIELD: username})
        except CookieEncodeError as exc:
            _logger.warning("session cookie not set: %s", exc)
            return None
        return CookieDirective(self.cookie_name, token, secure=self.secure)

    def verify_cookie(self, cookie: str | None) -> str | None:
        """Return the username if *cookie* is valid and not expired."""
        if not cookie:
            return None
        try:
            data = self._codec.decode(self.cookie_name, cookie)
        except CookieDecodeError as exc:
            _logger.debug("ignoring session cookie: %s", exc)
            return None
        return data.get(NAME_FIELD) or None

    def identity_of(self, req: falcon.Request) -> str | None:
        """Return the username carried by the session cookie of *req*, if any."""
        return self.verify_cookie(req.cookies.get(self.cookie_name))

    def clear(self) -> CookieDirective:
        """Return a directive deleting the session cookie."""
        return CookieDirective(self.cookie_name, "", max_age=-1, secure=self.secure)
