"""Request logging and session middleware."""

from __future__ import annotations

import logging
import typing

if typing.TYPE_CHECKING:
    import falcon

    from .session import SessionManager

__all__ = ["RequestLogMiddleware", "SessionMiddleware"]

_logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    """Log the client address, method and URI of every request."""

    async def process_request(self, req: falcon.Request, resp: falcon.Response) -> None:
        del resp  # Unused parameter
        _logger.info("%s %s %s", req.remote_addr, req.method, req.relative_uri)


class SessionMiddleware:
    """Attach the session identity to every request."""

    def __init__(self, session: SessionManager) -> None:
        """Create middleware with a session manager.

        Parameters
        ----------
        session : SessionManager
            Object used to verify signed session cookies.
        """
        self._session = session

    async def process_request(self, req: falcon.Request, resp: falcon.Response) -> None:
        """Store the username, or ``None`` for anonymous visitors.

        Parameters
        ----------
        req : falcon.Request
            The incoming request. ``req.context["user"]`` is populated.
        resp : falcon.Response
            The outgoing response.
        """
        del resp  # Unused parameter
        req.context["user"] = self._session.identity_of(req)
