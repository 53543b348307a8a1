"""Falcon resource classes for the login demo."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing
from http import HTTPStatus

import falcon

from .pages import render_page

if typing.TYPE_CHECKING:  # pragma: no cover
    from .session import CookieDirective, SessionManager

__all__ = [
    "HealthResource",
    "IndexResource",
    "InternalResource",
    "LoginResource",
    "LogoutResource",
    "PageSettings",
]

_logger = logging.getLogger(__name__)

INDEX_PATH = "/"
INTERNAL_PATH = "/internal"


@dc.dataclass(frozen=True, slots=True)
class PageSettings:
    """Presentation settings shared by the HTML pages."""

    color: str = "black"
    served_from: str = ""


def _redirect(resp: falcon.Response, location: str) -> None:
    resp.status = HTTPStatus.FOUND
    resp.location = location


def _apply_cookie(resp: falcon.Response, directive: CookieDirective) -> None:
    resp.set_cookie(
        directive.name,
        directive.value,
        max_age=directive.max_age,
        path=directive.path,
        secure=directive.secure,
        http_only=directive.http_only,
        same_site="Lax",
    )


def _render(
    req: falcon.Request,
    resp: falcon.Response,
    settings: PageSettings,
    template: str,
    **context: typing.Any,
) -> None:
    resp.content_type = falcon.MEDIA_HTML
    resp.text = render_page(
        template,
        color=settings.color,
        served_from=settings.served_from,
        remote_addr=req.remote_addr,
        headers=sorted(req.headers.items()),
        **context,
    )


def _form_value(form: typing.Any, field: str) -> str:
    if not isinstance(form, dict):
        return ""
    value = typing.cast("dict[str, typing.Any]", form).get(field, "")
    if isinstance(value, list):
        value = value[0] if value else ""
    return value if isinstance(value, str) else ""


class IndexResource:
    """Show the login form to anonymous visitors."""

    def __init__(self, settings: PageSettings) -> None:
        self._settings = settings

    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        if req.context["user"] is not None:
            _redirect(resp, INTERNAL_PATH)
            return
        _render(req, resp, self._settings, "index.html")


class InternalResource:
    """Protected page shown only with a valid session."""

    def __init__(self, settings: PageSettings) -> None:
        self._settings = settings

    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        user: str | None = req.context["user"]
        if user is None:
            _redirect(resp, INDEX_PATH)
            return
        _render(req, resp, self._settings, "internal.html", user=user)


class LoginResource:
    """Accept a submitted login form and start a session."""

    def __init__(self, session: SessionManager) -> None:
        """Initialize the resource with the session manager.

        Parameters
        ----------
        session : SessionManager
            Manager used to create signed cookies.
        """
        self._session = session

    async def on_post(self, req: falcon.Request, resp: falcon.Response) -> None:
        """Start a session for any non-empty name and password.

        Parameters
        ----------
        req : falcon.Request
            Request carrying ``name`` and ``password`` form fields.
        resp : falcon.Response
            Response redirected to the internal page on success and to the
            index page otherwise.
        """
        try:
            form = await req.get_media(default_when_empty={})
        except (
            falcon.MediaNotFoundError,
            falcon.MediaMalformedError,
            falcon.HTTPUnsupportedMediaType,
        ) as exc:
            _logger.debug("ignoring unreadable login body: %s", exc.title)
            form = {}
        name = _form_value(form, "name")
        password = _form_value(form, "password")
        target = INDEX_PATH
        # Any non-empty password is accepted; there is no credential store.
        if name and password:
            directive = self._session.establish(name)
            if directive is not None:
                _apply_cookie(resp, directive)
                target = INTERNAL_PATH
                _logger.info("session started for %s", name)
        _redirect(resp, target)


class LogoutResource:
    """End the current session."""

    def __init__(self, session: SessionManager) -> None:
        self._session = session

    async def on_post(self, req: falcon.Request, resp: falcon.Response) -> None:
        del req  # Unused parameter
        _apply_cookie(resp, self._session.clear())
        _redirect(resp, INDEX_PATH)


class HealthResource:
    """Basic health check."""

    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        """Return a plain-text health status."""
        del req  # Unused parameter
        resp.content_type = falcon.MEDIA_TEXT
        resp.text = "healthy"
