"""Error-handling helpers rendering HTML error pages."""

from __future__ import annotations

import logging
import typing
from http import HTTPStatus

import falcon

from .pages import render_page

if typing.TYPE_CHECKING:  # pragma: no cover
    from falcon import HTTPError, Request, Response

__all__ = ["handle_http_error", "handle_unexpected_error"]

_logger = logging.getLogger(__name__)


async def handle_http_error(
    req: Request,
    resp: Response,
    exc: HTTPError,
    params: dict[str, typing.Any],
) -> None:
    """Render :class:`falcon.HTTPError` exceptions as an HTML page."""
    resp.status = exc.status
    if exc.headers:
        resp.set_headers(exc.headers)
    resp.content_type = falcon.MEDIA_HTML
    resp.text = render_page(
        "error.html", title=exc.title, description=exc.description
    )


async def handle_unexpected_error(
    req: Request,
    resp: Response,
    exc: BaseException,
    params: dict[str, typing.Any],
) -> None:
    """Handle uncaught exceptions with a generic error page."""
    _logger.exception("unhandled error", exc_info=exc)
    resp.status = HTTPStatus.INTERNAL_SERVER_ERROR
    resp.content_type = falcon.MEDIA_HTML
    resp.text = render_page(
        "error.html",
        title=(
            f"{HTTPStatus.INTERNAL_SERVER_ERROR.value} "
            f"{HTTPStatus.INTERNAL_SERVER_ERROR.phrase}"
        ),
        description="An unexpected error occurred.",
    )
