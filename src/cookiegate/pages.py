"""Jinja2 environment for the HTML pages."""

from __future__ import annotations

import typing

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

__all__ = ["render_page"]

_environment = Environment(
    loader=PackageLoader("cookiegate", "templates"),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def render_page(name: str, **context: typing.Any) -> str:
    """Render the template called *name* with *context*."""
    return _environment.get_template(name).render(**context)
