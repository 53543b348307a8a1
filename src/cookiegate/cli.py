"""Command line interface for running the demo server."""

from __future__ import annotations

import logging

import typer
import uvicorn

from .app import create_app
from .netinfo import NetworkUnavailableError, discover_ipv4

_logger = logging.getLogger(__name__)

app = typer.Typer(help="Login demo server with signed session cookies")


@app.callback()
def main() -> None:
    """Login demo server with signed session cookies."""


@app.command()  # pyright: ignore[reportUntypedFunctionDecorator]
def serve(
    color: str = typer.Option(
        "black", "--color", help="Provide the color for header"
    ),
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),  # noqa: S104
    port: int = typer.Option(8080, "--port", help="Port to listen on"),
    session_max_age: int | None = typer.Option(
        None, "--session-max-age", help="Session token lifetime in seconds"
    ),
    log_level: str = typer.Option("info", "--log-level", help="Logging level"),
) -> None:
    """Start the HTTP server."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        served_from = discover_ipv4()
    except NetworkUnavailableError as exc:
        _logger.error("%s", exc)
        served_from = ""
    web_app = create_app(
        color=color, served_from=served_from, session_max_age=session_max_age
    )
    _logger.info("Server is listening at %s:%d", host, port)
    uvicorn.run(web_app, host=host, port=port, log_level=log_level.lower())


__all__ = ["app", "serve"]
