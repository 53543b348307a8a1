"""Tests for the HTML pages, error handlers and app configuration."""
from __future__ import annotations

import datetime as dt
import typing
from http import HTTPStatus

import pytest
from freezegun import freeze_time
from httpx import ASGITransport, AsyncClient

from cookiegate.app import create_app
from cookiegate.securecookie import SecureCookieCodec

if typing.TYPE_CHECKING:
    import falcon
    from falcon import asgi

    from cookiegate.securecookie import SigningKeys


def _session_header(keys: SigningKeys, name: str) -> dict[str, str]:
    token = SecureCookieCodec(keys).encode("session", {"name": name})
    return {"Cookie": f"session={token}"}


@pytest.mark.asyncio
async def test_index_renders_login_form(client: AsyncClient) -> None:
    """The index page echoes the request and shows the login form."""
    resp = await client.get("/", headers={"X-Forwarded-For": "203.0.113.9"})
    assert resp.status_code == HTTPStatus.OK
    assert resp.headers["content-type"].startswith("text/html")
    body = resp.text
    assert '<h1 style="color: teal">Login</h1>' in body
    assert "Your IP - 127.0.0.1" in body
    assert "Served from 10.0.0.7" in body
    assert "203.0.113.9" in body
    assert 'action="/login"' in body


@pytest.mark.asyncio
async def test_internal_page_echoes_request(
    client: AsyncClient, keys: SigningKeys
) -> None:
    """The internal page shows the user and the logout form."""
    resp = await client.get("/internal", headers=_session_header(keys, "alice"))
    assert resp.status_code == HTTPStatus.OK
    body = resp.text
    assert '<h1 style="color: teal">Internal</h1>' in body
    assert "User: alice" in body
    assert "Served from 10.0.0.7" in body
    assert 'action="/logout"' in body


@pytest.mark.asyncio
async def test_username_is_escaped(client: AsyncClient, keys: SigningKeys) -> None:
    """User names are HTML-escaped when rendered."""
    resp = await client.get(
        "/internal", headers=_session_header(keys, "<script>alert(1)</script>")
    )
    assert resp.status_code == HTTPStatus.OK
    assert "<script>" not in resp.text
    assert "&lt;script&gt;" in resp.text


@pytest.mark.asyncio
async def test_health_does_not_require_auth(client: AsyncClient) -> None:
    """Health checks should be accessible without authentication."""
    resp = await client.get("/health")
    assert resp.status_code == HTTPStatus.OK
    assert resp.text == "healthy"
    assert resp.headers["content-type"].startswith("text/plain")


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/login", "/logout"])
async def test_login_routes_are_post_only(client: AsyncClient, path: str) -> None:
    """GET on the form targets yields an HTML 405 with an Allow header."""
    resp = await client.get(path)
    assert resp.status_code == HTTPStatus.METHOD_NOT_ALLOWED
    assert "POST" in resp.headers["allow"]
    assert resp.headers["content-type"].startswith("text/html")


@pytest.mark.asyncio
async def test_unknown_route_renders_error_page(client: AsyncClient) -> None:
    """Unknown paths render the HTML error page."""
    resp = await client.get("/nope")
    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert "Back to login" in resp.text


class _Boom:
    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        raise RuntimeError("kaboom")


@pytest.mark.asyncio
async def test_unexpected_error_is_generic(app: asgi.App) -> None:
    """Uncaught exceptions produce a 500 page without internal details."""
    app.add_route("/boom", _Boom())
    async with AsyncClient(
        transport=ASGITransport(app=typing.cast("typing.Any", app)),
        base_url="https://test",
    ) as ac:
        resp = await ac.get("/boom")
    assert resp.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert "An unexpected error occurred." in resp.text
    assert "kaboom" not in resp.text


@pytest.mark.asyncio
async def test_settings_fall_back_to_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Unset arguments are read from COOKIEGATE_* variables."""
    monkeypatch.setenv("COOKIEGATE_COLOR", "purple")
    monkeypatch.setenv("COOKIEGATE_SERVED_FROM", "192.0.2.44")
    monkeypatch.setenv("COOKIEGATE_SECURE_COOKIES", "true")
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=typing.cast("typing.Any", app)),
        base_url="https://test",
    ) as ac:
        index = await ac.get("/")
        login = await ac.post("/login", data={"name": "alice", "password": "x"})
    assert '<h1 style="color: purple">' in index.text
    assert "Served from 192.0.2.44" in index.text
    assert "Secure" in login.headers["set-cookie"]


@pytest.mark.asyncio
async def test_requests_are_logged(
    client: AsyncClient, caplog: pytest.LogCaptureFixture
) -> None:
    """Every request is logged with client address, method and URI."""
    with caplog.at_level("INFO", logger="cookiegate.middleware"):
        await client.get("/health")
    assert "127.0.0.1 GET /health" in caplog.text


@pytest.mark.asyncio
async def test_zero_max_age_disables_expiry(keys: SigningKeys) -> None:
    """An explicit ``session_max_age=0`` keeps tokens valid indefinitely."""
    app = create_app(keys=keys, session_max_age=0)
    with freeze_time() as frozen:
        header = _session_header(keys, "alice")
        frozen.tick(delta=dt.timedelta(days=365))
        async with AsyncClient(
            transport=ASGITransport(app=typing.cast("typing.Any", app)),
            base_url="https://test",
        ) as ac:
            resp = await ac.get("/internal", headers=header)
    assert resp.status_code == HTTPStatus.OK


def test_invalid_max_age_environment_is_reported(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A non-numeric max age in the environment names the variable."""
    monkeypatch.setenv("COOKIEGATE_SESSION_MAX_AGE", "soon")
    with pytest.raises(ValueError, match="COOKIEGATE_SESSION_MAX_AGE"):
        create_app()
