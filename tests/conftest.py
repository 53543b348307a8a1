"""Shared pytest fixtures for the test suite."""
import sys
import typing
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE_DIR / "src"))

import pytest
import pytest_asyncio
from falcon import asgi
from httpx import ASGITransport, AsyncClient

from cookiegate.app import create_app
from cookiegate.securecookie import SigningKeys


@pytest.fixture()
def keys() -> SigningKeys:
    """Fixed keys so tokens can be minted outside the app."""
    return SigningKeys(b"h" * 64, b"b" * 32)


@pytest.fixture()
def app(keys: SigningKeys) -> asgi.App:
    return create_app(keys=keys, color="teal", served_from="10.0.0.7")


@pytest_asyncio.fixture()
async def client(app: asgi.App) -> typing.AsyncIterator[AsyncClient]:
    """Yield an HTTP client bound to the ASGI app."""
    async with AsyncClient(
        transport=ASGITransport(app=typing.cast("typing.Any", app)),
        base_url="https://test",
    ) as ac:
        yield ac
