"""Integration test fixtures.

Provides a fully wired AppState with in-memory SQLite, a stub GitHub metadata
provider and a real httpx client for the forwarder (mocked per test with
respx), plus an ASGI client driving the app in-process. Shared fixtures come
from tests/conftest.py (cache, stub_provider).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from jumbleproxy.config import Settings
from jumbleproxy.forwarder import Forwarder
from jumbleproxy.resolver import PreviewResolver
from jumbleproxy.server import create_app
from jumbleproxy.state import AppState
from tests.conftest import FIXED_NOW

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from jumbleproxy.cache import PreviewCache
    from tests.conftest import StubProvider


@pytest.fixture()
async def app_state(
    cache: PreviewCache, stub_provider: StubProvider
) -> AsyncGenerator[AppState, None]:
    """AppState wired with in-memory components."""
    async with httpx.AsyncClient() as forward_client:
        yield AppState(
            settings=Settings(),
            cache=cache,
            resolver=PreviewResolver(stub_provider, clock=lambda: FIXED_NOW),
            forwarder=Forwarder(forward_client),
        )


@pytest.fixture()
async def client(app_state: AppState) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client talking to the proxy app through the ASGI transport."""
    app = create_app(state=app_state)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://proxy.test",
    ) as asgi_client:
        yield asgi_client
