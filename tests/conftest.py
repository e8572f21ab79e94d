"""Shared fixtures for oura-cli tests."""
import io
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer, unused_port
from rich.console import Console

from oura_cli.auth.store import ConfigStore
from oura_cli.config import AuthSettings
from oura_cli.utils.paths import get_config_path


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class FakeTokenEndpoint:
    """
    Local token endpoint that records form posts.

    Queued responses are served in order; the last one repeats.
    """

    def __init__(self):
        self.requests: List[Dict[str, str]] = []
        self.responses: List[Tuple[int, Any]] = []
        self.server: Optional[TestServer] = None
        self.url = ""

    def respond(self, status: int = 200, body: Any = None) -> None:
        self.responses.append((status, body))

    async def _handle(self, request: web.Request) -> web.Response:
        self.requests.append(dict(await request.post()))
        if len(self.responses) > 1:
            status, body = self.responses.pop(0)
        else:
            status, body = self.responses[0]
        if isinstance(body, (dict, list)):
            return web.json_response(body, status=status)
        return web.Response(status=status, text=body or "")

    async def start(self) -> None:
        app = web.Application()
        app.router.add_post("/oauth/token", self._handle)
        self.server = TestServer(app)
        await self.server.start_server()
        self.url = str(self.server.make_url("/oauth/token"))

    async def close(self) -> None:
        await self.server.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def auth_settings():
    """Settings pointing the callback listener at a free loopback port."""
    return AuthSettings(
        redirect_host="127.0.0.1",
        redirect_port=unused_port(),
        callback_timeout_seconds=5.0,
    )


@pytest.fixture
def store(tmp_path):
    return ConfigStore(get_config_path(tmp_path))


@pytest.fixture
def quiet_console():
    return Console(file=io.StringIO())


@pytest_asyncio.fixture
async def token_endpoint():
    endpoint = FakeTokenEndpoint()
    await endpoint.start()
    yield endpoint
    await endpoint.close()
