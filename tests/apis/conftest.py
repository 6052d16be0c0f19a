import asyncio
import dataclasses
from typing import Any, Dict, List, Optional

import aiohttp.web
import pytest
from aiohttp.test_utils import TestServer

from restli import RestliClient


@dataclasses.dataclass
class FakeAPI:
    """ What the fake server responds with, and what it has received. """
    status: int = 200
    headers: Dict[str, str] = dataclasses.field(default_factory=dict)
    text: Optional[str] = '{}'
    delay: float = 0
    received: List[Dict[str, Any]] = dataclasses.field(default_factory=list)


@pytest.fixture()
def fake_api():
    return FakeAPI()


@pytest.fixture()
async def server(fake_api):
    async def handler(request: aiohttp.web.Request) -> aiohttp.web.Response:
        fake_api.received.append(dict(
            method=request.method,
            raw_path=request.raw_path,
            headers=dict(request.headers),
            body=await request.read(),
        ))
        if fake_api.delay:
            await asyncio.sleep(fake_api.delay)
        return aiohttp.web.Response(
            status=fake_api.status,
            headers=fake_api.headers,
            text=fake_api.text,
            content_type='application/json',
        )

    app = aiohttp.web.Application()
    app.router.add_route('*', '/{tail:.*}', handler)
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


@pytest.fixture()
def settings(settings, server):
    settings.api.base_url = str(server.make_url('/v2'))
    settings.api.versioned_base_url = str(server.make_url('/rest'))
    return settings


@pytest.fixture()
async def client(settings):
    async with RestliClient(settings=settings) as client:
        yield client
