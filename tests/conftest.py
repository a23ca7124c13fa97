# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from typing import Any, Awaitable, Callable, Dict, Union

import pytest
import pytest_asyncio
from aiohttp import web

from seo_scout.config import CrawlConfig

#: page spec: HTML body (200), (status, body) tuple, or a ready aiohttp handler
PageSpec = Union[str, tuple, Callable[[web.Request], Awaitable[web.StreamResponse]]]


def _make_handler(spec: PageSpec, hits: Counter):
    async def handler(request: web.Request) -> web.StreamResponse:
        hits[request.path_qs] += 1
        if callable(spec):
            return await spec(request)
        if isinstance(spec, tuple):
            status, body = spec
            return web.Response(status=status, text=body, content_type="text/html")
        return web.Response(text=spec, content_type="text/html")

    return handler


class SiteServer:
    """Local aiohttp site built from a ``{path: PageSpec}`` mapping."""

    def __init__(self, port: int) -> None:
        self.port = port
        self.hits: Counter = Counter()
        self._runner: web.AppRunner | None = None

    @property
    def base(self) -> str:
        return f"http://localhost:{self.port}"

    async def start(self, pages: Dict[str, PageSpec]) -> str:
        app = web.Application()
        for path, spec in pages.items():
            app.router.add_get(path, _make_handler(spec, self.hits))
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, "localhost", self.port)
        await site.start()
        return self.base

    async def close(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()


@pytest_asyncio.fixture
async def site_server(unused_tcp_port: int):
    """Start a throwaway site with ``await site_server.start({...})``."""
    server = SiteServer(unused_tcp_port)
    yield server
    await server.close()


@pytest.fixture()
def make_config() -> Callable[..., CrawlConfig]:
    """CrawlConfig factory with a short fetch timeout for tests."""

    def _make(start_url: str, **kwargs: Any) -> CrawlConfig:
        kwargs.setdefault("timeout", 2.0)
        return CrawlConfig(start_url=start_url, **kwargs)

    return _make

