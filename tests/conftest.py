"""Shared fakes: recording sleep, chunked response bodies, mock-transport clients."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from kushrouter.client import KushRouter


class RecordingSleep:
    """Stands in for ``asyncio.sleep`` and records every requested delay."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered in the given chunks; remembers whether it was closed."""

    def __init__(self, chunks: list[bytes], error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


def sse(*payloads: str) -> bytes:
    return "".join(f"data: {p}\n\n" for p in payloads).encode()


@pytest.fixture
def sleeps() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_router(sleeps: RecordingSleep) -> Callable[..., KushRouter]:
    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> KushRouter:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return KushRouter(api_key="test-key", http_client=http, sleep=sleeps, **kwargs)

    return _make
