"""Incremental server-sent-event decoding.

Bytes are decoded as a stream (multi-byte characters may straddle chunk
boundaries), reassembled into lines, and every ``data: <json>`` line becomes
one frame. ``data: [DONE]`` ends the stream. Lines that are not data lines
(comments, keep-alives, blank separators) are ignored, and data lines whose
payload is not a JSON object are dropped rather than raised.
"""

from __future__ import annotations

import codecs
import json
from contextlib import aclosing
from typing import Any, AsyncIterable, AsyncIterator, Callable

import httpx

from kushrouter.errors import KushRouterError
from kushrouter.logging import get_logger

_log = get_logger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


async def iter_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield complete ``\\n``-terminated lines.

    An unterminated tail left in the buffer when the input ends is discarded.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""
    async for chunk in chunks:
        buffer += decoder.decode(chunk)
        *lines, buffer = buffer.split("\n")
        for line in lines:
            yield line


async def iter_frames(
    chunks: AsyncIterable[bytes],
    on_malformed: Callable[[str], None] | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """Decode an SSE byte stream into JSON frames, in arrival order."""
    async with aclosing(iter_lines(chunks)) as lines:
        async for line in lines:
            if not line.startswith(DATA_PREFIX):
                continue
            payload = line[len(DATA_PREFIX):].strip()
            if payload == DONE_SENTINEL:
                return
            try:
                frame = json.loads(payload)
            except ValueError:
                frame = None
            if not isinstance(frame, dict):
                _log.debug("sse_frame_dropped", payload=payload[:200])
                if on_malformed:
                    on_malformed(payload)
                continue
            yield frame


async def stream_response(
    response: httpx.Response,
    on_malformed: Callable[[str], None] | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """Frames from an open streaming response; the response is always closed on exit."""
    try:
        async with aclosing(iter_frames(response.aiter_bytes(), on_malformed)) as frames:
            async for frame in frames:
                yield frame
    except httpx.TimeoutException as exc:
        raise KushRouterError("Stream timed out", code="timeout", cause=exc) from exc
    except httpx.RequestError as exc:
        raise KushRouterError(f"Stream interrupted: {exc}", code="network_error", cause=exc) from exc
    finally:
        await response.aclose()
