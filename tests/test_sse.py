"""Tests for incremental SSE decoding."""

import httpx
import pytest

from kushrouter.errors import KushRouterError
from kushrouter.sse import iter_frames, stream_response

from conftest import ChunkedStream

STREAM = b'data: {"a":1}\n\ndata: {"a":2}\n\ndata: [DONE]\n\n'


async def _chunks(*parts: bytes):
    for part in parts:
        yield part


async def _collect(chunks, **kwargs) -> list:
    return [frame async for frame in iter_frames(chunks, **kwargs)]


# ---------------------------------------------------------------------------
# Framing
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("offset", range(len(STREAM) + 1))
async def test_split_anywhere(offset):
    frames = await _collect(_chunks(STREAM[:offset], STREAM[offset:]))
    assert frames == [{"a": 1}, {"a": 2}]


@pytest.mark.asyncio
async def test_one_byte_at_a_time():
    frames = await _collect(_chunks(*(STREAM[i:i + 1] for i in range(len(STREAM)))))
    assert frames == [{"a": 1}, {"a": 2}]


@pytest.mark.asyncio
async def test_multibyte_character_split():
    raw = 'data: {"text":"héllo ✓"}\n\n'.encode()
    cut = raw.index("✓".encode()) + 1
    frames = await _collect(_chunks(raw[:cut], raw[cut:]))
    assert frames == [{"text": "héllo ✓"}]


@pytest.mark.asyncio
async def test_crlf_lines():
    frames = await _collect(_chunks(b'data: {"a":1}\r\n\r\ndata: [DONE]\r\n\r\n'))
    assert frames == [{"a": 1}]


# ---------------------------------------------------------------------------
# Leniency & termination
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_malformed_line_skipped():
    dropped = []
    raw = b'data: {"a":1}\n\ndata: not-json\n\ndata: {"a":2}\n\n'
    frames = await _collect(_chunks(raw), on_malformed=dropped.append)
    assert frames == [{"a": 1}, {"a": 2}]
    assert dropped == ["not-json"]


@pytest.mark.asyncio
async def test_non_data_lines_ignored():
    raw = b': keep-alive\n\nevent: message\nid: 7\ndata: {"a":1}\n\nretry: 100\n\n'
    assert await _collect(_chunks(raw)) == [{"a": 1}]


@pytest.mark.asyncio
async def test_no_done_ends_cleanly():
    assert await _collect(_chunks(b'data: {"a":1}\n\n')) == [{"a": 1}]


@pytest.mark.asyncio
async def test_unterminated_tail_discarded():
    assert await _collect(_chunks(b'data: {"a":1}\n\ndata: {"a":2}')) == [{"a": 1}]


@pytest.mark.asyncio
async def test_nothing_after_done():
    raw = b'data: {"a":1}\n\ndata: [DONE]\n\ndata: {"a":2}\n\n'
    assert await _collect(_chunks(raw)) == [{"a": 1}]


@pytest.mark.asyncio
async def test_empty_stream():
    assert await _collect(_chunks()) == []


# ---------------------------------------------------------------------------
# Response lifecycle
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_response_closed_after_completion():
    body = ChunkedStream([STREAM])
    frames = [f async for f in stream_response(httpx.Response(200, stream=body))]
    assert frames == [{"a": 1}, {"a": 2}]
    assert body.closed


@pytest.mark.asyncio
async def test_response_closed_on_early_exit():
    body = ChunkedStream([b'data: {"a":1}\n\n', b'data: {"a":2}\n\n'])
    frames = stream_response(httpx.Response(200, stream=body))
    assert await frames.__anext__() == {"a": 1}
    await frames.aclose()
    assert body.closed


@pytest.mark.asyncio
async def test_transport_error_mid_stream():
    body = ChunkedStream([b'data: {"a":1}\n\n'], error=httpx.ReadError("connection reset"))
    seen = []
    with pytest.raises(KushRouterError) as exc_info:
        async for frame in stream_response(httpx.Response(200, stream=body)):
            seen.append(frame)
    assert seen == [{"a": 1}]
    assert exc_info.value.code == "network_error"
    assert body.closed


@pytest.mark.asyncio
async def test_decoding_error_mid_stream():
    body = ChunkedStream([b'data: {"a":1}\n\n'], error=httpx.DecodingError("bad gzip"))
    with pytest.raises(KushRouterError) as exc_info:
        async for _ in stream_response(httpx.Response(200, stream=body)):
            pass
    assert exc_info.value.code == "network_error"
    assert body.closed
