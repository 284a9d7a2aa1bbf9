"""KushRouter client – one facade over the unified, OpenAI and Anthropic surfaces."""

from __future__ import annotations

from contextlib import aclosing
from typing import Any, AsyncIterator, Awaitable, Callable, Mapping

import httpx

from kushrouter.config import DEFAULT_MAX_ATTEMPTS, DEFAULT_TIMEOUT, ClientConfig
from kushrouter.errors import ConfigurationError, KushRouterError
from kushrouter.logging import get_logger
from kushrouter.pricing import DEFAULT_PRICING_MODEL, estimate_cost
from kushrouter.resources import AnthropicBatches, Files, OpenAIBatches, ProviderNamespace, UnifiedBatches
from kushrouter.retry import RetryPolicy, retry_call
from kushrouter.sse import stream_response
from kushrouter.surfaces import ANTHROPIC, OPENAI, UNIFIED, AuthMode, Surface
from kushrouter.transport import RequestEnvelope, Transport
from kushrouter.types import (
    AnalyticsResponse,
    ChatResponse,
    Message,
    StreamChunk,
    TokenizeResponse,
    UnifiedRequest,
    UsageResponse,
    message_text,
)

_log = get_logger(__name__)

DEFAULT_COMPLETE_MODEL = "gpt-5-2025-08-07"
DEFAULT_CHAT_MODEL = "claude-sonnet-4@20250514"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000
DEFAULT_ESTIMATE_OUTPUT_TOKENS = 500


class KushRouter:
    """Async client for the KushRouter API.

    Usage::

        async with KushRouter(api_key="...") as router:
            text = await router.complete("Hello")
            async for delta in await router.complete("Tell a story", stream=True):
                print(delta, end="")

    ``http_client`` and ``sleep`` replace the HTTP exchange and the
    between-attempt sleep; both exist mainly for tests. An injected
    ``http_client`` is not closed by :meth:`close`.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        on_malformed_frame: Callable[[str], None] | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        if config is not None:
            if api_key is not None or timeout is not None or max_attempts is not None:
                raise ConfigurationError("Pass either config or api_key/timeout/max_attempts, not both")
            self.config = config
        else:
            self.config = ClientConfig(
                api_key=api_key or "",
                timeout=DEFAULT_TIMEOUT if timeout is None else timeout,
                max_attempts=DEFAULT_MAX_ATTEMPTS if max_attempts is None else max_attempts,
            )
        self._transport = Transport(self.config, http_client)
        self._retry = RetryPolicy(max_attempts=self.config.max_attempts)
        if sleep is not None:
            self._retry.sleep = sleep
        self._on_malformed = on_malformed_frame

        self.files = Files(self)
        self.batches = UnifiedBatches(self)
        self.anthropic = ProviderNamespace(AnthropicBatches(self))
        self.openai = ProviderNamespace(OpenAIBatches(self))

    @classmethod
    def from_env(cls, **kwargs: Any) -> KushRouter:
        """Build a client from ``KUSHROUTER_API_KEY`` and friends."""
        return cls(config=ClientConfig.from_env(), **kwargs)

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> KushRouter:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # -- request plumbing ------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        auth_mode: AuthMode = AuthMode.API_KEY_HEADER,
        headers: Mapping[str, str] | None = None,
        stream: bool = False,
        **body: Any,
    ) -> httpx.Response:
        def _envelope() -> RequestEnvelope:
            return RequestEnvelope(
                method=method, path=path, auth_mode=auth_mode, headers=dict(headers or {}), **body,
            )

        return await retry_call(lambda: self._transport.invoke(_envelope(), stream=stream), self._retry)

    async def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise KushRouterError(
                f"Invalid JSON in response from {path}", status=response.status_code, cause=exc,
            ) from exc

    async def _chat(self, surface: Surface, request: Any) -> Any:
        return await self._request_json(
            "POST", surface.chat_path, auth_mode=surface.auth_mode,
            headers=surface.extra_headers, json=surface.prepare(request),
        )

    async def _stream(self, surface: Surface, request: Any) -> AsyncIterator[dict[str, Any]]:
        response = await self._request(
            "POST", surface.chat_path, auth_mode=surface.auth_mode,
            headers=surface.extra_headers, stream=True, json=surface.prepare(request, stream=True),
        )
        async with aclosing(stream_response(response, self._on_malformed)) as frames:
            async for frame in frames:
                yield frame

    # -- chat surfaces -----------------------------------------------------------

    async def chat_unified(self, request: UnifiedRequest | Mapping[str, Any]) -> ChatResponse:
        """Chat completion through the unified ``/api/v1/messages`` endpoint."""
        return ChatResponse.from_dict(await self._chat(UNIFIED, request))

    async def stream_unified(self, request: UnifiedRequest | Mapping[str, Any]) -> AsyncIterator[StreamChunk]:
        async with aclosing(self._stream(UNIFIED, request)) as frames:
            async for frame in frames:
                yield StreamChunk.from_dict(frame)

    async def chat_openai(self, request: Any) -> ChatResponse:
        """OpenAI-compatible chat completion (Bearer auth)."""
        return ChatResponse.from_dict(await self._chat(OPENAI, request))

    async def stream_openai(self, request: Any) -> AsyncIterator[StreamChunk]:
        async with aclosing(self._stream(OPENAI, request)) as frames:
            async for frame in frames:
                yield StreamChunk.from_dict(frame)

    async def chat_anthropic(self, request: Any) -> dict[str, Any]:
        """Anthropic-compatible messages call; returns the raw message object."""
        return await self._chat(ANTHROPIC, request)

    async def stream_anthropic(self, request: Any) -> AsyncIterator[dict[str, Any]]:
        """Anthropic-compatible stream; yields raw event dicts (``content_block_delta`` etc.)."""
        async with aclosing(self._stream(ANTHROPIC, request)) as frames:
            async for frame in frames:
                yield frame

    # -- auxiliary endpoints -------------------------------------------------------

    async def tokenize(self, text: str, model: str = DEFAULT_COMPLETE_MODEL) -> TokenizeResponse:
        data = await self._request_json("POST", "/api/v1/tokenize", json={"model": model, "input": text})
        return TokenizeResponse.from_dict(data)

    async def get_usage(self) -> UsageResponse:
        return UsageResponse.from_dict(await self._request_json("GET", "/api/v1/usage"))

    async def get_analytics(
        self,
        days: int = 30,
        include_hourly: bool = False,
        group_by: str = "day",
    ) -> AnalyticsResponse:
        """Usage analytics; ``group_by`` is one of ``day``, ``hour``, ``model``."""
        params = {
            "days": str(days),
            "include_hourly": "true" if include_hourly else "false",
            "group_by": group_by,
        }
        return AnalyticsResponse.from_dict(await self._request_json("GET", "/api/v1/analytics", params=params))

    # -- convenience -----------------------------------------------------------------

    async def complete(
        self,
        prompt: str,
        model: str = DEFAULT_COMPLETE_MODEL,
        system: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        stream: bool = False,
        reasoning_effort: str | None = None,
    ) -> str | AsyncIterator[str]:
        """Single-prompt completion.

        Returns the first choice's text, or with ``stream=True`` an async
        iterator of the non-empty text deltas.
        """
        request = UnifiedRequest(
            model=model,
            messages=[Message.user(prompt)],
            system=system,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=stream,
            reasoning_effort=reasoning_effort,
        )
        if stream:
            return self._stream_text(request)
        return (await self.chat_unified(request)).text

    async def chat(
        self,
        messages: list[Message | dict[str, Any]],
        model: str = DEFAULT_CHAT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        stream: bool = False,
        reasoning_effort: str | None = None,
    ) -> str | AsyncIterator[str]:
        """Multi-turn chat; same return convention as :meth:`complete`."""
        request = UnifiedRequest(
            model=model,
            messages=list(messages),
            temperature=temperature,
            max_tokens=max_tokens,
            stream=stream,
            reasoning_effort=reasoning_effort,
        )
        if stream:
            return self._stream_text(request)
        return (await self.chat_unified(request)).text

    async def _stream_text(self, request: UnifiedRequest) -> AsyncIterator[str]:
        async with aclosing(self.stream_unified(request)) as chunks:
            async for chunk in chunks:
                if chunk.text:
                    yield chunk.text

    async def estimate_cost(self, request: UnifiedRequest | Mapping[str, Any]) -> float:
        """Rough USD cost of ``request``.

        Input tokens come from one :meth:`tokenize` call; output tokens are
        assumed to equal the request's ``max_tokens`` (500 when unset), not
        what the model will actually produce. Prices come from the static
        table in :mod:`kushrouter.pricing`.
        """
        body = UNIFIED.prepare(request)
        model = body.get("model") or DEFAULT_PRICING_MODEL
        text = body.get("message") or " ".join(
            message_text(m.get("content")) for m in body.get("messages") or [] if isinstance(m, dict)
        )
        tokens = await self.tokenize(text, model=model)
        output_tokens = body.get("max_tokens") or DEFAULT_ESTIMATE_OUTPUT_TOKENS
        cost = estimate_cost(model, tokens.tokens, output_tokens)
        _log.debug("kushrouter_cost_estimate", model=model, input_tokens=tokens.tokens, output_tokens=output_tokens, cost=cost)
        return cost
