"""Single HTTP exchange: auth headers, per-attempt deadline, error classification."""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass, field
from typing import Any, NoReturn

import httpx

from kushrouter.config import ClientConfig
from kushrouter.errors import KushRouterError, classify
from kushrouter.logging import get_logger
from kushrouter.surfaces import AuthMode

_log = get_logger(__name__)


@dataclass
class RequestEnvelope:
    """Everything needed for one attempt. Built fresh by a factory per attempt."""

    method: str
    path: str
    auth_mode: AuthMode = AuthMode.API_KEY_HEADER
    json: Any | None = None
    content: str | bytes | None = None
    data: dict[str, Any] | None = None
    files: dict[str, Any] | None = None
    params: dict[str, str] | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_multipart(self) -> bool:
        return self.files is not None


class Transport:
    """Issues one HTTP exchange per :meth:`invoke` call.

    Retry decisions are left to :func:`kushrouter.retry.retry_call`; this
    class only turns failures into classified :class:`KushRouterError`.
    """

    def __init__(self, config: ClientConfig, http_client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._owns_client and self._client is not None and self._client.is_closed:
            self._client = None
        if self._client is None:
            from kushrouter import __version__

            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                headers={"User-Agent": f"kushrouter-python/{__version__}"},
            )
        return self._client

    def _headers(self, envelope: RequestEnvelope) -> dict[str, str]:
        headers: dict[str, str] = {}
        # multipart bodies need httpx to generate the boundary header itself
        if not envelope.is_multipart:
            headers["Content-Type"] = "application/json"
        if envelope.auth_mode == AuthMode.BEARER_TOKEN:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        else:
            headers["x-api-key"] = self.config.api_key
        headers.update(envelope.headers)
        return headers

    async def invoke(self, envelope: RequestEnvelope, stream: bool = False) -> httpx.Response:
        """Send ``envelope`` and return the successful response.

        With ``stream=True`` the body is left unread and the caller owns the
        response (it must be closed). Non-2xx responses are always read,
        closed and raised as classified errors.
        """
        client = await self._get_client()
        request = client.build_request(
            envelope.method,
            f"{self.config.base_url}{envelope.path}",
            json=envelope.json,
            content=envelope.content,
            data=envelope.data,
            files=envelope.files,
            params=envelope.params,
            headers=self._headers(envelope),
            timeout=self.config.timeout,
        )

        started = time.monotonic()
        try:
            response = await asyncio.wait_for(client.send(request, stream=stream), timeout=self.config.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            _log.warning("kushrouter_request_failed", method=envelope.method, path=envelope.path, kind="timeout")
            raise KushRouterError(
                f"Request timed out after {self.config.timeout}s", code="timeout", cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            _log.warning(
                "kushrouter_request_failed", method=envelope.method, path=envelope.path,
                kind="network_error", error=str(exc),
            )
            raise KushRouterError(f"Network error: {exc}", code="network_error", cause=exc) from exc

        elapsed_ms = round((time.monotonic() - started) * 1000, 1)
        if response.is_success:
            _log.debug(
                "kushrouter_request", method=envelope.method, path=envelope.path,
                status=response.status_code, elapsed_ms=elapsed_ms, stream=stream,
            )
            return response

        await self._raise_for_response(envelope, response)

    async def _raise_for_response(self, envelope: RequestEnvelope, response: httpx.Response) -> NoReturn:
        try:
            raw = await response.aread()
        except httpx.HTTPError:
            raw = b""
        finally:
            await response.aclose()

        try:
            body = json.loads(raw) if raw else {}
        except ValueError:
            body = {}

        error = classify(response.status_code, body)
        _log.warning(
            "kushrouter_request_failed", method=envelope.method, path=envelope.path,
            status=response.status_code, kind=error.kind.value, error=error.message,
        )
        raise error

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
