"""Module-level complete / chat helpers backed by a default client."""

from __future__ import annotations

from typing import Any, AsyncIterator, Mapping

from kushrouter.client import DEFAULT_CHAT_MODEL, DEFAULT_COMPLETE_MODEL, KushRouter
from kushrouter.types import Message, UnifiedRequest

# ---------------------------------------------------------------------------
# Module-level default client
# ---------------------------------------------------------------------------

_default_client: KushRouter | None = None


def set_default_client(client: KushRouter | None) -> None:
    global _default_client
    _default_client = client


def _get_default_client() -> KushRouter:
    global _default_client
    if _default_client is None:
        _default_client = KushRouter.from_env()
    return _default_client


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def complete(
    prompt: str,
    model: str = DEFAULT_COMPLETE_MODEL,
    system: str | None = None,
    stream: bool = False,
    client: KushRouter | None = None,
    **options: Any,
) -> str | AsyncIterator[str]:
    """``KushRouter.complete`` on the default (or given) client."""
    c = client or _get_default_client()
    return await c.complete(prompt, model=model, system=system, stream=stream, **options)


async def chat(
    messages: list[Message | dict[str, Any]],
    model: str = DEFAULT_CHAT_MODEL,
    stream: bool = False,
    client: KushRouter | None = None,
    **options: Any,
) -> str | AsyncIterator[str]:
    c = client or _get_default_client()
    return await c.chat(messages, model=model, stream=stream, **options)


async def estimate_cost(request: UnifiedRequest | Mapping[str, Any], client: KushRouter | None = None) -> float:
    c = client or _get_default_client()
    return await c.estimate_cost(request)
