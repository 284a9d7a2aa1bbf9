"""Chat surface descriptors and request field normalization.

The unified, OpenAI-compatible and Anthropic-compatible endpoints share one
execution engine; everything that differs between them lives in a
:class:`Surface` entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from kushrouter.config import ANTHROPIC_VERSION


class AuthMode(str, Enum):
    API_KEY_HEADER = "api_key_header"
    BEARER_TOKEN = "bearer_token"


# Alternate (camelCase) spelling -> wire (snake_case) spelling.
UNIFIED_ALIASES: dict[str, str] = {
    "maxTokens": "max_tokens",
    "toolChoice": "tool_choice",
    "timeoutMs": "timeout_ms",
    "promptCache": "prompt_cache",
    "reasoningEffort": "reasoning_effort",
    "mcpServers": "mcp_servers",
}

OPENAI_ALIASES: dict[str, str] = {
    "maxTokens": "max_tokens",
    "toolChoice": "tool_choice",
    "reasoningEffort": "reasoning_effort",
    "responseFormat": "response_format",
    "timeoutMs": "timeout_ms",
    "mcpServers": "mcp_servers",
}

ANTHROPIC_ALIASES: dict[str, str] = {
    "maxTokens": "max_tokens",
    "toolChoice": "tool_choice",
    "mcpServers": "mcp_servers",
}


def normalize_fields(request: Mapping[str, Any], aliases: Mapping[str, str]) -> dict[str, Any]:
    """Return a copy of ``request`` with alternate field names rewritten.

    An explicitly set wire-form value is never overwritten: when both
    spellings are present the wire form wins and the alternate key is
    dropped.
    """
    out = dict(request)
    for alt, wire in aliases.items():
        if alt not in out:
            continue
        value = out.pop(alt)
        if out.get(wire) is None:
            out[wire] = value
    return out


@dataclass(frozen=True)
class Surface:
    name: str
    chat_path: str
    auth_mode: AuthMode
    field_aliases: Mapping[str, str]
    extra_headers: Mapping[str, str] = field(default_factory=dict)

    def prepare(self, request: Any, stream: bool = False) -> dict[str, Any]:
        """Turn a request dataclass or mapping into this surface's wire body."""
        if hasattr(request, "to_dict"):
            body = request.to_dict()
        elif isinstance(request, Mapping):
            body = dict(request)
        else:
            raise TypeError(f"Unsupported request type for {self.name} surface: {type(request).__name__}")
        if isinstance(body.get("messages"), list):
            body["messages"] = [m.to_dict() if hasattr(m, "to_dict") else m for m in body["messages"]]
        body = normalize_fields(body, self.field_aliases)
        if stream:
            body["stream"] = True
        return body


UNIFIED = Surface(
    name="unified",
    chat_path="/api/v1/messages",
    auth_mode=AuthMode.API_KEY_HEADER,
    field_aliases=UNIFIED_ALIASES,
)

OPENAI = Surface(
    name="openai",
    chat_path="/api/openai/chat/completions",
    auth_mode=AuthMode.BEARER_TOKEN,
    field_aliases=OPENAI_ALIASES,
)

ANTHROPIC = Surface(
    name="anthropic",
    chat_path="/api/anthropic/messages",
    auth_mode=AuthMode.API_KEY_HEADER,
    field_aliases=ANTHROPIC_ALIASES,
    extra_headers={"anthropic-version": ANTHROPIC_VERSION},
)
