"""Request and response shapes for the KushRouter API."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ReasoningEffort(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def _message_dict(message: Any) -> Any:
    return message.to_dict() if isinstance(message, Message) else message


# ---------------------------------------------------------------------------
# Messages & tools
# ---------------------------------------------------------------------------

@dataclass
class Message:
    role: Role | str
    content: str | list[dict[str, Any]]

    @classmethod
    def system(cls, text: str) -> Message:
        return cls(role=Role.SYSTEM, content=text)

    @classmethod
    def user(cls, text: str) -> Message:
        return cls(role=Role.USER, content=text)

    @classmethod
    def assistant(cls, text: str) -> Message:
        return cls(role=Role.ASSISTANT, content=text)

    @property
    def text(self) -> str:
        return message_text(self.content)

    def to_dict(self) -> dict[str, Any]:
        role = self.role.value if isinstance(self.role, Role) else self.role
        return {"role": role, "content": self.content}


def message_text(content: Any) -> str:
    """Plain text of a message ``content`` (string or list of content blocks)."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            block.get("text", "") for block in content
            if isinstance(block, dict) and block.get("type", "text") == "text"
        )
    return ""


@dataclass
class MCPServer:
    name: str
    uri: str
    capabilities: list[str] | None = None
    config: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(asdict(self))


def _servers(servers: list[MCPServer | dict] | None) -> list[dict] | None:
    if servers is None:
        return None
    return [s.to_dict() if isinstance(s, MCPServer) else s for s in servers]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

@dataclass
class UnifiedRequest:
    model: str
    messages: list[Message | dict[str, Any]] = field(default_factory=list)
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    stream: bool | None = None
    tools: list[dict[str, Any]] | None = None
    tool_choice: str | dict[str, Any] | None = None
    timeout_ms: int | None = None
    prompt_cache: dict[str, Any] | None = None
    reasoning_effort: ReasoningEffort | str | None = None
    mcp_servers: list[MCPServer | dict[str, Any]] | None = None
    system: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body = {f.name: getattr(self, f.name) for f in fields(self)}
        # single-turn requests may send only ``message``
        body["messages"] = [_message_dict(m) for m in self.messages] or None
        body["mcp_servers"] = _servers(self.mcp_servers)
        if isinstance(self.reasoning_effort, ReasoningEffort):
            body["reasoning_effort"] = self.reasoning_effort.value
        return _compact(body)


@dataclass
class OpenAIRequest:
    model: str
    messages: list[Message | dict[str, Any]]
    temperature: float | None = None
    max_tokens: int | None = None
    stream: bool | None = None
    tools: list[dict[str, Any]] | None = None
    tool_choice: str | dict[str, Any] | None = None
    reasoning_effort: ReasoningEffort | str | None = None
    response_format: dict[str, Any] | None = None
    mcp_servers: list[MCPServer | dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        body = {f.name: getattr(self, f.name) for f in fields(self)}
        body["messages"] = [_message_dict(m) for m in self.messages]
        body["mcp_servers"] = _servers(self.mcp_servers)
        if isinstance(self.reasoning_effort, ReasoningEffort):
            body["reasoning_effort"] = self.reasoning_effort.value
        return _compact(body)


@dataclass
class AnthropicRequest:
    model: str
    messages: list[Message | dict[str, Any]]
    max_tokens: int
    temperature: float | None = None
    stream: bool | None = None
    tools: list[dict[str, Any]] | None = None
    tool_choice: dict[str, Any] | None = None
    system: str | None = None
    mcp_servers: list[MCPServer | dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        body = {f.name: getattr(self, f.name) for f in fields(self)}
        body["messages"] = [_message_dict(m) for m in self.messages]
        body["mcp_servers"] = _servers(self.mcp_servers)
        return _compact(body)


# ---------------------------------------------------------------------------
# Chat responses
# ---------------------------------------------------------------------------

@dataclass
class Usage:
    input_tokens: int | None = None
    output_tokens: int | None = None
    total_tokens: int | None = None
    cost: float | None = None
    estimated_cost: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Usage | None:
        if not data:
            return None

        def _pick(*keys: str) -> Any:
            return next((data[k] for k in keys if data.get(k) is not None), None)

        return cls(
            input_tokens=_pick("inputTokens", "input_tokens", "prompt_tokens"),
            output_tokens=_pick("outputTokens", "output_tokens", "completion_tokens"),
            total_tokens=_pick("totalTokens", "total_tokens"),
            cost=data.get("cost"),
            estimated_cost=data.get("estimated_cost"),
        )


@dataclass
class ChatMessage:
    role: str
    content: str | None


@dataclass
class Choice:
    index: int
    message: ChatMessage
    finish_reason: str | None = None


@dataclass
class ChatResponse:
    choices: list[Choice]
    id: str | None = None
    model: str | None = None
    usage: Usage | None = None
    raw: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatResponse:
        choices = []
        for i, c in enumerate(data.get("choices") or []):
            msg = c.get("message") or {}
            choices.append(Choice(
                index=c.get("index", i),
                message=ChatMessage(role=msg.get("role", "assistant"), content=message_text(msg.get("content"))),
                finish_reason=c.get("finish_reason"),
            ))
        return cls(
            choices=choices,
            id=data.get("id"),
            model=data.get("model"),
            usage=Usage.from_dict(data.get("usage")),
            raw=data,
        )

    @property
    def text(self) -> str:
        """Content of the first choice, or ``""`` when there is none."""
        if not self.choices:
            return ""
        return self.choices[0].message.content or ""


@dataclass
class Delta:
    content: str | None = None
    role: str | None = None


@dataclass
class StreamChoice:
    index: int
    delta: Delta
    finish_reason: str | None = None


@dataclass
class StreamChunk:
    choices: list[StreamChoice]
    id: str | None = None
    model: str | None = None
    usage: Usage | None = None
    raw: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StreamChunk:
        choices = []
        for i, c in enumerate(data.get("choices") or []):
            delta = c.get("delta") or {}
            choices.append(StreamChoice(
                index=c.get("index", i),
                delta=Delta(content=delta.get("content"), role=delta.get("role")),
                finish_reason=c.get("finish_reason"),
            ))
        return cls(
            choices=choices,
            id=data.get("id"),
            model=data.get("model"),
            usage=Usage.from_dict(data.get("usage")),
            raw=data,
        )

    @property
    def text(self) -> str | None:
        if not self.choices:
            return None
        return self.choices[0].delta.content


# ---------------------------------------------------------------------------
# Files & batches
# ---------------------------------------------------------------------------

@dataclass
class FileObject:
    id: str
    filename: str | None = None
    bytes: int | None = None
    purpose: str | None = None
    created_at: str | int | None = None
    key: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileObject:
        return cls(
            id=data["id"],
            filename=data.get("filename"),
            bytes=data.get("bytes"),
            purpose=data.get("purpose"),
            created_at=data.get("created_at"),
            key=data.get("key"),
        )


@dataclass
class FileList:
    data: list[FileObject]
    has_more: bool = False
    object: str = "list"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileList:
        return cls(
            data=[FileObject.from_dict(f) for f in data.get("data") or []],
            has_more=bool(data.get("has_more", False)),
            object=data.get("object", "list"),
        )


@dataclass
class FileDeleted:
    id: str
    deleted: bool
    object: str = "file"


@dataclass
class Batch:
    id: str
    status: str
    object: str = "batch"
    endpoint: str | None = None
    input_file_id: str | None = None
    output_file_id: str | None = None
    error_file_id: str | None = None
    created_at: int | str | None = None
    completed_at: int | str | None = None
    metadata: dict[str, Any] | None = None
    raw: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Batch:
        return cls(
            id=data["id"],
            # Anthropic-style batches report processing_status instead of status
            status=data.get("status") or data.get("processing_status") or "unknown",
            object=data.get("object") or data.get("type") or "batch",
            endpoint=data.get("endpoint"),
            input_file_id=data.get("input_file_id"),
            output_file_id=data.get("output_file_id"),
            error_file_id=data.get("error_file_id"),
            created_at=data.get("created_at"),
            completed_at=data.get("completed_at") or data.get("ended_at"),
            metadata=data.get("metadata"),
            raw=data,
        )


@dataclass
class BatchList:
    data: list[Batch]
    has_more: bool = False
    object: str = "list"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BatchList:
        return cls(
            data=[Batch.from_dict(b) for b in data.get("data") or []],
            has_more=bool(data.get("has_more", False)),
            object=data.get("object", "list"),
        )


# ---------------------------------------------------------------------------
# Tokenize, usage, analytics
# ---------------------------------------------------------------------------

@dataclass
class TokenizeResponse:
    tokens: int
    model: str
    tokenized: list[str] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenizeResponse:
        return cls(tokens=int(data.get("tokens", 0)), model=data.get("model", ""), tokenized=data.get("tokenized"))


@dataclass
class UsageRecord:
    timestamp: str
    model: str
    tokens: int
    cost: float


@dataclass
class UsageResponse:
    total_requests: int
    total_tokens: int
    total_cost: float
    recent_requests: list[UsageRecord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UsageResponse:
        return cls(
            total_requests=data.get("total_requests", 0),
            total_tokens=data.get("total_tokens", 0),
            total_cost=data.get("total_cost", 0.0),
            recent_requests=[
                UsageRecord(
                    timestamp=r.get("timestamp", ""),
                    model=r.get("model", ""),
                    tokens=r.get("tokens", 0),
                    cost=r.get("cost", 0.0),
                )
                for r in data.get("recent_requests") or []
            ],
        )


@dataclass
class AnalyticsResponse:
    """Analytics report. ``data`` keeps the server's camelCase keys
    (``summary``, ``modelBreakdown``, ``dailyUsage``, ``hourlyDistribution``)."""

    success: bool
    data: dict[str, Any]
    meta: dict[str, Any]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalyticsResponse:
        return cls(success=bool(data.get("success", False)), data=data.get("data") or {}, meta=data.get("meta") or {})

    @property
    def summary(self) -> dict[str, Any]:
        return self.data.get("summary") or {}

    @property
    def model_breakdown(self) -> list[dict[str, Any]]:
        return self.data.get("modelBreakdown") or []
