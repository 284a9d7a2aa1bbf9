"""KushRouter client – unified access to the KushRouter LLM router API."""

__version__ = "2.0.0"

from kushrouter.errors import (
    ErrorKind,
    KushRouterError,
    AuthenticationError,
    InsufficientCreditsError,
    RateLimitError,
    ConfigurationError,
    classify,
)
from kushrouter.config import ClientConfig
from kushrouter.retry import RetryPolicy, retry_call
from kushrouter.surfaces import AuthMode, Surface, UNIFIED, OPENAI, ANTHROPIC, normalize_fields
from kushrouter.sse import iter_frames, stream_response
from kushrouter.types import (
    Role,
    ReasoningEffort,
    Message,
    MCPServer,
    UnifiedRequest,
    OpenAIRequest,
    AnthropicRequest,
    Usage,
    ChatResponse,
    StreamChunk,
    FileObject,
    FileList,
    FileDeleted,
    Batch,
    BatchList,
    TokenizeResponse,
    UsageResponse,
    AnalyticsResponse,
)
from kushrouter.pricing import ModelPricing, get_pricing, list_pricing
from kushrouter.client import KushRouter
from kushrouter.api import complete, chat, estimate_cost, set_default_client

__all__ = [
    "__version__",
    "ErrorKind", "KushRouterError", "AuthenticationError", "InsufficientCreditsError",
    "RateLimitError", "ConfigurationError", "classify",
    "ClientConfig", "RetryPolicy", "retry_call",
    "AuthMode", "Surface", "UNIFIED", "OPENAI", "ANTHROPIC", "normalize_fields",
    "iter_frames", "stream_response",
    "Role", "ReasoningEffort", "Message", "MCPServer",
    "UnifiedRequest", "OpenAIRequest", "AnthropicRequest",
    "Usage", "ChatResponse", "StreamChunk",
    "FileObject", "FileList", "FileDeleted", "Batch", "BatchList",
    "TokenizeResponse", "UsageResponse", "AnalyticsResponse",
    "ModelPricing", "get_pricing", "list_pricing",
    "KushRouter",
    "complete", "chat", "estimate_cost", "set_default_client",
]
