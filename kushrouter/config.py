"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from kushrouter.errors import ConfigurationError

BASE_URL = "https://api.kushrouter.com"
ANTHROPIC_VERSION = "2023-06-01"

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class ClientConfig:
    """Immutable per-client settings shared read-only by every call.

    ``timeout`` is the per-attempt deadline in seconds; ``max_attempts``
    bounds the retry loop (the first attempt counts) and is validated by
    :class:`~kushrouter.retry.RetryPolicy` when a client is built.
    """

    api_key: str
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigurationError("API key is required")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

    def __repr__(self) -> str:
        return f"ClientConfig(api_key='***', timeout={self.timeout}, max_attempts={self.max_attempts})"

    @property
    def base_url(self) -> str:
        return BASE_URL

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build a config from ``KUSHROUTER_*`` environment variables."""
        api_key = os.getenv("KUSHROUTER_API_KEY", "")
        if not api_key:
            raise ConfigurationError("No API key found in environment (set KUSHROUTER_API_KEY)")
        try:
            timeout = float(os.getenv("KUSHROUTER_TIMEOUT", DEFAULT_TIMEOUT))
            max_attempts = int(os.getenv("KUSHROUTER_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS))
        except ValueError as exc:
            raise ConfigurationError(f"Invalid KushRouter environment setting: {exc}") from exc
        return cls(api_key=api_key, timeout=timeout, max_attempts=max_attempts)
