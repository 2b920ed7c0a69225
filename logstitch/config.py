"""
Client Configuration
====================
Immutable settings for the LogStitch client and its delivery transport.
"""

import os
from dataclasses import dataclass, field
from typing import Callable, Optional

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://logstitch.io"
DEFAULT_BATCH_SIZE = 10
DEFAULT_FLUSH_INTERVAL = 5.0
DEFAULT_MAX_QUEUE_SIZE = 1000

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 0.5
DEFAULT_MAX_DELAY = 30.0

PROJECT_KEY_ENV = "LOGSTITCH_PROJECT_KEY"
BASE_URL_ENV = "LOGSTITCH_BASE_URL"

ErrorCallback = Callable[[Exception], None]


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for a single logical request. Delays are in seconds."""
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    max_delay: float = DEFAULT_MAX_DELAY

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ConfigurationError("retry delays must not be negative")


@dataclass(frozen=True)
class ClientConfig:
    """
    Configuration for a LogStitch client.

    ``project_key`` and ``base_url`` fall back to the ``LOGSTITCH_PROJECT_KEY``
    and ``LOGSTITCH_BASE_URL`` environment variables. ``flush_interval`` is
    in seconds.
    """
    project_key: Optional[str] = field(default_factory=lambda: os.environ.get(PROJECT_KEY_ENV))
    base_url: str = field(default_factory=lambda: os.environ.get(BASE_URL_ENV, DEFAULT_BASE_URL))
    batch_size: int = DEFAULT_BATCH_SIZE
    flush_interval: float = DEFAULT_FLUSH_INTERVAL
    max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE
    strict: bool = False
    on_error: Optional[ErrorCallback] = None
    retry: RetryConfig = field(default_factory=RetryConfig)
    timeout: Optional[float] = None

    def __post_init__(self):
        if not self.project_key:
            raise ConfigurationError("LogStitch: project_key is required")
        if self.batch_size < 1:
            raise ConfigurationError("batch_size must be at least 1")
        if self.max_queue_size < 1:
            raise ConfigurationError("max_queue_size must be at least 1")
        if self.flush_interval <= 0:
            raise ConfigurationError("flush_interval must be positive")

        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def auth_header(self) -> str:
        return f"Bearer {self.project_key}"
