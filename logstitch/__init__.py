"""
LogStitch Python Client
=======================
Buffered, retrying client for the LogStitch audit log service.
"""

__version__ = "0.1.0"

# Client
from logstitch.client import LogStitch

# Configuration
from logstitch.config import ClientConfig, RetryConfig

# Errors
from logstitch.errors import (
    APIError,
    ConfigurationError,
    LogStitchError,
    TransportError,
)

# Models
from logstitch.models import (
    Actor,
    ActorType,
    Change,
    EventCategory,
    EventContext,
    EventInput,
    EventListParams,
    EventListResponse,
    EventResponse,
    IngestResponse,
    Target,
    ViewerTokenParams,
    ViewerTokenResponse,
)

# Queue & transport
from logstitch.queue import BatchQueue
from logstitch.retry import RetryableStatusError, send_with_retry

__all__ = [
    # Client
    "LogStitch",
    # Configuration
    "ClientConfig",
    "RetryConfig",
    # Errors
    "APIError",
    "ConfigurationError",
    "LogStitchError",
    "TransportError",
    # Models
    "Actor",
    "ActorType",
    "Change",
    "EventCategory",
    "EventContext",
    "EventInput",
    "EventListParams",
    "EventListResponse",
    "EventResponse",
    "IngestResponse",
    "Target",
    "ViewerTokenParams",
    "ViewerTokenResponse",
    # Queue & transport
    "BatchQueue",
    "RetryableStatusError",
    "send_with_retry",
]
