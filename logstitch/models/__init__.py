"""
LogStitch Models
================
Event inputs, query parameters and API responses.
"""

from .event_types import ActorType, EventCategory
from .events import (
    Actor,
    Change,
    EventContext,
    EventInput,
    EventLike,
    Target,
    coerce_event,
)
from .responses import (
    EventListParams,
    EventListResponse,
    EventResponse,
    IngestResponse,
    ViewerTokenParams,
    ViewerTokenResponse,
)

__all__ = [
    # Enums
    "ActorType",
    "EventCategory",
    # Events
    "Actor",
    "Change",
    "EventContext",
    "EventInput",
    "EventLike",
    "Target",
    "coerce_event",
    # Queries & responses
    "EventListParams",
    "EventListResponse",
    "EventResponse",
    "IngestResponse",
    "ViewerTokenParams",
    "ViewerTokenResponse",
]
