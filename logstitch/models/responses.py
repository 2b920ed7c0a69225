"""
Request & Response Models
=========================
Models for the query and viewer-token endpoints and the ingest response.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .event_types import ActorType, EventCategory
from .events import Actor, Change, EventContext, Target


class IngestResponse(BaseModel):
    ids: List[str]
    redacted_count: int = 0
    request_id: str = ""


class EventResponse(BaseModel):
    """A stored event as returned by ``GET /api/v1/events``."""
    id: str
    action: str
    category: EventCategory
    actor: Actor
    tenant_id: str
    target: Optional[Target] = None
    context: Optional[EventContext] = None
    metadata: Optional[Dict[str, Any]] = None
    changes: Optional[List[Change]] = None
    content_hash: str
    idempotency_key: Optional[str] = None
    occurred_at: datetime
    received_at: datetime


class EventListResponse(BaseModel):
    events: List[EventResponse]
    cursor: Optional[str] = None
    has_more: bool = False
    request_id: str = ""


class EventListParams(BaseModel):
    """Filters for listing events. Unset filters are left out of the query."""
    tenant_id: Optional[str] = None
    actor_id: Optional[str] = None
    actor_type: Optional[ActorType] = None
    action: Optional[str] = None
    category: Optional[EventCategory] = None
    target_id: Optional[str] = None
    target_type: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    search: Optional[str] = None
    cursor: Optional[str] = None
    limit: Optional[int] = None

    def to_query(self) -> Dict[str, str]:
        """Render the filters as query-string pairs, skipping unset ones."""
        values = self.model_dump(mode="json", exclude_none=True)
        return {key: str(value) for key, value in values.items()}


class ViewerTokenParams(BaseModel):
    tenant_id: str
    tier: Optional[str] = None
    expires_in: Optional[int] = None


class ViewerTokenResponse(BaseModel):
    token: str
    expires_at: datetime
    request_id: str = ""
