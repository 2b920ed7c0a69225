"""
Event Models
============
Pydantic models for audit events sent to the ingestion service.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from .event_types import ActorType, EventCategory


class Actor(BaseModel):
    """Who performed the action."""
    id: str
    type: ActorType
    name: Optional[str] = None
    email: Optional[str] = None


class Target(BaseModel):
    """What the action was performed on."""
    id: str
    type: str
    name: Optional[str] = None


class Change(BaseModel):
    """A single field change; ``before`` and ``after`` may hold any JSON value."""
    field: str
    before: Any = None
    after: Any = None


class EventContext(BaseModel):
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    location: Optional[str] = None
    session_id: Optional[str] = None


class EventInput(BaseModel):
    """
    An audit event as accepted by ``POST /api/v1/events``.

    Keys the model does not declare are kept and sent as-is.
    """
    model_config = ConfigDict(extra="allow")

    action: str
    category: EventCategory
    actor: Actor
    tenant_id: str
    target: Optional[Target] = None
    context: Optional[EventContext] = None
    metadata: Optional[Dict[str, Any]] = None
    changes: Optional[List[Change]] = None
    idempotency_key: Optional[str] = None
    occurred_at: Optional[datetime] = None

    def with_idempotency_key(self) -> "EventInput":
        """
        Return an event guaranteed to carry an idempotency key.

        Events that already have one are returned unchanged. Otherwise a
        copy with a fresh UUIDv4 is returned; the original is not mutated.
        """
        if self.idempotency_key:
            return self
        return self.model_copy(update={"idempotency_key": str(uuid.uuid4())})

    def to_payload(self) -> Dict[str, Any]:
        """Serialize the fields the caller set, in JSON-compatible form."""
        payload = self.model_dump(mode="json", exclude_unset=True)
        if self.model_extra:
            payload.update(self.model_dump(mode="json", include=set(self.model_extra)))
        return payload


EventLike = Union[EventInput, Mapping[str, Any]]


def coerce_event(event: EventLike) -> EventInput:
    """Validate a mapping into an ``EventInput``; models pass through."""
    if isinstance(event, EventInput):
        return event
    return EventInput.model_validate(event)
