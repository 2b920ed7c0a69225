"""
API Resources
=============
Pass-through operations for querying events and minting viewer tokens.
"""

from typing import TYPE_CHECKING, Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from .models import EventListParams, EventListResponse, ViewerTokenParams, ViewerTokenResponse

if TYPE_CHECKING:
    from .client import LogStitch

EVENTS_PATH = "/api/v1/events"
VIEWER_TOKENS_PATH = "/api/v1/viewer-tokens"

P = TypeVar("P", bound=BaseModel)


def _build_params(model: Type[P], params: Union[P, Mapping[str, Any], None], extra: Mapping[str, Any]) -> P:
    """Merge a params object or mapping with keyword overrides and validate."""
    if isinstance(params, BaseModel):
        data = params.model_dump(exclude_none=True)
    else:
        data = dict(params or {})
    data.update(extra)
    return model.model_validate(data)


class EventsResource:
    """Read access to ingested events (``client.events``)."""

    def __init__(self, client: "LogStitch"):
        self._client = client

    async def list(
        self,
        params: Union[EventListParams, Mapping[str, Any], None] = None,
        **filters: Any,
    ) -> EventListResponse:
        """
        List events matching the given filters.

        Filters can be passed as an ``EventListParams``, a mapping, keyword
        arguments, or a mix; keywords win. Filters that are ``None`` are left
        out of the query string.

        Usage:
            page = await client.events.list(tenant_id="acme", limit=50)
            while page.has_more:
                page = await client.events.list(tenant_id="acme", cursor=page.cursor)
        """
        query = _build_params(EventListParams, params, filters).to_query()
        return await self._client._request(
            "GET",
            EVENTS_PATH,
            EventListResponse,
            params=query or None,
        )


class ViewerTokensResource:
    """Viewer token minting (``client.viewer_tokens``)."""

    def __init__(self, client: "LogStitch"):
        self._client = client

    async def create(
        self,
        params: Union[ViewerTokenParams, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> ViewerTokenResponse:
        """Create a short-lived, tenant-scoped, read-only token for the viewer component."""
        body = _build_params(ViewerTokenParams, params, fields)
        return await self._client._request(
            "POST",
            VIEWER_TOKENS_PATH,
            ViewerTokenResponse,
            json=body.model_dump(mode="json", exclude_none=True),
        )
