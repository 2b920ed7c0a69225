"""
LogStitch Client
================
Facade that queues audit events and delivers them to the ingestion service.

Usage:
    from logstitch import LogStitch

    async with LogStitch(project_key="pk_live_...") as client:
        await client.log({
            "action": "user.created",
            "category": "mutation",
            "actor": {"id": "usr_1", "type": "user"},
            "tenant_id": "acme",
        })
"""

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel

from . import __version__
from .config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_FLUSH_INTERVAL,
    DEFAULT_MAX_QUEUE_SIZE,
    ClientConfig,
    ErrorCallback,
    RetryConfig,
)
from .errors import APIError, TransportError
from .models import EventInput, EventLike, IngestResponse, coerce_event
from .queue import BatchQueue
from .resources import EVENTS_PATH, EventsResource, ViewerTokensResource
from .retry import RetryableStatusError, send_with_retry

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class LogStitch:
    """
    Async client for the LogStitch audit log service.

    ``log()`` is fire-and-forget: events are buffered and delivered in the
    background, and delivery failures go to ``on_error`` (or are raised when
    ``strict`` is set). ``log_batch()`` sends immediately and raises on
    failure.

    Events queued with ``log()`` are lost if delivery fails in non-strict
    mode without an ``on_error`` callback, if the queue overflows, or if the
    process exits before ``close()``.
    """

    def __init__(
        self,
        project_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE,
        strict: bool = False,
        on_error: Optional[ErrorCallback] = None,
        retry: Optional[RetryConfig] = None,
        timeout: Optional[float] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if config is None:
            # None means "use the environment or default"
            overrides = {"project_key": project_key, "base_url": base_url, "retry": retry}
            config = ClientConfig(
                batch_size=batch_size,
                flush_interval=flush_interval,
                max_queue_size=max_queue_size,
                strict=strict,
                on_error=on_error,
                timeout=timeout,
                **{k: v for k, v in overrides.items() if v is not None},
            )
        self.config = config

        client_kwargs: Dict[str, Any] = {
            "headers": {
                "Authorization": config.auth_header,
                "Accept": "application/json",
                "User-Agent": f"logstitch-python/{__version__}",
            },
            "transport": transport,
        }
        if config.timeout is not None:
            client_kwargs["timeout"] = config.timeout
        self._http = httpx.AsyncClient(**client_kwargs)

        self._queue = BatchQueue(
            on_flush=self._send_queued,
            batch_size=config.batch_size,
            flush_interval=config.flush_interval,
            max_queue_size=config.max_queue_size,
        )

        self.events = EventsResource(self)
        self.viewer_tokens = ViewerTokensResource(self)

    async def __aenter__(self) -> "LogStitch":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    @property
    def queue_size(self) -> int:
        return self._queue.size

    # Public API

    async def log(self, event: EventLike) -> None:
        """Queue an event for background delivery. Never raises unless strict."""
        try:
            self._queue.enqueue(event)
        except Exception as e:
            self._handle_error(e)

    async def log_batch(self, events: Sequence[EventLike]) -> IngestResponse:
        """
        Send events immediately, bypassing the queue.

        Raises:
            APIError: If the service rejects the request or keeps failing
            TransportError: If the service could not be reached
        """
        batch = [coerce_event(event).with_idempotency_key() for event in events]
        return await self._send_events(batch)

    async def flush(self) -> None:
        """Deliver everything queued so far."""
        await self._queue.flush()

    async def close(self) -> None:
        """Stop the flush timer, deliver remaining events and release the HTTP client."""
        try:
            await self._queue.close()
        finally:
            await self._http.aclose()

    # Internals

    async def _send_queued(self, events: List[EventInput]) -> None:
        try:
            await self._send_events(events)
        except Exception as e:
            self._handle_error(e)

    async def _send_events(self, events: List[EventInput]) -> IngestResponse:
        payloads = [event.to_payload() for event in events]
        body = payloads[0] if len(payloads) == 1 else payloads
        return await self._request("POST", EVENTS_PATH, IngestResponse, json=body)

    async def _request(self, method: str, path: str, response_model: Type[T], **kwargs: Any) -> T:
        """Send a request through the retrying transport and parse the response."""
        url = f"{self.config.base_url}{path}"

        try:
            response = await send_with_retry(self._http, method, url, retry=self.config.retry, **kwargs)
        except RetryableStatusError as e:
            raise APIError.from_response(e.response) from e
        except httpx.TransportError as e:
            raise TransportError(f"Failed to reach LogStitch: {e}", url=url) from e

        if not response.is_success:
            raise APIError.from_response(response)

        try:
            return response_model.model_validate(response.json())
        except ValueError as e:
            # JSONDecodeError and pydantic ValidationError are both ValueErrors
            raise APIError(
                f"Unexpected response body: {e}",
                status=response.status_code,
                code="invalid_response",
            ) from e

    def _handle_error(self, error: Exception) -> None:
        if self.config.strict:
            raise error

        if self.config.on_error is None:
            logger.debug("Dropping LogStitch error, no on_error callback", error=str(error))
            return

        try:
            self.config.on_error(error)
        except Exception:
            logger.exception("LogStitch on_error callback raised")
