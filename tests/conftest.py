"""
Shared fixtures for LogStitch tests.
"""

import asyncio
import json
from typing import Any, List, Union

import httpx
import pytest

from logstitch.queue import BatchQueue


def make_event(**overrides: Any) -> dict:
    event = {
        "action": "user.created",
        "category": "mutation",
        "actor": {"id": "usr_1", "type": "user"},
        "tenant_id": "tenant_1",
    }
    event.update(overrides)
    return event


class MockServer:
    """
    Callable handler for ``httpx.MockTransport``.

    Each reply is a ``(status, body)`` tuple or an exception instance. Replies
    are consumed in order; the last one repeats. Every request is recorded.
    """

    def __init__(self, *replies: Union[tuple, Exception]):
        self.replies = list(replies) or [(200, {})]
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        status, body = reply
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def body(self, index: int = 0) -> Any:
        return json.loads(self.requests[index].content)


async def wait_for_background(queue: BatchQueue) -> None:
    """Wait until every background flush started by the queue has finished."""
    while queue._tasks:
        await asyncio.gather(*list(queue._tasks), return_exceptions=True)
    await asyncio.sleep(0)


INGEST_OK = (201, {"ids": ["evt_1"], "redacted_count": 0, "request_id": "req_1"})
LIST_OK = (200, {"events": [], "cursor": None, "has_more": False, "request_id": "req_1"})
VALIDATION_ERROR = (400, {"error": {"code": "validation_error", "message": "bad input"}, "request_id": "req_1"})


@pytest.fixture
def event() -> dict:
    return make_event()


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv("LOGSTITCH_PROJECT_KEY", raising=False)
    monkeypatch.delenv("LOGSTITCH_BASE_URL", raising=False)
