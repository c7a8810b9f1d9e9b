"""EventReporter: best-effort JSON transport to the ingestion endpoint."""

import asyncio
import json
from typing import Any, Callable, Protocol

import httpx

from ..logging_config import get_logger
from ..models import Event

logger = get_logger(__name__)


FailureHook = Callable[[dict, BaseException], None]


class IEventReporter(Protocol):
    """Ships one event to the sink. Never raises, never blocks."""

    def report(self, event: Event | dict) -> None:
        """Serialize the event and schedule its POST."""
        ...


class EventReporter:
    """Fire-and-forget reporter built on httpx.AsyncClient.

    At-most-once: a failed send is logged, counted and handed to
    ``on_failure``, then dropped. Events reported after ``aclose()`` are
    dropped the same way.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        on_failure: FailureHook | None = None,
    ):
        self._endpoint = endpoint
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._on_failure = on_failure
        self._tasks: set[asyncio.Task] = set()
        self._closed = False
        self.sent_count = 0
        self.failure_count = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def pending(self) -> int:
        """Number of sends still in flight."""
        return len(self._tasks)

    def report(self, event: Event | dict) -> None:
        """Serialize the event and schedule its POST; returns immediately."""
        payload: dict = {}
        try:
            payload = event if isinstance(event, dict) else event.to_payload()
            body = json.dumps(payload)
        except (AttributeError, TypeError, ValueError) as e:
            self._fail(payload, e, "Error serializing event")
            return

        if self._closed:
            self._fail(payload, RuntimeError("Reporter is closed"), "Reporter closed, event dropped")
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            self._fail(payload, e, "No running event loop, event dropped")
            return

        task = loop.create_task(self._send(payload, body))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _send(self, payload: dict, body: str) -> None:
        """POST one serialized event."""
        if self._client is None:
            self._client = httpx.AsyncClient()

        try:
            response = await self._client.post(
                self._endpoint,
                content=body,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._fail(payload, e, "Error reporting data")
            return
        except Exception as e:
            self._fail(payload, e, "Unexpected error reporting data")
            return

        self.sent_count += 1
        logger.debug("Reported %s event", payload.get("eventType", "unknown"))

    def _fail(self, payload: dict, exc: BaseException, what: str) -> None:
        self.failure_count += 1
        logger.error(
            "%s: %s",
            what,
            exc,
            extra={"context": {"endpoint": self._endpoint, "eventType": payload.get("eventType")}},
        )

        if self._on_failure is None:
            return
        try:
            self._on_failure(payload, exc)
        except Exception as hook_error:
            logger.error("Error in failure hook: %s", hook_error)

    async def drain(self) -> None:
        """Wait until every in-flight send has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Drain, then close the HTTP client if this reporter created it."""
        self._closed = True
        await self.drain()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
