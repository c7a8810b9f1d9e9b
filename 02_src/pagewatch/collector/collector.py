"""SignalCollector: turns page runtime signals into telemetry events."""

import asyncio
import time
from typing import Any, Awaitable, Protocol, TypeVar

from ..config import resolve_endpoint
from ..logging_config import get_logger
from ..models import (
    ApiCallEvent,
    ClickEvent,
    ClickSignal,
    CustomEvent,
    ElementInfo,
    ErrorEvent,
    ErrorSignal,
    Event,
    NavigationEvent,
    PerformanceMetricsEvent,
    RejectionSignal,
    SearchOperationEvent,
    describe_error,
)
from ..reporter import EventReporter, IEventReporter
from ..runtime import Channel, ISignalSource, Subscription

logger = get_logger(__name__)

T = TypeVar("T")

UNKNOWN_ERROR = "Unknown error"
UNHANDLED_REJECTION = "Unhandled promise rejection"
TRACKING_ATTRIBUTE = "data-tracking-id"
TTI_ENTRY_NAME = "TTI"


class ISignalCollector(Protocol):
    """Host application API of the collector."""

    def init(self) -> None:
        """Subscribe to every runtime channel (once)."""
        ...

    def report_custom_event(self, event_name: str, event_data: Any) -> None:
        """Report a free-form event."""
        ...

    def monitor_api_call(self, api_call: Awaitable[T], api_name: str) -> "asyncio.Future[T]":
        """Time an API call and report its outcome."""
        ...

    def track_search_operation(self, search_term: str, results_count: int) -> None:
        """Report a search and its result count."""
        ...


def describe_target(element: ElementInfo) -> str:
    """TAG#id.class1.class2 description of a clicked element."""
    detail = element.tag_name
    if element.id:
        detail += f"#{element.id}"
    classes = element.class_name.split() if element.class_name else []
    if classes:
        detail += "." + ".".join(classes)
    return detail


class SignalCollector:
    """Collects errors, clicks, navigation and load metrics from a page."""

    def __init__(
        self,
        endpoint: str,
        source: ISignalSource,
        *,
        reporter: IEventReporter | None = None,
    ):
        self._endpoint = resolve_endpoint(endpoint)
        self._source = source
        self._reporter = reporter if reporter is not None else EventReporter(self._endpoint)
        self._subscriptions: list[Subscription] = []
        self._tasks: set[asyncio.Task] = set()
        self._active = False

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def reporter(self) -> IEventReporter:
        return self._reporter

    @property
    def active(self) -> bool:
        return self._active

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        return tuple(self._subscriptions)

    def init(self) -> None:
        """Subscribe to every runtime channel. Later calls are no-ops."""
        if self._active:
            logger.warning("SignalCollector already initialized, ignoring init()")
            return

        handlers = {
            Channel.LOAD: self._handle_load,
            Channel.ERROR: self._handle_error,
            Channel.UNHANDLED_REJECTION: self._handle_rejection,
            Channel.CLICK: self._handle_click,
            Channel.HASH_CHANGE: self._handle_hash_change,
            Channel.POP_STATE: self._handle_pop_state,
        }
        for channel, handler in handlers.items():
            self._subscriptions.append(self._source.subscribe(channel, handler))

        self._active = True
        logger.info("SignalCollector initialized, reporting to %s", self._endpoint)

    # Signal handlers

    def _handle_error(self, signal: ErrorSignal) -> bool:
        """Report an uncaught exception; True suppresses default surfacing."""
        try:
            message = signal.message if isinstance(signal.message, str) else UNKNOWN_ERROR
            described = describe_error(signal.error) if signal.error is not None else None
            self._report(
                ErrorEvent(
                    message=message,
                    source=signal.source,
                    lineno=signal.lineno or 0,
                    colno=signal.colno or 0,
                    stack=described[1] if described else None,
                )
            )
        except Exception as e:
            logger.error("Error capturing uncaught exception: %s", e)
        return True

    def _handle_rejection(self, signal: RejectionSignal) -> None:
        try:
            described = describe_error(signal.reason)
            self._report(
                ErrorEvent(
                    message=described[0] if described else UNHANDLED_REJECTION,
                    source=self._source.location.href,
                    lineno=0,
                    colno=0,
                    stack=described[1] if described else None,
                )
            )
        except Exception as e:
            logger.error("Error capturing unhandled rejection: %s", e)

    def _handle_click(self, signal: ClickSignal) -> None:
        target = signal.target
        if target is None:
            return
        try:
            self._report(
                ClickEvent(
                    target=describe_target(target),
                    text=target.inner_text or "",
                    tracking_id=target.get_attribute(TRACKING_ATTRIBUTE),
                    page=self._source.location.pathname,
                )
            )
        except Exception as e:
            logger.error("Error capturing click: %s", e)

    def _handle_hash_change(self, signal: Any) -> None:
        try:
            location = self._source.location
            self._report(NavigationEvent(page=location.pathname + location.hash))
        except Exception as e:
            logger.error("Error capturing hash change: %s", e)

    def _handle_pop_state(self, signal: Any) -> None:
        try:
            location = self._source.location
            self._report(NavigationEvent(page=location.pathname + location.search))
        except Exception as e:
            logger.error("Error capturing history change: %s", e)

    def _handle_load(self, signal: Any) -> None:
        """Schedule the metrics read for the next loop turn."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("No running event loop, performance metrics skipped")
            return
        task = loop.create_task(self._capture_performance_metrics())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _capture_performance_metrics(self) -> None:
        # Let the timeline settle: paint/navigation entries land after load
        await asyncio.sleep(0)

        try:
            if not self._source.has_performance_timeline:
                logger.debug("No performance timeline, metrics skipped")
                return

            paint = await self._source.get_entries_by_type("paint")
            navigation = await self._source.get_entries_by_type("navigation")
            tti = await self._source.get_entries_by_name(TTI_ENTRY_NAME)

            metrics: dict[str, float] = {}
            fcp = next((e for e in paint if e.name == "first-contentful-paint"), None)
            fp = next((e for e in paint if e.name == "first-paint"), None)
            if fcp is not None:
                metrics["fcp"] = fcp.start_time
            if fp is not None:
                metrics["fp"] = fp.start_time
            if navigation and navigation[0].load_event_end is not None:
                metrics["loadTime"] = navigation[0].load_event_end - navigation[0].start_time
            if tti:
                metrics["tti"] = tti[0].start_time

            self._report(PerformanceMetricsEvent(metrics=metrics))
        except Exception as e:
            logger.error("Error capturing performance metrics: %s", e)

    # Host application API

    def report_custom_event(self, event_name: str, event_data: Any) -> None:
        """Report a free-form event with the current page path."""
        try:
            self._report(
                CustomEvent(
                    event_name=event_name,
                    event_data=event_data,
                    page=self._source.location.pathname,
                )
            )
        except Exception as e:
            logger.error("Error reporting custom event %s: %s", event_name, e)

    def track_search_operation(self, search_term: str, results_count: int) -> None:
        """Report a search operation right away."""
        try:
            self._report(
                SearchOperationEvent(search_term=search_term, results_count=results_count)
            )
        except Exception as e:
            logger.error("Error tracking search operation: %s", e)

    def monitor_api_call(self, api_call: Awaitable[T], api_name: str) -> "asyncio.Future[T]":
        """Time ``api_call`` and report an apiCall event when it settles.

        Returns a future for the same call: awaiting it yields exactly the
        call's result or raises exactly its exception. Passing a Task or
        Future returns that very object.
        """
        start = time.perf_counter()
        try:
            future = asyncio.ensure_future(api_call)
        except (TypeError, RuntimeError) as e:
            logger.error("Cannot monitor API call %s: %s", api_name, e)
            return api_call  # type: ignore[return-value]

        def _on_done(fut: "asyncio.Future[T]") -> None:
            duration = (time.perf_counter() - start) * 1000
            error: str | None = None
            if fut.cancelled():
                error = "cancelled"
            else:
                exc = fut.exception()
                if exc is not None:
                    error = str(exc) or type(exc).__name__
            try:
                self._report(
                    ApiCallEvent(
                        api_name=api_name,
                        duration=duration,
                        success=error is None,
                        error=error,
                        page=self._source.location.pathname,
                    )
                )
            except Exception as e:
                logger.error("Error reporting API call %s: %s", api_name, e)

        future.add_done_callback(_on_done)
        return future

    def _report(self, event: Event) -> None:
        self._reporter.report(event)
