"""Telemetry event models and their wire shape."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

EventType = Literal[
    "click",
    "performanceMetrics",
    "navigation",
    "apiCall",
    "searchOperation",
    "custom",
    "error",
]

MAX_TEXT_LENGTH = 50


def now_iso() -> str:
    """Current wall-clock time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ClickEvent:
    """A tracked user click."""

    target: str  # "BUTTON#buy.btn-primary"
    text: str
    page: str  # pathname only
    tracking_id: str | None = None
    timestamp: str = field(default_factory=now_iso)

    event_type: EventType = field(default="click", init=False)

    def __post_init__(self) -> None:
        self.text = self.text[:MAX_TEXT_LENGTH]

    def to_payload(self) -> dict[str, Any]:
        return {
            "eventType": self.event_type,
            "target": self.target,
            "text": self.text,
            "trackingId": self.tracking_id,
            "timestamp": self.timestamp,
            "page": self.page,
        }


@dataclass
class PerformanceMetricsEvent:
    """Load-performance metrics of one page load, in milliseconds."""

    metrics: dict[str, float]  # absent metrics are left out, never zero-filled

    event_type: EventType = field(default="performanceMetrics", init=False)

    def to_payload(self) -> dict[str, Any]:
        return {
            "eventType": self.event_type,
            "metrics": {k: v for k, v in self.metrics.items() if v is not None},
        }


@dataclass
class NavigationEvent:
    """The page address changed without a reload."""

    page: str
    timestamp: str = field(default_factory=now_iso)

    event_type: EventType = field(default="navigation", init=False)

    def to_payload(self) -> dict[str, Any]:
        return {
            "eventType": self.event_type,
            "page": self.page,
            "timestamp": self.timestamp,
        }


@dataclass
class ApiCallEvent:
    """Outcome and duration of a monitored API call."""

    api_name: str
    duration: float  # milliseconds
    success: bool
    page: str
    error: str | None = None
    timestamp: str = field(default_factory=now_iso)

    event_type: EventType = field(default="apiCall", init=False)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "eventType": self.event_type,
            "apiName": self.api_name,
            "duration": self.duration,
            "success": self.success,
        }
        if not self.success:
            payload["error"] = self.error
        payload["timestamp"] = self.timestamp
        payload["page"] = self.page
        return payload


@dataclass
class SearchOperationEvent:
    """A search the host application ran."""

    search_term: str
    results_count: int
    timestamp: str = field(default_factory=now_iso)

    event_type: EventType = field(default="searchOperation", init=False)

    def to_payload(self) -> dict[str, Any]:
        return {
            "eventType": self.event_type,
            "details": {
                "searchTerm": self.search_term,
                "resultsCount": self.results_count,
                "timestamp": self.timestamp,
            },
        }


@dataclass
class CustomEvent:
    """Free-form event reported by the host application."""

    event_name: str
    event_data: Any  # must be JSON-serializable
    page: str
    timestamp: str = field(default_factory=now_iso)

    event_type: EventType = field(default="custom", init=False)

    def to_payload(self) -> dict[str, Any]:
        return {
            "eventType": self.event_type,
            "eventName": self.event_name,
            "eventData": self.event_data,
            "timestamp": self.timestamp,
            "page": self.page,
        }


@dataclass
class ErrorEvent:
    """An uncaught exception or unhandled rejection in the page."""

    message: str
    source: str | None = None
    lineno: int = 0
    colno: int = 0
    stack: str | None = None

    event_type: EventType = field(default="error", init=False)

    def to_payload(self) -> dict[str, Any]:
        error: dict[str, Any] = {"message": self.message}
        if self.source is not None:
            error["source"] = self.source
        error["lineno"] = self.lineno
        error["colno"] = self.colno
        if self.stack is not None:
            error["stack"] = self.stack
        return {"eventType": self.event_type, "error": error}


Event = (
    ClickEvent
    | PerformanceMetricsEvent
    | NavigationEvent
    | ApiCallEvent
    | SearchOperationEvent
    | CustomEvent
    | ErrorEvent
)
