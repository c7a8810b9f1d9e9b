"""pagewatch: best-effort page telemetry collector."""

from .collector import ISignalCollector, SignalCollector
from .models import (
    ApiCallEvent,
    ClickEvent,
    CustomEvent,
    ElementInfo,
    ErrorEvent,
    Event,
    Location,
    NavigationEvent,
    PerformanceEntry,
    PerformanceMetricsEvent,
    ScriptError,
    SearchOperationEvent,
)
from .reporter import EventReporter, IEventReporter
from .runtime import (
    Channel,
    FakeSignalSource,
    ISignalSource,
    PlaywrightSignalSource,
    Subscription,
)

__version__ = "0.1.0"

__all__ = [
    # Collector
    "ISignalCollector",
    "SignalCollector",
    # Models
    "Event",
    "ClickEvent",
    "PerformanceMetricsEvent",
    "NavigationEvent",
    "ApiCallEvent",
    "SearchOperationEvent",
    "CustomEvent",
    "ErrorEvent",
    "Location",
    "ElementInfo",
    "ScriptError",
    "PerformanceEntry",
    # Components
    "IEventReporter",
    "EventReporter",
    "Channel",
    "ISignalSource",
    "Subscription",
    "FakeSignalSource",
    "PlaywrightSignalSource",
]
