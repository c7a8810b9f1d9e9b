"""Data models for pagewatch."""

from .events import (
    ApiCallEvent,
    ClickEvent,
    CustomEvent,
    ErrorEvent,
    Event,
    NavigationEvent,
    PerformanceMetricsEvent,
    SearchOperationEvent,
    now_iso,
)
from .signals import (
    ClickSignal,
    ElementInfo,
    ErrorSignal,
    HashChangeSignal,
    LoadSignal,
    Location,
    PerformanceEntry,
    PopStateSignal,
    RejectionSignal,
    ScriptError,
    describe_error,
)

__all__ = [
    # Events
    "Event",
    "ClickEvent",
    "PerformanceMetricsEvent",
    "NavigationEvent",
    "ApiCallEvent",
    "SearchOperationEvent",
    "CustomEvent",
    "ErrorEvent",
    "now_iso",
    # Signals
    "Location",
    "ElementInfo",
    "ScriptError",
    "ErrorSignal",
    "RejectionSignal",
    "ClickSignal",
    "LoadSignal",
    "HashChangeSignal",
    "PopStateSignal",
    "PerformanceEntry",
    "describe_error",
]
