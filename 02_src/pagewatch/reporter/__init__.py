"""Reporter module."""

from .reporter import EventReporter, FailureHook, IEventReporter

__all__ = ["EventReporter", "FailureHook", "IEventReporter"]
