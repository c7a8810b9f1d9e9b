"""Collector module."""

from .collector import ISignalCollector, SignalCollector, describe_target

__all__ = ["ISignalCollector", "SignalCollector", "describe_target"]
