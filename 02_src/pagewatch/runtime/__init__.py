"""Runtime signal sources."""

from .fake import FakeSignalSource
from .playwright_source import PlaywrightSignalSource, launch_page
from .source import (
    Channel,
    ChannelRegistry,
    ISignalSource,
    SignalHandler,
    Subscription,
)

__all__ = [
    "Channel",
    "ChannelRegistry",
    "FakeSignalSource",
    "ISignalSource",
    "PlaywrightSignalSource",
    "SignalHandler",
    "Subscription",
    "launch_page",
]
