"""Signal source abstraction: the page runtime a collector listens to."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Protocol

from ..logging_config import get_logger
from ..models import Location, PerformanceEntry

logger = get_logger(__name__)


class Channel(str, Enum):
    """Observable runtime channels."""

    ERROR = "error"
    UNHANDLED_REJECTION = "unhandledrejection"
    CLICK = "click"
    LOAD = "load"
    HASH_CHANGE = "hashchange"
    POP_STATE = "popstate"


SignalHandler = Callable[[Any], Any]


@dataclass(eq=False)
class Subscription:
    """Handle for one handler registration."""

    channel: Channel
    handler: SignalHandler
    _registry: "ChannelRegistry | None" = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._registry is not None

    def detach(self) -> None:
        """Remove this registration. Safe to call more than once."""
        if self._registry is None:
            return
        self._registry._remove(self)
        self._registry = None


class ISignalSource(Protocol):
    """Capability interface over the page runtime."""

    def subscribe(self, channel: Channel, handler: SignalHandler) -> Subscription:
        """Register a handler for a channel."""
        ...

    @property
    def location(self) -> Location:
        """Current page address."""
        ...

    @property
    def has_performance_timeline(self) -> bool:
        """Whether performance timeline reads are supported."""
        ...

    async def get_entries_by_type(self, entry_type: str) -> list[PerformanceEntry]:
        """Timeline entries of one type ("paint", "navigation", ...)."""
        ...

    async def get_entries_by_name(self, name: str) -> list[PerformanceEntry]:
        """Timeline entries with the given name."""
        ...


class ChannelRegistry:
    """Per-channel handler lists shared by the signal source variants."""

    def __init__(self):
        self._subscribers: dict[Channel, list[Subscription]] = {
            channel: [] for channel in Channel
        }

    def subscribe(self, channel: Channel, handler: SignalHandler) -> Subscription:
        """Register a handler for a channel."""
        subscription = Subscription(channel=channel, handler=handler, _registry=self)
        self._subscribers[channel].append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        handlers = self._subscribers[subscription.channel]
        if subscription in handlers:
            handlers.remove(subscription)

    def subscriber_count(self, channel: Channel) -> int:
        return len(self._subscribers[channel])

    def dispatch(self, channel: Channel, signal: Any) -> list[Any]:
        """Call every handler of a channel; returns their results.

        A failing handler is logged and skipped.
        """
        results = []
        for subscription in list(self._subscribers[channel]):
            try:
                results.append(subscription.handler(signal))
            except Exception as e:
                logger.error("Error in %s handler: %s", channel.value, e)
        return results
