"""In-process signal source for tests and simulated page sessions."""

from typing import Any
from urllib.parse import urljoin

from ..models import (
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
)
from .source import Channel, ChannelRegistry


class FakeSignalSource(ChannelRegistry):
    """Simulated page: fires signals on demand, holds a scripted timeline."""

    def __init__(
        self,
        url: str = "http://localhost/",
        *,
        performance_timeline: bool = True,
    ):
        super().__init__()
        self._location = Location.from_url(url)
        self._performance_timeline = performance_timeline
        self._entries: list[PerformanceEntry] = []
        # Errors no handler suppressed, as the browser console would show them
        self.console_errors: list[ErrorSignal] = []

    @property
    def location(self) -> Location:
        return self._location

    @property
    def has_performance_timeline(self) -> bool:
        return self._performance_timeline

    async def get_entries_by_type(self, entry_type: str) -> list[PerformanceEntry]:
        return [e for e in self._entries if e.entry_type == entry_type]

    async def get_entries_by_name(self, name: str) -> list[PerformanceEntry]:
        return [e for e in self._entries if e.name == name]

    # Timeline

    def add_entry(
        self,
        name: str,
        entry_type: str,
        start_time: float = 0.0,
        *,
        duration: float = 0.0,
        load_event_end: float | None = None,
    ) -> PerformanceEntry:
        """Append an entry to the performance timeline."""
        entry = PerformanceEntry(
            name=name,
            entry_type=entry_type,
            start_time=start_time,
            duration=duration,
            load_event_end=load_event_end,
        )
        self._entries.append(entry)
        return entry

    def clear_entries(self) -> None:
        self._entries.clear()

    # Signals

    def navigate(self, url: str) -> None:
        """Change the address silently (no signal), like a full page load."""
        self._location = Location.from_url(urljoin(self._location.href, url))

    def finish_load(self) -> None:
        """Fire the load-completion signal."""
        self.dispatch(Channel.LOAD, LoadSignal())

    def set_hash(self, fragment: str) -> None:
        """Change the URL fragment and fire hashchange."""
        old_url = self._location.href
        base = old_url.split("#", 1)[0]
        fragment = fragment.lstrip("#")
        self._location = Location.from_url(f"{base}#{fragment}" if fragment else base)
        self.dispatch(
            Channel.HASH_CHANGE,
            HashChangeSignal(old_url=old_url, new_url=self._location.href),
        )

    def pop_state(self, url: str, state: Any = None) -> None:
        """Move to a history entry and fire popstate."""
        self.navigate(url)
        self.dispatch(Channel.POP_STATE, PopStateSignal(state=state))

    def go_back(self, url: str) -> None:
        """Back button to a previous URL."""
        self.pop_state(url)

    def click(self, element: ElementInfo | None) -> None:
        """Click an element (None: a click with no target)."""
        self.dispatch(Channel.CLICK, ClickSignal(target=element))

    def raise_error(
        self,
        message: Any,
        source: str | None = None,
        lineno: int | None = None,
        colno: int | None = None,
        error: ScriptError | BaseException | None = None,
    ) -> bool:
        """Fire an uncaught exception; returns True if a handler suppressed it."""
        signal = ErrorSignal(
            message=message, source=source, lineno=lineno, colno=colno, error=error
        )
        suppressed = any(self.dispatch(Channel.ERROR, signal))
        if not suppressed:
            self.console_errors.append(signal)
        return suppressed

    def reject(self, reason: Any) -> None:
        """Fire an unhandled rejection."""
        self.dispatch(Channel.UNHANDLED_REJECTION, RejectionSignal(reason=reason))
