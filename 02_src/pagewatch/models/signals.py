"""Runtime signal records delivered by a signal source."""

import traceback
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit


@dataclass
class Location:
    """Snapshot of the page address."""

    href: str
    pathname: str = "/"
    search: str = ""  # "?q=1" or ""
    hash: str = ""  # "#section" or ""

    @classmethod
    def from_url(cls, url: str) -> "Location":
        """Split an absolute URL into its location parts."""
        parts = urlsplit(url)
        return cls(
            href=url,
            pathname=parts.path or "/",
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
        )


@dataclass
class ElementInfo:
    """The DOM element a click landed on."""

    tag_name: str  # as reported by the DOM, e.g. "BUTTON"
    id: str = ""
    class_name: str = ""  # space separated, as in element.className
    inner_text: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)

    def get_attribute(self, name: str) -> str | None:
        """Return an attribute value, or None when it is not set."""
        return self.attributes.get(name)


@dataclass
class ScriptError:
    """An error object raised inside the page."""

    message: str
    name: str = "Error"
    stack: str | None = None


@dataclass
class ErrorSignal:
    """An uncaught exception reached the global error channel."""

    message: Any  # usually str; the runtime may hand over an event object
    source: str | None = None
    lineno: int | None = None
    colno: int | None = None
    error: ScriptError | BaseException | None = None


@dataclass
class RejectionSignal:
    """A promise or awaitable failed and nobody handled it."""

    reason: Any


@dataclass
class ClickSignal:
    """A click bubbled up to the document."""

    target: ElementInfo | None


@dataclass
class LoadSignal:
    """The page finished loading."""


@dataclass
class HashChangeSignal:
    """The URL fragment changed."""

    old_url: str = ""
    new_url: str = ""


@dataclass
class PopStateSignal:
    """History navigation (back/forward) happened."""

    state: Any = None


@dataclass
class PerformanceEntry:
    """One entry of the page performance timeline."""

    name: str
    entry_type: str  # "paint", "navigation", "mark", ...
    start_time: float = 0.0
    duration: float = 0.0
    load_event_end: float | None = None  # navigation entries only


def describe_error(obj: Any) -> tuple[str, str | None] | None:
    """Return (message, stack) for an error-like object, else None."""
    if isinstance(obj, ScriptError):
        return obj.message, obj.stack
    if isinstance(obj, BaseException):
        stack = "".join(traceback.format_exception(type(obj), obj, obj.__traceback__))
        return str(obj), stack
    return None
