"""Signal source bridging a real browser page driven by Playwright."""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterator

from ..logging_config import get_logger
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

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = get_logger(__name__)

BINDING_NAME = "__pagewatch_emit"

# Injected before any page script runs. Every signal carries a location
# snapshot taken inside the page at the moment it fired.
HOOK_SCRIPT = r"""
(() => {
  if (window !== window.top) return;
  if (window.__pagewatch_hooked) return;
  window.__pagewatch_hooked = true;
  const SUPPRESS_ERRORS = __SUPPRESS__;

  function emit(channel, data) {
    try {
      if (!window.__pagewatch_emit) return;
      const l = window.location;
      const loc = {href: l.href, pathname: l.pathname, search: l.search, hash: l.hash};
      window.__pagewatch_emit(channel, Object.assign({location: loc}, data || {}));
    } catch (e) {}
  }
  function describe(err) {
    if (!(err instanceof Error)) return null;
    return {name: err.name, message: err.message, stack: err.stack || null};
  }

  window.addEventListener('error', (ev) => {
    if (ev.target && ev.target !== window) return;
    emit('error', {
      message: typeof ev.message === 'string' ? ev.message : null,
      source: ev.filename || null,
      lineno: ev.lineno || 0,
      colno: ev.colno || 0,
      error: describe(ev.error),
    });
    if (SUPPRESS_ERRORS) ev.preventDefault();
  });

  window.addEventListener('unhandledrejection', (ev) => {
    const err = describe(ev.reason);
    let reason = null;
    if (!err) {
      try { reason = JSON.parse(JSON.stringify(ev.reason)); } catch (e) { reason = String(ev.reason); }
    }
    emit('unhandledrejection', {error: err, reason: reason});
  });

  document.addEventListener('click', (ev) => {
    const t = ev.target;
    if (!t || !t.tagName) { emit('click', {target: null}); return; }
    const attributes = {};
    for (const a of Array.from(t.attributes || [])) attributes[a.name] = a.value;
    emit('click', {target: {
      tagName: t.tagName,
      id: t.id || '',
      className: typeof t.className === 'string' ? t.className : '',
      innerText: t.innerText || '',
      attributes: attributes,
    }});
  }, true);

  window.addEventListener('load', () => emit('load', {}));
  window.addEventListener('hashchange', (ev) => emit('hashchange', {oldURL: ev.oldURL, newURL: ev.newURL}), false);
  window.addEventListener('popstate', (ev) => {
    let state = null;
    try { state = JSON.parse(JSON.stringify(ev.state)); } catch (e) {}
    emit('popstate', {state: state});
  }, false);
})();
"""

ENTRIES_BY_TYPE_SCRIPT = """
(entryType) => performance.getEntriesByType(entryType).map((e) => ({
  name: e.name, entryType: e.entryType, startTime: e.startTime,
  duration: e.duration, loadEventEnd: e.loadEventEnd === undefined ? null : e.loadEventEnd,
}))
"""

ENTRIES_BY_NAME_SCRIPT = """
(name) => performance.getEntriesByName(name).map((e) => ({
  name: e.name, entryType: e.entryType, startTime: e.startTime,
  duration: e.duration, loadEventEnd: e.loadEventEnd === undefined ? null : e.loadEventEnd,
}))
"""

HAS_TIMELINE_SCRIPT = "() => !!(window.performance && 'getEntriesByType' in window.performance)"


def _script_error(data: dict | None) -> ScriptError | None:
    if not data:
        return None
    return ScriptError(
        message=data.get("message") or "",
        name=data.get("name") or "Error",
        stack=data.get("stack"),
    )


def _entry(data: dict) -> PerformanceEntry:
    return PerformanceEntry(
        name=data.get("name", ""),
        entry_type=data.get("entryType", ""),
        start_time=float(data.get("startTime") or 0.0),
        duration=float(data.get("duration") or 0.0),
        load_event_end=data.get("loadEventEnd"),
    )


class PlaywrightSignalSource(ChannelRegistry):
    """Forwards DOM signals of a Playwright page to subscribers."""

    def __init__(self, page: "Page", *, suppress_default_errors: bool = True):
        super().__init__()
        self._page = page
        self._suppress_default_errors = suppress_default_errors
        self._location = Location.from_url(page.url or "about:blank")
        self._performance_timeline = True
        self._attached = False

    @property
    def page(self) -> "Page":
        return self._page

    @property
    def location(self) -> Location:
        return self._location

    @property
    def has_performance_timeline(self) -> bool:
        return self._performance_timeline

    async def attach(self) -> None:
        """Expose the bridge and inject the hook. Call before navigating."""
        if self._attached:
            return
        await self._page.expose_binding(BINDING_NAME, self._on_binding)
        script = HOOK_SCRIPT.replace(
            "__SUPPRESS__", "true" if self._suppress_default_errors else "false"
        )
        await self._page.add_init_script(script)
        self._attached = True

    async def goto(self, url: str) -> None:
        """Navigate the page; the hook is active from the first script on."""
        await self.attach()
        await self._page.goto(url, wait_until="load")

    async def get_entries_by_type(self, entry_type: str) -> list[PerformanceEntry]:
        self._performance_timeline = await self._page.evaluate(HAS_TIMELINE_SCRIPT)
        if not self._performance_timeline:
            return []
        rows = await self._page.evaluate(ENTRIES_BY_TYPE_SCRIPT, entry_type)
        return [_entry(row) for row in rows]

    async def get_entries_by_name(self, name: str) -> list[PerformanceEntry]:
        rows = await self._page.evaluate(ENTRIES_BY_NAME_SCRIPT, name)
        return [_entry(row) for row in rows]

    async def _on_binding(self, source: dict, channel: str, data: dict) -> None:
        # Bindings and init scripts reach every frame; only the top document counts.
        if source.get("frame") is not self._page.main_frame:
            logger.debug("Ignoring %s signal from a child frame", channel)
            return
        await self._on_signal(channel, data)

    async def _on_signal(self, channel: str, data: dict) -> None:
        """JS → Python bridge: one call per DOM signal."""
        location = data.get("location")
        if location:
            self._location = Location(
                href=location.get("href", ""),
                pathname=location.get("pathname", "/"),
                search=location.get("search", ""),
                hash=location.get("hash", ""),
            )

        try:
            signal_channel = Channel(channel)
        except ValueError:
            logger.warning("Unknown signal channel from page: %s", channel)
            return

        self.dispatch(signal_channel, self._build_signal(signal_channel, data))

    def _build_signal(self, channel: Channel, data: dict) -> Any:
        if channel is Channel.ERROR:
            return ErrorSignal(
                message=data.get("message"),
                source=data.get("source"),
                lineno=data.get("lineno"),
                colno=data.get("colno"),
                error=_script_error(data.get("error")),
            )
        if channel is Channel.UNHANDLED_REJECTION:
            error = _script_error(data.get("error"))
            return RejectionSignal(reason=error if error is not None else data.get("reason"))
        if channel is Channel.CLICK:
            target = data.get("target")
            if not target:
                return ClickSignal(target=None)
            return ClickSignal(
                target=ElementInfo(
                    tag_name=target.get("tagName", ""),
                    id=target.get("id", ""),
                    class_name=target.get("className", ""),
                    inner_text=target.get("innerText"),
                    attributes=target.get("attributes") or {},
                )
            )
        if channel is Channel.HASH_CHANGE:
            return HashChangeSignal(
                old_url=data.get("oldURL", ""), new_url=data.get("newURL", "")
            )
        if channel is Channel.POP_STATE:
            return PopStateSignal(state=data.get("state"))
        return LoadSignal()


@asynccontextmanager
async def launch_page(
    *,
    headless: bool = True,
    suppress_default_errors: bool = True,
) -> AsyncIterator[PlaywrightSignalSource]:
    """Launch Chromium and yield an attached source for a fresh page.

    Subscribe (collector.init()) before calling ``source.goto(url)`` so the
    load signal is not missed.
    """
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        try:
            context = await browser.new_context()
            page = await context.new_page()
            source = PlaywrightSignalSource(
                page, suppress_default_errors=suppress_default_errors
            )
            await source.attach()
            yield source
        finally:
            await browser.close()
