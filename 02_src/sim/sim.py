"""SIM implementation - scripted page session for exercising the sink."""

import asyncio
import random
from typing import Protocol

import httpx

from pagewatch.collector import SignalCollector
from pagewatch.logging_config import get_logger
from pagewatch.models import ElementInfo, ScriptError
from pagewatch.reporter import EventReporter
from pagewatch.runtime import FakeSignalSource

logger = get_logger(__name__)


class ISim(Protocol):
    """Generate page telemetry. Hardcoded shop scenario."""

    async def start(self) -> None:
        """Start the scenario."""
        ...

    async def stop(self) -> None:
        """Stop the scenario."""
        ...


class Sim:
    """Drives a FakeSignalSource through a shopping session."""

    def __init__(
        self,
        api_url: str = "http://localhost:3000",
        page_url: str = "http://shop.local/",
        delay: tuple[float, float] = (0.2, 1.0),
        client: httpx.AsyncClient | None = None,
    ):
        self._api_url = api_url
        self._client = client
        self._page_url = page_url
        self._delay = delay
        self._running = False
        self._task: asyncio.Task | None = None
        self._reporter: EventReporter | None = None
        self._source: FakeSignalSource | None = None

    @property
    def source(self) -> FakeSignalSource | None:
        return self._source

    @property
    def reporter(self) -> EventReporter | None:
        return self._reporter

    async def start(self) -> None:
        """Start the scenario in the background."""
        if self._running:
            return

        self._running = True
        endpoint = f"{self._api_url}/report"
        self._source = FakeSignalSource(self._page_url)
        self._reporter = EventReporter(endpoint, client=self._client)
        collector = SignalCollector(endpoint, self._source, reporter=self._reporter)
        collector.init()

        self._task = asyncio.create_task(self._run_scenario(collector))

    async def stop(self) -> None:
        """Stop the scenario and flush in-flight reports."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._reporter:
            await self._reporter.aclose()

    async def _pause(self) -> None:
        await asyncio.sleep(random.uniform(*self._delay))

    async def _run_scenario(self, collector: SignalCollector) -> None:
        """Run hardcoded scenario."""
        source = self._source
        assert source is not None

        try:
            # Page load with a settled timeline
            source.navigate("/products?category=shoes")
            source.add_entry("first-paint", "paint", 112.4)
            source.add_entry("first-contentful-paint", "paint", 187.9)
            source.add_entry("document", "navigation", 0.0, load_event_end=842.3)
            source.finish_load()
            await self._pause()

            search_results = 24
            collector.track_search_operation("running shoes", search_results)
            await self._pause()

            source.click(
                ElementInfo(
                    tag_name="A",
                    class_name="product-card",
                    inner_text="Trail Runner 3 - lightweight trail running shoe with reinforced toe cap",
                    attributes={"data-tracking-id": "product-42"},
                )
            )
            source.set_hash("reviews")
            await self._pause()

            await collector.monitor_api_call(self._fake_api(0.15), "GET /api/cart")
            source.click(
                ElementInfo(
                    tag_name="BUTTON",
                    id="buy",
                    class_name="btn-primary",
                    inner_text="Buy now",
                    attributes={"data-tracking-id": "cta-1"},
                )
            )
            collector.report_custom_event("checkout_started", {"items": 1, "currency": "EUR"})
            await self._pause()

            try:
                await collector.monitor_api_call(
                    self._fake_api(0.3, fail="Payment gateway timeout"), "POST /api/pay"
                )
            except RuntimeError:
                source.reject(ScriptError(message="Payment gateway timeout"))
            source.raise_error("x is not defined", "app.js", 42, 7)
            await self._pause()

            source.go_back("/products?category=shoes")
            logger.info("SIM: scenario finished")

        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False

    @staticmethod
    async def _fake_api(latency: float, fail: str | None = None) -> dict:
        """Stand-in for a host application API call."""
        await asyncio.sleep(latency)
        if fail:
            raise RuntimeError(fail)
        return {"items": 1}
