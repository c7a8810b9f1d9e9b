"""Integration tests: fake page -> collector -> reporter -> sink."""

import asyncio
import logging

import httpx
import pytest
import pytest_asyncio

from pagewatch.api import create_fastapi_app
from pagewatch.collector import SignalCollector
from pagewatch.models import ElementInfo, ScriptError
from pagewatch.reporter import EventReporter
from pagewatch.runtime import FakeSignalSource

ENDPOINT = "http://sink.test/report"


@pytest_asyncio.fixture
async def sink_client():
    """AsyncClient routed in-process to the sink app."""
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=create_fastapi_app()))
    yield client
    await client.aclose()


@pytest.mark.asyncio
async def test_page_session_reaches_sink(sink_client, caplog):
    """Test end-to-end flow for every event variant."""
    source = FakeSignalSource("http://shop.local/products")
    reporter = EventReporter(ENDPOINT, client=sink_client)
    collector = SignalCollector(ENDPOINT, source, reporter=reporter)
    collector.init()

    with caplog.at_level(logging.INFO, logger="pagewatch.api.routes.report"):
        source.add_entry("first-contentful-paint", "paint", 210.0)
        source.finish_load()
        await asyncio.sleep(0.01)

        source.click(ElementInfo(tag_name="BUTTON", id="buy", inner_text="Buy now"))
        source.set_hash("details")
        source.go_back("/products?sort=price")
        source.raise_error("x is not defined", "app.js", 42, 7)
        source.reject(ScriptError(message="fetch failed"))
        collector.report_custom_event("wishlist_add", {"sku": "TR-3"})
        collector.track_search_operation("trail", 4)

        async def api():
            return "ok"

        assert await collector.monitor_api_call(api(), "GET /api/stock") == "ok"
        await asyncio.sleep(0)
        await reporter.drain()

    assert reporter.failure_count == 0
    assert reporter.sent_count == 9

    received = [
        r.context.get("eventType")
        for r in caplog.records
        if r.name == "pagewatch.api.routes.report"
    ]
    assert sorted(received) == sorted(
        [
            "performanceMetrics",
            "click",
            "navigation",
            "navigation",
            "error",
            "error",
            "custom",
            "searchOperation",
            "apiCall",
        ]
    )


@pytest.mark.asyncio
async def test_unreachable_sink_is_invisible_to_host(caplog):
    """Test that a dead endpoint never surfaces to collector callers."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    failures = []
    reporter = EventReporter(ENDPOINT, client=client, on_failure=lambda p, e: failures.append(p))
    source = FakeSignalSource("http://shop.local/")
    collector = SignalCollector(ENDPOINT, source, reporter=reporter)
    collector.init()

    with caplog.at_level(logging.ERROR, logger="pagewatch.reporter.reporter"):
        collector.report_custom_event("lost", {})
        source.click(ElementInfo(tag_name="A"))
        await reporter.drain()

    assert reporter.failure_count == 2
    assert sorted(p["eventType"] for p in failures) == ["click", "custom"]
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 2
    await client.aclose()
