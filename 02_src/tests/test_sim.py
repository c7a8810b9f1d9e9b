"""Tests for the page session simulator."""

import asyncio
import logging

import httpx
import pytest
import pytest_asyncio

from pagewatch.api import create_fastapi_app
from sim import Sim


@pytest_asyncio.fixture
async def sink_client():
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=create_fastapi_app()))
    yield client
    await client.aclose()


@pytest.mark.asyncio
async def test_scenario_reports_every_step(sink_client, caplog):
    """Test that a full scripted session lands in the sink."""
    sim = Sim(api_url="http://sink.test", delay=(0, 0), client=sink_client)

    with caplog.at_level(logging.INFO, logger="pagewatch.api.routes.report"):
        await sim.start()
        await asyncio.wait_for(sim._task, timeout=5)
        await sim.stop()

    assert sim.reporter.failure_count == 0
    assert sim.reporter.sent_count == 11
    received = {
        r.context.get("eventType")
        for r in caplog.records
        if r.name == "pagewatch.api.routes.report"
    }
    assert received == {
        "performanceMetrics",
        "searchOperation",
        "click",
        "navigation",
        "apiCall",
        "custom",
        "error",
    }
    assert sim.source.console_errors == []


@pytest.mark.asyncio
async def test_start_twice_runs_once(sink_client):
    """Test that a second start() keeps the running task."""
    sim = Sim(api_url="http://sink.test", delay=(0, 0), client=sink_client)

    await sim.start()
    task = sim._task
    await sim.start()

    assert sim._task is task
    await sim.stop()


@pytest.mark.asyncio
async def test_stop_before_start():
    """Test that stop() before start() is a no-op."""
    sim = Sim()

    await sim.stop()

    assert sim.reporter is None
