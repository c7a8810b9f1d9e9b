"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import Mock

import httpx
import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

ENDPOINT = "http://sink.test/report"


@pytest.fixture
def source():
    """Fake page at /cart."""
    from pagewatch.runtime import FakeSignalSource

    return FakeSignalSource("http://shop.local/cart")


@pytest.fixture
def mock_reporter():
    """Reporter that only records what it was handed."""
    reporter = Mock()
    reporter.report = Mock(return_value=None)
    return reporter


@pytest.fixture
def collector(source, mock_reporter):
    """Initialized collector wired to the fake page and mock reporter."""
    from pagewatch.collector import SignalCollector

    c = SignalCollector(ENDPOINT, source, reporter=mock_reporter)
    c.init()
    return c


@pytest.fixture
def reported(mock_reporter):
    """Payloads handed to the mock reporter so far."""

    def _payloads() -> list[dict]:
        return [call.args[0].to_payload() for call in mock_reporter.report.call_args_list]

    return _payloads


@pytest.fixture
def sink_requests():
    """Requests captured by the recording transport."""
    return []


@pytest.fixture
def recording_transport(sink_requests):
    """httpx transport acknowledging every request with 200."""

    def handler(request: httpx.Request) -> httpx.Response:
        sink_requests.append(request)
        return httpx.Response(200, json={"status": "received"})

    return httpx.MockTransport(handler)


@pytest_asyncio.fixture
async def http_client(recording_transport):
    """AsyncClient over the recording transport."""
    client = httpx.AsyncClient(transport=recording_transport)
    yield client
    await client.aclose()
