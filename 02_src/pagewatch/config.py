"""Project-level configuration and path helpers."""

import os
from pathlib import Path
from urllib.parse import urlsplit

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_SINK_HOST = "localhost"
DEFAULT_SINK_PORT = 3000
DEFAULT_REPORT_TIMEOUT = 10.0


def sink_host() -> str:
    """Bind address of the reference ingestion sink."""
    return os.getenv("SINK_HOST", DEFAULT_SINK_HOST)


def sink_port() -> int:
    """Bind port of the reference ingestion sink."""
    return int(os.getenv("SINK_PORT", str(DEFAULT_SINK_PORT)))


def report_timeout() -> float:
    """Per-request timeout for outbound reports, in seconds."""
    return float(os.getenv("REPORT_TIMEOUT", str(DEFAULT_REPORT_TIMEOUT)))


def resolve_endpoint(env_value: str | None = None) -> str:
    """Resolve the destination URL events are POSTed to.

    Falls back to REPORT_ENDPOINT, then to the local sink address.
    Raises ValueError for anything that is not an absolute http(s) URL.
    """
    endpoint = env_value or os.getenv("REPORT_ENDPOINT")
    if not endpoint:
        return f"http://{sink_host()}:{sink_port()}/report"

    parts = urlsplit(endpoint)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"Report endpoint must be an absolute http(s) URL: {endpoint!r}")
    return endpoint
