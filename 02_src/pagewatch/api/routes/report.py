"""Ingestion route: accepts one telemetry event per request."""

from typing import Any

from fastapi import APIRouter, Body
from pydantic import BaseModel

from ...logging_config import get_logger

logger = get_logger(__name__)


class ReportResponse(BaseModel):
    """Acknowledgement returned for every accepted event."""

    status: str


def create_report_router() -> APIRouter:
    """Create ingestion router."""
    router = APIRouter(tags=["ingestion"])

    @router.post("/report", response_model=ReportResponse)
    async def report(payload: dict[str, Any] = Body(...)) -> dict:
        """Acknowledge a telemetry event. Content is logged, not stored."""
        logger.info(
            "Event received: %s",
            payload.get("eventType", "unknown"),
            extra={"context": payload},
        )
        return {"status": "received"}

    return router
