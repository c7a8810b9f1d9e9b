"""FastAPI application for the reference ingestion sink."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..logging_config import get_logger
from .routes import control, report

logger = get_logger(__name__)

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "style-src 'self' 'unsafe-inline' fonts.googleapis.com; "
    "font-src 'self' fonts.gstatic.com;"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan."""
    logger.info("Ingestion sink started")
    yield
    # Shutdown
    sim_instance = control.get_sim_instance()
    if sim_instance:
        await sim_instance.stop()
    logger.info("Ingestion sink stopped")


def create_fastapi_app() -> FastAPI:
    """Create and configure FastAPI application."""
    fastapi_app = FastAPI(
        title="pagewatch ingestion sink",
        description="Accepts telemetry events POSTed by page collectors",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Collectors run inside arbitrary pages
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fastapi_app.middleware("http")
    async def content_security_policy(request: Request, call_next):
        response = await call_next(request)
        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        return response

    fastapi_app.include_router(report.create_report_router())
    fastapi_app.include_router(control.create_control_router())

    return fastapi_app
