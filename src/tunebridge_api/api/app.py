"""FastAPI application factory and configuration."""

import logging
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from rich.console import Console
from rich.logging import RichHandler
from tunebridge import CredentialProvider, SpotifyClient

from tunebridge_api.api.container import Services
from tunebridge_api.api.exceptions import register_exception_handlers
from tunebridge_api.api.routes import health, jobs
from tunebridge_api.services.job_executor import JobExecutor
from tunebridge_api.services.job_store import JobStore
from tunebridge_api.settings import get_settings


def setup_logging() -> None:
    """Configure logging with Rich handler for all loggers including uvicorn."""
    settings = get_settings()
    console = Console(force_terminal=True)

    handler = RichHandler(
        console=console, rich_tracebacks=True, show_path=False, markup=False
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))

    # Configure root logger
    logging.root.handlers = [handler]
    logging.root.setLevel(settings.log_level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    # Configure uvicorn loggers to use Rich
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False


setup_logging()
logger = logging.getLogger(__name__)


def _app_version() -> str:
    try:
        return version("tunebridge")
    except PackageNotFoundError:
        return "0.0.0"


def create_services() -> Services:
    """Create all application services with proper dependency wiring.

    Returns:
        Services container with all application services.
    """
    settings = get_settings()
    config = settings.api_config()

    job_store = JobStore(
        clock=lambda: datetime.now(settings.timezone),
        id_generator=lambda: f"job_{uuid.uuid4()}",
    )

    job_executor = JobExecutor(
        job_store=job_store,
        credential_provider=CredentialProvider(
            settings.spotify_client_id, config=config
        ),
        client_factory=lambda: SpotifyClient(config=config),
        config=config,
    )

    if not settings.spotify_client_id:
        logger.warning(
            "TUNEBRIDGE_SPOTIFY_CLIENT_ID is not set: "
            "expired tokens cannot be refreshed"
        )

    return Services(job_store=job_store, job_executor=job_executor)


def create_api_router() -> APIRouter:
    """Create the API router with all routes under /api prefix."""
    api_router = APIRouter(prefix="/api")
    api_router.include_router(health.router)
    api_router.include_router(jobs.router)
    return api_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting application...")

    services = create_services()
    app.state.services = services
    logger.info("Services initialized")

    yield

    services.close()


def create_app() -> FastAPI:
    """Create and configure the main FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="tunebridge",
        description="Spotify playlist transfer and sync API",
        version=_app_version(),
        lifespan=lifespan,
        debug=settings.debug,
    )

    # Register exception handlers
    register_exception_handlers(app)

    # CORS middleware (type ignore needed due to Starlette typing limitations)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes under /api prefix
    app.include_router(create_api_router())

    return app


# Create app instance for uvicorn
app = create_app()
