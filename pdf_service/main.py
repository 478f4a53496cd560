"""
PDF Rendering Service - FastAPI Application.

A microservice that renders web pages to PDF using Playwright. Target hosts
are restricted by ALLOWED_DOMAINS; relative paths are resolved against
PDF_TARGET_BASE_URL. Renders run one at a time through an in-memory FIFO
queue, each in its own browser instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.routers import pdf as pdf_router
from .api.v1.routers import system as system_router
from .config import Settings, get_settings
from .errors import AllowListNotConfigured, PdfServiceError
from .middleware.correlation import CorrelationMiddleware
from .services.job_queue import JobQueue
from .services.renderer import PdfRenderer
from .services.responses import error_response

logger = logging.getLogger("pdf_service.main")


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - build the policy, queue and renderer."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.service_name} v{settings.api_version}")

    try:
        app.state.policy = settings.allow_list_policy()
        policy = app.state.policy
        if policy.allow_all:
            logger.info("Allow-list: any host ('*')")
        else:
            logger.info(f"Allow-list: {', '.join(sorted(policy.domains))}")
    except AllowListNotConfigured as e:
        # Requests are answered with 400 until the configuration is fixed.
        app.state.policy = None
        logger.error(str(e))

    if settings.pdf_target_base_url:
        logger.info(f"Relative paths resolve against {settings.pdf_target_base_url}")

    app.state.job_queue = JobQueue()
    app.state.renderer = PdfRenderer.from_settings(settings)

    yield

    job_queue: JobQueue = app.state.job_queue
    if job_queue.busy or job_queue.pending:
        logger.info(f"Waiting for {job_queue.pending + int(job_queue.busy)} render job(s) to finish")
        await job_queue.join()
    logger.info(f"Shutting down {settings.service_name}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    configure_logging(settings)

    app = FastAPI(
        title=settings.api_title,
        description=(
            "Renders web pages to PDF using Playwright. Host access is restricted by "
            "ALLOWED_DOMAINS (or '*' to allow all). Relative paths require PDF_TARGET_BASE_URL."
        ),
        version=settings.api_version,
        debug=settings.debug,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )
    app.add_middleware(CorrelationMiddleware)

    @app.exception_handler(PdfServiceError)
    async def pdf_service_error_handler(request: Request, exc: PdfServiceError):
        return error_response(exc)

    app.include_router(system_router.router, prefix="/api/v1", include_in_schema=False)
    app.include_router(pdf_router.router, prefix="/api/v1", include_in_schema=False)

    # Root-level routes
    app.include_router(system_router.router, prefix="")
    app.include_router(pdf_router.router, prefix="")

    return app


app = create_app()
