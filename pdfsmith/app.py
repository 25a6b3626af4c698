"""
Application factory - builds FastAPI app with all middleware and routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pdfsmith import __version__
from pdfsmith.config import Settings, get_settings

# Import routers
from pdfsmith.modules.document.router import router as document_router
from pdfsmith.modules.health.router import router as health_router
from pdfsmith.modules.render.router import router as render_router
from pdfsmith.modules.template.router import router as template_router
from pdfsmith.shared.errors import PdfsmithError
from pdfsmith.shared.ids import generate_request_id
from pdfsmith.shared.logging import (
    clear_request_context,
    get_logger,
    get_request_context,
    set_request_context,
    setup_logging,
)
from pdfsmith.shared.types import RequestContext

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()

    setup_logging(settings.log_level)
    logger.info("Starting pdfsmith...")
    logger.info(f"Template syntax: {settings.template_syntax}, allowed roots: {settings.allowed_roots}")
    if settings.chrome_path:
        logger.info(f"Browser: {settings.chrome_path}")

    yield

    logger.info("pdfsmith stopped")


def build_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="pdfsmith",
        description="Sandboxed template rendering and headless Chromium PDF printing",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request context middleware
    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next: Any) -> Response:
        """Attach request context for logging and tracing."""
        ctx = RequestContext(
            request_id=request.headers.get("X-Request-ID", generate_request_id()),
            actor=request.headers.get("X-Actor", "system"),
        )
        set_request_context(ctx)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = ctx.request_id
            return response
        finally:
            clear_request_context()

    # Exception handler for PdfsmithError
    @app.exception_handler(PdfsmithError)
    async def pdfsmith_error_handler(
        request: Request, exc: PdfsmithError
    ) -> JSONResponse:
        """Handle PdfsmithError with consistent JSON response."""
        ctx = get_request_context()
        logger.warning(f"{exc.code}: {exc.message}")

        return JSONResponse(
            status_code=exc.http_status,
            content={
                "error": exc.to_dict(),
                "request_id": ctx.request_id if ctx else None,
            },
        )

    # Register routers
    app.include_router(health_router, tags=["health"])
    app.include_router(template_router)
    app.include_router(render_router)
    app.include_router(document_router)

    # Root endpoint
    @app.get("/")
    async def root() -> dict[str, str]:
        return {"service": "pdfsmith", "version": __version__}

    return app
