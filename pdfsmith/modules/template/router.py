"""
Template module routes.
"""

from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from pdfsmith.config import get_settings
from pdfsmith.shared.errors import PathNotAllowedError
from pdfsmith.shared.logging import get_logger

from .engine import TemplateEngine
from .schemas import RenderHtmlResponse, RenderRequest

logger = get_logger(__name__)
router = APIRouter(prefix="/template", tags=["template"])


def get_engine() -> TemplateEngine:
    """Dependency injection for the engine."""
    return TemplateEngine()


def ensure_allowed_path(request: RenderRequest) -> None:
    """
    Reject template paths and include roots outside the configured allowed roots.

    Raises:
        PathNotAllowedError: path is not under any allowed root
    """
    settings = get_settings()
    roots = settings.get_allowed_roots()

    for candidate in (request.template_path, request.root_dir):
        if not candidate:
            continue
        path = Path(candidate).resolve()
        if not any(path.is_relative_to(root) for root in roots):
            raise PathNotAllowedError(str(path))


@router.post("/render", response_model=RenderHtmlResponse)
async def render_template(
    req: RenderRequest,
    engine: TemplateEngine = Depends(get_engine),
) -> RenderHtmlResponse:
    """Render a template to HTML without printing it."""
    ensure_allowed_path(req)
    html = await run_in_threadpool(engine.render_request, req)
    return RenderHtmlResponse(html=html)
