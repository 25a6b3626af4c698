"""
Document module routes.
"""

from fastapi import APIRouter, Depends, Response

from pdfsmith.modules.render.router import pdf_response
from pdfsmith.modules.template.router import ensure_allowed_path
from pdfsmith.shared.logging import get_logger

from .schemas import DocumentPdfRequest
from .service import DocumentService

logger = get_logger(__name__)
router = APIRouter(prefix="/document", tags=["document"])


def get_service() -> DocumentService:
    """Dependency injection for service."""
    return DocumentService()


@router.post("/pdf")
async def render_document(
    req: DocumentPdfRequest,
    service: DocumentService = Depends(get_service),
) -> Response:
    """Render a template with data and return the printed PDF."""
    render_request = req.render_request()
    ensure_allowed_path(render_request)

    pdf_bytes = await service.render_pdf(render_request, req.options)
    return pdf_response(pdf_bytes, filename=req.filename)
