"""Render module routes."""

from fastapi import APIRouter, Response

from pdfsmith.shared.logging import get_logger
from .schemas import RenderPdfRequest
from .service import PrintDriver

logger = get_logger(__name__)
router = APIRouter(prefix="/render", tags=["render"])


def pdf_response(pdf_bytes: bytes, filename: str = "document.pdf") -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Content-Length": str(len(pdf_bytes)),
        }
    )


@router.post("/pdf")
async def render_pdf(request: RenderPdfRequest) -> Response:
    """
    Render HTML to PDF using headless Chromium.

    Returns the PDF as binary content with appropriate headers.
    Failures are raised as PdfsmithError and mapped by the app's error handler.
    """
    driver = PrintDriver(request.options)
    pdf_bytes = await driver.print_pdf(request.html)
    return pdf_response(pdf_bytes)
