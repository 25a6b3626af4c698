"""
pdfsmith - render templates in a sandbox and print them to PDF with headless Chromium.

    from pdfsmith import PrintOptions, RenderRequest, render_pdf

    pdf = await render_pdf(
        RenderRequest(template_text="<h1><%= title %></h1>", data={"title": "Invoice"}),
        PrintOptions(page_size="Letter", margin_top="0.5in"),
    )
"""

__version__ = "0.1.0"

from typing import Any

from pdfsmith.modules.document.service import DocumentService
from pdfsmith.modules.render.schemas import PrintOptions
from pdfsmith.modules.template.schemas import RenderRequest
from pdfsmith.shared.errors import (
    BrowserError,
    BrowserTimeoutError,
    ConfigurationError,
    PdfsmithError,
    SandboxInitError,
    TemplateError,
)


async def render_pdf(
    request: RenderRequest,
    options: PrintOptions | None = None,
    session: Any | None = None,
) -> bytes:
    """Render a template and print it to PDF bytes."""
    return await DocumentService().render_pdf(request, options, session=session)


def render_pdf_sync(request: RenderRequest, options: PrintOptions | None = None) -> bytes:
    """Blocking variant of render_pdf for scripts; launches its own browser."""
    return DocumentService().render_pdf_sync(request, options)


def render_html(request: RenderRequest) -> str:
    """Render a template to markup only."""
    return DocumentService().render_html(request)


__all__ = [
    "__version__",
    "render_pdf",
    "render_pdf_sync",
    "render_html",
    "PrintOptions",
    "RenderRequest",
    "PdfsmithError",
    "ConfigurationError",
    "TemplateError",
    "SandboxInitError",
    "BrowserError",
    "BrowserTimeoutError",
]
