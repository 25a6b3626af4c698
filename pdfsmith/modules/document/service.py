"""
Document service - template rendering followed by PDF printing.
"""

import asyncio
from typing import Any

from pdfsmith.modules.render.schemas import PrintOptions
from pdfsmith.modules.render.service import PrintDriver
from pdfsmith.modules.render.session import Launcher
from pdfsmith.modules.render.units import resolve_geometry
from pdfsmith.modules.template.engine import TemplateEngine
from pdfsmith.modules.template.schemas import RenderRequest
from pdfsmith.shared.logging import get_logger

logger = get_logger(__name__)


class DocumentService:
    """Runs the template engine and hands its markup to the print driver."""

    def __init__(
        self,
        engine: TemplateEngine | None = None,
        launcher: Launcher | None = None,
    ) -> None:
        self.engine = engine or TemplateEngine()
        self.launcher = launcher

    def render_html(self, request: RenderRequest) -> str:
        return self.engine.render_request(request)

    async def render_pdf(
        self,
        request: RenderRequest,
        options: PrintOptions | None = None,
        session: Any | None = None,
    ) -> bytes:
        """
        Render a template and print it to PDF.

        Print geometry is validated before the template runs, so configuration
        mistakes surface without paying for a render or a browser.

        Args:
            request: Template source and data
            options: Print options (defaults: A4, 10mm margins)
            session: Optional caller-owned Browser or BrowserContext

        Returns:
            PDF bytes
        """
        options = options or PrintOptions()
        resolve_geometry(options)

        html = await asyncio.to_thread(self.engine.render_request, request)
        logger.info(f"Rendered template to {len(html)} chars of markup")

        driver = PrintDriver(options, launcher=self.launcher)
        return await driver.print_pdf(html, session=session)

    def render_pdf_sync(
        self,
        request: RenderRequest,
        options: PrintOptions | None = None,
    ) -> bytes:
        """Blocking variant for scripts; launches its own browser."""
        return asyncio.run(self.render_pdf(request, options))
