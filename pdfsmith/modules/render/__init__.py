"""Render module - HTML to PDF printing using Playwright-driven Chromium."""

from .router import router
from .service import PrintDriver, html_to_pdf
from .schemas import PrintOptions, RenderPdfRequest

__all__ = ["router", "PrintDriver", "html_to_pdf", "PrintOptions", "RenderPdfRequest"]
