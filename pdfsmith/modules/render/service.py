"""Render service - HTML to PDF using Playwright-driven Chromium."""

import asyncio
import base64
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pdfsmith.config import get_settings
from pdfsmith.infra.browser.locator import find_or_download
from pdfsmith.shared.errors import BrowserError, BrowserTimeoutError
from pdfsmith.shared.logging import get_logger

from .schemas import PrintOptions
from .session import BrowserSession, Launcher, launch_chromium, open_session
from .units import PageGeometry, resolve_geometry

logger = get_logger(__name__)

# Chromium drops an empty header/footer template and falls back to its own
EMPTY_TEMPLATE_PLACEHOLDER = "<span> </span>"


def to_data_url(html: str) -> str:
    """Encode markup as a base64 text/html data URL."""
    encoded = base64.b64encode(html.encode("utf-8")).decode("ascii")
    return f"data:text/html;charset=utf-8;base64,{encoded}"


def _inches(value: float) -> str:
    return f"{value}in"


class PrintDriver:
    """Prints markup to PDF through a headless Chromium page."""

    def __init__(
        self,
        options: PrintOptions | None = None,
        launcher: Launcher | None = None,
    ) -> None:
        self.options = options or PrintOptions()
        self.launcher = launcher or launch_chromium
        self.settings = get_settings()

    async def print_pdf(self, html: str, session: Any | None = None) -> bytes:
        """
        Render HTML content to PDF bytes.

        Args:
            html: Markup to print
            session: Optional caller-owned Browser or BrowserContext. The driver
                opens and closes one page in it and never closes the browser.

        Returns:
            PDF bytes

        Raises:
            ConfigurationError: a length does not parse (no browser touched)
            BrowserTimeoutError: the deadline elapsed
            BrowserError: no executable found, or launch, navigation, wait
                or print failed
        """
        geometry = resolve_geometry(self.options)

        # Provisioning runs before the deadline starts; a download thread
        # cannot be cancelled and is bounded by its own HTTP timeout
        executable = None if session is not None else await self._executable_path()

        timeout = self.options.timeout or self.settings.default_timeout
        run = self._run(html, geometry, session, executable)
        try:
            if timeout:
                return await asyncio.wait_for(run, timeout)
            return await run
        except asyncio.TimeoutError as e:
            raise BrowserTimeoutError(
                f"PDF rendering exceeded {timeout}s deadline",
                details={"timeout": timeout},
            ) from e

    async def _run(
        self,
        html: str,
        geometry: PageGeometry,
        existing: Any | None,
        executable: str | None,
    ) -> bytes:
        browser_session: BrowserSession | None = None
        try:
            browser_session = await open_session(existing, executable, launcher=self.launcher)
            page = browser_session.page

            await self._navigate(page, html)
            await self._await_ready(page)
            pdf_bytes = await self._print(page, geometry)

        except PlaywrightTimeoutError as e:
            raise BrowserTimeoutError(f"Browser wait timed out: {e.message}") from e
        except PlaywrightError as e:
            raise BrowserError(f"Browser command failed: {e.message}") from e
        finally:
            if browser_session is not None:
                await browser_session.close()

        logger.info(f"Generated PDF: {len(pdf_bytes)} bytes")
        return pdf_bytes

    async def _executable_path(self) -> str | None:
        if self.options.chrome_path:
            return self.options.chrome_path
        if self.settings.chrome_path:
            return self.settings.chrome_path
        if self.settings.auto_provision_browser:
            return await asyncio.to_thread(find_or_download)
        return None

    async def _navigate(self, page: Page, html: str) -> None:
        if self.options.timeout:
            page.set_default_timeout(self.options.timeout * 1000)
        await page.goto(to_data_url(html), wait_until="load")

    async def _await_ready(self, page: Page) -> None:
        if self.options.wait_selector:
            await page.wait_for_selector(self.options.wait_selector, state="visible")
        else:
            await page.wait_for_selector("body", state="attached")

        if self.options.wait_network_idle:
            await page.wait_for_load_state("networkidle")

        # Fixed settle time for late fonts/styles
        if self.options.wait_delay > 0:
            await asyncio.sleep(self.options.wait_delay)

    async def _print(self, page: Page, geometry: PageGeometry) -> bytes:
        opts = self.options

        header = opts.header_template
        footer = opts.footer_template
        if opts.display_header_footer:
            header = header or EMPTY_TEMPLATE_PLACEHOLDER
            footer = footer or EMPTY_TEMPLATE_PLACEHOLDER

        pdf_options: dict[str, Any] = {
            "print_background": not opts.ignore_background,
            "landscape": opts.landscape,
            "width": _inches(geometry.width),
            "height": _inches(geometry.height),
            "margin": {
                "top": _inches(geometry.margin_top),
                "bottom": _inches(geometry.margin_bottom),
                "left": _inches(geometry.margin_left),
                "right": _inches(geometry.margin_right),
            },
            "display_header_footer": opts.display_header_footer,
            "header_template": header,
            "footer_template": footer,
            "scale": opts.scale if opts.scale > 0 else 1.0,
        }
        if opts.page_ranges:
            pdf_options["page_ranges"] = opts.page_ranges

        logger.info(
            f"Printing {geometry.width:.2f}x{geometry.height:.2f}in "
            f"(landscape={opts.landscape}, scale={pdf_options['scale']})"
        )
        return await page.pdf(**pdf_options)


async def html_to_pdf(
    html: str,
    options: PrintOptions | None = None,
    session: Any | None = None,
) -> bytes:
    """Print markup with a one-off driver."""
    return await PrintDriver(options).print_pdf(html, session=session)
