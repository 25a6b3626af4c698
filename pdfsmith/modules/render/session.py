"""
Browser session ownership.

A session either wraps a page opened inside a caller-supplied Browser or
BrowserContext (the caller keeps ownership of the browser), or a page inside
a Chromium process this module launched and therefore tears down.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from pdfsmith.shared.logging import get_logger

logger = get_logger(__name__)

# Chromium flags for containerised and CI environments
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


@dataclass
class BrowserSession:
    """A page plus the resources this driver is responsible for closing."""

    page: Page
    owned: bool
    browser: Browser | None = None
    playwright: Playwright | None = None

    async def close(self) -> None:
        """Close the page, and the browser process only when owned."""
        if not self.owned:
            await self.page.close()
            return

        try:
            if self.browser is not None:
                await self.browser.close()
        finally:
            if self.playwright is not None:
                await self.playwright.stop()
        logger.debug("Closed owned browser session")


Launcher = Callable[[str | None], Awaitable[BrowserSession]]


async def launch_chromium(executable_path: str | None = None) -> BrowserSession:
    """Start Playwright and a headless Chromium process with one page."""
    playwright = await async_playwright().start()
    browser = None
    try:
        browser = await playwright.chromium.launch(
            headless=True,
            chromium_sandbox=False,
            args=LAUNCH_ARGS,
            executable_path=executable_path or None,
        )
        page = await browser.new_page()
    except BaseException:
        if browser is not None:
            await browser.close()
        await playwright.stop()
        raise

    logger.info(f"Launched Chromium {browser.version} ({executable_path or 'bundled'})")
    return BrowserSession(page=page, owned=True, browser=browser, playwright=playwright)


async def open_session(
    existing: Browser | BrowserContext | Any | None,
    executable_path: str | None,
    launcher: Launcher = launch_chromium,
) -> BrowserSession:
    """
    Open a page for one print job.

    Args:
        existing: Caller-owned Browser or BrowserContext, or None
        executable_path: Browser binary used when a new process is launched
        launcher: Factory for driver-owned sessions

    Returns:
        BrowserSession whose `owned` flag tells what close() tears down
    """
    if existing is not None:
        page = await existing.new_page()
        logger.debug("Opened tab in caller-supplied browser session")
        return BrowserSession(page=page, owned=False)

    return await launcher(executable_path)
