"""
Shared fixtures.
"""

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from pdfsmith.app import build_app
from pdfsmith.config import Settings, init_settings, reset_settings
from pdfsmith.modules.render.session import BrowserSession

FAKE_PDF = b"%PDF-1.7\n%fake document\n%%EOF"


def make_fake_page(pdf_bytes: bytes = FAKE_PDF) -> MagicMock:
    """Playwright Page stand-in with awaitable methods."""
    page = MagicMock(name="page")
    page.goto = AsyncMock(name="goto")
    page.wait_for_selector = AsyncMock(name="wait_for_selector")
    page.wait_for_load_state = AsyncMock(name="wait_for_load_state")
    page.pdf = AsyncMock(name="pdf", return_value=pdf_bytes)
    page.close = AsyncMock(name="page_close")
    return page


class FakeLauncher:
    """Counts driver-owned browser allocations and hands out a fake page."""

    def __init__(self, page: MagicMock | None = None) -> None:
        self.page = page or make_fake_page()
        self.browser = MagicMock(name="browser")
        self.browser.close = AsyncMock(name="browser_close")
        self.playwright = MagicMock(name="playwright")
        self.playwright.stop = AsyncMock(name="playwright_stop")
        self.calls: list[str | None] = []

    async def __call__(self, executable_path: str | None) -> BrowserSession:
        self.calls.append(executable_path)
        return BrowserSession(
            page=self.page,
            owned=True,
            browser=self.browser,
            playwright=self.playwright,
        )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Temporary directory that doubles as the allowed template root."""
    path = Path(tempfile.mkdtemp(prefix="pdfsmith_test_")).resolve()
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture(autouse=True)
def settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Isolated settings for every test."""
    settings = init_settings(
        allowed_roots=[str(temp_dir)],
        chrome_path="",
        auto_provision_browser=False,
        default_timeout=10.0,
        browser_cache_dir=temp_dir / "browser-cache",
    )
    yield settings
    reset_settings()


@pytest.fixture
def fake_page() -> MagicMock:
    return make_fake_page()


@pytest.fixture
def launcher(fake_page: MagicMock) -> FakeLauncher:
    return FakeLauncher(fake_page)


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """FastAPI test client."""
    app = build_app(settings)
    with TestClient(app) as c:
        yield c
