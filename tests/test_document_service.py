"""Tests for the template -> PDF pipeline."""

import base64
import shutil
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pdfsmith.modules.document.service import DocumentService
from pdfsmith.modules.render.schemas import PrintOptions
from pdfsmith.modules.template.schemas import RenderRequest
from pdfsmith.shared.errors import ConfigurationError, TemplateError

from .conftest import FAKE_PDF, FakeLauncher


def printed_html(page: MagicMock) -> str:
    url = page.goto.await_args.args[0]
    return base64.b64decode(url.split(",", 1)[1]).decode("utf-8")


@pytest.fixture
def service(launcher: FakeLauncher) -> DocumentService:
    return DocumentService(launcher=launcher)


class TestRenderPdf:
    """End to end with a faked browser."""

    @pytest.mark.asyncio
    async def test_rendered_markup_is_printed(
        self, service: DocumentService, fake_page: MagicMock
    ) -> None:
        request = RenderRequest(template_text="<h1><%= title %></h1>", data={"title": "Invoice #7"})

        pdf = await service.render_pdf(request)

        assert pdf == FAKE_PDF
        assert printed_html(fake_page) == "<h1>Invoice #7</h1>"

    @pytest.mark.asyncio
    async def test_includes_and_options(
        self, service: DocumentService, fake_page: MagicMock, temp_dir: Path
    ) -> None:
        (temp_dir / "header.ejs").write_text("<header>ACME</header>")
        main = temp_dir / "main.ejs"
        main.write_text("<% include 'header.ejs' %><p><%= total %></p>")

        await service.render_pdf(
            RenderRequest(template_path=str(main), data={"total": 42}),
            PrintOptions(page_size="Letter", landscape=True),
        )

        assert printed_html(fake_page) == "<header>ACME</header><p>42</p>"
        kwargs = fake_page.pdf.await_args.kwargs
        assert kwargs["width"] == "8.5in"
        assert kwargs["landscape"] is True

    @pytest.mark.asyncio
    async def test_invalid_options_fail_before_render(self, launcher: FakeLauncher) -> None:
        engine = MagicMock()
        service = DocumentService(engine=engine, launcher=launcher)

        with pytest.raises(ConfigurationError, match="margin bottom"):
            await service.render_pdf(
                RenderRequest(template_text="x"),
                PrintOptions(margin_bottom="1ft"),
            )

        engine.render_request.assert_not_called()
        assert launcher.calls == []

    @pytest.mark.asyncio
    async def test_template_error_skips_browser(
        self, service: DocumentService, launcher: FakeLauncher
    ) -> None:
        with pytest.raises(TemplateError):
            await service.render_pdf(RenderRequest(template_text="<%= missing %>"))
        assert launcher.calls == []

    def test_sync_variant(self, service: DocumentService, fake_page: MagicMock) -> None:
        pdf = service.render_pdf_sync(RenderRequest(template_text="<p>sync</p>"))

        assert pdf == FAKE_PDF
        assert printed_html(fake_page) == "<p>sync</p>"

    def test_render_html(self, service: DocumentService, launcher: FakeLauncher) -> None:
        html = service.render_html(RenderRequest(template_text="<%= 1 + 1 %>"))
        assert html == "2"
        assert launcher.calls == []


def _chromium_available() -> bool:
    return any(shutil.which(name) for name in ("chromium", "chromium-browser", "google-chrome"))


@pytest.mark.integration
@pytest.mark.skipif(not _chromium_available(), reason="Chromium not installed")
class TestRealBrowser:
    """Runs against a real Chromium."""

    @pytest.mark.asyncio
    async def test_produces_pdf(self, settings) -> None:
        settings.auto_provision_browser = True
        pdf = await DocumentService().render_pdf(
            RenderRequest(template_text="<h1><%= title %></h1>", data={"title": "Hello World"})
        )
        assert pdf.startswith(b"%PDF")
