"""Tests for the HTTP API."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pdfsmith import __version__
from pdfsmith.modules.document.router import get_service
from pdfsmith.modules.document.service import DocumentService
from pdfsmith.modules.render import service as render_service

from .conftest import FAKE_PDF, FakeLauncher


class TestHealth:

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}

    def test_root(self, client: TestClient) -> None:
        assert client.get("/").json()["service"] == "pdfsmith"

    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "req_test123"})
        assert response.headers["X-Request-ID"] == "req_test123"


class TestTemplateRender:
    """POST /template/render"""

    def test_inline(self, client: TestClient) -> None:
        response = client.post(
            "/template/render",
            json={"template_text": "<h1><%= name %></h1>", "data": {"name": "Hello World"}},
        )
        assert response.status_code == 200
        assert response.json() == {"html": "<h1>Hello World</h1>"}

    def test_by_path(self, client: TestClient, temp_dir: Path) -> None:
        (temp_dir / "header.ejs").write_text("<h1>THIS IS HEADER</h1>")
        main = temp_dir / "main.ejs"
        main.write_text("<%- include('header.ejs') %> <p>Body Content</p>")

        response = client.post("/template/render", json={"template_path": str(main)})

        assert response.status_code == 200
        assert response.json()["html"] == "<h1>THIS IS HEADER</h1> <p>Body Content</p>"

    def test_path_outside_allowed_roots(self, client: TestClient, tmp_path: Path) -> None:
        outside = tmp_path / "evil.ejs"
        outside.write_text("x")

        response = client.post("/template/render", json={"template_path": str(outside)})

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "PATH_NOT_ALLOWED"

    def test_root_dir_outside_allowed_roots(self, client: TestClient, tmp_path: Path) -> None:
        response = client.post(
            "/template/render",
            json={"template_text": "x", "root_dir": str(tmp_path)},
        )
        assert response.status_code == 403

    def test_inline_cannot_read_working_directory(
        self, client: TestClient, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (temp_dir / ".env").write_text("PDFSMITH_SECRET=hunter2\n")
        monkeypatch.chdir(temp_dir)

        response = client.post("/template/render", json={"template_text": "<%- include('.env') %>"})

        assert response.status_code == 422
        assert "include not found" in response.json()["error"]["message"]
        assert "hunter2" not in response.text

    def test_missing_source(self, client: TestClient) -> None:
        response = client.post("/template/render", json={"data": {}})

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "CONFIGURATION_ERROR"
        assert body["request_id"].startswith("req_")

    def test_template_error(self, client: TestClient) -> None:
        response = client.post("/template/render", json={"template_text": "<% if %>"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "TEMPLATE_ERROR"


class TestDocumentPdf:
    """POST /document/pdf"""

    @pytest.fixture
    def launcher(self, client: TestClient) -> FakeLauncher:
        launcher = FakeLauncher()
        client.app.dependency_overrides[get_service] = lambda: DocumentService(launcher=launcher)
        yield launcher
        client.app.dependency_overrides.clear()

    def test_returns_pdf(self, client: TestClient, launcher: FakeLauncher) -> None:
        response = client.post(
            "/document/pdf",
            json={
                "template_text": "<h1><%= title %></h1>",
                "data": {"title": "Quarterly"},
                "options": {"page_size": "A5"},
                "filename": "quarterly.pdf",
            },
        )

        assert response.status_code == 200
        assert response.content == FAKE_PDF
        assert response.headers["content-type"] == "application/pdf"
        assert "quarterly.pdf" in response.headers["content-disposition"]
        assert launcher.page.pdf.await_args.kwargs["width"] == "5.83in"

    def test_invalid_margin(self, client: TestClient, launcher: FakeLauncher) -> None:
        response = client.post(
            "/document/pdf",
            json={"template_text": "x", "options": {"margin_top": "10xx"}},
        )

        assert response.status_code == 400
        assert response.json()["error"]["details"]["field"] == "margin_top"
        assert launcher.calls == []

    def test_template_error(self, client: TestClient, launcher: FakeLauncher) -> None:
        response = client.post("/document/pdf", json={"template_text": "<%= nope %>"})

        assert response.status_code == 422
        assert launcher.calls == []


class TestRenderPdf:
    """POST /render/pdf"""

    def test_returns_pdf(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch, launcher: FakeLauncher
    ) -> None:
        monkeypatch.setattr(render_service, "launch_chromium", launcher)

        response = client.post("/render/pdf", json={"html": "<p>raw</p>"})

        assert response.status_code == 200
        assert response.content == FAKE_PDF
        assert launcher.calls == [None]

    def test_browser_timeout(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch, launcher: FakeLauncher
    ) -> None:
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        launcher.page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 5ms exceeded")
        monkeypatch.setattr(render_service, "launch_chromium", launcher)

        response = client.post(
            "/render/pdf",
            json={"html": "<p/>", "options": {"wait_selector": "#never"}},
        )

        assert response.status_code == 504
        assert response.json()["error"]["code"] == "BROWSER_TIMEOUT"
