"""
Error taxonomy shared by every pdfsmith module.

Each error carries a stable code and the HTTP status the API layer maps it to.
"""

from typing import Any


class PdfsmithError(Exception):
    """Base error for all pdfsmith failures."""

    code = "PDFSMITH_ERROR"
    http_status = 500

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        http_status: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(PdfsmithError):
    """Invalid request or print configuration, raised before any work starts."""

    code = "CONFIGURATION_ERROR"
    http_status = 400


class PathNotAllowedError(PdfsmithError):
    """Template path outside the configured allowed roots."""

    code = "PATH_NOT_ALLOWED"
    http_status = 403

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Template path not under allowed roots: {path}",
            details={"path": path},
        )


class TemplateError(PdfsmithError):
    """Template syntax or evaluation failure, missing include, host function error."""

    code = "TEMPLATE_ERROR"
    http_status = 422


class SandboxInitError(PdfsmithError):
    """The template library no longer exposes the hooks the sandbox relies on."""

    code = "SANDBOX_INIT_ERROR"
    http_status = 500


class BrowserError(PdfsmithError):
    """Browser launch, navigation, readiness or print failure."""

    code = "BROWSER_ERROR"
    http_status = 502


class BrowserTimeoutError(BrowserError):
    """The deadline elapsed while waiting on the browser."""

    code = "BROWSER_TIMEOUT"
    http_status = 504
