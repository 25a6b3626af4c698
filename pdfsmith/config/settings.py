"""
Application settings loaded from environment variables (PDFSMITH_*) and .env.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """pdfsmith settings."""

    model_config = SettingsConfigDict(
        env_prefix="PDFSMITH_",
        env_file=".env",
        extra="ignore",
    )

    # ========== Server ==========
    host: str = "127.0.0.1"
    port: int = 8100
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # ========== Templates ==========
    # Roots that HTTP callers may reference with template_path
    allowed_roots: list[str] = Field(default_factory=list)
    template_syntax: Literal["ejs", "jinja"] = "ejs"
    max_include_depth: int = 32

    # ========== Browser ==========
    chrome_path: str = ""
    auto_provision_browser: bool = False
    browser_cache_dir: Path = Path.home() / ".cache" / "pdfsmith" / "browser"
    # Seconds; applied when a print request does not set its own timeout
    default_timeout: float | None = 60.0

    def get_allowed_roots(self) -> list[Path]:
        """Allowed roots as resolved paths."""
        return [Path(root).expanduser().resolve() for root in self.allowed_roots]


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def init_settings(**overrides) -> Settings:
    """Replace the process-wide settings (used by tests and embedding apps)."""
    global _settings
    _settings = Settings(**overrides)
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
