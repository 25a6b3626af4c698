"""
Template module schemas.
"""

from typing import Any

from pydantic import BaseModel, Field


class RenderRequest(BaseModel):
    """A template source plus the data it renders with.

    Exactly one of template_text / template_path must be set.
    """
    template_text: str | None = Field(None, description="Inline template source")
    template_path: str | None = Field(None, description="Template file; its directory is the include root")
    data: dict[str, Any] = Field(default_factory=dict, description="Template variables")
    root_dir: str | None = Field(
        None,
        description="Include root for inline templates (defaults to the working directory)"
    )


class RenderHtmlResponse(BaseModel):
    """Rendered markup."""
    html: str
