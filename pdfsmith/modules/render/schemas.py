"""Render module schemas."""

from pydantic import BaseModel, Field


class PrintOptions(BaseModel):
    """Page geometry and print settings for the Chromium print command."""

    page_size: str = Field(
        default="A4",
        description="Named paper size: A4, A3, A5, Letter, Legal, Tabloid"
    )
    landscape: bool = False

    # Custom size, overrides page_size when both are set
    paper_width: str | None = Field(default=None, description="e.g. 100mm, 4in")
    paper_height: str | None = Field(default=None, description="e.g. 150mm, 6in")

    margin_top: str = "10mm"
    margin_bottom: str = "10mm"
    margin_left: str = "10mm"
    margin_right: str = "10mm"

    display_header_footer: bool = False
    header_template: str = ""
    footer_template: str = ""

    wait_selector: str = Field(
        default="",
        description="CSS selector to wait for; empty waits for <body>"
    )
    wait_delay: float = Field(default=0, ge=0, description="Extra settle delay in seconds")
    wait_network_idle: bool = Field(
        default=False,
        description="Wait for network idle after readiness"
    )

    scale: float = Field(default=1.0, description="Print scale; <= 0 means 1.0")
    page_ranges: str = Field(default="", description="e.g. '1-3, 5'; empty prints all")
    ignore_background: bool = False

    chrome_path: str = Field(default="", description="Browser executable override")
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Deadline in seconds for the browser stage"
    )


class RenderPdfRequest(BaseModel):
    """Request to render HTML to PDF."""

    html: str = Field(..., description="HTML content to render")
    options: PrintOptions = Field(default_factory=PrintOptions)
