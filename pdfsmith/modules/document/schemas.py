"""
Document module schemas.
"""

from pydantic import BaseModel, Field

from pdfsmith.modules.render.schemas import PrintOptions
from pdfsmith.modules.template.schemas import RenderRequest


class DocumentPdfRequest(RenderRequest):
    """Template, data and print options for a one-shot PDF render."""
    options: PrintOptions = Field(default_factory=PrintOptions)
    filename: str = Field("document.pdf", description="Suggested download filename")

    def render_request(self) -> RenderRequest:
        return RenderRequest(
            template_text=self.template_text,
            template_path=self.template_path,
            data=self.data,
            root_dir=self.root_dir,
        )
