"""Document module - template to PDF pipeline."""

from .router import router
from .service import DocumentService

__all__ = ["router", "DocumentService"]
