"""Template module - sandboxed template rendering."""

from .engine import TemplateEngine
from .router import router
from .schemas import RenderRequest

__all__ = ["router", "TemplateEngine", "RenderRequest"]
