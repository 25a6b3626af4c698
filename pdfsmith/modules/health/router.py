"""
Health check routes.
"""

from fastapi import APIRouter

from pdfsmith import __version__

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok", "version": __version__}
