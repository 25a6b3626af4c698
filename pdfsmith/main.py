"""
pdfsmith entrypoint - runs uvicorn server.
"""

import uvicorn

from pdfsmith.app import build_app
from pdfsmith.config import get_settings


def main() -> None:
    """Run the pdfsmith server."""
    settings = get_settings()
    app = build_app(settings)

    print(f"Starting pdfsmith on http://{settings.host}:{settings.port}")
    print(f"Docs: http://{settings.host}:{settings.port}/docs")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
