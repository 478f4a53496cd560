"""
PDF service entrypoint - runs uvicorn.

    python -m pdf_service
"""

import uvicorn

from .config import get_settings


def main() -> None:
    """Run the PDF service."""
    settings = get_settings()

    print(f"Starting {settings.service_name} on http://{settings.host}:{settings.port}")
    print(f"Docs: http://{settings.host}:{settings.port}/docs")

    uvicorn.run(
        "pdf_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
