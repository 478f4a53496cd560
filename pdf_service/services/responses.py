"""
Response Translator.

Turns a render outcome into the HTTP response: the PDF with download headers
on success, or the structured error body on failure.
"""

import time
from typing import Optional

from fastapi import Response
from fastapi.responses import JSONResponse

from ..errors import PdfServiceError
from ..models import ErrorResponse, RenderOptions

PDF_MEDIA_TYPE = "application/pdf"
DURATION_HEADER = "X-Render-Duration"


def format_duration(start: float, end: Optional[float] = None) -> str:
    """Elapsed milliseconds since ``start`` (a ``time.perf_counter()`` value), e.g. "523.17ms"."""
    end = time.perf_counter() if end is None else end
    return f"{(end - start) * 1000:.2f}ms"


def pdf_filename() -> str:
    return f"render-{int(time.time() * 1000)}.pdf"


def pdf_response(pdf_bytes: bytes, options: RenderOptions, start: float) -> Response:
    """Build the 200 response carrying the rendered PDF."""
    return Response(
        content=pdf_bytes,
        status_code=200,
        media_type=PDF_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'{options.disposition}; filename="{pdf_filename()}"',
            "Content-Length": str(len(pdf_bytes)),
            DURATION_HEADER: format_duration(start),
        },
    )


def error_response(error: PdfServiceError, start: Optional[float] = None) -> JSONResponse:
    """Build the structured error response; status comes from the error class."""
    body = ErrorResponse(
        error=error.message,
        duration=format_duration(start) if start is not None else None,
    )
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(exclude_none=True),
    )
