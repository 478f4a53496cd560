"""
PDF Router - Web page to PDF endpoint.
"""

import asyncio
import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from ....config import Settings
from ....deps import get_app_settings, get_job_queue, get_policy, get_renderer
from ....errors import PdfServiceError, RenderError
from ....middleware.correlation import get_correlation_id
from ....services.allow_list import AllowListPolicy
from ....services.job_queue import JobQueue
from ....services.options import normalize_options
from ....services.renderer import PdfRenderer
from ....services.responses import PDF_MEDIA_TYPE, error_response, pdf_response
from ....services.target_resolver import resolve_target

logger = logging.getLogger("pdf_service.api.pdf")

router = APIRouter(tags=["pdf"])

_error_responses = {
    400: {"description": "Missing or invalid url, or no base URL for a relative path"},
    403: {"description": "URL host is not in ALLOWED_DOMAINS"},
    500: {"description": "Browser launch, navigation or PDF generation failed"},
}


@router.get(
    "/pdf",
    response_class=Response,
    responses={200: {"content": {PDF_MEDIA_TYPE: {}}, "description": "Rendered PDF"}, **_error_responses},
)
async def render_pdf(
    url: Optional[str] = Query(None, description="Full http(s) URL or a path relative to PDF_TARGET_BASE_URL"),
    disposition: Optional[str] = Query(None, description="attachment (default) or inline"),
    timeout_ms: Optional[str] = Query(None, alias="timeoutMs", description="Navigation and PDF timeout in ms (default 30000)"),
    page_format: Optional[str] = Query(None, alias="format", description="Paper format, e.g. Letter (default) or A4"),
    orientation: Optional[str] = Query(None, description="portrait (default) or landscape"),
    scale: Optional[str] = Query(None, description="Scale factor 0.1-2 (default 1)"),
    margin: Optional[str] = Query(None, description="Margin for all sides (default 0.5in)"),
    margin_top: Optional[str] = Query(None, alias="marginTop"),
    margin_right: Optional[str] = Query(None, alias="marginRight"),
    margin_bottom: Optional[str] = Query(None, alias="marginBottom"),
    margin_left: Optional[str] = Query(None, alias="marginLeft"),
    print_background: Optional[str] = Query(None, alias="printBackground", description="Default true"),
    display_header_footer: Optional[str] = Query(None, alias="displayHeaderFooter", description="Default false"),
    prefer_css_page_size: Optional[str] = Query(None, alias="preferCSSPageSize", description="Default false"),
    tagged: Optional[str] = Query(None, description="Default true"),
    outline: Optional[str] = Query(None, description="Default false"),
    settings: Settings = Depends(get_app_settings),
    policy: Optional[AllowListPolicy] = Depends(get_policy),
    job_queue: JobQueue = Depends(get_job_queue),
    renderer: PdfRenderer = Depends(get_renderer),
) -> Response:
    """
    Render a web page to PDF.

    The URL is validated against the allow-list before anything is queued.
    Renders are serialized: requests wait in FIFO order for the single
    browser slot.
    """
    start = time.perf_counter()

    try:
        target = resolve_target(url, policy, settings.pdf_target_base_url)
    except PdfServiceError as e:
        logger.info(f"Rejected render request for {url!r}: {e.message}")
        return error_response(e)

    params = {
        "disposition": disposition,
        "timeoutMs": timeout_ms,
        "format": page_format,
        "orientation": orientation,
        "scale": scale,
        "margin": margin,
        "marginTop": margin_top,
        "marginRight": margin_right,
        "marginBottom": margin_bottom,
        "marginLeft": margin_left,
        "printBackground": print_background,
        "displayHeaderFooter": display_header_footer,
        "preferCSSPageSize": prefer_css_page_size,
        "tagged": tagged,
        "outline": outline,
    }
    options = normalize_options({k: v for k, v in params.items() if v is not None})
    request_id = get_correlation_id()

    future = job_queue.submit(lambda: renderer.render(target, options, request_id))

    try:
        # Shielded so a disconnecting client does not cancel the queued job.
        pdf_bytes = await asyncio.shield(future)
    except PdfServiceError as e:
        logger.warning(f"[{request_id}] Render failed for {target}: {e.message}")
        return error_response(e, start)
    except Exception as e:
        logger.exception(f"[{request_id}] Unexpected error rendering {target}")
        return error_response(RenderError(str(e)), start)

    return pdf_response(pdf_bytes, options, start)
