"""
PDF Service Pydantic Models.

Render options, health and error payloads used by the API.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_FORMAT = "Letter"
DEFAULT_MARGIN = "0.5in"
DEFAULT_SCALE = 1.0
MIN_SCALE = 0.1
MAX_SCALE = 2.0
DEFAULT_TIMEOUT_MS = 30000


class PageMargins(BaseModel):
    """Per-side page margins in CSS units."""

    model_config = ConfigDict(frozen=True)

    top: str = DEFAULT_MARGIN
    right: str = DEFAULT_MARGIN
    bottom: str = DEFAULT_MARGIN
    left: str = DEFAULT_MARGIN


class RenderOptions(BaseModel):
    """Normalized PDF rendering options for a single request."""

    model_config = ConfigDict(frozen=True)

    format: str = Field(default=DEFAULT_FORMAT, description="Paper format, e.g. Letter or A4")
    orientation: Literal["portrait", "landscape"] = Field(default="portrait")
    scale: float = Field(default=DEFAULT_SCALE, ge=MIN_SCALE, le=MAX_SCALE)
    margin: PageMargins = Field(default_factory=PageMargins)
    print_background: bool = True
    display_header_footer: bool = False
    prefer_css_page_size: bool = False
    tagged: bool = True
    outline: bool = False
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        ge=0,
        description="Navigation and PDF generation timeout in ms (0 disables)",
    )
    disposition: Literal["attachment", "inline"] = Field(default="attachment")

    @property
    def landscape(self) -> bool:
        return self.orientation == "landscape"


class QueueStats(BaseModel):
    """Snapshot of the render queue."""

    pending: int = Field(..., description="Jobs waiting to run")
    busy: bool = Field(..., description="Whether a job is currently rendering")
    processed: int = Field(..., description="Jobs completed successfully")
    failed: int = Field(..., description="Jobs that ended in an error")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy", description="Service status")
    service: str = Field(..., description="Service name")
    timestamp: str = Field(..., description="Current time (ISO-8601, UTC)")
    queue: Optional[QueueStats] = Field(default=None, description="Render queue snapshot")


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    success: bool = False
    error: str
    duration: Optional[str] = Field(default=None, description="Elapsed time when available")
