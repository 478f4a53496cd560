"""
PDF Service Errors.

Every failure the service reports to a client is a ``PdfServiceError``
carrying its own HTTP status code. Validation errors are raised before a
render job exists; render failures are raised inside a job and travel back to
the request through the job's future.
"""

from typing import Optional


class PdfServiceError(Exception):
    """Base class for failures reported to the client."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# =============================================================================
# CLIENT ERRORS (400)
# =============================================================================


class ValidationError(PdfServiceError):
    """Raised when the request cannot be turned into a render target."""

    status_code = 400


class MissingParameter(ValidationError):
    pass


class InvalidUrl(ValidationError):
    pass


class UnsupportedScheme(ValidationError):
    pass


class MissingBaseUrl(ValidationError):
    pass


class AllowListNotConfigured(ValidationError):
    """Raised when ALLOWED_DOMAINS is neither '*' nor a non-empty domain list."""


# =============================================================================
# AUTHORIZATION ERRORS (403)
# =============================================================================


class ForbiddenHost(PdfServiceError):
    """Raised when the resolved hostname is not covered by the allow-list."""

    status_code = 403


# =============================================================================
# RENDER ERRORS (500)
# =============================================================================


class RenderFailure(PdfServiceError):
    """Raised when the browser fails to produce a document."""

    status_code = 500


class EngineLaunchError(RenderFailure):
    pass


class NavigationTimeout(RenderFailure):
    pass


class NavigationError(RenderFailure):
    pass


class RenderTimeout(RenderFailure):
    pass


class RenderError(RenderFailure):
    pass
