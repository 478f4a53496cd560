"""
Target Resolver.

Turns the raw ``url`` query value into a fully-qualified, policy-checked
render target. Absolute http(s) URLs are used as given; anything else is
treated as a path relative to the configured base URL.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

from ..errors import (
    AllowListNotConfigured,
    ForbiddenHost,
    InvalidUrl,
    MissingBaseUrl,
    MissingParameter,
    UnsupportedScheme,
)
from .allow_list import NOT_CONFIGURED_MESSAGE, AllowListPolicy, is_host_allowed

logger = logging.getLogger("pdf_service.target_resolver")

ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
TAB_OR_NEWLINE_RE = re.compile(r"[\t\n\r]")
ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class RenderTarget:
    """A resolved http(s) URL that passed the allow-list check."""

    url: str

    def __str__(self) -> str:
        return self.url


def _canonicalize(parts: SplitResult) -> str:
    """
    Serialize a parsed URL the way a browser would.

    Lowercases scheme and host, drops default ports and turns an empty path
    into "/". Raises ValueError for malformed ports.
    """
    scheme = parts.scheme.lower()
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"

    port = parts.port
    netloc = host
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{port}"

    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    path = parts.path or "/"
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def _normalize_separators(url: str) -> str:
    """
    Apply the browser's parsing rules for http(s) URLs that urllib does not.

    Browsers drop tabs and newlines and read "\\" as "/", so
    "https://evil.com\\@example.com/" points at evil.com, not example.com.
    """
    return TAB_OR_NEWLINE_RE.sub("", url).replace("\\", "/")


def _parse(url: str) -> SplitResult:
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"Not an absolute URL: {url}")
    return parts


def resolve_target(
    raw: object,
    policy: Optional[AllowListPolicy],
    base_url: Optional[str] = None,
) -> RenderTarget:
    """
    Resolve a user-supplied URL or path into a render target.

    Args:
        raw: Value of the ``url`` query parameter
        policy: Host allow-list, or None when ALLOWED_DOMAINS is unusable
        base_url: Base used for relative paths

    Returns:
        RenderTarget

    Raises:
        MissingParameter: raw is empty or not a string
        AllowListNotConfigured: policy is None
        InvalidUrl: raw (or raw joined with the base) is not a valid URL
        ForbiddenHost: the resolved host is not allowed
        UnsupportedScheme: the parsed scheme is not http/https
        MissingBaseUrl: raw is relative and no base URL is configured
    """
    if not raw or not isinstance(raw, str):
        raise MissingParameter("Missing required query param: url")

    if policy is None:
        raise AllowListNotConfigured(NOT_CONFIGURED_MESSAGE)

    if ABSOLUTE_URL_RE.match(raw):
        try:
            parts = _parse(_normalize_separators(raw))
            url = _canonicalize(parts)
        except ValueError:
            raise InvalidUrl("Invalid URL provided")

        if not is_host_allowed(parts.hostname, policy):
            logger.warning(f"Rejected host {parts.hostname!r}")
            raise ForbiddenHost("URL host is not allowed")
        if parts.scheme.lower() not in ALLOWED_SCHEMES:
            raise UnsupportedScheme("Only http/https protocols are allowed")
        return RenderTarget(url)

    if not base_url:
        raise MissingBaseUrl("PDF_TARGET_BASE_URL is required when providing a relative path")

    relative_path = _normalize_separators(raw if raw.startswith("/") else f"/{raw}")
    base_url = _normalize_separators(base_url)
    try:
        _parse(base_url)
        parts = _parse(urljoin(base_url, relative_path))
        url = _canonicalize(parts)
    except ValueError:
        raise InvalidUrl("Invalid URL provided")

    if not is_host_allowed(parts.hostname, policy):
        logger.warning(f"Rejected base host {parts.hostname!r}")
        raise ForbiddenHost("Base URL host is not allowed")
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise UnsupportedScheme("Only http/https protocols are allowed")
    return RenderTarget(url)
