"""
Render Option Normalizer.

Maps loosely-typed query parameters onto ``RenderOptions``. Never fails:
missing or unparsable values fall back to their defaults.
"""

import math
import re
from typing import Mapping, Optional

from ..models import (
    DEFAULT_FORMAT,
    DEFAULT_MARGIN,
    DEFAULT_SCALE,
    DEFAULT_TIMEOUT_MS,
    MAX_SCALE,
    MIN_SCALE,
    PageMargins,
    RenderOptions,
)

TRUE_TOKENS = {"true", "1", "yes"}
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return str(value).lower() in TRUE_TOKENS


def parse_scale(value: Optional[str]) -> float:
    try:
        scale = float(value) if value is not None else DEFAULT_SCALE
    except (TypeError, ValueError):
        scale = DEFAULT_SCALE
    if not math.isfinite(scale):
        scale = DEFAULT_SCALE
    return max(MIN_SCALE, min(MAX_SCALE, scale))


def parse_timeout_ms(value: Optional[str]) -> int:
    """Parse a leading integer; zero or garbage means the default, negatives floor to 0."""
    match = LEADING_INT_RE.match(str(value)) if value else None
    timeout = int(match.group(1)) if match else 0
    if timeout == 0:
        timeout = DEFAULT_TIMEOUT_MS
    return max(0, timeout)


def _text(params: Mapping[str, str], key: str, default: str) -> str:
    return params.get(key) or default


def normalize_options(params: Mapping[str, str]) -> RenderOptions:
    """
    Build render options from query parameters.

    Args:
        params: Query parameters, keyed by their camelCase API names

    Returns:
        RenderOptions with documented defaults applied
    """
    uniform_margin = _text(params, "margin", DEFAULT_MARGIN)
    margins = PageMargins(
        top=_text(params, "marginTop", uniform_margin),
        right=_text(params, "marginRight", uniform_margin),
        bottom=_text(params, "marginBottom", uniform_margin),
        left=_text(params, "marginLeft", uniform_margin),
    )

    orientation = str(params.get("orientation") or "portrait").lower()

    return RenderOptions(
        format=_text(params, "format", DEFAULT_FORMAT),
        orientation="landscape" if orientation == "landscape" else "portrait",
        scale=parse_scale(params.get("scale")),
        margin=margins,
        print_background=parse_bool(params.get("printBackground"), True),
        display_header_footer=parse_bool(params.get("displayHeaderFooter"), False),
        prefer_css_page_size=parse_bool(params.get("preferCSSPageSize"), False),
        tagged=parse_bool(params.get("tagged"), True),
        outline=parse_bool(params.get("outline"), False),
        timeout_ms=parse_timeout_ms(params.get("timeoutMs")),
        disposition="inline" if params.get("disposition") == "inline" else "attachment",
    )
