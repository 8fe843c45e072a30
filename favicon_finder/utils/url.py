"""URL and attribute helpers used by the discovery strategies"""

import re
from typing import Optional
from urllib.parse import urljoin, urlparse

MANIFEST_JSON_BASE64_MARKER: str = "/application/manifest+json;base64,"

# Matches "WxH" entries of a manifest `sizes` attribute, e.g. "16x16 32x32".
_SIZE_PATTERN = re.compile(r"(\d+)[xX](\d+)")

# Matches the URL part of a meta refresh `content`, e.g. "0; url=/home".
_REFRESH_URL_PATTERN = re.compile(r"url\s*=\s*['\"]?([^'\"]+)['\"]?", re.IGNORECASE)


def join_url(base: str, path: str) -> str:
    """Join base URL with path."""
    return urljoin(base, path)


def is_problematic_favicon_url(favicon_url: str) -> bool:
    """Check if favicon URL is a data URL, base64 manifest, or invalid scheme."""
    if not favicon_url:
        return True

    favicon_lower = favicon_url.strip().lower()

    if favicon_lower.startswith(("javascript:", "mailto:", "data:")):
        return True

    return MANIFEST_JSON_BASE64_MARKER in favicon_lower


def is_svg_favicon(favicon_url: str, mime_type: Optional[str] = None) -> bool:
    """Check if a favicon is an SVG, by its declared MIME type or its file extension."""
    if mime_type and "svg" in mime_type.lower():
        return True
    return urlparse(favicon_url.strip()).path.lower().endswith(".svg")


def resolve_favicon_url(favicon_url: str, base_url: str) -> Optional[str]:
    """Resolve a (possibly relative) favicon reference against `base_url`.

    Returns None for references that can never point at a downloadable image.
    """
    if is_problematic_favicon_url(favicon_url):
        return None

    favicon_url = favicon_url.strip()
    if favicon_url.startswith("//"):
        return f"{urlparse(base_url).scheme or 'https'}:{favicon_url}"

    return join_url(base_url, favicon_url)


def parse_largest_size(sizes: Optional[str]) -> int:
    """Return the largest width in a `sizes` attribute, 0 when absent or unparsable.

    `any` ranks above every fixed size.
    """
    if not isinstance(sizes, str) or not sizes:
        return 0
    if "any" in sizes.lower().split():
        return 2**31
    widths = [min(int(width), int(height)) for width, height in _SIZE_PATTERN.findall(sizes)]
    return max(widths, default=0)


def parse_meta_refresh_url(content: Optional[str]) -> Optional[str]:
    """Extract the target URL of a meta refresh `content` attribute, if any."""
    if not content:
        return None
    match = _REFRESH_URL_PATTERN.search(content)
    if match is None:
        return None
    target = match.group(1).strip()
    return target or None
