"""URL validation for ingestion requests and scraped image URLs."""

import re
from typing import Iterable, Optional
from urllib.parse import urlparse

__all__ = [
    "URLValidationError",
    "sanitize_url",
    "validate_url",
    "is_image_host_url",
    "url_contains_any",
]


class URLValidationError(Exception):
    """Raised when a URL is unusable for fetching."""


DANGEROUS_SCHEMES = {"javascript", "data", "vbscript", "file"}

SUSPICIOUS_PATTERNS = (
    r"<script",
    r"javascript:",
)


def sanitize_url(url: Optional[str]) -> str:
    """Strip surrounding whitespace and control characters."""
    if not url:
        return ""
    url = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", url.strip())
    return url.replace("%00", "")


def validate_url(url: Optional[str]) -> str:
    """Validate a page URL before fetching it.

    Any host is accepted; only http(s) URLs with a host and without
    script-injection patterns pass.

    Returns:
        The sanitized URL

    Raises:
        URLValidationError: If the URL is empty or not fetchable
    """
    url = sanitize_url(url)
    if not url:
        raise URLValidationError("URL is empty")

    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme in DANGEROUS_SCHEMES:
        raise URLValidationError(f"Dangerous URL scheme: {scheme}")
    if scheme not in ("http", "https"):
        raise URLValidationError(f"Invalid URL scheme: {scheme or '(none)'}")
    if not parsed.hostname:
        raise URLValidationError("URL has no domain")

    url_lower = url.lower()
    for pattern in SUSPICIOUS_PATTERNS:
        if re.search(pattern, url_lower):
            raise URLValidationError(f"URL contains suspicious pattern: {pattern}")

    return url


def is_image_host_url(url: Optional[str], host: str) -> bool:
    """True if ``url`` is served from ``host`` or one of its subdomains.

    Protocol-relative URLs (``//cdn.host/...``) are accepted.
    """
    if not url:
        return False
    hostname = (urlparse(url.strip()).hostname or "").lower()
    host = host.lower()
    return hostname == host or hostname.endswith("." + host)


def url_contains_any(url: str, markers: Iterable[str]) -> bool:
    return any(marker in url for marker in markers)
