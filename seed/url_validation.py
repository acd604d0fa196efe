"""URL cleaning and validation for remote product images."""

import re
from typing import Iterable, Optional
from urllib.parse import urljoin

from seed.config import SKIP_IMAGE_DOMAINS

__all__ = [
    "URLValidationError",
    "sanitize_url",
    "first_url",
    "clean_image_url",
    "resolve_url",
    "is_fetchable_image_url",
]


class URLValidationError(ValueError):
    """Raised when an image URL is rejected before any request is made."""
    pass


HTTP_URL_PATTERN = re.compile(r"\Ahttps?://")


def sanitize_url(url: Optional[str]) -> str:
    """Strip whitespace and control characters from a URL.

    Args:
        url: Raw URL string

    Returns:
        Sanitized URL string
    """
    if not url:
        return ""

    url = url.strip()
    url = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", url)
    return url


def first_url(field: Optional[str]) -> str:
    """Return the first entry of a comma-separated URL list, trimmed."""
    if not field:
        return ""
    return sanitize_url(field.split(",")[0])


def clean_image_url(
    field: Optional[str],
    skip_domains: Iterable[str] = SKIP_IMAGE_DOMAINS,
) -> str:
    """Turn a raw image-URL cell into a single fetchable URL.

    Args:
        field: Raw cell value, possibly several comma-separated URLs
        skip_domains: Fragments that mark a URL as a known-bad source

    Returns:
        The cleaned URL

    Raises:
        URLValidationError: If the cell is blank, holds no http URL, or
            points at a skipped domain
    """
    if not field or not field.strip():
        raise URLValidationError("Image URL is empty")
    if "http" not in field:
        raise URLValidationError(f"No http URL in: {field!r}")

    url = first_url(field)
    if not HTTP_URL_PATTERN.match(url):
        raise URLValidationError(f"Not an http(s) URL: {url!r}")

    for fragment in skip_domains:
        if fragment in url:
            raise URLValidationError(f"Skipped image source '{fragment}': {url}")

    return url


def is_fetchable_image_url(field: Optional[str]) -> bool:
    """Check a raw image-URL cell without raising."""
    try:
        clean_image_url(field)
        return True
    except URLValidationError:
        return False


def resolve_url(base_url: str, href: Optional[str]) -> Optional[str]:
    """Join a possibly relative ``href`` against the page URL."""
    href = sanitize_url(href)
    if not href:
        return None
    return urljoin(base_url, href)
