"""HTML parsing and extraction utilities for the listings page."""

import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from seed.url_validation import resolve_url

__all__ = [
    "LISTING_CARD_SELECTOR",
    "extract_listing_cards",
    "extract_text",
    "extract_image_url",
    "parse_price",
]

LISTING_CARD_SELECTOR = ".thumbnail"

NON_PRICE_CHARS_RE = re.compile(r"[^\d.]")


def extract_listing_cards(soup: BeautifulSoup) -> List[Tag]:
    """All product cards on a listings page, in page order."""
    return soup.select(LISTING_CARD_SELECTOR)


def extract_text(card: Tag, selector: str) -> Optional[str]:
    """Stripped text of the first element matching ``selector``, or None."""
    el = card.select_one(selector)
    if el is None:
        return None
    text = el.get_text(strip=True)
    return text or None


def extract_image_url(card: Tag, base_url: str) -> Optional[str]:
    """Absolute URL of the card's first image."""
    img = card.find("img")
    if img is None:
        return None
    src = img.get("src")
    if not src or not isinstance(src, str):
        return None
    return resolve_url(base_url, src)


def parse_price(text: Optional[str]) -> Optional[Decimal]:
    """Extract a numeric price from display text such as ``$1,299.99``.

    Everything but digits and dots is dropped; returns None when nothing
    numeric remains.
    """
    if not text:
        return None
    cleaned = NON_PRICE_CHARS_RE.sub("", text)
    if not cleaned or not any(ch.isdigit() for ch in cleaned):
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None
