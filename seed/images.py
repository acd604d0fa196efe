"""Remote image download and attachment.

Image problems never interrupt a seed run: every outcome is reported as an
ImageResult and logged, and the product simply stays without an image.
"""

import logging
import secrets
from typing import Optional

import requests  # type: ignore[import-untyped]

from seed.config import IMAGE_CONTENT_TYPE, IMAGE_TIMEOUT
from seed.db import attach_image
from seed.http import get_session
from seed.logging_config import get_logger, log_seed_event
from seed.models import ImageResult, ImageStatus, Product
from seed.url_validation import URLValidationError, clean_image_url

__all__ = ["fetch_image", "attach_image_from_url", "image_filename"]

logger = get_logger("images")


def image_filename(product: Product) -> str:
    """Unique attachment name, always with a .jpg extension."""
    return f"product_{product.id}_{secrets.token_hex(4)}.jpg"


def fetch_image(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: float = IMAGE_TIMEOUT,
) -> ImageResult:
    """Download image bytes.

    Returns:
        ImageResult with status FETCHED and ``data`` set, or FAILED with
        ``error`` set. Never raises.
    """
    sess = session or get_session()
    try:
        resp = sess.get(url, timeout=timeout)
        resp.raise_for_status()
        data = resp.content
    except Exception as e:
        return ImageResult(status=ImageStatus.FAILED, url=url, error=str(e))

    if not data:
        return ImageResult(status=ImageStatus.FAILED, url=url, error="Empty response body")
    return ImageResult(status=ImageStatus.FETCHED, url=url, data=data)


def attach_image_from_url(
    db_path: str,
    product: Product,
    raw_url_field: Optional[str],
    session: Optional[requests.Session] = None,
) -> ImageResult:
    """Download the first usable URL in ``raw_url_field`` and attach it.

    Blank fields, non-http values and known-bad sources are a silent no-op
    (status SKIPPED). Fetch and storage failures are logged with the
    product name and returned as FAILED.
    """
    try:
        url = clean_image_url(raw_url_field)
    except URLValidationError as e:
        logger.debug(f"  No image for {product.name}: {e}")
        return ImageResult(status=ImageStatus.SKIPPED, error=str(e))

    result = fetch_image(url, session=session)

    if result.ok and result.data is not None:
        filename = image_filename(product)
        try:
            attach_image(db_path, product.id, result.data, filename, IMAGE_CONTENT_TYPE)
        except Exception as e:
            result = ImageResult(status=ImageStatus.FAILED, url=url, error=str(e))
        else:
            logger.info(f"  Image attached for {product.name}")
            return ImageResult(status=ImageStatus.ATTACHED, url=url, filename=filename)

    logger.warning(f"  Image attachment failed for {product.name}: {result.error}")
    log_seed_event("image_failed", {
        "product": product.name,
        "url": url,
        "error": result.error,
    }, level=logging.DEBUG)
    return result
