"""Secondary seeding pass: scrape one listings page into its own category.

Unlike the CSV import, this step is safe to re-run: a listing is skipped
when a product with the same name already exists in the scraped category.
"""

from typing import List, Optional

import requests  # type: ignore[import-untyped]
from bs4 import BeautifulSoup

from seed.config import SCRAPE_TIMEOUT, SCRAPE_URL, SCRAPED_CATEGORY
from seed.db import get_or_create_category, insert_product, product_exists
from seed.descriptions import truncate_description
from seed.html_utils import extract_image_url, extract_listing_cards, extract_text, parse_price
from seed.http import get_session
from seed.images import attach_image_from_url
from seed.logging_config import get_logger, log_seed_event
from seed.models import ScrapedListing, ScrapeSummary
from seed.pricing import to_cents

__all__ = [
    "fetch_html",
    "parse_listings",
    "scrape_and_seed_from_web",
]

logger = get_logger("scraper")

DEFAULT_DESCRIPTION = "Web-scraped product"


def fetch_html(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = SCRAPE_TIMEOUT,
) -> str:
    """Single HTTP GET of a page, no retries.

    Args:
        url: URL to fetch
        session: Optional requests.Session for connection reuse
        timeout: Seconds to wait; None waits indefinitely

    Returns:
        HTML content as string

    Raises:
        ValueError: If the request fails or returns an error status
    """
    sess = session or get_session()
    try:
        resp = sess.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else "unknown"
        raise ValueError(f"HTTP Error {status_code} fetching {url}") from e
    except requests.exceptions.RequestException as e:
        raise ValueError(f"Failed to fetch {url}: {e}") from e
    return str(resp.text)


def parse_listings(html: str, base_url: str) -> List[ScrapedListing]:
    """Parse the listing cards of a page.

    Cards that fail to parse are logged and left out; cards without a
    name or price are returned as-is and filtered by the caller.
    """
    soup = BeautifulSoup(html, "html.parser")
    listings: List[ScrapedListing] = []

    for i, card in enumerate(extract_listing_cards(soup), start=1):
        try:
            listings.append(ScrapedListing(
                name=extract_text(card, ".title") or "",
                price_text=extract_text(card, ".price") or "",
                description=extract_text(card, ".description"),
                image_url=extract_image_url(card, base_url),
            ))
        except Exception as e:
            logger.warning(f"  Could not parse listing card {i}: {e}")

    return listings


def scrape_and_seed_from_web(
    db_path: str,
    url: str = SCRAPE_URL,
    session: Optional[requests.Session] = None,
    fetch_images: bool = True,
) -> ScrapeSummary:
    """Scrape the listings page and create products for new listings.

    A failure to fetch or parse the page ends this step only; whatever the
    CSV import already committed stays untouched.
    """
    logger.info("Scraping products from web...")
    summary = ScrapeSummary(url=url)

    try:
        html = fetch_html(url, session=session)
        listings = parse_listings(html, url)
        category = get_or_create_category(db_path, SCRAPED_CATEGORY)
    except Exception as e:
        logger.error(f"Web scraping failed: {e}")
        summary.error = str(e)
        log_seed_event("scrape_failed", {"url": url, "error": str(e)})
        return summary

    logger.info(f"  Found {len(listings)} listings on {url}")

    for listing in listings:
        price = parse_price(listing.price_text)
        if not listing.name or price is None:
            summary.skipped += 1
            continue

        try:
            if product_exists(db_path, listing.name, category.id):
                logger.debug(f"  SKIP (already scraped): {listing.name}")
                summary.skipped += 1
                continue

            product = insert_product(
                db_path,
                name=listing.name,
                description=truncate_description(listing.description or DEFAULT_DESCRIPTION),
                price_cents=to_cents(price),
                category_id=category.id,
            )
        except Exception as e:
            logger.error(f"  Failed to create scraped product {listing.name}: {e}")
            summary.failed += 1
            continue

        if fetch_images:
            attach_image_from_url(db_path, product, listing.image_url, session=session)

        summary.record(listing.name)
        logger.info(f"Scraped and created: {listing.name}")

    log_seed_event("scrape_complete", {
        "url": url,
        "created": summary.created,
        "skipped": summary.skipped,
        "failed": summary.failed,
    })
    return summary
