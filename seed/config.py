"""Configuration and constants for the catalog seeder."""

import os
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple

from dotenv import load_dotenv

__all__ = [
    "PROJECT_ROOT",
    "CSV_PATH",
    "DB_PATH",
    "TARGET_PRODUCTS",
    "PROGRESS_EVERY",
    "CATEGORY_STOPLIST",
    "MIN_CATEGORY_LENGTH",
    "MAX_CATEGORIES_PER_ROW",
    "FALLBACK_CATEGORY",
    "MAX_DESCRIPTION_LENGTH",
    "SKIP_IMAGE_DOMAINS",
    "IMAGE_TIMEOUT",
    "IMAGE_CONTENT_TYPE",
    "SCRAPE_URL",
    "SCRAPED_CATEGORY",
    "SCRAPE_TIMEOUT",
    "HEADERS",
    "RECENT_WINDOW_DAYS",
    "SAMPLE_SIZE",
    "PRICE_JITTER",
]

# Pick up a local .env (SEED_* overrides) if present
load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


# Input / output paths
CSV_PATH = os.getenv("SEED_CSV_PATH", str(PROJECT_ROOT / "db" / "electronics.csv"))
DB_PATH = os.getenv("SEED_DB_PATH", "data/catalog.db")

# Import limits
TARGET_PRODUCTS = int(os.getenv("SEED_TARGET_PRODUCTS", "100"))
PROGRESS_EVERY = 25

# Category extraction rules
CATEGORY_STOPLIST: FrozenSet[str] = frozenset({"Electronics", "Computers", "All", "Name Brands"})
MIN_CATEGORY_LENGTH = 3
MAX_CATEGORIES_PER_ROW = 2
FALLBACK_CATEGORY = "Electronics"

# Product text
MAX_DESCRIPTION_LENGTH = 500

# Image download settings
SKIP_IMAGE_DOMAINS: Tuple[str, ...] = ("barcodable.com", "placeholder", "box.gif")
IMAGE_TIMEOUT = 10
IMAGE_CONTENT_TYPE = "image/jpeg"

# Secondary web scrape
SCRAPE_URL = os.getenv(
    "SEED_SCRAPE_URL",
    "https://webscraper.io/test-sites/e-commerce/allinone/computers/laptops",
)
SCRAPED_CATEGORY = "Web Laptops"
# No timeout unless explicitly configured
SCRAPE_TIMEOUT: Optional[float] = _optional_float(os.getenv("SEED_SCRAPE_TIMEOUT"))

HEADERS: Dict[str, str] = {
    "User-Agent": "electronics-catalog seeder (educational demo)",
}

# Read-model windows and reporting
RECENT_WINDOW_DAYS = 3
SAMPLE_SIZE = 5

# Multiplicative price variation applied on top of the base range
PRICE_JITTER: Tuple[float, float] = (0.85, 1.15)
