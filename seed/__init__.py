"""Electronics catalog seeder package."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from seed.categories import collect_category_names, create_categories, resolve_category
from seed.config import CSV_PATH, DB_PATH, SCRAPE_URL, TARGET_PRODUCTS
from seed.db import init_db, reset_catalog
from seed.descriptions import synthesize_description
from seed.images import attach_image_from_url
from seed.importer import CsvImporter
from seed.models import Category, Product, RawRow, ScrapedListing
from seed.pricing import estimate_price
from seed.scraper import scrape_and_seed_from_web

__all__ = [
    # Version
    "__version__",
    # Config
    "CSV_PATH",
    "DB_PATH",
    "SCRAPE_URL",
    "TARGET_PRODUCTS",
    # Models
    "Category",
    "Product",
    "RawRow",
    "ScrapedListing",
    # Core functions
    "init_db",
    "reset_catalog",
    "collect_category_names",
    "create_categories",
    "resolve_category",
    "estimate_price",
    "synthesize_description",
    "attach_image_from_url",
    "CsvImporter",
    "scrape_and_seed_from_web",
]
