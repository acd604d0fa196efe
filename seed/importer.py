"""CSV import orchestration.

A run moves through three phases in order and never revisits one:

1. scanning categories: full pass over the CSV, categories are created
2. importing: row-by-row product creation until the target count
3. summarizing: counts and samples are collected for the report
"""

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

import requests  # type: ignore[import-untyped]

from seed.categories import collect_category_names, create_categories, resolve_category
from seed.config import PROGRESS_EVERY, SAMPLE_SIZE, TARGET_PRODUCTS
from seed.csv_utils import iter_rows, parse_date
from seed.db import (
    ProductValidationError,
    get_category_count,
    get_product_counts_by_category,
    get_sample_products,
    insert_product,
)
from seed.descriptions import synthesize_description
from seed.images import attach_image_from_url
from seed.logging_config import get_logger, log_seed_event
from seed.models import Category, ImageStatus, ImportSummary, Product, RawRow
from seed.pricing import estimate_price, format_price, to_cents
from seed.url_validation import is_fetchable_image_url

__all__ = ["CsvImporter", "ImportState", "format_summary"]

logger = get_logger("importer")

PHASES = ("pending", "scanning-categories", "importing", "summarizing", "done")


@dataclass
class ImportState:
    """Mutable state of one import run."""

    seen: Set[Tuple[str, str]] = field(default_factory=set)
    created: int = 0
    skipped: int = 0
    images_attached: int = 0
    products: List[Product] = field(default_factory=list)


class CsvImporter:
    """Imports the electronics CSV into the catalog.

    Args:
        db_path: SQLite database to write to (schema must exist)
        target: Maximum number of products to create
        rng: Random source for price estimation
        session: HTTP session for image downloads
        fetch_images: Whether to download product images at all
    """

    def __init__(
        self,
        db_path: str,
        target: int = TARGET_PRODUCTS,
        rng: Optional[random.Random] = None,
        session: Optional[requests.Session] = None,
        fetch_images: bool = True,
    ) -> None:
        self.db_path = db_path
        self.target = target
        self.rng = rng
        self.session = session
        self.fetch_images = fetch_images
        self.phase = PHASES[0]
        self.state = ImportState()
        self.categories: Dict[str, Category] = {}

    def _enter(self, phase: str) -> None:
        current = PHASES.index(self.phase)
        if PHASES.index(phase) != current + 1:
            raise RuntimeError(f"Cannot move from {self.phase} to {phase}")
        self.phase = phase

    def run(self, csv_path: str) -> ImportSummary:
        """Scan categories, import products and return the run summary."""
        log_seed_event("import_start", {"csv_path": csv_path, "target": self.target})

        self._enter("scanning-categories")
        logger.info("Creating categories from CSV data...")
        self.categories = create_categories(
            self.db_path, collect_category_names(iter_rows(csv_path))
        )

        self._enter("importing")
        logger.info(f"Creating unique products (limit: {self.target})...")
        fallback = next(iter(self.categories.values()))
        for row in iter_rows(csv_path):
            if self.state.created >= self.target:
                break
            self.process_row(row, fallback)

        self._enter("summarizing")
        summary = self.summarize()
        self._enter("done")

        log_seed_event("import_complete", {
            "categories": summary.categories,
            "created": summary.created,
            "skipped": summary.skipped,
            "images_attached": summary.images_attached,
        })
        return summary

    def process_row(self, row: RawRow, fallback: Optional[Category] = None) -> Optional[Product]:
        """Create a product for one row, or count the row as skipped."""
        state = self.state

        if not row.name.strip() or not row.brand.strip():
            state.skipped += 1
            return None

        key = row.dedup_key
        if key in state.seen:
            state.skipped += 1
            return None
        state.seen.add(key)

        try:
            category = resolve_category(row, self.categories, fallback)
            if category is None:
                state.skipped += 1
                return None

            price = estimate_price(row.name, row.brand, rng=self.rng)
            product = insert_product(
                self.db_path,
                name=row.name.strip(),
                description=synthesize_description(row),
                price_cents=to_cents(price),
                category_id=category.id,
                created_at=parse_date(row.date_added),
                updated_at=parse_date(row.date_updated),
            )
        except ProductValidationError as e:
            logger.error(f"Failed to create product {row.name}: {e}")
            state.skipped += 1
            return None
        except Exception as e:
            logger.error(f"Unexpected error creating product {row.name}: {e}")
            log_seed_event("product_error", {"name": row.name, "error": str(e)})
            state.skipped += 1
            return None

        if self.fetch_images and is_fetchable_image_url(row.image_urls):
            result = attach_image_from_url(self.db_path, product, row.image_urls, session=self.session)
            if result.status == ImageStatus.ATTACHED:
                state.images_attached += 1

        state.created += 1
        state.products.append(product)

        if state.created % PROGRESS_EVERY == 0:
            logger.info(f"Created {state.created} products...")

        return product

    def summarize(self) -> ImportSummary:
        """Collect counters and samples from the state and the database."""
        return ImportSummary(
            categories=get_category_count(self.db_path),
            created=self.state.created,
            skipped=self.state.skipped,
            images_attached=self.state.images_attached,
            sample=get_sample_products(self.db_path, limit=SAMPLE_SIZE),
            by_category=get_product_counts_by_category(self.db_path),
        )


def format_summary(summary: ImportSummary) -> str:
    """Render the end-of-import console report."""
    lines = [
        "",
        "=" * 50,
        "SEEDING COMPLETED!",
        "=" * 50,
        f"Categories created: {summary.categories}",
        f"Products created: {summary.created}",
        f"Products skipped (duplicates/errors): {summary.skipped}",
        f"Total rows processed: {summary.processed}",
        f"Images attached: {summary.images_attached}",
        "",
        "Sample products created:",
    ]
    for name, category_name, price_cents in summary.sample:
        lines.append(f"  - {name} ({category_name}) - {format_price(price_cents)}")

    lines.append("")
    lines.append("Products by category:")
    for category_name, count in summary.by_category.items():
        lines.append(f"  - {category_name}: {count} products")

    return "\n".join(lines)
