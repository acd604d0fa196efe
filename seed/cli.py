"""Command-line interface for the catalog seeder."""

import argparse
import logging
import os
import random
import sys
from typing import List, Optional

__all__ = ["main", "parse_args", "run_seed", "show_stats"]

from seed.config import CSV_PATH, DB_PATH, SCRAPE_URL, TARGET_PRODUCTS
from seed.csv_utils import export_db_to_csv
from seed.db import (
    get_category_count,
    get_newly_added_products,
    get_on_sale_products,
    get_product_count,
    get_product_counts_by_category,
    get_recently_updated_products,
    init_db,
    reset_catalog,
)
from seed.http import create_session
from seed.importer import CsvImporter, format_summary
from seed.logging_config import get_logger, set_run_context, setup_logging
from seed.scraper import scrape_and_seed_from_web

logger = get_logger("cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed the electronics catalog from a CSV export and a demo listings page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full reset: wipe the catalog, import the CSV, then scrape the demo site
  python -m seed.cli

  # Import a different CSV without touching the network
  python -m seed.cli --csv data/sample.csv --no-images --skip-scrape

  # Re-run only the web scrape (already-scraped names are skipped)
  python -m seed.cli --scrape-only

  # Show database statistics
  python -m seed.cli --stats
        """,
    )

    parser.add_argument(
        "--csv",
        default=CSV_PATH,
        help=f"Input CSV path (default: {CSV_PATH})",
    )
    parser.add_argument(
        "--db",
        default=DB_PATH,
        help=f"SQLite database path (default: {DB_PATH})",
    )
    parser.add_argument(
        "--target",
        type=int,
        default=TARGET_PRODUCTS,
        help=f"Maximum number of products to import from the CSV (default: {TARGET_PRODUCTS})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for price estimation (default: system entropy)",
    )
    parser.add_argument(
        "--no-images",
        action="store_true",
        help="Don't download product images",
    )

    scrape_group = parser.add_mutually_exclusive_group()
    scrape_group.add_argument(
        "--skip-scrape",
        action="store_true",
        help="Skip the web scraping step",
    )
    scrape_group.add_argument(
        "--scrape-only",
        action="store_true",
        help="Only run the web scraping step, keeping existing data",
    )
    parser.add_argument(
        "--scrape-url",
        default=SCRAPE_URL,
        help=f"Listings page to scrape (default: {SCRAPE_URL})",
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show database statistics and exit",
    )
    parser.add_argument(
        "--export-csv",
        metavar="PATH",
        help="Export the catalog to a CSV file and exit",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def show_stats(db_path: str) -> None:
    """Display database statistics."""
    init_db(db_path)

    print(f"\n{'='*50}")
    print(f"Database: {db_path}")
    print(f"{'='*50}")

    print(f"\nCategories: {get_category_count(db_path)}")
    print(f"Total products: {get_product_count(db_path)}")

    print("\nProducts by category:")
    counts = get_product_counts_by_category(db_path)
    if counts:
        for category, count in counts.items():
            print(f"  {category}: {count}")
    else:
        print("  No products yet")

    print(f"\nNewly added: {len(get_newly_added_products(db_path))}")
    print(f"Recently updated: {len(get_recently_updated_products(db_path))}")
    print(f"On sale: {len(get_on_sale_products(db_path))}")
    print()


def run_seed(args: argparse.Namespace) -> int:
    """Run the seed pipeline described by ``args`` and return an exit status."""
    session = create_session()
    fetch_images = not args.no_images
    set_run_context(
        db_path=args.db,
        csv_path=None if args.scrape_only else args.csv,
        target=None if args.scrape_only else args.target,
        seed=args.seed,
        scrape_url=None if args.skip_scrape else args.scrape_url,
    )

    if not args.scrape_only:
        if not os.path.exists(args.csv):
            logger.error(f"Error: {args.csv} not found!")
            return 1

        logger.info("Starting to seed electronics data...")
        init_db(args.db)

        logger.info("Clearing existing products and categories...")
        reset_catalog(args.db)

        rng = random.Random(args.seed) if args.seed is not None else None
        importer = CsvImporter(
            args.db,
            target=args.target,
            rng=rng,
            session=session,
            fetch_images=fetch_images,
        )
        summary = importer.run(args.csv)
        print(format_summary(summary))
        print("\nDatabase seeding completed successfully!")
    else:
        init_db(args.db)

    if not args.skip_scrape:
        scrape_and_seed_from_web(
            args.db,
            url=args.scrape_url,
            session=session,
            fetch_images=fetch_images,
        )

    print("Seeding complete!")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.stats:
        show_stats(args.db)
        return 0

    if args.export_csv:
        init_db(args.db)
        export_db_to_csv(args.db, args.export_csv)
        return 0

    return run_seed(args)


if __name__ == "__main__":
    sys.exit(main())
