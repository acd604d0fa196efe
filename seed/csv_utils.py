"""CSV import and export utilities."""

import csv
import os
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from seed.db import get_all_products, utc_now
from seed.logging_config import get_logger
from seed.models import RawRow
from seed.pricing import format_price

__all__ = [
    "iter_rows",
    "parse_date",
    "export_db_to_csv",
]

logger = get_logger("csv_utils")

# Tried in order after ISO-8601 parsing fails
DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)


def iter_rows(path: str) -> Iterator[RawRow]:
    """Stream the CSV at ``path`` as typed rows."""
    with open(path, "r", newline="", encoding="utf-8-sig") as f:
        for record in csv.DictReader(f):
            yield RawRow.from_csv(record)


def parse_date(value: Optional[str], default: Optional[datetime] = None) -> datetime:
    """Parse a CSV timestamp.

    Blank or unparseable input is not an error: the current time (or
    ``default``) is returned instead.
    """
    fallback = default or utc_now()
    if not value or not value.strip():
        return fallback

    # Multi-valued cells keep the first timestamp
    text = value.split(",")[0].strip()

    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(iso_text)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    logger.debug(f"Unparseable date {value!r}, using current time")
    return fallback


def export_db_to_csv(db_path: str, csv_path: str) -> int:
    """Export products from the SQLite database to CSV.

    Args:
        db_path: Path to the SQLite database
        csv_path: Path for the output CSV file

    Returns:
        Number of products exported
    """
    products = get_all_products(db_path)

    if not products:
        print("No products to export.")
        return 0

    fieldnames = [
        "id", "name", "category", "price", "price_cents", "description",
        "image_filename", "created_at", "updated_at",
    ]

    rows: List[Dict[str, Any]] = []
    for product in products:
        rows.append({
            "id": product["id"],
            "name": product["name"],
            "category": product["category_name"],
            "price": format_price(product["price_cents"]),
            "price_cents": product["price_cents"],
            "description": product["description"] or "",
            "image_filename": product["image_filename"] or "",
            "created_at": product["created_at"],
            "updated_at": product["updated_at"],
        })

    os.makedirs(os.path.dirname(csv_path) or ".", exist_ok=True)
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

    print(f"Exported {len(rows)} products to {csv_path}")
    return len(rows)
