"""Category extraction and per-row category resolution."""

import re
from typing import Dict, Iterable, List, Optional, Set

from seed.config import (
    CATEGORY_STOPLIST,
    FALLBACK_CATEGORY,
    MAX_CATEGORIES_PER_ROW,
    MIN_CATEGORY_LENGTH,
)
from seed.db import insert_category
from seed.logging_config import get_logger
from seed.models import Category, RawRow

__all__ = [
    "split_categories",
    "is_meaningful_category",
    "meaningful_categories",
    "collect_category_names",
    "create_categories",
    "resolve_category",
]

logger = get_logger("categories")

NUMERIC_RE = re.compile(r"^\d+$")


def split_categories(field: Optional[str]) -> List[str]:
    """Split a comma-separated categories cell into trimmed, non-blank names."""
    if not field:
        return []
    return [part.strip() for part in field.split(",") if part.strip()]


def is_meaningful_category(name: str) -> bool:
    """Reject names that are too short, too generic or purely numeric."""
    return (
        len(name) >= MIN_CATEGORY_LENGTH
        and name not in CATEGORY_STOPLIST
        and not NUMERIC_RE.match(name)
    )


def meaningful_categories(field: Optional[str]) -> List[str]:
    """The first few specific categories of a row, in their original order."""
    names = [name for name in split_categories(field) if is_meaningful_category(name)]
    return names[:MAX_CATEGORIES_PER_ROW]


def collect_category_names(rows: Iterable[RawRow]) -> Set[str]:
    """Scan every row and gather the distinct category names to create."""
    names: Set[str] = set()
    for row in rows:
        names.update(meaningful_categories(row.categories))
    return names


def create_categories(db_path: str, names: Iterable[str]) -> Dict[str, Category]:
    """Persist one category per name.

    When ``names`` is empty a single fallback category is created so that
    every product can still be assigned somewhere.

    Returns:
        Mapping of name -> Category in creation order; the first entry
        serves as the fallback during resolution.
    """
    categories: Dict[str, Category] = {}

    for name in sorted(names):
        categories[name] = insert_category(db_path, name)
        logger.info(f"Created category: {name}")

    if not categories:
        categories[FALLBACK_CATEGORY] = insert_category(db_path, FALLBACK_CATEGORY)
        logger.info(f"Created fallback category: {FALLBACK_CATEGORY}")

    return categories


def resolve_category(
    row: RawRow,
    known: Dict[str, Category],
    fallback: Optional[Category] = None,
) -> Optional[Category]:
    """Find the category a row belongs to.

    Uses the first name in the row's categories cell that was created
    during the scan, otherwise ``fallback`` (or the first known category).
    Returns None only when nothing at all is known.
    """
    for name in split_categories(row.categories):
        category = known.get(name)
        if category is not None:
            return category

    if fallback is not None:
        return fallback
    return next(iter(known.values()), None)
