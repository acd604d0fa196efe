"""Product description synthesis from CSV fields."""

from typing import List

from seed.config import MAX_DESCRIPTION_LENGTH
from seed.models import RawRow

__all__ = ["synthesize_description", "truncate_description"]

ELLIPSIS = "..."

DESCRIPTION_TEMPLATE = (
    "High-quality {brand} product featuring advanced technology and reliable performance."
)


def _present(value: str) -> bool:
    return bool(value and value.strip())


def _identifier_present(value: str) -> bool:
    # Barcode columns use "0" for unknown
    return _present(value) and value != "0"


def truncate_description(text: str, limit: int = MAX_DESCRIPTION_LENGTH) -> str:
    """Cut ``text`` to at most ``limit`` characters, ellipsis included."""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def synthesize_description(row: RawRow) -> str:
    """Build a readable description from the fields present in a row."""
    parts: List[str] = []

    if _present(row.brand):
        parts.append(f"Brand: {row.brand}")
    if _present(row.manufacturer) and row.manufacturer != row.brand:
        parts.append(f"Manufacturer: {row.manufacturer}")
    if _present(row.manufacturer_number):
        parts.append(f"Model: {row.manufacturer_number}")

    if _present(row.dimension):
        parts.append(f"Dimensions: {row.dimension}")
    if _present(row.weight):
        parts.append(f"Weight: {row.weight}")
    if _present(row.colors):
        parts.append(f"Available Colors: {row.colors}")

    if _identifier_present(row.upc):
        parts.append(f"UPC: {row.upc}")
    if _identifier_present(row.ean):
        parts.append(f"EAN: {row.ean}")

    base_description = DESCRIPTION_TEMPLATE.format(brand=row.brand)
    full_description = "\n\n".join([base_description, " | ".join(parts)])

    return truncate_description(full_description)
