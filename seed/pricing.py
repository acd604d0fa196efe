"""Price estimation for rows that carry no usable price."""

import random
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple

from seed.config import PRICE_JITTER

__all__ = [
    "price_range_for",
    "estimate_price",
    "to_cents",
    "format_price",
]

PriceRange = Tuple[int, int]

# Brand -> (flagship keyword, flagship range, range for everything else)
FLAGSHIP_BRANDS = {
    "apple": ("iphone", (699, 1299), (199, 2499)),
    "microsoft": ("surface", (899, 2199), (99, 699)),
    "samsung": ("galaxy", (599, 1199), (149, 899)),
}

BRAND_RANGES = {
    "sony": (99, 799),
    "dell": (299, 1499),
    "hp": (299, 1499),
    "lenovo": (299, 1499),
    "nintendo": (199, 499),
    "xbox": (199, 499),
    "playstation": (199, 499),
}

# Checked in order against the lower-cased product name
KEYWORD_RANGES = (
    (("laptop", "computer"), (399, 1299)),
    (("phone", "smartphone"), (199, 899)),
    (("tablet", "ipad"), (149, 699)),
    (("keyboard", "mouse"), (29, 199)),
    (("monitor", "display"), (149, 599)),
)

DEFAULT_RANGE: PriceRange = (49, 399)

_CENT = Decimal("0.01")

_default_rng = random.Random()


def price_range_for(name: str, brand: Optional[str]) -> PriceRange:
    """Pick the inclusive whole-dollar base range for a product."""
    brand_key = (brand or "").strip().lower()
    name_lower = (name or "").lower()

    if brand_key in FLAGSHIP_BRANDS:
        keyword, flagship, regular = FLAGSHIP_BRANDS[brand_key]
        return flagship if keyword in name_lower else regular

    if brand_key in BRAND_RANGES:
        return BRAND_RANGES[brand_key]

    for keywords, price_range in KEYWORD_RANGES:
        if any(keyword in name_lower for keyword in keywords):
            return price_range

    return DEFAULT_RANGE


def estimate_price(
    name: str,
    brand: Optional[str],
    rng: Optional[random.Random] = None,
) -> Decimal:
    """Generate a plausible price in dollars for a product.

    A whole-dollar base is drawn from the brand or keyword range, then
    scaled by a random factor in PRICE_JITTER and rounded to cents.

    Args:
        name: Product name
        brand: Brand name, may be None
        rng: Random source; pass a seeded ``random.Random`` for repeatable output

    Returns:
        Price as a Decimal with two decimal places
    """
    rng = rng or _default_rng
    low, high = price_range_for(name, brand)
    base_price = rng.randint(low, high)
    factor = rng.uniform(*PRICE_JITTER)
    amount = Decimal(str(base_price * factor)).quantize(_CENT, rounding=ROUND_HALF_UP)
    return max(amount, _CENT)


def to_cents(amount: Decimal) -> int:
    """Convert a dollar amount to integer cents, truncating sub-cent digits."""
    return int(amount * 100)


def format_price(cents: int) -> str:
    """Render integer cents as a dollar string, e.g. ``$1,234.56``."""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{remainder:02d}"
