"""Data models for catalog rows, entities and run summaries."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

__all__ = [
    "RawRow",
    "Category",
    "Product",
    "ScrapedListing",
    "ImageStatus",
    "ImageResult",
    "ImportSummary",
    "ScrapeSummary",
]

# CSV header -> RawRow attribute
CSV_COLUMNS: Dict[str, str] = {
    "name": "name",
    "brand": "brand",
    "manufacturer": "manufacturer",
    "manufacturerNumber": "manufacturer_number",
    "dimension": "dimension",
    "weight": "weight",
    "colors": "colors",
    "upc": "upc",
    "ean": "ean",
    "categories": "categories",
    "dateAdded": "date_added",
    "dateUpdated": "date_updated",
    "imageURLs": "image_urls",
}


@dataclass
class RawRow:
    """One record of the electronics CSV.

    Every recognized column is present as a string; missing or empty
    cells become "". Other columns in the file are ignored.
    """

    name: str = ""
    brand: str = ""
    manufacturer: str = ""
    manufacturer_number: str = ""
    dimension: str = ""
    weight: str = ""
    colors: str = ""
    upc: str = ""
    ean: str = ""
    categories: str = ""
    date_added: str = ""
    date_updated: str = ""
    image_urls: str = ""

    @classmethod
    def from_csv(cls, record: Mapping[str, Any]) -> "RawRow":
        """Build a RawRow from a csv.DictReader record."""
        values = {}
        for column, attr in CSV_COLUMNS.items():
            value = record.get(column)
            values[attr] = "" if value is None else str(value)
        return cls(**values)

    @property
    def dedup_key(self) -> Tuple[str, str]:
        """Normalized (name, brand) pair used to reject duplicate rows."""
        return (self.name.strip().lower(), self.brand.strip().lower())


@dataclass
class Category:
    """A persisted catalog category."""

    name: str
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class Product:
    """A persisted catalog product.

    Prices are integer cents. ``sale_price_cents`` is never set by the
    seeder but is honoured by the read model.
    """

    name: str
    description: str
    price_cents: int
    category_id: int
    id: Optional[int] = None
    sale_price_cents: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def on_sale(self) -> bool:
        return self.sale_price_cents is not None and self.sale_price_cents < self.price_cents

    @property
    def effective_price_cents(self) -> int:
        sale = self.sale_price_cents
        if sale is not None and sale < self.price_cents:
            return sale
        return self.price_cents


@dataclass
class ScrapedListing:
    """One product card extracted from the external listings page."""

    name: str
    price_text: str
    description: Optional[str] = None
    image_url: Optional[str] = None


class ImageStatus(str, Enum):
    """Outcome of an image fetch or attach attempt."""

    FETCHED = "fetched"
    ATTACHED = "attached"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ImageResult:
    """Result of fetching and attaching an image; never an exception."""

    status: ImageStatus
    url: Optional[str] = None
    data: Optional[bytes] = field(default=None, repr=False)
    filename: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (ImageStatus.FETCHED, ImageStatus.ATTACHED)


@dataclass
class ImportSummary:
    """Counters and samples reported at the end of a CSV import."""

    categories: int = 0
    created: int = 0
    skipped: int = 0
    images_attached: int = 0
    sample: List[Tuple[str, str, int]] = field(default_factory=list)
    by_category: Dict[str, int] = field(default_factory=dict)

    @property
    def processed(self) -> int:
        return self.created + self.skipped


@dataclass
class ScrapeSummary:
    """Counters for the web scrape step."""

    url: str
    created: int = 0
    skipped: int = 0
    failed: int = 0
    error: Optional[str] = None
    names: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def record(self, name: str) -> None:
        self.created += 1
        self.names.append(name)
