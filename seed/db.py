"""SQLite database schema and helpers for the catalog."""

import base64
import hashlib
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple

from seed.config import DB_PATH, MAX_DESCRIPTION_LENGTH, RECENT_WINDOW_DAYS
from seed.models import Category, Product

__all__ = [
    "ProductValidationError",
    "utc_now",
    "format_timestamp",
    "get_connection",
    "init_db",
    "reset_catalog",
    "insert_category",
    "get_or_create_category",
    "get_categories",
    "insert_product",
    "product_exists",
    "attach_image",
    "get_product_image",
    "get_category_count",
    "get_product_count",
    "get_product_counts_by_category",
    "get_sample_products",
    "get_all_products",
    "get_newly_added_products",
    "get_recently_updated_products",
    "get_on_sale_products",
]


class ProductValidationError(ValueError):
    """Raised when a product fails validation and is not persisted."""
    pass


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_timestamp(value: Optional[datetime]) -> str:
    """Render a datetime as the ISO string stored in the database.

    Aware datetimes are converted to UTC first so that stored values
    compare correctly as strings.
    """
    if value is None:
        value = utc_now()
    elif value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(sep=" ", timespec="seconds")


@contextmanager
def get_connection(db_path: str = DB_PATH) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str = DB_PATH) -> None:
    """Initialize the database schema."""
    with get_connection(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS products (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT,
                price_cents INTEGER NOT NULL CHECK (price_cents >= 0),
                sale_price_cents INTEGER,
                category_id INTEGER NOT NULL,
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL,
                FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE CASCADE
            )
        """)

        # One attached image per product, stored inline
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS product_images (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                product_id INTEGER UNIQUE NOT NULL,
                filename TEXT NOT NULL,
                content_type TEXT NOT NULL,
                byte_size INTEGER NOT NULL,
                checksum TEXT NOT NULL,
                data BLOB NOT NULL,
                created_at TIMESTAMP NOT NULL,
                FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_products_category_id ON products(category_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_products_name ON products(name)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_categories_name ON categories(name)")

        conn.commit()


def reset_catalog(db_path: str = DB_PATH) -> None:
    """Delete every product, image and category and restart the id sequences."""
    with get_connection(db_path) as conn:
        with conn:
            conn.execute("DELETE FROM product_images")
            conn.execute("DELETE FROM products")
            conn.execute("DELETE FROM categories")
            conn.execute(
                "DELETE FROM sqlite_sequence WHERE name IN ('products', 'categories', 'product_images')"
            )


def _row_to_category(row: sqlite3.Row) -> Category:
    return Category(
        id=row["id"],
        name=row["name"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_product(row: sqlite3.Row) -> Product:
    return Product(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        price_cents=row["price_cents"],
        sale_price_cents=row["sale_price_cents"],
        category_id=row["category_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def insert_category(db_path: str, name: str) -> Category:
    """Create a category and return it with its new ID."""
    now = format_timestamp(None)
    with get_connection(db_path) as conn:
        with conn:
            cursor = conn.execute(
                "INSERT INTO categories (name, created_at, updated_at) VALUES (?, ?, ?)",
                (name, now, now),
            )
        return Category(id=cursor.lastrowid, name=name, created_at=now, updated_at=now)


def get_or_create_category(db_path: str, name: str) -> Category:
    """Return the first category with this name, creating it if missing."""
    with get_connection(db_path) as conn:
        row = conn.execute(
            "SELECT * FROM categories WHERE name = ? ORDER BY id LIMIT 1", (name,)
        ).fetchone()
    if row:
        return _row_to_category(row)
    return insert_category(db_path, name)


def get_categories(db_path: str = DB_PATH) -> List[Category]:
    """All categories in creation order."""
    with get_connection(db_path) as conn:
        rows = conn.execute("SELECT * FROM categories ORDER BY id").fetchall()
    return [_row_to_category(row) for row in rows]


def _validate_product(
    conn: sqlite3.Connection,
    name: str,
    description: str,
    price_cents: Any,
    category_id: Any,
) -> None:
    errors: List[str] = []
    if not name or not name.strip():
        errors.append("Name can't be blank")
    if isinstance(price_cents, bool) or not isinstance(price_cents, int):
        errors.append("Price cents must be an integer")
    elif price_cents < 0:
        errors.append("Price cents must be greater than or equal to 0")
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        errors.append(f"Description is too long (maximum is {MAX_DESCRIPTION_LENGTH} characters)")
    if category_id is None:
        errors.append("Category must exist")
    else:
        found = conn.execute("SELECT 1 FROM categories WHERE id = ?", (category_id,)).fetchone()
        if not found:
            errors.append("Category must exist")
    if errors:
        raise ProductValidationError("Validation failed: " + ", ".join(errors))


def insert_product(
    db_path: str,
    name: str,
    description: str,
    price_cents: int,
    category_id: int,
    created_at: Optional[datetime] = None,
    updated_at: Optional[datetime] = None,
    sale_price_cents: Optional[int] = None,
) -> Product:
    """Validate and insert a product in a single transaction.

    Raises:
        ProductValidationError: If the product is invalid; nothing is written.
    """
    created = format_timestamp(created_at)
    updated = format_timestamp(updated_at)

    with get_connection(db_path) as conn:
        _validate_product(conn, name, description, price_cents, category_id)
        with conn:
            cursor = conn.execute("""
                INSERT INTO products (name, description, price_cents, sale_price_cents,
                                      category_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (name, description, price_cents, sale_price_cents, category_id, created, updated))

    return Product(
        id=cursor.lastrowid,
        name=name,
        description=description,
        price_cents=price_cents,
        sale_price_cents=sale_price_cents,
        category_id=category_id,
        created_at=created,
        updated_at=updated,
    )


def product_exists(db_path: str, name: str, category_id: int) -> bool:
    """Check whether a product with this exact name exists in a category."""
    with get_connection(db_path) as conn:
        row = conn.execute(
            "SELECT 1 FROM products WHERE name = ? AND category_id = ? LIMIT 1",
            (name, category_id),
        ).fetchone()
    return row is not None


def attach_image(
    db_path: str,
    product_id: int,
    data: bytes,
    filename: str,
    content_type: str,
) -> int:
    """Store image bytes for a product, replacing any previous attachment.

    Returns:
        ID of the stored image row.
    """
    checksum = base64.b64encode(hashlib.md5(data).digest()).decode("ascii")
    with get_connection(db_path) as conn:
        with conn:
            conn.execute("DELETE FROM product_images WHERE product_id = ?", (product_id,))
            cursor = conn.execute("""
                INSERT INTO product_images (product_id, filename, content_type, byte_size,
                                            checksum, data, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (product_id, filename, content_type, len(data), checksum,
                  sqlite3.Binary(data), format_timestamp(None)))
        return cursor.lastrowid


def get_product_image(db_path: str, product_id: int) -> Optional[Dict[str, Any]]:
    """Return the attached image of a product, or None."""
    with get_connection(db_path) as conn:
        row = conn.execute(
            "SELECT * FROM product_images WHERE product_id = ?", (product_id,)
        ).fetchone()
    if not row:
        return None
    image = dict(row)
    image["data"] = bytes(image["data"])
    return image


def get_category_count(db_path: str = DB_PATH) -> int:
    with get_connection(db_path) as conn:
        return conn.execute("SELECT COUNT(*) AS count FROM categories").fetchone()["count"]


def get_product_count(db_path: str = DB_PATH, category_id: Optional[int] = None) -> int:
    """Get the total number of products, optionally within one category."""
    with get_connection(db_path) as conn:
        if category_id is not None:
            row = conn.execute(
                "SELECT COUNT(*) AS count FROM products WHERE category_id = ?", (category_id,)
            ).fetchone()
        else:
            row = conn.execute("SELECT COUNT(*) AS count FROM products").fetchone()
        return row["count"]


def get_product_counts_by_category(db_path: str = DB_PATH) -> Dict[str, int]:
    """Product counts per category name, for categories that have products."""
    with get_connection(db_path) as conn:
        rows = conn.execute("""
            SELECT c.name AS name, COUNT(p.id) AS count
            FROM categories c
            JOIN products p ON p.category_id = c.id
            GROUP BY c.name
            ORDER BY c.name
        """).fetchall()
    return {row["name"]: row["count"] for row in rows}


def get_sample_products(db_path: str = DB_PATH, limit: int = 5) -> List[Tuple[str, str, int]]:
    """First few products as (name, category name, price cents)."""
    with get_connection(db_path) as conn:
        rows = conn.execute("""
            SELECT p.name AS name, c.name AS category_name, p.price_cents AS price_cents
            FROM products p
            JOIN categories c ON c.id = p.category_id
            ORDER BY p.id
            LIMIT ?
        """, (limit,)).fetchall()
    return [(row["name"], row["category_name"], row["price_cents"]) for row in rows]


def get_all_products(db_path: str = DB_PATH, category_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """Retrieve products joined with their category name and image filename."""
    query = """
        SELECT p.*, c.name AS category_name, i.filename AS image_filename
        FROM products p
        JOIN categories c ON c.id = p.category_id
        LEFT JOIN product_images i ON i.product_id = p.id
    """
    params: Tuple[Any, ...] = ()
    if category_id is not None:
        query += " WHERE p.category_id = ?"
        params = (category_id,)
    query += " ORDER BY p.id"

    with get_connection(db_path) as conn:
        return [dict(row) for row in conn.execute(query, params).fetchall()]


def _window_start(now: Optional[datetime], days: int) -> str:
    return format_timestamp((now or utc_now()) - timedelta(days=days))


def get_newly_added_products(
    db_path: str = DB_PATH,
    now: Optional[datetime] = None,
    days: int = RECENT_WINDOW_DAYS,
) -> List[Product]:
    """Products created within the last ``days`` days."""
    with get_connection(db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM products WHERE created_at >= ? ORDER BY id",
            (_window_start(now, days),),
        ).fetchall()
    return [_row_to_product(row) for row in rows]


def get_recently_updated_products(
    db_path: str = DB_PATH,
    now: Optional[datetime] = None,
    days: int = RECENT_WINDOW_DAYS,
) -> List[Product]:
    """Products updated within the window but created before it."""
    start = _window_start(now, days)
    with get_connection(db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM products WHERE updated_at >= ? AND created_at < ? ORDER BY id",
            (start, start),
        ).fetchall()
    return [_row_to_product(row) for row in rows]


def get_on_sale_products(db_path: str = DB_PATH) -> List[Product]:
    """Products whose sale price is set and below the regular price."""
    with get_connection(db_path) as conn:
        rows = conn.execute("""
            SELECT * FROM products
            WHERE sale_price_cents IS NOT NULL AND sale_price_cents < price_cents
            ORDER BY id
        """).fetchall()
    return [_row_to_product(row) for row in rows]
