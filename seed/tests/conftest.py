"""Shared test fixtures for the seed test suite."""

import csv
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
import requests  # type: ignore[import-untyped]

from seed.db import init_db, insert_category, insert_product
from seed.logging_config import set_run_context
from seed.models import Product

CSV_HEADER = [
    "id", "name", "brand", "manufacturer", "manufacturerNumber", "dimension",
    "weight", "colors", "upc", "ean", "categories", "dateAdded", "dateUpdated",
    "imageURLs", "prices.amountMax",
]

FAKE_JPEG = b"\xff\xd8\xff\xe0fake-jpeg-bytes"


@pytest.fixture(autouse=True)
def no_network(monkeypatch):
    """Make the shared session fail loudly instead of touching the network."""
    blocked = MagicMock()
    blocked.get.side_effect = requests.exceptions.ConnectionError("network disabled in tests")
    monkeypatch.setattr("seed.http._session", blocked)
    return blocked


@pytest.fixture(autouse=True)
def reset_seed_logger(monkeypatch, tmp_path):
    """Keep log files out of the repo and drop handlers added by a test."""
    monkeypatch.setattr("seed.logging_config.LOG_DIR", tmp_path / "logs")
    yield
    set_run_context()
    logger = logging.getLogger("seed")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_db(tmp_path) -> str:
    """Create an initialized temporary database."""
    db_path = str(tmp_path / "catalog.db")
    init_db(db_path)
    return db_path


@pytest.fixture
def product(temp_db) -> Product:
    """A persisted product in its own category."""
    category = insert_category(temp_db, "Headphones")
    return insert_product(
        temp_db,
        name="Sony WH-1000XM4",
        description="Noise cancelling headphones",
        price_cents=34999,
        category_id=category.id,
    )


def make_row(**overrides: Any) -> Dict[str, str]:
    """A complete CSV record with sensible defaults."""
    row = {
        "id": "AVpe7AsMilAPnD_xQ78G",
        "name": "Sony WH-1000XM4 Wireless Headphones",
        "brand": "Sony",
        "manufacturer": "Sony",
        "manufacturerNumber": "WH1000XM4/B",
        "dimension": "7.3 x 10.4 x 3 in",
        "weight": "8.96 oz",
        "colors": "Black",
        "upc": "027242919419",
        "ean": "",
        "categories": "Electronics,Headphones,Audio,Wireless Headphones",
        "dateAdded": "2015-04-13T12:00:51Z",
        "dateUpdated": "2018-01-29T13:15:10Z",
        "imageURLs": "",
        "prices.amountMax": "348.00",
    }
    row.update(overrides)
    return row


@pytest.fixture
def write_csv(tmp_path) -> Callable[[List[Dict[str, str]]], str]:
    """Factory that writes CSV records to a temp file and returns its path."""

    def _write(rows: List[Dict[str, str]], name: str = "electronics.csv") -> str:
        path = tmp_path / name
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_HEADER, extrasaction="ignore")
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
        return str(path)

    return _write


def make_response(
    text: str = "",
    content: bytes = FAKE_JPEG,
    status_code: int = 200,
) -> MagicMock:
    """A requests.Response stand-in."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.content = content
    if status_code >= 400:
        error_response = MagicMock(status_code=status_code)
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Client Error", response=error_response
        )
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def fake_session() -> MagicMock:
    """Session whose GET always returns a small JPEG payload."""
    session = MagicMock()
    session.get.return_value = make_response()
    return session


def fixture_path(name: str) -> Path:
    return Path(__file__).parent / "fixtures" / name


def session_for(pages: Dict[str, MagicMock], default: Optional[MagicMock] = None) -> MagicMock:
    """Session that answers per-URL, falling back to ``default`` (an image)."""
    session = MagicMock()

    def _get(url, timeout=None):
        if url in pages:
            return pages[url]
        return default or make_response()

    session.get.side_effect = _get
    return session
