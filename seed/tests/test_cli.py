"""Tests for the seed command line."""

import json
import os
from unittest.mock import patch

import pytest

from seed.cli import main, parse_args
from seed.db import get_all_products, get_categories, get_product_count

from conftest import fixture_path, make_response, make_row, session_for

URL = "https://webscraper.io/test-sites/e-commerce/allinone/computers/laptops"


@pytest.fixture
def scrape_session():
    with open(fixture_path("laptops.html"), "r", encoding="utf-8") as f:
        html = f.read()
    return session_for({URL: make_response(text=html)})


@pytest.fixture
def csv_path(write_csv):
    return write_csv([
        make_row(),
        make_row(name="XPS 13", brand="Dell", categories="Computers,Laptops"),
        make_row(name="xps 13", brand="dell"),
    ])


class TestParseArgs:
    """Argument parsing."""

    def test_defaults(self):
        """Defaults come from the configuration."""
        args = parse_args([])
        assert args.target == 100
        assert args.seed is None
        assert not args.no_images
        assert not args.skip_scrape
        assert not args.scrape_only

    def test_scrape_flags_are_exclusive(self):
        """Skipping and only running the scrape cannot be combined."""
        with pytest.raises(SystemExit):
            parse_args(["--skip-scrape", "--scrape-only"])


class TestSeedCommand:
    """The seed run."""

    def test_missing_csv_aborts_before_touching_db(self, tmp_path, capsys):
        """A missing CSV exits with 1 before the database is created."""
        db_path = tmp_path / "catalog.db"

        code = main(["--csv", str(tmp_path / "missing.csv"), "--db", str(db_path), "--skip-scrape"])

        assert code == 1
        assert not db_path.exists()
        assert "not found!" in capsys.readouterr().out

    def test_csv_import_without_network(self, tmp_path, csv_path, capsys):
        """A CSV-only run prints the report and completes."""
        db_path = str(tmp_path / "catalog.db")

        code = main([
            "--csv", csv_path, "--db", db_path,
            "--no-images", "--skip-scrape", "--seed", "7",
        ])

        assert code == 0
        assert get_product_count(db_path) == 2
        out = capsys.readouterr().out
        assert "SEEDING COMPLETED!" in out
        assert "Products skipped (duplicates/errors): 1" in out
        assert "Database seeding completed successfully!" in out
        assert "Seeding complete!" in out

    def test_rerun_replaces_catalog(self, tmp_path, csv_path):
        """Running twice replaces the catalog instead of appending."""
        db_path = str(tmp_path / "catalog.db")
        argv = ["--csv", csv_path, "--db", db_path, "--no-images", "--skip-scrape"]

        main(argv)
        main(argv)

        assert get_product_count(db_path) == 2
        assert [p["id"] for p in get_all_products(db_path)] == [1, 2]

    def test_full_run_adds_web_laptops(self, tmp_path, csv_path, scrape_session):
        """The default run also scrapes the listings page."""
        db_path = str(tmp_path / "catalog.db")

        with patch("seed.cli.create_session", return_value=scrape_session):
            code = main(["--csv", csv_path, "--db", db_path, "--no-images", "--scrape-url", URL])

        assert code == 0
        assert get_product_count(db_path) == 4
        assert "Web Laptops" in [c.name for c in get_categories(db_path)]

    def test_scrape_failure_keeps_csv_products(self, tmp_path, csv_path, no_network):
        """A failed scrape keeps the imported products."""
        db_path = str(tmp_path / "catalog.db")

        with patch("seed.cli.create_session", return_value=no_network):
            code = main(["--csv", csv_path, "--db", db_path, "--no-images", "--scrape-url", URL])

        assert code == 0
        assert get_product_count(db_path) == 2

    def test_scrape_only_keeps_existing_data(self, temp_db, product, scrape_session):
        """A scrape-only run adds to the existing catalog."""
        with patch("seed.cli.create_session", return_value=scrape_session):
            code = main(["--db", temp_db, "--scrape-only", "--no-images", "--scrape-url", URL])

        assert code == 0
        names = [p["name"] for p in get_all_products(temp_db)]
        assert names == [product.name, "Packard 255 G2", "Lenovo ThinkPad X1"]


class TestReportingCommands:
    """Stats and export."""

    def test_stats(self, temp_db, product, capsys):
        """Counts per category and read models are printed."""
        assert main(["--db", temp_db, "--stats"]) == 0

        out = capsys.readouterr().out
        assert "Categories: 1" in out
        assert "Total products: 1" in out
        assert "  Headphones: 1" in out
        assert "On sale: 0" in out

    def test_stats_on_empty_db(self, tmp_path, capsys):
        """An empty catalog is reported as such."""
        assert main(["--db", str(tmp_path / "new.db"), "--stats"]) == 0
        assert "No products yet" in capsys.readouterr().out

    def test_export_csv(self, temp_db, product, tmp_path):
        """The catalog is exported to the given path."""
        out_path = tmp_path / "export.csv"

        assert main(["--db", temp_db, "--export-csv", str(out_path)]) == 0
        assert os.path.exists(out_path)


def test_log_records_carry_run_settings(tmp_path, csv_path):
    """JSONL records name the database, CSV and target of the run."""
    db_path = str(tmp_path / "catalog.db")

    main(["--csv", csv_path, "--db", db_path, "--no-images", "--skip-scrape", "--target", "5"])

    log_file = next((tmp_path / "logs").glob("seed_*.jsonl"))
    with open(log_file, encoding="utf-8") as f:
        entries = [json.loads(line) for line in f]
    events = {e["event_type"]: e for e in entries if "event_type" in e}
    assert events["import_complete"]["run"] == {
        "db_path": db_path,
        "csv_path": csv_path,
        "target": 5,
    }
