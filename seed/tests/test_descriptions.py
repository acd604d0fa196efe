"""Tests for description synthesis and truncation."""

from seed.descriptions import synthesize_description, truncate_description
from seed.models import RawRow

from conftest import make_row


def _row(**overrides) -> RawRow:
    return RawRow.from_csv(make_row(**overrides))


class TestSynthesizeDescription:
    """Descriptions built from row fields."""

    def test_starts_with_brand_template(self):
        """The brand sentence comes first."""
        text = synthesize_description(_row())
        assert text.startswith(
            "High-quality Sony product featuring advanced technology and reliable performance.\n\n"
        )

    def test_fragments_in_fixed_order(self):
        """Detail fragments follow a fixed order."""
        text = synthesize_description(_row(manufacturer="Sony Corp", ean="4548736112100"))
        details = text.split("\n\n", 1)[1]
        assert details == (
            "Brand: Sony | Manufacturer: Sony Corp | Model: WH1000XM4/B"
            " | Dimensions: 7.3 x 10.4 x 3 in | Weight: 8.96 oz"
            " | Available Colors: Black | UPC: 027242919419 | EAN: 4548736112100"
        )

    def test_manufacturer_same_as_brand_omitted(self):
        """A manufacturer equal to the brand is not repeated."""
        text = synthesize_description(_row())
        assert "Manufacturer:" not in text

    def test_blank_fields_omitted(self):
        """Blank fields produce no fragment."""
        text = synthesize_description(_row(
            manufacturerNumber="", dimension="  ", weight="", colors=""
        ))
        assert "Model:" not in text
        assert "Dimensions:" not in text
        assert "Weight:" not in text
        assert "Available Colors:" not in text

    def test_zero_upc_omitted(self):
        """A UPC of "0" is left out."""
        text = synthesize_description(_row(upc="0"))
        assert "UPC:" not in text

    def test_real_upc_included(self):
        """A real UPC is listed."""
        text = synthesize_description(_row(upc="123456"))
        assert "UPC: 123456" in text

    def test_zero_ean_omitted(self):
        """An EAN of "0" is left out."""
        text = synthesize_description(_row(ean="0"))
        assert "EAN:" not in text

    def test_long_description_truncated(self):
        """Overlong descriptions are cut to 500 characters."""
        text = synthesize_description(_row(colors="Black," * 200))
        assert len(text) == 500
        assert text.endswith("...")


class TestTruncateDescription:
    """Truncation to the description limit."""

    def test_short_text_unchanged(self):
        """Short text is returned as is."""
        assert truncate_description("Compact and light") == "Compact and light"

    def test_text_at_limit_unchanged(self):
        """Text exactly at the limit is not cut."""
        text = "x" * 500
        assert truncate_description(text) == text

    def test_text_over_limit_ends_with_ellipsis(self):
        """Cut text ends with an ellipsis inside the limit."""
        text = truncate_description("y" * 501)
        assert len(text) == 500
        assert text == "y" * 497 + "..."

    def test_custom_limit(self):
        """A custom limit is honoured."""
        assert truncate_description("abcdefghij", limit=8) == "abcde..."
