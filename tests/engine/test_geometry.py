"""Tests for geometry primitives and document options."""

import pytest
from reportlab.lib.units import inch

from pagequill import DocumentOptions, LayoutError, Margins, page_dimensions, str_to_pt, to_pt


class TestMargins:
    """Test suite for Margins."""

    def test_uniform(self):
        """Test a single value applies to all sides."""
        assert Margins.from_value(12) == Margins(12, 12, 12, 12)

    @pytest.mark.parametrize("value,expected", [
        ([5], [5, 5, 5, 5]),
        ([10, 20], [10, 20, 10, 20]),
        ([10, 20, 30], [10, 20, 30, 20]),
        ([1, 2, 3, 4], [1, 2, 3, 4]),
    ])
    def test_css_shorthand(self, value, expected):
        """Test sequences follow CSS shorthand order."""
        assert Margins.from_value(value).as_list() == expected

    def test_too_many_values(self):
        """Test more than four values are rejected."""
        with pytest.raises(ValueError):
            Margins.from_value([1, 2, 3, 4, 5])


class TestUnits:
    """Test suite for unit conversion."""

    def test_to_pt(self):
        """Test supported units."""
        assert to_pt(1, "in") == inch
        assert to_pt(100, "px") == 75
        assert to_pt(5, None) == 5

    def test_unknown_unit(self):
        """Test unsupported units are rejected."""
        with pytest.raises(ValueError):
            to_pt(1, "em")

    def test_str_to_pt(self):
        """Test measurement strings."""
        assert str_to_pt("0.5in") == pytest.approx(36)
        assert str_to_pt("24") == 24
        assert str_to_pt("wide") is None


class TestDocumentOptions:
    """Test suite for DocumentOptions."""

    def test_defaults(self):
        """Test default options."""
        options = DocumentOptions()

        assert options.page_size == "A4"
        assert options.margins == Margins.uniform(36)
        assert options.compress is False

    def test_from_dict_ignores_unknown(self):
        """Test unknown keys are dropped."""
        options = DocumentOptions.from_dict({"page_layout": "landscape", "dpi": 300})

        assert options.page_layout == "landscape"

    def test_unknown_layout(self):
        """Test invalid layouts fail early."""
        with pytest.raises(LayoutError):
            DocumentOptions(page_layout="sideways")

    def test_unknown_size(self):
        """Test invalid page sizes fail early."""
        with pytest.raises(LayoutError) as exc_info:
            DocumentOptions(page_size="A0-ish")

        assert "A0-ish" in str(exc_info.value)


class TestPageDimensions:
    """Test suite for page_dimensions."""

    def test_named_size_case_insensitive(self):
        """Test named sizes resolve regardless of case."""
        assert page_dimensions("letter") == (612, 792)

    def test_landscape(self):
        """Test landscape puts the long side horizontal."""
        width, height = page_dimensions("A4", "landscape")

        assert width > height

    def test_custom_size_kept_as_given(self):
        """Test custom sizes are not rotated for portrait."""
        assert page_dimensions((800, 400)) == (800, 400)
