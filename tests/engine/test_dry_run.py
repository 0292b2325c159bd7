"""Tests for dry runs."""

import pytest

from pagequill import dry_run, inset


class TestDryRun:
    """Test suite for dry_run."""

    def test_empty_procedure_measures_zero(self, document, pool):
        """Test a procedure that draws nothing has no height."""
        result = dry_run(document, lambda doc: None, pool)

        assert result.total_height == 0
        assert result.whole_pages == 0
        assert result.partial_page_height == 0

    def test_measures_cursor_travel(self, document, pool):
        """Test height within one page."""
        result = dry_run(document, lambda doc: doc.move_down(250), pool)

        assert result.total_height == 250
        assert result.whole_pages == 0

    def test_measures_page_breaks(self, document, pool):
        """Test whole pages count at the bounds height."""

        def procedure(doc):
            doc.move_down(300)
            doc.bounds.move_past_bottom()
            doc.bounds.move_past_bottom()
            doc.move_down(120)

        result = dry_run(document, procedure, pool)

        assert result.whole_pages == 2
        assert result.partial_page_height == 120
        assert result.total_height == 2 * 700 + 120

    def test_partial_height_capped(self, document, pool):
        """Test overshoot past the writable area is not counted."""
        result = dry_run(document, lambda doc: doc.move_down(900), pool)

        assert result.partial_page_height == 700
        assert result.total_height == 700

    def test_primary_document_unchanged(self, document, pool):
        """Test a dry run writes nothing to the real document."""
        document.move_down(40)
        y = document.y

        dry_run(document, lambda doc: doc.text("Measured, not drawn. " * 20), pool)

        assert document.y == y
        assert document.page_count == 1
        assert document.empty_page

    def test_mirrors_padding_and_font(self, document, pool):
        """Test the scratch document sees the primary's padding and font."""
        seen = {}

        def procedure(doc):
            seen["width"] = doc.bounds.width
            seen["font"] = doc.font_info()

        document.set_font("Times-Roman", style="italic", size=14)
        with inset(document, 30, 20):
            dry_run(document, procedure, pool)

        assert seen["width"] == 250
        assert seen["font"] == {"family": "Times-Roman", "style": "italic", "size": 14.0}

    def test_scratch_restored_after_run(self, document, pool):
        """Test pages, padding and font are reverted on the scratch document."""
        with inset(document, 30, 0):
            dry_run(document, lambda doc: doc.bounds.move_past_bottom(), pool)

        scratch = pool.get(document)
        assert scratch.page_count == 0
        assert scratch.bounds.total_left_padding == 0
        assert scratch.font_info() == document.prototype.document.font_info()

    def test_repeated_runs_agree(self, document, pool):
        """Test scratch state does not accumulate between runs."""
        procedure = lambda doc: doc.text("Line of text that wraps around. " * 30)

        first = dry_run(document, procedure, pool)
        second = dry_run(document, procedure, pool)

        assert first == second
        assert first.total_height > 0

    def test_failure_propagates_and_cleans_up(self, document, pool):
        """Test an error in the procedure reaches the caller with scratch state reset."""

        def procedure(doc):
            doc.bounds.move_past_bottom()
            raise KeyError("missing")

        with pytest.raises(KeyError):
            dry_run(document, procedure, pool)

        scratch = pool.get(document)
        assert scratch.page_count == 0
        assert scratch.bounds.total_left_padding == 0

    def test_text_height_matches_real_rendering(self, document, pool):
        """Test the measured height equals the height the text takes for real."""
        text = "A paragraph long enough to wrap over several lines. " * 6

        result = dry_run(document, lambda doc: doc.text(text, line_height=1.4), pool)
        start = document.y
        document.text(text, line_height=1.4)

        assert result.total_height == pytest.approx(start - document.y)
