"""Tests for scratch documents."""

import logging

from pagequill import LayoutDocument, ScratchPool, get_scratch_document
from pagequill.engine.scratch import default_pool


class TestScratchPool:
    """Test suite for ScratchPool."""

    def test_memoised_per_document(self, document, pool):
        """Test the same scratch document is returned on every call."""
        first = pool.get(document)
        second = pool.get(document)

        assert first is second
        assert document in pool

    def test_one_scratch_per_document(self, options, pool):
        """Test documents do not share scratch state."""
        doc_a = LayoutDocument(options)
        doc_b = LayoutDocument(options)
        doc_a.capture_prototype()
        doc_b.capture_prototype()

        assert pool.get(doc_a) is not pool.get(doc_b)

    def test_clone_is_marked_scratch(self, document, pool):
        """Test the clone reports itself as scratch while the primary does not."""
        scratch = pool.get(document)

        assert scratch.is_scratch()
        assert not document.is_scratch()
        assert not document.prototype.document.is_scratch()

    def test_clone_matches_prototype(self, document, pool):
        """Test the clone carries the primary's configuration but no pages."""
        document.set_font("Courier", style="bold", size=9)
        document.capture_prototype()

        scratch = pool.get(document)

        assert scratch.page_count == 0
        assert scratch.options.page_size == (400, 800)
        assert scratch.font_info() == {"family": "Courier", "style": "bold", "size": 9.0}
        assert scratch.prototype is document.prototype

    def test_recapture_rebuilds_clone(self, document, pool):
        """Test a new prototype replaces the cached scratch document."""
        first = pool.get(document)
        document.capture_prototype()

        assert pool.get(document) is not first

    def test_clone_does_not_touch_primary(self, document, pool):
        """Test drawing on the scratch document leaves the primary untouched."""
        scratch = pool.get(document)
        scratch.start_new_page()
        scratch.text("scratch only")

        assert document.page_count == 1
        assert document.empty_page
        assert document.prototype.document.page_count == 0

    def test_missing_prototype_warns(self, options, pool, caplog):
        """Test a document without a prototype gets a default scratch and a warning."""
        doc = LayoutDocument(options)

        with caplog.at_level(logging.WARNING, logger="pagequill.engine.scratch"):
            scratch = pool.get(doc)

        assert scratch.is_scratch()
        assert scratch.page_count == 0
        assert "no scratch prototype" in caplog.text.lower()

    def test_discard(self, document, pool):
        """Test discarding forgets the cached scratch document."""
        pool.get(document)
        pool.discard(document)

        assert document not in pool

    def test_default_pool(self, document):
        """Test the module-level pool backs get_scratch_document."""
        scratch = get_scratch_document(document)

        assert default_pool.get(document) is scratch
        default_pool.discard(document)
