"""Tests for the PDF object store and page objects."""

import pytest

from pagequill import ObjectStore, PageGraphError
from pagequill.engine.pdfcompiler import PdfReference, PdfStream


class TestObjectStore:
    """Test suite for ObjectStore."""

    def test_initial_objects(self):
        """Test info, page tree and catalog are created and linked."""
        store = ObjectStore(info={"Title": "Report"})

        assert len(store) == 3
        assert store.root.data["Pages"] == store.pages.reference
        assert store.info.data == {"Title": "Report"}
        assert store.kids == []
        assert store.page_count == 0

    def test_identifiers_not_reused(self):
        """Test deleting an object leaves a gap."""
        store = ObjectStore()
        obj = store.ref({"Type": "/Test"})

        store.delete(obj.identifier)
        replacement = store.ref({"Type": "/Test"})

        assert replacement.identifier == obj.identifier + 1
        assert obj.identifier not in store

    def test_delete_missing(self):
        """Test deleting an unknown identifier."""
        store = ObjectStore()

        with pytest.raises(PageGraphError):
            store.delete(99)

    def test_page_tree(self):
        """Test pages are found by position."""
        store = ObjectStore()
        first = store.ref({"Type": "/Page"})
        second = store.ref({"Type": "/Page"})
        store.insert_kid(0, second)
        store.insert_kid(0, first)

        assert store.object_id_for_page(1) == first.identifier
        assert store.object_id_for_page(2) == second.identifier
        assert store.page_count == 2
        store.validate_page_tree()

    def test_page_out_of_range(self):
        """Test asking for a page past the end."""
        with pytest.raises(PageGraphError):
            ObjectStore().object_id_for_page(1)

    def test_inconsistent_tree(self):
        """Test a count that disagrees with the kids is detected."""
        store = ObjectStore()
        store.pages.data["Count"] = 1

        with pytest.raises(PageGraphError) as exc_info:
            store.validate_page_tree()

        assert "0 kids but Count is 1" in str(exc_info.value)

    def test_dangling_and_broken(self):
        """Test unreachable objects and references to deleted objects."""
        store = ObjectStore()
        orphan = store.ref({"Type": "/Orphan"})
        target = store.ref({"Type": "/Target"})
        store.root.data["Extra"] = target.reference
        store.delete(target.identifier)

        assert store.dangling_identifiers() == {orphan.identifier}
        assert store.broken_references() == {target.identifier}

    def test_iteration_in_creation_order(self):
        """Test objects iterate in the order they were added."""
        store = ObjectStore()
        added = [store.ref({"n": n}) for n in range(3)]

        assert list(store)[-3:] == added

    def test_reference_equality(self):
        """Test references compare by identifier."""
        assert PdfReference(4) == PdfReference(4)
        assert {PdfReference(4), PdfReference(4)} == {PdfReference(4)}


class TestPdfStream:
    """Test suite for PdfStream."""

    def test_page_stream_starts_initial(self):
        """Test a new page stream holds only the saved graphics state."""
        stream = PdfStream.for_page()

        assert stream.is_initial
        stream.add_rect(0, 0, 10, 10)
        assert not stream.is_initial

    def test_text_encoding(self):
        """Test literal, WinAnsi and UTF-16 encodings."""
        stream = PdfStream()
        stream.add_text("/F1", 12, 10, 20, "a(b)")
        stream.add_text("/F1", 12, 10, 20, "café")
        stream.add_text("/F1", 12, 10, 20, "日")

        content = stream.get_content()
        assert "(a\\(b\\)) Tj" in content
        assert "<636166E9> Tj" in content
        assert "<FEFF65E5> Tj" in content

    def test_number_formatting(self):
        """Test coordinates are written with at most three decimals."""
        stream = PdfStream()
        stream.add_rect(1.23456, -0.0001, 10, 2.5)

        assert stream.commands[-2] == "1.235 0 10 2.5 re"
        assert stream.commands[-1] == "S"
