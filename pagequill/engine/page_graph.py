"""Page graph edits: deleting, importing and synthesizing pages."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator

from ..exceptions import PageGraphError

if TYPE_CHECKING:
    from .document import ImageSource, LayoutDocument

logger = logging.getLogger(__name__)


@dataclass
class PageTemplate:
    """A page sourced from outside the document being laid out.

    Attributes:
        width: Page width in points
        height: Page height in points
        content: Raw content stream, balanced with respect to q/Q
        resources: ``{"Font": {alias: font name}, "XObject": {alias: PdfImage}}``
    """

    width: float
    height: float
    content: str
    resources: Dict[str, Dict[str, Any]] = field(default_factory=lambda: {"Font": {}, "XObject": {}})

    @classmethod
    def from_page(cls, document: "LayoutDocument", page_number: int) -> "PageTemplate":
        """Lift a page (1-based) out of another document."""
        if not 1 <= page_number <= document.page_count:
            raise PageGraphError("Cannot import page", f"page {page_number} of {document.page_count}")
        page = document.state.pages[page_number - 1]
        content = page.stream.get_content()
        if not page.imported:
            content += "\nQ"
        return cls(
            width=page.width,
            height=page.height,
            content=content,
            resources={kind: dict(entries) for kind, entries in page.resources.items()},
        )


def delete_page(document: "LayoutDocument") -> None:
    """Delete the current page and move to the page before it.

    The page node and its content stream leave the object store; deleting
    the only page leaves the document without a current page.
    """
    page_number = document.page_number
    page = document.page
    if page_number < 1 or page is None:
        raise PageGraphError("Cannot delete page", "document has no current page")

    store = document.state.store
    page_id = store.object_id_for_page(page_number)
    for identifier in (page_id, page.content.identifier):
        store.delete(identifier)
    del store.kids[page_number - 1]
    store.pages.data["Count"] -= 1
    del document.state.pages[page_number - 1]
    store.validate_page_tree()
    logger.debug("Deleted page %s; %s pages remain", page_number, document.page_count)

    if page_number > 1:
        document.go_to_page(page_number - 1)
    else:
        document.page_number = 0
        document.state.page = None


def truncate_pages(document: "LayoutDocument", page_count: int) -> None:
    """Delete trailing pages until the document has ``page_count`` pages."""
    if page_count < 0:
        raise ValueError(f"page count must not be negative: {page_count}")
    while document.page_count > page_count:
        document.go_to_page(document.page_count)
        delete_page(document)


@contextmanager
def perform_discretely(document: "LayoutDocument") -> Iterator[None]:
    """Suspend the page-creation hook for the duration of the body."""
    saved_callback = document.state.on_page_create_callback
    if saved_callback is None:
        yield
        return
    document.state.on_page_create_callback = None
    try:
        yield
    finally:
        document.state.on_page_create_callback = saved_callback


def start_new_page_discretely(document: "LayoutDocument", **options: Any) -> None:
    """Start a new page without running the page-creation hook."""
    with perform_discretely(document):
        document.start_new_page(**options)


def import_page(document: "LayoutDocument", template: PageTemplate,
                replace: bool = False, advance: bool = True) -> None:
    """Insert an external page after the current one.

    Args:
        document: Target document
        template: Page to import
        replace: Delete the current page first
        advance: Move on afterwards, to the next page or to a new one

    Imported content cannot be recompressed, so compression is switched off
    for the rest of the document. When advancing from the last page the new
    page gets the size and layout the document had before the import.
    """
    if document.page is not None:
        prev_page_size, prev_page_layout = document.page.size, document.page.layout
    else:
        prev_page_size, prev_page_layout = document.options.page_size, document.options.page_layout
    document.state.compress = False
    prev_text_rendering_mode = document.text_rendering_mode
    if replace:
        delete_page(document)
    start_new_page_discretely(document, template=template)
    document.text_rendering_mode = prev_text_rendering_mode
    logger.debug("Imported page %s (%gx%g)", document.page_number, template.width, template.height)

    if advance:
        if document.last_page:
            document.start_new_page(size=prev_page_size, layout=prev_page_layout)
        else:
            document.go_to_page(document.page_number + 1)


def image_page(document: "LayoutDocument", source: "ImageSource", canvas: bool = False) -> None:
    """Add a page holding a single image.

    With ``canvas`` the image is stretched over the whole page; otherwise it
    is fitted inside the margin box. Afterwards the cursor is on the last
    page of the document, not necessarily the page after the image page.
    """
    start_new_page_discretely(document)
    if canvas:
        with document.canvas():
            document.move_cursor_to(document.bounds.top)
            document.image(source, width=document.bounds.width, height=document.bounds.height)
    else:
        document.image(source, fit=(document.bounds.width, document.bounds.height))
    document.go_to_page(document.page_count)

