"""PDF objects and the identifier-keyed object store backing a document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union

from ..geometry import Margins
from ...exceptions import PageGraphError
from .utils import escape_pdf_string, format_pdf_number

logger = logging.getLogger(__name__)

# Every generated page starts with a saved graphics state
INITIAL_PAGE_CONTENT = "q"


@dataclass(frozen=True)
class PdfReference:
    """Indirect reference to an object in the store."""

    identifier: int


@dataclass
class PdfStream:
    """Represents a PDF content stream (instructions for drawing)."""

    commands: List[str] = field(default_factory=list)

    @classmethod
    def for_page(cls) -> "PdfStream":
        return cls(commands=[INITIAL_PAGE_CONTENT])

    def add_text(self, font_alias: str, font_size: float, x: float, y: float, text: str,
                 color: Optional[tuple] = None) -> None:
        """Add a text drawing command.

        Args:
            font_alias: Font alias (e.g., "/F1")
            font_size: Font size in points
            x: X position of the baseline start
            y: Y position of the baseline
            text: Text content
            color: Optional RGB tuple (0-1 scale)
        """
        if color:
            self.commands.append(" ".join(format_pdf_number(c) for c in color) + " rg")
        self.commands.append("BT")
        self.commands.append(f"{font_alias} {format_pdf_number(font_size)} Tf")
        self.commands.append(f"{format_pdf_number(x)} {format_pdf_number(y)} Td")
        self.commands.append(f"{_encode_text(text)} Tj")
        self.commands.append("ET")
        if color:
            self.commands.append("0 0 0 rg")

    def add_rect(self, x: float, y: float, width: float, height: float, fill_color: Optional[tuple] = None) -> None:
        """Add a rectangle, filled when ``fill_color`` is given and stroked otherwise."""
        if fill_color:
            self.commands.append(" ".join(format_pdf_number(c) for c in fill_color) + " rg")
        self.commands.append(
            f"{format_pdf_number(x)} {format_pdf_number(y)} "
            f"{format_pdf_number(width)} {format_pdf_number(height)} re"
        )
        self.commands.append("f" if fill_color else "S")
        if fill_color:
            self.commands.append("0 0 0 rg")

    def add_image(self, image_alias: str, x: float, y: float, width: float, height: float) -> None:
        """Draw an image XObject with its bottom-left corner at (x, y)."""
        self.commands.append("q")
        self.commands.append(
            f"{format_pdf_number(width)} 0 0 {format_pdf_number(height)} "
            f"{format_pdf_number(x)} {format_pdf_number(y)} cm"
        )
        self.commands.append(f"{image_alias} Do")
        self.commands.append("Q")

    @property
    def is_initial(self) -> bool:
        """True when nothing has been drawn since the page was created."""
        return self.commands == [INITIAL_PAGE_CONTENT]

    def get_content(self) -> str:
        """Get stream content as string."""
        return "\n".join(self.commands)


def _encode_text(text: str) -> str:
    try:
        text.encode("ascii")
        return f"({escape_pdf_string(text)})"
    except UnicodeEncodeError:
        pass
    try:
        return "<" + text.encode("cp1252").hex().upper() + ">"
    except UnicodeEncodeError:
        return "<FEFF" + text.encode("utf-16be").hex().upper() + ">"


@dataclass
class PdfObject:
    """An object held in the store: a dictionary plus an optional stream."""

    identifier: int
    data: Dict[str, Any]
    stream: Optional[PdfStream] = None

    @property
    def reference(self) -> PdfReference:
        return PdfReference(self.identifier)


@dataclass
class PdfPage:
    """In-memory view of a page: its page node, content stream and layout data."""

    dictionary: PdfObject
    content: PdfObject
    size: Union[str, Tuple[float, float]]
    layout: str
    margins: Margins
    resources: Dict[str, Dict[str, Any]] = field(default_factory=lambda: {"Font": {}, "XObject": {}})
    imported: bool = False

    @property
    def identifier(self) -> int:
        return self.dictionary.identifier

    @property
    def reference(self) -> PdfReference:
        return self.dictionary.reference

    @property
    def stream(self) -> PdfStream:
        return self.content.stream

    @property
    def dimensions(self) -> List[float]:
        """MediaBox as ``[llx, lly, urx, ury]``."""
        return self.dictionary.data["MediaBox"]

    @property
    def width(self) -> float:
        return self.dimensions[2]

    @property
    def height(self) -> float:
        return self.dimensions[3]

    def use_font(self, alias: str, font_name: str) -> None:
        self.resources["Font"][alias.lstrip("/")] = font_name

    def use_image(self, alias: str, image: Any) -> None:
        self.resources["XObject"][alias.lstrip("/")] = image


class ObjectStore:
    """Identifier-keyed store of PDF objects with a catalog, info and page tree.

    Identifiers are never reused, so a deleted object leaves a gap that the
    writer compacts when serialising.
    """

    def __init__(self, info: Optional[Dict[str, Any]] = None):
        self._objects: Dict[int, PdfObject] = {}
        self._next_identifier = 1
        self.info = self.ref(dict(info or {}))
        self.pages = self.ref({"Type": "/Pages", "Kids": [], "Count": 0})
        self.root = self.ref({"Type": "/Catalog", "Pages": self.pages.reference})

    def ref(self, data: Dict[str, Any], stream: Optional[PdfStream] = None) -> PdfObject:
        """Add a new object to the store and return it."""
        obj = PdfObject(self._next_identifier, data, stream)
        self._objects[obj.identifier] = obj
        self._next_identifier += 1
        return obj

    def __getitem__(self, identifier: int) -> PdfObject:
        return self._objects[identifier]

    def __contains__(self, identifier: int) -> bool:
        return identifier in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[PdfObject]:
        return iter(list(self._objects.values()))

    @property
    def identifiers(self) -> List[int]:
        return list(self._objects)

    @property
    def kids(self) -> List[PdfReference]:
        return self.pages.data["Kids"]

    @property
    def page_count(self) -> int:
        return self.pages.data["Count"]

    def delete(self, identifier: int) -> None:
        """Remove an object from the store."""
        if identifier not in self._objects:
            raise PageGraphError("Cannot delete object", f"identifier {identifier} is not in the store")
        del self._objects[identifier]
        logger.debug("Deleted object %s from store", identifier)

    def insert_kid(self, position: int, page: PdfObject) -> None:
        """Insert a page node into the page tree at ``position`` (0-based)."""
        self.kids.insert(position, page.reference)
        self.pages.data["Count"] += 1

    def object_id_for_page(self, page_number: int) -> int:
        """Return the identifier of the page node for a 1-based page number."""
        if not 1 <= page_number <= len(self.kids):
            raise PageGraphError("Page not in page tree", f"page {page_number} of {len(self.kids)}")
        return self.kids[page_number - 1].identifier

    def validate_page_tree(self) -> None:
        """Fail when the page tree's child list and count disagree."""
        if len(self.kids) != self.page_count:
            raise PageGraphError(
                "Page tree is inconsistent",
                f"{len(self.kids)} kids but Count is {self.page_count}",
            )

    def reachable_identifiers(self) -> Set[int]:
        """Identifiers reachable from the catalog and info dictionaries."""
        seen: Set[int] = set()
        pending = [self.root.identifier, self.info.identifier]
        while pending:
            identifier = pending.pop()
            if identifier in seen or identifier not in self._objects:
                continue
            seen.add(identifier)
            pending.extend(ref.identifier for ref in _iter_references(self._objects[identifier].data))
        return seen

    def dangling_identifiers(self) -> Set[int]:
        """Identifiers held in the store that nothing surviving refers to."""
        return set(self._objects) - self.reachable_identifiers()

    def broken_references(self) -> Set[int]:
        """Identifiers referenced somewhere in the store but missing from it."""
        broken: Set[int] = set()
        for obj in self._objects.values():
            for ref in _iter_references(obj.data):
                if ref.identifier not in self._objects:
                    broken.add(ref.identifier)
        return broken


def _iter_references(value: Any) -> Iterator[PdfReference]:
    if isinstance(value, PdfReference):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from _iter_references(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _iter_references(item)
