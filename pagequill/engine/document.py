"""LayoutDocument: the page-oriented rendering host the layout core drives.

Coordinates are PDF coordinates: the origin is the bottom-left corner of the
page and ``y`` grows upward. ``y`` is the absolute cursor position; ``cursor``
is the distance from ``y`` down to the bottom of the current bounds.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from reportlab.lib.utils import ImageReader

from ..config import DocumentOptions, page_dimensions
from ..exceptions import LayoutError
from ..version import __version__
from .bounds import BoundingBox
from .fonts import FontFace, FontFamilies
from .geometry import Margins
from .line_metrics import LineMetrics, calc_line_metrics
from .pdfcompiler.objects import ObjectStore, PdfObject, PdfPage, PdfStream
from .pdfcompiler.resources import PdfFontRegistry, PdfImageRegistry
from .pdfcompiler.utils import hex_to_rgb

logger = logging.getLogger(__name__)

PageCallback = Callable[["LayoutDocument"], None]
ImageSource = Union[str, Path, bytes]

# Tolerance for cursor comparisons
FLOAT_TOLERANCE = 1e-6


@dataclass
class DocumentState:
    """Persisted output state: object store, pages and page-creation hook."""

    store: ObjectStore
    pages: List[PdfPage] = field(default_factory=list)
    page: Optional[PdfPage] = None
    compress: bool = False
    on_page_create_callback: Optional[PageCallback] = None


class LayoutDocument:
    """A document being laid out page by page."""

    def __init__(
        self,
        options: Union[DocumentOptions, Mapping[str, Any], None] = None,
        skip_page_creation: bool = False,
    ):
        """Create a document.

        Args:
            options: DocumentOptions, a dict of option values, or None for defaults
            skip_page_creation: Do not start the first page
        """
        if options is None:
            options = DocumentOptions()
        elif isinstance(options, Mapping):
            options = DocumentOptions.from_dict(options)
        self.options = options

        info = {"Producer": f"pagequill {__version__}"}
        info.update(options.info)
        self.state = DocumentState(store=ObjectStore(info=info), compress=options.compress)

        self.font_families = FontFamilies()
        self.font_registry = PdfFontRegistry()
        self.image_registry = PdfImageRegistry()
        self.font_families.resolve(options.font_family, options.font_style)
        self._font_family = options.font_family
        self._font_style = options.font_style
        self._font_size = float(options.font_size)

        self.page_number = 0
        self.y = 0.0
        self.text_rendering_mode: Optional[str] = "fill"
        self.prototype = None
        self.margin_box: Optional[BoundingBox] = None
        self._bounds: Optional[BoundingBox] = None

        width, height = page_dimensions(options.page_size, options.page_layout)
        self._generate_margin_box(width, height, options.margins)
        self.y = self.margin_box.absolute_top

        if not skip_page_creation:
            self.start_new_page()

    @property
    def catalog(self) -> PdfObject:
        """The document catalog in the object store."""
        return self.state.store.root

    # Pages

    @property
    def page(self) -> Optional[PdfPage]:
        return self.state.page

    @property
    def page_count(self) -> int:
        return len(self.state.pages)

    def on_page_create(self, callback: Optional[PageCallback] = None) -> None:
        """Install (or clear) the hook called after each page is created."""
        self.state.on_page_create_callback = callback

    def start_new_page(
        self,
        size: Union[str, Tuple[float, float], None] = None,
        layout: Optional[str] = None,
        margins: Union[Margins, float, Sequence[float], None] = None,
        template: Any = None,
    ) -> PdfPage:
        """Insert a new page after the current one and move to its top.

        Size, layout and margins default to those of the current page, so an
        odd-sized page propagates to the pages started after it. A template
        (see ``PageTemplate``) supplies the page size and initial content.
        """
        last = self.state.page
        if margins is None:
            margins = last.margins if last else self.options.margins
        margins = Margins.from_value(margins)

        if template is not None:
            width, height = float(template.width), float(template.height)
            size = (width, height)
            layout = "landscape" if width > height else "portrait"
            stream = PdfStream(commands=[template.content])
        else:
            if size is None:
                size = last.size if last else self.options.page_size
            if layout is None:
                layout = last.layout if last else self.options.page_layout
            width, height = page_dimensions(size, layout)
            stream = PdfStream.for_page()

        store = self.state.store
        content = store.ref({}, stream)
        dictionary = store.ref({
            "Type": "/Page",
            "Parent": store.pages.reference,
            "MediaBox": [0, 0, width, height],
            "Contents": content.reference,
        })
        page = PdfPage(dictionary, content, size, layout, margins, imported=template is not None)
        if template is not None:
            page.resources = {kind: dict(entries) for kind, entries in template.resources.items()}
            # foreign content leaves the text state unknown
            self.text_rendering_mode = None

        self.state.pages.insert(self.page_number, page)
        store.insert_kid(self.page_number, dictionary)
        self.page_number += 1
        self.state.page = page
        self._enter_page()
        logger.debug("Started page %s of %s (%gx%g)", self.page_number, self.page_count, width, height)

        if self.state.on_page_create_callback is not None:
            self.state.on_page_create_callback(self)
        return page

    def go_to_page(self, page_number: int) -> None:
        """Move to the top of an existing page (1-based)."""
        if not 1 <= page_number <= self.page_count:
            raise LayoutError("Page out of range", f"{page_number} of {self.page_count}")
        self.page_number = page_number
        self.state.page = self.state.pages[page_number - 1]
        self._enter_page()

    def _enter_page(self) -> None:
        page = self.state.page
        self._generate_margin_box(page.width, page.height, page.margins)
        self.y = self._bounds.absolute_top

    def _generate_margin_box(self, width: float, height: float, margins: Margins) -> None:
        old_margin_box = self.margin_box
        self.margin_box = BoundingBox(
            self,
            None,
            (margins.left, height - margins.top),
            width - margins.left - margins.right,
            height - margins.top - margins.bottom,
            margin_box=True,
        )
        # keep padding across page breaks
        if old_margin_box is not None:
            self.margin_box.add_left_padding(old_margin_box.total_left_padding)
            self.margin_box.add_right_padding(old_margin_box.total_right_padding)
        if self._bounds is None or self._bounds is old_margin_box:
            self._bounds = self.margin_box

    def set_page_margin(self, margin: Union[Margins, float, Sequence[float]]) -> None:
        """Set the margins of the current page and rebuild its margin box."""
        if self.page is None:
            raise LayoutError("No current page")
        self.page.margins = Margins.from_value(margin)
        self._generate_margin_box(self.page.width, self.page.height, self.page.margins)

    # Measurements

    def _page_size(self) -> Tuple[float, float]:
        if self.page is not None:
            return (self.page.width, self.page.height)
        return page_dimensions(self.options.page_size, self.options.page_layout)

    @property
    def page_width(self) -> float:
        """Width of the current page from edge to edge."""
        return self._page_size()[0]

    @property
    def page_height(self) -> float:
        """Height of the current page from edge to edge."""
        return self._page_size()[1]

    @property
    def effective_page_width(self) -> float:
        """Writable width; the width of the reference bounds."""
        return self.reference_bounds.width

    @property
    def effective_page_height(self) -> float:
        """Writable height; the height of the reference bounds."""
        return self.reference_bounds.height

    @property
    def page_margin(self) -> List[float]:
        """Margins of the current page as ``[top, right, bottom, left]``."""
        return self._page_margins().as_list()

    def _page_margins(self) -> Margins:
        return self.page.margins if self.page is not None else self.options.margins

    @property
    def page_margin_left(self) -> float:
        return self._page_margins().left

    @property
    def page_margin_right(self) -> float:
        return self._page_margins().right

    @property
    def page_margin_top(self) -> float:
        return self._page_margins().top

    @property
    def page_margin_bottom(self) -> float:
        return self._page_margins().bottom

    @property
    def bounds_margin_left(self) -> float:
        """Distance from the left page edge to the current bounds."""
        return self.bounds.absolute_left

    @property
    def bounds_margin_right(self) -> float:
        """Distance from the current bounds to the right page edge."""
        return self.page_width - self.bounds.absolute_right

    def recto_page(self, page_number: Optional[int] = None) -> bool:
        return (page_number or self.page_number) % 2 == 1

    def verso_page(self, page_number: Optional[int] = None) -> bool:
        return (page_number or self.page_number) % 2 == 0

    def page_side(self, page_number: Optional[int] = None) -> str:
        return "recto" if self.recto_page(page_number) else "verso"

    @property
    def at_page_top(self) -> bool:
        """Whether the cursor sits at the top of the margin box."""
        return self.y == self.margin_box.absolute_top

    @property
    def empty_page(self) -> bool:
        """Whether nothing has been written to the current page."""
        return self.page_number > 0 and self.page.stream.is_initial

    @property
    def last_page(self) -> bool:
        return self.page_number == self.page_count

    # Bounds and cursor

    @property
    def bounds(self) -> BoundingBox:
        return self._bounds

    @bounds.setter
    def bounds(self, box: BoundingBox) -> None:
        self._bounds = box

    @property
    def reference_bounds(self) -> BoundingBox:
        """Innermost bounds with a fixed height."""
        box = self._bounds
        while box.stretchy and box.parent is not None:
            box = box.parent
        return box

    @property
    def cursor(self) -> float:
        """Distance from the cursor to the bottom of the current bounds."""
        return self.y - self.bounds.absolute_bottom

    def move_down(self, n: float) -> None:
        if n != 0:
            self.y -= n

    def move_up(self, n: float) -> None:
        if n != 0:
            self.y += n

    def move_cursor_to(self, n: float) -> None:
        """Place the cursor ``n`` points above the bottom of the current bounds."""
        self.y = n + self.bounds.absolute_bottom

    def _restore_bounds(self, box: BoundingBox) -> None:
        # a margin box from an earlier page is replaced by the current one
        self._bounds = self.margin_box if box.is_margin_box else box

    @contextmanager
    def bounding_box(
        self,
        point: Tuple[float, float],
        width: float,
        height: Optional[float] = None,
    ) -> Iterator[BoundingBox]:
        """Lay out the body inside a nested box.

        ``point`` is the top-left corner relative to the current bounds.
        After a fixed-height box the cursor moves to the bottom of the box;
        after a stretchy box it stays where the content ended.
        """
        parent = self._bounds
        box = BoundingBox(
            self,
            parent,
            (parent.absolute_left + point[0], parent.absolute_bottom + point[1]),
            width,
            height,
        )
        self._bounds = box
        self.y = box.absolute_top
        try:
            yield box
        finally:
            self._restore_bounds(parent)
        if not box.stretchy:
            self.y = box.absolute_bottom

    @contextmanager
    def canvas(self) -> Iterator[BoundingBox]:
        """Lay out the body against the whole physical page."""
        parent = self._bounds
        self._bounds = BoundingBox(self, None, (0.0, self.page_height), self.page_width, self.page_height)
        try:
            yield self._bounds
        finally:
            self._restore_bounds(parent)

    # Fonts

    def register_font(self, data: Mapping[str, Mapping[str, str]]) -> None:
        """Register TrueType font families, keyed by family then style."""
        self.font_families.register(data)

    @property
    def font(self) -> FontFace:
        """The current font at the current size."""
        return self.font_families.face(self._font_family, self._font_style, self._font_size)

    @property
    def font_family(self) -> str:
        return self._font_family

    @property
    def font_style(self) -> str:
        return self._font_style

    @property
    def font_size(self) -> float:
        return self._font_size

    def font_info(self) -> Dict[str, Any]:
        return {"family": self._font_family, "style": self._font_style, "size": self._font_size}

    def set_font(self, family: Optional[str] = None, style: Optional[str] = None, size: Optional[float] = None) -> None:
        """Select a font; omitted arguments keep their current value.

        Changing the family without a style resets the style to normal.
        """
        if family is not None and style is None and family != self._font_family:
            style = "normal"
        family = family or self._font_family
        style = style or self._font_style
        self.font_families.resolve(family, style)
        self._font_family = family
        self._font_style = style
        if size is not None:
            self._font_size = float(size)

    @contextmanager
    def using_font(self, family: Optional[str] = None, style: Optional[str] = None,
                   size: Optional[float] = None) -> Iterator[FontFace]:
        """Select a font for the body and restore the previous one afterwards."""
        saved = (self._font_family, self._font_style, self._font_size)
        self.set_font(family, style=style, size=size)
        try:
            yield self.font
        finally:
            self._font_family, self._font_style, self._font_size = saved

    def calc_line_metrics(self, line_height: float = 1, font: Optional[FontFace] = None,
                          font_size: Optional[float] = None) -> LineMetrics:
        """Line metrics for the given (or current) font and size."""
        font = font or self.font
        return calc_line_metrics(line_height, font, font_size if font_size is not None else font.size)

    # Drawing

    def _require_page(self) -> PdfPage:
        if self.page is None:
            raise LayoutError("No current page", "start a page before drawing")
        return self.page

    def text(self, string: str, line_height: float = 1, color: Optional[str] = None) -> None:
        """Draw word-wrapped text at the cursor, breaking pages as needed.

        Line metrics decide the spacing: half the leading (plus line gap)
        above the first line, the leading between lines and half the leading
        below the last line.
        """
        self._require_page()
        font = self.font
        metrics = self.calc_line_metrics(line_height, font)
        lines = wrap_text(string, font, self.bounds.width)
        if not lines:
            return
        rgb = hex_to_rgb(color) if color else None
        pdf_font = self.font_registry.register_font(font.name, font.font_path)

        self.move_down(metrics.padding_top)
        for index, line in enumerate(lines):
            if index:
                self.move_down(metrics.leading)
            if self.cursor < font.height - FLOAT_TOLERANCE and self.y != self.bounds.absolute_top:
                self.bounds.move_past_bottom()
            self.page.use_font(pdf_font.alias, font.name)
            self.page.stream.add_text(
                pdf_font.alias, font.size, self.bounds.absolute_left, self.y - font.ascender, line, rgb
            )
            self.y -= font.height
        self.move_down(metrics.padding_bottom)

    def image(
        self,
        source: ImageSource,
        fit: Optional[Tuple[float, float]] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> Tuple[float, float]:
        """Draw a raster image at the cursor and move below it.

        Without sizing options one pixel maps to one point. ``fit`` scales
        the image to fit within ``(width, height)`` keeping its aspect ratio.

        Returns:
            The drawn (width, height)
        """
        page = self._require_page()
        if isinstance(source, Path):
            source = str(source)
        reader = ImageReader(BytesIO(source) if isinstance(source, bytes) else source)
        px_width, px_height = reader.getSize()
        draw_width, draw_height = scale_image(px_width, px_height, fit=fit, width=width, height=height)

        pdf_image = self.image_registry.register_image(source, px_width, px_height)
        page.use_image(pdf_image.alias, pdf_image)
        page.stream.add_image(pdf_image.alias, self.bounds.absolute_left, self.y - draw_height, draw_width, draw_height)
        self.y -= draw_height
        return (draw_width, draw_height)

    def fill_bounds(self, color: str) -> None:
        """Fill the current bounds with a color; ``transparent`` draws nothing."""
        if not color or color == "transparent":
            return
        box = self.bounds
        self._require_page().stream.add_rect(
            box.absolute_left, box.absolute_bottom, box.width, box.height, hex_to_rgb(color)
        )

    # Destinations

    def dest_top(self, page_number: Optional[int] = None) -> List[Any]:
        """An XYZ destination at the top of a page that keeps the viewer zoom.

        Defaults to the current page.
        """
        page = self.state.pages[page_number - 1] if page_number else self._require_page()
        return [page.reference, "/XYZ", 0, page.height, None]

    # Scratch

    def capture_prototype(self) -> None:
        """Snapshot this document's configuration for scratch documents."""
        from .scratch import Prototype

        self.prototype = Prototype.capture(self)

    def is_scratch(self) -> bool:
        """Whether this document is a scratch copy used for measuring."""
        return bool(self.state.store.info.data.get("Scratch"))

    # Output

    def render_file(self, path: Union[str, Path]) -> Path:
        """Write the document as a PDF file."""
        from .pdfcompiler.writer import PdfWriter

        return PdfWriter(path).write(self)


def wrap_text(string: str, font: FontFace, width: float) -> List[str]:
    """Greedy word wrap; a word wider than ``width`` gets a line of its own."""
    lines: List[str] = []
    if not string:
        return lines
    space = font.width_of(" ")
    for paragraph in string.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = words[0]
        current_width = font.width_of(current)
        for word in words[1:]:
            word_width = font.width_of(word)
            if current_width + space + word_width <= width + FLOAT_TOLERANCE:
                current = f"{current} {word}"
                current_width += space + word_width
            else:
                lines.append(current)
                current, current_width = word, word_width
        lines.append(current)
    return lines


def scale_image(
    px_width: float,
    px_height: float,
    fit: Optional[Tuple[float, float]] = None,
    width: Optional[float] = None,
    height: Optional[float] = None,
) -> Tuple[float, float]:
    """Resolve the drawn size of an image from its intrinsic size and options."""
    if width is not None and height is not None:
        return (float(width), float(height))
    if width is not None:
        return (float(width), px_height * width / px_width)
    if height is not None:
        return (px_width * height / px_height, float(height))
    if fit is not None:
        scale = min(fit[0] / px_width, fit[1] / px_height)
        return (px_width * scale, px_height * scale)
    return (float(px_width), float(px_height))
