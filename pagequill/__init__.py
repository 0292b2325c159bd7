"""
pagequill - speculative layout and pagination for PDF documents.

Layout procedures are plain callables that draw into a LayoutDocument. Before
committing a procedure to the real document, pagequill can run it against a
disposable scratch copy to measure how much vertical space it takes,
including the page breaks it triggers, and use that to keep blocks together.

Main Components:
- LayoutDocument: page-oriented rendering host (cursor, bounds, fonts, pages)
- calc_line_metrics: vertical spacing for a font and line height
- pad_box / inset: scoped padding around content
- span_page_width_if / flow_bounding_box: scoped bounds that reach past the margins
- ScratchPool / dry_run: measure a procedure without side effects
- keep_together: page-break decisions from measurements
- delete_page / import_page / image_page: page graph edits
"""

from .config import DocumentOptions, page_dimensions
from .exceptions import (
    CompilationError,
    FontError,
    LayoutError,
    PageGraphError,
    PageQuillError,
)
from .engine.bounds import BoundingBox
from .engine.document import DocumentState, LayoutDocument
from .engine.dry_run import DryRunResult, dry_run
from .engine.fonts import FontFace, FontFamilies, font_styles, resolve_font_style
from .engine.geometry import Margins, str_to_pt, to_pt
from .engine.keep_together import KeepTogetherResult, keep_together, keep_together_if
from .engine.line_metrics import LineMetrics, calc_line_metrics
from .engine.padding import flow_bounding_box, inset, pad, pad_box, span_page_width_if
from .engine.page_graph import (
    PageTemplate,
    delete_page,
    image_page,
    import_page,
    perform_discretely,
    start_new_page_discretely,
    truncate_pages,
)
from .engine.pdfcompiler import ObjectStore, PdfWriter
from .engine.scratch import Prototype, ScratchPool, get_scratch_document
from .version import __version__, __version_info__

__all__ = [
    # Configuration
    "DocumentOptions",
    "page_dimensions",
    # Exceptions
    "PageQuillError",
    "LayoutError",
    "FontError",
    "PageGraphError",
    "CompilationError",
    # Host
    "LayoutDocument",
    "DocumentState",
    "BoundingBox",
    "FontFace",
    "FontFamilies",
    "font_styles",
    "resolve_font_style",
    "Margins",
    "to_pt",
    "str_to_pt",
    # Layout core
    "LineMetrics",
    "calc_line_metrics",
    "inset",
    "pad",
    "pad_box",
    "span_page_width_if",
    "flow_bounding_box",
    "Prototype",
    "ScratchPool",
    "get_scratch_document",
    "DryRunResult",
    "dry_run",
    "KeepTogetherResult",
    "keep_together",
    "keep_together_if",
    "PageTemplate",
    "delete_page",
    "import_page",
    "image_page",
    "perform_discretely",
    "start_new_page_discretely",
    "truncate_pages",
    # Output
    "ObjectStore",
    "PdfWriter",
    "__version__",
    "__version_info__",
]
