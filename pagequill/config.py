"""Document options."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Sequence, Tuple, Union

from reportlab.lib import pagesizes

from .engine.geometry import Margins
from .exceptions import LayoutError

PageSize = Union[str, Tuple[float, float]]

PAGE_SIZES: Dict[str, Tuple[float, float]] = {
    "A3": pagesizes.A3,
    "A4": pagesizes.A4,
    "A5": pagesizes.A5,
    "B5": pagesizes.B5,
    "LETTER": pagesizes.LETTER,
    "LEGAL": pagesizes.LEGAL,
    "TABLOID": pagesizes.TABLOID,
}

PAGE_LAYOUTS = ("portrait", "landscape")


@dataclass
class DocumentOptions:
    """Options a LayoutDocument is created with.

    Attributes:
        page_size: Named size (``"A4"``, ``"LETTER"``, ...) or ``(width, height)`` in points
        page_layout: ``"portrait"`` or ``"landscape"``
        margins: Page margins; a number, a CSS-ordered sequence or Margins
        compress: Flate-compress content streams when writing
        font_family: Initial font family
        font_style: Initial font style
        font_size: Initial font size in points
        info: Document information dictionary (Title, Author, ...)
    """

    page_size: PageSize = "A4"
    page_layout: str = "portrait"
    margins: Union[Margins, float, Sequence[float]] = 36.0
    compress: bool = False
    font_family: str = "Helvetica"
    font_style: str = "normal"
    font_size: float = 12.0
    info: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.margins = Margins.from_value(self.margins)
        if self.page_layout not in PAGE_LAYOUTS:
            raise LayoutError("Unknown page layout", str(self.page_layout))
        # fail early on unknown sizes
        page_dimensions(self.page_size, self.page_layout)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DocumentOptions":
        """Build options from a plain dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


def page_dimensions(size: PageSize, layout: str = "portrait") -> Tuple[float, float]:
    """Resolve a page size and layout to ``(width, height)`` in points."""
    if isinstance(size, str):
        try:
            dimensions = PAGE_SIZES[size.upper()]
        except KeyError as exc:
            raise LayoutError("Unknown page size", size) from exc
    else:
        width, height = size
        dimensions = (float(width), float(height))
    if layout == "landscape":
        return pagesizes.landscape(dimensions)
    return dimensions
