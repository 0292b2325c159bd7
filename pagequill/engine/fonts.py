"""Font families, style resolution and reportlab-backed font metrics."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional, Set

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ..exceptions import FontError

logger = logging.getLogger(__name__)

FONT_STYLES = ("normal", "bold", "italic", "bold_italic")

STANDARD_FONT_FAMILIES: Dict[str, Dict[str, str]] = {
    "Helvetica": {
        "normal": "Helvetica",
        "bold": "Helvetica-Bold",
        "italic": "Helvetica-Oblique",
        "bold_italic": "Helvetica-BoldOblique",
    },
    "Times-Roman": {
        "normal": "Times-Roman",
        "bold": "Times-Bold",
        "italic": "Times-Italic",
        "bold_italic": "Times-BoldItalic",
    },
    "Courier": {
        "normal": "Courier",
        "bold": "Courier-Bold",
        "italic": "Courier-Oblique",
        "bold_italic": "Courier-BoldOblique",
    },
    "Symbol": {"normal": "Symbol"},
    "ZapfDingbats": {"normal": "ZapfDingbats"},
}


class FontFace:
    """A font at a given size, exposing the metrics layout needs.

    Glyph-space values from reportlab are per 1000 units of em and are scaled
    to ``size`` here.
    """

    def __init__(self, name: str, size: float, font_path: Optional[str] = None):
        self.name = name
        self.size = size
        self.font_path = font_path
        try:
            self._face = pdfmetrics.getFont(name).face
        except KeyError as exc:
            raise FontError("Font is not registered", name) from exc

    def _scale(self, value: float) -> float:
        return value * self.size / 1000.0

    @property
    def ascender(self) -> float:
        return self._scale(self._face.ascent)

    @property
    def descender(self) -> float:
        """Distance below the baseline; negative for most fonts."""
        return self._scale(self._face.descent)

    @property
    def line_gap(self) -> float:
        """Extra space the font asks for between lines.

        Derived from the font bounding box; faces that do not report one have
        no line gap. A bounding box shorter than the ascender and
        descender gives a negative gap.
        """
        bbox = getattr(self._face, "bbox", None)
        if not bbox or len(bbox) != 4:
            return 0.0
        gap = (bbox[3] - bbox[1]) - (self._face.ascent - self._face.descent)
        return self._scale(float(gap))

    @property
    def height(self) -> float:
        """Baseline-to-baseline distance with no extra leading."""
        return self.ascender - self.descender + self.line_gap

    def width_of(self, text: str) -> float:
        return pdfmetrics.stringWidth(text, self.name, self.size)

    def __repr__(self) -> str:
        return f"FontFace({self.name!r}, {self.size!r})"


class FontFamilies:
    """Maps family names to reportlab font names per style."""

    def __init__(self, families: Optional[Mapping[str, Mapping[str, str]]] = None):
        self._families: Dict[str, Dict[str, str]] = {
            name: dict(styles) for name, styles in STANDARD_FONT_FAMILIES.items()
        }
        self._paths: Dict[str, str] = {}
        if families:
            for name, styles in families.items():
                self._families[name] = dict(styles)

    def __contains__(self, family: str) -> bool:
        return family in self._families

    @property
    def names(self) -> list[str]:
        return list(self._families)

    def register(self, data: Mapping[str, Mapping[str, str]]) -> None:
        """Register TrueType families.

        Example::

            families.register({
                "Roboto": {
                    "normal": "fonts/roboto-normal.ttf",
                    "bold": "fonts/roboto-bold.ttf",
                }
            })
        """
        for family, styles in data.items():
            family = str(family)
            resolved: Dict[str, str] = {}
            for style, path in styles.items():
                if style not in FONT_STYLES:
                    raise FontError("Unknown font style", f"{family} {style}")
                font_name = family if style == "normal" else f"{family}-{style}"
                try:
                    pdfmetrics.registerFont(TTFont(font_name, str(path)))
                except Exception as exc:
                    raise FontError("Cannot register font", f"{font_name} from {path}: {exc}") from exc
                self._paths[font_name] = str(path)
                resolved[style] = font_name
                logger.debug("Registered font %s from %s", font_name, path)
            self._families.setdefault(family, {}).update(resolved)

    def resolve(self, family: str, style: str = "normal") -> str:
        """Return the reportlab font name for a family and style."""
        styles = self._families.get(family)
        if styles is None:
            raise FontError("Unknown font family", family)
        font_name = styles.get(style or "normal")
        if font_name is None:
            raise FontError("Font family has no such style", f"{family} {style}")
        return font_name

    def font_path(self, font_name: str) -> Optional[str]:
        return self._paths.get(font_name)

    def face(self, family: str, style: str, size: float) -> FontFace:
        font_name = self.resolve(family, style)
        return FontFace(font_name, size, self.font_path(font_name))


def resolve_font_style(styles: Iterable[str]) -> str:
    """Collapse a set of style flags into a single style key."""
    styles = set(styles)
    if "bold" in styles:
        return "bold_italic" if "italic" in styles else "bold"
    if "italic" in styles:
        return "italic"
    return "normal"


def font_styles(style: Optional[str]) -> Set[str]:
    """Expand a style key into its set of style flags."""
    if not style or style == "normal":
        return set()
    if style == "bold_italic":
        return {"bold", "italic"}
    return {style}
