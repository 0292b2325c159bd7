"""Resource management for PDF output (fonts and images)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union


@dataclass
class PdfFont:
    """Represents a PDF font resource."""

    name: str  # reportlab font name (e.g., "Helvetica-Bold")
    alias: str  # PDF alias (e.g., "/F1")
    font_path: Optional[str] = None  # Path to TTF file for registered fonts

    @property
    def is_standard(self) -> bool:
        return self.font_path is None

    def to_pdf_dict(self) -> Dict[str, str]:
        """Font dictionary written for this font.

        Standard fonts are referenced by name. TrueType fonts are written
        name-based as well and rely on the viewer having them installed.
        """
        return {
            "Type": "/Font",
            "Subtype": "/Type1" if self.is_standard else "/TrueType",
            "BaseFont": f"/{self.name}",
            "Encoding": "/WinAnsiEncoding",
        }


class PdfFontRegistry:
    """Assigns stable aliases to the fonts a document draws with."""

    def __init__(self):
        self._fonts: Dict[str, PdfFont] = {}
        self._next_alias_num = 1

    def register_font(self, name: str, font_path: Optional[str] = None) -> PdfFont:
        """Register a font by name and return its PdfFont."""
        if name not in self._fonts:
            self._fonts[name] = PdfFont(name=name, alias=f"/F{self._next_alias_num}", font_path=font_path)
            self._next_alias_num += 1
        return self._fonts[name]

    def get_font(self, name: str) -> Optional[PdfFont]:
        return self._fonts.get(name)


@dataclass(eq=False)
class PdfImage:
    """Represents a PDF image resource."""

    path: str  # Path to image file or identifier
    alias: str  # PDF alias (e.g., "/Im1")
    width: float  # Intrinsic width in pixels
    height: float  # Intrinsic height in pixels
    image_type: str = "JPEG"
    image_data: Optional[bytes] = None


class PdfImageRegistry:
    """Registry for managing PDF images."""

    def __init__(self):
        self._images: Dict[str, PdfImage] = {}
        self._next_alias_num = 1

    def register_image(
        self,
        source: Union[str, Path, bytes],
        width: float,
        height: float,
    ) -> PdfImage:
        """Register an image and return its PdfImage.

        Args:
            source: Path to an image file, or raw image bytes
            width: Intrinsic width in pixels
            height: Intrinsic height in pixels

        Returns:
            PdfImage object (shared when the same source is registered twice)
        """
        if isinstance(source, bytes):
            key = f"mem_{id(source)}"
            image_data = source
        else:
            key = str(source)
            image_data = None

        if key not in self._images:
            if image_data is None:
                image_data = Path(key).read_bytes()
            self._images[key] = PdfImage(
                path=key,
                alias=f"/Im{self._next_alias_num}",
                width=width,
                height=height,
                image_type=detect_image_type(image_data, key),
                image_data=image_data,
            )
            self._next_alias_num += 1

        return self._images[key]

    def get_all_images(self) -> Dict[str, PdfImage]:
        return self._images.copy()


def detect_image_type(image_data: Optional[bytes], path: Optional[str] = None) -> str:
    """Detect JPEG or PNG from magic bytes, falling back to the file extension."""
    if image_data:
        if image_data[:2] == b"\xff\xd8":
            return "JPEG"
        if image_data[:8] == b"\x89PNG\r\n\x1a\n":
            return "PNG"
    if path:
        ext = Path(path).suffix.lower()
        if ext in (".jpg", ".jpeg"):
            return "JPEG"
        if ext == ".png":
            return "PNG"
    return "PNG"
