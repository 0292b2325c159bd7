"""PDF file writer - generates objects, xref, trailer and the final PDF structure."""

from __future__ import annotations

import logging
import zlib
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Dict, List, Optional, Set, Tuple, Union

from PIL import Image

from ...exceptions import CompilationError
from .objects import PdfPage, PdfReference
from .resources import PdfFont, PdfImage
from .utils import escape_pdf_string, format_pdf_number

if TYPE_CHECKING:
    from ..document import LayoutDocument

logger = logging.getLogger(__name__)

PROC_SET = ["/PDF", "/Text", "/ImageB", "/ImageC", "/ImageI"]


class PdfWriter:
    """Writes a LayoutDocument's object store to a PDF file."""

    def __init__(self, output_path: Union[str, Path]):
        """Initialize PDF writer.

        Args:
            output_path: Path to output PDF file
        """
        self.output_path = Path(output_path)
        self.xref_table: List[Tuple[int, int]] = []  # (offset, generation)
        self._numbers: Dict[int, int] = {}
        self._warned_fonts: Set[str] = set()

    def write(self, document: "LayoutDocument") -> Path:
        """Write the document to ``output_path``.

        Store objects are renumbered in creation order, which closes the gaps
        left by deleted pages. Font and image objects follow them.

        Raises:
            CompilationError: If the document cannot be serialised or written
        """
        if document is None:
            raise ValueError("document cannot be None")

        try:
            with open(self.output_path, "wb") as f:
                self._write_document(f, document)
        except CompilationError:
            raise
        except OSError as exc:
            logger.error("IO error while writing PDF file: %s", exc)
            raise CompilationError("Cannot write PDF file", f"{self.output_path}: {exc}") from exc
        except (TypeError, ValueError, KeyError) as exc:
            logger.error("Unexpected error while writing PDF file: %s", exc)
            raise CompilationError("Cannot serialise document", str(exc)) from exc

        logger.debug("Wrote %s pages to %s", document.page_count, self.output_path)
        return self.output_path

    def _write_document(self, f: BinaryIO, document: "LayoutDocument") -> None:
        store = document.state.store
        store.validate_page_tree()
        objects = list(store)
        self._numbers = {obj.identifier: number for number, obj in enumerate(objects, start=1)}
        next_number = len(objects) + 1

        # Shared resources get numbers after the store objects
        font_numbers: Dict[str, int] = {}
        image_numbers: Dict[int, Tuple[int, PdfImage]] = {}
        for page in document.state.pages:
            for font_name in page.resources.get("Font", {}).values():
                if font_name not in font_numbers:
                    font_numbers[font_name] = next_number
                    next_number += 1
        for page in document.state.pages:
            for image in page.resources.get("XObject", {}).values():
                if id(image) not in image_numbers:
                    image_numbers[id(image)] = (next_number, image)
                    next_number += 1

        pages_by_identifier = {page.identifier: page for page in document.state.pages}
        content_identifiers = {page.content.identifier: page for page in document.state.pages}

        f.write(b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n")
        for obj in objects:
            number = self._numbers[obj.identifier]
            if obj.identifier in pages_by_identifier:
                page = pages_by_identifier[obj.identifier]
                data = dict(obj.data)
                data["Resources"] = self._page_resources(page, font_numbers, image_numbers)
                self._write_object(f, number, data)
            elif obj.stream is not None:
                page = content_identifiers.get(obj.identifier)
                content = obj.stream.get_content()
                # generated pages open with a saved graphics state
                if page is not None and not page.imported:
                    content += "\nQ"
                self._write_stream(f, number, dict(obj.data), content, document.state.compress)
            else:
                self._write_object(f, number, obj.data)

        for font_name, number in font_numbers.items():
            self._write_object(f, number, self._font_dict(document, font_name))
        for number, image in image_numbers.values():
            self._write_image_object(f, number, image)

        xref_offset = f.tell()
        self._write_xref(f)
        self._write_trailer(f, xref_offset, self._numbers[store.root.identifier], self._numbers[store.info.identifier])

    def _page_resources(self, page: PdfPage, font_numbers: Dict[str, int],
                        image_numbers: Dict[int, Tuple[int, PdfImage]]) -> Dict[str, Any]:
        resources: Dict[str, Any] = {"ProcSet": PROC_SET}
        fonts = page.resources.get("Font", {})
        if fonts:
            resources["Font"] = {alias: _Written(font_numbers[name]) for alias, name in fonts.items()}
        images = page.resources.get("XObject", {})
        if images:
            resources["XObject"] = {alias: _Written(image_numbers[id(image)][0]) for alias, image in images.items()}
        return resources

    def _font_dict(self, document: "LayoutDocument", font_name: str) -> Dict[str, Any]:
        font = document.font_registry.get_font(font_name) or PdfFont(
            name=font_name, alias="", font_path=document.font_families.font_path(font_name)
        )
        if not font.is_standard and font_name not in self._warned_fonts:
            self._warned_fonts.add(font_name)
            logger.warning("TrueType font %s is not embedded; viewers must provide it", font_name)
        return font.to_pdf_dict()

    def _write_object(self, f: BinaryIO, obj_num: int, content: Dict[str, Any]) -> None:
        """Write a PDF dictionary object."""
        self.xref_table.append((f.tell(), 0))
        f.write(f"{obj_num} 0 obj\n".encode("latin-1"))
        f.write(self._to_pdf(content).encode("latin-1"))
        f.write(b"\nendobj\n")

    def _write_stream(self, f: BinaryIO, obj_num: int, stream_dict: Dict[str, Any], content: str,
                      compress: bool) -> None:
        """Write a content stream, Flate-compressed when ``compress`` is set."""
        self.xref_table.append((f.tell(), 0))
        stream_bytes = (content + "\n").encode("latin-1", errors="replace")
        if compress:
            stream_bytes = zlib.compress(stream_bytes)
            stream_dict["Filter"] = "/FlateDecode"
        stream_dict["Length"] = len(stream_bytes)

        f.write(f"{obj_num} 0 obj\n".encode("latin-1"))
        f.write(self._to_pdf(stream_dict).encode("latin-1"))
        f.write(b"\nstream\n")
        f.write(stream_bytes)
        f.write(b"\nendstream\nendobj\n")

    def _write_image_object(self, f: BinaryIO, obj_num: int, image: PdfImage) -> None:
        """Write an image XObject.

        JPEG data is embedded as-is; everything else is decoded with Pillow to
        raw samples, with transparency composited onto white.
        """
        if not image.image_data:
            raise CompilationError("Image has no data", image.path)

        try:
            decoded = Image.open(BytesIO(image.image_data))
            decoded.load()
        except OSError as exc:
            logger.error("Failed to decode image %s: %s", image.path, exc)
            raise CompilationError("Cannot decode image", f"{image.path}: {exc}") from exc

        image_dict: Dict[str, Any] = {
            "Type": "/XObject",
            "Subtype": "/Image",
            "Width": decoded.width,
            "Height": decoded.height,
            "BitsPerComponent": 8,
        }

        if image.image_type == "JPEG":
            image_dict["ColorSpace"] = {"L": "/DeviceGray", "CMYK": "/DeviceCMYK"}.get(decoded.mode, "/DeviceRGB")
            image_dict["Filter"] = "/DCTDecode"
            data = image.image_data
        else:
            if decoded.mode in ("1", "L", "LA"):
                decoded = decoded.convert("L")
                image_dict["ColorSpace"] = "/DeviceGray"
            elif decoded.mode in ("RGBA", "P", "PA"):
                rgba = decoded.convert("RGBA")
                decoded = Image.new("RGB", rgba.size, (255, 255, 255))
                decoded.paste(rgba, mask=rgba.split()[3])
                image_dict["ColorSpace"] = "/DeviceRGB"
            else:
                decoded = decoded.convert("RGB")
                image_dict["ColorSpace"] = "/DeviceRGB"
            data = zlib.compress(decoded.tobytes())
            image_dict["Filter"] = "/FlateDecode"

        image_dict["Length"] = len(data)
        self.xref_table.append((f.tell(), 0))
        f.write(f"{obj_num} 0 obj\n".encode("latin-1"))
        f.write(self._to_pdf(image_dict).encode("latin-1"))
        f.write(b"\nstream\n")
        f.write(data)
        f.write(b"\nendstream\nendobj\n")

    def _write_xref(self, f: BinaryIO) -> None:
        f.write(b"xref\n")
        f.write(f"0 {len(self.xref_table) + 1}\n".encode("latin-1"))
        f.write(b"0000000000 65535 f \n")  # Free object
        for offset, generation in self.xref_table:
            f.write(f"{offset:010d} {generation:05d} n \n".encode("latin-1"))

    def _write_trailer(self, f: BinaryIO, xref_offset: int, root_obj_num: int,
                       info_obj_num: Optional[int] = None) -> None:
        trailer_dict: Dict[str, Any] = {
            "Size": len(self.xref_table) + 1,
            "Root": _Written(root_obj_num),
        }
        if info_obj_num is not None:
            trailer_dict["Info"] = _Written(info_obj_num)
        f.write(b"trailer\n")
        f.write(self._to_pdf(trailer_dict).encode("latin-1"))
        f.write(b"\nstartxref\n")
        f.write(f"{xref_offset}\n".encode("latin-1"))
        f.write(b"%%EOF\n")

    def _to_pdf(self, value: Any) -> str:
        """Convert a Python value to PDF syntax.

        Strings starting with ``/`` are names; other strings are literals.
        """
        if isinstance(value, _Written):
            return f"{value.number} 0 R"
        if isinstance(value, PdfReference):
            try:
                return f"{self._numbers[value.identifier]} 0 R"
            except KeyError:
                raise CompilationError("Reference to deleted object", f"identifier {value.identifier}") from None
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return "null"
        if isinstance(value, (int, float)):
            return format_pdf_number(value)
        if isinstance(value, str):
            if value.startswith("/"):
                return value
            return f"({escape_pdf_string(value)})"
        if isinstance(value, dict):
            items = " ".join(f"/{str(key).lstrip('/')} {self._to_pdf(item)}" for key, item in value.items())
            return f"<< {items} >>"
        if isinstance(value, (list, tuple)):
            return "[" + " ".join(self._to_pdf(item) for item in value) + "]"
        raise CompilationError("Cannot serialise value", repr(value))


class _Written:
    """A reference already expressed as an output object number."""

    __slots__ = ("number",)

    def __init__(self, number: int):
        self.number = number
