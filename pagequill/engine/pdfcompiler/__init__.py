"""PDF object model and file writer."""

from .objects import ObjectStore, PdfObject, PdfPage, PdfReference, PdfStream
from .resources import PdfFont, PdfFontRegistry, PdfImage, PdfImageRegistry
from .writer import PdfWriter

__all__ = [
    "ObjectStore",
    "PdfObject",
    "PdfPage",
    "PdfReference",
    "PdfStream",
    "PdfFont",
    "PdfFontRegistry",
    "PdfImage",
    "PdfImageRegistry",
    "PdfWriter",
]
