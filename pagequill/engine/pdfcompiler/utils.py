"""Utility functions for PDF serialisation."""

from typing import Tuple

_PDF_STRING_ESCAPES = str.maketrans({
    "\\": "\\\\",
    "(": "\\(",
    ")": "\\)",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
})


def hex_to_rgb(hex_color: str, default: Tuple[float, float, float] = (0.0, 0.0, 0.0)) -> Tuple[float, float, float]:
    """Convert a HEX color (``#RRGGBB`` or ``#RGB``) to an RGB tuple on a 0-1 scale.

    Args:
        hex_color: Color in HEX format
        default: Color returned when the value cannot be parsed

    Returns:
        Tuple of (r, g, b)
    """
    if not hex_color or hex_color.lower() in ("auto", "none", "transparent"):
        return default

    hex_color = hex_color.lstrip("#")
    if len(hex_color) == 3:
        hex_color = "".join(ch * 2 for ch in hex_color)
    if len(hex_color) != 6:
        return default

    try:
        return tuple(int(hex_color[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError:
        return default


def escape_pdf_string(text: str) -> str:
    """Escape backslashes, parentheses and control whitespace for a PDF literal string."""
    if text is None:
        return ""
    return str(text).translate(_PDF_STRING_ESCAPES)


def format_pdf_number(value: float) -> str:
    """Format a number for PDF output with at most three decimal places."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    formatted = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if formatted in ("", "-0") else formatted
