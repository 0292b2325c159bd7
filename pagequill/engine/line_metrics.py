"""Line metrics: vertical spacing derived from a font, a size and a line height."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class LineMetrics:
    """Vertical spacing for a run of lines.

    - height: advance of a single line
    - leading: spacing between adjacent lines
    - padding_top: half the leading plus any line gap reported by the font
    - padding_bottom: half the leading
    - final_gap: whether a gap is added below the last line
    """

    height: float
    leading: float
    padding_top: float
    padding_bottom: float
    final_gap: bool = False


def calc_line_metrics(line_height: float = 1, font: Any = None, font_size: Optional[float] = None) -> LineMetrics:
    """Compute line metrics for ``font`` at ``font_size``.

    Args:
        line_height: Line height as a multiple of the font size
        font: Object exposing ``line_gap`` (and ``size`` when font_size is omitted)
        font_size: Font size in points; defaults to ``font.size``

    Returns:
        LineMetrics, unrounded
    """
    if font is None:
        raise ValueError("font is required to compute line metrics")
    if font_size is None:
        font_size = font.size
    line_height_length = line_height * font_size
    leading = line_height_length - font_size
    half_leading = leading / 2
    return LineMetrics(
        height=line_height_length,
        leading=leading,
        padding_top=half_leading + font.line_gap,
        padding_bottom=half_leading,
        final_gap=False,
    )
