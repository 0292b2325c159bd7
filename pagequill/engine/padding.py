"""Padding and bounds adjustments around blocks of content."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional, Sequence, Union

from .bounds import BoundingBox
from .geometry import Margins

if TYPE_CHECKING:
    from .document import LayoutDocument

Padding = Union[Margins, float, Sequence[float], None]


@contextmanager
def inset(document: "LayoutDocument", left: float = 0, right: float = 0) -> Iterator[None]:
    """Narrow the current bounds for the duration of the body.

    The padding is removed from whatever bounds are current when the body
    ends, which is the margin box of a later page if the body broke pages.
    """
    document.bounds.add_left_padding(left)
    document.bounds.add_right_padding(right)
    try:
        yield
    finally:
        document.bounds.subtract_left_padding(left)
        document.bounds.subtract_right_padding(right)


@contextmanager
def pad_box(document: "LayoutDocument", padding: Padding) -> Iterator[None]:
    """Lay out the body inside ``padding`` (CSS order: top, right, bottom, left).

    Top padding moves the cursor down before the body; left and right padding
    inset the bounds while the body runs. Bottom padding is applied after the
    body, still inside the inset:

    - negative bottom padding pulls the cursor up, but never past the top of
      the reference bounds;
    - bottom padding that does not fit below the cursor advances to the next
      page instead.
    """
    if padding is None:
        yield
        return

    padding = Margins.from_value(padding)
    document.move_down(padding.top)
    with inset(document, padding.left, padding.right):
        yield
        bottom = padding.bottom
        if bottom < 0:
            reference = document.reference_bounds
            if bottom < document.cursor - reference.top:
                document.move_cursor_to(reference.top)
            else:
                document.move_down(bottom)
        elif bottom < document.cursor:
            document.move_down(bottom)
        else:
            document.reference_bounds.move_past_bottom()


@contextmanager
def pad(document: "LayoutDocument", top: float, bottom: Optional[float] = None) -> Iterator[None]:
    """Add vertical space above and below the body."""
    document.move_down(top)
    yield
    document.move_down(top if bottom is None else bottom)


@contextmanager
def span_page_width_if(document: "LayoutDocument", verdict: bool) -> Iterator[None]:
    """Stretch the current bounds to the page edges when ``verdict`` holds.

    Otherwise the body runs in the bounds as they are.
    """
    if not verdict:
        yield
        return
    with inset(document, -document.bounds_margin_left, -document.bounds_margin_right):
        yield


@contextmanager
def flow_bounding_box(document: "LayoutDocument", left: float = 0, width: Optional[float] = None,
                      height: Optional[float] = None) -> Iterator[BoundingBox]:
    """A bounding box that starts at the cursor but flows from the page top.

    The box is anchored ``left`` points from the left of the margin box at
    the top of the margin box, and the cursor is put back where it was, so
    content continued on a later page starts at the top of that page.
    """
    original_y = document.y
    margin_box = document.margin_box
    with document.canvas():
        left_edge = margin_box.absolute_left + left
        if width is None:
            width = document.bounds.width - left_edge
        with document.bounding_box((left_edge, margin_box.absolute_top), width=width, height=height) as box:
            document.y = original_y
            yield box
