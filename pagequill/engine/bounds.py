"""Bounding boxes: the writable regions content is laid out in."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .document import LayoutDocument


class BoundingBox:
    """A rectangular region on the page, in absolute PDF coordinates.

    Relative coordinates run from ``bottom == 0`` to ``top == height`` and
    from ``left == 0`` to ``right == width``. Left and right padding narrow
    the box without moving its vertical edges; the running totals are kept so
    padding can be carried across page breaks and mirrored into scratch
    documents.

    A box created without a height is stretchy: its bottom follows the
    document cursor.
    """

    def __init__(
        self,
        document: "LayoutDocument",
        parent: Optional["BoundingBox"],
        point: Tuple[float, float],
        width: float,
        height: Optional[float] = None,
        margin_box: bool = False,
    ):
        self.document = document
        self.parent = parent
        self._x, self._y = point
        self._width = width
        self._height = height
        self.is_margin_box = margin_box
        self.total_left_padding = 0.0
        self.total_right_padding = 0.0

    # Padding

    def add_left_padding(self, left_padding: float) -> None:
        self.total_left_padding += left_padding
        self._x += left_padding
        self._width -= left_padding

    def subtract_left_padding(self, left_padding: float) -> None:
        self.total_left_padding -= left_padding
        self._x -= left_padding
        self._width += left_padding

    def add_right_padding(self, right_padding: float) -> None:
        self.total_right_padding += right_padding
        self._width -= right_padding

    def subtract_right_padding(self, right_padding: float) -> None:
        self.total_right_padding -= right_padding
        self._width += right_padding

    # Geometry

    @property
    def stretchy(self) -> bool:
        return self._height is None

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        if self._height is None:
            return self._y - self.document.y
        return self._height

    @property
    def left(self) -> float:
        return 0.0

    @property
    def right(self) -> float:
        return self._width

    @property
    def top(self) -> float:
        return self.height

    @property
    def bottom(self) -> float:
        return 0.0

    @property
    def absolute_left(self) -> float:
        return self._x

    @property
    def absolute_right(self) -> float:
        return self._x + self._width

    @property
    def absolute_top(self) -> float:
        return self._y

    @property
    def absolute_bottom(self) -> float:
        return self._y - self.height

    def move_past_bottom(self) -> None:
        """Continue on the next page, creating one when on the last page."""
        if self.document.page_number == self.document.page_count:
            self.document.start_new_page()
        else:
            self.document.go_to_page(self.document.page_number + 1)

    def __repr__(self) -> str:
        return (
            f"BoundingBox(left={self.absolute_left:g}, top={self.absolute_top:g}, "
            f"width={self.width:g}, height={'stretchy' if self.stretchy else format(self.height, 'g')})"
        )
