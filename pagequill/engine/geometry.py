"""Geometry primitives and unit helpers for layout calculations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from reportlab.lib.units import cm, inch, mm

MEASUREMENT_VALUE_RX = re.compile(r"(\d+|\d*\.\d+)(in|mm|cm|px|pt)?$")

# 96 px per inch, 72 pt per inch
PX_TO_PT = 0.75


@dataclass(slots=True)
class Margins:
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Margins":
        return cls(value, value, value, value)

    @classmethod
    def from_value(cls, value: Union["Margins", float, Sequence[float], None]) -> "Margins":
        """Build margins from a number, a CSS-ordered sequence or a Margins.

        Sequences follow CSS shorthand: ``[all]``, ``[vertical, horizontal]``,
        ``[top, horizontal, bottom]`` or ``[top, right, bottom, left]``.
        """
        if value is None:
            return cls()
        if isinstance(value, Margins):
            return cls(value.top, value.bottom, value.left, value.right)
        if isinstance(value, (int, float)):
            return cls.uniform(float(value))
        values = [float(v) for v in value]
        if len(values) == 1:
            return cls.uniform(values[0])
        if len(values) == 2:
            return cls(top=values[0], bottom=values[0], left=values[1], right=values[1])
        if len(values) == 3:
            return cls(top=values[0], bottom=values[2], left=values[1], right=values[1])
        if len(values) == 4:
            return cls(top=values[0], right=values[1], bottom=values[2], left=values[3])
        raise ValueError(f"margins must have 1 to 4 values, got {len(values)}")

    def as_list(self) -> list[float]:
        """Return margins as ``[top, right, bottom, left]``."""
        return [self.top, self.right, self.bottom, self.left]


def to_pt(num: float, units: Optional[str]) -> float:
    """Convert ``num`` expressed in ``units`` to points."""
    if not units or units == "pt":
        return num
    if units == "in":
        return num * inch
    if units == "mm":
        return num * mm
    if units == "cm":
        return num * cm
    if units == "px":
        return num * PX_TO_PT
    raise ValueError(f"unsupported unit: {units}")


def str_to_pt(value: str) -> Optional[float]:
    """Convert a measurement string such as ``0.5in`` or ``100px`` to points.

    Returns None when the value is not a recognised measurement.
    """
    match = MEASUREMENT_VALUE_RX.search(value)
    if match is None:
        return None
    return to_pt(float(match.group(1)), match.group(2))
