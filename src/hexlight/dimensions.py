"""Physical size → cell counts.

All physical quantities share one unit (inches throughout the toolkit).
The solved grid never extends past the requested width/length, except
where the one-cell minimum forces a single hexagon larger than the
request.
"""

from __future__ import annotations

import math

from .models import GridDimensions, Orientation

DEFAULT_POINT_SPACING = 18.0
CM_PER_INCH = 2.54
DISPLAY_UNITS = ("in", "cm")


def hex_extent(spacing: float, orientation: Orientation) -> tuple[float, float]:
    """Return ``(width, height)`` of one hexagon with edge length *spacing*."""
    if Orientation.parse(orientation).pointy_top:
        return math.sqrt(3) * spacing, 2 * spacing
    return 2 * spacing, math.sqrt(3) * spacing


def hex_pitch(spacing: float, orientation: Orientation) -> tuple[float, float]:
    """Return the ``(horizontal, vertical)`` distance between adjacent centres."""
    if Orientation.parse(orientation).pointy_top:
        return math.sqrt(3) * spacing, 1.5 * spacing
    return 1.5 * spacing, math.sqrt(3) * spacing


def _fit_count(available: float, extent: float, pitch: float) -> int:
    return max(1, math.floor((available - extent) / pitch) + 1)


def grid_dimensions(
    width: float,
    length: float,
    spacing: float = DEFAULT_POINT_SPACING,
    orientation: Orientation | str | bool = Orientation.POINTY,
) -> GridDimensions:
    """Solve row/column counts that fit inside ``width`` × ``length``.

    The primary axis (rows for pointy-top, columns for flat-top) is not
    staggered.  On the other axis the offset parity starts half a pitch in,
    so odd rows (pointy) or odd columns (flat) may hold one cell fewer.
    With a single primary line there is no offset line, so both parities
    share the same count.
    """
    if spacing <= 0:
        raise ValueError("spacing must be > 0")
    orientation = Orientation.parse(orientation)
    hex_w, hex_h = hex_extent(spacing, orientation)
    pitch_x, pitch_y = hex_pitch(spacing, orientation)

    if orientation.pointy_top:
        rows = _fit_count(length, hex_h, pitch_y)
        cols = _fit_count(width, hex_w, pitch_x)
        cols_odd = _fit_count(width - pitch_x / 2, hex_w, pitch_x) if rows > 1 else cols
        rows_odd = rows
    else:
        cols = _fit_count(width, hex_w, pitch_x)
        rows = _fit_count(length, hex_h, pitch_y)
        rows_odd = _fit_count(length - pitch_y / 2, hex_h, pitch_y) if cols > 1 else rows
        cols_odd = cols

    return GridDimensions(
        cols=cols,
        cols_odd=cols_odd,
        rows=rows,
        rows_odd=rows_odd,
        actual_width=(cols - 1) * pitch_x + hex_w,
        actual_length=(rows - 1) * pitch_y + hex_h,
    )


def to_display_units(inches: float, units: str = "in") -> float:
    if units == "in":
        return inches
    if units == "cm":
        return inches * CM_PER_INCH
    raise ValueError(f"Unknown units {units!r}. Allowed: {list(DISPLAY_UNITS)}")


def from_display_units(value: float, units: str = "in") -> float:
    if units == "in":
        return value
    if units == "cm":
        return value / CM_PER_INCH
    raise ValueError(f"Unknown units {units!r}. Allowed: {list(DISPLAY_UNITS)}")
