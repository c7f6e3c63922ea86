from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Tuple

from .dimensions import grid_dimensions, hex_pitch
from .lattice import HexLattice
from .models import Edge, Face, GridDimensions, Orientation, Vertex, edge_key

logger = logging.getLogger(__name__)

# Two corners closer than this on both axes are one vertex.  Distinct
# vertices are a full edge length apart, so this only absorbs float error.
VERTEX_TOLERANCE = 0.01


@dataclass(frozen=True)
class CellCenter:
    col: int
    row: int
    x: float
    y: float


def build_hex_lattice(
    cols: int,
    cols_odd: int,
    rows: int,
    rows_odd: int,
    size: float = 1.0,
    orientation: Orientation | str | bool = Orientation.POINTY,
) -> HexLattice:
    """Build the deduplicated vertex/edge graph of a (possibly ragged) hex grid.

    *size* is the hexagon edge length.  For pointy-top grids odd rows hold
    ``cols_odd`` cells; for flat-top grids odd columns hold ``rows_odd``
    cells.  Vertex ids are ``"0"``, ``"1"``, … in discovery order.
    """
    if size <= 0:
        raise ValueError("size must be > 0")
    orientation = Orientation.parse(orientation)
    cols, rows = max(1, cols), max(1, rows)
    cols_odd = max(1, cols_odd) if cols_odd else cols
    rows_odd = max(1, rows_odd) if rows_odd else rows

    centers = _hex_centers(cols, cols_odd, rows, rows_odd, size, orientation)
    vertex_list: List[Vertex] = []
    edge_map: Dict[str, Edge] = {}
    faces: List[Face] = []

    for idx, center in enumerate(centers):
        face_id = f"h{idx}"
        corners = _hex_corners((center.x, center.y), size, orientation)
        vertex_ids = [_get_vertex_id(vertex_list, corner) for corner in corners]
        edge_ids = _get_edge_ids(edge_map, vertex_ids, face_id)
        faces.append(
            Face(
                id=face_id,
                col=center.col,
                row=center.row,
                vertex_ids=tuple(vertex_ids),
                edge_ids=tuple(edge_ids),
            )
        )

    metadata = {
        "cols": cols,
        "cols_odd": cols_odd,
        "rows": rows,
        "rows_odd": rows_odd,
        "size": size,
        "orientation": orientation.value,
    }
    logger.debug(
        "built %s lattice %dx%d (odd %dx%d): %d cells, %d vertices, %d edges",
        orientation.value, cols, rows, cols_odd, rows_odd,
        len(faces), len(vertex_list), len(edge_map),
    )
    return HexLattice(vertex_list, edge_map.values(), faces, metadata)


@lru_cache(maxsize=32)
def cached_hex_lattice(
    cols: int,
    cols_odd: int,
    rows: int,
    rows_odd: int,
    size: float = 1.0,
    orientation: Orientation = Orientation.POINTY,
) -> HexLattice:
    """Memoised :func:`build_hex_lattice`; the shared result is read-only."""
    return build_hex_lattice(cols, cols_odd, rows, rows_odd, size, orientation)


def build_lattice_for(
    dimensions: GridDimensions,
    size: float = 1.0,
    orientation: Orientation | str | bool = Orientation.POINTY,
) -> HexLattice:
    return cached_hex_lattice(*dimensions.counts(), size, Orientation.parse(orientation))


def build_lattice_from_size(
    width: float,
    length: float,
    spacing: float,
    orientation: Orientation | str | bool = Orientation.POINTY,
    size: float = 1.0,
) -> HexLattice:
    """Solve dimensions for a physical area and build the matching lattice."""
    dims = grid_dimensions(width, length, spacing, orientation)
    return build_lattice_for(dims, size, orientation)


def hex_cell_count(cols: int, cols_odd: int, rows: int, rows_odd: int, orientation) -> int:
    orientation = Orientation.parse(orientation)
    if orientation.pointy_top:
        return sum(cols_odd if r % 2 else cols for r in range(rows))
    return sum(rows_odd if c % 2 else rows for c in range(cols))


def _hex_centers(
    cols: int,
    cols_odd: int,
    rows: int,
    rows_odd: int,
    size: float,
    orientation: Orientation,
) -> List[CellCenter]:
    pitch_x, pitch_y = hex_pitch(size, orientation)
    centers: List[CellCenter] = []
    if orientation.pointy_top:
        for row in range(rows):
            count = cols_odd if row % 2 else cols
            offset = pitch_x / 2 if row % 2 else 0.0
            for col in range(count):
                centers.append(
                    CellCenter(col, row, col * pitch_x + offset + pitch_x / 2, row * pitch_y + size)
                )
    else:
        for col in range(cols):
            count = rows_odd if col % 2 else rows
            offset = pitch_y / 2 if col % 2 else 0.0
            for row in range(count):
                centers.append(
                    CellCenter(col, row, col * pitch_x + size, row * pitch_y + offset + pitch_y / 2)
                )
    return centers


def _hex_corners(
    center: Tuple[float, float],
    size: float,
    orientation: Orientation,
) -> List[Tuple[float, float]]:
    cx, cy = center
    start = -90 if orientation.pointy_top else 0
    corners = []
    for i in range(6):
        angle = math.radians(start + 60 * i)
        corners.append((cx + size * math.cos(angle), cy + size * math.sin(angle)))
    return corners


def _get_vertex_id(vertex_list: List[Vertex], position: Tuple[float, float]) -> str:
    x, y = position
    for vertex in vertex_list:
        if abs(vertex.x - x) < VERTEX_TOLERANCE and abs(vertex.y - y) < VERTEX_TOLERANCE:
            return vertex.id
    vertex = Vertex(str(len(vertex_list)), x, y)
    vertex_list.append(vertex)
    return vertex.id


def _get_edge_ids(
    edge_map: Dict[str, Edge],
    vertex_ids: List[str],
    face_id: str,
) -> List[str]:
    edge_ids: List[str] = []
    count = len(vertex_ids)
    for i in range(count):
        a = vertex_ids[i]
        b = vertex_ids[(i + 1) % count]
        key = edge_key(a, b)
        edge = edge_map.get(key)
        if edge is None:
            pair = (a, b) if a < b else (b, a)
            edge_map[key] = Edge(id=key, vertex_ids=pair, face_ids=(face_id,))
        else:
            edge_map[key] = Edge(edge.id, edge.vertex_ids, edge.face_ids + (face_id,))
        edge_ids.append(key)
    return edge_ids
