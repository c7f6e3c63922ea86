"""Mirror axes and symmetric edge resolution.

A mirror axis only works if reflecting the lattice maps vertices onto
vertices.  For pointy-top hexagons that means a vertical axis through a
column of vertices and a horizontal axis through the middle of the
vertical hex sides; flat-top swaps the two.  Axis positions are snapped
to the valid candidate nearest the geometric centre of the lattice.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from .lattice import HexLattice
from .models import MirrorAxes, MirrorMode, Orientation, Vertex, edge_key

# A coordinate gap wider than this fraction of the widest gap separates
# hexagons; narrower gaps span the two ends of a single slanted side.
LARGE_GAP_RATIO = 0.7
AXIS_TIE_TOLERANCE = 0.001
# Reflected endpoints snap to a vertex strictly closer than this.
SNAP_TOLERANCE = 0.1


class MirrorTransform(str, Enum):
    HORIZONTAL = "h"
    VERTICAL = "v"
    ROTATE = "hv"


MODE_TRANSFORMS: Dict[MirrorMode, Tuple[MirrorTransform, ...]] = {
    MirrorMode.NONE: (),
    MirrorMode.HORIZONTAL: (MirrorTransform.HORIZONTAL,),
    MirrorMode.VERTICAL: (MirrorTransform.VERTICAL,),
    MirrorMode.BOTH: (
        MirrorTransform.HORIZONTAL,
        MirrorTransform.VERTICAL,
        MirrorTransform.ROTATE,
    ),
    MirrorMode.RADIAL: (MirrorTransform.ROTATE,),
}


# ═══════════════════════════════════════════════════════════════════
# Axis resolution
# ═══════════════════════════════════════════════════════════════════


def calculate_mirror_axes(
    vertices: Mapping[str, Vertex],
    orientation: Orientation | str | bool = Orientation.POINTY,
) -> MirrorAxes:
    """Return lattice extents and the snapped mirror axis coordinates."""
    orientation = Orientation.parse(orientation)
    if not vertices:
        return MirrorAxes(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    xs = np.unique(np.fromiter((v.x for v in vertices.values()), dtype=float))
    ys = np.unique(np.fromiter((v.y for v in vertices.values()), dtype=float))
    min_x, max_x = float(xs[0]), float(xs[-1])
    min_y, max_y = float(ys[0]), float(ys[-1])

    if orientation.pointy_top:
        valid_x = xs
        valid_y = _large_gap_midpoints(ys)
    else:
        valid_x = _large_gap_midpoints(xs)
        valid_y = ys

    return MirrorAxes(
        min_x=min_x,
        max_x=max_x,
        min_y=min_y,
        max_y=max_y,
        center_x=snap_axis(valid_x, (min_x + max_x) / 2),
        center_y=snap_axis(valid_y, (min_y + max_y) / 2),
    )


def _large_gap_midpoints(coords: np.ndarray) -> np.ndarray:
    if coords.size < 2:
        return coords[:0]
    gaps = np.diff(coords)
    large = gaps > gaps.max() * LARGE_GAP_RATIO
    return (coords[:-1][large] + coords[1:][large]) / 2


def snap_axis(positions: Iterable[float], center: float) -> float:
    """Pick the position nearest *center*; near-ties go to the smaller one.

    Falls back to *center* itself when there are no candidates.
    """
    best: Optional[float] = None
    best_dist = math.inf
    for pos in positions:
        pos = float(pos)
        dist = abs(pos - center)
        if best is None or dist < best_dist - AXIS_TIE_TOLERANCE:
            best, best_dist = pos, dist
        elif abs(dist - best_dist) < AXIS_TIE_TOLERANCE and pos < best:
            best = pos
    return center if best is None else best


# ═══════════════════════════════════════════════════════════════════
# Edge resolution
# ═══════════════════════════════════════════════════════════════════


def mirror_point(
    x: float,
    y: float,
    transform: MirrorTransform,
    axes: MirrorAxes,
) -> Tuple[float, float]:
    """Reflect ``(x, y)`` about the axes; every transform is its own inverse."""
    if transform is MirrorTransform.HORIZONTAL:
        return 2 * axes.center_x - x, y
    if transform is MirrorTransform.VERTICAL:
        return x, 2 * axes.center_y - y
    return 2 * axes.center_x - x, 2 * axes.center_y - y


def nearest_vertex(
    vertices: Mapping[str, Vertex],
    x: float,
    y: float,
    tolerance: float = SNAP_TOLERANCE,
) -> Optional[str]:
    """Id of the closest vertex to ``(x, y)`` if it lies within *tolerance*."""
    nearest: Optional[str] = None
    min_dist = math.inf
    for vertex in vertices.values():
        dist = math.hypot(vertex.x - x, vertex.y - y)
        if dist < min_dist:
            min_dist = dist
            nearest = vertex.id
    return nearest if min_dist < tolerance else None


def mirror_edge(
    lattice: HexLattice,
    key: str,
    transform: MirrorTransform,
    axes: MirrorAxes,
) -> Optional[str]:
    """Key of the lattice edge that *key* maps onto, or ``None`` on a miss."""
    edge = lattice.edges.get(key)
    if edge is None:
        return None
    ends: List[Optional[str]] = []
    for vertex_id in edge.vertex_ids:
        vertex = lattice.vertices[vertex_id]
        mx, my = mirror_point(vertex.x, vertex.y, transform, axes)
        ends.append(nearest_vertex(lattice.vertices, mx, my))
    a, b = ends
    if a is None or b is None or a == b:
        return None
    mirrored = edge_key(a, b)
    return mirrored if lattice.has_edge(mirrored) else None


def mirrored_edges(
    key: str,
    mode: MirrorMode | str,
    lattice: HexLattice,
    axes: Optional[MirrorAxes] = None,
) -> FrozenSet[str]:
    """All edge keys to toggle together with *key* under *mode*.

    The result always contains *key*.  Reflections that fall off the
    lattice are left out, and a key unknown to the lattice resolves to
    itself alone.
    """
    mode = MirrorMode.parse(mode)
    transforms = MODE_TRANSFORMS[mode]
    if not transforms or not lattice.has_edge(key):
        return frozenset((key,))
    if axes is None:
        axes = calculate_mirror_axes(lattice.vertices, lattice.orientation)

    results = {key}
    for transform in transforms:
        mirrored = mirror_edge(lattice, key, transform, axes)
        if mirrored is not None:
            results.add(mirrored)
    return frozenset(results)
