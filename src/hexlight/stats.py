from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .lattice import HexLattice
from .models import BoundingBox, JointStats


@dataclass(frozen=True)
class LimitCheck:
    segments: bool = False
    joints2: bool = False
    joints3: bool = False

    def any(self) -> bool:
        return self.segments or self.joints2 or self.joints3


def calculate_stats(enabled: Iterable[str], lattice: HexLattice) -> JointStats:
    """Segment count, joint histogram and footprint of an enabled-edge set.

    Keys the lattice does not know are ignored.  Vertices without an
    enabled edge are not reported.
    """
    enabled_keys = set(enabled) & lattice.edge_keys()
    degrees = lattice.vertex_degrees(enabled_keys)

    joints1 = sum(1 for degree in degrees.values() if degree == 1)
    joints2 = sum(1 for degree in degrees.values() if degree == 2)
    joints3 = sum(1 for degree in degrees.values() if degree >= 3)

    return JointStats(
        segments=len(enabled_keys),
        joints1=joints1,
        joints2=joints2,
        joints3=joints3,
        bounding_box=lattice.bounds(degrees) if degrees else None,
        joint_degree_by_vertex=degrees,
    )


def limits_exceeded(
    stats: JointStats,
    max_segments: int = 0,
    max_joints2: int = 0,
    max_joints3: int = 0,
) -> LimitCheck:
    """Flag counts above their limit; a limit of 0 means unlimited."""
    return LimitCheck(
        segments=max_segments > 0 and stats.segments > max_segments,
        joints2=max_joints2 > 0 and stats.joints2 > max_joints2,
        joints3=max_joints3 > 0 and stats.joints3 > max_joints3,
    )


def layout_size(
    bbox: Optional[BoundingBox],
    size: float,
    spacing: float,
) -> tuple[float, float]:
    """Physical ``(width, length)`` of a footprint measured in lattice units.

    The lattice is drawn with edge length *size*; the installation uses
    edge length *spacing*.
    """
    if bbox is None:
        return 0.0, 0.0
    scale = spacing / size
    return bbox.width * scale, bbox.height * scale
