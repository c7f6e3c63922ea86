from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

EDGE_KEY_SEPARATOR = "|"


class Orientation(str, Enum):
    """Hexagon orientation; decides which axis carries the stagger."""

    POINTY = "pointy"
    FLAT = "flat"

    @property
    def pointy_top(self) -> bool:
        return self is Orientation.POINTY

    @classmethod
    def from_flag(cls, pointy_top: bool) -> "Orientation":
        return cls.POINTY if pointy_top else cls.FLAT

    @classmethod
    def parse(cls, value: "Orientation | str | bool") -> "Orientation":
        if isinstance(value, Orientation):
            return value
        if isinstance(value, bool):
            return cls.from_flag(value)
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown orientation {value!r}. Allowed: {[o.value for o in cls]}"
            ) from None


class MirrorMode(str, Enum):
    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"
    RADIAL = "radial"

    @classmethod
    def parse(cls, value: "MirrorMode | str") -> "MirrorMode":
        if isinstance(value, MirrorMode):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown mirror mode {value!r}. Allowed: {[m.value for m in cls]}"
            ) from None


def edge_key(a: str, b: str) -> str:
    """Canonical, order-independent key for the edge between *a* and *b*."""
    if b < a:
        a, b = b, a
    return f"{a}{EDGE_KEY_SEPARATOR}{b}"


def split_edge_key(key: str) -> Optional[tuple[str, str]]:
    """Return the two vertex ids of *key*, or ``None`` if it is malformed."""
    parts = key.split(EDGE_KEY_SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


@dataclass(frozen=True)
class Vertex:
    id: str
    x: float
    y: float


@dataclass(frozen=True)
class Edge:
    """A lattice edge; *id* is the canonical key of *vertex_ids*."""

    id: str
    vertex_ids: tuple[str, str]
    face_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Face:
    """One hexagon cell.

    *vertex_ids* lists the six corners in corner order, starting at the
    orientation's first corner; *edge_ids* holds the key of corner i to
    corner i+1.
    """

    id: str
    col: int
    row: int
    vertex_ids: tuple[str, ...]
    edge_ids: tuple[str, ...] = field(default_factory=tuple)

    def validate_polygon(self) -> list[str]:
        errors: list[str] = []
        if len(self.vertex_ids) != 6:
            errors.append(f"Face {self.id} has {len(self.vertex_ids)} corners, expected 6")
        if len(set(self.vertex_ids)) != len(self.vertex_ids):
            errors.append(f"Face {self.id} has repeated vertex ids")
        if self.edge_ids and len(self.edge_ids) != len(self.vertex_ids):
            errors.append(
                f"Face {self.id} has {len(self.edge_ids)} edges but {len(self.vertex_ids)} vertices"
            )
        return errors


@dataclass(frozen=True)
class GridDimensions:
    cols: int
    cols_odd: int
    rows: int
    rows_odd: int
    actual_width: float
    actual_length: float

    def counts(self) -> tuple[int, int, int, int]:
        return self.cols, self.cols_odd, self.rows, self.rows_odd


@dataclass(frozen=True)
class MirrorAxes:
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    center_x: float
    center_y: float


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class JointStats:
    """Derived statistics for an enabled-edge set.

    *joints1* counts dead ends (missing joints), *joints2* vertices with
    exactly two enabled edges and *joints3* vertices with three or more.
    *bounding_box* is ``None`` when nothing is enabled.
    """

    segments: int
    joints1: int
    joints2: int
    joints3: int
    bounding_box: Optional[BoundingBox]
    joint_degree_by_vertex: Dict[str, int] = field(default_factory=dict)
