"""The user's installation as an immutable design record.

A :class:`Design` holds configuration (physical size, spacing,
orientation, mirror mode, limits) and the list of enabled edge keys.
Editing returns a new record; nothing here mutates.

Usage
-----
>>> design = Design(width=120, length=96)
>>> view = design.evaluate()
>>> design = design.toggle(next(iter(view.lattice.edges)))
>>> design.evaluate().stats.segments
1
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, Tuple

from .builders import build_lattice_for
from .dimensions import DEFAULT_POINT_SPACING, grid_dimensions
from .lattice import HexLattice
from .mirror import calculate_mirror_axes, mirrored_edges
from .models import BoundingBox, GridDimensions, JointStats, MirrorAxes, MirrorMode, Orientation
from .stats import LimitCheck, calculate_stats, limits_exceeded

logger = logging.getLogger(__name__)

# Edge length of the lattice the view is computed on.  Physical spacing
# only affects cell counts; geometry is always in these units.
VIEW_SIZE = 30.0


def filter_enabled_edges(keys: Iterable[str], lattice: HexLattice) -> FrozenSet[str]:
    """The subset of *keys* that name edges of *lattice*; unknown keys drop out."""
    return frozenset(lattice.filter_edge_keys(keys))


def toggle_edges(
    enabled: Iterable[str],
    key: str,
    lattice: HexLattice,
    mode: MirrorMode | str = MirrorMode.NONE,
    axes: MirrorAxes | None = None,
) -> Tuple[str, ...]:
    """Toggle *key* and its mirror images, returning the new key list.

    The clicked edge decides the direction: if it is on, the whole mirror
    group is switched off, otherwise the whole group is switched on.  A
    key that is not in the lattice leaves *enabled* unchanged.
    """
    current = list(dict.fromkeys(enabled))
    if not lattice.has_edge(key):
        logger.debug("ignoring toggle of unknown edge %s", key)
        return tuple(current)

    group = mirrored_edges(key, mode, lattice, axes)
    if key in current:
        return tuple(k for k in current if k not in group)
    present = set(current)
    added = sorted(k for k in group if k not in present)
    return tuple(current + added)


@dataclass(frozen=True)
class DesignView:
    """Everything derived from a design for one evaluation."""

    dimensions: GridDimensions
    lattice: HexLattice
    enabled_edges: FrozenSet[str]
    stats: JointStats
    limits: LimitCheck

    def mirror_axes(self) -> MirrorAxes:
        return calculate_mirror_axes(self.lattice.vertices, self.lattice.orientation)

    def view_box(self, padding: float | None = None) -> BoundingBox:
        """Drawing area: origin to the far lattice corner, padded by one edge length."""
        pad = self.lattice.metadata.get("size", VIEW_SIZE) if padding is None else padding
        bounds = self.lattice.bounds()
        max_x = bounds.max_x if bounds else 0.0
        max_y = bounds.max_y if bounds else 0.0
        return BoundingBox(-pad, -pad, max_x + pad, max_y + pad)


@dataclass(frozen=True)
class Design:
    width: float = 120.0
    length: float = 96.0
    point_spacing: float = DEFAULT_POINT_SPACING
    orientation: Orientation = Orientation.POINTY
    mirror_mode: MirrorMode = MirrorMode.NONE
    enabled_edges: Tuple[str, ...] = field(default_factory=tuple)
    max_segments: int = 0
    max_joints2: int = 0
    max_joints3: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "orientation", Orientation.parse(self.orientation))
        object.__setattr__(self, "mirror_mode", MirrorMode.parse(self.mirror_mode))
        object.__setattr__(self, "enabled_edges", tuple(self.enabled_edges))
        if self.point_spacing <= 0:
            raise ValueError("point_spacing must be > 0")

    # ── derived data ────────────────────────────────────────────────

    def dimensions(self) -> GridDimensions:
        return grid_dimensions(self.width, self.length, self.point_spacing, self.orientation)

    def lattice(self) -> HexLattice:
        return build_lattice_for(self.dimensions(), VIEW_SIZE, self.orientation)

    def evaluate(self) -> DesignView:
        dims = self.dimensions()
        lattice = build_lattice_for(dims, VIEW_SIZE, self.orientation)
        enabled = filter_enabled_edges(self.enabled_edges, lattice)
        stats = calculate_stats(enabled, lattice)
        dropped = len(set(self.enabled_edges)) - len(enabled)
        if dropped:
            logger.debug("dropped %d stored edge keys not in the current lattice", dropped)
        return DesignView(
            dimensions=dims,
            lattice=lattice,
            enabled_edges=enabled,
            stats=stats,
            limits=limits_exceeded(stats, self.max_segments, self.max_joints2, self.max_joints3),
        )

    # ── edits ───────────────────────────────────────────────────────

    def toggle(self, key: str) -> "Design":
        edges = toggle_edges(self.enabled_edges, key, self.lattice(), self.mirror_mode)
        return replace(self, enabled_edges=edges)

    def clear(self) -> "Design":
        return replace(self, enabled_edges=())

    def configure(self, **changes: Any) -> "Design":
        """Return a copy with configuration fields replaced.

        Enabled keys are kept as-is; those the new lattice lacks are
        ignored on evaluation.
        """
        return replace(self, **changes)

    # ── persisted form ──────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "widthInches": self.width,
            "lengthInches": self.length,
            "pointSpacing": self.point_spacing,
            "pointyTop": self.orientation.pointy_top,
            "mirrorMode": self.mirror_mode.value,
            "enabledEdges": list(self.enabled_edges),
            "maxSegments": self.max_segments,
            "maxJoints2": self.max_joints2,
            "maxJoints3": self.max_joints3,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], base: "Design | None" = None) -> "Design":
        """Build a design from its persisted form; absent keys keep *base* values."""
        design = base or cls()
        changes: Dict[str, Any] = {}
        for key, attr in _PERSISTED_FIELDS.items():
            if key in payload:
                changes[attr] = payload[key]
        if "pointyTop" in payload:
            changes["orientation"] = Orientation.from_flag(bool(payload["pointyTop"]))
        return replace(design, **changes)


_PERSISTED_FIELDS = {
    "widthInches": "width",
    "lengthInches": "length",
    "pointSpacing": "point_spacing",
    "mirrorMode": "mirror_mode",
    "enabledEdges": "enabled_edges",
    "maxSegments": "max_segments",
    "maxJoints2": "max_joints2",
    "maxJoints3": "max_joints3",
}
