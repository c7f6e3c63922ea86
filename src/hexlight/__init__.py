"""hexlight: hex-lattice geometry for light installation design.

Public API is organised into layers:

- **Core**: models, lattice container, dimension solver, lattice builder
- **Symmetry**: mirror axes and mirrored edge resolution
- **Statistics**: segment/joint counts, footprint, limits
- **Designs**: immutable design record and JSON persistence
- **Rendering**: PNG output (requires matplotlib)
"""

# ── Core ────────────────────────────────────────────────────────────
from .models import (
    BoundingBox,
    Edge,
    Face,
    GridDimensions,
    JointStats,
    MirrorAxes,
    MirrorMode,
    Orientation,
    Vertex,
    edge_key,
    split_edge_key,
)
from .lattice import HexLattice
from .dimensions import (
    DEFAULT_POINT_SPACING,
    grid_dimensions,
    to_display_units,
    from_display_units,
)
from .builders import (
    build_hex_lattice,
    build_lattice_for,
    build_lattice_from_size,
    cached_hex_lattice,
    hex_cell_count,
)

# ── Symmetry ────────────────────────────────────────────────────────
from .mirror import (
    MirrorTransform,
    calculate_mirror_axes,
    mirror_point,
    mirrored_edges,
)

# ── Statistics ──────────────────────────────────────────────────────
from .stats import LimitCheck, calculate_stats, layout_size, limits_exceeded

# ── Designs ─────────────────────────────────────────────────────────
from .design import Design, DesignView, filter_enabled_edges, toggle_edges
from .io import (
    DesignError,
    load_design,
    save_design,
    load_designs,
    save_named_design,
    load_named_design,
    delete_design,
    load_lattice,
    save_lattice,
)

# ── Rendering (lazy: requires matplotlib) ──────────────────────────
from .render import render_png
