from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from .lattice import HexLattice
from .mirror import calculate_mirror_axes
from .models import MirrorMode
from .stats import calculate_stats

JOINT_COLORS = {
    1: "#e0a030",  # dead end
    2: "#5aa9e6",
    3: "#3cb371",
}


def render_png(
    lattice: HexLattice,
    enabled: Iterable[str],
    output_path: str | Path,
    grid_color: str = "#c8c8c8",
    light_color: str = "#2b2b2b",
    light_width: float = 2.5,
    joint_size: float = 18.0,
    mirror_mode: Optional[MirrorMode | str] = None,
    padding: float | None = None,
    dpi: int = 150,
) -> None:
    """Render a design to PNG: faint lattice, enabled edges, joints by degree.

    When *mirror_mode* is given the active mirror axes are drawn dashed.
    Requires matplotlib; imported lazily to keep core package lightweight.
    """
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as exc:  # pragma: no cover - requires optional dep
        raise RuntimeError(
            "matplotlib is required for rendering. Install with `pip install matplotlib`."
        ) from exc

    if not lattice.vertices:
        raise ValueError("Cannot render an empty lattice.")

    enabled_keys = set(lattice.filter_edge_keys(enabled))
    stats = calculate_stats(enabled_keys, lattice)

    fig, ax = plt.subplots()

    for edge in lattice.edges.values():
        lit = edge.id in enabled_keys
        a, b = (lattice.vertices[vid] for vid in edge.vertex_ids)
        ax.plot(
            [a.x, b.x],
            [a.y, b.y],
            color=light_color if lit else grid_color,
            linewidth=light_width if lit else 0.8,
            zorder=2 if lit else 1,
        )

    for vertex_id, degree in stats.joint_degree_by_vertex.items():
        vertex = lattice.vertices[vertex_id]
        ax.scatter(vertex.x, vertex.y, s=joint_size, c=JOINT_COLORS[min(degree, 3)], zorder=3)

    if mirror_mode is not None:
        _draw_mirror_axes(ax, lattice, MirrorMode.parse(mirror_mode))

    bounds = lattice.bounds()
    pad = lattice.metadata.get("size", 1.0) if padding is None else padding
    ax.set_aspect("equal", "box")
    ax.set_xlim(bounds.min_x - pad, bounds.max_x + pad)
    # Screen coordinates: y grows downwards.
    ax.set_ylim(bounds.max_y + pad, bounds.min_y - pad)
    ax.axis("off")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight", pad_inches=0)
    plt.close(fig)


def _draw_mirror_axes(ax, lattice: HexLattice, mode: MirrorMode) -> None:
    if mode is MirrorMode.NONE:
        return
    axes = calculate_mirror_axes(lattice.vertices, lattice.orientation)
    style = dict(color="#d1495b", linewidth=1.0, linestyle=(0, (3, 3)))
    if mode in (MirrorMode.HORIZONTAL, MirrorMode.BOTH):
        ax.plot([axes.center_x, axes.center_x], [axes.min_y, axes.max_y], **style)
    if mode in (MirrorMode.VERTICAL, MirrorMode.BOTH):
        ax.plot([axes.min_x, axes.max_x], [axes.center_y, axes.center_y], **style)
    if mode is MirrorMode.RADIAL:
        ax.scatter(axes.center_x, axes.center_y, s=30, c="#d1495b", marker="+", zorder=4)
