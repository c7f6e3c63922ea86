import sys
from pathlib import Path

ROOT = Path(__file__).parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from hexlight.design import Design
from hexlight.models import MirrorMode


def main() -> None:
    design = Design(width=120, length=96, mirror_mode=MirrorMode.BOTH)
    lattice = design.lattice()
    errors = lattice.validate(strict=True)
    if errors:
        raise SystemExit("\n".join(errors))

    # Outline the first cell; the mirror fills in the other corners.
    for key in lattice.faces["h0"].edge_ids:
        design = design.toggle(key)

    view = design.evaluate()
    print("Grid:", view.dimensions)
    print("Vertices:", len(lattice.vertices))
    print("Edges:", len(lattice.edges))
    print("Mirror axes:", view.mirror_axes())
    print("Segments:", view.stats.segments)
    print("2-joints:", view.stats.joints2, "3-joints:", view.stats.joints3)

    out = ROOT / "exports" / "demo_design.png"
    from hexlight.render import render_png
    render_png(view.lattice, view.enabled_edges, out, mirror_mode=design.mirror_mode)
    print(f"Saved {out}")


if __name__ == "__main__":
    main()
