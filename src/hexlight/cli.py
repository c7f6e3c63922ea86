"""hexlight command-line interface."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .design import Design
from .dimensions import DEFAULT_POINT_SPACING, DISPLAY_UNITS, grid_dimensions, to_display_units
from .io import (
    DesignError,
    delete_design,
    load_design,
    load_designs,
    load_named_design,
    save_design,
    save_lattice,
    save_named_design,
)
from .models import MirrorMode, Orientation
from .stats import layout_size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="hexlight: hex-grid light installation designer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    dims = sub.add_parser("dimensions", help="Show cell counts for a physical area")
    _add_size_arguments(dims)

    build = sub.add_parser("build", help="Build a lattice and save it as JSON")
    _add_size_arguments(build)
    build.add_argument("--size", type=float, default=1.0, help="Lattice edge length")
    build.add_argument("--out", dest="output_path", required=True)

    toggle = sub.add_parser("toggle", help="Toggle an edge (and its mirror images)")
    toggle.add_argument("--design", dest="design_path", required=True)
    toggle.add_argument("--edge", action="append", required=True, help="Edge key, e.g. 3|7")
    toggle.add_argument("--mirror", choices=[m.value for m in MirrorMode])

    clear = sub.add_parser("clear", help="Switch every edge off")
    clear.add_argument("--design", dest="design_path", required=True)

    stats = sub.add_parser("stats", help="Print statistics for a design")
    stats.add_argument("--design", dest="design_path", required=True)
    stats.add_argument("--units", choices=DISPLAY_UNITS, default="in")

    render = sub.add_parser("render", help="Render a design to PNG")
    render.add_argument("--design", dest="design_path", required=True)
    render.add_argument("--out", dest="output_path", required=True)
    render.add_argument("--axes", action="store_true", help="Draw active mirror axes")
    render.add_argument("--dpi", type=int, default=150)

    designs = sub.add_parser("designs", help="Manage a library of named designs")
    designs.add_argument("action", choices=["list", "save", "load", "delete"])
    designs.add_argument("--library", dest="library_path", required=True)
    designs.add_argument("--name")
    designs.add_argument("--design", dest="design_path")

    return parser


def _add_size_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--width", type=float, required=True, help="Width in inches")
    parser.add_argument("--length", type=float, required=True, help="Length in inches")
    parser.add_argument("--spacing", type=float, default=DEFAULT_POINT_SPACING)
    parser.add_argument("--flat-top", action="store_true")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "dimensions":
            _cmd_dimensions(args)
        elif args.command == "build":
            _cmd_build(args)
        elif args.command == "toggle":
            _cmd_toggle(args)
        elif args.command == "clear":
            design = _load_or_default(args.design_path)
            save_design(design.clear(), args.design_path)
            print(f"Saved {args.design_path}")
        elif args.command == "stats":
            _cmd_stats(args)
        elif args.command == "render":
            _cmd_render(args)
        elif args.command == "designs":
            _cmd_designs(args, parser)
    except (DesignError, ValueError) as exc:
        print(exc)
        raise SystemExit(1)


def _orientation(args) -> Orientation:
    return Orientation.FLAT if args.flat_top else Orientation.POINTY


def _load_or_default(path: str) -> Design:
    if Path(path).exists():
        return load_design(path)
    return Design()


def _cmd_dimensions(args) -> None:
    dims = grid_dimensions(args.width, args.length, args.spacing, _orientation(args))
    print(f"cols: {dims.cols} (odd: {dims.cols_odd})")
    print(f"rows: {dims.rows} (odd: {dims.rows_odd})")
    print(f"actual size: {dims.actual_width:.1f} x {dims.actual_length:.1f}")


def _cmd_build(args) -> None:
    from .builders import build_lattice_from_size

    lattice = build_lattice_from_size(
        args.width, args.length, args.spacing, _orientation(args), size=args.size
    )
    save_lattice(lattice, args.output_path)
    print(f"{len(lattice.vertices)} vertices, {len(lattice.edges)} edges")
    print(f"Saved {args.output_path}")


def _cmd_toggle(args) -> None:
    design = _load_or_default(args.design_path)
    if args.mirror:
        design = design.configure(mirror_mode=MirrorMode(args.mirror))
    for key in args.edge:
        design = design.toggle(key)
    save_design(design, args.design_path)
    print(f"{len(design.enabled_edges)} edges enabled")
    print(f"Saved {args.design_path}")


def _cmd_stats(args) -> None:
    design = load_design(args.design_path)
    view = design.evaluate()
    stats = view.stats
    limits = {
        "segments": design.max_segments,
        "joints2": design.max_joints2,
        "joints3": design.max_joints3,
    }

    lines = [
        ("segments", stats.segments, view.limits.segments),
        ("joints2", stats.joints2, view.limits.joints2),
        ("joints3", stats.joints3, view.limits.joints3),
    ]
    for name, value, exceeded in lines:
        limit = f" / {limits[name]}" if limits[name] > 0 else ""
        flag = "  (limit exceeded)" if exceeded else ""
        print(f"{name}: {value}{limit}{flag}")
    if stats.joints1:
        print(f"missing joints: {stats.joints1}")

    if stats.segments:
        width, length = layout_size(
            stats.bounding_box, view.lattice.metadata["size"], design.point_spacing
        )
        print(
            f"layout: {to_display_units(width, args.units):.1f}{args.units} x "
            f"{to_display_units(length, args.units):.1f}{args.units}"
        )

    if view.limits.any():
        raise SystemExit(1)


def _cmd_render(args) -> None:
    from .render import render_png

    design = load_design(args.design_path)
    view = design.evaluate()
    render_png(
        view.lattice,
        view.enabled_edges,
        args.output_path,
        mirror_mode=design.mirror_mode if args.axes else None,
        dpi=args.dpi,
    )
    print(f"Saved {args.output_path}")


def _cmd_designs(args, parser: argparse.ArgumentParser) -> None:
    if args.action == "list":
        for name, design in sorted(load_designs(args.library_path).items()):
            print(f"{name}: {len(design.enabled_edges)} edges, "
                  f"{design.width:g} x {design.length:g}, {design.orientation.value}")
        return

    if not args.name:
        parser.error(f"designs {args.action} requires --name")

    if args.action == "save":
        if not args.design_path:
            parser.error("designs save requires --design")
        save_named_design(args.library_path, args.name, load_design(args.design_path))
        print(f"Saved {args.name!r} to {args.library_path}")
    elif args.action == "load":
        if not args.design_path:
            parser.error("designs load requires --design")
        save_design(load_named_design(args.library_path, args.name), args.design_path)
        print(f"Saved {args.design_path}")
    elif args.action == "delete":
        if not delete_design(args.library_path, args.name):
            print(f"No design named {args.name!r}")
            raise SystemExit(1)
        print(f"Deleted {args.name!r}")


if __name__ == "__main__":
    main()
