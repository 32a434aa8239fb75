"""Command line tools for chipcarve design files."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from loguru import logger

from chipcarve.datatypes import MirrorAxis
from chipcarve.document import Design, design_to_json, load_design
from chipcarve.errors import DesignFormatError
from chipcarve.leaf import Leaf
from chipcarve.log import configure_logging
from chipcarve.shapes import Shape
from chipcarve.triarc import TriArc


def _read_design(path: Path) -> Design:
    with path.open("r", encoding="utf-8") as handle:
        return load_design(handle.read())


def _write_design(path: Path, design: Design) -> None:
    text = design_to_json(design.shapes, design.background_images or None, design.metadata or None)
    with path.open("w", encoding="utf-8") as handle:
        handle.write(text)
        handle.write("\n")


def shape_summary(shape: Shape) -> Dict[str, Any]:
    b = shape.bounds
    info: Dict[str, Any] = {
        "id": shape.id,
        "type": shape.shape_type.value,
        "center": [round(shape.center.x, 4), round(shape.center.y, 4)],
        "bounds": [round(b.min_x, 4), round(b.min_y, 4), round(b.max_x, 4), round(b.max_y, 4)],
    }
    if isinstance(shape, Leaf):
        info["radius"] = round(shape.radius, 4)
    elif isinstance(shape, TriArc):
        info["curvatures"] = [round(v, 4) for v in shape.bulges]
    return info


def _cmd_validate(args: argparse.Namespace) -> int:
    design = _read_design(args.design)
    print(f"OK: {len(design.shapes)} shapes")
    return 0


def _cmd_summary(args: argparse.Namespace) -> int:
    design = _read_design(args.design)
    rows = [shape_summary(s) for s in design.shapes]
    if args.json:
        print(json.dumps(rows, indent=2))
        return 0
    for row in rows:
        extra = row.get("radius", row.get("curvatures"))
        print(f"{row['id']}  {row['type']:<8} center={row['center']} bounds={row['bounds']} {extra}")
    return 0


def _cmd_jiggle(args: argparse.Namespace) -> int:
    design = _read_design(args.design)
    rng = np.random.default_rng(args.seed)
    for shape in design.shapes:
        shape.jiggle(args.position, args.rotation, args.radius, rng=rng)
    _write_design(args.output, design)
    logger.info("Jiggled {} shapes into {}", len(design.shapes), args.output)
    return 0


def _cmd_mirror(args: argparse.Namespace) -> int:
    design = _read_design(args.design)
    copies = []
    for shape in design.shapes:
        twin = shape.clone(fresh_id=True)
        twin.mirror(MirrorAxis(args.axis), (0.0, 0.0))
        copies.append(twin)
    design.shapes.extend(copies)
    _write_design(args.output, design)
    logger.info("Added {} mirrored shapes into {}", len(copies), args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipcarve", description="Inspect and edit chip-carving designs.")
    parser.add_argument("--log-level", default="WARNING", help="loguru level for diagnostics")
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Check a design file against the 2.0 schema")
    p_validate.add_argument("design", type=Path)
    p_validate.set_defaults(func=_cmd_validate)

    p_summary = sub.add_parser("summary", help="List shapes with centre, bounds and curvature")
    p_summary.add_argument("design", type=Path)
    p_summary.add_argument("--json", action="store_true", help="emit JSON instead of text")
    p_summary.set_defaults(func=_cmd_summary)

    p_jiggle = sub.add_parser("jiggle", help="Randomly perturb every shape")
    p_jiggle.add_argument("design", type=Path)
    p_jiggle.add_argument("output", type=Path)
    p_jiggle.add_argument("--position", type=float, default=1.0, help="mm")
    p_jiggle.add_argument("--rotation", type=float, default=5.0, help="degrees")
    p_jiggle.add_argument("--radius", type=float, default=5.0, help="percent")
    p_jiggle.add_argument("--seed", type=int, default=None)
    p_jiggle.set_defaults(func=_cmd_jiggle)

    p_mirror = sub.add_parser("mirror", help="Append copies mirrored about the origin")
    p_mirror.add_argument("design", type=Path)
    p_mirror.add_argument("output", type=Path)
    p_mirror.add_argument("--axis", choices=[a.value for a in MirrorAxis], default=MirrorAxis.VERTICAL.value)
    p_mirror.set_defaults(func=_cmd_mirror)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except (OSError, DesignFormatError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
