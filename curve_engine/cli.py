#!/usr/bin/env python3
"""
Sample curves from a curve file.

Loads a ``curves.v1`` YAML file, discretizes each selected curve into
evenly spaced points and writes ``name,index,x,y[,z]`` rows.

Usage:
    curve-sample curves.yaml
    curve-sample curves.yaml --name outline -n 200 --unit-speed
    curve-sample curves.yaml --output out/points.csv
    python -m curve_engine.cli curves.yaml --log-level DEBUG

Lines and rays are unbounded and are skipped with a warning, as are
ellipses under ``--unit-speed`` (no arc-length parametrization).  Naming
such a curve with ``--name`` is an error.  When 2D and 3D curves share an
output, the ``z`` cell of 2D rows is left empty.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List, Optional

import numpy as np

from curve_engine import fs
from curve_engine.curves import Curve, Ellipse, Line, Ray
from curve_engine.errors import CurveError
from curve_engine.evaluate import discretize
from curve_engine.logging_config import pop_context, push_context, setup_logging
from curve_engine.schema import load_curves

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="curve-sample",
        description="Discretize curves from a curves.v1 YAML file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("file", type=str, help="Curve file (YAML)")
    parser.add_argument(
        "--name",
        action="append",
        default=None,
        help="Curve to sample (repeatable); default: all bounded curves",
    )
    parser.add_argument(
        "-n",
        "--samples",
        type=int,
        default=64,
        help="Points per curve (default: 64)",
    )
    parser.add_argument(
        "--unit-speed",
        action="store_true",
        help="Force unit-speed mode for every sampled curve",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Write CSV here instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def select_curves(
    curves: Dict[str, Curve],
    names: Optional[List[str]],
    unit_speed: bool = False,
) -> Dict[str, Curve]:
    """Pick the requested curves, or every sampleable curve when ``names`` is None.

    Without names, lines and rays are skipped, and ellipses too when
    ``unit_speed`` forces arc-length sampling.
    """
    if names:
        missing = [n for n in names if n not in curves]
        if missing:
            raise KeyError(f"Unknown curve(s): {', '.join(missing)}")
        return {n: curves[n] for n in names}

    selected = {}
    for name, curve in curves.items():
        if isinstance(curve, (Line, Ray)):
            logger.warning("Skipping unbounded %s %r", curve.kind, name)
            continue
        if unit_speed and isinstance(curve, Ellipse):
            logger.warning("Skipping %s %r: no unit-speed parametrization", curve.kind, name)
            continue
        selected[name] = curve
    return selected


def sample_rows(curves: Dict[str, Curve], n: int, unit_speed: bool = False) -> np.ndarray:
    """Discretize every curve into a string array of CSV rows.

    Coordinates are formatted with ``%.17g``.  Rows of 2D curves get an
    empty ``z`` cell when any selected curve is 3D.
    """
    rows = []
    width = 0
    for name, curve in curves.items():
        if unit_speed:
            curve = curve.with_unit_speed(True)
        push_context(curve=name)
        try:
            points = discretize(curve, n).numpy()
            logger.info("Sampled %d point(s)", points.shape[0])
        finally:
            pop_context(keys=["curve"])
        width = max(width, points.shape[1])
        for i, p in enumerate(points):
            rows.append([name, str(i), *("%.17g" % v for v in p.tolist())])

    for row in rows:
        row.extend([""] * (2 + width - len(row)))
    return np.array(rows, dtype=str).reshape(len(rows), 2 + width)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level, context={"app": "curve-sample"})

    try:
        curves = select_curves(load_curves(args.file), args.name, unit_speed=args.unit_speed)
        rows = sample_rows(curves, args.samples, unit_speed=args.unit_speed)
    except (CurveError, FileNotFoundError, KeyError) as e:
        logger.error("%s", e)
        return 1

    width = rows.shape[1] - 2
    header = ",".join(["name", "index", "x", "y", "z"][: 2 + width])
    if args.output:
        fs.atomic_save_csv(rows, args.output, header=header, fmt="%s")
        logger.info("Wrote %d row(s) to %s", rows.shape[0], args.output)
    else:
        np.savetxt(sys.stdout, rows, delimiter=",", header=header, comments="", fmt="%s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
