"""Curve variants -- the closed set of evaluable curve kinds.

Every curve is a dataclass holding its geometry as float64 tensors plus a
``unit_speed`` mode flag.  Geometry is validated and copied in
``__post_init__`` and must be treated as read-only afterwards; the mode
flag is the only state meant to change.  Rebuild a curve (for example with
``with_unit_speed`` or ``dataclasses.replace``) to change anything else.

Kinds
-----
``Line``          infinite both ways, ``centre + t * direction``
``Ray``           ``start + t * direction`` for t >= 0
``Segment``       linear interpolation ``start`` -> ``end``
``SegmentChain``  polyline of >= 2 vertices, optionally closed
``Circle``        2D, ``centre + radius * (cos t, sin t)``
``Ellipse``       2D, ``centre + (radius_x cos t, radius_y sin t)``

Evaluation lives in ``curve_engine.evaluate``; ``Curve.point`` and
``Curve.domain`` forward to it.

Thread safety
-------------
Evaluation only reads.  Toggling the mode while another thread evaluates
the same instance is not safe; set the mode before sharing the curve.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from typing import Sequence, Union

import torch

from curve_engine.arclength import ChainLengthTable
from curve_engine.errors import PreconditionError
from curve_engine.primitives import (
    VectorLike,
    as_point,
    as_points,
    magnitude,
    normalize,
    require_nonzero,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Curve:
    """Base class for all curve kinds.

    Parameters
    ----------
    unit_speed : bool
        Keyword-only.  ``True`` interprets parameters as arc length.
    """

    unit_speed: bool = field(default=False, kw_only=True)

    def __post_init__(self) -> None:
        self.unit_speed = bool(self.unit_speed)

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def dim(self) -> int:
        raise NotImplementedError

    def set_if_unit_speed(self, unit_speed: bool) -> None:
        """Switch the parameter interpretation for subsequent ``point`` calls."""
        self.unit_speed = bool(unit_speed)

    def with_unit_speed(self, unit_speed: bool) -> "Curve":
        """Return a copy in the requested mode; ``self`` is unchanged."""
        return dataclasses.replace(self, unit_speed=bool(unit_speed))

    @property
    def domain(self):
        from curve_engine.evaluate import domain  # Local import to avoid cycles

        return domain(self)

    def point(self, parameter: float) -> torch.Tensor:
        """Point at ``parameter`` in the active mode.

        Raises
        ------
        DomainError
            Parameter outside the active interval.
        UnsupportedParametrizationError
            Mode not available for this curve kind.
        """
        from curve_engine.evaluate import point  # Local import to avoid cycles

        return point(self, parameter)


# ---------------------------------------------------------------------------
# Linear curves
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Line(Curve):
    """Infinite line through ``centre`` along ``direction``."""

    direction: torch.Tensor
    centre: torch.Tensor

    def __post_init__(self) -> None:
        super().__post_init__()
        self.direction = require_nonzero(as_point(self.direction, "direction"), "Line direction")
        self.centre = as_point(self.centre, "centre")
        _same_dim(self.kind, direction=self.direction, centre=self.centre)

    @property
    def dim(self) -> int:
        return int(self.direction.shape[0])

    @property
    def unit_direction(self) -> torch.Tensor:
        return normalize(self.direction)


@dataclass(eq=False)
class Ray(Curve):
    """Half-line from ``start`` along ``direction``."""

    direction: torch.Tensor
    start: torch.Tensor

    def __post_init__(self) -> None:
        super().__post_init__()
        self.direction = require_nonzero(as_point(self.direction, "direction"), "Ray direction")
        self.start = as_point(self.start, "start")
        _same_dim(self.kind, direction=self.direction, start=self.start)

    @property
    def dim(self) -> int:
        return int(self.direction.shape[0])

    @property
    def unit_direction(self) -> torch.Tensor:
        return normalize(self.direction)


@dataclass(eq=False)
class Segment(Curve):
    """Finite segment from ``start`` to ``end`` (endpoints must differ)."""

    start: torch.Tensor
    end: torch.Tensor

    def __post_init__(self) -> None:
        super().__post_init__()
        self.start = as_point(self.start, "start")
        self.end = as_point(self.end, "end")
        _same_dim(self.kind, start=self.start, end=self.end)
        require_nonzero(self.end - self.start, "Segment end - start")

    @property
    def dim(self) -> int:
        return int(self.start.shape[0])

    @property
    def direction(self) -> torch.Tensor:
        return self.end - self.start

    @property
    def unit_direction(self) -> torch.Tensor:
        return normalize(self.direction)

    @property
    def length(self) -> float:
        return magnitude(self.direction)


@dataclass(eq=False)
class SegmentChain(Curve):
    """Polyline through ``vertices``; ``closed`` adds the edge last -> first.

    Parameters
    ----------
    vertices : sequence of points or (N, D) tensor/array
        Ordered vertices, N >= 2.  Consecutive duplicates are allowed and
        produce zero-length edges.
    closed : bool
        Join the last vertex back to the first.
    """

    vertices: Union[torch.Tensor, Sequence[VectorLike]]
    closed: bool = False
    table: ChainLengthTable = field(init=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.vertices = as_points(self.vertices, "vertices")
        self.closed = bool(self.closed)
        n = int(self.vertices.shape[0])
        if n < 2:
            raise PreconditionError(f"SegmentChain requires >= 2 vertices, got {n}")

        self.table = ChainLengthTable.from_vertices(self.vertices, self.closed)
        logger.debug(
            "Built SegmentChain: %d vertices, %d edges, closed=%s, length=%.6g",
            n, self.table.num_edges, self.closed, self.table.total_length,
        )

    @property
    def dim(self) -> int:
        return int(self.vertices.shape[1])

    @property
    def num_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def num_segments(self) -> int:
        return self.table.num_edges

    @property
    def segment_lengths(self) -> torch.Tensor:
        return self.table.lengths

    @property
    def cumulative_lengths(self) -> torch.Tensor:
        return self.table.cumulative

    @property
    def total_length(self) -> float:
        return self.table.total_length


# ---------------------------------------------------------------------------
# Conics (2D)
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Circle(Curve):
    """Circle of ``radius`` about ``centre``; angle 0 lies on +x."""

    radius: float
    centre: torch.Tensor

    def __post_init__(self) -> None:
        super().__post_init__()
        self.radius = _positive_radius(self.radius, "radius")
        self.centre = as_point(self.centre, "centre", dims=(2,))

    @property
    def dim(self) -> int:
        return 2


@dataclass(eq=False)
class Ellipse(Curve):
    """Axis-aligned ellipse about ``centre``.

    Only raw (angle) evaluation is available; unit-speed evaluation raises
    ``UnsupportedParametrizationError``.
    """

    radius_x: float
    radius_y: float
    centre: torch.Tensor

    def __post_init__(self) -> None:
        super().__post_init__()
        self.radius_x = _positive_radius(self.radius_x, "radius_x")
        self.radius_y = _positive_radius(self.radius_y, "radius_y")
        self.centre = as_point(self.centre, "centre", dims=(2,))

    @property
    def dim(self) -> int:
        return 2


CURVE_KINDS: tuple[type[Curve], ...] = (Line, Ray, Segment, SegmentChain, Circle, Ellipse)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _same_dim(kind: str, **points: torch.Tensor) -> None:
    dims = {name: int(p.shape[0]) for name, p in points.items()}
    if len(set(dims.values())) != 1:
        raise PreconditionError(f"{kind} points must share one dimension, got {dims}")


def _positive_radius(value: float, name: str) -> float:
    try:
        r = float(value)
    except (TypeError, ValueError) as e:
        raise PreconditionError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(r) or r <= 0.0:
        raise PreconditionError(f"{name} must be finite and > 0, got {r}")
    return r
