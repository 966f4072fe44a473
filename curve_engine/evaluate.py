"""Curve evaluation facade.

Single entry point for every curve kind:

    domain(curve)            active parameter interval
    point(curve, t)          point at one parameter, shape (D,)
    sample(curve, ts)        points at many parameters, shape (N, D)
    length(curve)            arc length of a finite curve
    discretize(curve, n)     n evenly spaced samples over the domain

Each call consults ``curve.unit_speed``, validates the parameters against
the active interval, then dispatches on the curve kind.  Dispatch is an
explicit ``isinstance`` chain over ``CURVE_KINDS``; an unknown kind is a
``TypeError``.

Domains
-------
=============  ==============  =====================
Curve          raw             unit speed
=============  ==============  =====================
Line           (-inf, inf)     (-inf, inf)
Ray            [0, inf)        [0, inf)
Segment        [0, 1]          [0, |end - start|]
SegmentChain   [0, 1]          [0, total_length]
Circle         (-inf, inf)     (-inf, inf)
Ellipse        (-inf, inf)     unsupported
=============  ==============  =====================
"""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np
import torch

from curve_engine.arclength import (
    arc_length_to_angle,
    circumference,
    ellipse_arc_length_to_angle,
)
from curve_engine.curves import (
    Circle,
    Curve,
    Ellipse,
    Line,
    Ray,
    Segment,
    SegmentChain,
)
from curve_engine.domain import (
    ALL_REALS,
    NON_NEGATIVE,
    UNIT,
    Interval,
    validate,
    validate_batch,
)
from curve_engine.errors import PreconditionError, UnsupportedParametrizationError
from curve_engine.primitives import DTYPE

ParamsLike = Union[torch.Tensor, np.ndarray, Sequence[float]]


def domain(curve: Curve) -> Interval:
    """Return the parameter interval for the curve's active mode.

    Raises
    ------
    UnsupportedParametrizationError
        Ellipse in unit-speed mode.
    """
    if isinstance(curve, (Line, Circle)):
        return ALL_REALS
    elif isinstance(curve, Ray):
        return NON_NEGATIVE
    elif isinstance(curve, Segment):
        return Interval(0.0, curve.length) if curve.unit_speed else UNIT
    elif isinstance(curve, SegmentChain):
        return Interval(0.0, curve.total_length) if curve.unit_speed else UNIT
    elif isinstance(curve, Ellipse):
        if curve.unit_speed:
            ellipse_arc_length_to_angle(torch.zeros(0, dtype=DTYPE), curve.radius_x, curve.radius_y)
        return ALL_REALS
    raise TypeError(f"Unknown curve kind: {type(curve).__name__}")


def point(curve: Curve, parameter: float) -> torch.Tensor:
    """Evaluate ``curve`` at a single parameter.

    Parameters
    ----------
    curve : Curve
        Any curve kind.
    parameter : float
        Raw parameter, or arc length when ``curve.unit_speed`` is set.

    Returns
    -------
    torch.Tensor
        Point of shape (D,), float64.

    Raises
    ------
    DomainError
        Parameter outside ``domain(curve)`` (no clamping).
    UnsupportedParametrizationError
        Ellipse in unit-speed mode.
    """
    t = float(parameter)
    validate(t, domain(curve), curve=curve.kind, unit_speed=curve.unit_speed)
    return _evaluate(curve, torch.tensor([t], dtype=DTYPE))[0]


def sample(curve: Curve, parameters: ParamsLike) -> torch.Tensor:
    """Evaluate ``curve`` at every entry of a 1-D parameter list.

    The whole batch is validated before anything is computed; the first
    offending entry raises ``DomainError``.

    Returns
    -------
    torch.Tensor
        Points, shape (N, D).
    """
    ts = torch.as_tensor(parameters, dtype=DTYPE).detach().reshape(-1)
    validate_batch(ts, domain(curve), curve=curve.kind, unit_speed=curve.unit_speed)
    return _evaluate(curve, ts)


def length(curve: Curve) -> float:
    """Arc length of a finite curve (circumference for a circle).

    Independent of the mode flag.
    """
    if isinstance(curve, Segment):
        return curve.length
    elif isinstance(curve, SegmentChain):
        return curve.total_length
    elif isinstance(curve, Circle):
        return circumference(curve.radius)
    elif isinstance(curve, (Line, Ray)):
        raise PreconditionError(f"{curve.kind} is unbounded and has no finite length")
    elif isinstance(curve, Ellipse):
        raise UnsupportedParametrizationError(
            "Ellipse perimeter requires elliptic-integral quadrature, not supported"
        )
    raise TypeError(f"Unknown curve kind: {type(curve).__name__}")


def discretize(curve: Curve, n: int = 64) -> torch.Tensor:
    """Sample ``n`` evenly spaced parameters over the curve's active domain.

    Circles and ellipses are sampled over one full turn (``[0, 2*pi]``, or
    ``[0, circumference]`` for a unit-speed circle), so the last sample
    repeats the first.  Lines and rays are unbounded and rejected.

    Returns
    -------
    torch.Tensor
        Points, shape (n, D).
    """
    if n < 2:
        raise PreconditionError(f"discretize requires n >= 2, got {n}")

    interval = domain(curve)
    if isinstance(curve, (Circle, Ellipse)):
        upper = circumference(curve.radius) if isinstance(curve, Circle) and curve.unit_speed else 2.0 * math.pi
        interval = Interval(0.0, upper)
    elif not interval.is_finite:
        raise PreconditionError(f"{curve.kind} is unbounded; cannot discretize")

    ts = torch.linspace(interval.lower, interval.upper, n, dtype=DTYPE)
    ts[0] = interval.lower
    ts[-1] = interval.upper
    return sample(curve, ts)


# ---------------------------------------------------------------------------
# Per-kind formulas (parameters already validated, shape (N,))
# ---------------------------------------------------------------------------


def _evaluate(curve: Curve, ts: torch.Tensor) -> torch.Tensor:
    if isinstance(curve, Line):
        return _along(curve.centre, curve.unit_direction if curve.unit_speed else curve.direction, ts)
    elif isinstance(curve, Ray):
        return _along(curve.start, curve.unit_direction if curve.unit_speed else curve.direction, ts)
    elif isinstance(curve, Segment):
        if curve.unit_speed:
            return _along(curve.start, curve.unit_direction, ts)
        t = ts.unsqueeze(-1)
        return (1.0 - t) * curve.start + t * curve.end
    elif isinstance(curve, SegmentChain):
        arc_lengths = ts if curve.unit_speed else ts * curve.total_length
        return curve.table.interpolate(arc_lengths)
    elif isinstance(curve, Circle):
        theta = arc_length_to_angle(ts, curve.radius) if curve.unit_speed else ts
        return curve.centre + curve.radius * torch.stack([torch.cos(theta), torch.sin(theta)], dim=-1)
    elif isinstance(curve, Ellipse):
        theta = (
            ellipse_arc_length_to_angle(ts, curve.radius_x, curve.radius_y)
            if curve.unit_speed
            else ts
        )
        return curve.centre + torch.stack(
            [curve.radius_x * torch.cos(theta), curve.radius_y * torch.sin(theta)], dim=-1
        )
    raise TypeError(f"Unknown curve kind: {type(curve).__name__}")


def _along(origin: torch.Tensor, direction: torch.Tensor, ts: torch.Tensor) -> torch.Tensor:
    """``origin + t * direction`` for each t, shape (N, D)."""
    return origin + ts.unsqueeze(-1) * direction
