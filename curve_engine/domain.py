"""Parameter-domain checks for curve evaluation.

An ``Interval`` is closed on finite ends and open on infinite ones.
``validate`` and ``validate_batch`` either return silently or raise
``DomainError``; values are never clamped.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import torch

from curve_engine.errors import DomainError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Interval:
    """Parameter range, inclusive on finite bounds.

    Infinite bounds are open: ``inf`` itself is never a member.

    Parameters
    ----------
    lower, upper : float
        Bounds.  Use ``-math.inf`` / ``math.inf`` for unbounded sides.
    """

    lower: float = -math.inf
    upper: float = math.inf

    def __post_init__(self) -> None:
        if math.isnan(self.lower) or math.isnan(self.upper):
            raise ValueError("Interval bounds must not be NaN")
        if self.lower > self.upper:
            raise ValueError(
                f"Interval lower bound {self.lower} exceeds upper bound {self.upper}"
            )

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.lower) and math.isfinite(self.upper)

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def __contains__(self, value: float) -> bool:
        return math.isfinite(value) and self.lower <= value <= self.upper


ALL_REALS = Interval()
NON_NEGATIVE = Interval(0.0, math.inf)
UNIT = Interval(0.0, 1.0)


def validate(
    parameter: float,
    interval: Interval,
    curve: str = "Curve",
    unit_speed: bool = False,
) -> None:
    """Check ``interval.lower <= parameter <= interval.upper`` for finite ``parameter``.

    Parameters
    ----------
    parameter : float
        Value passed to ``point``.
    interval : Interval
        Active domain of the curve.
    curve : str
        Curve kind, reported in the error.
    unit_speed : bool
        Active mode, reported in the error.

    Raises
    ------
    DomainError
        If the parameter is NaN, infinite or outside the interval.
    """
    if parameter in interval:
        return

    if math.isnan(parameter) or parameter < interval.lower or parameter == -math.inf:
        bound, limit = "lower", interval.lower
    else:
        bound, limit = "upper", interval.upper
    logger.debug(
        "Rejected %s parameter %r (%s bound %r, unit_speed=%s)",
        curve, parameter, bound, limit, unit_speed,
    )
    raise DomainError(parameter, bound, limit, curve=curve, unit_speed=unit_speed)


def validate_batch(
    parameters: torch.Tensor,
    interval: Interval,
    curve: str = "Curve",
    unit_speed: bool = False,
) -> None:
    """Validate every entry of a 1-D parameter tensor.

    The first offending entry (in order) is reported.
    """
    if parameters.numel() == 0:
        return
    inside = (
        torch.isfinite(parameters)
        & (parameters >= interval.lower)
        & (parameters <= interval.upper)
    )
    if bool(inside.all()):
        return
    first = int(torch.nonzero(~inside)[0, 0])
    validate(float(parameters[first]), interval, curve=curve, unit_speed=unit_speed)
