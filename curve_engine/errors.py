"""Exception hierarchy for curve construction and evaluation.

Every error raised by the package derives from ``CurveError`` so callers
can catch the whole family at once.  The concrete classes also inherit
from the matching builtin (``ValueError``, ``NotImplementedError``) so
generic handlers keep working.

Kinds:
    - ``DomainError``: parameter outside the curve's active interval
    - ``PreconditionError``: invalid geometry passed to a constructor
    - ``UnsupportedParametrizationError``: mode the curve cannot evaluate
    - ``CurveConfigError``: curve description file failed validation
"""

from __future__ import annotations

import math


class CurveError(Exception):
    """Base class for all curve_engine errors."""

    pass


class DomainError(CurveError, ValueError):
    """Raised when a parameter lies outside the active-mode interval.

    Parameters
    ----------
    value : float
        Offending parameter.
    bound : ``"lower"`` | ``"upper"``
        Which side of the interval was violated.  NaN parameters report
        ``"lower"``; infinite ones report the side matching their sign.
    limit : float
        Value of the violated bound.
    curve : str
        Curve kind (class name), e.g. ``"Segment"``.
    unit_speed : bool
        Mode that was active when the call was made.
    """

    def __init__(
        self,
        value: float,
        bound: str,
        limit: float,
        curve: str = "Curve",
        unit_speed: bool = False,
    ) -> None:
        self.value = value
        self.bound = bound
        self.limit = limit
        self.curve = curve
        self.unit_speed = unit_speed
        mode = "unit-speed" if unit_speed else "raw"
        if math.isnan(value):
            detail = "parameter is NaN"
        elif math.isinf(value):
            detail = f"parameter {value!r} is not finite"
        elif bound == "lower":
            detail = f"parameter {value!r} < lower bound {limit!r}"
        else:
            detail = f"parameter {value!r} > upper bound {limit!r}"
        super().__init__(f"{curve} ({mode} mode): {detail}")

    def __reduce__(self):
        return (
            type(self),
            (self.value, self.bound, self.limit, self.curve, self.unit_speed),
        )


class PreconditionError(CurveError, ValueError):
    """Raised when a curve is constructed from invalid geometry."""

    pass


class UnsupportedParametrizationError(CurveError, NotImplementedError):
    """Raised when a curve cannot be evaluated in the requested mode.

    Ellipse arc length has no closed form; unit-speed evaluation would
    need root finding over an elliptic integral and is not provided.
    """

    pass


class CurveConfigError(CurveError):
    """Raised when a curve description file fails validation."""

    pass
