"""curve_engine: parametric curve evaluation.

Evaluate points on lines, rays, segments, segment chains (open or closed),
circles and ellipses, either in the curve's raw parameter or by arc length
(unit-speed mode).

Layers:
    cli → schema → evaluate → curves → arclength / domain → primitives → errors

Guarantees:
    - Points are float64 torch tensors of shape (D,), D in {2, 3}
    - Parameters outside the active domain raise DomainError, never clamp
    - Invalid geometry raises PreconditionError at construction
    - Ellipse unit-speed evaluation raises UnsupportedParametrizationError

Convenience imports:
    from curve_engine import SegmentChain, point, sample
    from curve_engine.logging_config import setup_logging
"""

from curve_engine.curves import (
    CURVE_KINDS,
    Circle,
    Curve,
    Ellipse,
    Line,
    Ray,
    Segment,
    SegmentChain,
)
from curve_engine.domain import Interval, validate
from curve_engine.errors import (
    CurveConfigError,
    CurveError,
    DomainError,
    PreconditionError,
    UnsupportedParametrizationError,
)
from curve_engine.evaluate import discretize, domain, length, point, sample

__version__ = "0.1.0"

__all__ = [
    # Curves
    "CURVE_KINDS",
    "Curve",
    "Line",
    "Ray",
    "Segment",
    "SegmentChain",
    "Circle",
    "Ellipse",
    # Evaluation
    "domain",
    "point",
    "sample",
    "length",
    "discretize",
    "Interval",
    "validate",
    # Errors
    "CurveError",
    "DomainError",
    "PreconditionError",
    "UnsupportedParametrizationError",
    "CurveConfigError",
]
