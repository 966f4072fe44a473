"""YAML curve descriptions: pydantic schema and loader.

File format (``curves.v1``)::

    schema: curves.v1
    curves:
      - name: outline
        kind: segment_chain
        vertices: [[0, 0], [4, 0], [4, 3]]
        closed: true
        unit_speed: true
      - name: wheel
        kind: circle
        radius: 2.5
        centre: [1, 1]

Kinds: ``line``, ``ray``, ``segment``, ``segment_chain``, ``circle``,
``ellipse``.  Field names match the curve constructors.

Validation is two-staged: pydantic checks structure and ranges, then the
curve constructors check geometry (zero directions, coincident endpoints).
Both failures surface as ``CurveConfigError`` naming the file and curve.

Usage:
    from curve_engine.schema import load_curves
    curves = load_curves("curves.yaml")
    curves["outline"].point(0.5)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from curve_engine.curves import Circle, Curve, Ellipse, Line, Ray, Segment, SegmentChain
from curve_engine.errors import CurveConfigError, PreconditionError
from curve_engine.fs import load_yaml

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "curves.v1"

Coordinates = List[float]


def _check_dim(v: Coordinates, dims: tuple[int, ...] = (2, 3)) -> Coordinates:
    if len(v) not in dims:
        raise ValueError(f"expected {' or '.join(map(str, dims))} coordinates, got {len(v)}")
    return v


# ============================================================================
# CURVE MODELS
# ============================================================================

class _CurveSpec(BaseModel):
    """Fields shared by every curve description."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Unique curve name")
    unit_speed: bool = Field(False, description="Interpret parameters as arc length")


class LineSpec(_CurveSpec):
    kind: Literal["line"]
    direction: Coordinates
    centre: Coordinates

    @field_validator("direction", "centre")
    @classmethod
    def validate_coordinates(cls, v: Coordinates) -> Coordinates:
        return _check_dim(v)


class RaySpec(_CurveSpec):
    kind: Literal["ray"]
    direction: Coordinates
    start: Coordinates

    @field_validator("direction", "start")
    @classmethod
    def validate_coordinates(cls, v: Coordinates) -> Coordinates:
        return _check_dim(v)


class SegmentSpec(_CurveSpec):
    kind: Literal["segment"]
    start: Coordinates
    end: Coordinates

    @field_validator("start", "end")
    @classmethod
    def validate_coordinates(cls, v: Coordinates) -> Coordinates:
        return _check_dim(v)


class SegmentChainSpec(_CurveSpec):
    """Polyline; ``closed`` joins the last vertex back to the first."""
    kind: Literal["segment_chain"]
    vertices: List[Coordinates] = Field(..., min_length=2)
    closed: bool = False

    @field_validator("vertices")
    @classmethod
    def validate_vertices(cls, v: List[Coordinates]) -> List[Coordinates]:
        for pt in v:
            _check_dim(pt)
        if len({len(pt) for pt in v}) != 1:
            raise ValueError("all vertices must have the same dimension")
        return v


class CircleSpec(_CurveSpec):
    kind: Literal["circle"]
    radius: float = Field(..., gt=0.0)
    centre: Coordinates

    @field_validator("centre")
    @classmethod
    def validate_centre(cls, v: Coordinates) -> Coordinates:
        return _check_dim(v, (2,))


class EllipseSpec(_CurveSpec):
    kind: Literal["ellipse"]
    radius_x: float = Field(..., gt=0.0)
    radius_y: float = Field(..., gt=0.0)
    centre: Coordinates

    @field_validator("centre")
    @classmethod
    def validate_centre(cls, v: Coordinates) -> Coordinates:
        return _check_dim(v, (2,))

    @model_validator(mode="after")
    def validate_mode(self) -> "EllipseSpec":
        if self.unit_speed:
            raise ValueError("ellipse does not support unit_speed: true")
        return self


CurveSpec = Annotated[
    Union[LineSpec, RaySpec, SegmentSpec, SegmentChainSpec, CircleSpec, EllipseSpec],
    Field(discriminator="kind"),
]


class CurveFile(BaseModel):
    """Container for a list of curve descriptions."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    schema_version: str = Field(SCHEMA_VERSION, alias="schema", description="Schema version")
    curves: List[CurveSpec] = Field(default_factory=list)

    @field_validator("schema_version")
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != SCHEMA_VERSION:
            raise ValueError(f"Expected schema '{SCHEMA_VERSION}', got '{v}'")
        return v

    @model_validator(mode="after")
    def validate_unique_names(self) -> "CurveFile":
        seen = set()
        for spec in self.curves:
            if spec.name in seen:
                raise ValueError(f"Duplicate curve name: {spec.name!r}")
            seen.add(spec.name)
        return self


# ============================================================================
# BUILDERS
# ============================================================================

def build_curve(spec: Union[LineSpec, RaySpec, SegmentSpec, SegmentChainSpec, CircleSpec, EllipseSpec]) -> Curve:
    """Construct the curve described by a validated spec.

    Raises
    ------
    PreconditionError
        Geometry rejected by the curve constructor.
    """
    if isinstance(spec, LineSpec):
        return Line(spec.direction, spec.centre, unit_speed=spec.unit_speed)
    elif isinstance(spec, RaySpec):
        return Ray(spec.direction, spec.start, unit_speed=spec.unit_speed)
    elif isinstance(spec, SegmentSpec):
        return Segment(spec.start, spec.end, unit_speed=spec.unit_speed)
    elif isinstance(spec, SegmentChainSpec):
        return SegmentChain(spec.vertices, closed=spec.closed, unit_speed=spec.unit_speed)
    elif isinstance(spec, CircleSpec):
        return Circle(spec.radius, spec.centre, unit_speed=spec.unit_speed)
    elif isinstance(spec, EllipseSpec):
        return Ellipse(spec.radius_x, spec.radius_y, spec.centre, unit_speed=spec.unit_speed)
    raise TypeError(f"Unknown curve spec: {type(spec).__name__}")


def parse_curves(data: Dict[str, Any], source: str = "<dict>") -> Dict[str, Curve]:
    """Validate an in-memory ``curves.v1`` mapping and build every curve.

    Returns
    -------
    Dict[str, Curve]
        Curves keyed by name, in file order.

    Raises
    ------
    CurveConfigError
        Schema violation or rejected geometry.
    """
    try:
        parsed = CurveFile.model_validate(data)
    except ValidationError as e:
        raise CurveConfigError(f"Invalid curve file {source}:\n{e}") from e

    curves: Dict[str, Curve] = {}
    for spec in parsed.curves:
        try:
            curves[spec.name] = build_curve(spec)
        except PreconditionError as e:
            raise CurveConfigError(f"{source}: curve {spec.name!r}: {e}") from e
    return curves


def load_curves(path: Union[str, Path]) -> Dict[str, Curve]:
    """Load and validate a ``curves.v1`` YAML file.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist.
    CurveConfigError
        YAML syntax error, schema violation or rejected geometry.
    """
    path = Path(path)
    try:
        data = load_yaml(path)
    except yaml.YAMLError as e:
        raise CurveConfigError(str(e)) from e
    if not isinstance(data, dict):
        raise CurveConfigError(f"{path}: top level must be a mapping, got {type(data).__name__}")

    curves = parse_curves(data, source=str(path))
    logger.info("Loaded %d curve(s) from %s", len(curves), path)
    return curves
