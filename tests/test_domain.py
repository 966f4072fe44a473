"""Tests for parameter-domain validation and DomainError context."""

from __future__ import annotations

import math
import pickle

import pytest
import torch

from curve_engine.curves import Circle, Ellipse, Line, Ray, Segment, SegmentChain
from curve_engine.domain import ALL_REALS, NON_NEGATIVE, UNIT, Interval, validate, validate_batch
from curve_engine.errors import CurveError, DomainError, UnsupportedParametrizationError
from curve_engine.evaluate import domain
from curve_engine.primitives import DTYPE


class TestInterval:
    def test_contains_is_inclusive(self) -> None:
        assert 0.0 in UNIT
        assert 1.0 in UNIT
        assert 1.0 + 1e-15 not in UNIT
        assert -1e300 in ALL_REALS
        assert math.inf not in NON_NEGATIVE
        assert -math.inf not in ALL_REALS

    def test_finiteness(self) -> None:
        assert UNIT.is_finite
        assert not NON_NEGATIVE.is_finite
        assert Interval(0.0, 2.5).width == 2.5

    def test_invalid_bounds(self) -> None:
        with pytest.raises(ValueError, match="exceeds"):
            Interval(1.0, 0.0)
        with pytest.raises(ValueError, match="NaN"):
            Interval(float("nan"), 1.0)


class TestValidate:
    def test_inside_passes(self) -> None:
        validate(0.0, UNIT)
        validate(1.0, UNIT)
        validate(-1e9, ALL_REALS)

    def test_upper_violation_context(self) -> None:
        with pytest.raises(DomainError) as exc:
            validate(1.5, UNIT, curve="Segment", unit_speed=False)
        err = exc.value
        assert err.value == 1.5
        assert err.bound == "upper"
        assert err.limit == 1.0
        assert err.curve == "Segment"
        assert err.unit_speed is False
        assert "Segment (raw mode)" in str(err)

    def test_lower_violation_context(self) -> None:
        with pytest.raises(DomainError) as exc:
            validate(-0.25, NON_NEGATIVE, curve="Ray", unit_speed=True)
        assert exc.value.bound == "lower"
        assert exc.value.limit == 0.0
        assert "unit-speed mode" in str(exc.value)

    def test_nan_rejected_everywhere(self) -> None:
        with pytest.raises(DomainError, match="NaN"):
            validate(float("nan"), ALL_REALS)

    @pytest.mark.parametrize(
        "value, bound",
        [(math.inf, "upper"), (-math.inf, "lower")],
    )
    def test_infinity_rejected_on_open_bounds(self, value, bound) -> None:
        with pytest.raises(DomainError, match="not finite") as exc:
            validate(value, ALL_REALS, curve="Line")
        assert exc.value.bound == bound
        assert exc.value.value == value

    def test_infinity_rejected_on_ray(self) -> None:
        with pytest.raises(DomainError) as exc:
            validate(math.inf, NON_NEGATIVE, curve="Ray")
        assert exc.value.bound == "upper"
        assert exc.value.limit == math.inf

    def test_error_family(self) -> None:
        with pytest.raises(CurveError):
            validate(2.0, UNIT)
        with pytest.raises(ValueError):
            validate(2.0, UNIT)

    def test_error_pickles(self) -> None:
        err = DomainError(3.0, "upper", 1.0, curve="SegmentChain", unit_speed=True)
        clone = pickle.loads(pickle.dumps(err))
        assert (clone.value, clone.bound, clone.limit, clone.curve, clone.unit_speed) == (
            3.0, "upper", 1.0, "SegmentChain", True,
        )


class TestValidateBatch:
    def test_all_inside(self) -> None:
        validate_batch(torch.linspace(0.0, 1.0, 11, dtype=DTYPE), UNIT)
        validate_batch(torch.zeros(0, dtype=DTYPE), UNIT)

    def test_reports_first_offender(self) -> None:
        ts = torch.tensor([0.2, -0.1, 3.0], dtype=DTYPE)
        with pytest.raises(DomainError) as exc:
            validate_batch(ts, UNIT, curve="Segment")
        assert exc.value.value == pytest.approx(-0.1)
        assert exc.value.bound == "lower"

    def test_infinite_entry_rejected(self) -> None:
        ts = torch.tensor([0.0, 5.0, math.inf], dtype=DTYPE)
        with pytest.raises(DomainError) as exc:
            validate_batch(ts, ALL_REALS, curve="Circle")
        assert exc.value.value == math.inf
        assert exc.value.bound == "upper"


class TestCurveDomains:
    def test_table(self) -> None:
        chain = SegmentChain([[0.0, 0.0], [3.0, 4.0], [3.0, 0.0]])
        closed = SegmentChain([[0.0, 0.0], [3.0, 4.0], [3.0, 0.0]], closed=True)
        cases = [
            (Line([1.0, 1.0], [0.0, 0.0]), ALL_REALS, ALL_REALS),
            (Ray([1.0, 1.0], [0.0, 0.0]), NON_NEGATIVE, NON_NEGATIVE),
            (Segment([0.0, 0.0], [3.0, 4.0]), UNIT, Interval(0.0, 5.0)),
            (chain, UNIT, Interval(0.0, 9.0)),
            (closed, UNIT, Interval(0.0, 12.0)),
            (Circle(2.0, [0.0, 0.0]), ALL_REALS, ALL_REALS),
        ]
        for curve, raw, unit in cases:
            assert domain(curve) == raw, curve.kind
            curve.set_if_unit_speed(True)
            assert domain(curve) == unit, curve.kind

    def test_ellipse(self) -> None:
        ellipse = Ellipse(2.0, 1.0, [0.0, 0.0])
        assert domain(ellipse) == ALL_REALS
        ellipse.set_if_unit_speed(True)
        with pytest.raises(UnsupportedParametrizationError):
            domain(ellipse)
