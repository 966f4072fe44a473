"""Tests for curve description loading (YAML -> pydantic -> curves)."""

from __future__ import annotations

from pathlib import Path

import pytest
import torch
import yaml

from curve_engine.curves import Circle, Ellipse, Line, Ray, Segment, SegmentChain
from curve_engine.errors import CurveConfigError
from curve_engine.primitives import DTYPE
from curve_engine.schema import CurveFile, build_curve, load_curves, parse_curves


@pytest.fixture(scope="module")
def example_path() -> Path:
    return Path(__file__).parent.parent / "configs" / "curves_example.yaml"


def _write(tmp_path: Path, data) -> Path:
    path = tmp_path / "curves.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestExampleFile:
    def test_loads_every_kind(self, example_path) -> None:
        curves = load_curves(example_path)
        assert list(curves) == ["axis", "probe", "edge", "outline", "wheel", "orbit"]
        assert isinstance(curves["axis"], Line)
        assert isinstance(curves["probe"], Ray)
        assert isinstance(curves["edge"], Segment)
        assert isinstance(curves["outline"], SegmentChain)
        assert isinstance(curves["wheel"], Circle)
        assert isinstance(curves["orbit"], Ellipse)

    def test_fields_carried_over(self, example_path) -> None:
        outline = load_curves(example_path)["outline"]
        assert outline.closed is True
        assert outline.unit_speed is True
        assert outline.total_length == 14.0
        assert torch.allclose(outline.point(14.0), torch.tensor([0.0, 0.0], dtype=DTYPE))


class TestValidation:
    def test_schema_version(self, tmp_path) -> None:
        path = _write(tmp_path, {"schema": "curves.v0", "curves": []})
        with pytest.raises(CurveConfigError, match="curves.v1"):
            load_curves(path)

    def test_default_schema_and_empty(self) -> None:
        assert CurveFile.model_validate({}).schema_version == "curves.v1"
        assert parse_curves({"schema": "curves.v1"}) == {}

    def test_unknown_kind(self) -> None:
        data = {"curves": [{"name": "s", "kind": "spiral"}]}
        with pytest.raises(CurveConfigError):
            parse_curves(data)

    def test_duplicate_names(self) -> None:
        seg = {"kind": "segment", "name": "a", "start": [0, 0], "end": [1, 0]}
        with pytest.raises(CurveConfigError, match="Duplicate"):
            parse_curves({"curves": [seg, dict(seg)]})

    def test_extra_fields_forbidden(self) -> None:
        data = {"curves": [{"kind": "circle", "name": "c", "radius": 1.0, "centre": [0, 0], "colour": "red"}]}
        with pytest.raises(CurveConfigError):
            parse_curves(data)

    @pytest.mark.parametrize(
        "spec",
        [
            {"kind": "segment_chain", "name": "c", "vertices": [[0, 0]]},
            {"kind": "segment_chain", "name": "c", "vertices": [[0, 0], [1, 1, 1]]},
            {"kind": "circle", "name": "c", "radius": 0.0, "centre": [0, 0]},
            {"kind": "circle", "name": "c", "radius": 1.0, "centre": [0, 0, 0]},
            {"kind": "ellipse", "name": "e", "radius_x": 1.0, "radius_y": 2.0, "centre": [0, 0], "unit_speed": True},
            {"kind": "line", "name": "l", "direction": [1.0], "centre": [0, 0]},
        ],
    )
    def test_structural_errors(self, spec) -> None:
        with pytest.raises(CurveConfigError):
            parse_curves({"curves": [spec]})

    def test_geometry_errors_name_the_curve(self) -> None:
        data = {"curves": [{"kind": "ray", "name": "bad-ray", "direction": [0, 0], "start": [1, 1]}]}
        with pytest.raises(CurveConfigError, match="bad-ray"):
            parse_curves(data, source="inline")

    def test_yaml_syntax_error(self, tmp_path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("curves: [\n", encoding="utf-8")
        with pytest.raises(CurveConfigError):
            load_curves(path)

    def test_top_level_must_be_mapping(self, tmp_path) -> None:
        path = _write(tmp_path, [1, 2, 3])
        with pytest.raises(CurveConfigError, match="mapping"):
            load_curves(path)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_curves(tmp_path / "nope.yaml")


class TestBuildCurve:
    def test_builds_from_model(self) -> None:
        parsed = CurveFile.model_validate(
            {"curves": [{"kind": "segment", "name": "s", "start": [0, 0, 0], "end": [0, 0, 2], "unit_speed": True}]}
        )
        curve = build_curve(parsed.curves[0])
        assert isinstance(curve, Segment)
        assert curve.unit_speed is True
        assert torch.allclose(curve.point(1.0), torch.tensor([0.0, 0.0, 1.0], dtype=DTYPE))
