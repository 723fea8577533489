"""Tests for lottiekit.validation: structural checks on Lottie documents."""

import pytest

from lottiekit.exporter import export_lottie
from lottiekit.validation import (
    STATUS_INVALID,
    STATUS_VALID,
    STATUS_WARNINGS,
    check_invalid_numbers,
    validate_lottie,
)


def _codes(issues):
    return [issue["code"] for issue in issues]


class TestDocument:
    def test_valid(self, minimal_lottie):
        result = validate_lottie(minimal_lottie)
        assert result.valid
        assert result.status == STATUS_VALID
        assert result.errors == []

    def test_exported_project_is_valid(self, moving_project):
        result = validate_lottie(export_lottie(moving_project))
        assert result.status == STATUS_VALID

    def test_not_an_object(self):
        result = validate_lottie("nope")
        assert _codes(result.errors) == ["NOT_AN_OBJECT"]

    @pytest.mark.parametrize("field,code", [
        ("v", "MISSING_FIELD"),
        ("fr", "INVALID_FIELD"),
        ("ip", "MISSING_FIELD"),
        ("w", "INVALID_FIELD"),
        ("h", "INVALID_FIELD"),
    ])
    def test_missing_fields(self, minimal_lottie, field, code):
        del minimal_lottie[field]
        result = validate_lottie(minimal_lottie)
        assert not result.valid
        assert any(e["code"] == code and e.get("field") == field for e in result.errors)

    def test_negative_frame_rate(self, minimal_lottie):
        minimal_lottie["fr"] = -1
        assert "INVALID_FIELD" in _codes(validate_lottie(minimal_lottie).errors)

    def test_out_point_before_in_point(self, minimal_lottie):
        minimal_lottie["op"] = 0
        assert "INVALID_RANGE" in _codes(validate_lottie(minimal_lottie).errors)

    def test_layers_must_be_list(self, minimal_lottie):
        minimal_lottie["layers"] = {}
        assert "INVALID_LAYERS" in _codes(validate_lottie(minimal_lottie).errors)

    def test_no_layers_is_warning(self, minimal_lottie):
        minimal_lottie["layers"] = []
        result = validate_lottie(minimal_lottie)
        assert result.valid
        assert result.status == STATUS_WARNINGS
        assert _codes(result.warnings) == ["NO_LAYERS"]

    def test_assets_must_be_list(self, minimal_lottie):
        minimal_lottie["assets"] = "none"
        assert "INVALID_ASSETS" in _codes(validate_lottie(minimal_lottie).errors)

    def test_to_dict(self, minimal_lottie):
        del minimal_lottie["v"]
        data = validate_lottie(minimal_lottie).to_dict()
        assert data["valid"] is False
        assert data["status"] == STATUS_INVALID
        assert data["errors"][0]["field"] == "v"


class TestLayers:
    def test_missing_layer_fields(self, minimal_lottie):
        layer = minimal_lottie["layers"][0]
        del layer["ind"]
        del layer["nm"]
        result = validate_lottie(minimal_lottie)
        assert "INVALID_LAYER" in _codes(result.errors)
        assert result.errors[0]["layer"] == 0
        assert _codes(result.warnings) == ["MISSING_NAME"]

    def test_layer_not_object(self, minimal_lottie):
        minimal_lottie["layers"].append(7)
        result = validate_lottie(minimal_lottie)
        assert result.errors[0]["code"] == "INVALID_LAYER"
        assert result.errors[0]["layer"] == 1

    def test_missing_transform_property(self, minimal_lottie):
        del minimal_lottie["layers"][0]["ks"]["r"]
        result = validate_lottie(minimal_lottie)
        assert _codes(result.errors) == ["INVALID_TRANSFORM"]
        assert "Missing r" in result.errors[0]["message"]

    def test_bad_animation_flag(self, minimal_lottie):
        minimal_lottie["layers"][0]["ks"]["o"] = {"a": 2, "k": 100}
        assert "INVALID_PROPERTY" in _codes(validate_lottie(minimal_lottie).errors)

    def test_animated_keyframes_checked(self, minimal_lottie):
        minimal_lottie["layers"][0]["ks"]["p"] = {"a": 1, "k": [{"s": [0, 0]}, {"t": 10}]}
        codes = _codes(validate_lottie(minimal_lottie).errors)
        assert codes == ["INVALID_KEYFRAME", "INVALID_KEYFRAME"]

    def test_animated_k_must_be_list(self, minimal_lottie):
        minimal_lottie["layers"][0]["ks"]["p"] = {"a": 1, "k": 5}
        assert "INVALID_PROPERTY" in _codes(validate_lottie(minimal_lottie).errors)

    def test_shape_layer_needs_shapes(self, minimal_lottie):
        del minimal_lottie["layers"][0]["shapes"]
        assert "INVALID_SHAPES" in _codes(validate_lottie(minimal_lottie).errors)

    def test_empty_shapes_is_warning(self, minimal_lottie):
        minimal_lottie["layers"][0]["shapes"] = []
        result = validate_lottie(minimal_lottie)
        assert result.valid
        assert _codes(result.warnings) == ["NO_SHAPES"]


class TestInvalidNumbers:
    def test_paths_reported(self):
        issues = check_invalid_numbers({"a": [1, float("nan")], "b": {"c": float("inf")}})
        assert issues == [
            "root.a[1]: NaN value detected",
            "root.b.c: Infinity value detected",
        ]

    def test_clean_tree(self, minimal_lottie):
        assert check_invalid_numbers(minimal_lottie) == []

    def test_nan_fails_validation(self, minimal_lottie):
        minimal_lottie["layers"][0]["ks"]["r"]["k"] = float("nan")
        assert "INVALID_NUMBER" in _codes(validate_lottie(minimal_lottie).errors)
