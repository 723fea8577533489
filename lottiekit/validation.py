"""Structural validation for Lottie documents.

Checks the top-level document, every layer, each layer transform and its
animated properties, and scans the whole tree for NaN/Infinity leakage.
The exporter never validates its own output; run this on what it produces.
"""

from __future__ import annotations

import math
from typing import Any

# ---------------------------------------------------------------------------
# Validation result
# ---------------------------------------------------------------------------

STATUS_VALID = "valid"
STATUS_WARNINGS = "valid_with_warnings"
STATUS_INVALID = "invalid"

TRANSFORM_PROPERTIES = ("p", "a", "s", "r", "o")


class ValidationResult:
    """Collects errors and warnings from a structural validation."""

    def __init__(self) -> None:
        self.errors: list[dict] = []
        self.warnings: list[dict] = []

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def status(self) -> str:
        if self.errors:
            return STATUS_INVALID
        if self.warnings:
            return STATUS_WARNINGS
        return STATUS_VALID

    def add_error(self, code: str, message: str, **context) -> None:
        self.errors.append({"code": code, "message": message, **context})

    def add_warning(self, code: str, message: str, **context) -> None:
        self.warnings.append({"code": code, "message": message, **context})

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "status": self.status,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_positive(value: Any) -> bool:
    return _is_number(value) and value > 0


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------

def validate_lottie(doc: Any) -> ValidationResult:
    """Validate a parsed Lottie document.

    Checks:
        - required top-level fields (v, fr, ip, op, w, h) and their ranges
        - op > ip
        - layers is a list; each layer has ty, ind, ip, op, st, ks
        - transform p, a, s, r, o are well-formed animated properties
        - shape layers carry a shapes array
        - assets, when present, is a list
        - no NaN or Infinity anywhere in the tree

    Returns:
        ValidationResult with errors, warnings and status.
    """
    result = ValidationResult()

    if not isinstance(doc, dict):
        result.add_error("NOT_AN_OBJECT", "Lottie data must be an object")
        return result

    if not doc.get("v"):
        result.add_error("MISSING_FIELD", "Missing required field: v (version)", field="v")
    if not _is_positive(doc.get("fr")):
        result.add_error(
            "INVALID_FIELD", "Invalid or missing frame rate (fr): must be a positive number",
            field="fr",
        )
    if not _is_number(doc.get("ip")):
        result.add_error("MISSING_FIELD", "Missing required field: ip (in point)", field="ip")
    if not _is_number(doc.get("op")):
        result.add_error("MISSING_FIELD", "Missing required field: op (out point)", field="op")
    if not _is_positive(doc.get("w")):
        result.add_error(
            "INVALID_FIELD", "Invalid or missing width (w): must be a positive number", field="w",
        )
    if not _is_positive(doc.get("h")):
        result.add_error(
            "INVALID_FIELD", "Invalid or missing height (h): must be a positive number", field="h",
        )

    if _is_number(doc.get("ip")) and _is_number(doc.get("op")) and doc["op"] <= doc["ip"]:
        result.add_error("INVALID_RANGE", "Out point (op) must be greater than in point (ip)")

    layers = doc.get("layers")
    if not isinstance(layers, list):
        result.add_error("INVALID_LAYERS", "Missing or invalid layers array")
    else:
        if not layers:
            result.add_warning("NO_LAYERS", "Animation has no layers")
        for idx, layer in enumerate(layers):
            _validate_layer(layer, idx, result)

    if "assets" in doc and not isinstance(doc["assets"], list):
        result.add_error("INVALID_ASSETS", "Assets must be an array")

    for issue in check_invalid_numbers(doc):
        result.add_error("INVALID_NUMBER", issue)

    return result


def _validate_layer(layer: Any, idx: int, result: ValidationResult) -> None:
    prefix = f"Layer {idx}"
    if not isinstance(layer, dict):
        result.add_error("INVALID_LAYER", f"{prefix}: layer must be an object", layer=idx)
        return

    if not _is_number(layer.get("ty")):
        result.add_error("INVALID_LAYER", f"{prefix}: Missing or invalid type (ty)", layer=idx)
    if not layer.get("nm"):
        result.add_warning("MISSING_NAME", f"{prefix}: Missing name (nm)", layer=idx)

    for key, label in (("ind", "index"), ("ip", "in point"), ("op", "out point"), ("st", "start time")):
        if not _is_number(layer.get(key)):
            result.add_error(
                "INVALID_LAYER", f"{prefix}: Missing or invalid {label} ({key})", layer=idx,
            )

    ks = layer.get("ks")
    if not isinstance(ks, dict):
        result.add_error("INVALID_TRANSFORM", f"{prefix}: Missing or invalid transform (ks)", layer=idx)
    else:
        for prop in TRANSFORM_PROPERTIES:
            if not ks.get(prop):
                result.add_error(
                    "INVALID_TRANSFORM", f"{prefix} transform: Missing {prop} property", layer=idx,
                )
            else:
                _validate_animated_property(ks[prop], f"{prefix} transform.{prop}", idx, result)

    if layer.get("ty") == 4:
        shapes = layer.get("shapes")
        if not isinstance(shapes, list):
            result.add_error("INVALID_SHAPES", f"{prefix}: Shape layer missing shapes array", layer=idx)
        elif not shapes:
            result.add_warning("NO_SHAPES", f"{prefix}: Shape layer has no shapes", layer=idx)


def _validate_animated_property(prop: Any, path: str, layer: int, result: ValidationResult) -> None:
    if not isinstance(prop, dict):
        result.add_error("INVALID_PROPERTY", f"{path}: Invalid animated property", layer=layer)
        return

    flag = prop.get("a")
    if not _is_number(flag) or flag not in (0, 1):
        result.add_error(
            "INVALID_PROPERTY", f"{path}: Missing or invalid 'a' flag (must be 0 or 1)", layer=layer,
        )

    if "k" not in prop:
        result.add_error("INVALID_PROPERTY", f"{path}: Missing 'k' (value or keyframes)", layer=layer)
        return

    if flag != 1:
        return
    if not isinstance(prop["k"], list):
        result.add_error(
            "INVALID_PROPERTY", f"{path}: Animated property 'k' must be an array of keyframes",
            layer=layer,
        )
        return
    for i, kf in enumerate(prop["k"]):
        if not isinstance(kf, dict) or not _is_number(kf.get("t")):
            result.add_error(
                "INVALID_KEYFRAME", f"{path} keyframe {i}: Missing or invalid time (t)", layer=layer,
            )
        if not isinstance(kf, dict) or kf.get("s") is None:
            result.add_error(
                "INVALID_KEYFRAME", f"{path} keyframe {i}: Missing start value (s)", layer=layer,
            )


def check_invalid_numbers(obj: Any, path: str = "root") -> list[str]:
    """Paths of every NaN or infinite number in a JSON-like tree."""
    issues: list[str] = []
    if isinstance(obj, float):
        if math.isnan(obj):
            issues.append(f"{path}: NaN value detected")
        elif math.isinf(obj):
            issues.append(f"{path}: Infinity value detected")
    elif isinstance(obj, list):
        for idx, item in enumerate(obj):
            issues.extend(check_invalid_numbers(item, f"{path}[{idx}]"))
    elif isinstance(obj, dict):
        for key, value in obj.items():
            issues.extend(check_invalid_numbers(value, f"{path}.{key}"))
    return issues
