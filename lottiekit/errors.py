"""Structured error handling with error codes and recovery suggestions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

# Input
INPUT_NOT_FOUND = "INPUT_NOT_FOUND"
INVALID_JSON = "INVALID_JSON"
INVALID_SVG = "INVALID_SVG"

# Project model
MISSING_FIELD = "MISSING_FIELD"
INVALID_ELEMENT_TYPE = "INVALID_ELEMENT_TYPE"
INVALID_PROPERTY = "INVALID_PROPERTY"
INVALID_EASING = "INVALID_EASING"
INVALID_TIME_FORMAT = "INVALID_TIME_FORMAT"
LAYER_NOT_FOUND = "LAYER_NOT_FOUND"
KEYFRAME_NOT_FOUND = "KEYFRAME_NOT_FOUND"

# Lottie documents
INVALID_LOTTIE = "INVALID_LOTTIE"

# Exit codes for CLI
EXIT_SUCCESS = 0
EXIT_VALIDATION = 1
EXIT_EXECUTION = 2
EXIT_SYSTEM = 3


# ---------------------------------------------------------------------------
# LottieKitError exception
# ---------------------------------------------------------------------------

@dataclass
class LottieKitError(Exception):
    """Structured error with code, message, recovery hints, and context."""
    code: str
    message: str
    recovery: list[str] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "recovery": self.recovery,
            "context": self.context,
        }


# ---------------------------------------------------------------------------
# Recovery hint factory
# ---------------------------------------------------------------------------

_RECOVERY_MAP: dict[str, list[str]] = {
    INPUT_NOT_FOUND: [
        "Check the file path for typos",
        "Use '-' to read the document from stdin",
    ],
    INVALID_JSON: [
        "Make sure the file contains a single JSON object",
        "Run the document through a JSON linter to locate the syntax error",
    ],
    INVALID_SVG: [
        "Make sure the file is well-formed XML with an <svg> root element",
    ],
    MISSING_FIELD: [
        "Run 'lottiekit capabilities' to see the project schema",
    ],
    INVALID_ELEMENT_TYPE: [
        "Use one of: rect, circle, ellipse, path, polygon, polyline, group",
    ],
    INVALID_PROPERTY: [
        "Use one of: x, y, rotation, scaleX, scaleY, opacity, fill, stroke, strokeWidth",
    ],
    INVALID_EASING: [
        "Use one of: linear, easeIn, easeOut, easeInOut, hold, custom",
        "Custom easing needs an 'easingBezier' with 'o' and 'i' tangents",
    ],
    INVALID_TIME_FORMAT: [
        "Use HH:MM:SS, HH:MM:SS.mmm, MM:SS, or plain seconds",
    ],
    LAYER_NOT_FOUND: [
        "List the project's layers and use one of their 'id' values",
    ],
    KEYFRAME_NOT_FOUND: [
        "Keyframe ids are assigned on creation; re-read the project to get current ids",
    ],
    INVALID_LOTTIE: [
        "A Lottie document needs top-level fields: v, fr, ip, op, w, h",
        "Run 'lottiekit validate <file>' for a full list of structural problems",
    ],
}


def recovery_hints(code: str, context: dict[str, Any] | None = None) -> list[str]:
    """Return recovery suggestions for a given error code."""
    hints = list(_RECOVERY_MAP.get(code, []))
    context = context or {}

    if code == INPUT_NOT_FOUND and "path" in context:
        hints.insert(0, f"File not found: {context['path']}")

    if code == MISSING_FIELD and "field" in context:
        hints.insert(0, f"Add the '{context['field']}' field")

    return hints
