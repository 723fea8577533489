"""Lottie (Bodymovin) JSON -> project import.

Only shape layers (``ty: 4``) are imported. Other layer types are skipped
with a warning and the rest of the document still imports. Missing
top-level fields fail the whole import without a partial project.

Easing labels are recovered heuristically from the keyframe tangents; when
the label is ``custom`` the raw tangents are kept on the keyframe.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from lottiekit.colors import lottie_to_hex
from lottiekit.errors import (
    LottieKitError,
    INPUT_NOT_FOUND,
    INVALID_JSON,
    recovery_hints,
)
from lottiekit.models import (
    BezierTangents,
    Element,
    Keyframe,
    Layer,
    Project,
    Style,
    Transform,
    new_id,
)
from lottiekit.path import lottie_path_to_svg

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("v", "fr", "ip", "op", "w", "h")

LAYER_TYPE_NAMES = {
    0: "Precomp",
    1: "Solid",
    2: "Image",
    3: "Null",
    5: "Text",
    6: "Audio",
    7: "Video Placeholder",
    9: "Image Sequence",
    13: "Camera",
    14: "Light",
}

LINEAR_TOLERANCE = 0.01
PRESET_TOLERANCE = 0.05

# (o.x, o.y, i.x, i.y) for each preset the exporter writes.
_PRESET_SHAPES = (
    ("easeIn", (0.42, 0.0, 1.0, 1.0)),
    ("easeOut", (0.0, 0.0, 0.58, 1.0)),
    ("easeInOut", (0.333, 0.0, 0.667, 1.0)),
)


@dataclass
class ImportResult:
    """Outcome of an import: a project on success, an error string otherwise."""
    success: bool
    project: Optional[Project] = None
    error: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        d: dict = {"success": self.success, "warnings": self.warnings}
        if self.project is not None:
            d["project"] = self.project.to_dict()
        if self.error is not None:
            d["error"] = self.error
        return d


# ---------------------------------------------------------------------------
# Easing recovery
# ---------------------------------------------------------------------------

def _component(tangent: Any, axis: str, default: float) -> float:
    """First entry of ``tangent[axis]``; accepts scalars and lists."""
    if not isinstance(tangent, dict):
        return default
    value = tangent.get(axis, default)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return default


def _tangent_shape(kf: dict) -> tuple[float, float, float, float]:
    out_t = kf.get("o")
    in_t = kf.get("i")
    return (
        _component(out_t, "x", 0.0),
        _component(out_t, "y", 0.0),
        _component(in_t, "x", 1.0),
        _component(in_t, "y", 1.0),
    )


def _close(actual: tuple, expected: tuple, tolerance: float) -> bool:
    return all(abs(a - e) < tolerance for a, e in zip(actual, expected))


def detect_easing(kf: dict) -> str:
    """Classify a Lottie keyframe's easing.

    ``h: 1`` is hold; absent tangents or ones within 0.01 of the identity
    curve are linear; tangents within 0.05 of a preset get that preset's
    name; anything else is custom.
    """
    if kf.get("h") == 1:
        return "hold"
    if not kf.get("i") or not kf.get("o"):
        return "linear"

    shape = _tangent_shape(kf)
    if _close(shape, (0.0, 0.0, 1.0, 1.0), LINEAR_TOLERANCE):
        return "linear"
    for name, preset in _PRESET_SHAPES:
        if _close(shape, preset, PRESET_TOLERANCE):
            return name
    return "custom"


def extract_bezier_tangents(kf: dict) -> Optional[BezierTangents]:
    """Raw first-dimension tangents of a keyframe, or None without tangents."""
    if not kf.get("i") or not kf.get("o"):
        return None
    ox, oy, ix, iy = _tangent_shape(kf)
    return BezierTangents(out_x=(ox,), out_y=(oy,), in_x=(ix,), in_y=(iy,))


# ---------------------------------------------------------------------------
# Animated property helpers
# ---------------------------------------------------------------------------

def _is_animated(prop: Any) -> bool:
    return (
        isinstance(prop, dict)
        and prop.get("a") == 1
        and isinstance(prop.get("k"), list)
        and len(prop["k"]) > 0
        and isinstance(prop["k"][0], dict)
    )


def static_value(prop: Any, default: Any) -> Any:
    """Representative static value of an animated property.

    Static properties give ``k``; animated ones give the first keyframe's
    start value.
    """
    if not isinstance(prop, dict):
        return default
    if _is_animated(prop):
        return prop["k"][0].get("s", default)
    if "k" in prop:
        return prop["k"]
    return default


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _scalar(value: Any, default: float = 0.0) -> float:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return default


def _pair(value: Any, default: tuple[float, float]) -> tuple[float, float]:
    items = _as_list(value)
    x = _scalar(items[0], default[0]) if len(items) > 0 else default[0]
    y = _scalar(items[1], default[1]) if len(items) > 1 else default[1]
    return x, y


def _keyframe_starts(prop: dict) -> list[tuple[dict, Any]]:
    """(keyframe, start value) pairs; a missing ``s`` reuses the previous ``e``."""
    pairs = []
    previous_end = None
    for kf in prop["k"]:
        start = kf.get("s", previous_end)
        previous_end = kf.get("e", start)
        if start is None:
            continue
        pairs.append((kf, start))
    return pairs


def _make_keyframe(
    kf: dict, layer_id: str, prop: str, value, fps: float,
) -> Keyframe:
    easing = detect_easing(kf)
    return Keyframe(
        id=new_id("kf-"),
        time=_scalar(kf.get("t"), 0.0) / fps,
        property=prop,
        value=value,
        easing=easing,
        easing_bezier=extract_bezier_tangents(kf) if easing == "custom" else None,
        layer_id=layer_id,
    )


def _scalar_keyframes(
    prop: dict, name: str, layer_id: str, fps: float, scale: float = 1.0,
) -> list[Keyframe]:
    return [
        _make_keyframe(kf, layer_id, name, _scalar(start) * scale, fps)
        for kf, start in _keyframe_starts(prop)
    ]


def _pair_keyframes(
    prop: dict, x_name: str, y_name: str, layer_id: str, fps: float, scale: float = 1.0,
) -> list[Keyframe]:
    keyframes = []
    for kf, start in _keyframe_starts(prop):
        x, y = _pair(start, (0.0, 0.0))
        keyframes.append(_make_keyframe(kf, layer_id, x_name, x * scale, fps))
        keyframes.append(_make_keyframe(kf, layer_id, y_name, y * scale, fps))
    return keyframes


def _color_keyframes(prop: dict, name: str, layer_id: str, fps: float) -> list[Keyframe]:
    return [
        _make_keyframe(kf, layer_id, name, lottie_to_hex(start), fps)
        for kf, start in _keyframe_starts(prop)
    ]


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------

def _position(ks: dict) -> tuple[float, float]:
    p = ks.get("p")
    if isinstance(p, dict) and p.get("s"):
        # Separated dimensions: {"s": true, "x": {...}, "y": {...}}
        return _scalar(static_value(p.get("x"), 0.0)), _scalar(static_value(p.get("y"), 0.0))
    return _pair(static_value(p, [0, 0]), (0.0, 0.0))


def _transform_keyframes(ks: dict, layer_id: str, fps: float) -> list[Keyframe]:
    keyframes: list[Keyframe] = []

    p = ks.get("p")
    if isinstance(p, dict) and p.get("s"):
        if _is_animated(p.get("x")):
            keyframes.extend(_scalar_keyframes(p["x"], "x", layer_id, fps))
        if _is_animated(p.get("y")):
            keyframes.extend(_scalar_keyframes(p["y"], "y", layer_id, fps))
    elif _is_animated(p):
        keyframes.extend(_pair_keyframes(p, "x", "y", layer_id, fps))

    if _is_animated(ks.get("s")):
        keyframes.extend(_pair_keyframes(ks["s"], "scaleX", "scaleY", layer_id, fps, scale=0.01))
    if _is_animated(ks.get("r")):
        keyframes.extend(_scalar_keyframes(ks["r"], "rotation", layer_id, fps))
    if _is_animated(ks.get("o")):
        keyframes.extend(_scalar_keyframes(ks["o"], "opacity", layer_id, fps, scale=0.01))
    return keyframes


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

def _walk(items: Any):
    """Depth-first iteration over shape items, descending into groups."""
    if not isinstance(items, list):
        return
    for item in items:
        if not isinstance(item, dict):
            continue
        if item.get("ty") == "gr":
            yield from _walk(item.get("it"))
        else:
            yield item


def _extract_style(shapes: list) -> Style:
    """First fill and first stroke found anywhere in the shape tree."""
    fill = stroke = None
    stroke_width = None
    for item in _walk(shapes):
        ty = item.get("ty")
        if ty == "fl" and fill is None:
            fill = lottie_to_hex(static_value(item.get("c"), [0, 0, 0]))
        elif ty == "st" and stroke is None:
            stroke = lottie_to_hex(static_value(item.get("c"), [0, 0, 0]))
            stroke_width = _scalar(static_value(item.get("w"), 1), 1.0)
    return Style(
        fill=fill or "none",
        stroke=stroke or "none",
        stroke_width=stroke_width if stroke_width is not None else 0.0,
        opacity=1.0,
    )


def _style_keyframes(shapes: list, layer_id: str, fps: float) -> list[Keyframe]:
    keyframes: list[Keyframe] = []
    seen_fill = seen_stroke = False
    for item in _walk(shapes):
        ty = item.get("ty")
        if ty == "fl" and not seen_fill:
            seen_fill = True
            if _is_animated(item.get("c")):
                keyframes.extend(_color_keyframes(item["c"], "fill", layer_id, fps))
        elif ty == "st" and not seen_stroke:
            seen_stroke = True
            if _is_animated(item.get("c")):
                keyframes.extend(_color_keyframes(item["c"], "stroke", layer_id, fps))
            if _is_animated(item.get("w")):
                keyframes.extend(_scalar_keyframes(item["w"], "strokeWidth", layer_id, fps))
    return keyframes


def _geometry(shapes: list, style: Style) -> Element:
    """First rect/ellipse/path in the shape tree, or a default circle."""
    for item in _walk(shapes):
        ty = item.get("ty")
        if ty == "rc":
            w, h = _pair(static_value(item.get("s"), [100, 100]), (100.0, 100.0))
            px, py = _pair(static_value(item.get("p"), [0, 0]), (0.0, 0.0))
            roundness = _scalar(static_value(item.get("r"), 0), 0.0)
            return Element(
                type="rect",
                name=item.get("nm") or "Rectangle",
                style=style,
                x=px - w / 2,
                y=py - h / 2,
                width=w,
                height=h,
                rx=roundness or None,
                ry=roundness or None,
            )
        if ty == "el":
            w, h = _pair(static_value(item.get("s"), [100, 100]), (100.0, 100.0))
            px, py = _pair(static_value(item.get("p"), [0, 0]), (0.0, 0.0))
            return Element(
                type="ellipse",
                name=item.get("nm") or "Ellipse",
                style=style,
                cx=px,
                cy=py,
                rx=w / 2,
                ry=h / 2,
            )
        if ty == "sh":
            data = static_value(item.get("ks"), {})
            if isinstance(data, list):
                data = data[0] if data else {}
            return Element(
                type="path",
                name=item.get("nm") or "Path",
                style=style,
                d=lottie_path_to_svg(data if isinstance(data, dict) else {}) or "M 0 0",
            )

    return Element(type="circle", name="Shape", style=style, cx=0.0, cy=0.0, r=50.0)


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

def _layer_type_name(ty: Any) -> str:
    return LAYER_TYPE_NAMES.get(ty, f"Type {ty}")


def convert_layer(
    data: dict, fps: float,
) -> tuple[Optional[Layer], list[Keyframe], Optional[str]]:
    """Convert one Lottie layer; returns (layer, keyframes, warning)."""
    name = data.get("nm", "")
    ty = data.get("ty")
    if ty != 4:
        return None, [], f"Skipped unsupported layer type: {_layer_type_name(ty)} ({name})"

    ks = data.get("ks")
    if not isinstance(ks, dict):
        return None, [], f"Skipped layer with missing transform: {name}"

    shapes = data.get("shapes") or []
    layer_id = new_id("layer-")

    px, py = _position(ks)
    ax, ay = _pair(static_value(ks.get("a"), [0, 0]), (0.0, 0.0))
    sx, sy = _pair(static_value(ks.get("s"), [100, 100]), (100.0, 100.0))
    rotation = _scalar(static_value(ks.get("r"), 0), 0.0)
    opacity = _scalar(static_value(ks.get("o"), 100), 100.0)

    style = _extract_style(shapes)
    style.opacity = opacity / 100
    element = _geometry(shapes, style)
    element.transform = Transform(
        x=px - ax,
        y=py - ay,
        scale_x=sx / 100,
        scale_y=sy / 100,
        rotation=rotation,
    )

    keyframes = _transform_keyframes(ks, layer_id, fps)
    keyframes.extend(_style_keyframes(shapes, layer_id, fps))

    layer = Layer(
        id=layer_id,
        element=element,
        name=name,
        visible=not data.get("hd", False),
    )
    return layer, keyframes, None


def _structure_error(doc: Any) -> Optional[str]:
    if not isinstance(doc, dict):
        return "Invalid Lottie: document must be a JSON object"
    for key in REQUIRED_FIELDS:
        if key not in doc:
            return f'Invalid Lottie: missing required field "{key}"'
    fr = doc["fr"]
    if isinstance(fr, bool) or not isinstance(fr, (int, float)) or fr <= 0:
        return f"Invalid Lottie: frame rate must be a positive number, got {fr!r}"
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def import_lottie(doc: Any) -> ImportResult:
    """Import a parsed Lottie document into a fresh project.

    Never raises for document content: structural problems come back as
    ``ImportResult(success=False, error=...)``.
    """
    error = _structure_error(doc)
    if error:
        logger.warning(error)
        return ImportResult(success=False, error=error)

    try:
        fps = doc["fr"]
        layers: list[Layer] = []
        keyframes: list[Keyframe] = []
        warnings: list[str] = []

        for data in doc.get("layers") or []:
            if not isinstance(data, dict):
                warnings.append("Skipped malformed layer entry")
                continue
            layer, layer_keyframes, warning = convert_layer(data, fps)
            if layer is not None:
                layers.append(layer)
                keyframes.extend(layer_keyframes)
            if warning:
                logger.info(warning)
                warnings.append(warning)

        project = Project(
            name=doc.get("nm") or "Imported Animation",
            width=doc["w"],
            height=doc["h"],
            fps=fps,
            duration=(doc["op"] - doc["ip"]) / fps,
            layers=layers,
            keyframes=keyframes,
        )
    except (KeyError, TypeError, ValueError, IndexError, AttributeError) as exc:
        logger.warning("Lottie import failed: %s", exc)
        return ImportResult(success=False, error=f"Import failed: {exc}")

    logger.debug("Imported %d layers, %d keyframes", len(layers), len(keyframes))
    return ImportResult(success=True, project=project, warnings=warnings)


def import_json(text: str) -> ImportResult:
    """Parse Lottie JSON text and import it."""
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LottieKitError(
            code=INVALID_JSON,
            message=f"Invalid JSON: {exc}",
            recovery=recovery_hints(INVALID_JSON),
            context={"line": exc.lineno, "column": exc.colno},
        ) from exc
    return import_lottie(doc)


def read_lottie(path: str | Path) -> ImportResult:
    """Read a Lottie file from disk and import it."""
    source = Path(path)
    if not source.is_file():
        raise LottieKitError(
            code=INPUT_NOT_FOUND,
            message=f"Lottie file not found: {source}",
            recovery=recovery_hints(INPUT_NOT_FOUND, {"path": str(source)}),
            context={"path": str(source)},
        )
    return import_json(source.read_text(encoding="utf-8"))
