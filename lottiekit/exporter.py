"""Project -> Lottie (Bodymovin) JSON export.

Each layer becomes one shape layer (``ty: 4``) whose transform carries the
animated position, anchor, scale, rotation and opacity, and whose shapes
are a single group: geometry, optional fill, optional stroke, identity
transform.

Per-keyframe encoding, shared by every animated property:
    hold              ->  {t, s, h: 1}
    non-final         ->  {t, s, e, i, o}
    final             ->  {t, s}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from lottiekit.colors import color_to_lottie
from lottiekit.models import Element, Keyframe, Layer, Project, time_to_frame
from lottiekit.path import (
    path_bounds_center,
    points_to_path,
    svg_path_to_lottie_path,
    unsupported_commands,
)

logger = logging.getLogger(__name__)

LOTTIE_VERSION = "5.5.7"

# ---------------------------------------------------------------------------
# Easing tangents
# ---------------------------------------------------------------------------

_LINEAR_TANGENTS = {
    "o": {"x": [0, 0], "y": [0, 0]},
    "i": {"x": [1, 1], "y": [1, 1]},
}

PRESET_TANGENTS: dict[str, dict] = {
    "linear": _LINEAR_TANGENTS,
    "easeIn": {
        "o": {"x": [0.42, 0.42], "y": [0, 0]},
        "i": {"x": [1, 1], "y": [1, 1]},
    },
    "easeOut": {
        "o": {"x": [0, 0], "y": [0, 0]},
        "i": {"x": [0.58, 0.58], "y": [1, 1]},
    },
    "easeInOut": {
        "o": {"x": [0.333, 0.333], "y": [0, 0]},
        "i": {"x": [0.667, 0.667], "y": [1, 1]},
    },
}


def easing_tangents(keyframe: Keyframe) -> dict:
    """Lottie ``{o, i}`` tangents for a keyframe's outgoing segment.

    Custom easing uses the stored tangents; custom without tangents and
    unknown names fall back to linear.
    """
    if keyframe.easing == "custom" and keyframe.easing_bezier is not None:
        return keyframe.easing_bezier.to_dict()
    preset = PRESET_TANGENTS.get(keyframe.easing, _LINEAR_TANGENTS)
    return {
        "o": {"x": list(preset["o"]["x"]), "y": list(preset["o"]["y"])},
        "i": {"x": list(preset["i"]["x"]), "y": list(preset["i"]["y"])},
    }


def _frame_entries(
    entries: list[tuple[float, list, Keyframe]], fps: float,
) -> list[tuple[int, list, Keyframe]]:
    """Convert entry times to frames, keeping the later entry when two share a frame."""
    framed: list[tuple[int, list, Keyframe]] = []
    previous_time = 0.0
    for time, value, source in entries:
        frame = time_to_frame(time, fps)
        if framed and framed[-1][0] == frame:
            logger.warning(
                "Keyframes at %.3fs and %.3fs both land on frame %d; keeping the later one",
                previous_time, time, frame,
            )
            framed[-1] = (frame, value, source)
        else:
            framed.append((frame, value, source))
        previous_time = time
    return framed


def _encode_track(
    entries: list[tuple[float, list, Keyframe]], fps: float,
) -> dict:
    """Encode (time, value, easing-source) entries as an animated property.

    ``entries`` must be sorted by time. The easing source is the keyframe
    whose easing governs the segment that starts at that time.
    """
    framed = _frame_entries(entries, fps)
    encoded = []
    last = len(framed) - 1
    for idx, (frame, value, source) in enumerate(framed):
        kf: dict = {"t": frame, "s": value}
        if source.easing == "hold":
            kf["h"] = 1
        elif idx < last:
            kf["e"] = framed[idx + 1][1]
            tangents = easing_tangents(source)
            kf["i"] = tangents["i"]
            kf["o"] = tangents["o"]
        encoded.append(kf)
    return {"a": 1, "k": encoded}


def _track(keyframes: list[Keyframe], prop: str) -> list[Keyframe]:
    return sorted((kf for kf in keyframes if kf.property == prop), key=lambda kf: kf.time)


def _numeric(value, default: float) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return default


# ---------------------------------------------------------------------------
# Animated properties
# ---------------------------------------------------------------------------

def _pair_property(
    keyframes: list[Keyframe],
    x_prop: str,
    y_prop: str,
    static: tuple[float, float],
    defaults: tuple[float, float],
    fps: float,
    scale: float = 1.0,
) -> dict:
    """Bundle two scalar tracks into one 2D property over the union of times.

    When only one axis has a keyframe at a given time, the other axis holds
    its last keyframed value at or before that time, or ``defaults`` when
    it has none yet.
    """
    x_track = _track(keyframes, x_prop)
    y_track = _track(keyframes, y_prop)

    if not x_track and not y_track:
        return {"a": 0, "k": [static[0] * scale, static[1] * scale]}

    def axis_value(track: list[Keyframe], time: float, default: float) -> float:
        value = default
        for kf in track:
            if kf.time > time:
                break
            value = _numeric(kf.value, value)
        return value

    entries = []
    for time in sorted({kf.time for kf in x_track} | {kf.time for kf in y_track}):
        x_kf = next((kf for kf in x_track if kf.time == time), None)
        y_kf = next((kf for kf in y_track if kf.time == time), None)
        x = axis_value(x_track, time, defaults[0])
        y = axis_value(y_track, time, defaults[1])
        entries.append((time, [x * scale, y * scale], x_kf or y_kf))

    return _encode_track(entries, fps)


def _scalar_property(
    keyframes: list[Keyframe],
    prop: str,
    static: float,
    fps: float,
    scale: float = 1.0,
) -> dict:
    track = _track(keyframes, prop)
    if not track:
        return {"a": 0, "k": static * scale}
    entries = []
    for kf in track:
        value = _numeric(kf.value, static) * scale
        entries.append((kf.time, [value], kf))
    return _encode_track(entries, fps)


def _color_property(keyframes: list[Keyframe], prop: str, static: str, fps: float) -> dict:
    track = _track(keyframes, prop)
    if not track:
        return {"a": 0, "k": color_to_lottie(static)}
    entries = []
    for kf in track:
        value = kf.value if isinstance(kf.value, str) else static
        entries.append((kf.time, color_to_lottie(value), kf))
    return _encode_track(entries, fps)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def element_center(element: Element) -> tuple[float, float]:
    """Geometric center used as the layer's anchor point."""
    if element.type == "rect":
        return element.x + element.width / 2, element.y + element.height / 2
    if element.type in ("circle", "ellipse"):
        return element.cx, element.cy
    if element.type == "path":
        return path_bounds_center(element.d)
    if element.type in ("polygon", "polyline"):
        return path_bounds_center(points_to_path(element.points))
    return 0.0, 0.0


def _path_item(d: str, layer_name: str) -> dict:
    skipped = unsupported_commands(d)
    if skipped:
        logger.warning(
            "Layer %r: path commands %s are not supported and were dropped",
            layer_name, ", ".join(skipped),
        )
    return {"ty": "sh", "nm": "Path", "ks": {"a": 0, "k": svg_path_to_lottie_path(d).to_dict()}}


def _geometry_item(element: Element, layer_name: str) -> Optional[dict]:
    center = list(element_center(element))
    if element.type == "rect":
        return {
            "ty": "rc",
            "nm": "Rectangle",
            "p": {"a": 0, "k": center},
            "s": {"a": 0, "k": [element.width, element.height]},
            "r": {"a": 0, "k": element.rx or 0},
        }
    if element.type == "circle":
        return {
            "ty": "el",
            "nm": "Circle",
            "p": {"a": 0, "k": center},
            "s": {"a": 0, "k": [element.r * 2, element.r * 2]},
        }
    if element.type == "ellipse":
        return {
            "ty": "el",
            "nm": "Ellipse",
            "p": {"a": 0, "k": center},
            "s": {"a": 0, "k": [(element.rx or 0) * 2, (element.ry or 0) * 2]},
        }
    if element.type == "path":
        return _path_item(element.d, layer_name)
    if element.type == "polygon":
        return _path_item(points_to_path(element.points, closed=True), layer_name)
    if element.type == "polyline":
        return _path_item(points_to_path(element.points, closed=False), layer_name)
    # group: transform only
    return None


def _identity_transform() -> dict:
    return {
        "ty": "tr",
        "nm": "Transform",
        "p": {"a": 0, "k": [0, 0]},
        "a": {"a": 0, "k": [0, 0]},
        "s": {"a": 0, "k": [100, 100]},
        "r": {"a": 0, "k": 0},
        "o": {"a": 0, "k": 100},
    }


def _has_paint(value: Optional[str]) -> bool:
    return bool(value) and value != "none"


def convert_shapes(layer: Layer, keyframes: list[Keyframe], fps: float) -> list[dict]:
    element = layer.element
    style = element.style
    items: list[dict] = []

    geometry = _geometry_item(element, layer.name)
    if geometry is not None:
        items.append(geometry)

    if _has_paint(style.fill):
        items.append({
            "ty": "fl",
            "nm": "Fill",
            "c": _color_property(keyframes, "fill", style.fill, fps),
            "o": {"a": 0, "k": 100},
        })

    if _has_paint(style.stroke):
        items.append({
            "ty": "st",
            "nm": "Stroke",
            "c": _color_property(keyframes, "stroke", style.stroke, fps),
            "o": {"a": 0, "k": 100},
            "w": _scalar_property(keyframes, "strokeWidth", style.stroke_width or 1, fps),
            "lc": 2,
            "lj": 2,
        })

    items.append(_identity_transform())
    return [{"ty": "gr", "nm": "Group", "it": items, "np": len(items) - 1}]


def convert_transform(layer: Layer, keyframes: list[Keyframe], fps: float) -> dict:
    """Layer transform with the anchor at the shape's geometric center."""
    element = layer.element
    transform = element.transform
    cx, cy = element_center(element)
    opacity = 1.0 if element.style.opacity is None else element.style.opacity

    return {
        "p": _pair_property(
            keyframes, "x", "y",
            static=(transform.x + cx, transform.y + cy),
            defaults=(transform.x, transform.y),
            fps=fps,
        ),
        "a": {"a": 0, "k": [cx, cy]},
        "s": _pair_property(
            keyframes, "scaleX", "scaleY",
            static=(transform.scale_x, transform.scale_y),
            defaults=(transform.scale_x, transform.scale_y),
            fps=fps,
            scale=100.0,
        ),
        "r": _scalar_property(keyframes, "rotation", transform.rotation, fps),
        "o": _scalar_property(keyframes, "opacity", opacity, fps, scale=100.0),
    }


def convert_layer(
    layer: Layer, index: int, keyframes: list[Keyframe], fps: float, frames: int,
) -> dict:
    own = [kf for kf in keyframes if kf.layer_id == layer.id]
    data = {
        "ty": 4,
        "nm": layer.name,
        "ind": index + 1,
        "ip": 0,
        "op": frames,
        "st": 0,
        "ks": convert_transform(layer, own, fps),
        "shapes": convert_shapes(layer, own, fps),
    }
    if not layer.visible:
        data["hd"] = True
    return data


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def export_lottie(project: Project) -> dict:
    """Convert a project snapshot into a Lottie animation document."""
    frames = project.frame_count
    logger.debug(
        "Exporting %r: %d layers, %d keyframes, %d frames",
        project.name, len(project.layers), len(project.keyframes), frames,
    )
    return {
        "v": LOTTIE_VERSION,
        "fr": project.fps,
        "ip": 0,
        "op": frames,
        "w": project.width,
        "h": project.height,
        "nm": project.name,
        "ddd": 0,
        "assets": [],
        "layers": [
            convert_layer(layer, idx, project.keyframes, project.fps, frames)
            for idx, layer in enumerate(project.layers)
        ],
    }


def export_json(project: Project, pretty: bool = True) -> str:
    return json.dumps(export_lottie(project), indent=2 if pretty else None)


def write_lottie(project: Project, path: str | Path, pretty: bool = True) -> Path:
    """Export ``project`` and write the document to ``path``."""
    out = Path(path)
    out.write_text(export_json(project, pretty=pretty), encoding="utf-8")
    logger.info("Wrote Lottie document to %s", out)
    return out
