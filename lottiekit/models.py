"""Data models for lottiekit, all JSON-serializable via to_dict / from_dict.

The wire shape of the project model uses the editor's camelCase keys
(``scaleX``, ``strokeWidth``, ``easingBezier``, ``layerId``, ``parentId``);
the Python attributes are snake_case.
"""

from __future__ import annotations

import math
import re
import uuid
from dataclasses import dataclass, field, replace
from typing import Optional, Union

from lottiekit.errors import (
    LottieKitError,
    INVALID_EASING,
    INVALID_ELEMENT_TYPE,
    INVALID_PROPERTY,
    MISSING_FIELD,
    recovery_hints,
)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

ANIMATABLE_PROPERTIES = (
    "x", "y", "rotation", "scaleX", "scaleY", "opacity", "fill", "stroke", "strokeWidth",
)
COLOR_PROPERTIES = {"fill", "stroke"}

EASINGS = ("linear", "easeIn", "easeOut", "easeInOut", "hold", "custom")

# Dashed spellings are accepted on input and stored in camelCase.
_EASING_ALIASES = {
    "ease-in": "easeIn",
    "ease-out": "easeOut",
    "ease-in-out": "easeInOut",
}

ELEMENT_TYPES = ("rect", "circle", "ellipse", "path", "polygon", "polyline", "group")

KeyframeValue = Union[float, str]


def normalize_easing(name: str) -> str:
    """Return the canonical easing name, raising on unknown names."""
    easing = _EASING_ALIASES.get(name, name)
    if easing not in EASINGS:
        raise LottieKitError(
            code=INVALID_EASING,
            message=f"Unknown easing: {name!r}",
            recovery=recovery_hints(INVALID_EASING),
            context={"easing": name, "supported": list(EASINGS)},
        )
    return easing


def check_property(name: str) -> str:
    if name not in ANIMATABLE_PROPERTIES:
        raise LottieKitError(
            code=INVALID_PROPERTY,
            message=f"Property {name!r} is not animatable",
            recovery=recovery_hints(INVALID_PROPERTY),
            context={"property": name, "supported": list(ANIMATABLE_PROPERTIES)},
        )
    return name


def new_id(prefix: str = "") -> str:
    """Generate a unique id, optionally prefixed (e.g. ``kf-``)."""
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def _require(data: dict, key: str, kind: str):
    try:
        return data[key]
    except KeyError as exc:
        raise LottieKitError(
            code=MISSING_FIELD,
            message=f"{kind} missing required field: {key!r}",
            recovery=recovery_hints(MISSING_FIELD, {"field": key}),
            context={"kind": kind, "field": key},
        ) from exc


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------

_TIME_RE = re.compile(
    r"^(?:(\d+):)?(\d{1,2}):(\d{2})(?:\.(\d+))?$"
)


def parse_time(value: str) -> float:
    """Parse HH:MM:SS.ms or plain seconds into a float of seconds."""
    try:
        return float(value)
    except ValueError:
        pass
    m = _TIME_RE.match(value)
    if not m:
        raise ValueError(f"Invalid time format: {value!r}, use HH:MM:SS, MM:SS, or seconds")
    hours = int(m.group(1) or 0)
    minutes = int(m.group(2))
    seconds = int(m.group(3))
    frac = float(f"0.{m.group(4)}") if m.group(4) else 0.0
    return hours * 3600 + minutes * 60 + seconds + frac


def round_half_up(value: float) -> int:
    """Round .5 away from zero on the positive side, like players do."""
    return math.floor(value + 0.5)


def time_to_frame(time: float, fps: float) -> int:
    """Convert seconds to the nearest integer frame."""
    return round_half_up(time * fps)


def frame_to_time(frame: float, fps: float) -> float:
    """Convert a (possibly fractional) frame number to seconds."""
    return frame / fps


def frame_count(duration: float, fps: float) -> int:
    """Number of frames needed to cover ``duration`` seconds."""
    return math.ceil(duration * fps)


# ---------------------------------------------------------------------------
# Keyframes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BezierTangents:
    """Normalized out/in control-point offsets for one easing segment.

    Time components are expected in [0, 1]; value components may overshoot.
    Each component is a list to leave room for per-dimension easing, but only
    the first entry drives interpolation.
    """
    out_x: tuple[float, ...] = (0.0,)
    out_y: tuple[float, ...] = (0.0,)
    in_x: tuple[float, ...] = (1.0,)
    in_y: tuple[float, ...] = (1.0,)

    def to_dict(self) -> dict:
        return {
            "o": {"x": list(self.out_x), "y": list(self.out_y)},
            "i": {"x": list(self.in_x), "y": list(self.in_y)},
        }

    @classmethod
    def from_dict(cls, data: dict) -> BezierTangents:
        out_t = _require(data, "o", "easingBezier")
        in_t = _require(data, "i", "easingBezier")
        return cls(
            out_x=_as_float_tuple(out_t.get("x", 0.0)),
            out_y=_as_float_tuple(out_t.get("y", 0.0)),
            in_x=_as_float_tuple(in_t.get("x", 1.0)),
            in_y=_as_float_tuple(in_t.get("y", 1.0)),
        )


def _as_float_tuple(value) -> tuple[float, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(float(v) for v in value)
    return (float(value),)


@dataclass(frozen=True)
class Keyframe:
    """A timestamped value plus easing for one property of one layer.

    ``layer_id`` is a lookup key into the project's layer list, not an owner.
    """
    id: str
    time: float
    property: str
    value: KeyframeValue
    easing: str = "linear"
    easing_bezier: Optional[BezierTangents] = None
    layer_id: str = ""

    @property
    def is_color(self) -> bool:
        return self.property in COLOR_PROPERTIES

    def to_dict(self) -> dict:
        d: dict = {
            "id": self.id,
            "time": self.time,
            "property": self.property,
            "value": self.value,
            "easing": self.easing,
            "layerId": self.layer_id,
        }
        if self.easing_bezier is not None:
            d["easingBezier"] = self.easing_bezier.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Keyframe:
        bezier = data.get("easingBezier")
        value = _require(data, "value", "Keyframe")
        return cls(
            id=data.get("id") or new_id("kf-"),
            time=float(_require(data, "time", "Keyframe")),
            property=check_property(_require(data, "property", "Keyframe")),
            value=value if isinstance(value, str) else float(value),
            easing=normalize_easing(data.get("easing", "linear")),
            easing_bezier=BezierTangents.from_dict(bezier) if bezier else None,
            layer_id=_require(data, "layerId", "Keyframe"),
        )


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------

@dataclass
class Transform:
    """Static (time 0) placement of an element."""
    x: float = 0.0
    y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0  # degrees

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "scaleX": self.scale_x,
            "scaleY": self.scale_y,
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Transform:
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            scale_x=float(data.get("scaleX", 1.0)),
            scale_y=float(data.get("scaleY", 1.0)),
            rotation=float(data.get("rotation", 0.0)),
        )


@dataclass
class Style:
    """Static visual appearance; unset fields mean 'not specified'."""
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    opacity: Optional[float] = None

    def to_dict(self) -> dict:
        d: dict = {}
        if self.fill is not None:
            d["fill"] = self.fill
        if self.stroke is not None:
            d["stroke"] = self.stroke
        if self.stroke_width is not None:
            d["strokeWidth"] = self.stroke_width
        if self.opacity is not None:
            d["opacity"] = self.opacity
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Style:
        stroke_width = data.get("strokeWidth")
        opacity = data.get("opacity")
        return cls(
            fill=data.get("fill"),
            stroke=data.get("stroke"),
            stroke_width=float(stroke_width) if stroke_width is not None else None,
            opacity=float(opacity) if opacity is not None else None,
        )


@dataclass
class Element:
    """One piece of geometry, discriminated by ``type``.

    Which geometry fields are meaningful depends on the type:
        rect:              x, y, width, height, rx?, ry?
        circle:            cx, cy, r
        ellipse:           cx, cy, rx, ry
        path:              d
        polygon/polyline:  points
        group:             children (owned exclusively by this group)
    """
    type: str
    id: str = field(default_factory=lambda: new_id("el-"))
    name: str = ""
    transform: Transform = field(default_factory=Transform)
    style: Style = field(default_factory=Style)
    # rect
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    # circle / ellipse (rx, ry double as rect corner radii)
    cx: float = 0.0
    cy: float = 0.0
    r: float = 0.0
    rx: Optional[float] = None
    ry: Optional[float] = None
    # path
    d: str = ""
    # polygon / polyline
    points: str = ""
    # group
    children: list[Element] = field(default_factory=list)

    def to_dict(self) -> dict:
        d: dict = {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "transform": self.transform.to_dict(),
            "style": self.style.to_dict(),
        }
        if self.type == "rect":
            d.update(x=self.x, y=self.y, width=self.width, height=self.height)
            if self.rx is not None:
                d["rx"] = self.rx
            if self.ry is not None:
                d["ry"] = self.ry
        elif self.type == "circle":
            d.update(cx=self.cx, cy=self.cy, r=self.r)
        elif self.type == "ellipse":
            d.update(cx=self.cx, cy=self.cy, rx=self.rx or 0.0, ry=self.ry or 0.0)
        elif self.type == "path":
            d["d"] = self.d
        elif self.type in ("polygon", "polyline"):
            d["points"] = self.points
        elif self.type == "group":
            d["children"] = [child.to_dict() for child in self.children]
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Element:
        el_type = _require(data, "type", "Element")
        if el_type not in ELEMENT_TYPES:
            raise LottieKitError(
                code=INVALID_ELEMENT_TYPE,
                message=f"Unknown element type: {el_type!r}",
                recovery=recovery_hints(INVALID_ELEMENT_TYPE),
                context={"type": el_type, "supported": list(ELEMENT_TYPES)},
            )
        rx = data.get("rx")
        ry = data.get("ry")
        return cls(
            type=el_type,
            id=data.get("id") or new_id("el-"),
            name=data.get("name", ""),
            transform=Transform.from_dict(data.get("transform", {})),
            style=Style.from_dict(data.get("style", {})),
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            width=float(data.get("width", 0.0)),
            height=float(data.get("height", 0.0)),
            cx=float(data.get("cx", 0.0)),
            cy=float(data.get("cy", 0.0)),
            r=float(data.get("r", 0.0)),
            rx=float(rx) if rx is not None else None,
            ry=float(ry) if ry is not None else None,
            d=data.get("d", ""),
            points=data.get("points", ""),
            children=[cls.from_dict(c) for c in data.get("children", [])],
        )


# ---------------------------------------------------------------------------
# Layers and project
# ---------------------------------------------------------------------------

@dataclass
class Layer:
    """Wraps one element on the timeline.

    ``parent_id`` is a lookup key into the same project's layers and forms
    the grouping tree; no layer holds a pointer to another.
    """
    id: str
    element: Element
    name: str = ""
    visible: bool = True
    locked: bool = False
    parent_id: Optional[str] = None

    def to_dict(self) -> dict:
        d: dict = {
            "id": self.id,
            "name": self.name,
            "element": self.element.to_dict(),
            "visible": self.visible,
            "locked": self.locked,
        }
        if self.parent_id is not None:
            d["parentId"] = self.parent_id
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Layer:
        return cls(
            id=_require(data, "id", "Layer"),
            element=Element.from_dict(_require(data, "element", "Layer")),
            name=data.get("name", ""),
            visible=bool(data.get("visible", True)),
            locked=bool(data.get("locked", False)),
            parent_id=data.get("parentId"),
        )


@dataclass
class Project:
    """A complete snapshot of an animation: settings, layers, keyframes."""
    name: str = "Untitled"
    width: float = 512
    height: float = 512
    fps: float = 30
    duration: float = 5.0
    layers: list[Layer] = field(default_factory=list)
    keyframes: list[Keyframe] = field(default_factory=list)

    @property
    def frame_count(self) -> int:
        return frame_count(self.duration, self.fps)

    def layer(self, layer_id: str) -> Optional[Layer]:
        return next((l for l in self.layers if l.id == layer_id), None)

    def with_changes(self, **changes) -> Project:
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "duration": self.duration,
            "layers": [layer.to_dict() for layer in self.layers],
            "keyframes": [kf.to_dict() for kf in self.keyframes],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Project:
        return cls(
            name=data.get("name", "Untitled"),
            width=data.get("width", 512),
            height=data.get("height", 512),
            fps=data.get("fps", 30),
            duration=float(data.get("duration", 5.0)),
            layers=[Layer.from_dict(l) for l in data.get("layers", [])],
            keyframes=[Keyframe.from_dict(k) for k in data.get("keyframes", [])],
        )
