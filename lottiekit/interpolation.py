"""Keyframe interpolation engine: evaluates animated properties at any time.

Provides the preset easing functions, custom-bezier easing through
``lottiekit.bezier``, and the numeric, color and shortest-path angle
interpolators the editor uses to preview an animation.

Supported easings:
    linear, easeIn, easeOut, easeInOut, hold, custom
"""

from __future__ import annotations

from typing import Optional, Sequence

from lottiekit.bezier import ease_bezier
from lottiekit.colors import parse_color, rgb_to_hex
from lottiekit.models import COLOR_PROPERTIES, Keyframe, Project, check_property

DEFAULT_COLOR = "#000000"


# ---------------------------------------------------------------------------
# Easing evaluation
# ---------------------------------------------------------------------------

def _clamp01(t: float) -> float:
    return max(0.0, min(1.0, t))


def interpolate_linear(start: float, end: float, t: float) -> float:
    """Lerp from start to end; t is clamped to [0, 1]."""
    return start + (end - start) * _clamp01(t)


def ease_in(t: float) -> float:
    """Quadratic ease-in: slow start."""
    t = _clamp01(t)
    return t * t


def ease_out(t: float) -> float:
    """Quadratic ease-out: slow end."""
    t = _clamp01(t)
    return t * (2.0 - t)


def ease_in_out(t: float) -> float:
    """Cubic ease-in-out: slow at both ends."""
    t = _clamp01(t)
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def apply_easing(t: float, easing: str) -> float:
    """Evaluate a preset easing at progress t (0..1).

    Unknown names and ``custom`` (which needs keyframe tangents) behave as
    linear. ``hold`` is a step at the very end of the segment: the value
    stays put until t reaches 1.
    """
    if easing in ("easeIn", "ease-in"):
        return ease_in(t)
    if easing in ("easeOut", "ease-out"):
        return ease_out(t)
    if easing in ("easeInOut", "ease-in-out"):
        return ease_in_out(t)
    if easing == "hold":
        return 1.0 if t >= 1 else 0.0
    return _clamp01(t)


def apply_easing_from_keyframe(t: float, keyframe: Keyframe) -> float:
    """Apply the easing stored on a segment's starting keyframe.

    Custom bezier easing may leave [0, 1] on the value axis; the
    interpolators clamp the eased progress when they apply it.
    """
    if keyframe.easing == "custom" and keyframe.easing_bezier is not None:
        tangents = keyframe.easing_bezier
        ox = tangents.out_x[0] if tangents.out_x else 0.0
        oy = tangents.out_y[0] if tangents.out_y else 0.0
        ix = tangents.in_x[0] if tangents.in_x else 1.0
        iy = tangents.in_y[0] if tangents.in_y else 1.0
        return ease_bezier(t, 0.0, ox, ix, 1.0, 0.0, oy, iy, 1.0)
    return apply_easing(t, keyframe.easing)


# ---------------------------------------------------------------------------
# Value-space interpolators
# ---------------------------------------------------------------------------

def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """Decode a color string to 8-bit channels (black when unparseable)."""
    return parse_color(color)


def interpolate_color(color1: str, color2: str, t: float) -> str:
    """Interpolate per channel in 8-bit RGB and re-encode as hex."""
    r1, g1, b1 = hex_to_rgb(color1)
    r2, g2, b2 = hex_to_rgb(color2)
    return rgb_to_hex(
        interpolate_linear(r1, r2, t),
        interpolate_linear(g1, g2, t),
        interpolate_linear(b1, b2, t),
    )


def normalize_angle(angle: float) -> float:
    """Fold any angle into [0, 360)."""
    return angle % 360.0


def interpolate_angle(start: float, end: float, t: float) -> float:
    """Interpolate between angles (degrees) along the shorter arc.

    Both ends are folded into [0, 360); the difference is folded into
    (-180, 180] so that e.g. 350 -> 10 passes through 0, not 180.
    """
    start_norm = normalize_angle(start)
    end_norm = normalize_angle(end)

    diff = end_norm - start_norm
    if diff > 180.0:
        diff -= 360.0
    elif diff <= -180.0:
        diff += 360.0

    return normalize_angle(start_norm + diff * _clamp01(t))


# ---------------------------------------------------------------------------
# Keyframe lookup
# ---------------------------------------------------------------------------

def sort_keyframes(keyframes: Sequence[Keyframe]) -> list[Keyframe]:
    """Sort by time; ties keep their input order."""
    return sorted(keyframes, key=lambda kf: kf.time)


def find_keyframe_bounds(
    keyframes: Sequence[Keyframe], time: float,
) -> Optional[tuple[Keyframe, Keyframe]]:
    """Find the (before, after) pair whose segment contains ``time``.

    ``keyframes`` must already be sorted. A time that lands exactly on an
    interior keyframe belongs to the segment that keyframe starts; on the
    final pair it stays with that pair.
    """
    if len(keyframes) < 2:
        return None
    if time < keyframes[0].time or time > keyframes[-1].time:
        return None

    last_pair = len(keyframes) - 2
    for i in range(len(keyframes) - 1):
        current = keyframes[i]
        nxt = keyframes[i + 1]

        if time == nxt.time and i < last_pair:
            return nxt, keyframes[i + 2]

        if current.time <= time < nxt.time:
            return current, nxt

        if time == nxt.time and i == last_pair:
            return current, nxt

    return None


def _segment_progress(before: Keyframe, after: Keyframe, time: float) -> float:
    span = after.time - before.time
    if span <= 0:
        return 0.0
    return apply_easing_from_keyframe((time - before.time) / span, before)


def _number(value, default: float = 0.0) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return default


def _color(value) -> str:
    return value if isinstance(value, str) else DEFAULT_COLOR


def interpolate_keyframes(before: Keyframe, after: Keyframe, time: float) -> float:
    """Numeric value between two keyframes, eased by ``before``'s easing."""
    v1 = _number(before.value)
    v2 = _number(after.value)

    if time <= before.time:
        return v1
    if time >= after.time:
        return v2

    return interpolate_linear(v1, v2, _segment_progress(before, after, time))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def value_at(keyframes: Sequence[Keyframe], time: float) -> float:
    """Numeric value of a keyframed property at ``time`` (seconds).

    No keyframes gives 0; one keyframe gives its value everywhere; outside
    the keyframed span the nearest end value is held.
    """
    if not keyframes:
        return 0.0
    if len(keyframes) == 1:
        return _number(keyframes[0].value)

    ordered = sort_keyframes(keyframes)
    if time <= ordered[0].time:
        return _number(ordered[0].value)
    if time >= ordered[-1].time:
        return _number(ordered[-1].value)

    bounds = find_keyframe_bounds(ordered, time)
    if bounds is None:
        return 0.0
    return interpolate_keyframes(bounds[0], bounds[1], time)


def color_at(keyframes: Sequence[Keyframe], time: float) -> str:
    """Hex color of a keyframed color property at ``time``."""
    if not keyframes:
        return DEFAULT_COLOR
    if len(keyframes) == 1:
        return _color(keyframes[0].value)

    ordered = sort_keyframes(keyframes)
    if time <= ordered[0].time:
        return _color(ordered[0].value)
    if time >= ordered[-1].time:
        return _color(ordered[-1].value)

    bounds = find_keyframe_bounds(ordered, time)
    if bounds is None:
        return DEFAULT_COLOR
    before, after = bounds
    return interpolate_color(
        _color(before.value), _color(after.value), _segment_progress(before, after, time),
    )


def angle_at(keyframes: Sequence[Keyframe], time: float) -> float:
    """Angle in [0, 360) at ``time``, turning the short way between keys."""
    if not keyframes:
        return 0.0
    if len(keyframes) == 1:
        return normalize_angle(_number(keyframes[0].value))

    ordered = sort_keyframes(keyframes)
    if time <= ordered[0].time:
        return normalize_angle(_number(ordered[0].value))
    if time >= ordered[-1].time:
        return normalize_angle(_number(ordered[-1].value))

    bounds = find_keyframe_bounds(ordered, time)
    if bounds is None:
        return 0.0
    before, after = bounds
    return interpolate_angle(
        _number(before.value), _number(after.value), _segment_progress(before, after, time),
    )


def static_value(project: Project, layer_id: str, prop: str):
    """The non-animated default of ``prop`` on a layer's element."""
    layer = project.layer(layer_id)
    if layer is None:
        return DEFAULT_COLOR if prop in COLOR_PROPERTIES else 0.0
    transform = layer.element.transform
    style = layer.element.style
    defaults = {
        "x": transform.x,
        "y": transform.y,
        "rotation": transform.rotation,
        "scaleX": transform.scale_x,
        "scaleY": transform.scale_y,
        "opacity": 1.0 if style.opacity is None else style.opacity,
        "fill": style.fill or "none",
        "stroke": style.stroke or "none",
        "strokeWidth": 1.0 if style.stroke_width is None else style.stroke_width,
    }
    return defaults[prop]


def property_value_at(project: Project, layer_id: str, prop: str, time: float):
    """Value of ``prop`` on layer ``layer_id`` at ``time``.

    Animated tracks are layered over the element's static default; the
    element itself is never modified.
    """
    check_property(prop)
    track = [kf for kf in project.keyframes if kf.layer_id == layer_id and kf.property == prop]
    if not track:
        return static_value(project, layer_id, prop)
    if track[0].is_color:
        return color_at(track, time)
    return value_at(track, time)
