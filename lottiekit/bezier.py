"""Cubic bezier evaluation and inversion for easing curves.

An easing segment is two independent cubics over the same parameter t:
the x-curve maps t to normalized time, the y-curve maps t to normalized
value. Easing a time progress x means solving the x-curve for t, then
evaluating the y-curve at that t.

Lottie stores a segment's curve as out/in tangents ``{o: {x, y}, i: {x, y}}``
which map onto control points ``x: [0, o.x, i.x, 1]`` and ``y: [0, o.y, i.y, 1]``.
"""

from __future__ import annotations

import math
from typing import Optional

# ---------------------------------------------------------------------------
# Solver configuration
# ---------------------------------------------------------------------------

NEWTON_ITERATIONS = 8
NEWTON_MIN_SLOPE = 1e-3
SUBDIVISION_PRECISION = 1e-7
SUBDIVISION_MAX_ITERATIONS = 10


# ---------------------------------------------------------------------------
# Curve evaluation
# ---------------------------------------------------------------------------

def evaluate_cubic_bezier(t: float, p0: float, p1: float, p2: float, p3: float) -> float:
    """Evaluate a one-dimensional cubic bezier at parameter t.

    B(t) = (1-t)^3*p0 + 3(1-t)^2*t*p1 + 3(1-t)*t^2*p2 + t^3*p3

    Non-finite t saturates to p3 when positive and p0 otherwise, so NaN
    never propagates out of the solver.
    """
    if not math.isfinite(t):
        return p3 if t > 0 else p0

    mt = 1.0 - t
    mt2 = mt * mt
    t2 = t * t
    return mt2 * mt * p0 + 3.0 * mt2 * t * p1 + 3.0 * mt * t2 * p2 + t2 * t * p3


def _derivative(t: float, p0: float, p1: float, p2: float, p3: float) -> float:
    """B'(t) = 3(1-t)^2(p1-p0) + 6(1-t)t(p2-p1) + 3t^2(p3-p2)."""
    mt = 1.0 - t
    return 3.0 * mt * mt * (p1 - p0) + 6.0 * mt * t * (p2 - p1) + 3.0 * t * t * (p3 - p2)


# ---------------------------------------------------------------------------
# Inverse problem
# ---------------------------------------------------------------------------

def solve_cubic_bezier_x(target_x: float, x0: float, x1: float, x2: float, x3: float) -> float:
    """Find t in [0, 1] such that the x-curve passes through target_x.

    Runs Newton-Raphson from a linear initial guess and falls back to
    bisection when the slope flattens out or the iterations run dry.

    Args:
        target_x: Coordinate to solve for.
        x0, x1, x2, x3: Control values of the x-curve.

    Returns:
        The curve parameter t. Degenerate curves (all control values
        equal) return 0.5; targets outside [x0, x3] clamp to 0 or 1.
    """
    if not math.isfinite(target_x):
        return 1.0 if target_x > 0 else 0.0

    if x0 == x1 == x2 == x3:
        return 0.5

    if target_x <= x0:
        return 0.0
    if target_x >= x3:
        return 1.0

    t = (target_x - x0) / (x3 - x0)

    for _ in range(NEWTON_ITERATIONS):
        current = evaluate_cubic_bezier(t, x0, x1, x2, x3)
        if abs(current - target_x) < SUBDIVISION_PRECISION:
            return t

        slope = _derivative(t, x0, x1, x2, x3)
        if abs(slope) < NEWTON_MIN_SLOPE:
            break

        t -= (current - target_x) / slope
        t = max(0.0, min(1.0, t))

    return _bisect(target_x, x0, x1, x2, x3)


def _bisect(target_x: float, x0: float, x1: float, x2: float, x3: float) -> float:
    """Binary search for t; slower than Newton but cannot diverge."""
    lo, hi = 0.0, 1.0
    t = 0.5

    for _ in range(SUBDIVISION_MAX_ITERATIONS):
        diff = evaluate_cubic_bezier(t, x0, x1, x2, x3) - target_x
        if abs(diff) < SUBDIVISION_PRECISION:
            return t
        if diff > 0:
            hi = t
        else:
            lo = t
        t = (lo + hi) / 2.0

    return t


# ---------------------------------------------------------------------------
# Easing
# ---------------------------------------------------------------------------

def ease_bezier(
    x: float,
    x0: float, x1: float, x2: float, x3: float,
    y0: float, y1: float, y2: float, y3: float,
) -> float:
    """Map time progress x to value progress through a pair of cubics.

    Examples:
        >>> ease_bezier(0.5, 0, 0, 1, 1, 0, 0, 1, 1)  # linear
        0.5
    """
    if not math.isfinite(x):
        return y3 if x > 0 else y0

    if x <= x0:
        return y0
    if x >= x3:
        return y3

    t = solve_cubic_bezier_x(x, x0, x1, x2, x3)
    return evaluate_cubic_bezier(t, y0, y1, y2, y3)


def _first(values: Optional[list], default: float) -> float:
    if values:
        return values[0]
    return default


def lottie_tangents_to_bezier(tangents: dict) -> tuple[tuple[float, ...], tuple[float, ...]]:
    """Convert Lottie ``{o, i}`` tangents into (x, y) control point tuples.

    Only the first entry of each component list is used; missing entries
    default to the linear curve (o = 0, i = 1).
    """
    out_t = tangents.get("o") or {}
    in_t = tangents.get("i") or {}
    xs = (0.0, _first(out_t.get("x"), 0.0), _first(in_t.get("x"), 1.0), 1.0)
    ys = (0.0, _first(out_t.get("y"), 0.0), _first(in_t.get("y"), 1.0), 1.0)
    return xs, ys


def ease_bezier_from_lottie_tangents(x: float, tangents: dict) -> float:
    """Apply a Lottie tangent pair as an easing function to progress x."""
    xs, ys = lottie_tangents_to_bezier(tangents)
    return ease_bezier(x, *xs, *ys)
