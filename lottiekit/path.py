"""Path codec: SVG path mini-language <-> Lottie bezier path data.

Lottie stores a path as parallel arrays, index-aligned on the vertex list::

    {"v": [[x, y], ...],   # vertices
     "i": [[dx, dy], ...], # in-tangents, relative to their vertex
     "o": [[dx, dy], ...], # out-tangents, relative to their vertex
     "c": bool}            # closed

Supported commands: M L H V C Q Z, absolute and relative. Everything else
(S, T, A) is skipped; use ``unsupported_commands`` to detect it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

SUPPORTED_COMMANDS = frozenset("MLHVCQZ")

_COMMAND_RE = re.compile(r"([MmLlHhVvCcSsQqTtAaZz])([^MmLlHhVvCcSsQqTtAaZz]*)")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

# Number of values consumed by one repetition of each command.
_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "Q": 4, "Z": 0, "S": 4, "T": 2, "A": 7}


@dataclass
class PathCommand:
    type: str
    values: list[float] = field(default_factory=list)


@dataclass
class LottiePath:
    """Lottie bezier path; tangents are offsets from their vertex."""
    v: list[list[float]] = field(default_factory=list)
    i: list[list[float]] = field(default_factory=list)
    o: list[list[float]] = field(default_factory=list)
    c: bool = False

    def to_dict(self) -> dict:
        return {"i": self.i, "o": self.o, "v": self.v, "c": self.c}

    @classmethod
    def from_dict(cls, data: dict) -> LottiePath:
        return cls(
            v=[list(p) for p in data.get("v", [])],
            i=[list(p) for p in data.get("i", [])],
            o=[list(p) for p in data.get("o", [])],
            c=bool(data.get("c", False)),
        )


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_path_data(d: str) -> list[PathCommand]:
    """Split a path string into commands with their numeric arguments.

    Implicit repetition is expanded, so ``M 0 0 10 10`` yields an M then
    an L, and ``L 1 1 2 2`` yields two L commands. A command short of
    values is dropped.
    """
    commands: list[PathCommand] = []
    for letter, args in _COMMAND_RE.findall(d or ""):
        values = [float(n) for n in _NUMBER_RE.findall(args)]
        arity = _ARITY[letter.upper()]

        if arity == 0:
            commands.append(PathCommand(letter))
            continue

        if len(values) < arity:
            logger.debug("Dropping %s command with %d values", letter, len(values))
            continue

        current = letter
        for start in range(0, len(values) - arity + 1, arity):
            commands.append(PathCommand(current, values[start:start + arity]))
            # Extra coordinate pairs after a moveto are linetos.
            if current == "M":
                current = "L"
            elif current == "m":
                current = "l"
    return commands


def unsupported_commands(d: str) -> list[str]:
    """Command letters in ``d`` that the codec skips, in order of appearance."""
    seen: list[str] = []
    for letter, _ in _COMMAND_RE.findall(d or ""):
        if letter.upper() not in SUPPORTED_COMMANDS and letter not in seen:
            seen.append(letter)
    return seen


# ---------------------------------------------------------------------------
# SVG -> Lottie
# ---------------------------------------------------------------------------

def svg_path_to_lottie_path(d: str) -> LottiePath:
    """Convert a path string into Lottie vertex/tangent arrays.

    All subpaths are flattened into one vertex list. Quadratic segments are
    elevated to cubic: cp1 = start + 2/3 (ctrl - start), cp2 = end + 2/3
    (ctrl - end).
    """
    path = LottiePath()
    cur_x = cur_y = 0.0
    start_x = start_y = 0.0

    def add_vertex(x: float, y: float, in_tangent=(0.0, 0.0)) -> None:
        path.v.append([x, y])
        path.i.append([in_tangent[0], in_tangent[1]])
        path.o.append([0.0, 0.0])

    for cmd in parse_path_data(d):
        kind = cmd.type.upper()
        rel = cmd.type.islower()
        vals = cmd.values

        if kind == "M":
            cur_x, cur_y = (cur_x + vals[0], cur_y + vals[1]) if rel else (vals[0], vals[1])
            start_x, start_y = cur_x, cur_y
            add_vertex(cur_x, cur_y)

        elif kind == "L":
            cur_x, cur_y = (cur_x + vals[0], cur_y + vals[1]) if rel else (vals[0], vals[1])
            add_vertex(cur_x, cur_y)

        elif kind == "H":
            cur_x = cur_x + vals[0] if rel else vals[0]
            add_vertex(cur_x, cur_y)

        elif kind == "V":
            cur_y = cur_y + vals[0] if rel else vals[0]
            add_vertex(cur_x, cur_y)

        elif kind == "C":
            ox, oy = (cur_x, cur_y) if rel else (0.0, 0.0)
            x1, y1 = ox + vals[0], oy + vals[1]
            x2, y2 = ox + vals[2], oy + vals[3]
            x, y = ox + vals[4], oy + vals[5]
            if path.v:
                px, py = path.v[-1]
                path.o[-1] = [x1 - px, y1 - py]
            add_vertex(x, y, (x2 - x, y2 - y))
            cur_x, cur_y = x, y

        elif kind == "Q":
            ox, oy = (cur_x, cur_y) if rel else (0.0, 0.0)
            qx, qy = ox + vals[0], oy + vals[1]
            x, y = ox + vals[2], oy + vals[3]
            if path.v:
                sx, sy = path.v[-1]
                cp1x = sx + 2.0 / 3.0 * (qx - sx)
                cp1y = sy + 2.0 / 3.0 * (qy - sy)
                cp2x = x + 2.0 / 3.0 * (qx - x)
                cp2y = y + 2.0 / 3.0 * (qy - y)
                path.o[-1] = [cp1x - sx, cp1y - sy]
                add_vertex(x, y, (cp2x - x, cp2y - y))
            cur_x, cur_y = x, y

        elif kind == "Z":
            path.c = True
            cur_x, cur_y = start_x, start_y

    return path


def points_to_path(points: str, closed: bool = True) -> str:
    """Turn a polygon/polyline ``points`` attribute into path data."""
    nums = _NUMBER_RE.findall(points or "")
    pairs = [(nums[k], nums[k + 1]) for k in range(0, len(nums) - 1, 2)]
    if not pairs:
        return ""
    parts = [f"M {pairs[0][0]} {pairs[0][1]}"]
    parts.extend(f"L {x} {y}" for x, y in pairs[1:])
    if closed:
        parts.append("Z")
    return " ".join(parts)


def path_bounds_center(d: str) -> tuple[float, float]:
    """Center of the bounding box of a path's vertices; (0, 0) when empty."""
    vertices = svg_path_to_lottie_path(d).v
    if not vertices:
        return 0.0, 0.0
    xs = [v[0] for v in vertices]
    ys = [v[1] for v in vertices]
    return (min(xs) + max(xs)) / 2.0, (min(ys) + max(ys)) / 2.0


# ---------------------------------------------------------------------------
# Lottie -> SVG
# ---------------------------------------------------------------------------

def _fmt(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(round(value, 6))


def _point(x: float, y: float) -> str:
    return f"{_fmt(x)} {_fmt(y)}"


def lottie_path_to_svg(data) -> str:
    """Convert Lottie path data (dict or LottiePath) back into path commands.

    Every segment is written as a cubic ``C`` so tangents survive; a closed
    path gets the closing segment back to the first vertex plus ``Z``.
    """
    path = data if isinstance(data, LottiePath) else LottiePath.from_dict(data or {})
    if not path.v:
        return ""

    def tangent(arr: list, idx: int) -> list[float]:
        if idx < len(arr) and len(arr[idx]) >= 2:
            return arr[idx]
        return [0.0, 0.0]

    def segment(a: int, b: int) -> str:
        ax, ay = path.v[a][0], path.v[a][1]
        bx, by = path.v[b][0], path.v[b][1]
        out_t = tangent(path.o, a)
        in_t = tangent(path.i, b)
        return (
            f"C {_point(ax + out_t[0], ay + out_t[1])} "
            f"{_point(bx + in_t[0], by + in_t[1])} {_point(bx, by)}"
        )

    parts = [f"M {_point(path.v[0][0], path.v[0][1])}"]
    for idx in range(1, len(path.v)):
        parts.append(segment(idx - 1, idx))
    if path.c:
        if len(path.v) > 1:
            parts.append(segment(len(path.v) - 1, 0))
        parts.append("Z")
    return " ".join(parts)
