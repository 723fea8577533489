"""Parse SVG documents into project layers.

Supported elements: rect, circle, ellipse, path, polygon, polyline, g.
Groups are flattened into layers linked by ``parent_id``. Embedded raster
images and foreignObject content are reported as warnings and ignored.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from lottiekit.errors import INPUT_NOT_FOUND, LottieKitError, recovery_hints
from lottiekit.models import Element, Layer, Style, Transform, new_id
from lottiekit.project import flatten_element

logger = logging.getLogger(__name__)

_TRANSLATE_RE = re.compile(r"translate\(\s*([-+\d.eE]+)(?:[,\s]+([-+\d.eE]+))?\s*\)")
_SCALE_RE = re.compile(r"scale\(\s*([-+\d.eE]+)(?:[,\s]+([-+\d.eE]+))?\s*\)")
_ROTATE_RE = re.compile(r"rotate\(\s*([-+\d.eE]+)")
_LEADING_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


@dataclass
class SVGParseResult:
    success: bool
    layers: list[Layer] = field(default_factory=list)
    width: Optional[float] = None
    height: Optional[float] = None
    error: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        d: dict = {
            "success": self.success,
            "layers": [layer.to_dict() for layer in self.layers],
            "warnings": self.warnings,
        }
        if self.width is not None:
            d["width"] = self.width
        if self.height is not None:
            d["height"] = self.height
        if self.error is not None:
            d["error"] = self.error
        return d


def _strip_ns(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _parse_float(value: Optional[str], default: float = 0.0) -> float:
    """Leading number of an attribute value (``"12px"`` -> 12.0)."""
    if value is None:
        return default
    m = _LEADING_NUMBER_RE.match(value)
    return float(m.group(1)) if m else default


def parse_transform(attr: Optional[str]) -> Transform:
    """Read translate/scale/rotate out of an SVG ``transform`` attribute."""
    transform = Transform()
    if not attr:
        return transform

    m = _TRANSLATE_RE.search(attr)
    if m:
        transform.x = float(m.group(1))
        transform.y = float(m.group(2)) if m.group(2) else 0.0

    m = _SCALE_RE.search(attr)
    if m:
        transform.scale_x = float(m.group(1))
        transform.scale_y = float(m.group(2)) if m.group(2) else transform.scale_x

    m = _ROTATE_RE.search(attr)
    if m:
        transform.rotation = float(m.group(1))

    return transform


def _style_declarations(el: ET.Element) -> dict[str, str]:
    """Presentation attributes, overridden by the inline ``style`` attribute."""
    props = {
        key: el.get(key)
        for key in ("fill", "stroke", "stroke-width", "opacity")
        if el.get(key) is not None
    }
    for decl in (el.get("style") or "").split(";"):
        if ":" in decl:
            key, value = decl.split(":", 1)
            props[key.strip()] = value.strip()
    return props


def parse_style(el: ET.Element) -> Style:
    props = _style_declarations(el)
    style = Style()
    if props.get("fill") and props["fill"] != "none":
        style.fill = props["fill"]
    if props.get("stroke") and props["stroke"] != "none":
        style.stroke = props["stroke"]
    if props.get("stroke-width"):
        style.stroke_width = _parse_float(props["stroke-width"])
    if props.get("opacity"):
        style.opacity = _parse_float(props["opacity"], 1.0)
    return style


def _optional_float(el: ET.Element, name: str) -> Optional[float]:
    value = el.get(name)
    return _parse_float(value) if value else None


def parse_element(el: ET.Element) -> Optional[Element]:
    """Convert one SVG node (recursively for groups); None if unsupported."""
    tag = _strip_ns(el.tag).lower()
    el_id = el.get("id") or new_id("el-")
    common = dict(
        id=el_id,
        transform=parse_transform(el.get("transform")),
        style=parse_style(el),
    )

    if tag == "rect":
        return Element(
            type="rect", name=f"Rect {el_id}", **common,
            x=_parse_float(el.get("x")),
            y=_parse_float(el.get("y")),
            width=_parse_float(el.get("width")),
            height=_parse_float(el.get("height")),
            rx=_optional_float(el, "rx"),
            ry=_optional_float(el, "ry"),
        )
    if tag == "circle":
        return Element(
            type="circle", name=f"Circle {el_id}", **common,
            cx=_parse_float(el.get("cx")),
            cy=_parse_float(el.get("cy")),
            r=_parse_float(el.get("r")),
        )
    if tag == "ellipse":
        return Element(
            type="ellipse", name=f"Ellipse {el_id}", **common,
            cx=_parse_float(el.get("cx")),
            cy=_parse_float(el.get("cy")),
            rx=_parse_float(el.get("rx")),
            ry=_parse_float(el.get("ry")),
        )
    if tag == "path":
        return Element(type="path", name=f"Path {el_id}", **common, d=el.get("d") or "")
    if tag in ("polygon", "polyline"):
        return Element(
            type=tag, name=f"{tag.capitalize()} {el_id}", **common,
            points=el.get("points") or "",
        )
    if tag == "g":
        children = [c for c in (parse_element(child) for child in el) if c is not None]
        return Element(type="group", name=f"Group {el_id}", **common, children=children)

    logger.debug("Ignoring unsupported SVG element <%s>", tag)
    return None


def _unsupported_warnings(root: ET.Element) -> list[str]:
    counts = {"image": 0, "foreignObject": 0}
    for node in root.iter():
        tag = _strip_ns(node.tag) if isinstance(node.tag, str) else ""
        if tag in counts:
            counts[tag] += 1

    warnings = []
    n = counts["image"]
    if n:
        warnings.append(
            f"SVG contains {n} embedded raster image{'' if n == 1 else 's'}. "
            "Only vector graphics are supported - raster images will not be imported."
        )
    n = counts["foreignObject"]
    if n:
        warnings.append(
            f"SVG contains {n} foreignObject element{'' if n == 1 else 's'}. "
            "This content is not supported and will be ignored."
        )
    return warnings


def _dimensions(root: ET.Element) -> tuple[Optional[float], Optional[float]]:
    width = height = None
    view_box = root.get("viewBox")
    if view_box:
        parts = re.split(r"[\s,]+", view_box.strip())
        if len(parts) == 4:
            width = _parse_float(parts[2]) or None
            height = _parse_float(parts[3]) or None
    if not width and root.get("width"):
        width = _parse_float(root.get("width")) or None
    if not height and root.get("height"):
        height = _parse_float(root.get("height")) or None
    return width, height


def parse_svg(svg_text: str, group_name: Optional[str] = None) -> SVGParseResult:
    """Parse SVG markup into flat layers.

    Args:
        svg_text: The SVG document.
        group_name: When given, every top-level layer is parented under a
            new group layer with this name.

    Returns:
        SVGParseResult; malformed markup gives ``success=False``.
    """
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as exc:
        return SVGParseResult(success=False, error=f"Invalid SVG: {exc}")

    if _strip_ns(root.tag) != "svg":
        svg = next((n for n in root.iter() if _strip_ns(n.tag) == "svg"), None)
        if svg is None:
            return SVGParseResult(success=False, error="No SVG element found")
        root = svg

    width, height = _dimensions(root)
    warnings = _unsupported_warnings(root)
    for warning in warnings:
        logger.warning(warning)

    layers: list[Layer] = []
    for child in root:
        element = parse_element(child)
        if element is not None:
            layers.extend(flatten_element(element))

    if group_name and layers:
        group_layer = Layer(
            id=new_id("layer-"),
            name=group_name,
            element=Element(type="group", name=group_name, style=Style()),
        )
        for layer in layers:
            if layer.parent_id is None:
                layer.parent_id = group_layer.id
        layers = [group_layer, *layers]

    return SVGParseResult(success=True, layers=layers, width=width, height=height, warnings=warnings)


def read_svg(path: str | Path, group_name: Optional[str] = None) -> SVGParseResult:
    source = Path(path)
    if not source.is_file():
        raise LottieKitError(
            code=INPUT_NOT_FOUND,
            message=f"SVG file not found: {source}",
            recovery=recovery_hints(INPUT_NOT_FOUND, {"path": str(source)}),
            context={"path": str(source)},
        )
    return parse_svg(source.read_text(encoding="utf-8"), group_name=group_name)
