"""Tests for lottiekit.svg_import."""

import pytest

from lottiekit.errors import INPUT_NOT_FOUND, LottieKitError
from lottiekit.svg_import import parse_svg, parse_transform, read_svg

SIMPLE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 100">
  <rect id="r1" x="10" y="10" width="50" height="20" fill="#f00" rx="4"/>
  <circle id="c1" cx="5" cy="5" r="3" fill="red" style="fill: blue; stroke: red; stroke-width: 2px"/>
  <text x="0" y="0">ignored</text>
</svg>"""

GROUP_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="300px" height="150">
  <g id="g1" transform="translate(10, 20)">
    <ellipse id="e1" cx="1" cy="2" rx="3" ry="4"/>
    <path id="p1" d="M 0 0 L 1 1" stroke="black" fill="none"/>
  </g>
  <polygon id="poly" points="0,0 10,0 5,5"/>
</svg>"""


class TestParseSvg:
    def test_elements(self):
        result = parse_svg(SIMPLE_SVG)
        assert result.success
        assert (result.width, result.height) == (200, 100)
        assert [layer.element.type for layer in result.layers] == ["rect", "circle"]

        rect = result.layers[0].element
        assert rect.name == "Rect r1"
        assert result.layers[0].name == "Rect r1"
        assert (rect.x, rect.y, rect.width, rect.height, rect.rx) == (10, 10, 50, 20, 4)
        assert rect.style.fill == "#f00"

    def test_inline_style_overrides_attributes(self):
        circle = parse_svg(SIMPLE_SVG).layers[1].element
        assert circle.style.fill == "blue"
        assert circle.style.stroke == "red"
        assert circle.style.stroke_width == 2

    def test_groups_flatten_with_parents(self):
        result = parse_svg(GROUP_SVG)
        layers = result.layers
        assert [layer.element.type for layer in layers] == ["group", "ellipse", "path", "polygon"]
        group = layers[0]
        assert group.element.children == []
        assert group.element.transform.x == 10
        assert group.element.transform.y == 20
        assert layers[1].parent_id == group.id
        assert layers[2].parent_id == group.id
        assert layers[3].parent_id is None
        assert layers[3].element.points == "0,0 10,0 5,5"

    def test_fill_none(self):
        path = parse_svg(GROUP_SVG).layers[2].element
        assert path.style.fill is None
        assert path.style.stroke == "black"
        assert path.d == "M 0 0 L 1 1"

    def test_dimensions_from_attributes(self):
        result = parse_svg(GROUP_SVG)
        assert (result.width, result.height) == (300, 150)

    def test_wrapping_group(self):
        layers = parse_svg(GROUP_SVG, group_name="Imported").layers
        wrapper = layers[0]
        assert wrapper.name == "Imported"
        assert wrapper.element.type == "group"
        assert layers[1].parent_id == wrapper.id
        assert layers[4].parent_id == wrapper.id
        # nested children keep their own group
        assert layers[2].parent_id == layers[1].id

    def test_invalid_markup(self):
        result = parse_svg("<svg><rect></svg>")
        assert not result.success
        assert result.error.startswith("Invalid SVG")
        assert result.layers == []

    def test_no_svg_root(self):
        result = parse_svg("<html><body/></html>")
        assert not result.success
        assert result.error == "No SVG element found"

    def test_raster_and_foreign_content_warn(self):
        svg = (
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<image href="a.png"/><image href="b.png"/><foreignObject/>'
            "</svg>"
        )
        result = parse_svg(svg)
        assert result.success
        assert len(result.warnings) == 2
        assert "2 embedded raster images" in result.warnings[0]
        assert "1 foreignObject element." in result.warnings[1]

    def test_generated_ids(self):
        layers = parse_svg("<svg><circle r='2'/></svg>").layers
        assert layers[0].element.id.startswith("el-")

    def test_to_dict(self):
        data = parse_svg(SIMPLE_SVG).to_dict()
        assert data["success"] is True
        assert data["width"] == 200
        assert "error" not in data


class TestParseTransform:
    def test_combined(self):
        t = parse_transform("translate(5) scale(2) rotate(45)")
        assert (t.x, t.y, t.scale_x, t.scale_y, t.rotation) == (5, 0, 2, 2, 45)

    def test_scale_two_values(self):
        t = parse_transform("scale(2 3)")
        assert (t.scale_x, t.scale_y) == (2, 3)

    def test_empty(self):
        t = parse_transform(None)
        assert (t.x, t.y, t.scale_x, t.rotation) == (0, 0, 1, 0)


class TestReadSvg:
    def test_read_file(self, tmp_path):
        path = tmp_path / "icon.svg"
        path.write_text(SIMPLE_SVG)
        assert len(read_svg(path).layers) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(LottieKitError) as exc_info:
            read_svg(tmp_path / "nope.svg")
        assert exc_info.value.code == INPUT_NOT_FOUND
