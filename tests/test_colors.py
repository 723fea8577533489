"""Tests for lottiekit.colors."""

from lottiekit.colors import (
    BLACK,
    color_to_lottie,
    lottie_to_hex,
    parse_color,
    rgb_to_hex,
)


class TestParseColor:
    def test_hex(self):
        assert parse_color("#ff8000") == (255, 128, 0)
        assert parse_color("FF8000") == (255, 128, 0)

    def test_short_hex(self):
        assert parse_color("#f00") == (255, 0, 0)
        assert parse_color("0f0") == (0, 255, 0)

    def test_rgb_functions(self):
        assert parse_color("rgb(1, 2, 3)") == (1, 2, 3)
        assert parse_color("rgba(300, 0, 0, 0.5)") == (255, 0, 0)

    def test_named_color(self):
        assert parse_color("blue") == (0, 0, 255)
        assert parse_color("white") == (255, 255, 255)

    def test_garbage_is_black(self, caplog):
        assert parse_color("definitely-not-a-color") == BLACK
        assert "Could not parse color" in caplog.text

    def test_non_string_is_black(self):
        assert parse_color(None) == BLACK


class TestConversions:
    def test_rgb_to_hex_rounds_and_clamps(self):
        assert rgb_to_hex(127.5, 0, 300) == "#8000ff"
        assert rgb_to_hex(-5, 16, 255) == "#0010ff"

    def test_color_to_lottie_has_three_channels(self):
        assert color_to_lottie("#ff0000") == [1.0, 0.0, 0.0]
        assert len(color_to_lottie("rgba(0, 0, 0, 0.5)")) == 3

    def test_lottie_to_hex(self):
        assert lottie_to_hex([1, 0, 0]) == "#ff0000"
        assert lottie_to_hex([0, 0.5, 1, 1]) == "#0080ff"

    def test_malformed_lottie_color(self):
        assert lottie_to_hex([1]) == "#000000"
        assert lottie_to_hex("red") == "#000000"
