"""Shared test fixtures: sample projects, Lottie documents and a fake clock."""

import pytest

from lottiekit.models import Element, Keyframe, Layer, Project, Style, Transform


class FakeClock:
    """Manually advanced time source for PlaybackEngine."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rect_layer() -> Layer:
    """A 100x50 red rect with a black stroke at (10, 20)."""
    element = Element(
        type="rect",
        id="el-rect",
        name="Box",
        x=10, y=20, width=100, height=50,
        style=Style(fill="#ff0000", stroke="#000000", stroke_width=2, opacity=1.0),
    )
    return Layer(id="layer-1", element=element, name="Box")


@pytest.fixture
def circle_layer() -> Layer:
    element = Element(
        type="circle",
        id="el-circle",
        name="Dot",
        cx=50, cy=50, r=25,
        transform=Transform(x=5, y=5),
        style=Style(fill="blue"),
    )
    return Layer(id="layer-2", element=element, name="Dot")


def kf(layer_id, prop, time, value, easing="linear", easing_bezier=None, id=None):
    """Build a keyframe with a predictable id."""
    return Keyframe(
        id=id or f"kf-{layer_id}-{prop}-{time}",
        time=time,
        property=prop,
        value=value,
        easing=easing,
        easing_bezier=easing_bezier,
        layer_id=layer_id,
    )


@pytest.fixture
def make_kf():
    return kf


@pytest.fixture
def moving_project(rect_layer) -> Project:
    """One rect moving x 100 -> 300 over one second at 30 fps."""
    return Project(
        name="Move",
        width=400,
        height=300,
        fps=30,
        duration=2.0,
        layers=[rect_layer],
        keyframes=[
            kf("layer-1", "x", 0.0, 100),
            kf("layer-1", "x", 1.0, 300),
        ],
    )


@pytest.fixture
def minimal_lottie() -> dict:
    """A valid one-layer Lottie document with a static rectangle."""
    return {
        "v": "5.5.7",
        "fr": 30,
        "ip": 0,
        "op": 60,
        "w": 200,
        "h": 100,
        "nm": "Minimal",
        "ddd": 0,
        "assets": [],
        "layers": [
            {
                "ty": 4,
                "nm": "Shape",
                "ind": 1,
                "ip": 0,
                "op": 60,
                "st": 0,
                "ks": {
                    "p": {"a": 0, "k": [60, 45]},
                    "a": {"a": 0, "k": [50, 25]},
                    "s": {"a": 0, "k": [100, 100]},
                    "r": {"a": 0, "k": 0},
                    "o": {"a": 0, "k": 100},
                },
                "shapes": [
                    {
                        "ty": "gr",
                        "it": [
                            {"ty": "rc", "p": {"a": 0, "k": [50, 25]}, "s": {"a": 0, "k": [100, 50]},
                             "r": {"a": 0, "k": 0}},
                            {"ty": "fl", "c": {"a": 0, "k": [1, 0, 0]}, "o": {"a": 0, "k": 100}},
                            {"ty": "tr"},
                        ],
                    }
                ],
            }
        ],
    }
