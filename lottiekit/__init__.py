"""lottiekit: Lottie animation interchange and keyframe interpolation.

Public API:
    evaluate_cubic_bezier, solve_cubic_bezier_x, ease_bezier  : easing math
    value_at, color_at, angle_at, property_value_at           : interpolation
    svg_path_to_lottie_path, lottie_path_to_svg               : path codec
    export_lottie, export_json, write_lottie                  : project -> Lottie
    import_lottie, import_json, read_lottie                   : Lottie -> project
    validate_lottie                                           : structural checks
    parse_svg                                                 : SVG -> layers
    PlaybackEngine                                            : preview timing
    LottieKitError                                            : structured errors
"""

from lottiekit.bezier import evaluate_cubic_bezier, solve_cubic_bezier_x, ease_bezier
from lottiekit.interpolation import (
    value_at,
    color_at,
    angle_at,
    interpolate_angle,
    interpolate_color,
    property_value_at,
)
from lottiekit.path import LottiePath, svg_path_to_lottie_path, lottie_path_to_svg
from lottiekit.exporter import export_lottie, export_json, write_lottie
from lottiekit.importer import ImportResult, import_lottie, import_json, read_lottie
from lottiekit.validation import ValidationResult, validate_lottie
from lottiekit.svg_import import SVGParseResult, parse_svg
from lottiekit.playback import PlaybackEngine, PlaybackState
from lottiekit.errors import LottieKitError
from lottiekit.models import (
    BezierTangents,
    Element,
    Keyframe,
    Layer,
    Project,
    Style,
    Transform,
)

__version__ = "0.1.0"

__all__ = [
    # Easing math
    "evaluate_cubic_bezier",
    "solve_cubic_bezier_x",
    "ease_bezier",
    # Interpolation
    "value_at",
    "color_at",
    "angle_at",
    "interpolate_angle",
    "interpolate_color",
    "property_value_at",
    # Path codec
    "LottiePath",
    "svg_path_to_lottie_path",
    "lottie_path_to_svg",
    # Export / import
    "export_lottie",
    "export_json",
    "write_lottie",
    "ImportResult",
    "import_lottie",
    "import_json",
    "read_lottie",
    # Validation
    "ValidationResult",
    "validate_lottie",
    # SVG
    "SVGParseResult",
    "parse_svg",
    # Playback
    "PlaybackEngine",
    "PlaybackState",
    # Types
    "BezierTangents",
    "Element",
    "Keyframe",
    "Layer",
    "Project",
    "Style",
    "Transform",
    "LottieKitError",
]
