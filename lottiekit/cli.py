"""Command-line interface: every command prints JSON to stdout."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from lottiekit.errors import (
    LottieKitError,
    EXIT_SUCCESS,
    EXIT_VALIDATION,
    EXIT_EXECUTION,
    EXIT_SYSTEM,
    INPUT_NOT_FOUND,
    INVALID_JSON,
    INVALID_LOTTIE,
    INVALID_SVG,
    INVALID_TIME_FORMAT,
    LAYER_NOT_FOUND,
    recovery_hints,
)


def _json_out(data: dict, exit_code: int = EXIT_SUCCESS) -> int:
    """Print JSON to stdout and return exit code."""
    print(json.dumps(data, indent=2))
    return exit_code


def _json_error(exc: LottieKitError, exit_code: int = EXIT_EXECUTION) -> int:
    """Print a LottieKitError as JSON and return the appropriate exit code."""
    return _json_out(exc.to_dict(), exit_code)


def _configure_logging(verbose: bool) -> None:
    """Send library logs to stderr; stdout stays pure JSON."""
    level = os.environ.get("LOTTIEKIT_LOG_LEVEL")
    if not verbose and not level:
        return
    level = (level or "DEBUG").upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.DEBUG),
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------

def _read_input(arg: str) -> str:
    """Read a document from a file path, or from stdin when ``arg`` is '-'."""
    if arg == "-":
        return sys.stdin.read()
    path = Path(arg)
    if not path.is_file():
        raise LottieKitError(
            code=INPUT_NOT_FOUND,
            message=f"File not found: {arg}",
            recovery=recovery_hints(INPUT_NOT_FOUND, {"path": arg}),
            context={"path": arg},
        )
    return path.read_text(encoding="utf-8")


def _read_json(arg: str):
    text = _read_input(arg)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise LottieKitError(
            code=INVALID_JSON,
            message=f"Invalid JSON in {arg}: {exc}",
            recovery=recovery_hints(INVALID_JSON),
            context={"path": arg, "line": exc.lineno, "column": exc.colno},
        ) from exc


def _load_project(arg: str):
    from lottiekit.models import Project
    return Project.from_dict(_read_json(arg))


def _write_or_print(data: dict, output: str | None, exit_code: int = EXIT_SUCCESS) -> int:
    if not output:
        return _json_out(data, exit_code)
    Path(output).write_text(json.dumps(data, indent=2), encoding="utf-8")
    return _json_out({"success": True, "output": output}, exit_code)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------

def cmd_capabilities(_args) -> int:
    """Output a machine-readable description of the toolkit."""
    from lottiekit import __version__
    from lottiekit.exporter import LOTTIE_VERSION
    from lottiekit.models import ANIMATABLE_PROPERTIES, EASINGS, ELEMENT_TYPES
    from lottiekit.path import SUPPORTED_COMMANDS

    caps = {
        "version": __version__,
        "lottie_version": LOTTIE_VERSION,
        "commands": {
            "export": "Project JSON -> Lottie JSON",
            "import": "Lottie JSON -> project JSON (shape layers only)",
            "validate": "Structural validation of a Lottie document",
            "value": "Interpolated value of one layer property at a time",
            "svg": "SVG document -> project layers",
            "path": "Path data -> Lottie vertices and tangents",
        },
        "element_types": list(ELEMENT_TYPES),
        "animatable_properties": list(ANIMATABLE_PROPERTIES),
        "easings": list(EASINGS),
        "path_commands": sorted(SUPPORTED_COMMANDS),
        "project_schema": {
            "name": "str",
            "width": "number",
            "height": "number",
            "fps": "number",
            "duration": "seconds",
            "layers": "list[{id, name, element, visible, locked, parentId?}]",
            "keyframes": "list[{id, time, property, value, easing, easingBezier?, layerId}]",
        },
    }
    return _json_out(caps)


def cmd_export(args) -> int:
    from lottiekit.exporter import export_lottie
    try:
        project = _load_project(args.project)
        doc = export_lottie(project)
    except LottieKitError as exc:
        return _json_error(exc, EXIT_VALIDATION)

    if not args.output:
        print(json.dumps(doc, indent=None if args.compact else 2))
        return EXIT_SUCCESS
    Path(args.output).write_text(
        json.dumps(doc, indent=None if args.compact else 2), encoding="utf-8",
    )
    return _json_out({
        "success": True,
        "output": args.output,
        "layers": len(doc["layers"]),
        "frames": doc["op"],
    })


def cmd_import(args) -> int:
    from lottiekit.importer import import_lottie
    try:
        doc = _read_json(args.file)
    except LottieKitError as exc:
        return _json_error(exc, EXIT_VALIDATION)

    result = import_lottie(doc)
    if not result.success:
        exc = LottieKitError(
            code=INVALID_LOTTIE,
            message=result.error or "Import failed",
            recovery=recovery_hints(INVALID_LOTTIE),
        )
        return _json_error(exc, EXIT_VALIDATION)

    if args.output:
        Path(args.output).write_text(json.dumps(result.project.to_dict(), indent=2), encoding="utf-8")
        return _json_out({
            "success": True,
            "output": args.output,
            "layers": len(result.project.layers),
            "warnings": result.warnings,
        })
    return _json_out(result.to_dict())


def cmd_validate(args) -> int:
    """Validate a Lottie document's structure."""
    from lottiekit.validation import validate_lottie
    try:
        doc = _read_json(args.file)
    except LottieKitError as exc:
        return _json_error(exc, EXIT_VALIDATION)
    result = validate_lottie(doc)
    code = EXIT_SUCCESS if result.valid else EXIT_VALIDATION
    return _json_out(result.to_dict(), code)


def cmd_value(args) -> int:
    from lottiekit.interpolation import property_value_at
    from lottiekit.models import parse_time, time_to_frame
    try:
        project = _load_project(args.project)
        try:
            at = parse_time(args.at)
        except ValueError as exc:
            raise LottieKitError(
                code=INVALID_TIME_FORMAT,
                message=str(exc),
                recovery=recovery_hints(INVALID_TIME_FORMAT),
                context={"time": args.at},
            ) from exc
        if project.layer(args.layer) is None:
            raise LottieKitError(
                code=LAYER_NOT_FOUND,
                message=f"No layer with id {args.layer!r}",
                recovery=recovery_hints(LAYER_NOT_FOUND),
                context={"layer_id": args.layer, "available": [l.id for l in project.layers]},
            )
        value = property_value_at(project, args.layer, args.property, at)
    except LottieKitError as exc:
        return _json_error(exc, EXIT_VALIDATION)

    return _json_out({
        "layer": args.layer,
        "property": args.property,
        "time": at,
        "frame": time_to_frame(at, project.fps),
        "value": value,
    })


def cmd_svg(args) -> int:
    """Convert an SVG document into a project."""
    from lottiekit.models import Project
    from lottiekit.svg_import import parse_svg
    try:
        text = _read_input(args.file)
    except LottieKitError as exc:
        return _json_error(exc, EXIT_VALIDATION)

    result = parse_svg(text, group_name=args.group)
    if not result.success:
        exc = LottieKitError(
            code=INVALID_SVG,
            message=result.error or "SVG parse failed",
            recovery=recovery_hints(INVALID_SVG),
        )
        return _json_error(exc, EXIT_VALIDATION)

    project = Project(
        name=args.name,
        width=result.width or 512,
        height=result.height or 512,
        layers=result.layers,
    )
    data = {"project": project.to_dict(), "warnings": result.warnings}
    return _write_or_print(data, args.output)


def cmd_path(args) -> int:
    from lottiekit.path import svg_path_to_lottie_path, unsupported_commands
    path = svg_path_to_lottie_path(args.d)
    return _json_out({"path": path.to_dict(), "unsupported": unsupported_commands(args.d)})


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="lottiekit",
        description="Lottie animation import/export and interpolation; all output is JSON",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False,
                        help="Log diagnostics to stderr")
    sub = parser.add_subparsers(dest="command")

    # capabilities
    sub.add_parser("capabilities", help="Describe commands, easings and properties")

    # export
    p = sub.add_parser("export", help="Export a project to Lottie JSON")
    p.add_argument("project", help="Project JSON file, or '-' for stdin")
    p.add_argument("-o", "--output", default=None, help="Write the Lottie document here")
    p.add_argument("--compact", action="store_true", default=False,
                   help="Write JSON without indentation")

    # import
    p = sub.add_parser("import", help="Import a Lottie document into a project")
    p.add_argument("file", help="Lottie JSON file, or '-' for stdin")
    p.add_argument("-o", "--output", default=None, help="Write the project JSON here")

    # validate
    p = sub.add_parser("validate", help="Validate a Lottie document's structure")
    p.add_argument("file", help="Lottie JSON file, or '-' for stdin")

    # value
    p = sub.add_parser("value", help="Evaluate a layer property at a time")
    p.add_argument("project", help="Project JSON file, or '-' for stdin")
    p.add_argument("--layer", required=True, help="Layer id")
    p.add_argument("--property", required=True, help="Animatable property name")
    p.add_argument("--at", required=True, help="Time: seconds or HH:MM:SS.mmm")

    # svg
    p = sub.add_parser("svg", help="Convert an SVG document into a project")
    p.add_argument("file", help="SVG file, or '-' for stdin")
    p.add_argument("--group", default=None, help="Wrap all layers in a group layer with this name")
    p.add_argument("--name", default="Untitled", help="Project name")
    p.add_argument("-o", "--output", default=None, help="Write the project JSON here")

    # path
    p = sub.add_parser("path", help="Convert path data to Lottie vertices and tangents")
    p.add_argument("d", help="Path data, e.g. 'M 0 0 L 100 0'")

    return parser


def main() -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(EXIT_VALIDATION)

    _configure_logging(args.verbose)

    handlers = {
        "capabilities": cmd_capabilities,
        "export": cmd_export,
        "import": cmd_import,
        "validate": cmd_validate,
        "value": cmd_value,
        "svg": cmd_svg,
        "path": cmd_path,
    }

    try:
        exit_code = handlers[args.command](args)
    except LottieKitError as exc:
        exit_code = _json_error(exc, EXIT_SYSTEM)
    except Exception as exc:
        exit_code = _json_out({
            "error": True,
            "code": "UNEXPECTED_ERROR",
            "message": str(exc),
            "recovery": ["This is an unexpected error, please report it"],
        }, EXIT_SYSTEM)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
