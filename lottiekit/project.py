"""Project editing operations over immutable snapshots.

Every function takes a Project and returns a new one; the input is never
modified. Layer hierarchy and keyframe ownership are id lookups
(``parent_id`` / ``layer_id``), so deletion is a filter.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from lottiekit.errors import (
    LottieKitError,
    KEYFRAME_NOT_FOUND,
    LAYER_NOT_FOUND,
    recovery_hints,
)
from lottiekit.models import (
    BezierTangents,
    Element,
    Keyframe,
    KeyframeValue,
    Layer,
    Project,
    check_property,
    new_id,
    normalize_easing,
)


def layer_index(project: Project) -> dict[str, int]:
    """Map layer id -> position in ``project.layers``."""
    return {layer.id: idx for idx, layer in enumerate(project.layers)}


def _require_layer(project: Project, layer_id: str) -> None:
    if layer_id not in layer_index(project):
        raise LottieKitError(
            code=LAYER_NOT_FOUND,
            message=f"No layer with id {layer_id!r}",
            recovery=recovery_hints(LAYER_NOT_FOUND),
            context={"layer_id": layer_id, "available": [l.id for l in project.layers]},
        )


def keyframes_for_layer(
    project: Project, layer_id: str, prop: Optional[str] = None,
) -> list[Keyframe]:
    """Keyframes of one layer (optionally one property), sorted by time."""
    matches = [
        kf for kf in project.keyframes
        if kf.layer_id == layer_id and (prop is None or kf.property == prop)
    ]
    return sorted(matches, key=lambda kf: kf.time)


# ---------------------------------------------------------------------------
# Keyframes
# ---------------------------------------------------------------------------

def add_keyframe(
    project: Project,
    layer_id: str,
    prop: str,
    time: float,
    value: KeyframeValue,
    easing: str = "linear",
    easing_bezier: Optional[BezierTangents] = None,
) -> tuple[Project, Keyframe]:
    """Insert a keyframe, replacing any existing one at the same time.

    Keyframes are unique per (layer, property, time). An upsert keeps the
    replaced keyframe's id.

    Returns:
        The new project and the stored keyframe.
    """
    _require_layer(project, layer_id)
    check_property(prop)
    easing = normalize_easing(easing)

    existing = next(
        (kf for kf in project.keyframes
         if kf.layer_id == layer_id and kf.property == prop and kf.time == time),
        None,
    )
    keyframe = Keyframe(
        id=existing.id if existing else new_id("kf-"),
        time=float(time),
        property=prop,
        value=value,
        easing=easing,
        easing_bezier=easing_bezier,
        layer_id=layer_id,
    )

    if existing is None:
        keyframes = [*project.keyframes, keyframe]
    else:
        keyframes = [keyframe if kf.id == existing.id else kf for kf in project.keyframes]
    return project.with_changes(keyframes=keyframes), keyframe


def _find_keyframe(project: Project, keyframe_id: str) -> Keyframe:
    for kf in project.keyframes:
        if kf.id == keyframe_id:
            return kf
    raise LottieKitError(
        code=KEYFRAME_NOT_FOUND,
        message=f"No keyframe with id {keyframe_id!r}",
        recovery=recovery_hints(KEYFRAME_NOT_FOUND),
        context={"keyframe_id": keyframe_id},
    )


def update_keyframe(project: Project, keyframe_id: str, **changes) -> Project:
    """Replace fields on one keyframe (``time``, ``value``, ``easing``, ...)."""
    current = _find_keyframe(project, keyframe_id)
    if "easing" in changes:
        changes["easing"] = normalize_easing(changes["easing"])
    if "property" in changes:
        check_property(changes["property"])
    updated = replace(current, **changes)
    return project.with_changes(
        keyframes=[updated if kf.id == keyframe_id else kf for kf in project.keyframes],
    )


def delete_keyframe(project: Project, keyframe_id: str) -> Project:
    _find_keyframe(project, keyframe_id)
    return project.with_changes(
        keyframes=[kf for kf in project.keyframes if kf.id != keyframe_id],
    )


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

def add_layer(project: Project, layer: Layer) -> Project:
    return project.with_changes(layers=[*project.layers, layer])


def delete_layers(project: Project, layer_ids: list[str]) -> Project:
    """Delete layers, their direct children, and every keyframe they own.

    A layer whose ``parent_id`` names a deleted layer is deleted with it.
    Unknown ids are ignored.
    """
    doomed = set(layer_ids)
    doomed.update(l.id for l in project.layers if l.parent_id in doomed)

    return project.with_changes(
        layers=[l for l in project.layers if l.id not in doomed],
        keyframes=[kf for kf in project.keyframes if kf.layer_id not in doomed],
    )


def flatten_element(
    element: Element, parent_id: Optional[str] = None, name: Optional[str] = None,
) -> list[Layer]:
    """Turn an element tree into a flat layer list.

    A group becomes its own layer (holding a childless group element) and
    each child becomes a layer whose ``parent_id`` is the group layer's id.
    """
    layer_id = new_id("layer-")
    label = name or element.name or element.type

    if element.type != "group":
        return [Layer(id=layer_id, element=element, name=label, parent_id=parent_id)]

    shell = replace(element, children=[])
    layers = [Layer(id=layer_id, element=shell, name=label, parent_id=parent_id)]
    for child in element.children:
        layers.extend(flatten_element(child, parent_id=layer_id))
    return layers
