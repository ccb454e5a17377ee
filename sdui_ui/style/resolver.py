from __future__ import annotations

import logging
from typing import Any, Mapping

LOGGER = logging.getLogger(__name__)

BOX_PROPERTIES: tuple[str, ...] = ("margin", "padding")
BOX_SIDES: tuple[str, ...] = ("top", "bottom", "left", "right")
PASSTHROUGH_PROPERTIES: tuple[str, ...] = (
    "backgroundColor",
    "borderRadius",
    "width",
    "height",
    "flex",
    "alignItems",
    "justifyContent",
)


def resolve_style(style: Mapping[str, Any] | None) -> dict[str, Any]:
    """Flatten a declarative component style into concrete style properties.

    A numeric `margin`/`padding` stays a single shorthand property; an object
    form expands into `marginTop`, `marginBottom`, ... Already-flat directional
    keys pass through, so the output resolves to itself.
    """

    if not style:
        return {}
    resolved: dict[str, Any] = {}
    for box in BOX_PROPERTIES:
        for side in BOX_SIDES:
            key = _side_key(box, side)
            if style.get(key) is not None:
                resolved[key] = style[key]
        value = style.get(box)
        if _is_number(value):
            resolved[box] = value
        elif isinstance(value, Mapping):
            for side in BOX_SIDES:
                if value.get(side) is not None:
                    resolved[_side_key(box, side)] = value[side]
        elif value is not None:
            LOGGER.debug("ignoring unsupported %s value %r", box, value)
    for key in PASSTHROUGH_PROPERTIES:
        value = style.get(key)
        if value is not None and value != "":
            resolved[key] = value
    return resolved


def _side_key(box: str, side: str) -> str:
    return f"{box}{side.capitalize()}"


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
