from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

LOGGER = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class BuilderConfig:
    """Builder and preview settings, read from `[builder]` in a TOML file."""

    primary_color: str = "#030213"
    secondary_color: str = "#468B97"
    page_inset_px: float = 16.0
    component_gap_px: float = 8.0
    image_height_px: float = 200.0
    frame_width_px: int = 360
    frame_height_px: int = 700
    component_id_prefix: str = "comp_"
    page_id_prefix: str = "page_"
    log_level: str = "WARNING"


DEFAULT_CONFIG = BuilderConfig()


def builder_config_from_mapping(overrides: Mapping[str, Any] | None = None) -> BuilderConfig:
    raw: dict[str, Any] = asdict(DEFAULT_CONFIG)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown builder setting: {key}")
            raw[key] = value

    for key in ("primary_color", "secondary_color"):
        if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
            raise ValueError(f"Setting `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    for key in ("page_inset_px", "image_height_px", "frame_width_px", "frame_height_px"):
        if isinstance(raw[key], bool) or not isinstance(raw[key], (int, float)) or raw[key] <= 0:
            raise ValueError(f"Setting `{key}` must be a positive number")
    if isinstance(raw["component_gap_px"], bool) or not isinstance(raw["component_gap_px"], (int, float)):
        raise ValueError("Setting `component_gap_px` must be a number")
    if raw["component_gap_px"] < 0:
        raise ValueError("Setting `component_gap_px` must be >= 0")

    for key in ("component_id_prefix", "page_id_prefix"):
        if not isinstance(raw[key], str) or not raw[key].strip():
            raise ValueError(f"Setting `{key}` must be a non-empty string")

    level = str(raw["log_level"]).upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"Setting `log_level` must be one of {', '.join(_LOG_LEVELS)}")

    return BuilderConfig(
        primary_color=str(raw["primary_color"]),
        secondary_color=str(raw["secondary_color"]),
        page_inset_px=float(raw["page_inset_px"]),
        component_gap_px=float(raw["component_gap_px"]),
        image_height_px=float(raw["image_height_px"]),
        frame_width_px=int(raw["frame_width_px"]),
        frame_height_px=int(raw["frame_height_px"]),
        component_id_prefix=str(raw["component_id_prefix"]),
        page_id_prefix=str(raw["page_id_prefix"]),
        log_level=level,
    )


def load_builder_config(path: str | Path | None) -> BuilderConfig:
    if path is None:
        return DEFAULT_CONFIG
    config_path = Path(path)
    if not config_path.exists():
        LOGGER.info("builder config %s not found; using defaults", config_path)
        return DEFAULT_CONFIG
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    section = raw.get("builder", raw)
    if not isinstance(section, dict):
        raise ValueError("builder config must be a TOML table")
    return builder_config_from_mapping(section)
