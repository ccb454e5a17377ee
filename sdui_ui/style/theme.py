from __future__ import annotations

from dataclasses import asdict, dataclass
import re
from typing import Any, Mapping

from sdui_core.config import BuilderConfig

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


@dataclass(frozen=True)
class ThemeTokens:
    """Light color scheme used by rendered pages and the builder chrome."""

    primary: str = "#030213"
    secondary: str = "#468B97"
    accent: str = "#F3AA60"
    destructive: str = "#EF6262"
    background: str = "#FFFFFF"
    foreground: str = "#030213"
    muted: str = "#F1F5F9"
    border: str = "#E2E8F0"
    input: str = "#F8FAFC"
    ring: str = "#030213"


DEFAULT_TOKENS = ThemeTokens()


def validate_theme_tokens(overrides: Mapping[str, Any] | None = None) -> ThemeTokens:
    """Validate and merge token overrides against the default light scheme."""

    raw: dict[str, Any] = asdict(DEFAULT_TOKENS)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown theme token: {key}")
            raw[key] = value

    for key, value in raw.items():
        if not isinstance(value, str) or not _HEX_COLOR.match(value):
            raise ValueError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    return ThemeTokens(**{key: str(value) for key, value in raw.items()})


def theme_from_config(config: BuilderConfig) -> ThemeTokens:
    return validate_theme_tokens({"primary": config.primary_color, "secondary": config.secondary_color})
