"""Style resolution and theme tokens for rendered SDUI pages."""

from .resolver import BOX_PROPERTIES, BOX_SIDES, PASSTHROUGH_PROPERTIES, resolve_style
from .theme import DEFAULT_TOKENS, ThemeTokens, theme_from_config, validate_theme_tokens

__all__ = [
    "BOX_PROPERTIES",
    "BOX_SIDES",
    "DEFAULT_TOKENS",
    "PASSTHROUGH_PROPERTIES",
    "ThemeTokens",
    "resolve_style",
    "theme_from_config",
    "validate_theme_tokens",
]
