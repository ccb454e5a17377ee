"""Rendering of SDUI schemas into visual node trees and previews."""

from .components import ComponentRenderer, RenderContext, render_component
from .nodes import VisualNode
from .page import PageRenderResult, PageRenderer, page_not_found_node, render_page
from .raster import render_page_png
from .style import ThemeTokens, resolve_style, theme_from_config, validate_theme_tokens
from .text_preview import TextPreviewConfig, render_text_preview

__all__ = [
    "ComponentRenderer",
    "PageRenderResult",
    "PageRenderer",
    "RenderContext",
    "TextPreviewConfig",
    "ThemeTokens",
    "VisualNode",
    "page_not_found_node",
    "render_component",
    "render_page",
    "render_page_png",
    "render_text_preview",
    "resolve_style",
    "theme_from_config",
    "validate_theme_tokens",
]
