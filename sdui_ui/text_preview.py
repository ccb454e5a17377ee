from __future__ import annotations

from dataclasses import dataclass

from .nodes import VisualNode

_LABELLED_KINDS = ("text-input", "textarea", "date-picker")


@dataclass(frozen=True)
class TextPreviewConfig:
    indent_width: int = 2
    show_styles: bool = False

    def __post_init__(self) -> None:
        if self.indent_width < 1:
            raise ValueError("indent_width must be >= 1")


def render_text_preview(node: VisualNode, config: TextPreviewConfig | None = None) -> str:
    """Deterministic outline of a rendered page, one line per visible node."""

    cfg = config or TextPreviewConfig()
    lines: list[str] = []
    _render_node(node, depth=0, cfg=cfg, lines=lines)
    return "\n".join(lines) + "\n"


def _render_node(node: VisualNode, *, depth: int, cfg: TextPreviewConfig, lines: list[str]) -> None:
    if node.kind == "slot":
        for child in node.children:
            _render_node(child, depth=depth, cfg=cfg, lines=lines)
        return
    if node.kind == "field":
        label = next((child.text for child in node.children if child.kind == "label"), None)
        for child in node.children:
            if child.kind in _LABELLED_KINDS:
                lines.append(" " * (cfg.indent_width * depth) + _describe_field(child, label))
        return

    pad = " " * (cfg.indent_width * depth)
    lines.append(pad + _describe(node))
    if cfg.show_styles and node.style:
        style = ", ".join(f"{key}={node.style[key]}" for key in sorted(node.style))
        lines.append(f"{pad}{' ' * cfg.indent_width}style: {style}")
    if node.kind == "button":
        return
    for child in node.children:
        _render_node(child, depth=depth + 1, cfg=cfg, lines=lines)


def _describe(node: VisualNode) -> str:
    if node.kind == "page":
        title = f' "{node.text}"' if node.text else ""
        return f"page {node.node_id}{title} (bg {node.style.get('backgroundColor')})"
    if node.kind == "page-not-found":
        return f"!! {node.text}"
    if node.kind == "unsupported":
        return f"?? {node.text}"
    if node.kind in ("text", "heading"):
        return f'{node.kind} "{node.text or ""}"'
    if node.kind == "button":
        title = node.children[0].text if node.children else ""
        out = f'button "{title}" [{node.attrs.get("variant", "primary")}]'
        action = node.attrs.get("action")
        if action:
            out += f" -> {action}"
        return out
    if node.kind in _LABELLED_KINDS:
        return _describe_field(node, None)
    if node.kind == "image":
        return f"image {node.attrs.get('source', '')} (h {node.style.get('height')})"
    if node.kind == "spacer":
        return f"spacer {node.style.get('height')}"
    return f"{node.kind} {node.node_id}"


def _describe_field(node: VisualNode, label: str | None) -> str:
    out = f"{node.kind} {node.node_id}"
    if label:
        out += f' label="{label}"'
    placeholder = node.attrs.get("placeholder")
    if placeholder:
        out += f' placeholder="{placeholder}"'
    value = node.attrs.get("value")
    if value:
        out += f' value="{value}"'
    if node.kind == "textarea":
        out += f" rows={node.attrs.get('rows', 3)}"
    return out
