from __future__ import annotations

import logging
from pathlib import Path
import textwrap
from typing import Any

from PIL import Image, ImageColor, ImageDraw, ImageFont

from sdui_core.config import DEFAULT_CONFIG, BuilderConfig

from .nodes import VisualNode

LOGGER = logging.getLogger(__name__)

RGB = tuple[int, int, int]

_CHROME_BG: RGB = (17, 24, 39)
_FRAME_MARGIN = 12
_FIELD_HEIGHT = 44
_TEXTAREA_ROW_HEIGHT = 20


def render_page_png(
    node: VisualNode,
    out_path: str | Path,
    config: BuilderConfig = DEFAULT_CONFIG,
) -> Path:
    """Rasterize a rendered page into a phone-sized PNG snapshot.

    Content taller than the frame is clipped.
    """

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    width = config.frame_width_px
    height = config.frame_height_px
    image = Image.new("RGB", (width + _FRAME_MARGIN * 2, height + _FRAME_MARGIN * 2), color=_CHROME_BG)
    screen = Image.new("RGB", (width, height), color=_color(node.style.get("backgroundColor"), (255, 255, 255)))
    painter = _Painter(ImageDraw.Draw(screen), width=width, inset=int(config.page_inset_px))

    if node.kind == "page-not-found":
        painter.centered_text(node.text or "", y=height // 2, fill=(0, 0, 0))
    elif node.kind == "page":
        y = int(_number(node.style.get("padding"), config.page_inset_px))
        for slot in node.children:
            if y >= height:
                LOGGER.debug("page %s clipped at %dpx", node.node_id, y)
                break
            y = painter.slot(slot, y)
    else:
        painter.node(node, painter.inset, painter.width - painter.inset, painter.inset)

    image.paste(screen, (_FRAME_MARGIN, _FRAME_MARGIN))
    image.save(out)
    return out


class _Painter:
    def __init__(self, draw: ImageDraw.ImageDraw, *, width: int, inset: int) -> None:
        self.draw = draw
        self.width = width
        self.inset = inset
        self.font = ImageFont.load_default()

    def slot(self, slot: VisualNode, y: int) -> int:
        left = self.inset
        right = self.width - self.inset
        if slot.attrs.get("fullBleed"):
            left = 0
            right = self.width
        for child in slot.children:
            y = self.node(child, left, right, y)
        return y + int(_number(slot.style.get("marginBottom"), 0))

    def node(self, node: VisualNode, left: int, right: int, y: int) -> int:
        if node.kind in ("text", "heading", "unsupported"):
            fill = _color(node.style.get("color"), (0, 0, 0))
            return self.wrapped_text(node.text or "", left, right, y, fill=fill, size=_number(node.style.get("fontSize"), 16))
        if node.kind == "button":
            return self.button(node, left, right, y)
        if node.kind == "field":
            for child in node.children:
                y = self.node(child, left, right, y)
            return y + int(_number(node.style.get("marginBottom"), 0))
        if node.kind == "label":
            return self.wrapped_text(node.text or "", left, right, y, fill=(0, 0, 0), size=14) + 4
        if node.kind in ("text-input", "textarea", "date-picker"):
            return self.input_box(node, left, right, y)
        if node.kind == "image":
            return self.image_box(node, left, right, y)
        if node.kind == "spacer":
            return y + int(_number(node.style.get("height"), 16))
        for child in node.children:
            y = self.node(child, left, right, y)
        return y

    def wrapped_text(self, text: str, left: int, right: int, y: int, *, fill: RGB, size: float) -> int:
        line_height = max(12, int(size * 1.3))
        columns = max(8, (right - left) // max(6, int(size * 0.55)))
        for line in textwrap.wrap(text, width=columns) or [""]:
            self.draw.text((left, y), line, fill=fill, font=self.font)
            y += line_height
        return y

    def centered_text(self, text: str, *, y: int, fill: RGB) -> None:
        x0, _, x1, _ = self.draw.textbbox((0, 0), text, font=self.font)
        self.draw.text((max(0, (self.width - (x1 - x0)) // 2), y), text, fill=fill, font=self.font)

    def button(self, node: VisualNode, left: int, right: int, y: int) -> int:
        height = int(_number(node.style.get("minHeight"), _FIELD_HEIGHT))
        background = node.style.get("backgroundColor")
        fill = None if background == "transparent" else _color(background, (3, 2, 19))
        outline = _color(node.style.get("borderColor"), (3, 2, 19))
        self.draw.rounded_rectangle((left, y, right, y + height), radius=8, fill=fill, outline=outline)
        label = node.children[0] if node.children else None
        if label is not None and label.text:
            x0, y0, x1, y1 = self.draw.textbbox((0, 0), label.text, font=self.font)
            text_x = left + max(0, ((right - left) - (x1 - x0)) // 2)
            text_y = y + max(0, (height - (y1 - y0)) // 2)
            self.draw.text((text_x, text_y), label.text, fill=_color(label.style.get("color"), (255, 255, 255)), font=self.font)
        return y + height

    def input_box(self, node: VisualNode, left: int, right: int, y: int) -> int:
        height = _FIELD_HEIGHT
        if node.kind == "textarea":
            height = int(node.attrs.get("rows", 3)) * _TEXTAREA_ROW_HEIGHT + 24
        self.draw.rounded_rectangle(
            (left, y, right, y + height),
            radius=8,
            fill=_color(node.style.get("backgroundColor"), (255, 255, 255)),
            outline=_color(node.style.get("borderColor"), (224, 224, 224)),
        )
        value = node.attrs.get("value")
        text = str(value) if value else str(node.attrs.get("placeholder") or "")
        fill: RGB = (0, 0, 0) if value else (150, 150, 150)
        self.draw.text((left + 12, y + 14), text, fill=fill, font=self.font)
        return y + height

    def image_box(self, node: VisualNode, left: int, right: int, y: int) -> int:
        height = int(_number(node.style.get("height"), 200))
        self.draw.rectangle((left, y, right, y + height), fill=(226, 232, 240))
        self.draw.line((left, y, right, y + height), fill=(203, 213, 225))
        self.draw.line((left, y + height, right, y), fill=(203, 213, 225))
        source = str(node.attrs.get("source") or "")
        if source:
            self.draw.text((left + 8, y + 8), source[:48], fill=(71, 85, 105), font=self.font)
        return y + height


def _color(value: Any, default: RGB) -> RGB:
    if not isinstance(value, str) or not value:
        return default
    try:
        rgb = ImageColor.getrgb(value)
    except ValueError:
        LOGGER.debug("unrecognized color %r", value)
        return default
    return rgb[0], rgb[1], rgb[2]


def _number(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)
