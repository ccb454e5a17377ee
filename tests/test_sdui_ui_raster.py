from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from PIL import Image

from sdui_core.config import builder_config_from_mapping
from sdui_core.schema import Schema
from sdui_ui.page import render_page
from sdui_ui.raster import render_page_png


def _schema() -> Schema:
    return Schema.from_dict(
        {
            "id": "app",
            "pages": [
                {
                    "id": "home",
                    "title": "Home",
                    "backgroundColor": "#FF0000",
                    "components": [
                        {"id": "h1", "type": "heading", "props": {"text": "Welcome to the preview"}},
                        {"id": "hero", "type": "image", "props": {"source": "https://example.com/hero.png"}},
                        {"id": "bio", "type": "textarea", "props": {"label": "Bio", "placeholder": "About you"}},
                        {"id": "go", "type": "button", "props": {"title": "Go", "variant": "outline"}},
                        {"id": "gap", "type": "spacer", "props": {"size": 2000}},
                        {"id": "late", "type": "text", "props": {"text": "clipped"}},
                    ],
                }
            ],
        }
    )


class RasterPreviewTests(unittest.TestCase):
    def test_writes_framed_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = render_page_png(render_page(_schema(), "home"), Path(tmp) / "shots" / "home.png")
            self.assertTrue(out.exists())
            with Image.open(out) as image:
                rgb = image.convert("RGB")
                self.assertEqual(rgb.size, (384, 724))
                self.assertEqual(rgb.getpixel((0, 0)), (17, 24, 39))
                self.assertEqual(rgb.getpixel((12 + 2, 12 + 690)), (255, 0, 0))

    def test_custom_frame_size(self) -> None:
        config = builder_config_from_mapping({"frame_width_px": 200, "frame_height_px": 300})
        with tempfile.TemporaryDirectory() as tmp:
            out = render_page_png(render_page(_schema(), "home", config=config), Path(tmp) / "small.png", config)
            with Image.open(out) as image:
                self.assertEqual(image.size, (224, 324))

    def test_page_not_found_snapshot(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = render_page_png(render_page(_schema(), "missing"), Path(tmp) / "missing.png")
            with Image.open(out) as image:
                self.assertEqual(image.convert("RGB").getpixel((12 + 2, 12 + 2)), (255, 255, 255))


if __name__ == "__main__":
    unittest.main()
