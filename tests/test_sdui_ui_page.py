from __future__ import annotations

import unittest

from sdui_core.config import builder_config_from_mapping
from sdui_core.schema import Schema
from sdui_ui.page import PageRenderer, render_page


def _schema() -> Schema:
    return Schema.from_dict(
        {
            "id": "app",
            "pages": [
                {
                    "id": "home",
                    "title": "Home",
                    "components": [
                        {"id": "hello", "type": "text", "props": {"text": "Hello"}},
                        {"id": "hero", "type": "image", "props": {"source": "hero.png"}},
                        {"id": "name", "type": "text-input", "props": {"label": "Name"}},
                        {"id": "go", "type": "button", "props": {"title": "Go"}, "action": "@pushPage:next"},
                    ],
                },
                {"id": "next", "title": "Next", "backgroundColor": "#101010", "components": []},
            ],
        }
    )


class PageRendererTests(unittest.TestCase):
    def test_missing_page_renders_placeholder(self) -> None:
        result = PageRenderer(_schema(), "nope").render()
        self.assertFalse(result.found)
        self.assertEqual(result.missing_page_id, "nope")
        self.assertEqual(result.root.kind, "page-not-found")
        self.assertEqual(result.root.text, 'Page "nope" not found in schema')

    def test_null_schema_is_a_programming_error(self) -> None:
        with self.assertRaises(TypeError):
            PageRenderer(None, "home")  # type: ignore[arg-type]

    def test_components_render_in_order_with_gaps(self) -> None:
        root = render_page(_schema(), "home")
        self.assertEqual(root.kind, "page")
        slots = root.children
        self.assertEqual([slot.attrs["componentId"] for slot in slots], ["hello", "hero", "name", "go"])
        self.assertEqual([slot.style["marginBottom"] for slot in slots], [8.0, 8.0, 8.0, 0])
        self.assertEqual(root.style["padding"], 16.0)

    def test_images_bleed_past_page_inset(self) -> None:
        slots = render_page(_schema(), "home").children
        hero = slots[1]
        self.assertTrue(hero.attrs["fullBleed"])
        self.assertEqual((hero.style["marginLeft"], hero.style["marginRight"]), (-16.0, -16.0))
        self.assertNotIn("marginLeft", slots[0].style)

    def test_config_controls_layout(self) -> None:
        config = builder_config_from_mapping({"page_inset_px": 24, "component_gap_px": 12})
        root = render_page(_schema(), "home", config=config)
        self.assertEqual(root.style["padding"], 24.0)
        self.assertEqual(root.children[0].style["marginBottom"], 12.0)
        self.assertEqual(root.children[1].style["marginLeft"], -24.0)

    def test_page_background(self) -> None:
        self.assertEqual(render_page(_schema(), "home").style["backgroundColor"], "#FFFFFF")
        self.assertEqual(render_page(_schema(), "next").style["backgroundColor"], "#101010")

    def test_empty_page(self) -> None:
        root = render_page(_schema(), "next")
        self.assertEqual(root.children, ())

    def test_actions_reach_callback(self) -> None:
        tokens: list[str] = []
        root = render_page(_schema(), "home", tokens.append)
        root.find("go").click()
        self.assertEqual(tokens, ["@pushPage:next"])

    def test_form_data_is_scoped_to_page(self) -> None:
        renderer = PageRenderer(_schema(), "home")
        renderer.render().root.find("name").change("Ada")
        self.assertEqual(renderer.form_data, {"name": "Ada"})
        self.assertEqual(renderer.render().root.find("name").attrs["value"], "Ada")

        renderer.show("home")
        self.assertEqual(renderer.form_data, {"name": "Ada"})
        renderer.show("next")
        self.assertEqual(renderer.form_data, {})
        renderer.show("home")
        self.assertEqual(renderer.render().root.find("name").attrs["value"], "")


if __name__ == "__main__":
    unittest.main()
