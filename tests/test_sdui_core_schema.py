from __future__ import annotations

import datetime as dt
import unittest

from sdui_core.actions import NamedAction, SerializedAction, StructuredAction
from sdui_core.schema import (
    ButtonProps,
    Component,
    OpaqueProps,
    Page,
    Schema,
    SchemaValidationError,
    SpacerProps,
    TextInputProps,
    TextareaProps,
    default_props_for,
    default_schema,
    sdui_schema,
)


def _document() -> dict:
    return {
        "id": "onboarding",
        "version": "2.1",
        "name": "Onboarding",
        "description": "Sign-up flow",
        "slug": "onboarding",
        "is_public": True,
        "is_published": False,
        "published_at": None,
        "navigation": {"guestPageId": "home", "initialPageId": "home", "transition": "slide"},
        "pages": [
            {
                "id": "home",
                "order": 0,
                "title": "Home",
                "backgroundColor": "#F5F5F5",
                "components": [
                    {"id": "h1", "type": "heading", "props": {"text": "Welcome", "style": {"margin": 4}}},
                    {
                        "id": "go",
                        "type": "button",
                        "props": {"title": "Next", "variant": "outline"},
                        "action": {"type": "@pushPage", "params": {"pageId": "details"}},
                        "gridRow": 1,
                        "rowSpan": 1,
                    },
                    {"id": "reg", "type": "button", "props": {"title": "Join"}, "action": "@register"},
                    {
                        "id": "email",
                        "type": "text-input",
                        "props": {"label": "Email", "keyboardType": "email-address"},
                        "validation": {"required": True, "minLength": 3, "pattern": ".+@.+"},
                        "analyticsTag": "email-field",
                    },
                ],
            },
            {
                "id": "details",
                "order": 1,
                "title": "Details",
                "components": [
                    {
                        "id": "toast",
                        "type": "button",
                        "props": {"title": "Ping"},
                        "action": "{\"type\":\"@toast\",\"params\":{\"message\":\"Hi\"}}",
                    },
                    {"id": "carousel", "type": "carousel", "props": {"items": [1, 2, 3]}},
                ],
            },
        ],
        "metadata": {"revision": 4, "createdBy": "builder", "tags": ["beta"]},
        "created_at": "2026-01-01T00:00:00.000Z",
        "updated_at": "2026-01-02T00:00:00.000Z",
        "permissions": ["camera"],
        "statuses": ["draft"],
        "payment": {"currency": "USD"},
        "theme": {"mode": "light"},
    }


class SchemaModelTests(unittest.TestCase):
    def test_round_trip_preserves_document(self) -> None:
        raw = _document()
        self.assertEqual(Schema.from_dict(raw).to_dict(), raw)

    def test_round_trip_preserves_explicit_nulls_and_action_shapes(self) -> None:
        components = [
            {"id": "a", "type": "text", "props": None, "action": None, "validation": None, "gridRow": None},
            {"id": "b", "type": "button", "props": {}, "action": {"type": "@toast", "params": None}},
            {"id": "c", "type": "button", "props": {}, "action": {"params": {"x": 1}}},
            {"id": "d", "type": "button", "props": {}, "action": {"params": {"message": "m"}, "type": "@toast"}},
        ]
        raw = {"id": "app", "pages": [{"id": "p", "order": 0, "title": "P", "components": components}]}
        exported = Schema.from_dict(raw).to_dict()
        self.assertEqual(exported["pages"][0]["components"], components)
        self.assertEqual(list(exported["pages"][0]["components"][3]["action"]), ["params", "type"])

    def test_action_shapes_parse_into_sum_type(self) -> None:
        schema = Schema.from_dict(_document())
        _, go = schema.find_component("go")
        _, reg = schema.find_component("reg")
        _, toast = schema.find_component("toast")
        self.assertIsInstance(go.action, StructuredAction)
        self.assertEqual(reg.action, NamedAction("@register"))
        self.assertIsInstance(toast.action, SerializedAction)
        self.assertEqual(toast.action.decoded.params, {"message": "Hi"})

    def test_missing_version_defaults(self) -> None:
        schema = Schema.from_dict({"pages": [{"id": "a", "components": []}]})
        self.assertEqual(schema.version, "1.0")
        self.assertEqual(schema.id, "builder-app")

    def test_slug_used_when_id_missing(self) -> None:
        schema = Schema.from_dict({"slug": "my-app", "pages": [{"id": "a"}]})
        self.assertEqual(schema.id, "my-app")

    def test_page_order_defaults_to_position(self) -> None:
        schema = Schema.from_dict({"pages": [{"id": "a"}, {"id": "b"}]})
        self.assertEqual([p.order for p in schema.pages], [0, 1])

    def test_duplicate_page_ids_rejected(self) -> None:
        with self.assertRaisesRegex(SchemaValidationError, "duplicate page id"):
            Schema.from_dict({"pages": [{"id": "a"}, {"id": "a"}]})

    def test_component_requires_id(self) -> None:
        with self.assertRaisesRegex(SchemaValidationError, "id must be a non-empty string"):
            Schema.from_dict({"pages": [{"id": "a", "components": [{"type": "text"}]}]})
        with self.assertRaises(SchemaValidationError):
            Component(id="  ", type="text")

    def test_components_must_be_list(self) -> None:
        with self.assertRaisesRegex(SchemaValidationError, "components must be a list"):
            Page.from_dict({"id": "a", "components": {"x": 1}})

    def test_empty_pages_become_default_page(self) -> None:
        schema = Schema.from_dict({"pages": []})
        self.assertEqual(schema.page_ids(), ["welcome"])
        self.assertEqual(schema.pages[0].title, "Welcome")

    def test_lookup_helpers(self) -> None:
        schema = Schema.from_dict(_document())
        self.assertEqual(schema.page_ids(), ["home", "details"])
        self.assertEqual(schema.component_ids(), ["h1", "go", "reg", "email", "toast", "carousel"])
        page, component = schema.find_component("toast")
        self.assertEqual(page.id, "details")
        self.assertEqual(component.type, "button")
        self.assertIsNone(schema.find_component("nope"))
        self.assertIsNone(schema.page("nope"))


class TypedPropsTests(unittest.TestCase):
    def test_button_props_keep_unknown_variant_for_renderer(self) -> None:
        props = Component(id="b", type="button", props={"title": "Go", "variant": "fancy", "testID": "x"}).typed_props()
        self.assertIsInstance(props, ButtonProps)
        assert isinstance(props, ButtonProps)
        self.assertEqual(props.variant, "fancy")
        self.assertEqual(props.extra, {"testID": "x"})

    def test_text_input_auto_capitalize_defaults_off(self) -> None:
        props = Component(id="i", type="text-input", props={"label": "Name"}).typed_props()
        assert isinstance(props, TextInputProps)
        self.assertEqual(props.auto_capitalize, "off")
        self.assertEqual(props.keyboard_type, "default")

    def test_textarea_rows_fall_back_to_three(self) -> None:
        props = Component(id="t", type="textarea", props={"rows": 0}).typed_props()
        assert isinstance(props, TextareaProps)
        self.assertEqual(props.rows, 3)
        self.assertEqual(props.auto_capitalize, "sentences")

    def test_spacer_size_default(self) -> None:
        props = Component(id="s", type="spacer", props={}).typed_props()
        assert isinstance(props, SpacerProps)
        self.assertEqual(props.size, 16.0)

    def test_unknown_type_is_opaque(self) -> None:
        props = Component(id="c", type="carousel", props={"items": [1]}).typed_props()
        self.assertEqual(props, OpaqueProps(values={"items": [1]}))


class DefaultsTests(unittest.TestCase):
    def test_default_props_are_copies(self) -> None:
        props = default_props_for("text")
        props["style"]["color"] = "red"
        self.assertEqual(default_props_for("text"), {"text": "Sample Text", "style": {}})
        self.assertEqual(default_props_for("carousel"), {})

    def test_default_schema(self) -> None:
        schema = default_schema(dt.datetime(2026, 3, 1, 12, 0, tzinfo=dt.timezone.utc))
        self.assertEqual(schema.id, "builder-app")
        self.assertEqual(schema.name, "Builder App")
        self.assertEqual(schema.navigation.initial_page_id, "welcome")
        self.assertEqual(schema.page_ids(), ["welcome"])
        self.assertEqual(schema.metadata.revision, 1)
        self.assertEqual(schema.created_at, "2026-03-01T12:00:00.000Z")

    def test_json_schema_is_copied(self) -> None:
        first = sdui_schema()
        first["title"] = "changed"
        self.assertEqual(sdui_schema()["title"], "SDUI Mini-App Schema")
        self.assertIn("pages", sdui_schema()["required"])


if __name__ == "__main__":
    unittest.main()
