from __future__ import annotations

import json
import unittest

from sdui_core.actions import (
    ACTION_TYPES,
    ActionParseError,
    NamedAction,
    SerializedAction,
    StructuredAction,
    action_to_raw,
    decode_action_token,
    parse_action,
    resolve_action,
)


class ResolveActionTests(unittest.TestCase):
    def test_push_page_with_page_id(self) -> None:
        self.assertEqual(resolve_action({"type": "@pushPage", "params": {"pageId": "p2"}}), "@pushPage:p2")

    def test_push_page_target_priority(self) -> None:
        self.assertEqual(
            resolve_action({"type": "@pushPage", "params": {"pageId": "a", "page_id": "b"}, "pageId": "c"}),
            "@pushPage:a",
        )
        self.assertEqual(resolve_action({"type": "@pushPage", "params": {"page_id": "b"}, "pageId": "c"}), "@pushPage:b")
        self.assertEqual(resolve_action({"type": "@pushPage", "pageId": "c"}), "@pushPage:c")

    def test_push_page_without_target(self) -> None:
        self.assertEqual(resolve_action({"type": "@pushPage", "params": {}}), "@pushPage")

    def test_pop_page(self) -> None:
        self.assertEqual(resolve_action({"type": "@popPage"}), "@popPage")
        self.assertEqual(resolve_action("@popPage"), "@popPage")

    def test_param_preserving_types_serialize_whole_action(self) -> None:
        token = resolve_action({"type": "@toast", "params": {"message": "Saved"}})
        self.assertEqual(token, '{"type":"@toast","params":{"message":"Saved"}}')
        submit = resolve_action({"type": "@submitForm", "params": {"endpoint": "/signup"}})
        self.assertEqual(json.loads(submit), {"type": "@submitForm", "params": {"endpoint": "/signup"}})
        self.assertTrue(resolve_action({"type": "@biometricAuth"}).startswith("{"))

    def test_serialized_token_keeps_stored_key_order(self) -> None:
        token = resolve_action({"params": {"message": "Hi"}, "type": "@toast"})
        self.assertEqual(token, '{"params":{"message":"Hi"},"type":"@toast"}')

    def test_serialized_token_keeps_non_object_params(self) -> None:
        self.assertEqual(resolve_action({"type": "@toast", "params": "Saved"}), '{"type":"@toast","params":"Saved"}')
        self.assertEqual(decode_action_token(resolve_action({"type": "@toast", "params": None})), ("@toast", {}))

    def test_other_types_drop_params(self) -> None:
        self.assertEqual(resolve_action({"type": "@openUrl", "params": {"url": "https://x"}}), "@openUrl")

    def test_plain_strings_pass_through(self) -> None:
        self.assertEqual(resolve_action("@register"), "@register")
        self.assertEqual(resolve_action("@toast"), "@toast")

    def test_serialized_object_resolves_like_object(self) -> None:
        raw = json.dumps({"type": "@pushPage", "params": {"pageId": "p3"}})
        self.assertEqual(resolve_action(raw), "@pushPage:p3")

    def test_inert_actions(self) -> None:
        self.assertIsNone(resolve_action(None))
        self.assertIsNone(resolve_action(""))
        self.assertIsNone(resolve_action({"params": {"pageId": "p"}}))

    def test_resolve_accepts_parsed_actions(self) -> None:
        self.assertEqual(resolve_action(NamedAction("@register")), "@register")
        self.assertEqual(resolve_action(StructuredAction(type="@popPage")), "@popPage")


class ParseActionTests(unittest.TestCase):
    def test_parse_variants(self) -> None:
        self.assertIsNone(parse_action(None))
        self.assertEqual(parse_action("@register"), NamedAction("@register"))
        structured = parse_action({"type": "@toast", "params": {"message": "x"}, "trace": 1})
        self.assertEqual(structured, StructuredAction(type="@toast", params={"message": "x"}, extras={"trace": 1}))
        serialized = parse_action('{"type":"@toast"}')
        self.assertIsInstance(serialized, SerializedAction)

    def test_json_without_type_stays_a_name(self) -> None:
        self.assertEqual(parse_action('{"message": "hi"}'), NamedAction('{"message": "hi"}'))
        self.assertEqual(parse_action("{broken"), NamedAction("{broken"))

    def test_non_string_values_are_coerced(self) -> None:
        with self.assertLogs("sdui_core.actions", level="WARNING"):
            self.assertEqual(parse_action(42), NamedAction("42"))

    def test_raw_form_is_preserved(self) -> None:
        for raw in ("@register", '{"type": "@toast"}', {"type": "@pushPage", "pageId": "p"}, {"type": "@popPage", "params": {}}):
            self.assertEqual(action_to_raw(parse_action(raw)), raw)

    def test_null_params_and_missing_type_are_preserved(self) -> None:
        for raw in ({"type": "@toast", "params": None}, {"params": {"x": 1}}, {"params": "x", "type": "@toast"}):
            self.assertEqual(action_to_raw(parse_action(raw)), raw)
        self.assertEqual(list(action_to_raw(parse_action({"params": {}, "type": "@popPage"}))), ["params", "type"])


class VocabularyTests(unittest.TestCase):
    def test_editor_vocabulary(self) -> None:
        self.assertEqual(ACTION_TYPES, ("@pushPage", "@popPage", "@submitForm", "@toast", "@register"))
        for action_type in ACTION_TYPES:
            self.assertIsNotNone(resolve_action({"type": action_type}))


class DecodeActionTokenTests(unittest.TestCase):
    def test_decode_navigation_token(self) -> None:
        self.assertEqual(decode_action_token("@pushPage:p2"), ("@pushPage", {"pageId": "p2"}))
        self.assertEqual(decode_action_token("@pushPage:ns:page"), ("@pushPage", {"pageId": "ns:page"}))

    def test_decode_json_token(self) -> None:
        self.assertEqual(
            decode_action_token('{"type":"@toast","params":{"message":"Hi"}}'),
            ("@toast", {"message": "Hi"}),
        )

    def test_decode_bare_token(self) -> None:
        self.assertEqual(decode_action_token("@register"), ("@register", {}))

    def test_decode_rejects_malformed_json(self) -> None:
        with self.assertRaises(ActionParseError):
            decode_action_token("{oops")
        with self.assertRaisesRegex(ActionParseError, "string `type`"):
            decode_action_token('{"params": {}}')


if __name__ == "__main__":
    unittest.main()
