from __future__ import annotations

import unittest

from sdui_core.executor import Notification
from sdui_core.preview import PreviewSession
from sdui_core.schema import Schema


def _signup_schema() -> Schema:
    return Schema.from_dict(
        {
            "id": "signup",
            "name": "Signup",
            "navigation": {"initialPageId": "home"},
            "pages": [
                {
                    "id": "home",
                    "order": 0,
                    "title": "Home",
                    "components": [
                        {"id": "title", "type": "heading", "props": {"text": "Welcome"}},
                        {"id": "name", "type": "text-input", "props": {"label": "Name", "placeholder": "Your name"}},
                        {
                            "id": "next",
                            "type": "button",
                            "props": {"title": "Next"},
                            "action": {"type": "@pushPage", "params": {"pageId": "details"}},
                        },
                    ],
                },
                {
                    "id": "details",
                    "order": 1,
                    "title": "Details",
                    "backgroundColor": "#FF0000",
                    "components": [
                        {"id": "hero", "type": "image", "props": {"source": "https://example.com/hero.png"}},
                        {"id": "bio", "type": "textarea", "props": {"label": "Bio", "rows": 5}},
                        {
                            "id": "save",
                            "type": "button",
                            "props": {"title": "Save", "variant": "secondary"},
                            "action": {"type": "@toast", "params": {"message": "Saved"}},
                        },
                        {"id": "back", "type": "button", "props": {"title": "Back", "variant": "outline"}, "action": "@popPage"},
                    ],
                },
            ],
        }
    )


class PreviewSessionTests(unittest.TestCase):
    def test_opens_on_initial_page(self) -> None:
        session = PreviewSession(_signup_schema())
        result = session.render()
        self.assertTrue(result.found)
        self.assertEqual(result.page_id, "home")
        self.assertEqual(session.history, ["home"])

    def test_stored_page_seeds_history(self) -> None:
        session = PreviewSession(_signup_schema(), "details")
        self.assertEqual(session.history, ["home", "details"])
        session.click("back")
        self.assertEqual(session.current_page_id, "home")

    def test_typing_updates_form_data(self) -> None:
        session = PreviewSession(_signup_schema())
        self.assertTrue(session.change("name", "Ada"))
        self.assertEqual(session.form_data, {"name": "Ada"})
        field = session.render().root.find("name")
        self.assertEqual(field.attrs["value"], "Ada")

    def test_navigation_resets_form_data(self) -> None:
        session = PreviewSession(_signup_schema())
        session.change("name", "Ada")
        outcome = session.click("next")
        self.assertEqual(outcome.kind, "navigated")
        self.assertEqual(session.current_page_id, "details")
        self.assertEqual(session.form_data, {})
        session.click("back")
        self.assertEqual(session.history, ["home"])
        self.assertEqual(session.render().root.find("name").attrs["value"], "")

    def test_toast_notification(self) -> None:
        session = PreviewSession(_signup_schema(), "details")
        outcome = session.click("save")
        self.assertEqual(outcome.notification, Notification("info", "Saved"))
        self.assertEqual(session.notifications, (Notification("info", "Saved"),))

    def test_click_misses(self) -> None:
        session = PreviewSession(_signup_schema())
        self.assertIsNone(session.click("missing"))
        self.assertIsNone(session.click("title"))
        self.assertFalse(session.change("missing", "x"))

    def test_back_at_root_stays(self) -> None:
        session = PreviewSession(_signup_schema())
        self.assertEqual(session.back(), "home")


if __name__ == "__main__":
    unittest.main()
