from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Sequence

from .actions import POP_PAGE, PUSH_PAGE
from .schema import DEFAULT_PAGE_ID, Page, Schema

LOGGER = logging.getLogger(__name__)


def resolve_initial_page_id(schema: Schema, stored_page_id: str | None = None) -> str:
    """Pick the page a preview opens on.

    Priority: a stored page id that still exists, then `navigation.initialPageId`,
    then the first page, then the literal `welcome`.
    """

    page_ids = schema.page_ids()
    if stored_page_id and stored_page_id in page_ids:
        return stored_page_id
    initial = schema.navigation.initial_page_id
    if initial and initial in page_ids:
        return initial
    if initial:
        LOGGER.info("navigation.initialPageId `%s` does not match a page; ignoring it", initial)
    if page_ids:
        return page_ids[0]
    return DEFAULT_PAGE_ID


@dataclass
class NavigationController:
    """Stack of visited page ids; the last entry is the current page."""

    history: list[str] = field(default_factory=lambda: [DEFAULT_PAGE_ID])

    def __post_init__(self) -> None:
        if not self.history:
            raise ValueError("navigation history must start with a page id")

    @staticmethod
    def from_schema(schema: Schema, stored_page_id: str | None = None) -> "NavigationController":
        controller = NavigationController(history=[resolve_initial_page_id(schema, stored_page_id)])
        controller.reset(controller.current, schema.pages)
        return controller

    @property
    def current(self) -> str:
        return self.history[-1]

    @property
    def depth(self) -> int:
        return len(self.history)

    def push(self, page_id: str) -> str:
        self.history.append(page_id)
        return self.current

    def pop(self) -> str:
        if len(self.history) > 1:
            self.history.pop()
        return self.current

    def reset(self, page_id: str, all_pages: Sequence[Page]) -> list[str]:
        """Seed history as if the user walked forward from the first page.

        Ids not present in `all_pages` start a single-entry history.
        """

        ids = [page.id for page in all_pages]
        if page_id in ids:
            index = ids.index(page_id)
            self.history = ids[: index + 1]
        else:
            self.history = [page_id]
        return list(self.history)

    def apply_token(self, token: str) -> bool:
        """Apply a navigation token; returns True when the token was navigational."""

        if token == POP_PAGE:
            self.pop()
            return True
        if token.startswith(f"{PUSH_PAGE}:"):
            _, page_id = token.split(":", 1)
            if page_id:
                self.push(page_id)
            return True
        if token == PUSH_PAGE:
            LOGGER.info("ignoring @pushPage without a destination")
            return True
        return False
