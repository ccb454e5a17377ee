from __future__ import annotations

import logging

from sdui_ui.page import PageRenderer, PageRenderResult

from .config import DEFAULT_CONFIG, BuilderConfig
from .executor import ActionOutcome, Notification, PreviewActionExecutor
from .navigation import NavigationController
from .schema import Schema

LOGGER = logging.getLogger(__name__)


class PreviewSession:
    """Interactive preview of a schema: a navigation stack over a page renderer.

    Clicks and edits are addressed by component id and act on the page that is
    current at the time of the call.
    """

    def __init__(
        self,
        schema: Schema,
        stored_page_id: str | None = None,
        *,
        config: BuilderConfig = DEFAULT_CONFIG,
    ) -> None:
        self.schema = schema
        self.navigation = NavigationController.from_schema(schema, stored_page_id)
        self._notifications: list[Notification] = []
        self._last_outcome: ActionOutcome | None = None
        self.executor = PreviewActionExecutor(self.navigation, notify=self._notifications.append)
        self.renderer = PageRenderer(schema, self.navigation.current, self._dispatch, config=config)
        LOGGER.debug("preview opened on %s (history %s)", self.navigation.current, self.navigation.history)

    @property
    def current_page_id(self) -> str:
        return self.navigation.current

    @property
    def history(self) -> list[str]:
        return list(self.navigation.history)

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return tuple(self._notifications)

    @property
    def form_data(self) -> dict[str, str]:
        return self.renderer.form_data

    def render(self) -> PageRenderResult:
        self.renderer.show(self.navigation.current)
        return self.renderer.render()

    def click(self, component_id: str) -> ActionOutcome | None:
        node = self.render().root.find(component_id)
        if node is None:
            LOGGER.info("click: no component `%s` on page %s", component_id, self.current_page_id)
            return None
        self._last_outcome = None
        node.click()
        return self._last_outcome

    def change(self, component_id: str, value: str) -> bool:
        node = self.render().root.find(component_id)
        if node is None:
            LOGGER.info("change: no component `%s` on page %s", component_id, self.current_page_id)
            return False
        return node.change(value)

    def back(self) -> str:
        page_id = self.navigation.pop()
        self.renderer.show(page_id)
        return page_id

    def _dispatch(self, token: str) -> None:
        self._last_outcome = self.executor.execute(token)
        self.renderer.show(self.navigation.current)
