from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable

from sdui_core.config import DEFAULT_CONFIG, BuilderConfig
from sdui_core.schema import Page, Schema

from .components import ComponentRenderer, RenderContext
from .nodes import VisualNode
from .style.theme import ThemeTokens, theme_from_config

LOGGER = logging.getLogger(__name__)

ActionCallback = Callable[[str], None]


@dataclass(frozen=True)
class PageRenderResult:
    root: VisualNode
    page_id: str
    missing_page_id: str | None = None

    @property
    def found(self) -> bool:
        return self.missing_page_id is None


class PageRenderer:
    """Renders one page of a schema and owns that page's transient form data.

    Form data is dropped whenever the renderer is shown a different page.
    """

    def __init__(
        self,
        schema: Schema,
        current_page_id: str,
        on_action: ActionCallback | None = None,
        *,
        theme: ThemeTokens | None = None,
        config: BuilderConfig = DEFAULT_CONFIG,
    ) -> None:
        if schema is None:
            raise TypeError("PageRenderer requires a schema")
        self._schema = schema
        self._page_id = current_page_id
        self._on_action = on_action
        self._config = config
        self._theme = theme or theme_from_config(config)
        self._form_data: dict[str, str] = {}

    @property
    def page_id(self) -> str:
        return self._page_id

    @property
    def form_data(self) -> dict[str, str]:
        return dict(self._form_data)

    def set_form_value(self, component_id: str, value: str) -> None:
        self._form_data[component_id] = value

    def show(self, page_id: str, schema: Schema | None = None) -> None:
        if schema is not None:
            self._schema = schema
        if page_id != self._page_id:
            LOGGER.debug("page renderer remounted for %s; clearing form data", page_id)
            self._form_data.clear()
            self._page_id = page_id

    def render(self) -> PageRenderResult:
        page = self._schema.page(self._page_id)
        if page is None:
            LOGGER.warning("page `%s` not found in schema `%s`", self._page_id, self._schema.id)
            return PageRenderResult(
                root=page_not_found_node(self._page_id),
                page_id=self._page_id,
                missing_page_id=self._page_id,
            )
        return PageRenderResult(root=self._render_page(page), page_id=page.id)

    def _render_page(self, page: Page) -> VisualNode:
        ctx = RenderContext(
            theme=self._theme,
            config=self._config,
            form_data=self._form_data,
            on_form_data_change=self.set_form_value,
            on_action=self._on_action,
        )
        renderer = ComponentRenderer(ctx)
        inset = self._config.page_inset_px
        gap = self._config.component_gap_px
        last = len(page.components) - 1
        slots: list[VisualNode] = []
        for index, component in enumerate(page.components):
            full_bleed = component.type == "image"
            slot_style: dict[str, Any] = {"marginBottom": gap if index < last else 0}
            if full_bleed:
                slot_style.update(marginLeft=-inset, marginRight=-inset)
            slots.append(
                VisualNode(
                    kind="slot",
                    node_id=f"{component.id}__slot",
                    style=slot_style,
                    attrs={"componentId": component.id, "fullBleed": full_bleed},
                    children=(renderer.render(component),),
                )
            )
        background = page.extras.get("backgroundColor") or self._theme.background
        return VisualNode(
            kind="page",
            node_id=page.id,
            text=page.title or None,
            style={"padding": inset, "backgroundColor": background, "minHeight": "100%"},
            attrs={"order": page.order},
            children=tuple(slots),
        )


def page_not_found_node(page_id: str) -> VisualNode:
    return VisualNode(
        kind="page-not-found",
        node_id=page_id,
        text=f'Page "{page_id}" not found in schema',
        style={"padding": 20, "textAlign": "center"},
    )


def render_page(
    schema: Schema,
    current_page_id: str,
    on_action: ActionCallback | None = None,
    *,
    theme: ThemeTokens | None = None,
    config: BuilderConfig = DEFAULT_CONFIG,
) -> VisualNode:
    """One-shot render; form data starts empty."""

    return PageRenderer(schema, current_page_id, on_action, theme=theme, config=config).render().root
