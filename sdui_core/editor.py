"""Editor application state as an explicit reducer.

`reduce(state, event)` never mutates its input. Importing is a phase of the
state machine: while it is active, navigation-driven page switching is held
back until the import completes or is cancelled.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
import logging
import time
from typing import Any, Literal, Mapping, Union

from .config import DEFAULT_CONFIG, BuilderConfig
from .executor import Notification
from .importer import SchemaImportError, export_filename, export_schema, import_schema, parse_schema_json
from .mutation import (
    Clock,
    add_component,
    add_page,
    delete_component,
    delete_page,
    reorder_components,
    update_component,
    update_page,
    update_settings,
)
from .preview import PreviewSession
from .schema import Component, Navigation, Page, Schema, default_schema

LOGGER = logging.getLogger(__name__)

EditorPhase = Literal["editing", "importing"]


@dataclass(frozen=True)
class EditorState:
    schema: Schema
    current_page_id: str
    selected_component_id: str | None = None
    phase: EditorPhase = "editing"
    last_navigation: Navigation | None = None
    notifications: tuple[Notification, ...] = ()

    @staticmethod
    def initial(schema: Schema | None = None) -> "EditorState":
        doc = schema or default_schema()
        return EditorState(
            schema=doc,
            current_page_id=_navigation_target(doc),
            last_navigation=doc.navigation,
        )

    @property
    def current_page(self) -> Page | None:
        return self.schema.page(self.current_page_id)

    @property
    def selected_component(self) -> Component | None:
        if self.selected_component_id is None:
            return None
        found = self.schema.find_component(self.selected_component_id)
        return None if found is None else found[1]


@dataclass(frozen=True)
class SelectComponent:
    component_id: str | None


@dataclass(frozen=True)
class UpdateComponent:
    component: Component


@dataclass(frozen=True)
class DeleteComponent:
    component_id: str


@dataclass(frozen=True)
class AddComponent:
    component_type: str
    page_id: str | None = None


@dataclass(frozen=True)
class ReorderComponents:
    components: tuple[Component, ...]
    page_id: str | None = None


@dataclass(frozen=True)
class SelectPage:
    page_id: str


@dataclass(frozen=True)
class UpdatePage:
    page: Page


@dataclass(frozen=True)
class AddPage:
    pass


@dataclass(frozen=True)
class DeletePage:
    page_id: str


@dataclass(frozen=True)
class UpdateSettings:
    fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BeginImport:
    pass


@dataclass(frozen=True)
class CompleteImport:
    """`document` is either raw JSON text or an already-parsed document."""

    document: object


@dataclass(frozen=True)
class CancelImport:
    pass


EditorEvent = Union[
    SelectComponent,
    UpdateComponent,
    DeleteComponent,
    AddComponent,
    ReorderComponents,
    SelectPage,
    UpdatePage,
    AddPage,
    DeletePage,
    UpdateSettings,
    BeginImport,
    CompleteImport,
    CancelImport,
]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def reduce(
    state: EditorState,
    event: EditorEvent,
    *,
    clock: Clock = _now_ms,
    config: BuilderConfig = DEFAULT_CONFIG,
) -> EditorState:
    if isinstance(event, SelectComponent):
        return dataclasses.replace(state, selected_component_id=event.component_id)
    if isinstance(event, SelectPage):
        if state.schema.page(event.page_id) is None:
            LOGGER.info("select page: `%s` not found", event.page_id)
            return state
        return dataclasses.replace(state, current_page_id=event.page_id)
    if isinstance(event, BeginImport):
        return dataclasses.replace(state, phase="importing")
    if isinstance(event, CancelImport):
        if state.phase != "importing":
            return state
        return _sync_navigation(dataclasses.replace(state, phase="editing"))
    if isinstance(event, CompleteImport):
        return _complete_import(state, event)

    schema = state.schema
    selected = state.selected_component_id
    current = state.current_page_id
    if isinstance(event, UpdateComponent):
        schema = update_component(schema, event.component)
    elif isinstance(event, DeleteComponent):
        schema = delete_component(schema, event.component_id)
        if selected == event.component_id:
            selected = None
    elif isinstance(event, AddComponent):
        schema = add_component(
            schema,
            event.page_id or current,
            event.component_type,
            clock=clock,
            id_prefix=config.component_id_prefix,
        )
    elif isinstance(event, ReorderComponents):
        schema = reorder_components(schema, event.components, page_id=event.page_id)
    elif isinstance(event, UpdatePage):
        schema = update_page(schema, event.page)
    elif isinstance(event, AddPage):
        schema = add_page(schema, clock=clock, id_prefix=config.page_id_prefix)
        current = schema.pages[-1].id
    elif isinstance(event, DeletePage):
        doomed = schema.page(event.page_id)
        schema = delete_page(schema, event.page_id)
        if doomed is not None and selected is not None and doomed.component(selected) is not None:
            selected = None
        if current == event.page_id:
            current = schema.pages[0].id
    elif isinstance(event, UpdateSettings):
        schema = update_settings(schema, **dict(event.fields))
    else:
        raise TypeError(f"unknown editor event: {type(event).__name__}")

    if schema.page(current) is None:
        current = schema.pages[0].id
    next_state = dataclasses.replace(state, schema=schema, selected_component_id=selected, current_page_id=current)
    if next_state.phase == "editing":
        next_state = _sync_navigation(next_state)
    return next_state


def _complete_import(state: EditorState, event: CompleteImport) -> EditorState:
    if state.phase != "importing":
        LOGGER.info("ignoring import completion outside the importing phase")
        return state
    try:
        if isinstance(event.document, (str, bytes)):
            result = parse_schema_json(event.document)
        else:
            result = import_schema(event.document)
    except SchemaImportError as exc:
        return dataclasses.replace(
            state,
            phase="editing",
            notifications=state.notifications + (Notification("error", f"Error importing schema: {exc.reason}"),),
        )
    return dataclasses.replace(
        state,
        schema=result.schema,
        current_page_id=result.initial_page_id,
        selected_component_id=None,
        phase="editing",
        last_navigation=result.schema.navigation,
        notifications=state.notifications + (Notification("success", "Schema imported successfully!"),),
    )


def _sync_navigation(state: EditorState) -> EditorState:
    navigation = state.schema.navigation
    if navigation == state.last_navigation:
        return state
    target = _navigation_target(state.schema)
    LOGGER.debug("navigation settings changed; current page -> %s", target)
    return dataclasses.replace(state, current_page_id=target, last_navigation=navigation)


def _navigation_target(schema: Schema) -> str:
    initial = schema.navigation.initial_page_id
    if initial and schema.page(initial) is not None:
        return initial
    return schema.pages[0].id


class EditorController:
    """Owns the editor state and applies events to it one at a time."""

    def __init__(
        self,
        schema: Schema | None = None,
        *,
        config: BuilderConfig = DEFAULT_CONFIG,
        clock: Clock = _now_ms,
    ) -> None:
        self.config = config
        self._clock = clock
        self.state = EditorState.initial(schema)

    @property
    def schema(self) -> Schema:
        return self.state.schema

    def dispatch(self, event: EditorEvent) -> EditorState:
        self.state = reduce(self.state, event, clock=self._clock, config=self.config)
        return self.state

    def import_document(self, document: object) -> EditorState:
        self.dispatch(BeginImport())
        return self.dispatch(CompleteImport(document))

    def drain_notifications(self) -> tuple[Notification, ...]:
        pending = self.state.notifications
        self.state = dataclasses.replace(self.state, notifications=())
        return pending

    def export_json(self) -> str:
        return export_schema(self.state.schema)

    def export_filename(self) -> str:
        return export_filename(self.state.schema, int(self._clock()))

    def open_preview(self) -> PreviewSession:
        return PreviewSession(self.state.schema, self.state.current_page_id, config=self.config)
