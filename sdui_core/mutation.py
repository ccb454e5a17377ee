"""Immutable edit operations over a Schema.

Every operation returns a new Schema and leaves its input untouched. Edits
that target a page or component that does not exist return the input schema.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Callable, Iterable

from .schema import (
    Component,
    DEFAULT_PAGE_ID,
    Navigation,
    Page,
    Schema,
    default_page,
    default_props_for,
)

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], int]

_SETTINGS_FIELDS = {
    "id",
    "name",
    "version",
    "description",
    "slug",
    "is_public",
    "permissions",
    "statuses",
    "navigation",
}


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def generate_id(prefix: str, taken: Iterable[str], *, clock: Clock = _now_ms) -> str:
    """Timestamp-derived id, bumped until it is unused in `taken`."""

    used = set(taken)
    stamp = int(clock())
    candidate = f"{prefix}{stamp}"
    while candidate in used:
        stamp += 1
        candidate = f"{prefix}{stamp}"
    return candidate


def add_component(
    schema: Schema,
    page_id: str,
    component_type: str,
    *,
    clock: Clock = _now_ms,
    id_prefix: str = "comp_",
) -> Schema:
    page = schema.page(page_id)
    if page is None:
        LOGGER.info("add_component: page `%s` not found", page_id)
        return schema
    component = Component(
        id=generate_id(id_prefix, schema.component_ids(), clock=clock),
        type=component_type,
        props=default_props_for(component_type),
        grid_row=len(page.components),
        row_span=1,
    )
    LOGGER.debug("adding %s component %s to page %s", component_type, component.id, page_id)
    return _replace_page(schema, dataclasses.replace(page, components=page.components + (component,)))


def update_component(schema: Schema, updated: Component) -> Schema:
    if schema.find_component(updated.id) is None:
        LOGGER.info("update_component: component `%s` not found", updated.id)
        return schema
    pages = tuple(
        dataclasses.replace(
            page,
            components=tuple(updated if component.id == updated.id else component for component in page.components),
        )
        for page in schema.pages
    )
    return dataclasses.replace(schema, pages=pages)


def delete_component(schema: Schema, component_id: str) -> Schema:
    if schema.find_component(component_id) is None:
        LOGGER.info("delete_component: component `%s` not found", component_id)
        return schema
    pages = tuple(
        dataclasses.replace(
            page,
            components=tuple(component for component in page.components if component.id != component_id),
        )
        for page in schema.pages
    )
    return dataclasses.replace(schema, pages=pages)


def reorder_components(
    schema: Schema,
    new_order: Iterable[Component],
    *,
    page_id: str | None = None,
) -> Schema:
    """Replace a page's component list with `new_order` verbatim.

    Without `page_id` this targets the first page, which is what the editor
    canvas has always done.
    """

    target = schema.pages[0] if page_id is None else schema.page(page_id)
    if target is None:
        LOGGER.info("reorder_components: page `%s` not found", page_id)
        return schema
    return _replace_page(schema, dataclasses.replace(target, components=tuple(new_order)))


def move_component(schema: Schema, page_id: str, from_index: int, to_index: int) -> Schema:
    """Drag-and-drop reorder: take the item at `from_index` and insert it at `to_index`."""

    page = schema.page(page_id)
    if page is None:
        LOGGER.info("move_component: page `%s` not found", page_id)
        return schema
    components = list(page.components)
    if not 0 <= from_index < len(components):
        return schema
    moved = components.pop(from_index)
    components.insert(max(0, min(to_index, len(components))), moved)
    return reorder_components(schema, components, page_id=page_id)


def add_page(schema: Schema, *, clock: Clock = _now_ms, id_prefix: str = "page_") -> Schema:
    count = len(schema.pages)
    page = Page(
        id=generate_id(id_prefix, schema.page_ids(), clock=clock),
        order=count,
        title=f"Page {count + 1}",
        components=(),
    )
    LOGGER.debug("adding page %s", page.id)
    return dataclasses.replace(schema, pages=schema.pages + (page,))


def delete_page(schema: Schema, page_id: str) -> Schema:
    if schema.page(page_id) is None:
        LOGGER.info("delete_page: page `%s` not found", page_id)
        return schema
    remaining = tuple(page for page in schema.pages if page.id != page_id)
    if not remaining:
        LOGGER.info("deleted the last page; inserting default page `%s`", DEFAULT_PAGE_ID)
        remaining = (default_page(),)
    return dataclasses.replace(schema, pages=remaining)


def update_page(schema: Schema, updated: Page) -> Schema:
    if schema.page(updated.id) is None:
        LOGGER.info("update_page: page `%s` not found", updated.id)
        return schema
    return _replace_page(schema, updated)


def update_settings(schema: Schema, **fields: object) -> Schema:
    unknown = set(fields) - _SETTINGS_FIELDS
    if unknown:
        raise TypeError(f"unknown schema settings: {', '.join(sorted(unknown))}")
    changes: dict[str, object] = {}
    for key, value in fields.items():
        if key in ("permissions", "statuses"):
            changes[key] = None if value is None else _dedupe_labels(value)  # type: ignore[arg-type]
        elif key == "navigation":
            if not isinstance(value, Navigation):
                raise TypeError("navigation must be a Navigation record")
            changes[key] = value
        elif key == "is_public":
            changes[key] = bool(value)
        else:
            changes[key] = str(value)
    return dataclasses.replace(schema, **changes)


def _replace_page(schema: Schema, updated: Page) -> Schema:
    return dataclasses.replace(
        schema,
        pages=tuple(updated if page.id == updated.id else page for page in schema.pages),
    )


def _dedupe_labels(values: Iterable[object]) -> tuple[str, ...]:
    out: list[str] = []
    for value in values:
        label = str(value).strip()
        if label and label not in out:
            out.append(label)
    return tuple(out)
