from __future__ import annotations

import datetime as dt
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .actions import Action, action_to_raw, parse_action

LOGGER = logging.getLogger(__name__)

DEFAULT_SCHEMA_ID = "builder-app"
DEFAULT_PAGE_ID = "welcome"

COMPONENT_TYPES: tuple[str, ...] = (
    "text",
    "heading",
    "button",
    "text-input",
    "textarea",
    "date-picker",
    "image",
    "spacer",
)

DEFAULT_COMPONENT_PROPS: dict[str, dict[str, Any]] = {
    "text": {"text": "Sample Text", "style": {}},
    "heading": {"text": "Sample Heading", "style": {}},
    "button": {"title": "Button", "variant": "primary"},
    "text-input": {
        "label": "Input Label",
        "placeholder": "Enter text...",
        "keyboardType": "default",
        "autoCapitalize": "words",
    },
    "textarea": {
        "label": "Textarea Label",
        "placeholder": "Enter text...",
        "rows": 3,
        "autoCapitalize": "sentences",
    },
    "date-picker": {"label": "Select Date", "placeholder": "Select date"},
    "image": {"source": "https://via.placeholder.com/150"},
    "spacer": {"size": 16},
}

GRID_KEYS: tuple[str, ...] = ("gridRow", "rowSpan", "gridCol", "colSpan")
_COMPONENT_KEYS = {"id", "type", "props", "action", "validation", *GRID_KEYS}
_NULLABLE_KEYS = ("props", "action", "validation", *GRID_KEYS)
_PAGE_KEYS = {"id", "order", "title", "components"}
_SCHEMA_KEYS = {
    "id",
    "version",
    "name",
    "description",
    "slug",
    "is_public",
    "is_published",
    "published_at",
    "navigation",
    "pages",
    "metadata",
    "created_at",
    "updated_at",
    "payment",
    "permissions",
    "statuses",
}


class SchemaValidationError(ValueError):
    pass


def default_props_for(component_type: str) -> dict[str, Any]:
    return _copy_json(DEFAULT_COMPONENT_PROPS.get(component_type, {}))


# Typed props views. The raw `props` mapping stays the stored source of truth;
# these records give renderers a checked, per-type reading of it.


@dataclass(frozen=True)
class TextProps:
    text: str = ""
    style: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HeadingProps:
    text: str = ""
    style: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ButtonProps:
    title: str = ""
    variant: str = "primary"
    style: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TextInputProps:
    label: str | None = None
    placeholder: str | None = None
    keyboard_type: str = "default"
    auto_capitalize: str = "off"
    style: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TextareaProps:
    label: str | None = None
    placeholder: str | None = None
    rows: int = 3
    auto_capitalize: str = "sentences"
    style: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DatePickerProps:
    label: str | None = None
    placeholder: str | None = None
    style: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ImageProps:
    source: str | None = None
    style: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SpacerProps:
    size: float = 16.0
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class OpaqueProps:
    values: dict[str, Any] = field(default_factory=dict)


TypedProps = (
    TextProps
    | HeadingProps
    | ButtonProps
    | TextInputProps
    | TextareaProps
    | DatePickerProps
    | ImageProps
    | SpacerProps
    | OpaqueProps
)


def typed_props_for(component_type: str, props: Mapping[str, Any]) -> TypedProps:
    raw = dict(props)
    style = raw.pop("style", None)
    style = dict(style) if isinstance(style, Mapping) else None
    if component_type in ("text", "heading"):
        text = raw.pop("text", "")
        cls = TextProps if component_type == "text" else HeadingProps
        return cls(text="" if text is None else str(text), style=style, extra=raw)
    if component_type == "button":
        title = raw.pop("title", "")
        variant = raw.pop("variant", None) or "primary"
        return ButtonProps(title="" if title is None else str(title), variant=str(variant), style=style, extra=raw)
    if component_type == "text-input":
        return TextInputProps(
            label=_optional_str(raw.pop("label", None)),
            placeholder=_optional_str(raw.pop("placeholder", None)),
            keyboard_type=str(raw.pop("keyboardType", None) or "default"),
            auto_capitalize=str(raw.pop("autoCapitalize", None) or "off"),
            style=style,
            extra=raw,
        )
    if component_type == "textarea":
        return TextareaProps(
            label=_optional_str(raw.pop("label", None)),
            placeholder=_optional_str(raw.pop("placeholder", None)),
            rows=_positive_int(raw.pop("rows", None), default=3),
            auto_capitalize=str(raw.pop("autoCapitalize", None) or "sentences"),
            style=style,
            extra=raw,
        )
    if component_type == "date-picker":
        return DatePickerProps(
            label=_optional_str(raw.pop("label", None)),
            placeholder=_optional_str(raw.pop("placeholder", None)),
            style=style,
            extra=raw,
        )
    if component_type == "image":
        return ImageProps(source=_optional_str(raw.pop("source", None)), style=style, extra=raw)
    if component_type == "spacer":
        size = raw.pop("size", None)
        if isinstance(size, bool) or not isinstance(size, (int, float)):
            size = 16.0
        if style is not None:
            raw["style"] = style
        return SpacerProps(size=float(size), extra=raw)
    return OpaqueProps(values=dict(props))


@dataclass(frozen=True)
class Validation:
    """Advisory input rules. Renderers carry them but never enforce them."""

    required: bool | None = None
    min_length: int | None = None
    max_length: int | None = None
    min: object | None = None
    max: object | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> "Validation":
        return Validation(
            required=None if raw.get("required") is None else bool(raw.get("required")),
            min_length=raw.get("minLength"),
            max_length=raw.get("maxLength"),
            min=raw.get("min"),
            max=raw.get("max"),
            extras=_copy_json(
                {str(k): v for k, v in raw.items() if k not in ("required", "minLength", "maxLength", "min", "max")}
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in (
            ("required", self.required),
            ("minLength", self.min_length),
            ("maxLength", self.max_length),
            ("min", self.min),
            ("max", self.max),
        ):
            if value is not None:
                out[key] = value
        out.update(_copy_json(self.extras))
        return out


@dataclass(frozen=True)
class Component:
    id: str
    type: str
    props: dict[str, Any] = field(default_factory=dict)
    action: Action | None = None
    validation: Validation | None = None
    grid_row: int | None = None
    row_span: int | None = None
    grid_col: int | None = None
    col_span: int | None = None
    extras: dict[str, Any] = field(default_factory=dict)
    # Optional keys that were stored as an explicit null.
    explicit_nulls: tuple[str, ...] = field(default=(), compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise SchemaValidationError("component id must be a non-empty string")
        if self.props is None:
            object.__setattr__(self, "props", {})

    def typed_props(self) -> TypedProps:
        return typed_props_for(self.type, self.props)

    @staticmethod
    def from_dict(raw: Mapping[str, Any], *, where: str = "component") -> "Component":
        if not isinstance(raw, Mapping):
            raise SchemaValidationError(f"{where} must be an object")
        component_id = raw.get("id")
        if not isinstance(component_id, str) or not component_id.strip():
            raise SchemaValidationError(f"{where}.id must be a non-empty string")
        props = raw.get("props")
        if props is not None and not isinstance(props, Mapping):
            LOGGER.warning("%s.props is not an object; using empty props", where)
            props = None
        validation = raw.get("validation")
        return Component(
            id=component_id,
            type="" if raw.get("type") is None else str(raw.get("type")),
            props=_copy_json(dict(props or {})),
            action=parse_action(_copy_json(raw.get("action"))),
            validation=Validation.from_dict(validation) if isinstance(validation, Mapping) else None,
            grid_row=raw.get("gridRow"),
            row_span=raw.get("rowSpan"),
            grid_col=raw.get("gridCol"),
            col_span=raw.get("colSpan"),
            extras=_copy_json({str(k): v for k, v in raw.items() if k not in _COMPONENT_KEYS}),
            explicit_nulls=tuple(k for k in _NULLABLE_KEYS if k in raw and raw[k] is None),
        )

    def to_dict(self) -> dict[str, Any]:
        nulls = self.explicit_nulls
        props = None if not self.props and "props" in nulls else _copy_json(self.props)
        out: dict[str, Any] = {"id": self.id, "type": self.type, "props": props}
        action = action_to_raw(self.action)
        if action is not None or "action" in nulls:
            out["action"] = action
        if self.validation is not None:
            out["validation"] = self.validation.to_dict()
        elif "validation" in nulls:
            out["validation"] = None
        for key, value in zip(GRID_KEYS, (self.grid_row, self.row_span, self.grid_col, self.col_span)):
            if value is not None or key in nulls:
                out[key] = value
        out.update(_copy_json(self.extras))
        return out


@dataclass(frozen=True)
class Page:
    id: str
    order: int = 0
    title: str = ""
    components: tuple[Component, ...] = ()
    extras: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise SchemaValidationError("page id must be a non-empty string")

    def component(self, component_id: str) -> Component | None:
        return next((c for c in self.components if c.id == component_id), None)

    @staticmethod
    def from_dict(raw: Mapping[str, Any], *, index: int = 0) -> "Page":
        where = f"pages[{index}]"
        if not isinstance(raw, Mapping):
            raise SchemaValidationError(f"{where} must be an object")
        page_id = raw.get("id")
        if not isinstance(page_id, str) or not page_id.strip():
            raise SchemaValidationError(f"{where}.id must be a non-empty string")
        components = raw.get("components", [])
        if components is None:
            components = []
        if not isinstance(components, list):
            raise SchemaValidationError(f"{where}.components must be a list")
        order = raw.get("order", index)
        return Page(
            id=page_id,
            order=order if isinstance(order, int) and not isinstance(order, bool) else index,
            title="" if raw.get("title") is None else str(raw.get("title")),
            components=tuple(
                Component.from_dict(item, where=f"{where}.components[{i}]") for i, item in enumerate(components)
            ),
            extras=_copy_json({str(k): v for k, v in raw.items() if k not in _PAGE_KEYS}),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "order": self.order,
            "title": self.title,
            "components": [component.to_dict() for component in self.components],
        }
        out.update(_copy_json(self.extras))
        return out


@dataclass(frozen=True)
class Navigation:
    guest_page_id: str | None = None
    initial_page_id: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(raw: object) -> "Navigation":
        if not isinstance(raw, Mapping):
            return Navigation()
        return Navigation(
            guest_page_id=_optional_str(raw.get("guestPageId")),
            initial_page_id=_optional_str(raw.get("initialPageId")),
            extras=_copy_json({str(k): v for k, v in raw.items() if k not in ("guestPageId", "initialPageId")}),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.guest_page_id is not None:
            out["guestPageId"] = self.guest_page_id
        if self.initial_page_id is not None:
            out["initialPageId"] = self.initial_page_id
        out.update(_copy_json(self.extras))
        return out


@dataclass(frozen=True)
class SchemaMetadata:
    revision: int | None = None
    created_by: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(raw: object) -> "SchemaMetadata":
        if not isinstance(raw, Mapping):
            return SchemaMetadata()
        return SchemaMetadata(
            revision=raw.get("revision"),
            created_by=_optional_str(raw.get("createdBy")),
            extras=_copy_json({str(k): v for k, v in raw.items() if k not in ("revision", "createdBy")}),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.revision is not None:
            out["revision"] = self.revision
        if self.created_by is not None:
            out["createdBy"] = self.created_by
        out.update(_copy_json(self.extras))
        return out


@dataclass(frozen=True)
class Schema:
    """The whole mini-app document.

    `payment`, `permissions` and `statuses` are opaque here; None means the key
    was absent and is left out of the export. Unknown top-level keys are kept
    in `extras` so every mutation round-trips them.
    """

    id: str
    pages: tuple[Page, ...]
    version: str = "1.0"
    name: str = ""
    description: str = ""
    slug: str = ""
    is_public: bool = False
    is_published: bool = False
    published_at: str | None = None
    navigation: Navigation = field(default_factory=Navigation)
    metadata: SchemaMetadata = field(default_factory=SchemaMetadata)
    created_at: str | None = None
    updated_at: str | None = None
    payment: object | None = None
    permissions: tuple[str, ...] | None = None
    statuses: tuple[str, ...] | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise SchemaValidationError("schema id must be a non-empty string")
        seen: set[str] = set()
        for page in self.pages:
            if page.id in seen:
                raise SchemaValidationError(f"duplicate page id: {page.id}")
            seen.add(page.id)

    def page(self, page_id: str) -> Page | None:
        return next((p for p in self.pages if p.id == page_id), None)

    def page_ids(self) -> list[str]:
        return [page.id for page in self.pages]

    def component_ids(self) -> list[str]:
        return [component.id for page in self.pages for component in page.components]

    def find_component(self, component_id: str) -> tuple[Page, Component] | None:
        for page in self.pages:
            for component in page.components:
                if component.id == component_id:
                    return page, component
        return None

    @staticmethod
    def from_dict(payload: Mapping[str, Any]) -> "Schema":
        if not isinstance(payload, Mapping):
            raise TypeError("schema payload must be an object")
        pages_raw = payload.get("pages")
        if not isinstance(pages_raw, list):
            raise SchemaValidationError("pages must be a list")
        pages = tuple(Page.from_dict(item, index=i) for i, item in enumerate(pages_raw))
        if not pages:
            LOGGER.info("document has no pages; inserting default page `%s`", DEFAULT_PAGE_ID)
            pages = (default_page(),)
        schema_id = payload.get("id") or payload.get("slug") or DEFAULT_SCHEMA_ID
        return Schema(
            id=str(schema_id),
            pages=pages,
            version="1.0" if payload.get("version") is None else str(payload.get("version")),
            name="" if payload.get("name") is None else str(payload.get("name")),
            description="" if payload.get("description") is None else str(payload.get("description")),
            slug="" if payload.get("slug") is None else str(payload.get("slug")),
            is_public=bool(payload.get("is_public", False)),
            is_published=bool(payload.get("is_published", False)),
            published_at=_optional_str(payload.get("published_at")),
            navigation=Navigation.from_dict(payload.get("navigation")),
            metadata=SchemaMetadata.from_dict(payload.get("metadata")),
            created_at=_optional_str(payload.get("created_at")),
            updated_at=_optional_str(payload.get("updated_at")),
            payment=_copy_json(payload.get("payment")),
            permissions=_optional_str_tuple(payload.get("permissions")),
            statuses=_optional_str_tuple(payload.get("statuses")),
            extras=_copy_json({str(k): v for k, v in payload.items() if k not in _SCHEMA_KEYS}),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "version": self.version,
            "name": self.name,
            "description": self.description,
            "slug": self.slug,
            "is_public": self.is_public,
            "is_published": self.is_published,
            "published_at": self.published_at,
            "navigation": self.navigation.to_dict(),
            "pages": [page.to_dict() for page in self.pages],
            "metadata": self.metadata.to_dict(),
        }
        if self.created_at is not None:
            out["created_at"] = self.created_at
        if self.updated_at is not None:
            out["updated_at"] = self.updated_at
        if self.payment is not None:
            out["payment"] = _copy_json(self.payment)
        if self.permissions is not None:
            out["permissions"] = list(self.permissions)
        if self.statuses is not None:
            out["statuses"] = list(self.statuses)
        out.update(_copy_json(self.extras))
        return out


def default_page() -> Page:
    return Page(id=DEFAULT_PAGE_ID, order=0, title="Welcome", components=())


def default_schema(now: dt.datetime | None = None) -> Schema:
    stamp = _iso_timestamp(now or dt.datetime.now(dt.timezone.utc))
    return Schema(
        id=DEFAULT_SCHEMA_ID,
        version="1.0",
        name="Builder App",
        description="SDUI Builder Application",
        slug=DEFAULT_SCHEMA_ID,
        navigation=Navigation(guest_page_id=DEFAULT_PAGE_ID, initial_page_id=DEFAULT_PAGE_ID),
        pages=(default_page(),),
        metadata=SchemaMetadata(revision=1, created_by="builder"),
        created_at=stamp,
        updated_at=stamp,
    )


def sdui_schema() -> dict[str, object]:
    return json.loads(json.dumps(SDUI_SCHEMA_JSON_SCHEMA))


def _iso_timestamp(moment: dt.datetime) -> str:
    return moment.astimezone(dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _copy_json(value: Any) -> Any:
    if value is None:
        return None
    return json.loads(json.dumps(value))


def _optional_str(raw: object) -> str | None:
    if raw is None:
        return None
    return str(raw)


def _optional_str_tuple(raw: object) -> tuple[str, ...] | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return (raw,)
    if isinstance(raw, (list, tuple)):
        return tuple(str(item) for item in raw)
    raise SchemaValidationError("permissions/statuses must be a list of strings")


def _positive_int(raw: object, *, default: int) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or raw < 1:
        return default
    return int(raw)


SDUI_SCHEMA_JSON_SCHEMA: dict[str, object] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "https://sdui.dev/schemas/sdui.schema.json",
    "title": "SDUI Mini-App Schema",
    "type": "object",
    "required": ["id", "pages"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "version": {"type": "string"},
        "name": {"type": "string"},
        "description": {"type": "string"},
        "slug": {"type": "string"},
        "is_public": {"type": "boolean"},
        "is_published": {"type": "boolean"},
        "published_at": {"type": ["string", "null"]},
        "navigation": {
            "type": "object",
            "properties": {
                "guestPageId": {"type": "string"},
                "initialPageId": {"type": "string"},
            },
        },
        "pages": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["id", "components"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "order": {"type": "integer"},
                    "title": {"type": "string"},
                    "components": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["id", "type", "props"],
                            "properties": {
                                "id": {"type": "string", "minLength": 1},
                                "type": {"type": "string"},
                                "props": {"type": "object"},
                                "action": {
                                    "oneOf": [
                                        {"type": "string"},
                                        {
                                            "type": "object",
                                            "required": ["type"],
                                            "properties": {
                                                "type": {"type": "string"},
                                                "params": {"type": "object"},
                                            },
                                        },
                                    ]
                                },
                                "validation": {
                                    "type": "object",
                                    "properties": {
                                        "required": {"type": "boolean"},
                                        "minLength": {"type": "integer", "minimum": 0},
                                        "maxLength": {"type": "integer", "minimum": 0},
                                        "min": {"type": ["number", "string"]},
                                        "max": {"type": ["number", "string"]},
                                    },
                                },
                                "gridRow": {"type": "integer"},
                                "rowSpan": {"type": "integer"},
                                "gridCol": {"type": "integer"},
                                "colSpan": {"type": "integer"},
                            },
                        },
                    },
                },
            },
        },
        "metadata": {
            "type": "object",
            "properties": {
                "revision": {"type": "integer", "minimum": 0},
                "createdBy": {"type": "string"},
            },
        },
        "created_at": {"type": "string"},
        "updated_at": {"type": "string"},
        "payment": {},
        "permissions": {"type": "array", "items": {"type": "string"}},
        "statuses": {"type": "array", "items": {"type": "string"}},
    },
}
