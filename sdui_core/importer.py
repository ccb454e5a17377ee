from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any, Literal, Mapping

from .schema import Schema, SchemaValidationError

LOGGER = logging.getLogger(__name__)

SourceFormat = Literal["legacy", "flattened"]


class SchemaImportError(ValueError):
    """A document could not be imported; the active document stays unchanged."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class ImportResult:
    schema: Schema
    initial_page_id: str
    source_format: SourceFormat


def parse_schema_json(text: str | bytes) -> ImportResult:
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            LOGGER.warning("schema import rejected: input is not UTF-8 (%s)", exc.reason)
            raise SchemaImportError("Invalid JSON format") from exc
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        LOGGER.warning("schema import rejected: invalid JSON (%s)", exc.msg)
        raise SchemaImportError("Invalid JSON format") from exc
    return import_schema(raw)


def import_schema(raw: object) -> ImportResult:
    """Normalize a legacy-wrapped or flattened document into a Schema.

    Legacy documents look like `{success, data: {...pages...}}`; the payload is
    lifted out of `data`. Both shapes must carry a `pages` list.
    """

    if not isinstance(raw, Mapping):
        raise _reject("document must be a JSON object")
    source_format: SourceFormat
    if raw.get("success") and isinstance(raw.get("data"), Mapping) and "pages" in raw["data"]:
        payload: Mapping[str, Any] = raw["data"]
        source_format = "legacy"
    elif "pages" in raw:
        payload = raw
        source_format = "flattened"
    else:
        raise _reject(
            "Invalid SDUI schema format. Use either the legacy format (with success/data wrapper) "
            "or the flattened format."
        )
    if not isinstance(payload.get("pages"), list):
        raise _reject("pages must be a list")

    try:
        schema = Schema.from_dict(payload)
    except SchemaValidationError as exc:
        raise _reject(str(exc)) from exc

    _warn_duplicate_component_ids(schema)
    initial_page_id = schema.pages[0].id
    LOGGER.info(
        "imported %s schema `%s` with %d page(s); initial page `%s`",
        source_format,
        schema.id,
        len(schema.pages),
        initial_page_id,
    )
    return ImportResult(schema=schema, initial_page_id=initial_page_id, source_format=source_format)


def export_schema(schema: Schema) -> str:
    return json.dumps(schema.to_dict(), indent=2, ensure_ascii=False)


def export_filename(schema: Schema, timestamp_ms: int) -> str:
    stem = schema.name or schema.id or "sdui-schema"
    return f"{stem}-{timestamp_ms}.json"


def load_schema_file(path: str | Path) -> ImportResult:
    schema_path = Path(path)
    return parse_schema_json(schema_path.read_bytes())


def write_schema_file(schema: Schema, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(export_schema(schema) + "\n", encoding="utf-8")
    return out


def _reject(reason: str) -> SchemaImportError:
    LOGGER.warning("schema import rejected: %s", reason)
    return SchemaImportError(reason)


def _warn_duplicate_component_ids(schema: Schema) -> None:
    seen: set[str] = set()
    for component_id in schema.component_ids():
        if component_id in seen:
            LOGGER.warning("imported schema reuses component id `%s`", component_id)
        seen.add(component_id)
