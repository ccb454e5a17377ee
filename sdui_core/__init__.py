"""Schema model, editing operations and preview runtime for the SDUI builder.

`sdui_core.editor` and `sdui_core.preview` render through `sdui_ui` and are
imported from their own modules.
"""

from .actions import (
    ActionParseError,
    NamedAction,
    SerializedAction,
    StructuredAction,
    decode_action_token,
    parse_action,
    resolve_action,
)
from .config import DEFAULT_CONFIG, BuilderConfig, builder_config_from_mapping, load_builder_config
from .executor import ActionOutcome, Notification, PreviewActionExecutor
from .importer import (
    ImportResult,
    SchemaImportError,
    export_filename,
    export_schema,
    import_schema,
    load_schema_file,
    parse_schema_json,
    write_schema_file,
)
from .mutation import (
    add_component,
    add_page,
    delete_component,
    delete_page,
    move_component,
    reorder_components,
    update_component,
    update_page,
    update_settings,
)
from .navigation import NavigationController, resolve_initial_page_id
from .schema import (
    COMPONENT_TYPES,
    Component,
    Navigation,
    Page,
    Schema,
    SchemaMetadata,
    SchemaValidationError,
    Validation,
    default_page,
    default_schema,
    sdui_schema,
)

__all__ = [
    "ActionOutcome",
    "ActionParseError",
    "BuilderConfig",
    "COMPONENT_TYPES",
    "Component",
    "DEFAULT_CONFIG",
    "ImportResult",
    "NamedAction",
    "Navigation",
    "NavigationController",
    "Notification",
    "Page",
    "PreviewActionExecutor",
    "Schema",
    "SchemaImportError",
    "SchemaMetadata",
    "SchemaValidationError",
    "SerializedAction",
    "StructuredAction",
    "Validation",
    "add_component",
    "add_page",
    "builder_config_from_mapping",
    "decode_action_token",
    "default_page",
    "default_schema",
    "delete_component",
    "delete_page",
    "export_filename",
    "export_schema",
    "import_schema",
    "load_builder_config",
    "load_schema_file",
    "move_component",
    "parse_action",
    "parse_schema_json",
    "reorder_components",
    "resolve_action",
    "resolve_initial_page_id",
    "sdui_schema",
    "update_component",
    "update_page",
    "update_settings",
    "write_schema_file",
]
