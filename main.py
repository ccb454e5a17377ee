from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from sdui_core.config import BuilderConfig, load_builder_config
from sdui_core.importer import SchemaImportError, export_schema, load_schema_file, write_schema_file
from sdui_core.preview import PreviewSession
from sdui_core.schema import Schema
from sdui_ui.raster import render_page_png
from sdui_ui.text_preview import render_text_preview

LOGGER = logging.getLogger("sdui")

EXIT_IMPORT_FAILED = 2


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="sdui")
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [builder] table.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Overrides the configured log level.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    normalize = sub.add_parser("normalize", help="Import a legacy or flattened document and emit canonical JSON.")
    normalize.add_argument("schema", type=Path)
    normalize.add_argument("--out", type=Path, default=None)

    preview = sub.add_parser("preview", help="Render a page as a text outline, optionally as PNG.")
    preview.add_argument("schema", type=Path)
    preview.add_argument("--page", default=None, help="Page to open on, if it exists.")
    preview.add_argument("--png", type=Path, default=None)
    preview.add_argument(
        "--fill",
        action="append",
        default=[],
        metavar="ID=VALUE",
        help="Type VALUE into the input component ID before clicking.",
    )
    preview.add_argument(
        "--click",
        action="append",
        default=[],
        metavar="ID",
        help="Click component ID; repeat to click in order.",
    )

    pages = sub.add_parser("pages", help="List pages and their component counts.")
    pages.add_argument("schema", type=Path)
    args = parser.parse_args(argv)

    config = load_builder_config(args.config)
    logging.basicConfig(
        level=args.log_level or config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        imported = load_schema_file(args.schema)
    except SchemaImportError as exc:
        print(f"import failed: {exc.reason}", file=sys.stderr)
        return EXIT_IMPORT_FAILED
    except OSError as exc:
        print(f"import failed: {exc}", file=sys.stderr)
        return EXIT_IMPORT_FAILED

    if args.command == "normalize":
        if args.out is None:
            print(export_schema(imported.schema))
        else:
            out = write_schema_file(imported.schema, args.out)
            print(f"wrote {out} ({imported.source_format} -> flattened)")
        return 0

    if args.command == "pages":
        for page in sorted(imported.schema.pages, key=lambda p: p.order):
            marker = "*" if page.id == imported.initial_page_id else " "
            print(f"{marker} {page.id:<20} order={page.order:<3} components={len(page.components):<3} {page.title}")
        return 0

    if args.command == "preview":
        return _run_preview(args, imported.schema, config)

    raise RuntimeError(f"unsupported command: {args.command}")


def _run_preview(args: argparse.Namespace, schema: Schema, config: BuilderConfig) -> int:
    session = PreviewSession(schema, args.page, config=config)
    for entry in args.fill:
        component_id, sep, value = entry.partition("=")
        if not sep:
            raise SystemExit(f"--fill expects ID=VALUE, got {entry!r}")
        if not session.change(component_id, value):
            LOGGER.warning("--fill: `%s` is not an input on page %s", component_id, session.current_page_id)
    for component_id in args.click:
        outcome = session.click(component_id)
        if outcome is None:
            LOGGER.warning("--click: `%s` did nothing on page %s", component_id, session.current_page_id)

    result = session.render()
    print(f"history: {' > '.join(session.history)}")
    for notification in session.notifications:
        print(f"[{notification.level}] {notification.message}")
    print(render_text_preview(result.root), end="")
    if args.png is not None:
        out = render_page_png(result.root, args.png, config)
        print(f"wrote {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
