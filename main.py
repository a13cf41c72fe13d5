"""
Command line entry point for Promptify.

Every command builds the same set of services over the JSON storage file
configured in ``config.storage`` and prints a single human-readable line on
failure.
"""
from pathlib import Path
from typing import Dict, List, Optional
import argparse
import asyncio
import sys

from config import config, validate_config, APP_NAME, APP_VERSION, SUCCESS_MESSAGES
from config.constants import MAX_CUSTOM_PRESETS
from core import (
    PresetCatalog, PresetStore, HistoryStore, SettingsStore, JsonFileBackend,
    Preset, PromptifyError, format_user_message,
)
from core.clipboard import ClipboardService
from core.llm_backends import create_llm_backend
from core.prompts.template import extract_placeholder_names
from pipelines import EnhancementPipeline, PresetTransfer, ConflictPolicy
from utils import get_logger, format_duration, format_time_ago, truncate_text

logger = get_logger(__name__)


class Services:
    """Wires the stores, catalog and pipelines for one CLI invocation."""

    def __init__(self, app_config=config):
        backend = JsonFileBackend(app_config.storage.data_file)
        self.config = app_config
        self.store = PresetStore(
            backend,
            max_presets=min(app_config.storage.max_custom_presets, MAX_CUSTOM_PRESETS),
            limits=app_config.validation,
        )
        self.catalog = PresetCatalog(self.store)
        self.history = HistoryStore(backend, max_items=app_config.ui.max_history_items)
        self.settings = SettingsStore(backend)
        self.clipboard = ClipboardService()
        self.transfer = PresetTransfer(self.catalog, self.store)

    def enhancement(self) -> EnhancementPipeline:
        return EnhancementPipeline(
            self.catalog,
            create_llm_backend(self.config),
            clipboard=self.clipboard,
            history=self.history,
            settings=self.settings,
            app_config=self.config,
        )


def parse_variables(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Turn ``key=value`` arguments into a placeholder mapping."""
    variables = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"Expected key=value, got: {pair}")
        variables[key.strip()] = value
    return variables


def read_text_argument(value: str) -> str:
    """``-`` reads stdin, ``@path`` reads a file, anything else is literal."""
    if value == "-":
        return sys.stdin.read()
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value


# Commands

async def cmd_enhance(services: Services, args) -> int:
    text = read_text_argument(args.text) if args.text is not None else None
    paste = True if args.paste else (False if args.no_paste else None)
    result = await services.enhancement().enhance(
        text=text,
        preset_id=args.preset,
        variables=parse_variables(args.var),
        paste=paste,
    )
    pasted = services.config.ui.auto_paste if paste is None else paste
    print(result.output)
    print(f"\n[{result.preset.name} - {format_duration(result.metadata['processingTime'])}] "
          f"{SUCCESS_MESSAGES['pasted_successfully' if pasted else 'copied_to_clipboard']}",
          file=sys.stderr)
    return 0


async def cmd_presets_list(services: Services, args) -> int:
    last_id = await services.settings.get_last_selected_preset_id()
    for preset in await services.catalog.get_all():
        if args.custom and preset.is_built_in:
            continue
        marker = "*" if preset.id == last_id else " "
        kind = "built-in" if preset.is_built_in else "custom"
        tags = f" [{', '.join(preset.tags)}]" if preset.tags else ""
        print(f"{marker} {preset.id:<32} {preset.name} ({kind}){tags}")
    return 0


async def _require_preset(services: Services, preset_id: str) -> Preset:
    preset = await services.catalog.get_by_id(preset_id)
    if preset is None:
        raise PromptifyError(f"Preset not found: {preset_id}", code="NOT_FOUND")
    return preset


async def cmd_presets_show(services: Services, args) -> int:
    preset = await _require_preset(services, args.id)
    print(f"{preset.name} ({preset.id})")
    if preset.description:
        print(preset.description)
    if preset.tags:
        print(f"Tags: {', '.join(preset.tags)}")
    print("\n" + preset.system_prompt)
    return 0


async def cmd_presets_render(services: Services, args) -> int:
    preset = await _require_preset(services, args.id)
    if args.input is None and not args.var:
        print(services.catalog.preview_preset(preset))
        return 0
    inputs = parse_variables(args.var)
    if args.input is not None:
        inputs["input"] = read_text_argument(args.input)
    print(services.catalog.render_preset(preset, inputs))
    return 0


async def cmd_presets_placeholders(services: Services, args) -> int:
    preset = await _require_preset(services, args.id)
    for name in extract_placeholder_names(preset.system_prompt):
        print(name)
    return 0


async def cmd_presets_create(services: Services, args) -> int:
    preset = Preset(
        id="",
        name=args.name,
        system_prompt=read_text_argument(args.prompt),
        description=args.description or "",
        tags=tuple(args.tag or ()),
    )
    saved = await services.catalog.save_custom_preset(preset)
    print(f"{SUCCESS_MESSAGES['preset_saved']}: {saved.id}")
    return 0


async def cmd_presets_edit(services: Services, args) -> int:
    changes = {}
    if args.name is not None:
        changes["name"] = args.name
    if args.prompt is not None:
        changes["system_prompt"] = read_text_argument(args.prompt)
    if args.description is not None:
        changes["description"] = args.description
    if args.tag is not None:
        changes["tags"] = tuple(args.tag)
    if not changes:
        raise ValueError("Nothing to change; pass --name, --prompt, --description or --tag")

    saved = await services.catalog.update_preset(args.id, **changes)
    if saved is None:
        raise PromptifyError(f"Preset not found: {args.id}", code="NOT_FOUND")
    print(f"{SUCCESS_MESSAGES['preset_saved']}: {saved.id}")
    return 0


async def cmd_presets_delete(services: Services, args) -> int:
    if services.catalog.is_built_in_id(args.id) and await services.store.get(args.id) is None:
        print(f"Built-in preset '{args.id}' cannot be deleted", file=sys.stderr)
        return 1
    await services.catalog.delete_custom_preset(args.id)
    print(SUCCESS_MESSAGES["preset_deleted"])
    return 0


async def cmd_presets_duplicate(services: Services, args) -> int:
    copy = await services.catalog.duplicate_preset(args.id)
    if copy is None:
        print(f"Preset not found: {args.id}", file=sys.stderr)
        return 1
    print(f"Created '{copy.name}' ({copy.id})")
    return 0


async def cmd_presets_export(services: Services, args) -> int:
    if args.all:
        data = await services.transfer.export_all()
    elif args.id:
        data = await services.transfer.export_preset(args.id)
    else:
        print("Specify a preset id or --all", file=sys.stderr)
        return 2

    if args.output:
        Path(args.output).write_text(data, encoding="utf-8")
        print(f"Exported to {args.output}", file=sys.stderr)
    elif args.clipboard:
        services.clipboard.copy(data)
        print(SUCCESS_MESSAGES["copied_to_clipboard"], file=sys.stderr)
    else:
        print(data)
    return 0


async def cmd_presets_import(services: Services, args) -> int:
    text = services.clipboard.read_text() if args.file == "clipboard" else read_text_argument(
        args.file if args.file == "-" else f"@{args.file}"
    )
    policy = ConflictPolicy.OVERWRITE if args.overwrite else ConflictPolicy.RENAME

    preview = await services.transfer.preview(text)
    for conflict in preview.conflicts:
        action = "overwriting" if policy is ConflictPolicy.OVERWRITE else "importing as a copy"
        print(f"{conflict.describe()}; {action}", file=sys.stderr)

    result = await services.transfer.import_text(
        text, policy=policy, replace_all=args.replace, confirmed=args.yes
    )
    for preset in result.presets:
        print(f"Imported '{preset.name}' ({preset.id})")
    for error in result.errors:
        print(error, file=sys.stderr)
    print(f"{result.imported} imported, {result.skipped} skipped", file=sys.stderr)
    return 0 if not result.errors else 1


async def cmd_history_list(services: Services, args) -> int:
    for item in await services.history.list(args.limit):
        print(f"{item.id}  {format_time_ago(item.timestamp):>10}  {item.preset_id:<12} "
              f"{truncate_text(item.input.replace(chr(10), ' '), 60)}")
    return 0


async def cmd_history_show(services: Services, args) -> int:
    item = await services.history.get(args.id)
    if item is None:
        print(f"History item not found: {args.id}", file=sys.stderr)
        return 1
    print(f"Preset: {item.preset_id}\n\nOriginal:\n{item.input}\n\nEnhanced:\n{item.output}")
    return 0


async def cmd_history_delete(services: Services, args) -> int:
    await services.history.delete(args.id)
    print(SUCCESS_MESSAGES["deleted_from_history"])
    return 0


async def cmd_history_clear(services: Services, args) -> int:
    if not args.yes:
        print("Refusing to clear history without --yes", file=sys.stderr)
        return 1
    await services.history.clear()
    print(SUCCESS_MESSAGES["history_cleared"])
    return 0


async def cmd_history_export(services: Services, args) -> int:
    item = await services.history.get(args.id)
    if item is None:
        print(f"History item not found: {args.id}", file=sys.stderr)
        return 1
    print(HistoryStore.export_item(item))
    return 0


async def cmd_models(services: Services, args) -> int:
    backend = create_llm_backend(services.config)
    models = await asyncio.to_thread(backend.list_models)
    if not models:
        print(f"No models reported by {backend.name}", file=sys.stderr)
        return 1
    for name in models:
        marker = "*" if name == services.config.ollama.model else " "
        print(f"{marker} {name}")
    return 0


async def cmd_status(services: Services, args) -> int:
    is_valid, errors = validate_config(services.config)
    backend = create_llm_backend(services.config)
    available = await asyncio.to_thread(backend.is_available)

    print(f"{APP_NAME} {APP_VERSION}")
    print(f"Provider:  {backend.name} ({services.config.ollama.url})")
    print(f"Model:     {services.config.ollama.model}")
    print(f"Reachable: {'yes' if available else 'no'}")
    print(f"Storage:   {services.config.storage.data_file}")
    for error in errors:
        print(f"Config error: {error}", file=sys.stderr)
    return 0 if is_valid and available else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="promptify", description="Enhance prompts with reusable presets")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    commands = parser.add_subparsers(dest="command", required=True)

    enhance = commands.add_parser("enhance", help="Enhance clipboard text (or --text) with a preset")
    enhance.add_argument("--preset", "-p", help="Preset id (defaults to the last used preset)")
    enhance.add_argument("--text", "-t", help="Text to enhance; '-' for stdin, '@file' for a file")
    enhance.add_argument("--var", action="append", metavar="KEY=VALUE", help="Template variable")
    paste_group = enhance.add_mutually_exclusive_group()
    paste_group.add_argument("--paste", action="store_true", help="Paste into the active application")
    paste_group.add_argument("--no-paste", action="store_true", help="Only copy the result")
    enhance.set_defaults(handler=cmd_enhance)

    presets = commands.add_parser("presets", help="Manage presets").add_subparsers(dest="action", required=True)

    p = presets.add_parser("list", help="List all presets")
    p.add_argument("--custom", action="store_true", help="Only custom presets")
    p.set_defaults(handler=cmd_presets_list)

    for action, handler, help_text in (
        ("show", cmd_presets_show, "Show a preset"),
        ("placeholders", cmd_presets_placeholders, "List a preset's placeholders"),
        ("duplicate", cmd_presets_duplicate, "Copy a preset into a new custom preset"),
        ("delete", cmd_presets_delete, "Delete a custom preset"),
    ):
        p = presets.add_parser(action, help=help_text)
        p.add_argument("id")
        p.set_defaults(handler=handler)

    p = presets.add_parser("render", help="Render a preset template")
    p.add_argument("id")
    p.add_argument("--input", "-i", help="Value for {{input}}; '-' for stdin, '@file' for a file")
    p.add_argument("--var", action="append", metavar="KEY=VALUE", help="Template variable")
    p.set_defaults(handler=cmd_presets_render)

    p = presets.add_parser("create", help="Create a custom preset")
    p.add_argument("--name", required=True)
    p.add_argument("--prompt", required=True, help="Template text; '-' for stdin, '@file' for a file")
    p.add_argument("--description")
    p.add_argument("--tag", action="append")
    p.set_defaults(handler=cmd_presets_create)

    p = presets.add_parser("edit", help="Edit a preset; editing a built-in saves a custom override")
    p.add_argument("id")
    p.add_argument("--name")
    p.add_argument("--prompt", help="Template text; '-' for stdin, '@file' for a file")
    p.add_argument("--description")
    p.add_argument("--tag", action="append", help="Replaces all tags; repeat for several")
    p.set_defaults(handler=cmd_presets_edit)

    p = presets.add_parser("export", help="Export presets as JSON")
    p.add_argument("id", nargs="?")
    p.add_argument("--all", action="store_true", help="Export every custom preset")
    p.add_argument("--output", "-o", help="Write to a file instead of stdout")
    p.add_argument("--clipboard", action="store_true", help="Copy to the clipboard instead of stdout")
    p.set_defaults(handler=cmd_presets_export)

    p = presets.add_parser("import", help="Import presets from JSON")
    p.add_argument("file", help="JSON file, '-' for stdin or 'clipboard'")
    conflict_group = p.add_mutually_exclusive_group()
    conflict_group.add_argument("--overwrite", action="store_true", help="Replace clashing presets")
    conflict_group.add_argument("--rename", action="store_true", help="Import clashing presets as copies (default)")
    p.add_argument("--replace", action="store_true", help="Discard all custom presets first (bulk files only)")
    p.add_argument("--yes", action="store_true", help="Confirm --replace")
    p.set_defaults(handler=cmd_presets_import)

    history = commands.add_parser("history", help="Browse enhancement history").add_subparsers(
        dest="action", required=True
    )

    h = history.add_parser("list", help="List recent enhancements")
    h.add_argument("--limit", "-n", type=int, default=20)
    h.set_defaults(handler=cmd_history_list)

    for action, handler, help_text in (
        ("show", cmd_history_show, "Show one entry"),
        ("delete", cmd_history_delete, "Delete one entry"),
        ("export", cmd_history_export, "Export one entry as JSON"),
    ):
        h = history.add_parser(action, help=help_text)
        h.add_argument("id")
        h.set_defaults(handler=handler)

    h = history.add_parser("clear", help="Delete all history")
    h.add_argument("--yes", action="store_true")
    h.set_defaults(handler=cmd_history_clear)

    commands.add_parser("models", help="List models available from the provider").set_defaults(handler=cmd_models)
    commands.add_parser("status", help="Show configuration and provider status").set_defaults(handler=cmd_status)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        return asyncio.run(args.handler(Services(), args))
    except (PromptifyError, argparse.ArgumentTypeError, ValueError, OSError) as e:
        logger.debug(f"Command failed: {e!r}")
        print(f"Error: {format_user_message(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
