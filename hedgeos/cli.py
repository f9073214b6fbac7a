from __future__ import annotations

import argparse
import json
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from hedgeos import __version__
from hedgeos.core.app import main as run_app
from hedgeos.core.config import get_runtime_config
from hedgeos.core.errors import LoadError, format_error
from hedgeos.core.paths import SETTINGS_FILENAME, resolve_data_file, settings_path
from hedgeos.core.settings_store import SettingsStore
from hedgeos.core.tree_store import Node, TreeStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hedgeos",
        description="HedgeOS: a toy desktop over a static file tree",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Print version and exit.",
    )

    parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Parse CLI arguments without launching the UI.",
    )

    parser.add_argument(
        "--data",
        dest="data_file",
        help="Tree description to load (default: bundled filesystem.json).",
    )

    parser.add_argument(
        "--home",
        dest="start_path",
        help="Folder to open at startup instead of the home folder.",
    )

    subparsers = parser.add_subparsers(dest="command")

    config_parser = subparsers.add_parser(
        "print-config",
        help=f"Print resolved runtime config and {SETTINGS_FILENAME} to stdout.",
    )
    config_parser.set_defaults(handler=handle_print_config)

    tree_parser = subparsers.add_parser(
        "tree",
        help="Print the tree description as an outline.",
    )
    tree_parser.add_argument(
        "--all",
        dest="include_hidden",
        action="store_true",
        help="Include hidden files and folders.",
    )
    tree_parser.set_defaults(handler=handle_tree)

    return parser


def handle_print_config(args: argparse.Namespace) -> None:
    path = settings_path()
    settings_store = SettingsStore(path)
    config = get_runtime_config()
    payload = {
        "runtime": config.model_dump(mode="json"),
        "data_file": str(resolve_data_file(args.data_file, config.data_file)),
        "settings_path": str(path),
        "settings": settings_store.load(),
    }
    print(json.dumps(payload, indent=2))


def handle_tree(args: argparse.Namespace, console: Console | None = None) -> None:
    console = console or Console()
    source = resolve_data_file(args.data_file, get_runtime_config().data_file)
    store = TreeStore()
    try:
        store.load(source)
    except LoadError as exc:
        message, _severity = format_error(exc)
        raise SystemExit(message) from exc

    outline = Tree(f"[bold]{escape(store.home_path)}[/bold]")
    _add_branch(outline, store, store.root, args.include_hidden)
    console.print(outline)


def _add_branch(branch: Tree, store: TreeStore, folder: Node, include_hidden: bool) -> None:
    for child in store.get_contents(folder.path, include_hidden):
        label = escape(child.name)
        if child.hidden:
            label = f"[dim]{label}[/dim]"
        if child.is_folder:
            sub = branch.add(f"[bold]{label}/[/bold]")
            _add_branch(sub, store, child, include_hidden)
        else:
            tag = child.file_type or store.get_extension(child.name)
            suffix = f" [dim]({escape(tag)})[/dim]" if tag else ""
            branch.add(f"{label}{suffix}")


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in {"print-config", "tree"}:
        args.handler(args)
        return

    if args.no_ui:
        return

    raise SystemExit(run_app(data_file=args.data_file, start_path=args.start_path))


if __name__ == "__main__":
    main()
