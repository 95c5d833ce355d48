"""Command-line interface for the asset editor.

This module provides the ``prego-assets`` entry point. Every command loads
the library first, then inspects or changes it; changes are saved before the
command returns. Status and errors go to stderr, command output to stdout.
"""

import argparse
import json
import sys
from collections.abc import Callable
from pathlib import Path

from .assets import Asset, Material, Prop
from .core.documents import load_document
from .core.errors import AssetParseError
from .core.identifier import IDENTIFIER_EXAMPLE, AssetType, Identifier
from .core.interfaces import ProgressCallback, PromptResult
from .core.validator import validate_document_with_error_details
from .editing import commit_asset, delete_asset, set_material_texture, set_prop_model
from .library import AssetLibrary, default_assets_directory
from .registry import AssetRegistry


class ConsolePrompt:
    """Answers prompts by asking on the terminal.

    With ``assume_yes`` every question is answered YES without asking.
    """

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def confirm(self, title: str, message: str, allow_cancel: bool = False) -> PromptResult:
        if self.assume_yes:
            return PromptResult.YES

        print(f"{title}: {message}", file=sys.stderr)
        choices = "[y]es/[n]o/[c]ancel" if allow_cancel else "[y]es/[n]o"
        while True:
            try:
                answer = input(f"{choices}: ").strip().lower()
            except EOFError:
                return PromptResult.CANCEL if allow_cancel else PromptResult.NO

            if answer in ("y", "yes"):
                return PromptResult.YES
            if answer in ("n", "no"):
                return PromptResult.NO
            if allow_cancel and answer in ("c", "cancel"):
                return PromptResult.CANCEL


def progress_printer(label: str, quiet: bool) -> ProgressCallback | None:
    """Build a progress callback printing every tenth percent to stderr."""
    if quiet:
        return None

    last = -1

    def show(percent: int) -> None:
        nonlocal last
        step = percent // 10
        if step != last:
            last = step
            print(f"{label}... {percent}%", file=sys.stderr)

    return show


def parse_identifier_argument(text: str) -> Identifier:
    identifier = Identifier.parse(text)
    if identifier is None:
        raise ValueError(f"Could not parse identifier '{text}'. Use the format '{IDENTIFIER_EXAMPLE}'")
    return identifier


def open_library(args: argparse.Namespace) -> AssetLibrary:
    """Load the library named on the command line.

    Load errors are printed as warnings; the command still runs on whatever
    loaded. Exits with status 1 if the directory can't be used at all.
    """
    library = AssetLibrary(args.root, author_name=args.author or "")
    result = library.load(progress=progress_printer("Loading assets", args.quiet))

    if not result.success:
        for error in result.errors:
            print(f"Warning: {error}", file=sys.stderr)

        if not library.is_valid_assets_directory(library.root) or not library.root.is_dir():
            sys.exit(1)

    return library


def save_library(library: AssetLibrary, args: argparse.Namespace) -> bool:
    result = library.save(progress=progress_printer("Saving assets", args.quiet))
    for asset, error in result.failed:
        print(f"Error: Could not save {asset.identifier}: {error}", file=sys.stderr)
    if not args.quiet:
        print(f"Saved {len(result.saved)} asset(s)", file=sys.stderr)
    return result.success


def require_asset(library: AssetLibrary, text: str) -> Asset:
    identifier = parse_identifier_argument(text)
    asset = library.find(identifier)
    if asset is None:
        raise ValueError(f"No asset with identifier '{identifier}'")
    return asset


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------


def cmd_validate(args: argparse.Namespace) -> int:
    library = AssetLibrary(args.root, author_name=args.author or "")
    result = library.load(progress=progress_printer("Loading assets", args.quiet))

    if not result.success:
        print("Error: Asset library validation failed:", file=sys.stderr)
        for error in result.errors:
            print(error, file=sys.stderr)
        return 1

    print(f"Validation successful! {len(library.assets)} assets loaded.", file=sys.stderr)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    library = open_library(args)
    assets = library.assets_of_type(AssetType(args.type)) if args.type else list(library.assets)
    for asset in sorted(assets, key=lambda a: a.identifier.sort_key()):
        print(f"{asset.identifier}  {asset}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    library = open_library(args)
    asset = require_asset(library, args.identifier)
    json.dump(asset.serialize(), sys.stdout, indent=2)
    print()
    return 0


def cmd_authors(args: argparse.Namespace) -> int:
    library = open_library(args)
    for name in sorted(library.existing_author_names):
        print(name)
    return 0


def cmd_dependents(args: argparse.Namespace) -> int:
    library = open_library(args)
    identifier = parse_identifier_argument(args.identifier)
    for asset in library.get_assets_that_depend_on(identifier):
        print(asset.identifier)
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    library = open_library(args)
    document = load_document(Path(args.file))
    identifier = Identifier.from_json(document.get("identifier"), f"{args.file} -> identifier")

    is_valid, error_msg = validate_document_with_error_details(identifier.asset_type, document)
    if not is_valid:
        print(f"Error: {args.file}: {error_msg}", file=sys.stderr)
        return 1

    asset = AssetRegistry.from_document(identifier.asset_type, document)
    committed, errors = commit_asset(library, asset, ConsolePrompt(args.yes))
    if not committed:
        print("Error: Asset has error(s):", file=sys.stderr)
        for error in errors:
            print(error, file=sys.stderr)
        return 1

    return 0 if save_library(library, args) else 1


def cmd_refactor(args: argparse.Namespace) -> int:
    library = open_library(args)
    old = parse_identifier_argument(args.old)
    new = parse_identifier_argument(args.new)

    if old.asset_type != new.asset_type:
        print(f"Error: Cannot change the asset type of {old} to {new.asset_type}.", file=sys.stderr)
        return 1
    if not library.has_identifier(old):
        print(f"Error: No asset with identifier '{old}'", file=sys.stderr)
        return 1
    if library.has_identifier(new):
        print(f"Error: Identifier '{new}' is already defined in the library.", file=sys.stderr)
        return 1

    library.refactor_identifier(old, new)
    print(f"Refactor successful.\n\"{old}\" --> \"{new}\"", file=sys.stderr)
    return 0 if save_library(library, args) else 1


def cmd_rename_author(args: argparse.Namespace) -> int:
    if args.old.casefold() == args.new.casefold():
        print("Source and destination name are the same. Skipping refactor.", file=sys.stderr)
        return 0

    library = open_library(args)
    renamed = library.refactor_author_name(args.old, args.new)

    for old, new in renamed:
        print(f"{old} --> {new}")
    print(f"Refactor successful.\n\"{args.old}\" --> \"{args.new}\"", file=sys.stderr)
    return 0 if save_library(library, args) else 1


def _set_resource(args: argparse.Namespace, asset_class: type, assign: Callable) -> int:
    library = open_library(args)
    asset = require_asset(library, args.identifier)
    if not isinstance(asset, asset_class):
        print(f"Error: {asset.identifier} is not a {asset_class.__name__.lower()}.", file=sys.stderr)
        return 1

    assigned, errors = assign(library, asset, Path(args.file), ConsolePrompt(args.yes))
    if not assigned:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    return 0 if save_library(library, args) else 1


def cmd_set_texture(args: argparse.Namespace) -> int:
    return _set_resource(args, Material, set_material_texture)


def cmd_set_model(args: argparse.Namespace) -> int:
    return _set_resource(args, Prop, set_prop_model)


def cmd_delete(args: argparse.Namespace) -> int:
    library = open_library(args)
    asset = require_asset(library, args.identifier)

    result = delete_asset(library, asset, ConsolePrompt(args.yes), allow_external=args.allow_external)
    if not result.deleted:
        print(f"Error: {result.reason}", file=sys.stderr)
        for blocker in result.blockers:
            print(f"  {blocker}", file=sys.stderr)
        return 1

    for path in result.removed_files:
        print(f"Deleted: {path}", file=sys.stderr)
    return 0


def cmd_cleanup(args: argparse.Namespace) -> int:
    library = open_library(args)
    result = library.cleanup(progress=progress_printer("Cleaning up asset files", args.quiet))

    for path in result.deleted:
        print(path)

    count = len(result.deleted)
    if count == 0:
        print("No unused files were found.", file=sys.stderr)
    elif count == 1:
        print("Deleted 1 unused file from the asset library.", file=sys.stderr)
    else:
        print(f"Deleted {count} unused files from the asset library.", file=sys.stderr)

    return 1 if result.failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prego-assets",
        description="Inspect and edit a Prego Wars asset library",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check every asset in the library
  prego-assets --root game/pw-assets validate

  # Rename a material everywhere it is used
  prego-assets --root game/pw-assets refactor lukec.material.rock lukec.material.stone

  # Copy a texture next to a material and use it
  prego-assets --root game/pw-assets --author lukec set-texture lukec.material.rock ~/rock.png
        """,
    )

    parser.add_argument(
        "--root",
        type=Path,
        default=default_assets_directory(),
        help="The pw-assets directory (default: ./pw-assets)",
    )
    parser.add_argument("--author", help="Author name to edit assets as")
    parser.add_argument("--yes", action="store_true", help="Answer yes to every question")
    parser.add_argument("--quiet", action="store_true", help="Don't print progress")

    commands = parser.add_subparsers(dest="command", required=True)

    command = commands.add_parser("validate", help="Load the library and report every error")
    command.set_defaults(handler=cmd_validate)

    command = commands.add_parser("list", help="List assets")
    command.add_argument("--type", choices=[t.value for t in AssetType], help="Only list this type")
    command.set_defaults(handler=cmd_list)

    command = commands.add_parser("show", help="Print an asset's JSON")
    command.add_argument("identifier")
    command.set_defaults(handler=cmd_show)

    command = commands.add_parser("authors", help="List author names")
    command.set_defaults(handler=cmd_authors)

    command = commands.add_parser("dependents", help="List assets depending on an asset")
    command.add_argument("identifier")
    command.set_defaults(handler=cmd_dependents)

    command = commands.add_parser("add", help="Add an asset from a JSON file")
    command.add_argument("file")
    command.set_defaults(handler=cmd_add)

    command = commands.add_parser("refactor", help="Rename an identifier everywhere")
    command.add_argument("old")
    command.add_argument("new")
    command.set_defaults(handler=cmd_refactor)

    command = commands.add_parser("rename-author", help="Move every asset of an author to another name")
    command.add_argument("old")
    command.add_argument("new")
    command.set_defaults(handler=cmd_rename_author)

    command = commands.add_parser("set-texture", help="Import a texture for a material")
    command.add_argument("identifier")
    command.add_argument("file")
    command.set_defaults(handler=cmd_set_texture)

    command = commands.add_parser("set-model", help="Import a model for a prop")
    command.add_argument("identifier")
    command.add_argument("file")
    command.set_defaults(handler=cmd_set_model)

    command = commands.add_parser("delete", help="Delete an asset and the files only it uses")
    command.add_argument("identifier")
    command.add_argument(
        "--allow-external", action="store_true", help="Allow deleting assets of other authors"
    )
    command.set_defaults(handler=cmd_delete)

    command = commands.add_parser("cleanup", help="Delete files no asset references")
    command.set_defaults(handler=cmd_cleanup)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the asset editor."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        status = args.handler(args)
    except (AssetParseError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if status:
        sys.exit(status)
