"""Editing flows that sit between a user interface and the asset library.

These functions commit edited assets, delete assets together with the files
only they use, and import texture and model files into an asset's directory.
Whenever a decision is needed they ask a ``Prompt``.
"""

import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .assets import Asset, Material, Prop
from .assets.material import is_texture_file_allowed
from .assets.prop import is_model_file_allowed
from .core.identifier import Identifier
from .core.interfaces import Prompt, PromptResult
from .library import AssetLibrary
from .paths import (
    absolute,
    can_truncate_path,
    remove_empty_parents,
    same_file_key,
    truncate_path,
    validate_path_safety,
)

# Resources copied next to an asset land in these subdirectories
TEXTURES_DIR_NAME = "textures"
MODELS_DIR_NAME = "models"


@dataclass
class DeleteResult:
    """Outcome of a delete request.

    Attributes:
        deleted: True if the asset was removed from the library
        removed_files: Files deleted from disk
        blockers: Identifiers of assets that still depend on the target
        reason: Why nothing was deleted, if it wasn't
    """

    deleted: bool
    removed_files: list[Path] = field(default_factory=list)
    blockers: list[Identifier] = field(default_factory=list)
    reason: str | None = None


def commit_asset(
    library: AssetLibrary,
    asset: Asset,
    prompt: Prompt,
    original_identifier: Identifier | None = None,
) -> tuple[bool, list[str]]:
    """Validate a new or edited asset and admit it to the library.

    An invalid asset is never added. When the identifier was changed during
    editing, the prompt decides whether references to the old identifier are
    moved to the new one.

    Args:
        library: Library the asset belongs to
        asset: The new or edited asset
        prompt: Asked about refactoring references
        original_identifier: The identifier before editing, None for a new asset

    Returns:
        Tuple of (committed, error_messages)
    """
    errors: list[str] = []
    if not asset.validate(library, errors):
        return False, errors

    identifier = asset.identifier
    assert identifier is not None

    if any(other is not asset and other.identifier == identifier for other in library.assets):
        errors.append(f"Identifier '{identifier}' is already defined in the library.")
        return False, errors

    if (
        original_identifier is not None
        and original_identifier != identifier
        and library.contains(asset)
    ):
        answer = prompt.confirm(
            "Identifier Refactor",
            f"The identifier of this asset has changed from:\n\t{original_identifier}\nto:\n\t{identifier}"
            "\n\nWould you like to change all occurrences of the old identifier to the new one?",
        )
        if answer is PromptResult.YES:
            library.refactor_identifier(original_identifier, identifier)
        else:
            library.identifier_changed(asset, original_identifier)

    if library.contains(asset):
        library.asset_changed(asset)
    else:
        library.add_asset(asset)
    return True, errors


def owned_files(library: AssetLibrary, asset: Asset) -> list[Path]:
    """Files referenced by an asset and by no other asset in the library.

    The asset's JSON file is only included once it has been saved.
    """
    root = library.root
    json_path = asset.resolve_json_path(root)

    used_elsewhere = {
        same_file_key(path)
        for other in library.assets
        if other is not asset
        for path in other.referenced_files(root)
    }

    files: dict[str, Path] = {}
    for path in asset.referenced_files(root):
        key = same_file_key(path)
        if key in used_elsewhere:
            continue
        if asset.json_file_path is None and key == same_file_key(json_path):
            continue
        files.setdefault(key, path)
    return list(files.values())


def delete_asset(
    library: AssetLibrary,
    asset: Asset,
    prompt: Prompt,
    allow_external: bool = False,
) -> DeleteResult:
    """Delete an asset and, optionally, the files that only it uses.

    Deletion is refused for assets of another author (unless
    ``allow_external``) and for assets that other assets depend on; in both
    cases no file is touched. Files that can't be deleted are reported on
    stderr and skipped.

    Args:
        library: Library holding the asset
        asset: Asset to delete
        prompt: Asked to confirm the delete, and whether resource files that
            become unused are deleted as well
        allow_external: Allow deleting assets of other authors

    Returns:
        DeleteResult describing what happened
    """
    identifier = asset.identifier
    if identifier is None:
        return DeleteResult(False, reason="Cannot remove asset; has no identifier.")

    if not allow_external and identifier.author_name.casefold() != library.author_name.casefold():
        return DeleteResult(
            False,
            reason=f"This asset was created by another author ({identifier.author_name}). "
            "Allow changing external assets to delete it.",
        )

    blockers = [
        dependent.identifier
        for dependent in library.get_assets_that_depend_on(asset)
        if dependent is not asset and dependent.identifier is not None
    ]
    if blockers:
        return DeleteResult(
            False,
            blockers=blockers,
            reason=f"This asset is being used by {len(blockers)} other assets. "
            "Please remove these dependencies before deleting this asset.",
        )

    answer = prompt.confirm(
        "Delete Asset",
        "Are you sure you want to delete this asset? This action cannot be undone.",
    )
    if answer is not PromptResult.YES:
        return DeleteResult(False, reason="Deletion cancelled.")

    json_path = asset.resolve_json_path(library.root)
    json_key = same_file_key(json_path)
    files = owned_files(library, asset)

    if len(files) > 1:
        extra = [path for path in files if same_file_key(path) != json_key]
        listing = "\n".join(f"- ./{truncate_path(json_path, path)}" for path in extra)
        answer = prompt.confirm(
            "Delete Asset",
            f"{len(extra)} file(s) will become unused. Delete them as well?:\n\n{listing}",
            allow_cancel=True,
        )
        if answer is PromptResult.CANCEL:
            return DeleteResult(False, reason="Deletion cancelled.")
        if answer is PromptResult.NO:
            files = [path for path in files if same_file_key(path) == json_key]

    removed: list[Path] = []
    for path in files:
        try:
            validate_path_safety(path, library.root)
            if path.is_file():
                path.unlink()
                removed.append(path)
            remove_empty_parents(path, library.cleanup_boundary(path))
        except (OSError, ValueError) as e:
            print(f"Warning: Couldn't delete file {path}: {e}", file=sys.stderr)

    library.remove_asset(asset)
    return DeleteResult(True, removed_files=removed)


def import_resource_file(
    asset_json_path: Path,
    source_file: Path | str,
    subdirectory: str,
    prompt: Prompt,
) -> str | None:
    """Turn a picked file into the reference stored in an asset.

    Files already below the asset's directory are referenced where they
    are. Anything else is copied into ``<asset directory>/<subdirectory>``
    once the prompt agrees, and the prompt is asked again before an existing
    file is replaced.

    Returns:
        The relative reference, or None if the prompt declined

    Raises:
        FileNotFoundError: If the source file doesn't exist
        OSError: If copying fails
    """
    source = absolute(source_file)
    if not source.is_file():
        raise FileNotFoundError(f"File not found: {source}")

    if can_truncate_path(asset_json_path, source):
        return truncate_path(asset_json_path, source)

    title = f"Importing into {subdirectory}"
    answer = prompt.confirm(
        title,
        f"{source.name} is not relative to the asset's file. Copy it into the asset's folder?",
    )
    if answer is not PromptResult.YES:
        return None

    target_directory = absolute(asset_json_path).parent / subdirectory
    target = target_directory / source.name

    if target.exists():
        answer = prompt.confirm(
            title,
            f"File in destination directory already exists:\n\t{target}\n\nReplace file?",
        )
        if answer is not PromptResult.YES:
            return None

    target_directory.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    return truncate_path(asset_json_path, target)


def _asset_ready_for_files(asset: Asset, errors: list[str]) -> bool:
    if asset.identifier is None or not asset.identifier.is_valid:
        errors.append(
            f"{asset.label} is not ready to be given a path. Possibly missing a valid identifier?"
        )
        return False
    return True


def set_material_texture(
    library: AssetLibrary,
    material: Material,
    file: Path | str,
    prompt: Prompt,
) -> tuple[bool, list[str]]:
    """Import a texture and assign it to a material.

    The previous texture is restored if the new one doesn't validate.

    Returns:
        Tuple of (assigned, error_messages)
    """
    errors: list[str] = []
    if not _asset_ready_for_files(material, errors):
        return False, errors

    if not is_texture_file_allowed(str(file)):
        errors.append(f'Material {material.identifier}: Unsupported texture extension "{Path(file).suffix}"')
        return False, errors

    reference = import_resource_file(
        material.resolve_json_path(library.root), file, TEXTURES_DIR_NAME, prompt
    )
    if reference is None:
        errors.append("Texture was not imported.")
        return False, errors

    previous = material.texture
    material.texture = reference
    if not material.validate_texture(library, errors):
        material.texture = previous
        return False, errors

    library.asset_changed(material)
    return True, errors


def set_prop_model(
    library: AssetLibrary,
    prop: Prop,
    file: Path | str,
    prompt: Prompt,
) -> tuple[bool, list[str]]:
    """Import a model and assign it to a prop.

    The previous model is restored if the new one doesn't validate.

    Returns:
        Tuple of (assigned, error_messages)
    """
    errors: list[str] = []
    if not _asset_ready_for_files(prop, errors):
        return False, errors

    if not is_model_file_allowed(str(file)):
        errors.append(f"Prop {prop.identifier}: Unsupported model extension: {Path(file).suffix}")
        return False, errors

    reference = import_resource_file(prop.resolve_json_path(library.root), file, MODELS_DIR_NAME, prompt)
    if reference is None:
        errors.append("Model was not imported.")
        return False, errors

    previous = prop.model
    prop.model = reference
    if not prop.validate_model(library, errors):
        prop.model = previous
        return False, errors

    library.asset_changed(prop)
    return True, errors
