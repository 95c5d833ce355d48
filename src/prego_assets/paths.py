"""Path handling for asset files and the resources they reference.

Assets store resource references (textures, models) relative to the directory
of their own JSON file. This module converts between the stored form and
absolute paths, and guards destructive operations against paths that escape
the library root.
"""

import os
import re
from pathlib import Path, PurePath

from .core.errors import AssetPathError

# Dangerous characters to remove from generated filenames
DANGEROUS_FILENAME_CHARS = r'[<>:"|?*\x00-\x1f]'


def sanitize_filename(filename: str) -> str:
    """Sanitize filename by removing dangerous characters.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename safe for storage
    """
    # Remove dangerous characters
    sanitized = re.sub(DANGEROUS_FILENAME_CHARS, "", filename)
    # Remove path separators
    sanitized = sanitized.replace("/", "").replace("\\", "")
    return sanitized


def validate_path_safety(path: Path, base_dir: Path) -> None:
    """Validate that a path stays within the base directory.

    This prevents deleting files outside of the asset library.

    Args:
        path: Path to validate
        base_dir: Base directory that path must be within

    Raises:
        ValueError: If path escapes the base directory
    """
    resolved_path = path.resolve()
    resolved_base = base_dir.resolve()

    if not resolved_path.is_relative_to(resolved_base):
        raise ValueError(f"Path {path} escapes base directory {base_dir}")


def absolute(path: Path | str) -> Path:
    """Make a path absolute and normalized without resolving symlinks."""
    return Path(os.path.normpath(os.path.abspath(path)))


def same_file_key(path: Path | str) -> str:
    """Return a key under which two spellings of the same path compare equal."""
    return os.path.normcase(str(absolute(path)))


def split_reference(reference: str) -> list[str]:
    """Split a stored reference on either kind of separator."""
    return [part for part in reference.replace("\\", "/").split("/") if part not in ("", ".")]


def can_truncate_path(asset_json_path: Path | str | None, file_path: Path | str | None) -> bool:
    """Return True if a file lives somewhere below an asset file's directory.

    The comparison ignores case, so a file picked with different casing on a
    case-insensitive filesystem still counts as local.
    """
    if not asset_json_path or not file_path:
        return False

    directory_parts = [part.lower() for part in absolute(asset_json_path).parent.parts]
    file_parts = [part.lower() for part in absolute(file_path).parts]
    return file_parts[: len(directory_parts)] == directory_parts


def truncate_path(asset_json_path: Path | str | None, file_path: Path | str | None) -> str:
    """Convert a file path into the reference stored in an asset document.

    The leading path segments shared with the asset file's directory are
    removed and the rest is joined with forward slashes.

    Example:
        asset ".../pw-assets/maps/mars/mars.json" and
        file  ".../pw-assets/maps/mars/textures/rock.png" -> "textures/rock.png"
    """
    if not file_path:
        return ""
    if not asset_json_path:
        return str(file_path)

    directory_parts = absolute(asset_json_path).parent.parts
    file_parts = absolute(file_path).parts

    common = 0
    while (
        common < len(directory_parts)
        and common < len(file_parts)
        and directory_parts[common] == file_parts[common]
    ):
        common += 1

    return PurePath(*file_parts[common:]).as_posix() if common < len(file_parts) else ""


def resolve_sub_file(asset_json_path: Path | str | None, reference: str) -> Path:
    """Expand a stored reference into an absolute path.

    Relative references are joined to the asset file's directory. When the
    reference starts with the same segments the directory ends with (for
    example ``rock/tex.png`` stored next to ``.../materials/rock/rock.json``),
    the overlap is counted once. A subfolder named like the asset's own
    directory is therefore unreachable: ``stone/tex.png`` next to
    ``.../materials/stone/stone.json`` is ``.../materials/stone/tex.png``,
    never ``.../materials/stone/stone/tex.png``.

    Absolute references are kept when they share at least one directory with
    the asset file beyond the filesystem root.

    Raises:
        AssetPathError: If an absolute reference shares nothing with the asset
            file's directory except the root or drive
    """
    if not asset_json_path:
        return Path(reference)

    directory = absolute(asset_json_path).parent
    candidate = Path(reference)

    if candidate.is_absolute():
        candidate = absolute(candidate)
        if candidate.anchor != directory.anchor:
            raise AssetPathError(
                f"Reference '{reference}' is on a different drive than {directory}"
            )
        directory_rest = directory.parts[1:]
        candidate_rest = candidate.parts[1:]
        if not directory_rest or not candidate_rest or directory_rest[0] != candidate_rest[0]:
            raise AssetPathError(
                f"Reference '{reference}' shares no directories with {directory}"
            )
        return candidate

    parts = split_reference(reference)
    directory_tail = directory.parts[1:]

    overlap = 0
    for size in range(min(len(directory_tail), len(parts) - 1), 0, -1):
        if tuple(parts[:size]) == directory_tail[-size:]:
            overlap = size
            break

    return absolute(directory.joinpath(*parts[overlap:]))


def remove_empty_parents(path: Path, stop_at: Path) -> list[Path]:
    """Remove the directories above a deleted file while they are empty.

    Walks upwards from ``path.parent`` and stops at (without removing)
    ``stop_at``.

    Returns:
        The directories that were removed
    """
    removed: list[Path] = []
    stop = absolute(stop_at)
    directory = absolute(path).parent

    while directory != stop and directory.is_relative_to(stop):
        if not directory.is_dir() or any(directory.iterdir()):
            break
        directory.rmdir()
        removed.append(directory)
        directory = directory.parent

    return removed
