"""Base abstractions for asset types.

This module defines the interface every asset (prop, material, map) implements
so the asset library can load, validate, save, refactor and clean up assets
without knowing their concrete type.
"""

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from ..core.errors import AssetParseError, AssetPathError
from ..core.identifier import AssetType, Identifier
from ..paths import absolute, resolve_sub_file, sanitize_filename

if TYPE_CHECKING:
    from ..library import AssetLibrary

# Used when an asset has neither a display name nor an identifier
UNKNOWN_FILE_STEM = "unknown"


def validate_identifier(
    reference: Identifier,
    calling_identifier: Identifier | None,
    library: "AssetLibrary",
    errors: list[str],
) -> bool:
    """Check that a referenced identifier is defined in the library.

    Args:
        reference: The identifier being referenced
        calling_identifier: Identifier of the asset holding the reference
        library: Library whose identifiers are checked
        errors: Receives a message if the identifier is undefined

    Returns:
        True if the identifier is defined
    """
    if library.has_identifier(reference):
        return True

    errors.append(f"Undefined identifier '{reference}' in asset {calling_identifier}.")
    return False


def require_object(document: Any, key: str, where: str) -> dict[str, Any]:
    """Fetch a nested JSON object from a document.

    Raises:
        AssetParseError: If the property is missing or not an object
    """
    value = document.get(key) if isinstance(document, dict) else None
    if not isinstance(value, dict):
        raise AssetParseError(f"Required object '{key}' not found in {where}")
    return value


@dataclass(eq=False)
class Asset(ABC):
    """Abstract base class for all assets.

    Assets compare by identity: two distinct objects are distinct library
    entries even if their content matches.

    Attributes:
        identifier: The asset's identifier; None until chosen by the author
        json_file_path: Where the asset's JSON lives; None until first saved,
            in which case ``default_json_path`` decides
    """

    asset_type: ClassVar[AssetType]
    directory_name: ClassVar[str]

    identifier: Identifier | None = None
    json_file_path: Path | None = None

    @property
    def label(self) -> str:
        """The type name used at the start of validation messages."""
        return type(self).__name__

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def preferred_file_stem(self) -> str:
        """The base name (without extension) for a newly created file."""
        if self.identifier is not None and self.identifier.asset_name:
            return self.identifier.asset_name
        return UNKNOWN_FILE_STEM

    def default_json_path(self, library_root: Path) -> Path:
        """Compute where this asset would be saved if it had no file yet."""
        stem = sanitize_filename(self.preferred_file_stem()) or UNKNOWN_FILE_STEM
        return absolute(library_root) / self.directory_name / f"{stem}.json"

    def resolve_json_path(self, library_root: Path) -> Path:
        if self.json_file_path is not None:
            return absolute(self.json_file_path)
        return self.default_json_path(library_root)

    def sub_file(self, library_root: Path, reference: str) -> Path:
        """Resolve a resource reference stored in this asset."""
        return resolve_sub_file(self.resolve_json_path(library_root), reference)

    def resource_references(self) -> list[str]:
        """Stored references to binary files owned by this asset."""
        return []

    def referenced_files(self, library_root: Path) -> list[Path]:
        """Return every file this asset owns as absolute paths.

        The first entry is always the asset's JSON file. References that cannot
        be resolved are reported on stderr and left out.
        """
        json_path = self.resolve_json_path(library_root)
        files = [json_path]

        for reference in self.resource_references():
            try:
                files.append(resolve_sub_file(json_path, reference))
            except AssetPathError as e:
                print(f"Warning: {self.label} {self.identifier}: {e}", file=sys.stderr)

        return files

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def dependencies(self) -> list[Identifier]:
        """Identifiers of other assets this asset needs in order to work."""
        return []

    def refactor_identifier(self, old: Identifier, new: Identifier) -> bool:
        """Rewrite references to ``old`` so they point at ``new``.

        Only dependent references are rewritten; the asset's own identifier is
        handled by the library.

        Returns:
            True if anything changed
        """
        return False

    def refactor_author_name(self, old_name: str, new_name: str) -> bool:
        """Move this asset to another author if it belongs to ``old_name``.

        Returns:
            True if the identifier changed
        """
        if self.identifier is None:
            return False
        if self.identifier.author_name == old_name:
            self.identifier = self.identifier.with_author_name(new_name)
            return True
        return False

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def check_identifier(self, errors: list[str]) -> bool:
        if self.identifier is None:
            errors.append(f"{self.label} does not have an identifier defined.")
            return False
        if not self.identifier.is_valid:
            errors.append(f"{self.label} {self.identifier} has invalid identifier.")
            return False
        return True

    @abstractmethod
    def validate(self, library: "AssetLibrary", errors: list[str]) -> bool:
        """Check this asset's fields and references against a library.

        Validation may normalize values (for example clamping).

        Args:
            library: The library the asset belongs to (or is about to join)
            errors: Receives human-readable messages for every problem found

        Returns:
            True if the asset is valid
        """
        pass

    @property
    @abstractmethod
    def is_filled_out(self) -> bool:
        """Quick check that every required field has a usable value."""
        pass

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    @abstractmethod
    def serialize(self) -> Any:
        """Convert this asset to its JSON document."""
        pass

    @classmethod
    @abstractmethod
    def from_document(cls, document: dict[str, Any], json_file_path: Path | None = None) -> "Asset":
        """Build an asset from a parsed JSON document.

        Raises:
            AssetParseError: If the document cannot be decoded
        """
        pass

    def identifier_string(self) -> str:
        return str(self.identifier) if self.identifier is not None else ""
