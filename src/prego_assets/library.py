"""The asset library: every asset under one ``pw-assets`` directory.

The library loads assets from disk, keeps track of which identifiers are
defined, queues changed assets until they are saved, and propagates identifier
and author renames to every asset that references them.

Long-running operations (load, save, cleanup) run synchronously and accept an
optional progress callback and cancellation token; callers that want them off
the main thread run them in a worker of their own.
"""

import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .assets import Asset, Map, Material, Prop
from .core.documents import dump_document, load_document
from .core.errors import AssetParseError
from .core.identifier import AssetType, Identifier
from .core.interfaces import CancellationToken, ProgressCallback, is_cancelled, report
from .core.validator import validate_document_with_error_details
from .paths import absolute, remove_empty_parents, same_file_key
from .registry import AssetRegistry

ASSETS_DIR_NAME = "pw-assets"

# Category directories are read in this order
LOAD_ORDER = (AssetType.map, AssetType.prop, AssetType.material)
# Progress reported after each category directory is scanned
DIRECTORY_PROGRESS = (4, 7, 10)
FILES_PROGRESS_START = 10
VALIDATION_PROGRESS_START = 90


def default_assets_directory() -> Path:
    """The assets directory used when none is given: ``./pw-assets``."""
    return Path.cwd() / ASSETS_DIR_NAME


def deduplicate_by_identifier(assets: Iterable[Asset]) -> list[Asset]:
    """Keep the first asset queued for each identifier, in order."""
    seen: set[Identifier | None] = set()
    unique = []
    for asset in assets:
        if asset.identifier in seen:
            continue
        seen.add(asset.identifier)
        unique.append(asset)
    return unique


@dataclass
class LoadResult:
    """Outcome of loading a library.

    Attributes:
        success: True only if every file parsed and every asset validated
        errors: Human-readable messages for every problem found
        cancelled: True if loading stopped early on request
    """

    success: bool
    errors: list[str] = field(default_factory=list)
    cancelled: bool = False


@dataclass
class SaveResult:
    saved: list[Asset] = field(default_factory=list)
    failed: list[tuple[Asset, str]] = field(default_factory=list)
    cancelled: bool = False

    @property
    def success(self) -> bool:
        return not self.failed and not self.cancelled


@dataclass
class CleanupResult:
    deleted: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, str]] = field(default_factory=list)
    cancelled: bool = False


class AssetLibrary:
    """Loads, caches and writes the assets under one root directory.

    Every asset in the library has an identifier, and no two assets share
    one. Changed assets are queued until ``save`` writes them.

    Example:
        >>> library = AssetLibrary(Path("game/pw-assets"), author_name="lukec")
        >>> result = library.load()
        >>> if not result.success:
        ...     print("\\n".join(result.errors))
    """

    def __init__(self, root: Path | str | None = None, author_name: str = ""):
        """Initialize an empty library.

        Args:
            root: The ``pw-assets`` directory; defaults to ``./pw-assets``
            author_name: Author used for newly created assets
        """
        self._root = absolute(root) if root is not None else absolute(default_assets_directory())
        self.author_name = author_name
        self._assets: list[Asset] = []
        self._identifiers: set[Identifier] = set()
        self._changes: list[Asset] = []

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def root(self) -> Path:
        return self._root

    @root.setter
    def root(self, value: Path | str) -> None:
        self._root = absolute(value)

    @property
    def assets(self) -> tuple[Asset, ...]:
        return tuple(self._assets)

    @property
    def maps(self) -> list[Map]:
        return [asset for asset in self._assets if isinstance(asset, Map)]

    @property
    def props(self) -> list[Prop]:
        return [asset for asset in self._assets if isinstance(asset, Prop)]

    @property
    def materials(self) -> list[Material]:
        return [asset for asset in self._assets if isinstance(asset, Material)]

    def assets_of_type(self, asset_type: AssetType) -> list[Asset]:
        return [asset for asset in self._assets if asset.asset_type == asset_type]

    @property
    def changes(self) -> list[Asset]:
        """Assets waiting to be saved, one per identifier (first queued wins)."""
        return deduplicate_by_identifier(self._changes)

    @property
    def existing_author_names(self) -> list[str]:
        names: dict[str, None] = {}
        for asset in self._assets:
            if asset.identifier is not None:
                names.setdefault(asset.identifier.author_name)
        return list(names)

    def find(self, identifier: Identifier) -> Asset | None:
        for asset in self._assets:
            if asset.identifier == identifier:
                return asset
        return None

    def resolve_materials(self, identifiers: Iterable[Identifier]) -> list[Material]:
        """Look up materials by identifier, skipping any that are not loaded."""
        materials = []
        for identifier in identifiers:
            material = self.find(identifier)
            if isinstance(material, Material):
                materials.append(material)
        return materials

    def has_identifier(self, identifier: Identifier) -> bool:
        return identifier in self._identifiers

    def get_assets_that_depend_on(self, target: Asset | Identifier) -> list[Asset]:
        """Return every asset whose dependencies include the target."""
        identifier = target if isinstance(target, Identifier) else target.identifier
        if identifier is None:
            return []
        return [asset for asset in self._assets if identifier in asset.dependencies()]

    # ------------------------------------------------------------------
    # Directories
    # ------------------------------------------------------------------

    @staticmethod
    def is_valid_assets_directory(path: Path | str) -> bool:
        """Return True if the directory's name marks it as an assets directory."""
        return absolute(path).name.endswith(ASSETS_DIR_NAME)

    def category_directory(self, asset_type: AssetType) -> Path:
        return self._root / AssetRegistry.directory_for(asset_type)

    def cleanup_boundary(self, path: Path) -> Path:
        """The directory that empty-directory removal must stop at for a file.

        This is the category directory containing the file, or the root for
        files outside every category directory.
        """
        path = absolute(path)
        for asset_type in LOAD_ORDER:
            directory = self.category_directory(asset_type)
            if path.is_relative_to(directory):
                return directory
        return self._root

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(
        self,
        progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> LoadResult:
        """Load every asset under the root directory.

        The library is emptied first. Files that fail to parse are reported
        and skipped; the assets that did parse stay loaded. After all files
        are read, every loaded asset is validated against the complete
        library so cross-asset references can be checked.

        Args:
            progress: Receives percentages: 0-10 while scanning directories,
                10-90 while reading files and 90-100 while validating
            cancel: Checked before each file and before each validation

        Returns:
            LoadResult with the accumulated errors
        """
        self.clear_assets()
        self.clear_changes()
        errors: list[str] = []

        if not self.is_valid_assets_directory(self._root):
            errors.append(f"Input directory '{self._root}' is not a valid Prego Wars 'assets' directory.")
            return LoadResult(False, errors)

        if not self._root.is_dir():
            errors.append(f"Assets directory '{self._root}' does not exist.")
            return LoadResult(False, errors)

        files: list[tuple[AssetType, Path]] = []
        for asset_type, percent in zip(LOAD_ORDER, DIRECTORY_PROGRESS):
            directory = self.category_directory(asset_type)
            if directory.is_dir():
                files.extend(
                    (asset_type, path) for path in sorted(directory.rglob("*.json")) if path.is_file()
                )
            else:
                directory.mkdir(parents=True, exist_ok=True)
            report(progress, percent)

        success = True
        for index, (asset_type, path) in enumerate(files, start=1):
            if is_cancelled(cancel):
                return LoadResult(False, errors, cancelled=True)

            success &= self._load_file(asset_type, path, errors)
            report(progress, FILES_PROGRESS_START + index * 80 // len(files))

        report(progress, VALIDATION_PROGRESS_START)

        assets = list(self._assets)
        for index, asset in enumerate(assets, start=1):
            if is_cancelled(cancel):
                return LoadResult(False, errors, cancelled=True)

            success &= asset.validate(self, errors)
            report(progress, VALIDATION_PROGRESS_START + index * 10 // len(assets))

        report(progress, 100)
        return LoadResult(success, errors)

    def _load_file(self, asset_type: AssetType, path: Path, errors: list[str]) -> bool:
        try:
            document = load_document(path)
        except AssetParseError as e:
            errors.append(str(e))
            return False
        except (OSError, UnicodeDecodeError) as e:
            errors.append(f"Could not read {path}: {e}")
            return False

        is_valid, error_msg = validate_document_with_error_details(asset_type, document)
        if not is_valid:
            errors.append(f"{path}: {error_msg}")
            return False

        try:
            asset = AssetRegistry.from_document(asset_type, document, absolute(path))
        except AssetParseError as e:
            errors.append(str(e))
            return False

        assert asset.identifier is not None
        if asset.identifier in self._identifiers:
            existing = self.find(asset.identifier)
            where = existing.json_file_path if existing is not None else "another file"
            errors.append(f"{path}: Identifier '{asset.identifier}' is already defined in {where}.")
            return False

        self._register(asset)
        return True

    def _register(self, asset: Asset) -> None:
        assert asset.identifier is not None
        self._assets.append(asset)
        self._identifiers.add(asset.identifier)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def save(
        self,
        changes: Iterable[Asset] | None = None,
        progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> SaveResult:
        """Write changed assets to disk.

        A failure to write one asset is reported on stderr and does not stop
        the others. Written assets leave the pending queue and keep the path
        they were written to. An asset with no file yet gets its default path,
        numbered (``Chair_2.json``) when that file already exists or belongs
        to another asset.

        Args:
            changes: Assets to write, deduplicated by identifier; defaults to
                ``self.changes``
            progress: Receives a percentage after each asset
            cancel: Checked before each asset

        Returns:
            SaveResult listing saved and failed assets
        """
        to_save = self.changes if changes is None else deduplicate_by_identifier(changes)
        result = SaveResult()

        for index, asset in enumerate(to_save, start=1):
            if is_cancelled(cancel):
                result.cancelled = True
                break

            try:
                path = self._write_asset(asset)
            except (OSError, ValueError) as e:
                print(f"Warning: Failed to save {asset.label} {asset.identifier}: {e}", file=sys.stderr)
                result.failed.append((asset, str(e)))
            else:
                asset.json_file_path = path
                self._changes = [queued for queued in self._changes if queued is not asset]
                result.saved.append(asset)
            finally:
                report(progress, index * 100 // len(to_save))

        if not to_save:
            report(progress, 100)
        return result

    def _write_asset(self, asset: Asset) -> Path:
        if asset.json_file_path is not None:
            path = absolute(asset.json_file_path)
        else:
            path = self._free_json_path(asset)

        document = asset.serialize()

        is_valid, error_msg = validate_document_with_error_details(asset.asset_type, document)
        if not is_valid:
            raise AssetParseError(f"Refusing to write {path}: {error_msg}")

        text = dump_document(document)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def _free_json_path(self, asset: Asset) -> Path:
        """Return the asset's default path, numbered until nothing else uses it."""
        default = asset.default_json_path(self._root)
        taken = {
            same_file_key(other.json_file_path)
            for other in self._assets
            if other is not asset and other.json_file_path is not None
        }

        path = default
        number = 2
        while path.exists() or same_file_key(path) in taken:
            path = default.with_name(f"{default.stem}_{number}{default.suffix}")
            number += 1
        return path

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def cleanup(
        self,
        progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> CleanupResult:
        """Delete every non-JSON file under the root that no asset references.

        Directories emptied by a deletion are removed too, but never the root
        or a category directory. Files that cannot be deleted are reported on
        stderr and skipped.
        """
        result = CleanupResult()
        if not self._root.is_dir():
            return result

        candidates = sorted(
            path for path in self._root.rglob("*")
            if path.is_file() and path.suffix.lower() != ".json"
        )
        used = {
            same_file_key(path)
            for asset in self._assets
            for path in asset.referenced_files(self._root)
            if path.suffix.lower() != ".json"
        }

        for index, path in enumerate(candidates, start=1):
            if is_cancelled(cancel):
                result.cancelled = True
                break

            try:
                if same_file_key(path) not in used:
                    path.unlink()
                    result.deleted.append(path)
                    remove_empty_parents(path, self.cleanup_boundary(path))
            except OSError as e:
                print(f"Warning: Failed to delete {path}: {e}", file=sys.stderr)
                result.failed.append((path, str(e)))
            finally:
                report(progress, index * 100 // len(candidates))

        if not candidates:
            report(progress, 100)
        return result

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_asset(self, asset: Asset) -> None:
        """Register a new asset and queue it for saving.

        Raises:
            ValueError: If the asset has no valid identifier, or its identifier
                is already defined
        """
        if asset.identifier is None or not asset.identifier.is_valid:
            raise ValueError(
                "Attempted to add an asset which has an invalid identifier (or no identifier at all)."
            )
        if asset.identifier in self._identifiers:
            raise ValueError(f"Identifier '{asset.identifier}' is already defined in the library.")

        self._register(asset)
        self._changes.append(asset)

    def asset_changed(self, asset: Asset) -> None:
        self._changes.append(asset)

    def identifier_changed(self, asset: Asset, old: Identifier) -> None:
        """Re-register an asset whose own identifier was edited in place.

        References held by other assets are left alone; use
        ``refactor_identifier`` to move them as well.
        """
        if asset.identifier is None:
            raise ValueError("Cannot re-register an asset without an identifier.")
        self._identifiers.discard(old)
        self._identifiers.add(asset.identifier)
        self._changes.append(asset)

    def contains(self, asset: Asset) -> bool:
        """Return True if this exact asset object is in the library."""
        return any(existing is asset for existing in self._assets)

    def clear_changes(self) -> None:
        self._changes.clear()

    def clear_assets(self) -> None:
        self._assets.clear()
        self._identifiers.clear()

    def remove_asset(self, asset: Asset) -> Asset:
        """Remove an asset and delete its JSON file.

        Raises:
            ValueError: If the asset has no identifier
        """
        if asset.identifier is None:
            raise ValueError("Cannot remove asset; has no identifier.")
        return self.remove_by_identifier(asset.identifier)

    def remove_by_identifier(self, identifier: Identifier) -> Asset:
        """Remove the asset with an identifier and delete its JSON file.

        A JSON file that cannot be deleted is reported on stderr; the asset
        still leaves the library.

        Returns:
            The removed asset

        Raises:
            KeyError: If no asset has the identifier
        """
        asset = self.find(identifier)
        if asset is None:
            raise KeyError(f"No asset with identifier '{identifier}'")

        path = asset.json_file_path
        if path is not None and path.is_file():
            try:
                path.unlink()
            except OSError as e:
                print(f"Warning: Failed to delete {path}: {e}", file=sys.stderr)

        self._changes = [queued for queued in self._changes if queued.identifier != identifier]
        self._identifiers.discard(identifier)
        self._assets = [existing for existing in self._assets if existing.identifier != identifier]
        return asset

    def refactor_identifier(self, old: Identifier, new: Identifier) -> None:
        """Rename an identifier everywhere in the library.

        The asset that owns ``old`` takes ``new``, and every asset referencing
        ``old`` is rewritten to reference ``new``. Changed assets are queued.
        """
        self._identifiers.discard(old)
        self._identifiers.add(new)

        for asset in self._assets:
            if asset.identifier == old:
                asset.identifier = new
                self._changes.append(asset)

            if asset.refactor_identifier(old, new):
                self._changes.append(asset)

    def refactor_author_name(self, old_name: str, new_name: str) -> list[tuple[Identifier, Identifier]]:
        """Move every asset of one author to another.

        References held by other assets follow the rename. Names that differ
        only by case are treated as the same name and nothing changes.

        Returns:
            (old identifier, new identifier) for every renamed asset
        """
        if old_name.casefold() == new_name.casefold():
            return []

        renamed: list[tuple[Identifier, Identifier]] = []
        for asset in self._assets:
            old_identifier = asset.identifier
            if old_identifier is None:
                continue
            if asset.refactor_author_name(old_name, new_name):
                self._changes.append(asset)
                assert asset.identifier is not None
                renamed.append((old_identifier, asset.identifier))

        for old_identifier, new_identifier in renamed:
            self.refactor_identifier(old_identifier, new_identifier)

        if self.author_name == old_name:
            self.author_name = new_name
        return renamed
