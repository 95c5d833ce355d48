"""Prego Wars Asset Editor - asset library core.

This package loads, validates, edits and saves Prego Wars game assets
(maps, props and materials) stored as JSON files in a ``pw-assets``
directory, together with the textures and models they reference.
"""

# Core library interface
from .library import AssetLibrary, CleanupResult, LoadResult, SaveResult
from .registry import AssetRegistry

# Asset types (importing registers them)
from .assets import Asset, Map, MapBlock, Material, Prop

# Core utilities
from .core import (
    AssetParseError,
    AssetPathError,
    AssetType,
    CancellationToken,
    Identifier,
    MaterialColor,
    ProgressCallback,
    Prompt,
    PromptResult,
    Vector3,
    validate_document,
    validate_document_with_error_details,
)

# Editing flows
from .editing import DeleteResult, commit_asset, delete_asset, import_resource_file

# CLI
from .cli import main

__version__ = "0.1.0"

__all__ = [
    # Primary library interface
    "AssetLibrary",
    "AssetRegistry",
    "LoadResult",
    "SaveResult",
    "CleanupResult",
    # Assets
    "Asset",
    "Map",
    "MapBlock",
    "Material",
    "Prop",
    # Core utilities
    "AssetParseError",
    "AssetPathError",
    "AssetType",
    "CancellationToken",
    "Identifier",
    "MaterialColor",
    "ProgressCallback",
    "Prompt",
    "PromptResult",
    "Vector3",
    "validate_document",
    "validate_document_with_error_details",
    # Editing
    "DeleteResult",
    "commit_asset",
    "delete_asset",
    "import_resource_file",
    "main",
]
