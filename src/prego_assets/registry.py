"""Asset type registry.

This module maps every asset type to the class that implements it, so the
library can create and decode assets without knowing the concrete classes.
Asset classes register themselves when ``prego_assets.assets`` is imported.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any

from .core.identifier import AssetType

if TYPE_CHECKING:
    from .assets.base import Asset


class AssetRegistry:
    """Central registry of asset classes, keyed by asset type."""

    _classes: dict[AssetType, type["Asset"]] = {}

    @classmethod
    def register(cls, asset_class: type["Asset"]) -> None:
        """Register the class implementing an asset type.

        Args:
            asset_class: Asset subclass with ``asset_type`` and
                ``directory_name`` set

        Raises:
            ValueError: If another class is already registered for the type
        """
        existing = cls._classes.get(asset_class.asset_type)
        if existing is not None and existing is not asset_class:
            raise ValueError(
                f"Asset type '{asset_class.asset_type}' is already registered to {existing.__name__}"
            )
        cls._classes[asset_class.asset_type] = asset_class

    @classmethod
    def get(cls, asset_type: AssetType) -> type["Asset"]:
        """Return the class registered for an asset type.

        Raises:
            ValueError: If the type has no registered class
        """
        if asset_type not in cls._classes:
            available = ", ".join(t.value for t in cls._classes) or "none"
            raise ValueError(f"Unknown asset type: '{asset_type}'. Available types: {available}")
        return cls._classes[asset_type]

    @classmethod
    def directory_for(cls, asset_type: AssetType) -> str:
        """Category directory (under the library root) holding this type."""
        return cls.get(asset_type).directory_name

    @classmethod
    def create(cls, asset_type: AssetType) -> "Asset":
        """Create an empty asset of the given type.

        Example:
            >>> material = AssetRegistry.create(AssetType.material)
            >>> material.identifier is None
            True
        """
        return cls.get(asset_type)()

    @classmethod
    def from_document(
        cls, asset_type: AssetType, document: dict[str, Any], json_file_path: Path | None = None
    ) -> "Asset":
        """Decode a document into an asset of the given type.

        Raises:
            AssetParseError: If the document cannot be decoded
        """
        return cls.get(asset_type).from_document(document, json_file_path)

    @classmethod
    def list_types(cls) -> list[AssetType]:
        """Registered asset types in declaration order."""
        return sorted(cls._classes, key=lambda t: t.ordinal)
