"""Asset types: materials, props and maps.

Importing this package registers every asset type with the registry.
"""

from .base import Asset
from .blocks import (
    BlockBlock,
    BlockTransform,
    EntityBlock,
    MapBlock,
    MapBlockType,
    PropBlock,
    ShapeType,
    TextBlock,
    TextInfo,
    parse_block,
)
from .map import Map
from .material import Material
from .prop import Prop

# Auto-register with the registry
from ..registry import AssetRegistry

AssetRegistry.register(Material)
AssetRegistry.register(Prop)
AssetRegistry.register(Map)

__all__ = [
    "Asset",
    "BlockBlock",
    "BlockTransform",
    "EntityBlock",
    "Map",
    "MapBlock",
    "MapBlockType",
    "Material",
    "Prop",
    "PropBlock",
    "ShapeType",
    "TextBlock",
    "TextInfo",
    "parse_block",
]
