"""Type definitions for asset documents.

This module defines TypedDict classes that mirror the JSON schema structure
defined in schemas/*.schema.json. Vector and color fields hold either a single
number (uniform) or a list of three numbers.
"""

from typing import Any, TypedDict

VectorJSON = float | list[float]
ColorJSON = float | list[float]


class TransformDocument(TypedDict, total=False):
    """Placement of a map block."""

    position: VectorJSON
    rotation: VectorJSON  # Euler angles around each axis
    scale: VectorJSON  # Single number when uniform


class BlockDocument(TypedDict, total=False):
    """A solid block with a shape and a material."""

    type: str  # "block"
    transform: TransformDocument
    shape: str  # sphere, capsule, cylinder, cube, plane, quad
    material: str  # Material identifier
    effects: list[Any]  # Opaque, preserved as-is


class PropBlockDocument(TypedDict, total=False):
    """An instance of a prop placed in a map."""

    type: str  # "prop"
    transform: TransformDocument
    prop: str  # Prop identifier


class EntityBlockDocument(TypedDict, total=False):
    """A game entity placed in a map."""

    type: str  # "entity"
    transform: TransformDocument
    entity: str  # Entity name understood by the game


class TextInfoDocument(TypedDict):
    content: str
    wrap: float | None  # Wrap distance, null for no wrapping
    color: ColorJSON


class TextBlockDocument(TypedDict, total=False):
    """Floating text shown in a map."""

    type: str  # "text"
    transform: TransformDocument
    text: TextInfoDocument


MapBlockDocument = BlockDocument | PropBlockDocument | EntityBlockDocument | TextBlockDocument


class MapInfoDocument(TypedDict):
    name: str
    description: str
    death_plane: float  # Y level at which players are sent back up


class MapDocument(TypedDict):
    """Complete map file."""

    identifier: str
    map: MapInfoDocument
    blocks: list[MapBlockDocument]


class PropInfoDocument(TypedDict, total=False):
    name: str
    model: str  # Path relative to the prop's JSON file
    base_scale: float
    material: str  # Single material identifier
    materials: list[str]  # Material identifiers by slot


class PropDocument(TypedDict):
    """Complete prop file."""

    identifier: str
    prop: PropInfoDocument


class MaterialInfoDocument(TypedDict, total=False):
    name: str
    texture: str  # Path relative to the material's JSON file
    color: ColorJSON  # Only when there is no texture
    alpha: float
    roughness: float  # 0 = smooth, 1 = fully diffuse
    metallic: float  # 0 = non-metallic, 1 = fully metallic


class MaterialDocument(TypedDict):
    """Complete material file."""

    identifier: str
    material: MaterialInfoDocument


AssetDocument = MapDocument | PropDocument | MaterialDocument
