"""Map blocks: the pieces a map is built from.

Every block has a ``type`` tag and a transform. The tag decides which other
properties the block carries:

- ``block``: a primitive shape with a material (and optional effects)
- ``prop``: an instance of a prop asset
- ``entity``: a game entity referenced by name
- ``text``: floating text
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from ..core.codecs import MaterialColor, Vector3
from ..core.errors import AssetParseError
from ..core.identifier import Identifier
from ..core.types import (
    BlockDocument,
    EntityBlockDocument,
    MapBlockDocument,
    PropBlockDocument,
    TextBlockDocument,
    TextInfoDocument,
    TransformDocument,
)


class MapBlockType(str, Enum):
    block = "block"
    prop = "prop"
    entity = "entity"
    text = "text"

    def __str__(self) -> str:
        return self.value


class ShapeType(str, Enum):
    sphere = "sphere"
    capsule = "capsule"
    cylinder = "cylinder"
    cube = "cube"
    plane = "plane"
    quad = "quad"

    def __str__(self) -> str:
        return self.value


@dataclass
class BlockTransform:
    """Placement of a block. Rotation is in Euler angles around each axis."""

    position: Vector3 = field(default_factory=Vector3)
    rotation: Vector3 = field(default_factory=Vector3)
    scale: Vector3 = field(default_factory=lambda: Vector3.uniform(1.0))

    @property
    def is_scale_uniform(self) -> bool:
        return self.scale.is_uniform

    def serialize(self) -> TransformDocument:
        return {
            "position": self.position.to_json(),
            "rotation": self.rotation.to_json(),
            "scale": self.scale.to_json(),
        }

    @classmethod
    def from_document(cls, document: Any, where: str) -> "BlockTransform":
        transform = cls()
        if document is None:
            return transform
        if not isinstance(document, dict):
            raise AssetParseError(f"Transform at {where} must be an object")

        if "position" in document:
            transform.position = Vector3.from_json(document["position"], f"{where} -> position")
        if "rotation" in document:
            transform.rotation = Vector3.from_json(document["rotation"], f"{where} -> rotation")
        if "scale" in document:
            transform.scale = Vector3.from_json(document["scale"], f"{where} -> scale")
        return transform


@dataclass
class MapBlock(ABC):
    """Abstract base class for the block variants."""

    block_type: ClassVar[MapBlockType]

    transform: BlockTransform = field(default_factory=BlockTransform)

    def dependencies(self) -> list[Identifier]:
        """Identifiers of the assets this block needs."""
        return []

    def refactor_identifier(self, old: Identifier, new: Identifier) -> bool:
        return False

    @abstractmethod
    def serialize_fields(self) -> dict[str, Any]:
        """Return the properties specific to this variant."""
        pass

    @classmethod
    @abstractmethod
    def from_document(cls, document: dict[str, Any], where: str) -> "MapBlock":
        pass

    def serialize(self) -> MapBlockDocument:
        document: dict[str, Any] = {
            "type": self.block_type.value,
            "transform": self.transform.serialize(),
        }
        document.update(self.serialize_fields())
        return document  # type: ignore[return-value]


def _identifier_field(document: dict[str, Any], key: str, where: str) -> Identifier:
    return Identifier.from_json(document.get(key), f"{where} -> {key}")


@dataclass
class BlockBlock(MapBlock):
    """A primitive shape with a material applied.

    ``effects`` is not interpreted; it is kept so it survives a save.
    """

    block_type = MapBlockType.block

    shape: ShapeType = ShapeType.cube
    material: Identifier | None = None
    effects: list[Any] = field(default_factory=list)

    def dependencies(self) -> list[Identifier]:
        return [self.material] if self.material is not None else []

    def refactor_identifier(self, old: Identifier, new: Identifier) -> bool:
        if self.material == old:
            self.material = new
            return True
        return False

    def serialize_fields(self) -> BlockDocument:
        fields: BlockDocument = {
            "shape": self.shape.value,
            "material": str(self.material) if self.material is not None else "",
        }
        if self.effects:
            fields["effects"] = self.effects
        return fields

    @classmethod
    def from_document(cls, document: dict[str, Any], where: str) -> "BlockBlock":
        block = cls(transform=BlockTransform.from_document(document.get("transform"), f"{where} -> transform"))

        shape = document.get("shape", ShapeType.cube.value)
        try:
            block.shape = ShapeType(shape)
        except ValueError:
            raise AssetParseError(f"Invalid shape at '{where} -> shape': '{shape}'") from None

        block.material = _identifier_field(document, "material", where)

        effects = document.get("effects")
        if effects is not None:
            if not isinstance(effects, list):
                raise AssetParseError(f"Effects at '{where} -> effects' must be an array")
            block.effects = effects

        return block


@dataclass
class PropBlock(MapBlock):
    """An instance of a prop asset."""

    block_type = MapBlockType.prop

    prop: Identifier | None = None

    def dependencies(self) -> list[Identifier]:
        return [self.prop] if self.prop is not None else []

    def refactor_identifier(self, old: Identifier, new: Identifier) -> bool:
        if self.prop == old:
            self.prop = new
            return True
        return False

    def serialize_fields(self) -> PropBlockDocument:
        return {"prop": str(self.prop) if self.prop is not None else ""}

    @classmethod
    def from_document(cls, document: dict[str, Any], where: str) -> "PropBlock":
        return cls(
            transform=BlockTransform.from_document(document.get("transform"), f"{where} -> transform"),
            prop=_identifier_field(document, "prop", where),
        )


@dataclass
class EntityBlock(MapBlock):
    block_type = MapBlockType.entity

    entity: str = ""

    def serialize_fields(self) -> EntityBlockDocument:
        return {"entity": self.entity}

    @classmethod
    def from_document(cls, document: dict[str, Any], where: str) -> "EntityBlock":
        entity = document.get("entity", "")
        if not isinstance(entity, str):
            raise AssetParseError(f"Entity name at '{where} -> entity' must be a string")
        return cls(
            transform=BlockTransform.from_document(document.get("transform"), f"{where} -> transform"),
            entity=entity,
        )


@dataclass
class TextInfo:
    """Content of a text block.

    Attributes:
        content: The text shown to the viewer
        wrap: Distance at which the text wraps, or None to never wrap
        color: Text color
    """

    content: str = ""
    wrap: float | None = None
    color: MaterialColor = field(default_factory=lambda: MaterialColor.WHITE)

    @property
    def should_wrap(self) -> bool:
        return self.wrap is not None

    def serialize(self) -> TextInfoDocument:
        # wrap is written even when null
        return {
            "content": self.content,
            "color": self.color.to_json(),
            "wrap": self.wrap,
        }

    @classmethod
    def from_document(cls, document: Any, where: str) -> "TextInfo":
        if not isinstance(document, dict):
            raise AssetParseError(f"Required object 'text' not found at '{where}'")

        info = cls()
        content = document.get("content", "")
        if not isinstance(content, str):
            raise AssetParseError(f"Text content at '{where} -> content' must be a string")
        info.content = content

        wrap = document.get("wrap")
        if wrap is not None:
            if isinstance(wrap, bool) or not isinstance(wrap, (int, float)):
                raise AssetParseError(f"Text wrap at '{where} -> wrap' must be a number or null")
            info.wrap = float(wrap)

        if "color" in document:
            info.color = MaterialColor.from_json(document["color"], f"{where} -> color")
        return info


@dataclass
class TextBlock(MapBlock):
    block_type = MapBlockType.text

    text: TextInfo = field(default_factory=TextInfo)

    def serialize_fields(self) -> TextBlockDocument:
        return {"text": self.text.serialize()}

    @classmethod
    def from_document(cls, document: dict[str, Any], where: str) -> "TextBlock":
        return cls(
            transform=BlockTransform.from_document(document.get("transform"), f"{where} -> transform"),
            text=TextInfo.from_document(document.get("text"), f"{where} -> text"),
        )


BLOCK_CLASSES: dict[MapBlockType, type[MapBlock]] = {
    MapBlockType.block: BlockBlock,
    MapBlockType.prop: PropBlock,
    MapBlockType.entity: EntityBlock,
    MapBlockType.text: TextBlock,
}


def parse_block(document: dict[str, Any], where: str) -> MapBlock:
    """Decode one map block, choosing the variant from its ``type`` tag.

    Args:
        document: The block's JSON object
        where: Location of the block, used in error messages

    Returns:
        The decoded block

    Raises:
        AssetParseError: If the tag is missing or unknown, or the block's
            properties cannot be decoded
    """
    type_name = document.get("type")
    if type_name is None:
        raise AssetParseError(f"Map block at '{where}' is missing block type.")

    try:
        block_type = MapBlockType(type_name)
    except ValueError:
        raise AssetParseError(f"Invalid MapBlockType at '{where}': '{type_name}'") from None

    return BLOCK_CLASSES[block_type].from_document(document, where)
