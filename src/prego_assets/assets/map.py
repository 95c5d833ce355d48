"""Maps: playable levels made of blocks."""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..core.errors import AssetParseError
from ..core.identifier import AssetType, Identifier
from ..core.types import MapDocument
from .base import Asset, require_object, validate_identifier
from .blocks import MapBlock, parse_block

if TYPE_CHECKING:
    from ..library import AssetLibrary

DEFAULT_DEATH_PLANE = -100.0


@dataclass(eq=False)
class Map(Asset):
    """A map made of blocks, props, entities and text.

    Attributes:
        name: Shown in the UI
        description: Shown below the name
        death_plane: Y level at which players are teleported back up
        blocks: Everything placed in the map
    """

    asset_type = AssetType.map
    directory_name = "maps"

    name: str = ""
    description: str = ""
    death_plane: float = DEFAULT_DEATH_PLANE
    blocks: list[MapBlock] = field(default_factory=list)

    def preferred_file_stem(self) -> str:
        if self.name and self.name.strip():
            return self.name.strip().replace(" ", "_")
        return super().preferred_file_stem()

    def dependencies(self) -> list[Identifier]:
        return list(dict.fromkeys(
            identifier for block in self.blocks for identifier in block.dependencies()
        ))

    def refactor_identifier(self, old: Identifier, new: Identifier) -> bool:
        changed = False
        for block in self.blocks:
            changed |= block.refactor_identifier(old, new)
        return changed

    def validate(self, library: "AssetLibrary", errors: list[str]) -> bool:
        if not self.check_identifier(errors):
            return False

        if not self.name or not self.name.strip():
            errors.append(f"Map {self.identifier}: Name is empty.")
            return False

        if not self.description or not self.description.strip():
            errors.append(f"Map {self.identifier}: Description is empty.")
            return False

        if not math.isfinite(self.death_plane):
            errors.append(f"Map {self.identifier}: Death plane must be a finite number.")
            return False

        valid = True
        for dependency in self.dependencies():
            valid &= validate_identifier(dependency, self.identifier, library, errors)
        return valid

    @property
    def is_filled_out(self) -> bool:
        return (
            self.identifier is not None
            and self.identifier.is_valid
            and bool(self.name and self.name.strip())
            and bool(self.description and self.description.strip())
            and math.isfinite(self.death_plane)
        )

    def serialize(self) -> MapDocument:
        return {
            "identifier": self.identifier_string(),
            "map": {
                "name": self.name,
                "description": self.description,
                "death_plane": self.death_plane,
            },
            "blocks": [block.serialize() for block in self.blocks],
        }

    @classmethod
    def from_document(cls, document: dict[str, Any], json_file_path: Path | None = None) -> "Map":
        where = str(json_file_path) if json_file_path else "map document"
        identifier = Identifier.from_json(document.get("identifier"), f"{where} -> identifier")
        info = require_object(document, "map", where)

        game_map = cls(identifier=identifier, json_file_path=json_file_path)

        for key in ("name", "description"):
            value = info.get(key, "")
            if not isinstance(value, str):
                raise AssetParseError(f"Property 'map -> {key}' in {where} must be a string")
            setattr(game_map, key, value)

        death_plane = info.get("death_plane", DEFAULT_DEATH_PLANE)
        if isinstance(death_plane, bool) or not isinstance(death_plane, (int, float)):
            raise AssetParseError(f"Property 'map -> death_plane' in {where} must be a number")
        game_map.death_plane = float(death_plane)

        blocks = document.get("blocks", [])
        if not isinstance(blocks, list):
            raise AssetParseError(f"Property 'blocks' in {where} must be an array")

        # Anything that isn't an object is ignored
        game_map.blocks = [
            parse_block(block, f"{where} -> blocks -> {index}")
            for index, block in enumerate(blocks)
            if isinstance(block, dict)
        ]
        return game_map

    def __str__(self) -> str:
        return f"Map '{self.name}' - {len(self.blocks)} blocks"
