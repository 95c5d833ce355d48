"""Materials applied to map blocks and props.

A material is either a flat color (with alpha) or a texture image, plus
roughness and metallic factors.
"""

from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Any

from ..core.codecs import MaterialColor
from ..core.errors import AssetParseError, AssetPathError
from ..core.identifier import AssetType, Identifier
from ..core.types import MaterialDocument, MaterialInfoDocument
from .base import Asset, require_object

if TYPE_CHECKING:
    from ..library import AssetLibrary

SUPPORTED_TEXTURE_TYPES = ("png", "jpg")

# Alpha this close to 1 is snapped to exactly 1
ALPHA_SNAP_TOLERANCE = 0.001

DEFAULT_ALPHA = 1.0
DEFAULT_ROUGHNESS = 0.7
DEFAULT_METALLIC = 0.0
# Values assumed for properties missing from a file
MISSING_NAME = "unset"
MISSING_ROUGHNESS = 0.75


def is_texture_file_allowed(file: str | None) -> bool:
    """Return True if a texture path has a supported image extension."""
    if not file:
        return False
    suffix = PurePath(file.replace("\\", "/")).suffix
    return bool(suffix) and suffix[1:].lower() in SUPPORTED_TEXTURE_TYPES


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def _number(info: dict[str, Any], key: str, default: float, where: str) -> float:
    value = info.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AssetParseError(f"Property '{key}' in {where} must be a number")
    return float(value)


@dataclass(eq=False)
class Material(Asset):
    """A material that can be applied to map blocks and props.

    Attributes:
        name: User-facing name
        texture: Image path relative to the JSON file's directory, or None
            when the flat color is used
        color: Flat color, ignored while a texture is set
        alpha: Opacity from 0.0-1.0
        roughness: 0.0 is completely smooth, 1.0 completely diffuse
        metallic: 0.0 is non-metallic, 1.0 completely metallic
    """

    asset_type = AssetType.material
    directory_name = "materials"

    name: str = ""
    texture: str | None = None
    color: MaterialColor = field(default_factory=lambda: MaterialColor.GRAY)
    alpha: float = DEFAULT_ALPHA
    roughness: float = DEFAULT_ROUGHNESS
    metallic: float = DEFAULT_METALLIC

    def set_alpha(self, value: float) -> None:
        self.alpha = _clamp01(value)

    def set_roughness(self, value: float) -> None:
        self.roughness = _clamp01(value)

    def set_metallic(self, value: float) -> None:
        self.metallic = _clamp01(value)

    def resource_references(self) -> list[str]:
        return [self.texture] if self.texture else []

    def validate(self, library: "AssetLibrary", errors: list[str]) -> bool:
        if not self.check_identifier(errors):
            return False

        if not self.name or not self.name.strip():
            errors.append(f"Material {self.identifier} has no name.")
            return False

        if self.texture is not None and not self.validate_texture(library, errors):
            return False

        if abs(self.alpha - 1.0) < ALPHA_SNAP_TOLERANCE:
            self.alpha = 1.0
        self.alpha = _clamp01(self.alpha)

        return True

    def validate_texture(self, library: "AssetLibrary", errors: list[str]) -> bool:
        """Check the texture's extension and that the image exists."""
        texture = self.texture or ""
        if not is_texture_file_allowed(texture):
            suffix = PurePath(texture.replace("\\", "/")).suffix
            errors.append(f'Material {self.identifier}: Unsupported texture extension "{suffix}"')
            return False

        try:
            texture_path = self.sub_file(library.root, texture)
        except AssetPathError as e:
            errors.append(f"Material {self.identifier}: {e}")
            return False

        if not texture_path.is_file():
            errors.append(f'Material {self.identifier}: Texture file "{texture}" not found.')
            return False

        return True

    @property
    def is_filled_out(self) -> bool:
        return self.identifier is not None and self.identifier.is_valid

    def serialize(self) -> MaterialDocument:
        info: MaterialInfoDocument = {
            "name": self.name,
            "roughness": self.roughness,
            "metallic": self.metallic,
            "alpha": _clamp01(self.alpha),
        }
        if self.texture is None:
            info["color"] = self.color.to_json()
        else:
            info["texture"] = self.texture

        return {
            "identifier": self.identifier_string(),
            "material": info,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any], json_file_path: Path | None = None) -> "Material":
        where = str(json_file_path) if json_file_path else "material document"
        identifier = Identifier.from_json(document.get("identifier"), f"{where} -> identifier")
        info = require_object(document, "material", where)

        name = info.get("name", MISSING_NAME)
        if not isinstance(name, str):
            raise AssetParseError(f"Property 'name' in {where} must be a string")

        material = cls(
            identifier=identifier,
            json_file_path=json_file_path,
            name=name,
            alpha=_number(info, "alpha", DEFAULT_ALPHA, where),
            roughness=_number(info, "roughness", MISSING_ROUGHNESS, where),
            metallic=_number(info, "metallic", DEFAULT_METALLIC, where),
        )

        if "texture" in info:
            texture = info["texture"]
            if not isinstance(texture, str):
                raise AssetParseError(f"Property 'texture' in {where} must be a string")
            material.texture = texture
        elif "color" in info:
            material.color = MaterialColor.from_json(info["color"], f"{where} -> material -> color")
        else:
            raise AssetParseError(
                f"Missing 'color' or 'texture' property in material definition at: {where}"
            )

        return material

    def __str__(self) -> str:
        visual = f"'./{self.texture}'" if self.texture is not None else str(self.color)
        name = self.identifier.asset_name if self.identifier is not None else "???"
        return f"Material '{name}' - {visual}"
