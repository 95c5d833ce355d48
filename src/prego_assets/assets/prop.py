"""Props: 3D models placed into maps for decoration."""

import sys
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Any

from ..core.errors import AssetParseError, AssetPathError
from ..core.identifier import AssetType, Identifier
from ..core.types import PropDocument
from .base import Asset, require_object, validate_identifier

if TYPE_CHECKING:
    from ..library import AssetLibrary

SUPPORTED_MODEL_TYPES = ("obj", "stl", "glb", "gltf", "dae", "fbx")
# UVs and custom normals are not applied to these
PARTIALLY_SUPPORTED_MODEL_TYPES = ("stl",)

DEFAULT_BASE_SCALE = 1.0

_warned_partial_support = False


def _model_extension(file: str | None) -> str:
    if not file or not file.strip():
        return ""
    return PurePath(file.replace("\\", "/")).suffix[1:].lower()


def is_model_file_allowed(file: str | None) -> bool:
    """Return True if a model path has a supported extension."""
    return _model_extension(file) in SUPPORTED_MODEL_TYPES


def is_model_file_partially_supported(file: str | None) -> bool:
    return _model_extension(file) in PARTIALLY_SUPPORTED_MODEL_TYPES


def _warn_partial_support(file: str) -> None:
    global _warned_partial_support
    if _warned_partial_support:
        return
    _warned_partial_support = True
    print(
        f"Warning: Model '{file}' is only partially supported. "
        "UVs and custom normals will not be applied to models of this type.",
        file=sys.stderr,
    )


@dataclass(eq=False)
class Prop(Asset):
    """A prop that can be placed into a map for decoration.

    Exactly one of ``material`` and ``materials`` must be set.

    Attributes:
        name: Shown only in the map editor
        model: Model path relative to the JSON file's directory
        base_scale: Scale applied by default when the prop is placed
        material: The single material of a one-slot model
        materials: Materials by slot, starting from slot 0
    """

    asset_type = AssetType.prop
    directory_name = "props"

    name: str = ""
    model: str = ""
    base_scale: float = DEFAULT_BASE_SCALE
    material: Identifier | None = None
    materials: list[Identifier] | None = None

    @property
    def all_materials(self) -> list[Identifier]:
        """The materials of this prop, starting from slot 0."""
        if self.material is not None:
            return [self.material]
        return list(self.materials or [])

    def set_materials(self, identifiers: list[Identifier]) -> None:
        """Assign materials, using the single-material form for one entry."""
        if len(identifiers) == 1:
            self.material = identifiers[0]
            self.materials = None
        else:
            self.material = None
            self.materials = list(identifiers)

    def preferred_file_stem(self) -> str:
        if self.name and self.name.strip():
            return self.name.strip().replace(" ", "_")
        return super().preferred_file_stem()

    def resource_references(self) -> list[str]:
        return [self.model] if self.model else []

    def dependencies(self) -> list[Identifier]:
        return list(dict.fromkeys(self.all_materials))

    def refactor_identifier(self, old: Identifier, new: Identifier) -> bool:
        if self.material is not None:
            if self.material == old:
                self.material = new
                return True
            return False

        changed = False
        for index, identifier in enumerate(self.materials or []):
            if identifier == old:
                self.materials[index] = new  # type: ignore[index]
                changed = True
        return changed

    def validate(self, library: "AssetLibrary", errors: list[str]) -> bool:
        if not self.check_identifier(errors):
            return False

        if self.base_scale == 0.0:
            errors.append(
                f"Prop {self.identifier}: Base scale is zero; model will not be visible "
                "and can't be scaled to be visible."
            )
            return False

        has_material = self.material is not None
        has_materials = self.materials is not None

        if has_material and has_materials:
            errors.append(f"Prop {self.identifier}: Both 'material' and 'materials' fields cannot be set.")
            return False

        if not has_material and not self.materials:
            errors.append(f"Prop {self.identifier}: No materials set.")
            return False

        if not self.validate_model(library, errors):
            return False

        valid = True
        for material in self.all_materials:
            valid &= validate_identifier(material, self.identifier, library, errors)
        return valid

    def validate_model(self, library: "AssetLibrary", errors: list[str]) -> bool:
        """Check the model's extension and that the file exists."""
        if not is_model_file_allowed(self.model):
            suffix = PurePath((self.model or "").replace("\\", "/")).suffix
            errors.append(f"Prop {self.identifier}: Unsupported model extension: {suffix}")
            return False

        if is_model_file_partially_supported(self.model):
            _warn_partial_support(self.model)

        try:
            model_path = self.sub_file(library.root, self.model)
        except AssetPathError as e:
            errors.append(f"Prop {self.identifier}: {e}")
            return False

        if not model_path.is_file():
            errors.append(f'Prop {self.identifier}: Model file "{self.model}" not found.')
            return False

        return True

    @property
    def is_filled_out(self) -> bool:
        if self.identifier is None or not self.identifier.is_valid:
            return False
        if (self.material is not None) == (self.materials is not None):
            return False
        if not self.name or not self.name.strip():
            return False
        return is_model_file_allowed(self.model) and self.base_scale != 0.0

    def serialize(self) -> PropDocument:
        return {
            "identifier": self.identifier_string(),
            "prop": {
                "name": self.name,
                "model": self.model,
                "base_scale": self.base_scale,
                "materials": [str(m) for m in self.all_materials],
            },
        }

    @classmethod
    def from_document(cls, document: dict[str, Any], json_file_path: Path | None = None) -> "Prop":
        where = str(json_file_path) if json_file_path else "prop document"
        identifier = Identifier.from_json(document.get("identifier"), f"{where} -> identifier")
        info = require_object(document, "prop", where)

        for key in ("name", "model"):
            if not isinstance(info.get(key), str):
                raise AssetParseError(f"Required property 'prop -> {key}' not found in {where}")

        base_scale = info.get("base_scale", DEFAULT_BASE_SCALE)
        if isinstance(base_scale, bool) or not isinstance(base_scale, (int, float)):
            raise AssetParseError(f"Property 'base_scale' in {where} must be a number")

        prop = cls(
            identifier=identifier,
            json_file_path=json_file_path,
            name=info["name"],
            model=info["model"],
            base_scale=float(base_scale),
        )

        if "material" in info:
            prop.material = Identifier.from_json(info["material"], f"{where} -> prop -> material")

        if "materials" in info:
            entries = info["materials"]
            if not isinstance(entries, list):
                raise AssetParseError(f"Property 'materials' in {where} must be an array")
            prop.materials = [
                Identifier.from_json(entry, f"{where} -> prop -> materials -> {index}")
                for index, entry in enumerate(entries)
            ]

        return prop

    def __str__(self) -> str:
        return f"Prop '{self.name}' - './{self.model}'"
