"""Asset identifiers.

Every asset is named by an identifier of the form ``author.assetType.assetName``.
Identifiers are the only way assets reference each other, so they double as
foreign keys throughout the library.
"""

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Any

from .errors import AssetParseError

# Shown to users whenever an identifier fails to parse
IDENTIFIER_EXAMPLE = "name.assetType.assetName"


class AssetType(str, Enum):
    """The kinds of asset an identifier can name.

    Declaration order is significant: it is the ordinal used when sorting
    identifiers.
    """

    material = "material"
    prop = "prop"
    map = "map"

    @property
    def ordinal(self) -> int:
        return list(AssetType).index(self)

    @classmethod
    def from_name(cls, name: str) -> "AssetType | None":
        """Look up an asset type by its exact (case-sensitive) name."""
        try:
            return cls(name)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


@total_ordering
@dataclass(frozen=True)
class Identifier:
    """An identifier in the format ``name.assetType.assetName``.

    Equality compares all three parts. Ordering is by author name, then the
    asset type's declaration order, then asset name; string parts compare by
    code point.
    """

    author_name: str
    asset_type: AssetType
    asset_name: str

    @classmethod
    def parse(cls, text: str) -> "Identifier | None":
        """Parse an identifier string.

        Empty pieces between dots are ignored, so ``"me..prop.chair"`` parses
        the same as ``"me.prop.chair"``.

        Args:
            text: Input in the format ``name.assetType.assetName``

        Returns:
            The parsed identifier, or None if the text could not be parsed.
        """
        if not isinstance(text, str):
            return None

        parts = [part for part in text.split(".") if part]
        if len(parts) != 3:
            return None

        asset_type = AssetType.from_name(parts[1])
        if asset_type is None:
            return None

        return cls(parts[0], asset_type, parts[2])

    @classmethod
    def from_json(cls, value: Any, where: str) -> "Identifier":
        """Decode an identifier stored in an asset document.

        Raises:
            AssetParseError: If the value is missing or not a parseable string
        """
        if value is None:
            raise AssetParseError(f"Identifier at {where} was null and could not be parsed.")

        identifier = cls.parse(value) if isinstance(value, str) else None
        if identifier is None:
            raise AssetParseError(
                f"Identifier at {where} ('{value}') could not be parsed. "
                f"Use the format '{IDENTIFIER_EXAMPLE}'"
            )
        return identifier

    def __str__(self) -> str:
        return f"{self.author_name}.{self.asset_type.value}.{self.asset_name}"

    def root(self) -> str:
        """Return the ``author.type.`` prefix that is locked while editing."""
        return f"{self.author_name}.{self.asset_type.value}."

    @property
    def is_valid(self) -> bool:
        """True if both the author and asset name are filled out."""
        return bool(self.author_name and self.author_name.strip()) and bool(
            self.asset_name and self.asset_name.strip()
        )

    def with_author_name(self, author_name: str) -> "Identifier":
        return Identifier(author_name, self.asset_type, self.asset_name)

    def sort_key(self) -> tuple[str, int, str]:
        return (self.author_name, self.asset_type.ordinal, self.asset_name)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self.sort_key() < other.sort_key()
