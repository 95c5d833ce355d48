"""Tests for identifiers and asset types."""

import itertools

import pytest

from prego_assets.core.errors import AssetParseError
from prego_assets.core.identifier import AssetType, Identifier


class TestAssetType:
    """Test the asset type enum."""

    def test_declaration_order(self) -> None:
        """Test that ordinals follow material, prop, map."""
        assert [t.ordinal for t in AssetType] == [0, 1, 2]
        assert list(AssetType) == [AssetType.material, AssetType.prop, AssetType.map]

    def test_from_name(self) -> None:
        """Test lookup by name, including unknown names."""
        assert AssetType.from_name("prop") is AssetType.prop
        assert AssetType.from_name("texture") is None
        assert AssetType.from_name("Prop") is None


class TestIdentifierParse:
    """Test parsing identifier strings."""

    def test_parses_three_parts(self) -> None:
        """Test a well-formed identifier."""
        identifier = Identifier.parse("lukec.material.rock")
        assert identifier == Identifier("lukec", AssetType.material, "rock")

    def test_ignores_empty_pieces(self) -> None:
        """Test that repeated and trailing dots are ignored."""
        assert Identifier.parse("lukec..prop.chair.") == Identifier("lukec", AssetType.prop, "chair")

    @pytest.mark.parametrize("text", [
        "",
        "lukec.prop",
        "lukec.prop.chair.extra",
        "lukec.texture.rock",
        "...",
    ])
    def test_rejects_malformed(self, text: str) -> None:
        """Test that malformed identifiers don't parse."""
        assert Identifier.parse(text) is None

    def test_round_trip(self) -> None:
        """Test that parsing the string form gives back the same identifier."""
        for asset_type in AssetType:
            identifier = Identifier("some_author", asset_type, "asset-1")
            assert Identifier.parse(str(identifier)) == identifier

    def test_from_json_errors(self) -> None:
        """Test that document decoding names the location."""
        with pytest.raises(AssetParseError, match="was null"):
            Identifier.from_json(None, "file.json -> identifier")

        with pytest.raises(AssetParseError, match=r"\('lukec\.rock'\) could not be parsed"):
            Identifier.from_json("lukec.rock", "file.json -> identifier")

        with pytest.raises(AssetParseError, match="could not be parsed"):
            Identifier.from_json(42, "file.json -> identifier")


class TestIdentifierBehavior:
    """Test string forms, validity and ordering."""

    def test_string_forms(self) -> None:
        """Test canonical and root forms."""
        identifier = Identifier("lukec", AssetType.map, "arena")
        assert str(identifier) == "lukec.map.arena"
        assert identifier.root() == "lukec.map."

    def test_validity(self) -> None:
        """Test that author and asset name must be non-blank."""
        assert Identifier("lukec", AssetType.prop, "chair").is_valid
        assert not Identifier("", AssetType.prop, "chair").is_valid
        assert not Identifier("lukec", AssetType.prop, "  ").is_valid

    def test_with_author_name(self) -> None:
        """Test changing only the author."""
        identifier = Identifier("lukec", AssetType.prop, "chair")
        assert identifier.with_author_name("bob") == Identifier("bob", AssetType.prop, "chair")

    def test_ordering_by_author_type_name(self) -> None:
        """Test that type order beats name order."""
        material = Identifier("a", AssetType.material, "zzz")
        prop = Identifier("a", AssetType.prop, "aaa")
        other_author = Identifier("b", AssetType.material, "aaa")
        assert material < prop < other_author
        assert sorted([other_author, prop, material]) == [material, prop, other_author]

    def test_ordinal_string_compare(self) -> None:
        """Test that uppercase sorts before lowercase."""
        assert Identifier("Zed", AssetType.prop, "x") < Identifier("abe", AssetType.prop, "x")

    def test_strict_total_order(self) -> None:
        """Test that exactly one of x<y, y<x holds for distinct identifiers."""
        identifiers = [
            Identifier(author, asset_type, name)
            for author in ("a", "b")
            for asset_type in AssetType
            for name in ("x", "y")
        ]
        for x, y in itertools.permutations(identifiers, 2):
            assert (x < y) != (y < x)
        for x, y, z in itertools.permutations(identifiers, 3):
            if x < y and y < z:
                assert x < z

    def test_hashable(self) -> None:
        """Test that equal identifiers collapse in a set."""
        assert len({Identifier.parse("a.prop.b"), Identifier("a", AssetType.prop, "b")}) == 1
