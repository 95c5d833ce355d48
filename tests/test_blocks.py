"""Tests for map blocks."""

import pytest

from prego_assets.assets.blocks import (
    BlockBlock,
    BlockTransform,
    EntityBlock,
    MapBlockType,
    PropBlock,
    ShapeType,
    TextBlock,
    TextInfo,
    parse_block,
)
from prego_assets.core.codecs import MaterialColor, Vector3
from prego_assets.core.errors import AssetParseError
from prego_assets.core.identifier import AssetType, Identifier

ROCK = Identifier("lukec", AssetType.material, "rock")


class TestParseBlock:
    """Test choosing the block variant from the type tag."""

    def test_block_defaults(self) -> None:
        """Test a block with only a type and a material."""
        block = parse_block({"type": "block", "material": "lukec.material.rock"}, "blocks -> 0")
        assert isinstance(block, BlockBlock)
        assert block.shape is ShapeType.cube
        assert block.material == ROCK
        assert block.transform == BlockTransform()
        assert block.transform.scale == Vector3(1.0, 1.0, 1.0)
        assert block.transform.is_scale_uniform

    def test_each_variant(self) -> None:
        """Test that every tag maps to its variant."""
        documents = {
            MapBlockType.block: {"type": "block", "material": "a.material.b"},
            MapBlockType.prop: {"type": "prop", "prop": "a.prop.b"},
            MapBlockType.entity: {"type": "entity", "entity": "spawn"},
            MapBlockType.text: {"type": "text", "text": {"content": "hi"}},
        }
        for block_type, document in documents.items():
            assert parse_block(document, "blocks -> 0").block_type is block_type

    def test_missing_type(self) -> None:
        """Test that the type tag is required."""
        with pytest.raises(AssetParseError, match="Map block at 'blocks -> 3' is missing block type."):
            parse_block({"entity": "spawn"}, "blocks -> 3")

    def test_unknown_type(self) -> None:
        """Test that unknown tags are rejected."""
        with pytest.raises(AssetParseError, match="Invalid MapBlockType at 'blocks -> 0': 'light'"):
            parse_block({"type": "light"}, "blocks -> 0")

    def test_unknown_shape(self) -> None:
        """Test that unknown shapes are rejected."""
        with pytest.raises(AssetParseError, match="Invalid shape"):
            parse_block({"type": "block", "shape": "torus", "material": "a.material.b"}, "blocks -> 0")

    def test_block_requires_material(self) -> None:
        """Test that a block without material fails."""
        with pytest.raises(AssetParseError, match="was null"):
            parse_block({"type": "block"}, "blocks -> 0")

    def test_prop_requires_identifier(self) -> None:
        """Test that a prop block's identifier must parse."""
        with pytest.raises(AssetParseError, match="could not be parsed"):
            parse_block({"type": "prop", "prop": "chair"}, "blocks -> 0")

    def test_bad_transform(self) -> None:
        """Test that vector errors carry the location."""
        with pytest.raises(AssetParseError, match="blocks -> 0 -> transform -> scale"):
            parse_block({"type": "entity", "transform": {"scale": "big"}}, "blocks -> 0")


class TestSerialize:
    """Test writing blocks."""

    def test_block_block(self) -> None:
        """Test the written block, without empty effects."""
        block = BlockBlock(shape=ShapeType.sphere, material=ROCK)
        assert block.serialize() == {
            "type": "block",
            "transform": {"position": 0.0, "rotation": 0.0, "scale": 1.0},
            "shape": "sphere",
            "material": "lukec.material.rock",
        }

    def test_effects_kept(self) -> None:
        """Test that effects survive a round trip untouched."""
        document = {
            "type": "block",
            "material": "lukec.material.rock",
            "effects": [{"kind": "bounce", "strength": 3}],
        }
        block = parse_block(document, "blocks -> 0")
        assert block.serialize()["effects"] == [{"kind": "bounce", "strength": 3}]

    def test_text_block_writes_null_wrap(self) -> None:
        """Test that wrap is written even when it's null."""
        block = TextBlock(text=TextInfo(content="Hello"))
        assert block.serialize()["text"] == {"content": "Hello", "color": 1.0, "wrap": None}
        assert not block.text.should_wrap

    def test_text_block_round_trip(self) -> None:
        """Test reading the written text block back."""
        block = TextBlock(
            transform=BlockTransform(position=Vector3(1.0, 2.0, 3.0)),
            text=TextInfo(content="Hi", wrap=4.0, color=MaterialColor.RED),
        )
        copy = parse_block(block.serialize(), "blocks -> 0")
        assert copy == block

    def test_entity_round_trip(self) -> None:
        """Test reading the written entity block back."""
        block = EntityBlock(transform=BlockTransform(scale=Vector3(1.0, 2.0, 1.0)), entity="spawn")
        assert parse_block(block.serialize(), "blocks -> 0") == block


class TestReferences:
    """Test dependencies and refactoring of blocks."""

    def test_dependencies(self) -> None:
        """Test which variants reference assets."""
        chair = Identifier("lukec", AssetType.prop, "chair")
        assert BlockBlock(material=ROCK).dependencies() == [ROCK]
        assert PropBlock(prop=chair).dependencies() == [chair]
        assert EntityBlock(entity="spawn").dependencies() == []
        assert TextBlock().dependencies() == []

    def test_refactor(self) -> None:
        """Test that only matching references are rewritten."""
        stone = Identifier("lukec", AssetType.material, "stone")
        block = BlockBlock(material=ROCK)
        assert block.refactor_identifier(ROCK, stone)
        assert block.material == stone
        assert not block.refactor_identifier(ROCK, stone)
        assert not PropBlock(prop=Identifier("lukec", AssetType.prop, "chair")).refactor_identifier(ROCK, stone)
