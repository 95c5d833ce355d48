"""Tests for document parsing and schema validation."""

import pytest
from jsonschema import ValidationError

from prego_assets.core.documents import dump_document, parse_document
from prego_assets.core.errors import AssetParseError
from prego_assets.core.identifier import AssetType
from prego_assets.core.validator import (
    load_schema,
    validate_document,
    validate_document_with_error_details,
)


class TestParseDocument:
    """Test JSON parsing rules."""

    def test_parses_object(self) -> None:
        """Test a plain object."""
        assert parse_document('{"identifier": "a.prop.b"}') == {"identifier": "a.prop.b"}

    def test_rejects_duplicate_properties(self) -> None:
        """Test that a property defined twice fails the file."""
        with pytest.raises(AssetParseError, match="Duplicate property 'name' in chair.json"):
            parse_document('{"prop": {"name": "a", "name": "b"}}', "chair.json")

    def test_rejects_invalid_json(self) -> None:
        """Test that syntax errors name the source."""
        with pytest.raises(AssetParseError, match="Invalid JSON in broken.json"):
            parse_document('{"identifier": ', "broken.json")

    def test_rejects_non_object(self) -> None:
        """Test that the top level must be an object."""
        with pytest.raises(AssetParseError, match="top level"):
            parse_document("[1, 2, 3]", "list.json")


class TestDumpDocument:
    """Test JSON formatting."""

    def test_indented_with_newline(self) -> None:
        """Test two-space indentation and trailing newline."""
        assert dump_document({"a": [1]}) == '{\n  "a": [\n    1\n  ]\n}\n'

    def test_rejects_nan(self) -> None:
        """Test that NaN can't be written."""
        with pytest.raises(ValueError):
            dump_document({"death_plane": float("nan")})


class TestSchemas:
    """Test the bundled JSON schemas."""

    def test_every_type_has_a_schema(self) -> None:
        """Test that a schema loads for each asset type."""
        for asset_type in AssetType:
            assert load_schema(asset_type)["type"] == "object"

    def test_valid_material(self) -> None:
        """Test a minimal material document."""
        document = {"identifier": "a.material.b", "material": {"name": "B", "color": [1, 0, 0]}}
        validate_document(AssetType.material, document)

    def test_material_out_of_range(self) -> None:
        """Test that roughness above 1 is rejected."""
        document = {"identifier": "a.material.b", "material": {"name": "B", "roughness": 3}}
        with pytest.raises(ValidationError):
            validate_document(AssetType.material, document)

    def test_error_details(self) -> None:
        """Test the error message path formatting."""
        document = {"identifier": "a.prop.b", "prop": {"name": "B", "model": 5}}
        is_valid, error_msg = validate_document_with_error_details(AssetType.prop, document)
        assert not is_valid
        assert error_msg is not None
        assert error_msg.startswith("Validation error at prop -> model:")

    def test_missing_identifier(self) -> None:
        """Test that the identifier is required."""
        is_valid, error_msg = validate_document_with_error_details(AssetType.map, {"map": {}})
        assert not is_valid
        assert "identifier" in error_msg

    def test_map_blocks_allow_non_objects(self) -> None:
        """Test that non-object block entries pass the schema."""
        document = {
            "identifier": "a.map.b",
            "map": {"name": "B", "description": "d"},
            "blocks": [1, {"type": "entity", "entity": "spawn", "transform": {"scale": 2}}],
        }
        assert validate_document_with_error_details(AssetType.map, document) == (True, None)
