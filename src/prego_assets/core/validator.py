"""JSON Schema validation for asset documents.

This module loads the formal JSON Schemas shipped with the package and checks
the shape of asset documents before they are deserialized (on load) and before
they are written (on save). Semantic checks such as identifier references and
file existence live on the asset classes.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import ValidationError

from .identifier import AssetType

# prego_assets/core/validator.py -> prego_assets/schemas/
SCHEMA_DIR = Path(__file__).parent.parent / "schemas"


def schema_path(asset_type: AssetType) -> Path:
    return SCHEMA_DIR / f"{asset_type.value}.schema.json"


@lru_cache(maxsize=None)
def load_schema(asset_type: AssetType) -> dict[str, Any]:
    """Load the JSON schema for an asset type from disk.

    Returns:
        Dictionary containing the JSON Schema.

    Raises:
        FileNotFoundError: If schema file doesn't exist
        json.JSONDecodeError: If schema is invalid JSON
    """
    path = schema_path(asset_type)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def validate_document(asset_type: AssetType, document: Any) -> None:
    """Validate an asset document against its type's JSON Schema.

    Args:
        asset_type: Which schema to validate against
        document: The parsed JSON document

    Raises:
        ValidationError: If the document doesn't conform to the schema
        FileNotFoundError: If schema file is missing
        json.JSONDecodeError: If schema is invalid
    """
    schema = load_schema(asset_type)
    jsonschema.validate(instance=document, schema=schema)


def validate_document_with_error_details(
    asset_type: AssetType, document: Any
) -> tuple[bool, str | None]:
    """Validate a document and return detailed error information.

    This is a convenience wrapper that catches validation errors and
    returns user-friendly error messages.

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    try:
        validate_document(asset_type, document)
        return True, None
    except ValidationError as e:
        # Build a detailed error message
        error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
        error_msg = f"Validation error at {error_path}: {e.message}"
        return False, error_msg
    except (FileNotFoundError, json.JSONDecodeError) as e:
        return False, f"Schema error: {e}"
