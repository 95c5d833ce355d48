"""Reading and writing asset documents.

Asset files are plain JSON, but a property defined twice in the same object
is rejected instead of silently keeping the last value.
"""

import json
from pathlib import Path
from typing import Any

from .errors import AssetParseError

# Indentation used for every file written by the library
INDENT = 2


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise AssetParseError(f"Duplicate property '{key}'")
        result[key] = value
    return result


def parse_document(text: str, source: str = "<string>") -> dict[str, Any]:
    """Parse the JSON text of an asset document.

    Args:
        text: JSON text
        source: Name used in error messages (usually the file path)

    Returns:
        The top-level JSON object

    Raises:
        AssetParseError: If the text is not valid JSON, contains duplicate
            properties, or is not a JSON object at the top level
    """
    try:
        document = json.loads(text, object_pairs_hook=_reject_duplicates)
    except AssetParseError as e:
        raise AssetParseError(f"{e} in {source}") from e
    except json.JSONDecodeError as e:
        raise AssetParseError(f"Invalid JSON in {source}: {e}") from e

    if not isinstance(document, dict):
        raise AssetParseError(f"Expected a JSON object at the top level of {source}")

    return document


def load_document(path: Path) -> dict[str, Any]:
    """Read and parse an asset document from disk.

    Raises:
        AssetParseError: If the content cannot be parsed
        OSError: If the file cannot be read
    """
    text = path.read_text(encoding="utf-8")
    return parse_document(text, str(path))


def dump_document(document: Any) -> str:
    """Format a document as indented JSON text.

    Raises:
        ValueError: If the document contains NaN or infinite numbers
    """
    return json.dumps(document, indent=INDENT, allow_nan=False) + "\n"
