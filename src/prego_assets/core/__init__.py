"""Core building blocks for asset handling.

This package contains identifiers, value codecs, document parsing, schema
validation and the collaborator interfaces that are used by every asset type
and by the asset library.
"""

from .codecs import MaterialColor, Vector3
from .documents import dump_document, load_document, parse_document
from .errors import AssetParseError, AssetPathError
from .identifier import AssetType, Identifier
from .interfaces import CancellationToken, ProgressCallback, Prompt, PromptResult
from .validator import validate_document, validate_document_with_error_details

__all__ = [
    "AssetParseError",
    "AssetPathError",
    "AssetType",
    "CancellationToken",
    "Identifier",
    "MaterialColor",
    "ProgressCallback",
    "Prompt",
    "PromptResult",
    "Vector3",
    "dump_document",
    "load_document",
    "parse_document",
    "validate_document",
    "validate_document_with_error_details",
]
