"""Exception types raised while reading asset documents."""


class AssetParseError(ValueError):
    """An asset document could not be turned into an asset.

    Raised for malformed JSON, duplicate properties, schema violations and
    values that cannot be decoded (identifiers, vectors, colors, block types).
    """


class AssetPathError(ValueError):
    """A resource reference cannot be resolved against its asset's file."""
