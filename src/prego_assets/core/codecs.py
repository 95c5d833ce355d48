"""Compact JSON encodings for vectors and colors.

Both types share the same convention: ``{"field": 1}`` is equivalent to
``{"field": [1, 1, 1]}``. A uniform triple is written back as the single
number.
"""

import math
from dataclasses import dataclass
from typing import Any, ClassVar

from .errors import AssetParseError

# Components closer than this are considered equal when collapsing
UNIFORM_TOLERANCE = 0.00001


def _is_number(token: Any) -> bool:
    return isinstance(token, (int, float)) and not isinstance(token, bool)


def _is_uniform(a: float, b: float, c: float) -> bool:
    return abs(a - b) < UNIFORM_TOLERANCE and abs(b - c) < UNIFORM_TOLERANCE


def _clamp01(number: float) -> float:
    if number > 1.0:
        return 1.0
    return 0.0 if number < 0.0 else number


@dataclass(frozen=True)
class Vector3:
    """A position, rotation or scale. Y is up."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Vector3":
        return cls(value, value, value)

    @classmethod
    def from_json(cls, token: Any, where: str) -> "Vector3":
        """Decode a vector from a number or an array of numbers.

        Arrays are read leniently: non-numeric entries are skipped, at most
        three numbers are used, missing components are zero, and a single
        number expands to a uniform vector.

        Raises:
            AssetParseError: If the token is neither a number nor an array
        """
        if _is_number(token):
            return cls.uniform(float(token))

        if isinstance(token, list):
            numbers = [float(item) for item in token if _is_number(item)][:3]
            if len(numbers) == 1:
                return cls.uniform(numbers[0])
            numbers += [0.0] * (3 - len(numbers))
            return cls(*numbers)

        raise AssetParseError(
            f"Unexpected token type in Vector located at '{where}': {type(token).__name__}"
        )

    @property
    def is_uniform(self) -> bool:
        return _is_uniform(self.x, self.y, self.z)

    def to_json(self) -> float | list[float]:
        if self.is_uniform:
            return self.x
        return [self.x, self.y, self.z]

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> "Vector3":
        length = self.length()
        if length > 0:
            return Vector3(self.x / length, self.y / length, self.z / length)
        return self

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


@dataclass(frozen=True)
class MaterialColor:
    """An RGB color with components from 0.0-1.0."""

    red: float
    green: float
    blue: float

    WHITE: ClassVar["MaterialColor"]
    GRAY: ClassVar["MaterialColor"]
    BLACK: ClassVar["MaterialColor"]
    RED: ClassVar["MaterialColor"]
    YELLOW: ClassVar["MaterialColor"]
    GREEN: ClassVar["MaterialColor"]
    CYAN: ClassVar["MaterialColor"]
    BLUE: ClassVar["MaterialColor"]
    MAGENTA: ClassVar["MaterialColor"]

    @classmethod
    def from_json(cls, token: Any, where: str) -> "MaterialColor":
        """Decode a color from a number or an array of exactly three numbers.

        Components are clamped to [0, 1].

        Raises:
            AssetParseError: If the token has any other shape
        """
        if _is_number(token):
            n = _clamp01(float(token))
            return cls(n, n, n)

        if isinstance(token, list):
            if len(token) < 3:
                raise AssetParseError(
                    f"Color property at {where} contained only {len(token)} "
                    "color components (needs 3)."
                )
            if len(token) > 3:
                raise AssetParseError(
                    f"Color property at {where} contained {len(token)} "
                    "color components (needs only 3)."
                )
            if not all(_is_number(item) for item in token):
                raise AssetParseError(f"Color property at {where} contained a non-number component.")
            return cls(*(_clamp01(float(item)) for item in token))

        raise AssetParseError(
            f"Color property at {where} was invalid. "
            "(supports single number, or array of numbers representing R, G, and B.)"
        )

    @classmethod
    def from_rgb255(cls, red: int, green: int, blue: int) -> "MaterialColor":
        return cls(red / 255.0, green / 255.0, blue / 255.0)

    def to_rgb255(self) -> tuple[int, int, int]:
        return (int(self.red * 255), int(self.green * 255), int(self.blue * 255))

    @property
    def is_uniform(self) -> bool:
        return _is_uniform(self.red, self.green, self.blue)

    def to_json(self) -> float | list[float]:
        if self.is_uniform:
            return self.red
        return [self.red, self.green, self.blue]

    def __str__(self) -> str:
        return f"[{self.red}, {self.green}, {self.blue}]"


MaterialColor.WHITE = MaterialColor(1.0, 1.0, 1.0)
MaterialColor.GRAY = MaterialColor(0.5, 0.5, 0.5)
MaterialColor.BLACK = MaterialColor(0.0, 0.0, 0.0)
MaterialColor.RED = MaterialColor(1.0, 0.0, 0.0)
MaterialColor.YELLOW = MaterialColor(1.0, 1.0, 0.0)
MaterialColor.GREEN = MaterialColor(0.0, 1.0, 0.0)
MaterialColor.CYAN = MaterialColor(0.0, 1.0, 1.0)
MaterialColor.BLUE = MaterialColor(0.0, 0.0, 1.0)
MaterialColor.MAGENTA = MaterialColor(1.0, 0.0, 1.0)
