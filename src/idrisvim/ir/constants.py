"""
Constant literals of the simplified IR.

Value objects (frozen dataclasses); the front end produces them once and
codegen only reads them.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class IntConst:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BigIntConst:
    value: int

    def __str__(self) -> str:
        return f"{self.value}N"


@dataclass(frozen=True)
class FloatConst:
    value: float

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class CharConst:
    value: str  # exactly one character

    def __post_init__(self):
        if len(self.value) != 1:
            raise ValueError(f"CharConst needs exactly one character, got {self.value!r}")

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class StrConst:
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class BitsConst:
    """Fixed-width unsigned literal (B8/B16/B32/B64)."""
    width: int
    value: int

    def __str__(self) -> str:
        return f"{self.value}b{self.width}"


@dataclass(frozen=True)
class WorldConst:
    """The world token threaded through IO; it has no runtime content."""

    def __str__(self) -> str:
        return "prim__TheWorld"


@dataclass(frozen=True)
class TypeConst:
    """Erased type placeholder such as `Int`, `String` or `World`."""
    name: str

    def __str__(self) -> str:
        return self.name


Const = Union[IntConst, BigIntConst, FloatConst, CharConst, StrConst, BitsConst,
              WorldConst, TypeConst]
