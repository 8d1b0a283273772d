"""
Qualified names and mangling

Every binding the front end hands us is one of:
- a top-level user definition (namespace + name), e.g. `Main.main`
- a machine-generated name (index + base), e.g. `{runMain_0}`
- a numbered local slot, e.g. `loc3`

Top-level and machine names are flattened into Vimscript identifiers by
`mangle`; local slots keep their short spelling because the `l:`/`a:` scope
prefix already keeps them apart from generated names.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..utils.config import (
    ENTRY_POINT_BASE, ENTRY_POINT_INDEX, GENERATED_NAME_PREFIX, LOCAL_NAME_PREFIX,
)


class NameKind(Enum):
    TOP_LEVEL = "top_level"
    MACHINE = "machine"
    LOCAL = "local"


@dataclass(frozen=True)
class QualifiedName:
    """
    Identity of a source-level binding.

    Immutable and hashable so it can key an Environment. Distinct bindings
    have distinct QualifiedNames; locals differ by slot index.
    """
    kind: NameKind
    name: str = ""
    namespace: Tuple[str, ...] = ()
    index: Optional[int] = None

    @classmethod
    def top_level(cls, name: str, namespace: Tuple[str, ...] = ()) -> "QualifiedName":
        return cls(NameKind.TOP_LEVEL, name, tuple(namespace))

    @classmethod
    def machine(cls, index: int, name: str) -> "QualifiedName":
        return cls(NameKind.MACHINE, name, (), index)

    @classmethod
    def local(cls, index: int) -> "QualifiedName":
        return cls(NameKind.LOCAL, "", (), index)

    @classmethod
    def parse(cls, display: str) -> "QualifiedName":
        """Inverse of display() for top-level and machine names."""
        if display.startswith("{") and display.endswith("}") and "_" in display:
            base, _, idx = display[1:-1].rpartition("_")
            if idx.isascii() and idx.isdigit() and str(int(idx)) == idx:
                return cls.machine(int(idx), base)
        parts = display.split(".")
        # Operators such as `Prelude.Algebra.<+>` or `.` keep their dots
        if len(parts) > 1 and all(parts[:-1]) and parts[-1]:
            return cls.top_level(parts[-1], tuple(parts[:-1]))
        return cls.top_level(display)

    @property
    def is_local(self) -> bool:
        return self.kind is NameKind.LOCAL

    def display(self) -> str:
        """Stable display string; the input to mangling."""
        if self.kind is NameKind.LOCAL:
            return f"{LOCAL_NAME_PREFIX}{self.index}"
        if self.kind is NameKind.MACHINE:
            return f"{{{self.name}_{self.index}}}"
        return ".".join(self.namespace + (self.name,))

    def __str__(self) -> str:
        return self.display()


def _mangle_char(ch: str) -> str:
    # Non-ASCII letters are escaped too; Vim identifiers stay ASCII
    if ch.isascii() and ch.isalnum():
        return ch
    return f"_{ord(ch)}_"


def mangle(display: str) -> str:
    """
    Flatten a display string into a Vimscript identifier.

    ASCII letters and digits pass through; any other character becomes
    `_<code point>_`. Escapes are the only source of `_` in the body, so the
    mapping is injective. The reserved prefix keeps results disjoint from
    user-written and builtin names.
    """
    return GENERATED_NAME_PREFIX + "".join(_mangle_char(ch) for ch in display)


def target_name(name: QualifiedName) -> str:
    """Vimscript base name for a binding (scope prefix not included)."""
    if name.is_local:
        return name.display()
    return mangle(name.display())


def entry_point_name() -> QualifiedName:
    return QualifiedName.machine(ENTRY_POINT_INDEX, ENTRY_POINT_BASE)
