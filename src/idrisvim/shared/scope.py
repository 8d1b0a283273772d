"""
Scope environment for codegen.

Maps a binding's QualifiedName to the ScopedName emitted for it. An
Environment is a value: `extend` and `extend_all` return a new environment
for the lexical extent of a nested binding context and leave the receiver
untouched, so it can be passed down recursive lowering calls (and shared
between independent top-level definitions) without copying.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from .names import QualifiedName, target_name
from ..vim.ast import Scope, ScopedName


class Environment:
    """Immutable QualifiedName → ScopedName association."""

    __slots__ = ("_bindings",)

    def __init__(self, bindings: Optional[Mapping[QualifiedName, ScopedName]] = None):
        self._bindings = MappingProxyType(dict(bindings or {}))

    def lookup(self, name: QualifiedName) -> ScopedName:
        """
        Resolve a binding. Unbound names resolve to Global scope: forward
        and mutually recursive top-level references are not errors.
        """
        found = self._bindings.get(name)
        if found is not None:
            return found
        return ScopedName(Scope.GLOBAL, target_name(name))

    def extend(self, scoped: ScopedName, name: QualifiedName) -> "Environment":
        """New environment with one more binding (shadowing any previous one)."""
        bindings = dict(self._bindings)
        bindings[name] = scoped
        return Environment(bindings)

    def extend_all(self, pairs: Iterable[Tuple[QualifiedName, ScopedName]]) -> "Environment":
        """Batch form for simultaneous bindings; later pairs win on duplicates."""
        bindings = dict(self._bindings)
        for name, scoped in pairs:
            bindings[name] = scoped
        return Environment(bindings)

    def __contains__(self, name: QualifiedName) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}: {v}" for k, v in self._bindings.items())
        return f"Environment({{{inner}}})"
