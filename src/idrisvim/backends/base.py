"""
Backend Interface
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from ..ir.nodes import FunctionDecl


class Backend(ABC):
    """
    Codegen backend interface.

    A backend trusts the front end's IR (no re-analysis) and turns the
    complete set of top-level definitions of one compilation unit into a
    target program value. Unsupported IR aborts the whole unit.
    """

    name: str = "abstract"

    @abstractmethod
    def codegen(self, definitions: Sequence[FunctionDecl]) -> Any:
        """Generate the target program for one compilation unit."""
        raise NotImplementedError

    @abstractmethod
    def render(self, program: Any) -> str:
        """Render a generated program to target source text."""
        raise NotImplementedError
