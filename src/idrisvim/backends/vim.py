"""Vimscript backend: assembles a Program from top-level definitions."""

import logging
from typing import List, Optional, Sequence

from ..backends.base import Backend
from ..ir.nodes import FunctionDecl
from ..shared.errors import IdrisVimError
from ..shared.names import QualifiedName, entry_point_name, target_name
from ..shared.scope import Environment
from ..vim.ast import Call, Function, Program, Scope, ScopedName, Stmt
from ..vim.render import VimRenderer

from .vim_expressions import lower, return_value

logger = logging.getLogger(__name__)


class VimBackend(Backend):
    """
    Vimscript backend. Every top-level definition becomes a script-local
    function; the program ends with a call of the entry point.
    Lowering itself lives in vim_expressions / vim_cases.
    """

    name = "vim"

    def __init__(self, renderer: Optional[VimRenderer] = None):
        self.renderer = renderer or VimRenderer()

    def global_environment(self, definitions: Sequence[FunctionDecl]) -> Environment:
        """Pre-bind every top-level name at Script scope."""
        return Environment().extend_all(
            (d.name, ScopedName(Scope.SCRIPT, target_name(d.name))) for d in definitions
        )

    def codegen_function(self, decl: FunctionDecl, env: Environment) -> Function:
        """Lower one definition to a function whose arguments are a:loc0 .. a:loc<k-1>."""
        params = [QualifiedName.local(i) for i in range(decl.arity)]
        scoped = [ScopedName(Scope.ARGUMENT, target_name(p)) for p in params]
        body = lower(decl.body, env.extend_all(zip(params, scoped)), return_value)
        logger.debug(f"[vim] lowered {decl.name} ({decl.arity} args, {len(body)} statements)")
        return Function(
            ScopedName(Scope.SCRIPT, target_name(decl.name)),
            tuple(s.name for s in scoped),
            body,
        )

    def codegen(self, definitions: Sequence[FunctionDecl]) -> Program:
        """
        Assemble the whole compilation unit. Any failure aborts assembly;
        the error is tagged with the definition being lowered.
        """
        env = self.global_environment(definitions)
        items: List[Stmt] = []
        for decl in definitions:
            try:
                items.append(self.codegen_function(decl, env))
            except IdrisVimError as e:
                if e.definition is None:
                    e.definition = str(decl.name)
                raise
        entry = ScopedName(Scope.SCRIPT, target_name(entry_point_name()))
        items.append(Call(entry, ()))
        logger.debug(f"[vim] assembled {len(definitions)} functions, entry {entry}")
        return Program(tuple(items))

    def render(self, program: Program) -> str:
        return self.renderer.render(program)
