"""
Vim backend: case trees.

A case over a resolved scrutinee becomes one if/elseif/else chain. Constant
arms compare the scrutinee itself; constructor arms compare the tag stored
in slot 0 of the constructor list and bind the remaining slots to locals.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from ..ir.nodes import AltIR, AltVisitor, ConCase, ConstCase, DefaultCase, ExpressionIR
from ..shared.names import QualifiedName, target_name
from ..shared.scope import Environment
from ..vim.ast import (
    BinOp, BinOpApply, Block, CondArm, Expr, If, Let, Scope, ScopedName, Stmt,
    int_expr, project,
)
from .vim_constants import translate_constant

logger = logging.getLogger(__name__)

Continuation = Callable[[Expr], Stmt]
Lowerer = Callable[[ExpressionIR, Environment, Continuation], Block]

# An arm either carries a test (a CondArm) or is a default body
_Arm = Tuple[Optional[CondArm], Block]


class CaseCompiler(AltVisitor[_Arm]):
    """Compiles the alternatives of one case expression."""

    def __init__(self, lower: Lowerer, scrutinee: Expr, env: Environment, ret: Continuation):
        self.lower = lower
        self.scrutinee = scrutinee
        self.env = env
        self.ret = ret

    def visit_const_case(self, node: ConstCase) -> _Arm:
        test = BinOpApply(BinOp.EQUALS, self.scrutinee, translate_constant(node.const))
        body = self.lower(node.body, self.env, self.ret)
        return CondArm(test, body), ()

    def visit_con_case(self, node: ConCase) -> _Arm:
        test = BinOpApply(BinOp.EQUALS, project(self.scrutinee, 0), int_expr(node.tag))
        bindings: List[Stmt] = []
        env = self.env
        for offset in range(len(node.args)):
            local = QualifiedName.local(node.first_local + offset)
            scoped = ScopedName(Scope.LOCAL, target_name(local))
            bindings.append(Let(scoped, project(self.scrutinee, offset + 1)))
            env = env.extend(scoped, local)
        body = self.lower(node.body, env, self.ret)
        return CondArm(test, tuple(bindings) + body), ()

    def visit_default_case(self, node: DefaultCase) -> _Arm:
        return None, self.lower(node.body, self.env, self.ret)


def compile_case(lower: Lowerer, scrutinee: Expr, alts: Sequence[AltIR],
                 env: Environment, ret: Continuation) -> Block:
    """
    Compile a case tree. Default arms are concatenated in declaration order
    into the trailing else block; a case with no tested arm is just that
    block.
    """
    compiler = CaseCompiler(lower, scrutinee, env, ret)
    arms: List[CondArm] = []
    default: List[Stmt] = []
    defaults = 0
    for alt in alts:
        arm, body = alt.accept(compiler)
        if arm is not None:
            arms.append(arm)
        else:
            defaults += 1
            default.extend(body)

    if defaults > 1:
        logger.debug(f"[vim] case has {defaults} default arms; concatenating")
    if not arms:
        return tuple(default)
    return (If(tuple(arms), tuple(default) if defaults else None),)
