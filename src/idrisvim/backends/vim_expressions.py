"""
Vim backend: expression lowering.

Vimscript separates statements from expressions, while the IR is purely
expression-shaped. Every expression is therefore lowered together with a
continuation `ret: Expr -> Stmt` that says what to do with its value:
return it from the enclosing function, or bind it to a local. A `let`
lowers its value with a bind-to-local continuation and its body with the
outer one, so the statement order of the result is the evaluation order of
the IR.
"""

import logging
from typing import Callable

from ..ir.nodes import (
    AppExpr, CaseExpr, ConExpr, ConstExpr, ErrorExpr, ExpressionIR, ForeignExpr,
    Glob, IRVisitor, LetExpr, LVar, NothingExpr, OpExpr, ProjExpr, UpdateExpr,
    VarExpr,
)
from ..shared.errors import UnsupportedConstructError
from ..shared.names import target_name
from ..shared.scope import Environment
from ..vim.ast import (
    Apply, Block, BuiltInStmt, Expr, Let, Ref, Return, Scope, ScopedName, Stmt,
    int_expr, list_expr, project, string_expr,
)
from .vim_cases import compile_case
from .vim_constants import translate_constant
from .vim_foreign import translate_foreign
from .vim_primitives import translate_primitive

logger = logging.getLogger(__name__)

Continuation = Callable[[Expr], Stmt]


def return_value(value: Expr) -> Stmt:
    """Continuation for tail position: return the value."""
    return Return(value)


def bind_local(name: ScopedName) -> Continuation:
    """Continuation that binds the value to `name`."""
    def bind(value: Expr) -> Stmt:
        return Let(name, value)
    return bind


class StatementLowerer(IRVisitor[Block]):
    """Lowers one expression under a fixed environment and continuation."""

    def __init__(self, env: Environment, ret: Continuation):
        self.env = env
        self.ret = ret

    def resolve(self, var: LVar) -> Ref:
        """Reference to a variable, without calling it."""
        return Ref(self.env.lookup(var.qualified_name))

    def visit_var(self, node: VarExpr) -> Block:
        ref = self.resolve(node.var)
        if isinstance(node.var, Glob):
            # Top-level constants are zero-argument functions
            return (self.ret(Apply(ref, ())),)
        return (self.ret(ref),)

    def visit_app(self, node: AppExpr) -> Block:
        func = Ref(self.env.lookup(node.func))
        args = tuple(self.resolve(a) for a in node.args)
        return (self.ret(Apply(func, args)),)

    def visit_let(self, node: LetExpr) -> Block:
        if isinstance(node.var, Glob):
            raise UnsupportedConstructError(
                f"let binding global {node.var.qualified_name} not supported",
                construct=node,
                error_code=UnsupportedConstructError.EXPRESSION,
            )
        name = node.var.qualified_name
        scoped = ScopedName(Scope.LOCAL, target_name(name))
        value = lower(node.value, self.env, bind_local(scoped))
        body = lower(node.body, self.env.extend(scoped, name), self.ret)
        return value + body

    def visit_update(self, node: UpdateExpr) -> Block:
        return lower(node.value, self.env, self.ret)

    def visit_con(self, node: ConExpr) -> Block:
        fields = [int_expr(node.tag)] + [self.resolve(a) for a in node.args]
        return (self.ret(list_expr(fields)),)

    def visit_case(self, node: CaseExpr) -> Block:
        return compile_case(lower, self.resolve(node.scrutinee), node.alts, self.env, self.ret)

    def visit_proj(self, node: ProjExpr) -> Block:
        return (self.ret(project(self.resolve(node.var), node.index)),)

    def visit_const(self, node: ConstExpr) -> Block:
        return (self.ret(translate_constant(node.const)),)

    def visit_foreign(self, node: ForeignExpr) -> Block:
        params = [self.resolve(var) for _, var in node.args]
        return translate_foreign(node.desc, params, self.ret)

    def visit_op(self, node: OpExpr) -> Block:
        args = [self.resolve(a) for a in node.args]
        return (self.ret(translate_primitive(node.op, args)),)

    def visit_nothing(self, node: NothingExpr) -> Block:
        return (self.ret(int_expr(0)),)

    def visit_error(self, node: ErrorExpr) -> Block:
        return (BuiltInStmt("throw", string_expr(node.message)),)


def lower(node: ExpressionIR, env: Environment, ret: Continuation) -> Block:
    """Lower an IR expression to a statement block ending in `ret`."""
    if not isinstance(node, ExpressionIR) or type(node).accept is ExpressionIR.accept:
        raise UnsupportedConstructError(
            f"expression {type(node).__name__} not compilable yet",
            construct=node,
            error_code=UnsupportedConstructError.EXPRESSION,
        )
    return node.accept(StatementLowerer(env, ret))
