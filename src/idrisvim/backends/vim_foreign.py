"""
Vim backend: foreign calls.

The Vim FFI is a closed set of tags (ForeignTag) plus one open escape,
`VIM_BuiltIn "name"`, that calls a Vim builtin function verbatim.
"""

from typing import Callable, Sequence

from ..ir.primitives import (
    BUILTIN_ESCAPE, ForeignApp, ForeignCon, ForeignDesc, ForeignStr, ForeignTag,
)
from ..shared.errors import MalformedForeignCallError, UnsupportedConstructError
from ..vim.ast import (
    Assign, AssignName, AssignProj, BinOp, BinOpApply, Block, BuiltInStmt, Expr,
    ProjSingle, Ref, Stmt, apply_builtin, list_expr, project,
)

Continuation = Callable[[Expr], Stmt]


def _unsupported(desc: ForeignDesc) -> UnsupportedConstructError:
    return UnsupportedConstructError(
        f"foreign function not supported: {desc}",
        construct=desc,
        error_code=UnsupportedConstructError.FOREIGN,
    )


def _list_set_at(params: Sequence[Expr]) -> Block:
    index, value, target = params
    if not isinstance(target, Ref):
        raise MalformedForeignCallError(
            f"{ForeignTag.LIST_SET_AT.symbol} needs a list reference, got {target}",
            help="bind the list to a local variable before updating it",
        )
    return (Assign(AssignProj(AssignName(target.name), ProjSingle(index)), value),)


def _tagged(tag: ForeignTag, params: Sequence[Expr], ret: Continuation) -> Block:
    if len(params) != tag.arity:
        raise MalformedForeignCallError(
            f"{tag.symbol} expects {tag.arity} argument(s), got {len(params)}"
        )
    if tag is ForeignTag.ECHO:
        return (BuiltInStmt("echo", params[0]),)
    if tag is ForeignTag.LIST_SET_AT:
        return _list_set_at(params)

    if tag is ForeignTag.LIST_EMPTY:
        value = list_expr([])
    elif tag is ForeignTag.LIST_INDEX:
        index, target = params
        value = project(target, index)
    elif tag is ForeignTag.LIST_CONS:
        elem, target = params
        value = BinOpApply(BinOp.LIST_CONCAT, list_expr([elem]), target)
    elif tag is ForeignTag.LIST_SNOC:
        target, elem = params
        value = BinOpApply(BinOp.LIST_CONCAT, target, list_expr([elem]))
    else:
        left, right = params
        value = BinOpApply(BinOp.LIST_CONCAT, left, right)
    return (ret(value),)


def translate_foreign(desc: ForeignDesc, params: Sequence[Expr], ret: Continuation) -> Block:
    """
    Lower a foreign call whose arguments are already resolved to expressions.

    Echo and ListSetAt are statements and discard the continuation; every
    other call produces a value and passes it to `ret`.
    """
    if isinstance(desc, ForeignCon):
        tag = ForeignTag.from_symbol(desc.name)
        if tag is None:
            raise _unsupported(desc)
        return _tagged(tag, params, ret)

    if (isinstance(desc, ForeignApp) and desc.name == BUILTIN_ESCAPE
            and len(desc.args) == 1 and isinstance(desc.args[0], ForeignStr)):
        return (ret(apply_builtin(desc.args[0].value, params)),)

    raise _unsupported(desc)
