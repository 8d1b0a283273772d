"""
Vim backend: primitive operations.

Vimscript has one numeric type (Number), so width and sign coercions are
the identity. Integral arithmetic maps onto operators; string primitives
map onto builtin calls and slices.
"""

from typing import Callable, Dict, Sequence

from ..ir.primitives import PrimOp, PrimTag
from ..shared.errors import UnsupportedConstructError
from ..utils.config import CHAR_SPLIT_PATTERN, ECHO_HELPER_NAME
from ..vim.ast import (
    BinOp, BinOpApply, Expr, Proj, ProjFrom, apply_builtin, int_expr, project,
    string_expr,
)


# Binary operators valid at any integral arithmetic type
_INTEGRAL_BINOPS: Dict[PrimTag, BinOp] = {
    PrimTag.PLUS: BinOp.ADD,
    PrimTag.MINUS: BinOp.SUBTRACT,
    PrimTag.TIMES: BinOp.MULTIPLY,
    PrimTag.EQ: BinOp.EQUALS,
    PrimTag.SLT: BinOp.LT,
    PrimTag.SLE: BinOp.LTE,
    PrimTag.SGT: BinOp.GT,
    PrimTag.SGE: BinOp.GTE,
}

# Binary operators on strings
_STRING_BINOPS: Dict[PrimTag, BinOp] = {
    PrimTag.STR_CONCAT: BinOp.CONCAT,
    PrimTag.STR_CONS: BinOp.CONCAT,
    PrimTag.STR_EQ: BinOp.EQUALS,
}

_IDENTITY_COERCIONS = frozenset({PrimTag.SEXT, PrimTag.ZEXT, PrimTag.TRUNC})


def _str_rev(x: Expr) -> Expr:
    chars = apply_builtin("split", [x, string_expr(CHAR_SPLIT_PATTERN)])
    return apply_builtin("join", [apply_builtin("reverse", [chars]), string_expr("")])


# Tag → builder over the lowered arguments; its parameter count is the arity
_UNARY_AND_NARY: Dict[PrimTag, Callable[..., Expr]] = {
    PrimTag.STR_LEN: lambda x: apply_builtin("len", [x]),
    PrimTag.STR_HEAD: lambda x: project(x, 0),
    PrimTag.STR_TAIL: lambda x: Proj(x, ProjFrom(int_expr(1))),
    PrimTag.STR_INDEX: lambda x, i: project(x, i),
    PrimTag.STR_SUBSTR: lambda offset, length, s: apply_builtin("strpart", [s, offset, length]),
    PrimTag.STR_REV: _str_rev,
    PrimTag.INT_STR: lambda x: BinOpApply(BinOp.CONCAT, x, string_expr("")),
    PrimTag.STR_INT: lambda x: apply_builtin("str2nr", [x]),
    PrimTag.CH_INT: lambda x: apply_builtin("char2nr", [x]),
    PrimTag.INT_CH: lambda x: apply_builtin("nr2char", [x]),
    PrimTag.WRITE_STR: lambda _world, s: apply_builtin(ECHO_HELPER_NAME, [s]),
}


def _not_implemented(op: PrimOp, args: Sequence[Expr]) -> UnsupportedConstructError:
    return UnsupportedConstructError(
        f"primitive {op} with {len(args)} argument(s) not implemented",
        construct=op,
        error_code=UnsupportedConstructError.PRIMITIVE,
    )


def _arity_of(builder: Callable[..., Expr]) -> int:
    return builder.__code__.co_argcount


def translate_primitive(op: PrimOp, args: Sequence[Expr]) -> Expr:
    """
    Map a primitive operation over already-lowered arguments to a Vimscript
    expression. Operations outside the table are fatal.
    """
    tag = op.tag
    if tag is PrimTag.READ_STR:
        raise UnsupportedConstructError(
            "cannot read strings using the Vimscript backend",
            construct=op,
            error_code=UnsupportedConstructError.PRIMITIVE,
        )
    if tag is PrimTag.EXTERNAL:
        if not op.name:
            raise _not_implemented(op, args)
        return apply_builtin(op.name, args)
    if tag in _IDENTITY_COERCIONS and len(args) == 1:
        return args[0]
    if tag in _INTEGRAL_BINOPS and len(args) == 2:
        if op.arith is None or not op.arith.is_integral:
            raise _not_implemented(op, args)
        return BinOpApply(_INTEGRAL_BINOPS[tag], args[0], args[1])
    if tag in _STRING_BINOPS and len(args) == 2:
        return BinOpApply(_STRING_BINOPS[tag], args[0], args[1])
    builder = _UNARY_AND_NARY.get(tag)
    if builder is not None and _arity_of(builder) == len(args):
        return builder(*args)
    raise _not_implemented(op, args)
