"""Vim backend: constant literals."""

from ..ir.constants import (
    BigIntConst, BitsConst, CharConst, Const, FloatConst, IntConst, StrConst,
    TypeConst, WorldConst,
)
from ..shared.errors import UnsupportedConstructError
from ..utils.config import VIM_NUMBER_MAX, VIM_NUMBER_MIN
from ..vim.ast import Expr, int_expr, string_expr


def _big_int(const: BigIntConst) -> Expr:
    if not VIM_NUMBER_MIN <= const.value <= VIM_NUMBER_MAX:
        raise UnsupportedConstructError(
            f"integer literal {const.value} does not fit a Vim Number",
            construct=const,
            error_code=UnsupportedConstructError.CONSTANT,
            help="arbitrary-precision integers are not supported",
        )
    return int_expr(const.value)


def _unsupported(const: Const) -> Expr:
    raise UnsupportedConstructError(
        f"constant {const} not compilable yet",
        construct=const,
        error_code=UnsupportedConstructError.CONSTANT,
    )


# Dictionary dispatch on the constant variant
_CONSTANT_DISPATCH = {
    IntConst: lambda c: int_expr(c.value),
    BigIntConst: _big_int,
    CharConst: lambda c: string_expr(c.value),
    StrConst: lambda c: string_expr(c.value),
    WorldConst: lambda c: int_expr(0),
    TypeConst: lambda c: int_expr(0),
    FloatConst: _unsupported,
    BitsConst: _unsupported,
}


def translate_constant(const: Const) -> Expr:
    """Map a constant literal to a Vimscript literal expression."""
    handler = _CONSTANT_DISPATCH.get(type(const), _unsupported)
    return handler(const)
