"""
Tests for case-tree compilation.
"""

import logging

from idrisvim.backends.vim_cases import compile_case
from idrisvim.backends.vim_expressions import lower, return_value
from idrisvim.ir.constants import IntConst, StrConst
from idrisvim.ir.nodes import CaseExpr, ConCase, ConstCase, DefaultCase, ErrorExpr
from idrisvim.vim.ast import (
    BinOp, BinOpApply, If, Let, Ref, Return, Scope, ScopedName, int_expr, project,
    string_expr,
)
from tests.test_utils import int_const, loc, lower_block, qn, render_block, str_const, var

SCRUT = Ref(ScopedName(Scope.ARGUMENT, "loc0"))


def test_two_constructor_match(arg_env):
    """Nullary tag 0 and one-field tag 1 become a two-arm conditional."""
    expr = CaseExpr(loc(0), [
        ConCase(1, 0, qn("Prelude.Nothing"), [], int_const(0)),
        ConCase(1, 1, qn("Prelude.Just"), [qn("x")], var(1)),
    ])
    (stmt,) = lower_block(expr, arg_env)

    assert isinstance(stmt, If)
    assert len(stmt.arms) == 2
    assert stmt.default is None

    nothing, just = stmt.arms
    assert nothing.test == BinOpApply(BinOp.EQUALS, project(SCRUT, 0), int_expr(0))
    assert nothing.body == (Return(int_expr(0)),)

    assert just.test == BinOpApply(BinOp.EQUALS, project(SCRUT, 0), int_expr(1))
    loc1 = ScopedName(Scope.LOCAL, "loc1")
    assert just.body == (Let(loc1, project(SCRUT, 1)), Return(Ref(loc1)))


def test_two_constructor_match_renders():
    expr = CaseExpr(loc(0), [
        ConCase(1, 0, qn("Prelude.Nothing"), [], int_const(0)),
        ConCase(1, 1, qn("Prelude.Just"), [qn("x")], var(1)),
    ])
    assert render_block(lower_block(expr)).splitlines() == [
        "if (g:loc0[0] == 0)",
        "  return 0",
        "elseif (g:loc0[0] == 1)",
        "  let l:loc1 = g:loc0[1]",
        "  return l:loc1",
        "endif",
    ]


def test_fields_bind_consecutive_locals_in_order(arg_env):
    expr = CaseExpr(loc(0), [
        ConCase(3, 1, qn("Pair"), [qn("a"), qn("b"), qn("c")], var(5)),
    ])
    (stmt,) = lower_block(expr, arg_env)
    body = stmt.arms[0].body
    assert body[:3] == (
        Let(ScopedName(Scope.LOCAL, "loc3"), project(SCRUT, 1)),
        Let(ScopedName(Scope.LOCAL, "loc4"), project(SCRUT, 2)),
        Let(ScopedName(Scope.LOCAL, "loc5"), project(SCRUT, 3)),
    )
    assert body[3] == Return(Ref(ScopedName(Scope.LOCAL, "loc5")))


def test_constant_arms_compare_scrutinee(arg_env):
    expr = CaseExpr(loc(0), [
        ConstCase(IntConst(1), str_const("one")),
        ConstCase(StrConst("two"), str_const("2")),
        DefaultCase(str_const("many")),
    ])
    (stmt,) = lower_block(expr, arg_env)
    assert [arm.test for arm in stmt.arms] == [
        BinOpApply(BinOp.EQUALS, SCRUT, int_expr(1)),
        BinOpApply(BinOp.EQUALS, SCRUT, string_expr("two")),
    ]
    assert stmt.default == (Return(string_expr("many")),)


def test_arm_count_matches_tested_alternatives(arg_env):
    alts = [ConstCase(IntConst(i), int_const(i)) for i in range(5)] + [DefaultCase(int_const(-1))]
    (stmt,) = lower_block(CaseExpr(loc(0), alts), arg_env)
    assert len(stmt.arms) == 5


def test_defaults_are_concatenated(arg_env):
    expr = CaseExpr(loc(0), [
        ConstCase(IntConst(0), int_const(0)),
        DefaultCase(ErrorExpr("first")),
        DefaultCase(ErrorExpr("second")),
    ])
    (stmt,) = lower_block(expr, arg_env)
    first = lower_block(ErrorExpr("first"))
    second = lower_block(ErrorExpr("second"))
    assert stmt.default == first + second


def test_concatenated_defaults_are_logged(arg_env, caplog):
    expr = CaseExpr(loc(0), [DefaultCase(ErrorExpr("a")), DefaultCase(ErrorExpr("b"))])
    with caplog.at_level(logging.DEBUG, logger="idrisvim.backends.vim_cases"):
        lower_block(expr, arg_env)
    assert "[vim] case has 2 default arms" in caplog.text


def test_default_only_is_inlined(arg_env):
    expr = CaseExpr(loc(0), [DefaultCase(var(1))])
    assert lower_block(expr, arg_env) == (Return(Ref(ScopedName(Scope.ARGUMENT, "loc1"))),)


def test_no_alternatives_is_empty_block(arg_env):
    assert lower_block(CaseExpr(loc(0), []), arg_env) == ()


def test_checked_case_lowers_alike(arg_env):
    alts = [ConstCase(IntConst(0), int_const(1)), DefaultCase(int_const(2))]
    assert lower_block(CaseExpr(loc(0), alts), arg_env) == \
        lower_block(CaseExpr(loc(0), alts, checked=True), arg_env)


def test_compile_case_uses_given_continuation(arg_env):
    target = ScopedName(Scope.LOCAL, "loc9")
    block = compile_case(lower, SCRUT, [DefaultCase(int_const(3))], arg_env,
                         lambda e: Let(target, e))
    assert block == (Let(target, int_expr(3)),)


def test_nested_case_renders_indented(arg_env):
    inner = CaseExpr(loc(1), [ConstCase(IntConst(0), int_const(10)), DefaultCase(int_const(20))])
    outer = CaseExpr(loc(0), [ConstCase(IntConst(0), inner), DefaultCase(int_const(30))])
    assert render_block(lower(outer, arg_env, return_value)).splitlines() == [
        "if (a:loc0 == 0)",
        "  if (a:loc1 == 0)",
        "    return 10",
        "  else",
        "    return 20",
        "  endif",
        "else",
        "  return 30",
        "endif",
    ]
