"""
Tests for continuation-driven expression lowering.
"""

import pytest

from idrisvim.backends.vim_expressions import bind_local, lower, return_value
from idrisvim.ir.nodes import (
    AppExpr, ConExpr, ExpressionIR, ErrorExpr, ForeignExpr, LetExpr, NothingExpr,
    OpExpr, ProjExpr, UpdateExpr, VarExpr,
)
from idrisvim.ir.primitives import ArithTy, ForeignApp, ForeignCon, ForeignStr, PrimOp, PrimTag
from idrisvim.shared.errors import MalformedForeignCallError, UnsupportedConstructError
from idrisvim.vim.ast import (
    Apply, BuiltInStmt, Let, ListLit, Ref, Return, Scope, ScopedName, int_expr,
    string_expr,
)
from tests.test_utils import glob, int_const, loc, lower_block, qn, render_block, str_const, var

STR = ForeignCon("VIM_String")


class TestVariables:

    def test_local_is_plain_reference(self, arg_env):
        assert lower_block(var(0), arg_env) == (Return(Ref(ScopedName(Scope.ARGUMENT, "loc0"))),)

    def test_global_is_zero_argument_call(self):
        block = lower_block(VarExpr(glob("Main.answer")))
        assert block == (Return(Apply(Ref(ScopedName(Scope.GLOBAL, "Idris_Main_46_answer")), ())),)

    def test_bind_continuation(self, arg_env):
        target = ScopedName(Scope.LOCAL, "loc5")
        block = lower(var(1), arg_env, bind_local(target))
        assert block == (Let(target, Ref(ScopedName(Scope.ARGUMENT, "loc1"))),)


class TestApplication:

    def test_arguments_in_order(self, arg_env):
        block = lower_block(AppExpr(qn("Main.f"), [loc(1), loc(0)]), arg_env)
        assert render_block(block) == "return g:Idris_Main_46_f(a:loc1, a:loc0)"

    def test_global_argument_is_not_called(self):
        block = lower_block(AppExpr(qn("Main.f"), [glob("Main.g")]))
        assert render_block(block) == "return g:Idris_Main_46_f(g:Idris_Main_46_g)"

    def test_tail_call_lowers_alike(self, arg_env):
        plain = lower_block(AppExpr(qn("f"), [loc(0)]), arg_env)
        tail = lower_block(AppExpr(qn("f"), [loc(0)], tail_call=True), arg_env)
        assert plain == tail


class TestLet:

    def test_value_bound_then_body(self):
        expr = LetExpr(loc(0), int_const(1), var(0))
        assert render_block(lower_block(expr)) == "let l:loc0 = 1\nreturn l:loc0"

    def test_nested_lets_keep_evaluation_order(self):
        expr = LetExpr(loc(0), int_const(1),
                       LetExpr(loc(1), int_const(2),
                               OpExpr(PrimOp(PrimTag.PLUS, (ArithTy.NATIVE,)), [loc(0), loc(1)])))
        assert render_block(lower_block(expr)).splitlines() == [
            "let l:loc0 = 1",
            "let l:loc1 = 2",
            "return (l:loc0 + l:loc1)",
        ]

    def test_effects_run_in_binding_order(self, arg_env):
        """Each effectful value is emitted before the next, and all before the call."""
        def builtin(name):
            return ForeignApp("VIM_BuiltIn", (ForeignStr(name),))

        expr = LetExpr(loc(2), ForeignExpr(builtin("input"), [(STR, loc(0))]),
               LetExpr(loc(3), ForeignExpr(builtin("toupper"), [(STR, loc(2))]),
               LetExpr(loc(4), ForeignExpr(ForeignCon("VIM_ListSetAt"),
                                           [(STR, loc(0)), (STR, loc(3)), (STR, loc(1))]),
                       AppExpr(qn("Main.g"), [loc(2), loc(3), loc(1)]))))
        assert render_block(lower_block(expr, arg_env)).splitlines() == [
            "let l:loc2 = input(a:loc0)",
            "let l:loc3 = toupper(l:loc2)",
            "let a:loc1[a:loc0] = l:loc3",
            "return g:Idris_Main_46_g(l:loc2, l:loc3, a:loc1)",
        ]

    def test_let_value_with_let_inside(self):
        inner = LetExpr(loc(1), int_const(7), var(1))
        expr = LetExpr(loc(0), inner, var(0))
        assert render_block(lower_block(expr)).splitlines() == [
            "let l:loc1 = 7",
            "let l:loc0 = l:loc1",
            "return l:loc0",
        ]

    def test_let_shadows_argument(self, arg_env):
        expr = LetExpr(loc(0), int_const(3), var(0))
        block = lower_block(expr, arg_env)
        assert block[-1] == Return(Ref(ScopedName(Scope.LOCAL, "loc0")))

    def test_let_of_global_rejected(self):
        with pytest.raises(UnsupportedConstructError) as exc_info:
            lower_block(LetExpr(glob("Main.x"), int_const(1), NothingExpr()))
        assert exc_info.value.error_code == "E0101"


class TestDataAndLeaves:

    def test_constructor(self, arg_env):
        block = lower_block(ConExpr(2, qn("Prelude.List.::"), [loc(0), loc(1)]), arg_env)
        assert block == (Return(ListLit((int_expr(2),
                                         Ref(ScopedName(Scope.ARGUMENT, "loc0")),
                                         Ref(ScopedName(Scope.ARGUMENT, "loc1"))))),)

    def test_nullary_constructor(self):
        assert render_block(lower_block(ConExpr(0, qn("Prelude.Nil"), []))) == "return [0]"

    def test_projection(self, arg_env):
        assert render_block(lower_block(ProjExpr(loc(0), 2), arg_env)) == "return a:loc0[2]"

    def test_update_lowers_value(self):
        assert lower_block(UpdateExpr(loc(0), int_const(4))) == (Return(int_expr(4)),)

    def test_nothing_is_zero(self):
        assert lower_block(NothingExpr()) == (Return(int_expr(0)),)

    def test_constant(self):
        assert lower_block(str_const("s")) == (Return(string_expr("s")),)

    def test_error_throws(self):
        assert lower_block(ErrorExpr("impossible")) == (BuiltInStmt("throw", string_expr("impossible")),)


class TestForeignAndPrimitives:

    def test_echo_via_foreign(self):
        expr = LetExpr(loc(0), str_const("hi"), ForeignExpr(ForeignCon("VIM_Echo"), [(STR, loc(0))]))
        assert render_block(lower_block(expr)) == 'let l:loc0 = "hi"\necho l:loc0'

    def test_list_set_at_on_global(self, arg_env):
        expr = ForeignExpr(ForeignCon("VIM_ListSetAt"),
                           [(STR, loc(0)), (STR, loc(1)), (STR, glob("Main.xs"))])
        assert render_block(lower_block(expr, arg_env)) == "let g:Idris_Main_46_xs[a:loc0] = a:loc1"

    def test_malformed_foreign_propagates(self):
        with pytest.raises(MalformedForeignCallError):
            lower_block(ForeignExpr(ForeignCon("VIM_Echo"), []))

    def test_primitive(self, arg_env):
        expr = OpExpr(PrimOp(PrimTag.STR_LEN), [loc(1)])
        assert render_block(lower_block(expr, arg_env)) == "return len(a:loc1)"


class _Mystery(ExpressionIR):
    __slots__ = ()


class TestUnsupportedShapes:

    def test_unknown_expression_variant(self):
        with pytest.raises(UnsupportedConstructError, match="_Mystery"):
            lower_block(_Mystery())

    def test_non_expression(self):
        with pytest.raises(UnsupportedConstructError):
            lower_block("not an expression")
