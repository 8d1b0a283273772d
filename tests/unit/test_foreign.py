"""
Tests for the Vim FFI: closed foreign tags and the builtin escape.
"""

import pytest

from idrisvim.backends.vim_expressions import return_value
from idrisvim.backends.vim_foreign import translate_foreign
from idrisvim.ir.primitives import ForeignApp, ForeignCon, ForeignStr, ForeignUnknown
from idrisvim.shared.errors import MalformedForeignCallError, UnsupportedConstructError
from idrisvim.vim.ast import (
    Assign, AssignName, AssignProj, BuiltInStmt, ProjSingle, Ref, Return, Scope,
    ScopedName, int_expr, list_expr, string_expr,
)
from tests.test_utils import render_block

X = Ref(ScopedName(Scope.LOCAL, "loc1"))
L = Ref(ScopedName(Scope.LOCAL, "loc2"))
IDX = Ref(ScopedName(Scope.LOCAL, "loc3"))


def con(name):
    return ForeignCon(name)


class TestClosedTags:

    def test_echo_discards_continuation(self):
        block = translate_foreign(con("VIM_Echo"), [X], return_value)
        assert block == (BuiltInStmt("echo", X),)

    def test_list_empty(self):
        assert translate_foreign(con("VIM_ListEmpty"), [], return_value) == (Return(list_expr([])),)

    def test_list_index(self):
        assert render_block(translate_foreign(con("VIM_ListIndex"), [IDX, L], return_value)) \
            == "return l:loc2[l:loc3]"

    def test_list_cons(self):
        assert render_block(translate_foreign(con("VIM_ListCons"), [X, L], return_value)) \
            == "return ([l:loc1] + l:loc2)"

    def test_list_snoc(self):
        assert render_block(translate_foreign(con("VIM_ListSnoc"), [L, X], return_value)) \
            == "return (l:loc2 + [l:loc1])"

    def test_list_concat(self):
        assert render_block(translate_foreign(con("VIM_ListConcat"), [L, X], return_value)) \
            == "return (l:loc2 + l:loc1)"

    def test_list_set_at(self):
        block = translate_foreign(con("VIM_ListSetAt"), [IDX, X, L], return_value)
        assert block == (
            Assign(AssignProj(AssignName(L.name), ProjSingle(IDX)), X),
        )
        assert render_block(block) == "let l:loc2[l:loc3] = l:loc1"

    def test_list_set_at_needs_reference(self):
        with pytest.raises(MalformedForeignCallError) as exc_info:
            translate_foreign(con("VIM_ListSetAt"), [IDX, X, list_expr([int_expr(1)])], return_value)
        assert exc_info.value.error_code == "E0201"

    def test_wrong_arity(self):
        with pytest.raises(MalformedForeignCallError, match="expects 1"):
            translate_foreign(con("VIM_Echo"), [X, L], return_value)


class TestBuiltinEscape:

    def test_named_builtin(self):
        desc = ForeignApp("VIM_BuiltIn", (ForeignStr("toupper"),))
        assert render_block(translate_foreign(desc, [X], return_value)) == "return toupper(l:loc1)"

    def test_named_builtin_without_arguments(self):
        desc = ForeignApp("VIM_BuiltIn", (ForeignStr("localtime"),))
        assert render_block(translate_foreign(desc, [], return_value)) == "return localtime()"


class TestUnsupportedDescriptors:

    @pytest.mark.parametrize("desc", [
        ForeignCon("VIM_Nope"),
        ForeignStr("echo"),
        ForeignUnknown(),
        ForeignApp("VIM_Other", (ForeignStr("x"),)),
        ForeignApp("VIM_BuiltIn", ()),
        ForeignApp("VIM_BuiltIn", (ForeignCon("x"),)),
    ])
    def test_rejected(self, desc):
        with pytest.raises(UnsupportedConstructError) as exc_info:
            translate_foreign(desc, [X], return_value)
        assert exc_info.value.error_code == "E0104"

    def test_message_names_symbol(self):
        with pytest.raises(UnsupportedConstructError, match="VIM_Nope"):
            translate_foreign(ForeignCon("VIM_Nope"), [], return_value)

    def test_echo_with_string(self):
        block = translate_foreign(con("VIM_Echo"), [string_expr("hi")], return_value)
        assert render_block(block) == 'echo "hi"'
