"""
IR Serialization to S-Expressions
====================================

Reads and writes the simplified IR as S-expressions. This is the hand-off
format between the front end and this backend, and the format of the
IDRISVIM_DUMP_IR debugging dumps.

Grammar (keywords are symbols, names and strings are quoted)::

    program := (program def...)
    def     := (fun "Ns.name" ("arg"...) expr)
    var     := (loc N) | (glob "Ns.name")
    expr    := (var var)
             | (app "f" (var...)) | (app-tail "f" (var...))
             | (let var expr expr) | (update var expr)
             | (con TAG "Ns.Con" (var...))
             | (case var alt...) | (chkcase var alt...)
             | (proj var N) | (const const)
             | (foreign fdesc ((fdesc var)...))
             | (op LTag (ty...) (var...)) | (op LExternal "name" (var...))
             | (nothing) | (error "message")
    alt     := (const-case const expr)
             | (con-case FIRST-LOCAL TAG "Ns.Con" ("field"...) expr)
             | (default expr)
    const   := (int N) | (bigint N) | (float F) | (char "c") | (str "s")
             | (bits WIDTH N) | (world) | (type "Name")
    fdesc   := (con "VIM_Echo") | (str "s") | (app "VIM_BuiltIn" fdesc...) | (unknown)

Uses structured sexpr (nested lists + sexpdata.Symbol), then pretty-prints
for readable output.
"""

from typing import Any, List

import sexpdata

from ..shared.errors import IRFormatError
from ..shared.names import QualifiedName
from .constants import (
    BigIntConst, BitsConst, CharConst, Const, FloatConst, IntConst, StrConst,
    TypeConst, WorldConst,
)
from .nodes import (
    AltIR, AppExpr, CaseExpr, ConCase, ConExpr, ConstCase, ConstExpr, DefaultCase,
    ErrorExpr, ExpressionIR, ForeignExpr, FunctionDecl, Glob, LetExpr, Loc, LVar,
    NothingExpr, OpExpr, ProgramIR, ProjExpr, UpdateExpr, VarExpr,
)
from .primitives import (
    ArithTy, ForeignApp, ForeignCon, ForeignDesc, ForeignStr, ForeignUnknown,
    PrimOp, PrimTag,
)


def _sym(s: str) -> sexpdata.Symbol:
    return sexpdata.Symbol(s)


def _sym_val(x: Any) -> Any:
    if isinstance(x, sexpdata.Symbol):
        return x.value()
    return x


def _pretty_dumps(sexpr: Any, indent: int = 0, indent_str: str = "  ", max_line: int = 100) -> str:
    """
    Pretty-print structured sexpr. Keeps short forms on one line; breaks only when needed.
    """
    # Check Symbol before str (sexpdata.Symbol subclasses str)
    if isinstance(sexpr, sexpdata.Symbol):
        return sexpr.value()
    if isinstance(sexpr, bool):
        raise TypeError("booleans have no IR spelling")
    if isinstance(sexpr, (int, float)):
        return repr(sexpr)
    if isinstance(sexpr, str):
        escaped = sexpr.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(sexpr, list):
        if not sexpr:
            return "()"
        parts = [_pretty_dumps(e, indent + 1, indent_str, max_line) for e in sexpr]
        one_line = "(" + " ".join(parts) + ")"
        if len(one_line) <= max_line and "\n" not in one_line:
            return one_line
        prefix = indent_str * indent
        next_prefix = indent_str * (indent + 1)
        rest = "\n".join(next_prefix + p for p in parts[1:])
        inner = parts[0] + ("\n" + rest if rest else "")
        return f"({inner}\n{prefix})"
    raise TypeError(f"cannot print {type(sexpr).__name__} as sexpr")


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class IRSerializer:
    """IR to structured S-expression serializer."""

    def serialize_to_sexpr(self, node: Any) -> Any:
        method = getattr(self, f"_serialize_{type(node).__name__}", None)
        if method is None:
            raise TypeError(f"cannot serialize {type(node).__name__}")
        return method(node)

    def serialize(self, node: Any) -> str:
        return _pretty_dumps(self.serialize_to_sexpr(node))

    def _vars(self, vs) -> list:
        return [self.serialize_to_sexpr(v) for v in vs]

    # === Top level ===

    def _serialize_ProgramIR(self, node: ProgramIR) -> list:
        return [_sym("program")] + [self.serialize_to_sexpr(d) for d in node.definitions]

    def _serialize_FunctionDecl(self, node: FunctionDecl) -> list:
        return [_sym("fun"), node.name.display(), [a.display() for a in node.args],
                self.serialize_to_sexpr(node.body)]

    def _serialize_Loc(self, node: Loc) -> list:
        return [_sym("loc"), node.index]

    def _serialize_Glob(self, node: Glob) -> list:
        return [_sym("glob"), node.name.display()]

    # === Expressions ===

    def _serialize_VarExpr(self, node: VarExpr) -> list:
        return [_sym("var"), self.serialize_to_sexpr(node.var)]

    def _serialize_AppExpr(self, node: AppExpr) -> list:
        head = "app-tail" if node.tail_call else "app"
        return [_sym(head), node.func.display(), self._vars(node.args)]

    def _serialize_LetExpr(self, node: LetExpr) -> list:
        return [_sym("let"), self.serialize_to_sexpr(node.var),
                self.serialize_to_sexpr(node.value), self.serialize_to_sexpr(node.body)]

    def _serialize_UpdateExpr(self, node: UpdateExpr) -> list:
        return [_sym("update"), self.serialize_to_sexpr(node.var), self.serialize_to_sexpr(node.value)]

    def _serialize_ConExpr(self, node: ConExpr) -> list:
        return [_sym("con"), node.tag, node.name.display(), self._vars(node.args)]

    def _serialize_CaseExpr(self, node: CaseExpr) -> list:
        head = "chkcase" if node.checked else "case"
        return [_sym(head), self.serialize_to_sexpr(node.scrutinee)] + [
            self.serialize_to_sexpr(a) for a in node.alts
        ]

    def _serialize_ProjExpr(self, node: ProjExpr) -> list:
        return [_sym("proj"), self.serialize_to_sexpr(node.var), node.index]

    def _serialize_ConstExpr(self, node: ConstExpr) -> list:
        return [_sym("const"), self._const(node.const)]

    def _serialize_ForeignExpr(self, node: ForeignExpr) -> list:
        args = [[self._fdesc(d), self.serialize_to_sexpr(v)] for d, v in node.args]
        return [_sym("foreign"), self._fdesc(node.desc), args]

    def _serialize_OpExpr(self, node: OpExpr) -> list:
        if node.op.tag is PrimTag.EXTERNAL:
            return [_sym("op"), _sym(PrimTag.EXTERNAL.value), node.op.name, self._vars(node.args)]
        return [_sym("op"), _sym(node.op.tag.value), [_sym(t.value) for t in node.op.types],
                self._vars(node.args)]

    def _serialize_NothingExpr(self, node: NothingExpr) -> list:
        return [_sym("nothing")]

    def _serialize_ErrorExpr(self, node: ErrorExpr) -> list:
        return [_sym("error"), node.message]

    # === Alternatives ===

    def _serialize_ConstCase(self, node: ConstCase) -> list:
        return [_sym("const-case"), self._const(node.const), self.serialize_to_sexpr(node.body)]

    def _serialize_ConCase(self, node: ConCase) -> list:
        return [_sym("con-case"), node.first_local, node.tag, node.name.display(),
                [a.display() for a in node.args], self.serialize_to_sexpr(node.body)]

    def _serialize_DefaultCase(self, node: DefaultCase) -> list:
        return [_sym("default"), self.serialize_to_sexpr(node.body)]

    # === Leaves ===

    def _const(self, const: Const) -> list:
        if isinstance(const, IntConst):
            return [_sym("int"), const.value]
        if isinstance(const, BigIntConst):
            return [_sym("bigint"), const.value]
        if isinstance(const, FloatConst):
            return [_sym("float"), const.value]
        if isinstance(const, CharConst):
            return [_sym("char"), const.value]
        if isinstance(const, StrConst):
            return [_sym("str"), const.value]
        if isinstance(const, BitsConst):
            return [_sym("bits"), const.width, const.value]
        if isinstance(const, WorldConst):
            return [_sym("world")]
        if isinstance(const, TypeConst):
            return [_sym("type"), const.name]
        raise TypeError(f"cannot serialize constant {const!r}")

    def _fdesc(self, desc: ForeignDesc) -> list:
        if isinstance(desc, ForeignCon):
            return [_sym("con"), desc.name]
        if isinstance(desc, ForeignStr):
            return [_sym("str"), desc.value]
        if isinstance(desc, ForeignApp):
            return [_sym("app"), desc.name] + [self._fdesc(a) for a in desc.args]
        if isinstance(desc, ForeignUnknown):
            return [_sym("unknown")]
        raise TypeError(f"cannot serialize foreign descriptor {desc!r}")


def serialize_ir(node: Any, pretty: bool = True) -> str:
    """Serialize an IR node (usually a ProgramIR) to S-expression text."""
    sexpr = IRSerializer().serialize_to_sexpr(node)
    if pretty:
        return _pretty_dumps(sexpr)
    return sexpdata.dumps(sexpr)


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------

class IRDeserializer:
    """Structured sexpr to IR. Malformed input raises IRFormatError."""

    def deserialize_program(self, sexpr: Any) -> ProgramIR:
        tag, tail = self._form(sexpr, "program")
        if tag != "program":
            raise IRFormatError(f"expected (program ...), got ({tag} ...)")
        return ProgramIR([self._definition(d) for d in tail])

    def expression(self, sexpr: Any) -> ExpressionIR:
        tag, tail = self._form(sexpr, "expression")
        method = getattr(self, f"_deserialize_{tag.replace('-', '_')}", None)
        if method is None:
            raise IRFormatError(f"unknown expression form ({tag} ...)")
        return method(tail)

    # === helpers ===

    def _form(self, sexpr: Any, what: str):
        if not isinstance(sexpr, list) or not sexpr or not isinstance(sexpr[0], sexpdata.Symbol):
            raise IRFormatError(f"expected {what} form, got {sexpr!r}")
        return _sym_val(sexpr[0]), sexpr[1:]

    def _arity(self, tag: str, tail: list, n: int) -> None:
        if len(tail) != n:
            raise IRFormatError(f"({tag} ...) takes {n} field(s), got {len(tail)}")

    def _int(self, x: Any, what: str) -> int:
        if isinstance(x, bool) or not isinstance(x, int):
            raise IRFormatError(f"{what} must be an integer, got {x!r}")
        return x

    def _str(self, x: Any, what: str) -> str:
        if isinstance(x, sexpdata.Symbol) or not isinstance(x, str):
            raise IRFormatError(f"{what} must be a quoted string, got {x!r}")
        return x

    def _name(self, x: Any) -> QualifiedName:
        return QualifiedName.parse(self._str(x, "name"))

    def _list(self, x: Any, what: str) -> list:
        if not isinstance(x, list):
            raise IRFormatError(f"{what} must be a list, got {x!r}")
        return x

    def _definition(self, sexpr: Any) -> FunctionDecl:
        tag, tail = self._form(sexpr, "definition")
        if tag != "fun":
            raise IRFormatError(f"expected (fun ...), got ({tag} ...)")
        self._arity(tag, tail, 3)
        args = [self._name(a) for a in self._list(tail[1], "argument list")]
        return FunctionDecl(self._name(tail[0]), args, self.expression(tail[2]))

    def var(self, sexpr: Any) -> LVar:
        tag, tail = self._form(sexpr, "variable")
        if tag == "loc":
            self._arity(tag, tail, 1)
            return Loc(self._int(tail[0], "local slot"))
        if tag == "glob":
            self._arity(tag, tail, 1)
            return Glob(self._name(tail[0]))
        raise IRFormatError(f"expected (loc N) or (glob NAME), got ({tag} ...)")

    def _vars(self, x: Any) -> List[LVar]:
        return [self.var(v) for v in self._list(x, "variable list")]

    # === expressions ===

    def _deserialize_var(self, tail: list) -> VarExpr:
        self._arity("var", tail, 1)
        return VarExpr(self.var(tail[0]))

    def _deserialize_app(self, tail: list, tail_call: bool = False) -> AppExpr:
        self._arity("app", tail, 2)
        return AppExpr(self._name(tail[0]), self._vars(tail[1]), tail_call=tail_call)

    def _deserialize_app_tail(self, tail: list) -> AppExpr:
        return self._deserialize_app(tail, tail_call=True)

    def _deserialize_let(self, tail: list) -> LetExpr:
        self._arity("let", tail, 3)
        return LetExpr(self.var(tail[0]), self.expression(tail[1]), self.expression(tail[2]))

    def _deserialize_update(self, tail: list) -> UpdateExpr:
        self._arity("update", tail, 2)
        return UpdateExpr(self.var(tail[0]), self.expression(tail[1]))

    def _deserialize_con(self, tail: list) -> ConExpr:
        self._arity("con", tail, 3)
        return ConExpr(self._int(tail[0], "constructor tag"), self._name(tail[1]), self._vars(tail[2]))

    def _deserialize_case(self, tail: list, checked: bool = False) -> CaseExpr:
        if not tail:
            raise IRFormatError("(case ...) needs a scrutinee")
        return CaseExpr(self.var(tail[0]), [self._alt(a) for a in tail[1:]], checked=checked)

    def _deserialize_chkcase(self, tail: list) -> CaseExpr:
        return self._deserialize_case(tail, checked=True)

    def _deserialize_proj(self, tail: list) -> ProjExpr:
        self._arity("proj", tail, 2)
        return ProjExpr(self.var(tail[0]), self._int(tail[1], "projection index"))

    def _deserialize_const(self, tail: list) -> ConstExpr:
        self._arity("const", tail, 1)
        return ConstExpr(self._const(tail[0]))

    def _deserialize_foreign(self, tail: list) -> ForeignExpr:
        self._arity("foreign", tail, 2)
        args = []
        for pair in self._list(tail[1], "foreign argument list"):
            pair = self._list(pair, "foreign argument")
            if len(pair) != 2:
                raise IRFormatError("foreign arguments are (fdesc var) pairs")
            args.append((self._fdesc(pair[0]), self.var(pair[1])))
        return ForeignExpr(self._fdesc(tail[0]), args)

    def _deserialize_op(self, tail: list) -> OpExpr:
        self._arity("op", tail, 3)
        op_name = _sym_val(tail[0])
        tag = next((t for t in PrimTag if t.value == op_name), None)
        if tag is None:
            raise IRFormatError(f"unknown primitive {op_name!r}")
        if tag is PrimTag.EXTERNAL:
            op = PrimOp(tag, name=self._str(tail[1], "external primitive name"))
        else:
            types = []
            for t in self._list(tail[1], "primitive types"):
                ty = next((a for a in ArithTy if a.value == _sym_val(t)), None)
                if ty is None:
                    raise IRFormatError(f"unknown arithmetic type {_sym_val(t)!r}")
                types.append(ty)
            op = PrimOp(tag, tuple(types))
        return OpExpr(op, self._vars(tail[2]))

    def _deserialize_nothing(self, tail: list) -> NothingExpr:
        self._arity("nothing", tail, 0)
        return NothingExpr()

    def _deserialize_error(self, tail: list) -> ErrorExpr:
        self._arity("error", tail, 1)
        return ErrorExpr(self._str(tail[0], "error message"))

    # === alternatives and leaves ===

    def _alt(self, sexpr: Any) -> AltIR:
        tag, tail = self._form(sexpr, "alternative")
        if tag == "const-case":
            self._arity(tag, tail, 2)
            return ConstCase(self._const(tail[0]), self.expression(tail[1]))
        if tag == "con-case":
            self._arity(tag, tail, 5)
            fields = [self._name(a) for a in self._list(tail[3], "field names")]
            return ConCase(self._int(tail[0], "first local"), self._int(tail[1], "constructor tag"),
                           self._name(tail[2]), fields, self.expression(tail[4]))
        if tag == "default":
            self._arity(tag, tail, 1)
            return DefaultCase(self.expression(tail[0]))
        raise IRFormatError(f"unknown alternative ({tag} ...)")

    def _const(self, sexpr: Any) -> Const:
        tag, tail = self._form(sexpr, "constant")
        if tag in ("int", "bigint"):
            self._arity(tag, tail, 1)
            value = self._int(tail[0], "integer constant")
            return IntConst(value) if tag == "int" else BigIntConst(value)
        if tag == "float":
            self._arity(tag, tail, 1)
            if isinstance(tail[0], bool) or not isinstance(tail[0], (int, float)):
                raise IRFormatError(f"float constant must be a number, got {tail[0]!r}")
            return FloatConst(float(tail[0]))
        if tag == "char":
            self._arity(tag, tail, 1)
            value = self._str(tail[0], "char constant")
            if len(value) != 1:
                raise IRFormatError(f"char constant must be one character, got {value!r}")
            return CharConst(value)
        if tag == "str":
            self._arity(tag, tail, 1)
            return StrConst(self._str(tail[0], "string constant"))
        if tag == "bits":
            self._arity(tag, tail, 2)
            return BitsConst(self._int(tail[0], "bit width"), self._int(tail[1], "bits constant"))
        if tag == "world":
            self._arity(tag, tail, 0)
            return WorldConst()
        if tag == "type":
            self._arity(tag, tail, 1)
            return TypeConst(self._str(tail[0], "type name"))
        raise IRFormatError(f"unknown constant ({tag} ...)")

    def _fdesc(self, sexpr: Any) -> ForeignDesc:
        tag, tail = self._form(sexpr, "foreign descriptor")
        if tag == "con":
            self._arity(tag, tail, 1)
            return ForeignCon(self._str(tail[0], "foreign tag"))
        if tag == "str":
            self._arity(tag, tail, 1)
            return ForeignStr(self._str(tail[0], "foreign string"))
        if tag == "app":
            if not tail:
                raise IRFormatError("(app ...) descriptor needs a name")
            return ForeignApp(self._str(tail[0], "foreign tag"), tuple(self._fdesc(a) for a in tail[1:]))
        if tag == "unknown":
            return ForeignUnknown()
        raise IRFormatError(f"unknown foreign descriptor ({tag} ...)")


def deserialize_ir(text: str) -> ProgramIR:
    """Parse S-expression text into a ProgramIR."""
    try:
        sexpr = sexpdata.loads(text)
    except Exception as e:
        raise IRFormatError(f"not a well-formed S-expression: {e}") from e
    return IRDeserializer().deserialize_program(sexpr)
