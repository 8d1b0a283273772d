"""
Vimscript AST

Structured output of the codegen backend. Every node is a frozen dataclass
and every sequence is a tuple: a Program is built once and never mutated
after it is handed to the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union


class Scope(Enum):
    """Vimscript name-resolution classes; the value is the rendered prefix."""
    GLOBAL = "g:"
    SCRIPT = "s:"
    LOCAL = "l:"
    ARGUMENT = "a:"
    BUILTIN = ""


@dataclass(frozen=True)
class ScopedName:
    scope: Scope
    name: str

    def __str__(self) -> str:
        return f"{self.scope.value}{self.name}"


def builtin(name: str) -> ScopedName:
    return ScopedName(Scope.BUILTIN, name)


class BinOp(Enum):
    """Binary operators. Symbols live in the renderer."""
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    EQUALS = "equals"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    CONCAT = "concat"            # string concatenation
    LIST_CONCAT = "list_concat"  # list concatenation


# --- Projections -------------------------------------------------------------

@dataclass(frozen=True)
class ProjSingle:
    """expr[index]"""
    index: "Expr"


@dataclass(frozen=True)
class ProjFrom:
    """expr[start:]"""
    start: "Expr"


Projection = Union[ProjSingle, ProjFrom]


# --- Expressions -------------------------------------------------------------

@dataclass(frozen=True)
class IntLit:
    value: int


@dataclass(frozen=True)
class StrLit:
    value: str


@dataclass(frozen=True)
class ListLit:
    items: Tuple["Expr", ...]


@dataclass(frozen=True)
class Ref:
    name: ScopedName


@dataclass(frozen=True)
class Apply:
    func: "Expr"
    args: Tuple["Expr", ...]


@dataclass(frozen=True)
class BinOpApply:
    op: BinOp
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Proj:
    expr: "Expr"
    proj: Projection


Expr = Union[IntLit, StrLit, ListLit, Ref, Apply, BinOpApply, Proj]


def int_expr(value: int) -> IntLit:
    return IntLit(int(value))


def string_expr(value: str) -> StrLit:
    return StrLit(value)


def list_expr(items: Sequence[Expr]) -> ListLit:
    return ListLit(tuple(items))


def apply_builtin(name: str, args: Sequence[Expr]) -> Apply:
    return Apply(Ref(builtin(name)), tuple(args))


def project(expr: Expr, index: Union[int, Expr]) -> Proj:
    """Single-element projection expr[index]."""
    if isinstance(index, int):
        index = int_expr(index)
    return Proj(expr, ProjSingle(index))


# --- Statements --------------------------------------------------------------

@dataclass(frozen=True)
class Let:
    """let name = value"""
    name: ScopedName
    value: Expr


@dataclass(frozen=True)
class AssignName:
    name: ScopedName


@dataclass(frozen=True)
class AssignProj:
    target: "AssignTarget"
    proj: Projection


AssignTarget = Union[AssignName, AssignProj]


@dataclass(frozen=True)
class Assign:
    """let target[proj] = value"""
    target: AssignTarget
    value: Expr


@dataclass(frozen=True)
class Return:
    value: Expr


@dataclass(frozen=True)
class Call:
    """call name(args)"""
    name: ScopedName
    args: Tuple[Expr, ...] = ()


@dataclass(frozen=True)
class BuiltInStmt:
    """An ex command taking one expression, e.g. `echo x` or `throw x`."""
    command: str
    arg: Expr


@dataclass(frozen=True)
class CondArm:
    test: Expr
    body: Tuple["Stmt", ...]


@dataclass(frozen=True)
class If:
    """if / elseif ... / else / endif. `arms` is never empty."""
    arms: Tuple[CondArm, ...]
    default: Optional[Tuple["Stmt", ...]] = None


@dataclass(frozen=True)
class Function:
    name: ScopedName
    args: Tuple[str, ...]
    body: Tuple["Stmt", ...]


Stmt = Union[Let, Assign, Return, Call, BuiltInStmt, If, Function]
Block = Tuple[Stmt, ...]


@dataclass(frozen=True)
class Program:
    """Function definitions followed by the entry-point call."""
    items: Tuple[Stmt, ...]

    @property
    def functions(self) -> Tuple[Function, ...]:
        return tuple(s for s in self.items if isinstance(s, Function))
