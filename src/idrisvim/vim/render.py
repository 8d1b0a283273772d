"""Vimscript renderer: Program → script text."""

from typing import List

from ..utils.config import RENDER_INDENT
from .ast import (
    Apply, Assign, AssignName, AssignProj, AssignTarget, BinOp, BinOpApply, BuiltInStmt,
    Call, Expr, Function, If, IntLit, Let, ListLit, Program, Proj, ProjFrom,
    Projection, ProjSingle, Ref, Return, StrLit, Stmt,
)


_BINOP_SYMBOLS = {
    BinOp.ADD: "+",
    BinOp.SUBTRACT: "-",
    BinOp.MULTIPLY: "*",
    BinOp.EQUALS: "==",
    BinOp.LT: "<",
    BinOp.LTE: "<=",
    BinOp.GT: ">",
    BinOp.GTE: ">=",
    BinOp.CONCAT: ".",
    BinOp.LIST_CONCAT: "+",
}

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_string(value: str) -> str:
    """Double-quoted Vimscript string literal."""
    out = []
    for ch in value:
        if ch in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


class VimRenderer:
    """Line-oriented emitter; one instance per rendered program."""

    def __init__(self, indent_str: str = RENDER_INDENT):
        self.indent_str = indent_str
        self.indent = 0
        self.lines: List[str] = []

    def render(self, program: Program) -> str:
        self.indent = 0
        self.lines = []
        for item in program.items:
            self._emit_stmt(item)
        return "\n".join(self.lines) + "\n"

    def _line(self, text: str) -> None:
        self.lines.append(self.indent_str * self.indent + text)

    def _emit_block(self, block) -> None:
        self.indent += 1
        for stmt in block:
            self._emit_stmt(stmt)
        self.indent -= 1

    def _emit_stmt(self, stmt: Stmt) -> None:
        if isinstance(stmt, Function):
            args = ", ".join(stmt.args)
            self._line(f"function! {stmt.name}({args}) abort")
            self._emit_block(stmt.body)
            self._line("endfunction")
            self.lines.append("")
        elif isinstance(stmt, Let):
            self._line(f"let {stmt.name} = {self.expr(stmt.value)}")
        elif isinstance(stmt, Assign):
            self._line(f"let {self._target(stmt.target)} = {self.expr(stmt.value)}")
        elif isinstance(stmt, Return):
            self._line(f"return {self.expr(stmt.value)}")
        elif isinstance(stmt, Call):
            args = ", ".join(self.expr(a) for a in stmt.args)
            self._line(f"call {stmt.name}({args})")
        elif isinstance(stmt, BuiltInStmt):
            self._line(f"{stmt.command} {self.expr(stmt.arg)}")
        elif isinstance(stmt, If):
            first, *rest = stmt.arms
            self._line(f"if {self.expr(first.test)}")
            self._emit_block(first.body)
            for arm in rest:
                self._line(f"elseif {self.expr(arm.test)}")
                self._emit_block(arm.body)
            if stmt.default is not None:
                self._line("else")
                self._emit_block(stmt.default)
            self._line("endif")
        else:
            raise TypeError(f"cannot render statement {type(stmt).__name__}")

    def _target(self, target: AssignTarget) -> str:
        if isinstance(target, AssignName):
            return str(target.name)
        if isinstance(target, AssignProj):
            return self._target(target.target) + self._proj(target.proj)
        raise TypeError(f"cannot render assignment target {type(target).__name__}")

    def _proj(self, proj: Projection) -> str:
        # Spaces around ':' keep `l:x` and friends from parsing as scoped names
        if isinstance(proj, ProjSingle):
            return f"[{self.expr(proj.index)}]"
        if isinstance(proj, ProjFrom):
            return f"[{self.expr(proj.start)} :]"
        raise TypeError(f"cannot render projection {type(proj).__name__}")

    def expr(self, expr: Expr) -> str:
        if isinstance(expr, IntLit):
            return str(expr.value)
        if isinstance(expr, StrLit):
            return escape_string(expr.value)
        if isinstance(expr, ListLit):
            return "[" + ", ".join(self.expr(e) for e in expr.items) + "]"
        if isinstance(expr, Ref):
            return str(expr.name)
        if isinstance(expr, Apply):
            args = ", ".join(self.expr(a) for a in expr.args)
            return f"{self.expr(expr.func)}({args})"
        if isinstance(expr, BinOpApply):
            return f"({self.expr(expr.left)} {_BINOP_SYMBOLS[expr.op]} {self.expr(expr.right)})"
        if isinstance(expr, Proj):
            return self.expr(expr.expr) + self._proj(expr.proj)
        raise TypeError(f"cannot render expression {type(expr).__name__}")


def render_program(program: Program) -> str:
    return VimRenderer().render(program)
