"""
Simplified IR Nodes

The input of codegen: closure-converted, case-tree-flattened expressions in
A-normal form. Argument positions hold variable references (LVar), never
nested expressions, so evaluation order is the order of the enclosing lets.

Nodes are produced once by the front end (or the S-expression reader) and
consumed read-only by the backend.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, Sequence, Tuple, TypeVar

from ..shared.names import QualifiedName
from .constants import Const
from .primitives import ForeignDesc, PrimOp

T = TypeVar('T')


class IRNode:
    """
    Base class for all IR nodes.

    Regular class with __slots__ (not dataclass) so subclasses can add fields
    without default-ordering issues. Equality and hashing are structural
    over the slots.
    """
    __slots__ = ()

    def _get_all_attributes(self):
        """Get all attribute values for equality/hashing (works with __slots__)."""
        attrs = {}
        for cls in self.__class__.__mro__:
            slots = cls.__dict__.get('__slots__', ())
            if isinstance(slots, str):
                slots = (slots,)
            for slot in slots:
                if slot not in attrs:
                    attrs[slot] = getattr(self, slot, None)
        return attrs

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self._get_all_attributes() == other._get_all_attributes()

    def __hash__(self):
        return hash((self.__class__.__name__,
                     tuple(sorted(self._get_all_attributes().items()))))

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self._get_all_attributes().items())
        return f"{self.__class__.__name__}({fields})"


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------

class LVar(IRNode):
    """Variable reference: a local slot or a global name."""
    __slots__ = ()

    @property
    def qualified_name(self) -> QualifiedName:
        raise NotImplementedError


class Loc(LVar):
    __slots__ = ('index',)

    def __init__(self, index: int):
        self.index = index

    @property
    def qualified_name(self) -> QualifiedName:
        return QualifiedName.local(self.index)


class Glob(LVar):
    __slots__ = ('name',)

    def __init__(self, name: QualifiedName):
        self.name = name

    @property
    def qualified_name(self) -> QualifiedName:
        return self.name


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

class ExpressionIR(IRNode):
    """Expression in IR. Dispatch goes through IRVisitor."""
    __slots__ = ()

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")


class VarExpr(ExpressionIR):
    __slots__ = ('var',)

    def __init__(self, var: LVar):
        self.var = var

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_var(self)


class AppExpr(ExpressionIR):
    """Saturated call of a top-level function."""
    __slots__ = ('func', 'args', 'tail_call')

    def __init__(self, func: QualifiedName, args: Sequence[LVar], tail_call: bool = False):
        self.func = func
        self.args = tuple(args)
        self.tail_call = tail_call

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_app(self)


class LetExpr(ExpressionIR):
    __slots__ = ('var', 'value', 'body')

    def __init__(self, var: LVar, value: ExpressionIR, body: ExpressionIR):
        self.var = var
        self.value = value
        self.body = body

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_let(self)


class UpdateExpr(ExpressionIR):
    """In-place update hint; the target has no sharing to exploit."""
    __slots__ = ('var', 'value')

    def __init__(self, var: LVar, value: ExpressionIR):
        self.var = var
        self.value = value

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_update(self)


class ConExpr(ExpressionIR):
    """Constructor application; `reuse` is an optional cell to overwrite."""
    __slots__ = ('reuse', 'tag', 'name', 'args')

    def __init__(self, tag: int, name: QualifiedName, args: Sequence[LVar],
                 reuse: Optional[LVar] = None):
        self.tag = tag
        self.name = name
        self.args = tuple(args)
        self.reuse = reuse

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_con(self)


class CaseExpr(ExpressionIR):
    """
    Case tree over a variable. `checked` marks the form whose scrutinee is
    already evaluated; codegen treats both forms alike.
    """
    __slots__ = ('scrutinee', 'alts', 'checked', 'shared')

    def __init__(self, scrutinee: LVar, alts: Sequence['AltIR'],
                 checked: bool = False, shared: bool = True):
        self.scrutinee = scrutinee
        self.alts = tuple(alts)
        self.checked = checked
        self.shared = shared

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_case(self)


class ProjExpr(ExpressionIR):
    __slots__ = ('var', 'index')

    def __init__(self, var: LVar, index: int):
        self.var = var
        self.index = index

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_proj(self)


class ConstExpr(ExpressionIR):
    __slots__ = ('const',)

    def __init__(self, const: Const):
        self.const = const

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_const(self)


class ForeignExpr(ExpressionIR):
    """Foreign call; each argument pairs its type descriptor with a variable."""
    __slots__ = ('ret_desc', 'desc', 'args')

    def __init__(self, desc: ForeignDesc, args: Sequence[Tuple[ForeignDesc, LVar]],
                 ret_desc: Optional[ForeignDesc] = None):
        self.desc = desc
        self.args = tuple(tuple(a) for a in args)
        self.ret_desc = ret_desc

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_foreign(self)


class OpExpr(ExpressionIR):
    __slots__ = ('op', 'args')

    def __init__(self, op: PrimOp, args: Sequence[LVar]):
        self.op = op
        self.args = tuple(args)

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_op(self)


class NothingExpr(ExpressionIR):
    """Erased value."""
    __slots__ = ()

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_nothing(self)


class ErrorExpr(ExpressionIR):
    """Unreachable code; evaluating it aborts with `message`."""
    __slots__ = ('message',)

    def __init__(self, message: str):
        self.message = message

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_error(self)


# ---------------------------------------------------------------------------
# Case alternatives
# ---------------------------------------------------------------------------

class AltIR(IRNode):
    __slots__ = ('body',)

    def __init__(self, body: ExpressionIR):
        self.body = body

    def accept(self, visitor: 'AltVisitor[T]') -> T:
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")


class ConstCase(AltIR):
    __slots__ = ('const',)

    def __init__(self, const: Const, body: ExpressionIR):
        super().__init__(body)
        self.const = const

    def accept(self, visitor: 'AltVisitor[T]') -> T:
        return visitor.visit_const_case(self)


class ConCase(AltIR):
    """
    Constructor alternative. Fields 1..n of the scrutinee bind to local
    slots first_local .. first_local+n-1 in order.
    """
    __slots__ = ('first_local', 'tag', 'name', 'args')

    def __init__(self, first_local: int, tag: int, name: QualifiedName,
                 args: Sequence[QualifiedName], body: ExpressionIR):
        super().__init__(body)
        self.first_local = first_local
        self.tag = tag
        self.name = name
        self.args = tuple(args)

    def accept(self, visitor: 'AltVisitor[T]') -> T:
        return visitor.visit_con_case(self)


class DefaultCase(AltIR):
    __slots__ = ()

    def accept(self, visitor: 'AltVisitor[T]') -> T:
        return visitor.visit_default_case(self)


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------

class FunctionDecl(IRNode):
    """Top-level definition; arguments bind local slots 0..k-1."""
    __slots__ = ('name', 'args', 'body')

    def __init__(self, name: QualifiedName, args: Sequence[QualifiedName], body: ExpressionIR):
        self.name = name
        self.args = tuple(args)
        self.body = body

    @property
    def arity(self) -> int:
        return len(self.args)


class ProgramIR(IRNode):
    """Ordered top-level definitions of one compilation unit."""
    __slots__ = ('definitions',)

    def __init__(self, definitions: Sequence[FunctionDecl]):
        self.definitions = tuple(definitions)


# ---------------------------------------------------------------------------
# Visitors
# ---------------------------------------------------------------------------

class IRVisitor(ABC, Generic[T]):
    """
    Expression visitor. Every expression variant has an abstract method, so
    a visitor missing a rule cannot be instantiated.
    """

    @abstractmethod
    def visit_var(self, node: VarExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_app(self, node: AppExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_let(self, node: LetExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_update(self, node: UpdateExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_con(self, node: ConExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_case(self, node: CaseExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_proj(self, node: ProjExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_const(self, node: ConstExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_foreign(self, node: ForeignExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_op(self, node: OpExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_nothing(self, node: NothingExpr) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_error(self, node: ErrorExpr) -> T:
        raise NotImplementedError


class AltVisitor(ABC, Generic[T]):
    """Case-alternative visitor."""

    @abstractmethod
    def visit_const_case(self, node: ConstCase) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_con_case(self, node: ConCase) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_default_case(self, node: DefaultCase) -> T:
        raise NotImplementedError
