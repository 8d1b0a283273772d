"""
Primitive operations and foreign-call descriptors of the simplified IR.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class ArithTy(Enum):
    """Arithmetic type an operation is instantiated at."""
    NATIVE = "ITNative"
    BIG = "ITBig"
    CHAR = "ITChar"
    B8 = "IT8"
    B16 = "IT16"
    B32 = "IT32"
    B64 = "IT64"
    FLOAT = "ATFloat"

    @property
    def is_integral(self) -> bool:
        return self is not ArithTy.FLOAT


class PrimTag(Enum):
    """Primitive operation vocabulary; values are the front end's names."""
    # Arithmetic
    PLUS = "LPlus"
    MINUS = "LMinus"
    TIMES = "LTimes"
    UDIV = "LUDiv"
    SDIV = "LSDiv"
    UREM = "LURem"
    SREM = "LSRem"
    AND = "LAnd"
    OR = "LOr"
    XOR = "LXOr"
    COMPL = "LCompl"
    SHL = "LSHL"
    LSHR = "LLSHR"
    ASHR = "LASHR"
    # Comparison
    EQ = "LEq"
    LT = "LLt"
    LE = "LLe"
    GT = "LGt"
    GE = "LGe"
    SLT = "LSLt"
    SLE = "LSLe"
    SGT = "LSGt"
    SGE = "LSGe"
    # Width and sign coercions
    SEXT = "LSExt"
    ZEXT = "LZExt"
    TRUNC = "LTrunc"
    # Conversions
    INT_FLOAT = "LIntFloat"
    FLOAT_INT = "LFloatInt"
    INT_STR = "LIntStr"
    STR_INT = "LStrInt"
    FLOAT_STR = "LFloatStr"
    STR_FLOAT = "LStrFloat"
    CH_INT = "LChInt"
    INT_CH = "LIntCh"
    # Strings
    STR_CONCAT = "LStrConcat"
    STR_LT = "LStrLt"
    STR_EQ = "LStrEq"
    STR_LEN = "LStrLen"
    STR_HEAD = "LStrHead"
    STR_TAIL = "LStrTail"
    STR_CONS = "LStrCons"
    STR_INDEX = "LStrIndex"
    STR_REV = "LStrRev"
    STR_SUBSTR = "LStrSubstr"
    # IO and runtime
    READ_STR = "LReadStr"
    WRITE_STR = "LWriteStr"
    SYSTEM_INFO = "LSystemInfo"
    FORK = "LFork"
    PAR = "LPar"
    CRASH = "LCrash"
    NO_OP = "LNoOp"
    EXTERNAL = "LExternal"


@dataclass(frozen=True)
class PrimOp:
    """
    A primitive operation instance.

    `types` carries the arithmetic type(s) the op is instantiated at: one for
    arithmetic/comparison, (from, to) for coercions. `name` is only set for
    EXTERNAL ops.
    """
    tag: PrimTag
    types: Tuple[ArithTy, ...] = ()
    name: Optional[str] = None

    @property
    def arith(self) -> Optional[ArithTy]:
        return self.types[0] if self.types else None

    def __str__(self) -> str:
        parts = [self.tag.value] + [t.value for t in self.types]
        if self.name is not None:
            parts.append(self.name)
        return " ".join(parts)


# --- Foreign-call descriptors ------------------------------------------------

@dataclass(frozen=True)
class ForeignCon:
    """A bare foreign tag, e.g. VIM_Echo."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ForeignStr:
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class ForeignApp:
    """A foreign tag applied to descriptor arguments, e.g. VIM_BuiltIn "strlen"."""
    name: str
    args: Tuple["ForeignDesc", ...] = ()

    def __str__(self) -> str:
        return " ".join([self.name] + [str(a) for a in self.args])


@dataclass(frozen=True)
class ForeignUnknown:
    def __str__(self) -> str:
        return "<unknown>"


ForeignDesc = Union[ForeignCon, ForeignStr, ForeignApp, ForeignUnknown]


class ForeignTag(Enum):
    """Closed set of foreign calls the Vim FFI exposes, with their arity."""
    ECHO = ("VIM_Echo", 1)
    LIST_EMPTY = ("VIM_ListEmpty", 0)
    LIST_INDEX = ("VIM_ListIndex", 2)
    LIST_CONS = ("VIM_ListCons", 2)
    LIST_SNOC = ("VIM_ListSnoc", 2)
    LIST_CONCAT = ("VIM_ListConcat", 2)
    LIST_SET_AT = ("VIM_ListSetAt", 3)

    def __init__(self, symbol: str, arity: int):
        self.symbol = symbol
        self.arity = arity

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["ForeignTag"]:
        for tag in cls:
            if tag.symbol == symbol:
                return tag
        return None


# Open escape: VIM_BuiltIn "name" calls the named Vim builtin verbatim
BUILTIN_ESCAPE = "VIM_BuiltIn"
