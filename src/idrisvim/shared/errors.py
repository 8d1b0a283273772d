"""
Error Reporting

Codegen errors are fatal: the first unsupported construct aborts the whole
compilation unit. The exception classes below carry an error code and the
offending construct; ErrorReporter renders them in rustc style for the CLI.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, List


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("IDRISVIM_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Error dataclass
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """
    One diagnostic.

    `definition` is the top-level definition being lowered when the error
    was raised (None for errors outside codegen, e.g. malformed IR files).
    """
    message: str
    definition: Optional[str] = None
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _format_diagnostic(error: Error, color: bool = False) -> str:
    """
    Render a single diagnostic.

    Example output (plain, no color)::

        error[E0103]: primitive operation not supported: LFloatAdd
         --> in definition `Main.area`
          |
          = help: only integral arithmetic is supported
    """
    out: List[str] = []

    code_str = f"[{error.code}]" if error.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    )

    where = f"in definition `{error.definition}`" if error.definition else "<unknown definition>"
    out.append(_style(" --> ", _BOLD, _BLUE, color=color) + where)
    _append_annotations(out, error, color)
    return "\n".join(out)


def _append_annotations(out: List[str], error: Error, color: bool) -> None:
    if not (error.help or error.note):
        return
    out.append(_style("  |", _BOLD, _BLUE, color=color))
    if error.help:
        out.append(
            _style("  = ", _BOLD, _CYAN, color=color)
            + _style("help: ", _BOLD, color=color)
            + error.help
        )
    if error.note:
        out.append(
            _style("  = ", _BOLD, _CYAN, color=color)
            + _style("note: ", _BOLD, color=color)
            + error.note
        )


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """Collects diagnostics and formats them for the terminal."""

    def __init__(self):
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        definition: Optional[str] = None,
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(
            message=message,
            definition=definition,
            code=code,
            help=help,
            note=note,
        ))

    def report_exception(self, exc: "IdrisVimError") -> None:
        self.report_error(
            exc.message,
            definition=exc.definition,
            code=exc.error_code,
            help=exc.help_text,
        )

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(
            _style("error", _BOLD, _RED, color=use_color)
            + _style(f": {summary}", _BOLD, color=use_color)
        )
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def print_errors(self) -> None:
        print(self.format_all_errors(), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class IdrisVimError(Exception):
    """Base exception for all codegen errors"""
    default_code = "E0001"

    def __init__(self, message: str, error_code: Optional[str] = None,
                 help: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.help_text = help
        self.definition: Optional[str] = None

    def __str__(self):
        if self.definition:
            return f"error[{self.error_code}]: {self.message}\n --> in definition `{self.definition}`"
        return f"error[{self.error_code}]: {self.message}"


class UnsupportedConstructError(IdrisVimError):
    """
    IR outside the supported subset: an expression shape, constant,
    primitive operation or foreign tag this backend has no rule for.
    """
    EXPRESSION = "E0101"
    CONSTANT = "E0102"
    PRIMITIVE = "E0103"
    FOREIGN = "E0104"
    default_code = EXPRESSION

    def __init__(self, message: str, construct: object = None,
                 error_code: Optional[str] = None, help: Optional[str] = None):
        super().__init__(message, error_code, help)
        self.construct = construct


class MalformedForeignCallError(IdrisVimError):
    """A supported foreign tag used with arguments it cannot accept."""
    default_code = "E0201"


class IRFormatError(IdrisVimError):
    """The IR reader met input that is not a well-formed program."""
    default_code = "E0301"
