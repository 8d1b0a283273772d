"""
Compiler Driver

Reads simplified IR, runs the Vimscript backend and writes the script.
Errors never escape as exceptions: they are collected in an ErrorReporter
carried by the CompilationResult, and no output is written on failure.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from ..backends.vim import VimBackend
from ..ir.nodes import FunctionDecl, ProgramIR
from ..ir.serialization import deserialize_ir, serialize_ir
from ..shared.errors import ErrorReporter, IdrisVimError
from ..utils.config import IR_DUMP_SUFFIX
from ..utils.io_utils import read_source_file, write_output_file
from ..vim.ast import Program

logger = logging.getLogger(__name__)


@dataclass
class CodegenConfig:
    """One compilation unit: where to write, and what to compile."""
    output_file: Path
    definitions: Sequence[FunctionDecl]


class CompilationResult:
    """Compilation result"""
    def __init__(
        self,
        program: Optional[Program] = None,
        text: Optional[str] = None,
        reporter: Optional[ErrorReporter] = None,
        success: bool = False
    ):
        self.program = program
        self.text = text
        self.reporter = reporter or ErrorReporter()
        self.success = success

    def has_errors(self) -> bool:
        """True if compilation reported errors."""
        return self.reporter.has_errors() or not self.success


class CompilerDriver:
    """Orchestrates reading, codegen, rendering and writing."""

    def __init__(self, backend: Optional[VimBackend] = None):
        self.backend = backend or VimBackend()

    def generate(self, definitions: Sequence[FunctionDecl]) -> CompilationResult:
        """Codegen and render without touching the filesystem."""
        reporter = ErrorReporter()
        try:
            program = self.backend.codegen(definitions)
            text = self.backend.render(program)
        except IdrisVimError as e:
            reporter.report_exception(e)
            return CompilationResult(reporter=reporter, success=False)
        return CompilationResult(program=program, text=text, reporter=reporter, success=True)

    def compile(self, config: CodegenConfig) -> CompilationResult:
        """Generate the program and write it to `config.output_file` on success."""
        result = self.generate(config.definitions)
        if result.success:
            path = write_output_file(config.output_file, result.text)
            logger.debug(f"[driver] wrote {len(result.text)} characters to {path}")
        return result

    def compile_file(self, input_path: Union[Path, str],
                     output_path: Union[Path, str]) -> CompilationResult:
        """Compile an S-expression IR file to a Vimscript file."""
        output = Path(output_path)
        reporter = ErrorReporter()
        try:
            ir = deserialize_ir(read_source_file(input_path))
        except IdrisVimError as e:
            reporter.report_exception(e)
            return CompilationResult(reporter=reporter, success=False)

        if os.environ.get("IDRISVIM_DUMP_IR"):
            self._dump_ir(ir, output)

        return self.compile(CodegenConfig(output_file=output, definitions=ir.definitions))

    def _dump_ir(self, ir: ProgramIR, output: Path) -> None:
        dump_path = output.with_name(output.stem + IR_DUMP_SUFFIX)
        write_output_file(dump_path, serialize_ir(ir))
        logger.debug(f"[driver] dumped IR to {dump_path}")
