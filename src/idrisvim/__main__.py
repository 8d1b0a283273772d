"""CLI entry point: run `idrisvim file.sexpr -o out.vim` or `python -m idrisvim file.sexpr`."""

import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    import logging
    import pprint
    from .compiler.driver import CompilerDriver
    from .utils.config import OUTPUT_FILE_EXTENSION

    parser = argparse.ArgumentParser(prog="idrisvim", description="Compile simplified Idris IR to Vimscript.")
    parser.add_argument("file", type=Path, help="Path to .sexpr IR file")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help=f"Output script (default: input with {OUTPUT_FILE_EXTENSION} extension)")
    parser.add_argument("--dump-ast", action="store_true", help="Print the generated Vimscript AST")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = args.file.resolve()
    if not path.exists():
        sys.stderr.write(f"idrisvim: error: file not found: {path}\n")
        return 1
    if not path.is_file():
        sys.stderr.write(f"idrisvim: error: not a file: {path}\n")
        return 1

    output = args.output or path.with_suffix(OUTPUT_FILE_EXTENSION)
    driver = CompilerDriver()
    try:
        result = driver.compile_file(path, output)
    except (OSError, UnicodeDecodeError) as e:
        sys.stderr.write(f"idrisvim: error: {e}\n")
        return 1

    if not result.success:
        if result.reporter.has_errors():
            sys.stderr.write(result.reporter.format_all_errors() + "\n")
        else:
            sys.stderr.write("idrisvim: compilation failed\n")
        return 1

    if args.dump_ast:
        pprint.pprint(result.program)
    return 0


if __name__ == "__main__":
    sys.exit(main())
