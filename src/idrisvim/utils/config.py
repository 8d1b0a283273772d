"""
Configuration constants to replace magic strings throughout idrisvim
"""

# Generated identifiers
GENERATED_NAME_PREFIX = "Idris_"  # Reserved marker: no user or Vim builtin name starts with it
LOCAL_NAME_PREFIX = "loc"         # Local slot i renders as loc<i>

# Entry point synthesized by the front end (machine name {runMain_0})
ENTRY_POINT_BASE = "runMain"
ENTRY_POINT_INDEX = 0

# Target numeric representation (Vim Number with +num64)
VIM_NUMBER_MIN = -(2 ** 63)
VIM_NUMBER_MAX = 2 ** 63 - 1

# Regex used to split a string into characters
CHAR_SPLIT_PATTERN = ".\\zs"

# Global helper that string output (LWriteStr) is routed through
ECHO_HELPER_NAME = "Idris_echo"

# Rendering
RENDER_INDENT = "  "

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"
OUTPUT_FILE_EXTENSION = ".vim"
IR_DUMP_SUFFIX = ".ir.sexpr"
