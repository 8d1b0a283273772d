"""
idrisvim utilities package
"""

from .io_utils import read_source_file, write_output_file

__all__ = ["read_source_file", "write_output_file"]
