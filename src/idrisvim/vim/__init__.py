"""
Vimscript target: AST and text renderer.
"""

from .ast import Program, Scope, ScopedName
from .render import render_program

__all__ = ["Program", "Scope", "ScopedName", "render_program"]
