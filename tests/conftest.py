"""
Pytest configuration and shared fixtures for the idrisvim tests.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from idrisvim.backends.vim import VimBackend
from idrisvim.compiler.driver import CompilerDriver
from idrisvim.shared.names import QualifiedName, target_name
from idrisvim.shared.scope import Environment
from idrisvim.vim.ast import Scope, ScopedName


# =============================================================================
# Session-scoped fixtures
# =============================================================================

@pytest.fixture(scope="session")
def session_compiler():
    """Stateless driver shared across all tests."""
    return CompilerDriver()


@pytest.fixture
def backend():
    """Fresh backend per test (the renderer keeps per-render line state)."""
    return VimBackend()


# =============================================================================
# Environments
# =============================================================================

@pytest.fixture
def empty_env():
    return Environment()


@pytest.fixture
def arg_env():
    """Environment of a two-argument function: loc0, loc1 at Argument scope."""
    pairs = []
    for i in range(2):
        name = QualifiedName.local(i)
        pairs.append((name, ScopedName(Scope.ARGUMENT, target_name(name))))
    return Environment().extend_all(pairs)


@pytest.fixture(autouse=True)
def _plain_diagnostics(monkeypatch):
    """Uncolored diagnostics and no IR dumps unless a test opts in."""
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("IDRISVIM_DUMP_IR", raising=False)
