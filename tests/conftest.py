"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from workerlint.lint.linter import Linter
from workerlint.lint.rules.no_window_prefix import NoWindowPrefix, MESSAGE, HINT


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def linter():
    """Linter running only no-window-prefix."""
    return Linter(rules=[NoWindowPrefix()])


@pytest.fixture
def project_dir(tmp_path):
    """A small source tree with offending, clean and excluded files."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "app.js").write_text("window.fetch('/api');\n", encoding="utf-8")
    (src / "clean.js").write_text("self.fetch('/api');\n", encoding="utf-8")
    (src / "worker.ts").write_text(
        "const t: number = window.setTimeout(() => {}, 10);\n", encoding="utf-8"
    )
    (src / "notes.txt").write_text("window.fetch()\n", encoding="utf-8")
    vendored = tmp_path / "node_modules" / "lib"
    vendored.mkdir(parents=True)
    (vendored / "index.js").write_text("window.fetch();\n", encoding="utf-8")
    return tmp_path


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def lint(source: str, filename: str = "test.js"):
    """Lint source with only no-window-prefix enabled."""
    return Linter(rules=[NoWindowPrefix()]).lint_source(source, filename)


def assert_lint_ok(*sources: str, filename: str = "test.js"):
    for source in sources:
        diagnostics = lint(source, filename)
        assert diagnostics == [], f"expected no diagnostics for {source!r}, got {diagnostics}"


def assert_lint_err(source: str, positions, filename: str = "test.js"):
    """Assert diagnostics at exactly the given (line, col) positions."""
    diagnostics = lint(source, filename)
    assert [(d.line, d.col) for d in diagnostics] == list(positions), \
        f"unexpected diagnostics for {source!r}: {diagnostics}"
    for d in diagnostics:
        assert d.code == "no-window-prefix"
        assert d.message == MESSAGE
        assert d.hint == HINT
    return diagnostics


def first_node(program, node_type: str):
    """First node of a type in document order."""
    stack = [program.root]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            return node
        stack.extend(reversed(node.named_children))
    return None


def identifiers_named(program, name: str):
    """All identifier nodes with the given text, in document order."""
    found = []
    stack = [program.root]
    while stack:
        node = stack.pop()
        if node.type == "identifier" and program.text_of(node) == name:
            found.append(node)
        stack.extend(reversed(node.named_children))
    return found
