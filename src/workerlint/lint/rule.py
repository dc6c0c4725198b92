"""
Base class for lint rules.
"""

from typing import Tuple

from workerlint.lint.context import Context
from workerlint.parser.parser import ParsedProgram


class LintRule:
    """
    A lint rule: a stable code, classification tags, documentation and
    the callback that inspects one program.
    """

    code: str = ""
    tags: Tuple[str, ...] = ()
    docs: str = ""

    def lint_program(self, context: Context, program: ParsedProgram) -> None:
        """Inspect a program and report through context."""
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.code!r})"
