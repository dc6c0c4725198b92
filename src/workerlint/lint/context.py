"""
Per-program analysis context handed to every rule.
"""

from typing import List, Optional

from workerlint.lint.diagnostics import Diagnostic
from workerlint.parser.parser import ParsedProgram, SourceRange
from workerlint.parser.scope import ScopeTable


class Context:
    """
    Holds the program being linted, its scope table and the diagnostics
    reported so far. One Context per source unit; never shared.
    """

    def __init__(self, program: ParsedProgram):
        self.program = program
        self.diagnostics: List[Diagnostic] = []
        self._scope: Optional[ScopeTable] = None

    @property
    def filename(self) -> str:
        return self.program.filename

    def scope(self) -> ScopeTable:
        """Scope table for the program, built on first use."""
        if self._scope is None:
            self._scope = ScopeTable.build(self.program)
        return self._scope

    def add_diagnostic(self, range: SourceRange, code: str, message: str) -> None:
        self._add(range, code, message, None)

    def add_diagnostic_with_hint(self, range: SourceRange, code: str, message: str, hint: str) -> None:
        self._add(range, code, message, hint)

    def _add(self, range: SourceRange, code: str, message: str, hint: Optional[str]) -> None:
        self.diagnostics.append(Diagnostic(
            filename=self.filename,
            range=range,
            code=code,
            message=message,
            hint=hint,
            context=self.program.line_text(range.start.line),
        ))
