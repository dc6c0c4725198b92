"""
Lint diagnostics.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from workerlint.parser.parser import SourceRange


@dataclass(frozen=True)
class Diagnostic:
    """A single finding reported by a rule."""
    filename: str
    range: SourceRange
    code: str               # e.g. "no-window-prefix"
    message: str
    hint: Optional[str] = None
    context: str = ""       # The offending source line

    @property
    def line(self) -> int:
        return self.range.start.line

    @property
    def col(self) -> int:
        return self.range.start.col

    def sort_key(self):
        return (self.filename, self.line, self.col, self.code)

    def __str__(self):
        msg = f"{self.code} {self.filename}:{self.line}:{self.col}: {self.message}"
        if self.context:
            msg += f"\n    {self.context.strip()}"
        if self.hint:
            msg += f"\n    -> {self.hint}"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "code": self.code,
            "message": self.message,
            "hint": self.hint,
            "filename": self.filename,
            "line": self.line,
            "col": self.col,
            "end_line": self.range.end.line,
            "end_col": self.range.end.col,
        }
