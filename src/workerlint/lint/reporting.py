"""
workerlint - Reporting and output formatting.

Handles:
- Human-readable output
- JSON output
"""

from __future__ import annotations

import json
from collections import Counter

from workerlint.lint.diagnostics import Diagnostic


class Reporter:
    """Collects and formats diagnostics."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []
        self.files_checked = 0

    def extend(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics.extend(diagnostics)

    @property
    def has_problems(self) -> bool:
        return bool(self.diagnostics)

    def counts_by_code(self) -> dict[str, int]:
        return dict(Counter(d.code for d in self.diagnostics))

    def render_human(self) -> str:
        """Render diagnostics as human-readable text."""
        if not self.diagnostics:
            return f"Checked {self.files_checked} file(s): OK - no problems"

        lines = []
        for d in sorted(self.diagnostics, key=Diagnostic.sort_key):
            lines.append(str(d))
            lines.append("")

        lines.append(f"Found {len(self.diagnostics)} problem(s) in {self.files_checked} checked file(s)")
        for code, count in sorted(self.counts_by_code().items()):
            lines.append(f"  {code}: {count}")
        return "\n".join(lines)

    def render_json(self) -> str:
        """Render diagnostics as JSON."""
        return json.dumps(
            [d.to_dict() for d in sorted(self.diagnostics, key=Diagnostic.sort_key)],
            indent=2,
        )
