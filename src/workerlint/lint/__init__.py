"""
workerlint.lint - Rules and the engine that runs them

- linter: Linter engine (parse, run rules, apply ignore directives)
- context: per-program Context handed to rules
- handler: node traversal with visit_* callbacks
- rules: rule registry and rule implementations
- reporting: human and JSON output
"""

from workerlint.lint.context import Context
from workerlint.lint.diagnostics import Diagnostic
from workerlint.lint.handler import Handler
from workerlint.lint.linter import Linter, lint_file, lint_source
from workerlint.lint.reporting import Reporter
from workerlint.lint.rule import LintRule

__all__ = [
    "Context",
    "Diagnostic",
    "Handler",
    "Linter",
    "LintRule",
    "Reporter",
    "lint_file",
    "lint_source",
]
