"""
workerlint - Web Worker portability linter

Lints JavaScript and TypeScript sources for Web APIs reached through the
`window` global, which does not exist inside Web Workers.
"""

__version__ = "0.1.0"
__author__ = "workerlint contributors"

from workerlint.lint.linter import Linter, lint_file, lint_source
