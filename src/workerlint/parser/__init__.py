"""
workerlint.parser - JavaScript/TypeScript parsing

tree-sitter based parsing, typed views over member expressions, and
lexical scope analysis.
"""

from workerlint.parser.parser import (
    Dialect,
    ParsedProgram,
    ParseError,
    Position,
    SourceRange,
    UnsupportedFileError,
    dialect_for_path,
    parse_file,
    parse_source,
)
from workerlint.parser.scope import Scope, ScopeTable
from workerlint.parser.view import (
    ComputedProp,
    IdentProp,
    MemberExpr,
    MemberProp,
    PrivateNameProp,
)

__all__ = [
    # Parser
    "Dialect",
    "ParsedProgram",
    "ParseError",
    "Position",
    "SourceRange",
    "UnsupportedFileError",
    "dialect_for_path",
    "parse_file",
    "parse_source",
    # Scope
    "Scope",
    "ScopeTable",
    # Views
    "ComputedProp",
    "IdentProp",
    "MemberExpr",
    "MemberProp",
    "PrivateNameProp",
]
