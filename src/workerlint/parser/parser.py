"""
JavaScript/TypeScript Parser

Thin layer over tree-sitter that turns source text into a ParsedProgram:
the concrete syntax tree plus the source bytes and position helpers the
lint rules need.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import cached_property, lru_cache
from pathlib import Path
from typing import List, Optional, Union

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)


class Dialect(Enum):
    """Source dialects understood by the parser."""
    JAVASCRIPT = "javascript"   # includes JSX
    TYPESCRIPT = "typescript"
    TSX = "tsx"


EXTENSION_DIALECTS = {
    ".js": Dialect.JAVASCRIPT,
    ".mjs": Dialect.JAVASCRIPT,
    ".cjs": Dialect.JAVASCRIPT,
    ".jsx": Dialect.JAVASCRIPT,
    ".ts": Dialect.TYPESCRIPT,
    ".mts": Dialect.TYPESCRIPT,
    ".cts": Dialect.TYPESCRIPT,
    ".tsx": Dialect.TSX,
}


class ParseError(Exception):
    """Source text could not be parsed without errors."""
    def __init__(self, message: str, filename: str, line: int, column: int):
        self.filename = filename
        self.line = line
        self.column = column
        self.reason = message
        super().__init__(f"{filename}:{line}:{column}: {message}")


class UnsupportedFileError(Exception):
    """File extension has no known dialect."""
    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(f"Unsupported file type: {self.path}")


@dataclass(frozen=True)
class Position:
    """A location in source. line is 1-based, col is a 0-based character offset."""
    line: int
    col: int
    byte: int


@dataclass(frozen=True)
class SourceRange:
    """Half-open range between two positions."""
    start: Position
    end: Position


@dataclass
class ParsedProgram:
    """A parsed source unit."""
    filename: str
    source: bytes
    tree: Tree
    dialect: Dialect

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text_of(self, node: Node) -> str:
        """Source text covered by a node."""
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def range_of(self, node: Node) -> SourceRange:
        return SourceRange(
            start=self._position(node.start_byte, node.start_point[0]),
            end=self._position(node.end_byte, node.end_point[0]),
        )

    @cached_property
    def lines(self) -> List[str]:
        # rows are counted on "\n" only, same as tree-sitter
        text = self.source.decode("utf-8", errors="replace")
        return [line.rstrip("\r") for line in text.split("\n")]

    def line_text(self, line: int) -> str:
        """Get line by 1-based line number."""
        if line <= 0 or line > len(self.lines):
            return ""
        return self.lines[line - 1]

    def _position(self, byte: int, row: int) -> Position:
        line_start = self.source.rfind(b"\n", 0, byte) + 1
        col = len(self.source[line_start:byte].decode("utf-8", errors="replace"))
        return Position(line=row + 1, col=col, byte=byte)


@lru_cache(maxsize=None)
def get_language(dialect: Dialect) -> Language:
    """Load (once) the tree-sitter grammar for a dialect."""
    if dialect is Dialect.TYPESCRIPT:
        return Language(tsts.language_typescript())
    if dialect is Dialect.TSX:
        return Language(tsts.language_tsx())
    return Language(tsjs.language())


def dialect_for_path(path: Union[str, Path]) -> Dialect:
    """Pick the dialect from a file name (`.d.ts` counts as TypeScript)."""
    suffix = Path(path).suffix.lower()
    try:
        return EXTENSION_DIALECTS[suffix]
    except KeyError:
        raise UnsupportedFileError(path) from None


def _first_error(root: Node) -> Optional[Node]:
    """Find the first ERROR or missing node in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
    return None


def parse_source(
    text: Union[str, bytes],
    filename: str = "<input>",
    dialect: Optional[Dialect] = None,
    strict: bool = True,
) -> ParsedProgram:
    """
    Parse source text into a ParsedProgram.

    With strict=True (the default) a tree containing syntax errors raises
    ParseError at the first error location. With strict=False the error-
    recovered tree is returned as-is.
    """
    if dialect is None:
        dialect = dialect_for_path(filename) if filename != "<input>" else Dialect.JAVASCRIPT
    source = text.encode("utf-8") if isinstance(text, str) else text

    parser = Parser(get_language(dialect))
    tree = parser.parse(source)
    program = ParsedProgram(filename=filename, source=source, tree=tree, dialect=dialect)

    if strict and program.root.has_error:
        bad = _first_error(program.root) or program.root
        pos = program.range_of(bad).start
        if bad.is_missing:
            message = f"Expected {bad.type!r}"
        else:
            snippet = program.text_of(bad).strip().splitlines()
            message = f"Unexpected token {snippet[0][:20]!r}" if snippet else "Unexpected end of input"
        raise ParseError(message, filename, pos.line, pos.col)

    logger.debug("parsed %s (%s, %d bytes)", filename, dialect.value, len(source))
    return program


def parse_file(path: Union[str, Path], strict: bool = True) -> ParsedProgram:
    """Parse a source file, picking the dialect from its extension."""
    path = Path(path)
    dialect = dialect_for_path(path)
    return parse_source(path.read_bytes(), filename=str(path), dialect=dialect, strict=strict)
