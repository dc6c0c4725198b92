"""
Ignore directives in source comments.

    // workerlint-ignore no-window-prefix       -> next line only
    // workerlint-ignore-file                   -> whole file, all rules
    /* workerlint-ignore-file no-window-prefix */

Codes may be separated by spaces or commas; anything after `--` is an
explanation. A directive with no codes matches every rule. File-level
directives are only honoured among the leading comments of a file.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional

from workerlint.lint.diagnostics import Diagnostic
from workerlint.parser.parser import ParsedProgram

DEFAULT_DIRECTIVE = "workerlint-ignore"

# node name differs between tree-sitter-javascript releases
HASHBANG_TYPES = frozenset({"hash_bang_line", "hashbang_line"})


@dataclass
class IgnoreDirectives:
    """Directives collected from one file."""
    file_codes: Optional[FrozenSet[str]] = None
    line_codes: Dict[int, FrozenSet[str]] = field(default_factory=dict)

    def suppresses(self, diagnostic: Diagnostic) -> bool:
        if self.file_codes is not None and _matches(self.file_codes, diagnostic.code):
            return True
        codes = self.line_codes.get(diagnostic.line)
        return codes is not None and _matches(codes, diagnostic.code)

    def filter(self, diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
        return [d for d in diagnostics if not self.suppresses(d)]


def _matches(codes: FrozenSet[str], code: str) -> bool:
    return not codes or code in codes


def _comment_body(text: str) -> str:
    if text.startswith("//"):
        return text[2:].strip()
    if text.startswith("/*"):
        return text[2:-2].strip() if text.endswith("*/") else text[2:].strip()
    return text.strip()


def _parse_directive(text: str, prefix: str):
    """Return (is_file_directive, codes) or None if the comment is not a directive."""
    rx = re.compile(rf"^{re.escape(prefix)}(-file)?(?:\s+(.*))?$", re.DOTALL)
    m = rx.match(_comment_body(text))
    if not m:
        return None
    rest = (m.group(2) or "").split("--", 1)[0]
    codes = frozenset(c for c in re.split(r"[\s,]+", rest) if c)
    return bool(m.group(1)), codes


def collect_directives(program: ParsedProgram, prefix: str = DEFAULT_DIRECTIVE) -> IgnoreDirectives:
    """Scan a program's comments for ignore directives."""
    directives = IgnoreDirectives()

    # file-level: leading comments only
    for child in program.root.named_children:
        if child.type in HASHBANG_TYPES:
            continue
        if child.type != "comment":
            break
        parsed = _parse_directive(program.text_of(child), prefix)
        if parsed and parsed[0]:
            codes = parsed[1]
            if directives.file_codes is None or not codes:
                directives.file_codes = codes
            elif directives.file_codes:
                directives.file_codes = directives.file_codes | codes

    # next-line directives anywhere
    stack = [program.root]
    while stack:
        node = stack.pop()
        if node.type == "comment":
            parsed = _parse_directive(program.text_of(node), prefix)
            if parsed and not parsed[0]:
                target = program.range_of(node).end.line + 1
                codes = parsed[1]
                previous = directives.line_codes.get(target)
                if previous is None or not codes:
                    directives.line_codes[target] = codes
                elif previous:
                    directives.line_codes[target] = previous | codes
            continue
        stack.extend(node.named_children)

    return directives
