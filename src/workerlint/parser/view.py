"""
Typed views over tree-sitter nodes.

tree-sitter hands out a concrete syntax tree with string node types. The
lint rules want something closer to an AST: a member access is one thing,
whether it was written `a.b`, `a.#b` or `a[b]`. This module provides that
view along with literal decoding helpers.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from tree_sitter import Node

from workerlint.parser.parser import ParsedProgram, SourceRange

MEMBER_EXPRESSION_TYPES = frozenset({"member_expression", "subscript_expression"})


# ============================================================================
# MEMBER PROPERTY VARIANTS
# ============================================================================

@dataclass(frozen=True)
class IdentProp:
    """`obj.name`"""
    sym: str


@dataclass(frozen=True)
class PrivateNameProp:
    """`obj.#name`; sym excludes the `#` sigil."""
    sym: str


@dataclass(frozen=True)
class ComputedProp:
    """`obj[expr]`"""
    expr: Node


MemberProp = Union[IdentProp, PrivateNameProp, ComputedProp]


@dataclass(frozen=True)
class MemberExpr:
    """A member access expression and the program it belongs to."""
    node: Node
    obj: Node
    prop: MemberProp
    range: SourceRange
    program: ParsedProgram

    @classmethod
    def from_node(cls, node: Node, program: ParsedProgram) -> "MemberExpr":
        obj = node.child_by_field_name("object")
        if node.type == "subscript_expression":
            prop = ComputedProp(node.child_by_field_name("index"))
        else:
            prop_node = node.child_by_field_name("property")
            text = program.text_of(prop_node)
            if prop_node.type == "private_property_identifier":
                prop = PrivateNameProp(text[1:] if text.startswith("#") else text)
            else:
                prop = IdentProp(text)
        return cls(node=node, obj=obj, prop=prop, range=program.range_of(node), program=program)

    def is_member_object(self) -> bool:
        """True if this expression is the object of an enclosing member access."""
        parent = self.node.parent
        if parent is None or parent.type not in MEMBER_EXPRESSION_TYPES:
            return False
        return same_node(parent.child_by_field_name("object"), self.node)

    def text_of(self, node: Node) -> str:
        return self.program.text_of(node)


def same_node(a: Optional[Node], b: Optional[Node]) -> bool:
    if a is None or b is None:
        return False
    return node_key(a) == node_key(b)


def node_key(node: Node) -> tuple:
    """Hashable identity of a node within one tree."""
    return (node.start_byte, node.end_byte, node.type)


# ============================================================================
# LITERALS
# ============================================================================

_ESCAPE_RX = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|[\s\S])"
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}


def _unescape(match: "re.Match[str]") -> str:
    esc = match.group(1)
    if esc.startswith("u{"):
        code = int(esc[2:-1], 16)
    elif esc[0] == "u" and len(esc) == 5:
        code = int(esc[1:], 16)
    elif esc[0] == "x" and len(esc) == 3:
        code = int(esc[1:], 16)
    elif esc[0] in "01234567":
        code = int(esc, 8)
    elif esc in _LINE_CONTINUATIONS:
        return ""
    else:
        return _SIMPLE_ESCAPES.get(esc, esc)
    if code > 0x10FFFF:
        return match.group(0)
    return chr(code)


def decode_string_literal(raw: str) -> str:
    """Cooked value of a string literal body (quotes already stripped)."""
    if "\\" not in raw:
        return raw
    return _ESCAPE_RX.sub(_unescape, raw)


def string_value(node: Node, program: ParsedProgram) -> str:
    """Value of a `string` node."""
    return decode_string_literal(program.text_of(node)[1:-1])


def template_raw(node: Node, program: ParsedProgram) -> Optional[str]:
    """
    Raw text of a `template_string` node with no substitutions.

    Returns None when the template interpolates anything.
    """
    if any(child.type == "template_substitution" for child in node.named_children):
        return None
    return program.text_of(node)[1:-1]
