"""
Lexical Scope Analysis

Builds a table of scopes and the names declared in each for one parsed
program, then answers whether an identifier reference resolves to one of
those declarations or falls through to the global object.

Handles:
- var hoisting to the nearest function/module scope
- let/const/class/function declarations in block scope
- parameters (defaults, destructuring, rest), catch bindings
- names of function and class expressions (visible only inside them)
- for / for-in / for-of heads
- imports (default, named, namespace, `import x = require()`)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from tree_sitter import Node

from workerlint.parser.parser import ParsedProgram
from workerlint.parser.view import node_key

logger = logging.getLogger(__name__)


FUNCTION_SCOPES = frozenset({
    "function_declaration",
    "function_expression",
    "function",                     # older tree-sitter-javascript name
    "generator_function_declaration",
    "generator_function",
    "arrow_function",
    "method_definition",
    "class_static_block",
})

CLASS_SCOPES = frozenset({"class", "class_declaration", "abstract_class_declaration"})

BLOCK_SCOPES = frozenset({
    "statement_block",
    "for_statement",
    "for_in_statement",
    "catch_clause",
    "switch_body",
})

# TypeScript subtrees that hold only types; no runtime bindings or references.
TYPE_ONLY_NODES = frozenset({
    "type_annotation",
    "type_alias_declaration",
    "interface_declaration",
    "type_arguments",
    "type_parameters",
    "type_query",
    "asserts_annotation",
    "type_predicate_annotation",
    "omitting_type_annotation",
    "opting_type_annotation",
})


@dataclass
class Scope:
    """One lexical scope."""
    kind: str                       # "module", "function", "class", "block"
    node: Node
    parent: Optional["Scope"] = None
    bindings: Dict[str, str] = field(default_factory=dict)   # name -> declaration kind

    def declare(self, name: str, kind: str) -> None:
        self.bindings.setdefault(name, kind)

    def hoist_target(self) -> "Scope":
        """Nearest enclosing scope that receives `var` declarations."""
        scope = self
        while scope.kind not in ("function", "module") and scope.parent is not None:
            scope = scope.parent
        return scope

    def lookup(self, name: str) -> Optional["Scope"]:
        """Find the scope that declares `name`, walking outwards."""
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope.bindings:
                return scope
            scope = scope.parent
        return None


class ScopeTable:
    """
    Scopes of a program, keyed by the node that opens each one.

    Usage:
        table = ScopeTable.build(program)
        table.is_global(identifier_node)
    """

    def __init__(self, program: ParsedProgram):
        self.program = program
        self.module = Scope(kind="module", node=program.root)
        self._scopes: Dict[tuple, Scope] = {node_key(program.root): self.module}

    @classmethod
    def build(cls, program: ParsedProgram) -> "ScopeTable":
        table = cls(program)
        table._collect()
        logger.debug("%s: %d scopes", program.filename, len(table._scopes))
        return table

    @property
    def scopes(self) -> List[Scope]:
        return list(self._scopes.values())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def scope_of(self, node: Node) -> Scope:
        """Innermost scope containing a node."""
        current = node.parent
        while current is not None:
            scope = self._scopes.get(node_key(current))
            if scope is not None:
                return scope
            current = current.parent
        return self.module

    def resolve(self, identifier: Node) -> Optional[Scope]:
        """Scope declaring the identifier's name, or None if undeclared."""
        return self.scope_of(identifier).lookup(self.program.text_of(identifier))

    def is_global(self, identifier: Node) -> bool:
        """True if the identifier refers to a global (undeclared) binding."""
        return self.resolve(identifier) is None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _collect(self) -> None:
        stack = [(child, self.module) for child in reversed(self.program.root.named_children)]
        while stack:
            node, scope = stack.pop()
            if node.type in TYPE_ONLY_NODES:
                continue

            self._declare_in_enclosing(node, scope)
            inner = self._open_scope(node, scope)
            self._declare_in_own(node, inner)

            stack.extend((child, inner) for child in reversed(node.named_children))

    def _open_scope(self, node: Node, scope: Scope) -> Scope:
        if node.type in FUNCTION_SCOPES:
            kind = "function"
        elif node.type in CLASS_SCOPES:
            kind = "class"
        elif node.type in BLOCK_SCOPES:
            # a function body shares the function's scope with its parameters
            if node.type == "statement_block" and node.parent is not None \
                    and node.parent.type in FUNCTION_SCOPES:
                return scope
            kind = "block"
        else:
            return scope
        new_scope = Scope(kind=kind, node=node, parent=scope)
        self._scopes[node_key(node)] = new_scope
        return new_scope

    def _declare_in_enclosing(self, node: Node, scope: Scope) -> None:
        """Declarations that bind in the scope the node appears in."""
        t = node.type
        if t == "variable_declaration":
            target = scope.hoist_target()
            for name in self._declarator_names(node):
                target.declare(name, "var")
        elif t == "lexical_declaration":
            kind_node = node.child_by_field_name("kind")
            kind = self.program.text_of(kind_node) if kind_node is not None else "let"
            for name in self._declarator_names(node):
                scope.declare(name, kind)
        elif t in ("function_declaration", "generator_function_declaration"):
            self._declare_name_field(node, scope, "function")
        elif t in ("class_declaration", "abstract_class_declaration"):
            self._declare_name_field(node, scope, "class")
        elif t == "import_statement":
            for name in self._import_names(node):
                self.module.declare(name, "import")
        elif t in ("enum_declaration", "internal_module", "module"):
            self._declare_name_field(node, scope, "namespace")

    def _declare_in_own(self, node: Node, scope: Scope) -> None:
        """Declarations that bind inside the scope the node opens."""
        t = node.type
        if t in ("function_expression", "function", "generator_function", "class"):
            self._declare_name_field(node, scope, "self")
        elif t == "arrow_function":
            param = node.child_by_field_name("parameter")
            if param is not None:
                scope.declare(self.program.text_of(param), "param")
        elif t == "formal_parameters":
            if node.parent is not None and node.parent.type in FUNCTION_SCOPES:
                for child in node.named_children:
                    for name in self._pattern_names(child):
                        scope.declare(name, "param")
        elif t == "catch_clause":
            param = node.child_by_field_name("parameter")
            if param is not None:
                for name in self._pattern_names(param):
                    scope.declare(name, "catch")
        elif t == "for_in_statement":
            self._declare_for_in_head(node, scope)

    def _declare_for_in_head(self, node: Node, scope: Scope) -> None:
        kind_node = node.child_by_field_name("kind")
        left = node.child_by_field_name("left")
        if kind_node is None or left is None:
            return
        kind = self.program.text_of(kind_node)
        target = scope.hoist_target() if kind == "var" else scope
        for name in self._pattern_names(left):
            target.declare(name, kind)

    def _declare_name_field(self, node: Node, scope: Scope, kind: str) -> None:
        name = node.child_by_field_name("name")
        if name is not None and name.type in ("identifier", "type_identifier"):
            scope.declare(self.program.text_of(name), kind)

    def _declarator_names(self, declaration: Node) -> Iterator[str]:
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            if name is not None:
                yield from self._pattern_names(name)

    def _pattern_names(self, node: Node) -> Iterator[str]:
        """Names bound by a binding pattern."""
        t = node.type
        if t in ("identifier", "shorthand_property_identifier_pattern"):
            yield self.program.text_of(node)
        elif t in ("object_pattern", "array_pattern", "rest_pattern"):
            for child in node.named_children:
                yield from self._pattern_names(child)
        elif t == "pair_pattern":
            value = node.child_by_field_name("value")
            if value is not None:
                yield from self._pattern_names(value)
        elif t in ("assignment_pattern", "object_assignment_pattern"):
            left = node.child_by_field_name("left")
            if left is not None:
                yield from self._pattern_names(left)
        elif t in ("required_parameter", "optional_parameter"):
            pattern = node.child_by_field_name("pattern")
            if pattern is not None:
                yield from self._pattern_names(pattern)

    def _import_names(self, statement: Node) -> Iterator[str]:
        for clause in statement.named_children:
            if clause.type not in ("import_clause", "import_require_clause"):
                continue
            for child in clause.named_children:
                if child.type == "identifier":
                    yield self.program.text_of(child)
                elif child.type == "namespace_import":
                    for ident in child.named_children:
                        if ident.type == "identifier":
                            yield self.program.text_of(ident)
                elif child.type == "named_imports":
                    for spec in child.named_children:
                        if spec.type != "import_specifier":
                            continue
                        local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                        if local is not None and local.type == "identifier":
                            yield self.program.text_of(local)
