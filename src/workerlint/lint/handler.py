"""
Tree traversal with per-node-type callbacks.
"""

from workerlint.lint.context import Context
from workerlint.parser.parser import ParsedProgram
from workerlint.parser.scope import TYPE_ONLY_NODES
from workerlint.parser.view import MEMBER_EXPRESSION_TYPES, MemberExpr


class Handler:
    """
    Walks a program's named nodes in document order (pre-order) and calls
    `visit_<node_type>(node, ctx)` for every method a subclass defines.

    Member accesses (`a.b`, `a.#b`, `a[b]`) are delivered once each as a
    MemberExpr view through `visit_member_expr(expr, ctx)`.
    """

    def traverse(self, program: ParsedProgram, ctx: Context) -> None:
        stack = [program.root]
        while stack:
            node = stack.pop()
            if node.type in TYPE_ONLY_NODES:
                continue
            self.on_node(node, ctx)
            stack.extend(reversed(node.named_children))

    def on_node(self, node, ctx: Context) -> None:
        if node.type in MEMBER_EXPRESSION_TYPES:
            self.visit_member_expr(MemberExpr.from_node(node, ctx.program), ctx)
            return
        callback = getattr(self, f"visit_{node.type}", None)
        if callback is not None:
            callback(node, ctx)

    def visit_member_expr(self, expr: MemberExpr, ctx: Context) -> None:
        pass
