"""
Translates Zen AST nodes into JavaScript.

This module defines `JavaScriptEmitter`, the backend used by the `Transpiler`. The
emitter is assembled from three halves, each in its own module:

    - DeclarationEmitter (js_declarations): program, functions, types, constants, exports
    - StatementEmitter (js_statements): bindings, return, loops, throw, expression statements
    - ExpressionEmitter (js_expressions): literals, operators, calls, match lowering

and owns the per-pass state they share: the output buffer, the scope stack, and the
registry of declared enums and structs.

Dispatch is closed: `DISPATCH` maps every kind in `NODE_KINDS` to a handler, and any
other kind raises `UnsupportedConstruct` rather than being skipped.

Raises:
    - `UnsupportedConstruct`: unknown node kinds, or structural kinds used on their own.
    - `ImmutableReassignment`, `UnknownIntrinsic`, `MalformedInterpolation`,
      `UnresolvedVariant`: from the respective emitters.
"""

from zenjs.emitters.js_buffer import EmissionBuffer
from zenjs.emitters.js_declarations import DeclarationEmitter
from zenjs.emitters.js_expressions import ExpressionEmitter
from zenjs.emitters.js_statements import StatementEmitter
from zenjs.zenjs_ast import EXPRESSION_KINDS, ASTNode
from zenjs.zenjs_config import EmitterConfig
from zenjs.zenjs_errors import UnsupportedConstruct
from zenjs.zenjs_scope import ScopeStack

STRUCTURAL_KINDS = frozenset(
    {
        "param",
        "field",
        "case",
        "arm",
        "field_init",
        "variant_pattern",
        "binding",
        "wildcard",
        "or_pattern",
        "range_pattern",
    }
)
"""Kinds emitted only as part of their parent node."""

DISPATCH: dict[str, str] = {
    "program": "emit_program",
    "func": "emit_func",
    "struct": "emit_struct",
    "enum": "emit_enum",
    "const": "emit_const",
    "import": "emit_import",
    "export": "emit_export",
    "block": "emit_block",
    "declare_mut": "emit_declare_mut",
    "assign": "emit_assign",
    "return": "emit_return",
    "loop": "emit_loop",
    "break": "emit_break",
    "continue": "emit_continue",
    "raise": "emit_raise",
    "expr_stmt": "emit_expr_stmt",
    **{kind: f"emit_expr_{kind}" for kind in EXPRESSION_KINDS - STRUCTURAL_KINDS},
    **{kind: "emit_fragment" for kind in STRUCTURAL_KINDS},
}
"""Node kind -> handler method name. Covers exactly `NODE_KINDS`."""


class JavaScriptEmitter(DeclarationEmitter, StatementEmitter, ExpressionEmitter):
    """Emits JavaScript code from Zen AST nodes.

    One instance performs one emission pass; the `Transpiler` creates a fresh
    instance per call so that passes never share scopes or buffers.

    Attributes:
        config (EmitterConfig): Emission settings.
        buffer (EmissionBuffer): Accumulated output lines.
        scopes (ScopeStack): Declared identifiers and their mutability.
        enums (dict[str, list[ASTNode]]): Declared enums and their cases.
        structs (dict[str, list[str]]): Declared structs and their field order.

    Methods:
        emit(node): Emits any node and returns its JavaScript text.
        emit_expr(node): Emits an expression node.
        get_output(): Returns everything emitted so far.
    """

    def __init__(self, config: EmitterConfig | None = None) -> None:
        self.config = config or EmitterConfig()
        self.buffer = EmissionBuffer(self.config.indent)
        self.scopes = ScopeStack()
        self.enums: dict[str, list[ASTNode]] = {}
        self.structs: dict[str, list[str]] = {}

    def get_output(self) -> str:
        return self.buffer.get_output()

    def _handler(self, node: ASTNode) -> str:
        if not isinstance(node, ASTNode):
            raise UnsupportedConstruct(f"Expected ASTNode, got {type(node).__name__}")
        method = DISPATCH.get(node.kind)
        if method is None:
            raise UnsupportedConstruct(f"Unknown node kind '{node.kind}'", node)
        return method

    def emit(self, node: ASTNode) -> str:
        """
        Emits any node and returns its JavaScript text.

        Programs return the complete program; declarations and statements return
        their lines; expressions return the expression text.

        Parameters
        ----------
        node : ASTNode
            The node to emit.

        Returns
        -------
        str
            The emitted JavaScript.

        Raises
        ------
        UnsupportedConstruct
            If the node kind is unknown or only valid inside a parent node.
        """
        self._handler(node)
        if node.kind == "program":
            return self.emit_program(node)
        if node.kind in EXPRESSION_KINDS:
            return self.emit_expr(node)
        with self.capture() as buf:
            self._visit(node)
        return buf.get_output()

    def emit_expr(self, node: ASTNode) -> str:
        """
        Dispatches expression emission based on node kind.

        A `block` in expression position becomes an immediately-invoked arrow
        function returning its trailing expression.

        Raises
        ------
        UnsupportedConstruct
            If the node is not an expression.
        """
        method = self._handler(node)
        if node.kind == "block":
            return self.emit_expr_block(node)
        if node.kind not in EXPRESSION_KINDS:
            raise UnsupportedConstruct(f"'{node.kind}' is not an expression", node)
        return str(getattr(self, method)(node))

    def _visit(self, node: ASTNode) -> None:
        """
        Dispatches a declaration or statement node into the current buffer.

        A bare expression in statement position is emitted as an expression statement.
        """
        method = self._handler(node)
        if node.kind == "program":
            raise UnsupportedConstruct("Programs cannot be nested", node)
        if node.kind in EXPRESSION_KINDS:
            wrapper = ASTNode("expr_stmt", children=[node], line=node.line, col=node.col)
            self.emit_expr_stmt(wrapper)
            return
        getattr(self, method)(node)

    def emit_fragment(self, node: ASTNode) -> str:
        raise UnsupportedConstruct(
            f"'{node.kind}' is only valid inside its enclosing construct", node
        )
