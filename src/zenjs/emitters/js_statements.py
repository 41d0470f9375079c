"""
Statement half of the JavaScript emitter.

Each `emit_*` method here writes one terminated JavaScript statement (or a braced
block of them) into the current buffer. The scope stack decides how a binding is
spelled:

    count ::= 0          ->  let count = 0;
    count = count + 1    ->  count = (count + 1);     (count is mutable)
    total = 10           ->  const total = 10;        (first binding of total)
    total = 11           ->  ImmutableReassignment

Tail position: in a function body, a closure body, or a match arm whose value is
used, the trailing expression statement becomes a `return`.
"""

from collections.abc import Callable

from zenjs.emitters.js_buffer import EmissionBuffer
from zenjs.zenjs_ast import EXPRESSION_KINDS, ASTNode
from zenjs.zenjs_errors import ImmutableReassignment, UnsupportedConstruct
from zenjs.zenjs_scope import ScopeStack


class StatementEmitter:
    """Emits JavaScript statements from Zen AST nodes.

    Attributes used from the combined emitter:
        buffer (EmissionBuffer): Current output buffer.
        scopes (ScopeStack): Live scope stack.
    """

    buffer: EmissionBuffer
    scopes: ScopeStack
    emit_expr: Callable[[ASTNode], str]
    emit_match_statement: Callable[[ASTNode, bool], None]
    _visit: Callable[[ASTNode], None]

    def _emit_statements(self, stmts: list[ASTNode], tail: bool) -> None:
        for i, stmt in enumerate(stmts):
            if tail and i == len(stmts) - 1:
                self._emit_tail(stmt)
            else:
                self._visit(stmt)

    def _emit_tail(self, stmt: ASTNode) -> None:
        expr: ASTNode | None = None
        if stmt.kind == "expr_stmt" and len(stmt.children) == 1:
            expr = stmt.children[0]
        elif stmt.kind in EXPRESSION_KINDS:
            expr = stmt
        if expr is None:
            self._visit(stmt)
        elif expr.kind == "match":
            self.emit_match_statement(expr, True)
        else:
            self.buffer.line(f"return {self.emit_expr(expr)};")

    def _value_of(self, node: ASTNode) -> str:
        if len(node.children) != 1:
            raise UnsupportedConstruct(
                f"'{node.kind}' of '{node.value}' needs exactly one value", node
            )
        return self.emit_expr(node.children[0])

    def emit_block(self, node: ASTNode) -> None:
        """
        Emits a braced block under a fresh child scope.

        Parameters
        ----------
        node : ASTNode
            A block node whose children are statements.
        """
        self.buffer.line("{")
        with self.buffer.indented(), self.scopes.scope():
            self._emit_statements(node.children, tail=False)
        self.buffer.line("}")

    def emit_declare_mut(self, node: ASTNode) -> None:
        """
        Emits `name ::= expr`, a new mutable binding.

        A mutable name already declared in the same scope is reassigned instead,
        since JavaScript rejects a second `let` in one block.

        Raises
        ------
        ImmutableReassignment
            If the same scope already holds an immutable binding of the name.
        """
        name = str(node.value)
        local = self.scopes.lookup_local(name)
        if local is not None and not local.mutable:
            raise ImmutableReassignment(name, node)
        value = self._value_of(node)
        if local is not None:
            self.buffer.line(f"{name} = {value};")
            return
        self.scopes.declare(name, mutable=True)
        self.buffer.line(f"let {name} = {value};")

    def emit_assign(self, node: ASTNode) -> None:
        """
        Emits `name = expr`.

        The first binding of a name becomes a `const`; a later assignment to a
        mutable binding becomes a bare reassignment.

        Raises
        ------
        ImmutableReassignment
            If the nearest binding of the name is immutable.
        """
        name = str(node.value)
        binding = self.scopes.lookup(name)
        if binding is not None and not binding.mutable:
            raise ImmutableReassignment(name, node)
        value = self._value_of(node)
        if binding is not None:
            self.buffer.line(f"{name} = {value};")
            return
        self.scopes.declare(name, mutable=False)
        self.buffer.line(f"const {name} = {value};")

    def emit_return(self, node: ASTNode) -> None:
        if node.children:
            self.buffer.line(f"return {self.emit_expr(node.children[0])};")
        else:
            self.buffer.line("return;")

    def emit_loop(self, node: ASTNode) -> None:
        """
        Emits a `while` loop; a loop without a condition runs forever.

        Parameters
        ----------
        node : ASTNode
            A loop node with children `[condition, block]` or `[block]`.
        """
        if len(node.children) == 2:
            cond_node, body = node.children
            cond = self.emit_expr(cond_node)
            if cond_node.kind in ("binary", "unary"):
                cond = cond[1:-1]
        elif len(node.children) == 1:
            body = node.children[0]
            cond = "true"
        else:
            raise UnsupportedConstruct("Loop needs a body and at most one condition", node)
        if body.kind != "block":
            raise UnsupportedConstruct("Loop body must be a block", body)

        self.buffer.line(f"while ({cond}) {{")
        with self.buffer.indented(), self.scopes.scope():
            self._emit_statements(body.children, tail=False)
        self.buffer.line("}")

    def emit_break(self, node: ASTNode) -> None:
        self.buffer.line("break;")

    def emit_continue(self, node: ASTNode) -> None:
        self.buffer.line("continue;")

    def emit_raise(self, node: ASTNode) -> None:
        """Emits `raise expr` as `throw expr;`."""
        if len(node.children) != 1:
            raise UnsupportedConstruct("Raise needs exactly one value", node)
        self.buffer.line(f"throw {self.emit_expr(node.children[0])};")

    def emit_expr_stmt(self, node: ASTNode) -> None:
        """
        Emits an expression evaluated for its side effects.

        A match in this position is emitted as plain if/else statements.
        """
        if len(node.children) != 1:
            raise UnsupportedConstruct("Expression statement needs one expression", node)
        expr = node.children[0]
        if expr.kind == "match":
            self.emit_match_statement(expr, False)
        else:
            self.buffer.line(f"{self.emit_expr(expr)};")
