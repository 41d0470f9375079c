"""
Expression half of the JavaScript emitter.

Every `emit_expr_*` method returns a single JavaScript expression with no trailing
terminator. Binary and unary operations are always parenthesized so the result can be
embedded anywhere without precedence surprises.

The central algorithm here is match lowering. A Zen match

    done ? | true { "[x]" } | false { "[ ]" }

becomes an if/else chain over a temporary holding the subject, evaluated once:

    ((__match) => { if (__match === true) { return "[x]"; } else if (__match === false) { return "[ ]"; } })(done)

in expression position, and

    {
      const __match = done;
      if (__match === true) {
        ...
      } else if (__match === false) {
        ...
      }
    }

in statement position. No `else` is synthesized for the last arm.
"""

import json
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from zenjs.emitters.js_buffer import EmissionBuffer
from zenjs.emitters.js_interpolation import render_interpolation
from zenjs.zenjs_ast import STATEMENT_KINDS, ASTNode
from zenjs.zenjs_config import EmitterConfig
from zenjs.zenjs_errors import (
    UnknownIntrinsic,
    UnresolvedVariant,
    UnsupportedConstruct,
)
from zenjs.zenjs_scope import ScopeStack

BINARY_OPERATORS: dict[str, str] = {
    "+": "+",
    "-": "-",
    "*": "*",
    "/": "/",
    "%": "%",
    "==": "===",
    "!=": "!==",
    "<": "<",
    ">": ">",
    "<=": "<=",
    ">=": ">=",
    "&&": "&&",
    "||": "||",
    "&": "&",
    "|": "|",
    "^": "^",
    "<<": "<<",
    ">>": ">>",
}

UNARY_OPERATORS: dict[str, str] = {"!": "!", "-": "-"}

LITERAL_KINDS = frozenset({"int", "float", "bool", "string"})

# Callees that can be called without wrapping them in parentheses.
_DIRECT_CALLEES = frozenset({"identifier", "member", "index", "call", "namespaced_call"})

# Initializers that can be evaluated out of source order without changing behaviour.
_PURE_KINDS = LITERAL_KINDS | {"identifier"}


class ExpressionEmitter:
    """Emits JavaScript expressions from Zen AST nodes.

    Attributes used from the combined emitter:
        config (EmitterConfig): Emission settings.
        buffer (EmissionBuffer): Current output buffer.
        scopes (ScopeStack): Live scope stack.
        enums (dict[str, list[ASTNode]]): Enum name -> its `case` nodes.
        structs (dict[str, list[str]]): Struct name -> field names in order.
    """

    config: EmitterConfig
    buffer: EmissionBuffer
    scopes: ScopeStack
    enums: dict[str, list[ASTNode]]
    structs: dict[str, list[str]]
    emit_expr: Callable[[ASTNode], str]
    _emit_statements: Callable[[list[ASTNode], bool], None]
    _visit: Callable[[ASTNode], None]

    @contextmanager
    def capture(self) -> Iterator[EmissionBuffer]:
        """Redirects emitted lines into a scratch buffer for the duration of the block."""
        saved = self.buffer
        self.buffer = EmissionBuffer(self.config.indent)
        try:
            yield self.buffer
        finally:
            self.buffer = saved

    # Literals and names

    def emit_expr_int(self, node: ASTNode) -> str:
        return str(node.value)

    def emit_expr_float(self, node: ASTNode) -> str:
        return str(node.value)

    def emit_expr_bool(self, node: ASTNode) -> str:
        val = str(node.value).lower()
        if val not in ("true", "false"):
            raise UnsupportedConstruct(f"Unknown boolean literal: {node.value!r}", node)
        return val

    def emit_expr_string(self, node: ASTNode) -> str:
        return json.dumps(str(node.value if node.value is not None else ""), ensure_ascii=False)

    def emit_expr_interpolation(self, node: ASTNode) -> str:
        return render_interpolation(node, self.emit_expr)

    def emit_expr_identifier(self, node: ASTNode) -> str:
        if not isinstance(node.value, str) or not node.value:
            raise UnsupportedConstruct("Identifier without a name", node)
        return node.value

    # Operators

    def emit_expr_binary(self, node: ASTNode) -> str:
        op = BINARY_OPERATORS.get(str(node.value))
        if op is None:
            raise UnsupportedConstruct(f"Unknown binary operator {node.value!r}", node)
        if len(node.children) != 2:
            raise UnsupportedConstruct("Binary operation needs two operands", node)
        left = self.emit_expr(node.children[0])
        right = self.emit_expr(node.children[1])
        return f"({left} {op} {right})"

    def emit_expr_unary(self, node: ASTNode) -> str:
        op = UNARY_OPERATORS.get(str(node.value))
        if op is None:
            raise UnsupportedConstruct(f"Unknown unary operator {node.value!r}", node)
        if len(node.children) != 1:
            raise UnsupportedConstruct("Unary operation needs one operand", node)
        return f"({op}{self.emit_expr(node.children[0])})"

    # Calls and access

    def emit_expr_call(self, node: ASTNode) -> str:
        """
        Emits a call expression.

        A plain callee whose name has an intrinsic entry (e.g. `println`) is mapped
        through the table; anything else is called directly.

        Parameters
        ----------
        node : ASTNode
            A call node with the callee in `value` and arguments as children.

        Returns
        -------
        str
            The JavaScript call.
        """
        callee = node.value
        if not isinstance(callee, ASTNode):
            raise UnsupportedConstruct("Call without a callee node", node)
        args = [self.emit_expr(c) for c in node.children]
        intrinsics = self.config.intrinsics
        if callee.kind == "identifier" and callee.value in intrinsics:
            return intrinsics.render(str(callee.value), args)
        target = self.emit_expr(callee)
        if callee.kind not in _DIRECT_CALLEES:
            target = f"({target})"
        return f"{target}({', '.join(args)})"

    def emit_expr_namespaced_call(self, node: ASTNode) -> str:
        """
        Emits a namespaced runtime call such as `io.println(x)`.

        Parameters
        ----------
        node : ASTNode
            A node with the qualified name in `value` and arguments as children.

        Raises
        ------
        UnknownIntrinsic
            If the qualified name has no entry in the intrinsic table.
        """
        qualified = str(node.value)
        intrinsics = self.config.intrinsics
        if qualified not in intrinsics:
            raise UnknownIntrinsic(qualified, node)
        return intrinsics.render(qualified, [self.emit_expr(c) for c in node.children])

    def emit_expr_member(self, node: ASTNode) -> str:
        if len(node.children) != 1:
            raise UnsupportedConstruct("Member access needs one object", node)
        return f"{self.emit_expr(node.children[0])}.{node.value}"

    def emit_expr_index(self, node: ASTNode) -> str:
        if len(node.children) != 2:
            raise UnsupportedConstruct("Index access needs a collection and an index", node)
        base, index = (self.emit_expr(c) for c in node.children)
        return f"{base}[{index}]"

    def emit_expr_array(self, node: ASTNode) -> str:
        return f"[{', '.join(self.emit_expr(c) for c in node.children)}]"

    def emit_expr_struct_literal(self, node: ASTNode) -> str:
        """
        Emits a struct literal as a constructor call.

        Arguments follow the struct's declared field order when the struct is known,
        so `Point { y: 2, x: 1 }` still constructs `new Point(1, 2)`. Omitted fields
        pass `undefined`, which lets field defaults apply.

        Initializers are still evaluated in source order. When they are written out of
        field order and one of them may have side effects, they are passed to an arrow
        function that builds the instance:

            Point { y: tick(), x: 1 }  ->  ((__y, __x) => new Point(__x, __y))(tick(), 1)
        """
        name = str(node.value)
        inits: dict[str, ASTNode] = {}
        for child in node.children:
            if child.kind != "field_init" or len(child.children) != 1:
                raise UnsupportedConstruct(
                    f"Struct literal '{name}' expects field initializers", child
                )
            inits[str(child.value)] = child.children[0]

        fields = self.structs.get(name)
        if fields is None:
            return f"new {name}({', '.join(self.emit_expr(e) for e in inits.values())})"
        unknown = [f for f in inits if f not in fields]
        if unknown:
            raise UnsupportedConstruct(
                f"Struct '{name}' has no field(s) {', '.join(unknown)}", node
            )

        source = {f: self.emit_expr(expr) for f, expr in inits.items()}
        written = list(inits)
        in_order = written == [f for f in fields if f in inits]
        if in_order or all(e.kind in _PURE_KINDS for e in inits.values()):
            return f"new {name}({', '.join(self._field_args(fields, source))})"

        # Prefixed so a field named after the struct cannot shadow the class.
        params = [f"__{f}" for f in written]
        renamed = {f: p for f, p in zip(written, params)}
        args = ", ".join(self._field_args(fields, renamed))
        values = ", ".join(source[f] for f in written)
        return f"(({', '.join(params)}) => new {name}({args}))({values})"

    @staticmethod
    def _field_args(fields: list[str], values: dict[str, str]) -> list[str]:
        args = [values.get(f, "undefined") for f in fields]
        while args and args[-1] == "undefined":
            args.pop()
        return args

    def emit_expr_variant(self, node: ASTNode) -> str:
        enum_name, case = self._resolve_variant(node)
        ref = f"{enum_name}.{case.value}"
        if case.type is None:
            if node.children:
                raise UnresolvedVariant(
                    f"Case '{ref}' carries no payload but one was given", node
                )
            return ref
        if len(node.children) > 1:
            raise UnsupportedConstruct(f"Case '{ref}' takes a single payload", node)
        if not node.children:
            return ref
        return f"{ref}({self.emit_expr(node.children[0])})"

    def _resolve_variant(self, node: ASTNode) -> tuple[str, ASTNode]:
        """Finds the enum and `case` node a variant or variant pattern refers to.

        Raises:
            UnresolvedVariant: If the named enum is unknown, the case is not one of its
                cases, or (without an explicit enum) zero or several enums declare it.
        """
        name = str(node.value)
        if node.type:
            cases = self.enums.get(node.type)
            if cases is None:
                raise UnresolvedVariant(f"Unknown enum '{node.type}'", node)
            for case in cases:
                if case.value == name:
                    return node.type, case
            raise UnresolvedVariant(f"Enum '{node.type}' has no case '{name}'", node)

        found = [
            (enum_name, case)
            for enum_name, cases in self.enums.items()
            for case in cases
            if case.value == name
        ]
        if not found:
            raise UnresolvedVariant(f"Case '.{name}' matches no declared enum", node)
        if len(found) > 1:
            owners = ", ".join(enum_name for enum_name, _ in found)
            raise UnresolvedVariant(f"Case '.{name}' is ambiguous between {owners}", node)
        return found[0]

    # Functions and blocks as values

    def emit_expr_closure(self, node: ASTNode) -> str:
        if not node.children:
            raise UnsupportedConstruct("Closure without a body", node)
        *params, body = node.children
        names = self._param_names(params)
        signature = f"({', '.join(names)}) =>"
        with self.scopes.scope():
            for name in names:
                self.scopes.declare(name, mutable=False)
            if body.kind != "block":
                return f"{signature} {self.emit_expr(body)}"
            with self.capture() as buf:
                self._emit_statements(body.children, True)
        inner = buf.render_inline()
        return f"{signature} {{ {inner} }}" if inner else f"{signature} {{}}"

    def emit_expr_block(self, node: ASTNode) -> str:
        with self.scopes.scope(), self.capture() as buf:
            self._emit_statements(node.children, True)
        inner = buf.render_inline()
        return f"(() => {{ {inner} }})()" if inner else "(() => {})()"

    def _param_names(self, params: list[ASTNode]) -> list[str]:
        names = []
        for param in params:
            if param.kind != "param" or not isinstance(param.value, str):
                raise UnsupportedConstruct(f"Expected parameter, got '{param.kind}'", param)
            names.append(param.value)
        return names

    # Match lowering

    def emit_expr_match(self, node: ASTNode) -> str:
        """
        Emits a match used as a value.

        The arms run inside an arrow function that receives the subject as its only
        argument, so the subject is evaluated exactly once. Arm bodies are in tail
        position: their trailing expression becomes the function's return value.

        Parameters
        ----------
        node : ASTNode
            A match node with the subject in `value` and `arm` children.

        Returns
        -------
        str
            A single-line immediately-invoked arrow function.
        """
        subject = self._match_subject(node)
        temp = self.config.match_temp
        with self.capture() as buf:
            self._emit_match_chain(node, tail=True)
        inner = buf.render_inline()
        body = f"{{ {inner} }}" if inner else "{}"
        return f"(({temp}) => {body})({subject})"

    def emit_match_statement(self, node: ASTNode, tail: bool) -> None:
        """
        Emits a match whose value is discarded, directly as statements.

        The subject is bound once to a block-scoped constant; the surrounding bare
        block keeps consecutive matches from colliding on the temporary's name.
        With `tail`, arms' trailing expressions are returned from the enclosing
        function.
        """
        subject = self._match_subject(node)
        self.buffer.line("{")
        with self.buffer.indented():
            self.buffer.line(f"const {self.config.match_temp} = {subject};")
            self._emit_match_chain(node, tail)
        self.buffer.line("}")

    def _match_subject(self, node: ASTNode) -> str:
        if not isinstance(node.value, ASTNode):
            raise UnsupportedConstruct("Match without a subject expression", node)
        return self.emit_expr(node.value)

    def _emit_match_chain(self, node: ASTNode, tail: bool) -> None:
        for i, arm in enumerate(node.children):
            if arm.kind != "arm" or len(arm.children) != 2:
                raise UnsupportedConstruct("Match arms need a pattern and a body", arm)
            pattern, body = arm.children
            with self.scopes.scope():
                test, bindings = self._pattern_test(pattern)
                for name, _ in bindings:
                    self.scopes.declare(name, mutable=False)
                if isinstance(arm.value, ASTNode):
                    test = f"{test} && {self._guard(arm.value, bindings)}"
                opener = "if" if i == 0 else "} else if"
                self.buffer.line(f"{opener} ({test}) {{")
                with self.buffer.indented():
                    for name, source in bindings:
                        self.buffer.line(f"const {name} = {source};")
                    if body.kind == "block":
                        self._emit_statements(body.children, tail)
                    elif body.kind in STATEMENT_KINDS:
                        self._visit(body)
                    elif tail:
                        self.buffer.line(f"return {self.emit_expr(body)};")
                    else:
                        self.buffer.line(f"{self.emit_expr(body)};")
        if node.children:
            self.buffer.line("}")

    def _guard(self, guard: ASTNode, bindings: list[tuple[str, str]]) -> str:
        """Renders an arm guard; guards see pattern bindings through an arrow function."""
        cond = self.emit_expr(guard)
        if not bindings:
            return cond if guard.kind in ("binary", "unary") else f"({cond})"
        names = ", ".join(name for name, _ in bindings)
        sources = ", ".join(source for _, source in bindings)
        return f"(({names}) => {cond})({sources})"

    def _pattern_test(self, pattern: ASTNode) -> tuple[str, list[tuple[str, str]]]:
        """Returns the arm's test on the match temporary and the names it binds."""
        temp = self.config.match_temp
        kind = pattern.kind
        if kind in LITERAL_KINDS:
            return f"{temp} === {self.emit_expr(pattern)}", []
        if kind == "wildcard":
            return "true", []
        if kind == "binding":
            return "true", [(str(pattern.value), temp)]
        if kind == "variant_pattern":
            enum_name, case = self._resolve_variant(pattern)
            if case.type is None:
                if pattern.children:
                    raise UnresolvedVariant(
                        f"Case '{enum_name}.{case.value}' carries no payload to bind",
                        pattern,
                    )
                return f"{temp} === {enum_name}.{case.value}", []
            test = f"{temp}.tag === {json.dumps(str(case.value))}"
            if not pattern.children:
                return test, []
            inner = pattern.children[0]
            if inner.kind == "wildcard":
                return test, []
            if inner.kind != "binding":
                raise UnsupportedConstruct(
                    f"Payload patterns support bindings only, got '{inner.kind}'", inner
                )
            return test, [(str(inner.value), f"{temp}.value")]
        if kind == "or_pattern":
            if len(pattern.children) < 2:
                raise UnsupportedConstruct("Or-pattern needs two or more alternatives", pattern)
            tests = []
            for alternative in pattern.children:
                test, bindings = self._pattern_test(alternative)
                if bindings:
                    raise UnsupportedConstruct(
                        "Or-pattern alternatives cannot bind names", alternative
                    )
                tests.append(test)
            return f"({' || '.join(tests)})", []
        if kind == "range_pattern":
            # value is ".." (exclusive end) or "..=" (inclusive end)
            if len(pattern.children) != 2 or pattern.value not in ("..", "..="):
                raise UnsupportedConstruct(
                    "Range pattern needs a start, an end and '..' or '..='", pattern
                )
            low, high = (self.emit_expr(c) for c in pattern.children)
            upper = "<=" if pattern.value == "..=" else "<"
            return f"({temp} >= {low} && {temp} {upper} {high})", []
        raise UnsupportedConstruct(f"'{kind}' is not a valid match pattern", pattern)
