"""
Declaration half of the JavaScript emitter: programs, functions, structs, enums,
constants and exports.

    Point: { x: f64, y: f64 }          class Point {
                                         constructor(x, y) {
                                           this.x = x;
                                           this.y = y;
                                         }
                                       }

    Priority: Low, High                const Priority = Object.freeze({
                                         Low: Object.freeze({ tag: "Low" }),
                                         High: Object.freeze({ tag: "High" }),
                                       });

A program ends with a call to its entry function when one is declared.
"""

import json
import logging
from collections.abc import Callable

from zenjs.emitters.js_buffer import EmissionBuffer
from zenjs.zenjs_ast import ASTNode
from zenjs.zenjs_config import EmitterConfig
from zenjs.zenjs_errors import UnsupportedConstruct
from zenjs.zenjs_scope import ScopeStack

logger = logging.getLogger(__name__)

_JSDOC_TYPES: dict[str, str] = {
    **{
        t: "number"
        for t in (
            "i8", "i16", "i32", "i64", "u8", "u16", "u32", "u64",
            "usize", "f32", "f64", "int", "float",
        )
    },
    "bool": "boolean",
    "String": "string",
    "string": "string",
    "StaticString": "string",
    "void": "void",
}

_TOP_LEVEL_DECLARATIONS = ("func", "struct", "enum")

_TOP_LEVEL_NAMES = (*_TOP_LEVEL_DECLARATIONS, "const")


def jsdoc_type(annotation: str) -> str:
    """Maps a Zen type annotation to a JSDoc type expression.

    Slices (`[T]`) become `Array<T>`; unknown names (structs, enums) pass through.
    """
    annotation = annotation.strip()
    if annotation.startswith("[") and annotation.endswith("]"):
        return f"Array<{jsdoc_type(annotation[1:-1])}>"
    return _JSDOC_TYPES.get(annotation, annotation)


class DeclarationEmitter:
    """Emits top-level Zen declarations as JavaScript.

    Attributes used from the combined emitter:
        config (EmitterConfig): Emission settings (entry point, JSDoc).
        buffer (EmissionBuffer): Current output buffer.
        scopes (ScopeStack): Live scope stack.
        enums (dict[str, list[ASTNode]]): Filled by `register_declarations`.
        structs (dict[str, list[str]]): Filled by `register_declarations`.
    """

    config: EmitterConfig
    buffer: EmissionBuffer
    scopes: ScopeStack
    enums: dict[str, list[ASTNode]]
    structs: dict[str, list[str]]
    emit_expr: Callable[[ASTNode], str]
    _emit_statements: Callable[[list[ASTNode], bool], None]
    _visit: Callable[[ASTNode], None]
    _param_names: Callable[[list[ASTNode]], list[str]]

    def register_declarations(self, nodes: list[ASTNode]) -> None:
        """
        Records enums, structs and top-level names before any code is emitted.

        Function bodies may refer to enums and structs declared later in the file,
        so match patterns and struct literals are resolved against this registry.
        Declared names are bound immutably in the root scope.

        Parameters
        ----------
        nodes : list[ASTNode]
            The program's top-level nodes.
        """
        for node in nodes:
            if node.kind not in _TOP_LEVEL_NAMES:
                continue
            name = str(node.value)
            if node.kind == "enum":
                self.enums[name] = list(node.children)
            elif node.kind == "struct":
                self.structs[name] = [str(f.value) for f in node.children]
            self.scopes.declare(name, mutable=False)

    def emit_program(self, node: ASTNode) -> str:
        """
        Emits a whole program and returns the JavaScript text.

        Top-level items are emitted in source order, declarations separated by a
        blank line, followed by the entry point call when the entry function exists.

        Parameters
        ----------
        node : ASTNode
            The program node.

        Returns
        -------
        str
            The complete JavaScript program.
        """
        items = node.children
        logger.debug("Emitting program with %d top-level item(s)", len(items))
        self.register_declarations(items)

        previous: ASTNode | None = None
        for item in items:
            if item.kind == "program":
                raise UnsupportedConstruct("Programs cannot be nested", item)
            if previous is not None and (
                item.kind in _TOP_LEVEL_DECLARATIONS
                or previous.kind in _TOP_LEVEL_DECLARATIONS
            ):
                self.buffer.blank()
            self._visit(item)
            previous = item

        entry = self.config.entry_point
        if any(i.kind == "func" and i.value == entry for i in items):
            logger.debug("Invoking entry point %s()", entry)
            self.buffer.blank()
            self.buffer.line("// Entry point")
            self.buffer.line(f"{entry}();")
        return self.buffer.get_output()

    def emit_func(self, node: ASTNode) -> None:
        """
        Emits a function declaration.

        Parameters are bound immutably in the body's scope. The body's trailing
        expression statement is returned.

        Parameters
        ----------
        node : ASTNode
            The function node: name in `value`, `param` children, then a `block` body.
        """
        if not node.children or node.children[-1].kind != "block":
            raise UnsupportedConstruct(f"Function '{node.value}' needs a block body", node)
        *params, body = node.children
        names = self._param_names(params)
        logger.debug("Emitting function %s(%s)", node.value, ", ".join(names))

        if self.config.jsdoc:
            self._emit_jsdoc(params, node.return_type)
        self.buffer.line(f"function {node.value}({', '.join(names)}) {{")
        with self.buffer.indented(), self.scopes.scope():
            for name in names:
                self.scopes.declare(name, mutable=False)
            self._emit_statements(body.children, True)
        self.buffer.line("}")

    def _emit_jsdoc(self, params: list[ASTNode], return_type: str | None) -> None:
        returns = jsdoc_type(return_type) if return_type else "void"
        if not params and returns == "void":
            return
        self.buffer.line("/**")
        for param in params:
            self.buffer.line(f" * @param {{{jsdoc_type(param.type or '*')}}} {param.value}")
        if returns != "void":
            self.buffer.line(f" * @returns {{{returns}}}")
        self.buffer.line(" */")

    def emit_struct(self, node: ASTNode) -> None:
        """
        Emits a struct as a class whose constructor takes the fields in order.

        Parameters
        ----------
        node : ASTNode
            The struct node: name in `value`, `field` children (optional default child).
        """
        fields = node.children
        for field in fields:
            if field.kind != "field" or len(field.children) > 1:
                raise UnsupportedConstruct(
                    f"Struct '{node.value}' expects field declarations", field
                )
        logger.debug("Emitting struct %s with %d field(s)", node.value, len(fields))

        self.buffer.line(f"class {node.value} {{")
        with self.buffer.indented():
            if fields:
                names = ", ".join(str(f.value) for f in fields)
                self.buffer.line(f"constructor({names}) {{")
                with self.buffer.indented():
                    for field in fields:
                        assigned = str(field.value)
                        if field.children:
                            assigned += f" ?? {self.emit_expr(field.children[0])}"
                        self.buffer.line(f"this.{field.value} = {assigned};")
                self.buffer.line("}")
        self.buffer.line("}")

    def emit_enum(self, node: ASTNode) -> None:
        """
        Emits an enum as a frozen record with one property per case, in source order.

        Bare cases hold a frozen `{ tag }` sentinel; payload cases hold a constructor
        producing a frozen `{ tag, value }`.

        Parameters
        ----------
        node : ASTNode
            The enum node: name in `value`, `case` children.
        """
        logger.debug("Emitting enum %s with %d case(s)", node.value, len(node.children))
        self.buffer.line(f"const {node.value} = Object.freeze({{")
        with self.buffer.indented():
            for case in node.children:
                if case.kind != "case":
                    raise UnsupportedConstruct(
                        f"Enum '{node.value}' expects case declarations", case
                    )
                tag = json.dumps(str(case.value))
                if case.type is None:
                    self.buffer.line(f"{case.value}: Object.freeze({{ tag: {tag} }}),")
                else:
                    self.buffer.line(
                        f"{case.value}: (value) => Object.freeze({{ tag: {tag}, value }}),"
                    )
        self.buffer.line("});")

    def emit_import(self, node: ASTNode) -> None:
        module = node.children[0].value if node.children else node.value
        self.buffer.line(f"// import {node.value} from {json.dumps(str(module))};")

    def emit_const(self, node: ASTNode) -> None:
        """
        Emits a top-level constant as `const NAME = value;`.

        The name is bound immutably by `register_declarations`, so functions may
        read it but never reassign it.

        Raises
        ------
        UnsupportedConstruct
            If the constant is nested inside a function or block, or has no value.
        """
        if len(self.scopes) > 1:
            raise UnsupportedConstruct(
                f"Constant '{node.value}' must be declared at the top level", node
            )
        if len(node.children) != 1:
            raise UnsupportedConstruct(f"Constant '{node.value}' needs one value", node)
        if self.scopes.lookup_local(str(node.value)) is None:
            self.scopes.declare(str(node.value), mutable=False)
        self.buffer.line(f"const {node.value} = {self.emit_expr(node.children[0])};")

    def emit_export(self, node: ASTNode) -> None:
        """Emits `export { a, b };` for names declared at the top level of the program."""
        names = [str(child.value) for child in node.children]
        if not names:
            raise UnsupportedConstruct("Export lists no names", node)
        missing = [name for name in names if self.scopes.lookup(name) is None]
        if missing:
            raise UnsupportedConstruct(
                f"Cannot export undeclared name(s) {', '.join(missing)}", node
            )
        self.buffer.line(f"export {{ {', '.join(names)} }};")
